from datetime import datetime, timezone

from conftest import make_objective, make_task
from core.local_store import LocalStore
from core.models import Metric, MetricEntry, TaskStatus


def test_objectives_and_tasks_survive_reload(tmp_path):
    path = tmp_path / "local_store.json"
    store = LocalStore(path=path)
    objective = make_objective(
        "o1",
        "Fitness",
        pillars=(("p1", "Strength"),),
        metrics=(("m1", "Weight", "p1"),),
        rituals=(("r1", "Gym", "p1"),),
    )
    objective.metrics[0].history.append(
        MetricEntry(value=81.5, recorded_at=datetime(2026, 10, 18, 7, tzinfo=timezone.utc))
    )
    store.add_objective(objective)
    store.add_tasks([make_task("t1", "o1", status=TaskStatus.SKIPPED)])

    reloaded = LocalStore(path=path)

    restored = reloaded.get_objective("o1")
    assert restored.name == "Fitness"
    assert restored.pillars[0].name == "Strength"
    assert restored.metrics[0].pillar_id == "p1"
    assert restored.metrics[0].history[0].value == 81.5
    assert restored.rituals[0].name == "Gym"
    assert restored.timeframe.daily_commitment_minutes == 45
    assert reloaded.get_task("t1").status == TaskStatus.SKIPPED


def test_corrupt_file_starts_empty(tmp_path):
    path = tmp_path / "local_store.json"
    path.write_text("{ definitely not json", encoding="utf-8")

    store = LocalStore(path=path)

    assert store.objectives == []
    assert store.tasks == []


def test_unknown_enum_values_fall_back_to_defaults(tmp_path):
    path = tmp_path / "local_store.json"
    path.write_text(
        '{"objectives": [], "tasks": [{"id": "t", "objective_id": "o", "title": "x",'
        ' "scheduled_at": "2026-10-19T09:00:00", "status": "archived"}]}',
        encoding="utf-8",
    )

    store = LocalStore(path=path)

    assert store.get_task("t").status == TaskStatus.PENDING


def test_rebind_task_id_moves_the_task(tmp_path):
    path = tmp_path / "local_store.json"
    store = LocalStore(path=path)
    store.add_tasks([make_task("local", "o1")])

    store.rebind_task_id("local", "canonical")

    assert store.get_task("local") is None
    assert store.get_task("canonical").title == "task-local"
    assert LocalStore(path=path).get_task("canonical") is not None


def test_rebind_unknown_id_is_ignored(tmp_path):
    store = LocalStore(path=tmp_path / "local_store.json")

    store.rebind_task_id("missing", "canonical")

    assert store.tasks == []


def test_list_properties_return_copies(tmp_path):
    store = LocalStore(path=tmp_path / "local_store.json")
    store.add_objective(make_objective("o1", "Fitness"))

    store.objectives.clear()

    assert len(store.objectives) == 1


def test_metric_without_history_round_trips(tmp_path):
    path = tmp_path / "local_store.json"
    store = LocalStore(path=path)
    objective = make_objective("o1", "Sleep")
    objective.metrics.append(Metric(id="m", name="Hours", unit="h"))
    store.add_objective(objective)

    assert LocalStore(path=path).get_objective("o1").metrics[0].history == []
