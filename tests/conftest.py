import os
import sys
from datetime import date, datetime
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, List, Optional, Set, Tuple

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Keep tests away from the real data directory.
os.environ.setdefault("TELOFY_DATA_DIR", str(PROJECT_ROOT / ".pytest_data"))

from core.exceptions import NetworkError, ServerError  # noqa: E402
from core.local_store import LocalStore  # noqa: E402
from core.models import (  # noqa: E402
    Metric,
    Objective,
    Pillar,
    Ritual,
    Task,
    TaskStatus,
    Timeframe,
    local_date,
)
from interface.api.schemas import (  # noqa: E402
    ObjectiveCreate,
    RemoteMetric,
    RemoteObjectiveDetail,
    RemotePillar,
    RemoteRitual,
    RemoteTask,
    TaskCreate,
    TaskUpdate,
)

TODAY = date(2026, 10, 19)
UUID_A = "0b6c8e0e-3f57-4c8e-9f0e-6f1f2a3b4c5d"
UUID_B = "5f0d1c2b-8a7e-4d6c-b5a4-9e8f7d6c5b4a"
UUID_C = "9a8b7c6d-5e4f-4a3b-8c2d-1e0f9a8b7c6d"


def at(hour: int, minute: int = 0, day: date = TODAY) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute)


def make_objective(
    objective_id: str,
    name: str,
    *,
    pillars: Tuple[Tuple[str, str], ...] = (),
    metrics: Tuple[Tuple[str, str, Optional[str]], ...] = (),
    rituals: Tuple[Tuple[str, str, Optional[str]], ...] = (),
) -> Objective:
    return Objective(
        id=objective_id,
        name=name,
        category="health",
        timeframe=Timeframe(start_date=at(8), daily_commitment_minutes=45),
        pillars=[Pillar(id=pid, name=pname, weight=0.5) for pid, pname in pillars],
        metrics=[Metric(id=mid, name=mname, unit="kg", pillar_id=owner) for mid, mname, owner in metrics],
        rituals=[Ritual(id=rid, name=rname, pillar_id=owner) for rid, rname, owner in rituals],
    )


def make_task(
    task_id: str,
    objective_id: str,
    *,
    title: Optional[str] = None,
    scheduled_at: Optional[datetime] = None,
    status: TaskStatus = TaskStatus.PENDING,
    pillar_id: Optional[str] = None,
    ritual_id: Optional[str] = None,
) -> Task:
    return Task(
        id=task_id,
        objective_id=objective_id,
        title=title or f"task-{task_id}",
        scheduled_at=scheduled_at or at(9),
        status=status,
        pillar_id=pillar_id,
        ritual_id=ritual_id,
    )


class FakeRemoteStore:
    """In-memory stand-in for TelofyApiClient, recording every call in order."""

    def __init__(self):
        self.objectives: Dict[str, RemoteObjectiveDetail] = {}
        self.tasks: Dict[str, RemoteTask] = {}
        self.calls: List[Tuple[str, Any]] = []
        self.fail_objective_names: Set[str] = set()
        self.fail_task_titles: Set[str] = set()
        self.fail_detail_ids: Set[str] = set()
        self.fail_status_updates = False
        self.list_objectives_error: Optional[Exception] = None

    # --- seeding -------------------------------------------------------
    def seed_objective(
        self,
        objective_id: str,
        name: str,
        *,
        pillars: Tuple[Tuple[str, str], ...] = (),
        metrics: Tuple[Tuple[str, str], ...] = (),
        rituals: Tuple[Tuple[str, str], ...] = (),
    ) -> RemoteObjectiveDetail:
        remote = RemoteObjectiveDetail(
            id=objective_id,
            name=name,
            category="health",
            start_date=datetime(2026, 1, 1),
            status="on_track",
            pillars=[RemotePillar(id=pid, name=pname, weight=0.5, progress=10) for pid, pname in pillars],
            metrics=[RemoteMetric(id=mid, name=mname, unit="kg", type="number", source="manual")
                     for mid, mname in metrics],
            rituals=[RemoteRitual(id=rid, name=rname, frequency="weekly", current_streak=4, longest_streak=9)
                     for rid, rname in rituals],
        )
        self.objectives[objective_id] = remote
        return remote

    def seed_task(self, task_id: str, objective_id: str, *, status: str = "pending",
                  scheduled_at: Optional[datetime] = None, title: Optional[str] = None) -> RemoteTask:
        remote = RemoteTask(
            id=task_id,
            objective_id=objective_id,
            title=title or f"remote-{task_id}",
            scheduled_at=scheduled_at or at(10),
            duration_minutes=20,
            status=status,
        )
        self.tasks[task_id] = remote
        return remote

    def call_names(self) -> List[str]:
        return [name for name, _ in self.calls]

    # --- client surface ------------------------------------------------
    async def list_objectives(self):
        self.calls.append(("list_objectives", None))
        if self.list_objectives_error is not None:
            raise self.list_objectives_error
        return list(self.objectives.values())

    async def get_objective_detail(self, objective_id: str):
        self.calls.append(("get_objective_detail", objective_id))
        if objective_id in self.fail_detail_ids:
            raise ServerError(404, "Objective not found")
        return self.objectives[objective_id]

    async def create_objective(self, payload: ObjectiveCreate):
        self.calls.append(("create_objective", payload))
        if payload.name in self.fail_objective_names:
            raise ServerError(500, "Internal error")
        remote = RemoteObjectiveDetail(
            id=payload.id,
            name=payload.name,
            category=payload.category,
            pillars=[RemotePillar(id=p.id, name=p.name, weight=p.weight, progress=p.progress)
                     for p in payload.pillars],
            metrics=[RemoteMetric(id=m.id, name=m.name, unit=m.unit, type=m.type, source=m.source,
                                  pillar_id=m.pillar_id) for m in payload.metrics],
            rituals=[RemoteRitual(id=r.id, name=r.name, frequency=r.frequency,
                                  times_per_period=r.times_per_period, pillar_id=r.pillar_id)
                     for r in payload.rituals],
        )
        self.objectives[remote.id] = remote
        return remote

    async def list_tasks(self, date: Optional[str] = None, objective_id: Optional[str] = None):
        self.calls.append(("list_tasks", date))
        return [t for t in self.tasks.values()
                if date is None or local_date(t.scheduled_at).isoformat() == date]

    async def create_task(self, payload: TaskCreate):
        self.calls.append(("create_task", payload))
        if payload.title in self.fail_task_titles:
            raise NetworkError(endpoint="/api/tasks")
        remote = RemoteTask(
            id=payload.id,
            objective_id=payload.objective_id,
            pillar_id=payload.pillar_id,
            ritual_id=payload.ritual_id,
            title=payload.title,
            scheduled_at=payload.scheduled_at,
            duration_minutes=payload.duration_minutes or 30,
        )
        self.tasks[remote.id] = remote
        return remote

    async def update_task(self, task_id: str, payload: TaskUpdate):
        self.calls.append(("update_task", (task_id, payload)))
        if self.fail_status_updates:
            raise NetworkError(endpoint=f"/api/tasks/{task_id}")
        current = self.tasks[task_id]
        updated = current.model_copy(update={"status": payload.status})
        self.tasks[task_id] = updated
        return updated


@pytest.fixture
def remote() -> FakeRemoteStore:
    return FakeRemoteStore()


@pytest.fixture
def store(tmp_path) -> LocalStore:
    return LocalStore(path=tmp_path / "local_store.json")


@pytest.fixture
def session():
    return SimpleNamespace(is_authenticated=True)
