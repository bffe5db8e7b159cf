"""
LocalStore: on-device objectives and tasks with JSON persistence.
Path: data/local_store.json (see core/paths.py).
"""
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from core.logger import get_logger
from core.models import (
    Metric,
    MetricEntry,
    MetricType,
    Objective,
    ObjectiveStatus,
    Pillar,
    Ritual,
    RitualFrequency,
    TargetDirection,
    Task,
    TaskStatus,
    Timeframe,
    enum_or_default,
)
from core.paths import STORE_PATH

logger = get_logger("local_store")


def _dt_to_str(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _str_to_dt(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromisoformat(value)


def _objective_to_dict(o: Objective) -> dict:
    return {
        "id": o.id,
        "name": o.name,
        "category": o.category,
        "description": o.description,
        "target_outcome": o.target_outcome,
        "timeframe": {
            "start_date": _dt_to_str(o.timeframe.start_date),
            "end_date": _dt_to_str(o.timeframe.end_date),
            "daily_commitment_minutes": o.timeframe.daily_commitment_minutes,
        },
        "pillars": [
            {
                "id": p.id,
                "name": p.name,
                "description": p.description,
                "weight": p.weight,
                "progress": p.progress,
            }
            for p in o.pillars
        ],
        "metrics": [
            {
                "id": m.id,
                "name": m.name,
                "unit": m.unit,
                "type": m.type.value,
                "target": m.target,
                "target_direction": m.target_direction.value if m.target_direction else None,
                "current": m.current,
                "source": m.source,
                "pillar_id": m.pillar_id,
                "history": [
                    {"value": e.value, "recorded_at": _dt_to_str(e.recorded_at), "note": e.note}
                    for e in m.history
                ],
            }
            for m in o.metrics
        ],
        "rituals": [
            {
                "id": r.id,
                "name": r.name,
                "description": r.description,
                "frequency": r.frequency.value,
                "days_of_week": r.days_of_week,
                "times_per_period": r.times_per_period,
                "estimated_minutes": r.estimated_minutes,
                "current_streak": r.current_streak,
                "longest_streak": r.longest_streak,
                "completions_this_period": r.completions_this_period,
                "completion_history": [_dt_to_str(c) for c in r.completion_history],
                "pillar_id": r.pillar_id,
            }
            for r in o.rituals
        ],
        "status": o.status.value,
        "priority": o.priority,
        "is_paused": o.is_paused,
        "created_at": _dt_to_str(o.created_at),
        "updated_at": _dt_to_str(o.updated_at),
    }


def _dict_to_objective(d: dict) -> Objective:
    tf = d.get("timeframe") or {}
    return Objective(
        id=d["id"],
        name=d["name"],
        category=d.get("category", ""),
        description=d.get("description", ""),
        target_outcome=d.get("target_outcome", ""),
        timeframe=Timeframe(
            start_date=_str_to_dt(tf.get("start_date")) or datetime.now(),
            end_date=_str_to_dt(tf.get("end_date")),
            daily_commitment_minutes=tf.get("daily_commitment_minutes", 60),
        ),
        pillars=[
            Pillar(
                id=p["id"],
                name=p["name"],
                description=p.get("description", ""),
                weight=p.get("weight", 0.0),
                progress=p.get("progress", 0.0),
            )
            for p in d.get("pillars", [])
        ],
        metrics=[
            Metric(
                id=m["id"],
                name=m["name"],
                unit=m.get("unit", ""),
                type=enum_or_default(MetricType, m.get("type"), MetricType.NUMBER),
                target=m.get("target"),
                target_direction=enum_or_default(TargetDirection, m.get("target_direction"), None),
                current=m.get("current"),
                source=m.get("source", "manual"),
                pillar_id=m.get("pillar_id"),
                history=[
                    MetricEntry(
                        value=e["value"],
                        recorded_at=_str_to_dt(e["recorded_at"]),
                        note=e.get("note"),
                    )
                    for e in m.get("history", [])
                ],
            )
            for m in d.get("metrics", [])
        ],
        rituals=[
            Ritual(
                id=r["id"],
                name=r["name"],
                description=r.get("description", ""),
                frequency=enum_or_default(RitualFrequency, r.get("frequency"), RitualFrequency.DAILY),
                days_of_week=r.get("days_of_week"),
                times_per_period=r.get("times_per_period", 1),
                estimated_minutes=r.get("estimated_minutes"),
                current_streak=r.get("current_streak", 0),
                longest_streak=r.get("longest_streak", 0),
                completions_this_period=r.get("completions_this_period", 0),
                completion_history=[_str_to_dt(c) for c in r.get("completion_history", [])],
                pillar_id=r.get("pillar_id"),
            )
            for r in d.get("rituals", [])
        ],
        status=enum_or_default(ObjectiveStatus, d.get("status"), ObjectiveStatus.ON_TRACK),
        priority=d.get("priority", 1),
        is_paused=d.get("is_paused", False),
        created_at=_str_to_dt(d.get("created_at")),
        updated_at=_str_to_dt(d.get("updated_at")),
    )


def _task_to_dict(t: Task) -> dict:
    return {
        "id": t.id,
        "objective_id": t.objective_id,
        "title": t.title,
        "scheduled_at": _dt_to_str(t.scheduled_at),
        "duration_minutes": t.duration_minutes,
        "pillar_id": t.pillar_id,
        "ritual_id": t.ritual_id,
        "description": t.description,
        "why_it_matters": t.why_it_matters,
        "status": t.status.value,
        "completed_at": _dt_to_str(t.completed_at),
        "skipped_reason": t.skipped_reason,
    }


def _dict_to_task(d: dict) -> Task:
    return Task(
        id=d["id"],
        objective_id=d["objective_id"],
        title=d["title"],
        scheduled_at=_str_to_dt(d["scheduled_at"]),
        duration_minutes=d.get("duration_minutes", 30),
        pillar_id=d.get("pillar_id"),
        ritual_id=d.get("ritual_id"),
        description=d.get("description"),
        why_it_matters=d.get("why_it_matters"),
        status=enum_or_default(TaskStatus, d.get("status"), TaskStatus.PENDING),
        completed_at=_str_to_dt(d.get("completed_at")),
        skipped_reason=d.get("skipped_reason"),
    )


class LocalStore:
    """In-memory objective/task store with JSON persistence at STORE_PATH."""

    def __init__(self, path: Optional[Path] = None):
        self._path = path if path is not None else STORE_PATH
        self._objectives: Dict[str, Objective] = {}
        self._tasks: Dict[str, Task] = {}
        self._load()

    def _load(self) -> None:
        if not self._path.exists():
            return
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
            for d in data.get("objectives", []):
                o = _dict_to_objective(d)
                self._objectives[o.id] = o
            for d in data.get("tasks", []):
                t = _dict_to_task(d)
                self._tasks[t.id] = t
        except (json.JSONDecodeError, OSError, KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning("Local store at %s is unreadable, starting empty: %s", self._path, e)
            self._objectives.clear()
            self._tasks.clear()

    def save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload: Dict[str, Any] = {
            "objectives": [_objective_to_dict(o) for o in self._objectives.values()],
            "tasks": [_task_to_dict(t) for t in self._tasks.values()],
        }
        with open(self._path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)

    @property
    def objectives(self) -> List[Objective]:
        return list(self._objectives.values())

    @property
    def tasks(self) -> List[Task]:
        return list(self._tasks.values())

    def get_objective(self, objective_id: str) -> Optional[Objective]:
        return self._objectives.get(objective_id)

    def get_task(self, task_id: str) -> Optional[Task]:
        return self._tasks.get(task_id)

    def add_objective(self, objective: Objective) -> None:
        self._objectives[objective.id] = objective
        self.save()

    def add_tasks(self, tasks: List[Task]) -> None:
        for task in tasks:
            self._tasks[task.id] = task
        self.save()

    def update_task(self, task: Task) -> None:
        self._tasks[task.id] = task
        self.save()

    def rebind_task_id(self, local_id: str, canonical_id: str) -> None:
        """Give an uploaded task its canonical identifier."""
        task = self._tasks.pop(local_id, None)
        if task is None:
            return
        task.id = canonical_id
        self._tasks[canonical_id] = task
        self.save()
