"""
Conversions between the local model and wire schemas.

Upload direction builds create payloads carrying pre-minted canonical ids.
Download direction materializes local entities from remote records.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional

from core.config_manager import SyncConfig, config as default_config
from core.models import (
    Metric,
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
    as_utc,
    enum_or_default,
)
from core.sync_engine.ids import mint_canonical_id
from interface.api.schemas import (
    MetricCreate,
    ObjectiveCreate,
    PillarCreate,
    RemoteObjectiveDetail,
    RemoteTask,
    RitualCreate,
    TaskCreate,
)


@dataclass
class MintedIds:
    """Canonical ids minted for one objective aggregate ahead of its upload."""
    objective_id: str
    pillars: Dict[str, str] = field(default_factory=dict)
    metrics: Dict[str, str] = field(default_factory=dict)
    rituals: Dict[str, str] = field(default_factory=dict)

    def all_mappings(self) -> Dict[str, Dict[str, str]]:
        return {"pillars": self.pillars, "metrics": self.metrics, "rituals": self.rituals}


def mint_aggregate_ids(objective: Objective) -> MintedIds:
    return MintedIds(
        objective_id=mint_canonical_id(objective.id),
        pillars={p.id: mint_canonical_id(p.id) for p in objective.pillars},
        metrics={m.id: mint_canonical_id(m.id) for m in objective.metrics},
        rituals={r.id: mint_canonical_id(r.id) for r in objective.rituals},
    )


def build_objective_create(objective: Objective, ids: MintedIds) -> ObjectiveCreate:
    """Creation payload for a whole aggregate; owning-pillar refs use canonical pillar ids."""

    def pillar_ref(local_pillar_id: Optional[str]) -> Optional[str]:
        if not local_pillar_id:
            return None
        return ids.pillars.get(local_pillar_id)

    return ObjectiveCreate(
        id=ids.objective_id,
        name=objective.name,
        category=objective.category,
        description=objective.description,
        target_outcome=objective.target_outcome,
        end_date=as_utc(objective.timeframe.end_date),
        daily_commitment_minutes=objective.timeframe.daily_commitment_minutes,
        pillars=[
            PillarCreate(
                id=ids.pillars[p.id],
                name=p.name,
                description=p.description,
                weight=p.weight,
                progress=p.progress,
            )
            for p in objective.pillars
        ],
        metrics=[
            MetricCreate(
                id=ids.metrics[m.id],
                name=m.name,
                unit=m.unit,
                type=m.type.value,
                target=m.target,
                target_direction=m.target_direction.value if m.target_direction else None,
                current=m.current,
                source=m.source,
                pillar_id=pillar_ref(m.pillar_id),
            )
            for m in objective.metrics
        ],
        rituals=[
            RitualCreate(
                id=ids.rituals[r.id],
                name=r.name,
                description=r.description,
                frequency=r.frequency.value,
                days_of_week=r.days_of_week,
                times_per_period=r.times_per_period,
                estimated_minutes=r.estimated_minutes,
                pillar_id=pillar_ref(r.pillar_id),
            )
            for r in objective.rituals
        ],
    )


def build_task_create(
    task: Task,
    task_id: str,
    objective_id: str,
    pillar_id: Optional[str] = None,
    ritual_id: Optional[str] = None,
) -> TaskCreate:
    return TaskCreate(
        id=task_id,
        objective_id=objective_id,
        pillar_id=pillar_id,
        ritual_id=ritual_id,
        title=task.title,
        description=task.description,
        why_it_matters=task.why_it_matters,
        scheduled_at=as_utc(task.scheduled_at),
        duration_minutes=task.duration_minutes,
    )


def materialize_objective(
    remote: RemoteObjectiveDetail,
    cfg: Optional[SyncConfig] = None,
) -> Objective:
    """
    Local objective from a remote detail record.

    The local id is the canonical id. Metric history and ritual completion
    logs start empty; only the current counters are carried over.
    """
    cfg = cfg or default_config
    now = datetime.now(timezone.utc)
    return Objective(
        id=remote.id,
        name=remote.name,
        category=remote.category,
        description=remote.description or "",
        target_outcome=remote.target_outcome or "",
        timeframe=Timeframe(
            start_date=remote.start_date or remote.created_at or now,
            end_date=remote.end_date,
            daily_commitment_minutes=(
                remote.daily_commitment_minutes or cfg.DEFAULT_DAILY_COMMITMENT_MINUTES
            ),
        ),
        pillars=[
            Pillar(
                id=p.id,
                name=p.name,
                description=p.description or "",
                weight=p.weight,
                progress=p.progress,
            )
            for p in remote.pillars or []
        ],
        metrics=[
            Metric(
                id=m.id,
                name=m.name,
                unit=m.unit,
                type=enum_or_default(MetricType, m.type, MetricType.NUMBER),
                target=m.target,
                target_direction=enum_or_default(TargetDirection, m.target_direction, None),
                current=m.current,
                source=m.source,
                pillar_id=m.pillar_id,
                history=[],
            )
            for m in remote.metrics or []
        ],
        rituals=[
            Ritual(
                id=r.id,
                name=r.name,
                description=r.description or "",
                frequency=enum_or_default(RitualFrequency, r.frequency, RitualFrequency.DAILY),
                days_of_week=r.days_of_week,
                times_per_period=r.times_per_period,
                estimated_minutes=r.estimated_minutes,
                current_streak=r.current_streak,
                longest_streak=r.longest_streak,
                completions_this_period=0,
                completion_history=[],
                pillar_id=r.pillar_id,
            )
            for r in remote.rituals or []
        ],
        status=enum_or_default(ObjectiveStatus, remote.status, ObjectiveStatus.ON_TRACK),
        priority=remote.priority or cfg.DEFAULT_PRIORITY,
        is_paused=bool(remote.is_paused),
        created_at=remote.created_at,
        updated_at=remote.updated_at,
    )


def materialize_task(remote: RemoteTask) -> Task:
    """Local task from a remote record, status and timestamps verbatim."""
    return Task(
        id=remote.id,
        objective_id=remote.objective_id,
        pillar_id=remote.pillar_id,
        ritual_id=remote.ritual_id,
        title=remote.title,
        description=remote.description,
        why_it_matters=remote.why_it_matters,
        scheduled_at=remote.scheduled_at,
        duration_minutes=remote.duration_minutes,
        status=TaskStatus(remote.status),
        completed_at=remote.completed_at,
        skipped_reason=remote.skipped_reason,
    )
