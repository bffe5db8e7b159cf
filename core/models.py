"""
Core Data Models for Telofy sync.
Defines the local objective aggregate (objective + pillars/metrics/rituals) and tasks.
"""
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import List, Optional


class ObjectiveStatus(str, Enum):
    ON_TRACK = "on_track"
    DEVIATION_DETECTED = "deviation_detected"
    PAUSED = "paused"
    COMPLETED = "completed"


class MetricType(str, Enum):
    NUMBER = "number"
    BOOLEAN = "boolean"
    DURATION = "duration"
    RATING = "rating"


class TargetDirection(str, Enum):
    INCREASE = "increase"
    DECREASE = "decrease"
    MAINTAIN = "maintain"


class RitualFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    SKIPPED = "skipped"
    OVERDUE = "overdue"      # local-only, derived for presentation

    def to_remote(self) -> "TaskStatus":
        """Status as the remote store understands it; overdue is still pending there."""
        if self is TaskStatus.OVERDUE:
            return TaskStatus.PENDING
        return self


def enum_or_default(enum_cls, raw, default):
    """Parse a raw wire value into ``enum_cls``, falling back to ``default``."""
    if raw is None:
        return default
    try:
        return enum_cls(raw)
    except ValueError:
        return default


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Aware UTC copy of ``value``; naive datetimes are taken as local time."""
    if value is None:
        return None
    return value.astimezone(timezone.utc)


def local_date(value: datetime) -> date:
    """Calendar day of ``value`` on this device."""
    if value.tzinfo is None:
        return value.date()
    return value.astimezone().date()


@dataclass
class Timeframe:
    start_date: datetime
    end_date: Optional[datetime] = None
    daily_commitment_minutes: int = 60


@dataclass
class Pillar:
    id: str
    name: str
    description: str = ""
    weight: float = 0.0
    progress: float = 0.0      # percentage 0-100


@dataclass
class MetricEntry:
    value: float
    recorded_at: datetime
    note: Optional[str] = None


@dataclass
class Metric:
    id: str
    name: str
    unit: str = ""
    type: MetricType = MetricType.NUMBER
    target: Optional[float] = None
    target_direction: Optional[TargetDirection] = None
    current: Optional[float] = None
    source: str = "manual"
    pillar_id: Optional[str] = None
    history: List[MetricEntry] = field(default_factory=list)


@dataclass
class Ritual:
    id: str
    name: str
    description: str = ""
    frequency: RitualFrequency = RitualFrequency.DAILY
    days_of_week: Optional[List[int]] = None   # 0=Sunday .. 6=Saturday
    times_per_period: int = 1
    estimated_minutes: Optional[int] = None
    current_streak: int = 0
    longest_streak: int = 0
    completions_this_period: int = 0
    completion_history: List[datetime] = field(default_factory=list)
    pillar_id: Optional[str] = None


@dataclass
class Objective:
    """Objective aggregate: the objective and the pillars, metrics and rituals it owns."""
    id: str
    name: str
    category: str
    timeframe: Timeframe
    description: str = ""
    target_outcome: str = ""
    pillars: List[Pillar] = field(default_factory=list)
    metrics: List[Metric] = field(default_factory=list)
    rituals: List[Ritual] = field(default_factory=list)
    status: ObjectiveStatus = ObjectiveStatus.ON_TRACK
    priority: int = 1
    is_paused: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        now = datetime.now(timezone.utc)
        if self.created_at is None:
            self.created_at = now
        if self.updated_at is None:
            self.updated_at = now


@dataclass
class Task:
    """A scheduled unit of work belonging to an objective."""
    id: str
    objective_id: str
    title: str
    scheduled_at: datetime
    duration_minutes: int = 30
    pillar_id: Optional[str] = None
    ritual_id: Optional[str] = None
    description: Optional[str] = None
    why_it_matters: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING
    completed_at: Optional[datetime] = None
    skipped_reason: Optional[str] = None

    def scheduled_on(self) -> date:
        return local_date(self.scheduled_at)


def derive_overdue(tasks: List[Task], now: Optional[datetime] = None) -> List[Task]:
    """
    Mark pending tasks whose scheduled instant has passed as overdue.

    Presentation helper: mutates and returns ``tasks``. Overdue never reaches
    the remote store, see ``TaskStatus.to_remote``.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    now_utc = as_utc(now)
    for task in tasks:
        if task.status == TaskStatus.PENDING and as_utc(task.scheduled_at) < now_utc:
            task.status = TaskStatus.OVERDUE
    return tasks
