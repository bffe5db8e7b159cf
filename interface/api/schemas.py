"""
Wire schemas for the Telofy remote store.

Every request and response body is declared here. Field names are snake_case
in Python and camelCase on the wire (alias generator); optional fields are
explicit so a missing key never turns into an attribute error downstream.
"""
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

RemoteTaskStatus = Literal["pending", "in_progress", "completed", "skipped"]


class WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_wire(self) -> dict:
        """JSON-ready dict with camelCase keys; unset optionals are dropped."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------

class RemoteUser(WireModel):
    id: str
    name: str
    email: str
    image: Optional[str] = None
    timezone: Optional[str] = None
    onboarding_completed: Optional[bool] = None


class RemotePillar(WireModel):
    id: str
    objective_id: Optional[str] = None
    name: str
    description: Optional[str] = None
    weight: float = 0.0
    progress: float = 0.0


class RemoteMetric(WireModel):
    id: str
    objective_id: Optional[str] = None
    pillar_id: Optional[str] = None
    name: str
    unit: str = ""
    type: str = "number"
    target: Optional[float] = None
    target_direction: Optional[str] = None
    current: Optional[float] = None
    source: str = "manual"


class RemoteRitual(WireModel):
    id: str
    objective_id: Optional[str] = None
    pillar_id: Optional[str] = None
    name: str
    description: Optional[str] = None
    frequency: str = "daily"
    days_of_week: Optional[List[int]] = None
    times_per_period: int = 1
    estimated_minutes: Optional[int] = None
    current_streak: int = 0
    longest_streak: int = 0


class RemoteTask(WireModel):
    id: str
    user_id: Optional[str] = None
    objective_id: str
    pillar_id: Optional[str] = None
    ritual_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    why_it_matters: Optional[str] = None
    scheduled_at: datetime
    duration_minutes: int = 30
    status: RemoteTaskStatus = "pending"
    completed_at: Optional[datetime] = None
    skipped_reason: Optional[str] = None


class RemoteObjective(WireModel):
    id: str
    user_id: Optional[str] = None
    name: str
    category: str = ""
    description: Optional[str] = None
    target_outcome: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    daily_commitment_minutes: Optional[int] = None
    status: str = "on_track"
    priority: Optional[int] = None
    is_paused: Optional[bool] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    pillars: Optional[List[RemotePillar]] = None
    metrics: Optional[List[RemoteMetric]] = None
    rituals: Optional[List[RemoteRitual]] = None


class RemoteObjectiveDetail(RemoteObjective):
    tasks: Optional[List[RemoteTask]] = None


class RemoteMetricEntry(WireModel):
    id: str
    metric_id: str
    value: float
    note: Optional[str] = None
    recorded_at: datetime


class RemoteRitualCompletion(WireModel):
    id: str
    ritual_id: str
    completed_at: datetime
    note: Optional[str] = None


# ---------------------------------------------------------------------------
# Response envelopes
# ---------------------------------------------------------------------------

class AuthResponse(WireModel):
    token: str
    user: RemoteUser


class SuccessResponse(WireModel):
    success: bool = True


class ObjectiveListResponse(WireModel):
    objectives: List[RemoteObjective]


class ObjectiveResponse(WireModel):
    objective: RemoteObjective


class ObjectiveDetailResponse(WireModel):
    objective: RemoteObjectiveDetail


class TaskListResponse(WireModel):
    tasks: List[RemoteTask]


class TaskResponse(WireModel):
    task: RemoteTask


class MetricEntryListResponse(WireModel):
    entries: List[RemoteMetricEntry]


class MetricEntryResponse(WireModel):
    entry: RemoteMetricEntry


class RitualCompletionResponse(WireModel):
    completion: RemoteRitualCompletion
    streak: int


# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------

class PillarCreate(WireModel):
    id: Optional[str] = None
    name: str
    description: Optional[str] = None
    weight: float
    progress: float = 0.0


class MetricCreate(WireModel):
    id: Optional[str] = None
    name: str
    unit: str
    type: str
    target: Optional[float] = None
    target_direction: Optional[str] = None
    current: Optional[float] = None
    source: str
    pillar_id: Optional[str] = None


class RitualCreate(WireModel):
    id: Optional[str] = None
    name: str
    description: Optional[str] = None
    frequency: str
    days_of_week: Optional[List[int]] = None
    times_per_period: int
    estimated_minutes: Optional[int] = None
    pillar_id: Optional[str] = None


class ObjectiveCreate(WireModel):
    id: Optional[str] = None
    name: str
    category: str
    description: Optional[str] = None
    target_outcome: Optional[str] = None
    end_date: Optional[datetime] = None
    daily_commitment_minutes: Optional[int] = None
    pillars: List[PillarCreate] = []
    metrics: List[MetricCreate] = []
    rituals: List[RitualCreate] = []


class ObjectiveUpdate(WireModel):
    name: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    target_outcome: Optional[str] = None
    end_date: Optional[datetime] = None
    daily_commitment_minutes: Optional[int] = None
    status: Optional[str] = None
    priority: Optional[int] = None
    is_paused: Optional[bool] = None


class TaskCreate(WireModel):
    id: Optional[str] = None
    objective_id: str
    pillar_id: Optional[str] = None
    ritual_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    why_it_matters: Optional[str] = None
    scheduled_at: datetime
    duration_minutes: Optional[int] = None


class TaskUpdate(WireModel):
    status: Optional[RemoteTaskStatus] = None
    completed_at: Optional[datetime] = None
    skipped_reason: Optional[str] = None
    title: Optional[str] = None
    scheduled_at: Optional[datetime] = None
    duration_minutes: Optional[int] = None


class MetricEntryCreate(WireModel):
    value: float
    note: Optional[str] = None


class RitualCompletionCreate(WireModel):
    note: Optional[str] = None


class SignInRequest(WireModel):
    email: str
    password: str


class SignUpRequest(SignInRequest):
    name: str
