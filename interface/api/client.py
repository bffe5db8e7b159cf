"""
Telofy API client.

Async HTTP access to the remote store. Every method returns a validated
schema from interface.api.schemas or raises an ApiError subclass:
NetworkError (unreachable), ServerError (non-2xx), ParseError (bad body).
"""
import json
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import ValidationError

from core.exceptions import NetworkError, ParseError, ServerError
from core.logger import get_logger
from interface.api.schemas import (
    AuthResponse,
    MetricEntryCreate,
    MetricEntryListResponse,
    MetricEntryResponse,
    ObjectiveCreate,
    ObjectiveDetailResponse,
    ObjectiveListResponse,
    ObjectiveResponse,
    ObjectiveUpdate,
    RemoteMetricEntry,
    RemoteObjective,
    RemoteObjectiveDetail,
    RemoteTask,
    RitualCompletionCreate,
    RitualCompletionResponse,
    SignInRequest,
    SignUpRequest,
    SuccessResponse,
    TaskCreate,
    TaskListResponse,
    TaskResponse,
    TaskUpdate,
    WireModel,
)

logger = get_logger("api")

ModelT = TypeVar("ModelT", bound=WireModel)


def extract_error_message(data: Any, status: int) -> str:
    """Pull a human-readable message out of the known error body shapes."""
    if isinstance(data, dict):
        for key in ("error", "message"):
            value = data.get(key)
            if isinstance(value, str) and value:
                return value
        errors = data.get("errors")
        if isinstance(errors, list) and errors:
            first = errors[0]
            if isinstance(first, dict) and first.get("message"):
                return str(first["message"])
    return f"Request failed with status {status}"


class TelofyApiClient:
    """Client for the Telofy backend. Use as ``async with`` or call ``aclose()``."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._token = token
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "TelofyApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def set_token(self, token: Optional[str]) -> None:
        self._token = token

    @property
    def has_token(self) -> bool:
        return bool(self._token)

    async def _request(
        self,
        method: str,
        endpoint: str,
        response_model: Type[ModelT],
        body: Optional[WireModel] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> ModelT:
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        try:
            response = await self._client.request(
                method,
                endpoint,
                headers=headers,
                params=params,
                json=body.to_wire() if body is not None else None,
            )
        except httpx.TransportError as e:
            logger.warning("%s %s failed to connect: %s", method, endpoint, e)
            raise NetworkError(endpoint=endpoint) from e

        status = response.status_code
        content_type = response.headers.get("content-type", "")

        if "application/json" in content_type:
            text = response.text
            try:
                data = json.loads(text) if text else {}
            except json.JSONDecodeError as e:
                raise ParseError(endpoint=endpoint) from e
        else:
            # likely an HTML error page from a proxy
            text = response.text
            if not response.is_success:
                raise ServerError(status, text or f"Server error: {status}", endpoint=endpoint)
            data = {"message": text}

        if not response.is_success:
            raise ServerError(status, extract_error_message(data, status), endpoint=endpoint)

        try:
            return response_model.model_validate(data)
        except ValidationError as e:
            logger.error("Unexpected response shape from %s %s: %s", method, endpoint, e)
            raise ParseError(
                f"Unexpected response shape from {endpoint}", endpoint=endpoint
            ) from e

    # ============================================
    # AUTH
    # ============================================

    async def sign_up(self, email: str, password: str, name: str) -> AuthResponse:
        body = SignUpRequest(email=email, password=password, name=name)
        return await self._request("POST", "/api/auth/sign-up/email", AuthResponse, body=body)

    async def sign_in(self, email: str, password: str) -> AuthResponse:
        body = SignInRequest(email=email, password=password)
        return await self._request("POST", "/api/auth/sign-in/email", AuthResponse, body=body)

    async def sign_out(self) -> bool:
        result = await self._request("POST", "/api/auth/sign-out", SuccessResponse)
        return result.success

    # ============================================
    # OBJECTIVES
    # ============================================

    async def list_objectives(self) -> List[RemoteObjective]:
        result = await self._request("GET", "/api/objectives", ObjectiveListResponse)
        return result.objectives

    async def get_objective_detail(self, objective_id: str) -> RemoteObjectiveDetail:
        result = await self._request(
            "GET", f"/api/objectives/{objective_id}", ObjectiveDetailResponse
        )
        return result.objective

    async def create_objective(self, payload: ObjectiveCreate) -> RemoteObjective:
        result = await self._request("POST", "/api/objectives", ObjectiveResponse, body=payload)
        return result.objective

    async def update_objective(self, objective_id: str, payload: ObjectiveUpdate) -> RemoteObjective:
        result = await self._request(
            "PATCH", f"/api/objectives/{objective_id}", ObjectiveResponse, body=payload
        )
        return result.objective

    async def delete_objective(self, objective_id: str) -> bool:
        result = await self._request("DELETE", f"/api/objectives/{objective_id}", SuccessResponse)
        return result.success

    # ============================================
    # TASKS
    # ============================================

    async def list_tasks(
        self,
        date: Optional[str] = None,
        objective_id: Optional[str] = None,
    ) -> List[RemoteTask]:
        params: Dict[str, str] = {}
        if date:
            params["date"] = date
        if objective_id:
            params["objectiveId"] = objective_id
        result = await self._request("GET", "/api/tasks", TaskListResponse, params=params or None)
        return result.tasks

    async def create_task(self, payload: TaskCreate) -> RemoteTask:
        result = await self._request("POST", "/api/tasks", TaskResponse, body=payload)
        return result.task

    async def update_task(self, task_id: str, payload: TaskUpdate) -> RemoteTask:
        result = await self._request("PATCH", f"/api/tasks/{task_id}", TaskResponse, body=payload)
        return result.task

    async def complete_task(self, task_id: str) -> RemoteTask:
        return await self.update_task(task_id, TaskUpdate(status="completed"))

    async def skip_task(self, task_id: str, reason: Optional[str] = None) -> RemoteTask:
        return await self.update_task(task_id, TaskUpdate(status="skipped", skipped_reason=reason))

    async def delete_task(self, task_id: str) -> bool:
        result = await self._request("DELETE", f"/api/tasks/{task_id}", SuccessResponse)
        return result.success

    # ============================================
    # METRICS
    # ============================================

    async def get_metric_entries(self, metric_id: str) -> List[RemoteMetricEntry]:
        result = await self._request(
            "GET", f"/api/metrics/{metric_id}/entries", MetricEntryListResponse
        )
        return result.entries

    async def add_metric_entry(
        self, metric_id: str, value: float, note: Optional[str] = None
    ) -> RemoteMetricEntry:
        result = await self._request(
            "POST",
            f"/api/metrics/{metric_id}/entries",
            MetricEntryResponse,
            body=MetricEntryCreate(value=value, note=note),
        )
        return result.entry

    # ============================================
    # RITUALS
    # ============================================

    async def complete_ritual(
        self, ritual_id: str, note: Optional[str] = None
    ) -> RitualCompletionResponse:
        return await self._request(
            "POST",
            f"/api/rituals/{ritual_id}/completions",
            RitualCompletionResponse,
            body=RitualCompletionCreate(note=note),
        )
