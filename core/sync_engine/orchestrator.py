"""
SyncOrchestrator: entry point of a reconciliation pass.

Sequences the objective phase strictly before the task phase (task uploads
need the objective identity mappings), aggregates per-item errors and drives
the status state machine through its own SyncStatusPublisher.
"""
import asyncio
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Callable, Dict, List, Optional

from core.config_manager import SyncConfig, config as default_config
from core.exceptions import ApiError, SyncInProgressError
from core.local_store import LocalStore
from core.logger import get_logger
from core.models import Objective, Task
from core.sync_engine.identity import ReconciliationContext
from core.sync_engine.ids import mint_canonical_id
from core.sync_engine.objective_reconciler import ObjectiveReconciler
from core.sync_engine.payloads import build_objective_create, build_task_create, mint_aggregate_ids
from core.sync_engine.publisher import SyncStatus, SyncStatusPublisher
from core.sync_engine.task_reconciler import TaskReconciler
from interface.api.client import TelofyApiClient

logger = get_logger("sync")

NOT_AUTHENTICATED = "Not authenticated"


@dataclass
class SyncResult:
    success: bool
    error: Optional[str] = None


class SyncOrchestrator:
    """Runs reconciliation passes; one at a time per instance."""

    def __init__(
        self,
        client: TelofyApiClient,
        store: LocalStore,
        session,
        publisher: Optional[SyncStatusPublisher] = None,
        cfg: Optional[SyncConfig] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        self.client = client
        self.store = store
        self.session = session
        self.config = cfg or default_config
        self.publisher = publisher or SyncStatusPublisher()
        self.objectives = ObjectiveReconciler(client, store, self.config)
        self.tasks = TaskReconciler(client, store)
        self._today = today or date.today
        self._lock = asyncio.Lock()
        self._identity: Dict[str, str] = {}

    @property
    def is_syncing(self) -> bool:
        return self._lock.locked()

    def identity_snapshot(self) -> Dict[str, str]:
        """Identity mapping produced by the most recent pass (a copy)."""
        return dict(self._identity)

    async def sync_all(self) -> SyncResult:
        """
        Run one full reconciliation pass.

        Raises SyncInProgressError when a pass is already running and the
        policy is "reject"; under "queue" the call waits its turn.
        """
        if not self.session.is_authenticated:
            return SyncResult(success=False, error=NOT_AUTHENTICATED)

        if self._lock.locked() and self.config.CONCURRENT_SYNC_POLICY == "reject":
            raise SyncInProgressError()

        async with self._lock:
            return await self._run_pass()

    async def _run_pass(self) -> SyncResult:
        self.publisher.transition(status=SyncStatus.SYNCING, error=None)
        ctx = ReconciliationContext(today=self._today())
        errors: List[str] = []

        try:
            errors.extend(await self.objectives.reconcile(ctx))
            errors.extend(await self.tasks.reconcile(ctx))
        except Exception as e:
            message = str(e) or "Sync failed"
            self._identity = ctx.resolver.snapshot()
            self.publisher.transition(status=SyncStatus.ERROR, error=message)
            logger.exception("Sync failed: %s", message)
            return SyncResult(success=False, error=message)

        self._identity = ctx.resolver.snapshot()
        finished_at = datetime.now(timezone.utc)

        if errors:
            self.publisher.transition(
                status=SyncStatus.ERROR,
                last_sync_at=finished_at,
                error=f"{len(errors)} item(s) failed to sync",
            )
            logger.warning("Sync completed with errors: %s", errors)
            return SyncResult(
                success=False,
                error=f"{len(errors)} item(s) failed to sync. Check logs for details.",
            )

        self.publisher.transition(status=SyncStatus.SUCCESS, last_sync_at=finished_at, error=None)
        logger.info("Sync completed successfully")
        return SyncResult(success=True)

    # ------------------------------------------------------------------
    # One-shot uploads, outside any pass
    # ------------------------------------------------------------------

    async def upload_objective(self, objective: Objective) -> None:
        """Submit a single aggregate; raises the ApiError on failure."""
        if not self.session.is_authenticated:
            return

        payload = build_objective_create(objective, mint_aggregate_ids(objective))
        try:
            await self.client.create_objective(payload)
        except ApiError as e:
            logger.error("Failed to upload objective %s: %s", objective.name, e.message)
            raise
        logger.info("Uploaded objective: %s", objective.name)

    async def upload_tasks(self, tasks: List[Task]) -> None:
        """Submit tasks one at a time; failures are logged and skipped."""
        if not self.session.is_authenticated:
            return

        for task in tasks:
            payload = build_task_create(task, mint_canonical_id(task.id), task.objective_id,
                                        task.pillar_id, task.ritual_id)
            try:
                await self.client.create_task(payload)
            except ApiError as e:
                logger.error("Failed to upload task %s: %s", task.title, e.message)
