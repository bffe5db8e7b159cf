"""
Task reconciliation for the current calendar day.

Runs after the objective phase: a local task is uploaded only once its
objective resolves to a canonical id, otherwise it is deferred to a later
pass. Creation failures are reported; status-push failures are only logged.
"""
from typing import List, Optional

from core.exceptions import ApiError
from core.local_store import LocalStore
from core.logger import get_logger
from core.models import Task, as_utc
from core.sync_engine.identity import IdentityResolver, ReconciliationContext
from core.sync_engine.ids import is_valid_uuid, mint_canonical_id
from core.sync_engine.payloads import build_task_create, materialize_task
from interface.api.client import TelofyApiClient
from interface.api.schemas import RemoteTask, TaskUpdate

logger = get_logger("sync.tasks")


def resolve_reference(resolver: IdentityResolver, local_id: Optional[str]) -> Optional[str]:
    """Mapped id if known, the id itself if already UUID-shaped, else omitted."""
    if not local_id:
        return None
    mapped = resolver.resolve(local_id)
    if mapped:
        return mapped
    if is_valid_uuid(local_id):
        return local_id
    return None


class TaskReconciler:
    """Aligns today's local tasks with the remote store."""

    def __init__(self, client: TelofyApiClient, store: LocalStore):
        self.client = client
        self.store = store

    async def reconcile(self, ctx: ReconciliationContext) -> List[str]:
        remote_tasks = await self.client.list_tasks(ctx.today.isoformat())
        remote_by_id = {t.id: t for t in remote_tasks}

        all_local = self.store.tasks
        local_today = [t for t in all_local if t.scheduled_on() == ctx.today]

        errors: List[str] = []
        for local in local_today:
            if local.id in remote_by_id:
                continue
            error = await self._upload(local, ctx.resolver)
            if error:
                errors.append(error)

        for local in local_today:
            remote = remote_by_id.get(local.id)
            if remote is not None:
                ctx.resolver.register(local.id, local.id)
                await self._push_status(local, remote)

        local_ids = {t.id for t in self.store.tasks}
        downloads = [materialize_task(r) for r in remote_tasks if r.id not in local_ids]
        if downloads:
            for task in downloads:
                logger.info("Downloading task: %s", task.title)
                ctx.resolver.register(task.id, task.id)
            self.store.add_tasks(downloads)

        return errors

    async def _upload(self, local: Task, resolver: IdentityResolver) -> Optional[str]:
        objective_id = resolver.resolve(local.objective_id)
        if not objective_id:
            logger.info('Deferring task "%s": objective not synced yet', local.title)
            return None

        task_id = mint_canonical_id(local.id)
        pillar_id = resolve_reference(resolver, local.pillar_id)
        ritual_id = resolve_reference(resolver, local.ritual_id)
        logger.info(
            "Uploading task: %s (id: %s, pillar: %s, ritual: %s)",
            local.title,
            task_id,
            pillar_id or "none",
            ritual_id or "none",
        )

        payload = build_task_create(local, task_id, objective_id, pillar_id, ritual_id)
        try:
            await self.client.create_task(payload)
        except ApiError as e:
            msg = f'Failed to upload task "{local.title}"'
            logger.error("%s: %s", msg, e.message)
            return msg

        if task_id != local.id:
            # the local copy takes the canonical id so the next pass sees it as synced
            self.store.rebind_task_id(local.id, task_id)
        resolver.register(task_id, task_id)
        return None

    async def _push_status(self, local: Task, remote: RemoteTask) -> None:
        status = local.status.to_remote()
        if status.value == remote.status:
            return

        logger.info("Syncing task status: %s -> %s", local.title, status.value)
        update = TaskUpdate(
            status=status.value,
            completed_at=as_utc(local.completed_at),
            skipped_reason=local.skipped_reason,
        )
        try:
            await self.client.update_task(local.id, update)
        except ApiError as e:
            # not counted as a sync error
            logger.warning('Failed to sync status of task "%s": %s', local.title, e.message)
