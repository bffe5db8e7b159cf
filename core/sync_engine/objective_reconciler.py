"""
Objective reconciliation.

Decides for every local and remote objective aggregate whether it is already
synced (same canonical id), the same objective created elsewhere (same name,
case-insensitive), or local-only and due for upload. Remote objectives with
no local counterpart are downloaded. Every decision lands in the pass's
IdentityResolver, which the task phase reads afterwards.
"""
from typing import Dict, List, Optional, Sequence

from core.config_manager import SyncConfig, config as default_config
from core.exceptions import ApiError
from core.local_store import LocalStore
from core.logger import get_logger
from core.models import Objective
from core.sync_engine.identity import IdentityResolver, ReconciliationContext
from core.sync_engine.payloads import (
    build_objective_create,
    materialize_objective,
    mint_aggregate_ids,
)
from interface.api.client import TelofyApiClient
from interface.api.schemas import RemoteObjective

logger = get_logger("sync.objectives")


def fold_name(name: str) -> str:
    return name.casefold()


def _find_by_name(remote_children: Optional[Sequence], name: str):
    key = fold_name(name)
    for child in remote_children or []:
        if fold_name(child.name) == key:
            return child
    return None


def map_children_by_name(
    local: Objective,
    remote: RemoteObjective,
    resolver: IdentityResolver,
) -> int:
    """
    Register local pillar/metric/ritual ids against same-named remote children.

    Unmatched local children are left unmapped; only a brand-new parent
    upload creates children remotely. Returns the number of matches.
    """
    matched = 0
    for local_children, remote_children in (
        (local.pillars, remote.pillars),
        (local.metrics, remote.metrics),
        (local.rituals, remote.rituals),
    ):
        for child in local_children:
            found = _find_by_name(remote_children, child.name)
            if found is not None:
                resolver.register(child.id, found.id)
                matched += 1
    return matched


class ObjectiveReconciler:
    """Aligns local objective aggregates with the remote store."""

    def __init__(
        self,
        client: TelofyApiClient,
        store: LocalStore,
        cfg: Optional[SyncConfig] = None,
    ):
        self.client = client
        self.store = store
        self.config = cfg or default_config

    async def reconcile(self, ctx: ReconciliationContext) -> List[str]:
        """
        Run the objective phase of a pass.

        Failing to list remote objectives propagates; per-objective
        failures are returned as error strings.
        """
        local_objectives = self.store.objectives
        remote_objectives = await self.client.list_objectives()

        remote_by_id: Dict[str, RemoteObjective] = {}
        remote_by_name: Dict[str, RemoteObjective] = {}
        for remote in remote_objectives:
            remote_by_id.setdefault(remote.id, remote)
            remote_by_name.setdefault(fold_name(remote.name), remote)

        errors: List[str] = []

        for local in local_objectives:
            remote = remote_by_id.get(local.id)
            if remote is not None:
                ctx.resolver.register(local.id, local.id)
                map_children_by_name(local, remote, ctx.resolver)
                continue

            remote = remote_by_name.get(fold_name(local.name))
            if remote is not None:
                logger.info("Matched objective by name: %s -> %s", local.name, remote.id)
                ctx.resolver.register(local.id, remote.id)
                map_children_by_name(local, remote, ctx.resolver)
                continue

            error = await self._upload(local, ctx.resolver)
            if error:
                errors.append(error)

        errors.extend(await self._download_missing(local_objectives, remote_objectives, ctx.resolver))
        return errors

    async def _upload(self, local: Objective, resolver: IdentityResolver) -> Optional[str]:
        ids = mint_aggregate_ids(local)
        payload = build_objective_create(local, ids)
        logger.info("Uploading new objective: %s (id: %s)", local.name, ids.objective_id)

        try:
            await self.client.create_objective(payload)
        except ApiError as e:
            msg = f'Failed to upload objective "{local.name}"'
            logger.error("%s: %s", msg, e.message)
            return msg

        # nothing is registered until the create call succeeded
        resolver.register(local.id, ids.objective_id)
        for mapping in ids.all_mappings().values():
            for local_id, canonical_id in mapping.items():
                resolver.register(local_id, canonical_id)

        logger.info(
            "Synced objective: %s -> %s (%d pillars, %d metrics, %d rituals)",
            local.id,
            ids.objective_id,
            len(ids.pillars),
            len(ids.metrics),
            len(ids.rituals),
        )
        return None

    async def _download_missing(
        self,
        local_objectives: List[Objective],
        remote_objectives: List[RemoteObjective],
        resolver: IdentityResolver,
    ) -> List[str]:
        # a remote objective already has a local counterpart if a local entity
        # carries its id or was mapped onto it earlier in this pass
        known = {o.id for o in local_objectives}
        known.update(
            resolver.resolve(o.id) for o in local_objectives if o.id in resolver
        )

        errors: List[str] = []
        for remote in remote_objectives:
            if remote.id in known:
                continue
            known.add(remote.id)

            logger.info("Downloading objective: %s", remote.name)
            try:
                detail = await self.client.get_objective_detail(remote.id)
            except ApiError as e:
                msg = f'Failed to download objective "{remote.name}"'
                logger.error("%s: %s", msg, e.message)
                errors.append(msg)
                continue

            objective = materialize_objective(detail, self.config)
            self.store.add_objective(objective)
            resolver.register(objective.id, objective.id)
            for child in (*objective.pillars, *objective.metrics, *objective.rituals):
                resolver.register(child.id, child.id)
        return errors
