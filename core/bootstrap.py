"""
Bootstrap module for Telofy sync.

Wires config, local store, API client, auth session and orchestrator into
one runtime shared by the web backend and the CLI.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import httpx

from core.config_manager import SyncConfig, get_config
from core.local_store import LocalStore
from core.paths import DATA_DIR
from core.sync_engine.orchestrator import SyncOrchestrator
from interface.api.client import TelofyApiClient
from interface.auth import AuthSession


@dataclass
class SyncRuntime:
    config: SyncConfig
    client: TelofyApiClient
    store: LocalStore
    session: AuthSession
    orchestrator: SyncOrchestrator

    async def aclose(self) -> None:
        self.orchestrator.publisher.close()
        await self.client.aclose()


def create_runtime(
    cfg: Optional[SyncConfig] = None,
    data_dir: Optional[Path] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> SyncRuntime:
    """
    Build a runtime.

    Args:
        cfg: configuration (default: config/runtime.yaml + env)
        data_dir: where local_store.json and auth.json live
        transport: httpx transport override, used by tests
    """
    cfg = cfg or get_config()
    base = data_dir if data_dir is not None else DATA_DIR

    client = TelofyApiClient(cfg.API_URL, timeout=cfg.REQUEST_TIMEOUT_SECONDS, transport=transport)
    store = LocalStore(path=base / "local_store.json")
    session = AuthSession(client, path=base / "auth.json")
    orchestrator = SyncOrchestrator(client, store, session, cfg=cfg)
    return SyncRuntime(
        config=cfg,
        client=client,
        store=store,
        session=session,
        orchestrator=orchestrator,
    )
