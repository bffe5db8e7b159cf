import asyncio
from types import SimpleNamespace

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from conftest import TODAY, make_objective
from core.config_manager import SyncConfig
from core.sync_engine.orchestrator import SyncOrchestrator
from web.backend.app import create_app
from web.backend.routers import sync as sync_router


@pytest.fixture
def runtime(remote, store, session, monkeypatch):
    orchestrator = SyncOrchestrator(remote, store, session, cfg=SyncConfig(), today=lambda: TODAY)
    runtime = SimpleNamespace(orchestrator=orchestrator)
    monkeypatch.setattr(sync_router, "get_runtime", lambda: runtime)
    return runtime


def test_health():
    client = TestClient(create_app())

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_state_before_any_pass(runtime):
    state = asyncio.run(sync_router.get_sync_state())

    assert state == {"status": "idle", "last_sync_at": None, "error": None}


def test_trigger_sync_reports_result_and_state(runtime, remote, store):
    store.add_objective(make_objective("o1", "Reading"))

    body = asyncio.run(sync_router.trigger_sync())

    assert body["success"] is True
    assert body["error"] is None
    assert body["state"]["status"] == "success"
    assert body["state"]["last_sync_at"] is not None
    assert "create_objective" in remote.call_names()


def test_trigger_sync_reports_item_failures(runtime, remote, store):
    remote.fail_objective_names.add("Reading")
    store.add_objective(make_objective("o1", "Reading"))

    body = asyncio.run(sync_router.trigger_sync())

    assert body["success"] is False
    assert body["state"] == {
        "status": "error",
        "last_sync_at": body["state"]["last_sync_at"],
        "error": "1 item(s) failed to sync",
    }


def test_trigger_sync_while_running_is_a_conflict(runtime):
    async def scenario():
        await runtime.orchestrator._lock.acquire()
        try:
            await sync_router.trigger_sync()
        finally:
            runtime.orchestrator._lock.release()

    with pytest.raises(HTTPException) as exc_info:
        asyncio.run(scenario())

    assert exc_info.value.status_code == 409
    assert exc_info.value.detail == "Sync already in progress"


def test_trigger_sync_signed_out(runtime):
    runtime.orchestrator.session = SimpleNamespace(is_authenticated=False)

    body = asyncio.run(sync_router.trigger_sync())

    assert body["success"] is False
    assert body["error"] == "Not authenticated"
    assert body["state"]["status"] == "idle"
