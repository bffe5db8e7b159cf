from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException

from core.bootstrap import SyncRuntime, create_runtime
from core.exceptions import SyncInProgressError

router = APIRouter()

_runtime: Optional[SyncRuntime] = None


def get_runtime() -> SyncRuntime:
    global _runtime
    if _runtime is None:
        _runtime = create_runtime()
    return _runtime


@router.get("/state")
async def get_sync_state() -> Dict[str, Any]:
    """Current sync state snapshot for UI indicators."""
    return get_runtime().orchestrator.publisher.get_sync_state().to_dict()


@router.post("")
async def trigger_sync() -> Dict[str, Any]:
    orchestrator = get_runtime().orchestrator
    try:
        result = await orchestrator.sync_all()
    except SyncInProgressError as e:
        raise HTTPException(status_code=409, detail=e.message)

    return {
        "success": result.success,
        "error": result.error,
        "state": orchestrator.publisher.get_sync_state().to_dict(),
    }
