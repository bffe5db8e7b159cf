"""
Sync status state machine snapshots and their observer registry.

States: idle -> syncing -> {success | error}. There is no transition back to
idle; the next pass re-enters syncing.
"""
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from core.logger import get_logger

logger = get_logger("sync.status")


class SyncStatus(str, Enum):
    IDLE = "idle"
    SYNCING = "syncing"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class SyncState:
    status: SyncStatus = SyncStatus.IDLE
    last_sync_at: Optional[datetime] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "last_sync_at": self.last_sync_at.isoformat() if self.last_sync_at else None,
            "error": self.error,
        }


SyncListener = Callable[[SyncState], None]


class SyncStatusPublisher:
    """
    Broadcasts every state transition to subscribed listeners, synchronously.

    Listeners receive immutable snapshots. There is no replay: a late
    subscriber reads ``get_sync_state()`` or waits for the next transition.
    """

    def __init__(self):
        self._state = SyncState()
        self._listeners: List[SyncListener] = []

    def get_sync_state(self) -> SyncState:
        return self._state

    def subscribe(self, listener: SyncListener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def transition(self, **changes: Any) -> SyncState:
        self._state = replace(self._state, **changes)
        self._notify()
        return self._state

    def _notify(self) -> None:
        state = self._state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Sync status listener %r failed", listener)

    def close(self) -> None:
        self._listeners.clear()
