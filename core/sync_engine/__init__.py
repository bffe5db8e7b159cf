# Sync Engine: reconciles local objectives/tasks with the remote store.
# Entry point is SyncOrchestrator.sync_all(); see DESIGN.md for the pass layout.

from core.sync_engine.identity import IdentityResolver, ReconciliationContext
from core.sync_engine.objective_reconciler import ObjectiveReconciler
from core.sync_engine.orchestrator import SyncOrchestrator, SyncResult
from core.sync_engine.publisher import SyncState, SyncStatus, SyncStatusPublisher
from core.sync_engine.task_reconciler import TaskReconciler

__all__ = [
    "IdentityResolver",
    "ObjectiveReconciler",
    "ReconciliationContext",
    "SyncOrchestrator",
    "SyncResult",
    "SyncState",
    "SyncStatus",
    "SyncStatusPublisher",
    "TaskReconciler",
]
