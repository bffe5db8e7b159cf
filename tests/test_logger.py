import asyncio
import logging

import pytest

from conftest import make_objective
from core.logger import ROOT_LOGGER_NAME, get_logger, setup_logging
from core.sync_engine.identity import ReconciliationContext
from core.sync_engine.objective_reconciler import ObjectiveReconciler


@pytest.fixture
def logs_dir(tmp_path):
    target = tmp_path / "logs"
    setup_logging(logs_dir=target)
    yield target
    root = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root.handlers):
        handler.close()
    root.handlers.clear()


def _flush():
    for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers:
        handler.flush()


def test_sync_log_keeps_only_reconciliation_records(logs_dir):
    get_logger("sync.tasks").info("Deferring task: Morning run")
    get_logger("api").info("GET /api/objectives")
    _flush()

    sync_log = (logs_dir / "sync.log").read_text(encoding="utf-8")
    system_log = (logs_dir / "system.log").read_text(encoding="utf-8")
    assert "Deferring task: Morning run" in sync_log
    assert "GET /api/objectives" not in sync_log
    assert "GET /api/objectives" in system_log


def test_itemized_failure_lands_in_sync_and_error_logs(logs_dir, remote, store):
    remote.fail_objective_names.add("Broken")
    store.add_objective(make_objective("o1", "Broken"))

    asyncio.run(ObjectiveReconciler(remote, store).reconcile(ReconciliationContext()))
    _flush()

    assert 'Failed to upload objective "Broken"' in (logs_dir / "sync.log").read_text(encoding="utf-8")
    assert 'Failed to upload objective "Broken"' in (logs_dir / "error.log").read_text(encoding="utf-8")


def test_repeated_setup_does_not_duplicate_handlers(logs_dir):
    setup_logging(logs_dir=logs_dir)

    assert len(logging.getLogger(ROOT_LOGGER_NAME).handlers) == 4
