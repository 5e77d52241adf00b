"""
Unit tests for the smoke workload script, run in --dry-run mode.
"""

import importlib.util
import logging
from pathlib import Path

import pytest

from graphstore.core.logging import clear_worker_id

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "smoke_workload.py"


@pytest.fixture(scope="module")
def smoke():
    spec = importlib.util.spec_from_file_location("smoke_workload", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture(autouse=True)
def _restore_logging():
    yield
    logger = logging.getLogger("graphstore")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    clear_worker_id()


def test_dry_run_succeeds(smoke, monkeypatch, capsys) -> None:
    monkeypatch.setattr("sys.argv", ["smoke_workload.py", "--dry-run", "--records", "5"])

    smoke.main()

    out = capsys.readouterr().out
    assert "insert" in out and "OK=5" in out
    assert "read-after-delete" in out and "NOT_FOUND=5" in out
    assert "Workload completed" in out


def test_unexpected_status_fails(smoke) -> None:
    counts = {"insert": {"OK": 4, "ERROR": 1}}

    assert smoke._failed(counts)


def test_not_found_expected_after_delete(smoke) -> None:
    assert not smoke._failed({"read-after-delete": {"NOT_FOUND": 3}, "delete": {"OK": 3}})
