from __future__ import annotations

import pytest

from linearctl.models import (
    DEFAULT_CONCURRENCY,
    ExecutionOptions,
    ExecutionSummary,
    OperationResult,
)


def test_operation_result_helpers() -> None:
    ok = OperationResult.ok("ENG-1", name="ENG-1: Fix login")
    bad = OperationResult.failed("ENG-2", "Issue not found")
    assert ok.success and ok.error is None
    assert not bad.success and bad.error == "Issue not found"
    assert ok.to_dict() == {"id": "ENG-1", "success": True, "name": "ENG-1: Fix login"}
    assert bad.to_dict() == {"id": "ENG-2", "success": False, "error": "Issue not found"}


def test_operation_result_rejects_inconsistent_state() -> None:
    with pytest.raises(ValueError):
        OperationResult(id="x", success=True, error="boom")
    with pytest.raises(ValueError):
        OperationResult(id="x", success=False)


def test_summary_from_results_counts() -> None:
    results = [
        OperationResult.ok("a"),
        OperationResult.failed("b", "nope"),
        OperationResult.ok("c"),
    ]
    summary = ExecutionSummary.from_results(results)
    assert (summary.total, summary.succeeded, summary.failed) == (3, 2, 1)
    assert [r.id for r in summary.failures()] == ["b"]
    assert summary.to_dict()["results"][1] == {"id": "b", "success": False, "error": "nope"}


def test_summary_invariants_enforced() -> None:
    with pytest.raises(ValueError):
        ExecutionSummary(total=2, succeeded=1, failed=0, results=(OperationResult.ok("a"),))
    with pytest.raises(ValueError):
        ExecutionSummary(total=1, succeeded=1, failed=0, results=())


def test_empty_summary_is_valid() -> None:
    summary = ExecutionSummary.from_results([])
    assert summary.total == summary.succeeded == summary.failed == 0


def test_execution_options_defaults_and_validation() -> None:
    opts = ExecutionOptions()
    assert opts.show_progress is True
    assert opts.color_enabled is True
    assert opts.concurrency == DEFAULT_CONCURRENCY == 5
    assert opts.force is False
    with pytest.raises(ValueError):
        ExecutionOptions(concurrency=0)
