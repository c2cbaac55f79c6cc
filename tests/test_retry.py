from __future__ import annotations

import time
from typing import Any

import pytest
import requests

from linearctl.errors import LinearAPIError
from linearctl.retry import RetryConfig, is_transient_error, run_with_retries

RETRY_AFTER_SECONDS: float = 7.0
FLOAT_TOL: float = 0.05


def test_retry_honors_retry_after(monkeypatch: Any) -> None:
    sleeps: list[float] = []
    monkeypatch.setattr(time, "sleep", sleeps.append)
    state = {"count": 0}

    def fn() -> str:
        state["count"] += 1
        if state["count"] == 1:
            raise LinearAPIError("Linear API request failed with 429 (Retry-After: 7)", status=429)
        return "ok"

    assert run_with_retries(fn, cfg=RetryConfig(attempts=3, base_sleep=0.01)) == "ok"
    assert len(sleeps) == 1
    assert abs(sleeps[0] - RETRY_AFTER_SECONDS) <= FLOAT_TOL


def test_retry_max_sleep_cap(monkeypatch: Any) -> None:
    sleeps: list[float] = []
    monkeypatch.setenv("LINEARCTL_RETRY_MAX_SLEEP", "0.05")
    state = {"count": 0}

    def fn() -> str:
        state["count"] += 1
        if state["count"] < 3:
            raise LinearAPIError("GraphQL error: Rate limit exceeded. Retry-After: 30 (RATELIMITED)")
        return "done"

    assert run_with_retries(fn, cfg=RetryConfig(attempts=4, base_sleep=0.02), sleep=sleeps.append) == "done"
    assert len(sleeps) == 2
    assert all(s <= 0.05 for s in sleeps)


def test_non_transient_error_is_not_retried() -> None:
    sleeps: list[float] = []
    calls = {"n": 0}

    def fn() -> None:
        calls["n"] += 1
        raise LinearAPIError("GraphQL error: Entity not found")

    with pytest.raises(LinearAPIError):
        run_with_retries(fn, cfg=RetryConfig(attempts=3, base_sleep=0.01), sleep=sleeps.append)
    assert calls["n"] == 1
    assert sleeps == []


def test_retry_gives_up_after_attempts() -> None:
    sleeps: list[float] = []
    calls = {"n": 0}

    def fn() -> None:
        calls["n"] += 1
        raise requests.ConnectionError("connection reset")

    with pytest.raises(requests.ConnectionError):
        run_with_retries(fn, cfg=RetryConfig(attempts=3, base_sleep=0.0), sleep=sleeps.append)
    assert calls["n"] == 3
    assert len(sleeps) == 2


def test_retry_config_reads_environment(monkeypatch: Any) -> None:
    monkeypatch.setenv("LINEARCTL_RETRY_ATTEMPTS", "5")
    monkeypatch.setenv("LINEARCTL_RETRY_BASE", "1.5")
    cfg = RetryConfig()
    assert cfg.attempts == 5
    assert cfg.base_sleep == 1.5


def test_is_transient_error_classification() -> None:
    assert is_transient_error(requests.Timeout("slow"))
    assert is_transient_error(LinearAPIError("bad gateway", status=502))
    assert is_transient_error(LinearAPIError("x", status=400, response_text="Too Many Requests"))
    assert not is_transient_error(LinearAPIError("forbidden", status=403))
    assert is_transient_error(RuntimeError("read timed out"))
    assert not is_transient_error(LinearAPIError("GraphQL error: Entity not found"))
