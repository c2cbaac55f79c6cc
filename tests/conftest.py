"""Pytest configuration for linearctl tests.

Ensures the in-repo `src` directory is on `sys.path` so the package can be
imported without an editable install (`pip install -e .`).
"""

from __future__ import annotations

import re
import sys
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

_TEST_START_TIMES: dict[str, float] = {}
_TEST_DURATIONS: list[tuple[str, float]] = []

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

_ISOLATED_ENV = (
    "LINEAR_API_KEY",
    "LINEAR_GRAPHQL_ENDPOINT",
    "LINEAR_TEAM_ID",
    "NO_COLOR",
    "LINEARCTL_QUIET",
    "LINEARCTL_RETRY_ATTEMPTS",
    "LINEARCTL_RETRY_BASE",
    "LINEARCTL_RETRY_MAX_SLEEP",
)

_OPERATION_NAME = re.compile(r"\b(?:query|mutation)\s+(\w+)")


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    # setenv first so values written later (e.g. by load_dotenv) are undone too
    for name in _ISOLATED_ENV:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    import linearctl.logging as linear_logging

    monkeypatch.setattr(linear_logging, "_current", None)


class ScriptedClient:
    """GraphQL requester double keyed by operation name.

    Each handler is either a response mapping, an exception instance to raise,
    or a callable receiving the variables.
    """

    def __init__(self, handlers: dict[str, Any]):
        self.handlers = handlers
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def request(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        match = _OPERATION_NAME.search(query)
        if match is None:
            raise AssertionError(f"unnamed GraphQL document: {query!r}")
        name = match.group(1)
        variables = dict(variables or {})
        self.calls.append((name, variables))
        if name not in self.handlers:
            raise AssertionError(f"no handler scripted for {name}")
        handler = self.handlers[name]
        if isinstance(handler, BaseException):
            raise handler
        if callable(handler):
            return handler(variables)
        return handler

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]


@pytest.fixture
def scripted_client() -> Callable[[dict[str, Any]], ScriptedClient]:
    return ScriptedClient


# --- Timing utilities to help identify slow/stalling tests ---


def pytest_runtest_setup(item):  # type: ignore
    _TEST_START_TIMES[item.nodeid] = time.perf_counter()


def pytest_runtest_teardown(item):  # type: ignore
    start = _TEST_START_TIMES.pop(item.nodeid, None)
    if start is not None:
        _TEST_DURATIONS.append((item.nodeid, time.perf_counter() - start))


def pytest_sessionfinish(session, exitstatus):  # type: ignore
    if not _TEST_DURATIONS:
        return
    slow = sorted(_TEST_DURATIONS, key=lambda x: x[1], reverse=True)[:10]
    print("\n=== Slowest Tests (top 10) ===")
    for nodeid, secs in slow:
        print(f"{secs:0.3f}s  {nodeid}")
