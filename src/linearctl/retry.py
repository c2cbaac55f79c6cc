"""Retry / backoff for Linear API calls.

``run_with_retries`` wraps a thunk with exponential backoff plus jitter and
retries only transient API failures: rate limiting (HTTP 429 or a
``RATELIMITED`` GraphQL error), gateway errors, and dropped connections or
timeouts. Other failures propagate immediately.

Environment overrides:
  LINEARCTL_RETRY_ATTEMPTS (default 3)
  LINEARCTL_RETRY_BASE (seconds base, default 0.5)
  LINEARCTL_RETRY_MAX_SLEEP (cap on any single sleep)
"""

from __future__ import annotations

import os
import random
import re
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TypeVar

import requests

from .errors import classify_error
from .logging import get_logger

T = TypeVar("T")

TRANSIENT_TOKENS = ("rate limit", "ratelimited", "too many requests")
TRANSIENT_STATUSES = frozenset({429, 502, 503, 504})

# "Retry-After: 12", "retry after 12", "wait 30 seconds"
_BACKOFF_HINTS = (
    re.compile(r"retry[-\s]after:?\s*(\d+)", re.IGNORECASE),
    re.compile(r"wait\s*(\d+)\s*seconds", re.IGNORECASE),
)
_JITTER = random.SystemRandom()


def _hinted_backoff(text: str) -> float | None:
    """Seconds requested by the server in ``text``, if any (must be > 0)."""
    for pattern in _BACKOFF_HINTS:
        found = pattern.search(text or "")
        if found:
            seconds = float(found.group(1))
            return seconds if seconds > 0 else None
    return None


def _sleep_cap() -> float | None:
    raw = os.environ.get("LINEARCTL_RETRY_MAX_SLEEP")
    if not raw:
        return None
    try:
        cap = float(raw)
    except ValueError:
        return None
    return cap if cap >= 0 else None


@dataclass
class RetryConfig:
    attempts: int = field(
        default_factory=lambda: int(os.environ.get("LINEARCTL_RETRY_ATTEMPTS", "3"))
    )
    base_sleep: float = field(
        default_factory=lambda: float(os.environ.get("LINEARCTL_RETRY_BASE", "0.5"))
    )

    def delay(self, attempt: int, error_text: str) -> float:
        """Sleep before retry number ``attempt`` (1-based)."""
        hinted = _hinted_backoff(error_text)
        if hinted is not None:
            delay = hinted
        else:
            delay = self.base_sleep * 2 ** (attempt - 1) + _JITTER.uniform(0, 0.25)
        cap = _sleep_cap()
        return min(delay, cap) if cap is not None else delay


def _error_text(exc: BaseException) -> str:
    return " ".join(filter(None, [str(exc), getattr(exc, "response_text", None)]))


def is_transient(text: str) -> bool:
    lowered = text.lower()
    return any(token in lowered for token in TRANSIENT_TOKENS)


def is_transient_error(exc: BaseException) -> bool:
    if isinstance(exc, (requests.ConnectionError, requests.Timeout)):
        return True
    if getattr(exc, "status", None) in TRANSIENT_STATUSES:
        return True
    if classify_error(exc).transient:
        return True
    return is_transient(getattr(exc, "response_text", None) or "")


def run_with_retries(
    fn: Callable[[], T],
    *,
    cfg: RetryConfig | None = None,
    sleep: Callable[[float], None] | None = None,
) -> T:
    cfg = cfg or RetryConfig()
    attempts = max(1, cfg.attempts)
    attempt = 1
    while True:
        try:
            return fn()
        except Exception as exc:
            if attempt >= attempts or not is_transient_error(exc):
                raise
            delay = cfg.delay(attempt, _error_text(exc))
            get_logger().warning(
                f"[retry] transient error, attempt {attempt}/{attempts}, sleeping {delay:.2f}s",
                error=str(exc),
            )
            (sleep or time.sleep)(delay)
            attempt += 1


__all__ = ["RetryConfig", "is_transient", "is_transient_error", "run_with_retries"]
