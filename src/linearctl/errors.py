"""Error taxonomy & redaction helpers.

Central place for the exceptions linearctl raises at its seams and for
turning arbitrary failures into safe, human-readable text.

Public API:
- classify_error(exc) -> ErrorInfo
- redact(text) -> str
- error_message(exc) -> str

``error_message`` is the one conversion used whenever a per-item failure is
recorded in a bulk summary, so every reported error goes through redaction.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

_SENSITIVE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"lin_api_[A-Za-z0-9]{16,}"),  # Linear personal API keys
    re.compile(r"lin_oauth_[A-Za-z0-9]{16,}"),  # Linear OAuth tokens
    re.compile(r"(?<=Bearer )[A-Za-z0-9._\-]{8,}"),
]

_REDACTION_PLACEHOLDER = "<redacted>"


class LinearAPIError(RuntimeError):
    """Raised when the Linear GraphQL API returns an error."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        response_text: str | None = None,
    ):
        super().__init__(message)
        self.status = status
        self.response_text = response_text


class ConfigError(RuntimeError):
    pass


class BulkInputError(RuntimeError):
    """Raised when bulk identifiers cannot be collected (e.g. missing file)."""


@dataclass
class ErrorInfo:
    category: str
    message: str
    original_type: str
    transient: bool = False


def redact(text: str) -> str:
    """Replace API keys and bearer tokens in ``text`` with a placeholder."""
    if not text:
        return text
    redacted = text
    for pat in _SENSITIVE_PATTERNS:
        redacted = pat.sub(_REDACTION_PLACEHOLDER, redacted)
    return redacted


def error_message(exc: BaseException) -> str:
    """Display string for a failure: its message, else its type name."""
    msg = str(exc).strip()
    if not msg:
        msg = exc.__class__.__name__
    return redact(msg)


def classify_error(exc: BaseException) -> ErrorInfo:
    """Best-effort classification of an exception.

    - HTTP 429 or rate limit wording -> 'linear.rate_limit', transient
    - Network-y keywords -> 'network', transient
    - HTTP 401/403 or authentication wording -> 'auth'
    - not found wording -> 'not_found'
    - Fallback -> 'generic'
    """
    msg = str(exc) if exc else ""
    low = msg.lower()
    status = getattr(exc, "status", None)
    kind = exc.__class__.__name__

    if status == 429 or "rate limit" in low or "ratelimited" in low:  # noqa: PLR2004
        return ErrorInfo("linear.rate_limit", redact(msg), kind, transient=True)
    if any(k in low for k in ("timeout", "timed out", "connection reset", "temporarily unavailable")):
        return ErrorInfo("network", redact(msg), kind, transient=True)
    if status in (401, 403) or "authentication" in low or "unauthorized" in low:
        return ErrorInfo("auth", redact(msg), kind)
    if "not found" in low:
        return ErrorInfo("not_found", redact(msg), kind)
    return ErrorInfo("generic", redact(msg), kind)


__all__ = [
    "BulkInputError",
    "ConfigError",
    "ErrorInfo",
    "LinearAPIError",
    "classify_error",
    "error_message",
    "redact",
]
