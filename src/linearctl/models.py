from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

DEFAULT_CONCURRENCY = 5


@dataclass(frozen=True)
class OperationResult:
    """Outcome of applying a bulk operation to one identifier.

    ``id`` starts out as the identifier the operation was invoked with; domain
    operations replace it with the canonical ID once resolved. ``error`` is
    present exactly when ``success`` is false.
    """

    id: str
    success: bool
    name: str | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        if self.success and self.error:
            raise ValueError(f"successful result for {self.id!r} must not carry an error")
        if not self.success and not self.error:
            raise ValueError(f"failed result for {self.id!r} requires an error message")

    @classmethod
    def ok(cls, id: str, name: str | None = None) -> OperationResult:  # noqa: A002
        return cls(id=id, success=True, name=name)

    @classmethod
    def failed(cls, id: str, error: str, name: str | None = None) -> OperationResult:  # noqa: A002
        return cls(id=id, success=False, name=name, error=error)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"id": self.id, "success": self.success}
        if self.name is not None:
            out["name"] = self.name
        if self.error is not None:
            out["error"] = self.error
        return out


@dataclass(frozen=True)
class ExecutionSummary:
    total: int
    succeeded: int
    failed: int
    results: tuple[OperationResult, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.succeeded + self.failed != self.total:
            raise ValueError("succeeded + failed must equal total")
        if len(self.results) != self.total:
            raise ValueError("summary must hold exactly one result per item")

    @classmethod
    def from_results(cls, results: list[OperationResult]) -> ExecutionSummary:
        succeeded = sum(1 for r in results if r.success)
        return cls(
            total=len(results),
            succeeded=succeeded,
            failed=len(results) - succeeded,
            results=tuple(results),
        )

    def failures(self) -> list[OperationResult]:
        return [r for r in self.results if not r.success]

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "results": [r.to_dict() for r in self.results],
        }


@dataclass
class ExecutionOptions:
    """Knobs for a bulk run.

    ``force`` is read by command handlers to skip confirmation; the executor
    ignores it.
    """

    show_progress: bool = True
    color_enabled: bool = True
    concurrency: int = DEFAULT_CONCURRENCY
    force: bool = False

    def __post_init__(self) -> None:
        if self.concurrency < 1:
            raise ValueError(f"concurrency must be >= 1 (got {self.concurrency})")


__all__ = [
    "DEFAULT_CONCURRENCY",
    "ExecutionOptions",
    "ExecutionSummary",
    "OperationResult",
]
