"""Bulk operation engine.

Provides the shared infrastructure behind the ``--bulk``, ``--bulk-file`` and
``--bulk-stdin`` flags: identifier collection, bounded-concurrency execution
with per-item failure isolation, a live progress line, and the final summary.

The engine knows nothing about Linear. Command handlers supply a per-item
operation returning an :class:`~linearctl.models.OperationResult` (or
raising); the executor turns raised exceptions into failed results so one bad
identifier never stops the rest of the batch.
"""

from __future__ import annotations

import asyncio
import inspect
import re
import sys
import time
from collections.abc import Awaitable, Callable, Iterable, Sequence
from pathlib import Path
from typing import IO, Any, TextIO

from .errors import BulkInputError, error_message
from .logging import get_logger
from .models import ExecutionOptions, ExecutionSummary, OperationResult
from .ux import Colors, colorize, is_interactive

Operation = Callable[[str], Awaitable[OperationResult] | OperationResult]

_ID_SEPARATORS = re.compile(r"[\n\r,\s]+")
PROGRESS_CLEAR_WIDTH = 80


# ---- identifier collection -------------------------------------------------


def parse_ids(text: str) -> list[str]:
    """Split newline-, space- or comma-separated text into identifiers."""
    return [token.strip() for token in _ID_SEPARATORS.split(text) if token.strip()]


def read_ids_from_file(path: str | Path) -> list[str]:
    try:
        content = Path(path).read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError as exc:
        raise BulkInputError(f"File not found: {path}") from exc
    return parse_ids(content)


def read_ids_from_stdin(stream: IO[Any] | None = None) -> list[str]:
    """Read the whole of ``stream`` (default: stdin) and parse identifiers.

    Blocks until EOF; callers only use it when stdin is piped.
    """
    if stream is None:
        stream = getattr(sys.stdin, "buffer", sys.stdin)
    data = stream.read()
    if isinstance(data, bytes):
        data = data.decode("utf-8", errors="replace")
    return parse_ids(data)


def collect_bulk_ids(
    bulk: Sequence[str] | None = None,
    bulk_file: str | Path | None = None,
    bulk_stdin: bool = False,
    *,
    stdin: IO[Any] | None = None,
) -> list[str]:
    """Gather identifiers from inline args, a file and/or stdin.

    Duplicates across sources are dropped, keeping first occurrence.
    """
    all_ids: list[str] = []
    for token in bulk or ():
        all_ids.extend(parse_ids(token))
    if bulk_file:
        all_ids.extend(read_ids_from_file(bulk_file))
    if bulk_stdin:
        all_ids.extend(read_ids_from_stdin(stdin))
    return list(dict.fromkeys(all_ids))


def is_bulk_mode(
    bulk: Sequence[str] | None = None,
    bulk_file: str | Path | None = None,
    bulk_stdin: bool = False,
) -> bool:
    return bool(bulk) or bool(bulk_file) or bool(bulk_stdin)


# ---- progress --------------------------------------------------------------


def _percent(completed: int, total: int) -> int:
    if total <= 0:
        return 100
    # round half up, not banker's rounding
    return int(completed * 100 / total + 0.5)


class ProgressReporter:
    """Single overwriting status line for a bulk run.

    Inactive (writes nothing) unless enabled, the stream is a TTY and there
    is at least one item.
    """

    def __init__(
        self,
        total: int,
        *,
        stream: TextIO | None = None,
        enabled: bool = True,
        color_enabled: bool = True,
    ) -> None:
        self.total = total
        self.stream = stream or sys.stdout
        self.color_enabled = color_enabled
        self.active = enabled and total > 0 and is_interactive(self.stream)
        self._written = False

    def render(self, completed: int, succeeded: int, failed: int) -> str:
        percent = _percent(completed, self.total)
        if self.color_enabled:
            return (
                f"⏳ Processing: {completed}/{self.total} ({percent}%)"
                f" - ✓ {succeeded} ✗ {failed}"
            )
        return (
            f"Processing: {completed}/{self.total} ({percent}%)"
            f" - OK: {succeeded} Failed: {failed}"
        )

    def update(self, completed: int, succeeded: int, failed: int) -> None:
        if not self.active:
            return
        self.stream.write("\r" + self.render(completed, succeeded, failed))
        self.stream.flush()
        self._written = True

    def clear(self) -> None:
        if not self.active or not self._written:
            return
        self.stream.write("\r" + " " * PROGRESS_CLEAR_WIDTH + "\r")
        self.stream.flush()


# ---- execution -------------------------------------------------------------


class _Tally:
    def __init__(self) -> None:
        self.completed = 0
        self.succeeded = 0
        self.failed = 0

    def record(self, result: OperationResult) -> None:
        self.completed += 1
        if result.success:
            self.succeeded += 1
        else:
            self.failed += 1


async def _invoke(operation: Operation, item: str) -> OperationResult:
    """Run ``operation`` for one item.

    Coroutine functions are awaited directly; plain callables run on the
    loop's default executor so blocking HTTP calls overlap.
    """
    if inspect.iscoroutinefunction(operation):
        result: Any = await operation(item)
    else:
        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, operation, item)
        if inspect.isawaitable(result):
            result = await result
    if not isinstance(result, OperationResult):
        raise TypeError(
            f"bulk operation returned {type(result).__name__}, expected OperationResult"
        )
    return result


class BulkExecutor:
    """Runs an operation over identifiers in sequential, bounded batches.

    Each batch holds at most ``options.concurrency`` items; all of them are
    launched together and joined before the next batch starts. Results keep
    dispatch order.
    """

    def __init__(self, options: ExecutionOptions | None = None, *, stream: TextIO | None = None):
        self.options = options or ExecutionOptions()
        self.stream = stream
        self.logger = get_logger()

    async def run(
        self, items: Iterable[str], operation: Operation, *, action: str = "bulk"
    ) -> ExecutionSummary:
        work = list(items)
        total = len(work)
        batch_size = self.options.concurrency
        reporter = ProgressReporter(
            total,
            stream=self.stream,
            enabled=self.options.show_progress,
            color_enabled=self.options.color_enabled,
        )
        tally = _Tally()
        results: list[OperationResult] = []

        async def run_item(item: str) -> OperationResult:
            try:
                result = await _invoke(operation, item)
            except Exception as exc:
                result = OperationResult.failed(item, error_message(exc))
            tally.record(result)
            reporter.update(tally.completed, tally.succeeded, tally.failed)
            self.logger.log_item_action(action, result.id, result.success, result.error)
            return result

        self.logger.log_operation(
            "bulk_start", action=action, item_count=total, concurrency=batch_size
        )
        start = time.perf_counter()
        try:
            for i in range(0, total, batch_size):
                batch = work[i : i + batch_size]
                results.extend(await asyncio.gather(*(run_item(item) for item in batch)))
        finally:
            reporter.clear()

        summary = ExecutionSummary.from_results(results)
        self.logger.log_performance(
            "bulk_complete",
            (time.perf_counter() - start) * 1000,
            action=action,
            total=summary.total,
            succeeded=summary.succeeded,
            failed=summary.failed,
        )
        return summary


async def execute_bulk(
    items: Iterable[str],
    operation: Operation,
    options: ExecutionOptions | None = None,
    *,
    stream: TextIO | None = None,
    action: str = "bulk",
) -> ExecutionSummary:
    return await BulkExecutor(options, stream=stream).run(items, operation, action=action)


def run_bulk(
    items: Iterable[str],
    operation: Operation,
    options: ExecutionOptions | None = None,
    *,
    stream: TextIO | None = None,
    action: str = "bulk",
) -> ExecutionSummary:
    """Synchronous entry point for command handlers."""
    return asyncio.run(execute_bulk(items, operation, options, stream=stream, action=action))


# ---- summary ---------------------------------------------------------------


def _plural(entity_name: str, count: int) -> str:
    return entity_name if count == 1 else f"{entity_name}s"


def _default_verb(operation_name: str) -> str:
    # "deleted" -> "delete", "archived" -> "archive"
    return operation_name[:-1] if operation_name.endswith("ed") else operation_name


def format_bulk_summary(
    summary: ExecutionSummary,
    *,
    entity_name: str,
    operation_name: str,
    operation_verb: str | None = None,
    color_enabled: bool = True,
    show_details: bool = True,
    stream: TextIO | None = None,
) -> list[str]:
    verb = operation_verb or _default_verb(operation_name)

    def icon(glyph: str, color: str, plain: str) -> str:
        if not color_enabled:
            return plain
        return colorize(glyph, color, bold=True, stream=stream)

    lines = [""]
    if summary.failed == 0:
        lines.append(
            f"{icon('✓', Colors.GREEN, 'OK:')} Successfully {operation_name} "
            f"{summary.succeeded} {_plural(entity_name, summary.succeeded)}"
        )
    elif summary.succeeded == 0:
        lines.append(
            f"{icon('✗', Colors.RED, 'FAILED:')} Failed to {verb} all "
            f"{summary.total} {_plural(entity_name, summary.total)}"
        )
    else:
        lines.append(
            f"Completed: {summary.succeeded}/{summary.total} "
            f"{_plural(entity_name, summary.total)} {operation_name}"
        )
        ok = icon("✓ ", Colors.GREEN, "")
        bad = icon("✗ ", Colors.RED, "")
        lines.append(f"  {ok}Succeeded: {summary.succeeded}")
        lines.append(f"  {bad}Failed: {summary.failed}")

    if show_details and summary.failed > 0:
        lines.append("")
        lines.append("Failed operations:")
        for result in summary.failures():
            name = f" ({result.name})" if result.name else ""
            lines.append(f"  - {result.id}{name}: {result.error or 'Unknown error'}")
    return lines


def print_bulk_summary(
    summary: ExecutionSummary,
    *,
    entity_name: str,
    operation_name: str,
    operation_verb: str | None = None,
    color_enabled: bool = True,
    show_details: bool = True,
    stream: TextIO | None = None,
) -> None:
    stream = stream or sys.stdout
    for line in format_bulk_summary(
        summary,
        entity_name=entity_name,
        operation_name=operation_name,
        operation_verb=operation_verb,
        color_enabled=color_enabled,
        show_details=show_details,
        stream=stream,
    ):
        print(line, file=stream)


__all__ = [
    "BulkExecutor",
    "Operation",
    "ProgressReporter",
    "collect_bulk_ids",
    "execute_bulk",
    "format_bulk_summary",
    "is_bulk_mode",
    "parse_ids",
    "print_bulk_summary",
    "read_ids_from_file",
    "read_ids_from_stdin",
    "run_bulk",
]
