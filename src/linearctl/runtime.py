"""Runtime helpers for linearctl CLI orchestration."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any, Protocol

from linearctl.config import CliConfig, load_config
from linearctl.logging import configure_logging, get_logger


class _HandlerCallable(Protocol):
    def __call__(self) -> Any: ...


def _log_level(args: Any, cfg: CliConfig) -> str:
    if getattr(args, "verbose", False):
        return "DEBUG"
    if getattr(args, "quiet", False):
        return "ERROR"
    return cfg.logging_level


def prepare_config(
    args: Any, *, loader: Callable[[str | None], CliConfig] = load_config
) -> CliConfig:
    """Load CliConfig for the given argparse namespace and apply CLI overrides."""
    cfg = loader(getattr(args, "config", None))
    if getattr(args, "no_color", False):
        cfg.color_enabled = False
    team = getattr(args, "team", None)
    if team:
        cfg.team_key = str(team).upper()
    concurrency = getattr(args, "concurrency", None)
    if concurrency is not None:
        cfg.bulk_concurrency = int(concurrency)
    if getattr(args, "no_progress", False):
        cfg.show_progress = False
    configure_logging(json_logging=cfg.logging_json_enabled, level=_log_level(args, cfg))
    get_logger().info(
        "configuration loaded", source=str(cfg.source_file) if cfg.source_file else "defaults"
    )
    return cfg


def _instrument_command(command: str, exit_code: int, start_time: float) -> None:
    duration = max(0.0, time.monotonic() - start_time)
    get_logger().log_performance(f"command:{command}", duration * 1000, exit_code=exit_code)


def execute_command(handler: _HandlerCallable, command: str) -> int:
    """Execute a command handler and log its duration and exit code."""
    start = time.monotonic()
    try:
        result = handler()
        exit_code = int(result) if result is not None else 0
    except SystemExit as exc:
        exit_code = exc.code if isinstance(exc.code, int) else 1
        _instrument_command(command, exit_code, start)
        raise
    except Exception:
        _instrument_command(command, 1, start)
        raise
    _instrument_command(command, exit_code, start)
    return exit_code


__all__ = ["prepare_config", "execute_command"]
