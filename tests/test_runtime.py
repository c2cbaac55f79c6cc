from __future__ import annotations

import argparse
import logging
from pathlib import Path

import pytest

from linearctl.config import load_config
from linearctl.runtime import execute_command, prepare_config


def _args(**overrides: object) -> argparse.Namespace:
    base: dict[str, object] = {
        "config": None,
        "no_color": False,
        "team": None,
        "concurrency": None,
        "no_progress": False,
        "verbose": False,
        "quiet": False,
    }
    base.update(overrides)
    return argparse.Namespace(**base)


def _loader(tmp_path: Path):  # type: ignore[no-untyped-def]
    return lambda path: load_config(path, cwd=tmp_path, env={})


def test_prepare_config_applies_cli_overrides(tmp_path: Path) -> None:
    args = _args(no_color=True, team="ops", concurrency=2, no_progress=True, verbose=True)
    cfg = prepare_config(args, loader=_loader(tmp_path))
    assert cfg.color_enabled is False
    assert cfg.team_key == "OPS"
    assert cfg.bulk_concurrency == 2
    assert cfg.show_progress is False
    assert logging.getLogger("linearctl").level == logging.DEBUG


def test_prepare_config_quiet_sets_error_level(tmp_path: Path) -> None:
    prepare_config(_args(quiet=True), loader=_loader(tmp_path))
    assert logging.getLogger("linearctl").level == logging.ERROR


def test_prepare_config_logs_config_source_when_verbose(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    prepare_config(_args(verbose=True), loader=_loader(tmp_path))
    assert "configuration loaded" in capsys.readouterr().err


def test_execute_command_returns_exit_code() -> None:
    assert execute_command(lambda: 3, "issue delete") == 3
    assert execute_command(lambda: None, "issue delete") == 0


def test_execute_command_reraises_errors() -> None:
    def boom() -> int:
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        execute_command(boom, "team delete")

    def leave() -> int:
        raise SystemExit(2)

    with pytest.raises(SystemExit):
        execute_command(leave, "team delete")
