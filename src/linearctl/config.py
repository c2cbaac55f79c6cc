from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

import yaml
from dotenv import load_dotenv

from .errors import ConfigError
from .graphql import DEFAULT_GRAPHQL_URL
from .logging import DEFAULT_LEVEL
from .models import DEFAULT_CONCURRENCY

CONFIG_CANDIDATES = ("linearctl.config.yaml", ".linear.yaml")


@dataclass
class CliConfig:
    source_file: Path | None
    api_key: str | None
    graphql_endpoint: str
    team_key: str | None
    bulk_concurrency: int
    show_progress: bool
    color_enabled: bool
    # Logging configuration
    logging_json_enabled: bool
    logging_level: str
    # Environment loading
    load_dotenv: bool
    dotenv_path: str | None


def _resolve_env_var(value: Any, env: Mapping[str, str]) -> Any:
    """Resolve environment variable if value starts with $."""
    if isinstance(value, str) and value.startswith('$'):
        return env.get(value[1:])
    return value


def _find_config(cwd: Path) -> Path | None:
    for name in CONFIG_CANDIDATES:
        candidate = cwd / name
        if candidate.is_file():
            return candidate
    return None


def _read_yaml(p: Path) -> dict[str, Any]:
    try:
        raw = yaml.safe_load(p.read_text(encoding='utf-8'))
    except yaml.YAMLError as exc:
        raise ConfigError(f'Invalid configuration file {p}: {exc}') from exc
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f'Configuration file {p} must contain a mapping')
    return cast(dict[str, Any], raw)


def _load_env_file(enabled: bool, dotenv_path: str | None, base: Path) -> None:
    if not enabled:
        return
    candidate = Path(dotenv_path) if dotenv_path else base / '.env'
    if not candidate.is_absolute():
        candidate = base / candidate
    if candidate.is_file():
        load_dotenv(candidate, override=False)


def load_config(
    path: str | Path | None = None,
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> CliConfig:
    """Load ``CliConfig`` from YAML plus environment overrides.

    An explicit ``path`` must exist. Without one the working directory is
    searched for a known config filename; when none is found, defaults apply.
    """
    base = cwd or Path.cwd()
    p: Path | None
    if path is not None:
        p = Path(path)
        if not p.exists():
            raise ConfigError(f'Configuration file not found: {p}')
    else:
        p = _find_config(base)
    raw = _read_yaml(p) if p is not None else {}

    api = cast(dict[str, Any], raw.get('api', {}) or {})
    defaults = cast(dict[str, Any], raw.get('defaults', {}) or {})
    bulk = cast(dict[str, Any], raw.get('bulk', {}) or {})
    out = cast(dict[str, Any], raw.get('output', {}) or {})
    logging_config = cast(dict[str, Any], raw.get('logging', {}) or {})
    env_config = cast(dict[str, Any], raw.get('environment', {}) or {})

    load_env = bool(env_config.get('load_dotenv', True))
    dotenv_path = env_config.get('dotenv_path')
    if env is None:
        _load_env_file(load_env, dotenv_path, p.parent if p is not None else base)
        env = os.environ

    try:
        concurrency = int(bulk.get('concurrency', DEFAULT_CONCURRENCY))
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"bulk.concurrency must be an integer: {bulk.get('concurrency')!r}") from exc
    if concurrency < 1:
        raise ConfigError(f'bulk.concurrency must be >= 1 (got {concurrency})')

    api_key = env.get('LINEAR_API_KEY') or _resolve_env_var(api.get('key'), env)
    endpoint = env.get('LINEAR_GRAPHQL_ENDPOINT') or _resolve_env_var(
        api.get('endpoint'), env
    )
    team_key = env.get('LINEAR_TEAM_ID') or _resolve_env_var(defaults.get('team'), env)
    color_enabled = bool(out.get('color', True)) and not env.get('NO_COLOR')

    return CliConfig(
        source_file=p,
        api_key=api_key or None,
        graphql_endpoint=endpoint or DEFAULT_GRAPHQL_URL,
        team_key=str(team_key).upper() if team_key else None,
        bulk_concurrency=concurrency,
        show_progress=bool(bulk.get('show_progress', True)),
        color_enabled=color_enabled,
        # Logging configuration
        logging_json_enabled=bool(logging_config.get('json_enabled', False)),
        logging_level=str(logging_config.get('level', DEFAULT_LEVEL)),
        load_dotenv=load_env,
        dotenv_path=dotenv_path,
    )


__all__ = ["CONFIG_CANDIDATES", "CliConfig", "ConfigError", "load_config"]
