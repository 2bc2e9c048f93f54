"""Configuration resolution: CLI flags, user config file, env and runtime file."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

from roborev_tui.collectors import DEFAULT_SERVER, DEFAULT_TIMEOUT

DEFAULT_REFRESH_SECONDS = 2
DEFAULT_JOB_LIMIT = 50
RUNTIME_FILE = "daemon.json"


@dataclass(frozen=True)
class Config:
    server: str = DEFAULT_SERVER
    refresh_seconds: int = DEFAULT_REFRESH_SECONDS
    job_limit: int = DEFAULT_JOB_LIMIT
    request_timeout: float = DEFAULT_TIMEOUT


def load_user_config(path: str | None) -> dict:
    if not path:
        return {}

    config_path = Path(path)
    if not config_path.exists():
        raise ValueError(f"config path not found: {config_path}")

    try:
        data = json.loads(config_path.read_text())
    except json.JSONDecodeError as exc:
        raise ValueError(f"invalid JSON config: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError("config must be a JSON object")
    return data


def data_dir(env: dict[str, str] | None = None) -> Path:
    env = os.environ if env is None else env
    override = env.get("ROBOREV_DATA_DIR")
    if override:
        return Path(override)
    return Path.home() / ".roborev"


def discover_server(env: dict[str, str] | None = None) -> str | None:
    """Read the address a running daemon advertised in its runtime file."""
    path = data_dir(env) / RUNTIME_FILE
    try:
        info = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError):
        return None
    addr = info.get("addr") if isinstance(info, dict) else None
    if not addr:
        return None
    addr = str(addr)
    if "://" not in addr:
        addr = f"http://{addr}"
    return addr


def resolve_config(
    server: str | None = None,
    config_path: str | None = None,
    refresh: int | None = None,
    limit: int | None = None,
    env: dict[str, str] | None = None,
) -> Config:
    env = os.environ if env is None else env
    user_config = load_user_config(config_path)

    resolved_server = (
        server
        or user_config.get("server")
        or env.get("ROBOREV_SERVER")
        or discover_server(env)
        or DEFAULT_SERVER
    )

    refresh_value = refresh if refresh is not None else user_config.get("refresh_seconds", DEFAULT_REFRESH_SECONDS)
    limit_value = limit if limit is not None else user_config.get("job_limit", DEFAULT_JOB_LIMIT)
    timeout_value = user_config.get("request_timeout", DEFAULT_TIMEOUT)

    try:
        return Config(
            server=str(resolved_server).rstrip("/"),
            refresh_seconds=max(1, int(refresh_value)),
            job_limit=max(1, int(limit_value)),
            request_timeout=max(0.1, float(timeout_value)),
        )
    except (TypeError, ValueError) as exc:
        raise ValueError(f"invalid config value: {exc}") from exc
