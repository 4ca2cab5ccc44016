"""Configuration loading from environment variables."""

from __future__ import annotations

import os
from pathlib import Path

from mlcli.models.config import (
    APIConfig,
    LogConfig,
    MlcliConfig,
    SearchConfig,
    StoreConfig,
)


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"MLCLI_{key}", default)


def _env_int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    val = int(_env(key, str(default)))
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _env_float(key: str, default: float, min_val: float | None = None, max_val: float | None = None) -> float:
    val = float(_env(key, str(default)))
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def load_config(workdir: str | Path | None = None) -> MlcliConfig:
    """Load configuration from MLCLI_* environment variables.

    An explicit *workdir* (from the ``--workdir`` flag) wins over
    ``MLCLI_WORKDIR``.
    """
    root = Path(workdir) if workdir else Path(_env("WORKDIR") or Path.cwd())
    return MlcliConfig(
        store=StoreConfig(workdir=root.expanduser().resolve()),
        search=SearchConfig(
            threshold=_env_float("SEARCH_THRESHOLD", 0.3, min_val=0.0, max_val=1.0),
        ),
        api=APIConfig(
            host=_env("API_HOST", "127.0.0.1"),
            port=_env_int("API_PORT", 3000, min_val=1, max_val=65535),
        ),
        log=LogConfig(
            level=_validate_log_level(_env("LOG_LEVEL", "warning")),
        ),
    )
