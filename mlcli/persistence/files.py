"""Atomic file writes and JSON reads.

Writers go through a temporary file in the destination directory followed
by ``os.replace`` so readers observe either the old or the new content.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from mlcli.errors import InputError


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Write *data* to *path*, replacing any existing file atomically."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def atomic_write_json(path: Path, data: Any) -> None:
    """Pretty-print *data* (two-space indent) and write it atomically."""
    payload = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    atomic_write_bytes(path, payload.encode("utf-8"))


def read_json(path: Path) -> Any:
    """Decode the JSON document at *path*.

    Raises InputError when the file cannot be decoded. A missing file
    propagates as FileNotFoundError so callers can treat absence as state.
    """
    raw = path.read_bytes()
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InputError(f"Could not decode {path}: {exc}") from exc
