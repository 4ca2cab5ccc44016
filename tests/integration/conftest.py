"""Shared fixtures for mlcli integration tests.

Builds a work directory populated through the importer, the same way an
operator would: a first snapshot of several jobs, then a second snapshot
in which some jobs changed.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from mlcli.auth.gate import AccessGate
from mlcli.config import load_config
from mlcli.ledger.importer import import_file
from mlcli.ledger.version_store import VersionStore
from mlcli.models.config import MlcliConfig
from mlcli.persistence.state import CredentialStore


def _write(path: Path, entries: list[dict[str, Any]]) -> Path:
    path.write_text(json.dumps(entries, indent=2))
    return path


@pytest.fixture
def config(tmp_path: Path) -> MlcliConfig:
    return load_config(tmp_path / "work")


@pytest.fixture
def snapshots(tmp_path: Path, make_entry) -> tuple[Path, Path]:
    """Two import files; the second changes job_a, keeps job_b, adds job_c."""
    first = _write(
        tmp_path / "snapshot-1.json",
        [
            make_entry("job_a", description="Detects rare logins"),
            make_entry("job_b", description="Unusual process starts"),
        ],
    )
    changed_a = make_entry("job_a", description="Detects rare logins by user", groups=["security"])
    second = _write(
        tmp_path / "snapshot-2.json",
        [
            changed_a,
            make_entry("job_b", description="Unusual process starts"),
            make_entry("job_c", description="DNS tunneling"),
        ],
    )
    return first, second


@pytest.fixture
def populated_store(config: MlcliConfig, snapshots: tuple[Path, Path]) -> VersionStore:
    store = VersionStore.open(config.store.jobs_dir)
    for snapshot in snapshots:
        import_file(store, snapshot)
    return store


@pytest.fixture
def api_key(config: MlcliConfig) -> str:
    return AccessGate(CredentialStore(config.store.auth_file)).generate()
