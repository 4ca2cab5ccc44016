"""Tests for environment-driven configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from mlcli.config import load_config


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("WORKDIR", "SEARCH_THRESHOLD", "API_HOST", "API_PORT", "LOG_LEVEL"):
        monkeypatch.delenv(f"MLCLI_{key}", raising=False)


def test_defaults(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    config = load_config()

    assert config.store.workdir == tmp_path.resolve()
    assert config.store.jobs_dir == tmp_path.resolve() / "jobs"
    assert config.store.settings_file == tmp_path.resolve() / ".mlcli" / "settings.json"
    assert config.store.auth_file == tmp_path.resolve() / ".mlcli" / "auth.json"
    assert config.store.exports_dir == tmp_path.resolve() / "exports"
    assert config.search.threshold == 0.3
    assert config.api.port == 3000
    assert config.api.host == "127.0.0.1"
    assert config.log.level == "warning"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("MLCLI_WORKDIR", str(tmp_path))
    monkeypatch.setenv("MLCLI_SEARCH_THRESHOLD", "0.5")
    monkeypatch.setenv("MLCLI_API_PORT", "8088")
    monkeypatch.setenv("MLCLI_LOG_LEVEL", "DEBUG")

    config = load_config()

    assert config.store.workdir == tmp_path.resolve()
    assert config.search.threshold == 0.5
    assert config.api.port == 8088
    assert config.log.level == "debug"


def test_explicit_workdir_wins(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("MLCLI_WORKDIR", str(tmp_path / "env"))
    assert load_config(tmp_path / "flag").store.workdir == (tmp_path / "flag").resolve()


def test_values_are_clamped(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MLCLI_SEARCH_THRESHOLD", "7")
    monkeypatch.setenv("MLCLI_API_PORT", "0")

    config = load_config()

    assert config.search.threshold == 1.0
    assert config.api.port == 1


def test_invalid_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MLCLI_LOG_LEVEL", "verbose")
    with pytest.raises(ValueError, match="Invalid log level"):
        load_config()
