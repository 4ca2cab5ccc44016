"""Settings and API credential persistence.

Both stores read their file on every ``load()``; nothing is cached across
calls, so a key regenerated by another invocation takes effect on the next
request. Absent files are a valid default state.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from mlcli.errors import ConfigError, InputError
from mlcli.models.state import ApiCredential, Settings
from mlcli.persistence.files import atomic_write_json, read_json

_log = structlog.get_logger(component="persistence.state")


class SettingsStore:
    """Loads and saves ``.mlcli/settings.json``."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Settings:
        try:
            data = read_json(self._path)
        except FileNotFoundError:
            return Settings()
        if not isinstance(data, dict):
            raise InputError(f"{self._path} must hold a JSON object.")
        columns = data.get("columns") or []
        if not isinstance(columns, list) or not all(isinstance(c, str) for c in columns):
            raise InputError(f"{self._path}: 'columns' must be a list of strings.")
        return Settings(columns=list(columns))

    def save(self, settings: Settings) -> None:
        atomic_write_json(self._path, {"columns": settings.columns})
        _log.info("settings_saved", columns=settings.columns)


class CredentialStore:
    """Loads and saves ``.mlcli/auth.json``.

    An empty file is treated like a missing one.
    """

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self) -> ApiCredential:
        try:
            if not self._path.read_bytes().strip():
                return ApiCredential()
            data = read_json(self._path)
        except FileNotFoundError:
            return ApiCredential()
        except InputError as exc:
            raise ConfigError(f"Credential file is unreadable: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"{self._path} must hold a JSON object.")
        api_key = data.get("apiKey")
        if api_key is not None and not isinstance(api_key, str):
            raise ConfigError(f"{self._path}: 'apiKey' must be a string.")
        return ApiCredential(api_key=api_key or None)

    def save(self, credential: ApiCredential) -> None:
        atomic_write_json(self._path, {"apiKey": credential.api_key})
        self._path.chmod(0o600)
        _log.info("credential_saved", path=str(self._path))
