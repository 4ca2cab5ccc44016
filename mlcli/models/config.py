"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class StoreConfig:
    """On-disk layout rooted at a work directory."""

    workdir: Path = field(default_factory=Path.cwd)

    @property
    def jobs_dir(self) -> Path:
        return self.workdir / "jobs"

    @property
    def state_dir(self) -> Path:
        return self.workdir / ".mlcli"

    @property
    def settings_file(self) -> Path:
        return self.state_dir / "settings.json"

    @property
    def auth_file(self) -> Path:
        return self.state_dir / "auth.json"

    @property
    def exports_dir(self) -> Path:
        return self.workdir / "exports"


@dataclass
class SearchConfig:
    """Fuzzy search configuration."""

    threshold: float = 0.3


@dataclass
class APIConfig:
    """REST API configuration."""

    host: str = "127.0.0.1"
    port: int = 3000


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "warning"


@dataclass
class MlcliConfig:
    """Top-level mlcli configuration."""

    store: StoreConfig = field(default_factory=StoreConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    api: APIConfig = field(default_factory=APIConfig)
    log: LogConfig = field(default_factory=LogConfig)
