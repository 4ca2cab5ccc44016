"""Persisted process-wide state: column settings and the API credential."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Settings:
    """Column selection for search output and CSV/Markdown export.

    An empty ``columns`` list means "use the built-in default column set".
    """

    columns: list[str] = field(default_factory=list)


@dataclass
class ApiCredential:
    """The single shared secret guarding the REST API.

    ``api_key`` is None until a key has been generated.
    """

    api_key: str | None = None

    @property
    def configured(self) -> bool:
        return bool(self.api_key)
