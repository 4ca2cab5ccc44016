"""File persistence helpers and the settings/credential stores.

Submodules:
    files   -- Atomic JSON writes and decoding reads.
    state   -- SettingsStore and CredentialStore (lazy load, save on write).
"""

from mlcli.persistence.files import atomic_write_bytes, atomic_write_json, read_json
from mlcli.persistence.state import CredentialStore, SettingsStore

__all__ = [
    "CredentialStore",
    "SettingsStore",
    "atomic_write_bytes",
    "atomic_write_json",
    "read_json",
]
