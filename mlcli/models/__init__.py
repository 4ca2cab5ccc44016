"""Core data structures for mlcli."""

from mlcli.models.config import MlcliConfig
from mlcli.models.records import ConfigRecord, Document, VersionEntry, validate_job_id
from mlcli.models.state import ApiCredential, Settings

__all__ = [
    "ApiCredential",
    "ConfigRecord",
    "Document",
    "MlcliConfig",
    "Settings",
    "VersionEntry",
    "validate_job_id",
]
