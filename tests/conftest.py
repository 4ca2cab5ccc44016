"""Shared fixtures: sample job entries and an empty version store."""

from __future__ import annotations

import copy
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from structlog.testing import capture_logs

from mlcli.ledger.version_store import VersionStore
from mlcli.models.records import ConfigRecord

EntryFactory = Callable[..., dict[str, Any]]

_BASE_ENTRY: dict[str, Any] = {
    "job": {
        "job_id": "auth_rare_user",
        "description": "Security: Authentication - Looks for rare users logging in",
        "groups": ["security", "authentication"],
        "custom_settings": {
            "created_by": "ml-module-security-auth",
            "security_app_display_name": "Unusual Login Activity",
        },
        "analysis_config": {
            "bucket_span": "15m",
            "detectors": [
                {"detector_description": "rare by user.name", "function": "rare", "by_field_name": "user.name"},
            ],
            "influencers": ["user.name", "host.name"],
            "model_prune_window": "30d",
        },
        "analysis_limits": {"model_memory_limit": "64mb", "categorization_examples_limit": 4},
        "model_snapshot_retention_days": 10,
    },
    "datafeed": {
        "datafeed_id": "datafeed-auth_rare_user",
        "indices": ["logs-*", "auditbeat-*"],
        "query": {
            "bool": {
                "filter": [{"match_phrase": {"event.category": "authentication"}}],
                "should": [
                    {"bool": {"should": [{"term": {"data_stream.dataset": {"value": "system.auth"}}}]}},
                ],
            }
        },
    },
}


def _make_entry(job_id: str = "auth_rare_user", **job_fields: Any) -> dict[str, Any]:
    entry = copy.deepcopy(_BASE_ENTRY)
    entry["job"]["job_id"] = job_id
    entry["datafeed"]["datafeed_id"] = f"datafeed-{job_id}"
    entry["job"].update(job_fields)
    return entry


@pytest.fixture
def make_entry() -> EntryFactory:
    """Factory for ``{job, datafeed}`` import entries; kwargs override job fields."""
    return _make_entry


@pytest.fixture
def make_record() -> Callable[..., ConfigRecord]:
    def factory(job_id: str = "auth_rare_user", **job_fields: Any) -> ConfigRecord:
        return ConfigRecord.from_dict(_make_entry(job_id, **job_fields))

    return factory


@pytest.fixture
def store(tmp_path: Path) -> VersionStore:
    return VersionStore.open(tmp_path / "jobs")


@pytest.fixture(autouse=True)
def captured_logs() -> Any:
    """Capture structlog events instead of printing them."""
    with capture_logs() as logs:
        yield logs
