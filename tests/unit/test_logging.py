"""Tests for structlog setup."""

from __future__ import annotations

import io
import json

import pytest
import structlog

from mlcli.models.config import LogConfig
from mlcli.observability.logging import setup_logging


@pytest.fixture
def stream():
    buf = io.StringIO()
    yield buf
    structlog.reset_defaults()


def test_events_render_as_json_lines(stream) -> None:
    setup_logging(LogConfig(level="info"), stream=stream)
    structlog.get_logger(component="test").info("job_imported", job_id="a", version=2)

    event = json.loads(stream.getvalue().strip())
    assert event["event"] == "job_imported"
    assert event["component"] == "test"
    assert event["level"] == "info"
    assert event["version"] == 2
    assert "ts" in event


def test_events_below_threshold_are_dropped(stream) -> None:
    setup_logging(LogConfig(level="warning"), stream=stream)
    log = structlog.get_logger(component="test")
    log.info("quiet")
    log.warning("loud")

    lines = stream.getvalue().splitlines()
    assert [json.loads(line)["event"] for line in lines] == ["loud"]
