"""structlog setup for the CLI and the REST server.

Events are rendered as one JSON object per line on stderr; stdout carries
command output only. Modules log through
``structlog.get_logger(component=...)`` and pick up this configuration
lazily, so import order does not matter.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

from mlcli.models.config import LogConfig


def setup_logging(config: LogConfig, stream: TextIO | None = None) -> None:
    """Install the process-wide structlog configuration.

    Events below ``config.level`` are dropped before rendering.
    """
    threshold = logging.getLevelNamesMapping().get(config.level.upper(), logging.WARNING)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="ts"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(threshold),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=True,
    )
