"""Entry point for `python -m mlcli`.

Usage:
    python -m mlcli import jobs.json
    uv run python -m mlcli serve --port 3000
"""

from __future__ import annotations

from mlcli.cli import cli

cli()
