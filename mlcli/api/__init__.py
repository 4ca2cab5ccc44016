"""REST API layer for mlcli.

Exposes:
    create_app -- FastAPI application factory.
"""

from mlcli.api.app import create_app

__all__ = ["create_app"]
