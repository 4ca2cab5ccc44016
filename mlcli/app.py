"""Server bootstrap for ``mlcli serve``.

Startup order: config -> logging -> version store (with pointer recovery)
-> access gate -> FastAPI app -> uvicorn.
"""

from __future__ import annotations

import asyncio

import structlog
from fastapi import FastAPI

from mlcli.api import create_app
from mlcli.auth.gate import AccessGate
from mlcli.ledger.version_store import VersionStore
from mlcli.models.config import MlcliConfig
from mlcli.persistence.state import CredentialStore, SettingsStore

_log = structlog.get_logger(component="app")


def build_app(config: MlcliConfig) -> FastAPI:
    """Wire the store, gate and settings for *config* into a FastAPI app."""
    store = VersionStore.open(config.store.jobs_dir)
    gate = AccessGate(CredentialStore(config.store.auth_file))
    if not gate.is_configured():
        # Requests are rejected with 500 until a key exists; keep serving so
        # `mlcli auth --generate` can fix it without a restart.
        _log.warning("api_key_not_configured", hint="run `mlcli auth --generate`")
    return create_app(
        store=store,
        gate=gate,
        settings_store=SettingsStore(config.store.settings_file),
        search_threshold=config.search.threshold,
    )


async def serve(config: MlcliConfig) -> None:
    """Run the REST API until uvicorn receives a shutdown signal."""
    import uvicorn

    fastapi_app = build_app(config)
    uv_config = uvicorn.Config(
        app=fastapi_app,
        host=config.api.host,
        port=config.api.port,
        log_config=None,  # structlog handles all logging
        access_log=False,
    )
    server = uvicorn.Server(uv_config)
    _log.info("rest api starting", host=config.api.host, port=config.api.port)
    await server.serve()
    _log.info("rest api stopped")


def run(config: MlcliConfig) -> None:
    asyncio.run(serve(config))
