"""Read-only REST routes.

Every route depends on ``require_api_key``; there is no write endpoint.
Domain errors raised here are mapped to status codes by the handlers
registered in ``mlcli.api.app``.
"""

from __future__ import annotations

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, Header, Query, Request, Response

from mlcli.api.schemas import CompareResponse
from mlcli.auth.gate import AccessGate
from mlcli.export.projection import ExportFormat, build_export
from mlcli.ledger.compare import compare_versions, resolve_versions
from mlcli.ledger.version_store import VersionStore
from mlcli.persistence.state import SettingsStore
from mlcli.search.flatten import flatten
from mlcli.search.index import REMOTE_SEARCH_KEYS, rank

_log = structlog.get_logger(component="api.routes")


def require_api_key(
    request: Request,
    x_api_key: Annotated[str | None, Header()] = None,
) -> None:
    gate: AccessGate = request.app.state.gate
    gate.require(x_api_key)


router = APIRouter(dependencies=[Depends(require_api_key)])


def _store(request: Request) -> VersionStore:
    return request.app.state.store


@router.get("/jobs")
def list_jobs(
    request: Request,
    query: Annotated[str | None, Query()] = None,
) -> list[dict[str, Any]]:
    """Latest job documents, fuzzy-filtered by *query* when given."""
    records = list(_store(request).latest_records())
    if not query or not query.strip():
        return [record.job for record in records]
    rows = [flatten(record) for record in records]
    hits = rank(rows, query.strip(), REMOTE_SEARCH_KEYS, request.app.state.search_threshold)
    return [records[hit.index].job for hit in hits]


@router.get("/jobs/export")
def export_jobs(
    request: Request,
    export_format: Annotated[str, Query(alias="format")] = "json",
) -> Response:
    fmt = ExportFormat.parse(export_format)
    settings_store: SettingsStore = request.app.state.settings_store
    columns = settings_store.load().columns
    records = list(_store(request).latest_records())
    payload = build_export(records, fmt, columns)
    _log.info("remote_export", format=fmt.value, jobs=len(records))
    return Response(content=payload, media_type=fmt.media_type)


@router.get("/jobs/{job_id}/compare", response_model=CompareResponse)
def compare_job_versions(
    request: Request,
    job_id: str,
    version1: Annotated[int | None, Query()] = None,
    version2: Annotated[int | None, Query()] = None,
) -> CompareResponse:
    """Diff *version1* -> *version2*, defaulting to previous -> latest."""
    store = _store(request)
    older, newer = resolve_versions(store, job_id, version1, version2)
    report = compare_versions(store, job_id, older, newer)
    return CompareResponse(
        job_id=job_id,
        version1=older,
        version2=newer,
        differences=report.summary,
    )
