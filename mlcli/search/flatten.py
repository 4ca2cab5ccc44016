"""Flattening of nested job/datafeed documents into fixed named fields.

Field paths follow the Elasticsearch anomaly-detection job and datafeed
APIs. Any value that is absent (or empty) renders as ``PLACEHOLDER``.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from mlcli.models.records import ConfigRecord, Document

PLACEHOLDER = "N/A"

Row = dict[str, str]

FLAT_FIELDS: tuple[str, ...] = (
    "job_id",
    "rule_name",
    "created_by",
    "groups",
    "description",
    "bucket_span",
    "detectors",
    "influencers",
    "model_prune_window",
    "model_memory_limit",
    "cat_limit",
    "retention_days",
    "datafeed_id",
    "indices",
    "query",
)

_DATASET_FIELD = "data_stream.dataset"


def _get(doc: Any, *path: str) -> Any:
    for key in path:
        if not isinstance(doc, dict):
            return None
        doc = doc.get(key)
    return doc


def _scalar(value: Any) -> str:
    if value is None or value == "" or isinstance(value, (dict, list)):
        return PLACEHOLDER
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _joined(values: Any, sep: str = ", ") -> str:
    if not isinstance(values, list):
        return _scalar(values)
    parts = [str(v) for v in values if v is not None and v != ""]
    return sep.join(parts) if parts else PLACEHOLDER


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    return value if isinstance(value, list) else [value]


def flatten(record: ConfigRecord) -> Row:
    """Project *record* onto FLAT_FIELDS."""
    job = record.job
    datafeed = record.datafeed
    analysis = _get(job, "analysis_config")
    detectors = [_get(d, "detector_description") for d in _as_list(_get(analysis, "detectors"))]
    return {
        "job_id": _scalar(job.get("job_id")),
        "rule_name": _scalar(_get(job, "custom_settings", "security_app_display_name")),
        "created_by": _scalar(_get(job, "custom_settings", "created_by")),
        "groups": _joined(job.get("groups")),
        "description": _scalar(job.get("description")),
        "bucket_span": _scalar(_get(analysis, "bucket_span")),
        "detectors": _joined(detectors, " | "),
        "influencers": _joined(_get(analysis, "influencers")),
        "model_prune_window": _scalar(_get(analysis, "model_prune_window")),
        "model_memory_limit": _scalar(_get(job, "analysis_limits", "model_memory_limit")),
        "cat_limit": _scalar(_get(job, "analysis_limits", "categorization_examples_limit")),
        "retention_days": _scalar(job.get("model_snapshot_retention_days")),
        "datafeed_id": _scalar(datafeed.get("datafeed_id")),
        "indices": _joined(datafeed.get("indices")),
        "query": simplify_query(datafeed.get("query")),
    }


def flatten_all(records: Iterable[ConfigRecord]) -> list[Row]:
    return [flatten(record) for record in records]


def simplify_query(query: Document | None) -> str:
    """Summarize a datafeed bool query as ``Dataset: [...] | Filters: ...``.

    Filters come from ``match_phrase`` clauses in ``bool.filter``; datasets
    from ``bool.should[].bool.should[].term["data_stream.dataset"]``.
    Returns PLACEHOLDER when the query has no ``bool`` wrapper.
    """
    bool_clause = _get(query, "bool")
    if not isinstance(bool_clause, dict):
        return PLACEHOLDER

    filters: list[str] = []
    for clause in _as_list(bool_clause.get("filter")):
        phrase = _get(clause, "match_phrase")
        if not isinstance(phrase, dict):
            continue
        for field_name, value in phrase.items():
            if isinstance(value, dict):
                value = value.get("query")
            filters.append(f"{field_name}: {value}")

    datasets: list[str] = []
    for outer in _as_list(bool_clause.get("should")):
        for inner in _as_list(_get(outer, "bool", "should")):
            term = _get(inner, "term", _DATASET_FIELD)
            if isinstance(term, dict):
                term = term.get("value")
            if term is not None:
                datasets.append(str(term))

    return f"Dataset: [{', '.join(datasets)}] | Filters: {', '.join(filters)}"
