"""Column selection and serialization.

JSON is the lossless format: it always carries the full ``{job, datafeed}``
records and ignores column selection. CSV and Markdown render flattened
rows restricted to the selected columns, in selection order.
"""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Mapping, Sequence
from enum import StrEnum
from pathlib import Path
from typing import Any

import structlog

from mlcli.errors import NoJobsToExportError, UnsupportedFormatError
from mlcli.models.records import ConfigRecord
from mlcli.persistence.files import atomic_write_bytes
from mlcli.search.flatten import FLAT_FIELDS, PLACEHOLDER, flatten_all

_log = structlog.get_logger(component="export.projection")

DEFAULT_COLUMNS: tuple[str, ...] = FLAT_FIELDS


class ExportFormat(StrEnum):
    JSON = "json"
    CSV = "csv"
    MD = "md"

    @classmethod
    def parse(cls, value: str) -> ExportFormat:
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise UnsupportedFormatError(value) from None

    @property
    def media_type(self) -> str:
        return {
            ExportFormat.JSON: "application/json",
            ExportFormat.CSV: "text/csv; charset=utf-8",
            ExportFormat.MD: "text/markdown; charset=utf-8",
        }[self]


def select_columns(rows: Sequence[Mapping[str, Any]], columns: Sequence[str] = ()) -> list[dict[str, Any]]:
    """Restrict *rows* to *columns* (DEFAULT_COLUMNS when empty)."""
    selected = list(columns) or list(DEFAULT_COLUMNS)
    projected = []
    for row in rows:
        values = {}
        for column in selected:
            value = row.get(column)
            values[column] = PLACEHOLDER if value is None or value == "" else value
        projected.append(values)
    return projected


def serialize(data: Sequence[Mapping[str, Any]], fmt: ExportFormat) -> bytes:
    """Encode *data* (full records for JSON, projected rows otherwise).

    Raises NoJobsToExportError when *data* is empty.
    """
    if not data:
        raise NoJobsToExportError()
    if fmt == ExportFormat.JSON:
        return (json.dumps(list(data), indent=2, ensure_ascii=False) + "\n").encode("utf-8")
    if fmt == ExportFormat.CSV:
        return _to_csv(data).encode("utf-8")
    if fmt == ExportFormat.MD:
        return _to_markdown(data).encode("utf-8")
    raise UnsupportedFormatError(str(fmt))


def build_export(records: Sequence[ConfigRecord], fmt: ExportFormat, columns: Sequence[str] = ()) -> bytes:
    if fmt == ExportFormat.JSON:
        return serialize([record.to_dict() for record in records], fmt)
    return serialize(select_columns(flatten_all(records), columns), fmt)


def write_export(exports_dir: Path, fmt: ExportFormat, payload: bytes) -> Path:
    """Replace ``<exports_dir>/jobs.<fmt>`` with *payload*."""
    path = exports_dir / f"jobs.{fmt.value}"
    atomic_write_bytes(path, payload)
    _log.info("export_written", path=str(path), format=fmt.value, size=len(payload))
    return path


def _to_csv(rows: Sequence[Mapping[str, Any]]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=list(rows[0].keys()), extrasaction="ignore")
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue()


def _md_cell(value: Any) -> str:
    text = str(value).replace("\r\n", " ").replace("\n", " ")
    return text.replace("|", "\\|")


def _to_markdown(rows: Sequence[Mapping[str, Any]]) -> str:
    headers = list(rows[0].keys())
    lines = [
        "| " + " | ".join(_md_cell(h) for h in headers) + " |",
        "| " + " | ".join("---" for _ in headers) + " |",
    ]
    for row in rows:
        lines.append("| " + " | ".join(_md_cell(row.get(h, PLACEHOLDER)) for h in headers) + " |")
    return "\n".join(lines) + "\n"
