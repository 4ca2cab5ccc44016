"""Bulk import of job configuration arrays."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import structlog

from mlcli.errors import InputError
from mlcli.ledger.version_store import PutResult, VersionStore
from mlcli.models.records import ConfigRecord
from mlcli.persistence.files import read_json

_log = structlog.get_logger(component="ledger.importer")


@dataclass
class ImportSummary:
    """Per-entry outcomes of one import, in input order."""

    results: list[PutResult] = field(default_factory=list)
    skipped: int = 0

    @property
    def created(self) -> list[PutResult]:
        return [r for r in self.results if r.created]

    @property
    def unchanged(self) -> list[PutResult]:
        return [r for r in self.results if not r.created]


def import_file(store: VersionStore, path: Path) -> ImportSummary:
    """Import every ``{job, datafeed}`` entry of the JSON array at *path*.

    Raises InputError when the file is missing, undecodable, or not an
    array. Entries without a usable ``job.job_id`` are skipped.
    """
    try:
        payload = read_json(path)
    except FileNotFoundError:
        raise InputError(f"File does not exist: {path}") from None
    except IsADirectoryError:
        raise InputError(f"Not a file: {path}") from None
    if not isinstance(payload, list):
        raise InputError("JSON must be an array of jobs.")
    return import_entries(store, payload)


def import_entries(store: VersionStore, entries: list[object]) -> ImportSummary:
    summary = ImportSummary()
    for index, entry in enumerate(entries):
        try:
            record = ConfigRecord.from_dict(entry)
        except InputError as exc:
            summary.skipped += 1
            _log.warning("import_entry_skipped", index=index, reason=str(exc))
            continue
        summary.results.append(store.put(record))
    return summary
