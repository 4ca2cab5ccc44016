"""Version comparison for one job or the whole store.

The default pair is the two most recent versions, diffed older -> newer.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from mlcli.errors import MlcliError, NotEnoughVersionsError
from mlcli.ledger.diff import DiffLine, summarized_diff
from mlcli.ledger.diff import full_diff as line_diff
from mlcli.ledger.version_store import VersionStore

_log = structlog.get_logger(component="ledger.compare")


@dataclass(frozen=True)
class CompareReport:
    job_id: str
    older: int
    newer: int
    summary: str
    lines: list[DiffLine] | None = None


@dataclass
class BatchCompareReport:
    """Result of comparing every job; failures do not abort the batch."""

    reports: list[CompareReport] = field(default_factory=list)
    failures: dict[str, MlcliError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


def resolve_versions(
    store: VersionStore,
    job_id: str,
    version1: int | None = None,
    version2: int | None = None,
) -> tuple[int, int]:
    """Pick the (older, newer) pair to diff.

    A missing *version2* means the latest version; a missing *version1*
    means the closest stored version below *version2*. Histories may have
    gaps, so neighbours come from the stored list rather than arithmetic.

    Raises JobNotFoundError, VersionNotFoundError or NotEnoughVersionsError.
    """
    versions = store.list_versions(job_id)
    if version2 is None:
        newer = versions[0]
    else:
        # get_version raises VersionNotFoundError for gaps or out-of-range numbers.
        newer = store.get_version(job_id, version2).version

    if version1 is not None:
        return store.get_version(job_id, version1).version, newer

    earlier = [v for v in versions if v < newer]
    if not earlier:
        raise NotEnoughVersionsError(job_id, len(versions))
    return earlier[0], newer


def compare_versions(
    store: VersionStore,
    job_id: str,
    older: int,
    newer: int,
    full: bool = False,
) -> CompareReport:
    old_doc = store.get_version(job_id, older).snapshot.to_dict()
    new_doc = store.get_version(job_id, newer).snapshot.to_dict()
    return CompareReport(
        job_id=job_id,
        older=older,
        newer=newer,
        summary=summarized_diff(old_doc, new_doc),
        lines=line_diff(old_doc, new_doc) if full else None,
    )


def compare_job(store: VersionStore, job_id: str, full: bool = False) -> CompareReport:
    """Diff the previous version of *job_id* against its latest."""
    older, newer = resolve_versions(store, job_id)
    return compare_versions(store, job_id, older, newer, full=full)


def compare_all(store: VersionStore, full: bool = False) -> BatchCompareReport:
    batch = BatchCompareReport()
    for job_id in sorted(store.list_jobs()):
        try:
            batch.reports.append(compare_job(store, job_id, full=full))
        except MlcliError as exc:
            _log.warning("compare_failed", job_id=job_id, error=str(exc))
            batch.failures[job_id] = exc
    return batch
