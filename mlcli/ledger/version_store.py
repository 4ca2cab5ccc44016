"""Append-only per-job version log.

Layout under ``<workdir>/jobs/<job_id>/``::

    v1.json, v2.json, ...   immutable VersionEntry envelopes
    latest.json             copy of the highest version (materialized pointer)
    meta.json               {"next_version": N}

``put`` compares the incoming record with the latest snapshot using canonical
bytes; an identical record is a no-op. A changed record is written to a new
version file first, then ``meta.json`` and ``latest.json`` are replaced. Every
write is atomic, but the sequence is not: a crash after the version write
leaves ``latest.json`` stale. Reads therefore resolve the latest entry from
the highest version file, and ``recover()`` rewrites stale pointers.

There is no locking. Concurrent writers to the same job are unsupported.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

import structlog

from mlcli.errors import InputError, JobNotFoundError, StateError, VersionNotFoundError
from mlcli.ledger.canonical import canonical_bytes
from mlcli.models.records import ConfigRecord, VersionEntry, is_valid_job_id, validate_job_id
from mlcli.persistence.files import atomic_write_bytes, atomic_write_json, read_json

_log = structlog.get_logger(component="ledger.version_store")

_VERSION_FILE_RE = re.compile(r"^v(\d+)\.json$")
_LATEST_FILE = "latest.json"
_META_FILE = "meta.json"


@dataclass(frozen=True)
class PutResult:
    """Outcome of VersionStore.put."""

    job_id: str
    version: int
    created: bool


class VersionStore:
    """File-backed version log rooted at a ``jobs`` directory."""

    def __init__(self, jobs_dir: Path) -> None:
        self._jobs_dir = jobs_dir

    @classmethod
    def open(cls, jobs_dir: Path) -> VersionStore:
        """Create the jobs directory if needed and repair stale pointers."""
        jobs_dir.mkdir(parents=True, exist_ok=True)
        store = cls(jobs_dir)
        store.recover()
        return store

    @property
    def jobs_dir(self) -> Path:
        return self._jobs_dir

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def put(self, record: ConfigRecord) -> PutResult:
        """Append *record* as a new version unless it equals the latest one."""
        job_id = validate_job_id(record.job_id)
        job_dir = self._jobs_dir / job_id
        versions = self._scan_versions(job_dir)

        if versions:
            latest = self._read_entry(job_id, job_dir, versions[-1])
            if canonical_bytes(latest.snapshot.to_dict()) == canonical_bytes(record.to_dict()):
                _log.info("import_unchanged", job_id=job_id, version=latest.version)
                return PutResult(job_id=job_id, version=latest.version, created=False)

        version = max(self._next_version_hint(job_dir), (versions[-1] + 1) if versions else 1)
        entry = VersionEntry(
            job_id=job_id,
            version=version,
            snapshot=record,
            created_at=datetime.now(tz=UTC),
        )
        version_path = job_dir / f"v{version}.json"
        if version_path.exists():
            raise StateError(f"Refusing to overwrite existing version file {version_path}")

        # Order matters: the version file must be durable before the pointer moves.
        atomic_write_json(version_path, entry.to_dict())
        atomic_write_json(job_dir / _META_FILE, {"next_version": version + 1})
        atomic_write_bytes(job_dir / _LATEST_FILE, version_path.read_bytes())

        _log.info("import_new_version", job_id=job_id, version=version)
        return PutResult(job_id=job_id, version=version, created=True)

    def recover(self) -> list[str]:
        """Rewrite ``latest.json`` wherever it does not match the highest version.

        Returns the ids of the jobs that were repaired.
        """
        repaired: list[str] = []
        for job_id in sorted(self.list_jobs()):
            job_dir = self._jobs_dir / job_id
            versions = self._scan_versions(job_dir)
            if not versions:
                continue
            version_path = job_dir / f"v{versions[-1]}.json"
            latest_path = job_dir / _LATEST_FILE
            expected = version_path.read_bytes()
            try:
                current = latest_path.read_bytes()
            except FileNotFoundError:
                current = None
            if current != expected:
                atomic_write_bytes(latest_path, expected)
                repaired.append(job_id)
                _log.warning("latest_pointer_repaired", job_id=job_id, version=versions[-1])
        return repaired

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_jobs(self) -> set[str]:
        """Ids of every job directory holding at least one version file.

        Directories whose names are not valid job ids are ignored.
        """
        if not self._jobs_dir.is_dir():
            return set()
        return {
            child.name
            for child in self._jobs_dir.iterdir()
            if child.is_dir() and is_valid_job_id(child.name) and self._scan_versions(child)
        }

    def list_versions(self, job_id: str) -> list[int]:
        """Version numbers of *job_id*, newest first."""
        versions = self._scan_versions(self._job_dir(job_id))
        if not versions:
            raise JobNotFoundError(job_id)
        return sorted(versions, reverse=True)

    def get_version(self, job_id: str, version: int) -> VersionEntry:
        job_dir = self._job_dir(job_id)
        if not job_dir.is_dir():
            raise JobNotFoundError(job_id)
        return self._read_entry(job_id, job_dir, version)

    def get_latest(self, job_id: str) -> VersionEntry:
        versions = self.list_versions(job_id)
        return self._read_entry(job_id, self._jobs_dir / job_id, versions[0])

    def latest_records(self) -> Iterator[ConfigRecord]:
        """Latest snapshot of every job, ordered by job id."""
        for job_id in sorted(self.list_jobs()):
            yield self.get_latest(job_id).snapshot

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _job_dir(self, job_id: str) -> Path:
        # No job can be stored under an unsafe id, so reads report it as missing.
        if not is_valid_job_id(job_id):
            raise JobNotFoundError(job_id)
        return self._jobs_dir / job_id

    @staticmethod
    def _scan_versions(job_dir: Path) -> list[int]:
        """Version numbers present in *job_dir*, ascending."""
        if not job_dir.is_dir():
            return []
        found = []
        for child in job_dir.iterdir():
            match = _VERSION_FILE_RE.match(child.name)
            if match and int(match.group(1)) >= 1:
                found.append(int(match.group(1)))
        return sorted(found)

    @staticmethod
    def _next_version_hint(job_dir: Path) -> int:
        try:
            meta = read_json(job_dir / _META_FILE)
        except FileNotFoundError:
            return 1
        except InputError:
            _log.warning("version_meta_unreadable", path=str(job_dir / _META_FILE))
            return 1
        hint = meta.get("next_version") if isinstance(meta, dict) else None
        return hint if isinstance(hint, int) and hint >= 1 else 1

    @staticmethod
    def _read_entry(job_id: str, job_dir: Path, version: int) -> VersionEntry:
        path = job_dir / f"v{version}.json"
        try:
            data = read_json(path)
        except FileNotFoundError:
            raise VersionNotFoundError(job_id, version) from None
        return _entry_from_file(job_id, version, path, data)


def _entry_from_file(job_id: str, version: int, path: Path, data: object) -> VersionEntry:
    """Decode a version file; bare records from older layouts are accepted."""
    if isinstance(data, dict) and "snapshot" in data:
        snapshot = data["snapshot"]
        try:
            created_at = datetime.fromisoformat(data["created_at"])
        except (KeyError, TypeError, ValueError) as exc:
            raise InputError(f"{path}: invalid 'created_at'") from exc
    else:
        snapshot = data
        created_at = datetime.fromtimestamp(path.stat().st_mtime, tz=UTC)
    try:
        record = ConfigRecord.from_dict(snapshot)
    except InputError as exc:
        raise InputError(f"{path}: {exc}") from exc
    return VersionEntry(job_id=job_id, version=version, snapshot=record, created_at=created_at)
