"""Job configuration records and their versioned snapshots."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from mlcli.errors import InputError, InvalidJobIdError

Document = dict[str, Any]

_JOB_ID_RE = re.compile(r"[A-Za-z0-9][A-Za-z0-9_.-]*")


def is_valid_job_id(job_id: object) -> bool:
    return isinstance(job_id, str) and _JOB_ID_RE.fullmatch(job_id) is not None


def validate_job_id(job_id: object) -> str:
    """Return *job_id* if it is usable as a single directory name.

    Raises InvalidJobIdError otherwise.
    """
    if not isinstance(job_id, str) or _JOB_ID_RE.fullmatch(job_id) is None:
        raise InvalidJobIdError(job_id)
    return job_id


@dataclass(frozen=True)
class ConfigRecord:
    """A job configuration document plus its optional datafeed document.

    ``datafeed`` is an empty mapping when the job has no datafeed.
    """

    job: Document
    datafeed: Document = field(default_factory=dict)

    @property
    def job_id(self) -> str:
        return self.job.get("job_id", "")

    def to_dict(self) -> Document:
        return {"job": self.job, "datafeed": self.datafeed}

    @classmethod
    def from_dict(cls, data: object) -> ConfigRecord:
        """Build a record from an imported entry.

        Raises InputError when the entry has no ``job`` object, and
        InvalidJobIdError when ``job.job_id`` is missing or unsafe.
        """
        if not isinstance(data, dict) or not isinstance(data.get("job"), dict):
            raise InputError("Entry has no 'job' object.")
        job = data["job"]
        validate_job_id(job.get("job_id"))
        datafeed = data.get("datafeed") or {}
        if not isinstance(datafeed, dict):
            raise InputError(f"Job {job['job_id']}: 'datafeed' must be an object.")
        return cls(job=job, datafeed=datafeed)


@dataclass(frozen=True)
class VersionEntry:
    """One immutable, numbered snapshot of a ConfigRecord.

    Created only by VersionStore.put; never mutated or deleted afterwards.
    """

    job_id: str
    version: int
    snapshot: ConfigRecord
    created_at: datetime

    def to_dict(self) -> Document:
        return {
            "job_id": self.job_id,
            "version": self.version,
            "created_at": self.created_at.isoformat(),
            "snapshot": self.snapshot.to_dict(),
        }
