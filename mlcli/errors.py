"""Error taxonomy shared by the store, query engine, CLI and REST API.

Every error carries a stable ``code`` that the REST layer puts into the
``error`` field of its JSON envelope.
"""

from __future__ import annotations


class MlcliError(Exception):
    """Base class for all domain errors."""

    code = "MLCLI_ERROR"


class InputError(MlcliError):
    """Malformed input file, payload or request parameter."""

    code = "INVALID_INPUT"


class UnsupportedFormatError(InputError):
    code = "UNSUPPORTED_FORMAT"

    def __init__(self, fmt: str) -> None:
        super().__init__(f"Invalid export format '{fmt}'. Use json, csv, or md.")
        self.format = fmt


class InvalidJobIdError(InputError):
    code = "INVALID_JOB_ID"

    def __init__(self, job_id: object) -> None:
        super().__init__(f"Invalid job_id: {job_id!r}")
        self.job_id = job_id


class NotFoundError(MlcliError):
    """Unknown job or version."""

    code = "NOT_FOUND"


class JobNotFoundError(NotFoundError):
    code = "JOB_NOT_FOUND"

    def __init__(self, job_id: str) -> None:
        super().__init__(f"Job {job_id} not found.")
        self.job_id = job_id


class VersionNotFoundError(NotFoundError):
    code = "VERSION_NOT_FOUND"

    def __init__(self, job_id: str, version: int) -> None:
        super().__init__(f"Version {version} of job {job_id} does not exist.")
        self.job_id = job_id
        self.version = version


class StateError(MlcliError):
    """The store is in a state that cannot satisfy the request."""

    code = "INVALID_STATE"


class NotEnoughVersionsError(StateError):
    code = "NOT_ENOUGH_VERSIONS"

    def __init__(self, job_id: str, available: int) -> None:
        super().__init__(f"Not enough versions to compare for job {job_id} (found {available}).")
        self.job_id = job_id
        self.available = available


class NoJobsToExportError(StateError):
    code = "NO_JOBS_TO_EXPORT"

    def __init__(self) -> None:
        super().__init__("No jobs found to export.")


class AuthError(MlcliError):
    """Missing or mismatched API key."""

    code = "UNAUTHORIZED"


class ConfigError(MlcliError):
    """The service is not configured to serve the request (no API key yet)."""

    code = "SERVICE_MISCONFIGURED"
