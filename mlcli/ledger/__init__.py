"""Version ledger for ML job configurations.

Keeps an append-only, change-detected version log per job on disk and
answers "what changed between versions" queries.

Submodules:
    canonical      -- Stable, key-sorted serialization used for equality.
    version_store  -- Per-job version log with a materialized latest pointer.
    importer       -- Bulk import of job arrays through VersionStore.put.
    diff           -- Summarized structural diff and line-level full diff.
    compare        -- Resolves version pairs for a job and diffs them.
"""

from mlcli.ledger.version_store import PutResult, VersionStore

__all__ = ["PutResult", "VersionStore"]
