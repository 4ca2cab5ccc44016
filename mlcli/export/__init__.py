"""Column projection and JSON/CSV/Markdown serialization of job corpora."""

from mlcli.export.projection import (
    DEFAULT_COLUMNS,
    ExportFormat,
    build_export,
    select_columns,
    serialize,
    write_export,
)

__all__ = [
    "DEFAULT_COLUMNS",
    "ExportFormat",
    "build_export",
    "select_columns",
    "serialize",
    "write_export",
]
