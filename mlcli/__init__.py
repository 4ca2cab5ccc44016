"""mlcli -- versioned store and query engine for ML job configurations."""

__version__ = "0.3.0"
