"""mlcli command-line interface.

Exposes:
    cli -- Click group entry point (registered as ``mlcli`` script).
"""

from mlcli.cli.main import cli

__all__ = ["cli"]
