"""Click commands driving the store and query engine.

Commands only parse arguments, call into the core and print results;
domain errors become ``click.ClickException`` (exit status 1).
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeVar

import click

from mlcli.auth.gate import AccessGate
from mlcli.config import load_config
from mlcli.errors import MlcliError
from mlcli.export.projection import DEFAULT_COLUMNS, ExportFormat, build_export, select_columns, serialize, write_export
from mlcli.ledger.compare import CompareReport, compare_all, compare_job
from mlcli.ledger.diff import render_full_diff
from mlcli.ledger.importer import import_file
from mlcli.ledger.version_store import VersionStore
from mlcli.models.config import MlcliConfig
from mlcli.models.state import Settings
from mlcli.observability.logging import setup_logging
from mlcli.persistence.state import CredentialStore, SettingsStore
from mlcli.search.flatten import FLAT_FIELDS, flatten_all
from mlcli.search.index import LOCAL_SEARCH_KEYS, filter_exact, fuzzy_search

F = TypeVar("F", bound=Callable[..., Any])


@dataclass
class _Context:
    config: MlcliConfig

    def store(self) -> VersionStore:
        return VersionStore.open(self.config.store.jobs_dir)

    def settings_store(self) -> SettingsStore:
        return SettingsStore(self.config.store.settings_file)

    def gate(self) -> AccessGate:
        return AccessGate(CredentialStore(self.config.store.auth_file))


pass_context = click.make_pass_decorator(_Context)


def _domain_errors(func: F) -> F:
    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except MlcliError as exc:
            raise click.ClickException(str(exc)) from exc

    return wrapper  # type: ignore[return-value]


@click.group()
@click.option(
    "--workdir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding jobs/, exports/ and .mlcli/ (default: $MLCLI_WORKDIR or cwd).",
)
@click.version_option(package_name="mlcli")
@click.pass_context
def cli(ctx: click.Context, workdir: Path | None) -> None:
    """Manage versioned ML job configurations."""
    config = load_config(workdir)
    setup_logging(config.log)
    ctx.obj = _Context(config=config)


@cli.command("import")
@click.argument("file", type=click.Path(path_type=Path))
@pass_context
@_domain_errors
def import_command(obj: _Context, file: Path) -> None:
    """Import a JSON array of {job, datafeed} entries, versioning changed jobs."""
    summary = import_file(obj.store(), file)
    for result in summary.results:
        if result.created:
            click.echo(f"Imported job {result.job_id} (v{result.version})")
        else:
            click.echo(f"No changes detected for job {result.job_id}, skipping import.")
    if summary.skipped:
        click.echo(f"Skipped {summary.skipped} entries without a valid job.job_id.", err=True)


@cli.command()
@click.option("--job-id", "job_id", default=None, help="Exact job_id filter.")
@click.option("--fuzzy", default=None, help="Fuzzy search across id, rule name, creator, groups, description.")
@pass_context
@_domain_errors
def search(obj: _Context, job_id: str | None, fuzzy: str | None) -> None:
    """Search the latest job versions and print a table."""
    rows = flatten_all(obj.store().latest_records())
    if fuzzy:
        rows = fuzzy_search(rows, fuzzy, LOCAL_SEARCH_KEYS, obj.config.search.threshold)
    if job_id:
        rows = filter_exact(rows, job_id)
    if not rows:
        click.echo("No jobs found matching criteria.")
        return
    columns = obj.settings_store().load().columns
    click.echo(serialize(select_columns(rows, columns), ExportFormat.MD).decode("utf-8"), nl=False)


def _print_report(report: CompareReport) -> None:
    click.echo(f"========== Comparing Job: {report.job_id} (v{report.older} -> v{report.newer}) ==========")
    click.echo("Summarized differences:")
    click.echo(report.summary)
    if report.lines is not None:
        click.echo("Full diff:")
        click.echo(render_full_diff(report.lines))
    click.echo(f"========== End of Comparison for {report.job_id} ==========")


@cli.command()
@click.argument("job_id", required=False)
@click.option("--full", is_flag=True, help="Also show the line-level diff.")
@click.option("--all", "all_jobs", is_flag=True, help="Compare every job.")
@pass_context
@_domain_errors
def compare(obj: _Context, job_id: str | None, full: bool, all_jobs: bool) -> None:
    """Diff the previous version of a job against its latest."""
    store = obj.store()
    if not all_jobs:
        if not job_id:
            raise click.UsageError("Please specify a job_id or use --all to compare all jobs.")
        _print_report(compare_job(store, job_id, full=full))
        return

    batch = compare_all(store, full=full)
    for report in batch.reports:
        _print_report(report)
    for failed_id, error in batch.failures.items():
        click.echo(f"Error: {failed_id}: {error}", err=True)
    if not batch.ok:
        raise click.ClickException(f"{len(batch.failures)} job(s) could not be compared.")


@cli.command()
@click.option(
    "--format",
    "export_format",
    default="json",
    show_default=True,
    help="Export format: json, csv or md.",
)
@click.option("--settings", "use_settings", is_flag=True, help="Use configured columns for CSV and Markdown.")
@pass_context
@_domain_errors
def export(obj: _Context, export_format: str, use_settings: bool) -> None:
    """Export the latest version of every job to exports/jobs.<format>."""
    fmt = ExportFormat.parse(export_format)
    columns = obj.settings_store().load().columns if use_settings else []
    payload = build_export(list(obj.store().latest_records()), fmt, columns)
    path = write_export(obj.config.store.exports_dir, fmt, payload)
    click.echo(f"Jobs exported successfully to {path}")


@cli.command("settings")
@click.option("--columns", default=None, help="Comma-separated list of visible columns.")
@pass_context
@_domain_errors
def settings_command(obj: _Context, columns: str | None) -> None:
    """Show or set the visible columns."""
    store = obj.settings_store()
    if columns is None:
        current = store.load().columns
        click.echo(f"Visible columns: {', '.join(current) if current else '(default) ' + ', '.join(DEFAULT_COLUMNS)}")
        return
    selected = [c.strip() for c in columns.split(",") if c.strip()]
    unknown = [c for c in selected if c not in FLAT_FIELDS]
    if unknown:
        click.echo(f"Warning: unknown columns will render as N/A: {', '.join(unknown)}", err=True)
    store.save(Settings(columns=selected))
    click.echo(f"Updated visible columns: {', '.join(selected)}")


@cli.command()
@click.option("--port", type=click.IntRange(1, 65535), default=None, help="Port (default: $MLCLI_API_PORT or 3000).")
@click.option("--host", default=None, help="Bind address (default: $MLCLI_API_HOST or 127.0.0.1).")
@pass_context
@_domain_errors
def serve(obj: _Context, port: int | None, host: str | None) -> None:
    """Start the read-only REST API."""
    from mlcli.app import run

    if port is not None:
        obj.config.api.port = port
    if host is not None:
        obj.config.api.host = host
    click.echo(f"Server running at http://{obj.config.api.host}:{obj.config.api.port}")
    run(obj.config)


@cli.command()
@click.option("--generate", is_flag=True, help="Generate a new API key, replacing the current one.")
@pass_context
@_domain_errors
def auth(obj: _Context, generate: bool) -> None:
    """Generate or inspect the REST API key."""
    gate = obj.gate()
    if generate:
        api_key = gate.generate()
        click.echo(f"New API Key generated: {api_key}")
        click.echo("Save this key securely. It won't be shown again.")
    elif gate.is_configured():
        click.echo("An API key is configured. Use 'mlcli auth --generate' to replace it.")
    else:
        click.echo("No API Key found. Use 'mlcli auth --generate' to create one.")
