"""
Sync Command - Project a Code Climate report onto work items
"""

import asyncio
from pathlib import Path
from typing import List, Optional

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from climatesync.shared.domain.exceptions import ClimateSyncError, ConfigurationError
from climatesync.shared.infrastructure.config import Settings, settings
from climatesync.shared.infrastructure.logging import get_logger
from climatesync.workitems.application.client import WorkItemClient
from climatesync.workitems.application.sync_service import IssueSynchronizer, SyncReport, load_issues
from climatesync.workitems.domain.models import AnalysisIssue

console = Console()
logger = get_logger(__name__)


def _resolve_settings(**overrides: Optional[str]) -> Settings:
    update = {key: value for key, value in overrides.items() if value is not None}
    return settings.model_copy(update=update) if update else settings


def _print_report(report: SyncReport) -> None:
    table = Table(title="Synchronization Summary", box=box.ROUNDED)
    table.add_column("Outcome", style="cyan")
    table.add_column("Count", justify="right")
    table.add_column("Details", style="dim")

    table.add_row("Created", str(len(report.created)), ", ".join(map(str, report.created)))
    table.add_row("Already tracked", str(len(report.existing)), ", ".join(map(str, report.existing)))
    table.add_row("Skipped", str(len(report.skipped)), ", ".join(report.skipped))
    console.print(table)


async def run_sync(
    issues: List[AnalysisIssue],
    component: str,
    build_version: str,
    work_item_type: str,
    config: Settings,
) -> SyncReport:
    async with WorkItemClient.from_settings(config) as client:
        synchronizer = IssueSynchronizer(
            client,
            component=component,
            build_version=build_version,
            work_item_type=work_item_type,
            max_concurrency=config.max_concurrency,
        )
        return await synchronizer.sync(issues)


def sync_command(
    issues_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Code Climate JSON output"),
    component: str = typer.Option(..., "--component", "-c", help="Owning component name"),
    build_version: str = typer.Option(..., "--build-version", "-b", help="Build version the issues were found in"),
    work_item_type: Optional[str] = typer.Option(None, "--type", "-t", help="Work item type (default: settings)"),
    collection_url: Optional[str] = typer.Option(None, "--collection-url", help="Collection URL"),
    project: Optional[str] = typer.Option(None, "--project", "-p", help="Project name"),
    token: Optional[str] = typer.Option(None, "--token", help="Bearer access token"),
):
    """
    Create work items for issues not yet tracked

    Example:
        climatesync sync report.json -c web -b 1.4.2
        climatesync sync report.json -c web -b 1.4.2 --type Task
    """
    config = _resolve_settings(collection_url=collection_url, project=project, access_token=token)
    item_type = work_item_type or config.work_item_type

    try:
        issues = load_issues(issues_file)
    except ValueError as e:
        console.print(f"[red]Could not read issues from {issues_file}:[/red] {e}")
        raise typer.Exit(code=1)

    try:
        report = asyncio.run(run_sync(issues, component, build_version, item_type, config))
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(code=1)
    except (ClimateSyncError, ValueError) as e:
        logger.error("sync_aborted", error=str(e), error_type=type(e).__name__)
        console.print(f"[red]Synchronization aborted:[/red] {e}")
        raise typer.Exit(code=1)

    _print_report(report)
