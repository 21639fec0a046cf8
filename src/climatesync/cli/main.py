"""
climatesync CLI
Main entry point for the command-line interface

Usage:
    climatesync sync <report.json> -c <component> -b <version>   # Sync issues to work items
    climatesync render <body.md>                                 # Preview rendered issue body
    climatesync version                                          # Show version
"""

import typer
from rich.console import Console
from rich.panel import Panel

from climatesync import __version__
from climatesync.cli.commands import render, sync
from climatesync.shared.infrastructure.logging import configure_logging

app = typer.Typer(
    name="climatesync",
    help="climatesync - Track Code Climate issues as work items",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()

app.command("sync", help="Create work items for issues not yet tracked")(sync.sync_command)
app.command("render", help="Render a markdown issue body to HTML")(render.render_command)


@app.callback()
def _setup():
    configure_logging()


@app.command()
def version():
    """Show climatesync version information"""
    console.print(Panel.fit(
        "[bold cyan]climatesync[/bold cyan]\n"
        f"[dim]Version:[/dim] {__version__}\n",
        title="About climatesync",
        border_style="cyan"
    ))


def main():
    """Main entry point"""
    app()


if __name__ == "__main__":
    main()
