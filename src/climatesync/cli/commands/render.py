"""
Render Command - Preview the HTML an issue body turns into
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.syntax import Syntax

from climatesync.workitems.application.markup import render_markup

console = Console()


def render_command(
    markdown_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Markdown file to render"),
    raw: bool = typer.Option(False, "--raw", help="Print plain HTML without syntax colouring"),
):
    """
    Render a markdown file the way issue bodies are rendered

    Example:
        climatesync render body.md
    """
    output = render_markup(markdown_file.read_text(encoding="utf-8"))
    if raw:
        typer.echo(output)
    else:
        console.print(Syntax(output, "html", word_wrap=True))
