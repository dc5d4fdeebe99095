"""Export command: save or print every selected note."""

import re
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from savenotes.cli.utils.log import setup_logging
from savenotes.exceptions import NoteStoreError
from savenotes.exporter import NoteExporter
from savenotes.rendering.options import OutputFormat, RenderConfig
from savenotes.store import NoteStore

console = Console()


def export_notes(
    db: Optional[Path] = typer.Option(
        None,
        "--db",
        "-f",
        help="Notes database (default: $SAVENOTES_DB or the macOS Notes store)",
    ),
    include_all: bool = typer.Option(
        False, "--all", "-a", help="Include deleted notes"
    ),
    directory: Path = typer.Option(
        Path("."), "--dir", "-d", help="Root directory for saved notes"
    ),
    title: Optional[str] = typer.Option(
        None, "--title", "-t", help="Only notes whose title matches this regex"
    ),
    fmt: OutputFormat = typer.Option(
        OutputFormat.TEXT, "--format", "-F", help="Output format"
    ),
    print_notes: bool = typer.Option(
        False, "--print", "-p", help="Print notes instead of saving files"
    ),
    full_page: bool = typer.Option(
        False, "--full-page", help="Wrap HTML output in a complete document"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Report each note"),
    debug: bool = typer.Option(False, "--debug", "-X", help="Trace archive decoding"),
):
    """Save (or print) notes from the Notes database."""
    setup_logging(verbose=verbose, debug=debug)

    if title is not None:
        try:
            pattern = re.compile(title)
        except re.error as e:
            raise typer.BadParameter(f"invalid pattern: {e}", param_hint="--title")
    else:
        pattern = None
    if print_notes and fmt is OutputFormat.RAW:
        raise typer.BadParameter(
            "raw output cannot be printed", param_hint="--print"
        )

    exporter = NoteExporter(
        NoteStore(db),
        fmt,
        root=directory,
        title_pattern=pattern,
        include_deleted=include_all,
        config=RenderConfig(full_page=full_page),
    )

    try:
        with exporter.store:
            if print_notes:
                for record, output in exporter.iter_rendered():
                    if verbose:
                        console.print(f"[bold]Note:[/bold] {record.display_title}")
                    typer.echo(output)
                return
            result = exporter.export()
    except NoteStoreError as e:
        console.print(f"[bold red]Error:[/bold red] {str(e)}")
        raise typer.Exit(1)

    console.print(f"Saved [bold]{result.count}[/bold] notes to {directory}")
    if result.failed:
        console.print(f"[yellow]Warning:[/yellow] {result.failed} notes could not be decoded")
