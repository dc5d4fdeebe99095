"""Commands that work on a single archive file instead of the database."""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from savenotes.cli.utils.archive_io import decode_archive_file
from savenotes.cli.utils.log import setup_logging
from savenotes.exceptions import SchemaFault
from savenotes.rendering.debug_tools import map_attribute_runs, pretty_text
from savenotes.rendering.options import OutputFormat, RenderConfig
from savenotes.rendering.renderer import NoteRenderer

console = Console()


def show_runs(
    archive: Path = typer.Argument(..., help="Note-body archive, gzipped or not"),
    debug: bool = typer.Option(False, "--debug", "-X", help="Trace archive decoding"),
):
    """Print the attribute runs of one archive."""
    setup_logging(debug=debug)
    try:
        body = decode_archive_file(archive)
    except SchemaFault as e:
        console.print(f"[bold red]Error:[/bold red] {str(e)}")
        raise typer.Exit(1)

    table = Table("#", "Offset", "Length", "Kind", "Indent", "Styles", "Text")
    for row in map_attribute_runs(body.text, body.runs):
        table.add_row(
            str(row["index"]),
            str(row["utf16_start"]),
            str(row["utf16_len"]),
            str(row["kind"]),
            str(row["indent"]),
            " ".join(row["styles"]),  # type: ignore[arg-type]
            pretty_text(str(row["text"])),
        )
    console.print(table)
    console.print(f"versions: {body.versions[0]}, {body.versions[1]}")
    for fault in body.faults:
        console.print(f"[yellow]Fault:[/yellow] {fault}")


def render_archive(
    archive: Path = typer.Argument(..., help="Note-body archive, gzipped or not"),
    fmt: OutputFormat = typer.Option(
        OutputFormat.HTML, "--format", "-F", help="Output format"
    ),
    full_page: bool = typer.Option(
        False, "--full-page", help="Wrap HTML output in a complete document"
    ),
    debug: bool = typer.Option(False, "--debug", "-X", help="Trace archive decoding"),
):
    """Render one archive to stdout."""
    setup_logging(debug=debug)
    if fmt is OutputFormat.RAW:
        raise typer.BadParameter("raw output cannot be printed", param_hint="--format")
    try:
        body = decode_archive_file(archive)
    except SchemaFault as e:
        console.print(f"[bold red]Error:[/bold red] {str(e)}")
        raise typer.Exit(1)

    if fmt is OutputFormat.TEXT:
        typer.echo(body.text)
        return
    renderer = NoteRenderer(RenderConfig(full_page=full_page, page_title=archive.stem))
    typer.echo(renderer.render(body, fmt))
