#!/usr/bin/env python
"""Command line interface for savenotes."""

import typer

from savenotes.cli.commands import archive_file, export

app = typer.Typer(help="Save Apple Notes as text, HTML or Markdown")

app.command("export")(export.export_notes)
app.command("runs")(archive_file.show_runs)
app.command("render")(archive_file.render_archive)


@app.callback()
def callback():
    """Export notes from the macOS Notes database."""
    pass


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
