"""Command modules for the savenotes CLI."""

from savenotes.cli.commands import archive_file, export

__all__ = ["archive_file", "export"]
