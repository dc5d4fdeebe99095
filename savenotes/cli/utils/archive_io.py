"""Reading note-body archives from loose files."""

import zlib
from pathlib import Path

import typer

from savenotes.archive.schema import decode_note_body
from savenotes.decoding import GZIP_MAGIC, decompress
from savenotes.domain import NoteBody


def load_archive(path: Path) -> bytes:
    """Return the archive bytes of ``path``, inflating it if gzipped."""
    try:
        data = path.read_bytes()
    except OSError as e:
        raise typer.BadParameter(f"cannot read {path}: {e}") from e
    if data[:2] == GZIP_MAGIC:
        try:
            return decompress(data)
        except (OSError, EOFError, zlib.error) as e:
            raise typer.BadParameter(f"{path} is not a valid gzip file: {e}") from e
    return data


def decode_archive_file(path: Path) -> NoteBody:
    """Decode ``path``; raises SchemaFault when it has no readable text."""
    return decode_note_body(load_archive(path))
