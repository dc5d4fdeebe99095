from __future__ import annotations

import gzip
import logging
import zlib
from typing import Optional, Union

from .archive.schema import decode_note_body
from .domain import NoteBody
from .exceptions import ArchiveFault, NoteBodyError

LOGGER = logging.getLogger(__name__)

BlobInput = Union[bytes, bytearray, memoryview]

GZIP_MAGIC = b"\x1f\x8b"


def _as_bytes(val: BlobInput) -> bytes:
    if not isinstance(val, (bytes, bytearray, memoryview)):
        raise TypeError(f"note body must be bytes, not {type(val).__name__}")
    LOGGER.debug("notes.decoder.input_bytes len=%d", len(val))
    return bytes(val)


def decompress(blob: bytes) -> bytes:
    """Inflate a stored note body: gzip, zlib or raw deflate."""
    if blob[:2] == GZIP_MAGIC:
        return gzip.decompress(blob)
    try:
        return zlib.decompress(blob)
    except zlib.error:
        return zlib.decompress(blob, -zlib.MAX_WBITS)


def decode_body(blob: BlobInput) -> NoteBody:
    """Decompress and walk a stored note body.

    Raises NoteBodyError when the blob is empty or does not inflate, and
    SchemaFault when the archive has no readable text.
    """
    raw = _as_bytes(blob)
    if not raw:
        raise NoteBodyError("empty note body")
    try:
        doc = decompress(raw)
    except (OSError, EOFError, zlib.error) as e:
        raise NoteBodyError(f"cannot decompress note body: {e}") from e
    body = decode_note_body(doc)
    LOGGER.debug(
        "notes.decoder.body text=%d runs=%d faults=%d",
        len(body.text),
        len(body.runs),
        len(body.faults),
    )
    return body


class BodyDecoder:
    """Decode a stored (compressed) note body to NoteBody, or None."""

    def decode(self, blob: Optional[BlobInput]) -> Optional[NoteBody]:
        if blob is None:
            return None
        try:
            return decode_body(blob)
        except ArchiveFault as e:
            LOGGER.debug("notes.decoder.fail %s", e)
            return None
