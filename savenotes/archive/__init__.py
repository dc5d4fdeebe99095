"""Note-body archive: tagged-record reader and schema walk."""

from .reader import MAX_DEPTH, FieldType, Record, RecordStream
from .schema import NoteBodyWalker, decode_note_body

__all__ = [
    "MAX_DEPTH",
    "FieldType",
    "Record",
    "RecordStream",
    "NoteBodyWalker",
    "decode_note_body",
]
