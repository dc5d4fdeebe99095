"""Public API for savenotes."""

from .archive.schema import decode_note_body
from .decoding import BodyDecoder
from .domain import AttributeRun, NoteBody, ParagraphKind, ParagraphStyle
from .exceptions import (
    ArchiveFault,
    DecodeFault,
    IntegrityFault,
    SchemaFault,
    UnknownStyleFault,
)
from .rendering.options import OutputFormat, RenderConfig
from .rendering.renderer import NoteRenderer, get_renderer

__all__ = [
    "decode_note_body",
    "BodyDecoder",
    "NoteBody",
    "AttributeRun",
    "ParagraphKind",
    "ParagraphStyle",
    "ArchiveFault",
    "DecodeFault",
    "SchemaFault",
    "IntegrityFault",
    "UnknownStyleFault",
    "NoteRenderer",
    "get_renderer",
    "OutputFormat",
    "RenderConfig",
]
