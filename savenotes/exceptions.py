"""Library exceptions."""

from __future__ import annotations

from typing import Optional


class SaveNotesException(Exception):
    """Generic savenotes exception."""


class NoteStoreError(SaveNotesException):
    """The Notes database could not be opened or queried."""


# Archive faults
class ArchiveFault(SaveNotesException):
    """A defect found while decoding a note-body archive.

    Faults are non-fatal to a batch: the schema walker collects them on the
    decoded body and the caller decides whether to skip the note.
    """


class DecodeFault(ArchiveFault):
    """Malformed low-level record (bad type tag, overflow, truncation)."""

    def __init__(self, offset: int, tag: Optional[int], reason: str) -> None:
        self.offset = offset
        self.tag = tag
        self.reason = reason
        tag_text = "-" if tag is None else str(tag)
        super().__init__(f"{reason} at offset {offset} (tag {tag_text})")


class SchemaFault(ArchiveFault):
    """A record does not match the expected note-body schema."""

    def __init__(
        self,
        context: str,
        expected: object,
        actual: object,
        cause: Optional[DecodeFault] = None,
    ) -> None:
        self.context = context
        self.expected = expected
        self.actual = actual
        self.cause = cause
        message = f"{context}: expected {expected}, got {actual}"
        if cause is not None:
            message = f"{message} ({cause})"
        super().__init__(message)


class IntegrityFault(ArchiveFault):
    """Attribute run lengths do not add up to the text length."""

    def __init__(self, text_length: int, runs_length: int) -> None:
        self.text_length = text_length
        self.runs_length = runs_length
        super().__init__(
            f"text length {text_length} != attribute run length {runs_length}"
        )


class UnknownStyleFault(ArchiveFault):
    """An unrecognized style field or code inside an attribute run."""

    def __init__(self, run_index: int, field_index: int, context: str) -> None:
        self.run_index = run_index
        self.field_index = field_index
        self.context = context
        super().__init__(
            f"attribute run {run_index}: unexpected {context} {field_index}"
        )


class NoteBodyError(ArchiveFault):
    """A stored note body could not be decompressed."""
