"""
Schema walk for the note-body archive.

The archive does not describe itself: meaning comes from the position of each
field, so this module encodes the expected field indices at every nesting
level. The layout was reverse-engineered from real note stores and newer
versions of Notes may add fields we have not seen. Anything unexpected is
recorded as a fault on the returned NoteBody instead of aborting the walk;
only a missing plain text is raised to the caller.

Layout::

    root        1: int (0)            2: document
    document    1: int (0)            2: int (version)       3: note
    note        2: text               3: edit record (repeated, until pos < 0)
                4: words              5: attribute run (repeated, to the end)
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Dict, List, Optional, Tuple

from ..domain import (
    DEFAULT_FONT_SIZE,
    AttributeRun,
    ColorStyle,
    FontStyle,
    NoteBody,
    ParagraphKind,
    ParagraphStyle,
    RunBuilder,
    StyleCode,
    TextBits,
    TextStyle,
    UrlStyle,
    UuidStyle,
)
from ..exceptions import (
    ArchiveFault,
    DecodeFault,
    IntegrityFault,
    SchemaFault,
    UnknownStyleFault,
)
from ..utf16 import utf16_len
from .reader import Record, RecordStream

LOGGER = logging.getLogger(__name__)

# Note-level field indices
F_TEXT = 2
F_EDIT = 3
F_WORDS = 4
F_RUN = 5

# Attribute run field indices
A_LENGTH = 1
A_PARAGRAPH = 2
A_FONT = 3
A_TEXT_STYLE = 5
A_UNDERLINE = 6
A_STRIKETHROUGH = 7
A_BASELINE = 8
A_LINK = 9
A_COLOR = 10
A_UNKNOWN_11 = 11
A_ATTACHMENT = 12

_KNOWN_TEXT_BITS = TextBits.BOLD | TextBits.ITALIC


def _expect(stream: RecordStream, index: int, context: str) -> Record:
    """Read the next record and check its field index."""
    record = stream.next()
    if record is None:
        raise SchemaFault(context, f"field {index}", "end of data")
    if record.index != index:
        raise SchemaFault(context, f"field {index}", f"field {record.index}")
    return record


def _as_schema_fault(context: str, fault: DecodeFault) -> SchemaFault:
    return SchemaFault(context, "well-formed record", fault.reason, cause=fault)


class NoteBodyWalker:
    """Walks one decompressed note-body archive into text and attribute runs."""

    def __init__(self, data: bytes) -> None:
        self.root = RecordStream(data)
        self.faults: List[ArchiveFault] = []
        self._run_fields: Dict[
            int, Callable[[RecordStream, Record, RunBuilder, int], None]
        ] = {
            A_PARAGRAPH: self._paragraph_style,
            A_FONT: self._font,
            A_TEXT_STYLE: self._text_style,
            A_UNDERLINE: self._underline,
            A_STRIKETHROUGH: self._strikethrough,
            A_BASELINE: self._baseline,
            A_LINK: self._link,
            A_COLOR: self._color,
            A_UNKNOWN_11: self._unknown_11,
            A_ATTACHMENT: self._attachment,
        }

    def walk(self) -> NoteBody:
        try:
            note, text = self._locate_text()
        except DecodeFault as fault:
            raise _as_schema_fault("note text", fault) from fault

        edit_count = 0
        versions = (-1, -1)
        try:
            edit_count = self._skip_edit_records(note)
            versions = self._read_versions(note)
        except DecodeFault as fault:
            self._fault(_as_schema_fault("note header", fault))
            return self._result(text, (), versions, edit_count)
        except SchemaFault as fault:
            self._fault(fault)
            return self._result(text, (), versions, edit_count)

        runs = self._read_runs(note)

        text_units = utf16_len(text)
        run_units = sum(run.length for run in runs)
        if run_units != text_units:
            self._fault(IntegrityFault(text_units, run_units))
        return self._result(text, tuple(runs), versions, edit_count)

    def _result(
        self,
        text: str,
        runs: Tuple[AttributeRun, ...],
        versions: Tuple[int, int],
        edit_count: int,
    ) -> NoteBody:
        return NoteBody(
            text=text,
            runs=runs,
            faults=tuple(self.faults),
            versions=versions,
            edit_count=edit_count,
        )

    def _fault(self, fault: ArchiveFault) -> None:
        LOGGER.debug("notes.schema.fault %s", fault)
        self.faults.append(fault)

    # -- text --------------------------------------------------------------

    def _locate_text(self) -> Tuple[RecordStream, str]:
        root = self.root
        marker = _expect(root, 1, "root").as_int()
        if marker != 0:
            LOGGER.debug("notes.schema.root_marker value=%d", marker)
        doc = root.open(_expect(root, 2, "root"))

        _expect(doc, 1, "document")
        version = _expect(doc, 2, "document").as_int()
        LOGGER.debug("notes.schema.document version=%d", version)
        note = doc.open(_expect(doc, 3, "document"))

        text = _expect(note, F_TEXT, "note").as_string()
        LOGGER.debug("notes.schema.text len=%d", len(text))
        return note, text

    # -- edit records ------------------------------------------------------

    def _skip_edit_records(self, note: RecordStream) -> int:
        """Consume edit records up to the negative-position sentinel.

        The text already reflects every edit; these records only describe
        history, so their contents are logged and dropped.
        """
        count = 0
        while True:
            rec = note.open(_expect(note, F_EDIT, "edit record"))
            head = rec.open(_expect(rec, 1, "edit record"))
            flag = _expect(head, 1, "edit record header").as_int()
            pos = _expect(head, 2, "edit record header").as_int()
            if pos < 0:
                LOGGER.debug("notes.schema.edit_end flag=%d pos=%d", flag, pos)
                return count

            length = _expect(rec, 2, "edit record").as_int()
            span = rec.open(_expect(rec, 3, "edit record"))
            s1 = _expect(span, 1, "edit record span").as_int()
            i1 = _expect(span, 2, "edit record span").as_int()

            f2 = False
            links: List[int] = []
            item = rec.next()
            if item is not None and item.index == 4:
                f2 = item.as_bool()
                item = rec.next()
            # Looks like "next" pointers of a linked list, always in order.
            while item is not None and item.index == 5 and len(links) < 2:
                links.append(item.as_int())
                item = rec.next()
            if item is not None:
                self._fault(
                    SchemaFault("edit record", "end of record", f"field {item.index}")
                )

            LOGGER.debug(
                "notes.schema.edit flag=%d pos=%d len=%d s1=%d i1=%d f2=%s next=%s",
                flag,
                pos,
                length,
                s1,
                i1,
                f2,
                links,
            )
            count += 1

    # -- words / versions --------------------------------------------------

    def _read_versions(self, note: RecordStream) -> Tuple[int, int]:
        words = note.open(_expect(note, F_WORDS, "words"))
        entry = words.open(_expect(words, 1, "words"))
        unknown = _expect(entry, 1, "words entry")
        LOGGER.debug("notes.schema.words_marker %s", unknown.hex())
        v1 = self._version(entry)
        v2 = self._version(entry)
        LOGGER.debug("notes.schema.versions v1=%02x v2=%02x", v1 & 0xFF, v2 & 0xFF)
        return v1, v2

    def _version(self, entry: RecordStream) -> int:
        holder = entry.open(_expect(entry, 2, "words entry"))
        item = holder.next()
        if item is None:
            return -1
        if item.index != 1:
            self._fault(SchemaFault("version", "field 1", f"field {item.index}"))
            return -1
        return item.as_int()

    # -- attribute runs ----------------------------------------------------

    def _read_runs(self, note: RecordStream) -> List[AttributeRun]:
        runs: List[AttributeRun] = []
        while True:
            try:
                record = note.next()
            except DecodeFault as fault:
                self._fault(_as_schema_fault("attribute runs", fault))
                break
            if record is None:
                break
            if record.index != F_RUN:
                self._fault(
                    SchemaFault("attribute runs", f"field {F_RUN}", f"field {record.index}")
                )
                continue
            runs.append(self._read_run(note, record, len(runs)))
        return runs

    def _read_run(
        self, note: RecordStream, record: Record, run_index: int
    ) -> AttributeRun:
        builder = RunBuilder()
        context = f"attribute run {run_index}"
        try:
            stream = note.open(record)
            builder.length = _expect(stream, A_LENGTH, context).as_int()
            for item in stream:
                handler = self._run_fields.get(item.index)
                if handler is None:
                    LOGGER.debug("notes.schema.run_unknown %s", item.hex())
                    self._fault(
                        UnknownStyleFault(run_index, item.index, "attribute field")
                    )
                    break
                handler(stream, item, builder, run_index)
        except DecodeFault as fault:
            self._fault(_as_schema_fault(context, fault))
        except SchemaFault as fault:
            self._fault(fault)
        run = builder.build()
        LOGGER.debug(
            "notes.schema.run index=%d len=%d styles=%s",
            run_index,
            run.length,
            [type(s).__name__ for s in run.styles],
        )
        return run

    def _paragraph_style(
        self, stream: RecordStream, item: Record, builder: RunBuilder, run_index: int
    ) -> None:
        para = stream.open(item)
        code = int(StyleCode.NONE)
        indent = 0
        checked = False
        for field in para:
            if field.index == 1:
                code = field.as_int()
            elif field.index in (2, 3, 7):
                # alignment and two flags we have no use for
                LOGGER.debug("notes.schema.para%d %d", field.index, field.as_int())
            elif field.index == 4:
                indent = field.as_int()
            elif field.index == 5:
                checked = self._checklist(para.open(field))
            else:
                self._fault(UnknownStyleFault(run_index, field.index, "paragraph field"))
                break
        style = ParagraphStyle.from_code(code, indent, checked)
        if style.kind is ParagraphKind.UNKNOWN:
            self._fault(UnknownStyleFault(run_index, code, "paragraph code"))
        builder.paragraph = style

    def _checklist(self, todo: RecordStream) -> bool:
        checked = False
        for field in todo:
            if field.index == 1:
                LOGGER.debug("notes.schema.checklist_uuid %s", field.hex())
            elif field.index == 2:
                checked = field.as_bool()
        return checked

    def _font(
        self, stream: RecordStream, item: Record, builder: RunBuilder, run_index: int
    ) -> None:
        name: Optional[str] = None
        size = DEFAULT_FONT_SIZE
        for field in stream.open(item):
            if field.index == 1:
                name = field.as_string()
            elif field.index == 2:
                size = field.as_float()
            elif field.index == 3:
                # always 1 when present
                LOGGER.debug("notes.schema.font_hints %d", field.as_int())
            else:
                self._fault(UnknownStyleFault(run_index, field.index, "font field"))
                break
        if name is not None or size != DEFAULT_FONT_SIZE:
            builder.font = FontStyle(name=name, size=size)

    def _text_style(
        self, stream: RecordStream, item: Record, builder: RunBuilder, run_index: int
    ) -> None:
        value = item.as_int()
        if value & ~int(_KNOWN_TEXT_BITS):
            self._fault(UnknownStyleFault(run_index, value, "text style bits"))
        self._update_text(builder, bits=TextBits(value & int(_KNOWN_TEXT_BITS)))

    def _underline(
        self, stream: RecordStream, item: Record, builder: RunBuilder, run_index: int
    ) -> None:
        self._update_text(builder, underline=item.as_int())

    def _strikethrough(
        self, stream: RecordStream, item: Record, builder: RunBuilder, run_index: int
    ) -> None:
        self._update_text(builder, strikethrough=item.as_int())

    def _baseline(
        self, stream: RecordStream, item: Record, builder: RunBuilder, run_index: int
    ) -> None:
        self._update_text(builder, baseline=item.as_int())

    @staticmethod
    def _update_text(builder: RunBuilder, **changes: object) -> None:
        style = replace(builder.text or TextStyle(), **changes)  # type: ignore[arg-type]
        if style.bits or style.underline or style.strikethrough or style.baseline:
            builder.text = style
        else:
            builder.text = None

    def _link(
        self, stream: RecordStream, item: Record, builder: RunBuilder, run_index: int
    ) -> None:
        builder.url = UrlStyle(item.as_string())

    def _color(
        self, stream: RecordStream, item: Record, builder: RunBuilder, run_index: int
    ) -> None:
        color = stream.open(item)
        context = f"attribute run {run_index} color"
        red = _expect(color, 1, context).as_float()
        green = _expect(color, 2, context).as_float()
        blue = _expect(color, 3, context).as_float()
        alpha = _expect(color, 4, context).as_float()
        extra = color.next()
        if extra is not None:
            self._fault(SchemaFault(context, "end of color", f"field {extra.index}"))
        builder.color = ColorStyle(red, green, blue, alpha)

    def _unknown_11(
        self, stream: RecordStream, item: Record, builder: RunBuilder, run_index: int
    ) -> None:
        LOGGER.debug("notes.schema.field11 %d", item.as_int())

    def _attachment(
        self, stream: RecordStream, item: Record, builder: RunBuilder, run_index: int
    ) -> None:
        info = stream.open(item)
        context = f"attribute run {run_index} attachment"
        uuid = _expect(info, 1, context).as_string()
        type_uti = _expect(info, 2, context).as_string()
        builder.uuid = UuidStyle(uuid=uuid, type=type_uti)


def decode_note_body(data: bytes) -> NoteBody:
    """Decode a decompressed note-body archive.

    Raises SchemaFault when the plain text cannot be located. Every later
    problem is reported through ``NoteBody.faults``.
    """
    return NoteBodyWalker(data).walk()
