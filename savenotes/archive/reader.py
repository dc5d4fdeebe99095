"""
Tagged-record reader for the Notes note-body archive.

The archive is a dense stream of records. Each record starts with one header
byte: the upper five bits are the field index within the enclosing structure
and the lower three bits are the value type. Nested structures are stored as
byte strings and are read by opening a child stream over them.

The reader knows nothing about the note schema; see ``schema.py`` for that.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator, Optional, Union

from ..exceptions import DecodeFault

LOGGER = logging.getLogger(__name__)

# Deepest chain of nested byte strings a stream may open.
MAX_DEPTH = 64

# A base-128 varint never needs more than 10 bytes for a 64-bit quantity.
_MAX_VARINT_BYTES = 10

_INT32_MIN = -(1 << 31)
_INT32_MAX = (1 << 31) - 1
_UINT64_LIMIT = 1 << 64

_FLOAT = struct.Struct("<f")


class FieldType(IntEnum):
    INTEGER = 0
    BYTES = 2
    FLOAT = 5


RecordValue = Union[int, float, memoryview]


@dataclass(frozen=True)
class Record:
    """One decoded (field index, typed value) unit."""

    index: int
    type: FieldType
    value: RecordValue
    offset: int  # absolute offset of the header byte
    payload_offset: Optional[int] = None  # byte strings only

    def as_int(self) -> int:
        if self.type != FieldType.INTEGER:
            raise DecodeFault(self.offset, int(self.type), "expected an integer")
        return int(self.value)  # type: ignore[arg-type]

    def as_bool(self) -> bool:
        return self.as_int() != 0

    def as_float(self) -> float:
        if self.type != FieldType.FLOAT:
            raise DecodeFault(self.offset, int(self.type), "expected a float")
        return float(self.value)  # type: ignore[arg-type]

    def as_bytes(self) -> bytes:
        if self.type != FieldType.BYTES:
            raise DecodeFault(self.offset, int(self.type), "expected a byte string")
        return bytes(self.value)  # type: ignore[arg-type]

    def as_string(self) -> str:
        return self.as_bytes().decode("utf-8", errors="replace")

    def hex(self) -> str:
        """Hex dump of a byte-string value, for debug logging."""
        if self.type != FieldType.BYTES:
            return f"{self.value!r}"
        return bytes(self.value).hex(" ")  # type: ignore[arg-type]


def _wrap_int32(raw: int) -> Optional[int]:
    if raw <= _INT32_MAX:
        return raw
    # Negative int32 values are written sign-extended to 64 bits.
    if _UINT64_LIMIT + _INT32_MIN <= raw < _UINT64_LIMIT:
        return raw - _UINT64_LIMIT
    return None


class RecordStream:
    """Forward-only cursor over an archive buffer or a nested byte string.

    Child streams borrow the parent's memory (no copies) and remember their
    absolute base offset so faults always point into the top-level archive.
    """

    def __init__(
        self,
        data: Union[bytes, bytearray, memoryview],
        *,
        base_offset: int = 0,
        depth: int = 0,
        parent: Optional["RecordStream"] = None,
    ) -> None:
        self._view = data if isinstance(data, memoryview) else memoryview(data)
        self._pos = 0
        self._failed: Optional[DecodeFault] = None
        self.base_offset = base_offset
        self.depth = depth
        self.parent = parent

    def __repr__(self) -> str:
        return (
            f"RecordStream(offset={self.offset}, size={len(self._view)}, "
            f"depth={self.depth})"
        )

    def __iter__(self) -> Iterator[Record]:
        while True:
            record = self.next()
            if record is None:
                return
            yield record

    def __len__(self) -> int:
        return len(self._view)

    @property
    def offset(self) -> int:
        """Absolute position of the cursor."""
        return self.base_offset + self._pos

    @property
    def remaining(self) -> int:
        return len(self._view) - self._pos

    @property
    def at_end(self) -> bool:
        return self._pos >= len(self._view)

    def next(self) -> Optional[Record]:
        """Return the next record, or ``None`` once the buffer is exhausted.

        Raises DecodeFault for malformed input; after that the stream stays
        failed and every further call raises the same fault.
        """
        if self._failed is not None:
            raise self._failed
        if self.at_end:
            return None
        header_offset = self.offset
        header = self._view[self._pos]
        self._pos += 1
        index = header >> 3
        tag = header & 0x07
        try:
            if tag == FieldType.INTEGER:
                raw = self._read_varint(header_offset, tag)
                value = _wrap_int32(raw)
                if value is None:
                    raise DecodeFault(
                        header_offset, tag, f"integer overflow {raw:#x}"
                    )
                return Record(index, FieldType.INTEGER, value, header_offset)
            if tag == FieldType.FLOAT:
                chunk = self._take(4, header_offset, tag)
                (fval,) = _FLOAT.unpack(chunk)
                return Record(index, FieldType.FLOAT, fval, header_offset)
            if tag == FieldType.BYTES:
                length = self._read_varint(header_offset, tag)
                payload_offset = self.offset
                chunk = self._take(length, header_offset, tag)
                return Record(
                    index, FieldType.BYTES, chunk, header_offset, payload_offset
                )
            raise DecodeFault(header_offset, tag, "unknown data type")
        except DecodeFault as fault:
            LOGGER.debug("notes.reader.fault depth=%d %s", self.depth, fault)
            self._failed = fault
            raise

    def open(self, record: Record) -> "RecordStream":
        """Open a child stream over a byte-string record read from this stream."""
        if record.type != FieldType.BYTES:
            raise DecodeFault(
                record.offset, int(record.type), "expected a nested structure"
            )
        if self.depth + 1 > MAX_DEPTH:
            raise DecodeFault(record.offset, int(record.type), "nesting too deep")
        return RecordStream(
            record.value,  # type: ignore[arg-type]
            base_offset=record.payload_offset or 0,
            depth=self.depth + 1,
            parent=self,
        )

    def _read_varint(self, header_offset: int, tag: int) -> int:
        result = 0
        for i in range(_MAX_VARINT_BYTES):
            if self.at_end:
                raise DecodeFault(header_offset, tag, "truncated varint")
            c = self._view[self._pos]
            self._pos += 1
            result |= (c & 0x7F) << (7 * i)
            if not c & 0x80:
                return result
        raise DecodeFault(header_offset, tag, "varint too long")

    def _take(self, count: int, header_offset: int, tag: int) -> memoryview:
        if count > self.remaining:
            raise DecodeFault(
                header_offset,
                tag,
                f"truncated value: need {count} bytes, {self.remaining} left",
            )
        chunk = self._view[self._pos : self._pos + count]
        self._pos += count
        return chunk
