"""UTF-16 length accounting.

Attribute run lengths count UTF-16 code units, while Python strings index
code points. Characters outside the BMP take two units.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Tuple

_BMP_LIMIT = 0xFFFF


def utf16_len(text: str) -> int:
    return len(text) + sum(1 for ch in text if ord(ch) > _BMP_LIMIT)


def iter_run_slices(text: str, lengths: Iterable[int]) -> Iterator[Tuple[str, int]]:
    """Yield ``(slice, start_units)`` for consecutive runs of UTF-16 lengths.

    Slicing is clamped to the text: runs past the end yield empty strings and
    text past the last run is not yielded. A run boundary falling inside a
    surrogate pair keeps the whole character in the earlier run.
    """
    n = len(text)
    pos = 0  # code point index
    units = 0  # UTF-16 offset of ``pos``
    target = 0
    for length in lengths:
        start_units = units
        target += max(0, length)
        start = pos
        while pos < n and units < target:
            units += 2 if ord(text[pos]) > _BMP_LIMIT else 1
            pos += 1
        yield text[start:pos], start_units
