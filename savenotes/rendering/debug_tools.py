"""
Debug helpers for mapping attribute runs to the exact text slices they cover.

These utilities are intended for troubleshooting decoder and renderer issues.
They do no I/O and can be safely used in tests.
"""

from __future__ import annotations

from typing import Dict, List, Sequence

from ..domain import (
    AttributeRun,
    ColorStyle,
    FontStyle,
    StyleDescriptor,
    TextStyle,
    UrlStyle,
    UuidStyle,
)
from ..utf16 import iter_run_slices


def describe_style(style: StyleDescriptor) -> str:
    if isinstance(style, TextStyle):
        flags = [name for name, on in (("bold", style.bold), ("italic", style.italic)) if on]
        for name in ("underline", "strikethrough", "baseline"):
            value = getattr(style, name)
            if value:
                flags.append(f"{name}={value}")
        return "text(" + ",".join(flags) + ")"
    if isinstance(style, FontStyle):
        return f"font({style.name or '-'},{style.size:g})"
    if isinstance(style, UrlStyle):
        return f"url({style.url})"
    if isinstance(style, UuidStyle):
        return f"object({style.uuid},{style.type})"
    if isinstance(style, ColorStyle):
        return f"color({style.hex})"
    return type(style).__name__


def map_attribute_runs(
    text: str, runs: Sequence[AttributeRun]
) -> List[Dict[str, object]]:
    """Return a list of dictionaries mapping each run to its text.

    Each dict contains:
      - index: run index
      - utf16_start: start offset in UTF-16 code units
      - utf16_len: run.length
      - text: Python string slice for the run
      - kind, indent, checked: paragraph style of the run
      - styles: short descriptions of the inline styles
    """
    out: List[Dict[str, object]] = []
    lengths = [run.length for run in runs]
    for idx, (run, (seg, start)) in enumerate(zip(runs, iter_run_slices(text, lengths))):
        para = run.paragraph_style
        out.append(
            {
                "index": idx,
                "utf16_start": start,
                "utf16_len": run.length,
                "text": seg,
                "kind": para.kind.value,
                "indent": para.indent,
                "checked": para.checked,
                "styles": [describe_style(s) for s in run.inline_styles],
            }
        )
    return out


def pretty_text(raw: str) -> str:
    # Make control characters explicit to see line boundaries clearly
    return (
        raw.replace("\n", "\u23ce")
        .replace("\u2028", "\u2936")
        .replace("\x00", "\u2400")
        .replace("\ufffc", "{OBJ}")
    )


def dump_runs_text(text: str, runs: Sequence[AttributeRun]) -> str:
    """Return a human-readable dump of runs with escaped whitespace markers."""
    rows = []
    for row in map_attribute_runs(text, runs):
        styles = " ".join(row["styles"])  # type: ignore[arg-type]
        rows.append(
            f"[{row['index']:03d}] off={row['utf16_start']:<5} len={row['utf16_len']:<4} "
            f"kind={row['kind']:<10} indent={row['indent']!s:<2} {styles} "
            f"text=“{pretty_text(str(row['text']))}”"
        )
    return "\n".join(rows)
