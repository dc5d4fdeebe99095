"""Plain-annotated renderer: exposes run boundaries for debugging."""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..domain import AttributeRun
from ..utf16 import iter_run_slices
from .options import RenderConfig


class PlainAnnotatedRenderer:
    """Wrap each run's text in ``<N>``…``</N>``, numbering runs from 1.

    No escaping and no block structure; empty runs still get their marker
    pair so the numbering matches the run sequence.
    """

    def __init__(self, config: Optional[RenderConfig] = None) -> None:
        self.config = config or RenderConfig()

    def render(self, text: str, runs: Sequence[AttributeRun]) -> str:
        parts: List[str] = []
        lengths = [run.length for run in runs]
        for number, (piece, _start) in enumerate(iter_run_slices(text, lengths), 1):
            parts.append(f"<{number}>{piece}</{number}>")
        return "".join(parts)
