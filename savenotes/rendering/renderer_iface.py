"""
Renderer interface for decoded note bodies.

Every output format turns the plain text plus its attribute runs into one
string. Renderers never perform I/O and keep no state between calls.
"""

from __future__ import annotations

from typing import Protocol, Sequence

from ..domain import AttributeRun


class NoteMarkupRenderer(Protocol):
    """Minimal seam the exporter and CLI render through."""

    def render(self, text: str, runs: Sequence[AttributeRun]) -> str: ...
