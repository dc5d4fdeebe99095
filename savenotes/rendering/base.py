"""
Shared traversal for the block-structured renderers.

Runs are walked in order and sliced out of the text by their UTF-16 lengths.
Each slice is split into lines; before every line the current block grouping
is reconciled with the run's paragraph style, and the line's inline styles
are opened on a stack and closed in reverse.

Block groups form a stack. Only lists nest: a list item indented deeper than
the open list opens an inner group, a shallower one closes groups down to its
level, and an item of the same kind and indent continues the open group. Any
other change closes everything and opens a fresh group.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from ..domain import (
    AttributeRun,
    ParagraphKind,
    ParagraphStyle,
    StyleDescriptor,
    UuidStyle,
)
from ..utf16 import iter_run_slices
from .options import RenderConfig

LOGGER = logging.getLogger(__name__)

# Object replacement character that stands in for an embedded object.
OBJECT_MARKER = "\ufffc"

Markup = Tuple[str, str]


def font_size_text(size: float) -> str:
    """Font size without a trailing ``.0`` for whole numbers."""
    return "%g" % size


def placeholder_text(uuid: str, type_uti: str) -> str:
    return f"[INSERT UUID {uuid}, TYPE {type_uti}]"


@dataclass
class BlockGroup:
    style: ParagraphStyle
    item_open: bool = False


@dataclass
class RenderState:
    """Mutable output and nesting state for a single render call."""

    parts: List[str] = field(default_factory=list)
    groups: List[BlockGroup] = field(default_factory=list)
    at_line_start: bool = True
    line_has_text: bool = False
    prev_plain_line: bool = False
    last_closed: Optional[ParagraphStyle] = None

    @property
    def top(self) -> Optional[BlockGroup]:
        return self.groups[-1] if self.groups else None

    def emit(self, chunk: str) -> None:
        if chunk:
            self.parts.append(chunk)

    def tail(self, count: int = 2) -> str:
        acc = ""
        for chunk in reversed(self.parts):
            acc = chunk + acc
            if len(acc) >= count:
                break
        return acc[-count:]

    def ends_with_newline(self) -> bool:
        return self.tail(1) == "\n"

    def ensure_newline(self) -> None:
        if self.parts and not self.ends_with_newline():
            self.emit("\n")

    def ensure_blank_line(self) -> None:
        if not self.parts:
            return
        tail = self.tail(2)
        if not tail.endswith("\n"):
            self.emit("\n\n")
        elif tail != "\n\n" and len(tail) == 2:
            self.emit("\n")

    def text(self) -> str:
        return "".join(self.parts)


class BlockRenderer:
    """Base class for renderers that group paragraphs into blocks.

    Subclasses supply the markup through the ``open_group``, ``close_group``,
    ``line_start``, ``line_end``, ``inline_markup`` and ``escape`` hooks.
    """

    def __init__(self, config: Optional[RenderConfig] = None) -> None:
        self.config = config or RenderConfig()

    def render(self, text: str, runs: Sequence[AttributeRun]) -> str:
        state = RenderState()
        lengths = [run.length for run in runs]
        for run, (piece, start) in zip(runs, iter_run_slices(text, lengths)):
            if not piece:
                LOGGER.debug("notes.render.empty_run start=%d len=%d", start, run.length)
                continue
            self._render_run(state, run, piece)
        self.finish(state)
        return state.text()

    def _render_run(self, state: RenderState, run: AttributeRun, piece: str) -> None:
        para = run.paragraph_style
        inline = run.inline_styles
        lines = piece.split("\n")
        last = len(lines) - 1
        for i, line in enumerate(lines):
            has_newline = i < last
            if not line and not has_newline:
                continue
            self._transition(state, para)
            self._render_line(state, para, inline, line, has_newline)

    def _render_line(
        self,
        state: RenderState,
        para: ParagraphStyle,
        inline: Sequence[StyleDescriptor],
        line: str,
        has_newline: bool,
    ) -> None:
        fresh = not state.line_has_text
        if state.at_line_start:
            line = self.line_start(state, para, line)
            state.at_line_start = False
        line = line.replace(OBJECT_MARKER, "")
        if line or self._has_placeholder(inline):
            closers: List[str] = []
            for style in inline:
                for opener, closer in self.inline_markup(style, para):
                    state.emit(opener)
                    closers.append(closer)
            state.emit(self.escape(line, para, at_line_start=fresh))
            while closers:
                state.emit(closers.pop())
            state.line_has_text = True
        if has_newline:
            self.line_end(state, para)
            state.prev_plain_line = state.line_has_text and self.is_plain(para)
            state.line_has_text = False
            state.at_line_start = True

    @staticmethod
    def _has_placeholder(inline: Sequence[StyleDescriptor]) -> bool:
        # Embedded objects occupy only the replacement character.
        return any(isinstance(s, UuidStyle) for s in inline)

    @staticmethod
    def is_plain(para: ParagraphStyle) -> bool:
        return para.kind is ParagraphKind.NONE

    # -- block state machine -------------------------------------------------

    def _transition(self, state: RenderState, para: ParagraphStyle) -> None:
        top = state.top
        if top is not None and para.is_list and top.style.is_list:
            while state.groups and state.groups[-1].style.indent > para.indent:
                self._pop(state)
            top = state.top
            if top is not None and top.style.indent == para.indent:
                if top.style.block_key == para.block_key:
                    top.style = para
                    return
                self._pop(state)
            self._push(state, para)
            return
        if top is not None and top.style.block_key == para.block_key:
            top.style = para
            return
        while state.groups:
            self._pop(state)
        self._push(state, para)

    def _push(self, state: RenderState, para: ParagraphStyle) -> None:
        state.groups.append(BlockGroup(para))
        self.open_group(state, para)
        state.prev_plain_line = False
        if state.ends_with_newline() or not state.parts:
            state.at_line_start = True
            state.line_has_text = False

    def _pop(self, state: RenderState, final: bool = False) -> None:
        group = state.groups.pop()
        self.close_group(state, group, final)
        state.last_closed = group.style
        state.prev_plain_line = False
        if state.ends_with_newline():
            state.at_line_start = True
            state.line_has_text = False

    def finish(self, state: RenderState) -> None:
        while state.groups:
            self._pop(state, final=True)

    # -- hooks -----------------------------------------------------------------

    def open_group(self, state: RenderState, para: ParagraphStyle) -> None:
        """Open a block group; ``state.groups[-1]`` is already the new group."""
        raise NotImplementedError

    def close_group(self, state: RenderState, group: BlockGroup, final: bool) -> None:
        raise NotImplementedError

    def line_start(self, state: RenderState, para: ParagraphStyle, line: str) -> str:
        """Emit the line prefix and return the (possibly trimmed) line text."""
        raise NotImplementedError

    def line_end(self, state: RenderState, para: ParagraphStyle) -> None:
        raise NotImplementedError

    def inline_markup(
        self, style: StyleDescriptor, para: ParagraphStyle
    ) -> List[Markup]:
        raise NotImplementedError

    def escape(
        self, text: str, para: ParagraphStyle, at_line_start: bool = False
    ) -> str:
        raise NotImplementedError
