"""
Markdown renderer for decoded note bodies.

Plain paragraphs are separated by blank lines and consecutive non-empty plain
lines are joined with a hard break (trailing backslash). Monospaced paragraphs
become fenced code blocks, lists are indented two spaces per level.
"""

from __future__ import annotations

import re
from typing import Dict, List

from ..domain import (
    ColorStyle,
    FontStyle,
    ParagraphKind,
    ParagraphStyle,
    StyleDescriptor,
    TextStyle,
    UrlStyle,
    UuidStyle,
)
from .base import (
    BlockGroup,
    BlockRenderer,
    Markup,
    RenderState,
    font_size_text,
    placeholder_text,
)

FENCE = "```"

_HEADING_PREFIX: Dict[ParagraphKind, str] = {
    ParagraphKind.TITLE: "# ",
    ParagraphKind.HEADING: "## ",
    ParagraphKind.SUBHEADING: "### ",
}

_LIST_MARKER: Dict[ParagraphKind, str] = {
    ParagraphKind.BULLET: "* ",
    ParagraphKind.DASHED: "- ",
    # valid markdown; renderers number the items themselves
    ParagraphKind.NUMBERED: "1. ",
}

_MD_SPECIAL = re.compile(r"([\\`*_\[\]])")
# block syntax that only means something at the start of a line
_MD_LINE_START = re.compile(r"^(?:[#>]|[-+](?=\s|$)|[-=]+\s*$)")
_MD_ORDERED = re.compile(r"^(\d+)([.)])(?=\s|$)")


def escape_markdown(text: str) -> str:
    return _MD_SPECIAL.sub(r"\\\1", text)


def escape_line_start(text: str) -> str:
    """Neutralize heading, quote, list and rule markers opening a line."""
    if _MD_LINE_START.match(text):
        return "\\" + text
    return _MD_ORDERED.sub(r"\1\\\2", text, count=1)


class MarkdownRenderer(BlockRenderer):
    def open_group(self, state: RenderState, para: ParagraphStyle) -> None:
        kind = para.kind
        if kind is ParagraphKind.NONE:
            state.ensure_blank_line()
        elif kind is ParagraphKind.MONO:
            state.ensure_blank_line()
            state.emit(FENCE + "\n")
        elif para.is_list:
            if len(state.groups) > 1:
                state.ensure_newline()
            elif state.last_closed is None or not state.last_closed.is_list:
                state.ensure_blank_line()
            else:
                state.ensure_newline()
        elif kind is ParagraphKind.UNKNOWN:
            state.ensure_newline()
            state.emit(f'<div style="{para.code}">\n')
        else:
            state.ensure_newline()

    def close_group(self, state: RenderState, group: BlockGroup, final: bool) -> None:
        kind = group.style.kind
        if kind is ParagraphKind.MONO:
            state.ensure_newline()
            state.emit(FENCE + "\n")
        elif kind is ParagraphKind.UNKNOWN:
            state.ensure_newline()
            state.emit("</div>\n")
        elif not final:
            state.ensure_newline()

    def line_start(self, state: RenderState, para: ParagraphStyle, line: str) -> str:
        kind = para.kind
        if kind is ParagraphKind.NONE:
            if line and state.prev_plain_line:
                self._hard_break(state)
            return self._expand_leading_ws(state, line)
        if not line:
            return line
        if kind in _HEADING_PREFIX:
            state.emit(_HEADING_PREFIX[kind])
        elif para.is_list:
            state.emit("  " * para.indent)
            if kind is ParagraphKind.CHECKLIST:
                state.emit("- [x] " if para.checked else "- [ ] ")
            else:
                state.emit(_LIST_MARKER[kind])
        return line

    @staticmethod
    def _hard_break(state: RenderState) -> None:
        last = state.parts[-1] if state.parts else ""
        if last.endswith("\n"):
            state.parts[-1] = last[:-1] + "\\\n"

    def _expand_leading_ws(self, state: RenderState, line: str) -> str:
        i = 0
        for ch in line:
            if ch == " ":
                state.emit("&nbsp;")
            elif ch == "\t":
                state.emit(self.config.tab_html)
            else:
                break
            i += 1
        return line[i:]

    def line_end(self, state: RenderState, para: ParagraphStyle) -> None:
        state.emit("\n")

    def inline_markup(
        self, style: StyleDescriptor, para: ParagraphStyle
    ) -> List[Markup]:
        if isinstance(style, UuidStyle):
            return [(placeholder_text(style.uuid, style.type), "")]
        if isinstance(style, (ColorStyle, ParagraphStyle)):
            return []
        if para.kind is ParagraphKind.MONO:
            # code blocks carry raw text only
            return []
        if isinstance(style, TextStyle):
            out: List[Markup] = []
            if style.bold:
                out.append(("**", "**"))
            if style.italic:
                out.append(("_", "_"))
            return out
        if isinstance(style, UrlStyle):
            return [("[", f"]({style.url})")]
        if isinstance(style, FontStyle):
            return [(f'<font size="{font_size_text(style.size)}">', "</font>")]
        return [("<UNKNOWN>", "</UNKNOWN>")]

    def escape(
        self, text: str, para: ParagraphStyle, at_line_start: bool = False
    ) -> str:
        if para.kind is ParagraphKind.MONO or not self.config.escape_markdown:
            return text
        text = escape_markdown(text)
        if at_line_start and (para.kind is ParagraphKind.NONE or para.is_list):
            text = escape_line_start(text)
        return text
