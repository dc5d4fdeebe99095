"""
HTML renderer for decoded note bodies.

Produces a fragment: one block element per group of paragraphs, list items as
``<li>`` inside ``<ul>``/``<ol>``, and size-only ``<font>`` wrappers. Nested
lists are emitted as sibling lists inside the enclosing one.
"""

from __future__ import annotations

import html
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

_GROUP_TAGS: Dict[ParagraphKind, str] = {
    ParagraphKind.NONE: "p",
    ParagraphKind.TITLE: "h1",
    ParagraphKind.HEADING: "h2",
    ParagraphKind.SUBHEADING: "h3",
    ParagraphKind.MONO: "code",
    ParagraphKind.BULLET: "ul",
    ParagraphKind.DASHED: "ul",
    ParagraphKind.NUMBERED: "ol",
    ParagraphKind.CHECKLIST: "ul",
}

# Paragraph kinds whose lines end in an explicit break.
_BREAK_KINDS = frozenset({ParagraphKind.NONE, ParagraphKind.MONO})

_CHECKBOX_CHECKED = '<li><input checked="" disabled="" type="checkbox">'
_CHECKBOX_UNCHECKED = '<li><input disabled="" type="checkbox">'


class HtmlRenderer(BlockRenderer):
    def open_group(self, state: RenderState, para: ParagraphStyle) -> None:
        tag = _GROUP_TAGS.get(para.kind)
        if tag is None:
            state.emit(f'<div style="{para.code}">\n')
        else:
            state.emit(f"<{tag}>\n")

    def close_group(self, state: RenderState, group: BlockGroup, final: bool) -> None:
        if group.item_open:
            state.emit("</li>\n")
            group.item_open = False
        tag = _GROUP_TAGS.get(group.style.kind, "div")
        state.emit(f"</{tag}>\n")

    def line_start(self, state: RenderState, para: ParagraphStyle, line: str) -> str:
        if para.kind is ParagraphKind.NONE:
            return self._expand_leading_ws(state, line)
        if para.is_list:
            if para.kind is ParagraphKind.CHECKLIST:
                state.emit(_CHECKBOX_CHECKED if para.checked else _CHECKBOX_UNCHECKED)
            else:
                state.emit("<li>")
            if state.top is not None:
                state.top.item_open = True
        return line

    def _expand_leading_ws(self, state: RenderState, line: str) -> str:
        # Keep indentation visible; HTML collapses leading whitespace.
        i = 0
        prefix: List[str] = []
        for ch in line:
            if ch == " ":
                prefix.append("&nbsp;")
            elif ch == "\t":
                prefix.append(self.config.tab_html)
            else:
                break
            i += 1
        state.emit("".join(prefix))
        return line[i:]

    def line_end(self, state: RenderState, para: ParagraphStyle) -> None:
        top = state.top
        if para.is_list and top is not None and top.item_open:
            state.emit("</li>\n")
            top.item_open = False
        elif para.kind in _BREAK_KINDS:
            state.emit("<br/>\n")
        else:
            state.emit("\n")

    def inline_markup(
        self, style: StyleDescriptor, para: ParagraphStyle
    ) -> List[Markup]:
        if isinstance(style, TextStyle):
            out: List[Markup] = []
            if style.bold:
                out.append(("<b>", "</b>"))
            if style.italic:
                out.append(("<i>", "</i>"))
            return out
        if isinstance(style, UrlStyle):
            return [(f'<a href="{html.escape(style.url)}">', "</a>")]
        if isinstance(style, FontStyle):
            # font name is not carried over
            return [(f'<font size="{font_size_text(style.size)}">', "</font>")]
        if isinstance(style, UuidStyle):
            label = html.escape(placeholder_text(style.uuid, style.type), quote=False)
            return [(f'<span class="attachment">{label}', "</span>")]
        if isinstance(style, (ColorStyle, ParagraphStyle)):
            return []
        return [("<UNKNOWN>", "</UNKNOWN>")]

    def escape(
        self, text: str, para: ParagraphStyle, at_line_start: bool = False
    ) -> str:
        return html.escape(text, quote=False)
