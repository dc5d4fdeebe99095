"""
Renderer lookup for decoded note bodies.

Maps an output format to its markup renderer and wraps HTML fragments in a
complete page. No I/O.
"""

from __future__ import annotations

from typing import Dict, Optional, Type, Union

from tinyhtml import h, html, raw

from ..domain import NoteBody
from .html_renderer import HtmlRenderer
from .markdown import MarkdownRenderer
from .options import OutputFormat, RenderConfig
from .plain import PlainAnnotatedRenderer
from .renderer_iface import NoteMarkupRenderer

_RENDERERS: Dict[OutputFormat, Type] = {
    OutputFormat.MARKED: PlainAnnotatedRenderer,
    OutputFormat.HTML: HtmlRenderer,
    OutputFormat.MARKDOWN: MarkdownRenderer,
}

MARKUP_FORMATS = tuple(_RENDERERS)

_PAGE_CSS = (
    "body{font-family:-apple-system,BlinkMacSystemFont,Segoe UI,Roboto,Helvetica,Arial,sans-serif;line-height:1.4}"
    "code{display:block;white-space:pre-wrap}"
    "ul,ol{margin:.25em 0}"
    "span.attachment{color:#888}"
    "@media (prefers-color-scheme: dark){"
    "body{background:#111;color:#eee}"
    "a{color:#8ab4f8}"
    "}"
)


def get_renderer(
    fmt: Union[OutputFormat, str], config: Optional[RenderConfig] = None
) -> NoteMarkupRenderer:
    """Return the markup renderer for ``fmt``.

    Raises ValueError for formats that carry no markup (text, raw).
    """
    fmt = OutputFormat(fmt)
    try:
        cls = _RENDERERS[fmt]
    except KeyError:
        raise ValueError(f"no markup renderer for format {fmt.value!r}") from None
    return cls(config)


def render_note_page(title: str, html_fragment: str, extra_css: str = "") -> str:
    return html(lang="en")(
        h("head")(
            h("meta", charset="utf-8"),
            h("title")(title),
            h("style")(raw(_PAGE_CSS + extra_css)),
        ),
        h("body")(h("div", **{"class": "note-content"})(raw(html_fragment))),
    ).render()


class NoteRenderer:
    """Class-based interface for note rendering."""

    def __init__(self, config: Optional[RenderConfig] = None):
        self.config = config or RenderConfig()

    def render(
        self, body: NoteBody, fmt: Union[OutputFormat, str] = OutputFormat.HTML
    ) -> str:
        """Render the note body in one of the markup formats."""
        fmt = OutputFormat(fmt)
        out = get_renderer(fmt, self.config).render(body.text, body.runs)
        if fmt is OutputFormat.HTML and self.config.full_page:
            out = self.render_full_page(self.config.page_title or "", out)
        return out

    def render_full_page(self, title: str, html_fragment: str) -> str:
        """Wrap an HTML fragment in a full page with CSS."""
        return render_note_page(title, html_fragment)
