"""
Render configuration for note markup output.

Centralizes behavior flags so callers can tune defaults without touching
core logic.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class RenderConfig:
    # Number of &nbsp; a leading tab expands to in plain paragraphs
    tab_width: int = 8

    # Backslash-escape Markdown metacharacters outside code blocks
    escape_markdown: bool = True

    # Wrap HTML output in a complete document
    full_page: bool = False
    page_title: Optional[str] = None

    @property
    def tab_html(self) -> str:
        return "&nbsp;" * max(0, self.tab_width)


class OutputFormat(str, Enum):
    TEXT = "text"  # plain text, no markup
    MARKED = "marked"  # run boundaries as <N>...</N>
    HTML = "html"
    MARKDOWN = "markdown"
    RAW = "raw"  # decompressed archive bytes

    @property
    def extension(self) -> str:
        return _EXTENSIONS[self]


_EXTENSIONS = {
    OutputFormat.TEXT: ".txt",
    OutputFormat.MARKED: ".txt",
    OutputFormat.HTML: ".html",
    OutputFormat.MARKDOWN: ".md",
    OutputFormat.RAW: ".raw",
}
