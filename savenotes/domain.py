# savenotes/domain.py
"""Style model shared by the archive walker and the renderers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum, IntFlag
from typing import List, Optional, Tuple, Union

from .exceptions import ArchiveFault, IntegrityFault


class StyleCode(IntEnum):
    """Paragraph style codes as stored in the archive.

    Reverse-engineered from real note stores; format-version specific.
    """

    NONE = -1  # no paragraph style field present
    TITLE = 0
    HEADING = 1
    SUBHEADING = 2
    MONOSPACED = 4
    BULLET_LIST = 100
    DASHED_LIST = 101
    NUMBERED_LIST = 102
    CHECKLIST = 103


DEFAULT_FONT_SIZE = 12.0


class ParagraphKind(Enum):
    NONE = "none"
    TITLE = "title"
    HEADING = "heading"
    SUBHEADING = "subheading"
    MONO = "mono"
    BULLET = "bullet"
    DASHED = "dashed"
    NUMBERED = "numbered"
    CHECKLIST = "checklist"
    UNKNOWN = "unknown"


_KIND_BY_CODE = {
    StyleCode.NONE: ParagraphKind.NONE,
    StyleCode.TITLE: ParagraphKind.TITLE,
    StyleCode.HEADING: ParagraphKind.HEADING,
    StyleCode.SUBHEADING: ParagraphKind.SUBHEADING,
    StyleCode.MONOSPACED: ParagraphKind.MONO,
    StyleCode.BULLET_LIST: ParagraphKind.BULLET,
    StyleCode.DASHED_LIST: ParagraphKind.DASHED,
    StyleCode.NUMBERED_LIST: ParagraphKind.NUMBERED,
    StyleCode.CHECKLIST: ParagraphKind.CHECKLIST,
}

LIST_KINDS = frozenset(
    {
        ParagraphKind.BULLET,
        ParagraphKind.DASHED,
        ParagraphKind.NUMBERED,
        ParagraphKind.CHECKLIST,
    }
)


def kind_for_code(code: int) -> ParagraphKind:
    """Map an archive paragraph code to its kind; unrecognized codes are UNKNOWN."""
    try:
        return _KIND_BY_CODE[StyleCode(code)]
    except ValueError:
        return ParagraphKind.UNKNOWN


class TextBits(IntFlag):
    # font hints field: 1 is bold, 2 is italic, 3 is both
    BOLD = 0x1
    ITALIC = 0x2


@dataclass(frozen=True)
class ParagraphStyle:
    kind: ParagraphKind = ParagraphKind.NONE
    indent: int = 0
    checked: bool = False
    code: int = StyleCode.NONE

    @classmethod
    def from_code(
        cls, code: int, indent: int = 0, checked: bool = False
    ) -> "ParagraphStyle":
        kind = kind_for_code(code)
        return cls(
            kind=kind,
            indent=max(0, indent),
            checked=checked if kind is ParagraphKind.CHECKLIST else False,
            code=code,
        )

    @property
    def is_list(self) -> bool:
        return self.kind in LIST_KINDS

    @property
    def block_key(self) -> Tuple[ParagraphKind, int, Optional[int]]:
        """Identity of the block group this paragraph belongs to.

        Checklist state is per item, so it is not part of the key.
        """
        indent = self.indent if self.is_list else 0
        code = self.code if self.kind is ParagraphKind.UNKNOWN else None
        return (self.kind, indent, code)


@dataclass(frozen=True)
class FontStyle:
    name: Optional[str] = None
    size: float = DEFAULT_FONT_SIZE


@dataclass(frozen=True)
class TextStyle:
    bits: TextBits = TextBits(0)
    # Decoded but not rendered.
    underline: int = 0
    strikethrough: int = 0
    baseline: int = 0

    @property
    def bold(self) -> bool:
        return bool(self.bits & TextBits.BOLD)

    @property
    def italic(self) -> bool:
        return bool(self.bits & TextBits.ITALIC)


@dataclass(frozen=True)
class ColorStyle:
    red: float
    green: float
    blue: float
    alpha: float = 1.0

    @property
    def hex(self) -> str:
        r8 = max(0, min(255, round(self.red * 255)))
        g8 = max(0, min(255, round(self.green * 255)))
        b8 = max(0, min(255, round(self.blue * 255)))
        return f"#{r8:02X}{g8:02X}{b8:02X}"


@dataclass(frozen=True)
class UrlStyle:
    url: str


@dataclass(frozen=True)
class UuidStyle:
    """Reference to an embedded object (attachment) by identifier and type."""

    uuid: str
    type: str


StyleDescriptor = Union[
    ParagraphStyle, FontStyle, TextStyle, ColorStyle, UrlStyle, UuidStyle
]

DEFAULT_PARAGRAPH = ParagraphStyle()


@dataclass(frozen=True)
class AttributeRun:
    """A span of ``length`` UTF-16 code units sharing one set of styles."""

    length: int
    styles: Tuple[StyleDescriptor, ...] = ()

    @property
    def paragraph_style(self) -> ParagraphStyle:
        for style in self.styles:
            if isinstance(style, ParagraphStyle):
                return style
        return DEFAULT_PARAGRAPH

    @property
    def inline_styles(self) -> Tuple[StyleDescriptor, ...]:
        return tuple(s for s in self.styles if not isinstance(s, ParagraphStyle))


@dataclass(frozen=True)
class NoteBody:
    """Decoded note body: plain text plus its attribute runs."""

    text: str
    runs: Tuple[AttributeRun, ...] = ()
    faults: Tuple[ArchiveFault, ...] = ()
    versions: Tuple[int, int] = (-1, -1)
    edit_count: int = 0

    @property
    def ok(self) -> bool:
        return not self.faults

    @property
    def integrity_faults(self) -> List[IntegrityFault]:
        return [f for f in self.faults if isinstance(f, IntegrityFault)]


@dataclass
class RunBuilder:
    """Mutable accumulator for the styles of one attribute run while walking."""

    length: int = 0
    paragraph: Optional[ParagraphStyle] = None
    uuid: Optional[UuidStyle] = None
    url: Optional[UrlStyle] = None
    font: Optional[FontStyle] = None
    text: Optional[TextStyle] = None
    color: Optional[ColorStyle] = None

    def build(self) -> AttributeRun:
        styles: List[StyleDescriptor] = [self.paragraph or DEFAULT_PARAGRAPH]
        for style in (self.uuid, self.url, self.font, self.text, self.color):
            if style is not None:
                styles.append(style)
        return AttributeRun(length=self.length, styles=tuple(styles))
