"""
Export notes from the store to files or to a stream of rendered strings.

Thin wrappers around decoding, rendering and file I/O used by the CLI.
Failures are per note: a note that cannot be decoded or written is logged and
counted and the batch moves on.
"""

from __future__ import annotations

import logging
import re
import zlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Pattern, Tuple, Union

from .decoding import decode_body, decompress
from .domain import NoteBody
from .exceptions import ArchiveFault, NoteBodyError
from .models import NoteRecord
from .rendering.options import OutputFormat, RenderConfig
from .rendering.renderer import get_renderer, render_note_page
from .store import NoteStore

LOGGER = logging.getLogger(__name__)

NO_DATA = "<NO DATA>"
DELETED_FOLDER = "Recently Deleted"


def _log_faults(title: str, body: NoteBody) -> None:
    for fault in body.faults:
        LOGGER.warning("notes.export.fault title=%r %s", title, fault)


def render_body(
    data: Optional[bytes],
    fmt: Union[OutputFormat, str],
    config: Optional[RenderConfig] = None,
    *,
    title: str = "",
) -> str:
    """Decode one stored note body and render it as ``fmt``.

    ``text`` returns the plain text only. A missing body renders as
    ``<NO DATA>``. Raises ArchiveFault when the body cannot be decoded.
    """
    fmt = OutputFormat(fmt)
    if fmt is OutputFormat.RAW:
        raise ValueError("raw output is bytes; use raw_body()")
    if data is None:
        return NO_DATA
    config = config or RenderConfig()
    body = decode_body(data)
    _log_faults(title, body)
    if fmt is OutputFormat.TEXT:
        return body.text
    out = get_renderer(fmt, config).render(body.text, body.runs)
    if fmt is OutputFormat.HTML and config.full_page:
        out = render_note_page(config.page_title or title, out)
    return out


def raw_body(data: Optional[bytes]) -> bytes:
    """Decompressed archive bytes, empty for a missing body."""
    if data is None:
        return b""
    try:
        return decompress(data)
    except (OSError, EOFError, zlib.error) as e:
        raise NoteBodyError(f"cannot decompress note body: {e}") from e


def safe_title(title: str) -> str:
    """Make ``title`` usable as a single path component."""
    name = title.replace("/", "-")
    if not name.strip("."):
        # dot-only names are not plain path components
        return name.replace(".", "-") or "-"
    return name


@dataclass
class ExportResult:
    written: List[Path] = field(default_factory=list)
    failed: int = 0

    @property
    def count(self) -> int:
        return len(self.written)


class NoteExporter:
    """Select notes from a store and render them in one output format."""

    def __init__(
        self,
        store: NoteStore,
        fmt: Union[OutputFormat, str] = OutputFormat.TEXT,
        *,
        root: Union[str, Path] = ".",
        title_pattern: Optional[Union[str, Pattern[str]]] = None,
        include_deleted: bool = False,
        config: Optional[RenderConfig] = None,
    ) -> None:
        self.store = store
        self.fmt = OutputFormat(fmt)
        self.root = Path(root)
        self.title_pattern = (
            re.compile(title_pattern) if isinstance(title_pattern, str) else title_pattern
        )
        self.include_deleted = include_deleted
        self.config = config or RenderConfig()

    def select(self) -> Iterator[NoteRecord]:
        for record in self.store.iter_notes(include_deleted=self.include_deleted):
            if self.title_pattern is not None and not self.title_pattern.search(
                record.display_title
            ):
                continue
            yield record

    def render(self, record: NoteRecord) -> Union[str, bytes]:
        if self.fmt is OutputFormat.RAW:
            return raw_body(record.data)
        return render_body(
            record.data, self.fmt, self.config, title=record.display_title
        )

    def iter_rendered(self) -> Iterator[Tuple[NoteRecord, Union[str, bytes]]]:
        """Yield ``(record, output)`` for every selected note that renders."""
        for record in self.select():
            try:
                yield record, self.render(record)
            except ArchiveFault as e:
                LOGGER.error(
                    "notes.export.skip pk=%d title=%r %s",
                    record.pk,
                    record.display_title,
                    e,
                )

    def target_path(self, record: NoteRecord) -> Path:
        """``<root>/<folder>/<title><ext>``, suffixed ``-N`` if taken."""
        folder = safe_title(record.folder_name or DELETED_FOLDER)
        directory = self.root / folder
        title = safe_title(record.display_title)
        ext = self.fmt.extension
        path = directory / f"{title}{ext}"
        n = 1
        while path.exists():
            path = directory / f"{title}-{n}{ext}"
            n += 1
        return path

    def export(self) -> ExportResult:
        result = ExportResult()
        for record in self.select():
            try:
                path = self._save(record, self.render(record))
            except (ArchiveFault, OSError) as e:
                LOGGER.error(
                    "notes.export.skip pk=%d title=%r %s",
                    record.pk,
                    record.display_title,
                    e,
                )
                result.failed += 1
                continue
            LOGGER.info("notes.export.save %s", path)
            result.written.append(path)
        return result

    def _save(self, record: NoteRecord, output: Union[str, bytes]) -> Path:
        path = self.target_path(record)
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(output, bytes):
            path.write_bytes(output)
        else:
            path.write_text(output, encoding="utf-8")
        return path
