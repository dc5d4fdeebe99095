"""
Read-only access to the Notes SQLite store.

Each note body lives in ZICNOTEDATA; its title, dates and folder come from the
catch-all ZICCLOUDSYNCINGOBJECT table, joined twice (note row, folder row).
"""

from __future__ import annotations

import logging
import os
import sqlite3
from pathlib import Path
from typing import Iterator, Optional, Union

from pydantic import ValidationError

from .exceptions import NoteStoreError
from .models import NoteRecord

LOGGER = logging.getLogger(__name__)

NOTES_DB = Path("Library/Group Containers/group.com.apple.notes/NoteStore.sqlite")

NOTE_QUERY = """
SELECT n.Z_PK AS pk,
       n.ZNOTE AS note_id,
       n.ZDATA AS data,
       c1.ZTITLE1 AS title,
       c1.ZSNIPPET AS snippet,
       c1.ZIDENTIFIER AS noteID,
       c1.ZCREATIONDATE1 AS created,
       c1.ZLASTVIEWEDMODIFICATIONDATE AS lastviewed,
       c1.ZMODIFICATIONDATE1 AS modified,
       c2.ZACCOUNT3,
       c2.ZTITLE2 AS folderName,
       c2.ZIDENTIFIER AS folderID
  FROM ZICNOTEDATA AS n
  LEFT JOIN ZICCLOUDSYNCINGOBJECT AS c1 ON c1.ZNOTEDATA = n.Z_PK
  LEFT JOIN ZICCLOUDSYNCINGOBJECT AS c2 ON c2.Z_PK = c1.ZFOLDER
 ORDER BY note_id
"""


def default_db_path() -> Path:
    """``SAVENOTES_DB`` if set, else the Notes store in the user's home."""
    env = os.getenv("SAVENOTES_DB")
    if env:
        return Path(env).expanduser()
    return Path.home() / NOTES_DB


class NoteStore:
    """Read-only view over a NoteStore.sqlite file.

    Usable as a context manager; the connection is opened lazily.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None) -> None:
        self.path = Path(path).expanduser() if path else default_db_path()
        self._conn: Optional[sqlite3.Connection] = None

    def __enter__(self) -> "NoteStore":
        self.connect()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def connect(self) -> sqlite3.Connection:
        if self._conn is not None:
            return self._conn
        if not self.path.is_file():
            raise NoteStoreError(f"Notes database not found: {self.path}")
        try:
            conn = sqlite3.connect(f"{self.path.resolve().as_uri()}?mode=ro", uri=True)
        except sqlite3.Error as e:
            raise NoteStoreError(f"Cannot open {self.path}: {e}") from e
        conn.row_factory = sqlite3.Row
        LOGGER.debug("notes.store.open path=%s", self.path)
        self._conn = conn
        return conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def iter_notes(self, include_deleted: bool = False) -> Iterator[NoteRecord]:
        """Yield one NoteRecord per stored note body, ordered by note id.

        Deleted notes (no folder) are skipped unless ``include_deleted``.
        Rows that fail validation are logged and skipped.
        """
        conn = self.connect()
        try:
            cursor = conn.execute(NOTE_QUERY)
        except sqlite3.Error as e:
            raise NoteStoreError(f"Note query failed on {self.path}: {e}") from e
        for row in cursor:
            try:
                record = NoteRecord.model_validate(dict(row))
            except ValidationError as e:
                LOGGER.warning("notes.store.row_invalid pk=%s %s", row["pk"], e)
                continue
            if record.is_deleted and not include_deleted:
                LOGGER.debug("notes.store.skip_deleted pk=%d", record.pk)
                continue
            yield record
