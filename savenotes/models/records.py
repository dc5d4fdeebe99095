"""
Row models for the Notes SQLite store.

Column names follow the selection query in ``savenotes.store``; Python field
names are snake_case with the query's column labels as aliases.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Annotated, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

# Core Data stores dates as seconds since 2001-01-01T00:00:00Z.
CORE_DATA_EPOCH = datetime(2001, 1, 1, tzinfo=timezone.utc)


def _from_core_data_or_none(v):
    if v is None or isinstance(v, datetime):
        return v
    if isinstance(v, str):
        v = float(v)
    if not isinstance(v, (int, float)):
        raise TypeError("Expected seconds since 2001-01-01 as a number")
    return CORE_DATA_EPOCH + timedelta(seconds=float(v))


CoreDataDateTime = Annotated[
    Optional[datetime], BeforeValidator(_from_core_data_or_none)
]


class NoteRecord(BaseModel):
    """One row of the note selection query."""

    # columns come from the fixed selection query in savenotes.store
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    pk: int
    note_id: Optional[int] = None
    data: Optional[bytes] = None
    title: Optional[str] = None
    snippet: Optional[str] = None
    identifier: Optional[str] = Field(default=None, alias="noteID")
    created: CoreDataDateTime = None
    last_viewed: CoreDataDateTime = Field(default=None, alias="lastviewed")
    modified: CoreDataDateTime = None
    account_pk: Optional[int] = Field(default=None, alias="ZACCOUNT3")
    folder_name: Optional[str] = Field(default=None, alias="folderName")
    folder_id: Optional[str] = Field(default=None, alias="folderID")

    @property
    def is_deleted(self) -> bool:
        # Notes in "Recently Deleted" have lost their folder.
        return self.folder_name is None

    @property
    def display_title(self) -> str:
        return self.title or "Untitled"
