"""Public exports for the Notes store data models."""

from __future__ import annotations

from .records import NoteRecord

__all__ = ["NoteRecord"]
