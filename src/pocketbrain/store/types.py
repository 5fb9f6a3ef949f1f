"""Shared types for the document store."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class SearchMode(StrEnum):
    """Which fields a search matches against."""

    NAME = "name"
    CONTENT = "content"
    BOTH = "both"

    @classmethod
    def normalize(cls, mode: str | SearchMode | None) -> SearchMode:
        """Map an arbitrary mode value onto a known mode (defaults to NAME)."""
        try:
            return cls(mode)
        except ValueError:
            return cls.NAME


@dataclass(frozen=True)
class Entry:
    """A single file or directory inside the store.

    Recomputed from the filesystem on every call, never persisted.
    """

    path: str
    """Store-relative path."""

    name: str
    size: int
    modified: datetime
    is_directory: bool


@dataclass(frozen=True)
class StoreStats:
    """Aggregate information about a store."""

    total_files: int = 0
    total_size: int = 0
    last_modified: datetime | None = None


@dataclass(frozen=True)
class WikiLink:
    """A parsed ``[[Target|Alias]]`` reference."""

    raw: str
    target: str
    alias: str | None
    normalized_target: str
