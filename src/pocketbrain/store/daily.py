"""Daily notes for the store.

A daily note lives at ``<folder>/<formatted date>.md``. Folder, date format
and template come from ``.obsidian/daily-notes.json`` when present, falling
back to the store options. Notes carry a ``## Timeline`` section for
timestamped entries and a ``## Tracking`` section of ``- metric: value`` lines.
"""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from pocketbrain.store.dates import format_date, format_hour_minute
from pocketbrain.store.markdown import (
    append_line_to_section,
    ensure_section,
    upsert_tracking_line,
)
from pocketbrain.store.obsidian import load_daily_notes_config

if TYPE_CHECKING:
    from pocketbrain.store.service import DocumentStore

logger = logging.getLogger(__name__)

TIMELINE_HEADING = "## Timeline"
TRACKING_HEADING = "## Tracking"
DEFAULT_TRACKING_METRICS = ("Mood", "Energy", "Focus", "Sleep")


@dataclass(frozen=True)
class DailyNoteSettings:
    """Resolved daily-note settings for a single call."""

    folder: str
    format: str
    template_file: str | None = None


def daily_note_path(settings: DailyNoteSettings, moment: datetime) -> str:
    """Store-relative path of the daily note for moment."""
    return posixpath.join(settings.folder, format_date(moment, settings.format) + ".md")


def default_daily_note(title: str) -> str:
    """Built-in skeleton used when no template is configured."""
    lines = [f"# {title}", "", TIMELINE_HEADING, "", TRACKING_HEADING]
    lines.extend(f"- {metric}:" for metric in DEFAULT_TRACKING_METRICS)
    lines.append("")
    return "\n".join(lines)


class DailyNotes:
    """Daily-note operations on top of a DocumentStore."""

    def __init__(self, store: DocumentStore):
        """
        Initialize daily notes.

        Args:
            store: Store providing sandboxed read/write
        """
        self.store = store

    def resolve_settings(self) -> DailyNoteSettings:
        """Merge daily-notes.json with the store defaults; blank fields fall back."""
        options = self.store.options
        daily = load_daily_notes_config(self.store.read)
        if daily is None:
            return DailyNoteSettings(
                folder=options.folders.daily, format=options.daily_note_format
            )
        return DailyNoteSettings(
            folder=daily.folder or options.folders.daily,
            format=daily.format or options.daily_note_format,
            template_file=daily.template or None,
        )

    def today_path(self, now: datetime | None = None) -> str:
        """Config-aware path of today's daily note."""
        return daily_note_path(self.resolve_settings(), now or datetime.now())

    def build_new_note(self, settings: DailyNoteSettings, now: datetime) -> str:
        """
        Initial content for a daily note that does not exist yet.

        A non-blank template wins, with both sections forced onto it;
        otherwise the built-in skeleton is used.
        """
        if settings.template_file:
            template = self.store.read(settings.template_file)
            if template is not None and template.strip():
                content = ensure_section(template, TIMELINE_HEADING)
                return ensure_section(content, TRACKING_HEADING)
            logger.debug(f"Daily template unavailable: {settings.template_file}")

        return default_daily_note(format_date(now, settings.format))

    def _load(self, now: datetime) -> tuple[str, str] | None:
        """
        Today's path and current content, bootstrapping a missing note.

        Returns None when the note exists but cannot be read as text, so the
        caller never replaces it with a fresh skeleton.
        """
        settings = self.resolve_settings()
        path = daily_note_path(settings, now)
        content = self.store.read(path)
        if content is not None:
            return path, content
        if self.store.sandbox.resolve_for_read(path) is not None:
            logger.error(f"Daily note {path} exists but is unreadable; leaving it untouched")
            return None
        return path, self.build_new_note(settings, now)

    def append(self, text: str, now: datetime | None = None) -> bool:
        """
        Append a ``- HH:MM text`` entry to today's Timeline.

        Args:
            text: Entry text; blank text is rejected without side effects
            now: Timestamp (defaults to the current local time)

        Returns:
            True if the note was written
        """
        trimmed = (text or "").strip()
        if not trimmed:
            return False

        now = now or datetime.now()
        loaded = self._load(now)
        if loaded is None:
            return False
        path, content = loaded
        content = ensure_section(content, TIMELINE_HEADING)
        content = ensure_section(content, TRACKING_HEADING)
        line = f"- {format_hour_minute(now)} {trimmed}"
        content = append_line_to_section(content, TIMELINE_HEADING, line)
        return self.store.write(path, content)

    def upsert_tracking(
        self, metric: str, value: str, now: datetime | None = None
    ) -> bool:
        """
        Set a ``- metric: value`` line in today's Tracking section.

        Metric keys match case-insensitively; a trailing colon on the metric
        is ignored. Blank metric or value is rejected without side effects.
        """
        normalized_metric = (metric or "").strip().rstrip(":")
        normalized_value = (value or "").strip()
        if not normalized_metric or not normalized_value:
            return False

        now = now or datetime.now()
        loaded = self._load(now)
        if loaded is None:
            return False
        path, content = loaded
        content = ensure_section(content, TRACKING_HEADING)
        content = upsert_tracking_line(
            content, TRACKING_HEADING, normalized_metric, normalized_value
        )
        return self.store.write(path, content)
