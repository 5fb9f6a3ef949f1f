"""DocumentStore - sandboxed markdown store scoped to one root directory.

One engine backs both the vault (long-term notes) and the workspace (scratch
files). Every operation resolves its paths through the PathSandbox first and
reports failure as False / None / an empty list. Security denials, missing
files and I/O errors are deliberately indistinguishable to callers; I/O
errors are logged here.

Apart from the Obsidian config cache, nothing is held in memory: each call
reads the filesystem fresh. Concurrent writers to the same path race at the
OS level (last write wins).
"""

import logging
import os
import posixpath
import stat
from datetime import date, datetime
from pathlib import Path
from typing import Iterator

from pocketbrain.store.daily import DailyNotes
from pocketbrain.store.layout import ensure_store_structure
from pocketbrain.store.markdown import (
    extract_tags,
    normalize_tag,
    normalize_wiki_link_target,
    parse_wiki_links,
)
from pocketbrain.store.obsidian import (
    ConfigCache,
    ConfigState,
    ConfigSummary,
    build_config_summary,
    compute_fingerprint,
)
from pocketbrain.store.options import StoreOptions, load_store_options
from pocketbrain.store.sandbox import PathSandbox
from pocketbrain.store.types import Entry, SearchMode, StoreStats

logger = logging.getLogger(__name__)


class DocumentStore:
    """File operations, search and daily notes inside a single root.

    Example:
        store = DocumentStore.open("~/.pocketbrain/vault")
        store.initialize()
        store.write("inbox/idea.md", "# Idea\\n#project/alpha")
        store.search_by_tag("project/alpha")
    """

    def __init__(
        self,
        root: Path | str,
        options: StoreOptions | None = None,
        label: str = "store",
    ):
        """
        Initialize a store. Call initialize() to create the root directory.

        Args:
            root: Root directory every path is sandboxed beneath
            options: Folder names and daily-note defaults
            label: Name used in log messages ("vault", "workspace")
        """
        self.sandbox = PathSandbox(root)
        self.options = options or StoreOptions.from_env()
        self.label = label
        self.daily = DailyNotes(self)
        self._config_cache = ConfigCache()

    @classmethod
    def open(
        cls,
        root: Path | str,
        defaults: StoreOptions | None = None,
        label: str = "store",
    ) -> "DocumentStore":
        """
        Create a store, applying the root's store-config.yaml if present.

        Raises:
            StoreConfigError: If store-config.yaml is invalid.
        """
        return cls(root, load_store_options(root, defaults), label=label)

    @property
    def root(self) -> Path:
        """Absolute root directory."""
        return Path(self.sandbox.root)

    # --- Lifecycle ---

    def initialize(self, create_structure: bool = False) -> None:
        """
        Create the root directory (and optionally the convention folders).

        Raises:
            OSError: If the root cannot be created.
        """
        if create_structure:
            ensure_store_structure(self.root, self.options.folders)
        else:
            self.root.mkdir(parents=True, exist_ok=True)
        logger.info(f"{self.label} initialized at {self.root}")

    def stop(self) -> None:
        """No-op; sync is handled outside the process."""

    # --- File operations ---

    def read(self, path: str) -> str | None:
        """
        Read a store-relative text file.

        Returns:
            File content, or None if missing, unsafe or unreadable
        """
        file_path = self.sandbox.resolve_for_read(path)
        if file_path is None:
            return None
        try:
            with open(file_path, encoding="utf-8", newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError):
            return None

    def _prepare_write(self, path: str, action: str) -> Path | None:
        """Resolve a writable path, create its parents and re-check safety."""
        file_path = self.sandbox.resolve_for_write(path)
        if file_path is None:
            return None

        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"{self.label} {action}: mkdir failed: {e}")
            return None

        # A symlink may have been planted while directories were created.
        if not self.sandbox.is_writable_path_safe(file_path):
            return None
        return file_path

    def write(self, path: str, content: str) -> bool:
        """
        Write content to a store-relative path, creating parent directories.

        Not atomic: a crash mid-write can leave a partial file.

        Returns:
            True on success, False on any security or I/O failure
        """
        file_path = self._prepare_write(path, "write")
        if file_path is None:
            return False
        try:
            with open(file_path, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            logger.error(f"{self.label} write failed: {e}")
            return False
        return True

    def append(self, path: str, content: str) -> bool:
        """
        Append content to a store-relative file, creating it if missing.

        Returns:
            True on success, False on any security or I/O failure
        """
        file_path = self._prepare_write(path, "append")
        if file_path is None:
            return False
        try:
            with open(file_path, "a", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            logger.error(f"{self.label} append failed: {e}")
            return False
        return True

    def move(self, from_path: str, to_path: str) -> bool:
        """
        Move or rename a file, creating the destination's parent directories.

        Returns:
            True on success, False on any security or I/O failure
        """
        source = self.sandbox.resolve_for_read(from_path)
        if source is None:
            return False

        dest = self._prepare_write(to_path, "move")
        if dest is None:
            return False

        try:
            os.rename(source, dest)
        except OSError as e:
            logger.error(f"{self.label} move failed: {e}")
            return False
        return True

    def _relative(self, abs_path: str) -> str:
        """Root-relative, slash-separated form of an absolute path."""
        return Path(os.path.relpath(abs_path, self.sandbox.root)).as_posix()

    def list_files(self, folder: str = "") -> list[Entry]:
        """
        List the immediate children of a folder ("" for the root).

        Dotfiles and symlinks are skipped. Directories come first, then
        names in lexicographic order. Missing or unsafe folders list empty.
        """
        folder_path = self.sandbox.resolve_for_read(folder, allow_root=True)
        if folder_path is None:
            return []

        entries: list[Entry] = []
        try:
            with os.scandir(folder_path) as it:
                children = list(it)
        except OSError:
            return []

        for child in children:
            if child.name.startswith("."):
                continue
            try:
                info = os.lstat(child.path)
            except OSError:
                continue
            if stat.S_ISLNK(info.st_mode):
                continue

            entries.append(
                Entry(
                    path=self._relative(child.path),
                    name=child.name,
                    size=info.st_size,
                    modified=datetime.fromtimestamp(info.st_mtime),
                    is_directory=stat.S_ISDIR(info.st_mode),
                )
            )

        entries.sort(key=lambda e: (not e.is_directory, e.name))
        return entries

    def list_files_recursive(self, folder: str = "") -> list[Entry]:
        """Depth-first expansion of list_files with the same exclusions."""
        result: list[Entry] = []
        for entry in self.list_files(folder):
            result.append(entry)
            if entry.is_directory:
                result.extend(self.list_files_recursive(entry.path))
        return result

    def stats(self) -> StoreStats:
        """
        Aggregate statistics for the whole store.

        total_files counts every listed entry, directories included;
        total_size and last_modified only consider files.
        """
        entries = self.list_files_recursive()
        files = [e for e in entries if not e.is_directory]
        return StoreStats(
            total_files=len(entries),
            total_size=sum(e.size for e in files),
            last_modified=max((e.modified for e in files), default=None),
        )

    # --- Search ---

    def search(
        self,
        query: str,
        folder: str = "",
        mode: SearchMode | str = SearchMode.NAME,
    ) -> list[Entry]:
        """
        Case-insensitive substring search.

        Args:
            query: Text to look for
            folder: Folder to search in ("" for the whole store)
            mode: name (files and directories), content (files only) or both

        Returns:
            Matching entries in listing order
        """
        needle = query.lower()
        search_mode = SearchMode.normalize(mode)
        entries = self.list_files_recursive(folder)

        if search_mode is SearchMode.NAME:
            return [e for e in entries if needle in e.name.lower()]

        matched = []
        for entry in entries:
            if entry.is_directory:
                continue
            if search_mode is SearchMode.BOTH and needle in entry.name.lower():
                matched.append(entry)
                continue
            content = self.read(entry.path)
            if content is not None and needle in content.lower():
                matched.append(entry)
        return matched

    def _iter_documents(self, folder: str) -> Iterator[tuple[Entry, str]]:
        """Readable files under folder paired with their content."""
        for entry in self.list_files_recursive(folder):
            if entry.is_directory:
                continue
            content = self.read(entry.path)
            if content is None:
                continue
            yield entry, content

    def find_backlinks(self, target: str, folder: str = "") -> list[Entry]:
        """Files containing a wiki-link whose normalized target equals target."""
        wanted = normalize_wiki_link_target(target)
        return [
            entry
            for entry, content in self._iter_documents(folder)
            if any(link.normalized_target == wanted for link in parse_wiki_links(content))
        ]

    def search_by_tag(self, tag: str, folder: str = "") -> list[Entry]:
        """Files containing tag (with or without the leading #)."""
        wanted = normalize_tag(tag)
        return [
            entry
            for entry, content in self._iter_documents(folder)
            if wanted in extract_tags(content)
        ]

    # --- Daily notes ---

    def get_daily_note_path(self) -> str:
        """Today's note as ``<daily folder>/YYYY-MM-DD.md``, ignoring Obsidian config."""
        return posixpath.join(self.options.folders.daily, f"{date.today().isoformat()}.md")

    def get_today_daily_note_path(self, now: datetime | None = None) -> str:
        """Today's note path honouring daily-notes.json."""
        return self.daily.today_path(now)

    def append_to_daily(self, text: str, now: datetime | None = None) -> bool:
        """Append a timestamped entry to today's Timeline section."""
        return self.daily.append(text, now)

    def upsert_daily_tracking(
        self, metric: str, value: str, now: datetime | None = None
    ) -> bool:
        """Insert or update a metric in today's Tracking section."""
        return self.daily.upsert_tracking(metric, value, now)

    # --- Obsidian config ---

    def compute_fingerprint(self) -> str:
        """Structural fingerprint used to invalidate the config cache."""
        return compute_fingerprint(self.sandbox)

    def get_config_state(self, force_refresh: bool = False) -> ConfigState:
        """Config summary plus fingerprint and cache-hit flag."""
        return self._config_cache.get(
            self.compute_fingerprint(),
            lambda: build_config_summary(self.read, self.options.folders.daily),
            force_refresh=force_refresh,
        )

    def get_config_summary(
        self, force_refresh: bool = False
    ) -> tuple[ConfigSummary, bool]:
        """
        Return the Obsidian config summary.

        Returns:
            (summary, cache_hit)
        """
        state = self.get_config_state(force_refresh)
        return state.summary, state.cache_hit

    def __repr__(self) -> str:
        return f"DocumentStore({self.label}, {self.root})"
