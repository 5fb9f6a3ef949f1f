"""Tests for DocumentStore file operations."""

import logging
from datetime import datetime

import pytest

from pocketbrain.store import DocumentStore, StoreConfigError, StoreOptions, StoreStats


class TestLifecycle:
    """Tests for construction and initialize()."""

    def test_initialize_creates_root(self, tmp_path):
        """initialize() creates a missing root directory."""
        store = DocumentStore(tmp_path / "new" / "vault", StoreOptions())

        store.initialize()

        assert (tmp_path / "new" / "vault").is_dir()

    def test_initialize_with_structure(self, store, store_root):
        """initialize(create_structure=True) creates the convention folders."""
        store.initialize(create_structure=True)

        for name in ("inbox", "daily", "projects", "areas", "resources", "archive"):
            assert (store_root / name).is_dir()

    def test_initialize_logs(self, store, caplog):
        """initialize() logs the root at INFO."""
        caplog.set_level(logging.INFO, logger="pocketbrain.store.service")

        store.initialize()

        assert "vault initialized" in caplog.text

    def test_initialize_raises_when_root_is_file(self, tmp_path):
        """A root that cannot be created raises OSError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("x")
        store = DocumentStore(blocker / "vault", StoreOptions())

        with pytest.raises(OSError):
            store.initialize()

    def test_open_applies_store_config(self, store_root):
        """open() layers store-config.yaml over the defaults."""
        (store_root / "store-config.yaml").write_text("folders:\n  daily: journal\n")

        store = DocumentStore.open(store_root, StoreOptions())

        assert store.options.folders.daily == "journal"

    def test_open_raises_on_bad_config(self, store_root):
        """open() surfaces an invalid store-config.yaml."""
        (store_root / "store-config.yaml").write_text("- not\n- a mapping\n")

        with pytest.raises(StoreConfigError):
            DocumentStore.open(store_root, StoreOptions())

    def test_repr(self, store, store_root):
        """repr names the label and root."""
        assert repr(store) == f"DocumentStore(vault, {store_root})"


class TestReadWrite:
    """Tests for read(), write() and append()."""

    def test_write_then_read(self, store):
        """Written content reads back identically."""
        assert store.write("notes/a.md", "# A\nbody\n") is True

        assert store.read("notes/a.md") == "# A\nbody\n"

    def test_crlf_round_trip(self, store):
        """Line endings are preserved byte for byte."""
        store.write("crlf.md", "one\r\ntwo\r\n")

        assert store.read("crlf.md") == "one\r\ntwo\r\n"

    def test_write_creates_parent_directories(self, store, store_root):
        """Missing parent folders are created."""
        store.write("a/b/c/d.md", "deep")

        assert (store_root / "a" / "b" / "c" / "d.md").read_text() == "deep"

    def test_write_overwrites(self, store):
        """Writing twice keeps only the last content."""
        store.write("a.md", "first")
        store.write("a.md", "second")

        assert store.read("a.md") == "second"

    def test_read_missing(self, store):
        """Reading a missing file returns None."""
        assert store.read("missing.md") is None

    def test_read_directory(self, store, store_root):
        """Reading a directory returns None."""
        (store_root / "folder").mkdir()

        assert store.read("folder") is None

    def test_read_binary(self, store, store_root):
        """Undecodable content reads as None."""
        (store_root / "blob.bin").write_bytes(b"\xff\xfe\x00\x80")

        assert store.read("blob.bin") is None

    def test_append_to_missing_equals_write(self, store):
        """Appending to a missing file creates it with exactly that content."""
        assert store.append("log.md", "first line\n") is True

        assert store.read("log.md") == "first line\n"

    def test_append_to_existing(self, store):
        """Appending adds to the end of the file."""
        store.write("log.md", "one\n")
        store.append("log.md", "two\n")

        assert store.read("log.md") == "one\ntwo\n"

    @pytest.mark.parametrize(
        "path",
        ["../escape.md", "../../etc/passwd", "a/../../escape.md", ""],
    )
    def test_write_rejects_unsafe_paths(self, store, tmp_path, path):
        """Traversal and empty paths fail without touching the disk."""
        assert store.write(path, "x") is False
        assert not (tmp_path / "escape.md").exists()

    def test_leading_slash_writes_inside(self, store, store_root):
        """An absolute-looking path is written under the root."""
        assert store.write("/etc/passwd", "fake") is True

        assert (store_root / "etc" / "passwd").read_text() == "fake"

    def test_read_through_symlink_rejected(
        self, store, store_root, outside_dir, make_symlink
    ):
        """A symlinked file pointing outside cannot be read."""
        make_symlink(store_root / "secret.md", outside_dir / "secret.md")

        assert store.read("secret.md") is None

    def test_write_through_symlinked_directory_rejected(
        self, store, store_root, outside_dir, make_symlink
    ):
        """Writing below a symlinked directory fails and leaves the target untouched."""
        make_symlink(store_root / "evil", outside_dir)

        assert store.write("evil/x.md", "y") is False
        assert store.append("evil/x.md", "y") is False
        assert not (outside_dir / "x.md").exists()
        assert sorted(p.name for p in outside_dir.iterdir()) == ["secret.md"]

    def test_write_over_symlinked_file_rejected(
        self, store, store_root, outside_dir, make_symlink
    ):
        """Overwriting a symlinked file fails; the target keeps its content."""
        make_symlink(store_root / "link.md", outside_dir / "secret.md")

        assert store.write("link.md", "pwned") is False
        assert (outside_dir / "secret.md").read_text() == "top secret"

    def test_write_failure_logs_error(self, store, store_root, caplog):
        """I/O errors are logged at ERROR."""
        (store_root / "dir.md").mkdir()
        caplog.set_level(logging.ERROR, logger="pocketbrain.store.service")

        assert store.write("dir.md", "x") is False
        assert "write failed" in caplog.text

    @pytest.mark.parametrize("path", ["a\x00b.md", "\x00", "notes/\x00/x.md"])
    def test_nul_byte_paths_fail_cleanly(self, store, store_root, path):
        """NUL bytes make every operation fail instead of raising."""
        store.write("a.md", "x")

        assert store.read(path) is None
        assert store.write(path, "x") is False
        assert store.append(path, "x") is False
        assert store.move("a.md", path) is False
        assert store.move(path, "b.md") is False
        assert store.list_files(path) == []
        assert sorted(p.name for p in store_root.iterdir()) == ["a.md"]


class TestMove:
    """Tests for move()."""

    def test_move_renames(self, store):
        """A file moves to a new path, creating parents."""
        store.write("inbox/a.md", "content")

        assert store.move("inbox/a.md", "archive/2025/a.md") is True
        assert store.read("inbox/a.md") is None
        assert store.read("archive/2025/a.md") == "content"

    def test_move_missing_source(self, store):
        """Moving a missing file fails."""
        assert store.move("missing.md", "b.md") is False

    def test_move_outside_root(self, store, tmp_path):
        """Moving to a traversal path fails and keeps the source."""
        store.write("a.md", "content")

        assert store.move("a.md", "../stolen.md") is False
        assert store.read("a.md") == "content"
        assert not (tmp_path / "stolen.md").exists()

    def test_move_into_symlinked_directory(
        self, store, store_root, outside_dir, make_symlink
    ):
        """Moving into a symlinked directory fails."""
        store.write("a.md", "content")
        make_symlink(store_root / "evil", outside_dir)

        assert store.move("a.md", "evil/a.md") is False
        assert not (outside_dir / "a.md").exists()


class TestListing:
    """Tests for list_files(), list_files_recursive() and stats()."""

    def test_list_order_and_exclusions(
        self, store, store_root, outside_dir, write_files, make_symlink
    ):
        """Directories first, then names; dotfiles and symlinks skipped."""
        write_files(
            {
                "b.md": "b",
                "a.md": "a",
                "zeta/x.md": "x",
                "alpha/y.md": "y",
                ".hidden.md": "h",
                ".obsidian/app.json": "{}",
            }
        )
        make_symlink(store_root / "link", outside_dir)

        entries = store.list_files()

        assert [e.name for e in entries] == ["alpha", "zeta", "a.md", "b.md"]
        assert [e.is_directory for e in entries] == [True, True, False, False]

    def test_list_entry_fields(self, store):
        """Entries carry store-relative paths, sizes and timestamps."""
        store.write("notes/a.md", "12345")

        (entry,) = store.list_files("notes")

        assert entry.path == "notes/a.md"
        assert entry.name == "a.md"
        assert entry.size == 5
        assert isinstance(entry.modified, datetime)
        assert entry.is_directory is False

    def test_list_nonexistent_folder(self, store):
        """A missing folder lists empty."""
        assert store.list_files("missing") == []

    def test_list_outside_root(self, store, outside_dir):
        """Traversal folders list empty."""
        assert store.list_files("../outside") == []

    def test_list_symlinked_folder(self, store, store_root, outside_dir, make_symlink):
        """A symlinked folder lists empty."""
        make_symlink(store_root / "link", outside_dir)

        assert store.list_files("link") == []

    def test_list_recursive(self, store, write_files):
        """Recursive listing is depth-first in listing order."""
        write_files({"top.md": "t", "a/one.md": "1", "a/b/two.md": "2"})

        paths = [e.path for e in store.list_files_recursive()]

        assert paths == ["a", "a/b", "a/b/two.md", "a/one.md", "top.md"]

    def test_stats_empty(self, store):
        """An empty store has zero stats."""
        assert store.stats() == StoreStats()

    def test_stats_counts_directories(self, store, write_files):
        """total_files counts directories; size covers files only."""
        write_files({"a.md": "123", "folder/b.md": "4567"})

        stats = store.stats()

        assert stats.total_files == 3
        assert stats.total_size == 7
        assert stats.last_modified is not None
