"""Path sandbox for the document store.

Every caller-supplied path is resolved against a single root directory and
rejected when it would escape that root, either textually (``..``) or through
symlinks. Failures are reported as ``None`` only; callers must not be able to
tell a security denial apart from a missing file.
"""

import logging
import os
import stat
from pathlib import Path

logger = logging.getLogger(__name__)


def is_within_root(root_path: str | Path, candidate_path: str | Path) -> bool:
    """
    Check whether a path is the root itself or one of its descendants.

    Compares path components, so ``/data-evil`` is not inside ``/data``.

    Args:
        root_path: Root directory
        candidate_path: Path to check

    Returns:
        True if candidate_path is root_path or below it
    """
    try:
        rel = os.path.relpath(candidate_path, root_path)
    except ValueError:
        return False
    return rel != os.pardir and not rel.startswith(os.pardir + os.sep)


def _canonical(path: str | Path) -> str | None:
    """Resolve every symlink in an existing path, or None if that fails."""
    try:
        return str(Path(path).resolve(strict=True))
    except (OSError, RuntimeError, ValueError):
        return None


class PathSandbox:
    """Resolves store-relative paths and enforces the root boundary."""

    def __init__(self, root: Path | str):
        """
        Initialize the sandbox.

        Args:
            root: Store root directory (made absolute, symlinks kept)
        """
        self.root = os.path.abspath(os.path.expanduser(str(root)))

    def resolve(self, input_path: str, allow_root: bool = False) -> Path | None:
        """
        Join a relative path onto the root, rejecting textual traversal.

        No filesystem access happens here. Leading separators are treated as
        relative to the root, so ``/etc/passwd`` maps to ``<root>/etc/passwd``.

        Args:
            input_path: Caller-supplied path
            allow_root: Accept an empty path as the root itself

        Returns:
            Absolute path inside the root, or None
        """
        trimmed = (input_path or "").strip()
        if not trimmed and not allow_root:
            return None
        if "\x00" in trimmed:
            logger.debug("Rejected path containing a NUL byte")
            return None

        resolved = os.path.normpath(self.root + os.sep + trimmed)
        if not is_within_root(self.root, resolved):
            logger.debug("Rejected traversal outside store root")
            return None
        return Path(resolved)

    def resolve_for_read(
        self, input_path: str, allow_root: bool = False
    ) -> Path | None:
        """Resolve a path that must already exist inside the root."""
        resolved = self.resolve(input_path, allow_root)
        if resolved is None or not self.is_existing_path_safe(resolved):
            return None
        return resolved

    def resolve_for_write(self, input_path: str) -> Path | None:
        """Resolve a path that may not exist yet but must stay inside the root."""
        resolved = self.resolve(input_path)
        if resolved is None or not self.is_writable_path_safe(resolved):
            return None
        return resolved

    def is_existing_path_safe(self, target_path: str | Path) -> bool:
        """
        Check an existing path.

        The path must contain no symlinked segment below the root, and its
        canonical form must sit inside the canonical root.
        """
        if not self.has_no_symlink_segments(target_path):
            return False

        root_real = _canonical(self.root)
        target_real = _canonical(target_path)
        if root_real is None or target_real is None:
            return False
        return is_within_root(root_real, target_real)

    def is_writable_path_safe(self, target_path: str | Path) -> bool:
        """
        Check a path that is about to be written.

        The target need not exist. Its nearest existing ancestor must resolve
        inside the root; if the target exists it must not be a symlink and must
        resolve inside the root as well.
        """
        if not self.has_no_symlink_segments(target_path):
            return False

        ancestor = self.find_nearest_existing_ancestor(target_path)
        if ancestor is None:
            return False

        root_real = _canonical(self.root)
        ancestor_real = _canonical(ancestor)
        if root_real is None or ancestor_real is None:
            return False
        if not is_within_root(root_real, ancestor_real):
            return False

        try:
            info = os.lstat(target_path)
        except FileNotFoundError:
            return True
        except (OSError, ValueError):
            return False

        if stat.S_ISLNK(info.st_mode):
            return False
        target_real = _canonical(target_path)
        return target_real is not None and is_within_root(root_real, target_real)

    def has_no_symlink_segments(self, target_path: str | Path) -> bool:
        """Walk from the root to target_path; fail if any existing segment is a symlink."""
        try:
            rel = os.path.relpath(target_path, self.root)
        except ValueError:
            return False
        if rel == os.curdir:
            return True

        current = self.root
        for segment in rel.split(os.sep):
            if not segment:
                continue
            current = os.path.join(current, segment)
            try:
                info = os.lstat(current)
            except FileNotFoundError:
                continue
            except (OSError, ValueError):
                return False
            if stat.S_ISLNK(info.st_mode):
                logger.debug("Rejected symlinked path segment")
                return False
        return True

    @staticmethod
    def find_nearest_existing_ancestor(target_path: str | Path) -> str | None:
        """Walk upward from target_path to the first component that exists."""
        current = str(target_path)
        while True:
            try:
                os.lstat(current)
                return current
            except FileNotFoundError:
                pass
            except (OSError, ValueError):
                return None
            parent = os.path.dirname(current)
            if parent == current:
                return None
            current = parent
