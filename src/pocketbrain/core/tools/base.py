"""Shared file tools over a DocumentStore.

Tool methods never raise: every outcome, including failure, is rendered as a
human-readable string for the assistant. The store does not say why an
operation failed, so neither do the tools.
"""

from datetime import timezone

from pocketbrain.store import DocumentStore, Entry, SearchMode


def format_bytes(size: int) -> str:
    """Format a byte count as ``0 B``, ``1.5 KB``, ..."""
    if size <= 0:
        return "0 B"
    units = ["B", "KB", "MB", "GB"]
    value = float(size)
    i = 0
    while value >= 1024 and i < len(units) - 1:
        value /= 1024
        i += 1
    return f"{value:.1f} {units[i]}"


def format_paths(header: str, entries: list[Entry]) -> str:
    """Render a header followed by one ``- path`` line per entry."""
    return header + "\n" + "".join(f"- {e.path}\n" for e in entries)


class StoreTools:
    """File tools shared by the vault and workspace flavors."""

    label = "store"

    def __init__(self, store: DocumentStore):
        """
        Initialize store tools.

        Args:
            store: Store the tools operate on
        """
        self.store = store

    def display_folder(self, folder: str) -> str:
        """Folder name for messages; the root is named after the tool flavor."""
        return folder or f"{self.label} root"

    def read(self, path: str) -> str:
        """Read a file's content."""
        content = self.store.read(path)
        if content is None:
            return f"Error: File not found: {path}"
        return content

    def write(self, path: str, content: str) -> str:
        """Create or overwrite a file."""
        if self.store.write(path, content):
            return f"Successfully wrote to {path}"
        return f"Error: Failed to write to {path}"

    def append(self, path: str, content: str) -> str:
        """Append to a file, creating it if needed."""
        if self.store.append(path, content):
            return f"Successfully appended to {path}"
        return f"Error: Failed to append to {path}"

    def list(self, folder: str = "") -> str:
        """List a folder's immediate children."""
        entries = self.store.list_files(folder)
        if not entries:
            return f"Folder is empty: {self.display_folder(folder)}"

        lines = [f"Contents of {self.display_folder(folder)}:"]
        for entry in entries:
            if entry.is_directory:
                lines.append(f"DIR  {entry.name}")
            else:
                lines.append(f"FILE {entry.name} ({format_bytes(entry.size)})")
        return "\n".join(lines) + "\n"

    def search(self, query: str, folder: str = "", mode: str = "") -> str:
        """Search by name, content or both."""
        mode = mode or SearchMode.NAME.value
        if mode not in {m.value for m in SearchMode}:
            return "Error: Invalid search mode. Use one of: name, content, both"

        entries = self.store.search(query, folder, mode)
        if not entries:
            return f'No files found matching "{query}" in {mode} mode'
        return format_paths(
            f'Found {len(entries)} file(s) matching "{query}" in {mode} mode:', entries
        )

    def move(self, from_path: str, to_path: str) -> str:
        """Move or rename a file."""
        if self.store.move(from_path, to_path):
            return f"Successfully moved {from_path} to {to_path}"
        return f"Error: Failed to move {from_path}"

    def stats(self) -> str:
        """Total files, total size and last modification time."""
        stats = self.store.stats()
        last_modified = "N/A"
        if stats.last_modified is not None:
            last_modified = stats.last_modified.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        return (
            f"{self.label.title()} Statistics:\n"
            f"- Total files: {stats.total_files}\n"
            f"- Total size: {format_bytes(stats.total_size)}\n"
            f"- Last modified: {last_modified}"
        )
