"""Vault tools for reading, searching, and journaling in the vault.

These tools provide the interface between the assistant and the vault store.
"""

from pathlib import Path

from pocketbrain.core.tools.base import StoreTools, format_paths
from pocketbrain.store import DocumentStore


class VaultTools(StoreTools):
    """Tools for vault operations."""

    label = "vault"

    def backlinks(self, target: str, folder: str = "") -> str:
        """
        Find notes that link to a wiki-link target.

        Args:
            target: Link target, e.g. "Project Plan" for [[Project Plan]]
            folder: Folder to search in (default: entire vault)

        Returns:
            Matching note paths
        """
        entries = self.store.find_backlinks(target, folder)
        if not entries:
            return f'No backlinks found for "{target}"'
        return format_paths(
            f'Found {len(entries)} backlink file(s) for "{target}":', entries
        )

    def tag_search(self, tag: str, folder: str = "") -> str:
        """
        Find notes containing a tag (nested tags like #life/os work too).

        Args:
            tag: Tag with or without the leading #
            folder: Folder to search in (default: entire vault)

        Returns:
            Matching note paths
        """
        entries = self.store.search_by_tag(tag, folder)
        if not entries:
            return f'No files found with tag "{tag}"'
        return format_paths(f'Found {len(entries)} file(s) with tag "{tag}":', entries)

    def daily(self, content: str = "") -> str:
        """
        Get today's daily note path, or append a timestamped entry to it.

        Args:
            content: Entry to append; when empty, only report the path

        Returns:
            Status message naming the daily note
        """
        daily_path = self.store.get_today_daily_note_path()
        if not content:
            existing = self.store.read(daily_path)
            if not existing:
                return f"Today's daily note: {daily_path} (doesn't exist yet)"
            return f"Today's daily note: {daily_path}"

        if self.store.append_to_daily(content):
            return (
                "Successfully added timestamped entry to today's daily note "
                f"({daily_path})"
            )
        return "Error: Failed to update daily note"

    def daily_track(self, metric: str, value: str) -> str:
        """
        Set or update a metric in today's Tracking section.

        Args:
            metric: Metric name, e.g. mood or sleep
            value: Metric value, e.g. 8/10 or 7h
        """
        daily_path = self.store.get_today_daily_note_path()
        if self.store.upsert_daily_tracking(metric, value):
            return f"Updated daily tracking ({metric}) in {daily_path}"
        return (
            "Error: Failed to update daily tracking. "
            "metric and value must both be non-empty."
        )

    def obsidian_config(self, refresh: bool = False) -> str:
        """
        Summarize where daily notes, new notes and attachments are saved.

        Args:
            refresh: Bypass the fingerprint cache
        """
        summary, _ = self.store.get_config_summary(force_refresh=refresh)
        if not summary.config_found:
            return (
                "No .obsidian config found. Ask the user to confirm daily notes "
                "folder, new note destination, and attachment folder before "
                "creating notes."
            )

        daily = summary.daily_notes
        lines = [
            "Obsidian config summary:",
            f"- Daily notes: folder={daily.folder}, format={daily.format}, "
            f"template={daily.template_file}, pluginEnabled={str(daily.plugin_enabled).lower()}",
            f"- New notes: location={summary.new_notes.location}, "
            f"folder={summary.new_notes.folder}",
            f"- Attachments: folder={summary.attachment_folder}",
            f"- Link style: {summary.link_style}",
            f"- Templates folder: {summary.templates_folder}",
        ]
        if not summary.warnings:
            lines.append("- Validation: no config warnings detected")
        else:
            lines.append(f"- Validation: {len(summary.warnings)} warning(s)")
            lines.extend(f"  - {warning}" for warning in summary.warnings)
        return "\n".join(lines) + "\n"


# Default instance
_vault_tools: VaultTools | None = None


def get_vault_tools(vault_root: Path | None = None) -> VaultTools:
    """Get or create the default vault tools instance."""
    global _vault_tools
    if _vault_tools is None:
        if vault_root is None:
            from pocketbrain.core.config import VAULT_PATH

            vault_root = VAULT_PATH
        _vault_tools = VaultTools(DocumentStore.open(vault_root, label="vault"))
    return _vault_tools


def set_vault_tools(tools: VaultTools | None) -> None:
    """Set the default vault tools instance (for testing)."""
    global _vault_tools
    _vault_tools = tools
