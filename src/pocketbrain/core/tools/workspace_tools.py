"""Workspace tools for scratch-file operations.

The workspace is a second store next to the vault: same sandboxing, no
daily notes, backlinks or Obsidian config.
"""

from pathlib import Path

from pocketbrain.core.tools.base import StoreTools
from pocketbrain.store import DocumentStore


class WorkspaceTools(StoreTools):
    """Tools for workspace file management."""

    label = "workspace"


# Default instance
_workspace_tools: WorkspaceTools | None = None


def get_workspace_tools(workspace_dir: Path | None = None) -> WorkspaceTools:
    """Get or create the default workspace tools instance."""
    global _workspace_tools
    if _workspace_tools is None:
        if workspace_dir is None:
            from pocketbrain.core.config import WORKSPACE_PATH

            workspace_dir = WORKSPACE_PATH
        _workspace_tools = WorkspaceTools(
            DocumentStore(workspace_dir, label="workspace")
        )
    return _workspace_tools


def set_workspace_tools(tools: WorkspaceTools | None) -> None:
    """Set the default workspace tools instance (for testing)."""
    global _workspace_tools
    _workspace_tools = tools
