"""Tool subsystem exposing the vault and workspace stores."""

from pocketbrain.core.tools.registry import ToolDefinition, ToolRegistry
from pocketbrain.core.tools.vault_tools import VaultTools
from pocketbrain.core.tools.workspace_tools import WorkspaceTools

__all__ = [
    "ToolDefinition",
    "ToolRegistry",
    "VaultTools",
    "WorkspaceTools",
]
