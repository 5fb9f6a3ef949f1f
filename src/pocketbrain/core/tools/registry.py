"""Tool registry for routing tool calls to the vault and workspace tools."""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable

from pocketbrain.core.tools.vault_tools import VaultTools
from pocketbrain.core.tools.workspace_tools import WorkspaceTools

logger = logging.getLogger(__name__)


@dataclass
class ToolDefinition:
    """Definition of a tool."""

    name: str
    description: str
    handler: Callable[..., str] | None = None
    requires_approval: bool = False
    category: str = "general"


class ToolRegistry:
    """Registry for available tools."""

    def __init__(
        self,
        vault_tools: VaultTools | None = None,
        workspace_tools: WorkspaceTools | None = None,
    ):
        """
        Initialize tool registry.

        Args:
            vault_tools: Vault tools to expose (skipped when None)
            workspace_tools: Workspace tools to expose (skipped when None)
        """
        self.tools: dict[str, ToolDefinition] = {}
        if vault_tools is not None:
            self._register_vault_tools(vault_tools)
        if workspace_tools is not None:
            self._register_workspace_tools(workspace_tools)

    def _register_file_tools(self, prefix: str, tools: VaultTools | WorkspaceTools) -> None:
        """Register the file tools both flavors share."""
        where = f"{prefix} root"

        # Read-only tools
        self.register(
            ToolDefinition(
                name=f"{prefix}_read",
                description=f"Read the contents of a file. Path is relative to {where}.",
                handler=tools.read,
                category=prefix,
            )
        )
        self.register(
            ToolDefinition(
                name=f"{prefix}_list",
                description=f"List files and folders in a {prefix} directory.",
                handler=tools.list,
                category=prefix,
            )
        )
        self.register(
            ToolDefinition(
                name=f"{prefix}_search",
                description="Search for files by name, content, or both.",
                handler=tools.search,
                category=prefix,
            )
        )
        self.register(
            ToolDefinition(
                name=f"{prefix}_stats",
                description="Get total files, total size and last modified date.",
                handler=tools.stats,
                category=prefix,
            )
        )

        # Write tools (require approval)
        self.register(
            ToolDefinition(
                name=f"{prefix}_write",
                description="Write content to a file, overwriting it if it exists.",
                handler=tools.write,
                requires_approval=True,
                category=prefix,
            )
        )
        self.register(
            ToolDefinition(
                name=f"{prefix}_append",
                description="Append content to a file, creating it if needed.",
                handler=tools.append,
                requires_approval=True,
                category=prefix,
            )
        )
        self.register(
            ToolDefinition(
                name=f"{prefix}_move",
                description="Move or rename a file.",
                handler=tools.move,
                requires_approval=True,
                category=prefix,
            )
        )

    def _register_vault_tools(self, tools: VaultTools) -> None:
        self._register_file_tools("vault", tools)
        self.register(
            ToolDefinition(
                name="vault_backlinks",
                description="Find notes that link to a wiki link target.",
                handler=tools.backlinks,
                category="vault",
            )
        )
        self.register(
            ToolDefinition(
                name="vault_tag_search",
                description="Find notes containing a tag (supports nested tags).",
                handler=tools.tag_search,
                category="vault",
            )
        )
        self.register(
            ToolDefinition(
                name="vault_obsidian_config",
                description="Summarize where daily notes, new notes and attachments are saved.",
                handler=tools.obsidian_config,
                category="vault",
            )
        )
        self.register(
            ToolDefinition(
                name="vault_daily",
                description="Get today's daily note path or append a timestamped entry to it.",
                handler=tools.daily,
                requires_approval=True,
                category="vault",
            )
        )
        self.register(
            ToolDefinition(
                name="vault_daily_track",
                description="Set or update a metric in today's daily tracking section.",
                handler=tools.daily_track,
                requires_approval=True,
                category="vault",
            )
        )

    def _register_workspace_tools(self, tools: WorkspaceTools) -> None:
        self._register_file_tools("workspace", tools)

    def register(self, tool: ToolDefinition) -> None:
        """Register a tool."""
        self.tools[tool.name] = tool

    def unregister(self, name: str) -> None:
        """Unregister a tool."""
        self.tools.pop(name, None)

    def get(self, name: str) -> ToolDefinition | None:
        """Get a tool by name."""
        return self.tools.get(name)

    def list_tools(self, category: str | None = None) -> list[ToolDefinition]:
        """List all tools, optionally filtered by category."""
        if category is None:
            return list(self.tools.values())
        return [t for t in self.tools.values() if t.category == category]

    def get_tool_names(self, include_approval_required: bool = True) -> list[str]:
        """Get list of tool names."""
        if include_approval_required:
            return list(self.tools.keys())
        return [t.name for t in self.tools.values() if not t.requires_approval]

    def requires_approval(self, name: str) -> bool:
        """Check if a tool requires approval."""
        tool = self.get(name)
        return tool.requires_approval if tool else True

    def call(self, name: str, **kwargs: Any) -> str:
        """
        Run a tool by name.

        Returns:
            The tool's text result, or an "Error: ..." string for unknown
            tools and bad arguments
        """
        tool = self.get(name)
        if tool is None or tool.handler is None:
            return f"Error: Unknown tool: {name}"

        try:
            inspect.signature(tool.handler).bind(**kwargs)
        except TypeError as e:
            logger.debug(f"Bad arguments for {name}: {e}")
            return f"Error: Invalid arguments for {name}: {e}"

        return tool.handler(**kwargs)
