"""Sandboxed document store backing the vault and the workspace.

The store is a plain folder of Markdown files:
- Every path is resolved inside one root; traversal and symlink escapes fail
- Notes are indexed on the fly (wiki-links, #tags), nothing is cached on disk
- Daily notes follow the Obsidian daily-notes plugin settings when present
- Human-editable outside the app (VS Code, Obsidian, git)
"""

from pocketbrain.store.layout import StoreFolders, ensure_store_structure
from pocketbrain.store.obsidian import ConfigState, ConfigSummary
from pocketbrain.store.options import StoreConfigError, StoreOptions, load_store_options
from pocketbrain.store.sandbox import PathSandbox, is_within_root
from pocketbrain.store.service import DocumentStore
from pocketbrain.store.types import Entry, SearchMode, StoreStats, WikiLink

__all__ = [
    "ConfigState",
    "ConfigSummary",
    "DocumentStore",
    "Entry",
    "PathSandbox",
    "SearchMode",
    "StoreConfigError",
    "StoreFolders",
    "StoreOptions",
    "StoreStats",
    "WikiLink",
    "ensure_store_structure",
    "is_within_root",
    "load_store_options",
]
