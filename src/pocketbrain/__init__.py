"""PocketBrain - sandboxed Markdown vault and workspace for a personal assistant."""

__version__ = "0.1.0"
