"""Configuration management for PocketBrain core."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def get_env(key: str, default: str | None = None) -> str | None:
    """Get environment variable with optional default."""
    return os.getenv(key, default)


def get_env_bool(key: str, default: bool = False) -> bool:
    """Get environment variable as boolean."""
    value = os.getenv(key, "").lower()
    if value in ("true", "1", "yes"):
        return True
    if value in ("false", "0", "no"):
        return False
    return default


def get_env_str(key: str, default: str) -> str:
    """Get environment variable as a trimmed string, falling back when blank."""
    value = (os.getenv(key) or "").strip()
    return value or default


# PocketBrain Data Directory (XDG-style, defaults to ~/.pocketbrain)
POCKETBRAIN_DATA_DIR = Path(
    get_env_str("POCKETBRAIN_DATA_DIR", os.path.expanduser("~/.pocketbrain"))
).expanduser()

# Vault (long-term notes)
VAULT_ENABLED = get_env_bool("VAULT_ENABLED", True)
VAULT_PATH = Path(
    get_env_str("VAULT_PATH", str(POCKETBRAIN_DATA_DIR / "vault"))
).expanduser()

# Workspace (scratch files)
WORKSPACE_PATH = Path(
    get_env_str("WORKSPACE_PATH", str(POCKETBRAIN_DATA_DIR / "workspace"))
).expanduser()

# Daily notes
DAILY_NOTE_FORMAT = get_env_str("DAILY_NOTE_FORMAT", "YYYY-MM-DD")

# Folder names inside the vault
VAULT_FOLDER_INBOX = get_env_str("VAULT_FOLDER_INBOX", "inbox")
VAULT_FOLDER_DAILY = get_env_str("VAULT_FOLDER_DAILY", "daily")
VAULT_FOLDER_PROJECTS = get_env_str("VAULT_FOLDER_PROJECTS", "projects")
VAULT_FOLDER_AREAS = get_env_str("VAULT_FOLDER_AREAS", "areas")
VAULT_FOLDER_RESOURCES = get_env_str("VAULT_FOLDER_RESOURCES", "resources")
VAULT_FOLDER_ARCHIVE = get_env_str("VAULT_FOLDER_ARCHIVE", "archive")

# Logging
LOG_LEVEL = get_env("LOG_LEVEL", "INFO") or "INFO"


def setup_logging() -> logging.Logger:
    """Configure and return logger."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    )
    return logging.getLogger(__name__)


def validate_vault_environment() -> tuple[bool, str]:
    """
    Validate environment variables for the vault.

    Returns:
        (is_valid, message) - If not valid, message explains what's missing.
    """
    if not VAULT_ENABLED:
        return True, ""

    if VAULT_PATH.exists() and not VAULT_PATH.is_dir():
        return False, f"VAULT_PATH must be a directory, got a file: {VAULT_PATH}"

    if WORKSPACE_PATH.resolve() == VAULT_PATH.resolve():
        return False, "WORKSPACE_PATH and VAULT_PATH must not point at the same folder"

    return True, ""
