"""Store layout and folder naming.

A store root holds a small set of convention folders (inbox, daily notes,
projects, areas, resources, archive). Names are configurable; the defaults
come from environment variables.
"""

import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator

from pocketbrain.core import config

logger = logging.getLogger(__name__)


class StoreFolders(BaseModel):
    """Folder names relative to the store root."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    inbox: str = "inbox"
    daily: str = "daily"
    projects: str = "projects"
    areas: str = "areas"
    resources: str = "resources"
    archive: str = "archive"

    @field_validator("*", mode="before")
    @classmethod
    def _strip_slashes(cls, value: str) -> str:
        if isinstance(value, str):
            return value.strip().strip("/")
        return value

    @classmethod
    def from_env(cls) -> "StoreFolders":
        """
        Build folder names from VAULT_FOLDER_* settings.

        Returns:
            StoreFolders populated from the environment
        """
        return cls(
            inbox=config.VAULT_FOLDER_INBOX,
            daily=config.VAULT_FOLDER_DAILY,
            projects=config.VAULT_FOLDER_PROJECTS,
            areas=config.VAULT_FOLDER_AREAS,
            resources=config.VAULT_FOLDER_RESOURCES,
            archive=config.VAULT_FOLDER_ARCHIVE,
        )

    def all(self) -> list[str]:
        """All convention folders, in creation order."""
        return [
            self.inbox,
            self.daily,
            self.projects,
            self.areas,
            self.resources,
            self.archive,
        ]


def ensure_store_structure(root: Path, folders: StoreFolders) -> list[str]:
    """
    Ensure the store root and its convention folders exist.

    Safe to call multiple times. Folders that are blank after trimming are
    skipped.

    Args:
        root: Store root directory
        folders: Folder naming configuration

    Returns:
        Folder names that were created by this call
    """
    root.mkdir(parents=True, exist_ok=True)

    created = []
    for name in folders.all():
        if not name:
            continue
        folder = root / name
        if folder.is_dir():
            continue
        folder.mkdir(parents=True, exist_ok=True)
        created.append(name)

    if created:
        logger.info(f"Created store folders: {', '.join(created)}")
    return created
