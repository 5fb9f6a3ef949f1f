"""Store options - per-store overrides loaded from store-config.yaml.

Defaults come from the environment (see pocketbrain.core.config). A store may
carry a ``store-config.yaml`` at its root to override the daily-note format
or folder names:

    daily_note_format: "YYYY/MM/YYYY-MM-DD"
    folders:
      daily: journal
      inbox: 00_inbox
"""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pocketbrain.core import config
from pocketbrain.store.layout import StoreFolders

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "store-config.yaml"


class StoreConfigError(Exception):
    """Raised when store-config.yaml is invalid."""

    pass


class StoreOptions(BaseModel):
    """Service defaults for a store.

    Frozen to prevent accidental mutation.
    Extra fields are forbidden to catch typos in config.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    daily_note_format: str = "YYYY-MM-DD"
    folders: StoreFolders = Field(default_factory=StoreFolders)

    @classmethod
    def from_env(cls) -> "StoreOptions":
        """Options built from environment settings only."""
        return cls(
            daily_note_format=config.DAILY_NOTE_FORMAT,
            folders=StoreFolders.from_env(),
        )


def load_store_options(root: Path | str, defaults: StoreOptions | None = None) -> StoreOptions:
    """
    Load options for a store, layering store-config.yaml over defaults.

    Args:
        root: Store root directory
        defaults: Base options (defaults to StoreOptions.from_env())

    Returns:
        Merged StoreOptions. Defaults unchanged if no config file.

    Raises:
        StoreConfigError: If the config file exists but is invalid.
    """
    base = defaults or StoreOptions.from_env()
    config_file = Path(root).expanduser() / CONFIG_FILENAME

    if not config_file.is_file():
        logger.debug(f"No store config at {config_file}")
        return base

    try:
        with open(config_file, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"Invalid YAML in {config_file}: {e}")
        raise StoreConfigError(f"Invalid YAML in {config_file}: {e}") from e
    except OSError as e:
        raise StoreConfigError(f"Failed to read {config_file}: {e}") from e

    if raw is None:
        logger.debug("Store config is empty or null")
        return base

    if not isinstance(raw, dict):
        raise StoreConfigError(
            f"{CONFIG_FILENAME} must be a mapping, got {type(raw).__name__}"
        )

    merged = base.model_dump()
    folders = raw.get("folders") or {}
    if not isinstance(folders, dict):
        raise StoreConfigError(f"'folders' in {CONFIG_FILENAME} must be a mapping")
    merged.update({k: v for k, v in raw.items() if k != "folders"})
    merged["folders"] = {**merged["folders"], **folders}

    try:
        options = StoreOptions.model_validate(merged)
    except ValidationError as e:
        raise StoreConfigError(f"Invalid {CONFIG_FILENAME}: {e}") from e

    logger.info(
        f"Store config loaded: daily_note_format={options.daily_note_format}, "
        f"daily_folder={options.folders.daily}"
    )
    return options
