"""Read-only view of the ``.obsidian`` configuration inside a store.

The JSON files are owned by the note-taking app; the store only reads them.
Missing or malformed files count as "no override" and never raise.
"""

import json
import logging
import os
from threading import Lock
from typing import Any, Callable, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pocketbrain.store.sandbox import PathSandbox

logger = logging.getLogger(__name__)

CONFIG_DIR = ".obsidian"
CONFIG_FILES = ("app.json", "daily-notes.json", "templates.json", "core-plugins.json")
DEFAULT_DAILY_FORMAT = "YYYY-MM-DD"

ReadFile = Callable[[str], str | None]


def _as_trimmed_string(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


# --- Raw config files ---


class _ConfigFile(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class AppConfig(_ConfigFile):
    """Fields of ``app.json`` the store cares about."""

    new_file_location: str = Field(default="", alias="newFileLocation")
    new_file_folder_path: str = Field(default="", alias="newFileFolderPath")
    attachment_folder_path: str = Field(default="", alias="attachmentFolderPath")
    use_markdown_links: bool = Field(default=False, alias="useMarkdownLinks")

    @field_validator(
        "new_file_location",
        "new_file_folder_path",
        "attachment_folder_path",
        mode="before",
    )
    @classmethod
    def _trim(cls, value: Any) -> str:
        return _as_trimmed_string(value)

    @field_validator("use_markdown_links", mode="before")
    @classmethod
    def _only_true(cls, value: Any) -> bool:
        return value is True


class DailyNotesConfig(_ConfigFile):
    """Fields of ``daily-notes.json``."""

    folder: str = ""
    format: str = ""
    template: str = ""

    @field_validator("folder", "format", "template", mode="before")
    @classmethod
    def _trim(cls, value: Any) -> str:
        return _as_trimmed_string(value)


class TemplatesConfig(_ConfigFile):
    """Fields of ``templates.json``."""

    folder: str = ""

    @field_validator("folder", mode="before")
    @classmethod
    def _trim(cls, value: Any) -> str:
        return _as_trimmed_string(value)


def config_path(file_name: str) -> str:
    """Store-relative path of an Obsidian config file."""
    return f"{CONFIG_DIR}/{file_name}"


def read_config_json(read_file: ReadFile, file_name: str) -> Any | None:
    """Parse ``.obsidian/<file_name>``; None when absent or malformed."""
    text = read_file(config_path(file_name))
    if text is None:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        logger.debug(f"Ignoring malformed {file_name}")
        return None


def _load_model(read_file: ReadFile, file_name: str, model: type[_ConfigFile]):
    raw = read_config_json(read_file, file_name)
    if not isinstance(raw, dict):
        return None
    try:
        return model.model_validate(raw)
    except ValidationError:
        logger.debug(f"Ignoring invalid {file_name}")
        return None


def load_daily_notes_config(read_file: ReadFile) -> DailyNotesConfig | None:
    """Load ``daily-notes.json`` if present and valid."""
    return _load_model(read_file, "daily-notes.json", DailyNotesConfig)


# --- Summary ---


class DailyNotesSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    folder: str
    format: str
    template_file: str
    plugin_enabled: bool


class NewNotesSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    location: Literal["current", "folder", "root", "unknown"]
    folder: str


class ConfigSummary(BaseModel):
    """Human-oriented digest of the Obsidian configuration."""

    model_config = ConfigDict(frozen=True)

    config_found: bool
    daily_notes: DailyNotesSummary
    new_notes: NewNotesSummary
    attachment_folder: str
    link_style: Literal["wikilink", "markdown"]
    templates_folder: str
    warnings: list[str] = Field(default_factory=list)


class ConfigState(BaseModel):
    """A summary plus the cache metadata it was served with."""

    model_config = ConfigDict(frozen=True)

    summary: ConfigSummary
    fingerprint: str
    cache_hit: bool


def normalize_new_file_location(value: str) -> str:
    """Map ``newFileLocation`` onto current|folder|root|unknown."""
    if value in ("current", "folder", "root"):
        return value
    if not value:
        return "current"
    return "unknown"


def build_config_summary(read_file: ReadFile, default_daily_folder: str) -> ConfigSummary:
    """
    Build a summary from the four Obsidian config files.

    Args:
        read_file: Sandboxed reader returning file text or None
        default_daily_folder: Daily folder used when daily-notes.json sets none

    Returns:
        ConfigSummary with coherence warnings
    """
    app = _load_model(read_file, "app.json", AppConfig)
    daily = load_daily_notes_config(read_file)
    templates = _load_model(read_file, "templates.json", TemplatesConfig)
    core_plugins = read_config_json(read_file, "core-plugins.json")

    app_cfg = app or AppConfig()
    daily_cfg = daily or DailyNotesConfig()
    templates_cfg = templates or TemplatesConfig()

    plugin_enabled = isinstance(core_plugins, list) and "daily-notes" in core_plugins
    location = normalize_new_file_location(app_cfg.new_file_location)

    warnings = []
    if not plugin_enabled:
        warnings.append("daily-notes core plugin is not enabled in core-plugins.json")
    if location == "folder" and not app_cfg.new_file_folder_path:
        warnings.append("newFileLocation is set to folder but newFileFolderPath is empty")
    if app_cfg.attachment_folder_path == "/":
        warnings.append("attachments are configured to save at the vault root")

    return ConfigSummary(
        config_found=any(
            cfg is not None for cfg in (app, daily, templates, core_plugins)
        ),
        daily_notes=DailyNotesSummary(
            folder=daily_cfg.folder or default_daily_folder,
            format=daily_cfg.format or DEFAULT_DAILY_FORMAT,
            template_file=daily_cfg.template or "(none)",
            plugin_enabled=plugin_enabled,
        ),
        new_notes=NewNotesSummary(
            location=location,
            folder=app_cfg.new_file_folder_path or "(not set)",
        ),
        attachment_folder=app_cfg.attachment_folder_path or "(current note folder)",
        link_style="markdown" if app_cfg.use_markdown_links else "wikilink",
        templates_folder=templates_cfg.folder or "(not set)",
        warnings=warnings,
    )


# --- Fingerprint + cache ---


def file_signature(sandbox: PathSandbox, relative_path: str) -> str:
    """Return ``path:size:mtime_ms`` or ``path:missing``."""
    abs_path = sandbox.resolve_for_read(relative_path)
    if abs_path is None:
        return f"{relative_path}:missing"
    try:
        info = abs_path.stat()
    except OSError:
        return f"{relative_path}:missing"
    return f"{relative_path}:{info.st_size}:{info.st_mtime_ns // 1_000_000}"


def compute_fingerprint(sandbox: PathSandbox) -> str:
    """Cheap digest of the store structure used to invalidate the cache."""
    dirs: list[str] = []
    try:
        with os.scandir(sandbox.root) as entries:
            dirs = sorted(
                entry.name
                for entry in entries
                if entry.is_dir(follow_symlinks=False)
                and not entry.name.startswith(".")
            )
    except OSError:
        pass

    signatures = [file_signature(sandbox, config_path(name)) for name in CONFIG_FILES]
    return f"dirs={','.join(dirs)};obsidian={'|'.join(signatures)}"


class ConfigCache:
    """Single-slot summary cache keyed by fingerprint.

    The lock guards the slot only; rebuilding a summary happens outside it.
    """

    def __init__(self):
        self._lock = Lock()
        self._fingerprint: str | None = None
        self._summary: ConfigSummary | None = None

    def get(
        self,
        fingerprint: str,
        build: Callable[[], ConfigSummary],
        force_refresh: bool = False,
    ) -> ConfigState:
        """
        Return the cached summary for fingerprint, rebuilding on a miss.

        Args:
            fingerprint: Current store fingerprint
            build: Produces a fresh summary
            force_refresh: Skip the cache even if the fingerprint matches

        Returns:
            ConfigState with cache_hit set accordingly
        """
        with self._lock:
            if (
                not force_refresh
                and self._summary is not None
                and self._fingerprint == fingerprint
            ):
                logger.debug("Config summary cache hit")
                return ConfigState(
                    summary=self._summary, fingerprint=fingerprint, cache_hit=True
                )

        logger.debug("Rebuilding config summary")
        summary = build()

        with self._lock:
            self._fingerprint = fingerprint
            self._summary = summary

        return ConfigState(summary=summary, fingerprint=fingerprint, cache_hit=False)

