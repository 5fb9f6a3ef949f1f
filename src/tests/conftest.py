"""Shared test fixtures and configuration."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from pocketbrain.store import DocumentStore, StoreOptions


@pytest.fixture
def temp_dir(tmp_path):
    """Provide a temporary directory for tests."""
    return tmp_path


@pytest.fixture
def mock_env(monkeypatch, tmp_path):
    """Set up mock environment variables."""
    env_vars = {
        "POCKETBRAIN_DATA_DIR": str(tmp_path / "data"),
        "VAULT_PATH": str(tmp_path / "data" / "vault"),
        "WORKSPACE_PATH": str(tmp_path / "data" / "workspace"),
        "DAILY_NOTE_FORMAT": "YYYY-MM-DD",
        "VAULT_FOLDER_DAILY": "journal",
        "LOG_LEVEL": "DEBUG",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


@pytest.fixture
def store_root(tmp_path) -> Path:
    """An empty store root directory."""
    root = tmp_path / "vault"
    root.mkdir()
    return root


@pytest.fixture
def outside_dir(tmp_path) -> Path:
    """A directory next to the store root holding a secret."""
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "secret.md").write_text("top secret")
    return outside


@pytest.fixture
def store(store_root) -> DocumentStore:
    """A store with default options rooted at store_root."""
    return DocumentStore(store_root, StoreOptions(), label="vault")


@pytest.fixture
def make_symlink():
    """Factory creating a symlink, skipping the test where that is unsupported."""

    def _make_symlink(link: Path, target: Path) -> Path:
        try:
            os.symlink(target, link, target_is_directory=target.is_dir())
        except (OSError, NotImplementedError) as exc:
            pytest.skip(f"symlinks unavailable: {exc}")
        return link

    return _make_symlink


@pytest.fixture
def write_obsidian_config(store_root):
    """Factory writing a file into <root>/.obsidian (dicts/lists become JSON)."""

    def _write(name: str, data) -> Path:
        config_dir = store_root / ".obsidian"
        config_dir.mkdir(exist_ok=True)
        path = config_dir / name
        text = data if isinstance(data, str) else json.dumps(data)
        path.write_text(text)
        return path

    return _write


@pytest.fixture
def write_files(store_root):
    """Factory writing several store-relative files at once."""

    def _write(files: dict[str, str]) -> None:
        for rel, content in files.items():
            path = store_root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)

    return _write
