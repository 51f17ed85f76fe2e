"""
Settings — the explicit configuration object for the installer.

Reads ``lsp-installer.yml`` into a validated :class:`Settings` model.
There is no process-wide settings singleton: entry points load a
``Settings`` once and hand it to the :class:`ServerManager`.

``DEFAULT_SETTINGS`` exists only so callers can tell whether the user
has moved the install root away from its default location (the bulk
uninstall asks for a second confirmation in that case).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

SETTINGS_FILE = "lsp-installer.yml"


class SettingsError(Exception):
    """Raised when the settings file is missing or invalid."""


def default_install_root() -> Path:
    """Return the default install root, honouring ``XDG_DATA_HOME``."""
    data_home = os.environ.get("XDG_DATA_HOME")
    base = Path(data_home) if data_home else Path.home() / ".local" / "share"
    return base / "lsp-installer" / "servers"


class ServerSpec(BaseModel):
    """A command-backed server declared in the settings file.

    ``install`` is an argv list.  ``{version}`` and ``{install_dir}``
    tokens are substituted before the command runs.
    """

    install: list[str]
    default_version: str | None = None
    description: str = ""

    @field_validator("install")
    @classmethod
    def _install_not_empty(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("install command must not be empty")
        return value


class Settings(BaseModel):
    """Installer configuration."""

    install_root_dir: Path = Field(default_factory=default_install_root)
    max_concurrent_installers: int = Field(default=4, ge=1)

    # ── Completion barrier ───────────────────────────────────────
    barrier_poll_interval: float = Field(default=0.1, gt=0)
    barrier_timeout: float = Field(default=60.0 * 15, gt=0)

    log_level: str = "WARNING"
    servers: dict[str, ServerSpec] = Field(default_factory=dict)

    @field_validator("install_root_dir", mode="before")
    @classmethod
    def _expand_root(cls, value: Any) -> Any:
        if isinstance(value, (str, Path)):
            return Path(os.path.expandvars(str(value))).expanduser()
        return value

    def merged(self, **overrides: Any) -> Settings:
        """Return a copy with ``overrides`` applied and validated."""
        data = self.model_dump()
        data.update(overrides)
        return Settings.model_validate(data)

    @property
    def uses_default_root(self) -> bool:
        return self.install_root_dir == DEFAULT_SETTINGS.install_root_dir


DEFAULT_SETTINGS = Settings()


def find_settings_file(start_dir: Path | None = None) -> Path | None:
    """Search for the settings file from ``start_dir`` (default: cwd) upward."""
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / SETTINGS_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def load_settings(path: Path | None = None) -> Settings:
    """Load and validate settings.

    Args:
        path: Explicit settings file.  If None, searches upward from the
            cwd and falls back to defaults when nothing is found.

    Raises:
        SettingsError: If an explicit file is missing, or any file is
            unreadable or invalid.
    """
    if path is None:
        path = find_settings_file()
        if path is None:
            logger.debug("No %s found, using default settings", SETTINGS_FILE)
            return Settings()
    elif not path.is_file():
        raise SettingsError(f"Settings file not found: {path}")

    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SettingsError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise SettingsError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise SettingsError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        settings = Settings.model_validate(data)
    except Exception as e:
        raise SettingsError(f"Invalid settings: {e}") from e

    logger.info(
        "Loaded settings from %s (%d servers, root=%s)",
        path, len(settings.servers), settings.install_root_dir,
    )
    return settings
