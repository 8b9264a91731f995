"""Workspace settings — reads crateshift.toml + .env to produce RenameSettings.

Settings are optional: a workspace without crateshift.toml gets the defaults.
Environment variables (optionally loaded from .env files) override the file.

Key entities:
  - RenameSettings: frozen dataclass with all resolved settings for one run.
  - load_settings(): parse .env + crateshift.toml → RenameSettings.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

SETTINGS_FILE_NAME = "crateshift.toml"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# ---------------------------------------------------------------------------
# RenameSettings
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RenameSettings:
    """Resolved settings for one crateshift run.

    Merges crateshift.toml with environment overrides. Paths are
    pre-resolved against the workspace root.
    """

    workspace_root: Path = field(default_factory=Path.cwd)
    manifest_name: str = "Cargo.toml"

    # Output
    log_level: str = "WARNING"
    quiet: bool = False
    color: bool = True

    # Packages that are never selected for renaming
    protected: frozenset[str] = field(default_factory=frozenset)

    @property
    def root_manifest(self) -> Path:
        return self.workspace_root / self.manifest_name

    def is_protected(self, name: str) -> bool:
        return name in self.protected


# ---------------------------------------------------------------------------
# load_settings
# ---------------------------------------------------------------------------


def load_settings(workspace_root: Path | None = None) -> RenameSettings:
    """Read .env + crateshift.toml and return RenameSettings.

    Args:
        workspace_root: Directory holding the workspace's root manifest.
                        Defaults to the current directory.

    Returns:
        RenameSettings for the workspace. Missing crateshift.toml is fine.

    Raises:
        ValueError: If crateshift.toml is malformed or holds bad values.
    """
    if workspace_root is None:
        workspace_root = Path.cwd()
    workspace_root = workspace_root.resolve()

    # Load .env files (local cwd first, then workspace root)
    local_env = Path(".env")
    workspace_env = workspace_root / ".env"
    if local_env.is_file():
        load_dotenv(local_env)
    if workspace_env.is_file():
        load_dotenv(workspace_env)

    raw: dict = {}
    toml_path = workspace_root / SETTINGS_FILE_NAME
    if toml_path.is_file():
        try:
            with open(toml_path, "rb") as f:
                raw = tomllib.load(f).get("settings", {})
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid {toml_path}: {e}") from e
        logger.debug("Loaded settings from %s", toml_path)

    return _build_settings(workspace_root, raw)


def _build_settings(workspace_root: Path, raw: dict) -> RenameSettings:
    """Merge file settings with environment overrides."""

    def _get(key: str, default, kind: type):
        value = raw.get(key, default)
        if not isinstance(value, kind):
            raise ValueError(
                f"{SETTINGS_FILE_NAME}: '{key}' must be of type {kind.__name__}, "
                f"got {type(value).__name__}"
            )
        return value

    log_level = os.getenv("CRATESHIFT_LOG_LEVEL") or _get("log_level", "WARNING", str)
    log_level = log_level.upper()
    if log_level not in _LOG_LEVELS:
        raise ValueError(
            f"Unknown log level '{log_level}'. Use one of: {', '.join(_LOG_LEVELS)}"
        )

    color = _get("color", True, bool)
    if os.getenv("NO_COLOR"):
        color = False

    protected = _get("protected", [], list)
    if not all(isinstance(name, str) for name in protected):
        raise ValueError(f"{SETTINGS_FILE_NAME}: 'protected' must list package names")

    return RenameSettings(
        workspace_root=workspace_root,
        manifest_name=_get("manifest_name", "Cargo.toml", str),
        log_level=log_level,
        quiet=_get("quiet", False, bool),
        color=color,
        protected=frozenset(protected),
    )
