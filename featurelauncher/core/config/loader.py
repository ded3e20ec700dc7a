"""
Configuration loader — reads launcher.yml into a LauncherConfig.

Precedence (highest first):
    CLI flags  >  FL_HOME env var  >  launcher.yml  >  built-in defaults

The YAML file is optional. When present it is validated against the
LauncherConfig schema and any problem is reported as a ConfigError.
"""

from __future__ import annotations

import logging
import os
from enum import StrEnum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from featurelauncher.core.errors import LauncherError
from featurelauncher.core.models.plan import InstallationPlan

logger = logging.getLogger(__name__)

# Default config filename
LAUNCHER_CONFIG_FILE = "launcher.yml"

DEFAULT_HOME = "launcher"
DEFAULT_CACHE_DIR = "cache"
DEFAULT_REPOSITORIES = [
    str(Path.home() / ".m2" / "repository"),
    "https://repo1.maven.org/maven2",
]

HOME_ENV_VAR = "FL_HOME"


class ConfigError(LauncherError):
    """Raised when launcher configuration is invalid or missing."""


class StartupMode(StrEnum):
    """How the launched framework is populated.

    PURE only installs modules; INSTALL also allows additional
    installable artifacts contributed by extensions.
    """

    PURE = "pure"
    INSTALL = "install"


class LauncherConfig(BaseModel):
    """Everything the launch pipeline needs besides the feature itself."""

    home_directory: Path = Path(DEFAULT_HOME)
    cache_directory: Path | None = None
    application_file: str | None = None

    startup_mode: StartupMode = StartupMode.PURE
    repository_urls: list[str] = Field(default_factory=lambda: list(DEFAULT_REPOSITORIES))

    variables: dict[str, str] = Field(default_factory=dict)
    framework_properties: dict[str, str] = Field(default_factory=dict)

    @field_validator("startup_mode", mode="before")
    @classmethod
    def _lower_mode(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value

    @field_validator("variables", "framework_properties", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        # YAML happily yields ints and bools; properties are always strings
        if isinstance(value, dict):
            return {str(k): _to_str(v) for k, v in value.items()}
        return value

    @property
    def effective_cache_directory(self) -> Path:
        """Artifact cache directory (defaults to <home>/cache)."""
        return self.cache_directory or self.home_directory / DEFAULT_CACHE_DIR

    @property
    def application_cache_path(self) -> Path:
        """Where the loaded application descriptor is cached between runs."""
        return self.home_directory / "resources" / "provisioning" / "application.json"

    def new_installation(self) -> InstallationPlan:
        """An empty plan seeded with the configured framework properties.

        Seeded properties are set first and therefore win over any
        property a feature declares.
        """
        return InstallationPlan(framework_properties=dict(self.framework_properties))


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for launcher.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to launcher.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / LAUNCHER_CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_launcher_config(path: Path | None = None) -> LauncherConfig:
    """Load and validate launcher configuration.

    Args:
        path: Explicit path to launcher.yml. If None, searches upward and
            falls back to defaults when nothing is found.

    Returns:
        Validated LauncherConfig.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    data: dict[str, Any] = {}

    if path is not None and not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    if path is None:
        path = find_config_file()

    if path is not None:
        data = _read_yaml(path)

    env_home = os.environ.get(HOME_ENV_VAR)
    if env_home:
        data["home_directory"] = env_home

    try:
        config = LauncherConfig.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid launcher configuration: {e}") from e

    logger.debug(
        "Launcher config: home=%s mode=%s repositories=%d",
        config.home_directory, config.startup_mode, len(config.repository_urls),
    )
    return config


# Keys accepted in launcher.yml, mapped to LauncherConfig fields
_YAML_KEYS = {
    "home": "home_directory",
    "cache": "cache_directory",
    "feature": "application_file",
    "startup_mode": "startup_mode",
    "repositories": "repository_urls",
    "variables": "variables",
    "framework_properties": "framework_properties",
}


def _read_yaml(path: Path) -> dict[str, Any]:
    logger.debug("Loading launcher config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    unknown = sorted(set(data) - set(_YAML_KEYS))
    if unknown:
        raise ConfigError(f"Unknown keys in {path}: {', '.join(unknown)}")

    result = {_YAML_KEYS[key]: value for key, value in data.items()}

    # Relative paths in the file are relative to the file itself
    for key in ("home_directory", "cache_directory"):
        if result.get(key) is not None:
            candidate = Path(str(result[key]))
            if not candidate.is_absolute():
                result[key] = path.parent / candidate
    return result


def _to_str(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
