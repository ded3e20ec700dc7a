"""
Shared test fixtures and configuration.
"""

import json
from pathlib import Path

import pytest

from featurelauncher.adapters.mock import MockArtifactProvider
from featurelauncher.adapters.registry import ArtifactManager
from featurelauncher.core.config.loader import LauncherConfig, StartupMode


@pytest.fixture
def mock_provider(tmp_path: Path) -> MockArtifactProvider:
    """A repository that serves any artifact from a scratch directory."""
    return MockArtifactProvider(tmp_path / "repo")


@pytest.fixture
def manager(mock_provider: MockArtifactProvider, tmp_path: Path) -> ArtifactManager:
    """An artifact manager backed only by the mock repository."""
    return ArtifactManager([mock_provider], tmp_path / "cache")


@pytest.fixture
def launcher_config(tmp_path: Path) -> LauncherConfig:
    """A launcher config with its home in a temp directory, INSTALL mode."""
    return LauncherConfig(
        home_directory=tmp_path / "home",
        startup_mode=StartupMode.INSTALL,
        repository_urls=[],
    )


@pytest.fixture
def write_feature(tmp_path: Path):
    """Write a feature document and return its path."""

    def _write(data: dict, name: str = "feature.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        return path

    return _write
