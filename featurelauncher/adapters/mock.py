"""
Mock provider — test double for artifact repositories.

Serves every requested artifact from a scratch directory, creating a
small placeholder file on first request. Individual paths can be marked
missing or failing to exercise the error paths.
"""

from __future__ import annotations

from pathlib import Path

from featurelauncher.adapters.base import ArtifactProvider
from featurelauncher.core.errors import ResolutionError
from featurelauncher.core.models import ArtifactId


class MockArtifactProvider(ArtifactProvider):
    """Universal mock repository for testing."""

    def __init__(self, root: Path, provider_name: str = "mock"):
        self._root = Path(root)
        self._name = provider_name
        self._missing: set[str] = set()
        self._failing: dict[str, str] = {}
        self._call_log: list[str] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def url(self) -> str:
        return f"mock://{self._name}"

    @property
    def call_log(self) -> list[str]:
        """Every relative path this mock has been asked for."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def file_for(self, artifact: ArtifactId | str) -> Path:
        """Where the mock serves ``artifact`` from."""
        return self._root / _path(artifact)

    def set_missing(self, artifact: ArtifactId | str) -> None:
        """Make an artifact unavailable (get_artifact returns None)."""
        self._missing.add(_path(artifact))

    def set_failure(self, artifact: ArtifactId | str, error: str = "Mock failure") -> None:
        """Make looking up an artifact raise ResolutionError."""
        self._failing[_path(artifact)] = error

    def get_artifact(self, relative_path: str) -> Path | None:
        self._call_log.append(relative_path)

        if relative_path in self._failing:
            raise ResolutionError(self._failing[relative_path])
        if relative_path in self._missing:
            return None

        target = self._root / relative_path
        if not target.is_file():
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(f"mock artifact {relative_path}\n", encoding="utf-8")
        return target

    def reset(self) -> None:
        """Clear call log and configured failures."""
        self._call_log.clear()
        self._missing.clear()
        self._failing.clear()


def _path(artifact: ArtifactId | str) -> str:
    return artifact.to_mvn_path() if isinstance(artifact, ArtifactId) else artifact
