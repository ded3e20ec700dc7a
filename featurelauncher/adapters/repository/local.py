"""
Local repository — a Maven-layout directory on disk (e.g. ~/.m2/repository).
"""

from __future__ import annotations

import logging
from pathlib import Path

from featurelauncher.adapters.base import ArtifactProvider

logger = logging.getLogger(__name__)


class LocalRepositoryProvider(ArtifactProvider):
    """Looks artifacts up in a local directory."""

    def __init__(self, root: Path):
        self._root = Path(root)

    @property
    def name(self) -> str:
        return "local"

    @property
    def url(self) -> str:
        return self._root.resolve().as_uri()

    @property
    def root(self) -> Path:
        return self._root

    def get_artifact(self, relative_path: str) -> Path | None:
        candidate = self._root / relative_path
        if candidate.is_file():
            logger.debug("Found %s in %s", relative_path, self._root)
            return candidate
        return None
