"""
Provider base — the contract between the artifact manager and repositories.

A provider knows how to turn a repository-relative Maven path into a
local file. The ArtifactManager only talks to providers through this
protocol and never touches a repository directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import BaseModel


class ArtifactHandle(BaseModel):
    """A resolved artifact: where it came from and where it is on disk."""

    url: str
    file: Path


class ArtifactProvider(ABC):
    """Abstract base class for artifact repositories.

    To add a repository kind:
        1. Subclass ArtifactProvider
        2. Implement name, url and get_artifact
        3. Hand an instance to the ArtifactManager
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier used in log and error messages."""

    @property
    @abstractmethod
    def url(self) -> str:
        """Base URL of the repository."""

    @abstractmethod
    def get_artifact(self, relative_path: str) -> Path | None:
        """Return the local file for ``relative_path``.

        Returns:
            The file, or None if this repository does not have it.

        Raises:
            ResolutionError: If the repository failed while looking.
        """

    def url_for(self, relative_path: str) -> str:
        return f"{self.url.rstrip('/')}/{relative_path}"

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} url={self.url!r}>"
