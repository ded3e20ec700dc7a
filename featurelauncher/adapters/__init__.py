"""Adapters — artifact repositories and the manager that fronts them.

Public re-exports for convenient access.
"""

from featurelauncher.adapters.base import ArtifactHandle, ArtifactProvider
from featurelauncher.adapters.mock import MockArtifactProvider
from featurelauncher.adapters.registry import ArtifactManager

__all__ = [
    "ArtifactHandle",
    "ArtifactManager",
    "ArtifactProvider",
    "MockArtifactProvider",
]
