"""
Feature model — the root descriptor handed to the launcher.

A feature assembles modules (bundles), typed extensions, configurations
and framework properties. Every list keeps declaration order; the launch
pipeline iterates in that order so results are deterministic.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from featurelauncher.core.models.artifact import Artifact, ArtifactId
from featurelauncher.core.models.configuration import Configuration
from featurelauncher.core.models.extension import ArtifactsExtension, Extension


class Feature(BaseModel):
    """A versioned assembly of modules, extensions and configuration."""

    id: ArtifactId
    location: str | None = None   # where the descriptor was read from

    title: str | None = None
    description: str | None = None

    # name -> value; None marks a variable that must be supplied by an override
    variables: dict[str, str | None] = Field(default_factory=dict)

    bundles: list[Artifact] = Field(default_factory=list)
    extensions: list[Extension] = Field(default_factory=list)
    configurations: list[Configuration] = Field(default_factory=list)
    framework_properties: dict[str, str] = Field(default_factory=dict)

    def bundles_by_start_order(self) -> dict[int, list[Artifact]]:
        """Group bundles by ascending start order, declaration order within a level."""
        grouped: dict[int, list[Artifact]] = {}
        for bundle in self.bundles:
            grouped.setdefault(bundle.start_order, []).append(bundle)
        return {order: grouped[order] for order in sorted(grouped)}

    @property
    def artifact_extensions(self) -> list[ArtifactsExtension]:
        """All extensions that carry artifact lists."""
        return [e for e in self.extensions if isinstance(e, ArtifactsExtension)]
