"""
Artifact models — coordinates and the modules (bundles) that carry them.

An ArtifactId is the immutable coordinate ``group:artifact[:type[:classifier]]:version``.
An Artifact is a module declared by a feature: a coordinate plus free-form
metadata and a start order.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from featurelauncher.core.errors import ParseError

DEFAULT_TYPE = "jar"

# Start order value meaning "not declared"
UNSET_START_ORDER = 0


class ArtifactId(BaseModel):
    """Immutable artifact coordinate. Hashable, usable as a mapping key."""

    model_config = ConfigDict(frozen=True)

    group_id: str
    artifact_id: str
    version: str
    type: str = DEFAULT_TYPE
    classifier: str | None = None

    @classmethod
    def parse(cls, coordinate: str) -> ArtifactId:
        """Parse ``g:a:v``, ``g:a:type:v`` or ``g:a:type:classifier:v``.

        Raises:
            ParseError: If the coordinate has the wrong shape.
        """
        parts = coordinate.strip().split(":")
        if len(parts) < 3 or len(parts) > 5 or not all(parts):
            raise ParseError(f"Invalid artifact coordinate: {coordinate!r}")

        group_id, artifact_id = parts[0], parts[1]
        version = parts[-1]
        type_ = parts[2] if len(parts) >= 4 else DEFAULT_TYPE
        classifier = parts[3] if len(parts) == 5 else None
        return cls(
            group_id=group_id,
            artifact_id=artifact_id,
            version=version,
            type=type_,
            classifier=classifier,
        )

    @classmethod
    def is_coordinate(cls, value: str) -> bool:
        """Whether ``value`` parses as a coordinate."""
        try:
            cls.parse(value)
        except ParseError:
            return False
        return True

    def to_mvn_path(self) -> str:
        """Relative path of this artifact inside a Maven-layout repository."""
        suffix = f"-{self.classifier}" if self.classifier else ""
        return "/".join([
            *self.group_id.split("."),
            self.artifact_id,
            self.version,
            f"{self.artifact_id}-{self.version}{suffix}.{self.type}",
        ])

    def __str__(self) -> str:
        if self.classifier:
            return f"{self.group_id}:{self.artifact_id}:{self.type}:{self.classifier}:{self.version}"
        if self.type != DEFAULT_TYPE:
            return f"{self.group_id}:{self.artifact_id}:{self.type}:{self.version}"
        return f"{self.group_id}:{self.artifact_id}:{self.version}"


class Artifact(BaseModel):
    """A module declared by a feature.

    ``start_order`` is 0 until declared or normalized; after normalization
    it is always >= 1.
    """

    id: ArtifactId
    metadata: dict[str, str] = Field(default_factory=dict)
    start_order: int = UNSET_START_ORDER

    @classmethod
    def of(cls, coordinate: str, **kwargs) -> Artifact:
        """Shorthand: build an artifact from a coordinate string."""
        return cls(id=ArtifactId.parse(coordinate), **kwargs)

    @property
    def has_start_order(self) -> bool:
        return self.start_order != UNSET_START_ORDER
