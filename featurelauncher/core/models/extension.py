"""
Extension models — named, typed payloads attached to a feature.

Extensions are a discriminated union on ``type``: every payload shape has
its own model, so handlers can match on the class instead of poking at
optional fields.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

from featurelauncher.core.models.artifact import Artifact


class ExtensionType(StrEnum):
    """Payload kinds an extension can carry."""

    ARTIFACTS = "ARTIFACTS"
    TEXT = "TEXT"
    JSON = "JSON"


class ArtifactsExtension(BaseModel):
    """An extension listing additional (non-module) artifacts."""

    type: Literal[ExtensionType.ARTIFACTS] = ExtensionType.ARTIFACTS
    name: str
    required: bool = False
    artifacts: list[Artifact] = Field(default_factory=list)


class TextExtension(BaseModel):
    """An extension carrying free text."""

    type: Literal[ExtensionType.TEXT] = ExtensionType.TEXT
    name: str
    required: bool = False
    text: str = ""


class JsonExtension(BaseModel):
    """An extension carrying a structured JSON document."""

    type: Literal[ExtensionType.JSON] = ExtensionType.JSON
    name: str
    required: bool = False
    content: Any = None


Extension = Annotated[
    Union[ArtifactsExtension, TextExtension, JsonExtension],
    Field(discriminator="type"),
]
