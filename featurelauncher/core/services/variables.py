"""
Variable substitution — replace ``${name}`` placeholders in a feature.

Values come from the feature's own ``variables`` section; caller
overrides replace declared values. A placeholder naming a declared
variable without a value is an error. Placeholders naming undeclared
variables are left as they are, so text that merely looks like a
placeholder survives.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from featurelauncher.core.errors import VariableError
from featurelauncher.core.models import (
    Artifact,
    ArtifactsExtension,
    Feature,
    JsonExtension,
    TextExtension,
)

logger = logging.getLogger(__name__)

PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")


def resolve_variables(feature: Feature, overrides: dict[str, str] | None = None) -> Feature:
    """Substitute placeholders throughout ``feature`` in place.

    Args:
        feature: The feature to rewrite.
        overrides: Caller-supplied values for declared variables.

    Returns:
        The same feature, for chaining.

    Raises:
        VariableError: If a referenced variable has no value.
    """
    values = dict(feature.variables)
    for name, value in (overrides or {}).items():
        if name in values:
            values[name] = value
        else:
            logger.debug("Ignoring override for undeclared variable %s", name)
    feature.variables = values

    def sub(text: str) -> str:
        return substitute(text, values, feature.location)

    for bundle in feature.bundles:
        _resolve_artifact(bundle, sub)

    feature.framework_properties = {k: sub(v) for k, v in feature.framework_properties.items()}

    for cfg in feature.configurations:
        cfg.properties = _resolve_value(cfg.properties, sub)

    for ext in feature.extensions:
        if isinstance(ext, ArtifactsExtension):
            for artifact in ext.artifacts:
                _resolve_artifact(artifact, sub)
        elif isinstance(ext, TextExtension):
            ext.text = sub(ext.text)
        elif isinstance(ext, JsonExtension):
            ext.content = _resolve_value(ext.content, sub)

    return feature


def substitute(text: str, values: dict[str, str | None], location: str | None = None) -> str:
    """Replace every known ``${name}`` in ``text``."""

    def replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in values:
            return match.group(0)
        value = values[name]
        if value is None:
            raise VariableError(
                f"Variable '{name}' has no value"
                + (f" in feature {location}" if location else "")
                + " and no override was given"
            )
        return value

    return PLACEHOLDER.sub(replace, text)


def _resolve_artifact(artifact: Artifact, sub) -> None:
    artifact.metadata = {k: sub(v) for k, v in artifact.metadata.items()}


def _resolve_value(value: Any, sub) -> Any:
    if isinstance(value, str):
        return sub(value)
    if isinstance(value, list):
        return [_resolve_value(v, sub) for v in value]
    if isinstance(value, dict):
        return {k: _resolve_value(v, sub) for k, v in value.items()}
    return value
