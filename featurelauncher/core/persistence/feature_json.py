"""
Feature JSON codec — parse and serialize feature descriptors.

Document layout::

    {
      "id": "org.example:app:slingosgifeature:1.0.0",
      "variables": {"port": "8080", "secret": null},
      "bundles": [
        "org.example:core:1.0.0",
        {"id": "org.example:web:1.0.0", "start-order": 20, "note": "x"}
      ],
      "framework-properties": {"org.osgi.service.http.port": "${port}"},
      "configurations": {
        "org.example.Service": {"enabled": true},
        "org.example.Factory~one": {"name": "one"}
      },
      "repoinit:TEXT|true": "create path /content",
      "content-packages:ARTIFACTS|false": ["org.example:content:zip:1.0.0"]
    }

Any key outside the known set is an extension, written as
``name[:TYPE][|required]``. TYPE defaults to JSON and the flag to false.

Writes go through ``save_feature`` which is atomic (temp file + rename).
"""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from featurelauncher.core.errors import ParseError, PersistenceError
from featurelauncher.core.models import (
    Artifact,
    ArtifactId,
    ArtifactsExtension,
    Configuration,
    Extension,
    ExtensionType,
    Feature,
    JsonExtension,
    TextExtension,
)

logger = logging.getLogger(__name__)

KEY_ID = "id"
KEY_TITLE = "title"
KEY_DESCRIPTION = "description"
KEY_VARIABLES = "variables"
KEY_BUNDLES = "bundles"
KEY_FRAMEWORK_PROPERTIES = "framework-properties"
KEY_CONFIGURATIONS = "configurations"
KEY_START_ORDER = "start-order"

# Descriptor metadata we accept but do not model
_IGNORED_KEYS = frozenset({
    "model-version", "vendor", "license", "complete", "final", "docURL", "scmInfo",
})

_REQUIRED_FLAGS = {"true": True, "required": True, "false": False, "optional": False, "transient": False}


# ── Parsing ──────────────────────────────────────────────────────


def parse_feature(content: str, location: str | None = None) -> Feature:
    """Parse a JSON feature document.

    Args:
        content: The document text.
        location: Where the document came from (kept on the Feature).

    Returns:
        The parsed Feature, variables still unresolved.

    Raises:
        ParseError: If the document is not valid JSON or not a valid feature.
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON in feature {location or '<inline>'}: {e}") from e

    if not isinstance(data, dict):
        raise ParseError(f"Expected a JSON object in feature {location or '<inline>'}")
    if KEY_ID not in data:
        raise ParseError(f"Feature {location or '<inline>'} has no '{KEY_ID}'")

    try:
        feature = Feature(
            id=ArtifactId.parse(_expect(data[KEY_ID], str, KEY_ID)),
            location=location,
            title=data.get(KEY_TITLE),
            description=data.get(KEY_DESCRIPTION),
            variables=_parse_variables(data.get(KEY_VARIABLES, {})),
            bundles=_parse_artifacts(data.get(KEY_BUNDLES, []), KEY_BUNDLES),
            framework_properties=_string_map(
                _expect(data.get(KEY_FRAMEWORK_PROPERTIES, {}), dict, KEY_FRAMEWORK_PROPERTIES)
            ),
            configurations=_parse_configurations(data.get(KEY_CONFIGURATIONS, {})),
            extensions=[
                _parse_extension(key, value)
                for key, value in data.items()
                if not _is_reserved(key)
            ],
        )
    except ValidationError as e:
        raise ParseError(f"Invalid feature {location or '<inline>'}: {e}") from e

    logger.debug(
        "Parsed feature %s: %d bundles, %d extensions, %d configurations",
        feature.id, len(feature.bundles), len(feature.extensions), len(feature.configurations),
    )
    return feature


def _is_reserved(key: str) -> bool:
    return key in _IGNORED_KEYS or key in (
        KEY_ID, KEY_TITLE, KEY_DESCRIPTION, KEY_VARIABLES,
        KEY_BUNDLES, KEY_FRAMEWORK_PROPERTIES, KEY_CONFIGURATIONS,
    )


def _expect(value: Any, kind: type, what: str) -> Any:
    if not isinstance(value, kind):
        raise ParseError(f"'{what}' must be a {kind.__name__}, got {type(value).__name__}")
    return value


def _string_map(data: dict) -> dict[str, str]:
    result = {}
    for key, value in data.items():
        if value is None or isinstance(value, (dict, list)):
            raise ParseError(f"Property '{key}' must be a scalar value")
        if isinstance(value, bool):
            value = "true" if value else "false"
        result[str(key)] = str(value)
    return result


def _parse_variables(data: Any) -> dict[str, str | None]:
    _expect(data, dict, KEY_VARIABLES)
    return {
        name: None if value is None else _string_map({name: value})[name]
        for name, value in data.items()
    }


def _parse_artifact(entry: Any, what: str) -> Artifact:
    if isinstance(entry, str):
        return Artifact.of(entry)
    if not isinstance(entry, dict):
        raise ParseError(f"Entries of '{what}' must be strings or objects")
    if KEY_ID not in entry:
        raise ParseError(f"Artifact entry in '{what}' has no '{KEY_ID}'")

    metadata = {k: v for k, v in entry.items() if k not in (KEY_ID, KEY_START_ORDER)}
    start_order = entry.get(KEY_START_ORDER, 0)
    if isinstance(start_order, str) and start_order.isascii() and start_order.isdigit():
        start_order = int(start_order)
    if isinstance(start_order, bool) or not isinstance(start_order, int):
        raise ParseError(f"Invalid {KEY_START_ORDER} {start_order!r} for {entry[KEY_ID]}")
    if start_order < 0:
        raise ParseError(f"{KEY_START_ORDER} must not be negative for {entry[KEY_ID]}")

    return Artifact(
        id=ArtifactId.parse(_expect(entry[KEY_ID], str, KEY_ID)),
        metadata=_string_map(metadata),
        start_order=start_order,
    )


def _parse_artifacts(data: Any, what: str) -> list[Artifact]:
    _expect(data, list, what)
    return [_parse_artifact(entry, what) for entry in data]


def _parse_configurations(data: Any) -> list[Configuration]:
    _expect(data, dict, KEY_CONFIGURATIONS)
    return [
        Configuration(pid=pid, properties=_expect(props, dict, f"{KEY_CONFIGURATIONS}.{pid}"))
        for pid, props in data.items()
    ]


def _parse_extension(key: str, value: Any) -> Extension:
    head, _, flag = key.partition("|")
    name, _, type_name = head.partition(":")
    if not name:
        raise ParseError(f"Extension key {key!r} has no name")

    try:
        ext_type = ExtensionType(type_name.upper()) if type_name else ExtensionType.JSON
    except ValueError as e:
        raise ParseError(f"Unknown extension type {type_name!r} in {key!r}") from e

    flag = flag.lower()
    if flag and flag not in _REQUIRED_FLAGS:
        raise ParseError(f"Unknown extension state {flag!r} in {key!r}")
    required = _REQUIRED_FLAGS.get(flag, False)

    if ext_type is ExtensionType.ARTIFACTS:
        return ArtifactsExtension(name=name, required=required, artifacts=_parse_artifacts(value, key))
    if ext_type is ExtensionType.TEXT:
        # Text may be given as a list of lines
        if isinstance(value, list) and all(isinstance(line, str) for line in value):
            value = "\n".join(value)
        return TextExtension(name=name, required=required, text=_expect(value, str, key))
    return JsonExtension(name=name, required=required, content=value)


# ── Serialization ────────────────────────────────────────────────


def feature_to_dict(feature: Feature) -> dict[str, Any]:
    """Convert a feature into its JSON document structure."""
    data: dict[str, Any] = {KEY_ID: str(feature.id)}
    if feature.title is not None:
        data[KEY_TITLE] = feature.title
    if feature.description is not None:
        data[KEY_DESCRIPTION] = feature.description
    if feature.variables:
        data[KEY_VARIABLES] = dict(feature.variables)
    if feature.bundles:
        data[KEY_BUNDLES] = [_artifact_to_json(b) for b in feature.bundles]
    if feature.framework_properties:
        data[KEY_FRAMEWORK_PROPERTIES] = dict(feature.framework_properties)
    if feature.configurations:
        data[KEY_CONFIGURATIONS] = {c.pid: dict(c.properties) for c in feature.configurations}

    for ext in feature.extensions:
        key = f"{ext.name}:{ext.type.value}|{'true' if ext.required else 'false'}"
        if isinstance(ext, ArtifactsExtension):
            data[key] = [_artifact_to_json(a) for a in ext.artifacts]
        elif isinstance(ext, TextExtension):
            data[key] = ext.text
        else:
            data[key] = ext.content
    return data


def serialize_feature(feature: Feature) -> str:
    """Render a feature as an indented JSON document."""
    return json.dumps(feature_to_dict(feature), indent=2, ensure_ascii=False) + "\n"


def _artifact_to_json(artifact: Artifact) -> str | dict[str, Any]:
    if not artifact.metadata and not artifact.has_start_order:
        return str(artifact.id)
    entry: dict[str, Any] = {KEY_ID: str(artifact.id)}
    if artifact.has_start_order:
        entry[KEY_START_ORDER] = artifact.start_order
    entry.update(artifact.metadata)
    return entry


# ── Files ────────────────────────────────────────────────────────


def read_feature_file(path: Path, location: str | None = None) -> Feature:
    """Read and parse a feature file.

    Raises:
        ParseError: If the content is not a valid feature.
        OSError: If the file cannot be read.
    """
    with open(path, encoding="utf-8") as f:
        content = f.read()
    return parse_feature(content, location or str(path))


def save_feature(feature: Feature, path: Path) -> None:
    """Write a feature to ``path`` atomically, creating parent directories.

    Raises:
        PersistenceError: If the file cannot be written.
    """
    content = serialize_feature(feature)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=".feature_", suffix=".tmp")
        tmp = Path(tmp_path)
        try:
            with open(fd, "w", encoding="utf-8") as f:
                f.write(content)
            tmp.replace(path)
        except Exception:
            tmp.unlink(missing_ok=True)
            raise
    except OSError as e:
        raise PersistenceError(f"Cannot write feature to {path}: {e}") from e

    logger.debug("Feature %s saved to %s", feature.id, path)
