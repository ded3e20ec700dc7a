"""
Artifact mapper — resolve everything a feature references, for cache warm-up.

Read-only with respect to the feature and any plan. Unlike the launch
preparer it ignores the startup mode and always resolves ARTIFACTS
extension entries.
"""

from __future__ import annotations

import logging
from pathlib import Path

from featurelauncher.adapters.registry import ArtifactManager
from featurelauncher.core.models import ArtifactId, Feature

logger = logging.getLogger(__name__)


def calculate_artifacts(manager: ArtifactManager, feature: Feature) -> dict[ArtifactId, Path]:
    """Map every bundle and extension artifact to its local file.

    An artifact referenced more than once keeps the file of its last
    resolution.

    Raises:
        ResolutionError: On the first artifact that cannot be resolved.
    """
    result: dict[ArtifactId, Path] = {}

    for bundles in feature.bundles_by_start_order().values():
        for bundle in bundles:
            result[bundle.id] = manager.resolve_artifact(bundle.id).file

    for ext in feature.artifact_extensions:
        for artifact in ext.artifacts:
            result[artifact.id] = manager.resolve_artifact(artifact.id).file

    logger.debug("Mapped %d artifacts for %s", len(result), feature.id)
    return result
