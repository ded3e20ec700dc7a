"""
Launch use cases — load the application and produce what the CLI shows.

Each use case returns a result object instead of raising, so the CLI
can render errors and JSON output the same way.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from featurelauncher.adapters.registry import ArtifactManager
from featurelauncher.core.config.loader import LauncherConfig
from featurelauncher.core.errors import LauncherError
from featurelauncher.core.models import ArtifactId, Feature, InstallationPlan
from featurelauncher.core.persistence.feature_json import feature_to_dict
from featurelauncher.core.services.artifact_mapper import calculate_artifacts
from featurelauncher.core.services.feature_loader import create_application
from featurelauncher.core.services.launch_preparer import prepare_launcher

logger = logging.getLogger(__name__)


@dataclass
class PlanResult:
    """Outcome of preparing a launch."""

    feature: Feature | None = None
    plan: InstallationPlan | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        return {
            "feature": str(self.feature.id) if self.feature else None,
            "plan": self.plan.to_dict() if self.plan else None,
        }


@dataclass
class ArtifactsResult:
    """Outcome of mapping a feature's artifacts to local files."""

    feature: Feature | None = None
    artifacts: dict[ArtifactId, Path] = field(default_factory=dict)
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        return {
            "feature": str(self.feature.id) if self.feature else None,
            "artifacts": {str(aid): str(path) for aid, path in self.artifacts.items()},
        }


@dataclass
class FeatureResult:
    """The loaded application feature."""

    feature: Feature | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        return feature_to_dict(self.feature) if self.feature else {}


def build_plan(config: LauncherConfig, manager: ArtifactManager | None = None) -> PlanResult:
    """Load the application and prepare its installation plan."""
    result = PlanResult()
    manager = manager or ArtifactManager.from_config(config)

    try:
        result.feature = create_application(config, manager)
        result.plan = prepare_launcher(config, manager, result.feature)
    except LauncherError as e:
        logger.debug("Plan failed", exc_info=True)
        result.plan = None
        result.error = str(e)
    return result


def map_artifacts(config: LauncherConfig, manager: ArtifactManager | None = None) -> ArtifactsResult:
    """Load the application and resolve every artifact it references."""
    result = ArtifactsResult()
    manager = manager or ArtifactManager.from_config(config)

    try:
        result.feature = create_application(config, manager)
        result.artifacts = calculate_artifacts(manager, result.feature)
    except LauncherError as e:
        logger.debug("Artifact mapping failed", exc_info=True)
        result.artifacts = {}
        result.error = str(e)
    return result


def load_feature(config: LauncherConfig, manager: ArtifactManager | None = None) -> FeatureResult:
    """Load the application feature with variables resolved."""
    result = FeatureResult()
    manager = manager or ArtifactManager.from_config(config)

    try:
        result.feature = create_application(config, manager)
    except LauncherError as e:
        result.error = str(e)
    return result
