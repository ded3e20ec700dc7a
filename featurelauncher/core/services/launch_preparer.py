"""
Launch preparer — turn a loaded feature into an installation plan.

Steps, in order, each returning a StepResult:
    1. bundles      resolve modules, grouped by ascending start order
    2. extensions   dispatch each extension on its type and name
    3. merge        fold in configurations and framework properties

The first failing step stops the pipeline and its error is raised. The
plan is built on a private copy, so a failure never leaves a partially
filled plan behind.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from featurelauncher.adapters.registry import ArtifactManager
from featurelauncher.core.config.loader import LauncherConfig, StartupMode
from featurelauncher.core.errors import (
    LauncherError,
    ParseError,
    PolicyError,
    UnknownExtensionError,
)
from featurelauncher.core.models import (
    ArtifactsExtension,
    Extension,
    Feature,
    InstallationPlan,
    JsonExtension,
    TextExtension,
)

logger = logging.getLogger(__name__)

REPOINIT_EXTENSION = "repoinit"
REPOINIT_FACTORY_PID = "org.apache.sling.jcr.repoinit.RepositoryInitializer"
REPOINIT_SCRIPTS_PROPERTY = "scripts"


@dataclass
class StepResult:
    """Outcome of one preparation step."""

    step: str
    error: LauncherError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, step: str) -> StepResult:
        return cls(step=step)

    @classmethod
    def failure(cls, step: str, error: LauncherError) -> StepResult:
        return cls(step=step, error=error)


def prepare_launcher(
    config: LauncherConfig,
    manager: ArtifactManager,
    feature: Feature,
    installation: InstallationPlan | None = None,
) -> InstallationPlan:
    """Build the installation plan for ``feature``.

    Args:
        config: Launcher configuration (startup mode, seeded properties).
        manager: Resolves artifacts to local files.
        feature: The loaded, normalized feature.
        installation: Plan to build on. Not modified; defaults to
            ``config.new_installation()``.

    Returns:
        A new, complete plan.

    Raises:
        LauncherError: The error of the first failing step.
    """
    base = installation if installation is not None else config.new_installation()
    plan = base.model_copy(deep=True)

    result = add_bundles(manager, feature, plan)
    if result.ok:
        result = dispatch_extensions(config, manager, feature, plan)
    if result.ok:
        result = merge_configurations(feature, plan)

    if not result.ok:
        logger.debug("Launch preparation failed in %s: %s", result.step, result.error)
        raise result.error

    logger.info(
        "Prepared %s: %d bundles, %d artifacts, %d configurations",
        feature.id, plan.bundle_count, len(plan.installable_artifacts), len(plan.configurations),
    )
    return plan


def add_bundles(manager: ArtifactManager, feature: Feature, plan: InstallationPlan) -> StepResult:
    """Resolve every bundle and add it under its start order."""
    try:
        for order, bundles in feature.bundles_by_start_order().items():
            for bundle in bundles:
                plan.add_bundle(order, manager.resolve_artifact(bundle.id).file)
    except LauncherError as e:
        return StepResult.failure("bundles", e)
    return StepResult.success("bundles")


def dispatch_extensions(
    config: LauncherConfig,
    manager: ArtifactManager,
    feature: Feature,
    plan: InstallationPlan,
) -> StepResult:
    """Handle each extension according to its type and name.

    - ARTIFACTS extensions add installable artifacts (not in PURE mode).
    - ``repoinit`` extensions become ``repoinit<N>`` factory configurations,
      N counting repoinit extensions from 1.
    - Anything else is skipped, unless it is required.
    """
    repoinit_index = 1
    try:
        for ext in feature.extensions:
            if isinstance(ext, ArtifactsExtension):
                _install_artifacts(config, manager, ext, plan)
            elif ext.name == REPOINIT_EXTENSION:
                plan.add_configuration(
                    f"{REPOINIT_EXTENSION}{repoinit_index}",
                    REPOINIT_FACTORY_PID,
                    {REPOINIT_SCRIPTS_PROPERTY: repoinit_script(ext)},
                )
                repoinit_index += 1
            elif ext.required:
                raise UnknownExtensionError(f"Unknown required extension {ext.name}")
            else:
                logger.debug("Skipping unknown extension %s", ext.name)
    except LauncherError as e:
        return StepResult.failure("extensions", e)
    return StepResult.success("extensions")


def repoinit_script(ext: Extension) -> str:
    """Script content of a repoinit extension.

    TEXT is used verbatim; JSON must be an array of strings, joined by
    newlines.

    Raises:
        ParseError: For any other payload.
    """
    if isinstance(ext, TextExtension):
        return ext.text
    if isinstance(ext, JsonExtension):
        content = ext.content
        if not isinstance(content, list) or not all(isinstance(s, str) for s in content):
            raise ParseError(f"{REPOINIT_EXTENSION} JSON extension must be an array of strings")
        return "\n".join(content)
    raise ParseError(f"{REPOINIT_EXTENSION} extension must be of type text or json")


def merge_configurations(feature: Feature, plan: InstallationPlan) -> StepResult:
    """Add declared configurations, then framework properties (first wins)."""
    for cfg in feature.configurations:
        if cfg.is_factory:
            plan.add_configuration(cfg.name, cfg.factory_pid, cfg.properties)
        else:
            plan.add_configuration(cfg.pid, None, cfg.properties)

    for key, value in feature.framework_properties.items():
        if not plan.set_framework_property(key, value):
            logger.debug("Framework property %s already set, keeping %r",
                         key, plan.framework_properties[key])
    return StepResult.success("merge")


def _install_artifacts(
    config: LauncherConfig,
    manager: ArtifactManager,
    ext: ArtifactsExtension,
    plan: InstallationPlan,
) -> None:
    if config.startup_mode is StartupMode.PURE:
        raise PolicyError(
            f"Extension {ext.name}: artifacts other than bundles are not supported "
            f"in {StartupMode.PURE} startup mode"
        )
    for artifact in ext.artifacts:
        plan.add_installable_artifact(manager.resolve_artifact(artifact.id).file)
