"""
Domain models — Pydantic types for the launcher.

All models are re-exported here for convenient access:

    from featurelauncher.core.models import Feature, Artifact, InstallationPlan
"""

from featurelauncher.core.models.artifact import Artifact, ArtifactId
from featurelauncher.core.models.configuration import Configuration
from featurelauncher.core.models.extension import (
    ArtifactsExtension,
    Extension,
    ExtensionType,
    JsonExtension,
    TextExtension,
)
from featurelauncher.core.models.feature import Feature
from featurelauncher.core.models.plan import ConfigurationRecord, InstallationPlan

__all__ = [
    # artifact.py
    "Artifact",
    "ArtifactId",
    # extension.py
    "ArtifactsExtension",
    # configuration.py
    "Configuration",
    "ConfigurationRecord",
    "Extension",
    "ExtensionType",
    # feature.py
    "Feature",
    # plan.py
    "InstallationPlan",
    "JsonExtension",
    "TextExtension",
]
