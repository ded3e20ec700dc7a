"""
Installation plan — the concrete output consumed by a launcher.

Built once per launch. Holds resolved module files by start order,
installable (non-module) artifact files, configuration records and the
merged framework properties.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class ConfigurationRecord(BaseModel):
    """A configuration as installed: name, optional factory pid, properties."""

    name: str
    factory_pid: str | None = None
    properties: dict[str, Any] = Field(default_factory=dict)


class InstallationPlan(BaseModel):
    """Resolved, concrete launch plan."""

    bundle_map: dict[int, list[Path]] = Field(default_factory=dict)
    installable_artifacts: list[Path] = Field(default_factory=list)
    configurations: list[ConfigurationRecord] = Field(default_factory=list)
    framework_properties: dict[str, str] = Field(default_factory=dict)

    def add_bundle(self, start_order: int, file: Path) -> None:
        """Append a module file under its start order."""
        self.bundle_map.setdefault(start_order, []).append(file)

    def add_installable_artifact(self, file: Path) -> None:
        self.installable_artifacts.append(file)

    def add_configuration(
        self,
        name: str,
        factory_pid: str | None,
        properties: dict[str, Any],
    ) -> None:
        self.configurations.append(
            ConfigurationRecord(name=name, factory_pid=factory_pid, properties=dict(properties))
        )

    def set_framework_property(self, key: str, value: str) -> bool:
        """Set a framework property unless already present.

        Returns:
            True if the value was stored, False if an earlier value won.
        """
        if key in self.framework_properties:
            return False
        self.framework_properties[key] = value
        return True

    def bundles_by_start_order(self) -> list[tuple[int, list[Path]]]:
        """Module files as (start order, files) pairs, ascending."""
        return sorted(self.bundle_map.items())

    def get_configuration(self, name: str) -> ConfigurationRecord | None:
        for cfg in self.configurations:
            if cfg.name == name:
                return cfg
        return None

    @property
    def bundle_count(self) -> int:
        return sum(len(files) for files in self.bundle_map.values())

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "bundles": {
                str(order): [str(f) for f in files]
                for order, files in self.bundles_by_start_order()
            },
            "installable_artifacts": [str(f) for f in self.installable_artifacts],
            "configurations": [
                {
                    "name": c.name,
                    "factory_pid": c.factory_pid,
                    "properties": c.properties,
                }
                for c in self.configurations
            ],
            "framework_properties": dict(self.framework_properties),
        }
