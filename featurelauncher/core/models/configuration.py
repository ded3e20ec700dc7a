"""
Configuration model — a persisted property record.

A configuration is either a singleton identified by its pid, or a
factory instance whose pid is ``<factoryPid>~<name>``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

FACTORY_SEPARATOR = "~"


class Configuration(BaseModel):
    """A configuration record declared by a feature."""

    pid: str
    properties: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_factory(self) -> bool:
        return FACTORY_SEPARATOR in self.pid

    @property
    def factory_pid(self) -> str | None:
        """The factory pid, or None for a singleton."""
        if not self.is_factory:
            return None
        return self.pid.split(FACTORY_SEPARATOR, 1)[0]

    @property
    def name(self) -> str:
        """Instance name for factory configurations, the pid otherwise."""
        if not self.is_factory:
            return self.pid
        return self.pid.split(FACTORY_SEPARATOR, 1)[1]
