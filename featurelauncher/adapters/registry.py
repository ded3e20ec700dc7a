"""
Artifact manager — central resolution point for all artifact lookups.

The launch pipeline never talks to repositories directly, always
through the manager. It turns locations (paths, URLs, coordinates) into
local files by asking each provider in order, and memoizes what it has
resolved for the lifetime of the manager.
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from urllib.parse import unquote, urlparse

from featurelauncher.adapters.base import ArtifactHandle, ArtifactProvider
from featurelauncher.adapters.repository.local import LocalRepositoryProvider
from featurelauncher.adapters.repository.remote import RemoteRepositoryProvider, download
from featurelauncher.core.config.loader import LauncherConfig
from featurelauncher.core.errors import ResolutionError
from featurelauncher.core.models import ArtifactId

logger = logging.getLogger(__name__)

# Prefix marking a location as a path relative to the repositories
REPOSITORY_PATH_PREFIX = ":"


class ArtifactManager:
    """Resolves artifact locations to local files.

    Location forms understood by ``resolve``:
        - ``:<relative path>``        path inside the repositories
        - ``file:`` URLs and paths    used as-is, must exist
        - ``http(s)://`` URLs         downloaded into the cache directory
        - ``g:a[:type[:classifier]]:v`` coordinates, looked up in the repositories
    """

    def __init__(self, providers: list[ArtifactProvider], cache_directory: Path | None = None):
        self._providers = list(providers)
        self._cache_directory = cache_directory
        self._resolved: dict[str, ArtifactHandle] = {}

    @classmethod
    def from_config(cls, config: LauncherConfig) -> ArtifactManager:
        """Build a manager from the configured repository URLs."""
        cache_dir = config.effective_cache_directory
        providers: list[ArtifactProvider] = []
        for url in config.repository_urls:
            scheme = urlparse(url).scheme
            if scheme in ("http", "https"):
                providers.append(RemoteRepositoryProvider(url, cache_dir))
            elif scheme == "file":
                providers.append(LocalRepositoryProvider(Path(unquote(urlparse(url).path))))
            else:
                providers.append(LocalRepositoryProvider(Path(url).expanduser()))
        logger.debug("Artifact manager with %d providers, cache %s", len(providers), cache_dir)
        return cls(providers, cache_dir)

    @property
    def providers(self) -> list[ArtifactProvider]:
        return list(self._providers)

    def resolve(self, location: str) -> ArtifactHandle:
        """Resolve any supported location form to a local file.

        Raises:
            ResolutionError: If the location cannot be resolved.
        """
        if location.startswith(REPOSITORY_PATH_PREFIX):
            return self._resolve_repository_path(location[len(REPOSITORY_PATH_PREFIX):])

        parsed = urlparse(location)
        if parsed.scheme == "file":
            return self._existing_file(Path(unquote(parsed.path)), location)
        if parsed.scheme in ("http", "https"):
            return self._resolve_url(location)

        candidate = Path(location)
        if candidate.is_absolute() or candidate.exists():
            return self._existing_file(candidate, location)

        if ArtifactId.is_coordinate(location):
            return self.resolve_artifact(ArtifactId.parse(location))

        raise ResolutionError(f"Unable to resolve {location}: not a file, URL or coordinate")

    def resolve_artifact(self, artifact_id: ArtifactId) -> ArtifactHandle:
        """Resolve a coordinate through the repositories.

        Raises:
            ResolutionError: If no repository has the artifact.
        """
        try:
            return self._resolve_repository_path(artifact_id.to_mvn_path())
        except ResolutionError as e:
            raise ResolutionError(f"Unable to resolve artifact {artifact_id}: {e}") from e

    def _resolve_repository_path(self, relative_path: str) -> ArtifactHandle:
        relative_path = relative_path.lstrip("/")
        cached = self._resolved.get(relative_path)
        if cached is not None:
            return cached

        for provider in self._providers:
            file = provider.get_artifact(relative_path)
            if file is not None:
                handle = ArtifactHandle(url=provider.url_for(relative_path), file=file)
                self._resolved[relative_path] = handle
                logger.debug("Resolved %s via %s -> %s", relative_path, provider.name, file)
                return handle

        searched = ", ".join(p.url for p in self._providers) or "no repositories"
        raise ResolutionError(f"{relative_path} not found (searched {searched})")

    def _resolve_url(self, url: str) -> ArtifactHandle:
        if self._cache_directory is None:
            raise ResolutionError(f"Unable to download {url}: no cache directory configured")

        name = Path(urlparse(url).path).name or "artifact"
        digest = hashlib.sha256(url.encode("utf-8")).hexdigest()[:16]
        target = self._cache_directory / "downloads" / digest / name
        if not target.is_file() and not download(url, target):
            raise ResolutionError(f"Unable to resolve {url}: not found")
        return ArtifactHandle(url=url, file=target)

    @staticmethod
    def _existing_file(path: Path, location: str) -> ArtifactHandle:
        if not path.is_file():
            raise ResolutionError(f"Unable to resolve {location}: file not found")
        return ArtifactHandle(url=path.resolve().as_uri(), file=path)
