"""
Remote repository — a Maven-layout HTTP(S) repository.

Artifacts are downloaded once into a local cache directory and served
from there afterwards. Downloads go to a temp file first and are renamed
into place, so an interrupted download never leaves a partial artifact.
A 404 means "not here"; every other failure is a ResolutionError.
No retries.
"""

from __future__ import annotations

import http.client
import logging
import shutil
import tempfile
import urllib.error
import urllib.request
from pathlib import Path

from featurelauncher import __version__
from featurelauncher.adapters.base import ArtifactProvider
from featurelauncher.core.errors import ResolutionError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0


class RemoteRepositoryProvider(ArtifactProvider):
    """Downloads artifacts from an HTTP repository into a cache directory."""

    def __init__(self, base_url: str, cache_directory: Path, timeout: float = DEFAULT_TIMEOUT):
        self._base_url = base_url.rstrip("/")
        self._cache_directory = Path(cache_directory)
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "remote"

    @property
    def url(self) -> str:
        return self._base_url

    def get_artifact(self, relative_path: str) -> Path | None:
        target = self._cache_directory / relative_path
        if target.is_file():
            logger.debug("Cache hit for %s", relative_path)
            return target

        url = self.url_for(relative_path)
        if not download(url, target, timeout=self._timeout):
            return None
        return target


def download(url: str, target: Path, timeout: float = DEFAULT_TIMEOUT) -> bool:
    """Download ``url`` to ``target``.

    A body shorter than the announced Content-Length is a failed download.

    Returns:
        True if downloaded, False if the server answered 404.

    Raises:
        ResolutionError: On any other HTTP, network or disk failure.
    """
    logger.info("Downloading %s", url)
    req = urllib.request.Request(url, headers={"User-Agent": f"featurelauncher/{__version__}"})

    tmp_path: Path | None = None
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            expected = resp.headers.get("Content-Length")
            with tempfile.NamedTemporaryFile(dir=target.parent, prefix=".dl_", delete=False) as tmp:
                tmp_path = Path(tmp.name)
                shutil.copyfileobj(resp, tmp)
                received = tmp.tell()
        if expected is not None and expected.strip().isdigit() and received != int(expected):
            raise ResolutionError(
                f"Download of {url} failed: received {received} of {expected.strip()} bytes"
            )
        tmp_path.replace(target)
        tmp_path = None
    except urllib.error.HTTPError as e:
        if e.code == 404:
            logger.debug("Not found: %s", url)
            return False
        raise ResolutionError(f"Download of {url} failed: HTTP {e.code}") from e
    except (urllib.error.URLError, http.client.HTTPException, OSError) as e:
        raise ResolutionError(f"Download of {url} failed: {e}") from e
    finally:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)

    return True
