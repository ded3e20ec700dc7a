"""
Feature loader — read the application feature and get it ready to launch.

``create_application`` is the entry point: it loads the feature from an
explicit location (caching a copy under the launcher home) or from that
cache, resolves variables, and normalizes module start orders.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from pathlib import Path

from featurelauncher.adapters.registry import ArtifactManager
from featurelauncher.core.config.loader import LauncherConfig
from featurelauncher.core.errors import ParseError, PersistenceError, ResolutionError
from featurelauncher.core.models import Artifact, Feature
from featurelauncher.core.persistence.feature_json import read_feature_file, save_feature
from featurelauncher.core.services.variables import resolve_variables

logger = logging.getLogger(__name__)

START_LEVEL_METADATA = "start-level"
DEFAULT_START_ORDER = 1


def create_application(config: LauncherConfig, manager: ArtifactManager) -> Feature:
    """Load the application feature for this launch.

    With ``config.application_file`` set, the feature is read from there
    and the resolved result is written to the cache path. Otherwise the
    cache path written by an earlier launch is read.

    Failing to write the cache is fatal: it is logged and the process
    exits with status 1.
    """
    cache_path = config.application_cache_path

    if config.application_file:
        app = read_feature(config.application_file, manager, config.variables)
        try:
            save_feature(app, cache_path)
        except PersistenceError as e:
            logger.error("Error while writing application file: %s", e, exc_info=True)
            sys.exit(1)
        logger.info("Cached application %s at %s", app.id, cache_path)
    else:
        logger.info("No application given, using cached %s", cache_path)
        app = read_feature(str(cache_path), manager, config.variables)

    normalize_start_orders(app.bundles)
    return app


def read_feature(location: str, manager: ArtifactManager,
                 overrides: dict[str, str] | None = None) -> Feature:
    """Resolve, parse and variable-substitute a feature.

    A location whose first ``:`` sits before index 2 (no colon at all, or
    a drive letter) is a filesystem path and is made absolute. Anything
    else goes to the artifact manager as given.

    Raises:
        ResolutionError: If the location cannot be resolved or read.
        ParseError: If the content is not a valid feature.
    """
    if location.find(":") < 2:
        location = str(Path(location).absolute())

    handle = manager.resolve(location)
    logger.debug("Reading feature from %s (%s)", handle.file, handle.url)

    try:
        feature = read_feature_file(handle.file, handle.url)
    except UnicodeDecodeError as e:
        raise ParseError(f"Feature {handle.url} is not UTF-8 text: {e}") from e
    except OSError as e:
        raise ResolutionError(f"Cannot read feature {handle.url}: {e}") from e

    return resolve_variables(feature, overrides)


def normalize_start_orders(bundles: Iterable[Artifact]) -> None:
    """Give every bundle without a start order one, in place.

    The order comes from the ``start-level`` metadata when present and
    defaults to 1 otherwise. Bundles with a start order keep it.

    Raises:
        ParseError: If ``start-level`` is not a positive integer.
    """
    for bundle in bundles:
        if bundle.has_start_order:
            continue
        level = bundle.metadata.get(START_LEVEL_METADATA)
        if level is None:
            bundle.start_order = DEFAULT_START_ORDER
            continue
        try:
            order = int(level)
        except ValueError as e:
            raise ParseError(f"Invalid {START_LEVEL_METADATA} {level!r} for bundle {bundle.id}") from e
        if order < 1:
            raise ParseError(f"{START_LEVEL_METADATA} must be >= 1 for bundle {bundle.id}, got {order}")
        bundle.start_order = order
