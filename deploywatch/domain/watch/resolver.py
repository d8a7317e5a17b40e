"""
Changed path -> resolution result
"""
import os

from ...core.logging import get_logger
from .models import Catalog, ResolutionResult, ServiceConfig, SingleTarget, Unmatched

logger = get_logger(__name__)


def matches_config(path: str, config_path: str) -> bool:
    """
    Containment check against the configuration path.

    A relative event path cannot contain an absolute configuration path, so in
    that case the file names are compared instead.
    """
    if config_path in path:
        return True
    if os.path.isabs(config_path) and not os.path.isabs(path):
        return os.path.basename(path) == os.path.basename(config_path)
    return False


def resolve(path: str, catalog: Catalog) -> ResolutionResult:
    """
    Classify a changed path.

    Targets are checked first, in catalog order; the first whose source path
    is contained in the changed path wins. Tooling may report the path with
    an extra suffix (src/index.js, src/index.js.map), hence containment.
    Relative paths, as reported by build tooling, are matched against the
    handler path relative to the service directory instead.
    """
    absolute = os.path.isabs(path)
    for target in catalog.targets:
        key = target.source_path if absolute else target.handler_path
        if key in path:
            logger.debug("%s -> function %s", path, target.name)
            return SingleTarget(target.name)

    if matches_config(path, catalog.config_path):
        logger.debug("%s -> service configuration", path)
        return ServiceConfig()

    logger.debug("%s -> unmatched", path)
    return Unmatched()
