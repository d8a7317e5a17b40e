"""
Target catalog construction
"""
import os
from typing import Dict, List, Optional

from ...core.exceptions import ConfigurationError
from ...core.logging import get_logger
from .models import Catalog, DeploymentTarget, ServiceMetadata

logger = get_logger(__name__)


def handler_module_path(handler: str) -> str:
    """
    Strip the entry symbol from a handler reference.

    Only the last path segment is inspected, so dots in directory names
    survive: "src/index.handler" -> "src/index", "lib.v2/app.main" -> "lib.v2/app".
    """
    handler = handler.strip()
    if handler.startswith("./"):
        handler = handler[2:]
    head, sep, last = handler.rpartition("/")
    module = last.rsplit(".", 1)[0] if "." in last else last
    return f"{head}{sep}{module}"


def join_service_path(service_dir: str, relative: str) -> str:
    if not service_dir:
        return relative
    return f"{service_dir.rstrip('/')}/{relative}"


def resolve_config_path(metadata: ServiceMetadata, config_override: Optional[str] = None) -> str:
    """
    Configuration path in the same normalized form the watch primitive reports.

    A relative override is taken relative to the service directory, like the
    serverless CLI does.
    """
    if config_override:
        path = os.path.expanduser(config_override)
        if not os.path.isabs(path):
            path = join_service_path(metadata.service_dir, path)
    else:
        path = join_service_path(metadata.service_dir, metadata.config_filename)
    return os.path.normpath(path)


def build_target(name: str, handler: str, service_dir: str) -> DeploymentTarget:
    if not isinstance(handler, str) or not handler.strip():
        raise ConfigurationError(f"Function {name} has no handler")
    module = handler_module_path(handler)
    if not module or module.endswith("/"):
        raise ConfigurationError(f"Function {name} has an invalid handler: {handler}")
    return DeploymentTarget(
        name=name,
        handler_path=module,
        source_path=join_service_path(service_dir, module),
    )


def build_catalog(
    metadata: ServiceMetadata,
    scope_filter: Optional[str] = None,
    config_override: Optional[str] = None,
) -> Catalog:
    """
    Build the catalog of deployment targets and watched paths.

    Args:
        metadata: Service metadata snapshot
        scope_filter: Restrict the catalog to this single function
        config_override: Configuration path replacing <service_dir>/<config_filename>

    Returns:
        Catalog

    Raises:
        ConfigurationError: Unknown scope filter, missing handler or two
            functions sharing the same source path
    """
    functions = metadata.functions

    if scope_filter:
        if scope_filter not in functions:
            raise ConfigurationError(f"Function {scope_filter} not found")
        names: List[str] = [scope_filter]
    else:
        names = list(functions)

    targets: List[DeploymentTarget] = []
    seen: Dict[str, str] = {}
    for name in names:
        target = build_target(name, functions[name], metadata.service_dir)
        if target.source_path in seen:
            raise ConfigurationError(
                f"Functions {seen[target.source_path]} and {name} share the "
                f"source path {target.source_path}"
            )
        seen[target.source_path] = name
        targets.append(target)

    config_path = resolve_config_path(metadata, config_override)

    catalog = Catalog(
        targets=tuple(targets),
        config_path=config_path,
        watch_extras=tuple(metadata.watch_extras),
    )
    logger.debug(
        "Catalog built: %d target(s), config=%s, extras=%s",
        len(catalog.targets),
        catalog.config_path,
        list(catalog.watch_extras),
    )
    return catalog
