"""
Watch domain module
"""
from .models import (
    ServiceMetadata,
    DeploymentTarget,
    Catalog,
    SingleTarget,
    ServiceConfig,
    Unmatched,
    ResolutionResult,
    ControllerState,
    DispatchOptions,
)
from .catalog import build_catalog, handler_module_path
from .resolver import resolve
from .dispatcher import DeployDispatcher, FanOutReport
from .service import WatchService

__all__ = [
    "ServiceMetadata",
    "DeploymentTarget",
    "Catalog",
    "SingleTarget",
    "ServiceConfig",
    "Unmatched",
    "ResolutionResult",
    "ControllerState",
    "DispatchOptions",
    "build_catalog",
    "handler_module_path",
    "resolve",
    "DeployDispatcher",
    "FanOutReport",
    "WatchService",
]
