"""
deploywatch - watch a serverless service and redeploy what changed

Maps every filesystem change back to the smallest deploy that covers it:
- A function's handler changed: redeploy that function
- The service configuration changed: redeploy the whole service
- Anything else that is watched: redeploy every function, concurrently
"""

__version__ = "0.1.0"

# Export core components
from .core import (
    DeployWatchError,
    ConfigError,
    ConfigurationError,
    SingleDeployFailure,
    ServiceDeployFailure,
    FanOutPartialFailure,
    WatchError,
)

# Export domain models and services
from .domain.watch import (
    ServiceMetadata,
    DeploymentTarget,
    Catalog,
    SingleTarget,
    ServiceConfig,
    Unmatched,
    DispatchOptions,
    build_catalog,
    resolve,
    DeployDispatcher,
    WatchService,
)

__all__ = [
    # Version
    "__version__",
    # Errors
    "DeployWatchError",
    "ConfigError",
    "ConfigurationError",
    "SingleDeployFailure",
    "ServiceDeployFailure",
    "FanOutPartialFailure",
    "WatchError",
    # Models
    "ServiceMetadata",
    "DeploymentTarget",
    "Catalog",
    "SingleTarget",
    "ServiceConfig",
    "Unmatched",
    "DispatchOptions",
    # Operations
    "build_catalog",
    "resolve",
    "DeployDispatcher",
    "WatchService",
]
