"""
Unified exception definitions
"""
from typing import Optional, Sequence


class DeployWatchError(Exception):
    """Base exception class"""
    pass


class ConfigError(DeployWatchError):
    """Configuration error"""
    pass


class ConfigurationError(ConfigError):
    """Service configuration cannot produce a valid catalog"""
    pass


class WatchError(DeployWatchError):
    """Watch primitive error"""
    pass


class DeployError(DeployWatchError):
    """Deploy error"""
    pass


class SingleDeployFailure(DeployError):
    """Single function deploy failed"""

    def __init__(self, function: str, message: str, returncode: Optional[int] = None):
        super().__init__(f"Function '{function}' failed to deploy: {message}")
        self.function = function
        self.returncode = returncode


class ServiceDeployFailure(DeployError):
    """Full service deploy failed"""

    def __init__(self, message: str, returncode: Optional[int] = None):
        super().__init__(message)
        self.returncode = returncode


class FanOutPartialFailure(DeployError):
    """One or more functions of a fan-out deploy failed"""

    def __init__(self, failed: Sequence[str]):
        names = ", ".join(failed)
        super().__init__(f"{len(failed)} function(s) failed to deploy: {names}")
        self.failed = tuple(failed)
