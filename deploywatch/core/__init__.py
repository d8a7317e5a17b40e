"""
Core infrastructure layer
"""
from .constants import *
from .exceptions import *
from .logging import setup_logging, get_logger, get_stdout_console, get_stderr_console
from .interfaces import FunctionDeployer, ServiceDeployer, WatchFeedback
from .telemetry import Telemetry, get_telemetry

__all__ = [
    "setup_logging",
    "get_logger",
    "get_stdout_console",
    "get_stderr_console",
    "FunctionDeployer",
    "ServiceDeployer",
    "WatchFeedback",
    "Telemetry",
    "get_telemetry",
]
