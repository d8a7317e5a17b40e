"""
Core interfaces for dependency injection
"""
from abc import ABC, abstractmethod
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from ..domain.watch.models import DispatchOptions


class FunctionDeployer(ABC):
    """Deploy a single function of the service"""

    @abstractmethod
    def deploy_function(self, options: "DispatchOptions") -> None:
        """Deploy options.function, raising SingleDeployFailure on failure"""
        pass


class ServiceDeployer(ABC):
    """Deploy the whole service as a foreground external process"""

    @abstractmethod
    def deploy_service(self, argv: List[str]) -> None:
        """Run the deploy command, raising ServiceDeployFailure on failure"""
        pass


class WatchFeedback(ABC):
    """Terminal feedback surface"""

    @abstractmethod
    def clear(self) -> None:
        """Clear the terminal"""
        pass

    @abstractmethod
    def watching(self, message: str) -> None:
        """Show the idle indicator"""
        pass

    @abstractmethod
    def announce(self, message: str) -> None:
        """Replace the idle indicator with a completed action line"""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop any running indicator"""
        pass
