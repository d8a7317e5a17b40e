"""
Watch domain service - change loop
"""
import queue
import threading
from typing import Callable, Optional

from ...core.constants import MSG_DEPLOY_ALL, MSG_DEPLOY_FUNCTION, MSG_DEPLOY_SERVICE, MSG_WATCHING
from ...core.exceptions import ServiceDeployFailure
from ...core.interfaces import WatchFeedback
from ...core.logging import get_logger
from .dispatcher import DeployDispatcher
from .models import (
    Catalog,
    ControllerState,
    DispatchOptions,
    ResolutionResult,
    ServiceConfig,
    SingleTarget,
    Unmatched,
)
from .resolver import resolve

logger = get_logger(__name__)

_STOP = object()


def describe(result: ResolutionResult) -> str:
    """Status line announced before dispatching"""
    if isinstance(result, SingleTarget):
        return MSG_DEPLOY_FUNCTION.format(name=result.name)
    if isinstance(result, ServiceConfig):
        return MSG_DEPLOY_SERVICE
    if isinstance(result, Unmatched):
        return MSG_DEPLOY_ALL
    raise TypeError(f"Unknown resolution result: {result!r}")


class WatchService:
    """
    Change loop - sequencing and feedback around resolve() and the dispatcher.

    Change events are consumed from a queue by a single thread, so a dispatch
    always finishes before the next event is looked at. Repeated events for
    the same file are not coalesced.

    The terminal is cleared once, in start(). After a dispatch only the idle
    indicator comes back; the screen is not cleared again, so the deploy
    output of the last change stays readable.
    """

    def __init__(
        self,
        catalog: Catalog,
        dispatcher: DeployDispatcher,
        options: DispatchOptions,
        feedback: WatchFeedback,
        events: Optional["queue.Queue[object]"] = None,
        on_service_failure: Optional[Callable[[ServiceDeployFailure], None]] = None,
    ):
        """
        Initialize watch service.

        Args:
            catalog: Target catalog of this session
            dispatcher: Deploy dispatcher
            options: User options forwarded to every dispatch
            feedback: Terminal feedback surface
            events: Queue the watch primitive puts changed paths on
            on_service_failure: Callback when a service deploy fails at the loop boundary
        """
        self.catalog = catalog
        self.dispatcher = dispatcher
        self.options = options
        self.feedback = feedback
        self.events: "queue.Queue[object]" = events if events is not None else queue.Queue()
        self.on_service_failure = on_service_failure
        self.state = ControllerState.IDLE
        self._lock = threading.Lock()

    def start(self) -> None:
        """Clear the terminal and show the idle indicator"""
        self.feedback.clear()
        self._idle()

    def stop(self) -> None:
        """Ask run() to return once the current dispatch is done"""
        self.events.put(_STOP)

    def submit(self, path: str) -> None:
        """Queue a changed path"""
        self.events.put(path)

    def handle_change(self, path: str) -> ResolutionResult:
        """
        Resolve and dispatch one change event.

        Raises:
            ServiceDeployFailure: If the full service deploy failed
        """
        with self._lock:
            self.state = ControllerState.DISPATCHING
            try:
                result = resolve(path, self.catalog)
                logger.info(f"Change detected: {path}")
                self.feedback.announce(describe(result))
                self.dispatcher.dispatch(result, self.options)
                return result
            finally:
                self._idle()

    def run(self) -> None:
        """Process change events until stop() is called"""
        self.start()
        while True:
            item = self.events.get()
            try:
                if item is _STOP:
                    break
                try:
                    self.handle_change(str(item))
                except ServiceDeployFailure as e:
                    logger.error(f"[service] deploy failed: {e}")
                    if self.on_service_failure:
                        self.on_service_failure(e)
            finally:
                self.events.task_done()
        self.feedback.stop()

    def _idle(self) -> None:
        # Deploy output and errors stay on screen; only start() clears.
        self.state = ControllerState.IDLE
        self.feedback.watching(MSG_WATCHING)
