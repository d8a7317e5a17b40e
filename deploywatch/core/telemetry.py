"""
Telemetry and metrics collection
"""
import threading
from collections import deque
from typing import Dict, Any, Optional
from dataclasses import dataclass, field
import time

DEFAULT_MAX_RECORDS = 1000


@dataclass
class Metric:
    """Single metric value"""
    name: str
    value: float
    timestamp: float = field(default_factory=time.time)
    tags: Dict[str, str] = field(default_factory=dict)


@dataclass
class Event:
    """Event record"""
    name: str
    timestamp: float = field(default_factory=time.time)
    metadata: Dict[str, Any] = field(default_factory=dict)


class Telemetry:
    """
    Telemetry collector, safe to use from fan-out worker threads.

    Only the most recent max_records metrics and events are kept, so a long
    watch session does not grow memory.
    """

    def __init__(self, max_records: int = DEFAULT_MAX_RECORDS):
        self._lock = threading.Lock()
        self._metrics: deque[Metric] = deque(maxlen=max_records)
        self._events: deque[Event] = deque(maxlen=max_records)

    def record_metric(self, name: str, value: float, tags: Optional[Dict[str, str]] = None) -> None:
        """Record a metric"""
        with self._lock:
            self._metrics.append(Metric(name=name, value=value, tags=tags or {}))

    def record_event(self, name: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        """Record an event"""
        with self._lock:
            self._events.append(Event(name=name, metadata=metadata or {}))

    def get_metrics(self) -> list[Metric]:
        """Get recorded metrics, oldest first"""
        with self._lock:
            return list(self._metrics)

    def get_events(self) -> list[Event]:
        """Get recorded events, oldest first"""
        with self._lock:
            return list(self._events)

    def clear(self) -> None:
        """Clear all metrics and events"""
        with self._lock:
            self._metrics.clear()
            self._events.clear()


# Global telemetry instance
_telemetry = Telemetry()


def get_telemetry() -> Telemetry:
    """Get global telemetry instance"""
    return _telemetry
