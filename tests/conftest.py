from __future__ import annotations

import threading
from typing import List, Optional

import pytest

from deploywatch.core.exceptions import ServiceDeployFailure, SingleDeployFailure
from deploywatch.core.interfaces import FunctionDeployer, ServiceDeployer, WatchFeedback
from deploywatch.core.telemetry import Telemetry
from deploywatch.domain.watch import ServiceMetadata


class FakeFunctionDeployer(FunctionDeployer):
    def __init__(self, fail: Optional[set] = None, barrier: Optional[threading.Barrier] = None):
        self.calls = []
        self.fail = fail or set()
        self.barrier = barrier
        self._lock = threading.Lock()

    def deploy_function(self, options) -> None:
        with self._lock:
            self.calls.append(options)
        if self.barrier is not None:
            self.barrier.wait()
        if options.function in self.fail:
            raise SingleDeployFailure(options.function, "boom", returncode=1)

    @property
    def names(self) -> List[str]:
        return [call.function for call in self.calls]


class FakeServiceDeployer(ServiceDeployer):
    def __init__(self, fail: bool = False):
        self.calls = []
        self.fail = fail

    def deploy_service(self, argv) -> None:
        self.calls.append(list(argv))
        if self.fail:
            raise ServiceDeployFailure("deploy exited with code 1", returncode=1)


class RecordingFeedback(WatchFeedback):
    def __init__(self):
        self.log = []

    def clear(self) -> None:
        self.log.append(("clear",))

    def watching(self, message: str) -> None:
        self.log.append(("watching", message))

    def announce(self, message: str) -> None:
        self.log.append(("announce", message))

    def stop(self) -> None:
        self.log.append(("stop",))


@pytest.fixture
def metadata() -> ServiceMetadata:
    return ServiceMetadata(
        service_dir="/svc",
        functions={
            "hello": "src/index.handler",
            "users": "src/users/api.main",
            "jobs": "./jobs/worker.run",
        },
        config_filename="serverless.yml",
        watch_extras=("lib", "shared/config.json"),
    )


@pytest.fixture
def telemetry() -> Telemetry:
    return Telemetry()
