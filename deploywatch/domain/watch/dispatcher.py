"""
Deploy dispatcher - turns a resolution result into deploy invocations
"""
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import List, Optional

from ...core.exceptions import FanOutPartialFailure, ServiceDeployFailure
from ...core.interfaces import FunctionDeployer, ServiceDeployer
from ...core.logging import get_logger
from ...core.telemetry import Telemetry, get_telemetry
from .models import (
    Catalog,
    DispatchOptions,
    ResolutionResult,
    ServiceConfig,
    SingleTarget,
    Unmatched,
)

logger = get_logger(__name__)


@dataclass
class FanOutReport:
    """Outcome of a deploy-all fan-out"""
    succeeded: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    def as_error(self) -> Optional[FanOutPartialFailure]:
        return FanOutPartialFailure(self.failed) if self.failed else None


class DeployDispatcher:
    """
    Executes exactly one deploy strategy per resolution result.

    Single function deploys swallow and log their failures. The service
    deploy lets ServiceDeployFailure propagate.
    """

    def __init__(
        self,
        catalog: Catalog,
        function_deployer: FunctionDeployer,
        service_deployer: ServiceDeployer,
        max_parallel: Optional[int] = None,
        telemetry: Optional[Telemetry] = None,
    ):
        """
        Initialize dispatcher.

        Args:
            catalog: Targets used by the deploy-all fan-out
            function_deployer: Primitive deploying one function
            service_deployer: Primitive deploying the whole service
            max_parallel: Cap on concurrent fan-out deploys (default: one per target)
            telemetry: Telemetry collector (default: global instance)
        """
        self.catalog = catalog
        self.function_deployer = function_deployer
        self.service_deployer = service_deployer
        self.max_parallel = max_parallel
        self.telemetry = telemetry or get_telemetry()

    def dispatch(self, result: ResolutionResult, options: DispatchOptions) -> None:
        if isinstance(result, SingleTarget):
            self.deploy_function(result.name, options)
        elif isinstance(result, ServiceConfig):
            self.deploy_service(options)
        elif isinstance(result, Unmatched):
            self.deploy_all(options)
        else:
            raise TypeError(f"Unknown resolution result: {result!r}")

    def deploy_function(self, name: str, options: DispatchOptions) -> bool:
        """Deploy one function; returns False if it failed"""
        started = time.monotonic()
        try:
            self.function_deployer.deploy_function(options.for_function(name))
        except Exception as e:
            logger.error(f"[{name}] deploy failed: {e}")
            self.telemetry.record_event("deploy.function", {"function": name, "ok": False})
            return False
        finally:
            self.telemetry.record_metric(
                "deploy.function.seconds", time.monotonic() - started, {"function": name}
            )
        logger.info(f"[{name}] deployed")
        self.telemetry.record_event("deploy.function", {"function": name, "ok": True})
        return True

    def deploy_service(self, options: DispatchOptions) -> None:
        argv = options.service_argv()
        started = time.monotonic()
        try:
            self.service_deployer.deploy_service(argv)
        except ServiceDeployFailure:
            self.telemetry.record_event("deploy.service", {"argv": argv, "ok": False})
            raise
        finally:
            self.telemetry.record_metric("deploy.service.seconds", time.monotonic() - started)
        self.telemetry.record_event("deploy.service", {"argv": argv, "ok": True})

    def deploy_all(self, options: DispatchOptions) -> FanOutReport:
        """Deploy every target concurrently and wait for all of them"""
        report = FanOutReport()
        names = self.catalog.names
        if not names:
            return report

        max_workers = len(names)
        if self.max_parallel:
            max_workers = min(max_workers, self.max_parallel)

        started = time.monotonic()
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="deploy") as executor:
            futures = {
                executor.submit(self.deploy_function, name, options): name
                for name in names
            }

            for future in as_completed(futures):
                name = futures[future]
                if future.result():
                    report.succeeded.append(name)
                else:
                    report.failed.append(name)

        self.telemetry.record_metric("deploy.all.seconds", time.monotonic() - started)
        self.telemetry.record_event(
            "deploy.all",
            {"succeeded": list(report.succeeded), "failed": list(report.failed)},
        )

        error = report.as_error()
        if error:
            logger.warning(str(error))
        else:
            logger.info(f"All {len(names)} function(s) deployed")
        return report
