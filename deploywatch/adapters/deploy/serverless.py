"""
Deploy primitives backed by the serverless CLI
"""
import subprocess
from pathlib import Path
from typing import List, Optional

from ...core.constants import DEFAULT_SERVERLESS_BIN
from ...core.exceptions import ServiceDeployFailure, SingleDeployFailure
from ...core.interfaces import FunctionDeployer, ServiceDeployer
from ...core.logging import get_logger
from ...domain.watch import DispatchOptions

logger = get_logger(__name__)


class ServerlessFunctionDeployer(FunctionDeployer):
    """Runs `serverless deploy function` with its output captured"""

    def __init__(self, serverless_bin: str = DEFAULT_SERVERLESS_BIN, cwd: Optional[Path] = None):
        self.serverless_bin = serverless_bin
        self.cwd = cwd

    def deploy_function(self, options: DispatchOptions) -> None:
        """
        Deploy one function.

        Output is captured rather than inherited because several of these
        run at once during a deploy-all.

        Raises:
            SingleDeployFailure: If the command cannot be started or exits non-zero
        """
        cmd = [self.serverless_bin, *options.function_argv()]
        logger.debug(f"[{options.function}] {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                cwd=str(self.cwd) if self.cwd else None,
                capture_output=True,
                text=True,
            )
        except OSError as e:
            raise SingleDeployFailure(options.function, str(e)) from e

        for line in (result.stdout or "").splitlines():
            logger.debug(f"[{options.function}] {line}")

        if result.returncode != 0:
            detail = (result.stderr or result.stdout or "").strip()
            raise SingleDeployFailure(
                options.function,
                f"exit code {result.returncode}" + (f"\n{detail}" if detail else ""),
                returncode=result.returncode,
            )


class ServerlessServiceDeployer(ServiceDeployer):
    """Runs `serverless deploy` in the foreground, inheriting stdio"""

    def __init__(self, serverless_bin: str = DEFAULT_SERVERLESS_BIN, cwd: Optional[Path] = None):
        self.serverless_bin = serverless_bin
        self.cwd = cwd

    def deploy_service(self, argv: List[str]) -> None:
        """
        Deploy the whole service.

        Raises:
            ServiceDeployFailure: If the command cannot be started or exits non-zero
        """
        cmd = [self.serverless_bin, *argv]
        logger.debug(" ".join(cmd))

        try:
            subprocess.run(cmd, cwd=str(self.cwd) if self.cwd else None, check=True)
        except subprocess.CalledProcessError as e:
            raise ServiceDeployFailure(
                f"`{' '.join(cmd)}` exited with code {e.returncode}",
                returncode=e.returncode,
            ) from e
        except OSError as e:
            raise ServiceDeployFailure(f"Failed to run {self.serverless_bin}: {e}") from e
