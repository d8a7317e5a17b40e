import subprocess

import pytest

from deploywatch.core.exceptions import ServiceDeployFailure, SingleDeployFailure
from deploywatch.adapters.deploy import serverless
from deploywatch.adapters.deploy.serverless import (
    ServerlessFunctionDeployer,
    ServerlessServiceDeployer,
)
from deploywatch.domain.watch import DispatchOptions


class FakeRun:
    def __init__(self, returncode=0, stdout="", stderr="", raises=None):
        self.calls = []
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.raises = raises

    def __call__(self, cmd, **kwargs):
        self.calls.append((cmd, kwargs))
        if self.raises:
            raise self.raises
        if kwargs.get("check") and self.returncode:
            raise subprocess.CalledProcessError(self.returncode, cmd)
        return subprocess.CompletedProcess(cmd, self.returncode, self.stdout, self.stderr)


def test_function_deploy_command(monkeypatch, tmp_path):
    fake = FakeRun(stdout="Deploying function hello\n")
    monkeypatch.setattr(serverless.subprocess, "run", fake)
    deployer = ServerlessFunctionDeployer("sls", cwd=tmp_path)

    deployer.deploy_function(DispatchOptions.from_cli(stage="dev").for_function("hello"))

    cmd, kwargs = fake.calls[0]
    assert cmd == ["sls", "deploy", "function", "--function", "hello", "--force", "--stage", "dev"]
    assert kwargs["cwd"] == str(tmp_path)
    assert kwargs["capture_output"] is True


def test_function_deploy_nonzero_exit(monkeypatch):
    monkeypatch.setattr(serverless.subprocess, "run", FakeRun(returncode=2, stderr="AccessDenied"))

    with pytest.raises(SingleDeployFailure) as excinfo:
        ServerlessFunctionDeployer().deploy_function(DispatchOptions().for_function("hello"))

    assert excinfo.value.function == "hello"
    assert excinfo.value.returncode == 2
    assert "AccessDenied" in str(excinfo.value)


def test_function_deploy_missing_binary(monkeypatch):
    monkeypatch.setattr(serverless.subprocess, "run", FakeRun(raises=FileNotFoundError("sls")))

    with pytest.raises(SingleDeployFailure):
        ServerlessFunctionDeployer("sls").deploy_function(DispatchOptions().for_function("hello"))


def test_service_deploy_inherits_stdio(monkeypatch):
    fake = FakeRun()
    monkeypatch.setattr(serverless.subprocess, "run", fake)

    ServerlessServiceDeployer().deploy_service(["deploy", "--force", "--stage", "dev"])

    cmd, kwargs = fake.calls[0]
    assert cmd == ["serverless", "deploy", "--force", "--stage", "dev"]
    assert kwargs["check"] is True
    assert "capture_output" not in kwargs
    assert "stdout" not in kwargs


def test_service_deploy_failure(monkeypatch):
    monkeypatch.setattr(serverless.subprocess, "run", FakeRun(returncode=1))

    with pytest.raises(ServiceDeployFailure) as excinfo:
        ServerlessServiceDeployer().deploy_service(["deploy", "--force"])

    assert excinfo.value.returncode == 1


def test_service_deploy_missing_binary(monkeypatch):
    monkeypatch.setattr(serverless.subprocess, "run", FakeRun(raises=FileNotFoundError("sls")))

    with pytest.raises(ServiceDeployFailure, match="Failed to run"):
        ServerlessServiceDeployer("sls").deploy_service(["deploy", "--force"])
