"""Base types and shared helpers for resource runners."""

from __future__ import annotations

import json
import shutil
import subprocess
import sys
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from npm_resource_e2e import schemas
from npm_resource_e2e.request import ResourceRequest


ResourceCommand = Literal["check", "in", "out"]
RESOURCE_COMMANDS: tuple[ResourceCommand, ...] = ("check", "in", "out")


@dataclass(frozen=True)
class LaunchPlan:
    """Resolved subprocess launch plan."""

    cmd: list[str]
    cwd: Path | None = None
    env: dict[str, str] | None = None
    container: str | None = None


@dataclass(frozen=True)
class ResourceResponse:
    """Raw outcome of one resource invocation."""

    command: str
    exit_code: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    def json(self) -> Any:
        return json.loads(self.stdout)


class ResourceTimeout(RuntimeError):
    """The resource did not exit within the configured ceiling."""

    def __init__(self, command: str, timeout: float, stdout: str, stderr: str):
        self.command = command
        self.timeout = timeout
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(f"Resource '{command}' did not exit within {timeout:g}s")


def require_binary(binary: str, runner_name: str, which: Callable[[str], str | None] = shutil.which) -> None:
    if which(binary) is None:
        raise RuntimeError(
            f"Runner '{runner_name}' requires '{binary}' but it was not found in PATH."
        )


def _log(message: str) -> None:
    print(message, file=sys.stderr)


class ResourceRunner(ABC):
    """Launches one of the resource executables against a scratch directory."""

    name: str = "unknown"

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = timeout

    def preflight(self, command: ResourceCommand) -> None:
        """Optional synchronous checks before process launch."""
        del command

    def on_timeout(self, launch_plan: LaunchPlan) -> None:
        """Release anything the killed process left behind."""
        del launch_plan

    @abstractmethod
    def plan(self, command: ResourceCommand, scratch_dir: Path) -> LaunchPlan:
        """Build runner-specific launch plan."""

    def run(
        self, command: ResourceCommand, scratch_dir: Path, request: ResourceRequest
    ) -> ResourceResponse:
        if command not in RESOURCE_COMMANDS:
            raise ValueError(
                f"Unsupported resource command: {command}. "
                f"Expected one of: {', '.join(RESOURCE_COMMANDS)}"
            )
        payload = request.to_payload()
        schemas.validate("request", payload)
        stdin = json.dumps(payload)

        self.preflight(command)
        launch_plan = self.plan(command, scratch_dir)
        _log(f"[{self.name}] {' '.join(launch_plan.cmd)}")

        process = subprocess.Popen(
            launch_plan.cmd,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            encoding="utf-8",
            errors="replace",
            cwd=str(launch_plan.cwd) if launch_plan.cwd else None,
            env=launch_plan.env,
        )
        try:
            stdout, stderr = process.communicate(input=stdin, timeout=self.timeout)
        except subprocess.TimeoutExpired:
            process.kill()
            self.on_timeout(launch_plan)
            stdout, stderr = process.communicate()
            raise ResourceTimeout(command, self.timeout or 0, stdout or "", stderr or "") from None

        _log(f"[{self.name}] {command} exited with {process.returncode}")
        return ResourceResponse(
            command=command,
            exit_code=process.returncode,
            stdout=stdout or "",
            stderr=stderr or "",
        )
