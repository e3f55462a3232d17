"""Runs resource executables installed on the host."""

from __future__ import annotations

import os
from pathlib import Path

from npm_resource_e2e.runner.base import LaunchPlan, ResourceCommand, ResourceRunner


class LocalRunner(ResourceRunner):
    name = "local"

    def __init__(self, resource_dir: Path, timeout: float | None = None) -> None:
        super().__init__(timeout=timeout)
        self.resource_dir = resource_dir

    def executable(self, command: ResourceCommand) -> Path:
        return self.resource_dir / command

    def preflight(self, command: ResourceCommand) -> None:
        path = self.executable(command)
        if not path.is_file():
            raise RuntimeError(f"Resource executable not found: {path}")
        if not os.access(path, os.X_OK):
            raise RuntimeError(f"Resource executable is not executable: {path}")

    def plan(self, command: ResourceCommand, scratch_dir: Path) -> LaunchPlan:
        return LaunchPlan(cmd=[str(self.executable(command)), str(scratch_dir)])
