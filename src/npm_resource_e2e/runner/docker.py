"""Runs resource executables inside the resource's container image."""

from __future__ import annotations

import shutil
import subprocess
import uuid
from collections.abc import Callable
from pathlib import Path

from npm_resource_e2e.runner.base import (
    LaunchPlan,
    ResourceCommand,
    ResourceRunner,
    _log,
    require_binary,
)


CONTAINER_VOLUME = "/test-volume"
CONTAINER_RESOURCE_DIR = "/opt/resource"
CONTAINER_PREFIX = "npm-resource-e2e-"


class DockerRunner(ResourceRunner):
    name = "docker"

    def __init__(
        self,
        image: str,
        timeout: float | None = None,
        docker: str = "docker",
        which: Callable[[str], str | None] = shutil.which,
    ) -> None:
        super().__init__(timeout=timeout)
        self.image = image
        self.docker = docker
        self._which = which

    def preflight(self, command: ResourceCommand) -> None:
        del command
        require_binary(self.docker, self.name, which=self._which)

    def plan(self, command: ResourceCommand, scratch_dir: Path) -> LaunchPlan:
        container = f"{CONTAINER_PREFIX}{uuid.uuid4().hex[:12]}"
        # The scratch directory is mounted so in/out side effects land on the host.
        cmd = [
            self.docker,
            "run",
            "--rm",
            "-i",
            "--name",
            container,
            "-v",
            f"{scratch_dir.resolve()}:{CONTAINER_VOLUME}",
            self.image,
            f"{CONTAINER_RESOURCE_DIR}/{command}",
            CONTAINER_VOLUME,
        ]
        return LaunchPlan(cmd=cmd, container=container)

    def on_timeout(self, launch_plan: LaunchPlan) -> None:
        # Killing the client does not stop the container.
        if launch_plan.container is None:
            return
        result = subprocess.run(
            [self.docker, "kill", launch_plan.container],
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            _log(f"[{self.name}] could not kill {launch_plan.container}: {result.stderr.strip()}")
