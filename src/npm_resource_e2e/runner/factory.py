"""Runner selection and construction."""

from __future__ import annotations

from npm_resource_e2e.config import RunnerConfig
from npm_resource_e2e.runner.base import ResourceRunner
from npm_resource_e2e.runner.docker import DockerRunner
from npm_resource_e2e.runner.local import LocalRunner


_RUNNER_TYPES: dict[str, type[ResourceRunner]] = {
    "docker": DockerRunner,
    "local": LocalRunner,
}


def runner_names() -> tuple[str, ...]:
    return tuple(_RUNNER_TYPES.keys())


def select_runner(mode: str) -> str:
    """Resolve a TEST_RUNNER value; anything but ``docker`` means the host executables."""
    if mode == "docker":
        return "docker"
    return "local"


def create_runner(config: RunnerConfig) -> ResourceRunner:
    """Create the runner for a configuration, once per harness."""
    name = select_runner(config.mode)
    if name == "docker":
        return DockerRunner(config.image, timeout=config.timeout)
    return LocalRunner(config.resource_dir, timeout=config.timeout)
