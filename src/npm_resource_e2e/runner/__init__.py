"""Resource runner abstraction and implementations."""

from npm_resource_e2e.runner.base import (
    RESOURCE_COMMANDS,
    ResourceCommand,
    ResourceResponse,
    ResourceRunner,
    ResourceTimeout,
)
from npm_resource_e2e.runner.factory import create_runner, runner_names, select_runner

__all__ = [
    "RESOURCE_COMMANDS",
    "ResourceCommand",
    "ResourceResponse",
    "ResourceRunner",
    "ResourceTimeout",
    "create_runner",
    "runner_names",
    "select_runner",
]
