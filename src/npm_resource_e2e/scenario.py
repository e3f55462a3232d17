"""Per-scenario state and the harness that creates it."""

from __future__ import annotations

import shutil
import tempfile
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

from npm_resource_e2e.config import HarnessConfig, load_config
from npm_resource_e2e.npm_registry import NpmRegistryClient
from npm_resource_e2e.request import ResourceRequest
from npm_resource_e2e.runner import ResourceCommand, ResourceResponse, ResourceRunner, create_runner


SCRATCH_PREFIX = "npm-resource-test-volume-"


@dataclass
class ScenarioContext:
    """Everything one scenario reads or writes, passed explicitly to each step."""

    config: HarnessConfig
    runner: ResourceRunner
    registry: NpmRegistryClient
    scratch_dir: Path
    request: ResourceRequest = field(default_factory=ResourceRequest)
    response: ResourceResponse | None = None

    def path(self, name: str) -> Path:
        return self.scratch_dir / name

    def run_resource(self, command: ResourceCommand) -> ResourceResponse:
        self.response = self.runner.run(command, self.scratch_dir, self.request)
        return self.response

    def require_response(self) -> ResourceResponse:
        if self.response is None:
            raise RuntimeError("No resource has been run in this scenario yet")
        return self.response


class Harness:
    """Configuration, runner and registry client shared by every scenario of a run."""

    def __init__(
        self,
        config: HarnessConfig,
        runner: ResourceRunner | None = None,
        registry: NpmRegistryClient | None = None,
    ) -> None:
        self.config = config
        self.runner = runner or create_runner(config.runner)
        self.registry = registry or NpmRegistryClient(config.registry_uri, config.correct_token)

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Harness":
        return cls(load_config(env))

    @contextmanager
    def scenario(self) -> Iterator[ScenarioContext]:
        ctx = setup_scenario(self)
        try:
            yield ctx
        finally:
            teardown_scenario(ctx)


def setup_scenario(harness: Harness) -> ScenarioContext:
    base = harness.config.runner.tmp_root
    base.mkdir(parents=True, exist_ok=True)
    scratch_dir = Path(tempfile.mkdtemp(prefix=SCRATCH_PREFIX, dir=base))
    return ScenarioContext(
        config=harness.config,
        runner=harness.runner,
        registry=harness.registry,
        scratch_dir=scratch_dir,
    )


def teardown_scenario(ctx: ScenarioContext) -> None:
    try:
        shutil.rmtree(ctx.scratch_dir)
    except FileNotFoundError:
        pass
