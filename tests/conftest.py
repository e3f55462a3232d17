"""Shared fixtures for unit and end-to-end tests."""

from __future__ import annotations

import pytest

from fakes import (
    BAD_TOKEN,
    CHECK_SCRIPT,
    GOOD_TOKEN,
    IN_SCRIPT,
    OUT_SCRIPT,
    REGISTRY_URI,
    FakeNpm,
    write_script,
)
from npm_resource_e2e.config import HarnessConfig, RunnerConfig
from npm_resource_e2e.npm_registry import NpmRegistryClient
from npm_resource_e2e.runner.local import LocalRunner
from npm_resource_e2e.scenario import Harness


def _which_npm(binary: str) -> str | None:
    return f"/usr/local/bin/{binary}"


@pytest.fixture
def resource_dir(tmp_path):
    directory = tmp_path / "resource"
    write_script(directory, "check", CHECK_SCRIPT)
    write_script(directory, "in", IN_SCRIPT)
    write_script(directory, "out", OUT_SCRIPT)
    return directory


@pytest.fixture
def fake_npm():
    return FakeNpm()


@pytest.fixture
def registry(fake_npm):
    return NpmRegistryClient(REGISTRY_URI, GOOD_TOKEN, run=fake_npm, which=_which_npm)


@pytest.fixture
def harness_config(tmp_path, resource_dir):
    return HarnessConfig(
        registry_uri=REGISTRY_URI,
        correct_token=GOOD_TOKEN,
        incorrect_token=BAD_TOKEN,
        runner=RunnerConfig(
            mode="local",
            resource_dir=resource_dir,
            timeout=20.0,
            tmp_root=tmp_path / "tmp",
        ),
    )


@pytest.fixture
def harness(harness_config, registry):
    return Harness(
        harness_config,
        runner=LocalRunner(harness_config.runner.resource_dir, timeout=20.0),
        registry=registry,
    )


@pytest.fixture
def ctx(harness):
    with harness.scenario() as scenario_ctx:
        yield scenario_ctx


def pytest_addoption(parser):
    parser.addoption(
        "--run-e2e",
        action="store_true",
        default=False,
        help="Run scenarios against a live registry and resource.",
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-e2e"):
        return
    skip_e2e = pytest.mark.skip(reason="needs --run-e2e")
    for item in items:
        if "e2e" in item.keywords:
            item.add_marker(skip_e2e)
