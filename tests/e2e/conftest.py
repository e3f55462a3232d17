"""Fixtures for scenarios against a live registry and resource.

Requires TEST_REGISTRY, CORRECT_CREDENTIALS and INCORRECT_CREDENTIALS; the
session aborts before the first scenario when any of them is missing.
"""

from __future__ import annotations

import pytest

from npm_resource_e2e.config import ConfigError
from npm_resource_e2e.scenario import Harness


@pytest.fixture(scope="session")
def harness():
    try:
        return Harness.from_env()
    except ConfigError as exc:
        pytest.exit(f"Cannot run e2e scenarios: {exc}", returncode=1)


@pytest.fixture
def ctx(harness):
    with harness.scenario() as scenario_ctx:
        yield scenario_ctx
