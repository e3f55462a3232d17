"""in: fetch a known version into the work directory."""

from __future__ import annotations

import pytest

from npm_resource_e2e.steps import STEPS


pytestmark = pytest.mark.e2e


def test_fetch_known_version(ctx):
    STEPS.run_all(
        ctx,
        [
            'Given a source configuration for package "left-pad"',
            'And a known version "1.2.3" for the resource',
            "When the resource is fetched",
            'Then version "1.2.3" is returned',
            'And the file "version" does exist',
            'And the content of file "version" is "1.2.3"',
        ],
    )


def test_fetch_without_download(ctx):
    STEPS.run_all(
        ctx,
        [
            'Given a source configuration for package "left-pad"',
            'And a known version "1.2.3" for the resource',
            "And a get step with skip_download: true params",
            "When the resource is fetched",
            'Then version "1.2.3" is returned',
            'And the content of file "version" is "1.2.3"',
        ],
    )


def test_fetch_unknown_version_fails(ctx):
    STEPS.run_all(
        ctx,
        [
            'Given a source configuration for package "left-pad"',
            'And a known version "999.0.0" for the resource',
            "When the resource is fetched",
            "Then an error is returned",
        ],
    )
