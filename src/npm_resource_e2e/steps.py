"""Step catalogue for resource scenarios.

Each step takes the ``ScenarioContext`` as its first argument followed by the
groups captured from its pattern. Scenarios are written as plain step text:

    with harness.scenario() as ctx:
        STEPS.run(ctx, 'Given a source configuration for package "left-pad"')
        STEPS.run(ctx, "When the resource is checked")
        STEPS.run(ctx, 'Then version "1.3.0" is returned')
"""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Callable
from typing import Any

from npm_resource_e2e import assertions
from npm_resource_e2e.request import (
    VERSION_FILE,
    get_params,
    parse_flag,
    put_params,
    source_for_package,
    source_for_private_package,
    stage_package_source,
    write_version_file,
)
from npm_resource_e2e.scenario import ScenarioContext


StepFunction = Callable[..., None]

_KEYWORD = re.compile(r"^\s*(?:Given|When|Then|And|But)\s+")


class StepRegistry:
    def __init__(self) -> None:
        self._steps: list[tuple[re.Pattern[str], StepFunction]] = []

    def step(self, pattern: str) -> Callable[[StepFunction], StepFunction]:
        compiled = re.compile(pattern)

        def register(func: StepFunction) -> StepFunction:
            self._steps.append((compiled, func))
            return func

        return register

    def patterns(self) -> list[str]:
        return [pattern.pattern for pattern, _ in self._steps]

    def match(self, text: str) -> tuple[StepFunction, tuple[Any, ...]]:
        body = _KEYWORD.sub("", text, count=1).strip()
        for pattern, func in self._steps:
            m = pattern.fullmatch(body)
            if m:
                return func, m.groups()
        raise LookupError(f"No step matches: {text!r}")

    def run(self, ctx: ScenarioContext, text: str) -> None:
        func, args = self.match(text)
        func(ctx, *args)

    def run_all(self, ctx: ScenarioContext, lines: list[str]) -> None:
        for line in lines:
            self.run(ctx, line)


STEPS = StepRegistry()


# -- Given --

@STEPS.step(r'a source configuration for package "(.*)"')
def given_public_source(ctx: ScenarioContext, package: str) -> None:
    ctx.request = dataclasses.replace(ctx.request, source=source_for_package(package))


@STEPS.step(
    r'a source configuration for private package "(.*)" with '
    r"(correct|incorrect|empty|missing) credentials"
)
def given_private_source(ctx: ScenarioContext, package: str, credential_set: str) -> None:
    source = source_for_private_package(
        package, ctx.config.registry_uri, ctx.config.token_for(credential_set)
    )
    ctx.request = dataclasses.replace(ctx.request, source=source)


@STEPS.step(r"a get step with skip_download: (.*) params")
def given_get_params(ctx: ScenarioContext, skip_download: str) -> None:
    ctx.request = dataclasses.replace(ctx.request, params=get_params(parse_flag(skip_download)))


@STEPS.step(r'a known version "(.*)" for the resource')
def given_known_version(ctx: ScenarioContext, version: str) -> None:
    ctx.request = dataclasses.replace(ctx.request, version=version)


@STEPS.step(r'the registry has (a|no) package "(.*)" available in version "(.*)"')
def given_registry_state(ctx: ScenarioContext, a_or_no: str, package: str, version: str) -> None:
    if a_or_no == "a":
        ctx.registry.ensure_version_available(ctx.scratch_dir, package, version)
    else:
        ctx.registry.ensure_version_not_available(package, version)


@STEPS.step(r'I have a put step with params package: "([^"]*)"')
def given_put_params(ctx: ScenarioContext, package: str) -> None:
    del package
    ctx.request = dataclasses.replace(ctx.request, params=put_params())


@STEPS.step(
    r'I have a put step with params package: "([^"]*)" and '
    r'delete: (true|false) and version: "(.*)"'
)
def given_put_params_with_version(
    ctx: ScenarioContext, package: str, delete: str, version: str
) -> None:
    del package
    write_version_file(ctx.scratch_dir, version)
    params = put_params(delete=parse_flag(delete), version_file=VERSION_FILE)
    ctx.request = dataclasses.replace(ctx.request, params=params)


@STEPS.step(r'I have (valid|invalid) npm package source code for package "(.*)" with version "(.*)"')
def given_package_source(
    ctx: ScenarioContext, valid_or_invalid: str, package: str, version: str
) -> None:
    stage_package_source(ctx.scratch_dir, package, version, valid=valid_or_invalid == "valid")


# -- When --

@STEPS.step(r"the resource is checked")
def when_checked(ctx: ScenarioContext) -> None:
    ctx.run_resource("check")


@STEPS.step(r"the resource is fetched")
def when_fetched(ctx: ScenarioContext) -> None:
    ctx.run_resource("in")


@STEPS.step(r"the package is published")
def when_published(ctx: ScenarioContext) -> None:
    ctx.run_resource("out")


# -- Then --

@STEPS.step(r"an error is returned")
def then_error(ctx: ScenarioContext) -> None:
    assertions.assert_failure(ctx.require_response())


@STEPS.step(r'version "([^"]*)" is returned')
def then_version(ctx: ScenarioContext, version: str) -> None:
    assertions.assert_version_returned(ctx.require_response(), version)


@STEPS.step(r'the content of file "(.*)" is "(.*)"')
def then_file_content(ctx: ScenarioContext, filename: str, content: str) -> None:
    assertions.assert_file_content(ctx.scratch_dir, filename, content)


@STEPS.step(r'the file "(.*)" does exist')
def then_file_exists(ctx: ScenarioContext, filename: str) -> None:
    assertions.assert_file_exists(ctx.scratch_dir, filename)


@STEPS.step(r'the file "(.*)" does not exist')
def then_file_missing(ctx: ScenarioContext, filename: str) -> None:
    assertions.assert_file_missing(ctx.scratch_dir, filename)


@STEPS.step(r'there should be (a|no) package "(.*)" available with version "(.*)" in the registry')
def then_registry_state(ctx: ScenarioContext, a_or_no: str, package: str, version: str) -> None:
    assertions.assert_registry_version(ctx.registry, package, version, present=a_or_no == "a")
