"""Outcome checks used by the step catalogue.

Every check raises ``AssertionError`` with the expected and actual values so a
failing scenario reports what the resource actually did.
"""

from __future__ import annotations

from pathlib import Path

from npm_resource_e2e.npm_registry import NpmRegistryClient
from npm_resource_e2e.outputs import ResourceOutputError, decode_version_output, extract_version
from npm_resource_e2e.runner import ResourceResponse


def _describe(response: ResourceResponse) -> str:
    return (
        f"resource '{response.command}' exited with {response.exit_code}\n"
        f"stdout: {response.stdout.strip()[:1000]}\n"
        f"stderr: {response.stderr.strip()[:1000]}"
    )


def assert_success(response: ResourceResponse) -> None:
    if response.exit_code != 0:
        raise AssertionError(f"expected exit code 0\n{_describe(response)}")


def assert_failure(response: ResourceResponse) -> None:
    if response.exit_code == 0:
        raise AssertionError(f"expected a non-zero exit code\n{_describe(response)}")


def assert_version_returned(response: ResourceResponse, expected: str) -> None:
    assert_success(response)
    try:
        output = decode_version_output(response.stdout)
    except ResourceOutputError as exc:
        raise AssertionError(f"{exc}\n{_describe(response)}") from exc

    actual = extract_version(output)
    if actual != expected:
        raise AssertionError(f"expected version {expected!r}, got {actual!r}")


def assert_file_content(scratch_dir: Path, filename: str, content: str) -> None:
    expected = f"{content}\n"
    path = scratch_dir / filename
    try:
        actual = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise AssertionError(f"expected file {filename!r} to exist") from None
    if actual != expected:
        raise AssertionError(f"file {filename!r}: expected {expected!r}, got {actual!r}")


def assert_file_exists(scratch_dir: Path, filename: str) -> None:
    if not (scratch_dir / filename).exists():
        raise AssertionError(f"expected file {filename!r} to exist")


def assert_file_missing(scratch_dir: Path, filename: str) -> None:
    if (scratch_dir / filename).exists():
        raise AssertionError(f"expected file {filename!r} not to exist")


def assert_registry_version(
    registry: NpmRegistryClient, package: str, version: str, present: bool
) -> None:
    versions = registry.get_package_versions(package)
    count = len([v for v in versions if v == version])
    expected = 1 if present else 0
    if count != expected:
        raise AssertionError(
            f"expected {expected} entries of {package}@{version} in the registry, "
            f"found {count} (published: {', '.join(versions) or 'none'})"
        )
