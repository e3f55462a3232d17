"""Tests for the npm-backed registry client."""

from __future__ import annotations

import json
import subprocess

import pytest

from fakes import GOOD_TOKEN, REGISTRY_URI
from npm_resource_e2e.npm_registry import (
    NpmCommandError,
    NpmRegistryClient,
    invent_package,
    registry_auth_key,
    render_npmrc,
)


def _on_path(binary):
    return f"/usr/local/bin/{binary}"


def _client(returncode: int, stdout: str = "", stderr: str = "") -> NpmRegistryClient:
    def _run(cmd, cwd):
        return subprocess.CompletedProcess(cmd, returncode, stdout, stderr)

    return NpmRegistryClient(REGISTRY_URI, GOOD_TOKEN, run=_run, which=_on_path)


class TestNpmrc:
    @pytest.mark.parametrize(
        "uri,expected",
        [
            ("http://localhost:4873", "//localhost:4873/"),
            ("http://localhost:4873/", "//localhost:4873/"),
            ("https://npm.example.com/api/npm/", "//npm.example.com/api/npm/"),
        ],
    )
    def test_auth_key(self, uri, expected):
        assert registry_auth_key(uri) == expected

    def test_render_with_token(self):
        assert render_npmrc("http://localhost:4873", "abc") == (
            "registry=http://localhost:4873\n//localhost:4873/:_authToken=abc\n"
        )

    def test_render_without_token(self):
        assert render_npmrc("http://localhost:4873", None) == "registry=http://localhost:4873\n"

    def test_client_passes_registry_and_token(self, registry, fake_npm):
        registry.get_package_versions("left-pad")
        cmd = fake_npm.calls[0]
        assert cmd[:5] == ["npm", "view", "left-pad", "versions", "--json"]
        assert cmd[cmd.index("--registry") + 1] == REGISTRY_URI
        assert f":_authToken={GOOD_TOKEN}" in fake_npm.userconfigs[0]


class TestVersions:
    def test_many_versions(self, registry, fake_npm):
        fake_npm.packages["left-pad"] = ["1.0.0", "1.1.0"]
        assert registry.get_package_versions("left-pad") == ["1.0.0", "1.1.0"]

    def test_single_version_string(self, registry, fake_npm):
        fake_npm.packages["left-pad"] = ["1.0.0"]
        assert registry.get_package_versions("left-pad") == ["1.0.0"]

    def test_unknown_package(self, registry):
        assert registry.get_package_versions("nothing-here") == []

    def test_has_version(self, registry, fake_npm):
        fake_npm.packages["left-pad"] = ["1.0.0"]
        assert registry.has_version("left-pad", "1.0.0")
        assert not registry.has_version("left-pad", "2.0.0")

    def test_other_failure_raises(self):
        client = _client(1, stderr="npm ERR! code E401")
        with pytest.raises(NpmCommandError, match="E401"):
            client.get_package_versions("left-pad")

    def test_unexpected_payload_raises(self):
        client = _client(0, stdout='{"a": 1}')
        with pytest.raises(NpmCommandError, match="unexpected versions payload"):
            client.get_package_versions("left-pad")


class TestPublishing:
    def test_invent_package(self, tmp_path):
        invent_package(tmp_path / "pkg", "my-pkg", "3.0.0")
        manifest = json.loads((tmp_path / "pkg" / "package.json").read_text())
        assert manifest["name"] == "my-pkg"
        assert manifest["version"] == "3.0.0"
        assert manifest["main"] == "index.js"

    def test_ensure_available_publishes(self, registry, fake_npm, tmp_path):
        registry.ensure_version_available(tmp_path, "my-pkg", "1.0.0")
        assert fake_npm.packages["my-pkg"] == ["1.0.0"]
        published = [c for c in fake_npm.calls if c[1] == "publish"]
        assert len(published) == 1
        assert published[0][2].startswith(str(tmp_path))

    def test_ensure_available_is_noop_when_present(self, registry, fake_npm, tmp_path):
        fake_npm.packages["my-pkg"] = ["1.0.0"]
        registry.ensure_version_available(tmp_path, "my-pkg", "1.0.0")
        assert [c[1] for c in fake_npm.calls] == ["view"]

    def test_ensure_not_available_unpublishes(self, registry, fake_npm):
        fake_npm.packages["my-pkg"] = ["1.0.0", "1.1.0"]
        registry.ensure_version_not_available("my-pkg", "1.1.0")
        assert fake_npm.packages["my-pkg"] == ["1.0.0"]
        unpublish = [c for c in fake_npm.calls if c[1] == "unpublish"][0]
        assert unpublish[2:4] == ["my-pkg@1.1.0", "--force"]

    def test_ensure_not_available_is_noop_when_absent(self, registry, fake_npm):
        registry.ensure_version_not_available("my-pkg", "1.0.0")
        assert [c[1] for c in fake_npm.calls] == ["view"]

    def test_publish_failure_raises(self, tmp_path):
        client = _client(1, stderr="E403 forbidden")
        with pytest.raises(NpmCommandError, match="E403"):
            client.publish(tmp_path)

    def test_require_npm(self):
        client = NpmRegistryClient(REGISTRY_URI, GOOD_TOKEN, which=lambda _: None)
        with pytest.raises(RuntimeError, match="'npm' binary was not found"):
            client.require_npm()
