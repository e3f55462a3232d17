"""Registry fixture helpers backed by the npm CLI.

Scenarios that publish or delete packages need the registry in a known state
before the resource runs and need to inspect it afterwards. Everything here
shells out to ``npm`` with a throwaway ``.npmrc`` holding the auth token, so
the developer's own npm configuration is never read or modified.
"""

from __future__ import annotations

import json
import shutil
import subprocess
import sys
import tempfile
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from urllib.parse import urlparse


CommandRunner = Callable[[list[str], Path | None], "subprocess.CompletedProcess[str]"]


class NpmCommandError(RuntimeError):
    """An npm invocation failed for a reason other than a missing package."""

    def __init__(self, cmd: list[str], returncode: int, stderr: str):
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(
            f"{' '.join(cmd[:3])} exited with {returncode}: {stderr.strip()[:500]}"
        )


def _log(message: str) -> None:
    print(message, file=sys.stderr)


def _run_command(cmd: list[str], cwd: Path | None) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        cmd,
        cwd=str(cwd) if cwd else None,
        capture_output=True,
        text=True,
        check=False,
    )


def registry_auth_key(registry_uri: str) -> str:
    """Scheme-less registry prefix npm uses for per-registry settings."""
    parsed = urlparse(registry_uri)
    path = parsed.path if parsed.path.endswith("/") else f"{parsed.path}/"
    return f"//{parsed.netloc}{path}"


def render_npmrc(registry_uri: str, token: str | None) -> str:
    lines = [f"registry={registry_uri}"]
    if token:
        lines.append(f"{registry_auth_key(registry_uri)}:_authToken={token}")
    return "\n".join(lines) + "\n"


def invent_package(directory: Path, package: str, version: str) -> Path:
    """Write a minimal publishable npm package into ``directory``."""
    directory.mkdir(parents=True, exist_ok=True)
    manifest = {
        "name": package,
        "version": version,
        "description": f"Synthetic package {package}@{version} for resource tests",
        "main": "index.js",
        "license": "MIT",
    }
    (directory / "package.json").write_text(json.dumps(manifest, indent=2) + "\n")
    (directory / "index.js").write_text(
        f"module.exports = {json.dumps(f'{package}@{version}')};\n"
    )
    return directory


def _is_not_found(stderr: str) -> bool:
    return "E404" in stderr or "404 Not Found" in stderr


class NpmRegistryClient:
    """Publish, delete and list package versions in a test registry."""

    def __init__(
        self,
        registry_uri: str,
        token: str | None,
        *,
        npm: str = "npm",
        run: CommandRunner = _run_command,
        which: Callable[[str], str | None] = shutil.which,
    ) -> None:
        self.registry_uri = registry_uri
        self.token = token
        self.npm = npm
        self._run = run
        self._which = which

    def require_npm(self) -> None:
        if self._which(self.npm) is None:
            raise RuntimeError(
                f"'{self.npm}' binary was not found in PATH. "
                "Install Node.js/npm to prepare registry state."
            )

    @contextmanager
    def _userconfig(self) -> Iterator[Path]:
        with tempfile.TemporaryDirectory(prefix="npm-resource-e2e-rc-") as tmp:
            path = Path(tmp) / ".npmrc"
            path.write_text(render_npmrc(self.registry_uri, self.token))
            yield path

    def _npm(
        self, args: list[str], cwd: Path | None = None
    ) -> subprocess.CompletedProcess[str]:
        self.require_npm()
        with self._userconfig() as rc:
            cmd = [
                self.npm,
                *args,
                "--registry",
                self.registry_uri,
                "--userconfig",
                str(rc),
            ]
            return self._run(cmd, cwd)

    def get_package_versions(self, package: str) -> list[str]:
        """All published versions of ``package``; empty if it does not exist."""
        result = self._npm(["view", package, "versions", "--json"])
        if result.returncode != 0:
            if _is_not_found(result.stderr) or _is_not_found(result.stdout):
                return []
            raise NpmCommandError(["npm", "view", package], result.returncode, result.stderr)

        output = result.stdout.strip()
        if not output:
            return []
        versions = json.loads(output)
        # npm prints a bare string when only one version exists
        if isinstance(versions, str):
            return [versions]
        if not isinstance(versions, list):
            raise NpmCommandError(
                ["npm", "view", package],
                result.returncode,
                f"unexpected versions payload: {output[:200]}",
            )
        return [v for v in versions if isinstance(v, str)]

    def has_version(self, package: str, version: str) -> bool:
        return version in self.get_package_versions(package)

    def publish(self, directory: Path) -> None:
        _log(f"npm publish {directory}")
        result = self._npm(["publish", str(directory)], cwd=directory)
        if result.returncode != 0:
            raise NpmCommandError(["npm", "publish", str(directory)], result.returncode, result.stderr)

    def unpublish(self, package: str, version: str) -> None:
        spec = f"{package}@{version}"
        _log(f"npm unpublish {spec}")
        result = self._npm(["unpublish", spec, "--force"])
        if result.returncode != 0 and not _is_not_found(result.stderr):
            raise NpmCommandError(["npm", "unpublish", spec], result.returncode, result.stderr)

    def ensure_version_available(self, work_dir: Path, package: str, version: str) -> None:
        """Publish a synthetic ``package@version`` unless the registry already has it."""
        if self.has_version(package, version):
            return
        package_dir = Path(tempfile.mkdtemp(prefix="registry-package-", dir=work_dir))
        invent_package(package_dir, package, version)
        self.publish(package_dir)

    def ensure_version_not_available(self, package: str, version: str) -> None:
        if self.has_version(package, version):
            self.unpublish(package, version)
