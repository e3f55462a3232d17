"""Environment-driven configuration for the harness."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Literal


CredentialSet = Literal["correct", "incorrect", "empty", "missing"]
CREDENTIAL_SETS: tuple[CredentialSet, ...] = ("correct", "incorrect", "empty", "missing")

DEFAULT_IMAGE = "timotto/concourse-npm-resource:latest"
DEFAULT_RESOURCE_DIR = Path("/opt/resource")
DEFAULT_TIMEOUT = 30.0


class ConfigError(ValueError):
    """A required environment value is missing or malformed."""


@dataclass(frozen=True)
class RunnerConfig:
    """How resource executables are launched."""

    mode: str = "docker"
    image: str = DEFAULT_IMAGE
    resource_dir: Path = DEFAULT_RESOURCE_DIR
    timeout: float = DEFAULT_TIMEOUT
    tmp_root: Path = Path("tmp")


@dataclass(frozen=True)
class HarnessConfig:
    registry_uri: str
    correct_token: str
    incorrect_token: str
    runner: RunnerConfig = RunnerConfig()

    def token_for(self, credential_set: str) -> str | None:
        """Resolve a credential set name; ``missing`` yields no token at all."""
        tokens: dict[str, str | None] = {
            "correct": self.correct_token,
            "incorrect": self.incorrect_token,
            "empty": "",
            "missing": None,
        }
        if credential_set not in tokens:
            raise ValueError(
                f"Unknown credential set: {credential_set}. "
                f"Expected one of: {', '.join(CREDENTIAL_SETS)}"
            )
        return tokens[credential_set]


def _require(env: Mapping[str, str], key: str) -> str:
    value = env.get(key)
    if value is None:
        raise ConfigError(f"{key} is undefined")
    return value


def load_runner_config(env: Mapping[str, str] | None = None) -> RunnerConfig:
    """Read the optional runner settings, falling back to defaults."""
    env = os.environ if env is None else env

    raw_timeout = env.get("RESOURCE_TIMEOUT")
    timeout = DEFAULT_TIMEOUT
    if raw_timeout:
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ConfigError(f"RESOURCE_TIMEOUT must be a number, got {raw_timeout!r}") from None
        if timeout <= 0:
            raise ConfigError(f"RESOURCE_TIMEOUT must be positive, got {raw_timeout!r}")

    raw_tmp = env.get("TEST_TMP_DIR")
    tmp_root = Path(raw_tmp) if raw_tmp else Path.cwd() / "tmp"

    return RunnerConfig(
        mode=env.get("TEST_RUNNER") or "docker",
        image=env.get("DOCKER_IMAGE") or DEFAULT_IMAGE,
        resource_dir=Path(env.get("RESOURCE_DIR") or DEFAULT_RESOURCE_DIR),
        timeout=timeout,
        tmp_root=tmp_root.resolve(),
    )


def load_config(env: Mapping[str, str] | None = None) -> HarnessConfig:
    """Load the full harness configuration; fails fast on missing values."""
    env = os.environ if env is None else env
    return HarnessConfig(
        registry_uri=_require(env, "TEST_REGISTRY"),
        correct_token=_require(env, "CORRECT_CREDENTIALS"),
        incorrect_token=_require(env, "INCORRECT_CREDENTIALS"),
        runner=load_runner_config(env),
    )
