"""Decode the version documents resources print on stdout."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from npm_resource_e2e import schemas


class ResourceOutputError(ValueError):
    """Resource stdout is not a version document."""


@dataclass(frozen=True)
class SingleVersion:
    """``in``/``out`` output: one version plus whatever metadata the resource sent."""

    version: str
    metadata: Any = None


@dataclass(frozen=True)
class VersionList:
    """``check`` output, in the order the resource printed it."""

    versions: tuple[Any, ...]

    @property
    def first(self) -> str | None:
        return self.versions[0] if self.versions else None


VersionOutput = SingleVersion | VersionList


def _entry_version(item: Any) -> Any:
    return item.get("version") if isinstance(item, dict) else None


def decode_version_output(stdout: str) -> VersionOutput:
    try:
        document: Any = json.loads(stdout)
    except json.JSONDecodeError as exc:
        raise ResourceOutputError(f"stdout is not JSON: {exc}") from exc

    if isinstance(document, list):
        try:
            schemas.validate("check_output", document)
        except ValueError as exc:
            raise ResourceOutputError(str(exc)) from exc
        return VersionList(versions=tuple(_entry_version(item) for item in document))

    if isinstance(document, dict):
        try:
            schemas.validate("in_out_output", document)
        except ValueError as exc:
            raise ResourceOutputError(str(exc)) from exc
        return SingleVersion(version=document["version"]["version"], metadata=document.get("metadata"))

    raise ResourceOutputError(
        f"expected a JSON object or array, got {type(document).__name__}"
    )


def extract_version(output: VersionOutput) -> str | None:
    if isinstance(output, SingleVersion):
        return output.version
    return output.first
