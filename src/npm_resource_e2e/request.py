"""Resource request model and the builders that populate it."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from npm_resource_e2e import schemas
from npm_resource_e2e.npm_registry import invent_package


SOURCE_CODE_DIR = "source-code"
VERSION_FILE = "version"


@dataclass(frozen=True)
class RegistryConfig:
    uri: str
    token: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"uri": self.uri}
        if self.token is not None:
            payload["token"] = self.token
        return payload


@dataclass(frozen=True)
class Source:
    package: str
    scope: str | None = None
    registry: RegistryConfig | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"package": self.package}
        if self.scope is not None:
            payload["scope"] = self.scope
        if self.registry is not None:
            payload["registry"] = self.registry.to_payload()
        return payload


@dataclass(frozen=True)
class GetParams:
    skip_download: bool

    def to_payload(self) -> dict[str, Any]:
        return {"skip_download": self.skip_download}


@dataclass(frozen=True)
class PutParams:
    path: str
    delete: bool | None = None
    version: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"path": self.path}
        if self.delete is not None:
            payload["delete"] = self.delete
        if self.version is not None:
            payload["version"] = self.version
        return payload


Params = GetParams | PutParams


@dataclass(frozen=True)
class ResourceRequest:
    """The JSON document written to a resource executable's stdin.

    Unset fields are left out of the payload entirely rather than sent as null.
    """

    source: Source | None = None
    version: str | None = None
    params: Params | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if self.source is not None:
            payload["source"] = self.source.to_payload()
        if self.version is not None:
            payload["version"] = {"version": self.version}
        if self.params is not None:
            payload["params"] = self.params.to_payload()
        return payload

    def to_json(self) -> str:
        return json.dumps(self.to_payload())


def request_from_payload(payload: dict[str, Any]) -> ResourceRequest:
    """Build a request from a decoded JSON document, e.g. one read from a file."""
    schemas.validate("request", payload)

    source = None
    if "source" in payload:
        raw_source = payload["source"]
        registry = None
        if "registry" in raw_source:
            raw_registry = raw_source["registry"]
            registry = RegistryConfig(uri=raw_registry["uri"], token=raw_registry.get("token"))
        source = Source(
            package=raw_source["package"],
            scope=raw_source.get("scope"),
            registry=registry,
        )

    version = payload["version"]["version"] if "version" in payload else None

    params: Params | None = None
    if "params" in payload:
        raw_params = payload["params"]
        if "path" in raw_params:
            params = PutParams(
                path=raw_params["path"],
                delete=raw_params.get("delete"),
                version=raw_params.get("version"),
            )
        else:
            params = GetParams(skip_download=raw_params.get("skip_download", False))

    return ResourceRequest(source=source, version=version, params=params)


def parse_flag(value: str) -> bool:
    """Parse a ``true``/``false`` step argument."""
    if value == "true":
        return True
    if value == "false":
        return False
    raise ValueError(f"Expected 'true' or 'false', got {value!r}")


def source_for_package(package: str) -> Source:
    return Source(package=package)


def source_for_private_package(package: str, registry_uri: str, token: str | None) -> Source:
    return Source(package=package, registry=RegistryConfig(uri=registry_uri, token=token))


def get_params(skip_download: bool) -> GetParams:
    return GetParams(skip_download=skip_download)


def put_params(delete: bool | None = None, version_file: str | None = None) -> PutParams:
    return PutParams(path=SOURCE_CODE_DIR, delete=delete, version=version_file)


def write_version_file(directory: Path, version: str) -> Path:
    """Stage the version marker ``out`` reads; written without a trailing newline."""
    path = directory / VERSION_FILE
    path.write_text(version)
    return path


def stage_package_source(directory: Path, package: str, version: str, valid: bool) -> Path:
    """Create ``source-code`` under ``directory``; only valid sources get a package."""
    source_dir = directory / SOURCE_CODE_DIR
    source_dir.mkdir(parents=True, exist_ok=True)
    if valid:
        invent_package(source_dir, package, version)
    return source_dir
