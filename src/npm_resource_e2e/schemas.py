"""JSON contracts exchanged with the resource executables."""

from __future__ import annotations

from typing import Any

from jsonschema import Draft202012Validator


_VERSION_OBJECT = {
    "type": "object",
    "required": ["version"],
    "properties": {"version": {"type": "string"}},
}

REQUEST_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "source": {
            "type": "object",
            "required": ["package"],
            "properties": {
                "package": {"type": "string", "minLength": 1},
                "scope": {"type": "string"},
                "registry": {
                    "type": "object",
                    "required": ["uri"],
                    "properties": {
                        "uri": {"type": "string"},
                        "token": {"type": "string"},
                    },
                },
            },
        },
        "version": _VERSION_OBJECT,
        "params": {
            "type": "object",
            "properties": {
                "skip_download": {"type": "boolean"},
                "path": {"type": "string"},
                "delete": {"type": "boolean"},
                "version": {"type": "string"},
            },
        },
    },
}

CHECK_OUTPUT_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "array",
    # only the first entry is read back
    "prefixItems": [_VERSION_OBJECT],
}

IN_OUT_OUTPUT_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["version"],
    "properties": {
        "version": _VERSION_OBJECT,
    },
}

_SCHEMAS = {
    "request": REQUEST_SCHEMA,
    "check_output": CHECK_OUTPUT_SCHEMA,
    "in_out_output": IN_OUT_OUTPUT_SCHEMA,
}


def schema_names() -> tuple[str, ...]:
    return tuple(_SCHEMAS.keys())


def validate(name: str, data: Any) -> None:
    """Validate ``data`` against a named contract, raising ValueError on mismatch."""
    schema = _SCHEMAS.get(name)
    if schema is None:
        raise ValueError(f"Unknown schema: {name}. Expected one of: {', '.join(schema_names())}")
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])
    if errors:
        msg = "; ".join([e.message for e in errors[:5]])
        raise ValueError(f"Schema validation failed: {msg}")
