"""CLI: npm-resource-e2e run <check|in|out> [options] | npm-resource-e2e steps."""

from __future__ import annotations

import argparse
import dataclasses
import json
import sys
import tempfile
from pathlib import Path

from npm_resource_e2e.config import ConfigError, load_runner_config
from npm_resource_e2e.request import request_from_payload
from npm_resource_e2e.runner import RESOURCE_COMMANDS, create_runner, runner_names
from npm_resource_e2e.steps import STEPS


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="npm-resource-e2e",
        description="Drive the npm resource executables by hand.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Run one resource command with a JSON request.")
    run.add_argument("resource_command", choices=RESOURCE_COMMANDS)
    run.add_argument(
        "--request",
        default="-",
        help="Path to the JSON request, or '-' for stdin (default).",
    )
    run.add_argument(
        "--dir",
        type=Path,
        default=None,
        help="Work directory handed to the resource. Defaults to a temp dir that is removed after the run.",
    )
    run.add_argument("--runner", choices=runner_names(), default=None)

    sub.add_parser("steps", help="List the scenario step patterns.")
    return parser


def _read_request(source: str) -> dict:
    raw = sys.stdin.read() if source == "-" else Path(source).read_text()
    payload = json.loads(raw) if raw.strip() else {}
    if not isinstance(payload, dict):
        raise ValueError("Request must be a JSON object")
    return payload


def _run(args: argparse.Namespace) -> int:
    config = load_runner_config()
    if args.runner:
        config = dataclasses.replace(config, mode=args.runner)
    runner = create_runner(config)

    request = request_from_payload(_read_request(args.request))

    if args.dir is None:
        with tempfile.TemporaryDirectory(prefix="npm-resource-e2e-") as tmp:
            response = runner.run(args.resource_command, Path(tmp), request)
    else:
        args.dir.mkdir(parents=True, exist_ok=True)
        print(f"work dir: {args.dir}", file=sys.stderr)
        response = runner.run(args.resource_command, args.dir, request)

    sys.stdout.write(response.stdout)
    sys.stderr.write(response.stderr)
    return response.exit_code


def main() -> None:
    """CLI entry point."""
    args = _build_parser().parse_args()

    if args.command == "steps":
        for pattern in STEPS.patterns():
            print(pattern)
        sys.exit(0)

    try:
        code = _run(args)
    except (ConfigError, ValueError, OSError, RuntimeError) as exc:
        print(str(exc), file=sys.stderr)
        sys.exit(1)
    sys.exit(code)
