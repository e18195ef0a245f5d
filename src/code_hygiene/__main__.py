"""CLI entry-point for code_hygiene.

Usage:
    python -m code_hygiene [--config analysis-config.yaml] [--dir DIR] [--output DIR]
                           [--code-quality-report FILE] [--fail-on SEVERITY] [-v | -q]
    python -m code_hygiene analyzers
    python -m code_hygiene validate <instance.json> <schema_name>
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import jsonschema

from code_hygiene import __version__
from code_hygiene.core.config import DEFAULT_CONFIG_FILE, load_config
from code_hygiene.core.errors import ConfigError
from code_hygiene.core.runner import run_analysis
from code_hygiene.model import Severity
from code_hygiene.utils.exit_codes import ExitCode


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="code-hygiene",
        description="Find merge-conflict markers, commented-out code and silent catch blocks.",
    )
    sub = p.add_subparsers(dest="command")

    # ── default (run) mode ──────────────────────────────────────────
    p.add_argument(
        "--config",
        default=DEFAULT_CONFIG_FILE,
        help=f"YAML configuration file (default: {DEFAULT_CONFIG_FILE}).",
    )
    p.add_argument("--dir", default=None, help="Scan root; overrides 'dir' in the config.")
    p.add_argument(
        "--output",
        default=None,
        help="Directory for <analyzer>-analysis.json artifacts; overrides 'output'.",
    )
    p.add_argument(
        "--code-quality-report",
        dest="code_quality_report",
        default=None,
        help="Path of the unified Code Quality feed; overrides 'code_quality_report'.",
    )
    p.add_argument(
        "--fail-on",
        dest="fail_on",
        choices=[s.value for s in Severity],
        default=None,
        help="Exit 1 when any issue is at or above this severity.",
    )
    verbosity = p.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Errors only.")
    p.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    # ── analyzers ───────────────────────────────────────────────────
    sub.add_parser("analyzers", help="List the registered analyzers.")

    # ── validate ────────────────────────────────────────────────────
    val_p = sub.add_parser(
        "validate",
        help="Validate a JSON file against a bundled schema.",
    )
    val_p.add_argument("instance", type=Path, help="JSON file to validate.")
    val_p.add_argument(
        "schema_name",
        help="Schema filename, e.g. code_quality.schema.json.",
    )
    return p


def _configure_logging(args: argparse.Namespace) -> None:
    level = logging.WARNING
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _list_analyzers() -> int:
    from code_hygiene.analyzers import ANALYZER_CLASSES, get_analyzer_class

    for key in ANALYZER_CLASSES:
        cls = get_analyzer_class(key)
        print(f"{key:<10} {cls.name:<20} {cls.description}")
    return ExitCode.SUCCESS


def _validate(instance: Path, schema_name: str) -> int:
    from code_hygiene.contracts.load import validate_file

    try:
        validate_file(instance, schema_name)
    except (OSError, json.JSONDecodeError) as e:
        print(f"error: cannot read {instance}: {e}", file=sys.stderr)
        return ExitCode.ERROR
    except jsonschema.ValidationError as e:
        print(f"invalid: {e.message}", file=sys.stderr)
        return ExitCode.VIOLATION
    print(f"valid: {instance}")
    return ExitCode.SUCCESS


def main(argv: list[str] | None = None) -> int:
    """Entry-point — returns an exit code (0 = clean, 1 = gate tripped, 2 = error)."""
    args = _build_parser().parse_args(argv)
    _configure_logging(args)

    if args.command == "analyzers":
        return _list_analyzers()
    if args.command == "validate":
        return _validate(args.instance, args.schema_name)

    try:
        config = load_config(args.config).with_overrides(
            dir=args.dir,
            output=args.output,
            code_quality_report=args.code_quality_report,
            fail_on=args.fail_on,
        )
        outcome = run_analysis(config, config_file=args.config)
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return ExitCode.ERROR
    return outcome.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
