"""argparse command router for the validate-options CLI.

Commands
- ``check``: validate an options file against a requirement document.
- ``explain``: list the requirements a document declares.
- ``classify``: print the type tag of a JSON literal.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import TYPE_CHECKING

import structlog

from validate_options.config import describe_requirement, load_options, load_requirements
from validate_options.engine import OptionsValidator
from validate_options.errors import ValidationFailure
from validate_options.type_tags import classify
from validate_options.ui.render import create_renderer

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence


class CLIError(RuntimeError):
    """User-facing CLI failure with an explicit exit code."""

    def __init__(self, message: str, *, exit_code: int = 2) -> None:
        super().__init__(message)
        self.exit_code = exit_code


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse command router."""

    parser = argparse.ArgumentParser(
        prog="validate-options",
        description=(
            "validate-options — check option payloads against declarative requirements.\n\n"
            "Common workflows:\n"
            "  validate-options check opts.json -r requirements.toml\n"
            "  validate-options explain -r requirements.toml\n"
            "  validate-options classify '[1, 2]'\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Emit machine-readable JSON on stdout.",
    )
    common.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=False,
        help="Emit debug log events on stderr.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser(
        "check",
        parents=[common],
        help="Validate an options file",
        description="Validate an options file and print the normalized options.",
    )
    check_parser.add_argument("options_file", help="Options file (.json, .toml, .yaml, .yml).")
    check_parser.add_argument(
        "--requirements",
        "-r",
        dest="requirements_file",
        required=True,
        help="Requirement document (.json, .toml, .yaml, .yml).",
    )
    check_parser.add_argument(
        "--all",
        dest="report_all",
        action="store_true",
        default=False,
        help="Report every failing key instead of stopping at the first.",
    )
    check_parser.set_defaults(handler=_cmd_check)

    explain_parser = subparsers.add_parser(
        "explain",
        parents=[common],
        help="List the requirements a document declares",
    )
    explain_parser.add_argument(
        "--requirements",
        "-r",
        dest="requirements_file",
        required=True,
        help="Requirement document (.json, .toml, .yaml, .yml).",
    )
    explain_parser.set_defaults(handler=_cmd_explain)

    classify_parser = subparsers.add_parser(
        "classify",
        parents=[common],
        help="Print the type tag of a JSON literal",
    )
    classify_parser.add_argument(
        "value",
        help="JSON literal, e.g. '\"text\"', '3', '[1]', 'null'.",
    )
    classify_parser.set_defaults(handler=_cmd_classify)

    return parser


def run_cli(argv: Sequence[str] | None = None) -> int:
    """Parse argv, route to a command handler, and return process exit code."""

    parser = build_parser()
    namespace = parser.parse_args(list(argv) if argv is not None else None)
    handler = getattr(namespace, "handler", None)
    if not callable(handler):
        parser.print_help(sys.stderr)
        return 2

    _configure_logging(verbose=bool(getattr(namespace, "verbose", False)))
    try:
        result = handler(namespace)
    except CLIError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return exc.exit_code
    return int(result)


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _cmd_check(args: argparse.Namespace) -> int:
    validator = OptionsValidator(load_requirements(args.requirements_file))
    options = load_options(args.options_file)

    if args.report_all:
        result = validator.check(options)
        if result.is_valid:
            return _emit_valid(args, result.options or {})
        issues = [{"key": issue.key, "message": issue.message} for issue in result.issues]
        if args.json:
            _emit_json({"command": "check", "valid": False, "issues": issues})
        else:
            renderer = create_renderer()
            renderer.text("invalid options:")
            renderer.items([item["message"] for item in issues])
        return 1

    try:
        validated = validator.validate(options)
    except ValidationFailure as exc:
        if args.json:
            _emit_json(
                {
                    "command": "check",
                    "valid": False,
                    "issues": [{"key": exc.key, "message": exc.message}],
                }
            )
        else:
            print(f"error: {exc.message}", file=sys.stderr)
        return 1
    return _emit_valid(args, validated)


def _cmd_explain(args: argparse.Namespace) -> int:
    requirements = load_requirements(args.requirements_file)
    described = {key: describe_requirement(item) for key, item in requirements.items()}

    if args.json:
        _emit_json({"command": "explain", "requirements": described})
        return 0

    rows: list[list[str]] = []
    for key, summary in described.items():
        types = summary["types"]
        rows.append(
            [
                key,
                ", ".join(types) if types else "(any)",
                json.dumps(summary["default"], default=str) if summary["has_default"] else "-",
                summary["message"] or "-",
            ]
        )
    renderer = create_renderer()
    if not rows:
        renderer.text("no requirements declared")
        return 0
    renderer.table(
        ("key", "types", "default", "message"),
        rows,
        title=f"requirements: {args.requirements_file}",
    )
    return 0


def _cmd_classify(args: argparse.Namespace) -> int:
    try:
        value = json.loads(args.value)
    except json.JSONDecodeError as exc:
        raise CLIError(f"value is not a JSON literal: {exc}") from exc

    tag = classify(value)
    if args.json:
        _emit_json({"command": "classify", "type": tag.value})
    else:
        create_renderer().text(tag.value)
    return 0


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _emit_valid(args: argparse.Namespace, validated: Mapping[str, object]) -> int:
    if args.json:
        _emit_json({"command": "check", "valid": True, "options": dict(validated)})
    else:
        create_renderer().text(
            json.dumps(validated, indent=2, sort_keys=True, ensure_ascii=False, default=str)
        )
    return 0


def _emit_json(payload: Mapping[str, object]) -> None:
    """Emit a JSON payload to stdout with deterministic formatting."""

    print(
        json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str)
    )


def _configure_logging(*, verbose: bool) -> None:
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if verbose else logging.WARNING
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


__all__ = ["CLIError", "build_parser", "run_cli"]
