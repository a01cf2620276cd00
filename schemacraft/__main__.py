"""CLI entry point for schemacraft.

Commands:
    validate   Validate a JSON record against a serialized schema document
    compile    Print the compiled schema document and rule table
    env        List configuration variables and their current values
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import ValidationError

from schemacraft.config import (
    EnvVar,
    get_environment,
    get_environment_info,
    list_environment_variables,
)
from schemacraft.core import get_logger, setup_logging
from schemacraft.schema import SchemaCompiler
from schemacraft.validation import UnknownRuleError

# Load environment variables from .env file
load_dotenv()

logger = get_logger("schemacraft.cli")

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_ERROR = 2


# =============================================================================
# Helpers
# =============================================================================


def _read_json(path: Path) -> Any:
    with path.open(encoding="utf-8") as handle:
        return json.load(handle)


def _read_json_object(path: Path, what: str) -> dict[str, Any]:
    data = _read_json(path)
    if not isinstance(data, dict):
        raise ValueError(f"{what} must be a JSON object: {path}")
    return data


def _load_schema(args: argparse.Namespace) -> SchemaCompiler:
    schema = SchemaCompiler.from_array(_read_json_object(args.schema, "Schema"))
    if getattr(args, "messages", None):
        schema.with_messages(_read_json_object(args.messages, "Messages"))
    if getattr(args, "attributes", None):
        schema.with_attributes(_read_json_object(args.attributes, "Attributes"))
    logger.info(f"Loaded {len(schema)} properties from {args.schema}")
    return schema


# =============================================================================
# Commands
# =============================================================================


def cmd_validate(args: argparse.Namespace) -> int:
    """Handle the validate command."""
    try:
        schema = _load_schema(args)
        record = _read_json_object(args.record, "Record")
    except (OSError, json.JSONDecodeError, ValidationError, ValueError) as e:
        logger.error(f"Could not load input: {e}")
        return EXIT_ERROR

    try:
        result = schema.validate(record)
    except UnknownRuleError as e:
        logger.error(f"Invalid schema: {e}")
        return EXIT_ERROR

    print(result.model_dump_json(indent=args.indent))

    if not result.valid:
        logger.info(f"Record failed validation on {len(result.errors)} field(s)")
        return EXIT_INVALID
    return EXIT_OK


def cmd_compile(args: argparse.Namespace) -> int:
    """Handle the compile command."""
    try:
        schema = _load_schema(args)
    except (OSError, json.JSONDecodeError, ValidationError, ValueError) as e:
        logger.error(f"Could not load schema: {e}")
        return EXIT_ERROR

    output = {"schema": schema.to_array(), "rules": schema.describe_rules()}
    print(json.dumps(output, indent=args.indent))
    return EXIT_OK


def cmd_env(args: argparse.Namespace) -> int:
    """Handle the env command."""
    variables = list_environment_variables(args.category)
    if not variables:
        logger.error(f"No variables in category: {args.category}")
        return EXIT_ERROR

    for var in variables:
        info = get_environment_info(var)
        value = get_environment(var)
        print(f"{info.name}={value}  [{info.category}] {info.description}")
    return EXIT_OK


# =============================================================================
# Parser
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schemacraft",
        description="Validate records against property schema documents",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate a JSON record against a schema document",
    )
    validate_parser.add_argument("schema", type=Path, help="Schema document (JSON)")
    validate_parser.add_argument("record", type=Path, help="Record to validate (JSON)")
    validate_parser.add_argument(
        "--messages",
        "-m",
        type=Path,
        default=None,
        help="Custom messages keyed by 'field.rule' or 'rule' (JSON)",
    )
    validate_parser.add_argument(
        "--attributes",
        "-a",
        type=Path,
        default=None,
        help="Display labels keyed by field name (JSON)",
    )
    validate_parser.add_argument("--indent", type=int, default=2, help="JSON indent")
    validate_parser.set_defaults(func=cmd_validate)

    compile_parser = subparsers.add_parser(
        "compile",
        help="Print the compiled schema document and rule table",
    )
    compile_parser.add_argument("schema", type=Path, help="Schema document (JSON)")
    compile_parser.add_argument("--indent", type=int, default=2, help="JSON indent")
    compile_parser.set_defaults(func=cmd_compile)

    env_parser = subparsers.add_parser(
        "env",
        help="List configuration variables",
    )
    env_parser.add_argument(
        "--category",
        "-c",
        type=str,
        default=None,
        help="Only show one category (logging, validation)",
    )
    env_parser.set_defaults(func=cmd_env)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)

    if not getattr(args, "func", None):
        parser.print_help()
        return EXIT_ERROR

    try:
        setup_logging(get_environment(EnvVar.SCHEMACRAFT_LOG_LEVEL))
    except ValueError as e:
        setup_logging()
        logger.warning(f"{e}; using default log level")

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
