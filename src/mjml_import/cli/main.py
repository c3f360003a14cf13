"""Main CLI entry point for the mjml-import command-line tool.

Imports MJML files into Block tree JSON, shows the repaired markup the parser
would see, and checks which files import cleanly.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from mjml_import import __version__
from mjml_import.api import MarkupImporter
from mjml_import.repair import preprocess_with_report
from mjml_import.shared.config import STRICT_MAX_INPUT_LENGTH, ConfigError, ImportConfig
from mjml_import.shared.logging import get_logger

logger = get_logger(__name__, None, "cli")


def load_config(config_path: Optional[Path], strict: bool = False) -> ImportConfig:
    """Load the import configuration for a command."""
    config = ImportConfig.strict() if strict else ImportConfig.default()
    if config_path is not None:
        config = ImportConfig.from_file(config_path)
        if strict and config.max_input_length is None:
            config = config.override(max_input_length=STRICT_MAX_INPUT_LENGTH)
    return config


def import_paths(importer: MarkupImporter, paths: List[Path]) -> List[Dict[str, Any]]:
    """Import each file and collect one record per file."""
    records = []
    for path in paths:
        try:
            raw = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            records.append({"file": str(path), "success": False,
                            "error": {"kind": "io", "detail": str(e)}})
            continue

        result = importer.import_markup(raw)
        record: Dict[str, Any] = {"file": str(path), **result.to_dict()}
        records.append(record)
    return records


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="mjml-import",
        description="Repair and import MJML markup into the email editor's Block tree"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Import command
    import_parser = subparsers.add_parser("import", help="Convert MJML files to Block JSON")
    import_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="MJML files to import"
    )
    import_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    import_parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation (default: 2)"
    )
    import_parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path"
    )
    import_parser.add_argument(
        "--strict",
        action="store_true",
        help="Bound input size"
    )

    # Preprocess command
    preprocess_parser = subparsers.add_parser(
        "preprocess", help="Print the repaired markup"
    )
    preprocess_parser.add_argument(
        "path",
        type=Path,
        help="MJML file to repair"
    )
    preprocess_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )

    # Validate command
    validate_parser = subparsers.add_parser(
        "validate", help="Check which files import cleanly"
    )
    validate_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="MJML files to validate"
    )
    validate_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format"
    )
    validate_parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path"
    )

    # Global options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def format_validation(records: List[Dict[str, Any]], format_type: str) -> str:
    """Format validation records for output."""
    if format_type == "json":
        return json.dumps([
            {
                "file": record["file"],
                "valid": record["success"],
                "repair_count": record.get("repair_count", 0),
                "error": record.get("error"),
            }
            for record in records
        ], indent=2)

    valid_count = sum(1 for record in records if record["success"])
    lines = [f"Validated {len(records)} files, {valid_count} valid", "-" * 50]
    for record in records:
        status = "✓" if record["success"] else "✗"
        repairs = record.get("repair_count", 0)
        lines.append(f"{status} {record['file']} ({repairs} repairs)")
        error = record.get("error")
        if error:
            lines.append(f"   {error['kind']} error: {error['detail']}")
    return "\n".join(lines)


def _write_output(text: str, output: Optional[Path]) -> int:
    if output is None:
        print(text)
        return 0
    try:
        output.write_text(text, encoding="utf-8")
    except OSError as e:
        print(f"Error writing output: {e}", file=sys.stderr)
        return 1
    print(f"Results written to {output}", file=sys.stderr)
    return 0


def cmd_import(args: argparse.Namespace) -> int:
    """Handle import command."""
    importer = MarkupImporter(load_config(args.config, args.strict))
    records = import_paths(importer, args.paths)

    if len(records) == 1 and records[0]["success"]:
        payload: Any = records[0]["block"]
    else:
        payload = records
        for record in records:
            if not record["success"]:
                error = record["error"]
                print(f"{record['file']}: {error['kind']} error: {error['detail']}",
                      file=sys.stderr)

    status = _write_output(json.dumps(payload, indent=args.indent), args.output)
    if status:
        return status
    return 0 if all(record["success"] for record in records) else 1


def cmd_preprocess(args: argparse.Namespace) -> int:
    """Handle preprocess command."""
    try:
        raw = args.path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"Could not read {args.path}: {e}", file=sys.stderr)
        return 1

    result = preprocess_with_report(raw)
    print(f"Applied {result.repair_count} repairs", file=sys.stderr)
    return _write_output(result.text, args.output)


def cmd_validate(args: argparse.Namespace) -> int:
    """Handle validate command."""
    importer = MarkupImporter(load_config(args.config))
    records = import_paths(importer, args.paths)
    print(format_validation(records, args.format))
    return 0 if all(record["success"] for record in records) else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # Set up logging verbosity
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR)

    # Route to appropriate command handler
    try:
        if args.command == "import":
            return cmd_import(args)
        if args.command == "preprocess":
            return cmd_preprocess(args)
        if args.command == "validate":
            return cmd_validate(args)
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1

    except ConfigError as e:
        logger.warning("Invalid configuration", extra={"error": str(e)})
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
