"""Main CLI entry point for the xml-roundtrip-validator command-line tool.

Validates a single XML document, optionally gzip-compressed, and reports
every construct that would change if the document were decoded and
re-encoded.
"""

import argparse
import gzip
import json
import logging
import sys
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional

from xml_roundtrip_validator import __version__
from xml_roundtrip_validator.shared.config import ConfigError, ValidatorConfig
from xml_roundtrip_validator.shared.errors import (
    ValidatorError,
    XMLSyntaxError,
    XMLValidationError,
)
from xml_roundtrip_validator.shared.logging import get_logger
from xml_roundtrip_validator.validation.validator import RoundtripValidator

SUCCESS_MESSAGE = "Document validated without errors"


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="xml-roundtrip-validator",
        description="Detect XML constructs that change when a document is decoded and re-encoded"
    )

    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "file",
        nargs="?",
        type=Path,
        help="XML document to validate (.gz files are decompressed)"
    )
    parser.add_argument(
        "--all", "-a",
        action="store_true",
        help="Validate the entire document instead of bailing out on the first error"
    )
    parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format (default: text)"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="JSON configuration file"
    )
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Accept unquoted or valueless attributes and unknown entities in the input"
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    verbosity.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def finding_to_dict(finding: ValidatorError) -> Dict[str, Any]:
    """Convert a finding into a JSON-serializable dictionary."""
    data: Dict[str, Any] = {
        "type": type(finding).__name__,
        "message": str(finding),
    }
    if isinstance(finding, XMLValidationError):
        data.update({
            "start": finding.start,
            "end": finding.end,
            "line": finding.line,
            "column": finding.column,
            "cause": type(finding.cause).__name__,
        })
    elif isinstance(finding, XMLSyntaxError):
        data["line"] = finding.line
    return data


def format_findings(findings: List[ValidatorError], format_type: str) -> str:
    """Format findings for output."""
    if format_type == "json":
        return json.dumps([finding_to_dict(f) for f in findings], indent=2)
    return "\n".join(str(f) for f in findings)


def open_document(path: Path) -> BinaryIO:
    """Open a document for reading, decompressing ``.gz`` files."""
    if path.suffix.lower() == ".gz":
        return gzip.open(path, "rb")
    return path.open("rb")


def load_config(args: argparse.Namespace) -> ValidatorConfig:
    config = ValidatorConfig.from_file(args.config) if args.config else ValidatorConfig.default()
    if args.lenient and config.strict:
        config = ValidatorConfig(
            strict=False,
            buffer_size=config.buffer_size,
            correlation_id=config.correlation_id
        )
    return config


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate the requested document and report findings."""
    logger = get_logger(__name__, None, "cli")

    try:
        config = load_config(args)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    validator = RoundtripValidator(config)
    try:
        with open_document(args.file) as document:
            result = validator.scan(document, fail_fast=not args.all)
    except (OSError, EOFError) as e:
        # gzip reports truncated or corrupt archives as OSError or EOFError
        logger.debug("Could not read document", extra={"file": str(args.file), "error": str(e)})
        print(str(e), file=sys.stderr)
        return 1

    if args.format == "json":
        print(format_findings(result.findings, "json"))
    elif not result.findings:
        print(SUCCESS_MESSAGE)
    else:
        print(format_findings(result.findings, "text"), file=sys.stderr)

    return 0 if not result.findings else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if args.file is None:
        print("Specify a filename", file=sys.stderr)
        return 1

    # Set up logging verbosity
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR)

    try:
        return cmd_validate(args)
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
