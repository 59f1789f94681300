"""Main CLI entry point for the xml2xlsx command-line tool.

Usage:
    xml2xlsx convert -i data.xml
    xml2xlsx convert -i STM32F407.svd -o registers.xlsx --batch-size 4096
    xml2xlsx convert -i data.xml --mode generic --config settings.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from xml2xlsx import __version__
from xml2xlsx.api import convert_file, derive_output_path
from xml2xlsx.shared.config import ConfigError, ConversionConfig
from xml2xlsx.shared.errors import ConversionError
from xml2xlsx.shared.logging import configure_logging
from xml2xlsx.shared.result import ConversionMode, ConversionResult

MODES = {
    "auto": None,
    "generic": ConversionMode.GENERIC,
    "svd": ConversionMode.SVD,
}

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130  # Standard exit code for SIGINT


def add_verbosity_arguments(parser: argparse.ArgumentParser, default: Any) -> None:
    """Add the -v/-q flags accepted before and after the subcommand."""
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        default=default,
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        default=default,
        help="Quiet output"
    )


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="xml2xlsx",
        description=(
            "Convert large XML files to Excel workbooks with buffered streaming"
        ),
    )
    parser.add_argument("--version", action="version", version=__version__)
    add_verbosity_arguments(parser, default=False)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    convert_parser = subparsers.add_parser(
        "convert",
        help="Convert XML file to Excel",
        description=(
            "Auto-detect repeating XML elements and convert to Excel table. Each "
            "repeating element becomes a row, child elements become columns. "
            "CMSIS-SVD files are split into Peripherals, Registers and Fields sheets."
        ),
    )
    convert_parser.add_argument(
        "--input", "-i",
        type=Path,
        required=True,
        help="Input XML file path"
    )
    convert_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output Excel file path (default: input file with .xlsx)"
    )
    convert_parser.add_argument(
        "--buffer-size", "-b",
        type=int,
        help="XML parser buffer size in bytes"
    )
    convert_parser.add_argument(
        "--batch-size",
        type=int,
        help="Rows buffered per sheet before flushing"
    )
    convert_parser.add_argument(
        "--sample-size",
        type=int,
        help="Rows sampled to determine columns in generic mode"
    )
    convert_parser.add_argument(
        "--mode",
        choices=sorted(MODES),
        default="auto",
        help="Conversion mode (default: auto)"
    )
    convert_parser.add_argument(
        "--config", "-c",
        type=Path,
        help="JSON configuration file"
    )
    convert_parser.add_argument(
        "--report",
        choices=["text", "json"],
        default="text",
        help="Summary format printed after conversion (default: text)"
    )
    # Given after the subcommand; absent flags keep the top-level values
    add_verbosity_arguments(convert_parser, default=argparse.SUPPRESS)

    return parser


def build_config(args: argparse.Namespace) -> ConversionConfig:
    """Load the config file, then apply command-line overrides."""
    config = ConversionConfig.from_file(args.config) if args.config else ConversionConfig()
    overrides: Dict[str, Any] = {}
    if args.buffer_size is not None:
        overrides["buffer_size"] = args.buffer_size
    if args.batch_size is not None:
        overrides["batch_size"] = args.batch_size
    if args.sample_size is not None:
        overrides["header_sample_size"] = args.sample_size
    return config.override(**overrides) if overrides else config


def format_summary(result: ConversionResult, format_type: str) -> str:
    """Format a conversion result for output."""
    if format_type == "json":
        return json.dumps(
            {
                "output": str(result.output_path),
                "mode": result.mode.name.lower(),
                "repeating_element": result.repeating_element,
                "sheets": result.sheets,
                "headers": result.headers,
                "total_rows": result.total_rows,
                "processing_time_ms": round(result.processing_time_ms, 1),
            },
            indent=2,
        )

    lines = ["✓ Conversion completed successfully!"]
    if result.repeating_element:
        lines.append(f"  Repeating element: <{result.repeating_element}>")
    for sheet, rows in result.sheets.items():
        columns = len(result.headers.get(sheet, []))
        lines.append(f"  {sheet}: {rows} rows, {columns} columns")
    lines.append(f"  Time: {result.processing_time_ms:.1f}ms")
    return "\n".join(lines)


def cmd_convert(args: argparse.Namespace) -> int:
    """Handle convert command."""
    try:
        config = build_config(args)
    except ConfigError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return EXIT_FAILURE

    if not args.input.is_file():
        print(f"Input file does not exist: {args.input}", file=sys.stderr)
        return EXIT_FAILURE

    output = args.output or derive_output_path(args.input)
    if not args.quiet:
        print("Starting conversion...")
        print(f"Input:  {args.input}")
        print(f"Output: {output}")

    try:
        result = convert_file(args.input, output, config, MODES[args.mode])
    except ConversionError as e:
        print(f"Conversion failed: {e}", file=sys.stderr)
        return EXIT_FAILURE

    if not args.quiet or args.report == "json":
        print(format_summary(result, args.report))
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_FAILURE

    if args.verbose:
        configure_logging(logging.DEBUG)
    elif args.quiet:
        configure_logging(logging.ERROR)
    else:
        configure_logging(logging.INFO)

    try:
        if args.command == "convert":
            return cmd_convert(args)
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
