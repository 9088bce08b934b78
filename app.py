#!/usr/bin/env python3
"""
Java Version Finder - Command Line Interface

A tool to find the minimum Java version required to run given .class and
.jar files. Every file is inspected independently; one failing input does
not stop the others from being reported.
"""

import argparse
import logging
import sys
from typing import List, Optional

from config.settings import load_configuration, validate_configuration
from core.error_handling import ErrorHandler, JavaVersionError
from core.inspector import JavaVersionInspector

DESCRIPTION = "A tool to find the minimum Java version required to run given .class and .jar files."


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="java-version-finder",
        description=DESCRIPTION
    )
    parser.add_argument("files", nargs="*", metavar="file", help="'.class' or '.jar' files to inspect")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every inspected entry")
    parser.add_argument("--log-file", default=None, help="Also write logs to this file")
    parser.add_argument("--config", default=None, help="JSON configuration file with the supported version ranges")
    return parser


def setup_logging(level: int) -> None:
    """Configure root logging for the command line."""
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr
    )


def run(paths: List[str], inspector: JavaVersionInspector) -> int:
    """
    Inspect every path in order and print one line per input.

    Returns:
        Process exit status: 0 if every input succeeded, 1 otherwise
    """
    failures = 0
    for path in paths:
        try:
            result = inspector.inspect(path)
        except JavaVersionError as e:
            failures += 1
            print(f"{path}: error: {e}", file=sys.stderr)
            continue
        print(result.describe())

    return 1 if failures else 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.files:
        print(f"{DESCRIPTION}\n\nUsage: {parser.prog} [file ...]")
        return 0

    try:
        config = load_configuration(args.config)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    validation = validate_configuration(config)
    if not validation.is_valid:
        print(f"Configuration error: {validation.error_message}", file=sys.stderr)
        return 1

    log_level = logging.DEBUG if args.verbose else config.get_log_level()
    setup_logging(log_level)

    error_handler = ErrorHandler(args.log_file or config.log_file, log_level, console=False)
    inspector = JavaVersionInspector(config, error_handler)

    status = run(args.files, inspector)
    if status:
        summary = error_handler.get_error_summary()
        logging.getLogger("JavaVersionFinder").info(
            f"{summary['total_errors']} of {len(args.files)} inputs failed: {summary['by_category']}"
        )
    return status


if __name__ == "__main__":
    sys.exit(main())
