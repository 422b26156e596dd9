"""
Command-line argument parsing for the i18n key extractor.

Every option can come from a YAML configuration file; flags given on the
command line override the file's values.
"""

import argparse
from pathlib import Path
from typing import NamedTuple

from ..core.version import get_version


class ParsedArgs(NamedTuple):
    """Type-safe container for command-line arguments."""

    config_file: Path | None
    base_path: Path | None
    source: list[str]
    exclude: list[str]
    lang: list[str]
    assets_path: str | None
    format: str | None
    filename: str | None
    key_separator: str | None
    key_value_separator: str | None
    verbose: bool
    ci_mode: bool
    check: bool


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create the argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="i18n-extract",
        description="Extract translation keys from source files and update the translation assets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  i18n-extract --lang en-US --lang it-IT
    Scan ./src and update ./i18n/<lang>/*.json

  i18n-extract --config i18n-extract.yml
    Read the options from a YAML file

  i18n-extract --config i18n-extract.yml --check
    Exit with status 1 when the assets are not up to date
""",
    )

    _ = parser.add_argument(
        "--config",
        dest="config_file",
        type=Path,
        default=None,
        help="YAML file with extraction options",
        metavar="PATH",
    )
    _ = parser.add_argument(
        "--base-path",
        type=Path,
        default=None,
        help="Project root; other paths are relative to it (default: .)",
        metavar="PATH",
    )
    _ = parser.add_argument(
        "--source",
        action="append",
        default=[],
        help="Source directory to scan, relative to the base path (repeatable, default: src)",
        metavar="PATH",
    )
    _ = parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        help="Directory or file to skip, relative to the base path (repeatable)",
        metavar="PATH",
    )
    _ = parser.add_argument(
        "--lang",
        action="append",
        default=[],
        help="Supported language tag, e.g. en-US (repeatable)",
        metavar="TAG",
    )
    _ = parser.add_argument(
        "--assets-path",
        default=None,
        help="Assets directory, relative to the base path (default: i18n)",
        metavar="PATH",
    )
    _ = parser.add_argument(
        "--format",
        default=None,
        help="Asset format (default: json)",
    )
    _ = parser.add_argument(
        "--filename",
        default=None,
        help="Base asset filename without extension (default: app)",
    )
    _ = parser.add_argument(
        "--key-separator",
        default=None,
        help="Separator of key path segments (default: .)",
    )
    _ = parser.add_argument(
        "--key-value-separator",
        default=None,
        help="Separator between a key and its default value (default: @@)",
    )
    _ = parser.add_argument(
        "--verbose", action="store_true", help="Enable verbose logging"
    )
    _ = parser.add_argument(
        "--ci-mode",
        action="store_true",
        help="Enable CI/CD mode with plain log output",
    )
    _ = parser.add_argument(
        "--check",
        action="store_true",
        help="Write nothing; exit with status 1 if any asset would change",
    )
    _ = parser.add_argument(
        "--version", action="version", version=f"%(prog)s {get_version()}"
    )

    return parser


def parse_arguments(args: list[str] | None = None) -> ParsedArgs:
    """
    Parse command-line arguments.

    Args:
        args: List of arguments to parse (defaults to sys.argv[1:])

    Returns:
        Parsed arguments in a type-safe container

    Raises:
        SystemExit: If argument parsing fails or --help is requested
    """
    parsed = create_argument_parser().parse_args(args)

    # argparse returns Any types
    return ParsedArgs(
        config_file=parsed.config_file,  # pyright: ignore[reportAny]
        base_path=parsed.base_path,  # pyright: ignore[reportAny]
        source=parsed.source or [],  # pyright: ignore[reportAny]
        exclude=parsed.exclude or [],  # pyright: ignore[reportAny]
        lang=parsed.lang or [],  # pyright: ignore[reportAny]
        assets_path=parsed.assets_path,  # pyright: ignore[reportAny]
        format=parsed.format,  # pyright: ignore[reportAny]
        filename=parsed.filename,  # pyright: ignore[reportAny]
        key_separator=parsed.key_separator,  # pyright: ignore[reportAny]
        key_value_separator=parsed.key_value_separator,  # pyright: ignore[reportAny]
        verbose=parsed.verbose,  # pyright: ignore[reportAny]
        ci_mode=parsed.ci_mode,  # pyright: ignore[reportAny]
        check=parsed.check,  # pyright: ignore[reportAny]
    )
