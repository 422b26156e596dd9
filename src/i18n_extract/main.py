"""
Main entry point for the i18n key extractor.

This module parses the command line, sets up logging, resolves the options
and runs the extraction pipeline, translating errors into exit codes.
"""

import logging
import sys

import yaml

from .config.manager import ConfigManager
from .config.schema import ExtractOptions
from .extract.pipeline import log_diagnostics, run_extraction
from .utils.cli.args import ParsedArgs, parse_arguments
from .utils.core.exceptions import ErrorSeverity, ExtractError

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, ci_mode: bool = False) -> None:
    """
    Set up logging configuration.

    Args:
        verbose: Enable verbose logging
        ci_mode: Use plain messages suited to CI logs
    """
    level = logging.DEBUG if verbose else logging.INFO
    if ci_mode:
        logging.basicConfig(
            level=level,
            format="::%(levelname)s::%(message)s" if verbose else "%(message)s",
            force=True,
        )
    else:
        logging.basicConfig(
            level=level,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            force=True,
        )


def log_extract_error(error: ExtractError, verbose: bool = False) -> None:
    """
    Log an extraction error at the level matching its severity.

    Args:
        error: The error that ended the run
        verbose: Also log the traceback
    """
    level = logging.CRITICAL if error.severity == ErrorSeverity.CRITICAL else logging.ERROR
    logger.log(level, f"[{error.category.value}] {error.user_message}")
    if verbose:
        logger.log(level, "Full traceback:", exc_info=error)


def resolve_options(args: ParsedArgs) -> ExtractOptions:
    """
    Build the run options from the config file and command-line overrides.

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ConfigurationError: If the resulting options are invalid
    """
    options = ConfigManager.load_config(args.config_file) if args.config_file else None
    return ConfigManager.merge_overrides(
        options,
        base_path=args.base_path,
        source_files_paths=args.source,
        excluded_paths=args.exclude,
        supported_langs=args.lang,
        assets_path=args.assets_path,
        format=args.format,
        filename=args.filename,
        key_separator=args.key_separator,
        key_value_separator=args.key_value_separator,
    )


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the extraction command.

    Returns:
        Exit code (0 for success, 1 for error or, in check mode, pending changes)
    """
    args = parse_arguments(argv)
    setup_logging(args.verbose, args.ci_mode)

    try:
        options = resolve_options(args)
        result = run_extraction(options, write=not args.check)
    except ExtractError as e:
        log_extract_error(e, args.verbose)
        return 1
    except (FileNotFoundError, yaml.YAMLError) as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        return 1

    log_diagnostics(result)

    if args.check:
        if result.changed_files:
            logger.info("Translation assets need update:")
            for path in result.changed_files:
                logger.info(f"  {path}")
            return 1
        logger.info("Translation assets are up to date")

    return 0


if __name__ == "__main__":
    sys.exit(main())
