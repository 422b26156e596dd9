"""Configuration manager for the i18n key extractor.

This module loads extraction options from YAML files and validates them
with the Pydantic schema, applying command-line overrides on top.
"""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..config.schema import ExtractOptions
from ..utils.core.exceptions import ConfigurationError


logger = logging.getLogger(__name__)


class ConfigManager:
    """
    Configuration manager for extraction option files.

    Options can come from a YAML file, from keyword overrides (usually the
    command line), or both; overrides always take precedence.
    """

    @staticmethod
    def load_config(config_path: Path) -> ExtractOptions:
        """
        Load and validate extraction options from a YAML file.

        Relative ``base_path`` values are resolved against the directory
        containing the configuration file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            ExtractOptions: Validated options

        Raises:
            FileNotFoundError: If the config file doesn't exist
            yaml.YAMLError: If the YAML syntax is invalid
            ConfigurationError: If the options fail validation
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with config_path.open("r", encoding="utf-8") as f:
                raw_config_data: object = yaml.safe_load(f)  # pyright: ignore[reportAny]
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML syntax in {config_path}: {e}") from e

        if raw_config_data is None:
            config_data: dict[str, object] = {}
        elif isinstance(raw_config_data, dict):
            config_data = raw_config_data  # pyright: ignore[reportUnknownVariableType]
        else:
            raise ConfigurationError(
                f"Configuration file must contain a YAML dictionary, got {type(raw_config_data).__name__}"
            )

        parsed_data = ConfigManager._parse_config_data(config_data, config_path.parent)
        logger.debug(f"Loaded configuration from {config_path}")
        return ConfigManager.build_options(parsed_data)

    @staticmethod
    def _parse_config_data(config_data: dict[str, object], config_dir: Path) -> dict[str, object]:
        """
        Normalize raw YAML values before validation.

        Args:
            config_data: Raw configuration data from YAML
            config_dir: Directory of the configuration file

        Returns:
            dict[str, object]: Parsed configuration data
        """
        parsed_data: dict[str, object] = {}

        for key, value in config_data.items():
            match key:
                case "base_path":
                    match value:
                        case str() | Path():
                            path = Path(value)
                            parsed_data[key] = path if path.is_absolute() else config_dir / path
                        case _:
                            parsed_data[key] = value

                case "source_files_paths" | "excluded_paths" | "supported_langs" | "source_file_extensions":
                    # Allow a single scalar where a list is expected
                    match value:
                        case str():
                            parsed_data[key] = [value]
                        case _:
                            parsed_data[key] = value

                case _:
                    parsed_data[key] = value

        if "base_path" not in parsed_data:
            parsed_data["base_path"] = config_dir

        return parsed_data

    @staticmethod
    def build_options(data: dict[str, object]) -> ExtractOptions:
        """
        Validate raw option values.

        Raises:
            ConfigurationError: If the options fail Pydantic validation
        """
        try:
            return ExtractOptions.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid extraction options: {e}",
                user_message=f"Invalid configuration ({e.error_count()} error(s)): {e}",
                context=e,
            ) from e

    @staticmethod
    def merge_overrides(options: ExtractOptions | None, **overrides: object) -> ExtractOptions:
        """
        Apply overrides on top of existing options.

        Overrides whose value is None are ignored, so unset command-line
        flags never clear values coming from a configuration file.

        Args:
            options: Options loaded from a file, or None
            **overrides: Field values to replace

        Returns:
            ExtractOptions: Newly validated options
        """
        data: dict[str, object] = options.model_dump() if options is not None else {}
        for key, value in overrides.items():
            if value is None:
                continue
            if isinstance(value, list) and not value:
                continue
            data[key] = value
        return ConfigManager.build_options(data)
