# mtengine/infrastructure/config/loaders/yaml_loader.py
import json
import logging
import os
from typing import Any, Dict, List, Optional

import yaml


class ConfigError(Exception):
    """Base class for errors while loading or validating configuration."""
    pass


class FileNotFoundConfigError(ConfigError):
    """A configuration file or directory does not exist."""
    def __init__(self, path, message=None):
        self.path = path
        self.message = message or f"Configuration file or directory not found: {path}"
        super().__init__(self.message)


class YamlParseError(ConfigError):
    """A YAML file could not be parsed."""
    def __init__(self, file_path, yaml_error):
        self.file_path = file_path
        self.yaml_error = yaml_error
        self.message = f"Error parsing YAML file {file_path}: {str(yaml_error)}"
        super().__init__(self.message)


class SchemaValidationError(ConfigError):
    """A configuration does not satisfy its schema."""
    def __init__(self, file_path, errors):
        self.file_path = file_path
        self.errors = errors
        error_msg = "\n  - ".join([""] + errors)
        self.message = f"Configuration validation failed for {file_path}:{error_msg}"
        super().__init__(self.message)


class YamlConfigLoader:
    """
    Loads YAML configuration files and validates them against JSON schemas.

    In strict mode (the default) a missing file, a parse error or a failed
    validation raises; otherwise the loader logs and falls back to the
    supplied default configuration.
    """
    def __init__(self, schema_validator=None):
        """
        Initialize the YAML configuration loader.

        Args:
            schema_validator: Optional validator used when a schema is given
        """
        self.logger = logging.getLogger("infrastructure.config.loader")
        self.schema_validator = schema_validator
        self.strict_mode = True

    def set_strict_mode(self, strict: bool = True):
        self.strict_mode = strict
        return self  # allow chaining

    def load_file(self, file_path: str, schema_path: Optional[str] = None,
                  default_config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Load a single YAML file and optionally validate it.

        Args:
            file_path: Path of the YAML file
            schema_path: Optional path of a JSON schema to validate against
            default_config: Configuration returned when the file is missing
                or broken and strict mode is off

        Returns:
            Parsed configuration dictionary

        Raises:
            FileNotFoundConfigError: If the file is missing and strict_mode=True
            YamlParseError: If parsing fails and no fallback applies
            SchemaValidationError: If validation fails and strict_mode=True
        """
        if not os.path.isfile(file_path):
            self.logger.error(f"Configuration file not found: {file_path}")

            if default_config is not None and not self.strict_mode:
                self.logger.warning(f"Using default configuration instead of missing file: {file_path}")
                return default_config

            raise FileNotFoundConfigError(file_path)

        try:
            with open(file_path, 'r', encoding='utf-8') as file:
                config = yaml.safe_load(file)
        except yaml.YAMLError as e:
            error = YamlParseError(file_path, e)
            self.logger.error(error.message)

            if default_config is not None and not self.strict_mode:
                self.logger.warning(f"Using default configuration due to parse error in {file_path}")
                return default_config

            raise error from e

        self.logger.debug(f"Successfully loaded configuration from {file_path}")

        # Empty file
        if config is None:
            self.logger.warning(f"Empty configuration file: {file_path}")
            config = default_config if default_config is not None else {}

        if schema_path and self.schema_validator:
            schema = self.load_schema(schema_path)
            is_valid, errors = self.schema_validator.validate(config, schema)

            if not is_valid:
                error = SchemaValidationError(file_path, errors)
                if self.strict_mode:
                    raise error
                self.logger.warning(f"{error.message}\nUsing unvalidated configuration.")
            else:
                self.logger.debug(f"Successfully validated configuration against schema: {schema_path}")

        return config

    def load_schema(self, schema_path: str) -> Dict[str, Any]:
        """
        Load a JSON schema file.

        Raises:
            FileNotFoundConfigError: If the schema file does not exist
            ConfigError: If the schema cannot be parsed
        """
        if not os.path.isfile(schema_path):
            error_msg = f"Schema file not found: {schema_path}"
            self.logger.error(error_msg)
            raise FileNotFoundConfigError(schema_path, error_msg)

        try:
            with open(schema_path, 'r', encoding='utf-8') as file:
                return json.load(file)
        except json.JSONDecodeError as e:
            error_msg = f"Error parsing schema file {schema_path}: {str(e)}"
            self.logger.error(error_msg)
            raise ConfigError(error_msg) from e

    def load_with_fallbacks(self, file_paths: List[str], schema_path: Optional[str] = None) -> Dict[str, Any]:
        """
        Load the first configuration that succeeds from a list of paths.

        Raises:
            ConfigError: If every file fails and strict_mode=True
        """
        errors = []
        original_strict_mode = self.strict_mode

        try:
            # Each path has to fail with an exception for the next one to be tried
            self.strict_mode = True

            for path in file_paths:
                try:
                    config = self.load_file(path, schema_path)
                    self.logger.info(f"Successfully loaded configuration from {path}")
                    return config
                except ConfigError as e:
                    errors.append(f"{path}: {str(e)}")

            error_msg = "All configuration files failed to load:\n" + "\n".join(f"  - {err}" for err in errors)
            self.logger.error(error_msg)

            if original_strict_mode:
                raise ConfigError(error_msg)

            self.logger.warning("Using empty configuration as fallback")
            return {}

        finally:
            self.strict_mode = original_strict_mode
