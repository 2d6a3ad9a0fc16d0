# mtengine/infrastructure/config/engine_config.py
import os
from typing import Any, Dict, Optional

from mtengine.infrastructure.config.loaders.yaml_loader import SchemaValidationError, YamlConfigLoader
from mtengine.infrastructure.config.validators.schema_validator import SchemaValidator

SCHEMA_PATH = os.path.join(os.path.dirname(__file__), "schemas", "engine_config.schema.json")


def load_engine_config(config_path: Optional[str] = None, strict: bool = True,
                       loader: Optional[YamlConfigLoader] = None) -> Dict[str, Any]:
    """
    Load the engine configuration with schema defaults applied.

    Args:
        config_path: YAML file to load; schema defaults only when omitted
        strict: Raise on missing / invalid files instead of falling back
        loader: Optional preconfigured loader

    Returns:
        Validated configuration dictionary

    Raises:
        ConfigError: On any loading or validation failure in strict mode
    """
    validator = loader.schema_validator if loader and loader.schema_validator else SchemaValidator()
    loader = loader or YamlConfigLoader(validator)
    loader.set_strict_mode(strict)

    if config_path is None:
        config = {}
    else:
        config = loader.load_file(config_path, SCHEMA_PATH, default_config={})

    schema = loader.load_schema(SCHEMA_PATH)
    is_valid, errors, config = validator.validate_with_defaults(config, schema)
    if not is_valid and strict:
        raise SchemaValidationError(config_path or "<defaults>", errors)

    return config
