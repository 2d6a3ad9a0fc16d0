# mtengine/infrastructure/config/validators/schema_validator.py
import copy
import logging
from typing import Any, Dict, List, Tuple

import jsonschema


class SchemaValidator:
    """
    Validates configuration data against JSON schemas.
    """
    def __init__(self):
        """Initialize the schema validator."""
        self.logger = logging.getLogger("infrastructure.config.validator")

    def validate(self, config: Dict[str, Any], schema: Dict[str, Any]) -> Tuple[bool, List[str]]:
        """
        Validate a configuration against a JSON schema.

        Args:
            config: The configuration dictionary to validate
            schema: The JSON schema to validate against

        Returns:
            Tuple of (is_valid, error_messages)
        """
        try:
            jsonschema.validate(instance=config, schema=schema)
            return True, []
        except jsonschema.exceptions.ValidationError as e:
            error_path = '.'.join(str(p) for p in e.path) if e.path else 'root'
            error_message = f"At {error_path}: {e.message}"

            self.logger.error(f"Schema validation error: {error_message}")
            return False, [error_message]
        except jsonschema.exceptions.SchemaError as e:
            # The schema itself is broken
            self.logger.error(f"Invalid schema: {e}")
            return False, [f"Schema error: {str(e)}"]

    def validate_with_defaults(self, config: Dict[str, Any],
                               schema: Dict[str, Any]) -> Tuple[bool, List[str], Dict[str, Any]]:
        """
        Fill in schema defaults, then validate.

        Args:
            config: The configuration dictionary (left unmodified)
            schema: The JSON schema holding defaults

        Returns:
            Tuple of (is_valid, error_messages, updated_config)
        """
        updated_config = copy.deepcopy(config)
        self._apply_defaults(updated_config, schema)

        is_valid, errors = self.validate(updated_config, schema)
        return is_valid, errors, updated_config

    def _apply_defaults(self, config: Dict[str, Any], schema: Dict[str, Any], path: str = ""):
        """
        Recursively copy `default` values of object properties into config.

        Nested objects that declare properties are created when missing.
        """
        properties = schema.get('properties')
        if not isinstance(config, dict) or not isinstance(properties, dict):
            return

        for prop_name, prop_schema in properties.items():
            prop_path = f"{path}.{prop_name}" if path else prop_name

            if prop_name not in config:
                if 'default' in prop_schema:
                    config[prop_name] = copy.deepcopy(prop_schema['default'])
                    self.logger.debug(f"Applied default value for {prop_path}: {prop_schema['default']}")
                elif prop_schema.get('type') == 'object' and 'properties' in prop_schema:
                    config[prop_name] = {}

            if prop_schema.get('type') == 'object':
                self._apply_defaults(config.get(prop_name), prop_schema, prop_path)
