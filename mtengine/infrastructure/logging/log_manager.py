# mtengine/infrastructure/logging/log_manager.py
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional, Union

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class LogManager:
    """
    Centralized logging configuration manager.
    """
    def __init__(self):
        """Initialize the log manager."""
        self.root_logger = logging.getLogger()
        self.loggers = {}  # name -> logger
        self.handlers = {}  # name -> handler
        self.initialized = False

    def initialize(self, config: Dict[str, Any]):
        """
        Initialize logging system based on configuration.

        Args:
            config: Logging configuration dictionary
        """
        if self.initialized:
            return

        log_level = self._get_log_level(config.get('level', 'INFO'))
        log_format = config.get('format', DEFAULT_FORMAT)
        log_date_format = config.get('date_format', DEFAULT_DATE_FORMAT)
        console_enabled = config.get('console', True)
        file_config = config.get('file') or {}

        self.root_logger.setLevel(log_level)

        # Replace whatever handlers were installed before us
        for handler in list(self.root_logger.handlers):
            self.root_logger.removeHandler(handler)

        formatter = logging.Formatter(log_format, log_date_format)

        if console_enabled:
            console_level = self._get_log_level(config.get('console_level', log_level))
            # stderr keeps generated words on stdout clean
            console_handler = logging.StreamHandler(sys.stderr)
            console_handler.setLevel(console_level)
            console_handler.setFormatter(formatter)
            self.root_logger.addHandler(console_handler)
            self.handlers['console'] = console_handler

        if file_config.get('enabled', False):
            file_path = file_config.get('path', 'logs/mtengine.log')
            file_level = self._get_log_level(file_config.get('level', log_level))
            max_bytes = file_config.get('max_bytes', 10 * 1024 * 1024)  # 10 MB
            backup_count = file_config.get('backup_count', 5)

            log_dir = os.path.dirname(file_path)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)

            file_handler = RotatingFileHandler(
                file_path,
                maxBytes=max_bytes,
                backupCount=backup_count
            )
            file_handler.setLevel(file_level)
            file_handler.setFormatter(formatter)
            self.root_logger.addHandler(file_handler)
            self.handlers['file'] = file_handler

        # Parents before children
        logger_configs = config.get('loggers') or {}
        for logger_name in sorted(logger_configs, key=lambda x: len(x.split('.'))):
            logger_config = logger_configs[logger_name] or {}
            logger = logging.getLogger(logger_name)
            logger.setLevel(self._get_log_level(logger_config.get('level', log_level)))
            logger.propagate = logger_config.get('propagate', True)
            self.loggers[logger_name] = logger

            self.root_logger.debug(
                f"Configured logger '{logger_name}' with level={logging.getLevelName(logger.level)}, "
                f"propagate={logger.propagate}"
            )

        self.root_logger.debug("Logging system initialized")
        self.initialized = True

    def reset(self):
        """Remove installed handlers so initialize() can run again."""
        for handler in self.handlers.values():
            self.root_logger.removeHandler(handler)
            handler.close()
        self.handlers.clear()
        self.loggers.clear()
        self.initialized = False

    def _get_log_level(self, level_name: Union[str, int]) -> int:
        """
        Convert a log level name to its numeric value.

        Args:
            level_name: Level name (DEBUG, INFO, etc.) or numeric value

        Returns:
            Numeric log level, INFO for unknown names
        """
        if isinstance(level_name, int):
            return level_name

        level_map = {
            'CRITICAL': logging.CRITICAL,
            'FATAL': logging.FATAL,
            'ERROR': logging.ERROR,
            'WARNING': logging.WARNING,
            'WARN': logging.WARN,
            'INFO': logging.INFO,
            'DEBUG': logging.DEBUG,
            'NOTSET': logging.NOTSET
        }

        return level_map.get(level_name.upper(), logging.INFO)


# Singleton instance
log_manager = LogManager()


def initialize_logging(config: Optional[Dict[str, Any]] = None) -> LogManager:
    """
    Initialize the logging system from a configuration dictionary.

    Args:
        config: Logging configuration; console logging at WARNING when omitted
    """
    if config is None:
        config = {
            'level': 'WARNING',
            'console': True,
            'loggers': {
                'application': {'level': 'INFO'},
            }
        }

    log_manager.initialize(config)
    return log_manager
