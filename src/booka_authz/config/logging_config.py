"""Centralized logging configuration for booka-authz.

Provides consistent, configurable logging with settings-based control over
verbosity, format and the dedicated audit logger.
"""

import logging
import logging.config
from enum import Enum
from typing import Any, Dict, Optional

from .settings import AuthzSettings, get_settings

AUDIT_LOGGER_NAME = "booka_authz.audit"


class LogLevel(str, Enum):
    """Supported log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogVerbosity(str, Enum):
    """Log verbosity modes."""
    QUIET = "QUIET"      # Only errors and critical
    NORMAL = "NORMAL"    # Honour the configured log level
    VERBOSE = "VERBOSE"  # Info level logging
    DEBUG = "DEBUG"      # Full debug logging


class LogFormat(str, Enum):
    """Log format options."""
    SIMPLE = "simple"
    DETAILED = "detailed"
    JSON = "json"


FORMAT_STRINGS = {
    LogFormat.SIMPLE: "%(asctime)s - %(levelname)s - %(message)s",
    LogFormat.DETAILED: "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
    LogFormat.JSON: '{"time":"%(asctime)s","level":"%(levelname)s","module":"%(name)s","message":"%(message)s"}',
}


def get_effective_level(log_level: str, verbosity: str) -> str:
    """Combine configured level and verbosity mode into one level name."""
    try:
        mode = LogVerbosity(verbosity.upper())
    except ValueError:
        mode = LogVerbosity.NORMAL

    if mode == LogVerbosity.QUIET:
        return LogLevel.ERROR.value
    if mode == LogVerbosity.VERBOSE:
        return LogLevel.INFO.value
    if mode == LogVerbosity.DEBUG:
        return LogLevel.DEBUG.value

    try:
        return LogLevel(log_level.upper()).value
    except ValueError:
        return LogLevel.INFO.value


class LoggingConfig:
    """Centralized logging configuration manager."""

    # Third-party modules that should only log errors
    ERROR_ONLY_MODULES = [
        "httpx",
        "httpcore",
        "asyncio",
        "asyncpg",
    ]

    @classmethod
    def build(cls, settings: Optional[AuthzSettings] = None) -> Dict[str, Any]:
        """Build a ``dictConfig`` mapping from settings."""
        settings = settings or get_settings()
        effective_log_level = get_effective_level(settings.log_level, settings.log_verbosity)
        format_string = FORMAT_STRINGS[LogFormat(settings.log_format)]

        logging_config: Dict[str, Any] = {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": format_string,
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
                "audit": {
                    "format": "%(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": effective_log_level,
                    "formatter": "default",
                    "stream": "ext://sys.stdout",
                },
                "audit": {
                    "class": "logging.StreamHandler",
                    "level": "INFO",
                    "formatter": "audit",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {
                "level": effective_log_level,
                "handlers": ["console"],
            },
            "loggers": {
                # Audit records are always emitted, whatever the verbosity
                AUDIT_LOGGER_NAME: {
                    "level": "INFO",
                    "handlers": ["audit"],
                    "propagate": False,
                },
            },
        }

        for module in cls.ERROR_ONLY_MODULES:
            logging_config["loggers"][module] = {
                "level": "ERROR",
                "handlers": ["console"],
                "propagate": False,
            }

        return logging_config

    @classmethod
    def configure(cls, settings: Optional[AuthzSettings] = None) -> None:
        """Configure logging from settings."""
        logging_config = cls.build(settings)
        logging.config.dictConfig(logging_config)

        logger = logging.getLogger(__name__)
        logger.debug(f"Logging configured: level={logging_config['root']['level']}")

    @classmethod
    def set_module_level(cls, module_name: str, level: str) -> None:
        """Set log level for a specific module.

        Args:
            module_name: Name of the module
            level: Log level to set
        """
        logging.getLogger(module_name).setLevel(getattr(logging, level.upper()))


def setup_logging(settings: Optional[AuthzSettings] = None) -> None:
    """Setup logging configuration.

    This is the main entry point for configuring logging in an application
    embedding the engine. It should be called once at startup.
    """
    LoggingConfig.configure(settings)


def get_logger(name: str) -> logging.Logger:
    """Get a configured logger."""
    return logging.getLogger(name)
