"""Centralized logging configuration for retail-authz.

Provides consistent, configurable logging with environment-based control
over verbosity and log levels. Library plumbing logs through the standard
``logging`` module; security events (tenancy, authorization, audit) log
through ``loguru`` so that structured fields survive to the sink.
"""

import logging
import logging.config
import os
import sys
from enum import Enum

from loguru import logger as loguru_logger


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
    NORMAL = "NORMAL"    # Standard logging (warnings and above)
    VERBOSE = "VERBOSE"  # Info level logging
    DEBUG = "DEBUG"      # Full debug logging


class LogFormat(str, Enum):
    """Log format options."""
    SIMPLE = "simple"
    DETAILED = "detailed"
    JSON = "json"


def get_log_level_from_verbosity(verbosity: str) -> str:
    """Map verbosity mode to log level."""
    verbosity_map = {
        LogVerbosity.QUIET: LogLevel.ERROR.value,
        LogVerbosity.NORMAL: LogLevel.WARNING.value,
        LogVerbosity.VERBOSE: LogLevel.INFO.value,
        LogVerbosity.DEBUG: LogLevel.DEBUG.value,
    }
    try:
        return verbosity_map[LogVerbosity(verbosity.upper())]
    except ValueError:
        return LogLevel.WARNING.value


class LoggingConfig:
    """Centralized logging configuration manager."""

    # Modules that are chatty at INFO
    DEFAULT_QUIET_MODULES = [
        "retail_authz.features.database",
        "retail_authz.features.cache",
    ]

    # Handler id of the package loguru sink, once added
    _loguru_sink_id = None

    # Modules that should only log errors
    ERROR_ONLY_MODULES = [
        "asyncio",
        "asyncpg",
        "httpx",
        "httpcore",
    ]

    @classmethod
    def configure(cls) -> None:
        """Configure logging based on environment variables."""
        log_verbosity = os.getenv("LOG_VERBOSITY", "NORMAL").upper()
        log_format = os.getenv("LOG_FORMAT", LogFormat.SIMPLE.value).lower()
        explicit_level = os.getenv("LOG_LEVEL")

        effective_log_level = (
            explicit_level.upper() if explicit_level else get_log_level_from_verbosity(log_verbosity)
        )

        if log_format == LogFormat.JSON.value:
            format_string = '{"time":"%(asctime)s","level":"%(levelname)s","module":"%(name)s","message":"%(message)s"}'
        elif log_format == LogFormat.DETAILED.value:
            format_string = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
        else:  # simple
            format_string = "%(asctime)s - %(levelname)s - %(message)s"

        logging_config = {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": format_string,
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": effective_log_level,
                    "formatter": "default",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {
                "level": effective_log_level,
                "handlers": ["console"],
            },
            "loggers": {}
        }

        for module in cls.DEFAULT_QUIET_MODULES:
            logging_config["loggers"][module] = {
                "level": "WARNING" if effective_log_level != "DEBUG" else "DEBUG",
                "handlers": ["console"],
                "propagate": False,
            }

        for module in cls.ERROR_ONLY_MODULES:
            logging_config["loggers"][module] = {
                "level": "ERROR",
                "handlers": ["console"],
                "propagate": False,
            }

        logging.config.dictConfig(logging_config)

        # Security events keep their structured fields, so they get their own sink.
        # Sinks the host application added are left in place.
        if cls._loguru_sink_id is None:
            cls._loguru_sink_id = loguru_logger.add(
                sys.stdout,
                level=effective_log_level,
                filter="retail_authz",
                serialize=log_format == LogFormat.JSON.value,
                backtrace=False,
                diagnose=False,
            )

        if effective_log_level == "DEBUG":
            logging.getLogger(__name__).debug(
                f"Logging configured: level={effective_log_level}, format={log_format}"
            )

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Get a configured logger for the given module name."""
        return logging.getLogger(name)


def setup_logging() -> None:
    """Setup logging configuration from environment variables.

    This is the main entry point for configuring logging. It is called once
    when the package is imported.
    """
    LoggingConfig.configure()


def get_logger(name: str) -> logging.Logger:
    """Get a configured logger."""
    return LoggingConfig.get_logger(name)
