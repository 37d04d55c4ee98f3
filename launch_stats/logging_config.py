"""
Logging configuration for the launch statistics service.
Structured logging using structlog on top of the standard library.
"""

import os
import sys
import logging
import logging.handlers
from pathlib import Path
from typing import Any, Dict, Optional
from datetime import datetime, timezone

import structlog
from structlog.types import FilteringBoundLogger


class LogConfig:
    """Configuration class for logging setup."""

    def __init__(self):
        self.log_level = os.getenv('LOG_LEVEL', 'INFO').upper()
        self.log_dir = Path(os.getenv('LOG_DIR', 'logs'))
        self.log_format = os.getenv('LOG_FORMAT', 'json')  # json or console
        self.enable_file_logging = os.getenv('ENABLE_FILE_LOGGING', 'false').lower() == 'true'
        self.max_log_size = int(os.getenv('MAX_LOG_SIZE_MB', '100')) * 1024 * 1024
        self.backup_count = int(os.getenv('LOG_BACKUP_COUNT', '5'))
        self.environment = os.getenv('ENVIRONMENT', 'development')


def add_timestamp(logger: FilteringBoundLogger, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add timestamp to log events."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    return event_dict


def add_service_context(logger: FilteringBoundLogger, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add service context information."""
    event_dict["service"] = "launch-stats"
    event_dict["component"] = event_dict.get("component", "unknown")
    return event_dict


def filter_sensitive_data(logger: FilteringBoundLogger, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Filter out sensitive data from logs."""
    sensitive_keys = ['password', 'token', 'secret', 'key', 'authorization']

    def _filter_dict(d: Dict[str, Any]) -> Dict[str, Any]:
        filtered = {}
        for k, v in d.items():
            if any(sensitive in k.lower() for sensitive in sensitive_keys):
                filtered[k] = "[REDACTED]"
            elif isinstance(v, dict):
                filtered[k] = _filter_dict(v)
            else:
                filtered[k] = v
        return filtered

    return _filter_dict(event_dict)


def build_processors(config: LogConfig) -> list:
    """Build the structlog processor chain for the configured format."""
    processors = [
        add_timestamp,
        add_service_context,
        filter_sensitive_data,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if config.log_format == 'json':
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    return processors


def setup_logging(config: Optional[LogConfig] = None) -> None:
    """
    Set up logging for the service.

    Args:
        config: LogConfig instance, creates default if None
    """
    if config is None:
        config = LogConfig()

    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(message)s",
        stream=sys.stdout,
    )

    structlog.configure(
        processors=build_processors(config),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    if config.enable_file_logging:
        setup_file_logging(config)

    configure_third_party_loggers()


def setup_file_logging(config: LogConfig) -> None:
    """Set up file-based logging with rotation."""
    config.log_dir.mkdir(parents=True, exist_ok=True)

    app_handler = logging.handlers.RotatingFileHandler(
        config.log_dir / "launch_stats.log",
        maxBytes=config.max_log_size,
        backupCount=config.backup_count,
        encoding='utf-8'
    )
    app_handler.setLevel(getattr(logging, config.log_level))

    error_handler = logging.handlers.RotatingFileHandler(
        config.log_dir / "errors.log",
        maxBytes=config.max_log_size,
        backupCount=config.backup_count,
        encoding='utf-8'
    )
    error_handler.setLevel(logging.ERROR)

    root_logger = logging.getLogger()
    root_logger.addHandler(app_handler)
    root_logger.addHandler(error_handler)


def configure_third_party_loggers() -> None:
    """Configure logging levels for third-party libraries."""
    third_party_loggers = {
        'urllib3': logging.WARNING,
        'aiohttp': logging.WARNING,
        'asyncio': logging.WARNING,
        'uvicorn.access': logging.WARNING,
    }

    for logger_name, level in third_party_loggers.items():
        logging.getLogger(logger_name).setLevel(level)


def get_logger(name: str, component: Optional[str] = None) -> FilteringBoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)
        component: Component name for categorization

    Returns:
        Configured structlog logger
    """
    logger = structlog.get_logger(name)

    if component:
        logger = logger.bind(component=component)

    return logger


class TimedOperation:
    """Context manager for timing operations with logging."""

    def __init__(self, logger: FilteringBoundLogger, operation_name: str, **context):
        self.logger = logger
        self.operation_name = operation_name
        self.context = context
        self.start_time = None
        self.duration = None

    def __enter__(self):
        self.start_time = datetime.now(timezone.utc)
        self.logger.info(
            f"Starting {self.operation_name}",
            operation=self.operation_name,
            **self.context
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = (datetime.now(timezone.utc) - self.start_time).total_seconds()

        if exc_type:
            self.logger.error(
                f"Failed {self.operation_name}",
                operation=self.operation_name,
                duration_seconds=self.duration,
                exc_type=exc_type.__name__,
                exc_value=str(exc_val),
                **self.context
            )
        else:
            self.logger.info(
                f"Completed {self.operation_name}",
                operation=self.operation_name,
                duration_seconds=self.duration,
                **self.context
            )
