"""
Structured Logging Configuration Module

Provides JSON-formatted structured logging for all ledger operations.
"""

import logging
import json
from datetime import datetime, timezone
from typing import Optional


TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "user_id": getattr(record, 'user_id', None),
            "action": getattr(record, 'action', None),
            "resource": getattr(record, 'resource', None),
            "extra": getattr(record, 'extra', None)
        }

        # Fields a record did not set are left out
        return json.dumps(
            {k: v for k, v in log_entry.items() if v is not None}, default=str
        )


def setup_logging(level: str = "INFO", log_format: str = "json",
                  logger_name: str = "retail_bank") -> logging.Logger:
    """
    Setup structured logging for the ledger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: "json" for structured output, "text" for plain lines
        logger_name: Name of the root logger for the package

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(logger_name)
    formatter = JSONFormatter() if log_format == "json" else logging.Formatter(TEXT_FORMAT)

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    # Calling again replaces the handler
    logger.handlers = [handler]
    logger.setLevel(getattr(logging, level.upper()))
    logger.propagate = False

    return logger


def get_logger(name: str = "retail_bank") -> logging.Logger:
    """Get logger instance"""
    return logging.getLogger(name)


def log_action(logger: logging.Logger, level: str, message: str,
               user_id: Optional[str] = None, action: Optional[str] = None,
               resource: Optional[str] = None, extra: Optional[dict] = None):
    """
    Log an action with structured data.

    Args:
        logger: Logger instance
        level: Log level (info, warning, error, etc.)
        message: Log message
        user_id: ID of the user owning the affected entity
        action: Action being performed
        resource: Resource being acted upon
        extra: Additional structured data
    """
    fields = {"user_id": user_id, "action": action, "resource": resource, "extra": extra}
    logger.log(
        getattr(logging, level.upper()), message,
        extra={key: value for key, value in fields.items() if value},
        stacklevel=2
    )
