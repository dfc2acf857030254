"""Structured logging configuration"""
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict


class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging"""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Add extra fields
        if hasattr(record, "admin_id"):
            log_data["admin_id"] = record.admin_id
        if hasattr(record, "role"):
            log_data["role"] = record.role
        if hasattr(record, "request_id"):
            log_data["request_id"] = record.request_id
        if hasattr(record, "traffic"):
            log_data["traffic"] = record.traffic
        if hasattr(record, "action"):
            log_data["action"] = record.action

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def setup_logging(log_level: str = "INFO", log_format: str = "json") -> logging.Logger:
    """Setup structured JSON logging"""
    logger = logging.getLogger("cafe_api")
    logger.setLevel(log_level)

    # Remove existing handlers
    logger.handlers = []

    handler = logging.StreamHandler(sys.stdout)
    if log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)

    return logger


# Global logger instance
logger = setup_logging()
