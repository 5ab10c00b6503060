"""
SelfCare Planner Logging Configuration

Every module logger lives under the ``selfcare`` package logger. Startup
configures that one logger (handler, level, JSON or plain format) and the
module loggers inherit it through propagation.
"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger.json import JsonFormatter

PACKAGE_LOGGER = "selfcare"

PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class CustomJsonFormatter(JsonFormatter):
    """JSON lines stamped with the service name, UTC time and level"""

    def __init__(self, *args: Any, service_name: str = PACKAGE_LOGGER, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.fromtimestamp(record.created, timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = getattr(record, "service_name", self.service_name)


def build_formatter(service_name: str, json_logs: bool) -> logging.Formatter:
    if json_logs:
        return CustomJsonFormatter(
            "%(timestamp)s %(level)s %(name)s %(message)s",
            rename_fields={"name": "logger"},
            service_name=service_name,
        )
    return logging.Formatter(fmt=PLAIN_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def setup_logging(
    service_name: str, log_level: str = "INFO", json_logs: bool = True
) -> logging.Logger:
    """
    Configure the package logger once at startup

    Args:
        service_name: Value of the ``service`` field on JSON lines (e.g. 'selfcare-api')
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: JSON lines when True, human-readable lines otherwise

    Returns:
        The configured ``selfcare`` logger
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(build_formatter(service_name, json_logs))
    logger.addHandler(console_handler)

    logger.propagate = False

    return logger


# ============================================================================
# BUSINESS METRICS LOGGING
# ============================================================================


class MetricsLogger:
    """Business events and API call timings as structured log lines"""

    def __init__(self, service_name: str):
        self.logger = logging.getLogger(f"{PACKAGE_LOGGER}.metrics")
        self.service_name = service_name

    def log_event(
        self, event_name: str, event_data: Dict[str, Any], user_id: Optional[str] = None
    ):
        """
        Log a business event

        Args:
            event_name: Name of the event
            event_data: Event payload
            user_id: Associated user ID
        """
        extra = {
            "event_name": event_name,
            "event_data": event_data,
            "service_name": self.service_name,
        }

        if user_id:
            extra["user_id"] = user_id

        self.logger.info(f"EVENT: {event_name}", extra=extra)

    def log_api_call(
        self,
        endpoint: str,
        method: str,
        status_code: int,
        duration_ms: float,
    ):
        extra = {
            "endpoint": endpoint,
            "method": method,
            "status_code": status_code,
            "duration_ms": duration_ms,
            "service_name": self.service_name,
        }

        self.logger.debug(
            f"API_CALL: {method} {endpoint} {status_code} {duration_ms}ms", extra=extra
        )
