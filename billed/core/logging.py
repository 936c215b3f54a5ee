"""
Structured logging.

Containers pass their context as `extra` (`path`, `bill`, `bill_id`,
`status_code`, `file_name`); the JSON formatter keeps the ones that are
set and derives `bill_id` and `error_class` from them.
"""

import logging
import sys
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from billed.config import settings

HANDLER_NAME = "billed"

# Context keys dropped from the output when empty
CONTEXT_FIELDS = ("path", "bill", "bill_id", "status_code", "file_name")


def error_class(status_code: Optional[int]) -> Optional[str]:
    if status_code is None:
        return None
    if 400 <= status_code < 500:
        return "client"
    if status_code >= 500:
        return "server"
    return None


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter stamping app identity and normalising bill/store context"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["level"] = record.levelname
        log_record["logger"] = record.name
        log_record["environment"] = settings.ENVIRONMENT
        log_record["app_name"] = settings.APP_NAME

        bill = log_record.get("bill")
        if isinstance(bill, dict) and not log_record.get("bill_id"):
            log_record["bill_id"] = bill.get("id")

        status_code = log_record.get("status_code")
        if isinstance(status_code, int):
            log_record["error_class"] = error_class(status_code)

        for key in CONTEXT_FIELDS:
            if log_record.get(key) is None:
                log_record.pop(key, None)


def setup_logging() -> None:
    """Configure application logging; calling it again replaces the handler"""

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(HANDLER_NAME)

    if settings.LOG_FORMAT == "json":
        formatter = CustomJsonFormatter(
            fmt="%(asctime)s %(level)s %(name)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        if existing.get_name() == HANDLER_NAME:
            root_logger.removeHandler(existing)
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper()))
    root_logger.addHandler(handler)

    # Request lines from the store client and the local API are noise at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
