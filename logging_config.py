"""
Logging setup for the breakdown tracker.

Plain text lines by default; with LOG_JSON enabled every record becomes one
JSON object (handy when the logs are shipped to ELK or similar).
Extra context is passed the usual way: ``logger.info(msg, extra={"extra_fields": {...}})``.
"""

import json
import logging
import sys
import traceback
from datetime import datetime

TEXT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class StructuredFormatter(logging.Formatter):
    """JSON formatter: timestamp, level, logger, message, location, error."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "@timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            },
        }

        if record.exc_info:
            log_obj["error"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "stacktrace": traceback.format_exception(*record.exc_info),
            }

        if hasattr(record, "extra_fields"):
            log_obj["custom"] = record.extra_fields

        return json.dumps(log_obj, default=str)


def setup_logging(level: str = "INFO", json_format: bool = False) -> None:
    """
    Configure the root logger with a single stdout handler.

    Safe to call more than once (every create_app() does): the handler
    installed by a previous call is replaced, not duplicated.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    for handler in list(root_logger.handlers):
        if getattr(handler, "_breakdown_tracker", False):
            root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler._breakdown_tracker = True
    handler.setFormatter(StructuredFormatter() if json_format else logging.Formatter(TEXT_FORMAT))
    root_logger.addHandler(handler)
