"""Structured Logging — JSON log lines tagged with the exception list they concern.

Invariants:
    - Every line has timestamp, level, logger and message
    - list_id / item_id / operation / error_code / path appear only when set
    - error_log_extra() is the single place a TrustgateError becomes log fields
    - setup_logging() owns one root handler; calling it again swaps, never stacks

Design Decisions:
    - Log fields come from ErrorContext so routes and global handlers agree
      on which list and item a failure is attributed to
"""

import json
import logging
from datetime import datetime, timezone

from trustgate.core.errors import TrustgateError

EXTRA_FIELDS = ("list_id", "item_id", "operation", "error_code", "path")

_HANDLER_NAME = "trustgate"


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(
                record.created, timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_FIELDS:
            val = getattr(record, key, None)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def error_log_extra(exc: TrustgateError, **fields) -> dict:
    """Log `extra` for a domain error: its code plus the list/item it names."""
    extra = {
        "error_code": exc.code,
        "list_id": exc.context.list_id,
        "item_id": exc.context.item_id,
    }
    extra.update(fields)
    return {k: v for k, v in extra.items() if v is not None}


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the trustgate root handler, replacing a previous one."""
    for existing in list(logging.root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logging.root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s [%(list_id)s]: %(message)s",
            defaults={"list_id": "-"},
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
