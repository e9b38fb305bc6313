"""Structured logging setup.

Every module logs through ``logging.getLogger(__name__)``. setup_logging()
is called once by the host process; the library itself never configures
handlers.

JSON records carry timestamp, level, logger and message, plus the
enterprise_id, asset_id, investor_id and shares extras when a record sets
them.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from .config import OwnershipSettings, get_settings

_EXTRA_FIELDS = ("enterprise_id", "asset_id", "investor_id", "shares")


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def build_handler(fmt: str = "text") -> logging.Handler:
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    return handler


def setup_logging(
    level: Optional[str] = None,
    fmt: Optional[str] = None,
    settings: Optional[OwnershipSettings] = None,
) -> logging.Handler:
    """Attach a handler to the root logger.

    Explicit arguments win over settings; settings default to get_settings().

    Returns:
        The installed handler (so callers and tests can remove it)
    """
    settings = settings or get_settings()
    level = (level or settings.log_level).upper()
    handler = build_handler(fmt or settings.log_format)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level, logging.INFO))
    return handler
