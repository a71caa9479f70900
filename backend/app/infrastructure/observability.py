"""Structured Logging — one JSON line per record for HTTP routes and socket handlers.

Invariants:
    - Every line carries timestamp, level, logger and message
    - Context fields (room_id, sid, service, error_code, ...) appear only when set via `extra`
    - LOG_FORMAT=json in production; text for local development and tests

Design Decisions:
    - Stdlib logging with a small formatter: REST and Socket.IO handlers share one log shape
    - setup_logging runs once from the lifespan (or from `python -m app.seed`)
"""

import json
import logging
from datetime import datetime, timezone

CONTEXT_FIELDS = (
    "room_id", "user_id", "sid", "event", "path", "service", "model",
    "error_code", "attempt", "status_code", "duration_ms",
)

# engineio logs every packet at INFO; httpx logs every vendor request
QUIET_LOGGERS = ("engineio.server", "socketio.server", "httpx")

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update({
            key: record.__dict__[key]
            for key in CONTEXT_FIELDS if record.__dict__.get(key) is not None
        })
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter() if fmt == "json" else logging.Formatter(TEXT_FORMAT))
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
