"""Centralized logging configuration with JSON option and request correlation.

Everything goes to stderr. The access logger (`mediadrop.access`) gets its own
handler that prints bare Combined Log Format lines.

Env vars:
- LOG_LEVEL: DEBUG|INFO|WARNING|ERROR (default: INFO)
- LOG_JSON: true/false (default: false)
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict
import contextvars


ACCESS_LOGGER = "mediadrop.access"

# Per-request correlation id
request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="-")


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        record.request_id = request_id_var.get()  # type: ignore[attr-defined]
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        base: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", "-"),
        }
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(base, ensure_ascii=False)


def setup_logging() -> None:
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    use_json = os.getenv("LOG_JSON", "false").lower() in {"1", "true", "yes", "on"}

    root = logging.getLogger()
    root.setLevel(level)

    # Clear default handlers
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.addFilter(RequestIdFilter())
    if use_json:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(fmt="%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s"))
    root.addHandler(handler)

    access = logging.getLogger(ACCESS_LOGGER)
    access.handlers = []
    access_handler = logging.StreamHandler(stream=sys.stderr)
    access_handler.setFormatter(logging.Formatter(fmt="%(message)s"))
    access.addHandler(access_handler)
    access.setLevel(logging.INFO)
    access.propagate = False

    # Align uvicorn loggers with our formatter
    for name in ["uvicorn", "uvicorn.error"]:
        lg = logging.getLogger(name)
        lg.handlers = []
        lg.propagate = True
        lg.setLevel(level)
