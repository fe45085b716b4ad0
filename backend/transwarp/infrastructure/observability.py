"""Structured Logging — route-aware formatters for boot and request logs.

Invariants:
    - Every line carries timestamp, level, logger name and message
    - Route context (handler module, verb + route, request path, error code) is
      attached whenever the call site passed it as `extra`
    - JSON lines in production, human-readable lines in development, both on stdout

Design Decisions:
    - Call sites pass flat extras (module_name, verb, route, path, error_code);
      route_context() folds them into one shape shared by both formatters, so a
      registration line reads `things.py GET /x` in either format
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any


def route_context(record: logging.LogRecord) -> dict[str, Any]:
    """Route-related extras of a record, folded: module file, "VERB /route", path, error code."""
    ctx: dict[str, Any] = {}
    module = getattr(record, "module_name", None)
    if module:
        ctx["module"] = f"{module}.py"
    route = getattr(record, "route", None)
    if route:
        verb = getattr(record, "verb", None)
        ctx["route"] = f"{verb} {route}" if verb else route
    for key in ("path", "error_code"):
        val = getattr(record, key, None)
        if val is not None:
            ctx[key] = val
    return ctx


class JSONFormatter(logging.Formatter):
    """One JSON object per line; route context nested under "dispatch"."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        ctx = route_context(record)
        if ctx:
            log["dispatch"] = ctx
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


class RouteContextFormatter(logging.Formatter):
    """Plain text, with route context appended as `[things.py GET /x]`."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        ctx = route_context(record)
        if not ctx:
            return line
        return f"{line} [{' '.join(str(v) for v in ctx.values())}]"


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure root logging for the process."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if fmt == "json" else RouteContextFormatter())
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
