"""Structured Logging and Metrics — JSON log formatter plus Prometheus instruments.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (route, method, status_code, duration_ms, error_code,
      backend_status) surfaced when present
    - Every endpoint call increments ui_api_request_count{method} and observes
      ui_api_request_latency_seconds{method}, error or not

Design Decisions:
    - setup_logging called once on startup via lifespan; repeated calls replace
      the handler instead of stacking a second one
    - Metric names follow the platform's "<service>_api_<name>" convention
"""

import json
import logging
from datetime import datetime, timezone

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "ui_api_request_count",
    "Number of requests received.",
    ["method"],
)
REQUEST_LATENCY = Histogram(
    "ui_api_request_latency_seconds",
    "Total duration of requests in seconds.",
    ["method"],
)

_EXTRA_KEYS = (
    "route", "method", "status_code", "duration_ms", "error_code",
    "backend_status",
)

_handler: logging.Handler | None = None


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_KEYS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure logging for the application."""
    global _handler
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
        ))
    if _handler is not None:
        logging.root.removeHandler(_handler)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    _handler = handler


def record_request(method: str, duration_s: float) -> None:
    """Count one endpoint call and observe its latency."""
    REQUEST_COUNT.labels(method=method).inc()
    REQUEST_LATENCY.labels(method=method).observe(duration_s)
