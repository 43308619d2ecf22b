"""
Structured logging configuration for the tutor agent worker.
Provides JSON-formatted console logging plus helpers for bootstrap metrics.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

SERVICE_NAME = "tutor_agent"


class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_record = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_record["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        if hasattr(record, "extra_fields"):
            log_record.update(record.extra_fields)

        return json.dumps(log_record, ensure_ascii=False, default=str)


TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _make_formatter(fmt: str) -> logging.Formatter:
    if fmt == "json":
        return JsonFormatter()
    return logging.Formatter(TEXT_FORMAT)


class TutorAgentLogger:
    """Logger wrapper that attaches keyword context to every record."""

    def __init__(self, name: str = SERVICE_NAME, environment: str = "production"):
        self.logger = logging.getLogger(name)
        self.environment = environment

    def log_with_context(self, level: str, message: str, **context):
        """Log with additional context fields."""
        log_level = getattr(logging, level.upper())
        if not self.logger.isEnabledFor(log_level):
            return

        extra_fields = {
            "service": SERVICE_NAME,
            "environment": self.environment,
            **context,
        }
        self.logger.log(log_level, message, extra={"extra_fields": extra_fields})

    def info(self, message: str, **context):
        self.log_with_context("INFO", message, **context)

    def warning(self, message: str, **context):
        self.log_with_context("WARNING", message, **context)

    def error(self, message: str, **context):
        self.log_with_context("ERROR", message, **context)

    def critical(self, message: str, **context):
        self.log_with_context("CRITICAL", message, **context)

    def debug(self, message: str, **context):
        self.log_with_context("DEBUG", message, **context)


class BootstrapMetrics:
    """Logger for topic lookups and bootstrap lifecycle events."""

    def __init__(self, logger: TutorAgentLogger):
        self.logger = logger

    def log_lookup(self,
                   room_name: str,
                   duration: float,
                   found: bool,
                   error: Optional[str] = None,
                   **context):
        """Log a topic lookup with its latency and outcome."""
        self.logger.info(
            f"Topic lookup completed for room {room_name}",
            room_name=room_name,
            duration_ms=round(duration * 1000, 2),
            found=found,
            error=error,
            metric_type="topic_lookup",
            **context
        )

    def log_state(self,
                  room_name: str,
                  state: str,
                  previous_state: Optional[str] = None,
                  **context):
        """Log bootstrap state changes."""
        self.logger.info(
            f"Bootstrap state changed: {previous_state} -> {state}",
            room_name=room_name,
            current_state=state,
            previous_state=previous_state,
            metric_type="bootstrap_state",
            **context
        )

    def log_session_event(self,
                          event_type: str,
                          room_name: str,
                          duration: Optional[float] = None,
                          **context):
        """Log session lifecycle events."""
        self.logger.info(
            f"Session event: {event_type}",
            event_type=event_type,
            room_name=room_name,
            duration_ms=round(duration * 1000, 2) if duration is not None else None,
            metric_type="session_event",
            **context
        )


agent_logger = TutorAgentLogger()
bootstrap_metrics = BootstrapMetrics(agent_logger)


def setup_global_logging(level: str = "INFO", fmt: str = "json", environment: str = "production"):
    """Configure the root logger once for the worker process."""
    agent_logger.environment = environment

    root_logger = logging.getLogger()
    log_level = getattr(logging, level.upper(), logging.INFO)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_make_formatter(fmt))
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)
