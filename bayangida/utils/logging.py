"""Structured logging configuration."""

import logging
import sys
from typing import Any

import structlog
from pythonjsonlogger import jsonlogger

from bayangida.config import get_settings


def setup_logging() -> None:
    """Configure structured logging for the application."""
    settings = get_settings()

    log_level = getattr(logging, settings.log_level)

    handler = logging.StreamHandler(sys.stdout)
    if settings.log_format == "json":
        formatter = jsonlogger.JsonFormatter(
            fmt="%(timestamp)s %(level)s %(name)s %(message)s",
            rename_fields={"levelname": "level", "asctime": "timestamp"},
        )
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.JSONRenderer() if settings.log_format == "json"
            else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


class WorkflowLogger:
    """Logger for order lifecycle events with consistent field names."""

    def __init__(self, component: str):
        self.component = component
        self.logger = get_logger(component)

    def log_transition(
        self,
        order_id: str,
        from_status: str,
        to_status: str,
        **kwargs: Any,
    ) -> None:
        """Log an order status change."""
        self.logger.info(
            "order_transition",
            component=self.component,
            order_id=order_id,
            from_status=from_status,
            to_status=to_status,
            **kwargs,
        )

    def log_assignment(
        self,
        order_id: str,
        driver_id: str,
        waybill_number: str | None,
        **kwargs: Any,
    ) -> None:
        """Log a driver assignment."""
        self.logger.info(
            "driver_assigned",
            component=self.component,
            order_id=order_id,
            driver_id=driver_id,
            waybill_number=waybill_number,
            **kwargs,
        )

    def log_conflict(
        self,
        operation: str,
        order_id: str,
        reason: str,
        **kwargs: Any,
    ) -> None:
        """Log a rejected write caused by concurrent modification."""
        self.logger.warning(
            "write_conflict",
            component=self.component,
            operation=operation,
            order_id=order_id,
            reason=reason,
            **kwargs,
        )

    def log_error(
        self,
        error: str,
        order_id: str | None = None,
        **kwargs: Any,
    ) -> None:
        """Log an error."""
        self.logger.error(
            "workflow_error",
            component=self.component,
            order_id=order_id,
            error=error,
            **kwargs,
        )
