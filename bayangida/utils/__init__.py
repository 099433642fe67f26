"""Utility modules."""

from bayangida.utils.logging import WorkflowLogger, get_logger, setup_logging
from bayangida.utils.tracing import trace_operation

__all__ = ["setup_logging", "get_logger", "WorkflowLogger", "trace_operation"]
