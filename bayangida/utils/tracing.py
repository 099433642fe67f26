"""Operation timing for lifecycle calls."""

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Generator

from bayangida.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class OperationTrace:
    """Timing and outcome of a single operation."""

    operation: str
    metadata: dict[str, Any] = field(default_factory=dict)
    duration_ms: float | None = None
    success: bool = False
    error: str | None = None


@contextmanager
def trace_operation(operation: str, **metadata: Any) -> Generator[OperationTrace, None, None]:
    """Time an operation and log its outcome.

    Exceptions are recorded on the trace and re-raised unchanged.
    """
    trace = OperationTrace(operation=operation, metadata=metadata)
    start = time.perf_counter()
    try:
        yield trace
        trace.success = True
    except Exception as e:
        trace.error = type(e).__name__
        raise
    finally:
        trace.duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "operation_completed",
            operation=operation,
            duration_ms=round(trace.duration_ms, 3),
            success=trace.success,
            error=trace.error,
            **trace.metadata,
        )
