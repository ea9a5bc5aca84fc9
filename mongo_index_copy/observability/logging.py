"""
Logging utilities for MONGO_INDEX_COPY.

Every copy runs inside a copy scope: its log records carry one correlation
ID plus the namespaces of the collections involved. A caller that already
set a correlation ID (e.g. one per migration run) keeps it across all of its
copies. The package only emits records; handler and format configuration is
left to the application.
"""

import contextvars
import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)

# Source/destination of the copy running in this context
_copy_context: contextvars.ContextVar[dict[str, Any] | None] = contextvars.ContextVar(
    "copy_context", default=None
)


def get_correlation_id() -> str | None:
    """Correlation ID of the current context, if any."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> str:
    """
    Pin a correlation ID for every copy run from the current context.

    Args:
        correlation_id: ID to use (a new UUID if None)

    Returns:
        The correlation ID that was set
    """
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())
    _correlation_id.set(correlation_id)
    return correlation_id


def clear_correlation_id() -> None:
    """Drop a pinned correlation ID; later copies generate their own."""
    _correlation_id.set(None)


@contextmanager
def copy_scope(source: str, destination: str, **kwargs: Any) -> Iterator[str]:
    """
    Bind the logging context of one copy.

    Reuses the caller's correlation ID or generates one for this copy. Both
    the ID and the copy context are restored on exit, also when the copy
    raises.

    Args:
        source: Source collection namespace
        destination: Destination collection namespace
        **kwargs: Additional context fields

    Yields:
        The correlation ID shared by the copy's records
    """
    correlation_id = _correlation_id.get() or str(uuid.uuid4())
    id_token = _correlation_id.set(correlation_id)
    context_token = _copy_context.set({"source": source, "destination": destination, **kwargs})
    try:
        yield correlation_id
    finally:
        _copy_context.reset(context_token)
        _correlation_id.reset(id_token)


def get_logging_context() -> dict[str, Any]:
    """Timestamp, correlation ID and copy context of the current context."""
    context: dict[str, Any] = {"timestamp": datetime.now().isoformat()}

    correlation_id = _correlation_id.get()
    if correlation_id:
        context["correlation_id"] = correlation_id

    copy_context = _copy_context.get()
    if copy_context:
        context.update(copy_context)

    return context


class ContextualLoggerAdapter(logging.LoggerAdapter):
    """Adds the current copy's context to every record; explicit extras win."""

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        context = get_logging_context()
        context.update(kwargs.get("extra") or {})
        kwargs["extra"] = context
        return msg, kwargs


def get_logger(name: str) -> ContextualLoggerAdapter:
    return ContextualLoggerAdapter(logging.getLogger(name), {})


def log_operation(
    logger: logging.Logger | logging.LoggerAdapter,
    operation: str,
    success: bool = True,
    duration_ms: float | None = None,
    **context: Any,
) -> None:
    """
    Emit the summary record of a finished copy.

    Successful copies log at INFO, failed ones at WARNING: the failure
    itself has already been logged with its traceback where it was caught.

    Args:
        logger: Logger instance
        operation: Operation name (``index_copy.copy_all`` / ``index_copy.copy_named``)
        success: Whether the copy succeeded
        duration_ms: Copy duration in milliseconds
        **context: Additional fields (e.g. number of indexes)
    """
    log_context = get_logging_context()
    log_context.update({"operation": operation, "success": success})
    if duration_ms is not None:
        log_context["duration_ms"] = round(duration_ms, 2)
    log_context.update(context)

    message = f"Operation: {operation}" if success else f"Operation failed: {operation}"
    if duration_ms is not None:
        message += f" (duration: {duration_ms:.2f}ms)"

    logger.log(logging.INFO if success else logging.WARNING, message, extra=log_context)
