"""Dispatch context binding for structured logging.

Binds notification-scoped context so that every log entry emitted while
a notification is being dispatched carries its identifiers.

Usage:
    from infrastructure.logging import bind_dispatch_context

    with bind_dispatch_context(notification_id="abc", channel="sms"):
        logger.info("dispatching")

Dependencies:
    - structlog.contextvars
"""

import uuid
from contextlib import contextmanager
from typing import Any, Generator, Optional

import structlog


@contextmanager
def bind_dispatch_context(
    correlation_id: Optional[str] = None,
    notification_id: Optional[str] = None,
    channel: Optional[str] = None,
    **extra_context: Any,
) -> Generator[None, None, None]:
    """Bind dispatch-scoped context to all logs within the block.

    Nested blocks restore the values bound by the enclosing block on exit.

    Args:
        correlation_id: Caller correlation ID. Defaults to the one already
            bound, and is generated only when there is none.
        notification_id: ID of the notification being dispatched.
        channel: Channel value (email, sms, push, chat).
        **extra_context: Additional key-value pairs to include in logs.

    Yields:
        None - context is bound to structlog's context vars.
    """
    correlation_id = correlation_id or get_correlation_id() or str(uuid.uuid4())
    context: dict[str, Any] = {"correlation_id": correlation_id}

    if notification_id is not None:
        context["notification_id"] = notification_id

    if channel is not None:
        context["channel"] = channel

    context.update(extra_context)

    with structlog.contextvars.bound_contextvars(**context):
        yield


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from the logging context."""
    return structlog.contextvars.get_contextvars().get("correlation_id")


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID in the current logging context."""
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)


def clear_dispatch_context() -> None:
    """Clear all dispatch-scoped context from the logging context."""
    structlog.contextvars.clear_contextvars()
