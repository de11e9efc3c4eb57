"""Structured logging infrastructure.

Centralized logging configuration and utilities using structlog.

Public API:
    - configure_logging(): Initialize logging for the application
    - get_module_logger(): Get a logger for the calling module
    - bind_dispatch_context(): Context manager for notification-scoped logging
    - get_correlation_id() / set_correlation_id(): Correlation ID helpers
    - clear_dispatch_context(): Clear all bound context

Formatters:
    - add_app_info(): Processor to add app name/version
    - mask_sensitive_data(): Processor to redact credentials
    - truncate_large_values(): Processor to limit string lengths

Example:
    from infrastructure.logging import configure_logging, bind_dispatch_context

    configure_logging()

    with bind_dispatch_context(notification_id=notification.id):
        service.dispatch(notification)
"""

from infrastructure.logging.setup import (
    configure_logging,
    get_module_logger,
)

from infrastructure.logging.context import (
    bind_dispatch_context,
    get_correlation_id,
    set_correlation_id,
    clear_dispatch_context,
)

from infrastructure.logging.formatters import (
    add_app_info,
    mask_sensitive_data,
    truncate_large_values,
    SENSITIVE_PATTERNS,
)

__all__ = [
    "configure_logging",
    "get_module_logger",
    "bind_dispatch_context",
    "get_correlation_id",
    "set_correlation_id",
    "clear_dispatch_context",
    "add_app_info",
    "mask_sensitive_data",
    "truncate_large_values",
    "SENSITIVE_PATTERNS",
]
