"""Notification error taxonomy.

Every terminal failure of the dispatch pipeline is raised as one of these
classes, each tagged with an ErrorType for reporting.
"""

from enum import Enum
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from infrastructure.operations import OperationResult


class ErrorType(Enum):
    """Types of errors that can occur."""

    VALIDATION_ERROR = "validation_error"
    CONFIGURATION_ERROR = "configuration_error"
    PROVIDER_ERROR = "provider_error"
    NETWORK_ERROR = "network_error"
    RATE_LIMIT_ERROR = "rate_limit_error"
    UNKNOWN_ERROR = "unknown_error"


class NotificationError(Exception):
    """Base exception for all notification-related errors."""

    default_error_type = ErrorType.UNKNOWN_ERROR

    def __init__(self, message: str, error_type: Optional[ErrorType] = None):
        super().__init__(message)
        self.message = message
        self.error_type = error_type or self.default_error_type


class ConfigurationError(NotificationError):
    """Invalid provider configuration or no usable provider.

    Raised at construction time only, never while sending.
    """

    default_error_type = ErrorType.CONFIGURATION_ERROR


class NotificationValidationError(NotificationError):
    """Notification content rejected before any delivery attempt."""

    default_error_type = ErrorType.VALIDATION_ERROR


class UnsupportedChannelError(NotificationError):
    """No provider is registered for the requested channel."""

    default_error_type = ErrorType.CONFIGURATION_ERROR

    def __init__(self, channel, message: Optional[str] = None):
        super().__init__(message or f"No provider configured for channel: {channel}")
        self.channel = channel


class DeliveryError(NotificationError):
    """Delivery failed after the retry budget was spent.

    Attributes:
        attempts: Number of delivery attempts made
        last_result: Verdict of the final attempt
        retryable: False when the final verdict was permanent
    """

    default_error_type = ErrorType.PROVIDER_ERROR

    def __init__(
        self,
        message: str,
        attempts: int,
        last_result: Optional["OperationResult"] = None,
        retryable: bool = True,
    ):
        super().__init__(message)
        self.attempts = attempts
        self.last_result = last_result
        self.retryable = retryable

    @property
    def cause(self) -> Optional[BaseException]:
        """Underlying exception of the last attempt, if there was one."""
        if self.last_result is None:
            return None
        return self.last_result.cause
