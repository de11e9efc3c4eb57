"""Notification core models.

Immutable request and outcome models passed between callers, the
routing service and providers.

Uses Pydantic BaseModel for:
- Runtime type validation of caller input
- Immutability (frozen models) once constructed
- JSON-friendly dumps for logging and caching
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Channel(Enum):
    """Delivery medium a notification is routed through."""

    EMAIL = "email"
    SMS = "sms"
    PUSH = "push"
    CHAT = "chat"


class Priority(Enum):
    """Notification priority levels.

    Informational only; routing does not depend on it.
    """

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Notification(BaseModel):
    """Logical notification to deliver through one channel.

    Recipient and body are optional at the model level: blank values are
    rejected by the provider pipeline as validation failures, before any
    delivery attempt is made.

    Attributes:
        id: Unique identifier (generated when not supplied)
        recipient: Email address, phone number, device token or chat target
        subject: Subject line (email), title (push), header line (chat)
        body: Message content
        channel: Target Channel
        priority: Priority level (default: NORMAL)
        metadata: Ancillary caller context
        created_at: Creation timestamp (UTC)

    Example:
        notification = Notification(
            recipient="user@example.com",
            subject="Welcome",
            body="Thanks for signing up",
            channel=Channel.EMAIL,
        )
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    recipient: Optional[str] = None
    subject: Optional[str] = None
    body: Optional[str] = None
    channel: Channel
    priority: Priority = Priority.NORMAL
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=_utcnow)


class NotificationResult(BaseModel):
    """Outcome of a send operation.

    Attributes:
        notification_id: ID of the notification that was sent
        success: Whether delivery succeeded
        channel: Channel used (None for composite results)
        provider_id: Delivery-system tracking ID, only set on success
        message: Human-readable outcome
        error_details: Failure details, only set on failure
        timestamp: When the send operation completed
        metadata: Channel-specific details (e.g. SMS segment count)
    """

    model_config = ConfigDict(frozen=True)

    notification_id: Optional[str] = None
    success: bool
    channel: Optional[Channel] = None
    provider_id: Optional[str] = None
    message: str
    error_details: Optional[str] = None
    timestamp: datetime = Field(default_factory=_utcnow)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        """Check if delivery was successful."""
        return self.success

    @classmethod
    def succeeded(
        cls,
        notification_id: Optional[str],
        channel: Optional[Channel],
        provider_id: str,
        message: str = "Notification sent successfully",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "NotificationResult":
        """Create a successful result."""
        return cls(
            notification_id=notification_id,
            success=True,
            channel=channel,
            provider_id=provider_id,
            message=message,
            metadata=metadata or {},
        )

    @classmethod
    def failure(
        cls,
        notification_id: Optional[str],
        channel: Optional[Channel],
        error_details: str,
    ) -> "NotificationResult":
        """Create a failed result."""
        return cls(
            notification_id=notification_id,
            success=False,
            channel=channel,
            message="Failed to send notification",
            error_details=error_details,
        )

    @classmethod
    def disabled(cls) -> "NotificationResult":
        """Result of a send on a disabled composite notifier."""
        return cls(success=True, message="Notifications are disabled")

    @classmethod
    def no_notifiers(cls) -> "NotificationResult":
        """Result of a send on a composite notifier with nothing configured."""
        return cls(success=True, message="No notifiers configured")

    @classmethod
    def composite(
        cls, results: List["NotificationResult"], total: int
    ) -> "NotificationResult":
        """Fold per-notifier results into one.

        Args:
            results: Results of the notifiers that completed
            total: Number of notifiers the send was fanned out to

        Returns:
            Successful when every notifier completed successfully
        """
        succeeded = sum(1 for r in results if r.success)
        return cls(
            success=succeeded == total,
            message=f"Sent to {succeeded}/{total} notifiers",
            metadata={
                "total": total,
                "succeeded": succeeded,
                "failed": total - succeeded,
                "provider_ids": [r.provider_id for r in results if r.provider_id],
            },
        )
