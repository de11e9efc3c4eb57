"""Email channel handler."""

from typing import Any, Dict

from notifications.config import ProviderConfig
from notifications.exceptions import NotificationValidationError
from notifications.models import Channel, Notification
from notifications.providers.base import ChannelHandler
from notifications.validation import is_not_blank, is_valid_email


class EmailHandler(ChannelHandler):
    """Validates and shapes email deliveries.

    Requires a valid recipient address, a subject, and a valid sender
    address in the provider configuration.
    """

    channel = Channel.EMAIL

    def validate(self, notification: Notification, config: ProviderConfig) -> None:
        if not is_valid_email(notification.recipient):
            raise NotificationValidationError(
                f"Invalid email: {notification.recipient}"
            )
        if not is_not_blank(notification.subject):
            raise NotificationValidationError("Email subject required")
        if not is_valid_email(config.from_address):
            raise NotificationValidationError("Invalid from address")

    def build_request(
        self, notification: Notification, config: ProviderConfig
    ) -> Dict[str, Any]:
        return {
            "from": config.from_address,
            "to": notification.recipient,
            "subject": notification.subject,
            "body": notification.body,
        }

    def success_message(
        self, notification: Notification, config: ProviderConfig
    ) -> str:
        return f"Email sent via {config.provider_name}"
