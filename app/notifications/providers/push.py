"""Push channel handler."""

from typing import Any, Dict

from notifications.config import ProviderConfig
from notifications.exceptions import NotificationValidationError
from notifications.models import Channel, Notification
from notifications.providers.base import ChannelHandler
from notifications.validation import is_valid_device_token

MAX_TITLE_LENGTH = 65
MAX_BODY_LENGTH = 240
DEFAULT_TITLE = "Notification"


class PushHandler(ChannelHandler):
    """Validates and shapes push deliveries to a single device token."""

    channel = Channel.PUSH

    def validate(self, notification: Notification, config: ProviderConfig) -> None:
        if not is_valid_device_token(notification.recipient):
            raise NotificationValidationError("Invalid device token")
        title = notification.subject
        if title is not None and len(title) > MAX_TITLE_LENGTH:
            raise NotificationValidationError(
                f"Title too long (max {MAX_TITLE_LENGTH} characters)"
            )
        if len(notification.body) > MAX_BODY_LENGTH:
            raise NotificationValidationError(
                f"Body too long (max {MAX_BODY_LENGTH} characters)"
            )

    def build_request(
        self, notification: Notification, config: ProviderConfig
    ) -> Dict[str, Any]:
        return {
            "token": notification.recipient,
            "notification": {
                "title": notification.subject or DEFAULT_TITLE,
                "body": notification.body,
                "sound": config.get_property("sound", "default"),
            },
            "priority": "high",
        }

    def success_message(
        self, notification: Notification, config: ProviderConfig
    ) -> str:
        return f"Push sent via {config.provider_name}"
