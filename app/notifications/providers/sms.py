"""SMS channel handler."""

from typing import Any, Dict

from notifications.config import ProviderConfig
from notifications.encoding import segments
from notifications.exceptions import NotificationValidationError
from notifications.models import Channel, Notification
from notifications.providers.base import ChannelHandler
from notifications.validation import is_valid_phone_number

MAX_SMS_LENGTH = 1600


class SmsHandler(ChannelHandler):
    """Validates and shapes SMS deliveries.

    Results carry the number of segments the body occupies.
    """

    channel = Channel.SMS

    def validate(self, notification: Notification, config: ProviderConfig) -> None:
        if not is_valid_phone_number(notification.recipient):
            raise NotificationValidationError(
                f"Invalid phone: {notification.recipient}"
            )
        if len(notification.body) > MAX_SMS_LENGTH:
            raise NotificationValidationError(
                f"SMS too long: {len(notification.body)} characters "
                f"(max {MAX_SMS_LENGTH})"
            )

    def build_request(
        self, notification: Notification, config: ProviderConfig
    ) -> Dict[str, Any]:
        return {
            "from": config.from_address,
            "to": notification.recipient,
            "body": notification.body,
        }

    def success_message(
        self, notification: Notification, config: ProviderConfig
    ) -> str:
        return f"SMS sent ({segments(notification.body)} segments)"

    def result_metadata(
        self, notification: Notification, payload: Dict[str, Any]
    ) -> Dict[str, Any]:
        return {"segments": segments(notification.body)}
