"""Chat channel handler.

Recipients are either a #channel name or an incoming webhook URL.
"""

from typing import Any, Dict

from notifications.config import ProviderConfig
from notifications.exceptions import NotificationValidationError
from notifications.models import Channel, Notification
from notifications.providers.base import ChannelHandler
from notifications.validation import is_not_blank, is_valid_chat_target


def format_chat_text(subject, body, markdown: bool = True) -> str:
    """Join subject and body into one chat message, subject bold in markdown."""
    lines = []
    if is_not_blank(subject):
        lines.append(f"*{subject}*" if markdown else subject)
    if is_not_blank(body):
        lines.append(body)
    return "\n".join(lines)


class ChatHandler(ChannelHandler):
    """Validates and shapes chat deliveries."""

    channel = Channel.CHAT

    def validate(self, notification: Notification, config: ProviderConfig) -> None:
        if not is_valid_chat_target(notification.recipient):
            raise NotificationValidationError(
                f"Invalid chat target: {notification.recipient}"
            )

    def build_request(
        self, notification: Notification, config: ProviderConfig
    ) -> Dict[str, Any]:
        return {
            "channel": notification.recipient,
            "text": format_chat_text(
                notification.subject,
                notification.body,
                markdown=config.get_property("markdown", True),
            ),
            "username": config.get_property("username", config.from_address),
        }

    def success_message(
        self, notification: Notification, config: ProviderConfig
    ) -> str:
        return f"Chat message sent via {config.provider_name}"
