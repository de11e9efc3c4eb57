"""Channel handler interface.

A handler holds everything that differs between channels: validation
rules, request shape and result presentation. The send pipeline in
notifications.providers.provider is the same for every channel and only
calls these hooks.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict

from notifications.config import ProviderConfig
from notifications.models import Channel, Notification


class ChannelHandler(ABC):
    """Channel-specific hooks used by the provider pipeline.

    Example Implementation:
        class PagerHandler(ChannelHandler):
            channel = Channel.SMS

            def validate(self, notification, config):
                if len(notification.body) > 80:
                    raise NotificationValidationError("Page too long")

            def build_request(self, notification, config):
                return {"to": notification.recipient, "body": notification.body}

            def success_message(self, notification, config):
                return f"Page sent via {config.provider_name}"
    """

    channel: Channel

    @abstractmethod
    def validate(self, notification: Notification, config: ProviderConfig) -> None:
        """Apply channel-specific rules.

        Called after common validation, so recipient and body are known to
        be non-blank.

        Raises:
            NotificationValidationError: if the notification is rejected
        """
        pass

    @abstractmethod
    def build_request(
        self, notification: Notification, config: ProviderConfig
    ) -> Dict[str, Any]:
        """Build the request payload handed to the transport."""
        pass

    @abstractmethod
    def success_message(
        self, notification: Notification, config: ProviderConfig
    ) -> str:
        """Human-readable message for a successful result."""
        pass

    def result_metadata(
        self, notification: Notification, payload: Dict[str, Any]
    ) -> Dict[str, Any]:
        """Metadata attached to a successful result (default: the request)."""
        return dict(payload)
