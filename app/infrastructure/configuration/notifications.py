"""Notification dispatch settings."""

from typing import Dict

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings
from infrastructure.configuration.providers import (
    ChatProviderSettings,
    EmailProviderSettings,
    ProviderSettings,
    PushProviderSettings,
    SmsProviderSettings,
)


class NotificationSettings(InfrastructureSettings):
    """Notification dispatch configuration.

    Aggregates the per-channel provider settings and the async dispatch
    pool size.

    Environment Variables:
        NOTIFY_ASYNC_MAX_WORKERS: Thread pool size for async/batch dispatch (default: 4)
        NOTIFY_<CHANNEL>_*: See ProviderSettings

    Example:
        ```python
        from infrastructure.configuration import get_settings

        settings = get_settings()

        for name, provider in settings.notifications.by_channel().items():
            if provider.ENABLED:
                ...
        ```
    """

    ASYNC_MAX_WORKERS: int = Field(default=4, ge=1, alias="NOTIFY_ASYNC_MAX_WORKERS")

    email: EmailProviderSettings
    sms: SmsProviderSettings
    push: PushProviderSettings
    chat: ChatProviderSettings

    def __init__(self, **kwargs):
        """Initialize with automatic per-channel settings instantiation.

        Args:
            **kwargs: Optional overrides for specific channels.
        """
        channel_map = {
            "email": EmailProviderSettings,
            "sms": SmsProviderSettings,
            "push": PushProviderSettings,
            "chat": ChatProviderSettings,
        }

        for name, settings_class in channel_map.items():
            if name not in kwargs:
                kwargs[name] = settings_class()

        super().__init__(**kwargs)

    def by_channel(self) -> Dict[str, ProviderSettings]:
        """Provider settings keyed by channel value."""
        return {
            "email": self.email,
            "sms": self.sms,
            "push": self.push,
            "chat": self.chat,
        }
