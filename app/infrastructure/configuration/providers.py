"""Per-channel delivery provider settings."""

from typing import Any, Dict

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from infrastructure.configuration.base import IntegrationSettings


class ProviderSettings(IntegrationSettings):
    """Settings for the provider serving one channel.

    Each channel subclass reads the same fields under its own prefix,
    e.g. NOTIFY_EMAIL_API_KEY or NOTIFY_SMS_MAX_RETRIES.

    Environment Variables (with channel prefix):
        ENABLED: Register a provider for this channel (default: False)
        PROVIDER: Provider name, e.g. SendGrid, Twilio, Firebase, Slack
        API_KEY: API key or token (required when enabled)
        API_SECRET: Optional API secret
        ENDPOINT: Optional custom endpoint
        FROM_ADDRESS: Sender email address / number / app identifier
        MAX_RETRIES: Retries after the first failed attempt (default: 3)
        TIMEOUT_SECONDS: Per-attempt time budget (default: 30)
        PROPERTIES: JSON object of provider-specific properties

    Example:
        ```python
        from infrastructure.configuration import get_settings

        settings = get_settings()

        if settings.notifications.email.ENABLED:
            api_key = settings.notifications.email.API_KEY
        ```
    """

    ENABLED: bool = False
    PROVIDER: str = ""
    API_KEY: str = ""
    API_SECRET: str | None = None
    ENDPOINT: str | None = None
    FROM_ADDRESS: str | None = None
    MAX_RETRIES: int = Field(default=3, ge=0)
    TIMEOUT_SECONDS: float = Field(default=30, gt=0)
    PROPERTIES: Dict[str, Any] = Field(default_factory=dict)


class EmailProviderSettings(ProviderSettings):
    """Email provider settings (NOTIFY_EMAIL_*)."""

    model_config = SettingsConfigDict(env_prefix="NOTIFY_EMAIL_")


class SmsProviderSettings(ProviderSettings):
    """SMS provider settings (NOTIFY_SMS_*)."""

    model_config = SettingsConfigDict(env_prefix="NOTIFY_SMS_")


class PushProviderSettings(ProviderSettings):
    """Push provider settings (NOTIFY_PUSH_*)."""

    model_config = SettingsConfigDict(env_prefix="NOTIFY_PUSH_")


class ChatProviderSettings(ProviderSettings):
    """Chat provider settings (NOTIFY_CHAT_*)."""

    model_config = SettingsConfigDict(env_prefix="NOTIFY_CHAT_")
