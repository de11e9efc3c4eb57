"""Multi-channel notification dispatch.

Routes notifications to one provider per channel (email, SMS, push,
chat). Each provider validates, then delivers with bounded retries.

Usage:
    from notifications import (
        Channel,
        Notification,
        ProviderConfig,
        create_service,
    )

    service = create_service(
        {
            Channel.EMAIL: ProviderConfig(
                channel=Channel.EMAIL,
                provider_name="SendGrid",
                api_key="SG.xxx",
                from_address="noreply@example.com",
            )
        }
    )
    result = service.dispatch(
        Notification(
            recipient="user@example.com",
            subject="Welcome",
            body="Thanks for signing up",
            channel=Channel.EMAIL,
        )
    )
"""

from notifications.config import ProviderConfig
from notifications.encoding import is_unicode, segments
from notifications.exceptions import (
    ConfigurationError,
    DeliveryError,
    ErrorType,
    NotificationError,
    NotificationValidationError,
    UnsupportedChannelError,
)
from notifications.factory import (
    create_provider,
    create_service,
    create_service_from_providers,
    create_service_from_settings,
    create_single_channel_service,
    provider_configs_from_settings,
)
from notifications.models import Channel, Notification, NotificationResult, Priority
from notifications.notifiers import (
    EmailNotifier,
    FcmNotifier,
    Notifier,
    Notify,
    SendGridNotifier,
    SlackNotifier,
    TwilioNotifier,
)
from notifications.providers import ChannelHandler, NotificationProvider
from notifications.service import NotificationService
from notifications.transports import DeliveryRequest, SimulatedTransport, Transport

__all__ = [
    # Models
    "Channel",
    "Priority",
    "Notification",
    "NotificationResult",
    "ProviderConfig",
    # Errors
    "ErrorType",
    "NotificationError",
    "ConfigurationError",
    "NotificationValidationError",
    "DeliveryError",
    "UnsupportedChannelError",
    # Pipeline
    "ChannelHandler",
    "NotificationProvider",
    "NotificationService",
    "DeliveryRequest",
    "Transport",
    "SimulatedTransport",
    "segments",
    "is_unicode",
    # Construction
    "create_provider",
    "create_service",
    "create_service_from_providers",
    "create_single_channel_service",
    "create_service_from_settings",
    "provider_configs_from_settings",
    # Notifiers
    "Notifier",
    "SlackNotifier",
    "FcmNotifier",
    "TwilioNotifier",
    "SendGridNotifier",
    "EmailNotifier",
    "Notify",
]
