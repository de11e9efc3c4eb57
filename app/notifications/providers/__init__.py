"""Notification providers: the shared send pipeline and channel handlers."""

from notifications.providers.base import ChannelHandler
from notifications.providers.chat import ChatHandler
from notifications.providers.email import EmailHandler
from notifications.providers.provider import (
    HANDLERS,
    NotificationProvider,
    get_handler,
)
from notifications.providers.push import PushHandler
from notifications.providers.sms import SmsHandler

__all__ = [
    "ChannelHandler",
    "NotificationProvider",
    "HANDLERS",
    "get_handler",
    "ChatHandler",
    "EmailHandler",
    "PushHandler",
    "SmsHandler",
]
