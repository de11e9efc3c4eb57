"""Non-routed notifiers: Slack, FCM, Twilio, SendGrid, SMTP email and the
Notify composite."""

from notifications.notifiers.base import Notifier
from notifications.notifiers.email import EmailNotifier, SendGridNotifier
from notifications.notifiers.fcm import FcmNotifier
from notifications.notifiers.notify import Notify
from notifications.notifiers.slack import SlackNotifier
from notifications.notifiers.twilio import TwilioNotifier

__all__ = [
    "Notifier",
    "EmailNotifier",
    "FcmNotifier",
    "Notify",
    "SendGridNotifier",
    "SlackNotifier",
    "TwilioNotifier",
]
