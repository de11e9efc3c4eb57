"""Slack notifier.

Posts a formatted message to an incoming webhook or, with a bot token, to
each configured channel.
"""

import uuid
from typing import Iterable, List, Optional

from infrastructure.logging import get_module_logger
from infrastructure.operations import OperationResult
from notifications.exceptions import ConfigurationError, NotificationError
from notifications.models import Channel, NotificationResult
from notifications.notifiers.base import Notifier, clean_targets, deliver_request
from notifications.providers.chat import format_chat_text
from notifications.transports import DeliveryRequest, SimulatedTransport, Transport
from notifications.validation import is_not_blank

logger = get_module_logger()


class SlackNotifier(Notifier):
    """Send notifications to Slack.

    Args:
        webhook_url: Incoming webhook URL
        bot_token: Bot token, used together with channels
        channels: Channel names ("#general") or user handles ("@user")
        username: Display name of the posting bot
        icon_emoji: Optional emoji avatar, e.g. ":robot_face:"
        icon_url: Optional avatar image URL
        markdown: Render the subject in bold
        transport: Delivery transport (default: SimulatedTransport)

    Raises:
        ConfigurationError: if neither webhook_url nor bot_token is given, or
            only a bot token is given without channels

    Example:
        slack = SlackNotifier(webhook_url="https://hooks.slack.com/services/...")
        slack.send("Deploy finished", "Version 1.4.2 is live")
    """

    def __init__(
        self,
        webhook_url: Optional[str] = None,
        bot_token: Optional[str] = None,
        channels: Iterable[str] = (),
        username: str = "Notification Bot",
        icon_emoji: Optional[str] = None,
        icon_url: Optional[str] = None,
        markdown: bool = True,
        transport: Optional[Transport] = None,
    ):
        if webhook_url is None and bot_token is None:
            raise ConfigurationError("Either webhook URL or bot token is required")

        self.webhook_url = webhook_url.strip() if webhook_url is not None else None
        self.bot_token = bot_token
        self.channels: List[str] = clean_targets(channels)

        if self.webhook_url is None and not self.channels:
            raise ConfigurationError(
                "At least one channel is required when using a bot token"
            )

        self.username = username
        self.icon_emoji = icon_emoji
        self.icon_url = icon_url
        self.markdown = markdown
        self._transport = transport or SimulatedTransport()

    @property
    def notifier_name(self) -> str:
        return "slack"

    def send(
        self, subject: Optional[str], message: Optional[str]
    ) -> NotificationResult:
        """Post the message to the webhook or every configured channel."""
        if not is_not_blank(self.webhook_url) and not self.channels:
            raise NotificationError(
                "No webhook URL or channels configured for Slack notifier"
            )

        text = format_chat_text(subject, message, markdown=self.markdown)
        if is_not_blank(self.webhook_url):
            targets: List[Optional[str]] = [None]
            description = "webhook"
        else:
            targets = list(self.channels)
            description = f"{len(targets)} channels"

        notification_id = str(uuid.uuid4())
        for target in targets:
            verdict = self._deliver(notification_id, target, text)
            if not verdict.is_success:
                logger.error(
                    "slack_notification_failed",
                    target=target or "webhook",
                    error_code=verdict.error_code,
                    error=verdict.message,
                )
                raise NotificationError(
                    f"Failed to send Slack notification: {verdict.message}"
                ) from verdict.cause

        provider_id = self.new_provider_id()
        logger.info("slack_notification_sent", provider_id=provider_id, target=description)
        return NotificationResult.succeeded(
            notification_id=notification_id,
            channel=Channel.CHAT,
            provider_id=provider_id,
            message=f"Slack notification sent to {description}",
        )

    def _deliver(
        self, notification_id: str, target: Optional[str], text: str
    ) -> OperationResult:
        payload = {
            "text": text,
            "username": self.username,
            "mrkdwn": self.markdown,
        }
        if target is not None:
            payload["channel"] = target
        if self.icon_emoji:
            payload["icon_emoji"] = self.icon_emoji
        if self.icon_url:
            payload["icon_url"] = self.icon_url

        request = DeliveryRequest(
            notification_id=notification_id,
            channel=Channel.CHAT,
            provider_name="Slack",
            payload=payload,
            endpoint=self.webhook_url,
        )
        return deliver_request(self._transport, request)
