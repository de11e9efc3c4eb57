"""Email notifiers: SendGrid and plain SMTP.

Both send a single message addressed to every configured recipient.
"""

import uuid
from typing import Any, Dict, Iterable, List, Optional

from infrastructure.logging import get_module_logger
from infrastructure.operations import OperationResult
from notifications.config import ProviderConfig
from notifications.exceptions import ConfigurationError, NotificationError
from notifications.models import Channel, NotificationResult
from notifications.notifiers.base import Notifier, clean_targets, deliver_request
from notifications.transports import DeliveryRequest, SimulatedTransport, Transport
from notifications.validation import is_not_blank

logger = get_module_logger()

DEFAULT_SMTP_PORT = 587
DEFAULT_FROM_NAME = "Notification Service"


class SendGridNotifier(Notifier):
    """Send email through the SendGrid API.

    Args:
        api_key: SendGrid API key
        from_address: Sender email address
        to_addresses: Recipient addresses
        from_name: Sender display name
        cc_addresses: Carbon copy recipients
        bcc_addresses: Blind carbon copy recipients
        reply_to: Reply-to address
        template_id: Dynamic template id, sent instead of the plain body
        template_data: Values substituted into the template
        categories: SendGrid categories for analytics
        custom_args: Custom tracking arguments
        transport: Delivery transport (default: SimulatedTransport)

    Raises:
        ConfigurationError: if the API key or sender address is blank
    """

    def __init__(
        self,
        api_key: str,
        from_address: str,
        to_addresses: Iterable[str] = (),
        from_name: str = "",
        cc_addresses: Iterable[str] = (),
        bcc_addresses: Iterable[str] = (),
        reply_to: Optional[str] = None,
        template_id: Optional[str] = None,
        template_data: Optional[Dict[str, Any]] = None,
        categories: Iterable[str] = (),
        custom_args: Optional[Dict[str, str]] = None,
        transport: Optional[Transport] = None,
    ):
        if not is_not_blank(api_key):
            raise ConfigurationError("SendGrid API key is required")
        if not is_not_blank(from_address):
            raise ConfigurationError("From address is required")

        self.api_key = api_key
        self.from_address = from_address
        self.from_name = from_name
        self.to_addresses: List[str] = clean_targets(to_addresses)
        self.cc_addresses = clean_targets(cc_addresses)
        self.bcc_addresses = clean_targets(bcc_addresses)
        self.reply_to = reply_to
        self.template_id = template_id
        self.template_data = dict(template_data or {})
        self.categories = clean_targets(categories)
        self.custom_args = dict(custom_args or {})
        self._transport = transport or SimulatedTransport()

    @classmethod
    def from_config(
        cls, config: ProviderConfig, transport: Optional[Transport] = None
    ) -> "SendGridNotifier":
        """Build from a provider config; recipients come from "receivers"."""
        return cls(
            api_key=config.api_key,
            from_address=config.from_address,
            to_addresses=clean_targets(config.get_property("receivers")),
            from_name=config.get_property("from_name", ""),
            template_id=config.get_property("template_id"),
            transport=transport,
        )

    @property
    def notifier_name(self) -> str:
        return "sendgrid"

    def add_to(self, *addresses: str) -> "SendGridNotifier":
        self.to_addresses.extend(clean_targets(addresses))
        return self

    def send(
        self, subject: Optional[str], message: Optional[str]
    ) -> NotificationResult:
        if not self.to_addresses:
            raise NotificationError("No recipients configured for SendGrid notifier")

        logger.info(
            "sending_sendgrid_email",
            recipient_count=len(self.to_addresses),
            subject=subject,
            template_id=self.template_id or "none",
        )

        payload: Dict[str, Any] = {
            "from": {"email": self.from_address, "name": self.from_name},
            "to": list(self.to_addresses),
            "subject": subject or "",
        }
        if self.template_id:
            payload["template_id"] = self.template_id
            payload["template_data"] = self.template_data
        else:
            payload["content"] = message or ""
        if self.cc_addresses:
            payload["cc"] = list(self.cc_addresses)
        if self.bcc_addresses:
            payload["bcc"] = list(self.bcc_addresses)
        if self.reply_to:
            payload["reply_to"] = self.reply_to
        if self.categories:
            payload["categories"] = list(self.categories)
        if self.custom_args:
            payload["custom_args"] = self.custom_args

        notification_id = str(uuid.uuid4())
        verdict = deliver_request(
            self._transport,
            DeliveryRequest(
                notification_id=notification_id,
                channel=Channel.EMAIL,
                provider_name="SendGrid",
                payload=payload,
                endpoint="v3/mail/send",
            ),
        )
        return _email_result(
            self, verdict, notification_id, "SendGrid", len(self.to_addresses)
        )


class EmailNotifier(Notifier):
    """Send email through an SMTP relay.

    Args:
        from_address: Sender email address
        to_addresses: Recipient addresses
        smtp_host: Relay host
        smtp_port: Relay port
        username: Optional SMTP username
        password: Optional SMTP password
        from_name: Sender display name
        use_plain_text: Send text/plain instead of text/html
        use_ssl: Connect with implicit TLS
        transport: Delivery transport (default: SimulatedTransport)

    Raises:
        ConfigurationError: if the sender address or SMTP host is blank
    """

    def __init__(
        self,
        from_address: str,
        to_addresses: Iterable[str] = (),
        smtp_host: str = "localhost",
        smtp_port: int = DEFAULT_SMTP_PORT,
        username: Optional[str] = None,
        password: Optional[str] = None,
        from_name: str = DEFAULT_FROM_NAME,
        use_plain_text: bool = False,
        use_ssl: bool = True,
        transport: Optional[Transport] = None,
    ):
        if not is_not_blank(from_address):
            raise ConfigurationError("From address is required")
        if not is_not_blank(smtp_host):
            raise ConfigurationError("SMTP host is required")

        self.from_address = from_address
        self.to_addresses: List[str] = clean_targets(to_addresses)
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.username = username
        self.password = password
        self.from_name = from_name
        self.use_plain_text = use_plain_text
        self.use_ssl = use_ssl
        self._transport = transport or SimulatedTransport()

    @classmethod
    def from_config(
        cls, config: ProviderConfig, transport: Optional[Transport] = None
    ) -> "EmailNotifier":
        """Build from a provider config.

        Reads smtp_host, smtp_port, from_name, username, password and
        receivers from the config properties. The sender is the config's
        from_address, falling back to a "from" property.

        Raises:
            ConfigurationError: if smtp_port is not an integer
        """
        try:
            smtp_port = int(config.get_property("smtp_port", DEFAULT_SMTP_PORT))
        except (TypeError, ValueError):
            raise ConfigurationError(
                f"smtp_port must be an integer, got {config.get_property('smtp_port')!r}"
            ) from None

        return cls(
            from_address=config.from_address or config.get_property("from"),
            to_addresses=clean_targets(config.get_property("receivers")),
            smtp_host=config.get_property("smtp_host", "localhost"),
            smtp_port=smtp_port,
            username=config.get_property("username"),
            password=config.get_property("password"),
            from_name=config.get_property("from_name", DEFAULT_FROM_NAME),
            transport=transport,
        )

    @property
    def notifier_name(self) -> str:
        return "smtp"

    def add_to(self, *addresses: str) -> "EmailNotifier":
        self.to_addresses.extend(clean_targets(addresses))
        return self

    def send(
        self, subject: Optional[str], message: Optional[str]
    ) -> NotificationResult:
        if not self.to_addresses:
            raise NotificationError("No receivers configured for email notifier")

        logger.info(
            "sending_smtp_email",
            smtp_host=self.smtp_host,
            smtp_port=self.smtp_port,
            recipient_count=len(self.to_addresses),
            subject=subject,
        )

        scheme = "smtps" if self.use_ssl else "smtp"
        notification_id = str(uuid.uuid4())
        verdict = deliver_request(
            self._transport,
            DeliveryRequest(
                notification_id=notification_id,
                channel=Channel.EMAIL,
                provider_name="SMTP",
                payload={
                    "from": self.from_address,
                    "from_name": self.from_name,
                    "to": list(self.to_addresses),
                    "subject": subject or "",
                    "body": message or "",
                    "content_type": "text/plain" if self.use_plain_text else "text/html",
                },
                endpoint=f"{scheme}://{self.smtp_host}:{self.smtp_port}",
            ),
        )
        return _email_result(
            self, verdict, notification_id, "SMTP", len(self.to_addresses)
        )


def _email_result(
    notifier: Notifier,
    verdict: OperationResult,
    notification_id: str,
    provider_name: str,
    recipient_count: int,
) -> NotificationResult:
    if not verdict.is_success:
        logger.error(
            "email_notification_failed",
            provider=provider_name,
            error_code=verdict.error_code,
            error=verdict.message,
        )
        raise NotificationError(
            f"Failed to send email via {provider_name}: {verdict.message}"
        ) from verdict.cause

    provider_id = notifier.new_provider_id()
    logger.info("email_notification_sent", provider=provider_name, provider_id=provider_id)
    return NotificationResult.succeeded(
        notification_id=notification_id,
        channel=Channel.EMAIL,
        provider_id=provider_id,
        message=f"Email sent to {recipient_count} recipients via {provider_name}",
    )
