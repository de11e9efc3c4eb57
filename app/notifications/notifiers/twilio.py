"""Twilio SMS notifier."""

import uuid
from typing import Iterable, List, Optional

from infrastructure.logging import get_module_logger
from notifications.config import ProviderConfig
from notifications.exceptions import ConfigurationError, NotificationError
from notifications.models import Channel, NotificationResult
from notifications.notifiers.base import Notifier, clean_targets, deliver_request
from notifications.transports import DeliveryRequest, SimulatedTransport, Transport
from notifications.validation import is_not_blank

logger = get_module_logger()


def build_sms_body(subject: Optional[str], message: Optional[str]) -> str:
    """Fold the subject into the SMS text, which has no subject line."""
    if not is_not_blank(subject):
        return message or ""
    if not is_not_blank(message):
        return subject
    return f"{subject}\n{message}"


class TwilioNotifier(Notifier):
    """Send SMS messages through Twilio, one message per recipient.

    Args:
        account_sid: Twilio account SID
        auth_token: Twilio auth token
        from_phone_number: Sender number
        to_phone_numbers: Recipient numbers
        messaging_service_sid: Optional messaging service SID
        max_price: Optional maximum price per message
        transport: Delivery transport (default: SimulatedTransport)

    Raises:
        ConfigurationError: if the SID, token or sender number is blank
    """

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_phone_number: str,
        to_phone_numbers: Iterable[str] = (),
        messaging_service_sid: Optional[str] = None,
        max_price: Optional[float] = None,
        transport: Optional[Transport] = None,
    ):
        if not is_not_blank(account_sid):
            raise ConfigurationError("Twilio Account SID is required")
        if not is_not_blank(auth_token):
            raise ConfigurationError("Twilio Auth Token is required")
        if not is_not_blank(from_phone_number):
            raise ConfigurationError("From phone number is required")

        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_phone_number = from_phone_number
        self.to_phone_numbers: List[str] = clean_targets(to_phone_numbers)
        self.messaging_service_sid = messaging_service_sid
        self.max_price = max_price
        self._transport = transport or SimulatedTransport()

    @classmethod
    def from_config(
        cls, config: ProviderConfig, transport: Optional[Transport] = None
    ) -> "TwilioNotifier":
        """Build from a provider config.

        api_key holds the account SID and api_secret the auth token.
        Recipients come from the "receivers" property.
        """
        return cls(
            account_sid=config.api_key,
            auth_token=config.api_secret,
            from_phone_number=config.from_address,
            to_phone_numbers=clean_targets(config.get_property("receivers")),
            messaging_service_sid=config.get_property("messaging_service_sid"),
            transport=transport,
        )

    @property
    def notifier_name(self) -> str:
        return "twilio"

    def add_to(self, *phone_numbers: str) -> "TwilioNotifier":
        self.to_phone_numbers.extend(clean_targets(phone_numbers))
        return self

    def send(
        self, subject: Optional[str], message: Optional[str]
    ) -> NotificationResult:
        if not self.to_phone_numbers:
            raise NotificationError("No recipients configured for Twilio notifier")

        body = build_sms_body(subject, message)
        logger.info(
            "sending_twilio_sms",
            recipient_count=len(self.to_phone_numbers),
            body_length=len(body),
        )

        notification_id = str(uuid.uuid4())
        for phone_number in self.to_phone_numbers:
            payload = {"from": self.from_phone_number, "to": phone_number, "body": body}
            if self.messaging_service_sid:
                payload["messaging_service_sid"] = self.messaging_service_sid
            if self.max_price is not None:
                payload["max_price"] = self.max_price

            verdict = deliver_request(
                self._transport,
                DeliveryRequest(
                    notification_id=notification_id,
                    channel=Channel.SMS,
                    provider_name="Twilio",
                    payload=payload,
                    endpoint=f"Accounts/{self.account_sid}/Messages.json",
                ),
            )
            if not verdict.is_success:
                logger.error(
                    "twilio_sms_failed",
                    error_code=verdict.error_code,
                    error=verdict.message,
                )
                raise NotificationError(
                    f"Failed to send SMS via Twilio: {verdict.message}"
                ) from verdict.cause

        provider_id = self.new_provider_id()
        logger.info("twilio_sms_sent", provider_id=provider_id)
        return NotificationResult.succeeded(
            notification_id=notification_id,
            channel=Channel.SMS,
            provider_id=provider_id,
            message=f"SMS sent to {len(self.to_phone_numbers)} recipients via Twilio",
        )
