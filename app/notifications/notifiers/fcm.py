"""Firebase Cloud Messaging notifier."""

import uuid
from typing import Any, Dict, Iterable, Optional

from infrastructure.logging import get_module_logger
from notifications.exceptions import ConfigurationError, NotificationError
from notifications.models import Channel, NotificationResult
from notifications.notifiers.base import Notifier, clean_targets, deliver_request
from notifications.transports import DeliveryRequest, SimulatedTransport, Transport
from notifications.validation import is_not_blank

logger = get_module_logger()


class FcmNotifier(Notifier):
    """Send push notifications through FCM.

    The subject becomes the title and the message the body. When several
    targets are configured, device tokens win over a topic, and a topic
    wins over a condition.

    Args:
        project_id: Firebase project id
        device_tokens: Device registration tokens
        topic: Topic name
        condition: Topic condition, e.g. "'news' in topics"
        data: Extra key/value data sent with the message
        transport: Delivery transport (default: SimulatedTransport)

    Raises:
        ConfigurationError: if project_id is blank
    """

    def __init__(
        self,
        project_id: str,
        device_tokens: Iterable[str] = (),
        topic: Optional[str] = None,
        condition: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
        transport: Optional[Transport] = None,
    ):
        if not is_not_blank(project_id):
            raise ConfigurationError("FCM Project ID is required")

        self.project_id = project_id
        self.device_tokens = clean_targets(device_tokens)
        self.topic = topic
        self.condition = condition
        self.data = dict(data or {})
        self._transport = transport or SimulatedTransport()

    @property
    def notifier_name(self) -> str:
        return "fcm"

    def target_description(self) -> Optional[str]:
        """Describe the target that send() would use, None if there is none."""
        if self.device_tokens:
            return f"{len(self.device_tokens)} devices"
        if is_not_blank(self.topic):
            return f"topic '{self.topic}'"
        if is_not_blank(self.condition):
            return f"condition '{self.condition}'"
        return None

    def send(
        self, subject: Optional[str], message: Optional[str]
    ) -> NotificationResult:
        target = self.target_description()
        if target is None:
            raise NotificationError(
                "No device tokens, topic, or condition configured for FCM notifier"
            )

        payload: Dict[str, Any] = {
            "notification": {"title": subject or "", "body": message or ""},
            "data": self.data,
        }
        if self.device_tokens:
            payload["tokens"] = list(self.device_tokens)
        elif is_not_blank(self.topic):
            payload["topic"] = self.topic
        else:
            payload["condition"] = self.condition

        notification_id = str(uuid.uuid4())
        request = DeliveryRequest(
            notification_id=notification_id,
            channel=Channel.PUSH,
            provider_name="FCM",
            payload=payload,
            endpoint=f"projects/{self.project_id}/messages:send",
        )
        verdict = deliver_request(self._transport, request)

        if not verdict.is_success:
            logger.error(
                "fcm_notification_failed",
                project_id=self.project_id,
                error_code=verdict.error_code,
                error=verdict.message,
            )
            raise NotificationError(
                f"Failed to send push notification via FCM: {verdict.message}"
            ) from verdict.cause

        provider_id = self.new_provider_id()
        logger.info("fcm_notification_sent", provider_id=provider_id, target=target)
        return NotificationResult.succeeded(
            notification_id=notification_id,
            channel=Channel.PUSH,
            provider_id=provider_id,
            message=f"Push notification sent to {target} via FCM",
        )
