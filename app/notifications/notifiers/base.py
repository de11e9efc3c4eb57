"""Notifier abstract base class.

Notifiers are fire-and-report senders configured with their own targets,
outside the channel-routed provider pipeline: no recipient validation and
no retry loop. All notifiers (Slack, FCM, Twilio, SendGrid, SMTP email and
the Notify composite) implement this interface.
"""

import uuid
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Union

from infrastructure.operations import OperationResult, classify_transport_error
from notifications.models import NotificationResult
from notifications.transports import DeliveryRequest, Transport
from notifications.validation import is_not_blank

DEFAULT_TIMEOUT_SECONDS = 10


class Notifier(ABC):
    """Abstract base class for notifiers.

    Example Implementation:
        class ConsoleNotifier(Notifier):

            @property
            def notifier_name(self) -> str:
                return "console"

            def send(self, subject, message):
                print(subject, message)
                return NotificationResult.succeeded(
                    notification_id=None,
                    channel=None,
                    provider_id=self.new_provider_id(),
                    message="Printed to console",
                )
    """

    @property
    @abstractmethod
    def notifier_name(self) -> str:
        """Short name used for logging and provider ids."""
        pass

    @abstractmethod
    def send(
        self, subject: Optional[str], message: Optional[str]
    ) -> NotificationResult:
        """Send a message to every configured target.

        Args:
            subject: Optional subject or title
            message: Optional message body

        Returns:
            Successful NotificationResult

        Raises:
            NotificationError: if nothing could be delivered
        """
        pass

    def new_provider_id(self) -> str:
        return f"{self.notifier_name}-{uuid.uuid4()}"


def deliver_request(
    transport: Transport,
    request: DeliveryRequest,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
) -> OperationResult:
    """Hand one request to a transport, classifying a raised exception."""
    try:
        return transport.deliver(request, timeout_seconds=timeout_seconds)
    except Exception as e:
        return classify_transport_error(e)


def clean_targets(targets: Union[str, Iterable[Optional[str]], None]) -> List[str]:
    """Trim targets and drop blank ones.

    Accepts an iterable or a comma-separated string, the form receivers
    take in provider properties.

    Example:
        clean_targets(" a@b.com, ,c@d.com") -> ["a@b.com", "c@d.com"]
    """
    if targets is None:
        return []
    if isinstance(targets, str):
        targets = targets.split(",")
    return [t.strip() for t in targets if is_not_blank(t)]
