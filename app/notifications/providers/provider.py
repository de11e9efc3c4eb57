"""Provider send pipeline.

One pipeline serves every channel:

1. Common validation (channel match, recipient and body present)
2. Channel-specific validation (ChannelHandler.validate)
3. Up to max_retries + 1 sequential delivery attempts
4. Result construction on success, DeliveryError on exhaustion

Validation failures never consume an attempt. Permanent transport
verdicts stop the attempt loop immediately.
"""

import time
import uuid
from typing import Callable, Dict, Optional

import structlog

from infrastructure.operations import OperationResult, classify_transport_error
from notifications.config import (
    RETRY_BACKOFF_MAX_SECONDS,
    RETRY_BACKOFF_SECONDS,
    ProviderConfig,
)
from notifications.exceptions import (
    ConfigurationError,
    DeliveryError,
    NotificationValidationError,
)
from notifications.models import Channel, Notification, NotificationResult
from notifications.providers.base import ChannelHandler
from notifications.providers.chat import ChatHandler
from notifications.providers.email import EmailHandler
from notifications.providers.push import PushHandler
from notifications.providers.sms import SmsHandler
from notifications.transports import DeliveryRequest, SimulatedTransport, Transport
from notifications.validation import is_not_blank

logger = structlog.get_logger()

HANDLERS: Dict[Channel, ChannelHandler] = {
    Channel.EMAIL: EmailHandler(),
    Channel.SMS: SmsHandler(),
    Channel.PUSH: PushHandler(),
    Channel.CHAT: ChatHandler(),
}

DEFAULT_BACKOFF_MAX_SECONDS = 30.0


def get_handler(channel: Channel) -> ChannelHandler:
    """Return the handler registered for a channel.

    Raises:
        ConfigurationError: if no handler exists for the channel
    """
    handler = HANDLERS.get(channel)
    if handler is None:
        raise ConfigurationError(f"No channel handler for {channel}")
    return handler


class NotificationProvider:
    """Validates and delivers notifications for one channel.

    Holds no per-call state: concurrent sends on the same provider are
    independent.

    Args:
        config: Validated ProviderConfig
        transport: Delivery transport (default: SimulatedTransport)
        handler: Channel hooks (default: registered handler for config.channel)
        sleep: Sleep function used for retry backoff
        clock: Monotonic clock used to enforce timeout_seconds

    Example:
        provider = NotificationProvider(
            ProviderConfig(
                channel=Channel.SMS,
                provider_name="Twilio",
                api_key="key",
                from_address="+15550001111",
            )
        )
        result = provider.send(notification)
        print(result.metadata["segments"])
    """

    def __init__(
        self,
        config: ProviderConfig,
        transport: Optional[Transport] = None,
        handler: Optional[ChannelHandler] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        if config is None:
            raise ConfigurationError("Provider configuration cannot be null")

        handler = handler or get_handler(config.channel)
        if handler.channel != config.channel:
            raise ConfigurationError(
                f"Handler for {handler.channel.value} cannot serve "
                f"{config.channel.value} provider {config.provider_name}"
            )

        self._config = config
        self._handler = handler
        self._transport = transport or SimulatedTransport()
        self._sleep = sleep
        self._clock = clock

        logger.info(
            "initialized_notification_provider",
            provider=config.provider_name,
            channel=config.channel.value,
            max_retries=config.max_retries,
            timeout_seconds=config.timeout_seconds,
        )

    @property
    def config(self) -> ProviderConfig:
        return self._config

    @property
    def channel(self) -> Channel:
        return self._config.channel

    @property
    def provider_name(self) -> str:
        return self._config.provider_name

    def is_configured(self) -> bool:
        """True if the provider is enabled and has credentials."""
        return self._config.enabled and is_not_blank(self._config.api_key)

    def validate(self, notification: Notification) -> None:
        """Run common and channel-specific validation.

        Raises:
            NotificationValidationError: with a descriptive reason
        """
        if notification is None:
            raise NotificationValidationError("Notification cannot be null")
        if notification.channel != self.channel:
            raise NotificationValidationError(
                f"Channel mismatch: provider handles {self.channel.value}, "
                f"notification targets {notification.channel.value}"
            )
        if not is_not_blank(notification.recipient):
            raise NotificationValidationError("Recipient required")
        if not is_not_blank(notification.body):
            raise NotificationValidationError("Body required")

        self._handler.validate(notification, self._config)

    def send(self, notification: Notification) -> NotificationResult:
        """Validate and deliver a notification.

        Args:
            notification: Notification targeting this provider's channel

        Returns:
            Successful NotificationResult

        Raises:
            NotificationValidationError: notification rejected, no attempt made
            DeliveryError: every attempt failed, or a permanent failure occurred
        """
        log = logger.bind(
            provider=self.provider_name,
            channel=self.channel.value,
            notification_id=getattr(notification, "id", None),
        )
        log.info("notification_send_started")

        try:
            self.validate(notification)
        except NotificationValidationError as e:
            log.warning("notification_validation_failed", error=e.message)
            raise

        payload = self._handler.build_request(notification, self._config)
        request = DeliveryRequest(
            notification_id=notification.id,
            channel=self.channel,
            provider_name=self.provider_name,
            payload=payload,
            endpoint=self._config.endpoint,
        )

        max_attempts = self._config.max_retries + 1
        verdict: Optional[OperationResult] = None

        for attempt in range(1, max_attempts + 1):
            verdict = self._attempt(request)

            if verdict.is_success:
                result = NotificationResult.succeeded(
                    notification_id=notification.id,
                    channel=self.channel,
                    provider_id=self._generate_provider_id(),
                    message=self._handler.success_message(notification, self._config),
                    metadata=self._handler.result_metadata(notification, payload),
                )
                log.info(
                    "notification_sent",
                    attempts=attempt,
                    provider_id=result.provider_id,
                )
                return result

            if not verdict.is_transient:
                log.error(
                    "delivery_failed_permanently",
                    attempt=attempt,
                    error_code=verdict.error_code,
                    error=verdict.message,
                )
                raise DeliveryError(
                    f"Delivery via {self.provider_name} failed: {verdict.message}",
                    attempts=attempt,
                    last_result=verdict,
                    retryable=False,
                ) from verdict.cause

            log.warning(
                "delivery_attempt_failed",
                attempt=attempt,
                max_attempts=max_attempts,
                error_code=verdict.error_code,
                error=verdict.message,
            )
            if attempt < max_attempts:
                self._backoff(attempt)

        log.error(
            "delivery_retries_exhausted",
            attempts=max_attempts,
            error_code=verdict.error_code,
            error=verdict.message,
        )
        raise DeliveryError(
            f"Delivery via {self.provider_name} failed after {max_attempts} "
            f"attempts: {verdict.message}",
            attempts=max_attempts,
            last_result=verdict,
        ) from verdict.cause

    def _attempt(self, request: DeliveryRequest) -> OperationResult:
        """Perform one delivery attempt and classify its outcome."""
        timeout = self._config.timeout_seconds
        started = self._clock()
        try:
            verdict = self._transport.deliver(request, timeout_seconds=timeout)
        except Exception as e:
            verdict = classify_transport_error(e)
        elapsed = self._clock() - started

        # Overrunning the budget counts as a timeout whatever the transport said
        if elapsed > timeout:
            return OperationResult.transient_error(
                f"Attempt exceeded {timeout}s timeout ({elapsed:.2f}s)",
                error_code="TIMEOUT",
                cause=verdict.cause,
            )
        return verdict

    def _backoff(self, attempt: int) -> None:
        base = float(self._config.get_property(RETRY_BACKOFF_SECONDS, 0))
        if base <= 0:
            return
        cap = float(
            self._config.get_property(
                RETRY_BACKOFF_MAX_SECONDS, DEFAULT_BACKOFF_MAX_SECONDS
            )
        )
        self._sleep(min(base * (2 ** (attempt - 1)), cap))

    def _generate_provider_id(self) -> str:
        return f"{self.provider_name.lower()}-{uuid.uuid4()}"
