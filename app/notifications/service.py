"""Notification routing service.

Maps each channel to exactly one provider and dispatches notifications
by channel. The channel set is fixed at construction.

Usage Example:
    from notifications import (
        Channel,
        Notification,
        NotificationService,
    )

    service = NotificationService(
        providers={Channel.EMAIL: email_provider, Channel.SMS: sms_provider},
    )

    result = service.dispatch(
        Notification(
            recipient="+15555551234",
            body="Your code is 123456",
            channel=Channel.SMS,
        )
    )
    logger.info("sent", segments=result.metadata["segments"])
"""

import contextvars
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Set

import structlog

from infrastructure.logging import bind_dispatch_context
from notifications.exceptions import (
    ConfigurationError,
    NotificationError,
    UnsupportedChannelError,
)
from notifications.models import Channel, Notification, NotificationResult
from notifications.providers import NotificationProvider

logger = structlog.get_logger()

DEFAULT_MAX_WORKERS = 4


class NotificationService:
    """Channel-routed notification service.

    Attributes:
        providers: Read-only mapping of Channel to NotificationProvider

    Example:
        service = NotificationService(providers={Channel.EMAIL: provider})
        if service.is_channel_supported(Channel.EMAIL):
            result = service.dispatch(notification)
    """

    def __init__(
        self,
        providers: Optional[Mapping[Channel, NotificationProvider]],
        max_workers: int = DEFAULT_MAX_WORKERS,
    ):
        """Initialize the routing service.

        Args:
            providers: Mapping of channel to provider (at least one entry)
            max_workers: Thread pool size for dispatch_async/dispatch_batch

        Raises:
            ConfigurationError: if no provider is supplied
        """
        if not providers:
            raise ConfigurationError("At least one provider must be configured")

        self.providers: Mapping[Channel, NotificationProvider] = MappingProxyType(
            dict(providers)
        )
        self._max_workers = max_workers
        self._executor: Optional[ThreadPoolExecutor] = None
        self._executor_lock = threading.Lock()

        logger.info(
            "initialized_notification_service",
            channels=[channel.value for channel in self.providers],
            provider_count=len(self.providers),
        )

    def dispatch(self, notification: Notification) -> NotificationResult:
        """Send a notification through the provider for its channel.

        Args:
            notification: Notification to deliver

        Returns:
            NotificationResult from the provider

        Raises:
            UnsupportedChannelError: no enabled provider for the channel
            NotificationValidationError: rejected by the provider
            DeliveryError: delivery failed after retries
        """
        provider = self._resolve_provider(notification)

        try:
            with bind_dispatch_context(
                correlation_id=notification.metadata.get("correlation_id"),
                notification_id=notification.id,
                channel=notification.channel.value,
            ):
                result = provider.send(notification)
        except NotificationError as e:
            logger.error(
                "notification_dispatch_failed",
                channel=notification.channel.value,
                notification_id=notification.id,
                error_type=e.error_type.value,
                error=e.message,
            )
            raise

        logger.debug(
            "notification_dispatched",
            channel=notification.channel.value,
            notification_id=notification.id,
            provider_id=result.provider_id,
        )
        return result

    def dispatch_async(self, notification: Notification) -> "Future[NotificationResult]":
        """Dispatch on the service thread pool.

        Classified failures are reported as failed NotificationResult
        values instead of exceptions on this path. The caller's logging
        context (e.g. its correlation id) is carried onto the worker thread.

        Args:
            notification: Notification to deliver

        Returns:
            Future resolving to a NotificationResult
        """
        context = contextvars.copy_context()
        return self._get_executor().submit(
            context.run, self._dispatch_to_result, notification
        )

    def dispatch_batch(
        self, notifications: List[Notification]
    ) -> List[NotificationResult]:
        """Dispatch several notifications concurrently.

        Args:
            notifications: Notifications to deliver

        Returns:
            One NotificationResult per notification, in input order
        """
        if not notifications:
            logger.warning("dispatch_batch_called_with_no_notifications")
            return []

        logger.info("dispatching_notification_batch", batch_size=len(notifications))
        futures = [self.dispatch_async(n) for n in notifications]
        results = [future.result() for future in futures]

        success_count = sum(1 for r in results if r.success)
        logger.info(
            "notification_batch_completed",
            success_count=success_count,
            total=len(results),
        )
        return results

    def get_provider(self, channel: Channel) -> Optional[NotificationProvider]:
        return self.providers.get(channel)

    def is_channel_supported(self, channel: Channel) -> bool:
        """Check if a provider is registered for the channel."""
        return channel in self.providers

    def supported_channels(self) -> Set[Channel]:
        return set(self.providers.keys())

    def health_check(self) -> Dict[Channel, bool]:
        """Check configuration health of every provider.

        Returns:
            Dict mapping channel to health status (True=healthy)
        """
        return {
            channel: provider.is_configured()
            for channel, provider in self.providers.items()
        }

    def is_healthy(self) -> bool:
        healthy = all(self.health_check().values())
        logger.debug("notification_service_health", healthy=healthy)
        return healthy

    def statistics(self) -> Dict[str, Any]:
        """Summarize the service configuration."""
        health = self.health_check()
        return {
            "total_providers": len(self.providers),
            "supported_channels": sorted(c.value for c in self.providers),
            "healthy": all(health.values()),
            "provider_health": {c.value: ok for c, ok in health.items()},
            "providers": {
                c.value: p.provider_name for c, p in self.providers.items()
            },
        }

    def close(self) -> None:
        """Shut down the async thread pool, waiting for pending dispatches."""
        with self._executor_lock:
            if self._executor is not None:
                self._executor.shutdown(wait=True)
                self._executor = None
                logger.info("notification_service_closed")

    def __enter__(self) -> "NotificationService":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _resolve_provider(self, notification: Notification) -> NotificationProvider:
        channel = notification.channel
        provider = self.providers.get(channel)

        if provider is None:
            logger.error(
                "channel_not_supported",
                channel=channel.value,
                available_channels=[c.value for c in self.providers],
            )
            raise UnsupportedChannelError(channel.value)

        if not provider.is_configured():
            logger.error(
                "provider_not_configured",
                channel=channel.value,
                provider=provider.provider_name,
            )
            raise UnsupportedChannelError(
                channel.value,
                f"Provider for channel {channel.value} is not properly configured",
            )

        return provider

    def _dispatch_to_result(self, notification: Notification) -> NotificationResult:
        try:
            return self.dispatch(notification)
        except NotificationError as e:
            return NotificationResult.failure(
                notification.id, notification.channel, e.message
            )

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._max_workers,
                    thread_name_prefix="notification-dispatch",
                )
            return self._executor
