"""Composite notifier broadcasting to several notifiers in parallel."""

from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

from infrastructure.logging import get_module_logger
from notifications.exceptions import NotificationError
from notifications.models import NotificationResult
from notifications.notifiers.base import Notifier

logger = get_module_logger()


class Notify(Notifier):
    """Send one message through every registered notifier.

    Partial failures are logged and reflected in the composite result;
    the send only raises when every notifier failed.

    Example:
        notify = Notify().use(slack, fcm)
        result = notify.send("Outage", "API latency is elevated")
        print(result.metadata["succeeded"], "/", result.metadata["total"])
    """

    def __init__(self, *notifiers: Notifier, disabled: bool = False):
        self._notifiers: List[Notifier] = []
        self._disabled = disabled
        self.use(*notifiers)

    @property
    def notifier_name(self) -> str:
        return "notify"

    def use(self, *notifiers: Optional[Notifier]) -> "Notify":
        """Register notifiers; None entries are ignored."""
        for notifier in notifiers:
            if notifier is not None:
                self._notifiers.append(notifier)
                logger.debug("notifier_added", notifier=notifier.notifier_name)
        return self

    def disable(self) -> "Notify":
        self._disabled = True
        logger.info("notify_disabled")
        return self

    def enable(self) -> "Notify":
        self._disabled = False
        logger.info("notify_enabled")
        return self

    @property
    def is_disabled(self) -> bool:
        return self._disabled

    @property
    def notifier_count(self) -> int:
        return len(self._notifiers)

    def send(
        self, subject: Optional[str], message: Optional[str]
    ) -> NotificationResult:
        """Fan the message out to all notifiers concurrently.

        Returns:
            disabled() when disabled, no_notifiers() when empty, otherwise
            the composite of the successful results

        Raises:
            NotificationError: if every notifier failed (the first failure)
        """
        if self._disabled:
            logger.debug("notify_disabled_skipping_send")
            return NotificationResult.disabled()

        if not self._notifiers:
            logger.warning("no_notifiers_configured")
            return NotificationResult.no_notifiers()

        notifiers = list(self._notifiers)
        total = len(notifiers)
        logger.info(
            "notify_sending",
            notifier_count=total,
            subject=subject,
            message_length=len(message) if message else 0,
        )

        results: List[NotificationResult] = []
        errors: List[Exception] = []

        with ThreadPoolExecutor(
            max_workers=total, thread_name_prefix="notify"
        ) as executor:
            futures = [
                (notifier, executor.submit(notifier.send, subject, message))
                for notifier in notifiers
            ]
            for notifier, future in futures:
                try:
                    results.append(future.result())
                except Exception as e:
                    logger.error(
                        "notifier_failed",
                        notifier=notifier.notifier_name,
                        error=str(e),
                    )
                    errors.append(e)

        if errors and not results:
            first_error = errors[0]
            if isinstance(first_error, NotificationError):
                raise first_error
            raise NotificationError("All notifiers failed") from first_error

        if errors:
            logger.warning("notifiers_partially_failed", failed=len(errors), total=total)

        logger.info("notify_completed", succeeded=len(results), total=total)
        return NotificationResult.composite(results, total)
