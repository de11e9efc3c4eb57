"""Delivery transports.

A transport performs one delivery attempt and reports a verdict:
SUCCESS, TRANSIENT_ERROR (retry) or PERMANENT_ERROR (give up). The
provider pipeline is identical whichever transport is plugged in.
"""

import random
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

import structlog

from infrastructure.operations import OperationResult
from notifications.models import Channel

logger = structlog.get_logger()


@dataclass(frozen=True)
class DeliveryRequest:
    """Channel-specific request handed to a transport.

    Attributes:
        notification_id: ID of the notification being delivered
        channel: Channel the request belongs to
        provider_name: Provider performing the delivery
        payload: Channel request body (from/to/subject/body, token, ...)
        endpoint: Optional custom endpoint from the provider config
    """

    notification_id: str
    channel: Channel
    provider_name: str
    payload: Dict[str, Any] = field(default_factory=dict)
    endpoint: Optional[str] = None


class Transport(ABC):
    """Performs a single delivery attempt."""

    @abstractmethod
    def deliver(
        self, request: DeliveryRequest, timeout_seconds: float
    ) -> OperationResult:
        """Deliver the request once.

        Args:
            request: Request to deliver
            timeout_seconds: Time budget for this attempt

        Returns:
            OperationResult verdict. Transports may also raise; the
            pipeline classifies raised exceptions.
        """
        pass


class SimulatedTransport(Transport):
    """Transport that simulates latency and random transient failures.

    Used in place of real backends: no network I/O is performed.

    Args:
        failure_rate: Probability in [0, 1] that an attempt fails transiently
        min_latency_seconds: Lower bound of simulated latency
        max_latency_seconds: Upper bound of simulated latency
        rng: Random source (inject a seeded random.Random for determinism)
        sleep: Sleep function (inject a no-op in tests)
    """

    def __init__(
        self,
        failure_rate: float = 0.0,
        min_latency_seconds: float = 0.1,
        max_latency_seconds: float = 0.3,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if not 0.0 <= failure_rate <= 1.0:
            raise ValueError("failure_rate must be between 0 and 1")
        if min_latency_seconds < 0 or max_latency_seconds < min_latency_seconds:
            raise ValueError("latency bounds are invalid")
        self.failure_rate = failure_rate
        self.min_latency_seconds = min_latency_seconds
        self.max_latency_seconds = max_latency_seconds
        self._rng = rng or random.Random()
        self._sleep = sleep

    def deliver(
        self, request: DeliveryRequest, timeout_seconds: float
    ) -> OperationResult:
        latency = self._rng.uniform(self.min_latency_seconds, self.max_latency_seconds)

        if latency > timeout_seconds:
            self._sleep(timeout_seconds)
            return OperationResult.transient_error(
                f"Simulated timeout after {timeout_seconds}s",
                error_code="TIMEOUT",
            )

        self._sleep(latency)
        logger.debug(
            "simulated_delivery",
            channel=request.channel.value,
            provider=request.provider_name,
            notification_id=request.notification_id,
            latency_seconds=round(latency, 3),
        )

        if self._rng.random() < self.failure_rate:
            return OperationResult.transient_error(
                f"Simulated error from {request.provider_name}",
                error_code="SIMULATED_FAILURE",
            )

        return OperationResult.success(
            data={"latency_seconds": latency},
            message=f"Delivered via {request.provider_name}",
        )
