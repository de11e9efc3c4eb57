"""Test fixtures for notification dispatch tests."""

from typing import Optional, Sequence

import pytest

from notifications.models import Channel
from notifications.providers import NotificationProvider
from tests.factories.notifications import (
    FakeClock,
    Outcome,
    ScriptedTransport,
    make_notification,
    make_provider_config,
)


@pytest.fixture
def notification_factory():
    """Factory for creating valid Notification instances.

    Example:
        notification = notification_factory(Channel.SMS, body="Your code is 1234")
    """
    return make_notification


@pytest.fixture
def provider_config_factory():
    """Factory for creating valid ProviderConfig instances."""
    return make_provider_config


@pytest.fixture
def sleep_calls():
    """Records sleep durations requested by the retry backoff."""
    return []


@pytest.fixture
def provider_factory(sleep_calls):
    """Factory for creating providers wired to a ScriptedTransport.

    Returns:
        Factory returning (provider, transport)

    Example:
        provider, transport = provider_factory(Channel.SMS, outcomes=[transient()])
    """

    def _factory(
        channel: Channel = Channel.EMAIL,
        outcomes: Sequence[Outcome] = (),
        clock: Optional[FakeClock] = None,
        latency_seconds: float = 0.0,
        **config_overrides,
    ):
        clock = clock or FakeClock()
        transport = ScriptedTransport(
            outcomes, clock=clock, latency_seconds=latency_seconds
        )
        provider = NotificationProvider(
            make_provider_config(channel, **config_overrides),
            transport=transport,
            sleep=sleep_calls.append,
            clock=clock,
        )
        return provider, transport

    return _factory
