"""Construction helpers.

Build providers from validated configuration and assemble the routing
service. Every path enforces the "at least one provider" invariant.
"""

from typing import Callable, Dict, Mapping, Optional

import structlog

from infrastructure.configuration import Settings
from notifications.config import ProviderConfig
from notifications.exceptions import ConfigurationError
from notifications.models import Channel
from notifications.providers import NotificationProvider
from notifications.service import NotificationService
from notifications.transports import SimulatedTransport, Transport

logger = structlog.get_logger()

# Failure rates of the simulated backends, overridable per provider with
# the "simulated_failure_rate" property
DEFAULT_SIMULATED_FAILURE_RATES: Dict[Channel, float] = {
    Channel.EMAIL: 0.05,
    Channel.SMS: 0.03,
    Channel.PUSH: 0.0,
    Channel.CHAT: 0.0,
}

TransportFactory = Callable[[ProviderConfig], Transport]


def simulated_transport_for(config: ProviderConfig) -> Transport:
    """Default transport: a simulated backend for the config's channel."""
    failure_rate = float(
        config.get_property(
            "simulated_failure_rate", DEFAULT_SIMULATED_FAILURE_RATES[config.channel]
        )
    )
    return SimulatedTransport(failure_rate=failure_rate)


def create_provider(
    config: ProviderConfig,
    transport: Optional[Transport] = None,
) -> NotificationProvider:
    """Create the provider for a validated configuration.

    Args:
        config: ProviderConfig for one channel
        transport: Optional transport (default: simulated backend)

    Returns:
        NotificationProvider serving config.channel
    """
    if config is None:
        raise ConfigurationError("Provider configuration cannot be null")

    logger.debug(
        "creating_notification_provider",
        channel=config.channel.value,
        provider=config.provider_name,
    )
    return NotificationProvider(
        config, transport=transport or simulated_transport_for(config)
    )


def create_service(
    configs: Optional[Mapping[Channel, ProviderConfig]],
    transport_factory: Optional[TransportFactory] = None,
    max_workers: Optional[int] = None,
) -> NotificationService:
    """Create a routing service from per-channel configuration.

    Disabled entries are skipped.

    Args:
        configs: Mapping of channel to ProviderConfig
        transport_factory: Builds the transport for each config
            (default: simulated backend)
        max_workers: Optional async pool size

    Returns:
        NotificationService with one provider per enabled channel

    Raises:
        ConfigurationError: if no configs are given, a config is registered
            under a different channel than its own, or none is enabled
    """
    if not configs:
        raise ConfigurationError("At least one provider must be configured")

    logger.info("creating_notification_service", config_count=len(configs))
    make_transport = transport_factory or simulated_transport_for

    providers: Dict[Channel, NotificationProvider] = {}
    for channel, config in configs.items():
        if config.channel != channel:
            raise ConfigurationError(
                f"Provider {config.provider_name} is configured for "
                f"{config.channel.value} but registered under {channel.value}"
            )

        if not config.enabled:
            logger.info(
                "provider_disabled_skipping",
                channel=channel.value,
                provider=config.provider_name,
            )
            continue

        providers[channel] = create_provider(config, make_transport(config))
        logger.info(
            "registered_notification_provider",
            channel=channel.value,
            provider=config.provider_name,
        )

    if not providers:
        logger.error("no_enabled_providers", configured=len(configs))
        raise ConfigurationError("No enabled providers were configured")

    if max_workers is None:
        return NotificationService(providers)
    return NotificationService(providers, max_workers=max_workers)


def create_service_from_providers(
    providers: Optional[Mapping[Channel, NotificationProvider]],
) -> NotificationService:
    """Create a routing service from ready-made providers.

    Raises:
        ConfigurationError: if the mapping is None or empty
    """
    if not providers:
        raise ConfigurationError("Providers map cannot be null or empty")

    logger.info("creating_notification_service_from_providers", count=len(providers))
    return NotificationService(providers)


def create_single_channel_service(
    channel: Channel, provider: NotificationProvider
) -> NotificationService:
    """Create a routing service for one channel."""
    if channel is None or provider is None:
        raise ConfigurationError("Channel and provider cannot be null")

    return NotificationService({channel: provider})


def provider_configs_from_settings(settings: Settings) -> Dict[Channel, ProviderConfig]:
    """Translate environment settings into per-channel provider configs.

    Only enabled channels are included.

    Raises:
        ConfigurationError: if an enabled channel lacks a provider name or key
    """
    configs: Dict[Channel, ProviderConfig] = {}
    for name, provider_settings in settings.notifications.by_channel().items():
        if not provider_settings.ENABLED:
            continue

        channel = Channel(name)
        configs[channel] = ProviderConfig(
            channel=channel,
            provider_name=provider_settings.PROVIDER,
            api_key=provider_settings.API_KEY,
            api_secret=provider_settings.API_SECRET,
            endpoint=provider_settings.ENDPOINT,
            from_address=provider_settings.FROM_ADDRESS,
            max_retries=provider_settings.MAX_RETRIES,
            timeout_seconds=provider_settings.TIMEOUT_SECONDS,
            properties=dict(provider_settings.PROPERTIES),
        )
    return configs


def create_service_from_settings(
    settings: Settings,
    transport_factory: Optional[TransportFactory] = None,
) -> NotificationService:
    """Create a routing service from application settings.

    Raises:
        ConfigurationError: if no channel is enabled or a config is invalid
    """
    return create_service(
        provider_configs_from_settings(settings),
        transport_factory=transport_factory,
        max_workers=settings.notifications.ASYNC_MAX_WORKERS,
    )
