"""Provider configuration.

ProviderConfig is validated when it is built, so a provider can never be
constructed from an incomplete configuration.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from infrastructure.operations import OperationResult
from notifications.exceptions import ConfigurationError
from notifications.models import Channel

RETRY_BACKOFF_SECONDS = "retry_backoff_seconds"
RETRY_BACKOFF_MAX_SECONDS = "retry_backoff_max_seconds"


@dataclass(frozen=True)
class ProviderConfig:
    """Configuration for one notification provider.

    Attributes:
        channel: Channel this provider handles
        provider_name: Provider name (e.g., "SendGrid", "Twilio", "Firebase")
        api_key: API key or authentication token
        api_secret: Optional API secret
        endpoint: Optional custom API endpoint
        from_address: Sender identifier (email address, sender number, app id)
        max_retries: Retries after the first failed attempt
        timeout_seconds: Per-attempt time budget
        enabled: Whether the provider may be registered
        properties: Provider-specific extension values

    Example:
        config = ProviderConfig(
            channel=Channel.EMAIL,
            provider_name="SendGrid",
            api_key="SG.xxx",
            from_address="noreply@example.com",
            properties={"retry_backoff_seconds": 1},
        )
    """

    channel: Channel
    provider_name: str
    api_key: str
    api_secret: Optional[str] = None
    endpoint: Optional[str] = None
    from_address: Optional[str] = None
    max_retries: int = 3
    timeout_seconds: float = 30
    enabled: bool = True
    properties: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate required fields."""
        if not isinstance(self.channel, Channel):
            raise ConfigurationError("Channel is required")
        if not isinstance(self.provider_name, str) or not self.provider_name.strip():
            raise ConfigurationError("Provider name is required")
        if not isinstance(self.api_key, str) or not self.api_key.strip():
            raise ConfigurationError(f"API key is required for {self.provider_name}")
        for name in ("api_secret", "endpoint", "from_address"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise ConfigurationError(f"{name} must be a string")
        if isinstance(self.max_retries, bool) or not isinstance(self.max_retries, int):
            raise ConfigurationError("max_retries must be an integer")
        if self.max_retries < 0:
            raise ConfigurationError("max_retries must be at least 0")
        if isinstance(self.timeout_seconds, bool) or not isinstance(
            self.timeout_seconds, (int, float)
        ):
            raise ConfigurationError("timeout_seconds must be a number")
        if self.timeout_seconds <= 0:
            raise ConfigurationError("timeout_seconds must be greater than 0")
        if not isinstance(self.properties, Mapping):
            raise ConfigurationError("properties must be a mapping")
        for key in (RETRY_BACKOFF_SECONDS, RETRY_BACKOFF_MAX_SECONDS):
            self._validate_seconds_property(key)

    def _validate_seconds_property(self, key: str) -> None:
        value = self.properties.get(key)
        if value is None:
            return
        try:
            seconds = float(value)
        except (TypeError, ValueError):
            raise ConfigurationError(
                f"Property {key} must be a number of seconds, got {value!r}"
            ) from None
        if seconds < 0:
            raise ConfigurationError(f"Property {key} must be at least 0")

    def get_property(self, key: str, default: Any = None) -> Any:
        """Get a provider-specific property with a default value."""
        value = self.properties.get(key)
        return default if value is None else value

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> OperationResult:
        """Build a config from a plain mapping without raising.

        Accepts the channel as a Channel or its string value and "from" as
        an alias of from_address.

        Args:
            data: Raw configuration values

        Returns:
            OperationResult with the ProviderConfig in data on success, or a
            PERMANENT_ERROR with error_code INVALID_CONFIGURATION
        """
        values = dict(data)
        if "from" in values:
            values.setdefault("from_address", values.pop("from"))

        channel = values.get("channel")
        if isinstance(channel, str):
            try:
                values["channel"] = Channel(channel.lower())
            except ValueError:
                return OperationResult.permanent_error(
                    f"Unknown channel: {channel}",
                    error_code="INVALID_CONFIGURATION",
                )

        try:
            config = cls(**values)
        except (ConfigurationError, TypeError) as e:
            return OperationResult.permanent_error(
                str(e), error_code="INVALID_CONFIGURATION", cause=e
            )

        return OperationResult.success(data=config, message="Provider configured")
