"""Infrastructure configuration module - public API.

Centralized configuration using Pydantic BaseSettings, loaded from the
environment and an optional .env file.

Exports:
    get_settings: Cached Settings singleton
    Settings: Main settings class (for testing/overrides)
    NotificationSettings: Dispatch settings class
    ProviderSettings: Per-channel provider settings base class

Example:
    ```python
    from infrastructure.configuration import get_settings

    settings = get_settings()
    log_level = settings.LOG_LEVEL
    email = settings.notifications.email
    ```
"""

from functools import lru_cache

from infrastructure.configuration.notifications import NotificationSettings
from infrastructure.configuration.providers import ProviderSettings
from infrastructure.configuration.settings import Settings


@lru_cache
def get_settings() -> Settings:
    """Get the process-wide Settings singleton.

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()


__all__ = ["get_settings", "Settings", "NotificationSettings", "ProviderSettings"]
