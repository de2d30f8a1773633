"""Settings provider factory.

Provides get_settings_provider() / set_settings_provider() to swap the
source of delivery settings. Defaults to StaticSettingsProvider seeded
with the standard pricing.
"""

from ordering.settings.port import DeliverySettings, SettingsProvider
from ordering.settings.static_adapter import StaticSettingsProvider

_current_provider: SettingsProvider | None = None


def get_settings_provider() -> SettingsProvider:
    """Return the current settings provider."""
    global _current_provider
    if _current_provider is None:
        _current_provider = StaticSettingsProvider()
    return _current_provider


def set_settings_provider(provider: SettingsProvider) -> None:
    """Override the active settings provider (useful for tests)."""
    global _current_provider
    _current_provider = provider


def reset_settings_provider() -> None:
    """Reset to the default provider."""
    global _current_provider
    _current_provider = None


def current_settings() -> DeliverySettings:
    return get_settings_provider().current()
