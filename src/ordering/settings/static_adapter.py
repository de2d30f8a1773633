"""In-process settings provider holding one editable snapshot."""

import dataclasses

import structlog

from ordering.settings.port import DeliverySettings, SettingsProvider

logger = structlog.get_logger(__name__)


class StaticSettingsProvider(SettingsProvider):
    def __init__(self, settings: DeliverySettings | None = None) -> None:
        self._settings = settings or DeliverySettings()
        self._settings.validate()

    def current(self) -> DeliverySettings:
        return self._settings

    def update(self, **changes) -> DeliverySettings:
        """Replace the snapshot with a validated copy carrying ``changes``."""
        candidate = dataclasses.replace(self._settings, **changes)
        candidate.validate()
        self._settings = candidate
        logger.info("Delivery settings updated", changed=sorted(changes))
        return candidate
