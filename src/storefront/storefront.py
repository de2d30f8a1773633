"""The restaurant storefront: open/closed state plus its broadcaster."""

import dataclasses
from datetime import UTC, datetime

import structlog

from storefront.broadcast import StatusBroadcaster
from storefront.schedule import StorefrontSettings

logger = structlog.get_logger(__name__)


class Storefront:
    def __init__(self, settings: StorefrontSettings | None = None) -> None:
        self.settings = settings or StorefrontSettings()
        self.broadcaster = StatusBroadcaster()

    def is_open(self, now: datetime | None = None) -> bool:
        return self.settings.is_open(now or datetime.now().astimezone())

    def snapshot(self, now: datetime | None = None) -> dict:
        return {
            "is_open": self.is_open(now),
            "is_online": self.settings.is_online,
            "auto_schedule": self.settings.auto_schedule,
            "special_closing": self.settings.special_closing,
            "closed_reason": self.settings.closed_reason,
            "closed_until": self.settings.closed_until.isoformat() if self.settings.closed_until else None,
            "updated_at": datetime.now(UTC).isoformat(),
        }

    def update(self, **changes) -> dict:
        """Apply ``changes`` to the settings and broadcast the new status."""
        self.settings = dataclasses.replace(self.settings, **changes)
        status = self.snapshot()
        delivered = self.broadcaster.publish(status)
        logger.info("Storefront status changed", is_open=status["is_open"], subscribers=delivered)
        return status

    def set_online(self, is_online: bool) -> dict:
        return self.update(is_online=is_online)

    def close_specially(self, reason: str | None = None, until: datetime | None = None) -> dict:
        if until is not None and until.tzinfo is None:
            until = until.replace(tzinfo=UTC)
        return self.update(special_closing=True, closed_reason=reason, closed_until=until)

    def lift_special_closing(self) -> dict:
        return self.update(special_closing=False, closed_reason=None, closed_until=None)
