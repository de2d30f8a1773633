"""Opening hours for the restaurant storefront."""

from dataclasses import dataclass, field
from datetime import datetime, time


@dataclass(frozen=True)
class Shift:
    opens: time
    closes: time
    enabled: bool = True

    def covers(self, moment: time) -> bool:
        if not self.enabled:
            return False
        if self.opens <= self.closes:
            return self.opens <= moment < self.closes
        # shift runs past midnight
        return moment >= self.opens or moment < self.closes


DEFAULT_SHIFTS = (
    Shift(opens=time(9, 0), closes=time(17, 0)),
    Shift(opens=time(18, 0), closes=time(23, 0)),
)


@dataclass(frozen=True)
class StorefrontSettings:
    """Whether the restaurant takes orders right now.

    ``is_online`` is the operator's switch. With ``auto_schedule`` on, an
    online storefront is only open during an enabled shift. A special
    closing overrides both until ``closed_until`` (indefinitely when unset).
    """

    is_online: bool = False
    auto_schedule: bool = False
    shifts: tuple[Shift, ...] = field(default=DEFAULT_SHIFTS)
    special_closing: bool = False
    closed_reason: str | None = None
    closed_until: datetime | None = None

    def is_open(self, now: datetime) -> bool:
        if self.special_closing and (self.closed_until is None or now < self.closed_until):
            return False
        if not self.is_online:
            return False
        if self.auto_schedule:
            return any(shift.covers(now.time()) for shift in self.shifts)
        return True
