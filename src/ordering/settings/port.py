"""Delivery settings port (abstract interface).

The ordering core only ever reads the single current settings snapshot.
Where the snapshot lives (static config, admin-editable store) is an
adapter concern.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, fields

from protean.exceptions import ValidationError

# field name -> (min, max), inclusive
_BOUNDS = {
    "max_delivery_radius_km": (1, 50),
    "platform_fee_percent": (0, 10),
    "gst_percent": (0, 18),
}


@dataclass(frozen=True)
class DeliverySettings:
    """Pricing and service-area configuration for the restaurant."""

    max_delivery_radius_km: float = 10
    base_delivery_charge: float = 20
    additional_charge_per_km: float = 10
    free_delivery_within_5km_threshold: float = 999
    free_delivery_upto_10km_threshold: float = 1499
    platform_fee_percent: float = 3
    gst_percent: float = 5
    restaurant_latitude: float = 20.6952266
    restaurant_longitude: float = 83.488972

    def validate(self) -> None:
        errors: dict[str, list[str]] = {}
        for f in fields(self):
            if f.name.startswith("restaurant_"):
                continue
            if getattr(self, f.name) < 0:
                errors.setdefault(f.name, []).append("Must be a non-negative number")
        for name, (low, high) in _BOUNDS.items():
            value = getattr(self, name)
            if not low <= value <= high:
                errors.setdefault(name, []).append(f"Must be between {low} and {high}")
        if not -90 <= self.restaurant_latitude <= 90:
            errors.setdefault("restaurant_latitude", []).append("Must be between -90 and 90")
        if not -180 <= self.restaurant_longitude <= 180:
            errors.setdefault("restaurant_longitude", []).append("Must be between -180 and 180")
        if errors:
            raise ValidationError(errors)


class SettingsProvider(ABC):
    """Source of the current delivery settings snapshot."""

    @abstractmethod
    def current(self) -> DeliverySettings:
        """Return the settings snapshot in force right now."""
        ...
