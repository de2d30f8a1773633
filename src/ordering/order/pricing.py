"""Delivery charge and fee computation.

Pure functions over a settings snapshot. Money is computed with ``Decimal``
and quantized to two places so that

    total == subtotal + delivery_charge + platform_fee + gst

holds exactly on the rounded figures.
"""

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from ordering.errors import OutOfDeliveryRange
from ordering.settings.port import DeliverySettings

EARTH_RADIUS_KM = 6371
CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    """Quantize to two decimals. Floats are routed through ``str`` first."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in kilometres."""
    lat1, lon1, lat2, lon2 = map(math.radians, [lat1, lon1, lat2, lon2])
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return EARTH_RADIUS_KM * 2 * math.asin(math.sqrt(a))


@dataclass(frozen=True)
class FeeBreakdown:
    subtotal: Decimal
    delivery_charge: Decimal
    platform_fee: Decimal
    gst: Decimal
    total: Decimal
    distance_km: float | None = None


def delivery_charge_for_distance(distance_km: float, subtotal: Decimal, settings: DeliverySettings) -> Decimal:
    """Tiered delivery charge for a straight-line distance.

    Up to 1 km costs the base charge; every started kilometre after that adds
    the per-km increment. Orders above the free-delivery thresholds ship for
    free within 5 km and 10 km respectively. Beyond the configured radius the
    order is rejected.
    """
    if distance_km > settings.max_delivery_radius_km:
        raise OutOfDeliveryRange(
            f"Delivery address is {distance_km:.1f} km away; "
            f"we deliver within {settings.max_delivery_radius_km} km"
        )

    if distance_km <= 5 and subtotal >= to_money(settings.free_delivery_within_5km_threshold):
        return to_money(0)
    if distance_km <= 10 and subtotal >= to_money(settings.free_delivery_upto_10km_threshold):
        return to_money(0)

    base = to_money(settings.base_delivery_charge)
    if distance_km <= 1:
        return base
    extra_km = math.ceil(distance_km - 1)
    return to_money(base + extra_km * to_money(settings.additional_charge_per_km))


def calculate_fees(
    subtotal,
    settings: DeliverySettings,
    latitude: float | None = None,
    longitude: float | None = None,
) -> FeeBreakdown:
    """Compute delivery charge, platform fee, GST and total for an order.

    Missing coordinates degrade to a zero delivery charge.
    """
    subtotal = to_money(subtotal)

    distance = None
    delivery_charge = to_money(0)
    if latitude is not None and longitude is not None:
        distance = haversine_km(
            settings.restaurant_latitude,
            settings.restaurant_longitude,
            latitude,
            longitude,
        )
        delivery_charge = delivery_charge_for_distance(distance, subtotal, settings)

    platform_fee = to_money(subtotal * to_money(settings.platform_fee_percent) / 100)
    gst = to_money(subtotal * to_money(settings.gst_percent) / 100)

    return FeeBreakdown(
        subtotal=subtotal,
        delivery_charge=delivery_charge,
        platform_fee=platform_fee,
        gst=gst,
        total=subtotal + delivery_charge + platform_fee + gst,
        distance_km=round(distance, 3) if distance is not None else None,
    )
