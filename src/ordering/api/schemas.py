"""Pydantic request schemas and response serializers for the Ordering API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands. Responses use the envelope
``{"success": true, "data": ..., "message": ...}``.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    name: str | None = None
    phone: str | None = None
    line1: str
    line2: str | None = None
    city: str | None = None
    state: str | None = None
    pincode: str | None = None
    landmark: str | None = None
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)


class CustomerSchema(BaseModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None


class OrderLineSchema(BaseModel):
    menu_item_id: str
    quantity: int = Field(default=1, ge=1)


class BankDetailsSchema(BaseModel):
    account_number: str | None = None
    ifsc_code: str | None = None
    account_holder: str | None = None


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class CreateOrderRequest(BaseModel):
    items: list[OrderLineSchema] = Field(min_length=1)
    address: AddressSchema
    payment_method: Literal["online", "cod"] = "online"
    customer: CustomerSchema | None = None
    notes: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"menu_item_id": "paneer-tikka", "quantity": 2}],
                    "address": {
                        "line1": "12 Station Road",
                        "city": "Balangir",
                        "pincode": "767001",
                        "latitude": 20.7100,
                        "longitude": 83.4900,
                    },
                    "payment_method": "online",
                }
            ]
        }
    }


class QuoteRequest(BaseModel):
    subtotal: float = Field(ge=0)
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)


class VerifyPaymentRequest(BaseModel):
    gateway_order_id: str
    gateway_payment_id: str
    signature: str


class VerifyOtpRequest(BaseModel):
    otp: str = Field(min_length=1, max_length=10)


class CancelOrderRequest(BaseModel):
    reason: str | None = None


class UpdateStatusRequest(BaseModel):
    status: str


class UpdateDeliverySettingsRequest(BaseModel):
    max_delivery_radius_km: float | None = None
    base_delivery_charge: float | None = None
    additional_charge_per_km: float | None = None
    free_delivery_within_5km_threshold: float | None = None
    free_delivery_upto_10km_threshold: float | None = None
    platform_fee_percent: float | None = None
    gst_percent: float | None = None
    restaurant_latitude: float | None = None
    restaurant_longitude: float | None = None


# ---------------------------------------------------------------------------
# Agent Request Schemas
# ---------------------------------------------------------------------------
class UpdateAgentProfileRequest(BaseModel):
    name: str | None = None
    phone: str | None = None
    vehicle_type: Literal["bicycle", "bike", "scooter", "car"] | None = None
    vehicle_number: str | None = None
    bank_details: BankDetailsSchema | None = None


class AgentStatusRequest(BaseModel):
    is_online: bool


class AgentLocationRequest(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class CompleteDeliveryRequest(BaseModel):
    otp: str = Field(min_length=1, max_length=10)


# ---------------------------------------------------------------------------
# Response helpers
# ---------------------------------------------------------------------------
def ok(data=None, message: str | None = None) -> dict:
    body = {"success": True, "data": data}
    if message:
        body["message"] = message
    return body


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def serialize_order(order, include_otp: bool = False) -> dict:
    """Order as seen by API clients.

    The delivery OTP is only included for the owning customer.
    """
    data = {
        "id": str(order.id),
        "order_code": order.order_code,
        "customer_id": str(order.customer_id),
        "customer": (
            {"name": order.customer.name, "email": order.customer.email, "phone": order.customer.phone}
            if order.customer
            else None
        ),
        "items": [
            {
                "menu_item_id": str(item.menu_item_id),
                "name": item.name,
                "quantity": item.quantity,
                "unit_price": item.unit_price,
            }
            for item in order.items or []
        ],
        "address": {
            "name": order.address.name,
            "phone": order.address.phone,
            "line1": order.address.line1,
            "line2": order.address.line2,
            "city": order.address.city,
            "state": order.address.state,
            "pincode": order.address.pincode,
            "landmark": order.address.landmark,
            "latitude": order.address.latitude,
            "longitude": order.address.longitude,
        },
        "pricing": {
            "subtotal": order.pricing.subtotal,
            "delivery_charge": order.pricing.delivery_charge,
            "platform_fee": order.pricing.platform_fee,
            "gst": order.pricing.gst,
            "total": order.pricing.total,
            "distance_km": order.pricing.distance_km,
        },
        "payment_method": order.payment_method,
        "payment_status": order.payment_status,
        "status": order.status,
        "otp_verified": order.otp_verified,
        "estimated_delivery": _iso(order.estimated_delivery),
        "courier": (
            {"agent_id": order.courier_id, "name": order.courier.name, "phone": order.courier.phone}
            if order.courier
            else None
        ),
        "courier_progress": order.courier_progress,
        "assigned_at": _iso(order.assigned_at),
        "notes": order.notes,
        "placed_at": _iso(order.placed_at),
        "confirmed_at": _iso(order.confirmed_at),
        "preparing_at": _iso(order.preparing_at),
        "out_for_delivery_at": _iso(order.out_for_delivery_at),
        "delivered_at": _iso(order.delivered_at),
        "cancelled_at": _iso(order.cancelled_at),
        "cancellation_reason": order.cancellation_reason,
        "history": [
            {
                "from_status": entry.from_status,
                "to_status": entry.to_status,
                "actor": entry.actor,
                "note": entry.note,
                "changed_at": _iso(entry.changed_at),
            }
            for entry in sorted(order.history or [], key=lambda e: e.changed_at)
        ],
    }
    if include_otp:
        data["delivery_otp"] = order.delivery_otp
    return data


def serialize_agent(agent) -> dict:
    return {
        "agent_id": str(agent.agent_id),
        "name": agent.name,
        "phone": agent.phone,
        "email": agent.email,
        "vehicle_type": agent.vehicle_type,
        "vehicle_number": agent.vehicle_number,
        "status": agent.status,
        "is_online": agent.status != "offline",
        "current_order_id": str(agent.current_order_id) if agent.current_order_id else None,
        "current_location": (
            {
                "latitude": agent.current_location.latitude,
                "longitude": agent.current_location.longitude,
                "updated_at": _iso(agent.current_location.updated_at),
            }
            if agent.current_location
            else None
        ),
        "total_deliveries": agent.total_deliveries,
        "total_earnings": agent.total_earnings,
        "bank_details": (
            {
                "account_number": agent.bank_details.account_number,
                "ifsc_code": agent.bank_details.ifsc_code,
                "account_holder": agent.bank_details.account_holder,
            }
            if agent.bank_details
            else None
        ),
    }
