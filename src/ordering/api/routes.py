"""FastAPI routes for the Ordering domain: orders, couriers and admin."""

import dataclasses

from fastapi import APIRouter, Depends, HTTPException

from ordering import operations
from ordering.api.schemas import (
    AgentLocationRequest,
    AgentStatusRequest,
    CancelOrderRequest,
    CompleteDeliveryRequest,
    CreateOrderRequest,
    QuoteRequest,
    UpdateAgentProfileRequest,
    UpdateDeliverySettingsRequest,
    UpdateStatusRequest,
    VerifyOtpRequest,
    VerifyPaymentRequest,
    ok,
    serialize_agent,
    serialize_order,
)
from ordering.errors import RestaurantClosed
from ordering.order import queries
from ordering.order.order import CourierProgress
from ordering.order.pricing import calculate_fees
from ordering.settings import current_settings, get_settings_provider
from ordering.settings.static_adapter import StaticSettingsProvider
from shared.auth import caller_id, require_admin
from storefront import get_storefront


async def require_open_storefront() -> None:
    if not get_storefront().is_open():
        raise RestaurantClosed("Restaurant is currently closed. Please try again later.")


# ---------------------------------------------------------------------------
# Order Router (customers)
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, dependencies=[Depends(require_open_storefront)])
async def create_order(body: CreateOrderRequest, user_id: str = Depends(caller_id)) -> dict:
    """Place an order; prices are taken from the menu at this moment."""
    order = operations.create_order(
        customer_id=user_id,
        items=[line.model_dump() for line in body.items],
        address=body.address.model_dump(),
        payment_method=body.payment_method,
        customer=body.customer.model_dump() if body.customer else None,
        notes=body.notes,
    )
    return ok(serialize_order(order, include_otp=True), message="Order placed successfully")


@order_router.post("/quote")
async def quote(body: QuoteRequest) -> dict:
    """Preview delivery charge, fees and total for a basket and address."""
    fees = calculate_fees(body.subtotal, current_settings(), body.latitude, body.longitude)
    return ok(
        {
            "subtotal": float(fees.subtotal),
            "delivery_charge": float(fees.delivery_charge),
            "platform_fee": float(fees.platform_fee),
            "gst": float(fees.gst),
            "total": float(fees.total),
            "distance_km": fees.distance_km,
        }
    )


@order_router.get("")
async def list_my_orders(status: str | None = None, user_id: str = Depends(caller_id)) -> dict:
    orders = queries.orders_for_customer(user_id, status=status)
    return ok([serialize_order(o, include_otp=True) for o in orders])


@order_router.get("/{order_id}")
async def get_my_order(order_id: str, user_id: str = Depends(caller_id)) -> dict:
    order = queries.get_order(order_id, customer_id=user_id)
    return ok(serialize_order(order, include_otp=True))


@order_router.post("/{order_id}/verify-payment")
async def verify_payment(order_id: str, body: VerifyPaymentRequest, user_id: str = Depends(caller_id)) -> dict:
    order = operations.verify_payment(
        order_id=order_id,
        caller_id=user_id,
        gateway_order_id=body.gateway_order_id,
        gateway_payment_id=body.gateway_payment_id,
        signature=body.signature,
    )
    return ok(serialize_order(order, include_otp=True), message="Payment verified successfully")


@order_router.post("/{order_id}/verify-otp")
async def verify_otp(order_id: str, body: VerifyOtpRequest, user_id: str = Depends(caller_id)) -> dict:
    order = operations.verify_delivery_otp(order_id, caller_id=user_id, code=body.otp)
    return ok(serialize_order(order, include_otp=True), message="OTP verified. Order delivered.")


@order_router.post("/{order_id}/cancel")
async def cancel_my_order(order_id: str, body: CancelOrderRequest, user_id: str = Depends(caller_id)) -> dict:
    order = operations.cancel_order(order_id, reason=body.reason, customer_id=user_id)
    return ok(serialize_order(order, include_otp=True), message="Order cancelled")


# ---------------------------------------------------------------------------
# Admin Router
# ---------------------------------------------------------------------------
admin_router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@admin_router.get("/orders")
async def list_orders(status: str | None = None) -> dict:
    return ok([serialize_order(o) for o in queries.orders_by_status(status)])


@admin_router.get("/orders/{order_id}")
async def get_order(order_id: str) -> dict:
    return ok(serialize_order(queries.get_order(order_id)))


@admin_router.put("/orders/{order_id}/status")
async def update_status(order_id: str, body: UpdateStatusRequest, user_id: str = Depends(caller_id)) -> dict:
    order = operations.update_status(order_id, body.status, actor=user_id)
    return ok(serialize_order(order), message="Order status updated")


@admin_router.post("/orders/{order_id}/prepare")
async def start_preparation(order_id: str, user_id: str = Depends(caller_id)) -> dict:
    order = operations.start_preparation(order_id, actor=user_id)
    return ok(serialize_order(order), message="Preparation started")


@admin_router.post("/orders/{order_id}/cancel")
async def cancel_order(order_id: str, body: CancelOrderRequest, user_id: str = Depends(caller_id)) -> dict:
    order = operations.cancel_order(order_id, reason=body.reason, cancelled_by=user_id)
    return ok(serialize_order(order), message="Order cancelled")


@admin_router.get("/settings/delivery")
async def get_delivery_settings() -> dict:
    return ok(dataclasses.asdict(current_settings()))


@admin_router.put("/settings/delivery")
async def update_delivery_settings(body: UpdateDeliverySettingsRequest) -> dict:
    provider = get_settings_provider()
    if not isinstance(provider, StaticSettingsProvider):
        raise HTTPException(status_code=409, detail="Delivery settings are read-only in this deployment")
    settings = provider.update(**body.model_dump(exclude_none=True))
    return ok(dataclasses.asdict(settings), message="Delivery settings updated successfully")


# ---------------------------------------------------------------------------
# Agent Router (couriers)
# ---------------------------------------------------------------------------
agent_router = APIRouter(prefix="/agents/me", tags=["agents"])


@agent_router.get("")
async def get_profile(user_id: str = Depends(caller_id)) -> dict:
    """Return the courier's profile, creating it on first access."""
    return ok(serialize_agent(operations.ensure_agent_profile(user_id)))


@agent_router.put("")
async def update_profile(body: UpdateAgentProfileRequest, user_id: str = Depends(caller_id)) -> dict:
    operations.ensure_agent_profile(user_id)
    agent = operations.update_agent_profile(
        user_id,
        bank_details=body.bank_details.model_dump() if body.bank_details else None,
        name=body.name,
        phone=body.phone,
        vehicle_type=body.vehicle_type,
        vehicle_number=body.vehicle_number,
    )
    return ok(serialize_agent(agent), message="Profile updated")


@agent_router.put("/status")
async def set_status(body: AgentStatusRequest, user_id: str = Depends(caller_id)) -> dict:
    operations.ensure_agent_profile(user_id)
    agent = operations.set_agent_availability(user_id, online=body.is_online)
    return ok(serialize_agent(agent), message=f"You are now {'online' if body.is_online else 'offline'}")


@agent_router.put("/location")
async def update_location(body: AgentLocationRequest, user_id: str = Depends(caller_id)) -> dict:
    agent = operations.update_agent_location(user_id, body.latitude, body.longitude)
    return ok(serialize_agent(agent))


@agent_router.get("/assignments")
async def available_assignments(user_id: str = Depends(caller_id)) -> dict:
    return ok([serialize_order(o) for o in queries.available_orders()])


@agent_router.post("/orders/{order_id}/accept")
async def accept_order(order_id: str, user_id: str = Depends(caller_id)) -> dict:
    order, agent = operations.assign_courier(order_id, user_id)
    return ok(
        {"order": serialize_order(order), "agent": serialize_agent(agent)},
        message="Order accepted",
    )


def _progress(order_id: str, agent_id: str, progress: CourierProgress) -> dict:
    order = operations.record_courier_progress(order_id, agent_id, progress.value)
    return ok(serialize_order(order))


@agent_router.post("/orders/{order_id}/pick")
async def pick_order(order_id: str, user_id: str = Depends(caller_id)) -> dict:
    return _progress(order_id, user_id, CourierProgress.PICKED_UP)


@agent_router.post("/orders/{order_id}/start")
async def start_delivery(order_id: str, user_id: str = Depends(caller_id)) -> dict:
    return _progress(order_id, user_id, CourierProgress.EN_ROUTE)


@agent_router.post("/orders/{order_id}/arrived")
async def arrived(order_id: str, user_id: str = Depends(caller_id)) -> dict:
    return _progress(order_id, user_id, CourierProgress.ARRIVED)


@agent_router.post("/orders/{order_id}/complete")
async def complete_delivery(order_id: str, body: CompleteDeliveryRequest, user_id: str = Depends(caller_id)) -> dict:
    operations.complete_delivery(order_id, user_id, body.otp)
    return ok(message="Delivery completed")


@agent_router.get("/orders/active")
async def active_order(user_id: str = Depends(caller_id)) -> dict:
    order = queries.active_order_for_agent(user_id)
    return ok(serialize_order(order) if order else None)


@agent_router.get("/orders/history")
async def delivery_history(user_id: str = Depends(caller_id)) -> dict:
    return ok([serialize_order(o) for o in queries.delivery_history(user_id)])


@agent_router.get("/earnings")
async def earnings(user_id: str = Depends(caller_id)) -> dict:
    return ok(operations.earnings_summary(user_id).to_dict())
