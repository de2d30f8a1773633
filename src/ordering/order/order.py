"""Order aggregate (CQRS): the core of the ordering domain.

An Order is created atomically with its fee breakdown and delivery OTP and
is then mutated only through the lifecycle methods below. Every status
change stamps its timestamp, appends a StatusChange entry and raises
exactly one event.

State Machine:
    PENDING → CONFIRMED → PREPARING → OUT_FOR_DELIVERY → DELIVERED
    CONFIRMED → OUT_FOR_DELIVERY          (courier takes a confirmed order)
    {PENDING, CONFIRMED, PREPARING, OUT_FOR_DELIVERY} → CANCELLED

Online orders start PENDING and wait for payment verification. Cash on
delivery orders start CONFIRMED.
"""

import time
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from ordering.domain import ordering
from ordering.errors import (
    AlreadyAssigned,
    InvalidOtp,
    InvalidTransition,
    OrderNotReady,
)
from ordering.order.events import (
    CourierAssigned,
    CourierProgressed,
    OrderCancelled,
    OrderConfirmed,
    OrderDelivered,
    OrderPlaced,
    OrderStatusOverridden,
    PreparationStarted,
)
from ordering.order.otp import generate_otp, otp_matches
from ordering.order.pricing import FeeBreakdown, to_money

ESTIMATED_DELIVERY_WINDOW = timedelta(minutes=45)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentMethod(Enum):
    ONLINE = "online"
    COD = "cod"


class PaymentStatus(Enum):
    UNPAID = "unpaid"
    PAID = "paid"


class CourierProgress(Enum):
    ASSIGNED = "assigned"
    PICKED_UP = "picked_up"
    EN_ROUTE = "en_route"
    ARRIVED = "arrived"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {
        OrderStatus.PREPARING,
        OrderStatus.OUT_FOR_DELIVERY,
        OrderStatus.CANCELLED,
    },
    OrderStatus.PREPARING: {OrderStatus.OUT_FOR_DELIVERY, OrderStatus.CANCELLED},
    OrderStatus.OUT_FOR_DELIVERY: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),  # terminal
    OrderStatus.CANCELLED: set(),  # terminal
}

TERMINAL_STATUSES = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}

READY_FOR_PICKUP = {OrderStatus.CONFIRMED, OrderStatus.PREPARING}

_PROGRESS_ORDER = [
    CourierProgress.ASSIGNED,
    CourierProgress.PICKED_UP,
    CourierProgress.EN_ROUTE,
    CourierProgress.ARRIVED,
]

# Timestamp field stamped when the order enters each status
_STATUS_TIMESTAMPS = {
    OrderStatus.CONFIRMED: "confirmed_at",
    OrderStatus.PREPARING: "preparing_at",
    OrderStatus.OUT_FOR_DELIVERY: "out_for_delivery_at",
    OrderStatus.DELIVERED: "delivered_at",
    OrderStatus.CANCELLED: "cancelled_at",
}


def generate_order_code() -> str:
    """Human-readable code: ``FS`` + last 8 digits of the millisecond clock."""
    return f"FS{int(time.time() * 1000) % 100_000_000:08d}"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="Order")
class CustomerContact:
    """Customer details captured at checkout."""

    name = String(max_length=100)
    email = String(max_length=254)
    phone = String(max_length=20)


@ordering.value_object(part_of="Order")
class DeliveryAddress:
    """Where the order goes. Coordinates drive the delivery charge."""

    name = String(max_length=100)
    phone = String(max_length=20)
    line1 = String(required=True, max_length=255)
    line2 = String(max_length=255)
    city = String(max_length=100)
    state = String(max_length=100)
    pincode = String(max_length=10)
    landmark = String(max_length=255)
    latitude = Float(min_value=-90, max_value=90)
    longitude = Float(min_value=-180, max_value=180)

    @invariant.post
    def both_coordinates_or_none(self):
        if (self.latitude is None) != (self.longitude is None):
            raise ValidationError({"coordinates": ["Both latitude and longitude are required"]})


@ordering.value_object(part_of="Order")
class OrderPricing:
    """Derived money fields, fixed at placement."""

    subtotal = Float(required=True, min_value=0.0)
    delivery_charge = Float(default=0.0, min_value=0.0)
    platform_fee = Float(default=0.0, min_value=0.0)
    gst = Float(default=0.0, min_value=0.0)
    total = Float(required=True, min_value=0.0)
    distance_km = Float()

    @invariant.post
    def total_is_sum_of_parts(self):
        parts = (self.subtotal, self.delivery_charge or 0, self.platform_fee or 0, self.gst or 0)
        if sum(to_money(p) for p in parts) != to_money(self.total):
            raise ValidationError({"total": ["Total must equal subtotal + delivery charge + platform fee + GST"]})

    @classmethod
    def from_breakdown(cls, fees: FeeBreakdown) -> "OrderPricing":
        return cls(
            subtotal=float(fees.subtotal),
            delivery_charge=float(fees.delivery_charge),
            platform_fee=float(fees.platform_fee),
            gst=float(fees.gst),
            total=float(fees.total),
            distance_km=fees.distance_km,
        )


@ordering.value_object(part_of="Order")
class CourierSnapshot:
    """Courier details copied onto the order at assignment time.

    Later profile edits on the agent do not change this snapshot.
    """

    agent_id = Identifier(required=True)
    name = String(max_length=100)
    phone = String(max_length=20)


@ordering.value_object(part_of="Order")
class PaymentDetails:
    """Gateway references recorded once the payment signature checks out."""

    gateway_order_id = String(max_length=255)
    gateway_payment_id = String(max_length=255)
    signature = String(max_length=255)
    paid_at = DateTime()


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="Order")
class OrderItem:
    """A line item with the menu name and price snapshotted at order time."""

    menu_item_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)

    @property
    def line_total(self) -> Decimal:
        return to_money(self.unit_price) * self.quantity


@ordering.entity(part_of="Order")
class StatusChange:
    """Append-only audit entry for each status transition."""

    from_status = String(max_length=50)
    to_status = String(required=True, max_length=50)
    actor = String(max_length=255)
    note = String(max_length=500)
    changed_at = DateTime(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@ordering.aggregate
class Order:
    order_code = String(required=True, max_length=20)
    customer_id = Identifier(required=True)
    customer = ValueObject(CustomerContact)
    items = HasMany(OrderItem)
    address = ValueObject(DeliveryAddress, required=True)
    pricing = ValueObject(OrderPricing, required=True)
    payment_method = String(
        max_length=10,
        choices=PaymentMethod,
        default=PaymentMethod.ONLINE.value,
    )
    payment_status = String(
        max_length=10,
        choices=PaymentStatus,
        default=PaymentStatus.UNPAID.value,
    )
    payment = ValueObject(PaymentDetails)
    status = String(
        max_length=20,
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
    delivery_otp = String(max_length=4)
    otp_verified = Boolean(default=False)
    estimated_delivery = DateTime()
    courier = ValueObject(CourierSnapshot)
    courier_progress = String(max_length=20, choices=CourierProgress)
    assigned_at = DateTime()
    notes = Text()
    history = HasMany(StatusChange)
    cancellation_reason = String(max_length=500)
    cancelled_by = String(max_length=255)
    placed_at = DateTime()
    confirmed_at = DateTime()
    preparing_at = DateTime()
    out_for_delivery_at = DateTime()
    delivered_at = DateTime()
    cancelled_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def otp_verified_only_when_delivered(self):
        if self.otp_verified and self.status != OrderStatus.DELIVERED.value:
            raise ValidationError({"otp_verified": ["OTP can only be verified on a delivered order"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        customer_id: str,
        items_data: list[dict],
        address_data: dict,
        fees: FeeBreakdown,
        payment_method: str = PaymentMethod.ONLINE.value,
        customer_data: dict | None = None,
        notes: str | None = None,
    ):
        """Create an order with its fee breakdown and delivery OTP.

        ``items_data`` must already carry the snapshotted name and price of
        each menu item.
        """
        if not items_data:
            raise ValidationError({"items": ["Order must contain at least one item"]})

        now = datetime.now(UTC)
        initial = (
            OrderStatus.CONFIRMED
            if payment_method == PaymentMethod.COD.value
            else OrderStatus.PENDING
        )
        order = cls(
            order_code=generate_order_code(),
            customer_id=customer_id,
            customer=CustomerContact(**customer_data) if customer_data else None,
            address=DeliveryAddress(**address_data),
            pricing=OrderPricing.from_breakdown(fees),
            payment_method=payment_method,
            status=initial.value,
            delivery_otp=generate_otp(),
            estimated_delivery=now + ESTIMATED_DELIVERY_WINDOW,
            notes=notes,
            placed_at=now,
            confirmed_at=now if initial == OrderStatus.CONFIRMED else None,
            updated_at=now,
        )
        for item_data in items_data:
            order.add_items(OrderItem(**item_data))
        order._record_history(None, initial, actor=customer_id, at=now)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_code=order.order_code,
                customer_id=customer_id,
                status=initial.value,
                payment_method=payment_method,
                item_count=len(items_data),
                total=order.pricing.total,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    @property
    def is_terminal(self) -> bool:
        return OrderStatus(self.status) in TERMINAL_STATUSES

    @property
    def courier_id(self) -> str | None:
        return str(self.courier.agent_id) if self.courier else None

    def _assert_can_transition(self, target_status: OrderStatus) -> None:
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidTransition(f"Cannot transition from {current.value} to {target_status.value}")

    def _record_history(self, from_status, to_status, actor=None, at=None, note=None) -> None:
        self.add_history(
            StatusChange(
                from_status=from_status.value if from_status else None,
                to_status=to_status.value,
                actor=actor,
                note=note,
                changed_at=at or datetime.now(UTC),
            )
        )

    def _move_to(self, target: OrderStatus, now: datetime, actor=None, note=None) -> OrderStatus:
        """Set status, its timestamp and the audit entry together."""
        previous = OrderStatus(self.status)
        self.status = target.value
        timestamp_field = _STATUS_TIMESTAMPS.get(target)
        if timestamp_field:
            setattr(self, timestamp_field, now)
        self.updated_at = now
        self._record_history(previous, target, actor=actor, at=now, note=note)
        return previous

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def confirm_payment(self, gateway_order_id: str, gateway_payment_id: str, signature: str) -> None:
        """Mark the order paid after its gateway signature was verified."""
        self._assert_can_transition(OrderStatus.CONFIRMED)
        if self.payment_status == PaymentStatus.PAID.value:
            raise InvalidTransition("Order is already paid")

        now = datetime.now(UTC)
        self.payment_status = PaymentStatus.PAID.value
        self.payment = PaymentDetails(
            gateway_order_id=gateway_order_id,
            gateway_payment_id=gateway_payment_id,
            signature=signature,
            paid_at=now,
        )
        self._move_to(OrderStatus.CONFIRMED, now, actor=self.customer_id, note="payment verified")
        self.raise_(
            OrderConfirmed(
                order_id=str(self.id),
                order_code=self.order_code,
                customer_id=self.customer_id,
                gateway_payment_id=gateway_payment_id,
                confirmed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Kitchen
    # -------------------------------------------------------------------
    def start_preparation(self, actor: str | None = None) -> None:
        if OrderStatus(self.status) != OrderStatus.CONFIRMED:
            raise InvalidTransition(f"Cannot start preparing an order that is {self.status}")

        now = datetime.now(UTC)
        self._move_to(OrderStatus.PREPARING, now, actor=actor)
        self.raise_(
            PreparationStarted(
                order_id=str(self.id),
                order_code=self.order_code,
                customer_id=self.customer_id,
                started_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Courier assignment and progress
    # -------------------------------------------------------------------
    def assert_assignable(self) -> None:
        if self.courier is not None:
            raise AlreadyAssigned("Order already has a courier assigned")
        if OrderStatus(self.status) not in READY_FOR_PICKUP:
            raise OrderNotReady(f"Order is {self.status} and not ready for pickup")

    def assign_courier(self, agent_id: str, name: str | None = None, phone: str | None = None) -> None:
        """Hand the order to a courier; it goes out for delivery."""
        self.assert_assignable()

        now = datetime.now(UTC)
        if not self.delivery_otp:
            self.delivery_otp = generate_otp()
        self.courier = CourierSnapshot(agent_id=agent_id, name=name, phone=phone)
        self.courier_progress = CourierProgress.ASSIGNED.value
        self.assigned_at = now
        self._move_to(OrderStatus.OUT_FOR_DELIVERY, now, actor=agent_id)
        self.raise_(
            CourierAssigned(
                order_id=str(self.id),
                order_code=self.order_code,
                customer_id=self.customer_id,
                agent_id=agent_id,
                agent_name=name,
                agent_phone=phone,
                delivery_otp=self.delivery_otp,
                assigned_at=now,
            )
        )

    def record_courier_progress(self, agent_id: str, progress: str) -> None:
        """Advance the courier progress marker; status stays out_for_delivery."""
        if OrderStatus(self.status) != OrderStatus.OUT_FOR_DELIVERY:
            raise InvalidTransition(f"Courier progress can only be recorded out for delivery, not {self.status}")
        if self.courier_id != str(agent_id):
            raise InvalidTransition("Order is assigned to a different courier", field="courier")

        target = CourierProgress(progress)
        current = CourierProgress(self.courier_progress or CourierProgress.ASSIGNED.value)
        if _PROGRESS_ORDER.index(target) <= _PROGRESS_ORDER.index(current):
            raise InvalidTransition(
                f"Cannot move courier progress from {current.value} to {target.value}",
                field="courier_progress",
            )

        now = datetime.now(UTC)
        self.courier_progress = target.value
        self.updated_at = now
        self.raise_(
            CourierProgressed(
                order_id=str(self.id),
                order_code=self.order_code,
                customer_id=self.customer_id,
                agent_id=agent_id,
                progress=target.value,
                recorded_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Handoff
    # -------------------------------------------------------------------
    def verify_delivery_otp(self, code, actor: str | None = None) -> None:
        """Complete the handoff if ``code`` matches the stored OTP.

        A mismatch leaves the order untouched.
        """
        self._assert_can_transition(OrderStatus.DELIVERED)
        if not otp_matches(self.delivery_otp, code):
            raise InvalidOtp("Invalid OTP")

        now = datetime.now(UTC)
        self._move_to(OrderStatus.DELIVERED, now, actor=actor, note="otp verified")
        self.otp_verified = True
        if self.payment_method == PaymentMethod.COD.value:
            self.payment_status = PaymentStatus.PAID.value
        self.raise_(
            OrderDelivered(
                order_id=str(self.id),
                order_code=self.order_code,
                customer_id=self.customer_id,
                agent_id=self.courier_id,
                total=self.pricing.total,
                delivered_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Cancellation
    # -------------------------------------------------------------------
    def cancel(self, reason: str | None = None, cancelled_by: str | None = None) -> None:
        """Cancel from any non-terminal state."""
        self._assert_can_transition(OrderStatus.CANCELLED)

        now = datetime.now(UTC)
        previous = self._move_to(OrderStatus.CANCELLED, now, actor=cancelled_by, note=reason)
        self.cancellation_reason = reason
        self.cancelled_by = cancelled_by
        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                order_code=self.order_code,
                customer_id=self.customer_id,
                agent_id=self.courier_id,
                previous_status=previous.value,
                reason=reason,
                cancelled_by=cancelled_by,
                cancelled_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Administrative override
    # -------------------------------------------------------------------
    def override_status(self, target: str, actor: str | None = None) -> str:
        """Force a status change, bypassing transition guards.

        Terminal orders, unknown statuses and no-op changes are still
        rejected. Returns the previous status.
        """
        try:
            target_status = OrderStatus(target)
        except ValueError:
            raise InvalidTransition(f"Unknown order status: {target}") from None
        if self.is_terminal:
            raise InvalidTransition(f"Order is already {self.status}")
        if target_status == OrderStatus(self.status):
            raise InvalidTransition(f"Order is already {self.status}")

        now = datetime.now(UTC)
        previous = self._move_to(target_status, now, actor=actor, note="status override")
        if target_status == OrderStatus.DELIVERED and self.payment_method == PaymentMethod.COD.value:
            self.payment_status = PaymentStatus.PAID.value
        if target_status == OrderStatus.OUT_FOR_DELIVERY and not self.delivery_otp:
            self.delivery_otp = generate_otp()

        self.raise_(
            OrderStatusOverridden(
                order_id=str(self.id),
                order_code=self.order_code,
                customer_id=self.customer_id,
                agent_id=self.courier_id,
                previous_status=previous.value,
                new_status=target_status.value,
                delivery_otp=self.delivery_otp if target_status == OrderStatus.OUT_FOR_DELIVERY else None,
                total=self.pricing.total,
                actor=actor,
                overridden_at=now,
            )
        )
        return previous.value
