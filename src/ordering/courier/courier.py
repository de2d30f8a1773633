"""DeliveryAgent aggregate (CQRS): couriers and their earnings ledger.

Agents are keyed by their externally authenticated identity and created
lazily the first time they open their profile.

Availability:
    OFFLINE ⇄ ONLINE → ON_DELIVERY → ONLINE

An agent holds at most one active order. Completing or losing that order
returns the agent to ONLINE.
"""

from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

from ordering.courier.events import (
    AgentAvailabilityChanged,
    AgentRegistered,
    EarningsCredited,
)
from ordering.domain import ordering
from ordering.errors import AgentUnavailable, InvalidTransition
from ordering.order.pricing import to_money

COMMISSION_RATE = Decimal("0.20")


class AgentStatus(Enum):
    OFFLINE = "offline"
    ONLINE = "online"
    ON_DELIVERY = "on_delivery"


class VehicleType(Enum):
    BICYCLE = "bicycle"
    BIKE = "bike"
    SCOOTER = "scooter"
    CAR = "car"


def commission_for(order_total) -> Decimal:
    """Courier commission: 20% of the order total."""
    return to_money(to_money(order_total) * COMMISSION_RATE)


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@ordering.value_object(part_of="DeliveryAgent")
class GeoLocation:
    """Last reported coarse position of the agent."""

    latitude = Float(required=True, min_value=-90, max_value=90)
    longitude = Float(required=True, min_value=-180, max_value=180)
    updated_at = DateTime()


@ordering.value_object(part_of="DeliveryAgent")
class BankDetails:
    account_number = String(max_length=34)
    ifsc_code = String(max_length=11)
    account_holder = String(max_length=100)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ordering.entity(part_of="DeliveryAgent")
class EarningEntry:
    """Commission credited for one delivered order."""

    order_id = Identifier(required=True)
    amount = Float(required=True, min_value=0.0)
    order_total = Float(required=True, min_value=0.0)
    earned_at = DateTime(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@ordering.aggregate
class DeliveryAgent:
    agent_id = Identifier(identifier=True, required=True)
    name = String(max_length=100, default="Delivery Agent")
    phone = String(max_length=20)
    email = String(max_length=254)
    vehicle_type = String(max_length=20, choices=VehicleType, default=VehicleType.BIKE.value)
    vehicle_number = String(max_length=20)
    status = String(max_length=20, choices=AgentStatus, default=AgentStatus.OFFLINE.value)
    current_location = ValueObject(GeoLocation)
    current_order_id = Identifier()
    total_deliveries = Integer(default=0, min_value=0)
    total_earnings = Float(default=0.0, min_value=0.0)
    earnings = HasMany(EarningEntry)
    bank_details = ValueObject(BankDetails)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def active_order_only_while_on_delivery(self):
        on_delivery = self.status == AgentStatus.ON_DELIVERY.value
        if on_delivery != bool(self.current_order_id):
            raise ValidationError({"current_order_id": ["An agent holds an active order exactly while on delivery"]})

    @classmethod
    def register(cls, agent_id: str, name: str | None = None, phone: str | None = None, email: str | None = None):
        """Create a fresh offline profile for an authenticated agent."""
        now = datetime.now(UTC)
        agent = cls(
            agent_id=agent_id,
            name=name or "Delivery Agent",
            phone=phone,
            email=email,
            status=AgentStatus.OFFLINE.value,
            created_at=now,
            updated_at=now,
        )
        agent.raise_(AgentRegistered(agent_id=agent_id, name=agent.name, registered_at=now))
        return agent

    # -------------------------------------------------------------------
    # Profile
    # -------------------------------------------------------------------
    def update_profile(
        self,
        name: str | None = None,
        phone: str | None = None,
        vehicle_type: str | None = None,
        vehicle_number: str | None = None,
        bank_details: dict | None = None,
    ) -> None:
        if name is not None:
            self.name = name
        if phone is not None:
            self.phone = phone
        if vehicle_type is not None:
            self.vehicle_type = vehicle_type
        if vehicle_number is not None:
            self.vehicle_number = vehicle_number
        if bank_details is not None:
            self.bank_details = BankDetails(**bank_details)
        self.updated_at = datetime.now(UTC)

    def update_location(self, latitude: float, longitude: float) -> None:
        now = datetime.now(UTC)
        self.current_location = GeoLocation(latitude=latitude, longitude=longitude, updated_at=now)
        self.updated_at = now

    # -------------------------------------------------------------------
    # Availability
    # -------------------------------------------------------------------
    @property
    def is_available(self) -> bool:
        return self.status == AgentStatus.ONLINE.value and not self.current_order_id

    def _change_status(self, target: AgentStatus, now: datetime) -> None:
        previous = self.status
        self.status = target.value
        self.updated_at = now
        self.raise_(
            AgentAvailabilityChanged(
                agent_id=str(self.agent_id),
                previous_status=previous,
                status=target.value,
                changed_at=now,
            )
        )

    def go_online(self) -> None:
        if self.status == AgentStatus.ON_DELIVERY.value:
            raise InvalidTransition("Agent is on a delivery")
        if self.status == AgentStatus.ONLINE.value:
            return
        self._change_status(AgentStatus.ONLINE, datetime.now(UTC))

    def go_offline(self) -> None:
        if self.current_order_id:
            raise InvalidTransition("Cannot go offline with an active delivery")
        if self.status == AgentStatus.OFFLINE.value:
            return
        self._change_status(AgentStatus.OFFLINE, datetime.now(UTC))

    # -------------------------------------------------------------------
    # Orders
    # -------------------------------------------------------------------
    def accept_order(self, order_id: str) -> None:
        if not self.is_available:
            if self.current_order_id:
                raise AgentUnavailable("Agent already has an active delivery")
            raise AgentUnavailable("Agent is offline")

        now = datetime.now(UTC)
        with atomic_change(self):
            self.status = AgentStatus.ON_DELIVERY.value
            self.current_order_id = order_id
            self.updated_at = now
        self.raise_(
            AgentAvailabilityChanged(
                agent_id=str(self.agent_id),
                previous_status=AgentStatus.ONLINE.value,
                status=AgentStatus.ON_DELIVERY.value,
                changed_at=now,
            )
        )

    def release_order(self, order_id: str) -> None:
        """Drop an order that was cancelled while this agent carried it."""
        if str(self.current_order_id) != str(order_id):
            return
        with atomic_change(self):
            self.current_order_id = None
            self._change_status(AgentStatus.ONLINE, datetime.now(UTC))

    def credit_delivery(self, order_id: str, order_total: float) -> Decimal:
        """Record a completed delivery and return the commission credited."""
        now = datetime.now(UTC)
        amount = commission_for(order_total)

        self.total_deliveries = (self.total_deliveries or 0) + 1
        self.total_earnings = float(to_money(self.total_earnings or 0) + amount)
        self.add_earnings(
            EarningEntry(
                order_id=order_id,
                amount=float(amount),
                order_total=float(to_money(order_total)),
                earned_at=now,
            )
        )
        self.raise_(
            EarningsCredited(
                agent_id=str(self.agent_id),
                order_id=order_id,
                amount=float(amount),
                order_total=float(to_money(order_total)),
                earned_at=now,
            )
        )
        if str(self.current_order_id) == str(order_id):
            with atomic_change(self):
                self.current_order_id = None
                self._change_status(AgentStatus.ONLINE, now)
        return amount
