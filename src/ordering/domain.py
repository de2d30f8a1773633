"""Ordering bounded context: Food Order Lifecycle and Courier Fulfillment.

Handles the order lifecycle (CQRS) from placement through payment
confirmation, kitchen preparation and OTP-verified handoff, together with
the delivery agents who carry orders and accrue per-delivery earnings.
"""

import structlog
from protean.domain import Domain

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
