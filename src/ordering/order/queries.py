"""Read-side order listings for customers, couriers and operators."""

from protean.utils.globals import current_domain

from ordering.errors import NotFound
from ordering.lookup import load_agent, load_order
from ordering.order.order import READY_FOR_PICKUP, Order, OrderStatus


def _newest_first(orders: list[Order]) -> list[Order]:
    return sorted(orders, key=lambda o: o.placed_at, reverse=True)


def _matching(**criteria) -> list[Order]:
    """Every order matching ``criteria``, without the default page size."""
    query = current_domain.repository_for(Order)._dao.query
    if criteria:
        query = query.filter(**criteria)
    # cloning a queryset restores the default page size, so lift it last
    return query.limit(None).all().items


def get_order(order_id: str, customer_id: str | None = None) -> Order:
    """Load an order; with ``customer_id`` only the owner may see it."""
    order = load_order(order_id)
    if customer_id is not None and str(order.customer_id) != str(customer_id):
        raise NotFound(f"Order {order_id} not found")
    return order


def orders_for_customer(customer_id: str, status: str | None = None) -> list[Order]:
    criteria = {"customer_id": customer_id}
    if status:
        criteria["status"] = status
    return _newest_first(_matching(**criteria))


def orders_by_status(status: str | None = None) -> list[Order]:
    """Operator listing; ``None`` or ``"all"`` lists every order."""
    if status and status != "all":
        return _newest_first(_matching(status=status))
    return _newest_first(_matching())


def available_orders() -> list[Order]:
    """Orders ready for pickup that no courier has taken yet."""
    ready = []
    for status in READY_FOR_PICKUP:
        ready.extend(o for o in _matching(status=status.value) if o.courier is None)
    return sorted(ready, key=lambda o: o.placed_at)


def active_order_for_agent(agent_id: str) -> Order | None:
    agent = load_agent(agent_id)
    if not agent.current_order_id:
        return None
    return load_order(agent.current_order_id)


def delivery_history(agent_id: str) -> list[Order]:
    delivered = _matching(status=OrderStatus.DELIVERED.value, courier_agent_id=str(agent_id))
    return sorted(
        delivered,
        key=lambda o: o.delivered_at,
        reverse=True,
    )
