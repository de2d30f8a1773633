"""Earnings summary: read-side aggregation over an agent's ledger.

Windows are anchored in the caller's local time: midnight today, the most
recent Sunday midnight, and the first of the month.
"""

from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime, timedelta
from decimal import Decimal

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ordering.courier.courier import DeliveryAgent
from ordering.errors import NotFound
from ordering.order.pricing import to_money

RECENT_HISTORY_LIMIT = 10


@dataclass(frozen=True)
class EarningsWindow:
    amount: float
    deliveries: int


@dataclass(frozen=True)
class EarningsSummary:
    agent_id: str
    today: EarningsWindow
    week: EarningsWindow
    month: EarningsWindow
    lifetime: EarningsWindow
    recent_history: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def window_starts(now: datetime) -> tuple[datetime, datetime, datetime]:
    """Return (day_start, week_start, month_start) for ``now``."""
    day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    # weekday(): Monday == 0 ... Sunday == 6
    week_start = day_start - timedelta(days=(day_start.weekday() + 1) % 7)
    month_start = day_start.replace(day=1)
    return day_start, week_start, month_start


def _window(entries, since: datetime | None = None) -> EarningsWindow:
    selected = [e for e in entries if since is None or _aware(e.earned_at) >= since]
    total = sum((to_money(e.amount) for e in selected), Decimal("0"))
    return EarningsWindow(amount=float(to_money(total)), deliveries=len(selected))


def summarize_earnings(agent: DeliveryAgent, now: datetime | None = None) -> EarningsSummary:
    now = _aware(now) if now is not None else datetime.now().astimezone()
    day_start, week_start, month_start = window_starts(now)
    entries = list(agent.earnings or [])

    recent = sorted(entries, key=lambda e: _aware(e.earned_at), reverse=True)[:RECENT_HISTORY_LIMIT]
    return EarningsSummary(
        agent_id=str(agent.agent_id),
        today=_window(entries, day_start),
        week=_window(entries, week_start),
        month=_window(entries, month_start),
        lifetime=EarningsWindow(
            amount=float(to_money(agent.total_earnings or 0)),
            deliveries=agent.total_deliveries or 0,
        ),
        recent_history=[
            {
                "order_id": str(e.order_id),
                "amount": e.amount,
                "order_total": e.order_total,
                "earned_at": _aware(e.earned_at).isoformat(),
            }
            for e in recent
        ],
    )


def get_earnings_summary(agent_id: str, now: datetime | None = None) -> EarningsSummary:
    try:
        agent = current_domain.repository_for(DeliveryAgent).get(agent_id)
    except ObjectNotFoundError:
        raise NotFound(f"Delivery agent {agent_id} not found") from None
    return summarize_earnings(agent, now=now)
