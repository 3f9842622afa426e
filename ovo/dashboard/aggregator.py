"""
Dashboard Aggregator - summary metrics, daily trend and cost breakdown.

The compute_* functions are pure: they read the given collections, never
modify them, and return fresh values on every call.
"""

import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable, Iterator, Optional

from ovo.config.settings import DEFAULT_TREND_WINDOW
from ovo.dashboard.models import CategoryShare, DashboardView, SummaryMetrics, TrendPoint
from ovo.store.base import DataStore, Expense, ProductionRecord, RecordSnapshot, Sale, Subscription
from ovo.store.parsing import to_day, to_decimal, to_int

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def _amount(value, field_name: str) -> Decimal:
    # Records built by the store already hold Decimals
    if isinstance(value, Decimal):
        return value
    return to_decimal(value, field_name)


def _count(value, field_name: str) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return to_int(value, field_name)


def _by_day(records: Iterable, label: str) -> Iterator[tuple[date, object]]:
    """Pair each record with its calendar day, skipping records without one."""
    for record in records:
        day = to_day(record.date)
        if day is None:
            logger.warning("Skipping %s %r without a valid date", label, record.id)
            continue
        yield day, record


def compute_summary(
    expenses: Iterable[Expense],
    production: Iterable[ProductionRecord],
    sales: Iterable[Sale],
) -> SummaryMetrics:
    """Totals, net profit and margin. Empty input gives all zeros."""
    total_expenses = sum((_amount(e.cost, "cost") for _, e in _by_day(expenses, "expense")), ZERO)
    total_revenue = sum((_amount(s.value, "value") for _, s in _by_day(sales, "sale")), ZERO)
    total_eggs = sum(
        _count(p.eggs_produced, "eggs_produced") for _, p in _by_day(production, "production")
    )

    net_profit = total_revenue - total_expenses
    if total_revenue > 0:
        margin_percent = net_profit / total_revenue * HUNDRED
    else:
        margin_percent = ZERO

    return SummaryMetrics(
        total_expenses=total_expenses,
        total_revenue=total_revenue,
        total_eggs=total_eggs,
        net_profit=net_profit,
        margin_percent=margin_percent,
    )


def compute_trend(
    production: Iterable[ProductionRecord],
    sales: Iterable[Sale],
    window: int = DEFAULT_TREND_WINDOW,
) -> list[TrendPoint]:
    """Eggs and revenue per calendar day, for the last ``window`` days with data.

    Days are keyed by the record date's own calendar day. Only days that
    have at least one record count toward the window.
    """
    if window <= 0:
        raise ValueError(f"window must be positive, got {window}")

    buckets = defaultdict(lambda: {"eggs": 0, "revenue": ZERO})

    for day, record in _by_day(production, "production"):
        buckets[day]["eggs"] += _count(record.eggs_produced, "eggs_produced")

    for day, sale in _by_day(sales, "sale"):
        buckets[day]["revenue"] += _amount(sale.value, "value")

    days = sorted(buckets)[-window:]

    return [
        TrendPoint(
            date_key=day.isoformat(),
            eggs_produced=buckets[day]["eggs"],
            revenue=buckets[day]["revenue"],
        )
        for day in days
    ]


def compute_category_distribution(expenses: Iterable[Expense]) -> list[CategoryShare]:
    """Total cost per expense category, in first-seen order."""
    totals: dict = {}
    for _, expense in _by_day(expenses, "expense"):
        totals[expense.category] = totals.get(expense.category, ZERO) + _amount(expense.cost, "cost")

    return [
        CategoryShare(category=category, total_cost=total)
        for category, total in totals.items()
    ]


def build_dashboard(
    snapshot: RecordSnapshot,
    window: int = DEFAULT_TREND_WINDOW,
) -> DashboardView:
    """Run all three computations over one owner's snapshot."""
    return DashboardView(
        owner=snapshot.owner,
        summary=compute_summary(snapshot.expenses, snapshot.production, snapshot.sales),
        trend=compute_trend(snapshot.production, snapshot.sales, window),
        categories=compute_category_distribution(snapshot.expenses),
    )


class DashboardAggregator:
    """Keeps a DashboardView current for one owner of a DataStore.

    Every snapshot the store pushes triggers a full recomputation.
    """

    def __init__(
        self,
        store: DataStore,
        owner: str,
        window: int = DEFAULT_TREND_WINDOW,
    ):
        if window <= 0:
            raise ValueError(f"window must be positive, got {window}")
        self.store = store
        self.owner = owner
        self.window = window
        self.latest: Optional[DashboardView] = None
        self.updates = 0
        self._subscription: Optional[Subscription] = store.subscribe(owner, self._on_snapshot)

    def _on_snapshot(self, snapshot: RecordSnapshot) -> None:
        self.latest = build_dashboard(snapshot, self.window)
        self.updates += 1

    def refresh(self) -> DashboardView:
        """Recompute from the store's current snapshot."""
        self._on_snapshot(self.store.snapshot(self.owner))
        return self.latest

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
