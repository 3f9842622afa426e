"""
Data models for dashboard metrics.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from ovo.store.base import ExpenseCategory


def _money(value: Decimal) -> float:
    return float(value.quantize(Decimal("0.01")))


@dataclass(frozen=True)
class SummaryMetrics:
    """Totals over all of an owner's records."""
    total_expenses: Decimal
    total_revenue: Decimal
    total_eggs: int
    net_profit: Decimal
    margin_percent: Decimal

    @property
    def is_profitable(self) -> bool:
        return self.net_profit >= 0

    def to_dict(self) -> dict:
        return {
            "total_expenses": _money(self.total_expenses),
            "total_revenue": _money(self.total_revenue),
            "total_eggs": self.total_eggs,
            "net_profit": _money(self.net_profit),
            "margin_percent": float(round(self.margin_percent, 1)),
        }


@dataclass(frozen=True)
class TrendPoint:
    """Production and revenue for one calendar day."""
    date_key: str  # YYYY-MM-DD
    eggs_produced: int
    revenue: Decimal

    def to_dict(self) -> dict:
        return {
            "date": self.date_key,
            "eggs_produced": self.eggs_produced,
            "revenue": _money(self.revenue),
        }


@dataclass(frozen=True)
class CategoryShare:
    """Total expense cost for one category."""
    category: ExpenseCategory
    total_cost: Decimal

    def to_dict(self) -> dict:
        return {
            "category": self.category.value,
            "total_cost": _money(self.total_cost),
        }


@dataclass(frozen=True)
class DashboardView:
    """Everything the dashboard renders for one owner."""
    owner: str
    summary: SummaryMetrics
    trend: list[TrendPoint] = field(default_factory=list)
    categories: list[CategoryShare] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "owner": self.owner,
            "summary": self.summary.to_dict(),
            "trend": [p.to_dict() for p in self.trend],
            "categories": [c.to_dict() for c in self.categories],
        }
