"""
Dashboard Module - Farm Metrics

Summary totals, daily production/revenue trend and expense breakdown
computed from an owner's records.
"""

from ovo.dashboard.aggregator import (
    DashboardAggregator,
    build_dashboard,
    compute_category_distribution,
    compute_summary,
    compute_trend,
)
from ovo.dashboard.models import CategoryShare, DashboardView, SummaryMetrics, TrendPoint

__all__ = [
    "DashboardAggregator",
    "build_dashboard",
    "compute_summary",
    "compute_trend",
    "compute_category_distribution",
    "SummaryMetrics",
    "TrendPoint",
    "CategoryShare",
    "DashboardView",
]
