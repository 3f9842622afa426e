"""
Ovo - Poultry Farm Dashboard

Track expenses, egg production and sales, and see how the operation is doing.
"""

__version__ = "0.1.0"

from ovo.config import Settings, load_settings
from ovo.dashboard import (
    DashboardAggregator,
    build_dashboard,
    compute_category_distribution,
    compute_summary,
    compute_trend,
)
from ovo.store import DataStore, InMemoryStore, JsonFileStore
from ovo.store.manager import StoreManager

__all__ = [
    "Settings",
    "load_settings",
    "DashboardAggregator",
    "build_dashboard",
    "compute_summary",
    "compute_trend",
    "compute_category_distribution",
    "DataStore",
    "InMemoryStore",
    "JsonFileStore",
    "StoreManager",
]
