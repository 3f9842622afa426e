"""
Store Module - Record Types and Data Stores

Typed expense, production and sale records, and the stores that keep
them per owner.
"""

from ovo.store.base import (
    DataStore,
    Expense,
    ExpenseCategory,
    ProductionRecord,
    RecordKind,
    RecordSnapshot,
    Sale,
    Subscription,
)
from ovo.store.errors import (
    ConfigError,
    DuplicateRecordError,
    OvoError,
    RecordNotFoundError,
    StoreError,
    StoreNotReadyError,
)
from ovo.store.jsonfile import JsonFileStore
from ovo.store.memory import InMemoryStore

__all__ = [
    "DataStore",
    "Expense",
    "ExpenseCategory",
    "ProductionRecord",
    "RecordKind",
    "RecordSnapshot",
    "Sale",
    "Subscription",
    "InMemoryStore",
    "JsonFileStore",
    "OvoError",
    "ConfigError",
    "StoreError",
    "StoreNotReadyError",
    "RecordNotFoundError",
    "DuplicateRecordError",
]
