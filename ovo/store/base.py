"""
Record types and the base class for data stores.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Callable, Optional, Union


class ExpenseCategory(str, Enum):
    """Expense categories tracked by the farm."""
    FEED = "Feed"
    MEDICINE = "Medicine"
    OTHER = "Other"


class RecordKind(str, Enum):
    """The three record collections kept per owner."""
    EXPENSE = "expenses"
    PRODUCTION = "production"
    SALE = "sales"


@dataclass(frozen=True)
class Expense:
    """Money spent on the operation."""
    id: str
    owner: str
    category: ExpenseCategory
    description: str
    cost: Decimal
    date: date

    kind = RecordKind.EXPENSE


@dataclass(frozen=True)
class ProductionRecord:
    """Daily laying output and feed use."""
    id: str
    owner: str
    date: date
    eggs_produced: int
    feed_consumed_kg: Decimal = Decimal("0")

    kind = RecordKind.PRODUCTION

    @property
    def eggs_per_kg_feed(self) -> float:
        if self.feed_consumed_kg > 0:
            return float(self.eggs_produced / self.feed_consumed_kg)
        return 0.0


@dataclass(frozen=True)
class Sale:
    """Eggs sold to a client."""
    id: str
    owner: str
    date: date
    quantity: int
    value: Decimal
    client: Optional[str] = None

    kind = RecordKind.SALE

    @property
    def unit_price(self) -> Decimal:
        if self.quantity > 0:
            return self.value / self.quantity
        return Decimal("0")


Record = Union[Expense, ProductionRecord, Sale]


@dataclass(frozen=True)
class RecordSnapshot:
    """Immutable view of one owner's three record collections."""
    owner: str
    expenses: tuple[Expense, ...] = field(default_factory=tuple)
    production: tuple[ProductionRecord, ...] = field(default_factory=tuple)
    sales: tuple[Sale, ...] = field(default_factory=tuple)

    def records(self, kind: RecordKind) -> tuple:
        if kind == RecordKind.EXPENSE:
            return self.expenses
        if kind == RecordKind.PRODUCTION:
            return self.production
        return self.sales

    @property
    def is_empty(self) -> bool:
        return not (self.expenses or self.production or self.sales)


SnapshotCallback = Callable[[RecordSnapshot], None]


class Subscription:
    """Handle returned by DataStore.subscribe()."""

    def __init__(self, store: "DataStore", owner: str, callback: SnapshotCallback):
        self.store = store
        self.owner = owner
        self.callback = callback
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self.active = False
            self.store._remove_subscription(self)


class DataStore(ABC):
    """Base class for all record stores.

    A store keeps records for many owners but every read is scoped to one
    owner. Subscribers receive a fresh RecordSnapshot right away and after
    every change to their owner's records.
    """

    backend_name: str = "base"

    def __init__(self):
        self._subscriptions: list[Subscription] = []

    @abstractmethod
    def snapshot(self, owner: str) -> RecordSnapshot:
        """Return the current records for an owner."""
        pass

    @abstractmethod
    def add(self, record: Record) -> Record:
        """Store a record. Returns the stored record (with its id set)."""
        pass

    @abstractmethod
    def delete(self, owner: str, kind: RecordKind, record_id: str) -> None:
        """Remove a record. Raises RecordNotFoundError if absent."""
        pass

    def close(self) -> None:
        """Release resources and drop all subscriptions."""
        for subscription in list(self._subscriptions):
            subscription.unsubscribe()

    def subscribe(self, owner: str, callback: SnapshotCallback) -> Subscription:
        """Deliver snapshots for ``owner`` to ``callback`` until unsubscribed."""
        subscription = Subscription(self, owner, callback)
        self._subscriptions.append(subscription)
        callback(self.snapshot(owner))
        return subscription

    def list_records(self, owner: str, kind: RecordKind) -> list[Record]:
        """Records of one kind, newest first."""
        records = self.snapshot(owner).records(kind)
        return sorted(records, key=lambda r: r.date, reverse=True)

    def get(self, owner: str, kind: RecordKind, record_id: str) -> Optional[Record]:
        for record in self.snapshot(owner).records(kind):
            if record.id == record_id:
                return record
        return None

    def _remove_subscription(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    def _notify(self, owner: str) -> None:
        subscribers = [s for s in self._subscriptions if s.owner == owner]
        if not subscribers:
            return
        snapshot = self.snapshot(owner)
        for subscription in subscribers:
            subscription.callback(snapshot)
