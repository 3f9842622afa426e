"""
Tests for record parsing, data stores and the store manager.
"""

import json
import pytest
from datetime import date, datetime
from decimal import Decimal

from ovo.config import Settings
from ovo.store import (
    DuplicateRecordError,
    Expense,
    ExpenseCategory,
    InMemoryStore,
    JsonFileStore,
    ProductionRecord,
    RecordKind,
    RecordNotFoundError,
    Sale,
    StoreError,
    StoreNotReadyError,
)
from ovo.store.manager import StoreManager, StoreState, create_store
from ovo.store.parsing import (
    parse_expense,
    parse_production,
    parse_record,
    parse_sale,
    record_to_dict,
    to_category,
    to_day,
    to_decimal,
    to_int,
)


def make_sale(owner="farm", id="", value="10.00", day=date(2024, 1, 1)):
    return Sale(id=id, owner=owner, date=day, quantity=12, value=Decimal(value))


class TestParsing:
    """Tests for coercion at the data-access boundary."""

    def test_to_decimal(self):
        assert to_decimal("45.50") == Decimal("45.50")
        assert to_decimal("45,50") == Decimal("45.50")
        assert to_decimal("1,234.56") == Decimal("1234.56")
        assert to_decimal("1.234,56") == Decimal("1234.56")
        assert to_decimal("1.234.567") == Decimal("1234567")
        assert to_decimal(15) == Decimal("15")
        assert to_decimal(14.5) == Decimal("14.5")
        assert to_decimal(None) == 0
        assert to_decimal("abc") == 0
        assert to_decimal("-3") == 0
        assert to_decimal("NaN") == 0
        assert to_decimal("Infinity") == 0

    def test_to_int(self):
        assert to_int(120) == 120
        assert to_int("130") == 130
        assert to_int("12.9") == 12
        assert to_int("many") == 0
        assert to_int(-4) == 0

    def test_to_day(self):
        assert to_day(date(2023, 10, 1)) == date(2023, 10, 1)
        assert to_day(datetime(2023, 10, 1, 22, 15)) == date(2023, 10, 1)
        assert to_day("2023-10-01") == date(2023, 10, 1)
        assert to_day("2023-10-01T23:30:00Z") == date(2023, 10, 1)
        assert to_day("yesterday") is None
        assert to_day("") is None
        assert to_day(None) is None

    def test_to_category(self):
        assert to_category("Feed") is ExpenseCategory.FEED
        assert to_category("medicine") is ExpenseCategory.MEDICINE
        assert to_category("Ração") is ExpenseCategory.FEED
        assert to_category("Medicamento") is ExpenseCategory.MEDICINE
        assert to_category("Outro") is ExpenseCategory.OTHER
        assert to_category("Fencing") is ExpenseCategory.OTHER

    def test_parse_expense_with_legacy_type_field(self):
        record = parse_expense(
            {"id": "1", "type": "Ração", "description": "Ração Postura", "cost": 150, "date": "2023-10-01"},
            "demo",
        )
        assert record.category is ExpenseCategory.FEED
        assert record.cost == Decimal("150")
        assert record.owner == "demo"

    def test_parse_skips_bad_dates(self):
        assert parse_expense({"cost": "10", "date": "not a date"}, "farm") is None
        assert parse_production({"eggs_produced": 10}, "farm") is None
        assert parse_sale({"value": "5", "date": None}, "farm") is None

    def test_parse_coerces_bad_numbers(self):
        record = parse_production(
            {"id": "p", "date": "2024-01-01", "eggs_produced": "lots", "feed_consumed_kg": "15.5"},
            "farm",
        )
        assert record.eggs_produced == 0
        assert record.feed_consumed_kg == Decimal("15.5")

    def test_parse_sale_without_client(self):
        record = parse_record(RecordKind.SALE, {"date": "2024-01-01", "quantity": 90, "value": "72"}, "farm")
        assert record.client is None
        assert record.id == ""

    def test_record_to_dict(self):
        data = record_to_dict(make_sale(id="s1", value="72.00"))
        assert data == {
            "id": "s1",
            "date": "2024-01-01",
            "quantity": 12,
            "value": "72.00",
            "client": None,
        }


class TestRecordModels:
    """Tests for record helpers."""

    def test_unit_price(self):
        assert make_sale(value="12.00").unit_price == Decimal("1")
        assert Sale(id="", owner="f", date=date(2024, 1, 1), quantity=0, value=Decimal("5")).unit_price == 0

    def test_eggs_per_kg_feed(self):
        record = ProductionRecord(
            id="", owner="f", date=date(2024, 1, 1), eggs_produced=120, feed_consumed_kg=Decimal("15")
        )
        assert record.eggs_per_kg_feed == 8.0
        assert ProductionRecord(id="", owner="f", date=date(2024, 1, 1), eggs_produced=5).eggs_per_kg_feed == 0.0


class TestInMemoryStore:
    """Tests for InMemoryStore."""

    def test_empty_snapshot(self):
        snapshot = InMemoryStore().snapshot("farm")
        assert snapshot.owner == "farm"
        assert snapshot.is_empty

    def test_add_assigns_id(self):
        store = InMemoryStore()
        stored = store.add(make_sale())
        assert stored.id
        assert store.snapshot("farm").sales == (stored,)

    def test_duplicate_id(self):
        store = InMemoryStore()
        store.add(make_sale(id="s1"))
        with pytest.raises(DuplicateRecordError):
            store.add(make_sale(id="s1"))

    def test_same_id_for_other_owner_is_allowed(self):
        store = InMemoryStore()
        store.add(make_sale(id="s1"))
        store.add(make_sale(owner="other", id="s1"))
        assert len(store.snapshot("other").sales) == 1

    def test_owners_are_isolated(self):
        store = InMemoryStore()
        store.add(make_sale(owner="alice"))
        store.add(make_sale(owner="bob", value="3.00"))

        assert [s.value for s in store.snapshot("alice").sales] == [Decimal("10.00")]
        assert [s.value for s in store.snapshot("bob").sales] == [Decimal("3.00")]

    def test_delete(self):
        store = InMemoryStore()
        stored = store.add(make_sale())
        store.delete("farm", RecordKind.SALE, stored.id)
        assert store.snapshot("farm").sales == ()

    def test_delete_missing(self):
        store = InMemoryStore()
        with pytest.raises(RecordNotFoundError):
            store.delete("farm", RecordKind.EXPENSE, "nope")

    def test_delete_from_other_owner_is_not_found(self):
        store = InMemoryStore()
        stored = store.add(make_sale(owner="alice"))
        with pytest.raises(RecordNotFoundError):
            store.delete("bob", RecordKind.SALE, stored.id)

    def test_list_records_newest_first(self):
        store = InMemoryStore()
        store.add(make_sale(id="old", day=date(2024, 1, 1)))
        store.add(make_sale(id="new", day=date(2024, 3, 1)))
        store.add(make_sale(id="mid", day=date(2024, 2, 1)))

        ids = [r.id for r in store.list_records("farm", RecordKind.SALE)]
        assert ids == ["new", "mid", "old"]

    def test_get(self):
        store = InMemoryStore([make_sale(id="s1")])
        assert store.get("farm", RecordKind.SALE, "s1").id == "s1"
        assert store.get("farm", RecordKind.SALE, "s2") is None

    def test_subscribe_delivers_snapshots(self):
        store = InMemoryStore()
        received = []

        subscription = store.subscribe("farm", received.append)
        assert len(received) == 1
        assert received[0].is_empty

        stored = store.add(make_sale())
        store.delete("farm", RecordKind.SALE, stored.id)
        assert len(received) == 3
        assert received[1].sales == (stored,)
        assert received[2].sales == ()

        subscription.unsubscribe()
        subscription.unsubscribe()
        store.add(make_sale())
        assert len(received) == 3

    def test_snapshot_is_not_affected_by_later_changes(self):
        store = InMemoryStore()
        store.add(make_sale())
        snapshot = store.snapshot("farm")
        store.add(make_sale())
        assert len(snapshot.sales) == 1

    def test_close_drops_subscriptions(self):
        store = InMemoryStore()
        received = []
        store.subscribe("farm", received.append)
        store.close()
        store.add(make_sale())
        assert len(received) == 1


class TestJsonFileStore:
    """Tests for JsonFileStore."""

    def test_missing_file_starts_empty(self, tmp_path):
        store = JsonFileStore(tmp_path / "data.json")
        assert store.snapshot("farm").is_empty
        assert not (tmp_path / "data.json").exists()

    def test_round_trip(self, tmp_path):
        path = tmp_path / "data.json"
        store = JsonFileStore(path)
        store.add(Expense(
            id="e1",
            owner="farm",
            category=ExpenseCategory.MEDICINE,
            description="Vitamins",
            cost=Decimal("45.50"),
            date=date(2023, 10, 5),
        ))
        store.add(make_sale(id="s1", value="72.00"))

        reloaded = JsonFileStore(path)
        snapshot = reloaded.snapshot("farm")
        assert snapshot.expenses[0].cost == Decimal("45.50")
        assert snapshot.expenses[0].category is ExpenseCategory.MEDICINE
        assert snapshot.sales[0].value == Decimal("72.00")

    def test_delete_is_persisted(self, tmp_path):
        path = tmp_path / "data.json"
        store = JsonFileStore(path)
        store.add(make_sale(id="s1"))
        store.delete("farm", RecordKind.SALE, "s1")

        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["owners"]["farm"]["sales"] == []

    def test_loads_loose_records(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text(json.dumps({
            "version": 1,
            "owners": {
                "demo": {
                    "expenses": [{"id": "1", "type": "Outro", "cost": "80", "date": "2023-10-10"}],
                    "production": [
                        {"id": "1", "date": "2023-10-01", "eggs_produced": 120, "feed_consumed_kg": 15},
                        {"id": "2", "date": "garbage", "eggs_produced": 99},
                    ],
                },
            },
        }), encoding="utf-8")

        snapshot = JsonFileStore(path).snapshot("demo")
        assert snapshot.expenses[0].category is ExpenseCategory.OTHER
        assert [p.id for p in snapshot.production] == ["1"]
        assert snapshot.sales == ()

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(StoreError):
            JsonFileStore(path)

    @pytest.mark.parametrize("payload", [
        [],
        {"owners": []},
        {"owners": {"farm": ["sales"]}},
        {"owners": {"farm": {"sales": {"s1": {}}}}},
    ])
    def test_wrong_shape_file(self, tmp_path, payload):
        path = tmp_path / "data.json"
        path.write_text(json.dumps(payload), encoding="utf-8")
        with pytest.raises(StoreError):
            JsonFileStore(path)

    def test_non_object_entries_are_skipped(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text(json.dumps({
            "owners": {"farm": {"sales": ["oops", 3, {"id": "s1", "date": "2024-01-01", "value": "5"}]}},
        }), encoding="utf-8")

        snapshot = JsonFileStore(path).snapshot("farm")
        assert [s.id for s in snapshot.sales] == ["s1"]

    def test_failed_write_keeps_memory_unchanged(self, tmp_path, monkeypatch):
        path = tmp_path / "data.json"
        store = JsonFileStore(path)
        store.add(make_sale(id="s1"))
        received = []
        store.subscribe("farm", received.append)

        def fail():
            raise StoreError("disk full")

        monkeypatch.setattr(store, "_save", fail)

        with pytest.raises(StoreError):
            store.add(make_sale(id="s2"))
        assert [s.id for s in store.snapshot("farm").sales] == ["s1"]

        with pytest.raises(StoreError):
            store.delete("farm", RecordKind.SALE, "s1")
        assert [s.id for s in store.snapshot("farm").sales] == ["s1"]

        assert len(received) == 1
        saved = json.loads(path.read_text(encoding="utf-8"))
        assert [s["id"] for s in saved["owners"]["farm"]["sales"]] == ["s1"]

    def test_unwritable_path(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        store = JsonFileStore(blocker / "data.json")

        with pytest.raises(StoreError):
            store.add(make_sale(id="s1"))
        assert store.snapshot("farm").is_empty


class TestStoreManager:
    """Tests for StoreManager lifecycle."""

    def test_store_before_init(self):
        manager = StoreManager(Settings(backend="memory"))
        assert manager.state == StoreState.UNINITIALIZED
        with pytest.raises(StoreNotReadyError):
            manager.store

    def test_init_and_reset(self):
        manager = StoreManager(Settings(backend="memory"))
        store = manager.init()

        assert manager.is_ready
        assert manager.store is store
        assert manager.init() is store

        manager.reset()
        assert manager.state == StoreState.UNINITIALIZED
        with pytest.raises(StoreNotReadyError):
            manager.store

    def test_reset_before_init(self):
        manager = StoreManager(Settings(backend="memory"))
        manager.reset()
        assert not manager.is_ready

    def test_create_store_backends(self, tmp_path):
        assert isinstance(create_store(Settings(backend="memory")), InMemoryStore)

        store = create_store(Settings(backend="json", data_path=tmp_path / "d.json"))
        assert isinstance(store, JsonFileStore)
        assert store.path == tmp_path / "d.json"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
