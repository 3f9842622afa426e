"""
Coercion of loose record data into typed records.

Everything entering a store passes through here. The policy is:

- numeric fields that cannot be parsed, or are negative, become 0
- a record whose date cannot be parsed is skipped (``None`` is returned)
- unknown expense categories become ``Other``

Each coercion is logged so that divergent data can be traced.
"""

import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ovo.store.base import (
    Expense,
    ExpenseCategory,
    ProductionRecord,
    Record,
    RecordKind,
    Sale,
)

logger = logging.getLogger(__name__)

# Portuguese labels found in older data files
LEGACY_CATEGORY_MAPPING = {
    "ração": ExpenseCategory.FEED,
    "racao": ExpenseCategory.FEED,
    "medicamento": ExpenseCategory.MEDICINE,
    "outro": ExpenseCategory.OTHER,
}


def _normalize_number(text: str) -> str:
    """Drop grouping separators and use "." for decimals.

    With both separators present the last one is the decimal mark, so
    "1.234,56" and "1,234.56" both give "1234.56". A lone comma is a
    decimal comma ("45,50"), and a repeated mark is grouping ("1.234.567").
    """
    text = text.strip().replace(" ", "")
    if "," in text and "." in text:
        if text.rfind(",") > text.rfind("."):
            return text.replace(".", "").replace(",", ".")
        return text.replace(",", "")
    for mark in (",", "."):
        if text.count(mark) > 1:
            return text.replace(mark, "")
    return text.replace(",", ".")


def to_decimal(value: Any, field_name: str = "value") -> Decimal:
    """Coerce to a non-negative Decimal, falling back to 0."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, float):
        # str() keeps the shortest repr, so 45.5 becomes Decimal("45.5")
        result = Decimal(str(value))
    else:
        try:
            result = Decimal(_normalize_number(str(value)))
        except InvalidOperation:
            logger.warning("Could not parse %s=%r, using 0", field_name, value)
            return Decimal("0")

    if not result.is_finite():
        logger.warning("Non-finite %s=%r, using 0", field_name, value)
        return Decimal("0")
    if result < 0:
        logger.warning("Negative %s=%r, using 0", field_name, value)
        return Decimal("0")
    return result


def to_int(value: Any, field_name: str = "value") -> int:
    """Coerce to a non-negative integer, falling back to 0."""
    if isinstance(value, int) and not isinstance(value, bool):
        result = value
    else:
        try:
            result = int(to_decimal(value, field_name))
        except (ValueError, OverflowError):
            result = 0
    if result < 0:
        logger.warning("Negative %s=%r, using 0", field_name, value)
        return 0
    return result


def to_day(value: Any) -> Optional[date]:
    """Calendar day of a date, datetime or ISO string. None if unparseable.

    A datetime keeps its own calendar day; no timezone conversion happens.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            pass
    return None


def to_category(value: Any) -> ExpenseCategory:
    if isinstance(value, ExpenseCategory):
        return value
    text = str(value or "").strip()
    for category in ExpenseCategory:
        if category.value.lower() == text.lower():
            return category
    if text.lower() in LEGACY_CATEGORY_MAPPING:
        return LEGACY_CATEGORY_MAPPING[text.lower()]
    logger.warning("Unknown expense category %r, using Other", value)
    return ExpenseCategory.OTHER


def parse_expense(data: dict, owner: str) -> Optional[Expense]:
    day = to_day(data.get("date"))
    if day is None:
        logger.warning("Skipping expense %r with invalid date %r", data.get("id"), data.get("date"))
        return None
    return Expense(
        id=str(data.get("id") or ""),
        owner=owner,
        # Older data files store the category under "type"
        category=to_category(data.get("category", data.get("type"))),
        description=str(data.get("description") or ""),
        cost=to_decimal(data.get("cost"), "cost"),
        date=day,
    )


def parse_production(data: dict, owner: str) -> Optional[ProductionRecord]:
    day = to_day(data.get("date"))
    if day is None:
        logger.warning("Skipping production %r with invalid date %r", data.get("id"), data.get("date"))
        return None
    return ProductionRecord(
        id=str(data.get("id") or ""),
        owner=owner,
        date=day,
        eggs_produced=to_int(data.get("eggs_produced"), "eggs_produced"),
        feed_consumed_kg=to_decimal(data.get("feed_consumed_kg"), "feed_consumed_kg"),
    )


def parse_sale(data: dict, owner: str) -> Optional[Sale]:
    day = to_day(data.get("date"))
    if day is None:
        logger.warning("Skipping sale %r with invalid date %r", data.get("id"), data.get("date"))
        return None
    client = data.get("client")
    return Sale(
        id=str(data.get("id") or ""),
        owner=owner,
        date=day,
        quantity=to_int(data.get("quantity"), "quantity"),
        value=to_decimal(data.get("value"), "value"),
        client=str(client) if client else None,
    )


PARSERS = {
    RecordKind.EXPENSE: parse_expense,
    RecordKind.PRODUCTION: parse_production,
    RecordKind.SALE: parse_sale,
}


def parse_record(kind: RecordKind, data: dict, owner: str) -> Optional[Record]:
    """Build a typed record of ``kind`` from a loose mapping."""
    return PARSERS[RecordKind(kind)](data, owner)


def record_to_dict(record: Record) -> dict:
    """JSON-friendly mapping of a record (Decimals as strings)."""
    if isinstance(record, Expense):
        return {
            "id": record.id,
            "category": record.category.value,
            "description": record.description,
            "cost": str(record.cost),
            "date": record.date.isoformat(),
        }
    if isinstance(record, ProductionRecord):
        return {
            "id": record.id,
            "date": record.date.isoformat(),
            "eggs_produced": record.eggs_produced,
            "feed_consumed_kg": str(record.feed_consumed_kg),
        }
    return {
        "id": record.id,
        "date": record.date.isoformat(),
        "quantity": record.quantity,
        "value": str(record.value),
        "client": record.client,
    }
