"""
Display formatting for dashboard values.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from ovo.store.parsing import to_day

# Pie chart colors, assigned by category index
EXPENSE_COLORS = ["#10B981", "#F59E0B", "#EF4444"]

LOCALES = {
    "pt-BR": {"symbol": "R$ ", "thousands": ".", "decimal": ","},
    "en-US": {"symbol": "$", "thousands": ",", "decimal": "."},
}

Number = Union[Decimal, int, float]


def _locale(locale: str) -> dict:
    try:
        return LOCALES[locale]
    except KeyError:
        raise ValueError(f"Unsupported locale '{locale}'") from None


def _group(value: Decimal, places: int, locale: str) -> str:
    """Round half-up and insert locale separators. Sign is not included."""
    conv = _locale(locale)
    quantum = Decimal(1).scaleb(-places)
    rounded = abs(value).quantize(quantum, rounding=ROUND_HALF_UP)

    whole, _, fraction = f"{rounded:f}".partition(".")
    grouped = f"{int(whole):,}".replace(",", conv["thousands"])
    if places:
        return f"{grouped}{conv['decimal']}{fraction}"
    return grouped


def _is_negative(value: Decimal, places: int) -> bool:
    quantum = Decimal(1).scaleb(-places)
    return value.quantize(quantum, rounding=ROUND_HALF_UP) < 0


def format_currency(value: Number, locale: str = "pt-BR") -> str:
    """Currency with 2 decimal places, e.g. ``R$ 1.234,56`` or ``-$27.50``."""
    amount = Decimal(str(value))
    sign = "-" if _is_negative(amount, 2) else ""
    return f"{sign}{_locale(locale)['symbol']}{_group(amount, 2, locale)}"


def format_percent(value: Number, locale: str = "pt-BR") -> str:
    """Percentage with 1 decimal place, e.g. ``-11,1%``."""
    amount = Decimal(str(value))
    sign = "-" if _is_negative(amount, 1) else ""
    return f"{sign}{_group(amount, 1, locale)}%"


def format_count(value: int, locale: str = "pt-BR") -> str:
    """Whole number with thousands separators."""
    sign = "-" if value < 0 else ""
    return f"{sign}{_group(Decimal(value), 0, locale)}"


def day_label(date_key: Union[str, date]) -> str:
    """Chart axis label ``dd/mm`` for a day key."""
    day = to_day(date_key)
    if day is None:
        return str(date_key)
    return day.strftime("%d/%m")


def color_for(index: int) -> str:
    return EXPENSE_COLORS[index % len(EXPENSE_COLORS)]
