from __future__ import annotations

from datetime import date

from ..config import settings
from .constants import MONTH_ABBREVIATIONS


def format_currency(value: float, symbol: str | None = None) -> str:
    """pt-BR money string, e.g. 1234.5 -> "R$ 1.234,50"."""
    symbol = settings.currency_symbol if symbol is None else symbol
    text = f"{abs(value):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    sign = "-" if value < 0 and round(abs(value), 2) != 0 else ""
    return f"{sign}{symbol} {text}"


def format_month_year(on: date) -> str:
    return f"{MONTH_ABBREVIATIONS[on.month - 1]}/{on.year}"
