"""Month-over-month category performance net of deposits and withdrawals.

A category's value can jump because money was added, not because the holdings
grew. Each month's peak value is reduced by that month's net cash flow before
the two latest months are compared, so the reported change reflects organic
movement only.
"""
from __future__ import annotations

import math
from collections import defaultdict
from datetime import date

from ..config import settings
from ..utils import today_local
from .constants import PERFORMANCE_CATEGORIES, TX_TOP_UP, category_label
from .distribution import distribution_value as _distribution_value
from .records import period_peaks, snapshots_for


def monthly_net_cash_flow(transactions: list[dict]) -> dict[tuple[str, int, int], float]:
    net = defaultdict(float)
    for tx in transactions:
        on = tx["date"]
        signed = tx["amount"] if tx["kind"] == TX_TOP_UP else -tx["amount"]
        net[(tx["category"], on.year, on.month)] += signed
    return dict(net)


def _finite_or_none(val: float | None, ndigits: int) -> float | None:
    if val is None or not math.isfinite(val):
        return None
    return round(val, ndigits)


def _result(category: str, percent_change=None, current_value=None, delta_value=None) -> dict:
    return {
        "category": category,
        "label": category_label(category),
        "percent_change": percent_change,
        "current_value": current_value,
        "delta_value": delta_value,
    }


def compute_performance(
    category: str,
    snapshots: list[dict],
    transactions: list[dict],
    distribution_value: float | None = None,
) -> dict:
    monthly = period_peaks(snapshots_for(snapshots, category), "M")
    if len(monthly) < 2:
        latest = float(monthly.iloc[-1]) if len(monthly) else None
        current = distribution_value if distribution_value is not None else latest
        return _result(category, current_value=current)

    flows = monthly_net_cash_flow([tx for tx in transactions if tx["category"] == category])
    (prev_month, prev_value), (cur_month, cur_value) = list(monthly.iloc[-2:].items())
    # Cents: a month funded entirely by deposits must net to exactly zero.
    adjusted_previous = round(prev_value - flows.get((category, prev_month.year, prev_month.month), 0.0), 2)
    adjusted_current = round(cur_value - flows.get((category, cur_month.year, cur_month.month), 0.0), 2)

    delta = adjusted_current - adjusted_previous
    percent = None
    if adjusted_previous != 0:
        percent = delta / adjusted_previous * 100

    current = distribution_value if distribution_value is not None else float(cur_value)
    return _result(
        category,
        percent_change=_finite_or_none(percent, 4),
        current_value=current,
        delta_value=_finite_or_none(delta, 2),
    )


def build_performance(
    snapshots: list[dict],
    transactions: list[dict],
    distribution: list[dict],
    categories=PERFORMANCE_CATEGORIES,
) -> list[dict]:
    return [
        compute_performance(
            category,
            snapshots,
            transactions,
            distribution_value=_distribution_value(distribution, category),
        )
        for category in categories
    ]


def performance_months(snapshots: list[dict], categories=PERFORMANCE_CATEGORIES, now: date | None = None) -> set[tuple[int, int]]:
    """(year, month) pairs whose transactions the performance cards depend on."""
    months = set()
    for category in categories:
        observed = sorted({(s["date"].year, s["date"].month) for s in snapshots_for(snapshots, category)})
        months.update(observed[-2:])
    if not months:
        today = now or today_local(settings.local_tz)
        months.add((today.year, today.month))
    return months
