from __future__ import annotations

import math
from datetime import date

from .constants import CHART_VIEWS, OVERALL_VIEW, PERFORMANCE_CATEGORIES, category_label
from .distribution import distribute, distribution_value, exclude_hidden, hidden_value_sum
from .performance import build_performance
from .records import snapshots_for
from .series import build_quarterly, build_trailing_months


class UnknownViewError(ValueError):
    pass


def resolve_view(view: str | None) -> str:
    key = (view or OVERALL_VIEW).strip()
    if key.lower() == OVERALL_VIEW:
        return OVERALL_VIEW
    key = key.upper()
    if key not in CHART_VIEWS:
        raise UnknownViewError(f"unknown view {view!r}")
    return key


def select_records(view: str, snapshots: list[dict]) -> list[dict]:
    return snapshots_for(snapshots, CHART_VIEWS[resolve_view(view)]["category"])


def _live_current(live_total: dict | None) -> float | None:
    if not live_total:
        return None
    return live_total.get("current_total")


def fallback_value(view: str, records: list[dict], live_total: dict | None, distribution: list[dict]) -> float | None:
    category = CHART_VIEWS[resolve_view(view)]["category"]
    if category:
        value = distribution_value(distribution, category)
    else:
        value = _live_current(live_total)
    if value is None and records:
        value = records[-1]["total_value"]
    return value


def build_series(
    view: str,
    snapshots: list[dict],
    live_total: dict | None = None,
    distribution: list[dict] | None = None,
    window_size: int | None = None,
    now: date | None = None,
) -> list[dict]:
    view = resolve_view(view)
    records = select_records(view, snapshots)
    live_value = fallback_value(view, records, live_total, distribution or [])
    if view == OVERALL_VIEW:
        return build_quarterly(records, live_value, now=now)
    return build_trailing_months(records, live_value, window_size=window_size, now=now)


def build_summary(snapshots: list[dict], live_total: dict | None, distribution: list[dict], hidden=()) -> dict:
    """Headline figures: total, growth since the first overall snapshot, top category."""
    overall = snapshots_for(snapshots, None)
    hidden = sorted(set(hidden or ()))
    if overall:
        total_value = overall[-1]["total_value"]
    else:
        total_value = _live_current(live_total) or 0.0
    growth = 0.0
    if len(overall) >= 2:
        first = overall[0]["total_value"]
        if first:
            growth = (overall[-1]["total_value"] - first) / first * 100
        if not math.isfinite(growth):
            growth = 0.0
    variable_income_percent = (live_total or {}).get("variable_income_percent")
    return {
        "total_value": total_value,
        "display_total_value": max(total_value - hidden_value_sum(distribution, hidden), 0.0),
        "growth_percent": round(growth, 4),
        "since": overall[0]["date"].isoformat() if overall else None,
        "variable_income_percent": variable_income_percent,
        "top_category": distribution[0] if distribution else None,
        "hidden_categories": [category_label(c) for c in hidden],
    }


def build_dashboard(
    view: str,
    snapshots: list[dict],
    transactions: list[dict],
    asset_values: list[dict],
    live_total: dict | None = None,
    hidden=(),
    window_size: int | None = None,
    now: date | None = None,
) -> dict:
    view = resolve_view(view)
    distribution = distribute(asset_values, _live_current(live_total))
    summary = build_summary(snapshots, live_total, distribution, hidden)
    return {
        "view": view,
        "view_label": CHART_VIEWS[view]["label"],
        "series": build_series(view, snapshots, live_total, distribution, window_size=window_size, now=now),
        "includes_hidden_note": view == OVERALL_VIEW and bool(summary["hidden_categories"]),
        "summary": summary,
        "distribution": distribution,
        "visible_distribution": exclude_hidden(distribution, hidden),
        "performance": build_performance(snapshots, transactions, distribution, PERFORMANCE_CATEGORIES),
    }
