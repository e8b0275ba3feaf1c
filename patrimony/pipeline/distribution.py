from __future__ import annotations

import math

from .constants import category_label


def _positive(val) -> bool:
    return isinstance(val, (int, float)) and math.isfinite(val) and val > 0


def _share(category: str, raw_value: float, total: float) -> dict:
    return {
        "category": category,
        "label": category_label(category),
        "raw_value": raw_value,
        "percent": round(raw_value / total * 100, 2),
    }


def category_totals(asset_values: list[dict]) -> dict[str, float]:
    totals: dict[str, float] = {}
    for asset in asset_values:
        category = asset.get("category")
        if not category:
            continue
        totals[category] = totals.get(category, 0.0) + float(asset.get("current_value") or 0.0)
    return totals


def distribute(asset_values: list[dict], total_override: float | None = None) -> list[dict]:
    """Share of each category in the portfolio, largest holding first.

    The live total wins over the summed asset values when it is positive. An
    unusable total yields an empty distribution rather than a degenerate split.
    """
    if not asset_values:
        return []
    totals = category_totals(asset_values)
    total = total_override if _positive(total_override) else sum(totals.values())
    if not _positive(total):
        return []
    rows = [_share(category, value, total) for category, value in totals.items() if value > 0]
    rows = [row for row in rows if row["percent"] > 0]
    rows.sort(key=lambda row: row["raw_value"], reverse=True)
    return rows


def exclude_hidden(distribution: list[dict], hidden) -> list[dict]:
    """Drop hidden categories and renormalize the rest to 100%."""
    hidden = set(hidden or ())
    visible = [row for row in distribution if row["category"] not in hidden]
    visible_total = sum(row["raw_value"] for row in visible)
    if not _positive(visible_total):
        return []
    return [_share(row["category"], row["raw_value"], visible_total) for row in visible]


def hidden_value_sum(distribution: list[dict], hidden) -> float:
    hidden = set(hidden or ())
    return sum(row["raw_value"] for row in distribution if row["category"] in hidden)


def distribution_value(distribution: list[dict], category: str):
    for row in distribution:
        if row["category"] == category:
            return row["raw_value"]
    return None
