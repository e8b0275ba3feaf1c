"""Normalization of raw Snapshot Store payloads.

Store rows arrive as loosely typed JSON. Every parser here returns plain dicts
with coerced fields and silently drops rows it cannot use, so a single bad
record never takes down an aggregation pass.
"""
from __future__ import annotations

import math
from datetime import date, datetime

import pandas as pd
import structlog

from .constants import TX_KINDS

log = structlog.get_logger()


def _coerce_float(val):
    if val is None or isinstance(val, bool):
        return None
    try:
        out = float(val)
    except (TypeError, ValueError):
        return None
    return out if math.isfinite(out) else None


def _parse_date(val) -> date | None:
    if isinstance(val, datetime):
        return val.date()
    if isinstance(val, date):
        return val
    if not isinstance(val, str):
        return None
    text = val.strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass
    parsed = pd.to_datetime(text, errors="coerce")
    if parsed is None or pd.isna(parsed):
        return None
    return parsed.date()


def _category(val) -> str | None:
    if val is None:
        return None
    text = str(val).strip()
    return text.upper() if text else None


def _first(row: dict, *keys):
    for key in keys:
        if key in row and row[key] is not None:
            return row[key]
    return None


def parse_snapshots(rows) -> list[dict]:
    """ValueSnapshot dicts sorted by date; accepts store or normalized field names."""
    out = []
    skipped = 0
    for row in rows or []:
        if not isinstance(row, dict):
            skipped += 1
            continue
        on = _parse_date(_first(row, "date", "controlDate"))
        value = _coerce_float(_first(row, "total_value", "currentTotalValue"))
        if on is None or value is None or value < 0:
            skipped += 1
            continue
        out.append(
            {
                "id": row.get("id"),
                "date": on,
                "total_value": value,
                "category": _category(row.get("category")),
            }
        )
    if skipped:
        log.debug("snapshots_skipped", skipped=skipped, kept=len(out))
    out.sort(key=lambda s: s["date"])
    return out


def parse_transactions(rows) -> list[dict]:
    out = []
    skipped = 0
    for row in rows or []:
        if not isinstance(row, dict):
            skipped += 1
            continue
        on = _parse_date(_first(row, "date", "transactionDate"))
        amount = _coerce_float(row.get("amount"))
        kind = str(_first(row, "kind", "type") or "").strip().upper()
        category = _category(row.get("category"))
        if on is None or amount is None or amount <= 0 or kind not in TX_KINDS or category is None:
            skipped += 1
            continue
        out.append(
            {
                "id": row.get("id"),
                "asset_id": _first(row, "asset_id", "assetId"),
                "category": category,
                "amount": amount,
                "date": on,
                "kind": kind,
            }
        )
    if skipped:
        log.debug("transactions_skipped", skipped=skipped, kept=len(out))
    return out


def parse_asset_values(rows) -> list[dict]:
    out = []
    for row in rows or []:
        if not isinstance(row, dict):
            continue
        category = _category(row.get("category"))
        if category is None:
            continue
        value = _coerce_float(_first(row, "current_value", "currentValue"))
        out.append(
            {
                "asset_id": _first(row, "asset_id", "id"),
                "category": category,
                "current_value": value if value is not None else 0.0,
            }
        )
    return out


def parse_live_total(payload) -> dict | None:
    if not isinstance(payload, dict):
        return None
    current = _coerce_float(payload.get("current_total"))
    if current is None:
        return None
    return {
        "current_total": current,
        "variable_income_total": _coerce_float(payload.get("variable_income_total")),
        "variable_income_percent": _coerce_float(payload.get("variable_income_percent")),
    }


def snapshots_for(snapshots: list[dict], category: str | None) -> list[dict]:
    return [s for s in snapshots if s.get("category") == category]


def period_peaks(snapshots: list[dict], freq: str) -> pd.Series:
    """Peak value per calendar period, indexed by period start.

    `freq` is a pandas period alias ("M" or "Q"). Ties on the peak value go to
    the latest-dated snapshot.
    """
    if not snapshots:
        return pd.Series(dtype=float, index=pd.DatetimeIndex([], name="period"))
    frame = pd.DataFrame(
        {
            "date": pd.to_datetime([s["date"] for s in snapshots]),
            "value": [float(s["total_value"]) for s in snapshots],
        }
    )
    frame["period"] = frame["date"].dt.to_period(freq).dt.start_time
    frame = frame.sort_values(["value", "date"], kind="mergesort")
    peaks = frame.groupby("period").tail(1).set_index("period")["value"]
    return peaks.sort_index()
