"""Chart-ready time series built from value snapshots.

Two granularities are supported:

- quarterly: one point per calendar quarter holding the peak value recorded in
  that quarter, with the live value pinned to the current month;
- trailing months: a fixed window of consecutive months ending at the current
  month, where months without a snapshot carry the last known value forward.
"""
from __future__ import annotations

from datetime import date, datetime, timezone

import pandas as pd

from ..config import settings
from ..utils import month_start, today_local
from .formatters import format_currency, format_month_year
from .records import period_peaks


def _now_month(now: date | None) -> date:
    return month_start(now or today_local(settings.local_tz))


def make_point(on: date, value: float) -> dict:
    stamp = datetime(on.year, on.month, on.day, tzinfo=timezone.utc)
    value = float(value)
    return {
        "timestamp": int(stamp.timestamp() * 1000),
        "date": on.isoformat(),
        "value": value,
        "display_date": format_month_year(on),
        "display_value": format_currency(value),
    }


def build_quarterly(snapshots: list[dict], live_value: float | None = None, now: date | None = None) -> list[dict]:
    current = _now_month(now)
    # Snapshots past the current month would land after the live point.
    snapshots = [s for s in snapshots if month_start(s["date"]) <= current]
    peaks = period_peaks(snapshots, "Q")
    points = [make_point(start.date(), value) for start, value in peaks.items()]
    if live_value is None:
        return points
    live_point = make_point(current, live_value)
    if points and points[-1]["date"] == current.isoformat():
        points[-1] = live_point
    else:
        points.append(live_point)
    return points


def build_trailing_months(
    snapshots: list[dict],
    live_value: float | None = None,
    window_size: int | None = None,
    now: date | None = None,
) -> list[dict]:
    if window_size is None:
        window_size = settings.trailing_window_months
    if window_size < 1:
        return []
    current = pd.Timestamp(_now_month(now))
    peaks = period_peaks(snapshots, "M")
    if live_value is not None:
        existing = peaks.get(current)
        if existing is None or live_value > existing:
            peaks = peaks.copy()
            peaks.loc[current] = float(live_value)
            peaks = peaks.sort_index()
    if peaks.empty:
        return []

    window = pd.date_range(end=current, periods=window_size, freq="MS")
    # Months before the window seed the carried value; later months never leak back.
    filled = peaks.reindex(peaks.index.union(window)).ffill().reindex(window).dropna()
    return [make_point(month.date(), value) for month, value in filled.items()]
