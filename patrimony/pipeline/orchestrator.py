import time
import uuid
from datetime import date

import structlog

from ..config import settings
from ..providers.store_adapter import StoreAdapter, StoreError
from ..utils import today_local
from .constants import PERFORMANCE_CATEGORIES
from .distribution import distribute, exclude_hidden
from .performance import build_performance, performance_months
from .records import parse_asset_values, parse_live_total, parse_snapshots, parse_transactions
from .views import build_dashboard, build_series, resolve_view

log = structlog.get_logger()


def _fetch(step: str, fn, default, **fields):
    started = time.monotonic()
    try:
        out = fn()
    except StoreError as e:
        log.warning("store_fetch_failed", step=step, err=str(e), **fields)
        return default
    log.debug("store_fetch_done", step=step, elapsed_sec=round(time.monotonic() - started, 2), **fields)
    return out


def load_inputs(store: StoreAdapter, subject: str, now: date | None = None, with_transactions: bool = True) -> dict:
    """Pull everything one refresh pass needs; unavailable inputs come back empty."""
    now = now or today_local(settings.local_tz)
    snapshots = parse_snapshots(_fetch("snapshots", lambda: store.list_snapshots(subject, till=now), [], subject=subject))
    assets = parse_asset_values(_fetch("assets", lambda: store.list_current_asset_values(subject), [], subject=subject))
    live_total = parse_live_total(_fetch("live_total", lambda: store.get_live_total(subject), None, subject=subject))

    transactions = []
    if with_transactions:
        for year, month in sorted(performance_months(snapshots, PERFORMANCE_CATEGORIES, now=now)):
            rows = _fetch(
                "transactions",
                lambda: store.list_transactions(subject, month, year),
                [],
                subject=subject,
                year=year,
                month=month,
            )
            transactions.extend(parse_transactions(rows))

    return {
        "snapshots": snapshots,
        "asset_values": assets,
        "live_total": live_total,
        "transactions": transactions,
    }


def _bind(subject: str, **fields):
    structlog.contextvars.bind_contextvars(refresh_id=str(uuid.uuid4()), subject=subject, **fields)


def series_for(store: StoreAdapter, subject: str, view: str, now: date | None = None) -> list[dict]:
    view = resolve_view(view)
    _bind(subject, view=view)
    try:
        inputs = load_inputs(store, subject, now=now, with_transactions=False)
        live = inputs["live_total"]
        distribution = distribute(inputs["asset_values"], live["current_total"] if live else None)
        points = build_series(
            view,
            inputs["snapshots"],
            live,
            distribution,
            now=now,
        )
        log.info("series_built", points=len(points))
        return points
    finally:
        structlog.contextvars.clear_contextvars()


def distribution_for(store: StoreAdapter, subject: str, hidden=()) -> list[dict]:
    _bind(subject)
    try:
        assets = parse_asset_values(_fetch("assets", lambda: store.list_current_asset_values(subject), [], subject=subject))
        live = parse_live_total(_fetch("live_total", lambda: store.get_live_total(subject), None, subject=subject))
        distribution = distribute(assets, live["current_total"] if live else None)
        return exclude_hidden(distribution, hidden) if hidden else distribution
    finally:
        structlog.contextvars.clear_contextvars()


def performance_for(store: StoreAdapter, subject: str, now: date | None = None) -> list[dict]:
    _bind(subject)
    try:
        inputs = load_inputs(store, subject, now=now)
        live = inputs["live_total"]
        distribution = distribute(inputs["asset_values"], live["current_total"] if live else None)
        return build_performance(inputs["snapshots"], inputs["transactions"], distribution, PERFORMANCE_CATEGORIES)
    finally:
        structlog.contextvars.clear_contextvars()


def dashboard_for(store: StoreAdapter, subject: str, view: str = "overall", hidden=(), now: date | None = None) -> dict:
    view = resolve_view(view)
    _bind(subject, view=view)
    started = time.monotonic()
    try:
        inputs = load_inputs(store, subject, now=now)
        payload = build_dashboard(
            view,
            inputs["snapshots"],
            inputs["transactions"],
            inputs["asset_values"],
            inputs["live_total"],
            hidden=hidden,
            now=now,
        )
        payload["subject"] = subject
        log.info(
            "dashboard_built",
            snapshots=len(inputs["snapshots"]),
            transactions=len(inputs["transactions"]),
            points=len(payload["series"]),
            elapsed_sec=round(time.monotonic() - started, 2),
        )
        return payload
    finally:
        structlog.contextvars.clear_contextvars()
