from __future__ import annotations

import urllib.parse
from datetime import date

import httpx
import structlog

from ..config import settings
from ..utils import retry_call, today_local

log = structlog.get_logger()


class StoreError(RuntimeError):
    pass


class StoreUnavailable(StoreError):
    """Transport failure or 5xx; worth retrying."""


class StoreAdapter:
    """Read-only client for the remote record-keeping service."""

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        attempts: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.store_base_url).rstrip("/")
        self.token = token if token is not None else settings.store_token
        self.attempts = attempts if attempts is not None else settings.http_retry_attempts
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.http_retry_backoff_seconds
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        self._client = httpx.Client(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout if timeout is not None else settings.http_timeout_seconds,
            transport=transport,
        )

    def close(self):
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _user_path(self, subject: str, suffix: str) -> str:
        if not subject or not str(subject).strip():
            raise ValueError("subject is required")
        return f"/users/{urllib.parse.quote(str(subject).strip(), safe='')}{suffix}"

    def _get(self, path: str, params: dict | None = None):
        def _call():
            try:
                r = self._client.get(path, params=params)
            except httpx.TransportError as e:
                raise StoreUnavailable(f"{path}: {e}") from e
            if r.status_code >= 500:
                raise StoreUnavailable(f"{path}: HTTP {r.status_code}")
            if r.status_code >= 400:
                raise StoreError(f"{path}: HTTP {r.status_code}")
            try:
                return r.json()
            except ValueError as e:
                raise StoreError(f"{path}: invalid json") from e

        try:
            return retry_call(
                _call,
                attempts=self.attempts,
                base_delay=self.backoff_seconds,
                retry_on=(StoreUnavailable,),
            )
        except StoreError as e:
            log.warning("store_request_failed", path=path, err=str(e))
            raise

    def list_snapshots(self, subject: str, till: date | None = None) -> list:
        since = settings.history_since.replace("-", "/")
        till = till or today_local(settings.local_tz)
        data = self._get(
            self._user_path(subject, "/assets-control"),
            {"since": f"{since} 00:00:00", "till": f"{till:%Y/%m/%d} 23:59:59"},
        )
        return data if isinstance(data, list) else []

    def list_current_asset_values(self, subject: str) -> list:
        data = self._get(self._user_path(subject, "/assets"))
        return data if isinstance(data, list) else []

    def list_transactions(self, subject: str, month: int, year: int) -> list:
        """Transactions dated in `month` (1-12) of `year`."""
        if not 1 <= int(month) <= 12:
            raise ValueError(f"month out of range: {month}")
        data = self._get(self._user_path(subject, "/transactions"), {"month": int(month), "year": int(year)})
        return data if isinstance(data, list) else []

    def get_live_total(self, subject: str) -> dict | None:
        data = self._get(self._user_path(subject, "/assets/current-total"))
        return data if isinstance(data, dict) else None
