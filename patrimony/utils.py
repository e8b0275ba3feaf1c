import time as time_module
from datetime import datetime, date, timezone
from dateutil import tz

def today_local(local_tz: str) -> date:
    tzinfo = tz.gettz(local_tz)
    return datetime.now(timezone.utc).astimezone(tzinfo).date()

def month_start(on: date) -> date:
    return date(on.year, on.month, 1)

def retry_call(
    fn,
    *,
    attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 5.0,
    deadline: float | None = None,
    retry_on=(Exception,),
):
    last_exc = None
    for attempt in range(1, attempts + 1):
        if deadline is not None and time_module.monotonic() >= deadline:
            raise TimeoutError("time_budget_exceeded")
        try:
            return fn()
        except retry_on as exc:
            last_exc = exc
            if attempt >= attempts:
                raise
            _sleep_with_deadline(base_delay, attempt, max_delay, deadline)
    if last_exc:
        raise last_exc
    return None

def _sleep_with_deadline(base_delay: float, attempt: int, max_delay: float, deadline: float | None):
    delay = min(max_delay, base_delay * (2 ** (attempt - 1)))
    if deadline is not None:
        remaining = deadline - time_module.monotonic()
        if remaining <= 0:
            raise TimeoutError("time_budget_exceeded")
        delay = min(delay, max(0.0, remaining))
    if delay > 0:
        time_module.sleep(delay)
