from datetime import datetime, timezone
from typing import Tuple


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def current_date_and_time() -> Tuple[str, str]:
    """Today's date (YYYY-MM-DD) and the wall-clock time (HH:MM), both UTC.

    Used as a FastAPI dependency by the clock-in/clock-out endpoints so the
    time source can be replaced in tests.
    """
    now = utc_now()
    return now.date().isoformat(), now.strftime("%H:%M")
