# app/utils/clock.py
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Naive UTC timestamp. DateTime columns store UTC without an offset."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
