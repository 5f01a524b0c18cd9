# barberbook/utils/clock.py
"""Shop-local wall clock, read only at the service boundary"""
from datetime import datetime
from zoneinfo import ZoneInfo

from barberbook.config.settings import get_settings


def shop_now() -> datetime:
    """Naive datetime in the shop timezone, matching the stored date/time columns"""
    tz = ZoneInfo(get_settings().DEFAULT_TIMEZONE)
    return datetime.now(tz).replace(tzinfo=None)
