# =============================================================================
# core/services/calendar.py - Business Day Helpers
# =============================================================================
# Order numbers and the earliest delivery date follow the business day in
# ORDER_TIMEZONE, not the server's local time or UTC.
# =============================================================================

from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from app.config import settings


def business_timezone() -> ZoneInfo:
    return ZoneInfo(settings.ORDER_TIMEZONE)


def business_now() -> datetime:
    """Current time as an aware datetime in the business timezone."""
    return datetime.now(business_timezone())


def business_today() -> date:
    return business_now().date()


def day_bounds(moment: datetime) -> tuple[datetime, datetime]:
    """
    Start (inclusive) and end (exclusive) of the business day containing moment.

    Example:
        day_bounds(datetime(2025, 3, 1, 15, 0, tzinfo=ZoneInfo("Asia/Tokyo")))
        # (2025-03-01 00:00+09:00, 2025-03-02 00:00+09:00)
    """
    start = datetime.combine(moment.date(), time.min, tzinfo=moment.tzinfo)
    return start, start + timedelta(days=1)
