from datetime import date, datetime

import pytz

UTC = pytz.UTC


def today_date(tz=UTC) -> date:
    """Current calendar date in ``tz`` (UTC unless told otherwise)."""
    return datetime.now(tz).date()


def today(tz=UTC) -> str:
    """
    Current date as YYYY-MM-DD, the default for records without a date.
    """
    return today_date(tz).isoformat()
