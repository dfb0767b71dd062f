"""
Time helpers.

Audit timestamps (created_at / updated_at) are always timezone-aware UTC.
Economic dates (Transaction.date, Budget.start_date) are plain dates and
never carry a timezone.
"""

from datetime import date, datetime, timezone
from typing import Optional

from dateutil.relativedelta import relativedelta


def utc_now() -> datetime:
    """Current wall-clock time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def start_of_month(today: Optional[date] = None) -> date:
    today = today or date.today()
    return today.replace(day=1)


def end_of_month(today: Optional[date] = None) -> date:
    """Last calendar day of the month containing ``today``."""
    return start_of_month(today) + relativedelta(months=1, days=-1)
