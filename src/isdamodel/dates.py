"""
Date utilities for the date layer of the model.

Uses opendate.Date as the primary date type. Everything below the coupon
and CDS factories works in year fractions from the trade date, so this is
the only module that knows about calendars.
"""

from datetime import date, datetime
from typing import Union

from opendate import CustomCalendar, Date, register_calendar
from opendate import set_default_calendar

from .enums import BadDayConvention, DayCountConvention

# Setup weekends-only calendar as default
WEEKENDS_ONLY = CustomCalendar(
    name='WEEKENDS_ONLY',
    holidays=set(),
    weekmask='Mon Tue Wed Thu Fri',
)
register_calendar('WEEKENDS_ONLY', WEEKENDS_ONLY)
set_default_calendar('WEEKENDS_ONLY')


# Accept various date-like inputs
DateLike = Union[Date, date, datetime, str]


def to_date(d: DateLike) -> Date:
    """Convert any date-like input to opendate.Date."""
    if isinstance(d, Date):
        return d.calendar(WEEKENDS_ONLY)
    if isinstance(d, datetime):
        return Date.instance(d.date()).calendar(WEEKENDS_ONLY)
    if isinstance(d, date):
        return Date.instance(d).calendar(WEEKENDS_ONLY)
    if isinstance(d, str):
        result = Date.parse(d)
        if result is None:
            raise ValueError(f'Cannot parse date: {d}')
        return result.calendar(WEEKENDS_ONLY)
    raise TypeError(f'Expected Date, date, datetime, or string, got {type(d)}')


parse_date = to_date


def days_between(start: DateLike, end: DateLike) -> int:
    """Signed number of calendar days from start to end."""
    return to_date(end).toordinal() - to_date(start).toordinal()


def _thirty_360_days(d1: Date, d2: Date) -> int:
    day1, day2 = d1.day, d2.day
    if day1 == 31:
        day1 = 30
    if day2 == 31 and day1 >= 30:
        day2 = 30
    return 360 * (d2.year - d1.year) + 30 * (d2.month - d1.month) + (day2 - day1)


def year_fraction(
    start: DateLike,
    end: DateLike,
    convention: DayCountConvention = DayCountConvention.ACT_360,
) -> float:
    """
    Calculate the year fraction between two dates.

    The result is signed: it is negative when end precedes start. Coupon
    effective times before the trade date rely on this.

    Args:
        start: Start date
        end: End date
        convention: Day count convention to use

    Returns
        Year fraction as a float
    """
    d1 = to_date(start)
    d2 = to_date(end)

    if convention == DayCountConvention.ACT_360:
        return days_between(d1, d2) / 360.0
    if convention == DayCountConvention.ACT_365F:
        return days_between(d1, d2) / 365.0
    if convention == DayCountConvention.THIRTY_360:
        if d2 < d1:
            return -_thirty_360_days(d2, d1) / 360.0
        return _thirty_360_days(d1, d2) / 360.0
    raise ValueError(f'Unknown day count convention: {convention}')


def add_days(d: DateLike, days: int) -> Date:
    """Add calendar days to a date."""
    od = to_date(d)
    return od.add(days=days) if days >= 0 else od.subtract(days=-days)


def add_months(d: DateLike, months: int) -> Date:
    """Add months to a date (end of month is clipped)."""
    od = to_date(d)
    return od.add(months=months) if months >= 0 else od.subtract(months=-months)


def add_years(d: DateLike, years: int) -> Date:
    """Add years to a date."""
    od = to_date(d)
    return od.add(years=years) if years >= 0 else od.subtract(years=-years)


def add_business_days(d: DateLike, days: int) -> Date:
    """Add business days to a date."""
    od = to_date(d)
    if days == 0:
        return od
    return od.b.add(days=days) if days > 0 else od.b.subtract(days=abs(days))


def is_business_day(d: DateLike) -> bool:
    """Check if a date is a business day."""
    return to_date(d).is_business_day()


def adjust_date(
    d: DateLike,
    convention: BadDayConvention = BadDayConvention.FOLLOWING,
) -> Date:
    """
    Move a date onto a business day.

    ``.b.add(days=0)`` snaps forward to the next business day and
    ``.b.subtract(days=0)`` snaps backward. The modified variants reverse
    direction when the snap would cross a month boundary.

    Args:
        d: Date to adjust
        convention: Bad day convention

    Returns
        Adjusted date (unchanged if already a business day)
    """
    od = to_date(d)
    if convention == BadDayConvention.NONE or od.is_business_day():
        return od
    if convention == BadDayConvention.FOLLOWING:
        return od.b.add(days=0)
    if convention == BadDayConvention.PRECEDING:
        return od.b.subtract(days=0)
    if convention == BadDayConvention.MODIFIED_FOLLOWING:
        adjusted = od.b.add(days=0)
        return od.b.subtract(days=0) if adjusted.month != od.month else adjusted
    if convention == BadDayConvention.MODIFIED_PRECEDING:
        adjusted = od.b.subtract(days=0)
        return od.b.add(days=0) if adjusted.month != od.month else adjusted
    raise ValueError(f'Unknown bad day convention: {convention}')
