"""
IMM (International Monetary Market) dates.

Standard CDS contracts accrue from and mature on IMM dates, the 20th of
March, June, September and December.
"""

from opendate import Date

from .dates import DateLike, to_date

IMM_MONTHS = (3, 6, 9, 12)

IMM_DAY = 20


def is_imm_date(d: DateLike) -> bool:
    """
    Check if a date is an IMM date.

    Args:
        d: Date to check

    Returns
        True if the date is the 20th of March, June, September or December
    """
    d = to_date(d)
    return d.day == IMM_DAY and d.month in IMM_MONTHS


def _imm_in_quarter_of(d: Date) -> Date:
    """IMM date in the quarter-end month on or after the month of d."""
    month = 3 * ((d.month - 1) // 3 + 1)
    return Date(d.year, month, IMM_DAY)


def next_imm_date(d: DateLike) -> Date:
    """
    Find the next IMM date strictly after a given date.

    Args:
        d: Reference date

    Returns
        Next IMM date
    """
    d = to_date(d)
    candidate = _imm_in_quarter_of(d)
    if candidate <= d:
        candidate = candidate.add(months=3)
    return to_date(candidate)


def previous_imm_date(d: DateLike) -> Date:
    """
    Find the previous IMM date strictly before a given date.

    Args:
        d: Reference date

    Returns
        Previous IMM date
    """
    d = to_date(d)
    candidate = _imm_in_quarter_of(d)
    while candidate >= d:
        candidate = candidate.subtract(months=3)
    return to_date(candidate)

