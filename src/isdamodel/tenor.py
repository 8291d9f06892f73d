"""
Tenor parsing.

A tenor is a period such as "6M" or "5Y", used to roll CDS maturities
forward from an IMM date.
"""

import re
from dataclasses import dataclass

from opendate import Date

from .dates import DateLike, add_days, add_months, to_date

_TENOR_PATTERN = re.compile(r'^(\d+)([DWMY])$')


@dataclass(frozen=True)
class Tenor:
    """
    A period of time.

    Attributes
        value: Numeric value (e.g., 3 for "3M")
        unit: Time unit ('D', 'W', 'M', 'Y')
    """

    value: int
    unit: str

    def __post_init__(self):
        if self.unit not in {'D', 'W', 'M', 'Y'}:
            raise ValueError(f'Invalid tenor unit: {self.unit}')
        if self.value < 0:
            raise ValueError(f'Tenor value must be non-negative: {self.value}')

    def __str__(self) -> str:
        return f'{self.value}{self.unit}'

    @property
    def months(self) -> int:
        """Length in months (0 for day and week tenors)."""
        if self.unit == 'M':
            return self.value
        if self.unit == 'Y':
            return 12 * self.value
        return 0

    def add_to_date(self, d: DateLike) -> Date:
        """Add this tenor to a date, without business day adjustment."""
        if self.unit == 'D':
            return add_days(d, self.value)
        if self.unit == 'W':
            return add_days(d, 7 * self.value)
        return add_months(to_date(d), self.months)


def parse_tenor(s: str | Tenor) -> Tenor:
    """
    Parse a tenor string such as "1D", "2W", "6M" or "10Y".

    Args:
        s: Tenor string (a Tenor is returned unchanged)

    Returns
        Tenor object
    """
    if isinstance(s, Tenor):
        return s
    match = _TENOR_PATTERN.match(s.strip().upper())
    if match is None:
        raise ValueError(f'Cannot parse tenor: {s}')
    return Tenor(int(match.group(1)), match.group(2))
