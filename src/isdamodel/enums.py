"""
Enumeration types for the ISDA standard model.

These enums carry the conventions that configure schedules and pricers.
Every enum parses its common spellings through ``from_string``.
"""

from enum import Enum, auto


def _normalize(s: str) -> str:
    return s.upper().replace(' ', '').replace('_', '').replace('-', '')


def _lookup(mapping: dict, s: str, what: str):
    key = _normalize(s)
    for k, v in mapping.items():
        if key == _normalize(k):
            return v
    raise ValueError(f'Unknown {what}: {s}')


class DayCountConvention(Enum):
    """Day count conventions for calculating year fractions."""

    ACT_360 = 'ACT/360'
    ACT_365F = 'ACT/365F'
    ACT_365 = 'ACT/365F'    # Alias for ACT/365F
    THIRTY_360 = '30/360'

    @classmethod
    def from_string(cls, s: str) -> 'DayCountConvention':
        """Parse a day count convention from string."""
        mapping = {
            'ACT/360': cls.ACT_360,
            'ACT360': cls.ACT_360,
            'A360': cls.ACT_360,
            'ACT/365F': cls.ACT_365F,
            'ACT/365': cls.ACT_365F,
            'ACT365F': cls.ACT_365F,
            'A365F': cls.ACT_365F,
            'A365': cls.ACT_365F,
            '30/360': cls.THIRTY_360,
            '30360': cls.THIRTY_360,
        }
        return _lookup(mapping, s, 'day count convention')


class BadDayConvention(Enum):
    """Business day adjustment conventions."""

    NONE = auto()
    FOLLOWING = auto()
    MODIFIED_FOLLOWING = auto()
    PRECEDING = auto()
    MODIFIED_PRECEDING = auto()

    @classmethod
    def from_string(cls, s: str) -> 'BadDayConvention':
        """Parse a bad day convention from string."""
        mapping = {
            'NONE': cls.NONE,
            'N': cls.NONE,
            'FOLLOWING': cls.FOLLOWING,
            'F': cls.FOLLOWING,
            'MODIFIED_FOLLOWING': cls.MODIFIED_FOLLOWING,
            'MODFOLLOWING': cls.MODIFIED_FOLLOWING,
            'MF': cls.MODIFIED_FOLLOWING,
            'PRECEDING': cls.PRECEDING,
            'P': cls.PRECEDING,
            'MODIFIED_PRECEDING': cls.MODIFIED_PRECEDING,
            'MODPRECEDING': cls.MODIFIED_PRECEDING,
            'MP': cls.MODIFIED_PRECEDING,
        }
        return _lookup(mapping, s, 'bad day convention')


class StubMethod(Enum):
    """Stub period conventions for premium leg schedules."""

    FRONT_SHORT = auto()
    FRONT_LONG = auto()
    BACK_SHORT = auto()
    BACK_LONG = auto()

    @property
    def is_front(self) -> bool:
        """True when the stub sits at the start of the schedule."""
        return self in {StubMethod.FRONT_SHORT, StubMethod.FRONT_LONG}

    @property
    def is_long(self) -> bool:
        """True when the stub is merged into its neighbouring period."""
        return self in {StubMethod.FRONT_LONG, StubMethod.BACK_LONG}

    @classmethod
    def from_string(cls, s: str) -> 'StubMethod':
        """Parse a stub method from string."""
        mapping = {
            'FRONT_SHORT': cls.FRONT_SHORT,
            'SHORT_FRONT': cls.FRONT_SHORT,
            'FRONT_LONG': cls.FRONT_LONG,
            'LONG_FRONT': cls.FRONT_LONG,
            'BACK_SHORT': cls.BACK_SHORT,
            'SHORT_BACK': cls.BACK_SHORT,
            'BACK_LONG': cls.BACK_LONG,
            'LONG_BACK': cls.BACK_LONG,
        }
        return _lookup(mapping, s, 'stub method')


class PaymentFrequency(Enum):
    """Payment frequency for the premium leg."""

    QUARTERLY = 3    # Standard CDS payment frequency
    SEMI_ANNUAL = 6
    ANNUAL = 12
    MONTHLY = 1

    @property
    def months(self) -> int:
        """Return the number of months between payments."""
        return self.value

    @classmethod
    def from_string(cls, s: str) -> 'PaymentFrequency':
        """Parse payment frequency from string."""
        mapping = {
            'Q': cls.QUARTERLY,
            'QUARTERLY': cls.QUARTERLY,
            '3M': cls.QUARTERLY,
            'S': cls.SEMI_ANNUAL,
            'SEMIANNUAL': cls.SEMI_ANNUAL,
            '6M': cls.SEMI_ANNUAL,
            'A': cls.ANNUAL,
            'ANNUAL': cls.ANNUAL,
            '1Y': cls.ANNUAL,
            '12M': cls.ANNUAL,
            'M': cls.MONTHLY,
            'MONTHLY': cls.MONTHLY,
            '1M': cls.MONTHLY,
        }
        return _lookup(mapping, s, 'payment frequency')


class AccrualOnDefaultFormula(Enum):
    """Accrual-on-default integration formulae.

    ORIGINAL_ISDA reproduces the ISDA C library, which counts accrued time
    with a half-day offset (omega = 1/730). MARKIT_FIX drops the offset and
    integrates accrued time from the start of each integration sub-interval.
    """

    ORIGINAL_ISDA = auto()
    MARKIT_FIX = auto()

    @property
    def omega(self) -> float:
        """Half-day offset added to accrued time."""
        return 1.0 / 730.0 if self is AccrualOnDefaultFormula.ORIGINAL_ISDA else 0.0

    @classmethod
    def from_string(cls, s: str) -> 'AccrualOnDefaultFormula':
        """Parse an accrual-on-default formula from string."""
        mapping = {
            'ORIGINAL_ISDA': cls.ORIGINAL_ISDA,
            'ISDA': cls.ORIGINAL_ISDA,
            'ORIGINAL': cls.ORIGINAL_ISDA,
            'MARKIT_FIX': cls.MARKIT_FIX,
            'MARKIT': cls.MARKIT_FIX,
        }
        return _lookup(mapping, s, 'accrual on default formula')


class PriceType(Enum):
    """Clean (net of accrued premium) or dirty (full) price."""

    CLEAN = auto()
    DIRTY = auto()

    @classmethod
    def from_string(cls, s: str) -> 'PriceType':
        """Parse a price type from string."""
        mapping = {
            'CLEAN': cls.CLEAN,
            'DIRTY': cls.DIRTY,
            'FULL': cls.DIRTY,
        }
        return _lookup(mapping, s, 'price type')
