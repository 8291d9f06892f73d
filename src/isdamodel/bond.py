"""
Defaultable bond analytics.

A BondAnalytic holds the remaining cash flows of a fixed coupon bond in
curve time. Priced off a yield curve and a credit curve, each cash flow is
weighted by its survival probability, and on default the holder receives
the recovery rate times par. This gives the bond-equivalent view of a
credit curve calibrated from CDS.
"""

import logging
import math
from collections.abc import Sequence

import numpy as np

from .contingent_leg import protection_leg_interval
from .curves import CreditCurve, RTCurve
from .dates import DateLike, to_date, year_fraction
from .enums import DayCountConvention, PriceType
from .integration import get_integration_points
from .root_finding import bracket_root, brent
from .schedule import PremiumLegSchedule

logger = logging.getLogger(__name__)


class BondAnalytic:
    """
    Remaining cash flows of a bond.

    Attributes
        payment_times: Payment times (ascending, first >= 0)
        payment_amounts: Payment amounts per unit par; the last includes par
        recovery_rate: Fraction of par recovered on default
        accrued_interest: Accrued coupon per unit par
    """

    def __init__(
        self,
        payment_times: Sequence[float],
        payment_amounts: Sequence[float],
        recovery_rate: float,
        accrued_interest: float = 0.0,
    ):
        times = np.array(payment_times, dtype=float)
        amounts = np.array(payment_amounts, dtype=float)
        if len(times) == 0:
            raise ValueError('Bond requires at least one payment')
        if len(amounts) != len(times):
            raise ValueError(
                f'Payment times and amounts must have same length: {len(times)} != {len(amounts)}'
            )
        if times[0] < 0:
            raise ValueError(f'First payment time must be non-negative, got {times[0]}')
        if np.any(np.diff(times) <= 0):
            raise ValueError('Payment times must be strictly ascending')
        if not 0.0 <= recovery_rate <= 1.0:
            raise ValueError(f'Recovery rate must be in [0, 1], got {recovery_rate}')
        if accrued_interest < 0:
            raise ValueError(f'Accrued interest must be non-negative, got {accrued_interest}')
        times.flags.writeable = False
        amounts.flags.writeable = False
        self._times = times
        self._amounts = amounts
        self._recovery_rate = recovery_rate
        self._accrued = accrued_interest

    @classmethod
    def from_schedule(
        cls,
        today: DateLike,
        coupon: float,
        schedule: PremiumLegSchedule,
        recovery_rate: float,
        curve_day_count: DayCountConvention = DayCountConvention.ACT_365F,
    ) -> 'BondAnalytic':
        """
        Build the bond from a coupon schedule.

        Payments on or before today are dropped. Accrued interest runs from
        the start of the first remaining period to today.

        Args:
            today: Valuation date, t = 0
            coupon: Annual coupon as a fraction (0.05 for 5%)
            schedule: Coupon schedule
            recovery_rate: Recovery rate
            curve_day_count: Day count converting dates to curve time

        Returns
            BondAnalytic
        """
        if coupon > 1.0:
            logger.warning(
                'Bond coupon %s is greater than 1: coupons are fractions, not percentages',
                coupon,
            )
        today = to_date(today)
        periods = [p for p in schedule if p.payment_date > today]
        if not periods:
            raise ValueError(f'Bond has no payments after {today}')
        times = [year_fraction(today, p.payment_date, curve_day_count) for p in periods]
        amounts = [coupon * p.year_fraction for p in periods]
        amounts[-1] += 1.0
        first = periods[0]
        accrued = 0.0
        if first.accrual_start < today:
            accrued = coupon * year_fraction(first.accrual_start, today, schedule.day_count)
        return cls(times, amounts, recovery_rate, accrued)

    @property
    def payment_times(self) -> np.ndarray:
        return self._times

    @property
    def payment_amounts(self) -> np.ndarray:
        return self._amounts

    @property
    def recovery_rate(self) -> float:
        return self._recovery_rate

    @property
    def accrued_interest(self) -> float:
        return self._accrued

    @property
    def num_payments(self) -> int:
        return len(self._times)

    def payment_time(self, index: int) -> float:
        return float(self._times[index])

    def payment_amount(self, index: int) -> float:
        return float(self._amounts[index])


def bond_price(
    bond: BondAnalytic,
    yield_curve: RTCurve,
    credit_curve: RTCurve,
    price_type: PriceType = PriceType.DIRTY,
) -> float:
    """
    Price of a defaultable bond per unit par.

    Args:
        bond: Bond cash flows
        yield_curve: Discount curve
        credit_curve: Credit curve of the issuer
        price_type: DIRTY (full) or CLEAN (net of accrued interest)

    Returns
        Survival-weighted cash flows plus the value of recovery on default
    """
    price = sum(
        a * yield_curve.discount_factor(t) * credit_curve.discount_factor(t)
        for t, a in zip(bond.payment_times, bond.payment_amounts)
    )
    t_end = bond.payment_times[-1]
    if bond.recovery_rate > 0 and t_end > 0:
        points = get_integration_points(0.0, t_end, yield_curve, credit_curve)
        price += bond.recovery_rate * protection_leg_interval(points, yield_curve, credit_curve)
    if price_type is PriceType.CLEAN:
        price -= bond.accrued_interest
    return float(price)


def bond_implied_hazard_rate(
    bond: BondAnalytic,
    yield_curve: RTCurve,
    price: float,
    price_type: PriceType = PriceType.DIRTY,
) -> float:
    """
    Flat hazard rate at which the bond reprices to a market price.

    Args:
        bond: Bond cash flows
        yield_curve: Discount curve
        price: Market price per unit par
        price_type: Whether price is DIRTY or CLEAN

    Returns
        Hazard rate of a flat credit curve

    Raises
        ConvergenceError: If no non-negative hazard rate reprices the bond
    """
    t_end = bond.payment_times[-1]
    if t_end <= 0:
        raise ValueError('Bond has no payments after today')

    def f(h: float) -> float:
        return bond_price(bond, yield_curve, CreditCurve([t_end], [h]), price_type) - price

    lower, upper = bracket_root(f, 0.0, 0.05, 0.0, math.inf)
    return brent(f, lower, upper)
