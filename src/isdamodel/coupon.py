"""
Time-indexed premium leg coupons.

A CDSCoupon is a coupon period expressed in year fractions from the trade
date, which is all the pricers need. Dates enter only through
CDSCoupon.from_dates.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from .dates import DateLike, add_days, year_fraction
from .enums import DayCountConvention
from .schedule import CDSCouponDes


@dataclass(frozen=True)
class CDSCoupon:
    """
    One premium leg coupon in curve time.

    Attributes
        effective_start: Time protection for this period begins
        effective_end: Time protection for this period ends
        payment_time: Time the coupon is paid
        year_fraction: Accrual year fraction (accrual day count)
        yf_ratio: year_fraction over the curve-time length of the period,
            converting accrued curve time into accrual year fraction
    """

    effective_start: float
    effective_end: float
    payment_time: float
    year_fraction: float
    yf_ratio: float | None = None

    def __post_init__(self):
        if self.effective_end <= self.effective_start:
            raise ValueError(
                f'Coupon effective end {self.effective_end} must be after '
                f'effective start {self.effective_start}'
            )
        if self.year_fraction < 0:
            raise ValueError(f'Year fraction must be non-negative, got {self.year_fraction}')
        if self.yf_ratio is None:
            ratio = self.year_fraction / (self.effective_end - self.effective_start)
            object.__setattr__(self, 'yf_ratio', ratio)

    @classmethod
    def from_dates(
        cls,
        trade_date: DateLike,
        accrual_start: DateLike,
        accrual_end: DateLike,
        payment_date: DateLike,
        protect_start: bool = True,
        accrual_day_count: DayCountConvention = DayCountConvention.ACT_360,
        curve_day_count: DayCountConvention = DayCountConvention.ACT_365F,
    ) -> 'CDSCoupon':
        """
        Convert a dated coupon to curve time.

        With protect_start the protection is observed at the start of the
        day, so both effective times sit one day before the accrual dates.

        Args:
            trade_date: Date at which t = 0
            accrual_start: Start of accrual
            accrual_end: End of accrual
            payment_date: Payment date
            protect_start: Protection starts at the beginning of the day
            accrual_day_count: Day count of the accrual year fraction
            curve_day_count: Day count converting dates to curve time

        Returns
            CDSCoupon
        """
        des = CDSCouponDes.from_dates(accrual_start, accrual_end, payment_date, accrual_day_count)
        return cls.from_description(trade_date, des, protect_start, curve_day_count)

    @classmethod
    def from_description(
        cls,
        trade_date: DateLike,
        coupon: CDSCouponDes,
        protect_start: bool = True,
        curve_day_count: DayCountConvention = DayCountConvention.ACT_365F,
    ) -> 'CDSCoupon':
        """Convert a CDSCouponDes, keeping its accrual year fraction."""
        shift = -1 if protect_start else 0
        curve_yf = year_fraction(coupon.accrual_start, coupon.accrual_end, curve_day_count)
        return cls(
            effective_start=year_fraction(
                trade_date, add_days(coupon.accrual_start, shift), curve_day_count
            ),
            effective_end=year_fraction(
                trade_date, add_days(coupon.accrual_end, shift), curve_day_count
            ),
            payment_time=year_fraction(trade_date, coupon.payment_date, curve_day_count),
            year_fraction=coupon.year_fraction,
            yf_ratio=coupon.year_fraction / curve_yf,
        )

    def with_offset(self, offset: float) -> 'CDSCoupon':
        """Same coupon seen from a base time moved forward by offset."""
        return CDSCoupon(
            self.effective_start - offset,
            self.effective_end - offset,
            self.payment_time - offset,
            self.year_fraction,
            self.yf_ratio,
        )


def make_coupons(
    trade_date: DateLike,
    periods: Iterable[CDSCouponDes],
    protect_start: bool = True,
    curve_day_count: DayCountConvention = DayCountConvention.ACT_365F,
) -> list[CDSCoupon]:
    """Convert a sequence of dated coupons to curve time."""
    return [
        CDSCoupon.from_description(trade_date, p, protect_start, curve_day_count)
        for p in periods
    ]
