"""
Market quote conventions for CDS.

A CDS trades with a fixed coupon. The market quotes it as a par spread, as
a quoted (flat) spread, or as points upfront. Calibration reduces every
convention to a premium and an upfront payment.
"""

from dataclasses import dataclass


class CDSQuoteConvention:
    """Base class of the quote conventions; every quote carries a coupon."""

    coupon: float


@dataclass(frozen=True)
class ParSpread(CDSQuoteConvention):
    """Par spread quote: the coupon is the spread at which the CDS prices to par."""

    coupon: float

    @property
    def par_spread(self) -> float:
        return self.coupon


@dataclass(frozen=True)
class QuotedSpread(CDSQuoteConvention):
    """
    Quoted spread: the flat-curve par spread equivalent to the upfront.

    Attributes
        coupon: Contractual coupon
        quoted_spread: Quoted spread
    """

    coupon: float
    quoted_spread: float


@dataclass(frozen=True)
class PointsUpFront(CDSQuoteConvention):
    """
    Points upfront quote.

    Attributes
        coupon: Contractual coupon
        points_up_front: Upfront payment per unit notional, paid by the
            protection buyer
    """

    coupon: float
    points_up_front: float


def premium_and_upfront(quote: CDSQuoteConvention) -> tuple[float, float]:
    """
    Premium and upfront payment to calibrate a quote to.

    Args:
        quote: ParSpread, QuotedSpread or PointsUpFront

    Returns
        (premium, points upfront)
    """
    if isinstance(quote, ParSpread):
        return quote.coupon, 0.0
    if isinstance(quote, QuotedSpread):
        return quote.quoted_spread, 0.0
    if isinstance(quote, PointsUpFront):
        return quote.coupon, quote.points_up_front
    raise ValueError(f'Unknown CDSQuoteConvention type: {type(quote).__name__}')
