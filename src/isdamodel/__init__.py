"""
ISDA Standard Model - Pure Python Implementation

Analytic pricing of single-name CDS under the ISDA standard model, and
calibration of credit curves to CDS quotes.

Basic Usage:
    >>> from isdamodel import YieldCurve, SimpleCreditCurveBuilder
    >>> from isdamodel import AnalyticCDSPricer, make_imm_cds
    >>>
    >>> yield_curve = YieldCurve([0.5, 1, 2, 5, 10], [0.01, 0.012, 0.015, 0.02, 0.025])
    >>> cds = [make_imm_cds('2014-06-18', t) for t in ('1Y', '3Y', '5Y')]
    >>> credit_curve = SimpleCreditCurveBuilder().calibrate_credit_curve(
    ...     cds, [0.0060, 0.0085, 0.0110], yield_curve
    ... )
    >>>
    >>> pricer = AnalyticCDSPricer()
    >>> pricer.pv(cds[2], yield_curve, credit_curve, 0.01)
"""

__version__ = '1.0.0'

# Bonds
from .bond import BondAnalytic, bond_implied_hazard_rate, bond_price
# CDS descriptions
from .cds import CDSAnalytic, MultiCDSAnalytic, make_imm_cds, make_imm_multi_cds
from .coupon import CDSCoupon, make_coupons
# Calibration
from .credit_curve_builder import FastCreditCurveBuilder
from .credit_curve_builder import ISDACompliantCreditCurveBuilder
from .credit_curve_builder import SimpleCreditCurveBuilder
from .credit_curve_builder import points_upfront_from_quoted_spread
from .credit_curve_builder import quoted_spread_from_points_upfront
# Curves
from .curves import CreditCurve, CurveBuilder, ISDACompliantCurve, RTCurve
from .curves import YieldCurve
# Date utilities
from .dates import add_business_days, add_days, add_months, adjust_date
from .dates import is_business_day, parse_date, year_fraction
# Enumerations
from .enums import AccrualOnDefaultFormula, BadDayConvention, DayCountConvention
from .enums import PaymentFrequency, PriceType, StubMethod
from .epsilon import epsilon, epsilon_p, epsilon_pp
from .exceptions import BootstrapError, CDSError, ConvergenceError, CurveError
from .exceptions import ExpiredCDSError
# IMM dates
from .imm import is_imm_date, next_imm_date, previous_imm_date
from .integration import get_integration_points, truncate_set_exclusive
from .integration import truncate_set_inclusive
# Pricers
from .pricer import AnalyticCDSPricer, MultiAnalyticCDSPricer
# Quotes
from .quotes import CDSQuoteConvention, ParSpread, PointsUpFront, QuotedSpread
from .quotes import premium_and_upfront
# Schedule
from .schedule import CDSCouponDes, PremiumLegSchedule
from .tenor import Tenor, parse_tenor

__all__ = [
    # Version
    '__version__',
    # Pricers
    'AnalyticCDSPricer',
    'MultiAnalyticCDSPricer',
    # CDS descriptions
    'CDSAnalytic',
    'MultiCDSAnalytic',
    'CDSCoupon',
    'make_coupons',
    'make_imm_cds',
    'make_imm_multi_cds',
    # Curves
    'RTCurve',
    'ISDACompliantCurve',
    'YieldCurve',
    'CreditCurve',
    'CurveBuilder',
    # Calibration
    'ISDACompliantCreditCurveBuilder',
    'SimpleCreditCurveBuilder',
    'FastCreditCurveBuilder',
    'points_upfront_from_quoted_spread',
    'quoted_spread_from_points_upfront',
    # Quotes
    'CDSQuoteConvention',
    'ParSpread',
    'QuotedSpread',
    'PointsUpFront',
    'premium_and_upfront',
    # Bonds
    'BondAnalytic',
    'bond_price',
    'bond_implied_hazard_rate',
    # Numerics
    'epsilon',
    'epsilon_p',
    'epsilon_pp',
    'get_integration_points',
    'truncate_set_inclusive',
    'truncate_set_exclusive',
    # Enums
    'AccrualOnDefaultFormula',
    'PriceType',
    'DayCountConvention',
    'BadDayConvention',
    'StubMethod',
    'PaymentFrequency',
    # Exceptions
    'CDSError',
    'CurveError',
    'BootstrapError',
    'ConvergenceError',
    'ExpiredCDSError',
    # Dates
    'parse_date',
    'year_fraction',
    'add_days',
    'add_months',
    'add_business_days',
    'adjust_date',
    'is_business_day',
    # Schedule
    'CDSCouponDes',
    'PremiumLegSchedule',
    # IMM
    'next_imm_date',
    'previous_imm_date',
    'is_imm_date',
    # Tenor
    'Tenor',
    'parse_tenor',
]
