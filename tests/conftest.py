"""
Shared test fixtures for the ISDA model tests.
"""

import os
import sys

import pytest
import pathlib

# Add src to path for imports
sys.path.insert(0, os.path.join(pathlib.Path(__file__).parent, '..', 'src'))

from isdamodel import CDSAnalytic, CDSCoupon, CreditCurve, YieldCurve  # noqa: E402


@pytest.fixture
def yield_curve():
    """Upward sloping yield curve."""
    return YieldCurve(
        [1 / 12, 0.25, 0.5, 1, 2, 3, 5, 7, 10, 15, 30],
        [0.0050, 0.0060, 0.0075, 0.0100, 0.0140, 0.0175, 0.0220, 0.0250, 0.0275, 0.0290, 0.0300],
    )


@pytest.fixture
def credit_curve():
    """Credit curve with a hump in the hazard rates."""
    return CreditCurve(
        [0.5, 1, 2, 3, 5, 7, 10],
        [0.0100, 0.0120, 0.0150, 0.0180, 0.0200, 0.0190, 0.0185],
    )


@pytest.fixture
def flat_yield_curve():
    """Flat 2% yield curve."""
    return YieldCurve([10.0], [0.02])


@pytest.fixture
def flat_credit_curve():
    """Flat 1% hazard rate."""
    return CreditCurve([10.0], [0.01])


@pytest.fixture
def make_cds():
    """Factory for CDSs with regular coupons starting at t = 0."""

    def _make(
        maturity: float = 5.0,
        interval: float = 0.25,
        recovery_rate: float = 0.4,
        pay_acc_on_default: bool = True,
        accrued_year_fraction: float = 0.0,
        cash_settle_time: float = 0.0,
        start: float = 0.0,
    ) -> CDSAnalytic:
        n = round((maturity - start) / interval)
        coupons = [
            CDSCoupon(start + i * interval, start + (i + 1) * interval,
                      start + (i + 1) * interval, interval)
            for i in range(n)
        ]
        return CDSAnalytic(
            coupons,
            protection_end=maturity,
            effective_protection_start=start,
            cash_settle_time=cash_settle_time,
            recovery_rate=recovery_rate,
            pay_acc_on_default=pay_acc_on_default,
            accrued_year_fraction=accrued_year_fraction,
        )

    return _make


@pytest.fixture
def market_cds(make_cds):
    """CDS term structure at standard tenors."""
    return [make_cds(t) for t in (0.5, 1.0, 2.0, 3.0, 5.0, 7.0, 10.0)]


@pytest.fixture
def market_spreads():
    """Par spreads matching market_cds."""
    return [0.0045, 0.0055, 0.0070, 0.0085, 0.0110, 0.0125, 0.0135]
