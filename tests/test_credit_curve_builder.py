"""
Tests for credit curve calibration.
"""

import logging
from datetime import date

import numpy as np
import pytest

from isdamodel import AnalyticCDSPricer, CDSAnalytic, CreditCurve
from isdamodel import FastCreditCurveBuilder, SimpleCreditCurveBuilder
from isdamodel.credit_curve_builder import points_upfront_from_quoted_spread
from isdamodel.credit_curve_builder import quoted_spread_from_points_upfront
from isdamodel.enums import AccrualOnDefaultFormula
from isdamodel.exceptions import BootstrapError, ExpiredCDSError
from isdamodel.quotes import ParSpread, PointsUpFront, QuotedSpread

BUILDERS = [SimpleCreditCurveBuilder, FastCreditCurveBuilder]


class TestCalibrateCreditCurve:
    """Tests for calibrate_credit_curve."""

    @pytest.mark.parametrize('builder_class', BUILDERS)
    @pytest.mark.parametrize('formula', list(AccrualOnDefaultFormula))
    def test_recovers_curve_from_par_spreads(self, builder_class, formula, market_cds,
                                             yield_curve, credit_curve):
        """Calibrating to a curve's own par spreads gives that curve back."""
        pricer = AnalyticCDSPricer(formula)
        spreads = [pricer.par_spread(c, yield_curve, credit_curve) for c in market_cds]
        curve = builder_class(formula).calibrate_credit_curve(market_cds, spreads, yield_curve)
        assert isinstance(curve, CreditCurve)
        assert np.allclose(curve.times, credit_curve.times, rtol=0, atol=1e-15)
        for fitted, expected in zip(curve.knot_zero_rates(), credit_curve.knot_zero_rates()):
            assert abs(fitted - expected) < 1e-9

    @pytest.mark.parametrize('builder_class', BUILDERS)
    def test_recovers_curve_from_upfronts(self, builder_class, market_cds, yield_curve,
                                          credit_curve):
        """Calibrating to upfronts at a fixed coupon gives the curve back."""
        pricer = AnalyticCDSPricer()
        upfronts = [pricer.pv(c, yield_curve, credit_curve, 0.01) for c in market_cds]
        curve = builder_class().calibrate_credit_curve(
            market_cds, [0.01] * len(market_cds), yield_curve, upfronts
        )
        for fitted, expected in zip(curve.knot_zero_rates(), credit_curve.knot_zero_rates()):
            assert abs(fitted - expected) < 1e-9

    @pytest.mark.parametrize('builder_class', BUILDERS)
    def test_reprices_market(self, builder_class, market_cds, market_spreads, yield_curve):
        """Every instrument prices to par on the calibrated curve."""
        curve = builder_class().calibrate_credit_curve(market_cds, market_spreads, yield_curve)
        pricer = AnalyticCDSPricer()
        for cds, spread in zip(market_cds, market_spreads):
            assert abs(pricer.pv(cds, yield_curve, curve, spread)) < 1e-12
            assert abs(pricer.par_spread(cds, yield_curve, curve) - spread) < 1e-10

    def test_builders_agree(self, market_cds, market_spreads, yield_curve):
        """Brent and Newton calibrations land on the same curve."""
        simple = SimpleCreditCurveBuilder().calibrate_credit_curve(
            market_cds, market_spreads, yield_curve
        )
        fast = FastCreditCurveBuilder().calibrate_credit_curve(
            market_cds, market_spreads, yield_curve
        )
        assert np.allclose(simple.knot_zero_rates(), fast.knot_zero_rates(), rtol=0, atol=1e-10)

    def test_single_cds(self, make_cds, flat_yield_curve):
        """A single CDS with a scalar premium gives a one-knot curve."""
        cds = make_cds(5.0)
        curve = SimpleCreditCurveBuilder().calibrate_credit_curve(cds, 0.012, flat_yield_curve)
        assert curve.number_of_knots == 1
        assert curve.time_at_index(0) == 5.0
        # credit triangle
        assert abs(curve.zero_rate_at_index(0) / (0.012 / 0.6) - 1) < 1e-2

    @pytest.mark.parametrize('builder_class', BUILDERS)
    def test_zero_premium(self, builder_class, make_cds, yield_curve):
        """A zero premium starts from the fallback bracket."""
        cds = make_cds(5.0)
        curve = builder_class().calibrate_credit_curve(cds, 0.0, yield_curve, 0.05)
        value = AnalyticCDSPricer().pv(cds, yield_curve, curve, 0.0)
        assert abs(value - 0.05) < 1e-12

    @pytest.mark.parametrize('spread', [0.0005, 0.005, 0.05, 0.1])
    def test_spread_range(self, spread, market_cds, yield_curve):
        """Flat spread term structures from 5bp to 1000bp calibrate."""
        spreads = [spread] * len(market_cds)
        curve = FastCreditCurveBuilder().calibrate_credit_curve(market_cds, spreads, yield_curve)
        pricer = AnalyticCDSPricer()
        for cds in market_cds:
            assert abs(pricer.pv(cds, yield_curve, curve, spread)) < 1e-12

    def test_unreachable_upfront(self, make_cds, yield_curve):
        """An upfront above the loss given default cannot be calibrated."""
        with pytest.raises(BootstrapError):
            SimpleCreditCurveBuilder().calibrate_credit_curve(
                make_cds(5.0), 0.01, yield_curve, 0.99
            )

    def test_logs_each_node(self, market_cds, market_spreads, yield_curve, caplog):
        """A debug record is written per calibrated knot."""
        with caplog.at_level(logging.DEBUG, logger='isdamodel.credit_curve_builder'):
            SimpleCreditCurveBuilder().calibrate_credit_curve(
                market_cds, market_spreads, yield_curve
            )
        records = [r for r in caplog.records if r.name == 'isdamodel.credit_curve_builder']
        assert len(records) == len(market_cds)


class TestValidation:
    """Tests for calibration input checks."""

    def test_empty(self, yield_curve):
        """At least one CDS is required."""
        with pytest.raises(ValueError):
            SimpleCreditCurveBuilder().calibrate_credit_curve([], [], yield_curve)

    def test_premium_count(self, market_cds, yield_curve):
        """One premium per CDS."""
        with pytest.raises(ValueError):
            SimpleCreditCurveBuilder().calibrate_credit_curve(market_cds, [0.01, 0.02], yield_curve)

    def test_upfront_count(self, market_cds, market_spreads, yield_curve):
        """One upfront per CDS."""
        with pytest.raises(ValueError):
            SimpleCreditCurveBuilder().calibrate_credit_curve(
                market_cds, market_spreads, yield_curve, [0.0]
            )

    def test_not_ascending(self, make_cds, yield_curve):
        """Protection ends must be strictly ascending."""
        with pytest.raises(ValueError):
            SimpleCreditCurveBuilder().calibrate_credit_curve(
                [make_cds(5.0), make_cds(3.0)], [0.01, 0.01], yield_curve
            )

    def test_different_start(self, make_cds, yield_curve):
        """All CDSs share one effective protection start."""
        first = make_cds(3.0)
        second = make_cds(5.0)
        moved = CDSAnalytic(second.coupons, 5.0, effective_protection_start=0.1)
        with pytest.raises(ValueError):
            SimpleCreditCurveBuilder().calibrate_credit_curve(
                [first, moved], [0.01, 0.01], yield_curve
            )

    def test_full_recovery(self, make_cds, yield_curve):
        """Full recovery leaves the hazard rate undefined."""
        with pytest.raises(ValueError):
            SimpleCreditCurveBuilder().calibrate_credit_curve(
                make_cds(5.0, recovery_rate=1.0), 0.01, yield_curve
            )

    def test_expired(self, make_cds, yield_curve):
        """Expired instruments cannot be calibrated to."""
        with pytest.raises(ExpiredCDSError):
            SimpleCreditCurveBuilder().calibrate_credit_curve(
                make_cds(1.0).with_offset(2.0), 0.01, yield_curve
            )


class TestCalibrateFromQuotes:
    """Tests for quote based calibration."""

    def test_mixed_conventions(self, market_cds, yield_curve, credit_curve):
        """Par spreads and upfronts can be mixed in one calibration."""
        pricer = AnalyticCDSPricer()
        quotes = []
        for i, cds in enumerate(market_cds):
            if i < 3:
                quotes.append(ParSpread(pricer.par_spread(cds, yield_curve, credit_curve)))
            else:
                quotes.append(PointsUpFront(0.01, pricer.pv(cds, yield_curve, credit_curve, 0.01)))
        curve = FastCreditCurveBuilder().calibrate_from_quotes(market_cds, quotes, yield_curve)
        for fitted, expected in zip(curve.knot_zero_rates(), credit_curve.knot_zero_rates()):
            assert abs(fitted - expected) < 1e-9

    def test_quote_count(self, market_cds, yield_curve):
        """One quote per CDS."""
        with pytest.raises(ValueError):
            SimpleCreditCurveBuilder().calibrate_from_quotes(
                market_cds, [ParSpread(0.01)], yield_curve
            )

    def test_quoted_spread(self, make_cds, yield_curve):
        """A quoted spread calibrates the flat curve with that par spread."""
        cds = make_cds(5.0)
        curve = SimpleCreditCurveBuilder().calibrate_from_quote(
            cds, QuotedSpread(0.01, 0.012), yield_curve
        )
        assert curve.number_of_knots == 1
        spread = AnalyticCDSPricer().par_spread(cds, yield_curve, curve)
        assert abs(spread - 0.012) < 1e-10

    def test_from_dates(self, yield_curve):
        """CDSs built from dates reprice to their premiums."""
        trade = date(2014, 6, 18)
        stepin = date(2014, 6, 19)
        cash_settle = date(2014, 6, 23)
        accrual_start = date(2014, 3, 20)
        ends = [date(2015, 6, 20), date(2016, 6, 20), date(2019, 6, 20)]
        premiums = [0.006, 0.008, 0.011]
        curve = SimpleCreditCurveBuilder().calibrate_from_dates(
            trade, stepin, cash_settle, accrual_start, ends, premiums, yield_curve
        )
        assert curve.number_of_knots == 3
        pricer = AnalyticCDSPricer()
        for end, premium in zip(ends, premiums):
            cds = CDSAnalytic.from_dates(trade, stepin, cash_settle, accrual_start, end)
            assert abs(pricer.pv(cds, yield_curve, curve, premium)) < 1e-12


class TestQuoteConversion:
    """Tests for conversions between quoted spread and points upfront."""

    def test_quoted_spread_at_coupon(self, make_cds, yield_curve):
        """Quoted spread equal to the coupon has no upfront."""
        quote = points_upfront_from_quoted_spread(make_cds(5.0), QuotedSpread(0.01, 0.01), yield_curve)
        assert isinstance(quote, PointsUpFront)
        assert quote.coupon == 0.01
        assert abs(quote.points_up_front) < 1e-12

    def test_upfront_sign(self, make_cds, yield_curve):
        """Wider spreads than the coupon cost the protection buyer upfront."""
        cds = make_cds(5.0)
        wide = points_upfront_from_quoted_spread(cds, QuotedSpread(0.01, 0.02), yield_curve)
        tight = points_upfront_from_quoted_spread(cds, QuotedSpread(0.01, 0.005), yield_curve)
        assert wide.points_up_front > 0
        assert tight.points_up_front < 0

    @pytest.mark.parametrize('builder_class', BUILDERS)
    def test_round_trip(self, builder_class, make_cds, yield_curve):
        """Converting to upfront and back restores the quoted spread."""
        cds = make_cds(5.0)
        builder = builder_class()
        puf = points_upfront_from_quoted_spread(cds, QuotedSpread(0.01, 0.015), yield_curve, builder)
        quoted = quoted_spread_from_points_upfront(cds, puf, yield_curve, builder)
        assert isinstance(quoted, QuotedSpread)
        assert quoted.coupon == 0.01
        assert abs(quoted.quoted_spread - 0.015) < 1e-9

    @pytest.mark.parametrize('upfront', [-0.02, -0.01, 0.0, 0.02, 0.05, 0.10])
    def test_upfront_grid(self, make_cds, yield_curve, upfront):
        """Feasible upfronts at a 100 bps coupon convert to a quoted spread and back."""
        cds = make_cds(5.0)
        quoted = quoted_spread_from_points_upfront(cds, PointsUpFront(0.01, upfront), yield_curve)
        assert quoted.quoted_spread > 0
        if upfront:
            assert (quoted.quoted_spread > 0.01) == (upfront > 0)
        puf = points_upfront_from_quoted_spread(cds, quoted, yield_curve)
        assert abs(puf.points_up_front - upfront) < 1e-9

    def test_upfront_below_risk_free_annuity(self, make_cds, yield_curve):
        """An upfront rebate larger than the coupon annuity needs a negative hazard rate."""
        with pytest.raises(BootstrapError):
            quoted_spread_from_points_upfront(make_cds(5.0), PointsUpFront(0.01, -0.06), yield_curve)
