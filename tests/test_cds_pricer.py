"""
Tests for the analytic CDS pricers.
"""

import numpy as np
import pytest

from isdamodel import AnalyticCDSPricer, CDSCoupon, MultiAnalyticCDSPricer, MultiCDSAnalytic
from isdamodel import make_imm_cds, make_imm_multi_cds
from isdamodel.enums import AccrualOnDefaultFormula, PriceType
from isdamodel.exceptions import ExpiredCDSError


def _multi(start=0.0, ends=(1.0, 3.0, 5.0)):
    n = round((ends[-1] - start) / 0.25)
    coupons = [
        CDSCoupon(start + 0.25 * i, start + 0.25 * (i + 1), start + 0.25 * (i + 1), 0.25)
        for i in range(n)
    ]
    indices = [round((e - start) / 0.25) - 1 for e in ends]
    return MultiCDSAnalytic(
        standard_coupons=coupons[:-1],
        terminal_coupons=[coupons[k] for k in indices],
        payment_indices=indices,
        protection_ends=list(ends),
        effective_protection_start=start,
        accrued_year_fractions=[0.01] * len(ends),
    )


@pytest.fixture
def pricer():
    return AnalyticCDSPricer()


class TestAnalyticCDSPricer:
    """Tests for AnalyticCDSPricer."""

    def test_formula_from_string(self):
        """The accrual-on-default formula can be given by name."""
        pricer = AnalyticCDSPricer('MARKIT_FIX')
        assert pricer.formula is AccrualOnDefaultFormula.MARKIT_FIX
        assert pricer.omega == 0.0
        assert AnalyticCDSPricer().omega == 1 / 730

    def test_pv_decomposition(self, pricer, make_cds, yield_curve, credit_curve):
        """PV is protection leg less spread times the annuity."""
        cds = make_cds(5.0)
        pro = pricer.protection_leg(cds, yield_curve, credit_curve)
        rpv01 = pricer.annuity(cds, yield_curve, credit_curve)
        pv = pricer.pv(cds, yield_curve, credit_curve, 0.01)
        assert abs(pv - (pro - 0.01 * rpv01)) < 1e-16
        assert abs(pricer.premium_leg(cds, yield_curve, credit_curve, 0.01) - 0.01 * rpv01) < 1e-16

    def test_par_spread_prices_to_zero(self, pricer, market_cds, yield_curve, credit_curve):
        """At the par spread the clean PV vanishes."""
        for cds in market_cds:
            spread = pricer.par_spread(cds, yield_curve, credit_curve)
            assert abs(pricer.pv(cds, yield_curve, credit_curve, spread)) < 1e-15

    def test_credit_triangle(self, pricer, make_cds, flat_yield_curve, flat_credit_curve):
        """On a flat curve the par spread is close to h * LGD."""
        spread = pricer.par_spread(make_cds(5.0), flat_yield_curve, flat_credit_curve)
        assert abs(spread / (0.01 * 0.6) - 1) < 1e-2

    def test_dirty_pv(self, pricer, make_cds, yield_curve, credit_curve):
        """Dirty PV pays the accrued premium on top of the clean PV."""
        cds = make_cds(5.0, accrued_year_fraction=0.1)
        clean = pricer.pv(cds, yield_curve, credit_curve, 0.01, PriceType.CLEAN)
        dirty = pricer.pv(cds, yield_curve, credit_curve, 0.01, PriceType.DIRTY)
        assert abs(clean - dirty - 0.01 * 0.1) < 1e-15

    def test_rpv01_aliases(self, pricer, make_cds, yield_curve, credit_curve):
        """annuity and rpv01 are the premium leg per unit spread."""
        cds = make_cds(3.0)
        value = pricer.pv_premium_leg_per_unit_spread(cds, yield_curve, credit_curve)
        assert pricer.rpv01(cds, yield_curve, credit_curve) == value
        assert pricer.annuity(cds, yield_curve, credit_curve) == value

    def test_formulas_differ(self, make_cds, yield_curve, credit_curve):
        """The Markit fix gives a slightly higher par spread."""
        cds = make_cds(5.0)
        original = AnalyticCDSPricer().par_spread(cds, yield_curve, credit_curve)
        markit = AnalyticCDSPricer(AccrualOnDefaultFormula.MARKIT_FIX).par_spread(
            cds, yield_curve, credit_curve
        )
        assert markit > original
        assert abs(markit / original - 1) < 1e-3

    def test_expired(self, pricer, make_cds, yield_curve, credit_curve):
        """Expired CDSs are worth nothing and have no par spread."""
        cds = make_cds(1.0).with_offset(2.0)
        assert pricer.pv(cds, yield_curve, credit_curve, 0.01) == 0.0
        with pytest.raises(ExpiredCDSError):
            pricer.par_spread(cds, yield_curve, credit_curve)
        with pytest.raises(ExpiredCDSError):
            pricer.par_spread_credit_sensitivity(cds, yield_curve, credit_curve, 0)
        assert pricer.pv_credit_sensitivity(cds, yield_curve, credit_curve, 0.01, 0) == 0.0

    def test_rebasing_invariance(self, pricer, make_cds, yield_curve, credit_curve):
        """Moving the base time forward on CDS and curves leaves the par spread unchanged."""
        cds = make_cds(5.3, start=0.3)
        offset = 0.3
        spread = pricer.par_spread(cds, yield_curve, credit_curve)
        rebased = pricer.par_spread(
            cds.with_offset(offset),
            yield_curve.with_offset(offset),
            credit_curve.with_offset(offset),
        )
        assert abs(rebased - spread) < 1e-13

    def test_single_period_accrual_on_default(self, pricer, make_cds, yield_curve, credit_curve):
        """The pricer exposes the accrual-on-default kernel with its formula."""
        coupon = CDSCoupon(0.0, 0.25, 0.25, 0.25)
        points = np.array([0.0, 1 / 12, 0.25])
        value = pricer.calculate_single_period_accrual_on_default(
            coupon, 0.0, points, yield_curve, credit_curve
        )
        assert value > 0.0

    def test_standard_contract(self, pricer, yield_curve, credit_curve):
        """A dated IMM contract prices like the time-based one."""
        cds = make_imm_cds('2014-06-18', '5Y')
        spread = pricer.par_spread(cds, yield_curve, credit_curve)
        assert 0.005 < spread < 0.02
        assert abs(pricer.pv(cds, yield_curve, credit_curve, spread)) < 1e-15


class TestSensitivities:
    """Tests for the pricer's credit sensitivities."""

    def test_pv_sensitivity_finite_difference(self, pricer, make_cds, yield_curve, credit_curve):
        """d pv / d h agrees with central differences."""
        cds = make_cds(5.0, accrued_year_fraction=0.05)
        bump = 1e-6
        rates = credit_curve.knot_zero_rates()
        for node in range(credit_curve.number_of_knots):
            up = credit_curve.with_rate(rates[node] + bump, node)
            down = credit_curve.with_rate(rates[node] - bump, node)
            fd = (
                pricer.pv(cds, yield_curve, up, 0.01) - pricer.pv(cds, yield_curve, down, 0.01)
            ) / (2 * bump)
            analytic = pricer.pv_credit_sensitivity(cds, yield_curve, credit_curve, 0.01, node)
            assert abs(fd - analytic) < 1e-8

    def test_par_spread_sensitivity_finite_difference(self, pricer, make_cds, yield_curve,
                                                      credit_curve):
        """d par spread / d h agrees with central differences."""
        cds = make_cds(7.0)
        bump = 1e-6
        rates = credit_curve.knot_zero_rates()
        for node in range(credit_curve.number_of_knots):
            up = credit_curve.with_rate(rates[node] + bump, node)
            down = credit_curve.with_rate(rates[node] - bump, node)
            fd = (
                pricer.par_spread(cds, yield_curve, up) - pricer.par_spread(cds, yield_curve, down)
            ) / (2 * bump)
            analytic = pricer.par_spread_credit_sensitivity(cds, yield_curve, credit_curve, node)
            assert abs(fd - analytic) < 1e-8

    def test_leg_sensitivities(self, pricer, make_cds, yield_curve, credit_curve):
        """pv sensitivity combines the two leg sensitivities."""
        cds = make_cds(5.0)
        pro = pricer.protection_leg_credit_sensitivity(cds, yield_curve, credit_curve, 4)
        rpv01 = pricer.pv_premium_leg_credit_sensitivity(cds, yield_curve, credit_curve, 4)
        pv = pricer.pv_credit_sensitivity(cds, yield_curve, credit_curve, 0.02, 4)
        assert abs(pv - (pro - 0.02 * rpv01)) < 1e-15
        assert pro > 0.0
        assert rpv01 < 0.0


class TestMultiAnalyticCDSPricer:
    """Tests for MultiAnalyticCDSPricer."""

    @pytest.mark.parametrize('formula', list(AccrualOnDefaultFormula))
    def test_matches_single(self, yield_curve, credit_curve, formula):
        """Every maturity prices as the equivalent single CDS."""
        multi = _multi()
        single_pricer = AnalyticCDSPricer(formula)
        multi_pricer = MultiAnalyticCDSPricer(formula)
        pvs = multi_pricer.pv(multi, yield_curve, credit_curve, 0.01)
        spreads = multi_pricer.par_spread(multi, yield_curve, credit_curve)
        for i in range(multi.num_maturities):
            cds = multi.to_cds(i)
            assert abs(pvs[i] - single_pricer.pv(cds, yield_curve, credit_curve, 0.01)) < 1e-15
            assert abs(spreads[i] - single_pricer.par_spread(cds, yield_curve, credit_curve)) < 1e-15

    def test_per_maturity_spreads(self, yield_curve, credit_curve):
        """One spread per maturity can be given."""
        multi = _multi()
        pricer = MultiAnalyticCDSPricer()
        spreads = [0.005, 0.01, 0.02]
        pvs = pricer.pv(multi, yield_curve, credit_curve, spreads, PriceType.DIRTY)
        single = AnalyticCDSPricer()
        for i, s in enumerate(spreads):
            expected = single.pv(multi.to_cds(i), yield_curve, credit_curve, s, PriceType.DIRTY)
            assert abs(pvs[i] - expected) < 1e-15

    def test_expired_maturity(self, yield_curve, credit_curve):
        """Expired maturities are zero and the rest are unaffected."""
        multi = _multi(start=-0.5, ends=(-0.25, 1.0, 2.0))
        pricer = MultiAnalyticCDSPricer()
        pvs = pricer.pv(multi, yield_curve, credit_curve, 0.01)
        assert pvs[0] == 0.0
        single = AnalyticCDSPricer()
        for i in (1, 2):
            expected = single.pv(multi.to_cds(i), yield_curve, credit_curve, 0.01)
            assert abs(pvs[i] - expected) < 1e-15
        with pytest.raises(ExpiredCDSError):
            pricer.par_spread(multi, yield_curve, credit_curve)

    def test_standard_term_structure(self, yield_curve, credit_curve):
        """Dated IMM term structures agree with single IMM contracts."""
        multi = make_imm_multi_cds('2014-06-18', ['1Y', '3Y', '5Y'])
        spreads = MultiAnalyticCDSPricer().par_spread(multi, yield_curve, credit_curve)
        single = AnalyticCDSPricer()
        for spread, tenor in zip(spreads, ['1Y', '3Y', '5Y']):
            expected = single.par_spread(make_imm_cds('2014-06-18', tenor), yield_curve, credit_curve)
            assert abs(spread - expected) < 1e-15
