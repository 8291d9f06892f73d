"""
Fee (premium) leg valuation.

The premium leg per unit spread (the risky annuity) is

    sum_i yf_i * P(pay_i) * Q(end_i)  +  accrual on default

where the accrual-on-default term pays the premium accrued up to the
default time. It is integrated on the same sub-intervals as the protection
leg, with the epsilon family taking over for small exponents.
"""

import numpy as np

from .cds import CDSAnalytic, MultiCDSAnalytic
from .contingent_leg import interval_derivatives
from .coupon import CDSCoupon
from .curves import RTCurve
from .enums import AccrualOnDefaultFormula, PriceType
from .epsilon import TAYLOR_THRESHOLD, epsilon, epsilon_p, epsilon_pp
from .integration import get_integration_points, truncate_set_inclusive

# kept so results match the ISDA C library
ACCRUAL_EPSILON = 1e-50


def single_period_accrual_on_default(
    coupon: CDSCoupon,
    stepin: float,
    integration_points: np.ndarray,
    yield_curve: RTCurve,
    credit_curve: RTCurve,
    formula: AccrualOnDefaultFormula = AccrualOnDefaultFormula.ORIGINAL_ISDA,
) -> float:
    """
    Accrual-on-default value of one coupon per unit spread.

    Args:
        coupon: Coupon in curve time
        stepin: Effective protection start; nothing accrues before it
        integration_points: Integration points of the whole CDS
        yield_curve: Discount curve
        credit_curve: Credit curve
        formula: ORIGINAL_ISDA (half-day offset) or MARKIT_FIX

    Returns
        Value, already converted to accrual year fraction via yf_ratio
    """
    start = max(coupon.effective_start, stepin)
    if start >= coupon.effective_end:
        return 0.0
    knots = truncate_set_inclusive(start, coupon.effective_end, integration_points)
    omega = formula.omega
    markit = formula is AccrualOnDefaultFormula.MARKIT_FIX

    t_prev = knots[0]
    ht0, rt0 = credit_curve.rt(t_prev), yield_curve.rt(t_prev)
    b0 = np.exp(-ht0 - rt0)
    t0 = t_prev - coupon.effective_start + omega
    pv = 0.0
    for t in knots[1:]:
        ht1, rt1 = credit_curve.rt(t), yield_curve.rt(t)
        b1 = np.exp(-ht1 - rt1)
        dt = t - t_prev
        dht = ht1 - ht0
        dhrt = dht + rt1 - rt0 + ACCRUAL_EPSILON

        if markit:
            if abs(dhrt) < TAYLOR_THRESHOLD:
                pv += dht * dt * b0 * epsilon_p(-dhrt)
            else:
                pv += dht * dt / dhrt * ((b0 - b1) / dhrt - b1)
        else:
            t1 = t - coupon.effective_start + omega
            if abs(dhrt) < TAYLOR_THRESHOLD:
                pv += dht * b0 * (t0 * epsilon(-dhrt) + dt * epsilon_p(-dhrt))
            else:
                pv += dht / dhrt * (t0 * b0 - t1 * b1 + dt / dhrt * (b0 - b1))
            t0 = t1

        t_prev, ht0, rt0, b0 = t, ht1, rt1, b1

    return float(coupon.yf_ratio * pv)


def _coupon_value(
    coupon: CDSCoupon,
    stepin: float,
    integration_points: np.ndarray | None,
    yield_curve: RTCurve,
    credit_curve: RTCurve,
    formula: AccrualOnDefaultFormula,
) -> float:
    value = (
        coupon.year_fraction
        * yield_curve.discount_factor(coupon.payment_time)
        * credit_curve.discount_factor(coupon.effective_end)
    )
    if integration_points is not None:
        value += single_period_accrual_on_default(
            coupon, stepin, integration_points, yield_curve, credit_curve, formula
        )
    return value


def pv_premium_leg_per_unit_spread(
    cds: CDSAnalytic,
    yield_curve: RTCurve,
    credit_curve: RTCurve,
    price_type: PriceType = PriceType.CLEAN,
    formula: AccrualOnDefaultFormula = AccrualOnDefaultFormula.ORIGINAL_ISDA,
) -> float:
    """
    Premium leg PV for a spread of 1 (the risky annuity, RPV01).

    Args:
        cds: Analytic CDS
        yield_curve: Discount curve
        credit_curve: Credit curve
        price_type: CLEAN subtracts the accrued year fraction
        formula: Accrual-on-default formula

    Returns
        PV as of cash settlement (0 for an expired CDS)
    """
    if cds.is_expired:
        return 0.0
    points = None
    if cds.pay_acc_on_default:
        points = get_integration_points(
            cds.effective_protection_start, cds.protection_end, yield_curve, credit_curve
        )
    pv = sum(
        _coupon_value(c, cds.effective_protection_start, points, yield_curve, credit_curve, formula)
        for c in cds.coupons
    )
    pv /= yield_curve.discount_factor(cds.cash_settle_time)
    if price_type is PriceType.CLEAN:
        pv -= cds.accrued_year_fraction
    return float(pv)


def pv_premium_leg_term_structure(
    cds: MultiCDSAnalytic,
    yield_curve: RTCurve,
    credit_curve: RTCurve,
    price_type: PriceType = PriceType.CLEAN,
    formula: AccrualOnDefaultFormula = AccrualOnDefaultFormula.ORIGINAL_ISDA,
) -> np.ndarray:
    """
    Premium leg PV per unit spread for every maturity.

    Standard coupons are valued once and accumulated; each maturity then
    adds its own terminal coupon.
    """
    n = cds.num_maturities
    pv = np.zeros(n)
    if cds.protection_ends[-1] <= 0.0:
        return pv
    stepin = cds.effective_protection_start
    points = None
    if cds.pay_acc_on_default:
        points = get_integration_points(
            stepin, cds.protection_ends[-1], yield_curve, credit_curve
        )
    df = yield_curve.discount_factor(cds.cash_settle_time)

    running = 0.0
    start = 0
    for i in range(n):
        if cds.protection_ends[i] <= 0.0:
            continue
        end = cds.payment_indices[i]
        for j in range(start, end):
            running += _coupon_value(
                cds.standard_coupons[j], stepin, points, yield_curve, credit_curve, formula
            )
        start = end
        terminal = _coupon_value(
            cds.terminal_coupons[i], stepin, points, yield_curve, credit_curve, formula
        )
        pv[i] = (running + terminal) / df
        if price_type is PriceType.CLEAN:
            pv[i] -= cds.accrued_year_fractions[i]
    return pv


def _accrual_on_default_sensitivity(
    coupon: CDSCoupon,
    stepin: float,
    integration_points: np.ndarray,
    yield_curve: RTCurve,
    credit_curve: RTCurve,
    node: int,
    formula: AccrualOnDefaultFormula,
) -> float:
    start = max(coupon.effective_start, stepin)
    if start >= coupon.effective_end:
        return 0.0
    knots = truncate_set_inclusive(start, coupon.effective_end, integration_points)
    markit = formula is AccrualOnDefaultFormula.MARKIT_FIX

    t_prev = knots[0]
    ht0, rt0 = credit_curve.rt(t_prev), yield_curve.rt(t_prev)
    b0 = np.exp(-ht0 - rt0)
    s0 = credit_curve.single_node_rt_sensitivity(t_prev, node)
    t0 = t_prev - coupon.effective_start + formula.omega
    sense = 0.0
    for t in knots[1:]:
        ht1, rt1 = credit_curve.rt(t), yield_curve.rt(t)
        s1 = credit_curve.single_node_rt_sensitivity(t, node)
        dt = t - t_prev
        dht = ht1 - ht0
        x = dht + rt1 - rt0
        if markit:
            g = dt * epsilon_p(-x)
            dg = -dt * epsilon_pp(-x)
        else:
            g = t0 * epsilon(-x) + dt * epsilon_p(-x)
            dg = -t0 * epsilon_p(-x) - dt * epsilon_pp(-x)
            t0 += dt
        d_ht0, d_ht1 = interval_derivatives(b0, dht, g, dg)
        sense += d_ht0 * s0 + d_ht1 * s1
        t_prev, ht0, rt0, s0 = t, ht1, rt1, s1
        b0 = np.exp(-ht0 - rt0)
    return coupon.yf_ratio * sense


def pv_premium_leg_credit_sensitivity(
    cds: CDSAnalytic,
    yield_curve: RTCurve,
    credit_curve: RTCurve,
    node: int,
    formula: AccrualOnDefaultFormula = AccrualOnDefaultFormula.ORIGINAL_ISDA,
) -> float:
    """
    Sensitivity of the premium leg per unit spread to one credit knot.

    Clean and dirty values share this sensitivity.
    """
    if cds.is_expired:
        return 0.0
    sense = 0.0
    for c in cds.coupons:
        p = yield_curve.discount_factor(c.payment_time)
        sense += c.year_fraction * p * credit_curve.single_node_discount_factor_sensitivity(
            c.effective_end, node
        )
    if cds.pay_acc_on_default:
        points = get_integration_points(
            cds.effective_protection_start, cds.protection_end, yield_curve, credit_curve
        )
        for c in cds.coupons:
            sense += _accrual_on_default_sensitivity(
                c, cds.effective_protection_start, points, yield_curve, credit_curve, node, formula
            )
    return float(sense / yield_curve.discount_factor(cds.cash_settle_time))
