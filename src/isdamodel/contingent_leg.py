"""
Contingent (protection) leg valuation.

The protection leg pays LGD on default before maturity:

    PV = LGD * integral_{start}^{end} P(t) dQ(t) / P(cash settle)

With rt and ht (= r(t) t for the credit curve) linear between integration
points, each sub-interval integrates exactly:

    dPV = dht * b0 * epsilon(-(dht + drt))

where b0 = P(t0) Q(t0). For |dht + drt| above the Taylor threshold this is
the familiar (b0 - b1) * dht / (dht + drt).
"""

import numpy as np

from .cds import CDSAnalytic, MultiCDSAnalytic
from .curves import RTCurve
from .epsilon import TAYLOR_THRESHOLD, epsilon, epsilon_p
from .integration import get_integration_points, truncate_set_inclusive


def protection_leg_interval(
    points: np.ndarray,
    yield_curve: RTCurve,
    credit_curve: RTCurve,
) -> float:
    """
    Value of one unit of protection between the first and last point.

    Args:
        points: Integration points (ascending); curves must have constant
            forwards between consecutive points
        yield_curve: Discount curve
        credit_curve: Credit curve

    Returns
        integral of P dQ over the points, undiscounted to cash settle and
        without LGD
    """
    ht0 = credit_curve.rt(points[0])
    rt0 = yield_curve.rt(points[0])
    b0 = np.exp(-ht0 - rt0)
    pv = 0.0
    for t in points[1:]:
        ht1 = credit_curve.rt(t)
        rt1 = yield_curve.rt(t)
        b1 = np.exp(-ht1 - rt1)
        dht = ht1 - ht0
        dhrt = dht + rt1 - rt0
        if abs(dhrt) < TAYLOR_THRESHOLD:
            pv += dht * b0 * epsilon(-dhrt)
        else:
            pv += (b0 - b1) * dht / dhrt
        ht0, rt0, b0 = ht1, rt1, b1
    return float(pv)


def interval_derivatives(b0: float, dht: float, g: float, dg: float) -> tuple[float, float]:
    """
    Partial derivatives of f = dht * b0 * g(x) with x = dht + drt.

    Args:
        b0: P(t0) Q(t0) at the start of the sub-interval
        dht: Increase of ht over the sub-interval
        g: g(x)
        dg: g'(x)

    Returns
        (df/dht0, df/dht1)
    """
    d_ht1 = b0 * g + dht * b0 * dg
    d_ht0 = -b0 * g * (1.0 + dht) - dht * b0 * dg
    return d_ht0, d_ht1


def protection_leg(
    cds: CDSAnalytic,
    yield_curve: RTCurve,
    credit_curve: RTCurve,
) -> float:
    """
    Protection leg PV per unit notional, as of cash settlement.

    Args:
        cds: Analytic CDS
        yield_curve: Discount curve
        credit_curve: Credit curve

    Returns
        Protection leg PV (0 for an expired CDS)
    """
    if cds.is_expired:
        return 0.0
    points = get_integration_points(
        cds.effective_protection_start, cds.protection_end, yield_curve, credit_curve
    )
    pv = protection_leg_interval(points, yield_curve, credit_curve)
    return cds.lgd * pv / yield_curve.discount_factor(cds.cash_settle_time)


def protection_leg_term_structure(
    cds: MultiCDSAnalytic,
    yield_curve: RTCurve,
    credit_curve: RTCurve,
) -> np.ndarray:
    """
    Protection leg PV for every maturity of a MultiCDSAnalytic.

    The integral is built up maturity by maturity, so each sub-interval is
    evaluated once.
    """
    n = cds.num_maturities
    pv = np.zeros(n)
    start = cds.effective_protection_start
    if cds.protection_ends[-1] <= 0.0:
        return pv
    schedule = get_integration_points(start, cds.protection_ends[-1], yield_curve, credit_curve)
    scale = cds.lgd / yield_curve.discount_factor(cds.cash_settle_time)

    running = 0.0
    for i, end in enumerate(cds.protection_ends):
        if end <= 0.0:
            continue
        points = truncate_set_inclusive(start, end, schedule)
        running += protection_leg_interval(points, yield_curve, credit_curve)
        pv[i] = running * scale
        start = end
    return pv


def protection_leg_credit_sensitivity(
    cds: CDSAnalytic,
    yield_curve: RTCurve,
    credit_curve: RTCurve,
    node: int,
) -> float:
    """
    Sensitivity of the protection leg to one credit curve knot zero rate.

    Each sub-interval contributes f = dht * b0 * epsilon(-x), x = dht + drt,
    whose partial derivatives in the end point values ht0, ht1 are chained
    through d ht(t) / d h[node].

    Args:
        cds: Analytic CDS
        yield_curve: Discount curve
        credit_curve: Credit curve
        node: Credit curve knot index

    Returns
        d PV / d h[node]
    """
    if cds.is_expired:
        return 0.0
    points = get_integration_points(
        cds.effective_protection_start, cds.protection_end, yield_curve, credit_curve
    )
    t = points[0]
    ht0, rt0 = credit_curve.rt(t), yield_curve.rt(t)
    b0 = np.exp(-ht0 - rt0)
    s0 = credit_curve.single_node_rt_sensitivity(t, node)
    sense = 0.0
    for t in points[1:]:
        ht1, rt1 = credit_curve.rt(t), yield_curve.rt(t)
        s1 = credit_curve.single_node_rt_sensitivity(t, node)
        dht = ht1 - ht0
        x = dht + rt1 - rt0
        d_ht0, d_ht1 = interval_derivatives(b0, dht, epsilon(-x), -epsilon_p(-x))
        sense += d_ht0 * s0 + d_ht1 * s1
        ht0, rt0, s0 = ht1, rt1, s1
        b0 = np.exp(-ht0 - rt0)
    return float(cds.lgd * sense / yield_curve.discount_factor(cds.cash_settle_time))
