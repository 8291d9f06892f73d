#!/usr/bin/env python3
"""
Credit Curve Sensitivities
==========================

This example demonstrates the analytic sensitivities of a CDS to the zero
hazard rates at the knots of its credit curve:

- dPV/dh: PV change per unit move of one knot's zero hazard rate
- dS/dh: par spread change per unit move of one knot's zero hazard rate

and prices a whole term structure of CDSs in one pass.
"""

from isdamodel import AnalyticCDSPricer, MultiAnalyticCDSPricer, SimpleCreditCurveBuilder
from isdamodel import YieldCurve, make_imm_cds, make_imm_multi_cds

# =============================================================================
# Setup
# =============================================================================

trade_date = '2014-06-18'

yield_curve = YieldCurve(
    [1 / 12, 0.25, 0.5, 1, 2, 3, 5, 7, 10, 15, 30],
    [0.0015, 0.0020, 0.0030, 0.0045, 0.0070, 0.0100, 0.0160, 0.0205, 0.0250, 0.0290, 0.0310],
)

tenors = ['6M', '1Y', '2Y', '3Y', '5Y', '7Y', '10Y']
par_spreads = [0.0045, 0.0055, 0.0070, 0.0085, 0.0110, 0.0125, 0.0135]

credit_curve = SimpleCreditCurveBuilder().calibrate_credit_curve(
    [make_imm_cds(trade_date, t) for t in tenors], par_spreads, yield_curve
)

pricer = AnalyticCDSPricer()
cds = make_imm_cds(trade_date, '5Y')
coupon = 0.01
notional = 10_000_000

print('=' * 70)
print('ISDA Standard Model - Credit Curve Sensitivities')
print('=' * 70)
print()

# =============================================================================
# Knot Sensitivities
# =============================================================================

print('-' * 70)
print('5Y CDS, 100 bps Coupon: Sensitivity to Each Knot')
print('-' * 70)
print()
print(f"{'Knot':<6} {'dPV/dh':>12} {'1bp ($)':>14} {'dS/dh':>12}")
print('-' * 48)

for node, tenor in enumerate(tenors):
    d_pv = pricer.pv_credit_sensitivity(cds, yield_curve, credit_curve, coupon, node)
    d_spread = pricer.par_spread_credit_sensitivity(cds, yield_curve, credit_curve, node)
    print(f'{tenor:<6} {d_pv:>12.6f} ${d_pv * 1e-4 * notional:>12,.2f} {d_spread:>12.6f}')

print()
print('Note: knots beyond the protection end have no effect')
print()

# =============================================================================
# Term Structure Pricing
# =============================================================================

print('-' * 70)
print('Term Structure in One Pass')
print('-' * 70)
print()

multi = make_imm_multi_cds(trade_date, tenors)
multi_pricer = MultiAnalyticCDSPricer()
spreads = multi_pricer.par_spread(multi, yield_curve, credit_curve)
pvs = multi_pricer.pv(multi, yield_curve, credit_curve, coupon)

print(f"{'Tenor':<6} {'Par Spread (bps)':>17} {'Clean PV':>12}")
print('-' * 38)
for tenor, spread, pv in zip(tenors, spreads, pvs):
    print(f'{tenor:<6} {spread * 10000:>17.4f} {pv:>12.6f}')

print()
print('=' * 70)
print('Example Complete')
print('=' * 70)
