#!/usr/bin/env python3
"""
Credit Curve Calibration Example
================================

This example demonstrates how to bootstrap a credit curve from a term
structure of standard CDS par spreads and price off the result.

Each CDS adds one knot to the credit curve at its protection end; the
knots are solved in maturity order so every quote reprices exactly.
"""

from isdamodel import AnalyticCDSPricer, FastCreditCurveBuilder, SimpleCreditCurveBuilder
from isdamodel import YieldCurve, make_imm_cds

# =============================================================================
# Market Data Setup
# =============================================================================

trade_date = '2014-06-18'

# Zero rates (continuously compounded, ACT/365F) of the discount curve
yield_times = [1 / 12, 0.25, 0.5, 1, 2, 3, 5, 7, 10, 15, 30]
yield_rates = [
    0.0015, 0.0020, 0.0030, 0.0045, 0.0070, 0.0100,
    0.0160, 0.0205, 0.0250, 0.0290, 0.0310,
]

tenors = ['6M', '1Y', '2Y', '3Y', '5Y', '7Y', '10Y']
par_spreads = [0.0045, 0.0055, 0.0070, 0.0085, 0.0110, 0.0125, 0.0135]

yield_curve = YieldCurve(yield_times, yield_rates)

print('=' * 70)
print('ISDA Standard Model - Credit Curve Calibration')
print('=' * 70)
print()
print(f'Trade Date:     {trade_date}')
print(f'Yield Curve:    {len(yield_times)} knots')
print()

# =============================================================================
# Bootstrap
# =============================================================================

cds_list = [make_imm_cds(trade_date, tenor) for tenor in tenors]

credit_curve = SimpleCreditCurveBuilder().calibrate_credit_curve(
    cds_list, par_spreads, yield_curve
)
fast_curve = FastCreditCurveBuilder().calibrate_credit_curve(
    cds_list, par_spreads, yield_curve
)

print('-' * 70)
print('Calibrated Credit Curve')
print('-' * 70)
print()
print(f"{'Tenor':<6} {'Knot (yrs)':>11} {'Zero Hazard':>13} {'Survival':>10} {'Fast - Simple':>15}")
print('-' * 60)

for i, tenor in enumerate(tenors):
    t = credit_curve.time_at_index(i)
    h = credit_curve.zero_rate_at_index(i)
    diff = fast_curve.zero_rate_at_index(i) - h
    print(
        f'{tenor:<6} {t:>11.4f} {h:>12.6%} '
        f'{credit_curve.survival_probability(t):>10.6f} {diff:>15.2e}'
    )
print()

# =============================================================================
# Reprice the Market
# =============================================================================

print('-' * 70)
print('Repricing the Calibration Instruments')
print('-' * 70)
print()

pricer = AnalyticCDSPricer()

print(f"{'Tenor':<6} {'Quote (bps)':>12} {'Model (bps)':>12} {'PV at quote':>14}")
print('-' * 48)

for tenor, cds, spread in zip(tenors, cds_list, par_spreads):
    model = pricer.par_spread(cds, yield_curve, credit_curve)
    pv = pricer.pv(cds, yield_curve, credit_curve, spread)
    print(f'{tenor:<6} {spread * 10000:>12.2f} {model * 10000:>12.4f} {pv:>14.2e}')

print()

# =============================================================================
# Off-the-run Contracts
# =============================================================================

print('-' * 70)
print('Interpolated Spreads')
print('-' * 70)
print()

for tenor in ['4Y', '6Y', '8Y']:
    cds = make_imm_cds(trade_date, tenor)
    spread = pricer.par_spread(cds, yield_curve, credit_curve)
    print(f'  {tenor:<4} par spread: {spread * 10000:8.2f} bps')

print()
print('=' * 70)
print('Example Complete')
print('=' * 70)
