#!/usr/bin/env python3
"""
Upfront and Spread Calculations
===============================

This example demonstrates:
1. Computing points upfront from a quoted spread
2. Computing the quoted spread from points upfront
3. Calibrating a credit curve to a mix of quote conventions

In the standard CDS market:
- Contracts trade with fixed coupons (100 or 500 bps)
- The difference between the quoted spread and the coupon is settled upfront
"""

from isdamodel import AnalyticCDSPricer, FastCreditCurveBuilder, ParSpread, PointsUpFront
from isdamodel import QuotedSpread, YieldCurve, make_imm_cds
from isdamodel import points_upfront_from_quoted_spread, quoted_spread_from_points_upfront

# =============================================================================
# Setup
# =============================================================================

trade_date = '2014-06-18'

yield_curve = YieldCurve(
    [1 / 12, 0.25, 0.5, 1, 2, 3, 5, 7, 10, 15, 30],
    [0.0015, 0.0020, 0.0030, 0.0045, 0.0070, 0.0100, 0.0160, 0.0205, 0.0250, 0.0290, 0.0310],
)

cds = make_imm_cds(trade_date, '5Y')
notional = 10_000_000

print('=' * 70)
print('ISDA Standard Model - Upfront Calculations')
print('=' * 70)
print()

# =============================================================================
# Upfront from Quoted Spread
# =============================================================================

print('-' * 70)
print('Computing Points Upfront from Quoted Spread')
print('-' * 70)
print()

spreads_bps = [50, 100, 200, 500, 1000]

for coupon_bps in (100, 500):
    coupon = coupon_bps / 10000
    print(f'With {coupon_bps} bps Fixed Coupon:')
    print()
    print(f"{'Spread (bps)':<14} {'Points Upfront':>16} {'Upfront ($)':>16}")
    print('-' * 48)
    for spread_bps in spreads_bps:
        quote = QuotedSpread(coupon, spread_bps / 10000)
        puf = points_upfront_from_quoted_spread(cds, quote, yield_curve)
        print(
            f'{spread_bps:>8}       {puf.points_up_front:>15.4%} '
            f'${puf.points_up_front * notional:>14,.2f}'
        )
    print()

print('Interpretation:')
print('  - Spread > Coupon: Protection buyer PAYS upfront (positive)')
print('  - Spread < Coupon: Protection buyer RECEIVES upfront (negative)')
print()

# =============================================================================
# Quoted Spread from Upfront
# =============================================================================

print('-' * 70)
print('Computing Quoted Spread from Points Upfront')
print('-' * 70)
print()

print(f"{'Points Upfront':>14} {'Quoted Spread (bps)':>22}")
print('-' * 40)

for upfront in [-0.02, -0.01, 0.0, 0.02, 0.05, 0.10]:
    quoted = quoted_spread_from_points_upfront(cds, PointsUpFront(0.01, upfront), yield_curve)
    print(f'{upfront:>14.2%} {quoted.quoted_spread * 10000:>22.4f}')

print()

# =============================================================================
# Mixed Quote Conventions
# =============================================================================

print('-' * 70)
print('Calibrating to Mixed Quotes')
print('-' * 70)
print()

tenors = ['1Y', '3Y', '5Y', '7Y']
quotes = [
    ParSpread(0.0055),
    ParSpread(0.0085),
    PointsUpFront(0.01, 0.0045),
    QuotedSpread(0.01, 0.0125),
]
cds_list = [make_imm_cds(trade_date, tenor) for tenor in tenors]
credit_curve = FastCreditCurveBuilder().calibrate_from_quotes(cds_list, quotes, yield_curve)

pricer = AnalyticCDSPricer()
print(f"{'Tenor':<6} {'Quote':<44} {'Par Spread (bps)':>17}")
print('-' * 70)
for tenor, c, quote in zip(tenors, cds_list, quotes):
    spread = pricer.par_spread(c, yield_curve, credit_curve)
    print(f'{tenor:<6} {quote!r:<44} {spread * 10000:>17.4f}')

print()
print('Note: par and quoted spreads reprice at par, points upfront at the coupon')
print()
print('=' * 70)
print('Example Complete')
print('=' * 70)
