"""
Credit curve calibration.

Bootstraps a piecewise credit curve with one knot per CDS at its
protection end. Knots are solved in maturity order; each CDS only sees the
knots up to its own maturity, so every step is a one-dimensional root
search on the newest knot's zero hazard rate.

Two strategies share the ISDACompliantCreditCurveBuilder interface:
- SimpleCreditCurveBuilder: bracket, then Brent on the PV
- FastCreditCurveBuilder: bracket, then Newton with the analytic
  PV sensitivity
"""

import logging
import math
from abc import ABC, abstractmethod
from collections.abc import Sequence

import numpy as np

from .cds import CDSAnalytic
from .curves import CreditCurve, CurveBuilder, RTCurve
from .dates import DateLike
from .enums import AccrualOnDefaultFormula
from .exceptions import BootstrapError, ConvergenceError, ExpiredCDSError
from .pricer import AnalyticCDSPricer
from .quotes import CDSQuoteConvention, PointsUpFront, QuotedSpread
from .quotes import premium_and_upfront
from .root_finding import bracket_root, brent, newton_raphson

logger = logging.getLogger(__name__)

# bracket used when the credit-triangle guess is not positive
ZERO_GUESS_BRACKET = (0.0, 0.01)


class ISDACompliantCreditCurveBuilder(ABC):
    """
    Calibrates credit curves to CDS quotes.

    Example:
        >>> builder = SimpleCreditCurveBuilder()
        >>> curve = builder.calibrate_credit_curve(cds_list, spreads, yield_curve)
    """

    def __init__(
        self,
        formula: AccrualOnDefaultFormula = AccrualOnDefaultFormula.ORIGINAL_ISDA,
        tol: float = 1e-12,
    ):
        """
        Args:
            formula: Accrual-on-default formula used for pricing
            tol: Absolute tolerance on each calibrated hazard rate
        """
        self._pricer = AnalyticCDSPricer(formula)
        self._tol = tol

    @property
    def formula(self) -> AccrualOnDefaultFormula:
        return self._pricer.formula

    @property
    def pricer(self) -> AnalyticCDSPricer:
        """Pricer the calibration reprices with."""
        return self._pricer

    def calibrate_credit_curve(
        self,
        cds: CDSAnalytic | Sequence[CDSAnalytic],
        premiums: float | Sequence[float],
        yield_curve: RTCurve,
        points_upfront: float | Sequence[float] | None = None,
    ) -> CreditCurve:
        """
        Calibrate a credit curve so every CDS reprices to its upfront.

        Args:
            cds: One CDS or CDSs with ascending protection ends
            premiums: Premium (fractional spread) of each CDS
            yield_curve: Discount curve
            points_upfront: Upfront of each CDS (default 0, i.e. par)

        Returns
            CreditCurve with a knot at each protection end

        Raises
            ValueError: On inconsistent inputs
            ExpiredCDSError: If any CDS has expired
            BootstrapError: If a knot cannot be solved
        """
        cds_list = [cds] if isinstance(cds, CDSAnalytic) else list(cds)
        premiums = np.atleast_1d(np.asarray(premiums, dtype=float))
        if points_upfront is None:
            puf = np.zeros(len(cds_list))
        else:
            puf = np.atleast_1d(np.asarray(points_upfront, dtype=float))
        self._validate(cds_list, premiums, puf)

        builder = CurveBuilder(CreditCurve(
            [c.protection_end for c in cds_list],
            [p / c.lgd for c, p in zip(cds_list, premiums)],
        ))
        for i, (c, premium, upfront) in enumerate(zip(cds_list, premiums, puf)):
            try:
                rate = self._solve_node(builder, i, c, premium, upfront, yield_curve)
            except ConvergenceError as e:
                raise BootstrapError(
                    f'Failed to calibrate credit curve node {i} '
                    f'(t={c.protection_end:.6f}): {e}'
                ) from e
            builder.replace_node(i, rate)
            logger.debug(
                'Calibrated node %d at t=%.6f: hazard rate %.10f', i, c.protection_end, rate
            )
        return builder.build()

    @abstractmethod
    def _solve_node(
        self,
        builder: CurveBuilder,
        index: int,
        cds: CDSAnalytic,
        premium: float,
        upfront: float,
        yield_curve: RTCurve,
    ) -> float:
        """Zero hazard rate of knot index that reprices cds to upfront."""

    def _objective(self, builder, index, cds, premium, upfront, yield_curve):
        def f(rate: float) -> float:
            builder.replace_node(index, rate)
            return self._pricer.pv(cds, yield_curve, builder, premium) - upfront
        return f

    def _bracket(self, f, guess: float) -> tuple[float, float]:
        if guess > 0:
            return bracket_root(f, 0.8 * guess, 1.25 * guess, 0.0, math.inf)
        return bracket_root(f, *ZERO_GUESS_BRACKET, 0.0, math.inf)

    @staticmethod
    def _validate(cds_list: list[CDSAnalytic], premiums: np.ndarray, puf: np.ndarray) -> None:
        n = len(cds_list)
        if n == 0:
            raise ValueError('At least one CDS is required')
        if len(premiums) != n:
            raise ValueError(f'Expected {n} premiums, got {len(premiums)}')
        if len(puf) != n:
            raise ValueError(f'Expected {n} points upfront, got {len(puf)}')
        for i, c in enumerate(cds_list):
            if c.is_expired:
                raise ExpiredCDSError(f'CDS {i} has expired (protection end {c.protection_end})')
            if c.lgd <= 0:
                raise ValueError(f'CDS {i} has recovery rate 1: hazard rate is undefined')
        start = cds_list[0].effective_protection_start
        for i, c in enumerate(cds_list[1:], start=1):
            if c.effective_protection_start != start:
                raise ValueError(f'CDS {i} has a different effective protection start')
            if c.protection_end <= cds_list[i - 1].protection_end:
                raise ValueError('Protection ends must be strictly ascending')

    def calibrate_from_quote(
        self,
        cds: CDSAnalytic,
        quote: CDSQuoteConvention,
        yield_curve: RTCurve,
    ) -> CreditCurve:
        """Calibrate a single-knot curve to one market quote."""
        return self.calibrate_from_quotes([cds], [quote], yield_curve)

    def calibrate_from_quotes(
        self,
        cds: Sequence[CDSAnalytic],
        quotes: Sequence[CDSQuoteConvention],
        yield_curve: RTCurve,
    ) -> CreditCurve:
        """Calibrate to market quotes in any mix of conventions."""
        if len(cds) != len(quotes):
            raise ValueError(f'Expected {len(cds)} quotes, got {len(quotes)}')
        pairs = [premium_and_upfront(q) for q in quotes]
        return self.calibrate_credit_curve(
            cds, [p for p, _ in pairs], yield_curve, [u for _, u in pairs]
        )

    def calibrate_from_dates(
        self,
        trade_date: DateLike,
        stepin_date: DateLike,
        cash_settle_date: DateLike,
        accrual_start_date: DateLike,
        end_dates: Sequence[DateLike],
        premiums: Sequence[float],
        yield_curve: RTCurve,
        points_upfront: Sequence[float] | None = None,
        recovery_rate: float = 0.4,
        pay_acc_on_default: bool = True,
    ) -> CreditCurve:
        """Build CDSs with common dates and calibrate to their premiums."""
        cds_list = [
            CDSAnalytic.from_dates(
                trade_date, stepin_date, cash_settle_date, accrual_start_date, end,
                pay_acc_on_default=pay_acc_on_default,
                recovery_rate=recovery_rate,
            )
            for end in end_dates
        ]
        return self.calibrate_credit_curve(cds_list, premiums, yield_curve, points_upfront)


class SimpleCreditCurveBuilder(ISDACompliantCreditCurveBuilder):
    """Bootstrap with Brent's method on each knot."""

    def _solve_node(self, builder, index, cds, premium, upfront, yield_curve):
        f = self._objective(builder, index, cds, premium, upfront, yield_curve)
        lower, upper = self._bracket(f, builder.zero_rate_at_index(index))
        return brent(f, lower, upper, tol=self._tol)


class FastCreditCurveBuilder(ISDACompliantCreditCurveBuilder):
    """Bootstrap with bracketed Newton steps using the analytic PV sensitivity."""

    def _solve_node(self, builder, index, cds, premium, upfront, yield_curve):
        f = self._objective(builder, index, cds, premium, upfront, yield_curve)
        guess = builder.zero_rate_at_index(index)
        lower, upper = self._bracket(f, guess)

        def df(rate: float) -> float:
            builder.replace_node(index, rate)
            return self._pricer.pv_credit_sensitivity(cds, yield_curve, builder, premium, index)

        return newton_raphson(f, df, guess, lower, upper, tol=self._tol)


def points_upfront_from_quoted_spread(
    cds: CDSAnalytic,
    quote: QuotedSpread,
    yield_curve: RTCurve,
    builder: ISDACompliantCreditCurveBuilder | None = None,
) -> PointsUpFront:
    """
    Convert a quoted spread to points upfront.

    The CDS is priced at its coupon on the flat credit curve calibrated to
    the quoted spread.
    """
    builder = builder or SimpleCreditCurveBuilder()
    curve = builder.calibrate_credit_curve(cds, quote.quoted_spread, yield_curve)
    return PointsUpFront(quote.coupon, builder.pricer.pv(cds, yield_curve, curve, quote.coupon))


def quoted_spread_from_points_upfront(
    cds: CDSAnalytic,
    quote: PointsUpFront,
    yield_curve: RTCurve,
    builder: ISDACompliantCreditCurveBuilder | None = None,
) -> QuotedSpread:
    """
    Convert points upfront to a quoted spread.

    The quoted spread is the par spread of the flat credit curve that
    reprices the upfront.
    """
    builder = builder or SimpleCreditCurveBuilder()
    curve = builder.calibrate_credit_curve(
        cds, quote.coupon, yield_curve, quote.points_up_front
    )
    return QuotedSpread(quote.coupon, builder.pricer.par_spread(cds, yield_curve, curve))
