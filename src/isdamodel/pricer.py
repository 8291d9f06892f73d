"""
Analytic CDS pricers.

AnalyticCDSPricer values one CDSAnalytic; MultiAnalyticCDSPricer values
every maturity of a MultiCDSAnalytic in a single pass. Both are stateless
apart from the accrual-on-default formula and safe to share.

Sign convention: PVs are from the protection buyer's side,

    pv = protection leg - spread * premium leg per unit spread
"""

from collections.abc import Sequence

import numpy as np

from .cds import CDSAnalytic, MultiCDSAnalytic
from .contingent_leg import protection_leg, protection_leg_credit_sensitivity
from .contingent_leg import protection_leg_term_structure
from .coupon import CDSCoupon
from .curves import RTCurve
from .enums import AccrualOnDefaultFormula, PriceType
from .exceptions import ExpiredCDSError
from .fee_leg import pv_premium_leg_credit_sensitivity, pv_premium_leg_per_unit_spread
from .fee_leg import pv_premium_leg_term_structure, single_period_accrual_on_default


class AnalyticCDSPricer:
    """
    Prices a single CDS against a yield curve and a credit curve.

    Example:
        >>> pricer = AnalyticCDSPricer()
        >>> cds = make_imm_cds('2014-06-18', '5Y')
        >>> spread = pricer.par_spread(cds, yield_curve, credit_curve)
    """

    def __init__(
        self,
        formula: AccrualOnDefaultFormula = AccrualOnDefaultFormula.ORIGINAL_ISDA,
    ):
        """
        Args:
            formula: Accrual-on-default formula (ORIGINAL_ISDA or MARKIT_FIX)
        """
        if isinstance(formula, str):
            formula = AccrualOnDefaultFormula.from_string(formula)
        self._formula = formula

    @property
    def formula(self) -> AccrualOnDefaultFormula:
        return self._formula

    @property
    def omega(self) -> float:
        """Half-day offset of the accrual-on-default formula."""
        return self._formula.omega

    def protection_leg(self, cds: CDSAnalytic, yield_curve: RTCurve, credit_curve: RTCurve) -> float:
        """Protection leg PV (0 for an expired CDS)."""
        return protection_leg(cds, yield_curve, credit_curve)

    def pv_premium_leg_per_unit_spread(
        self,
        cds: CDSAnalytic,
        yield_curve: RTCurve,
        credit_curve: RTCurve,
        price_type: PriceType = PriceType.CLEAN,
    ) -> float:
        """Risky annuity: premium leg PV for a spread of 1."""
        return pv_premium_leg_per_unit_spread(
            cds, yield_curve, credit_curve, price_type, self._formula
        )

    annuity = pv_premium_leg_per_unit_spread
    rpv01 = pv_premium_leg_per_unit_spread

    def premium_leg(
        self,
        cds: CDSAnalytic,
        yield_curve: RTCurve,
        credit_curve: RTCurve,
        fractional_spread: float,
        price_type: PriceType = PriceType.CLEAN,
    ) -> float:
        """Premium leg PV for the given spread."""
        return fractional_spread * self.pv_premium_leg_per_unit_spread(
            cds, yield_curve, credit_curve, price_type
        )

    def calculate_single_period_accrual_on_default(
        self,
        coupon: CDSCoupon,
        stepin: float,
        integration_points: np.ndarray,
        yield_curve: RTCurve,
        credit_curve: RTCurve,
    ) -> float:
        """Accrual-on-default value of one coupon per unit spread."""
        return single_period_accrual_on_default(
            coupon, stepin, integration_points, yield_curve, credit_curve, self._formula
        )

    def pv(
        self,
        cds: CDSAnalytic,
        yield_curve: RTCurve,
        credit_curve: RTCurve,
        fractional_spread: float,
        price_type: PriceType = PriceType.CLEAN,
    ) -> float:
        """
        PV of the CDS per unit notional.

        Args:
            cds: Analytic CDS
            yield_curve: Discount curve
            credit_curve: Credit curve
            fractional_spread: Premium as a fraction (0.01 for 100bps)
            price_type: CLEAN or DIRTY

        Returns
            Protection leg minus premium leg; 0 for an expired CDS
        """
        if cds.is_expired:
            return 0.0
        rpv01 = self.pv_premium_leg_per_unit_spread(cds, yield_curve, credit_curve, price_type)
        pro = self.protection_leg(cds, yield_curve, credit_curve)
        return pro - fractional_spread * rpv01

    def par_spread(self, cds: CDSAnalytic, yield_curve: RTCurve, credit_curve: RTCurve) -> float:
        """
        Spread at which the clean PV is zero.

        Raises
            ExpiredCDSError: If protection has already ended
        """
        if cds.is_expired:
            raise ExpiredCDSError(
                f'CDS has expired (protection end {cds.protection_end}): no par spread'
            )
        rpv01 = self.pv_premium_leg_per_unit_spread(
            cds, yield_curve, credit_curve, PriceType.CLEAN
        )
        return self.protection_leg(cds, yield_curve, credit_curve) / rpv01

    def protection_leg_credit_sensitivity(
        self,
        cds: CDSAnalytic,
        yield_curve: RTCurve,
        credit_curve: RTCurve,
        node: int,
    ) -> float:
        """d protection leg / d (zero hazard rate at a credit curve knot)."""
        return protection_leg_credit_sensitivity(cds, yield_curve, credit_curve, node)

    def pv_premium_leg_credit_sensitivity(
        self,
        cds: CDSAnalytic,
        yield_curve: RTCurve,
        credit_curve: RTCurve,
        node: int,
    ) -> float:
        """d risky annuity / d (zero hazard rate at a credit curve knot)."""
        return pv_premium_leg_credit_sensitivity(
            cds, yield_curve, credit_curve, node, self._formula
        )

    def pv_credit_sensitivity(
        self,
        cds: CDSAnalytic,
        yield_curve: RTCurve,
        credit_curve: RTCurve,
        fractional_spread: float,
        node: int,
    ) -> float:
        """d pv / d (zero hazard rate at a credit curve knot)."""
        if cds.is_expired:
            return 0.0
        pro = self.protection_leg_credit_sensitivity(cds, yield_curve, credit_curve, node)
        rpv01 = self.pv_premium_leg_credit_sensitivity(cds, yield_curve, credit_curve, node)
        return pro - fractional_spread * rpv01

    def par_spread_credit_sensitivity(
        self,
        cds: CDSAnalytic,
        yield_curve: RTCurve,
        credit_curve: RTCurve,
        node: int,
    ) -> float:
        """d par spread / d (zero hazard rate at a credit curve knot)."""
        if cds.is_expired:
            raise ExpiredCDSError(
                f'CDS has expired (protection end {cds.protection_end}): no par spread'
            )
        rpv01 = self.pv_premium_leg_per_unit_spread(
            cds, yield_curve, credit_curve, PriceType.CLEAN
        )
        pro = self.protection_leg(cds, yield_curve, credit_curve)
        d_pro = self.protection_leg_credit_sensitivity(cds, yield_curve, credit_curve, node)
        d_rpv01 = self.pv_premium_leg_credit_sensitivity(cds, yield_curve, credit_curve, node)
        return (d_pro - pro / rpv01 * d_rpv01) / rpv01


class MultiAnalyticCDSPricer:
    """
    Prices every maturity of a MultiCDSAnalytic in one pass.

    Results match AnalyticCDSPricer applied to each maturity separately.
    """

    def __init__(
        self,
        formula: AccrualOnDefaultFormula = AccrualOnDefaultFormula.ORIGINAL_ISDA,
    ):
        if isinstance(formula, str):
            formula = AccrualOnDefaultFormula.from_string(formula)
        self._formula = formula

    @property
    def formula(self) -> AccrualOnDefaultFormula:
        return self._formula

    @property
    def omega(self) -> float:
        return self._formula.omega

    def protection_leg(
        self,
        cds: MultiCDSAnalytic,
        yield_curve: RTCurve,
        credit_curve: RTCurve,
    ) -> np.ndarray:
        """Protection leg PV of every maturity."""
        return protection_leg_term_structure(cds, yield_curve, credit_curve)

    def pv_premium_leg_per_unit_spread(
        self,
        cds: MultiCDSAnalytic,
        yield_curve: RTCurve,
        credit_curve: RTCurve,
        price_type: PriceType = PriceType.CLEAN,
    ) -> np.ndarray:
        """Risky annuity of every maturity."""
        return pv_premium_leg_term_structure(
            cds, yield_curve, credit_curve, price_type, self._formula
        )

    def pv(
        self,
        cds: MultiCDSAnalytic,
        yield_curve: RTCurve,
        credit_curve: RTCurve,
        fractional_spreads: float | Sequence[float],
        price_type: PriceType = PriceType.CLEAN,
    ) -> np.ndarray:
        """
        PV of every maturity.

        Args:
            cds: Term structure of CDSs
            yield_curve: Discount curve
            credit_curve: Credit curve
            fractional_spreads: One spread for all maturities, or one per maturity
            price_type: CLEAN or DIRTY

        Returns
            Array of PVs; expired maturities are 0
        """
        spreads = np.broadcast_to(np.asarray(fractional_spreads, dtype=float), (cds.num_maturities,))
        rpv01 = self.pv_premium_leg_per_unit_spread(cds, yield_curve, credit_curve, price_type)
        pro = self.protection_leg(cds, yield_curve, credit_curve)
        pv = pro - spreads * rpv01
        pv[np.asarray(cds.protection_ends) <= 0.0] = 0.0
        return pv

    def par_spread(
        self,
        cds: MultiCDSAnalytic,
        yield_curve: RTCurve,
        credit_curve: RTCurve,
    ) -> np.ndarray:
        """
        Par spread of every maturity.

        Raises
            ExpiredCDSError: If the shortest maturity has expired
        """
        if cds.protection_ends[0] <= 0.0:
            raise ExpiredCDSError(
                f'First maturity has expired (protection end {cds.protection_ends[0]})'
            )
        rpv01 = self.pv_premium_leg_per_unit_spread(
            cds, yield_curve, credit_curve, PriceType.CLEAN
        )
        return self.protection_leg(cds, yield_curve, credit_curve) / rpv01
