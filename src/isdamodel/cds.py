"""
Analytic CDS descriptions.

CDSAnalytic reduces a CDS to the numbers the pricers consume: coupon times,
protection window, settlement time, loss given default and accrued
premium, all in curve time from the trade date. MultiCDSAnalytic does the
same for a term structure of maturities sharing one protection start and
one coupon schedule.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from opendate import Date

from .coupon import CDSCoupon, make_coupons
from .dates import DateLike, add_business_days, add_days, adjust_date, to_date
from .dates import year_fraction
from .enums import BadDayConvention, DayCountConvention, PaymentFrequency
from .enums import StubMethod
from .imm import is_imm_date, next_imm_date, previous_imm_date
from .schedule import CDSCouponDes, PremiumLegSchedule
from .tenor import Tenor, parse_tenor


def _check_recovery(recovery_rate: float) -> None:
    if not 0.0 <= recovery_rate <= 1.0:
        raise ValueError(f'Recovery rate must be in [0, 1], got {recovery_rate}')


@dataclass(frozen=True)
class CDSAnalytic:
    """
    A single CDS in curve time.

    Attributes
        coupons: Premium leg coupons still accruing after step-in
        protection_end: Time protection ends
        effective_protection_start: Time protection starts
        cash_settle_time: Time PVs are quoted for
        recovery_rate: Recovery rate in [0, 1]
        pay_acc_on_default: Accrued premium is paid on default
        accrued_year_fraction: Accrued premium per unit spread at step-in
    """

    coupons: tuple[CDSCoupon, ...]
    protection_end: float
    effective_protection_start: float = 0.0
    cash_settle_time: float = 0.0
    recovery_rate: float = 0.4
    pay_acc_on_default: bool = True
    accrued_year_fraction: float = 0.0

    def __post_init__(self):
        object.__setattr__(self, 'coupons', tuple(self.coupons))
        _check_recovery(self.recovery_rate)
        if self.protection_end <= self.effective_protection_start:
            raise ValueError(
                f'Protection end {self.protection_end} must be after '
                f'protection start {self.effective_protection_start}'
            )
        if self.accrued_year_fraction < 0:
            raise ValueError(
                f'Accrued year fraction must be non-negative, got {self.accrued_year_fraction}'
            )

    @property
    def lgd(self) -> float:
        """Loss given default, 1 - recovery."""
        return 1.0 - self.recovery_rate

    @property
    def num_payments(self) -> int:
        return len(self.coupons)

    @property
    def is_expired(self) -> bool:
        """True once protection has ended."""
        return self.protection_end <= 0.0

    def coupon(self, index: int) -> CDSCoupon:
        return self.coupons[index]

    def accrued_premium(self, fractional_spread: float) -> float:
        """Accrued premium at step-in for the given spread."""
        return fractional_spread * self.accrued_year_fraction

    def with_recovery_rate(self, recovery_rate: float) -> 'CDSAnalytic':
        """Copy with a different recovery rate."""
        return CDSAnalytic(
            self.coupons,
            self.protection_end,
            self.effective_protection_start,
            self.cash_settle_time,
            recovery_rate,
            self.pay_acc_on_default,
            self.accrued_year_fraction,
        )

    def with_offset(self, offset: float) -> 'CDSAnalytic':
        """
        Same CDS seen from a base time moved forward by offset.

        Every time is shifted; the accrued year fraction is kept.
        """
        return CDSAnalytic(
            tuple(c.with_offset(offset) for c in self.coupons),
            self.protection_end - offset,
            self.effective_protection_start - offset,
            self.cash_settle_time - offset,
            self.recovery_rate,
            self.pay_acc_on_default,
            self.accrued_year_fraction,
        )

    @classmethod
    def from_dates(
        cls,
        trade_date: DateLike,
        stepin_date: DateLike,
        cash_settle_date: DateLike,
        accrual_start_date: DateLike,
        end_date: DateLike,
        pay_acc_on_default: bool = True,
        frequency: PaymentFrequency = PaymentFrequency.QUARTERLY,
        stub_method: StubMethod = StubMethod.FRONT_SHORT,
        protect_start: bool = True,
        recovery_rate: float = 0.4,
        bad_day: BadDayConvention = BadDayConvention.FOLLOWING,
        accrual_day_count: DayCountConvention = DayCountConvention.ACT_360,
        curve_day_count: DayCountConvention = DayCountConvention.ACT_365F,
    ) -> 'CDSAnalytic':
        """
        Build a CDSAnalytic from contract dates.

        Args:
            trade_date: Trade date, t = 0
            stepin_date: Date protection (and accrued) is counted from, usually T+1
            cash_settle_date: Date the upfront settles, usually T+3 business days
            accrual_start_date: Start of the first accrual period
            end_date: Maturity (protection end) date
            pay_acc_on_default: Accrued premium is paid on default
            frequency: Premium payment frequency
            stub_method: Stub placement
            protect_start: Protection starts at the beginning of the day
            recovery_rate: Recovery rate
            bad_day: Business day adjustment
            accrual_day_count: Day count of premium accrual
            curve_day_count: Day count converting dates to curve time

        Returns
            CDSAnalytic
        """
        trade, stepin = to_date(trade_date), to_date(stepin_date)
        cash_settle, accrual_start = to_date(cash_settle_date), to_date(accrual_start_date)
        end = to_date(end_date)
        if stepin < trade:
            raise ValueError(f'Step-in date {stepin} is before trade date {trade}')
        if cash_settle < trade:
            raise ValueError(f'Cash settle date {cash_settle} is before trade date {trade}')

        schedule = PremiumLegSchedule(
            accrual_start, end, frequency, stub_method, bad_day, protect_start, accrual_day_count
        )
        periods = schedule.truncate(stepin)
        if not periods:
            raise ValueError(f'CDS maturing {end} has no premium periods after step-in {stepin}')

        return cls(
            coupons=tuple(make_coupons(trade, periods, protect_start, curve_day_count)),
            protection_end=year_fraction(trade, end, curve_day_count),
            effective_protection_start=_protection_start_time(
                trade, stepin, accrual_start, protect_start, curve_day_count
            ),
            cash_settle_time=year_fraction(trade, cash_settle, curve_day_count),
            recovery_rate=recovery_rate,
            pay_acc_on_default=pay_acc_on_default,
            accrued_year_fraction=_accrued_year_fraction(periods[0], stepin, accrual_day_count),
        )


def _protection_start_time(
    trade: Date,
    stepin: Date,
    accrual_start: Date,
    protect_start: bool,
    curve_day_count: DayCountConvention,
) -> float:
    start = max(stepin, accrual_start)
    if protect_start:
        start = add_days(start, -1)
    return year_fraction(trade, start, curve_day_count)


def _accrued_year_fraction(
    first: CDSCouponDes,
    stepin: Date,
    accrual_day_count: DayCountConvention,
) -> float:
    if first.accrual_start < stepin:
        return year_fraction(first.accrual_start, stepin, accrual_day_count)
    return 0.0


@dataclass(frozen=True)
class MultiCDSAnalytic:
    """
    A term structure of CDSs with a common protection start.

    All maturities share the coupons in standard_coupons; maturity i uses
    the first payment_indices[i] of them followed by its own terminal
    coupon.

    Attributes
        standard_coupons: Coupons common to the longer maturities
        terminal_coupons: Final coupon of each maturity
        payment_indices: Number of standard coupons before each terminal coupon
        protection_ends: Protection end of each maturity (strictly ascending)
        effective_protection_start: Time protection starts
        cash_settle_time: Time PVs are quoted for
        recovery_rate: Recovery rate in [0, 1]
        pay_acc_on_default: Accrued premium is paid on default
        accrued_year_fractions: Accrued premium per unit spread per maturity
    """

    standard_coupons: tuple[CDSCoupon, ...]
    terminal_coupons: tuple[CDSCoupon, ...]
    payment_indices: tuple[int, ...]
    protection_ends: tuple[float, ...]
    effective_protection_start: float = 0.0
    cash_settle_time: float = 0.0
    recovery_rate: float = 0.4
    pay_acc_on_default: bool = True
    accrued_year_fractions: tuple[float, ...] | None = None

    def __post_init__(self):
        for name in ('standard_coupons', 'terminal_coupons', 'payment_indices', 'protection_ends'):
            object.__setattr__(self, name, tuple(getattr(self, name)))
        n = len(self.protection_ends)
        if n == 0:
            raise ValueError('At least one maturity is required')
        if len(self.terminal_coupons) != n or len(self.payment_indices) != n:
            raise ValueError(
                f'Expected {n} terminal coupons and payment indices, got '
                f'{len(self.terminal_coupons)} and {len(self.payment_indices)}'
            )
        if any(b <= a for a, b in zip(self.protection_ends, self.protection_ends[1:])):
            raise ValueError('Protection ends must be strictly ascending')
        if self.protection_ends[0] <= self.effective_protection_start:
            raise ValueError('First protection end must be after the protection start')
        indices = self.payment_indices
        if any(b < a for a, b in zip(indices, indices[1:])) or not (
            0 <= indices[0] and indices[-1] <= len(self.standard_coupons)
        ):
            raise ValueError('Payment indices must be ascending and within the standard coupons')
        _check_recovery(self.recovery_rate)
        if self.accrued_year_fractions is None:
            object.__setattr__(self, 'accrued_year_fractions', (0.0,) * n)
        else:
            object.__setattr__(self, 'accrued_year_fractions', tuple(self.accrued_year_fractions))
            if len(self.accrued_year_fractions) != n:
                raise ValueError(f'Expected {n} accrued year fractions')

    @property
    def lgd(self) -> float:
        return 1.0 - self.recovery_rate

    @property
    def num_maturities(self) -> int:
        return len(self.protection_ends)

    def protection_end(self, index: int) -> float:
        return self.protection_ends[index]

    def standard_coupon(self, index: int) -> CDSCoupon:
        return self.standard_coupons[index]

    def terminal_coupon(self, index: int) -> CDSCoupon:
        return self.terminal_coupons[index]

    def payment_index_for_maturity(self, index: int) -> int:
        return self.payment_indices[index]

    def accrued_premium_per_unit_spread(self, index: int) -> float:
        return self.accrued_year_fractions[index]

    def to_cds(self, index: int) -> CDSAnalytic:
        """The single-maturity CDSAnalytic for one maturity."""
        k = self.payment_indices[index]
        return CDSAnalytic(
            coupons=self.standard_coupons[:k] + (self.terminal_coupons[index],),
            protection_end=self.protection_ends[index],
            effective_protection_start=self.effective_protection_start,
            cash_settle_time=self.cash_settle_time,
            recovery_rate=self.recovery_rate,
            pay_acc_on_default=self.pay_acc_on_default,
            accrued_year_fraction=self.accrued_year_fractions[index],
        )

    @classmethod
    def from_dates(
        cls,
        trade_date: DateLike,
        stepin_date: DateLike,
        cash_settle_date: DateLike,
        accrual_start_date: DateLike,
        maturities: Sequence[DateLike],
        pay_acc_on_default: bool = True,
        frequency: PaymentFrequency = PaymentFrequency.QUARTERLY,
        stub_method: StubMethod = StubMethod.FRONT_SHORT,
        protect_start: bool = True,
        recovery_rate: float = 0.4,
        bad_day: BadDayConvention = BadDayConvention.FOLLOWING,
        accrual_day_count: DayCountConvention = DayCountConvention.ACT_360,
        curve_day_count: DayCountConvention = DayCountConvention.ACT_365F,
    ) -> 'MultiCDSAnalytic':
        """
        Build the term structure from contract dates.

        Every maturity must lie on the roll dates of the longest one, so
        the shorter schedules are prefixes of the longest schedule.
        """
        trade, stepin = to_date(trade_date), to_date(stepin_date)
        accrual_start = to_date(accrual_start_date)
        ends = [to_date(m) for m in maturities]
        if not ends:
            raise ValueError('At least one maturity is required')

        schedules = []
        for end in ends:
            periods = PremiumLegSchedule(
                accrual_start, end, frequency, stub_method, bad_day, protect_start,
                accrual_day_count,
            ).truncate(stepin)
            if not periods:
                raise ValueError(
                    f'CDS maturing {end} has no premium periods after step-in {stepin}'
                )
            schedules.append(periods)

        standard = schedules[-1][:-1]
        payment_indices = []
        for end, periods in zip(ends, schedules):
            k = len(periods) - 1
            if periods[:k] != standard[:k]:
                raise ValueError(f'Maturity {end} does not lie on the common coupon schedule')
            payment_indices.append(k)

        return cls(
            standard_coupons=tuple(make_coupons(trade, standard, protect_start, curve_day_count)),
            terminal_coupons=tuple(
                make_coupons(trade, [p[-1] for p in schedules], protect_start, curve_day_count)
            ),
            payment_indices=tuple(payment_indices),
            protection_ends=tuple(year_fraction(trade, end, curve_day_count) for end in ends),
            effective_protection_start=_protection_start_time(
                trade, stepin, accrual_start, protect_start, curve_day_count
            ),
            cash_settle_time=year_fraction(trade, cash_settle_date, curve_day_count),
            recovery_rate=recovery_rate,
            pay_acc_on_default=pay_acc_on_default,
            accrued_year_fractions=tuple(
                _accrued_year_fraction(p[0], stepin, accrual_day_count) for p in schedules
            ),
        )


def _standard_dates(trade_date: DateLike) -> tuple[Date, Date, Date, Date]:
    """Trade, step-in (T+1), cash settle (T+3 business days) and accrual start."""
    trade = to_date(trade_date)
    stepin = add_days(trade, 1)
    imm = stepin if is_imm_date(stepin) else previous_imm_date(stepin)
    accrual_start = adjust_date(imm, BadDayConvention.FOLLOWING)
    return trade, stepin, add_business_days(trade, 3), accrual_start


def _imm_maturity(trade: Date, tenor: str | Tenor) -> Date:
    return parse_tenor(tenor).add_to_date(next_imm_date(trade))


def make_imm_cds(
    trade_date: DateLike,
    tenor: str | Tenor,
    recovery_rate: float = 0.4,
    pay_acc_on_default: bool = True,
    protect_start: bool = True,
) -> CDSAnalytic:
    """
    Standard (IMM dated) CDS traded on trade_date.

    Step-in is T+1, cash settlement T+3 business days, accrual starts on
    the last IMM date on or before step-in and the contract matures on the
    next IMM date after the trade date plus the tenor.

    Args:
        trade_date: Trade date
        tenor: Tenor such as '5Y'
        recovery_rate: Recovery rate
        pay_acc_on_default: Accrued premium is paid on default
        protect_start: Protection starts at the beginning of the day

    Returns
        CDSAnalytic
    """
    trade, stepin, cash_settle, accrual_start = _standard_dates(trade_date)
    return CDSAnalytic.from_dates(
        trade, stepin, cash_settle, accrual_start, _imm_maturity(trade, tenor),
        pay_acc_on_default=pay_acc_on_default,
        protect_start=protect_start,
        recovery_rate=recovery_rate,
    )


def make_imm_multi_cds(
    trade_date: DateLike,
    tenors: Sequence[str | Tenor],
    recovery_rate: float = 0.4,
    pay_acc_on_default: bool = True,
    protect_start: bool = True,
) -> MultiCDSAnalytic:
    """Term structure of standard CDSs, one per tenor (ascending)."""
    trade, stepin, cash_settle, accrual_start = _standard_dates(trade_date)
    return MultiCDSAnalytic.from_dates(
        trade, stepin, cash_settle, accrual_start,
        [_imm_maturity(trade, t) for t in tenors],
        pay_acc_on_default=pay_acc_on_default,
        protect_start=protect_start,
        recovery_rate=recovery_rate,
    )
