"""
ISDA premium leg schedule.

Generates the accrual periods of the premium (fee) leg of a CDS with the
ISDA conventions:
- roll dates stepped back from maturity (front stubs) or forward from the
  accrual start (back stubs); a long stub merges the short stub into its
  neighbouring period
- interior accrual dates and all payment dates are business-day adjusted
- the last accrual period ends on the unadjusted maturity, one day later
  when protection starts at the beginning of the day
"""

from dataclasses import dataclass

from opendate import Date

from .dates import DateLike, add_days, add_months, adjust_date, to_date
from .dates import year_fraction
from .enums import BadDayConvention, DayCountConvention, PaymentFrequency
from .enums import StubMethod


@dataclass(frozen=True)
class CDSCouponDes:
    """
    Date description of one premium leg coupon.

    Attributes
        accrual_start: Start of accrual period
        accrual_end: End of accrual period
        payment_date: Date when payment is made
        year_fraction: Accrual year fraction, fixed at construction
    """

    accrual_start: Date
    accrual_end: Date
    payment_date: Date
    year_fraction: float

    @classmethod
    def from_dates(
        cls,
        accrual_start: DateLike,
        accrual_end: DateLike,
        payment_date: DateLike,
        day_count: DayCountConvention = DayCountConvention.ACT_360,
    ) -> 'CDSCouponDes':
        """Build a coupon description, computing its year fraction once."""
        start, end = to_date(accrual_start), to_date(accrual_end)
        if end <= start:
            raise ValueError(f'Accrual end {end} must be after accrual start {start}')
        return cls(start, end, to_date(payment_date), year_fraction(start, end, day_count))

    def __repr__(self) -> str:
        return (
            f'CDSCouponDes({self.accrual_start}, {self.accrual_end}, '
            f'pay={self.payment_date}, yf={self.year_fraction:.6f})'
        )


class PremiumLegSchedule:
    """
    Accrual periods of a CDS premium leg.

    Holds every period from the accrual start to maturity; truncate()
    removes the periods that have ended by the step-in date.
    """

    def __init__(
        self,
        accrual_start: DateLike,
        maturity: DateLike,
        frequency: PaymentFrequency = PaymentFrequency.QUARTERLY,
        stub_method: StubMethod = StubMethod.FRONT_SHORT,
        bad_day: BadDayConvention = BadDayConvention.FOLLOWING,
        protect_start: bool = True,
        day_count: DayCountConvention = DayCountConvention.ACT_360,
    ):
        """
        Create the schedule.

        Args:
            accrual_start: Start of the first accrual period (usually an IMM date)
            maturity: Unadjusted maturity date
            frequency: Payment frequency
            stub_method: Placement of the irregular period
            bad_day: Business day adjustment for accrual and payment dates
            protect_start: Protection starts at the beginning of the day
            day_count: Accrual day count
        """
        self.accrual_start = to_date(accrual_start)
        self.maturity = to_date(maturity)
        if self.maturity <= self.accrual_start:
            raise ValueError(
                f'Maturity {self.maturity} must be after accrual start {self.accrual_start}'
            )
        self.frequency = frequency
        self.stub_method = stub_method
        self.bad_day = bad_day
        self.protect_start = protect_start
        self.day_count = day_count

        if stub_method.is_front:
            roll_dates = self._roll_dates_backward()
        else:
            roll_dates = self._roll_dates_forward()
        self._periods = self._build_periods(roll_dates)

    def _roll_dates_backward(self) -> list[Date]:
        dates = [self.maturity]
        step = 1
        while True:
            prev = add_months(self.maturity, -step * self.frequency.months)
            if prev <= self.accrual_start:
                stub = prev < self.accrual_start
                dates.append(self.accrual_start)
                break
            dates.append(prev)
            step += 1
        dates.reverse()
        if stub and self.stub_method.is_long and len(dates) > 2:
            del dates[1]
        return dates

    def _roll_dates_forward(self) -> list[Date]:
        dates = [self.accrual_start]
        step = 1
        while True:
            nxt = add_months(self.accrual_start, step * self.frequency.months)
            if nxt >= self.maturity:
                stub = nxt > self.maturity
                dates.append(self.maturity)
                break
            dates.append(nxt)
            step += 1
        if stub and self.stub_method.is_long and len(dates) > 2:
            del dates[-2]
        return dates

    def _build_periods(self, roll_dates: list[Date]) -> list[CDSCouponDes]:
        starts = [roll_dates[0]] + [adjust_date(d, self.bad_day) for d in roll_dates[1:-1]]
        last_end = add_days(self.maturity, 1) if self.protect_start else self.maturity
        ends = starts[1:] + [last_end]
        payments = [adjust_date(d, self.bad_day) for d in roll_dates[1:]]
        return [
            CDSCouponDes.from_dates(s, e, p, self.day_count)
            for s, e, p in zip(starts, ends, payments)
        ]

    @property
    def periods(self) -> list[CDSCouponDes]:
        """All accrual periods, earliest first."""
        return list(self._periods)

    def truncate(self, stepin_date: DateLike) -> list[CDSCouponDes]:
        """Periods still accruing after the step-in date (accrual end > step-in)."""
        stepin = to_date(stepin_date)
        return [p for p in self._periods if p.accrual_end > stepin]

    def __len__(self) -> int:
        return len(self._periods)

    def __iter__(self):
        return iter(self._periods)

    def __getitem__(self, idx: int) -> CDSCouponDes:
        return self._periods[idx]
