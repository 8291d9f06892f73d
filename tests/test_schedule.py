"""
Tests for premium leg schedule generation.
"""

from datetime import date

import pytest

from isdamodel.enums import DayCountConvention, PaymentFrequency, StubMethod
from isdamodel.schedule import CDSCouponDes, PremiumLegSchedule


class TestCDSCouponDes:
    """Tests for CDSCouponDes."""

    def test_year_fraction_computed(self):
        """The accrual year fraction is fixed at construction."""
        des = CDSCouponDes.from_dates(date(2014, 3, 20), date(2014, 6, 20), date(2014, 6, 20))
        assert abs(des.year_fraction - 92 / 360) < 1e-15

    def test_other_day_count(self):
        """The day count can be chosen."""
        des = CDSCouponDes.from_dates(
            date(2014, 3, 20), date(2014, 6, 20), date(2014, 6, 20),
            DayCountConvention.ACT_365F,
        )
        assert abs(des.year_fraction - 92 / 365) < 1e-15

    def test_end_before_start(self):
        """Accrual end must follow accrual start."""
        with pytest.raises(ValueError):
            CDSCouponDes.from_dates(date(2014, 6, 20), date(2014, 6, 20), date(2014, 6, 20))


class TestPremiumLegSchedule:
    """Tests for PremiumLegSchedule."""

    def test_regular_quarterly(self):
        """IMM to IMM over five years and a quarter gives 21 periods."""
        schedule = PremiumLegSchedule(date(2014, 3, 20), date(2019, 6, 20))
        assert len(schedule) == 21
        assert schedule[0].accrual_start == date(2014, 3, 20)
        assert schedule[-1].payment_date == date(2019, 6, 20)

    def test_last_period_protect_start(self):
        """The last accrual period ends the day after maturity."""
        schedule = PremiumLegSchedule(date(2014, 3, 20), date(2019, 6, 20))
        assert schedule[-1].accrual_end == date(2019, 6, 21)

        schedule = PremiumLegSchedule(date(2014, 3, 20), date(2019, 6, 20), protect_start=False)
        assert schedule[-1].accrual_end == date(2019, 6, 20)

    def test_interior_dates_adjusted(self):
        """Interior accrual dates and payments roll off weekends."""
        schedule = PremiumLegSchedule(date(2014, 3, 20), date(2015, 3, 20))
        # 20 September 2014 is a Saturday
        assert schedule[1].accrual_end == date(2014, 9, 22)
        assert schedule[1].payment_date == date(2014, 9, 22)
        assert schedule[2].accrual_start == date(2014, 9, 22)

    def test_periods_contiguous(self):
        """Each period starts where the previous one ends."""
        schedule = PremiumLegSchedule(date(2014, 3, 20), date(2019, 6, 20))
        periods = schedule.periods
        for prev, cur in zip(periods, periods[1:]):
            assert cur.accrual_start == prev.accrual_end

    def test_front_short_stub(self):
        """A short front stub runs from the accrual start to the first roll date."""
        schedule = PremiumLegSchedule(date(2014, 5, 1), date(2014, 12, 20))
        starts = [p.accrual_start for p in schedule]
        assert starts == [date(2014, 5, 1), date(2014, 6, 20), date(2014, 9, 22)]
        assert schedule[-1].accrual_end == date(2014, 12, 21)
        assert schedule[-1].payment_date == date(2014, 12, 22)

    def test_front_long_stub(self):
        """A long front stub absorbs the first regular period."""
        schedule = PremiumLegSchedule(
            date(2014, 5, 1), date(2014, 12, 20), stub_method=StubMethod.FRONT_LONG
        )
        starts = [p.accrual_start for p in schedule]
        assert starts == [date(2014, 5, 1), date(2014, 9, 22)]

    def test_back_short_stub(self):
        """A short back stub ends on maturity."""
        schedule = PremiumLegSchedule(
            date(2014, 3, 20), date(2014, 11, 5), stub_method=StubMethod.BACK_SHORT
        )
        starts = [p.accrual_start for p in schedule]
        assert starts == [date(2014, 3, 20), date(2014, 6, 20), date(2014, 9, 22)]
        assert schedule[-1].accrual_end == date(2014, 11, 6)

    def test_back_long_stub(self):
        """A long back stub absorbs the last regular period."""
        schedule = PremiumLegSchedule(
            date(2014, 3, 20), date(2014, 11, 5), stub_method=StubMethod.BACK_LONG
        )
        starts = [p.accrual_start for p in schedule]
        assert starts == [date(2014, 3, 20), date(2014, 6, 20)]

    def test_semi_annual(self):
        """Semi-annual schedules halve the number of periods."""
        schedule = PremiumLegSchedule(
            date(2014, 6, 20), date(2016, 6, 20), frequency=PaymentFrequency.SEMI_ANNUAL
        )
        assert len(schedule) == 4

    def test_truncate(self):
        """Periods ending on or before step-in are removed."""
        schedule = PremiumLegSchedule(date(2014, 3, 20), date(2015, 3, 20))
        assert len(schedule.truncate(date(2014, 6, 19))) == 4
        assert len(schedule.truncate(date(2014, 6, 20))) == 3
        assert schedule.truncate(date(2015, 3, 21)) == []

    def test_maturity_before_start(self):
        """Maturity must follow the accrual start."""
        with pytest.raises(ValueError):
            PremiumLegSchedule(date(2014, 6, 20), date(2014, 3, 20))
