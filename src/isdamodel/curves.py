"""
ISDA compliant curves for discounting and survival.

Provides:
- RTCurve: the read-only query surface shared by every curve
- ISDACompliantCurve: immutable knot curve, with YieldCurve (discount
  factors) and CreditCurve (survival probabilities) subclasses
- CurveBuilder: mutable working copy used while calibrating

A curve is defined by knot times t[i] >= 0 (strictly ascending) and the
products rt[i] = r[i] * t[i] of continuously compounded zero rates. The
discount factor (or survival probability) is exp(-rt(t)).
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

import numpy as np

from .dates import DateLike, year_fraction
from .enums import DayCountConvention
from .exceptions import CurveError
from .interpolation import forward_rate, interpolate_rt, knot_zero_rates
from .interpolation import rt_sensitivities, rt_sensitivity


def _read_only(values) -> np.ndarray:
    arr = np.array(values, dtype=float)
    arr.flags.writeable = False
    return arr


def _validate_knots(times: np.ndarray, values: np.ndarray) -> None:
    if times.ndim != 1 or len(times) == 0:
        raise CurveError('Curve requires at least one knot')
    if len(values) != len(times):
        raise CurveError(
            f'Times and values must have same length: {len(times)} != {len(values)}'
        )
    if times[0] < 0:
        raise CurveError(f'First knot time must be non-negative, got {times[0]}')
    if np.any(np.diff(times) <= 0):
        raise CurveError('Knot times must be strictly ascending')
    if times[0] == 0 and values[0] != 0:
        raise CurveError('A knot at t = 0 must have rt = 0')


class RTCurve(ABC):
    """Queries on a knot curve of (t, rt) pairs."""

    @property
    @abstractmethod
    def times(self) -> np.ndarray:
        """Knot times."""

    @property
    @abstractmethod
    def rt_values(self) -> np.ndarray:
        """Knot values of rt = r * t."""

    @property
    def number_of_knots(self) -> int:
        return len(self.times)

    def __len__(self) -> int:
        return self.number_of_knots

    def _check_node(self, index: int) -> None:
        if not 0 <= index < self.number_of_knots:
            raise CurveError(
                f'Node index {index} out of range for {self.number_of_knots} knots'
            )

    def time_at_index(self, index: int) -> float:
        self._check_node(index)
        return float(self.times[index])

    def rt_at_index(self, index: int) -> float:
        self._check_node(index)
        return float(self.rt_values[index])

    def zero_rate_at_index(self, index: int) -> float:
        self._check_node(index)
        return float(self.knot_zero_rates()[index])

    def knot_zero_rates(self) -> np.ndarray:
        """Zero rates at the knots."""
        return knot_zero_rates(self.times, self.rt_values)

    def rt(self, t: float) -> float:
        """Value of r(t) * t, the negative log discount factor."""
        return float(interpolate_rt(t, self.times, self.rt_values))

    def zero_rate(self, t: float) -> float:
        """
        Continuously compounded zero rate at time t.

        Args:
            t: Time in years (must be non-negative)

        Returns
            r(t); before the first knot this is the first knot's rate
        """
        if t < 0:
            raise CurveError(f'Zero rate requested for negative time {t}')
        times = self.times
        if t <= times[0]:
            return self.zero_rate_at_index(0)
        return self.rt(t) / t

    def discount_factor(self, t: float) -> float:
        """exp(-r(t) * t)."""
        return float(np.exp(-self.rt(t)))

    def forward_rate(self, t: float) -> float:
        """Instantaneous forward rate (left value at a knot)."""
        return float(forward_rate(t, self.times, self.rt_values))

    def dy_dx(self, t: float) -> float:
        """Slope of the zero rate, (forward - zero)/t."""
        if t <= self.times[0]:
            return 0.0
        return (self.forward_rate(t) - self.zero_rate(t)) / t

    def node_sensitivity(self, t: float) -> np.ndarray:
        """Sensitivity of zero_rate(t) to every knot zero rate."""
        times = self.times
        if t <= times[0]:
            result = np.zeros(len(times))
            result[0] = 1.0
            return result
        return rt_sensitivities(t, times) / t

    def single_node_sensitivity(self, t: float, node: int) -> float:
        """Sensitivity of zero_rate(t) to the zero rate at one knot."""
        self._check_node(node)
        if t <= self.times[0]:
            return 1.0 if node == 0 else 0.0
        return rt_sensitivity(t, self.times, node) / t

    def single_node_rt_sensitivity(self, t: float, node: int) -> float:
        """Sensitivity of rt(t) to the zero rate at one knot."""
        self._check_node(node)
        return float(rt_sensitivity(t, self.times, node))

    def rt_and_sensitivity(self, t: float, node: int) -> tuple[float, float]:
        """rt(t) together with its sensitivity to one knot zero rate."""
        self._check_node(node)
        if t == self.times[node]:
            return float(self.rt_values[node]), float(t)
        return self.rt(t), float(rt_sensitivity(t, self.times, node))

    def single_node_discount_factor_sensitivity(self, t: float, node: int) -> float:
        """Sensitivity of discount_factor(t) to one knot zero rate."""
        rt, sense = self.rt_and_sensitivity(t, node)
        return -sense * float(np.exp(-rt))


class ISDACompliantCurve(RTCurve):
    """
    Immutable ISDA compliant curve.

    Knot arrays are read-only; every transform returns a new curve of the
    same class. Two curves are equal when their class and knots match.
    """

    def __init__(self, times: Sequence[float], rates: Sequence[float]):
        """
        Build a curve from knot times and zero rates.

        Args:
            times: Strictly ascending knot times, first >= 0
            rates: Continuously compounded zero rates at the knots
        """
        t = np.asarray(times, dtype=float)
        r = np.asarray(rates, dtype=float)
        _validate_knots(t, r)
        self._init_knots(t, r * t)

    def _init_knots(self, t: np.ndarray, rt: np.ndarray) -> None:
        self._t = _read_only(t)
        self._rt = _read_only(rt)

    @classmethod
    def make_from_rt(cls, times: Sequence[float], rt: Sequence[float]):
        """Build a curve directly from knot times and rt values."""
        t = np.asarray(times, dtype=float)
        values = np.asarray(rt, dtype=float)
        _validate_knots(t, values)
        curve = cls.__new__(cls)
        curve._init_knots(t, values)
        return curve

    @classmethod
    def make_from_forward_rates(cls, times: Sequence[float], forward_rates: Sequence[float]):
        """
        Build a curve from piecewise-constant forward rates.

        forward_rates[0] applies on [0, t[0]] and forward_rates[i] on
        (t[i-1], t[i]].
        """
        t = np.asarray(times, dtype=float)
        fwd = np.asarray(forward_rates, dtype=float)
        if t.shape != fwd.shape:
            raise CurveError('Times and forward rates must have same length')
        rt = np.cumsum(fwd * np.diff(t, prepend=0.0))
        return cls.make_from_rt(t, rt)

    @classmethod
    def from_dates(
        cls,
        base_date: DateLike,
        dates: Sequence[DateLike],
        rates: Sequence[float],
        day_count: DayCountConvention = DayCountConvention.ACT_365F,
    ):
        """
        Build a curve from knot dates.

        Args:
            base_date: Date at which t = 0
            dates: Knot dates (ascending, not before base_date)
            rates: Zero rates at the knots
            day_count: Convention converting dates to times

        Returns
            Curve of the calling class
        """
        times = [year_fraction(base_date, d, day_count) for d in dates]
        return cls(times, rates)

    @classmethod
    def from_dict(cls, data: dict):
        """Inverse of to_dict."""
        return cls.make_from_rt(data['t'], data['rt'])

    def to_dict(self) -> dict:
        """Knot arrays as plain lists, keyed 't' and 'rt'."""
        return {'t': self._t.tolist(), 'rt': self._rt.tolist()}

    @property
    def times(self) -> np.ndarray:
        return self._t

    @property
    def rt_values(self) -> np.ndarray:
        return self._rt

    def with_rates(self, rates: Sequence[float]):
        """Same knot times, new zero rates."""
        r = np.asarray(rates, dtype=float)
        if len(r) != len(self._t):
            raise CurveError(f'Expected {len(self._t)} rates, got {len(r)}')
        return self.make_from_rt(self._t, r * self._t)

    def with_rate(self, rate: float, index: int):
        """Copy with the zero rate of one knot replaced."""
        self._check_node(index)
        rt = self._rt.copy()
        rt[index] = rate * self._t[index]
        return self.make_from_rt(self._t, rt)

    def with_discount_factor(self, discount_factor: float, index: int):
        """Copy with one knot moved to the given discount factor."""
        self._check_node(index)
        if discount_factor <= 0:
            raise CurveError(f'Discount factor must be positive, got {discount_factor}')
        rt = self._rt.copy()
        rt[index] = -np.log(discount_factor)
        return self.make_from_rt(self._t, rt)

    def with_parallel_shift(self, shift: float):
        """Copy with every knot zero rate shifted by the same amount."""
        return self.make_from_rt(self._t, self._rt + shift * self._t)

    def with_offset(self, offset: float):
        """
        Rebase the curve to a later base date.

        The returned curve satisfies
            discount_factor'(t) = discount_factor(t + offset) / discount_factor(offset)
        for every t >= 0.

        Args:
            offset: Time of the new base date (non-negative)

        Returns
            Rebased curve of the same class
        """
        if offset < 0:
            raise CurveError(f'Offset must be non-negative, got {offset}')
        t, rt = self._t, self._rt
        if offset == 0:
            return self.make_from_rt(t, rt)

        if offset < t[0]:
            eta = rt[0] * offset / t[0]
            return self.make_from_rt(t - offset, rt - eta)

        if offset >= t[-1]:
            # only the flat forward extrapolation remains
            fwd = forward_rate(t[-1], t, rt)
            return self.make_from_rt([1.0], [fwd])

        index = int(np.searchsorted(t, offset, side='right'))
        eta = interpolate_rt(offset, t, rt)
        return self.make_from_rt(t[index:] - offset, rt[index:] - eta)

    def __eq__(self, other) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return np.array_equal(self._t, other._t) and np.array_equal(self._rt, other._rt)

    def __hash__(self) -> int:
        return hash((type(self).__name__, tuple(self._t), tuple(self._rt)))

    def __repr__(self) -> str:
        return f'{type(self).__name__}(t={self._t.tolist()}, rt={self._rt.tolist()})'


class YieldCurve(ISDACompliantCurve):
    """Discount curve; discount_factor(t) = exp(-r(t) t)."""

    def forward_discount_factor(self, t1: float, t2: float) -> float:
        """Discount factor from t1 to t2."""
        return float(np.exp(self.rt(t1) - self.rt(t2)))


class CreditCurve(ISDACompliantCurve):
    """
    Credit curve of hazard rates.

    The zero rate is the average hazard rate to t, so
    survival_probability(t) = exp(-h(t) t).
    """

    def survival_probability(self, t: float) -> float:
        """Probability of no default before t."""
        return self.discount_factor(t)

    def default_probability(self, t: float) -> float:
        """Probability of default before t."""
        return 1.0 - self.survival_probability(t)

    def hazard_rate(self, t: float) -> float:
        """Average hazard rate to t."""
        return self.zero_rate(t)

    def forward_hazard_rate(self, t: float) -> float:
        """Instantaneous hazard rate at t."""
        return self.forward_rate(t)


class CurveBuilder(RTCurve):
    """
    Mutable working copy of a curve.

    Calibration routines move one knot at a time while pricing against the
    partially built curve. A builder is owned by a single calibration call;
    build() hands out the immutable result.
    """

    def __init__(self, curve: ISDACompliantCurve):
        self._curve_class = type(curve)
        self._t = _read_only(curve.times)
        self._rt = np.array(curve.rt_values, dtype=float)

    @property
    def times(self) -> np.ndarray:
        return self._t

    @property
    def rt_values(self) -> np.ndarray:
        return self._rt

    def replace_node(self, index: int, rate: float) -> None:
        """Set the zero rate at one knot in place."""
        self._check_node(index)
        self._rt[index] = rate * self._t[index]

    def build(self) -> ISDACompliantCurve:
        """Immutable curve of the original class holding the current knots."""
        return self._curve_class.make_from_rt(self._t, self._rt)
