"""
Interpolation kernels for ISDA compliant curves.

A curve is held as knot times t[i] and products rt[i] = r[i] * t[i] of the
knot zero rates. The ISDA model interpolates rt linearly in t, which is
flat-forward interpolation of discount factors:

    t <= t[0]           rt(t) = rt[0] * t / t[0]      (through the origin)
    t[i-1] < t <= t[i]  rt(t) linear between the knots
    t > t[n-1]          last segment extended         (flat forward)

A single-knot curve is flat in zero rate everywhere. All kernels locate
the segment with a binary search.
"""

import numpy as np


def find_segment(times: np.ndarray, t: float) -> tuple[int, bool]:
    """
    Locate t among the knot times.

    Args:
        times: Strictly ascending knot times
        t: Query time

    Returns
        (index, exact) where index is the first knot with times[index] >= t
        (len(times) beyond the last knot) and exact is True when t is a knot
    """
    index = int(np.searchsorted(times, t))
    return index, index < len(times) and times[index] == t


def _segment_end(times: np.ndarray, index: int) -> int:
    # extrapolation beyond the last knot reuses the last segment
    return min(index, len(times) - 1)


def interpolate_rt(t: float, times: np.ndarray, rt: np.ndarray) -> float:
    """Value of rt(t) = r(t) * t."""
    if t <= times[0] or len(times) == 1:
        return rt[0] * t / times[0] if times[0] > 0 else 0.0
    index, exact = find_segment(times, t)
    if exact:
        return rt[index]
    i = _segment_end(times, index)
    t1, t2 = times[i - 1], times[i]
    return (rt[i - 1] * (t2 - t) + rt[i] * (t - t1)) / (t2 - t1)


def forward_rate(t: float, times: np.ndarray, rt: np.ndarray) -> float:
    """
    Instantaneous forward rate d rt/dt.

    At a knot the value of the segment ending at that knot is returned.
    """
    if len(times) == 1 or (t <= times[0] and times[0] > 0):
        return rt[0] / times[0] if times[0] > 0 else 0.0
    i = max(_segment_end(times, find_segment(times, t)[0]), 1)
    return (rt[i] - rt[i - 1]) / (times[i] - times[i - 1])


def rt_sensitivity(t: float, times: np.ndarray, node: int) -> float:
    """
    Sensitivity of rt(t) to the zero rate at a single knot.

    Args:
        t: Query time
        times: Knot times
        node: Knot index

    Returns
        d rt(t) / d r[node]
    """
    if t <= times[0] or len(times) == 1:
        return t if node == 0 else 0.0
    index, exact = find_segment(times, t)
    if exact:
        return t if node == index else 0.0
    i = _segment_end(times, index)
    t1, t2 = times[i - 1], times[i]
    if node == i:
        return t2 * (t - t1) / (t2 - t1)
    if node == i - 1:
        return t1 * (t2 - t) / (t2 - t1)
    return 0.0


def rt_sensitivities(t: float, times: np.ndarray) -> np.ndarray:
    """Sensitivities of rt(t) to every knot zero rate."""
    n = len(times)
    result = np.zeros(n)
    if t <= times[0] or n == 1:
        result[0] = t
        return result
    index, exact = find_segment(times, t)
    if exact:
        result[index] = t
        return result
    i = _segment_end(times, index)
    t1, t2 = times[i - 1], times[i]
    result[i - 1] = t1 * (t2 - t) / (t2 - t1)
    result[i] = t2 * (t - t1) / (t2 - t1)
    return result


def knot_zero_rates(times: np.ndarray, rt: np.ndarray) -> np.ndarray:
    """
    Zero rates rt[i] / t[i] at the knots.

    A knot at t = 0 takes the limit from the right, which is the forward
    rate of the first segment (zero for a single-knot curve).
    """
    rates = np.empty(len(times))
    positive = times > 0
    rates[positive] = rt[positive] / times[positive]
    if not positive[0]:
        rates[0] = forward_rate(0.0, times, rt)
    return rates
