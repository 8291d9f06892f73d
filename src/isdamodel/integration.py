"""
Integration points for the leg integrals.

Between two consecutive points both the yield curve and the credit curve
have constant forward rates, so each sub-interval integrates in closed
form. Points closer together than half a day are treated as one.
"""

import numpy as np

from .curves import RTCurve

HALF_DAY = 1.0 / 730.0


def _knots(curve) -> np.ndarray:
    if isinstance(curve, RTCurve):
        return np.asarray(curve.times, dtype=float)
    return np.asarray(curve, dtype=float)


def _merge_close(points: np.ndarray) -> np.ndarray:
    """Drop points within HALF_DAY of the previous kept point."""
    if len(points) == 0:
        return points
    kept = [points[0]]
    for p in points[1:]:
        if p - kept[-1] >= HALF_DAY:
            kept.append(p)
    return np.array(kept)


def truncate_set_exclusive(lower: float, upper: float, points) -> np.ndarray:
    """Sorted points strictly between lower and upper."""
    points = np.unique(np.asarray(points, dtype=float))
    return points[(points > lower) & (points < upper)]


def truncate_set_inclusive(lower: float, upper: float, points) -> np.ndarray:
    """
    lower, the points strictly between, then upper.

    Interior points within half a day of either end are dropped, so the
    result is strictly ascending with lower and upper kept exactly.

    Args:
        lower: First point of the result
        upper: Last point of the result (must exceed lower)
        points: Candidate interior points, any order

    Returns
        Strictly ascending array starting at lower and ending at upper
    """
    if upper <= lower:
        raise ValueError(f'upper ({upper}) must be greater than lower ({lower})')
    points = np.unique(np.asarray(points, dtype=float))
    inner = points[(points >= lower + HALF_DAY) & (points <= upper - HALF_DAY)]
    return np.concatenate(([lower], _merge_close(inner), [upper]))


def get_integration_points(start: float, end: float, yield_curve, credit_curve) -> np.ndarray:
    """
    Points at which either curve changes its forward rate, on [start, end].

    Args:
        start: Start of the integration range
        end: End of the integration range
        yield_curve: Curve (or array of knot times)
        credit_curve: Curve (or array of knot times)

    Returns
        start, every knot of either curve strictly inside the range, end
    """
    knots = np.union1d(_knots(yield_curve), _knots(credit_curve))
    return truncate_set_inclusive(start, end, knots)
