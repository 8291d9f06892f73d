"""
Root finding for credit curve calibration.

- bracket_root expands a starting interval geometrically until the
  function changes sign, respecting hard limits on the domain
- brent combines bisection, secant and inverse quadratic interpolation
- newton_raphson takes Newton steps inside a bracket, falling back to
  bisection whenever a step leaves the bracket or stalls
"""

import logging
import math
from collections.abc import Callable

from .exceptions import ConvergenceError

logger = logging.getLogger(__name__)

EXPANSION_RATIO = 1.6

EPS = 2.220446049250313e-16


def bracket_root(
    f: Callable[[float], float],
    x1: float,
    x2: float,
    x_min: float = -math.inf,
    x_max: float = math.inf,
    max_steps: int = 50,
) -> tuple[float, float]:
    """
    Find an interval on which f changes sign.

    The end with the smaller |f| is pushed outwards by EXPANSION_RATIO times
    the interval width; ends are clamped to [x_min, x_max].

    Args:
        f: Function to bracket
        x1: Initial lower end
        x2: Initial upper end
        x_min: Lowest admissible value
        x_max: Highest admissible value
        max_steps: Maximum number of expansions

    Returns
        (lower, upper) with f(lower) * f(upper) <= 0

    Raises
        ConvergenceError: If no sign change is found
    """
    if x1 > x2:
        x1, x2 = x2, x1
    x1, x2 = max(x1, x_min), min(x2, x_max)
    f1, f2 = f(x1), f(x2)
    lower_limit = x1 <= x_min
    upper_limit = x2 >= x_max

    for step in range(max_steps):
        if f1 * f2 <= 0:
            return x1, x2
        if lower_limit and upper_limit:
            break
        if (abs(f1) < abs(f2) and not lower_limit) or upper_limit:
            x1 += EXPANSION_RATIO * (x1 - x2)
            if x1 <= x_min:
                x1, lower_limit = x_min, True
            f1 = f(x1)
        else:
            x2 += EXPANSION_RATIO * (x2 - x1)
            if x2 >= x_max:
                x2, upper_limit = x_max, True
            f2 = f(x2)
        logger.debug('Bracket step %d: [%g, %g]', step, x1, x2)

    raise ConvergenceError(
        f'Failed to bracket root: f({x1})={f1}, f({x2})={f2} have the same sign'
    )


def brent(
    f: Callable[[float], float],
    a: float,
    b: float,
    tol: float = 1e-12,
    max_iter: int = 100,
) -> float:
    """
    Find a root of f in [a, b] using Brent's method.

    Args:
        f: Function to find root of
        a: One end of the bracket
        b: Other end (f(a) and f(b) must not share a sign)
        tol: Absolute tolerance on x
        max_iter: Maximum number of iterations

    Returns
        x such that f(x) ≈ 0

    Raises
        ConvergenceError: If [a, b] is not a bracket, or max_iter exceeded
    """
    fa, fb = f(a), f(b)
    if fa * fb > 0:
        raise ConvergenceError(
            f'Function values at bounds must have opposite signs: '
            f'f({a})={fa}, f({b})={fb}'
        )
    if fa == 0:
        return a
    if fb == 0:
        return b

    c, fc = b, fb
    d = e = b - a
    for _ in range(max_iter):
        if fb * fc > 0:
            c, fc = a, fa
            d = e = b - a
        if abs(fc) < abs(fb):
            a, b, c = b, c, b
            fa, fb, fc = fb, fc, fb

        tol1 = 2.0 * EPS * abs(b) + 0.5 * tol
        m = 0.5 * (c - b)
        if abs(m) <= tol1 or fb == 0:
            return b

        if abs(e) >= tol1 and abs(fa) > abs(fb):
            s = fb / fa
            if a == c:
                # secant
                p = 2.0 * m * s
                q = 1.0 - s
            else:
                # inverse quadratic interpolation
                q = fa / fc
                r = fb / fc
                p = s * (2.0 * m * q * (q - r) - (b - a) * (r - 1.0))
                q = (q - 1.0) * (r - 1.0) * (s - 1.0)
            if p > 0:
                q = -q
            p = abs(p)
            if 2.0 * p < min(3.0 * m * q - abs(tol1 * q), abs(e * q)):
                e, d = d, p / q
            else:
                d = e = m
        else:
            d = e = m

        a, fa = b, fb
        b += d if abs(d) > tol1 else math.copysign(tol1, m)
        fb = f(b)

    raise ConvergenceError(f"Brent's method did not converge in {max_iter} iterations")


def newton_raphson(
    f: Callable[[float], float],
    df: Callable[[float], float],
    x0: float,
    lower: float,
    upper: float,
    tol: float = 1e-12,
    max_iter: int = 100,
) -> float:
    """
    Newton-Raphson safeguarded by bisection.

    Args:
        f: Function to find root of
        df: Derivative of f
        x0: Initial guess inside [lower, upper]
        lower: Lower end of a bracket
        upper: Upper end of a bracket
        tol: Absolute tolerance on x
        max_iter: Maximum iterations

    Returns
        x such that f(x) ≈ 0

    Raises
        ConvergenceError: If [lower, upper] is not a bracket, or max_iter exceeded
    """
    f_lo, f_hi = f(lower), f(upper)
    if f_lo * f_hi > 0:
        raise ConvergenceError(
            f'Function values at bounds must have opposite signs: '
            f'f({lower})={f_lo}, f({upper})={f_hi}'
        )
    if f_lo == 0:
        return lower
    if f_hi == 0:
        return upper
    # orient so that f(lo) < 0 < f(hi)
    lo, hi = (lower, upper) if f_lo < 0 else (upper, lower)

    x = min(max(x0, min(lower, upper)), max(lower, upper))
    dx_old = dx = abs(upper - lower)
    fx, dfx = f(x), df(x)
    for _ in range(max_iter):
        out_of_bracket = ((x - hi) * dfx - fx) * ((x - lo) * dfx - fx) > 0
        if out_of_bracket or abs(2.0 * fx) > abs(dx_old * dfx):
            dx_old, dx = dx, 0.5 * (hi - lo)
            x = lo + dx
        else:
            dx_old, dx = dx, fx / dfx
            x -= dx
        if abs(dx) < tol:
            return x
        fx, dfx = f(x), df(x)
        if fx == 0:
            return x
        if fx < 0:
            lo = x
        else:
            hi = x

    raise ConvergenceError(f'Newton-Raphson did not converge in {max_iter} iterations')
