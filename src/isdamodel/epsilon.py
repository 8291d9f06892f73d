"""
The epsilon function family.

The leg integrals of the ISDA model reduce to expressions of the form
(e^x - 1)/x and its derivatives. Evaluated directly these lose all
precision as x -> 0, so each function switches to its Taylor series below
a threshold.

    epsilon(x)    = (e^x - 1)/x                      = sum x^n/(n+1)!
    epsilon_p(x)  = ((x - 1)e^x + 1)/x^2             = sum x^n/(n!(n+2))
    epsilon_pp(x) = (e^x(x^2 - 2x + 2) - 2)/x^3      = sum x^n/(n!(n+3))

epsilon_p is the derivative of epsilon and epsilon_pp the derivative of
epsilon_p.
"""

import numpy as np

TAYLOR_THRESHOLD = 1e-5

# closed form of epsilon_pp cancels to O(x^3)
TAYLOR_THRESHOLD_PP = 1e-3


def epsilon(x: float) -> float:
    """(e^x - 1)/x, equal to 1 at x = 0."""
    if abs(x) > TAYLOR_THRESHOLD:
        return np.expm1(x) / x
    return 1.0 + x * (1.0 / 2 + x * (1.0 / 6 + x * (1.0 / 24 + x / 120)))


def epsilon_p(x: float) -> float:
    """Derivative of epsilon, equal to 1/2 at x = 0."""
    if abs(x) > TAYLOR_THRESHOLD:
        return ((x - 1.0) * np.expm1(x) + x) / (x * x)
    return 1.0 / 2 + x * (1.0 / 3 + x * (1.0 / 8 + x * (1.0 / 30 + x / 144)))


def epsilon_pp(x: float) -> float:
    """Second derivative of epsilon, equal to 1/3 at x = 0."""
    if abs(x) > TAYLOR_THRESHOLD_PP:
        return (np.expm1(x) * (x * x - 2.0 * x + 2.0) + x * (x - 2.0)) / (x * x * x)
    return 1.0 / 3 + x * (
        1.0 / 4 + x * (1.0 / 10 + x * (1.0 / 36 + x * (1.0 / 168 + x / 960)))
    )
