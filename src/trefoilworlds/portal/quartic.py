"""
Closed-form polynomial solvers (degree 2 to 4).

No iteration is used anywhere: the quartic is factored into two quadratics
through the largest root of its resolvent cubic. Algorithms for the quadratic
and the cubic follow "Numerical Recipes in C", chapter 5.6.
"""
from __future__ import annotations

import math

import numba as nb

from trefoilworlds.portal.constants import PIVOT_EPSILON


@nb.jit(cache=True)
def quadratic(b: float, c: float) -> tuple[bool, float, float]:
    """
    Solve x^2 + b x + c = 0.

    Args:
        b: Linear coefficient.
        c: Constant coefficient.

    Returns:
        (ok, x_lo, x_hi). `ok` is False when the roots are complex, in which case
        both roots are NaN.
    """
    disc = b * b - 4.0 * c
    if disc < 0.0:
        return False, math.nan, math.nan

    # Adding same-signed terms avoids cancellation in x1; x2 comes from x1 * x2 = c.
    x1 = -(b + math.copysign(1.0, b) * math.sqrt(disc)) / 2.0
    if x1 == 0.0:
        # b == 0 and c == 0
        return True, 0.0, 0.0
    x2 = c / x1

    return True, min(x1, x2), max(x1, x2)


@nb.jit(cache=True)
def cubic(a1: float, a2: float, a3: float) -> float:
    """
    Largest real root of x^3 + a1 x^2 + a2 x + a3.

    A real cubic always has a real root, so this never fails.
    """
    a1 /= 3.0

    q = a1 * a1 - a2 / 3.0
    r = a1 * a1 * a1 + (a3 - a1 * a2) / 2.0
    q3 = q * q * q

    if q3 >= r * r:
        # Three real roots
        if q <= 0.0:
            # Triple root
            return -a1

        cos_theta = max(-1.0, min(1.0, r / math.sqrt(q3)))
        theta = math.acos(cos_theta)
        scale = -2.0 * math.sqrt(q)

        x1 = scale * math.cos(theta / 3.0) - a1
        x2 = scale * math.cos((theta + 2.0 * math.pi) / 3.0) - a1
        x3 = scale * math.cos((theta - 2.0 * math.pi) / 3.0) - a1

        return max(x1, max(x2, x3))

    # One real root. temp > 0 here since r * r > q3.
    temp = (math.sqrt(r * r - q3) + abs(r)) ** (1.0 / 3.0)
    return -math.copysign(1.0, r) * (temp + q / temp) - a1


@nb.jit(cache=True)
def quartic(a: float, b: float, c: float, d: float) -> tuple[int, tuple[float, float, float, float]]:
    """
    Real roots of x^4 + a x^3 + b x^2 + c x + d.

    Write the polynomial as (x^2 + p x + q)(x^2 + r x + s) and let
    alpha = a / 2 and t = (p - r) / 2. Matching coefficients gives

        alpha^2 - t^2 = p r
        t (q - s)     = alpha (b - p r) - c

    and eliminating q, s with q s = d leaves a cubic in t^2:

        0 = (t^2)^3 + (2 tmp1 - alpha^2) (t^2)^2
            + (tmp1^2 - 2 alpha tmp2 - 4 d) t^2 - tmp2^2

    with tmp1 = b - alpha^2 and tmp2 = alpha tmp1 - c. Its largest root pairs
    the real roots together whenever any exist.

    Args:
        a, b, c, d: Coefficients of the monic quartic, highest degree first.

    Returns:
        (count, roots) with count in {0, 2, 4}. The first `count` entries of
        `roots` are the real roots in ascending order; the rest are NaN.
    """
    alpha = a / 2.0

    tmp1 = b - alpha * alpha
    tmp2 = alpha * tmp1 - c

    tt = cubic(
        2.0 * tmp1 - alpha * alpha,
        tmp1 * tmp1 - 2.0 * alpha * tmp2 - 4.0 * d,
        -tmp2 * tmp2,
    )

    if tt > PIVOT_EPSILON:
        t = math.sqrt(tt)
        p = alpha + t
        r = alpha - t

        q_plus_s = b - p * r
        q_minus_s = (alpha * q_plus_s - c) / t

        q = (q_plus_s + q_minus_s) / 2.0
        s = (q_plus_s - q_minus_s) / 2.0
    else:
        # t == 0: both factors share p == r == alpha, so q and s are the roots
        # of z^2 - (q + s) z + q s with q s == d.
        p = alpha
        r = alpha

        ok, s, q = quadratic(-(b - alpha * alpha), d)
        if not ok:
            return 0, (math.nan, math.nan, math.nan, math.nan)

    ok0, lo0, hi0 = quadratic(p, q)
    ok1, lo1, hi1 = quadratic(r, s)

    if ok0 and ok1:
        x1 = max(lo0, lo1)
        x2 = min(hi0, hi1)
        return 4, (min(lo0, lo1), min(x1, x2), max(x1, x2), max(hi0, hi1))
    if ok0:
        return 2, (lo0, hi0, math.nan, math.nan)
    if ok1:
        return 2, (lo1, hi1, math.nan, math.nan)
    return 0, (math.nan, math.nan, math.nan, math.nan)
