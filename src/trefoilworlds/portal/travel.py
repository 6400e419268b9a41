"""
Transition Engine
=================
If you travel in a straight line from `start` to `end`, in which world do you
end up?

The line of travel is parameterized by arc length, x(t) = x0 + t vx and
y(t) = y0 + t vy with |(vx, vy)| == 1. Substituting it into the projected
outline equation gives a quartic in t whose real roots are exactly the places
where the line touches the trefoil's shadow. Each root inside the segment is
then tested against the 3D membrane, and every registered crossing reflects
the world through the label of the arc above it.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence, Union

import numba as nb
import numpy as np

from trefoilworlds.portal.constants import (
    Arc,
    NUM_WORLDS,
    OUTLINE_CONST,
    OUTLINE_RR,
    OUTLINE_RR2,
    OUTLINE_RRY,
    OUTLINE_Y3,
    arc_of_label,
)
from trefoilworlds.portal.membrane import (
    NO_CROSSING,
    classify,
    membrane_height,
    region_tests,
)
from trefoilworlds.portal.quartic import quartic

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

Vec3 = Union[Sequence[float], "npt.NDArray[np.float64]"]


@nb.jit(cache=True)
def outline_quartic(
    x0: float,
    y0: float,
    vx: float,
    vy: float,
) -> tuple[float, float, float, float, float]:
    """
    Coefficients of outline_residual(x0 + t vx, y0 + t vy) as a polynomial in t.

    Returns:
        (c0, c1, c2, c3, c4), lowest degree first.
    """
    # rr(t) = rr0 + rr1 t + rr2 t^2
    rr0 = x0 * x0 + y0 * y0
    rr1 = 2.0 * x0 * vx + 2.0 * y0 * vy
    rr2 = vx * vx + vy * vy

    c0 = (OUTLINE_RR2 * (rr0 * rr0)
          - OUTLINE_RRY * (rr0 * y0)
          + OUTLINE_Y3 * y0 * y0 * y0
          - OUTLINE_RR * rr0
          + OUTLINE_CONST)
    c1 = (OUTLINE_RR2 * (2.0 * rr0 * rr1)
          - OUTLINE_RRY * (rr1 * y0 + rr0 * vy)
          + 3.0 * OUTLINE_Y3 * y0 * y0 * vy
          - OUTLINE_RR * rr1)
    c2 = (OUTLINE_RR2 * (2.0 * rr0 * rr2 + rr1 * rr1)
          - OUTLINE_RRY * (rr2 * y0 + rr1 * vy)
          + 3.0 * OUTLINE_Y3 * y0 * vy * vy
          - OUTLINE_RR * rr2)
    c3 = (OUTLINE_RR2 * (2.0 * rr1 * rr2)
          - OUTLINE_RRY * (rr2 * vy)
          + OUTLINE_Y3 * vy * vy * vy)
    c4 = OUTLINE_RR2 * (rr2 * rr2)

    return c0, c1, c2, c3, c4


@nb.jit(cache=True)
def segment_roots(
    x0: float,
    y0: float,
    x1: float,
    y1: float,
) -> tuple[int, tuple[float, float, float, float], float]:
    """
    Roots of the outline quartic along the planar segment (x0, y0) -> (x1, y1).

    Returns:
        (count, roots, t_max). Roots are arc-length parameters in ascending
        order, not yet restricted to the segment. A segment with no planar
        extent has no roots.
    """
    vx = x1 - x0
    vy = y1 - y0
    t_max = math.sqrt(vx * vx + vy * vy)
    if t_max == 0.0:
        return 0, (math.nan, math.nan, math.nan, math.nan), 0.0

    vx /= t_max
    vy /= t_max

    c0, c1, c2, c3, c4 = outline_quartic(x0, y0, vx, vy)
    count, roots = quartic(c3 / c4, c2 / c4, c1 / c4, c0 / c4)
    return count, roots, t_max


@nb.jit(cache=True)
def travel_kernel(
    world: int,
    x0: float, y0: float, z0: float,
    x1: float, y1: float, z1: float,
) -> int:
    """Scalar core of `travel`."""
    count, roots, t_max = segment_roots(x0, y0, x1, y1)

    for i in range(count):
        root = roots[i]
        if 0.0 < root and root < t_max:
            f = root / t_max
            label = classify(
                x0 + (x1 - x0) * f,
                y0 + (y1 - y0) * f,
                z0 + (z1 - z0) * f,
            )
            if label != NO_CROSSING:
                world = label - world

    return world % NUM_WORLDS


def as_point(value: Vec3, name: str) -> npt.NDArray[np.float64]:
    point = np.asarray(value, dtype=np.float64).reshape(-1)
    if point.shape != (3,):
        raise ValueError(f"'{name}' must have exactly 3 coordinates, got shape {point.shape}.")
    return point


def travel(world: int, start: Vec3, end: Vec3) -> int:
    """
    World reached by moving in a straight line from `start` to `end`.

    Crossings are applied in the order they happen along the segment; each one
    reflects the then-current world through its arc label. The endpoints of
    the segment never count as crossings.

    Args:
        world: Current world index (any integer; only its value mod 6 matters).
        start: Start position in ambient space.
        end: End position in ambient space.

    Returns:
        The new world index, in [0, 6).
    """
    p0 = as_point(start, "start")
    p1 = as_point(end, "end")
    return int(travel_kernel(
        int(world),
        p0[0], p0[1], p0[2],
        p1[0], p1[1], p1[2],
    ))


@dataclass(frozen=True)
class Crossing:
    """A registered pass underneath the membrane."""
    t: float  # arc-length parameter along the planar segment
    position: tuple[float, float, float]
    tests: tuple[bool, bool, bool, bool]
    label: int
    membrane_z: float

    @property
    def arc(self) -> Arc:
        return arc_of_label(self.label)


def find_crossings(start: Vec3, end: Vec3) -> list[Crossing]:
    """
    All registered crossings of the segment, in the order they happen.

    Uses the same kernels as `travel`; folding `world = c.label - world` over
    the result and normalizing reproduces `travel`.
    """
    p0 = as_point(start, "start")
    p1 = as_point(end, "end")

    count, roots, t_max = segment_roots(p0[0], p0[1], p1[0], p1[1])

    crossings: list[Crossing] = []
    for root in roots[:count]:
        if not 0.0 < root < t_max:
            continue

        f = root / t_max
        x = p0[0] + (p1[0] - p0[0]) * f
        y = p0[1] + (p1[1] - p0[1]) * f
        z = p0[2] + (p1[2] - p0[2]) * f

        label = classify(x, y, z)
        if label == NO_CROSSING:
            continue

        tests = tuple(bool(v) for v in region_tests(x, y))
        crossings.append(Crossing(
            t=float(root),
            position=(float(x), float(y), float(z)),
            tests=tests,
            label=int(label),
            membrane_z=float(membrane_height(x, y)),
        ))
        logger.debug(f"Crossing under arc {arc_of_label(int(label)).name} at t={root:.6f}, tests={tests}")

    return crossings
