"""
Membrane classification.

Given a point whose projection lies on the trefoil's planar outline, decide
whether the point is below the knotted membrane and which arc of the knot
diagram sits above it. The scalar kernels are used by the transition engine;
the array variants mirror them for the shading replica and must agree with
them exactly.
"""
from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numba as nb
import numpy as np

from trefoilworlds.portal.constants import (
    INNER_ARC_OFFSET,
    INNER_RR,
    OUTLINE_CONST,
    OUTLINE_RR,
    OUTLINE_RR2,
    OUTLINE_RRY,
    OUTLINE_Y3,
    SQRT_3,
    TORUS_RR_CENTER,
    TORUS_RR_SCALE,
)

if TYPE_CHECKING:
    import numpy.typing as npt

NO_CROSSING: int = 0


@nb.jit(cache=True)
def outline_residual(x: float, y: float) -> float:
    """Left-hand side of the projected outline equation; zero on the outline."""
    rr = x * x + y * y
    return (
        OUTLINE_RR2 * rr * rr
        - OUTLINE_RRY * rr * y
        + OUTLINE_Y3 * y * y * y
        - OUTLINE_RR * rr
        + OUTLINE_CONST
    )


@nb.jit(cache=True)
def region_tests(x: float, y: float) -> tuple[bool, bool, bool, bool]:
    """
    The four half-plane/disk tests that split the plane into twelve regions.

    Returns:
        (x > 0, x < y sqrt3, x < -y sqrt3, r > 1.5)
    """
    return (
        x > 0.0,
        x < y * SQRT_3,
        x < -y * SQRT_3,
        x * x + y * y > INNER_RR,
    )


@nb.jit(cache=True)
def membrane_height(x: float, y: float) -> float:
    """
    Height z* of the membrane above (x, y).

    The sign picks the strand of the torus the knot runs on: negative when an
    odd number of the region tests hold.
    """
    t1, t2, t3, t4 = region_tests(x, y)
    rr = x * x + y * y

    d = rr - TORUS_RR_CENTER
    # Non-negative for rr in [1, 9], which holds on the outline.
    radicand = max(0.0, 1.0 - d * d / TORUS_RR_SCALE)

    held = int(t1) + int(t2) + int(t3) + int(t4)
    sign = -1.0 if held % 2 == 1 else 1.0
    return sign * math.sqrt(radicand)


@nb.jit(cache=True)
def arc_label(t1: bool, t2: bool, t3: bool, t4: bool) -> int:
    """Transition label of the arc for the given test outcomes (A = 1, B = 5, C = 3)."""
    if t1:
        label = 3 if t3 else 5
    else:
        label = 1 if t2 else 3
    if not t4:
        label += INNER_ARC_OFFSET
    return label


@nb.jit(cache=True)
def classify(x: float, y: float, z: float) -> int:
    """
    Classify a candidate crossing point.

    Args:
        x, y, z: A point whose projection lies on the trefoil outline.

    Returns:
        The arc label to reflect the world through, or NO_CROSSING when the
        point is not strictly below the membrane.
    """
    if not z < membrane_height(x, y):
        return NO_CROSSING
    t1, t2, t3, t4 = region_tests(x, y)
    return arc_label(t1, t2, t3, t4)


# ==========================================
# ARRAY VARIANTS (SHADING REPLICA)
# ==========================================

def region_tests_array(
    x: npt.NDArray[np.float64],
    y: npt.NDArray[np.float64],
) -> npt.NDArray[np.bool_]:
    """
    Vectorized `region_tests`.

    Returns:
        Boolean array of shape (4, N).
    """
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    return np.stack([
        x > 0.0,
        x < y * SQRT_3,
        x < -y * SQRT_3,
        x * x + y * y > INNER_RR,
    ])


def membrane_height_array(
    x: npt.NDArray[np.float64],
    y: npt.NDArray[np.float64],
) -> npt.NDArray[np.float64]:
    """Vectorized `membrane_height`."""
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    tests = region_tests_array(x, y)
    rr = x * x + y * y

    d = rr - TORUS_RR_CENTER
    radicand = np.maximum(0.0, 1.0 - d * d / TORUS_RR_SCALE)

    sign = np.where(tests.sum(axis=0) % 2 == 1, -1.0, 1.0)
    return sign * np.sqrt(radicand)


def classify_points(points: npt.NDArray[np.float64]) -> npt.NDArray[np.int64]:
    """
    Vectorized `classify`.

    Args:
        points: (N, 3) array of candidate crossing points.

    Returns:
        (N,) array of arc labels, NO_CROSSING where the point is not below the membrane.

    Raises:
        ValueError: If `points` is not of shape (N, 3).
    """
    pts = np.asarray(points, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[1] != 3:
        raise ValueError(f"Expected shape (N, 3), got {pts.shape}.")

    x, y, z = pts[:, 0], pts[:, 1], pts[:, 2]
    t1, t2, t3, t4 = region_tests_array(x, y)

    labels = np.where(t1, np.where(t3, 3, 5), np.where(t2, 1, 3))
    labels = labels + np.where(t4, 0, INNER_ARC_OFFSET)

    below = z < membrane_height_array(x, y)
    return np.where(below, labels, NO_CROSSING).astype(np.int64)
