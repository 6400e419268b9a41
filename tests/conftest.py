"""
Pytest configuration and shared fixtures for trefoilworlds tests.

Provides segments that cross the projected knot at a chosen point of the knot,
above or below the membrane.
"""

from __future__ import annotations

import math
import sys
from pathlib import Path
from typing import Callable, Tuple

import numpy as np
import pytest

# Add src to path
SRC_ROOT = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_ROOT))

from trefoilworlds.model.modeling import trefoil_curve, trefoil_derivative

Segment = Tuple[np.ndarray, np.ndarray]

# Knot parameters whose shadow point is far from every self-crossing of the
# shadow, with the arc label of the strand there.
ARC_SAMPLES = {
    "outer_B": (math.pi / 6, 5),   # (2.23, -0.13), z = 1
    "outer_B2": (math.pi / 2, 5),  # (1, 2), z = -1
    "outer_C": (5 * math.pi / 6, 3),  # (-1.23, -1.87), z = 1
    "outer_A": (3 * math.pi / 2, 1),  # (-1, 2), z = 1
    "inner_B": (0.1, 5),           # (0.50, -0.97), z = 0.30, inside r = 1.5
}


def make_segment_across(s: float, dz: float, half_length: float = 0.05) -> Segment:
    """
    Short horizontal segment through the shadow of knot point s, perpendicular
    to the shadow, at height knot_z + dz.
    """
    p = trefoil_curve(s)
    dx, dy, _ = trefoil_derivative(s)
    n = np.array([dy, -dx]) / math.hypot(dx, dy)

    z = p[2] + dz
    start = np.array([p[0] - half_length * n[0], p[1] - half_length * n[1], z])
    end = np.array([p[0] + half_length * n[0], p[1] + half_length * n[1], z])
    return start, end


@pytest.fixture
def segment_across() -> Callable[..., Segment]:
    """Factory for segments crossing the knot's shadow once."""
    return make_segment_across


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded random generator."""
    return np.random.default_rng(12345)
