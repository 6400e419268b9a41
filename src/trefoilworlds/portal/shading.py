"""
Shading replica of the transition engine.

A point of the scene is drawn with the color channel of the world it lies in
as seen from the eye, which is whatever world you would reach by walking from
the eye to the point. This module runs that walk for whole arrays of points
with the very kernels `travel` uses, so the drawn scene and the simulated
entities can never disagree.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

import numba as nb
import numpy as np

from trefoilworlds.portal.constants import NUM_WORLDS
from trefoilworlds.portal.travel import Vec3, as_point, travel_kernel

if TYPE_CHECKING:
    import numpy.typing as npt


@nb.jit(cache=True)
def _seen_worlds(
    eye: npt.NDArray[np.float64],
    eye_world: int,
    points: npt.NDArray[np.float64],
) -> npt.NDArray[np.int64]:
    out = np.empty(points.shape[0], dtype=np.int64)
    for i in range(points.shape[0]):
        out[i] = travel_kernel(
            eye_world,
            eye[0], eye[1], eye[2],
            points[i, 0], points[i, 1], points[i, 2],
        )
    return out


def seen_worlds(
    eye: Vec3,
    eye_world: int,
    points: npt.NDArray[np.float64],
) -> npt.NDArray[np.int64]:
    """
    World of every point as seen from the eye.

    Args:
        eye: Eye position in ambient space.
        eye_world: World the eye is in.
        points: (N, 3) array of positions.

    Returns:
        (N,) array of world indices in [0, 6).

    Raises:
        ValueError: If `points` is not of shape (N, 3).
    """
    pts = np.ascontiguousarray(points, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[1] != 3:
        raise ValueError(f"Expected shape (N, 3), got {pts.shape}.")
    return _seen_worlds(as_point(eye, "eye"), int(eye_world), pts)


def select_channel(
    colors: npt.NDArray[np.float64],
    worlds: npt.NDArray[np.int64],
) -> npt.NDArray[np.float64]:
    """
    Pick one RGBA channel per item.

    Args:
        colors: (N, 6, 4) array, one RGBA color per world.
        worlds: (N,) array of world indices.

    Returns:
        (N, 4) array of the visible colors.

    Raises:
        ValueError: If the shapes do not match.
    """
    colors = np.asarray(colors, dtype=np.float64)
    worlds = np.asarray(worlds, dtype=np.int64)
    if colors.ndim != 3 or colors.shape[1:] != (NUM_WORLDS, 4):
        raise ValueError(f"Expected colors of shape (N, {NUM_WORLDS}, 4), got {colors.shape}.")
    if worlds.shape != (colors.shape[0],):
        raise ValueError(f"Expected worlds of shape ({colors.shape[0]},), got {worlds.shape}.")

    return colors[np.arange(colors.shape[0]), worlds % NUM_WORLDS]
