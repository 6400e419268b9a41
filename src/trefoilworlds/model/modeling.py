"""
Scene geometry.

Every triangle carries six RGBA colors, one per world. A fully transparent
channel (alpha 0) means the triangle does not exist in that world.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, TYPE_CHECKING

import numpy as np

from trefoilworlds.config import BALL_SIZE, TREFOIL_TUBE_RADIUS
from trefoilworlds.portal.constants import NUM_WORLDS

if TYPE_CHECKING:
    import numpy.typing as npt

TAU = 2.0 * math.pi
PHI = (1.0 + math.sqrt(5.0)) / 2.0

# Trefoil tube resolution: segments along the knot, quads around the tube
TREFOIL_SEGMENTS = 96
TREFOIL_SIDES = 12

RED = (1.0, 0.0, 0.0, 1.0)
GREEN = (0.0, 1.0, 0.0, 1.0)
BLUE = (0.0, 0.0, 1.0, 1.0)
GRAY = (0.5, 0.5, 0.5, 1.0)


@dataclass
class Triangle:
    """A flat-shaded triangle visible in up to six worlds."""
    vertices: npt.NDArray[np.float64]  # (3, 3)
    colors: npt.NDArray[np.float64]  # (6, 4)
    center: Optional[npt.NDArray[np.float64]] = None  # Overrides the centroid (e.g. ball center)
    ambient_factor: float = 0.2
    diffuse_factor: float = 0.8

    def __post_init__(self) -> None:
        self.vertices = np.asarray(self.vertices, dtype=np.float64)
        self.colors = np.asarray(self.colors, dtype=np.float64)
        if self.vertices.shape != (3, 3):
            raise ValueError(f"Expected vertices of shape (3, 3), got {self.vertices.shape}.")
        if self.colors.shape != (NUM_WORLDS, 4):
            raise ValueError(f"Expected colors of shape ({NUM_WORLDS}, 4), got {self.colors.shape}.")
        if self.center is not None:
            self.center = np.asarray(self.center, dtype=np.float64)

    def center_point(self) -> npt.NDArray[np.float64]:
        """Point whose world decides the triangle's visible channel."""
        if self.center is not None:
            return self.center
        return self.vertices.mean(axis=0)

    @property
    def normal(self) -> npt.NDArray[np.float64]:
        v1, v2, v3 = self.vertices
        n = np.cross(v2 - v1, v3 - v1)
        return n / np.linalg.norm(n)


def pack_triangles(
    triangles: Sequence[Triangle],
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """
    Stack triangles into arrays.

    Returns:
        vertices (N, 3, 3), colors (N, 6, 4) and centers (N, 3).
    """
    if not triangles:
        return np.empty((0, 3, 3)), np.empty((0, NUM_WORLDS, 4)), np.empty((0, 3))

    vertices = np.stack([tri.vertices for tri in triangles])
    colors = np.stack([tri.colors for tri in triangles])
    centers = np.stack([tri.center_point() for tri in triangles])
    return vertices, colors, centers


# ==========================================
# TREFOIL
# ==========================================

def trefoil_curve(s: float) -> npt.NDArray[np.float64]:
    """Point of the knot at parameter s."""
    return np.array([
        math.sin(s) + 2.0 * math.sin(2.0 * s),
        math.cos(s) - 2.0 * math.cos(2.0 * s),
        math.sin(3.0 * s),
    ])


def trefoil_derivative(s: float) -> npt.NDArray[np.float64]:
    return np.array([
        math.cos(s) + 4.0 * math.cos(2.0 * s),
        -math.sin(s) + 4.0 * math.sin(2.0 * s),
        3.0 * math.cos(3.0 * s),
    ])


def trefoil_tube(s: float, theta: float, radius: float = TREFOIL_TUBE_RADIUS) -> npt.NDArray[np.float64]:
    """
    Point on the tube around the knot.

    theta = 0 points straight down, which is the seam between worlds.
    """
    dx, dy, _ = trefoil_derivative(s)
    side = np.array([dy, -dx, 0.0])
    side /= np.linalg.norm(side)
    return trefoil_curve(s) + radius * (side * math.sin(theta) - np.array([0.0, 0.0, 1.0]) * math.cos(theta))


def _trefoil_colors(segment: int) -> npt.NDArray[np.float64]:
    if 28 <= segment <= 59:  # Arc C
        colors = [BLUE, GREEN, GREEN, BLUE, RED, RED]
    elif 60 <= segment <= 91:  # Arc A
        colors = [RED, RED, BLUE, GREEN, GREEN, BLUE]
    else:  # Arc B
        colors = [GREEN, BLUE, RED, RED, BLUE, GREEN]
    return np.array(colors)


def trefoil() -> Iterator[Triangle]:
    """The knot itself, drawn as a tube whose color depends on the arc and the world."""
    def f(a: int, b: int) -> npt.NDArray[np.float64]:
        s = a * TAU / TREFOIL_SEGMENTS
        u = (4 * b + 1) * TAU / (4 * TREFOIL_SIDES)
        return trefoil_tube(s, 4.0 * s + u)

    for a in range(TREFOIL_SEGMENTS):
        colors = _trefoil_colors(a)
        for b in range(TREFOIL_SIDES):
            v0 = f(a, b)
            v1 = f(a + 1, b)
            v2 = f(a, b + 1)
            v3 = f(a + 1, b + 1)

            yield Triangle(vertices=np.array([v0, v1, v2]), colors=colors)
            yield Triangle(vertices=np.array([v3, v2, v1]), colors=colors)


# ==========================================
# ENVIRONMENT
# ==========================================

def skybox() -> list[Triangle]:
    """A large tetrahedron around the scene with a distinct color per world."""
    colors = np.array([
        [0.2, 0.7, 1.0, 1.0],
        [0.2, 1.0, 0.7, 1.0],
        [0.7, 1.0, 0.2, 1.0],
        [0.7, 0.2, 1.0, 1.0],
        [1.0, 0.2, 0.7, 1.0],
        [1.0, 0.7, 0.2, 1.0],
    ])

    v0 = np.array([-100.0, -100.0, 100.0])
    v1 = np.array([-100.0, 100.0, -100.0])
    v2 = np.array([100.0, -100.0, -100.0])
    v3 = np.array([100.0, 100.0, 100.0])

    return [
        Triangle(vertices=np.array(face), colors=colors, ambient_factor=1.0, diffuse_factor=0.0)
        for face in ([v2, v1, v0], [v0, v1, v3], [v3, v2, v0], [v1, v2, v3])
    ]


def ground() -> list[Triangle]:
    """A gray floor below the knot, identical in every world."""
    colors = np.array([GRAY] * NUM_WORLDS)

    v0 = np.array([-100.0, -100.0, -2.0])
    v1 = np.array([100.0, -100.0, -2.0])
    v2 = np.array([100.0, 100.0, -2.0])
    v3 = np.array([-100.0, 100.0, -2.0])

    return [
        Triangle(vertices=np.array([v0, v1, v2]), colors=colors),
        Triangle(vertices=np.array([v2, v3, v0]), colors=colors),
    ]


# ==========================================
# BALLS
# ==========================================

# Icosahedron faces, by vertex name
_BALL_FACES = (
    ("ul", "ur", "fu"), ("ur", "ul", "bu"), ("dl", "dr", "bd"), ("dr", "dl", "fd"),
    ("rb", "rf", "ur"), ("rf", "rb", "dr"), ("lb", "lf", "dl"), ("lf", "lb", "ul"),
    ("fd", "fu", "rf"), ("fu", "fd", "lf"), ("bd", "bu", "lb"), ("bu", "bd", "rb"),
    ("fu", "lf", "ul"), ("fu", "ur", "rf"), ("fd", "dl", "lf"), ("fd", "rf", "dr"),
    ("bu", "ul", "lb"), ("bu", "rb", "ur"), ("bd", "lb", "dl"), ("bd", "dr", "rb"),
)

_BALL_VERTICES = {
    "ur": (1.0, 0.0, PHI), "dr": (1.0, 0.0, -PHI),
    "ul": (-1.0, 0.0, PHI), "dl": (-1.0, 0.0, -PHI),
    "rf": (PHI, 1.0, 0.0), "lf": (-PHI, 1.0, 0.0),
    "rb": (PHI, -1.0, 0.0), "lb": (-PHI, -1.0, 0.0),
    "fu": (0.0, PHI, 1.0), "bu": (0.0, -PHI, 1.0),
    "fd": (0.0, PHI, -1.0), "bd": (0.0, -PHI, -1.0),
}


def ball(
    center: npt.NDArray[np.float64],
    world: int,
    color: Sequence[float],
) -> list[Triangle]:
    """
    An icosahedron that exists only in `world`.

    All faces share the ball's center, so the whole ball is always seen in a
    single world.

    Raises:
        ValueError: If `world` is not in [0, 6).
    """
    if not 0 <= world < NUM_WORLDS:
        raise ValueError(f"World must be in [0, {NUM_WORLDS}), got {world}.")

    center = np.asarray(center, dtype=np.float64)
    colors = np.zeros((NUM_WORLDS, 4))
    colors[world] = color

    points = {name: center + BALL_SIZE * np.array(offset) for name, offset in _BALL_VERTICES.items()}

    return [
        Triangle(
            vertices=np.array([points[a], points[b], points[c]]),
            colors=colors,
            center=center,
        )
        for a, b, c in _BALL_FACES
    ]


def static_geometry() -> list[Triangle]:
    """Everything that never moves: the knot, the skybox and the ground."""
    return [*trefoil(), *skybox(), *ground()]
