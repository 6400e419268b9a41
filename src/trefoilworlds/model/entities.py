"""
Movable entities.

Each entity owns its world index. The index only ever changes by passing the
entity's motion segment through `travel`, once per tick.
"""
from __future__ import annotations

import logging
import math
from typing import Callable, Iterable, Optional, Sequence, TYPE_CHECKING

import numpy as np

from trefoilworlds.config import (
    BALL_COLORS,
    MOUSE_SENSITIVITY,
    PITCH_LIMIT,
    PLAYER_SPEED,
    PLAYER_START,
)
from trefoilworlds.model.modeling import Triangle, ball
from trefoilworlds.portal.constants import NUM_WORLDS, arc_of_label
from trefoilworlds.portal.travel import find_crossings, travel

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

Path = Callable[[float], "npt.NDArray[np.float64]"]

# Held key -> direction in the player's frame (before yaw)
KEY_DIRECTIONS: dict[str, tuple[float, float, float]] = {
    " ": (0.0, 0.0, 1.0),
    "shift": (0.0, 0.0, -1.0),
    "w": (-1.0, 0.0, 0.0),
    "s": (1.0, 0.0, 0.0),
    "a": (0.0, -1.0, 0.0),
    "d": (0.0, 1.0, 0.0),
}


def _move(name: str, world: int, start: npt.NDArray[np.float64], end: npt.NDArray[np.float64]) -> int:
    """Advance one entity along a segment and log any change of world."""
    new_world = travel(world, start, end)

    if logger.isEnabledFor(logging.DEBUG):
        for crossing in find_crossings(start, end):
            logger.debug(
                f"{name} passed under arc {arc_of_label(crossing.label).name} "
                f"at {np.round(crossing.position, 3).tolist()}"
            )
    if new_world != world % NUM_WORLDS:
        logger.info(f"{name} moved from world {world} to world {new_world}.")

    return new_world


class Player:
    """
    The viewer. Yaw `theta` turns around +z, pitch `phi` tilts the view.
    """

    def __init__(
        self,
        position: Sequence[float] = PLAYER_START,
        world: int = 0,
    ) -> None:
        self.position = np.asarray(position, dtype=np.float64)
        self.theta = 0.0
        self.phi = 0.0
        self.world = world % NUM_WORLDS

    def __repr__(self) -> str:
        return f"Player(position={self.position.tolist()}, world={self.world})"

    def look(self, dx: float, dy: float) -> None:
        """Turn by a mouse movement in pixels. Pitch stays just short of straight up/down."""
        self.theta += dx * MOUSE_SENSITIVITY
        self.phi -= dy * MOUSE_SENSITIVITY
        self.phi = max(-PITCH_LIMIT, min(PITCH_LIMIT, self.phi))

    def eye(self) -> npt.NDArray[np.float64]:
        """Camera position; the eye sits at the player's position."""
        return self.position.copy()

    def look_direction(self) -> npt.NDArray[np.float64]:
        """Unit vector the player faces."""
        st, ct = math.sin(self.theta), math.cos(self.theta)
        sp, cp = math.sin(self.phi), math.cos(self.phi)
        return np.array([ct * cp, -st * cp, -sp])

    def velocity(self, keys: Iterable[str], dt: float, speed: float = PLAYER_SPEED) -> npt.NDArray[np.float64]:
        """Displacement over `dt` for the given set of held keys, rotated into the world frame."""
        v = np.zeros(3)
        for key in keys:
            direction = KEY_DIRECTIONS.get(key.lower())
            if direction is not None:
                v += np.array(direction) * dt * speed

        # Rotate by -theta around z
        c, s = math.cos(-self.theta), math.sin(-self.theta)
        return np.array([c * v[0] - s * v[1], s * v[0] + c * v[1], v[2]])

    def move(self, keys: Iterable[str], dt: float) -> None:
        self.travel(self.velocity(keys, dt))

    def travel(self, v: Sequence[float]) -> None:
        """Move by `v`, updating the world if the move passes under the membrane."""
        new_position = self.position + np.asarray(v, dtype=np.float64)
        self.world = _move("Player", self.world, self.position, new_position)
        self.position = new_position


class Ball:
    """A ball that follows a closed path and lives in exactly one world at a time."""

    def __init__(
        self,
        color: Sequence[float],
        world: int,
        path: Path,
        name: Optional[str] = None,
    ) -> None:
        self.color = tuple(color)
        self.path = path
        self.t = 0.0
        self.position = np.asarray(path(0.0), dtype=np.float64)
        self.world = world % NUM_WORLDS
        self.name = name or "Ball"

    def __repr__(self) -> str:
        return f"Ball(name='{self.name}', position={self.position.tolist()}, world={self.world})"

    def advance(self, dt: float) -> None:
        """Follow the path for `dt` seconds."""
        t = self.t + dt
        position = np.asarray(self.path(t), dtype=np.float64)
        self.world = _move(self.name, self.world, self.position, position)
        self.t = t
        self.position = position

    def geometry(self) -> list[Triangle]:
        return ball(self.path(self.t), self.world, self.color)


# ==========================================
# DEFAULT PATHS
# ==========================================

def circle_path(t: float) -> npt.NDArray[np.float64]:
    """Circle of radius 2 in the plane z = 0."""
    return np.array([2.0 * math.sin(t), -2.0 * math.cos(t), 0.0])


def loop_path(t: float) -> npt.NDArray[np.float64]:
    """Vertical unit circle centered at (0.1, -3, 0)."""
    return np.array([0.1, -3.0 + math.cos(t), math.sin(t)])


def knot_path(t: float) -> npt.NDArray[np.float64]:
    """The trefoil itself, shifted slightly in y and lifted by 0.5."""
    return np.array([
        math.sin(t) + 2.0 * math.sin(2.0 * t),
        math.cos(t) - 2.0 * math.cos(2.0 * t) + 0.1,
        math.sin(3.0 * t) + 0.5,
    ])


def default_balls() -> list[Ball]:
    return [
        Ball(BALL_COLORS[0], 0, circle_path, name="circle ball"),
        Ball(BALL_COLORS[1], 3, loop_path, name="loop ball"),
        Ball(BALL_COLORS[2], 3, knot_path, name="knot ball"),
    ]
