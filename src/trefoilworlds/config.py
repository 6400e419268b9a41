"""
Configuration & Global Constants
================================
This module serves as the central registry for simulation constants.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (speeds, start positions, colors)
   from being scattered throughout the entity and modeling code.
2. Driver settings: It groups the tick parameters of a headless run into one
   immutable object that the CLI builds from its arguments.

The numbers that define the membrane itself live in
`trefoilworlds.portal.constants`; they are a compatibility contract with the
shading replica and are not configuration.

Exports:
    DEFAULT_TIME_STEP (float): Seconds advanced per tick.
    PLAYER_SPEED (float): Player speed in ambient units per second.
    SimulationConfig: Parameters of a headless run.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

# Global Constants
DEFAULT_TIME_STEP: float = 1.0 / 60.0
DEFAULT_TICKS: int = 600

PLAYER_SPEED: float = 0.5
PLAYER_START: tuple[float, float, float] = (5.0, 0.0, 0.0)
MOUSE_SENSITIVITY: float = 3e-3
PITCH_LIMIT: float = math.pi / 2 - 0.001

LIGHT_DIRECTION: tuple[float, float, float] = (1.0, 1.0, 1.0)

# One RGBA per default ball, in the order of `default_balls()`
BALL_COLORS: tuple[tuple[float, float, float, float], ...] = (
    (0.6, 0.6, 0.8, 1.0),
    (0.8, 0.6, 0.2, 1.0),
    (0.2, 0.3, 0.9, 1.0),
)

# Radius scale of the ball icosahedron
BALL_SIZE: float = 0.1

# Radius of the tube drawn around the knot
TREFOIL_TUBE_RADIUS: float = 0.2


@dataclass(frozen=True)
class SimulationConfig:
    """Parameters of a headless simulation run."""
    ticks: int = DEFAULT_TICKS
    time_step: float = DEFAULT_TIME_STEP
    player_start: tuple[float, float, float] = PLAYER_START
    player_world: int = 0

    def __post_init__(self) -> None:
        if self.ticks < 0:
            raise ValueError(f"ticks must be non-negative, got {self.ticks}")
        if not self.time_step > 0.0:
            raise ValueError(f"time_step must be positive, got {self.time_step}")
