"""
Simulation Driver
=================
Owns the entities and advances them one tick at a time.

Every tick moves the player first and then each ball. Entities never read
each other's state, so the order between them does not matter; what matters
is that each entity's world after tick N is its input at tick N + 1, which
holds because the world is stored on the entity itself.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from trefoilworlds.config import SimulationConfig
from trefoilworlds.model.entities import Ball, Player, default_balls
from trefoilworlds.model.modeling import Triangle, static_geometry

logger = logging.getLogger(__name__)


class Simulation:
    """A player and a set of balls moving through the six worlds."""

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        balls: Optional[list[Ball]] = None,
    ) -> None:
        self.config = config or SimulationConfig()
        self.player = Player(self.config.player_start, self.config.player_world)
        self.balls = default_balls() if balls is None else balls
        self.time = 0.0
        self.ticks = 0
        self._static: Optional[list[Triangle]] = None

    def tick(self, dt: Optional[float] = None, keys: Iterable[str] = ()) -> None:
        """
        Advance by one step.

        Args:
            dt: Seconds to advance. Defaults to the configured time step.
            keys: Keys held down during the step (drives the player).
        """
        dt = self.config.time_step if dt is None else dt

        self.player.move(keys, dt)
        for ball in self.balls:
            ball.advance(dt)

        self.time += dt
        self.ticks += 1

    def run(self, ticks: Optional[int] = None, keys: Iterable[str] = ()) -> None:
        """Run `ticks` steps (the configured number by default) with the same held keys."""
        ticks = self.config.ticks if ticks is None else ticks
        keys = tuple(keys)

        logger.info(f"Running {ticks} ticks of {self.config.time_step:.4f} s.")
        for _ in range(ticks):
            self.tick(keys=keys)
        logger.info(f"Finished at t={self.time:.3f} s. {self.summary()}")

    def worlds(self) -> dict[str, int]:
        """Current world of every entity, by name."""
        out = {"Player": self.player.world}
        for ball in self.balls:
            out[ball.name] = ball.world
        return out

    def summary(self) -> str:
        return ", ".join(f"{name}: world {world}" for name, world in self.worlds().items())

    def static_geometry(self) -> list[Triangle]:
        """Decorative geometry, built once."""
        if self._static is None:
            self._static = static_geometry()
            logger.debug(f"Built {len(self._static)} static triangles.")
        return self._static

    def frame_geometry(self) -> list[Triangle]:
        """Triangles of everything that moves, for the current tick."""
        return [tri for ball in self.balls for tri in ball.geometry()]
