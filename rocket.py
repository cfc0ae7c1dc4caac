# rocket.py

import math
import logging
from collections import deque

import numpy as np
import pygame

import constants
from particle import Entity, draw_soft_circle

logger = logging.getLogger("fireworks")


class Rocket(Entity):
    """
    An ascending projectile that explodes once, either when it climbs above
    its fuse height or when it slows down near its apex.

    State machine: ascending -> exploded (terminal). The scene removes the
    rocket on the frame it explodes or leaves the screen.
    """
    def __init__(self, rng: np.random.Generator, bounds, x=None):
        width, height = bounds
        self.x = x if x is not None else float(rng.uniform(width * 0.15, width * 0.85))
        self.y = height + float(rng.uniform(10, 80))
        self.vx = float(rng.uniform(-0.4, 0.4))
        self.vy = float(rng.uniform(-11.5, -8.5))
        self.size = float(rng.uniform(3, 5))
        self.color = (int(rng.integers(200, 256)), int(rng.integers(140, 221)), int(rng.integers(100, 201)))
        self.trail = deque(maxlen=constants.ROCKET_TRAIL_LENGTH)  # Most recent last
        self.age = 0
        self.fuse_height = float(rng.uniform(height * 0.2, height * 0.45))
        self.exploded = False

    def update(self, tick: int = 0, bounds=None):
        """
        Moves the rocket one tick under a fraction of gravity, records the
        trail and applies the sinusoidal wobble.
        """
        self.age += 1
        self.vy += constants.GRAVITY * constants.ROCKET_GRAVITY_SCALE
        self.vx += constants.WIND * 0.001
        self.x += self.vx
        self.y += self.vy

        self.trail.append((self.x, self.y))

        self.x += math.sin(self.age * constants.ROCKET_WOBBLE_FREQUENCY) * constants.ROCKET_WOBBLE_AMPLITUDE

    @property
    def fuse_expired(self) -> bool:
        """True once the rocket is above its fuse height or has (nearly) stopped climbing."""
        return self.y < self.fuse_height or self.vy > constants.ROCKET_APEX_VY

    def explode(self, scene) -> int:
        """
        Bursts the rocket into fragments owned by the scene.

        Registers the explosion with the scene's lifecycle controller. If it is
        the message-triggering explosion, a dense slow burst is spawned and the
        explosion center is handed off as the message anchor.

        - Outputs: int - The number of fragments spawned.
        - Raises: RuntimeError if the rocket has already exploded.
        """
        if self.exploded:
            raise RuntimeError("Rocket has already exploded.")
        self.exploded = True

        lifecycle = scene.lifecycle
        rng = scene.rng
        triggers_message = lifecycle.register_explosion()

        if triggers_message:
            count = scene.spawn_burst(
                self.x, self.y,
                count=constants.MESSAGE_BURST_COUNT,
                speed_range=constants.MESSAGE_BURST_SPEED_RANGE,
                life=constants.MESSAGE_BURST_LIFE,
                vertical_scale=constants.BURST_VERTICAL_SCALE,
            )
            lifecycle.begin_formation(self.x, self.y)
        else:
            count = scene.spawn_burst(
                self.x, self.y,
                count=int(rng.integers(*constants.BURST_COUNT_RANGE)),
                speed_range=constants.BURST_SPEED_RANGE,
                life_range=constants.BURST_LIFE_RANGE,
                vertical_scale=constants.BURST_VERTICAL_SCALE,
            )

        logger.debug(
            f"Rocket exploded at ({self.x:.1f}, {self.y:.1f}) into {count} fragments. "
            f"Message={triggers_message}"
        )
        return count

    def offscreen(self, bounds) -> bool:
        width = bounds[0]
        return (self.y < -constants.ROCKET_TOP_MARGIN
                or self.x < -constants.ROCKET_SIDE_MARGIN
                or self.x > width + constants.ROCKET_SIDE_MARGIN)

    def is_expired(self, bounds) -> bool:
        return self.exploded or self.offscreen(bounds)

    def draw(self, surface: pygame.Surface):
        draw_soft_circle(surface, self.x, self.y, self.size, self.color, 255)

        # Oldest samples are faint and thin, newest bright and thick
        n = len(self.trail)
        for idx, (tx, ty) in enumerate(self.trail, start=1):
            frac = idx / n
            alpha = 10 + frac * (180 - 10)
            size = 1.2 + frac * (4.6 - 1.2)
            draw_soft_circle(surface, tx, ty, size, self.color, alpha)
