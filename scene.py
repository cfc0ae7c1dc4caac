# scene.py

import math
import logging

import numpy as np
import pygame

import constants
from glyph_sampler import GlyphSampler
from message_lifecycle import MessageLifecycleController
from particle import random_color
from particle_pool import ParticlePool
from rocket import Rocket

logger = logging.getLogger("fireworks")


def _burst_color(rng: np.random.Generator):
    return random_color(rng, 120)


class Scene:
    """
    The world context: owns every active entity collection, the fragment
    pool, the random generator and the message lifecycle controller, and
    advances them once per tick.

    Data Contract:
    - Inputs:
        - config (dict): The 'fireworks' section of the config file.
        - rng (np.random.Generator): The master seeded random number generator.
        - bounds (tuple): The (width, height) of the canvas.
    - Outputs: None. This class modifies its internal state.
    - Side Effects: Draws onto the surface passed to draw()/on_frame().
    - Invariants:
        - An entity lives in at most one of rockets, fragments,
          message_particles or the pool at any time.
        - Per tick, rockets advance before fragments, fragments before
          message particles, and lifecycle transitions are evaluated last.
    """
    def __init__(self, config: dict, rng: np.random.Generator, bounds: tuple):
        self.config = config
        self.rng = rng
        self.width, self.height = bounds

        self.rockets = []
        self.fragments = []
        self.message_particles = []
        self.pool = ParticlePool(config.get('pool_size', constants.POOL_SIZE))

        self.tick = 0
        self.spawn_timer = 0
        self.spawn_interval = config.get('initial_spawn_interval', constants.INITIAL_SPAWN_INTERVAL)
        self.spawn_interval_range = tuple(config.get('spawn_interval_range', constants.SPAWN_INTERVAL_RANGE))

        sampler = GlyphSampler(font_name=config.get('font_name'))
        self.lifecycle = MessageLifecycleController(self, config.get('message', "Happy Birthday!"), sampler)

        logger.info(f"Scene created with bounds {self.bounds}.")

    @property
    def bounds(self):
        return (self.width, self.height)

    # --- Event hooks ---

    def on_resize(self, width: int, height: int):
        self.width, self.height = width, height
        logger.info(f"Canvas resized to {width}x{height}.")

    def on_frame(self, surface=None):
        """Advances one tick and, if a surface is given, renders it."""
        self.update()
        if surface is not None:
            self.draw(surface)

    def on_pointer_down(self, x: float, y: float):
        """Launches one or two rockets near the pointer."""
        count = int(self.rng.integers(*constants.POINTER_ROCKET_RANGE))
        low = constants.POINTER_EDGE_MARGIN
        high = max(low, self.width - constants.POINTER_EDGE_MARGIN)
        for _ in range(count):
            spread = float(self.rng.uniform(-constants.POINTER_SPREAD, constants.POINTER_SPREAD))
            self.launch_rocket(min(max(x + spread, low), high))

    def on_key(self, key: str):
        """The space bar launches a low-fused rocket that will form the message."""
        if key == ' ':
            rocket = self.launch_rocket(float(self.rng.uniform(self.width * 0.2, self.width * 0.8)))
            rocket.fuse_height = float(self.rng.uniform(self.height * 0.12, self.height * 0.3))
            self.lifecycle.request_message()

    # --- Spawning ---

    def launch_rocket(self, x=None) -> Rocket:
        rocket = Rocket(self.rng, self.bounds, x)
        self.rockets.append(rocket)
        return rocket

    def spawn_burst(self, x: float, y: float, count: int, speed_range, life=None, life_range=None,
                    size_range=None, vertical_scale=1.0, color_fn=None) -> int:
        """
        Spawns a radial burst of fragments drawn from the pool.

        - Inputs:
            - x, y: Burst center.
            - count (int): Number of fragments.
            - speed_range (tuple): [low, high) initial speed.
            - life (float) or life_range (tuple): Fixed or random lifetime in
              ticks. The fragment's own default applies if neither is given.
            - size_range (tuple): Random diameter range, or None for the default.
            - vertical_scale (float): Multiplier on the vertical velocity.
            - color_fn (callable): rng -> RGB, evaluated per fragment.
              Defaults to random channels in [120, 255].
        - Outputs: int - The number of fragments spawned.
        """
        rng = self.rng
        if color_fn is None:
            color_fn = _burst_color

        for _ in range(count):
            angle = float(rng.uniform(0, 2 * math.pi))
            power = float(rng.uniform(*speed_range))
            fragment_life = life
            if fragment_life is None and life_range is not None:
                fragment_life = float(rng.uniform(*life_range))
            size = float(rng.uniform(*size_range)) if size_range is not None else None

            fragment = self.pool.acquire()
            fragment.reset(
                rng, x, y,
                math.cos(angle) * power,
                math.sin(angle) * power * vertical_scale,
                color=color_fn(rng), life=fragment_life, size=size,
            )
            self.fragments.append(fragment)
        return count

    def _advance_spawner(self):
        self.spawn_timer += 1
        if self.spawn_timer > self.spawn_interval:
            self.spawn_timer = 0
            self.spawn_interval = int(self.rng.integers(*self.spawn_interval_range))
            self.launch_rocket()

    # --- Per-tick update ---

    def update(self):
        """
        Runs one tick: spawner, rockets, fragments, message particles, then
        the lifecycle transitions.
        """
        self.tick += 1
        bounds = self.bounds
        self._advance_spawner()

        # Explosions add fragments, never rockets, so iterating the live list is safe.
        for rocket in self.rockets:
            rocket.update(self.tick, bounds)
            if not rocket.exploded and rocket.fuse_expired:
                rocket.explode(self)
        self.rockets = [r for r in self.rockets if not r.is_expired(bounds)]

        survivors = []
        for fragment in self.fragments:
            fragment.update(self.tick, bounds)
            if fragment.is_expired(bounds):
                self.pool.release(fragment)
            else:
                survivors.append(fragment)
        self.fragments = survivors

        for particle in self.message_particles:
            particle.update(self.tick, bounds)

        self.lifecycle.update(self.tick)

    def draw(self, surface: pygame.Surface):
        for rocket in self.rockets:
            rocket.draw(surface)
        for fragment in self.fragments:
            fragment.draw(surface)
        for particle in self.message_particles:
            particle.draw(surface)

    def stats(self) -> dict:
        """Entity counts for periodic logging."""
        return {
            'tick': self.tick,
            'rockets': len(self.rockets),
            'fragments': len(self.fragments),
            'message_particles': len(self.message_particles),
            'pooled': len(self.pool),
            'pool_allocations': self.pool.allocations,
            'state': self.lifecycle.state.value,
            'explosions_remaining': self.lifecycle.explosions_remaining,
        }
