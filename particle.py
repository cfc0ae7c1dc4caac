# particle.py

import math
import pygame
import pygame.gfxdraw
import numpy as np
import constants


def random_color(rng: np.random.Generator, low: int, high: int = 255):
    """Draws an RGB tuple with every channel in [low, high]."""
    return tuple(int(c) for c in rng.integers(low, high + 1, size=3))


def pastel_color(rng: np.random.Generator):
    """Random pastel-biased color (all channels bright)."""
    return random_color(rng, *constants.PASTEL_CHANNEL_RANGE)


def jitter_color(rng: np.random.Generator, color, amount: float):
    """Shifts each channel by U(-amount, amount), clamped to [0, 255]."""
    shifted = np.asarray(color, dtype=float) + rng.uniform(-amount, amount, size=3)
    return tuple(int(c) for c in np.clip(shifted, 0, 255))


def draw_soft_circle(surface: pygame.Surface, x: float, y: float, size: float, color, alpha: float):
    """
    Draws an alpha-blended filled circle of the given diameter.
    Points far outside the surface are skipped; gfxdraw takes 16-bit coordinates.
    """
    alpha = int(min(255, max(0, alpha)))
    if alpha == 0:
        return
    width, height = surface.get_size()
    if not (-size <= x <= width + size and -size <= y <= height + size):
        return
    radius = max(1, int(size / 2))
    pygame.gfxdraw.filled_circle(surface, int(x), int(y), radius, (*color, alpha))


class Entity:
    """
    Common interface for everything the scene advances once per tick.

    Data Contract:
    - update(tick, bounds): advance one tick. bounds is (width, height).
    - draw(surface): pure rendering side effect.
    - is_expired(bounds): True once the owning collection should drop it.
    """

    def update(self, tick: int, bounds):
        raise NotImplementedError

    def draw(self, surface: pygame.Surface):
        raise NotImplementedError

    def is_expired(self, bounds) -> bool:
        raise NotImplementedError


class FragmentParticle(Entity):
    """
    A free-flying, fading point produced by an explosion.

    Fragments are allocated once and recycled through the ParticlePool, so
    the constructor leaves the particle dead; reset() brings it to life.

    Invariants: dead becomes True once age > life or the fragment has fallen
    FRAGMENT_BOTTOM_MARGIN pixels below the canvas.
    """
    def __init__(self):
        self.x = 0.0
        self.y = 0.0
        self.vx = 0.0
        self.vy = 0.0
        self.size = 3.0
        self.color = constants.WHITE
        self.life = 80.0
        self.age = 0
        self.dead = True
        self.alpha = 255.0

    def reset(self, rng: np.random.Generator, x: float, y: float, vx: float, vy: float,
              color=None, life=None, size=None):
        """
        Reinitializes every field for reuse.

        - Inputs:
            - rng: Source for the randomized size, life and default color.
            - x, y, vx, vy: Starting position and velocity.
            - color: RGB tuple. A warm random color is drawn if omitted.
            - life: Lifetime in ticks. Drawn from [60, 160) if omitted.
            - size: Diameter in pixels. Drawn from [2.2, 5.2] if omitted.
        """
        self.x = x
        self.y = y
        self.vx = vx
        self.vy = vy
        self.size = size if size is not None else float(rng.uniform(2.2, 5.2))
        if color is None:
            color = (int(rng.integers(200, 256)), int(rng.integers(120, 256)), int(rng.integers(120, 256)))
        self.color = color
        self.life = life if life is not None else float(rng.uniform(60, 160))
        self.age = 0
        self.dead = False
        self.alpha = 255.0
        return self

    def update(self, tick: int, bounds):
        """
        Integrates one physics tick: gravity, drift, friction, then fade.
        v_new = v_old + g
        p_new = p_old + v_new
        """
        self.age += 1
        self.vy += constants.GRAVITY
        self.vx += constants.WIND * 0.005
        self.x += self.vx
        self.y += self.vy
        self.vx *= constants.FRAGMENT_FRICTION_X
        self.vy *= constants.FRAGMENT_FRICTION_Y

        # Linear map of age over [0, life] onto [255, 0]
        self.alpha = 255.0 * (1.0 - self.age / self.life) if self.life > 0 else 0.0

        if self.age > self.life or self.y > bounds[1] + constants.FRAGMENT_BOTTOM_MARGIN:
            self.dead = True

    def draw(self, surface: pygame.Surface):
        draw_soft_circle(surface, self.x, self.y, self.size, self.color, self.alpha)

    def is_expired(self, bounds) -> bool:
        return self.dead


class MessageParticle(Entity):
    """
    One "pixel" of the message. Travels from its source to a fixed target,
    optionally after a random delay, snaps into place, then fades in.

    Invariants:
    - arrived never reverts to False.
    - alpha never decreases after arrival.
    """
    def __init__(self, rng: np.random.Generator, sx: float, sy: float, tx: float, ty: float,
                 color=None, delay=None):
        self.x = sx
        self.y = sy
        self.tx = tx
        self.ty = ty
        self.vx = 0.0
        self.vy = 0.0
        self.color = color or constants.WHITE
        self.size = float(rng.uniform(3.0, 5.0))
        self.arrived = False
        self.arrival_tick = 0
        self.alpha = 0
        # Staggers arrivals so the message forms gradually
        self.delay = delay if delay is not None else float(rng.uniform(*constants.MESSAGE_DELAY_RANGE))

    def update(self, tick: int, bounds=None):
        if self.arrived:
            self.alpha = min(255, self.alpha + constants.MESSAGE_FADE_RATE)
            return

        if self.delay > 0:
            self.delay -= 1
            return

        dx = self.tx - self.x
        dy = self.ty - self.y
        dist = math.hypot(dx, dy)

        if dist < constants.MESSAGE_ARRIVAL_DISTANCE:
            self.x = self.tx
            self.y = self.ty
            self.vx = 0.0
            self.vy = 0.0
            self.arrived = True
            self.arrival_tick = tick
            return

        # Speed falls off as the particle closes in; dist >= 2 here, so no zero division.
        t = min(dist, constants.MESSAGE_SPEED_DISTANCE) / constants.MESSAGE_SPEED_DISTANCE
        speed = constants.MESSAGE_MIN_SPEED + t * (constants.MESSAGE_MAX_SPEED - constants.MESSAGE_MIN_SPEED)
        self.vx = dx / dist * speed
        self.vy = dy / dist * speed
        self.x += self.vx
        self.y += self.vy

    def at_target(self) -> bool:
        return self.arrived and self.alpha >= 255

    def draw(self, surface: pygame.Surface):
        if self.alpha > 0:
            draw_soft_circle(surface, self.x, self.y, self.size, self.color, self.alpha)

    def is_expired(self, bounds) -> bool:
        # Message particles are discarded by the lifecycle controller, never by age.
        return False
