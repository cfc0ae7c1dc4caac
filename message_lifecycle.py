# message_lifecycle.py

import logging
from collections import namedtuple
from enum import Enum

import constants
from particle import MessageParticle, jitter_color, pastel_color

logger = logging.getLogger("fireworks")

# Summary of one mass explosion, returned by MessageLifecycleController.disperse().
Dispersal = namedtuple('Dispersal', ['particle_bursts', 'anchor_bursts', 'scatter_bursts', 'fragments'])


class MessageState(Enum):
    IDLE = "idle"
    FORMING = "forming"
    HOLDING = "holding"
    DISPERSING = "dispersing"


class MessageLifecycleController:
    """
    Sequences the message cycle: counts ordinary explosions, turns the
    triggering one into a message, holds the finished message and finally
    blows it apart in a mass explosion.

    Data Contract:
    - Inputs:
        - scene: The owning Scene. The controller reads and replaces
          scene.message_particles and spawns fragments through
          scene.spawn_burst(); it owns no entity collection itself.
        - message (str): The text to form.
        - sampler (GlyphSampler): Produces the glyph targets.
        - hold_ticks (int): How long a finished message stays on screen.
    - Invariants:
        - At most one message cycle exists at a time. Starting a new
          formation disperses the previous message first.
        - scene.message_particles is replaced on every formation, never
          appended to.
    """
    def __init__(self, scene, message: str, sampler, hold_ticks: int = constants.HOLD_TICKS):
        self.scene = scene
        self.message = message
        self.sampler = sampler
        self.hold_ticks = hold_ticks

        self.explosions_remaining = self.draw_countdown()
        self.pending_message = False
        self.anchor = (0.0, 0.0)
        self.state = MessageState.IDLE
        self.hold_started_tick = None

        logger.info(f"Message cadence initialized. First message after {self.explosions_remaining} explosions.")

    @property
    def message_active(self) -> bool:
        return self.state is MessageState.HOLDING

    def draw_countdown(self) -> int:
        return int(self.scene.rng.integers(*constants.COUNTDOWN_RANGE))

    def request_message(self):
        """Makes the next rocket explosion a message explosion."""
        self.pending_message = True
        logger.info("Message requested; the next explosion will form it.")

    def register_explosion(self) -> bool:
        """
        Counts one rocket explosion against the cadence.

        - Outputs: bool - True if this explosion should form the message.
        """
        if not self.pending_message:
            self.explosions_remaining -= 1
            if self.explosions_remaining <= 0:
                self.pending_message = True
                self.explosions_remaining = self.draw_countdown()
                logger.info(f"Cadence reached zero; next countdown is {self.explosions_remaining}.")
        return self.pending_message

    def begin_formation(self, center_x: float, center_y: float):
        """
        Starts a new message centered on an explosion (Idle -> Forming).

        Any message still on screen is dispersed first. Particle sources are
        taken from live fragments (which are transferred back to the pool),
        then from the last positions of used pooled fragments, then from a
        random jitter around the anchor.
        """
        scene = self.scene
        rng = scene.rng

        if scene.message_particles:
            logger.info("Forcing dispersal of the previous message before forming a new one.")
            self.disperse()

        self.pending_message = False
        self.anchor = (center_x, center_y)
        targets = self.sampler.prepare_targets(self.message, center_x, center_y, scene.bounds, rng)

        if not targets:
            logger.warning(f"Message {self.message!r} produced no glyph targets; skipping formation.")
            self.state = MessageState.IDLE
            return

        sources = self._source_points(len(targets))
        particles = [
            MessageParticle(rng, sx, sy, t.x, t.y, t.color)
            for (sx, sy), t in zip(sources, targets)
        ]

        # Shuffle so update order carries no correlation with scan order
        order = rng.permutation(len(particles))
        scene.message_particles = [particles[i] for i in order]

        self.state = MessageState.FORMING
        self.hold_started_tick = None
        logger.info(
            f"Message forming at ({center_x:.1f}, {center_y:.1f}) with {len(particles)} particles."
        )

    def _source_points(self, n: int):
        scene = self.scene
        rng = scene.rng
        width, height = scene.bounds

        # Snapshot before live fragments are released into the pool below
        pooled = [
            (f.x, f.y) for f in scene.pool.idle()
            if f.age > 0 and 0 <= f.x <= width and 0 <= f.y <= height
        ]

        sources = []
        while len(sources) < n and scene.fragments:
            fragment = scene.fragments.pop()
            sources.append((fragment.x, fragment.y))
            scene.pool.release(fragment)

        sources.extend(pooled[:n - len(sources)])

        cx, cy = self.anchor
        jitter = constants.MESSAGE_SOURCE_JITTER
        while len(sources) < n:
            sources.append((cx + float(rng.uniform(-jitter, jitter)), cy + float(rng.uniform(-jitter, jitter))))
        return sources

    def update(self, tick: int):
        """
        Evaluates the lifecycle transitions. Must run once per tick, after
        every message particle has been advanced.
        """
        particles = self.scene.message_particles

        if self.state is MessageState.FORMING and particles and all(p.at_target() for p in particles):
            self.state = MessageState.HOLDING
            self.hold_started_tick = tick
            logger.info(f"Message fully formed at tick {tick}; holding for {self.hold_ticks} ticks.")

        if self.state is MessageState.HOLDING and tick - self.hold_started_tick >= self.hold_ticks:
            self.disperse()

    def _small_burst(self, x: float, y: float, base_color) -> int:
        rng = self.scene.rng
        return self.scene.spawn_burst(
            x, y,
            count=int(rng.integers(*constants.SMALL_BURST_COUNT_RANGE)),
            speed_range=constants.SMALL_BURST_SPEED_RANGE,
            life_range=constants.SMALL_BURST_LIFE_RANGE,
            size_range=constants.SMALL_BURST_SIZE_RANGE,
            color_fn=lambda r: jitter_color(r, base_color, constants.SMALL_BURST_COLOR_JITTER),
        )

    def disperse(self) -> Dispersal:
        """
        Runs the mass explosion (Dispersing -> Idle) synchronously:
        a small burst at every message particle, one large burst at the
        anchor and a ring of scattered bursts around it. All message
        particles are discarded and the cadence is redrawn.
        """
        scene = self.scene
        rng = scene.rng
        width, height = scene.bounds
        cx, cy = self.anchor
        self.state = MessageState.DISPERSING

        particles = scene.message_particles
        logger.info(f"Mass explosion: dispersing {len(particles)} message particles.")

        fragments = 0
        for p in particles:
            fragments += self._small_burst(p.x, p.y, p.color)

        fragments += scene.spawn_burst(
            cx, cy,
            count=int(rng.integers(*constants.LARGE_BURST_COUNT_RANGE)),
            speed_range=constants.LARGE_BURST_SPEED_RANGE,
            life_range=constants.LARGE_BURST_LIFE_RANGE,
            size_range=constants.LARGE_BURST_SIZE_RANGE,
            color_fn=pastel_color,
        )

        for _ in range(constants.SCATTER_BURST_COUNT):
            x = cx + float(rng.uniform(-width / 3, width / 3))
            y = cy + float(rng.uniform(-height / 3, height / 3))
            fragments += self._small_burst(x, y, pastel_color(rng))

        scene.message_particles = []
        self.explosions_remaining = self.draw_countdown()
        self.state = MessageState.IDLE
        self.hold_started_tick = None

        return Dispersal(
            particle_bursts=len(particles),
            anchor_bursts=1,
            scatter_bursts=constants.SCATTER_BURST_COUNT,
            fragments=fragments,
        )
