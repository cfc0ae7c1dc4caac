"""Test FragmentParticle and MessageParticle."""
import math

import pytest
from particle import FragmentParticle, MessageParticle, jitter_color, pastel_color
import constants


class TestFragmentParticle:
    """Tests for the pooled explosion fragment."""

    def test_new_fragment_is_dead_until_reset(self):
        fragment = FragmentParticle()
        assert fragment.dead

    def test_reset_ranges(self, rng):
        fragment = FragmentParticle()
        for _ in range(200):
            fragment.reset(rng, 10.0, 20.0, 1.0, -1.0)
            assert 2.2 <= fragment.size <= 5.2
            assert 60 <= fragment.life < 160
            assert fragment.age == 0
            assert fragment.alpha == 255
            assert not fragment.dead
            r, g, b = fragment.color
            assert 200 <= r <= 255
            assert 120 <= g <= 255 and 120 <= b <= 255

    def test_reset_honours_explicit_values(self, rng):
        fragment = FragmentParticle().reset(rng, 0, 0, 0, 0, color=(1, 2, 3), life=240, size=4.0)
        assert fragment.life == 240
        assert fragment.size == 4.0
        assert fragment.color == (1, 2, 3)

    def test_dies_after_life(self, rng, bounds):
        fragment = FragmentParticle().reset(rng, 100.0, 100.0, 0.0, 0.0, life=50)
        for tick in range(50):
            fragment.update(tick, bounds)
        assert not fragment.dead
        fragment.update(50, bounds)
        assert fragment.age > fragment.life
        assert fragment.dead

    @pytest.mark.parametrize("life", [40, 61.5, 159.9])
    def test_always_dead_once_age_exceeds_life(self, rng, bounds, life):
        fragment = FragmentParticle().reset(rng, 400.0, 100.0, 1.0, -2.0, life=life)
        for tick in range(int(life) + 1):
            fragment.update(tick, bounds)
        assert fragment.dead

    def test_dies_far_below_canvas(self, rng, bounds):
        fragment = FragmentParticle().reset(rng, 100.0, bounds[1] + constants.FRAGMENT_BOTTOM_MARGIN, 0.0, 5.0, life=1000)
        fragment.update(0, bounds)
        assert fragment.dead
        assert fragment.age < fragment.life

    def test_gravity_and_friction(self, rng, bounds):
        fragment = FragmentParticle().reset(rng, 100.0, 100.0, 2.0, 0.0, life=100)
        fragment.update(0, bounds)
        assert fragment.vy == pytest.approx(constants.GRAVITY * constants.FRAGMENT_FRICTION_Y)
        assert fragment.vx == pytest.approx(2.0 * constants.FRAGMENT_FRICTION_X)
        assert fragment.x == pytest.approx(102.0)
        assert fragment.y == pytest.approx(100.0 + constants.GRAVITY)

    def test_alpha_fades_linearly(self, rng, bounds):
        fragment = FragmentParticle().reset(rng, 100.0, 100.0, 0.0, 0.0, life=100)
        for tick in range(50):
            fragment.update(tick, bounds)
        assert fragment.alpha == pytest.approx(127.5)
        for tick in range(50):
            fragment.update(tick, bounds)
        assert fragment.alpha == pytest.approx(0.0)

    def test_is_expired_tracks_dead(self, rng, bounds):
        fragment = FragmentParticle().reset(rng, 0, 0, 0, 0)
        assert not fragment.is_expired(bounds)
        fragment.dead = True
        assert fragment.is_expired(bounds)


class TestMessageParticle:
    """Tests for the particles that form the message."""

    def test_converges_exactly_to_target(self, rng):
        particle = MessageParticle(rng, 0.0, 0.0, 100.0, 0.0, (255, 255, 255), delay=0)
        ticks = 0
        while not particle.arrived:
            ticks += 1
            particle.update(ticks)
            assert ticks < 200, "particle never arrived"
        assert (particle.x, particle.y) == (100.0, 0.0)
        assert particle.arrival_tick == ticks

    def test_first_step_uses_max_speed_far_away(self, rng):
        particle = MessageParticle(rng, 0.0, 0.0, 300.0, 0.0, delay=0)
        particle.update(1)
        assert particle.x == pytest.approx(constants.MESSAGE_MAX_SPEED)
        assert particle.y == pytest.approx(0.0)

    def test_speed_map_is_linear_below_clamp(self, rng):
        particle = MessageParticle(rng, 0.0, 0.0, 0.0, 50.0, delay=0)
        particle.update(1)
        expected = 0.5 + 0.5 * (8.0 - 0.5)
        assert particle.vy == pytest.approx(expected)
        assert particle.vx == pytest.approx(0.0)

    def test_arrived_is_monotonic(self, rng):
        particle = MessageParticle(rng, 5.0, 5.0, 50.0, 80.0, delay=3)
        seen_arrival = False
        for tick in range(1, 300):
            particle.update(tick)
            if seen_arrival:
                assert particle.arrived
            seen_arrival = seen_arrival or particle.arrived
        assert seen_arrival

    def test_delay_holds_position(self, rng):
        particle = MessageParticle(rng, 10.0, 10.0, 200.0, 10.0, delay=5)
        for tick in range(5):
            particle.update(tick)
            assert (particle.x, particle.y) == (10.0, 10.0)
        particle.update(5)
        assert particle.x > 10.0

    def test_delay_applies_even_when_close(self, rng):
        particle = MessageParticle(rng, 10.0, 10.0, 10.5, 10.0, delay=2)
        particle.update(1)
        assert not particle.arrived
        particle.update(2)
        particle.update(3)
        assert particle.arrived

    def test_zero_distance_counts_as_arrived(self, rng):
        particle = MessageParticle(rng, 42.0, 7.0, 42.0, 7.0, delay=0)
        particle.update(9)
        assert particle.arrived
        assert particle.arrival_tick == 9
        assert not math.isnan(particle.x)

    def test_default_delay_range(self, rng):
        delays = [MessageParticle(rng, 0, 0, 1, 1).delay for _ in range(200)]
        assert all(0 <= d < 60 for d in delays)

    def test_fades_in_after_arrival(self, rng):
        particle = MessageParticle(rng, 0.0, 0.0, 0.0, 0.0, delay=0)
        particle.update(1)
        assert particle.arrived and particle.alpha == 0
        assert not particle.at_target()

        previous = particle.alpha
        for tick in range(2, 40):
            particle.update(tick)
            assert particle.alpha >= previous
            assert particle.alpha <= 255
            previous = particle.alpha
        assert particle.alpha == 255
        assert particle.at_target()

    def test_fade_takes_32_ticks(self, rng):
        particle = MessageParticle(rng, 0.0, 0.0, 0.0, 0.0, delay=0)
        particle.update(0)
        for tick in range(31):
            particle.update(tick)
        assert not particle.at_target()
        particle.update(32)
        assert particle.at_target()

    def test_never_expires_on_its_own(self, rng, bounds):
        particle = MessageParticle(rng, 0, 0, 1, 1)
        assert not particle.is_expired(bounds)


class TestColors:
    """Tests for color helpers."""

    def test_pastel_channels(self, rng):
        for _ in range(100):
            assert all(150 <= c <= 255 for c in pastel_color(rng))

    def test_jitter_is_clamped(self, rng):
        for _ in range(100):
            r, g, b = jitter_color(rng, (250, 5, 128), 30)
            assert 220 <= r <= 255
            assert 0 <= g <= 35
            assert 98 <= b <= 158
