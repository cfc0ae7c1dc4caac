"""Pytest fixtures for the fireworks tests."""
import os
import sys
from pathlib import Path

# Render headless; must be set before pygame initializes a video driver.
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import numpy as np
import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

BOUNDS = (800, 600)


class FixedSampler:
    """Stands in for GlyphSampler with a known list of targets."""

    def __init__(self, points, color=(200, 180, 160)):
        self.points = list(points)
        self.color = color
        self.calls = []

    def prepare_targets(self, message, center_x, center_y, bounds, rng):
        from glyph_sampler import GlyphTarget
        self.calls.append((message, center_x, center_y, bounds))
        return [GlyphTarget(float(x), float(y), self.color) for x, y in self.points]


@pytest.fixture
def project_root():
    """Return the project root path."""
    return PROJECT_ROOT


@pytest.fixture
def bounds():
    return BOUNDS


@pytest.fixture
def rng():
    """A seeded generator so every test run draws the same numbers."""
    return np.random.default_rng(1234)


@pytest.fixture
def fireworks_config():
    """The 'fireworks' config section with a small pool."""
    from config import FIREWORKS_DEFAULTS
    config = dict(FIREWORKS_DEFAULTS)
    config['pool_size'] = 50
    return config


@pytest.fixture
def scene(fireworks_config, rng, bounds):
    """A Scene whose lifecycle controller uses a FixedSampler with a small grid."""
    from scene import Scene
    s = Scene(fireworks_config, rng, bounds)
    points = [(300 + 10 * i, 250 + 10 * j) for i in range(5) for j in range(4)]
    s.lifecycle.sampler = FixedSampler(points)
    return s


@pytest.fixture
def make_sampler():
    """Factory for FixedSampler instances."""
    return FixedSampler
