# glyph_sampler.py

import logging
from collections import namedtuple

import numba
import numpy as np
import pygame

import constants
from particle import pastel_color

logger = logging.getLogger("fireworks")

# A single message "pixel": where a message particle should settle, and its color.
GlyphTarget = namedtuple('GlyphTarget', ['x', 'y', 'color'])


@numba.jit(nopython=True)
def _sample_alpha_grid_jit(alpha, stride, threshold, center_x, center_y, width, height):
    """
    Scans an (x, y)-indexed alpha array on a fixed stride and maps every
    sample that is strictly more opaque than the threshold into canvas space.

    The off-screen grid spans [0, grid_w] x [0, grid_h] and is mapped linearly
    onto a width x height window centered on (center_x, center_y), then clamped
    to [0, width] x [0, height]. Samples are emitted row by row.
    """
    grid_w = alpha.shape[0]
    grid_h = alpha.shape[1]
    cols = (grid_w + stride - 1) // stride
    rows = (grid_h + stride - 1) // stride
    out = np.empty((cols * rows, 2), dtype=np.float64)
    count = 0

    left = center_x - width / 2.0
    top = center_y - height / 2.0
    for y in range(0, grid_h, stride):
        for x in range(0, grid_w, stride):
            if alpha[x, y] > threshold:
                tx = left + x * width / grid_w
                ty = top + y * height / grid_h
                out[count, 0] = min(max(tx, 0.0), width)
                out[count, 1] = min(max(ty, 0.0), height)
                count += 1
    return out[:count]


class GlyphSampler:
    """
    Rasterizes a message off-screen and turns its opaque pixels into target
    points for message particles.

    Data Contract:
    - Inputs:
        - font_name (str | None): System font to render with. None selects
          pygame's bundled default font.
        - font_scale (float): Font size as a fraction of min(width, height).
        - stride (int): Sampling step in pixels along both axes.
        - threshold (int): Samples must have alpha strictly above this.
    - Invariants: Target positions depend only on (message, bounds, center,
      stride). Only the colors consume the random generator.
    """
    def __init__(self, font_name=None, font_scale=constants.FONT_SCALE,
                 stride=constants.GLYPH_STRIDE, threshold=constants.GLYPH_ALPHA_THRESHOLD):
        self.font_name = font_name
        self.font_scale = font_scale
        self.stride = stride
        self.threshold = threshold
        self._fonts = {}

    def _font(self, size: int) -> pygame.font.Font:
        if not pygame.font.get_init():
            pygame.font.init()
        font = self._fonts.get(size)
        if font is None:
            if self.font_name:
                font = pygame.font.SysFont(self.font_name, size)
            else:
                font = pygame.font.Font(None, size)
            self._fonts[size] = font
        return font

    def render_alpha(self, message: str, bounds) -> np.ndarray:
        """
        Renders the message centered on a transparent surface twice the canvas
        size (so long messages are not clipped) and returns its alpha channel
        as an array indexed [x, y].
        """
        width, height = bounds
        font_size = max(1, int(min(width, height) * self.font_scale))
        surface = pygame.Surface((width * 2, height * 2), pygame.SRCALPHA)
        surface.fill((0, 0, 0, 0))

        text = self._font(font_size).render(message, True, constants.WHITE)
        surface.blit(text, text.get_rect(center=(width, height)))
        return pygame.surfarray.array_alpha(surface)

    def sample_positions(self, alpha: np.ndarray, center_x: float, center_y: float, bounds) -> np.ndarray:
        """Returns an (n, 2) array of canvas positions for the opaque samples of alpha."""
        width, height = bounds
        return _sample_alpha_grid_jit(
            alpha, self.stride, self.threshold,
            float(center_x), float(center_y), float(width), float(height)
        )

    def prepare_targets(self, message: str, center_x: float, center_y: float, bounds,
                        rng: np.random.Generator):
        """
        Computes the glyph-matrix targets for a message centered on
        (center_x, center_y).

        - Outputs: list[GlyphTarget] - One entry per opaque sample, in scan
          order, each with a random pastel color.
        """
        alpha = self.render_alpha(message, bounds)
        positions = self.sample_positions(alpha, center_x, center_y, bounds)
        targets = [GlyphTarget(float(x), float(y), pastel_color(rng)) for x, y in positions]

        logger.info(f"Glyph sampler produced {len(targets)} targets for message {message!r}.")
        return targets
