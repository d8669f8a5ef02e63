"""Color arithmetic, named HSV palettes and piecewise-linear color scales.

Colors are ``(r, g, b)`` tuples of ints in [0, 255]. Pixel buffers are
numpy ``uint8`` arrays with a trailing channel axis; every scalar helper here
has a vectorised counterpart that follows exactly the same rounding rules.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

Color = Tuple[int, int, int]

BLACK: Color = (0, 0, 0)
WHITE: Color = (255, 255, 255)


@dataclass(frozen=True)
class Palette:
    """A closed box in HSV color space, hue in degrees and the rest in [0, 1]."""

    min_hue: float
    max_hue: float
    min_saturation: float
    max_saturation: float
    min_value: float
    max_value: float


STONE = Palette(0, 60, 0, 0.1, 0.2, 0.7)
EARTH = Palette(0, 40, 0.1, 0.5, 0.2, 0.8)
SAND = Palette(30, 50, 0.1, 0.4, 0.5, 1.0)
FISH = Palette(160, 270, 0.5, 0.8, 0.6, 1.0)
WATER = Palette(180, 250, 0.6, 0.8, 0.2, 0.8)
ICE = Palette(200, 220, 0.0, 0.1, 0.8, 1.0)
RUST = Palette(0, 30, 0.4, 0.8, 0.3, 0.6)
FOREST = Palette(70, 120, 0.3, 0.8, 0.2, 0.5)
GRASS = Palette(60, 110, 0.3, 0.6, 0.5, 0.9)
BURGUNDY = Palette(270, 360, 0.3, 1.0, 0.1, 0.5)


def hsv_to_rgb(h: float, s: float, v: float) -> Color:
    """Six-sector HSV to RGB conversion, hue wrapped modulo 360 degrees."""
    h = h % 360
    c = v * s
    x = c * (1 - abs(h / 60.0 % 2 - 1))
    m = v - c
    sector = int(h // 60) % 6
    rgb = [
        (c + m, x + m, m),
        (x + m, c + m, m),
        (m, c + m, x + m),
        (m, x + m, c + m),
        (x + m, m, c + m),
        (c + m, m, x + m),
    ][sector]
    return tuple(int(255 * channel) for channel in rgb)


def interpolate(color1: Color, color2: Color, alpha: float) -> Color:
    """
    Linear interpolation from ``color1`` (alpha=0) to ``color2`` (alpha=1).
    NaN and out-of-range factors snap to the nearest endpoint.
    """
    if np.isnan(alpha) or alpha <= 0:
        return tuple(color1)
    if alpha >= 1:
        return tuple(color2)
    return tuple(
        int(alpha * c2 + (1 - alpha) * c1) for c1, c2 in zip(color1, color2)
    )


def interpolate_array(colors1, colors2, alpha) -> np.ndarray:
    """Vectorised :func:`interpolate`.

    Args:
        colors1: ``(..., 3)`` array or a single color.
        colors2: ``(..., 3)`` array or a single color.
        alpha: Array broadcastable to the leading shape of the colors.

    Returns:
        ``uint8`` array of interpolated colors.
    """
    c1 = np.asarray(colors1, dtype=float)
    c2 = np.asarray(colors2, dtype=float)
    alpha = np.asarray(alpha, dtype=float)[..., np.newaxis]
    mixed = np.trunc(alpha * c2 + (1 - alpha) * c1)
    c1, c2, mixed = np.broadcast_arrays(c1, c2, mixed)
    low = np.isnan(alpha) | (alpha <= 0)
    high = alpha >= 1
    out = np.where(low, c1, np.where(high, c2, mixed))
    return out.astype(np.uint8)


def color_pow(color: Color, power: float) -> Color:
    """Raise each normalised channel to ``power``, biasing hue and brightness."""
    return tuple(int(255 * (channel / 255.0) ** power) for channel in color)


class ColorScale:
    """
    Ascending positions in [0, 1] paired with colors. Values between two
    positions are linearly interpolated, values outside the first/last
    position are clamped.
    """

    def __init__(self, values: Sequence[float], colors: Sequence[Color]):
        assert len(values) == len(colors), "Each position needs one color"
        assert len(values) > 0, "A color scale needs at least one color"
        self.values = list(values)
        self.colors = [tuple(color) for color in colors]

    def __repr__(self):
        stops = ", ".join(f"{v:.3f}:{c}" for v, c in zip(self.values, self.colors))
        return f"{type(self).__name__}([{stops}])"

    def color(self, v: float) -> Color:
        """Color at position ``v``."""
        values = self.values
        if v < values[0]:
            v = values[0]
        if v > values[-1]:
            v = values[-1]
        for i in range(len(values) - 1):
            if v < values[i + 1]:
                alpha = (v - values[i]) / (values[i + 1] - values[i])
                return interpolate(self.colors[i], self.colors[i + 1], alpha)
        return self.colors[-1]

    def color_array(self, v) -> np.ndarray:
        """
        Vectorised :meth:`color` over an array of positions, returning a
        ``uint8`` array with a trailing RGB axis
        """
        values = np.asarray(self.values, dtype=float)
        colors = np.asarray(self.colors, dtype=float)
        v = np.clip(np.asarray(v, dtype=float), values[0], values[-1])
        n = len(values)
        if n == 1:
            return np.broadcast_to(colors[0], v.shape + (3,)).astype(np.uint8)

        # First segment i with v < values[i + 1]; i == n - 1 means none
        seg = np.searchsorted(values[1:], v, side="right")
        last = seg >= n - 1
        lo = np.minimum(seg, n - 2)
        width = values[lo + 1] - values[lo]
        with np.errstate(divide="ignore", invalid="ignore"):
            alpha = (v - values[lo]) / width
        out = interpolate_array(colors[lo], colors[lo + 1], alpha)
        out[last] = colors[-1].astype(np.uint8)
        return out
