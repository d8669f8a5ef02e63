"""Coherent noise descriptors and a vectorised gradient-noise evaluator.

A descriptor is an immutable description of a noise field (kind, frequency,
lacunarity, octave count, persistence, seed). Its ``evaluate`` method is a
pure function of the descriptor and the sample coordinates, so the same
descriptor always reproduces the same field. Coordinates are points in 3-D
space; spherical textures sample the unit sphere (see
:func:`evaluate_field`).
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Union

import numpy as np

_SEED_MASK = 0xFFFFFFFF

# Edge midpoints of a cube, the gradient set of improved Perlin noise
_GRADIENTS = np.array(
    [
        [1, 1, 0],
        [-1, 1, 0],
        [1, -1, 0],
        [-1, -1, 0],
        [1, 0, 1],
        [-1, 0, 1],
        [1, 0, -1],
        [-1, 0, -1],
        [0, 1, 1],
        [0, -1, 1],
        [0, 1, -1],
        [0, -1, -1],
    ],
    dtype=float,
)

# Turbulence displaces each axis with a differently offset sample
_TURBULENCE_OFFSETS = (
    (12414.0 / 65536.0, 65124.0 / 65536.0, 31337.0 / 65536.0),
    (26519.0 / 65536.0, 18128.0 / 65536.0, 60493.0 / 65536.0),
    (53820.0 / 65536.0, 11213.0 / 65536.0, 44845.0 / 65536.0),
)


# ── Raw gradient noise ───────────────────────────────────────────────


@lru_cache(maxsize=256)
def _permutation_table(seed):
    p = np.arange(256, dtype=np.int64)
    rng = np.random.default_rng(seed & _SEED_MASK)
    rng.shuffle(p)
    table = np.concatenate([p, p])
    table.setflags(write=False)
    return table


def _fade(t):
    return t * t * t * (t * (t * 6 - 15) + 10)


def _dot_gradient(hashes, dx, dy, dz):
    g = _GRADIENTS[hashes % 12]
    return g[..., 0] * dx + g[..., 1] * dy + g[..., 2] * dz


def gradient_noise(x, y, z, seed):
    """
    Improved Perlin noise in 3-D, roughly in [-1, 1]

    Args:
        x, y, z (np.ndarray):
            Sample coordinates, broadcastable to a common shape
        seed (int):
            Selects the permutation table

    Returns:
        np.ndarray of noise values
    """
    x, y, z = np.broadcast_arrays(
        np.asarray(x, dtype=float), np.asarray(y, dtype=float), np.asarray(z, dtype=float)
    )
    perm = _permutation_table(int(seed) & _SEED_MASK)

    x0 = np.floor(x)
    y0 = np.floor(y)
    z0 = np.floor(z)
    fx, fy, fz = x - x0, y - y0, z - z0
    xi = x0.astype(np.int64) & 255
    yi = y0.astype(np.int64) & 255
    zi = z0.astype(np.int64) & 255
    u, v, w = _fade(fx), _fade(fy), _fade(fz)

    a = perm[xi] + yi
    b = perm[xi + 1] + yi
    aa, ab = perm[a] + zi, perm[a + 1] + zi
    ba, bb = perm[b] + zi, perm[b + 1] + zi

    x1 = _lerp(
        _dot_gradient(perm[aa], fx, fy, fz),
        _dot_gradient(perm[ba], fx - 1, fy, fz),
        u,
    )
    x2 = _lerp(
        _dot_gradient(perm[ab], fx, fy - 1, fz),
        _dot_gradient(perm[bb], fx - 1, fy - 1, fz),
        u,
    )
    y1 = _lerp(x1, x2, v)
    x3 = _lerp(
        _dot_gradient(perm[aa + 1], fx, fy, fz - 1),
        _dot_gradient(perm[ba + 1], fx - 1, fy, fz - 1),
        u,
    )
    x4 = _lerp(
        _dot_gradient(perm[ab + 1], fx, fy - 1, fz - 1),
        _dot_gradient(perm[bb + 1], fx - 1, fy - 1, fz - 1),
        u,
    )
    y2 = _lerp(x3, x4, v)
    return _lerp(y1, y2, w)


def _lerp(a, b, t):
    return a + t * (b - a)


# ── Descriptors ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class Perlin:
    """Fractal sum of gradient noise octaves (the "basic" field kind)."""

    frequency: float
    lacunarity: float
    octave_count: int
    persistence: float
    seed: int
    kind = "perlin"

    def evaluate(self, x, y, z):
        x, y, z = (np.asarray(c, dtype=float) * self.frequency for c in (x, y, z))
        value = np.zeros(np.broadcast(x, y, z).shape)
        amplitude = 1.0
        for octave in range(self.octave_count):
            value += amplitude * gradient_noise(x, y, z, self.seed + octave)
            x, y, z = x * self.lacunarity, y * self.lacunarity, z * self.lacunarity
            amplitude *= self.persistence
        return value


@dataclass(frozen=True)
class Billow:
    """Octaves of folded ``2|n| - 1`` noise, giving puffy "layered" features."""

    frequency: float
    lacunarity: float
    octave_count: int
    persistence: float
    seed: int
    kind = "billow"

    def evaluate(self, x, y, z):
        x, y, z = (np.asarray(c, dtype=float) * self.frequency for c in (x, y, z))
        value = np.zeros(np.broadcast(x, y, z).shape)
        amplitude = 1.0
        for octave in range(self.octave_count):
            signal = 2 * np.abs(gradient_noise(x, y, z, self.seed + octave)) - 1
            value += amplitude * signal
            x, y, z = x * self.lacunarity, y * self.lacunarity, z * self.lacunarity
            amplitude *= self.persistence
        return value + 0.5


@dataclass(frozen=True)
class RidgedMulti:
    """Ridged multifractal noise, sharp crests where the raw noise crosses zero."""

    frequency: float
    lacunarity: float
    octave_count: int
    seed: int
    offset: float = 1.0
    gain: float = 2.0
    kind = "ridged"

    def evaluate(self, x, y, z):
        x, y, z = (np.asarray(c, dtype=float) * self.frequency for c in (x, y, z))
        value = np.zeros(np.broadcast(x, y, z).shape)
        weight = np.ones_like(value)
        for octave in range(self.octave_count):
            signal = self.offset - np.abs(gradient_noise(x, y, z, self.seed + octave))
            signal = signal * signal * weight
            weight = np.clip(signal * self.gain, 0.0, 1.0)
            # Spectral weight frequency**-1 relative to the base octave
            value += signal * self.lacunarity**-octave
            x, y, z = x * self.lacunarity, y * self.lacunarity, z * self.lacunarity
        return value * 1.25 - 1.0


@dataclass(frozen=True)
class Turbulence:
    """Domain warp of ``source`` by three independent low-octave perlin fields."""

    source: "NoiseField"
    frequency: float
    power: float
    roughness: int
    seed: int
    kind = "turbulence"

    def _displacement(self, axis):
        return Perlin(
            frequency=self.frequency,
            lacunarity=2.0,
            octave_count=self.roughness,
            persistence=0.5,
            seed=self.seed + axis,
        )

    def evaluate(self, x, y, z):
        x, y, z = (np.asarray(c, dtype=float) for c in (x, y, z))
        warped = []
        for axis, (ox, oy, oz) in enumerate(_TURBULENCE_OFFSETS):
            shift = self._displacement(axis).evaluate(x + ox, y + oy, z + oz)
            warped.append((x, y, z)[axis] + self.power * shift)
        return self.source.evaluate(*warped)


@dataclass(frozen=True)
class Combine:
    """
    Pointwise combination of two fields. ``blend`` interpolates from
    ``source0`` to ``source1`` using ``control`` mapped from [-1, 1] to [0, 1].
    """

    op: str
    source0: "NoiseField"
    source1: "NoiseField"
    control: Optional["NoiseField"] = None

    def __post_init__(self):
        assert self.op in ("min", "max", "multiply", "blend"), (
            f"Unknown combinator {self.op}"
        )
        assert self.op != "blend" or self.control is not None, (
            "blend needs a control field"
        )

    @property
    def kind(self):
        return self.op

    def evaluate(self, x, y, z):
        a = self.source0.evaluate(x, y, z)
        b = self.source1.evaluate(x, y, z)
        if self.op == "min":
            return np.minimum(a, b)
        elif self.op == "max":
            return np.maximum(a, b)
        elif self.op == "multiply":
            return a * b
        alpha = (self.control.evaluate(x, y, z) + 1) / 2
        return _lerp(a, b, alpha)


@dataclass(frozen=True)
class Offset:
    """``source`` shifted by a constant."""

    source: "NoiseField"
    constant: float
    kind = "add"

    def evaluate(self, x, y, z):
        return self.source.evaluate(x, y, z) + self.constant


NoiseField = Union[Perlin, Billow, RidgedMulti, Turbulence, Combine, Offset]


def evaluate_field(field, latitude, longitude):
    """
    Sample a noise field on the unit sphere

    Args:
        field (NoiseField):
            Descriptor to evaluate
        latitude (np.ndarray):
            Latitudes in degrees
        longitude (np.ndarray):
            Longitudes in degrees

    Returns:
        np.ndarray:
            Field values with the broadcast shape of the coordinates
    """
    lat = np.deg2rad(np.asarray(latitude, dtype=float))
    lon = np.deg2rad(np.asarray(longitude, dtype=float))
    r = np.cos(lat)
    return field.evaluate(r * np.cos(lon), np.sin(lat), r * np.sin(lon))
