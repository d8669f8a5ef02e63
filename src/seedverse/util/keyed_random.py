"""Random draws keyed by (root seed, parameter label).

Every draw reseeds a fresh generator from the product of the hashes of the
root seed and the label, so a value depends only on that pair and never on
call order. Bodies are built in an order that depends on earlier random
choices, and this keeps them reproducible anyway.
"""

from __future__ import annotations

import hashlib
from typing import Sequence, TypeVar

import numpy as np

from seedverse.util.colors import Color, Palette, hsv_to_rgb
from seedverse.util.noise import Billow, Perlin, RidgedMulti, Turbulence

T = TypeVar("T")

_SEED_MODULUS = 2**64
_NOISE_SEED_MODULUS = 2**32


def stable_hash(text: str) -> int:
    """32-bit hash of a string that is identical across processes and platforms."""
    digest = hashlib.sha256(text.encode("utf-8")).digest()
    return int.from_bytes(digest[:4], "little")


class KeyedRandom:
    """
    Pseudo-random scalars, colors and noise descriptors derived from a root
    seed string and a per-parameter key
    """

    def __init__(self, seed: str):
        self.seed_string = seed
        self.seed = stable_hash(seed)

    def __repr__(self):
        return f"{type(self).__name__}({self.seed_string!r})"

    def rand(self, key: str) -> float:
        """Uniform draw in [0, 1)."""
        generator = np.random.default_rng((self.seed * stable_hash(key)) % _SEED_MODULUS)
        return float(generator.random())

    def uniform(self, key: str, low: float, high: float) -> float:
        return low + (high - low) * self.rand(key)

    def log_uniform(self, key: str, low: float, high: float) -> float:
        return float(np.exp(self.uniform(key, np.log(low), np.log(high))))

    def gaussian(self, key: str, scale: float) -> float:
        """
        Zero-centred draw with standard deviation roughly ``scale``, from the
        inverse of the logistic function
        """
        x = self.rand(key)
        return float(np.sqrt(np.pi / 8) * scale * np.log(x / (1 - x)))

    def randint(self, key: str, low: int, high: int) -> int:
        """
        Integer in [low, high), truncated from a scaled uniform draw. Slightly
        biased for some ranges, kept as is so generated values stay stable.
        """
        return int(low + (high - low) * self.rand(key))

    def choice(self, key: str, options: Sequence[T]) -> T:
        return options[self.randint(key, 0, len(options))]

    def color(self, key: str, palette: Palette = None) -> Color:
        """
        A random color, either from independent bytes or, if a palette is
        given, uniformly from that region of HSV space
        """
        if palette is None:
            return (
                self.randint(key + " red", 0, 256),
                self.randint(key + " green", 0, 256),
                self.randint(key + " blue", 0, 256),
            )
        h = self.uniform(key + " hue", palette.min_hue, palette.max_hue)
        s = self.uniform(key + " saturation", palette.min_saturation, palette.max_saturation)
        v = self.uniform(key + " value", palette.min_value, palette.max_value)
        return hsv_to_rgb(h, s, v)

    # ── Noise descriptors ────────────────────────────────────────────

    def noise_seed(self, key: str) -> int:
        return (self.seed * self.seed + self.seed * stable_hash(key)) % _NOISE_SEED_MODULUS

    def _octave_params(self, key, min_f, max_f, min_l, max_l, min_o, max_o):
        return dict(
            frequency=self.log_uniform(key + " frequency", min_f, max_f),
            lacunarity=self.uniform(key + " lacunarity", min_l, max_l),
            octave_count=self.randint(key + " octave count", min_o, max_o),
            seed=self.noise_seed(key),
        )

    def perlin(self, key, min_f, max_f, min_l, max_l, min_o, max_o, min_p, max_p):
        """
        Perlin descriptor with log-uniform frequency and uniform lacunarity,
        octave count and persistence between the given bounds
        """
        return Perlin(
            persistence=self.uniform(key + " persistence", min_p, max_p),
            **self._octave_params(key, min_f, max_f, min_l, max_l, min_o, max_o),
        )

    def billow(self, key, min_f, max_f, min_l, max_l, min_o, max_o, min_p, max_p):
        return Billow(
            persistence=self.uniform(key + " persistence", min_p, max_p),
            **self._octave_params(key, min_f, max_f, min_l, max_l, min_o, max_o),
        )

    def ridged_multi(self, key, min_f, max_f, min_l, max_l, min_o, max_o):
        return RidgedMulti(
            **self._octave_params(key, min_f, max_f, min_l, max_l, min_o, max_o)
        )

    def turbulence(self, key, min_f, max_f, min_l, max_l, min_o, max_o, min_p, max_p):
        return Turbulence(
            source=self.perlin(key, min_f, max_f, min_l, max_l, min_o, max_o, min_p, max_p),
            frequency=0.1 * self.uniform(key + " frequency", min_f, max_f),
            power=1.0,
            roughness=1,
            seed=self.noise_seed(key),
        )

    def noise(self, key, min_f, max_f, min_l, max_l, min_o, max_o, min_p, max_p):
        """One of a perlin, billow or ridged descriptor, chosen with ``key``."""
        options = [
            self.perlin(key, min_f, max_f, min_l, max_l, min_o, max_o, min_p, max_p),
            self.billow(key, min_f, max_f, min_l, max_l, min_o, max_o, min_p, max_p),
            self.ridged_multi(key, min_f, max_f, min_l, max_l, min_o, max_o),
        ]
        return self.choice(key, options)
