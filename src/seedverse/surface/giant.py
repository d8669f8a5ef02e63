"""
Surface of a giant planet: latitude bands taken from a single meridian of
noise, smeared by a second noise field.
"""

import numpy as np

from seedverse.surface.fields import (
    latitude_weight,
    normalize,
    sample_meridian,
    sample_sphere,
)
from seedverse.util.physics import EARTH_MASS

# Weight of the profile mirrored across the equator in the banding profile
MIRROR_FACTOR = 0.3


def banding_profile(body, height):
    """
    Normalized band intensity per row, shape (height,)
    """
    variant = body.variant

    def build():
        profile = sample_meridian(variant.height_noise, height)
        mixed = (1 - MIRROR_FACTOR) * profile + MIRROR_FACTOR * profile[::-1]
        return normalize(mixed)

    return body.fields.ensure("height", height, build)


def turbulence(body):
    return np.sqrt(0.003 * body.mass / EARTH_MASS)


def color_field(body, height):
    """
    Color scale position of every pixel. Each pixel looks up the banding
    profile at its own row shifted by the color noise, so the bands wobble,
    and bands fade out towards the poles.
    """
    variant = body.variant

    def build():
        profile = banding_profile(body, height)
        noise = normalize(sample_sphere(variant.color_noise, height))
        t = turbulence(body)
        d = 0.03 * t
        rows = np.arange(height)[:, np.newaxis]
        shifted = (1 - 2 * d) * rows / height + d + d * noise
        index = np.clip((shifted * height).astype(int), 0, height - 1)
        weight = latitude_weight(height)[:, np.newaxis] ** 3
        return profile[index] * weight * t

    return body.fields.ensure("color", height, build)


def color_pixels(body, height):
    return body.variant.color_scale.color_array(color_field(body, height))
