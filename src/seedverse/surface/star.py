"""Surface of a star: a noisy temperature field rendered as blackbody colors."""

import numpy as np

from seedverse.surface.fields import normalize, sample_sphere
from seedverse.util.colors import BLACK, interpolate_array
from seedverse.util.physics import temperature_to_colors


def temperature_field(body, height):
    """
    Temperature [K] between 0.75 and 1 times the star's effective
    temperature, uniform when the star has no temperature noise
    """
    star = body.variant

    def build():
        if star.temperature_noise is None:
            return np.full((height, 2 * height), float(body.effective_temperature))
        noise = normalize(sample_sphere(star.temperature_noise, height))
        return (0.75 + 0.25 * noise) * body.effective_temperature

    return body.fields.ensure("temperature", height, build)


def color_pixels(body, height):
    temperature = temperature_field(body, height)
    # Cooler patches are also dimmer
    return interpolate_array(
        BLACK, temperature_to_colors(temperature), temperature / body.effective_temperature
    )
