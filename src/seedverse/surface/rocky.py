"""
Surface of a rocky planet: terrain height, a color index, and a temperature
field driving ice caps and where life grows.
"""

import numpy as np

import seedverse.util.physics as phys
from seedverse.surface.fields import latitude_weight, normalize, sample_sphere
from seedverse.util.colors import interpolate_array


def height_field(body, height):
    """Terrain height normalized to [0, 1]."""
    return body.fields.ensure(
        "height",
        height,
        lambda: normalize(sample_sphere(body.variant.height_noise, height)),
    )


def color_field(body, height):
    """Position on the color scale, normalized to [0, 1]."""
    return body.fields.ensure(
        "color",
        height,
        lambda: normalize(sample_sphere(body.variant.color_noise, height)),
    )


def temperature_field(body, height):
    """
    Surface temperature [K]. The sun heats the equator most, high ground is
    colder and some noise is added on top. The extremes recorded on the body
    include the noise.
    """
    planet = body.variant

    def build():
        elevation = height_field(body, height)
        noise = normalize(sample_sphere(planet.temperature_noise, height))
        solar_heat = planet.surface_temperature**4
        extra_heat = planet.geothermal_temperature**4 + planet.greenhouse_temperature**4
        coldness = 1 - body.random.uniform(
            "coldness", (extra_heat / (solar_heat + extra_heat)) ** 0.25, 1
        )
        heat = extra_heat + solar_heat * 2 * latitude_weight(height)[:, np.newaxis]
        temperature = heat**0.25 * (1 - coldness * elevation)
        temperature *= 1 + 0.1 * (noise - 1)
        planet.min_temperature = float(temperature.min())
        planet.max_temperature = float(temperature.max())
        return temperature

    return body.fields.ensure("temperature", height, build)


def life_blend(body, temperature, height):
    """
    How strongly life colors show, from 1 at the preferred temperature to 0
    a full variance away, thinning out towards the poles. The weight is the
    closeness to the preferred temperature, not the distance from it.
    """
    random = body.random
    mean = random.uniform("life temperature mean", phys.FREEZING_POINT, phys.BOILING_POINT)
    variance = random.uniform("life temperature variance", 20, 70)
    power = random.uniform("sin power", 0, 2)
    closeness = 1 - np.clip(np.abs(temperature - mean) / variance, 0, 1)
    return closeness * latitude_weight(height)[:, np.newaxis] ** power


def color_pixels(body, height):
    planet = body.variant
    elevation = height_field(body, height)
    value = color_field(body, height)
    temperature = temperature_field(body, height)

    pixels = planet.color_scale.color_array(value)
    land = elevation > planet.ocean_level
    if planet.has_ocean:
        pixels[~land] = planet.ocean_color
    if planet.has_life:
        life = interpolate_array(
            pixels,
            planet.life_color_scale.color_array(value),
            life_blend(body, temperature, height),
        )
        pixels = np.where(land[..., np.newaxis], life, pixels)
    if planet.has_atmosphere:
        pixels[temperature < phys.FREEZING_POINT * planet.ice_factor] = planet.ice_color
    return pixels
