"""
Texture maps of bodies as ``uint8`` pixel buffers, and writers that save
them as images.

Maps are equirectangular with shape (height, 2 * height), row 0 at the south
pole. The fields behind them are cached on the body, so e.g. a specular map
requested at the same height as an earlier color map reuses its height and
temperature fields.
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

import seedverse.util.physics as phys
from seedverse import config
from seedverse.base.body import GiantPlanet, PlanetTraits, RockyPlanet, Star
from seedverse.surface import giant, rocky, star
from seedverse.surface.fields import latitude_weight, sample_equator
from seedverse.util.colors import BLACK, interpolate_array
from seedverse.util.io import write_image
from seedverse.util.noise import Offset

logger = logging.getLogger(__name__)

_FLAT_NORMAL = (127, 127, 255)


def _assert_rocky(body, what):
    assert isinstance(body.variant, RockyPlanet), (
        f"{body.name} is a {body.kind}, only rocky planets have a {what}"
    )


def refine_albedo(body, pixels):
    """
    Measure a planet's albedo from its rendered color map and store it on
    the body

    Args:
        body (Body):
            A rocky or giant planet
        pixels (np.ndarray):
            The planet's color map

    Returns:
        albedo (float)
    """
    planet = body.variant
    stride = config.ALBEDO_SAMPLE_STRIDE
    sample = pixels[::stride, ::stride]
    if planet.has_atmosphere:
        sample = interpolate_array(
            sample, planet.atmosphere_color, planet.atmosphere_opacity
        )
    luminance = sample.astype(float).sum(axis=-1) / (255 * 3.0)
    planet.albedo = float(np.mean(luminance**2))
    return planet.albedo


def color_map(body, height=config.DEFAULT_MAP_HEIGHT):
    """
    RGB color map of any body. Rendering a planet's color map also updates
    its albedo.
    """
    variant = body.variant
    if isinstance(variant, Star):
        pixels = star.color_pixels(body, height)
    elif isinstance(variant, GiantPlanet):
        pixels = giant.color_pixels(body, height)
    else:
        pixels = rocky.color_pixels(body, height)
    if isinstance(variant, PlanetTraits):
        refine_albedo(body, pixels)
    return pixels


def height_map(body, height=config.DEFAULT_MAP_HEIGHT):
    """Grayscale terrain height of a rocky planet."""
    _assert_rocky(body, "height map")
    elevation = rocky.height_field(body, height)
    return np.clip(np.trunc(255 * elevation), 0, 255).astype(np.uint8)


def normal_map(body, height=config.DEFAULT_MAP_HEIGHT, alt_mode=False):
    """
    Tangent-space normal map of a rocky planet's terrain

    Oceans are flat, and relief is flattened towards the poles where the
    map is stretched the most. Border pixels get a flat normal.

    Args:
        body (Body):
            A rocky planet
        height (int):
            Rows of the map
        alt_mode (bool):
            Pack the normal into RGBA as (G, G, G, A) with A the red channel,
            instead of plain RGB

    Returns:
        np.ndarray:
            uint8 array of shape (height, 2 * height, 3), or 4 channels in
            alt mode
    """
    _assert_rocky(body, "normal map")
    level = body.variant.ocean_level
    elevation = rocky.height_field(body, height)
    if level < 1:
        relief = np.clip((elevation - level) / (1 - level), 0, None)
    else:
        relief = np.zeros_like(elevation)
    relief = relief * latitude_weight(height)[:, np.newaxis]

    step = 100.0 / height
    dx = relief[1:-1, 2:] - relief[1:-1, :-2]
    dy = relief[2:, 1:-1] - relief[:-2, 1:-1]
    # (step, 0, dx) x (0, step, dy)
    cross = np.stack(
        [-step * dx, -step * dy, np.full_like(dx, step * step)], axis=-1
    )
    unit = cross / np.linalg.norm(cross, axis=-1, keepdims=True)

    rgb = np.empty(relief.shape + (3,))
    rgb[...] = _FLAT_NORMAL
    rgb[1:-1, 1:-1, 0] = np.trunc(255 * (1 + unit[..., 0]) / 2)
    rgb[1:-1, 1:-1, 1] = np.trunc(255 * (1 - unit[..., 1]) / 2)
    rgb[1:-1, 1:-1, 2] = np.trunc(255 * (1 + unit[..., 2]) / 2)
    rgb = np.clip(rgb, 0, 255)
    if not alt_mode:
        return rgb.astype(np.uint8)

    alpha = rgb[..., 0]
    grey = np.trunc(rgb[..., 1] * alpha / 255.0)
    return np.stack([grey, grey, grey, alpha], axis=-1).astype(np.uint8)


def specular_map(body, height=config.DEFAULT_MAP_HEIGHT):
    """
    White where there is liquid water, black elsewhere. None for bodies
    without an ocean.
    """
    if not body.has_ocean:
        return None
    elevation = rocky.height_field(body, height)
    temperature = rocky.temperature_field(body, height)
    wet = (elevation <= body.variant.ocean_level) & (temperature > phys.FREEZING_POINT)
    return np.where(wet, 255, 0).astype(np.uint8)


def ring_density(body, width):
    """
    Ring opacity along the radius of the ring, repeated over
    config.RING_MAP_HEIGHT rows
    """
    random = body.random

    def build():
        noise = Offset(
            random.perlin("ring noise", 0.25, 2, 1.8, 2.2, 10, 16, 0.65, 0.75),
            random.uniform("ring offset", -0.5, 0.5),
        )
        band = sample_equator(noise, width)
        return np.tile(band, (config.RING_MAP_HEIGHT, 1))

    return body.fields.ensure("ring", width, build)


def ring_map(body, width=config.DEFAULT_MAP_HEIGHT, transparent=False):
    """
    Texture of a body's ring, None if it has no ring

    Args:
        body (Body):
            Any body
        width (int):
            Samples along the ring
        transparent (bool):
            If True return RGBA with the ring color and the density as
            alpha, otherwise RGB fading from black to the ring color

    Returns:
        np.ndarray or None
    """
    if body.ring is None:
        return None
    density = ring_density(body, width)
    color = body.ring.color
    if not transparent:
        return interpolate_array(BLACK, color, density)
    alpha = np.clip(np.trunc(255 * density), 0, 255)
    rgba = np.empty(density.shape + (4,))
    rgba[..., :3] = color
    rgba[..., 3] = alpha
    return rgba.astype(np.uint8)


# ── Writers ──────────────────────────────────────────────────────────


def write_color_map(body, path, height=config.DEFAULT_MAP_HEIGHT):
    return write_image(path, color_map(body, height))


def write_height_map(body, path, height=config.DEFAULT_MAP_HEIGHT):
    return write_image(path, height_map(body, height))


def write_normal_map(body, path, height=config.DEFAULT_MAP_HEIGHT, alt_mode=False):
    return write_image(path, normal_map(body, height, alt_mode=alt_mode))


def write_specular_map(body, path, height=config.DEFAULT_MAP_HEIGHT):
    """Nothing is written for a body without an ocean."""
    pixels = specular_map(body, height)
    if pixels is None:
        logger.debug("%s has no ocean, no specular map written", body.name)
        return None
    return write_image(path, pixels)


def write_ring_map(body, path, width=config.DEFAULT_MAP_HEIGHT):
    """Ring texture, with transparency when written as PNG."""
    transparent = Path(path).suffix.lower() == ".png"
    pixels = ring_map(body, width, transparent=transparent)
    if pixels is None:
        logger.debug("%s has no ring, no ring map written", body.name)
        return None
    return write_image(path, pixels)
