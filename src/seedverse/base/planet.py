"""
Builders for rocky and giant planets (moons included).

Every satellite is first built as a rocky planet. If it turns out heavier
than ``config.GIANT_PROMOTION_MASS`` it is rebuilt as a giant under the same
name; the shared keys give it the same orbit and mass.
"""

import logging

import numpy as np

import seedverse.util.physics as phys
from seedverse import config
from seedverse.base.body import Body, GiantPlanet, Ring, RockyPlanet
from seedverse.base.orbit import place_orbit
from seedverse.exceptions import ConstraintViolation
from seedverse.util import colors
from seedverse.util.colors import ColorScale, color_pow, interpolate
from seedverse.util.keyed_random import KeyedRandom
from seedverse.util.noise import Combine

logger = logging.getLogger(__name__)

_OCEAN_GREY = (50, 50, 50)


# ── Shared steps ─────────────────────────────────────────────────────


def star_distance(system, parent, orbit):
    """
    Distance [m] from the nearest star, the semi-major axis of whichever
    ancestor (or the body itself) orbits the star directly
    """
    distance = orbit.semi_major_axis
    body = parent
    while not body.is_star:
        distance = body.orbit.semi_major_axis
        body = system.bodies[body.parent_id]
    return distance


def is_tidally_locked(parent, orbit, radius):
    near = phys.gravitational_acceleration(parent.mass, orbit.semi_major_axis - radius)
    far = phys.gravitational_acceleration(parent.mass, orbit.semi_major_axis + radius)
    return bool(near - far > config.TIDAL_LOCK_THRESHOLD)


def draw_ring(random, radius):
    """Ring of a planet with the given radius [m]."""
    inner = random.uniform("inner ring radius", radius, 3 * radius)
    outer = random.uniform("outer ring radius", inner, 3 * inner)
    if not (np.isfinite(outer) and 0 < inner <= outer):
        raise ConstraintViolation(f"Degenerate ring from {inner} to {outer} m")
    palette = random.choice("ring palette", [colors.ICE, colors.SAND])
    return Ring(
        inner_radius=inner,
        outer_radius=outer,
        inclination=np.pi / 2 * random.rand("ring inclination") ** 10,
        color=color_pow(random.color("ring color", palette), 0.4),
    )


def satellite_count(body):
    """Target number of satellites of a planet."""
    return int(
        2 * np.sqrt(body.radius / phys.EARTH_RADIUS)
        + 2 * np.sqrt(body.orbit.semi_major_axis / 1e11)
    )


def _place(system, parent, random):
    """Orbit, mass, sphere of influence and bare effective temperature."""
    orbit = place_orbit(system, parent, random)
    if parent.is_star:
        mass = 10 ** random.uniform("mass", 22, 28)
    else:
        mass = 10 ** random.uniform(
            "mass", 19, np.log10(parent.mass * 1e5 / parent.radius)
        )
    star = system.bodies[parent.star_id]
    effective_temperature = phys.effective_temperature(
        star.effective_temperature, star.radius, star_distance(system, parent, orbit)
    )
    sphere_of_influence = phys.hill_sphere(orbit.periapsis, mass, parent.mass)
    return orbit, mass, sphere_of_influence, effective_temperature


def _surface_temperature(effective, geothermal, greenhouse):
    return (effective**4 + geothermal**4 + greenhouse**4) ** 0.25


def _scale_height(surface_temperature, surface_gravity):
    # Mean molecular mass of 4.5e-26 kg, about that of air
    return phys.KB * surface_temperature / (4.5e-26 * surface_gravity)


# ── Rocky planets ────────────────────────────────────────────────────


def _rocky_color_scale(random, has_atmosphere):
    if has_atmosphere or random.rand("palette selection 1") < 0.3:
        palette1 = random.choice("palette 1", [colors.SAND, colors.EARTH])
        palette2 = random.choice("palette 2", [colors.EARTH, colors.STONE])
    elif random.rand("palette selection 2") < 0.7:
        palette1 = palette2 = colors.STONE
    else:
        palette1 = palette2 = colors.ICE

    values = [0.0]
    scale_colors = [random.color("color scale color 0", palette1)]
    i = 0
    while values[-1] < 1:
        i += 1
        value = min(values[-1] + random.rand(f"color scale value {i}"), 1.0)
        palette = palette1 if i == 1 else palette2
        values.append(value)
        scale_colors.append(random.color(f"color scale color {i}", palette))
    return values, scale_colors


def _rocky_life_colors(random, scale_colors):
    life_colors = list(scale_colors)
    if random.rand("life color") < 0.5:
        life_colors[0] = random.color("life color 1", colors.FOREST)
        life_colors[1] = random.color("life color 2", colors.GRASS)
    else:
        life_colors[0] = random.color("life color 1", colors.BURGUNDY)
        life_colors[1] = random.color("life color 2", colors.BURGUNDY)
    return life_colors


def _combined_noise(random, min_persistence, max_persistence):
    """
    One of min, max, product or blend of two noise fields, the combinator
    is chosen once per body
    """
    n1, n2, n3 = (
        random.noise(
            f"map noise {i}", 0.5, 2, 1.9, 2.3, 10, 10, min_persistence, max_persistence
        )
        for i in (1, 2, 3)
    )
    options = [
        Combine("min", n1, n2),
        Combine("max", n1, n2),
        Combine("multiply", n1, n2),
        Combine("blend", n1, n2, control=n3),
    ]
    return random.choice("noise selection", options)


def build_rocky(system, parent, name):
    """
    Build a rocky planet or moon orbiting ``parent``

    Args:
        system (System):
            Owner of ``parent`` and its existing satellites
        parent (Body):
            The body being orbited, already attached to ``system``
        name (str):
            Name of the new body, seeds all of its parameters

    Returns:
        Body:
            The planet, not yet attached to ``system``
    """
    random = KeyedRandom(name)
    orbit, mass, sphere_of_influence, effective_temperature = _place(
        system, parent, random
    )
    radius = phys.EARTH_RADIUS * (mass / phys.EARTH_MASS) ** random.uniform(
        "radius", 0.24, 0.32
    )
    volume = phys.sphere_volume(radius)
    surface_gravity = phys.gravitational_acceleration(mass, radius)
    rotation_period = np.exp(11 + random.gaussian("rotation period", 2))
    albedo = random.uniform("albedo", 0, 0.6)
    effective_temperature *= (1 - albedo) ** 0.25
    core_temperature = (
        5500 * (mass / 6e24) ** 0.4 * random.uniform("core temperature", 0.9, 1.1)
    )
    geothermal_temperature = 100 * (core_temperature / 6000) ** 0.62

    tidally_locked = is_tidally_locked(parent, orbit, radius)
    if tidally_locked:
        rotation_period = orbit.period

    # Atmosphere
    atmosphere_palette = random.choice(
        "atmosphere palette", [colors.WATER, colors.SAND, colors.FISH, colors.EARTH]
    )
    atmosphere_color = random.color("atmosphere color", atmosphere_palette)
    has_atmosphere = random.rand("atmosphere") < 0.7 * radius / phys.EARTH_RADIUS
    opacity = 0.0
    if has_atmosphere:
        opacity = random.rand("atmosphere opacity") ** (phys.EARTH_RADIUS / radius)
    if effective_temperature > phys.FREEZING_POINT:
        opacity = opacity ** ((effective_temperature / phys.FREEZING_POINT) ** 2)
    pressure = phys.EARTH_ATMOSPHERE_PRESSURE * 2 * np.tan(np.pi / 2 * opacity)
    if pressure < 1:
        has_atmosphere = False
        pressure = 0.0
    greenhouse_temperature = 13 * pressure**0.25
    surface_temperature = _surface_temperature(
        effective_temperature, geothermal_temperature, greenhouse_temperature
    )
    scale_height = _scale_height(surface_temperature, surface_gravity)
    atmosphere_height = scale_height * np.log(pressure) if has_atmosphere else 0.0

    ice_factor = random.rand("ice factor")
    ring = None
    if random.rand("has ring") < 0.05 * np.log(mass / phys.EARTH_MASS):
        ring = draw_ring(random, radius)

    # Ocean and life
    ocean_palette = random.choice(
        "ocean palette", [colors.WATER, colors.FISH, colors.RUST]
    )
    ocean_color = interpolate(
        random.color("ocean color", ocean_palette), _OCEAN_GREY, 0.4
    )
    has_ocean = (
        has_atmosphere
        and surface_temperature < phys.BOILING_POINT
        and random.rand("ocean") < np.sqrt(opacity)
    )
    ocean_level = 0.0
    has_life = False
    if has_ocean:
        level = min(0.5 + random.gaussian("ocean level", 0.25), 1.0)
        if level < 0:
            has_ocean = False
        else:
            ocean_level = level
            ice_factor = 1.0
            has_life = (
                surface_temperature > phys.FREEZING_POINT and random.rand("life") < 0.5
            )
    ice_color = random.color("ice color", colors.ICE)
    terrain_scale = (1 - ocean_level) * 1000 * np.exp(
        random.uniform("terrain scale", 0.4, 3)
    )

    # Surface colors
    values, scale_colors = _rocky_color_scale(random, has_atmosphere)
    life_color_scale = None
    if has_life:
        life_colors = _rocky_life_colors(random, scale_colors)
        life_color_scale = ColorScale(values, life_colors)
        color = life_colors[1]
    elif has_ocean:
        color = interpolate(ocean_color, atmosphere_color, opacity)
    elif has_atmosphere:
        color = interpolate(scale_colors[1], atmosphere_color, opacity)
    else:
        color = scale_colors[1]

    variant = RockyPlanet(
        albedo=albedo,
        core_temperature=core_temperature,
        geothermal_temperature=geothermal_temperature,
        greenhouse_temperature=greenhouse_temperature,
        surface_temperature=surface_temperature,
        has_atmosphere=bool(has_atmosphere),
        atmosphere_color=atmosphere_color,
        atmosphere_opacity=opacity,
        atmosphere_pressure=pressure,
        atmosphere_scale_height=scale_height,
        atmosphere_height=atmosphere_height,
        color_scale=ColorScale(values, scale_colors),
        height_noise=_combined_noise(random, 0.4, 0.5),
        color_noise=_combined_noise(random, 0.65, 0.75),
        temperature_noise=random.perlin(
            "temperature noise", 2, 2, 1.9, 2.3, 10, 10, 0.5, 0.5
        ),
        ice_factor=ice_factor,
        ice_color=ice_color,
        has_ocean=bool(has_ocean),
        ocean_level=ocean_level,
        ocean_color=ocean_color,
        has_life=bool(has_life),
        life_color_scale=life_color_scale,
        terrain_scale=terrain_scale,
    )
    return Body(
        name=name,
        system=parent.system,
        variant=variant,
        mass=mass,
        radius=radius,
        volume=volume,
        density=mass / volume,
        rotation_period=rotation_period,
        surface_gravity=surface_gravity,
        effective_temperature=effective_temperature,
        sphere_of_influence=sphere_of_influence,
        color=color,
        orbit=orbit,
        ring=ring,
        tidally_locked=tidally_locked,
    )


# ── Giant planets ────────────────────────────────────────────────────


def _giant_color_scale(random):
    if random.rand("colour choice") < 0.5:
        palettes = [
            random.choice("palette 1", [colors.WATER, colors.FISH]),
            random.choice("palette 2", [colors.WATER, colors.FISH]),
            colors.ICE,
            random.choice("palette 4", [colors.WATER, colors.FISH]),
        ]
        keys = [
            "color scale 0",
            "color scale color 1",
            "color scale color 2",
            "color scale color 3",
        ]
        powers = [0.4, 0.15, 0.5, 0.5]
    else:
        palettes = [
            random.choice("palette 1", [colors.RUST, colors.SAND]),
            colors.EARTH,
            random.choice("palette 3", [colors.ICE, colors.SAND]),
            random.choice("palette 4", [colors.RUST, colors.EARTH]),
        ]
        keys = [f"color scale color {i}" for i in range(4)]
        powers = [0.35, 0.25, 0.5, 0.5]
    scale_colors = [
        color_pow(random.color(key, palette), power)
        for key, palette, power in zip(keys, palettes, powers)
    ]
    return ColorScale([0.0, 0.33, 0.67, 1.0], scale_colors)


def build_giant(system, parent, name):
    """
    Build a gas or ice giant orbiting ``parent``, see :func:`build_rocky` for
    the arguments
    """
    random = KeyedRandom(name)
    orbit, mass, sphere_of_influence, effective_temperature = _place(
        system, parent, random
    )
    radius = phys.EARTH_RADIUS * (mass / phys.EARTH_MASS) ** random.uniform(
        "radius", 0.4, 0.52
    )
    volume = phys.sphere_volume(radius)
    surface_gravity = phys.gravitational_acceleration(mass, radius)
    rotation_period = np.exp(11 + random.gaussian("rotation period", 2))
    albedo = random.uniform("albedo", 0.2, 0.5)
    effective_temperature *= (1 - albedo) ** 0.25
    core_temperature = 1300 * np.sqrt(mass / 6e24)
    geothermal_temperature = core_temperature / 200

    tidally_locked = is_tidally_locked(parent, orbit, radius)
    if tidally_locked:
        rotation_period = orbit.period

    # Opacity only sets the pressure, the visible disk is not tinted
    opacity = random.rand("atmosphere opacity") ** (radius / phys.EARTH_RADIUS)
    pressure = phys.EARTH_ATMOSPHERE_PRESSURE * 2 * np.tan(np.pi * opacity / 2)
    greenhouse_temperature = 13 * pressure**0.25
    surface_temperature = _surface_temperature(
        effective_temperature, geothermal_temperature, greenhouse_temperature
    )
    scale_height = _scale_height(surface_temperature, surface_gravity)

    ring = None
    if random.rand("has ring") < 0.5:
        ring = draw_ring(random, radius)

    color_scale = _giant_color_scale(random)
    variant = GiantPlanet(
        albedo=albedo,
        core_temperature=core_temperature,
        geothermal_temperature=geothermal_temperature,
        greenhouse_temperature=greenhouse_temperature,
        surface_temperature=surface_temperature,
        has_atmosphere=True,
        atmosphere_color=color_scale.colors[0],
        atmosphere_opacity=0.0,
        atmosphere_pressure=pressure,
        atmosphere_scale_height=scale_height,
        atmosphere_height=scale_height * np.log(pressure),
        color_scale=color_scale,
        height_noise=random.perlin(
            "height map noise", 4, 4, 2.2, 2.2, 12, 12, 0.6, 0.7
        ),
        color_noise=random.billow(
            "color map noise", 2, 8, 1.9, 1.9, 8, 8, 0.55, 0.65
        ),
    )
    return Body(
        name=name,
        system=parent.system,
        variant=variant,
        mass=mass,
        radius=radius,
        volume=volume,
        density=mass / volume,
        rotation_period=rotation_period,
        surface_gravity=surface_gravity,
        effective_temperature=effective_temperature,
        sphere_of_influence=sphere_of_influence,
        color=color_scale.colors[0],
        orbit=orbit,
        ring=ring,
        tidally_locked=tidally_locked,
    )


def build_planet(system, parent, name):
    """Rocky planet, or a giant if the rocky draw is too heavy."""
    planet = build_rocky(system, parent, name)
    if planet.mass > config.GIANT_PROMOTION_MASS:
        planet = build_giant(system, parent, name)
    logger.debug(
        "Built %s planet %s around %s: M=%.3e kg, a=%.3e m",
        planet.kind,
        name,
        parent.name,
        planet.mass,
        planet.orbit.semi_major_axis,
    )
    return planet
