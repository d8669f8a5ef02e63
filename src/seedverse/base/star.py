import logging

import numpy as np

import seedverse.util.physics as phys
from seedverse.base.body import Body, Star
from seedverse.base.orbit import place_orbit
from seedverse.util.keyed_random import KeyedRandom

logger = logging.getLogger(__name__)

REFERENCE_SUN = "the sun"

# The mass-luminosity fit is only defined for -10 < log L < 50/3
LOG_LUMINOSITY_RANGE = (-9.9, 16.6)


def _root_sphere_of_influence(mass):
    # Distance at which the star's pull drops to 1e-6 m/s^2
    return np.sqrt(phys.G * mass / 1e-6)


def build_sun():
    """The Sun with its reference parameters, nothing is drawn at random."""
    mass = phys.SOLAR_MASS
    radius = phys.SOLAR_RADIUS
    volume = phys.sphere_volume(radius)
    return Body(
        name=REFERENCE_SUN,
        system=REFERENCE_SUN,
        variant=Star(bv_magnitude=0.63, magnitude=4.83, luminosity=phys.SOLAR_LUMINOSITY),
        mass=mass,
        radius=radius,
        volume=volume,
        density=mass / volume,
        rotation_period=2164320.0,
        surface_gravity=phys.gravitational_acceleration(mass, radius),
        effective_temperature=phys.SOLAR_TEMPERATURE,
        sphere_of_influence=_root_sphere_of_influence(mass),
        color=phys.temperature_to_color(phys.SOLAR_TEMPERATURE),
    )


def build_star(name, system=None, parent=None):
    """
    Build a star from its name

    Args:
        name (str):
            Name of the star, also the seed of all its parameters. Case is
            ignored.
        system (System):
            Owning system, only needed when the star orbits ``parent``
        parent (Body):
            Body the star orbits, None for the root of a system

    Returns:
        Body:
            The star, not yet attached to a system
    """
    name = name.lower()
    if name == REFERENCE_SUN and parent is None:
        return build_sun()

    random = KeyedRandom(name)
    bv = 0.7 + random.gaussian("b-v magnitude", 0.5)
    magnitude = 10.0 * (
        (bv - 0.8) ** 3 + 0.5 * (bv - 0.8) + 0.53
    ) + random.gaussian("magnitude", 0.7)
    luminosity = phys.magnitude_to_luminosity(magnitude)
    temperature = phys.bv_to_temperature(bv)
    log_lum = np.log10(luminosity / 3.828e26 + 1e-10) + random.gaussian(
        "log luminosity", 0.3
    )
    log_lum = float(np.clip(log_lum, *LOG_LUMINOSITY_RANGE))
    mass = 1.989e30 * ((50 + 5 * log_lum) / (50 - 3 * log_lum)) ** 1.3

    orbit = None
    if parent is None:
        sphere_of_influence = _root_sphere_of_influence(mass)
    else:
        orbit = place_orbit(system, parent, random)
        sphere_of_influence = phys.hill_sphere(orbit.periapsis, mass, parent.mass)

    radius = phys.star_radius(luminosity, temperature)
    volume = phys.sphere_volume(radius)
    star = Body(
        name=name,
        system=name if parent is None else parent.system,
        variant=Star(
            bv_magnitude=bv,
            magnitude=magnitude,
            luminosity=luminosity,
            temperature_noise=random.billow(
                "color map noise", 2, 32, 1.8, 2.2, 10, 16, 0.5, 0.6
            ),
        ),
        mass=mass,
        radius=radius,
        volume=volume,
        density=mass / volume,
        rotation_period=np.exp(15 + random.gaussian("rotation period", 3)),
        surface_gravity=phys.gravitational_acceleration(mass, radius),
        effective_temperature=temperature,
        sphere_of_influence=sphere_of_influence,
        color=phys.bv_to_color(bv),
        orbit=orbit,
    )
    logger.debug(
        "Built star %s: T=%.0f K, M=%.3e kg, R=%.3e m",
        name,
        temperature,
        mass,
        radius,
    )
    return star
