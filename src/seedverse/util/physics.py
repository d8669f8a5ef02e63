"""
Closed-form astrophysical formulae used while building bodies. Everything is
in SI units and side-effect free.
"""

import numpy as np

# Stefan-Boltzmann constant [W/m^2/K^4]
SIGMA = 5.67037e-8
# Boltzmann constant [J/K]
KB = 1.38065e-23
# Gravitational constant [m^3/kg/s^2]
G = 6.67408e-11
FREEZING_POINT = 273.15
BOILING_POINT = 373.13

SOLAR_MASS = 1.9885e30
SOLAR_RADIUS = 695700000.0
SOLAR_TEMPERATURE = 5778.0
SOLAR_LUMINOSITY = 3.828e26

JUPITER_MASS = 1.898e27
JUPITER_RADIUS = 69911000.0

EARTH_MASS = 5.972e24
EARTH_RADIUS = 6378000.0
EARTH_ATMOSPHERE_PRESSURE = 101325.0
EARTH_GRAVITY = 9.80665


def magnitude_to_luminosity(absolute_magnitude):
    """
    Luminosity of a star [W] from its absolute magnitude
    """
    return SOLAR_LUMINOSITY * 10 ** (1.93 - 0.4 * absolute_magnitude)


def bv_to_temperature(bv_magnitude):
    """
    Ballesteros' formula for the temperature [K] of a star with a given B-V
    color index
    """
    return 4600 * (
        1.0 / (bv_magnitude + 1.70) + 1.0 / (bv_magnitude + 0.62)
    ) + 30 * np.exp(-20 * bv_magnitude)


def bv_to_color(bv_magnitude):
    return temperature_to_color(bv_to_temperature(bv_magnitude))


def temperature_to_colors(temperature):
    """
    Vectorised blackbody approximation

    Args:
        temperature (np.ndarray):
            Temperatures [K] of any shape

    Returns:
        rgb (np.ndarray):
            uint8 array with a trailing axis of length 3
    """
    temperature = np.asarray(temperature, dtype=float)
    cool = temperature < 5800
    x = (temperature - 5800) / 4300
    warm = np.exp(1 - temperature / 5800)
    r = np.where(cool, 255.0, 255 * (0.6 + 0.4 * warm))
    g = np.where(cool, 255 * (1 - 0.6 * x**2), 255 * (0.7 + 0.3 * warm))
    b = np.where(cool, 255 * (1 - x**2), 255.0)
    rgb = np.stack([r, g, b], axis=-1)
    # Truncate towards zero before clamping, like an int cast would
    rgb = np.clip(np.trunc(rgb), 0, 255)
    return rgb.astype(np.uint8)


def temperature_to_color(temperature):
    """
    Color of a blackbody at the given temperature [K] as an (r, g, b) tuple
    """
    return tuple(int(c) for c in temperature_to_colors(temperature))


def star_radius(luminosity, effective_temperature):
    """
    Stefan-Boltzmann law solved for radius [m]
    """
    return np.sqrt(luminosity / (4 * np.pi * SIGMA * effective_temperature**4))


def orbital_period(distance, mass):
    """
    Keplerian period [s] at a given distance [m] around a body of mass [kg]
    """
    return 2 * np.pi * np.sqrt(distance**3 / (6.67e-11 * mass))


def periapsis(eccentricity, semi_major_axis):
    return (1 - eccentricity) * semi_major_axis


def apoapsis(eccentricity, semi_major_axis):
    return (1 + eccentricity) * semi_major_axis


def orbital_velocity(semi_major_axis, period):
    """
    Mean orbital speed [m/s]
    """
    return 2 * np.pi * semi_major_axis / period


def effective_temperature(star_temperature, star_radius, distance):
    """
    Radiative equilibrium temperature [K] at a distance [m] from a star,
    before any albedo correction

    Args:
        star_temperature (float):
            Effective temperature of the star [K]
        star_radius (float):
            Radius of the star [m]
        distance (float):
            Distance from the star [m]
    """
    return star_temperature * np.sqrt(star_radius / (2 * distance))


def hill_sphere(periapsis, mass, parent_mass):
    """
    Radius [m] of the region in which a body's gravity dominates over its
    parent's
    """
    return periapsis * (mass / (3 * parent_mass)) ** (1 / 3.0)


def sphere_volume(radius):
    return 4 * np.pi / 3 * radius**3


def gravitational_acceleration(mass, distance):
    return G * mass / (distance * distance)
