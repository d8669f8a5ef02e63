import numpy as np
import pytest

import seedverse.util.physics as phys


def test_effective_temperature():
    assert phys.effective_temperature(5778, 6.957e8, 2 * 6.957e8) == pytest.approx(
        5778 * 0.5
    )


def test_hill_sphere():
    assert phys.hill_sphere(2.0, 3.0, 1.0) == pytest.approx(2.0)


def test_orbital_period_uses_rounded_g():
    a, m = 1.496e11, phys.SOLAR_MASS
    assert phys.orbital_period(a, m) == pytest.approx(
        2 * np.pi * np.sqrt(a**3 / (6.67e-11 * m))
    )
    # Roughly a year
    assert phys.orbital_period(a, m) == pytest.approx(3.156e7, rel=0.01)


def test_periapsis_and_apoapsis():
    assert phys.periapsis(0.5, 10.0) == 5.0
    assert phys.apoapsis(0.5, 10.0) == 15.0


def test_orbital_velocity():
    assert phys.orbital_velocity(1.0, 2 * np.pi) == pytest.approx(1.0)


def test_surface_gravity_of_earth():
    g = phys.gravitational_acceleration(phys.EARTH_MASS, phys.EARTH_RADIUS)
    assert g == pytest.approx(phys.EARTH_GRAVITY, rel=0.02)


def test_sun_radius_from_luminosity():
    radius = phys.star_radius(phys.SOLAR_LUMINOSITY, phys.SOLAR_TEMPERATURE)
    assert radius == pytest.approx(phys.SOLAR_RADIUS, rel=0.01)


def test_bv_temperature_decreases_with_color_index():
    temperatures = [phys.bv_to_temperature(bv) for bv in (0.0, 0.5, 1.0, 1.5)]
    assert temperatures == sorted(temperatures, reverse=True)


def test_bv_to_color_is_color_of_bv_temperature():
    for bv in (-0.3, 0.63, 1.8):
        assert phys.bv_to_color(bv) == phys.temperature_to_color(phys.bv_to_temperature(bv))


def test_temperature_to_color():
    assert phys.temperature_to_color(5800) == (255, 255, 255)
    r, g, b = phys.temperature_to_color(3000)
    assert r == 255 and b < g < 255
    # Very cool stars have no blue at all
    assert phys.temperature_to_color(100)[2] == 0
    r, g, b = phys.temperature_to_color(20000)
    assert b == 255 and r < 255


def test_temperature_to_colors_matches_scalar():
    temperatures = np.array([[100.0, 3000.0], [5800.0, 12000.0]])
    colors = phys.temperature_to_colors(temperatures)
    assert colors.shape == (2, 2, 3)
    assert colors.dtype == np.uint8
    for t, c in zip(temperatures.ravel(), colors.reshape(-1, 3)):
        assert tuple(c) == phys.temperature_to_color(t)


def test_magnitude_to_luminosity_of_sun():
    assert phys.magnitude_to_luminosity(4.83) == pytest.approx(
        phys.SOLAR_LUMINOSITY, rel=0.05
    )
