import numpy as np
import pytest

from seedverse.util.noise import (
    Billow,
    Combine,
    Offset,
    Perlin,
    RidgedMulti,
    Turbulence,
    evaluate_field,
    gradient_noise,
)

PERLIN = Perlin(frequency=2.0, lacunarity=2.0, octave_count=4, persistence=0.5, seed=7)
BILLOW = Billow(frequency=2.0, lacunarity=2.0, octave_count=4, persistence=0.5, seed=7)
RIDGED = RidgedMulti(frequency=2.0, lacunarity=2.0, octave_count=4, seed=7)

lat = np.linspace(-90, 90, 9)[:, np.newaxis]
lon = np.linspace(-180, 180, 17)[np.newaxis, :]


def test_gradient_noise_vanishes_on_lattice():
    x = np.arange(-3, 4)
    assert np.all(gradient_noise(x, x + 1, 2 * x, seed=3) == 0)


def test_gradient_noise_range():
    rng = np.random.default_rng(0)
    points = rng.uniform(-50, 50, size=(3, 2000))
    values = gradient_noise(*points, seed=11)
    assert np.all(np.abs(values) <= 1.5)
    assert values.std() > 0.05


@pytest.mark.parametrize("field", [PERLIN, BILLOW, RIDGED])
def test_fields_are_deterministic(field):
    a = evaluate_field(field, lat, lon)
    b = evaluate_field(field, lat, lon)
    assert a.shape == (9, 17)
    np.testing.assert_array_equal(a, b)


def test_seed_changes_field():
    other = Perlin(frequency=2.0, lacunarity=2.0, octave_count=4, persistence=0.5, seed=8)
    assert not np.allclose(evaluate_field(PERLIN, lat, lon), evaluate_field(other, lat, lon))


def test_offset_adds_constant():
    shifted = Offset(PERLIN, 0.25)
    np.testing.assert_allclose(
        evaluate_field(shifted, lat, lon), evaluate_field(PERLIN, lat, lon) + 0.25
    )


def test_combinators():
    a = evaluate_field(PERLIN, lat, lon)
    b = evaluate_field(BILLOW, lat, lon)
    np.testing.assert_array_equal(
        evaluate_field(Combine("min", PERLIN, BILLOW), lat, lon), np.minimum(a, b)
    )
    np.testing.assert_array_equal(
        evaluate_field(Combine("max", PERLIN, BILLOW), lat, lon), np.maximum(a, b)
    )
    np.testing.assert_allclose(
        evaluate_field(Combine("multiply", PERLIN, BILLOW), lat, lon), a * b
    )
    blend = evaluate_field(Combine("blend", PERLIN, BILLOW, control=RIDGED), lat, lon)
    assert blend.shape == a.shape


def test_blend_needs_control():
    with pytest.raises(AssertionError):
        Combine("blend", PERLIN, BILLOW)


def test_unknown_combinator():
    with pytest.raises(AssertionError):
        Combine("xor", PERLIN, BILLOW)


def test_turbulence_warps_source():
    warped = Turbulence(source=PERLIN, frequency=0.5, power=1.0, roughness=1, seed=3)
    values = evaluate_field(warped, lat, lon)
    assert values.shape == (9, 17)
    assert not np.allclose(values, evaluate_field(PERLIN, lat, lon))
