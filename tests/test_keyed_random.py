import numpy as np
import pytest
from scipy import stats

from seedverse.util.colors import WATER, hsv_to_rgb
from seedverse.util.keyed_random import KeyedRandom, stable_hash
from seedverse.util.noise import Billow, Perlin, RidgedMulti, Turbulence


def test_stable_hash_is_32_bit_and_repeatable():
    h = stable_hash("the sun")
    assert h == stable_hash("the sun")
    assert 0 <= h < 2**32
    assert h != stable_hash("the moon")


def test_same_root_and_key_give_same_value():
    assert KeyedRandom("vega").rand("mass") == KeyedRandom("vega").rand("mass")


def test_value_does_not_depend_on_call_order():
    a = KeyedRandom("vega")
    first = a.rand("radius")
    for i in range(10):
        a.rand(f"other {i}")
    assert a.rand("radius") == first


def test_different_roots_differ():
    assert KeyedRandom("vega").rand("mass") != KeyedRandom("altair").rand("mass")


def test_rand_range():
    random = KeyedRandom("range")
    draws = np.array([random.rand(str(i)) for i in range(500)])
    assert np.all(draws >= 0) and np.all(draws < 1)


def test_derived_draws_follow_their_formulas():
    random = KeyedRandom("formulas")
    x = random.rand("k")
    assert random.uniform("k", 2, 5) == pytest.approx(2 + 3 * x)
    assert random.randint("k", 3, 10) == int(3 + 7 * x)
    assert random.gaussian("k", 2.0) == pytest.approx(
        2.0 * np.sqrt(np.pi / 8) * np.log(x / (1 - x))
    )
    options = ["a", "b", "c", "d"]
    assert random.choice("k", options) == options[int(4 * x)]


def test_log_uniform_bounds():
    random = KeyedRandom("log")
    for i in range(50):
        assert 2 <= random.log_uniform(str(i), 2, 32) <= 32


def test_color_channels_are_independent_bytes():
    random = KeyedRandom("colors")
    color = random.color("sky")
    assert color == (
        random.randint("sky red", 0, 256),
        random.randint("sky green", 0, 256),
        random.randint("sky blue", 0, 256),
    )


def test_palette_color_is_hsv_draw():
    random = KeyedRandom("colors")
    h = random.uniform("sea hue", WATER.min_hue, WATER.max_hue)
    s = random.uniform("sea saturation", WATER.min_saturation, WATER.max_saturation)
    v = random.uniform("sea value", WATER.min_value, WATER.max_value)
    assert random.color("sea", WATER) == hsv_to_rgb(h, s, v)


def test_uniform_distribution_chi_square():
    random = KeyedRandom("chi square")
    draws = [random.rand(f"key {i}") for i in range(5000)]
    counts, _ = np.histogram(draws, bins=10, range=(0, 1))
    assert stats.chisquare(counts).pvalue > 1e-4


def test_unrelated_keys_are_uncorrelated():
    random = KeyedRandom("independence")
    a = [random.rand(f"mass {i}") for i in range(2000)]
    b = [random.rand(f"radius {i}") for i in range(2000)]
    r, _ = stats.pearsonr(a, b)
    assert abs(r) < 0.1


def test_serial_correlation_of_consecutive_keys():
    random = KeyedRandom("serial")
    draws = np.array([random.rand(str(i)) for i in range(2000)])
    r, _ = stats.pearsonr(draws[:-1], draws[1:])
    assert abs(r) < 0.1


def test_noise_seed_formula():
    random = KeyedRandom("noise")
    root = stable_hash("noise")
    expected = (root * root + root * stable_hash("height")) % 2**32
    assert random.noise_seed("height") == expected


def test_noise_descriptors_draw_their_parameters():
    random = KeyedRandom("noise")
    perlin = random.perlin("height", 2, 32, 1.8, 2.2, 10, 16, 0.5, 0.6)
    assert isinstance(perlin, Perlin)
    assert 2 <= perlin.frequency <= 32
    assert 1.8 <= perlin.lacunarity <= 2.2
    assert 10 <= perlin.octave_count < 16
    assert 0.5 <= perlin.persistence <= 0.6
    assert perlin == random.perlin("height", 2, 32, 1.8, 2.2, 10, 16, 0.5, 0.6)

    ridged = random.ridged_multi("height", 2, 32, 1.8, 2.2, 10, 16)
    assert ridged.frequency == perlin.frequency
    assert ridged.seed == perlin.seed


def test_turbulence_descriptor_warps_a_perlin_source():
    random = KeyedRandom("noise")
    turbulence = random.turbulence("clouds", 2, 8, 1.8, 2.2, 4, 6, 0.5, 0.6)
    assert isinstance(turbulence, Turbulence)
    assert turbulence.source == random.perlin("clouds", 2, 8, 1.8, 2.2, 4, 6, 0.5, 0.6)
    assert 0.2 <= turbulence.frequency <= 0.8
    assert turbulence.seed == random.noise_seed("clouds")
    assert turbulence.power == 1.0 and turbulence.roughness == 1

def test_noise_picks_one_of_three_kinds():
    random = KeyedRandom("noise")
    kinds = {
        type(random.noise(f"map {i}", 0.5, 2, 1.9, 2.3, 10, 10, 0.4, 0.5))
        for i in range(30)
    }
    assert kinds <= {Perlin, Billow, RidgedMulti}
    assert len(kinds) > 1
