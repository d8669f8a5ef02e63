import numpy as np

from seedverse.surface.fields import (
    FieldCache,
    Generated,
    NotGenerated,
    grid_coordinates,
    latitude_weight,
    normalize,
    sample_equator,
    sample_meridian,
    sample_sphere,
)
from seedverse.util.noise import Perlin

FIELD = Perlin(frequency=1.5, lacunarity=2.0, octave_count=3, persistence=0.5, seed=1)


class CountingBuild:
    def __init__(self, height):
        self.calls = 0
        self.height = height

    def __call__(self):
        self.calls += 1
        return np.zeros((self.height, 2 * self.height))


def test_cache_builds_once_per_resolution():
    cache = FieldCache()
    assert isinstance(cache.slot("height"), NotGenerated)

    build = CountingBuild(8)
    first = cache.ensure("height", 8, build)
    second = cache.ensure("height", 8, build)
    assert build.calls == 1
    assert first is second
    slot = cache.slot("height")
    assert isinstance(slot, Generated)
    assert slot.resolution == 8 and slot.grid is first


def test_cache_rebuilds_on_new_resolution():
    cache = FieldCache()
    cache.ensure("height", 8, CountingBuild(8))
    build = CountingBuild(16)
    grid = cache.ensure("height", 16, build)
    assert build.calls == 1
    assert grid.shape == (16, 32)
    assert cache.slot("height").resolution == 16


def test_cache_invalidate():
    cache = FieldCache()
    cache.ensure("height", 8, CountingBuild(8))
    cache.ensure("color", 8, CountingBuild(8))
    cache.invalidate("height")
    assert isinstance(cache.slot("height"), NotGenerated)
    assert isinstance(cache.slot("color"), Generated)
    cache.invalidate()
    assert isinstance(cache.slot("color"), NotGenerated)


def test_grid_coordinates_start_at_south_pole():
    latitude, longitude = grid_coordinates(4)
    assert latitude.shape == (4, 1)
    assert longitude.shape == (1, 8)
    np.testing.assert_array_equal(latitude[:, 0], [-90, -45, 0, 45])
    assert longitude[0, 0] == -180
    assert longitude[0, -1] == 135


def test_sample_shapes():
    assert sample_sphere(FIELD, 6).shape == (6, 12)
    assert sample_meridian(FIELD, 6).shape == (6,)
    assert sample_equator(FIELD, 10).shape == (10,)


def test_normalize_range():
    grid = normalize(sample_sphere(FIELD, 8))
    assert grid.min() == 0
    assert grid.max() == 1


def test_normalize_is_idempotent():
    grid = normalize(sample_sphere(FIELD, 8))
    np.testing.assert_array_equal(normalize(grid), grid)


def test_normalize_constant_grid():
    np.testing.assert_array_equal(normalize(np.full((3, 6), 4.2)), np.zeros((3, 6)))


def test_latitude_weight():
    weight = latitude_weight(4)
    assert weight[0] == 0
    assert weight[2] == 1
