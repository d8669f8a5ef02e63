import numpy as np
import pytest
from PIL import Image

import seedverse.util.physics as phys
from seedverse import (
    color_map,
    height_map,
    normal_map,
    ring_map,
    specular_map,
    write_color_map,
    write_ring_map,
    write_specular_map,
)
from seedverse.base.body import Ring
from seedverse.base.star import build_sun
from seedverse.exceptions import ResourceUnavailable
from seedverse.surface import giant as giant_surface
from seedverse.surface import rocky as rocky_surface
from seedverse.surface import star as star_surface
from seedverse.util.io import write_image

from conftest import fresh_copy

H = 16
RING = Ring(inner_radius=1e7, outer_radius=3e7, inclination=0.1, color=(200, 180, 150))


@pytest.mark.parametrize("name", ["star", "rocky", "giant"])
def test_color_map_shape(request, name):
    body = request.getfixturevalue(name)
    pixels = color_map(body, H)
    assert pixels.shape == (H, 2 * H, 3)
    assert pixels.dtype == np.uint8


@pytest.mark.parametrize("name", ["star", "rocky", "giant"])
def test_color_map_is_deterministic(request, name):
    body = request.getfixturevalue(name)
    np.testing.assert_array_equal(color_map(body, H), color_map(fresh_copy(body), H))


def test_star_temperature_range(star):
    temperature = star_surface.temperature_field(star, H)
    assert temperature.min() == pytest.approx(0.75 * star.effective_temperature)
    assert temperature.max() == pytest.approx(star.effective_temperature)


def test_reference_sun_is_uniform():
    pixels = color_map(build_sun(), 8)
    assert np.all(pixels == pixels[0, 0])


def test_planet_albedo_is_measured(rocky, giant):
    for body in (rocky, giant):
        color_map(body, H)
        assert 0 <= body.variant.albedo <= 1


def test_giant_bands(giant):
    profile = giant_surface.banding_profile(giant, H)
    assert profile.shape == (H,)
    assert profile.min() == 0 and profile.max() == 1
    field = giant_surface.color_field(giant, H)
    assert field.shape == (H, 2 * H)
    # Bands fade out at the south pole row
    assert np.all(field[0] == 0)


def test_rocky_temperature_extremes_recorded(rocky):
    temperature = rocky_surface.temperature_field(rocky, H)
    assert rocky.variant.min_temperature == temperature.min()
    assert rocky.variant.max_temperature == temperature.max()
    assert "min_temperature" in rocky.to_dict()


def test_ocean_pixels_have_ocean_color(rocky):
    ocean = (1, 2, 3)
    body = fresh_copy(
        rocky,
        variant_changes=dict(
            has_ocean=True,
            ocean_level=0.5,
            ocean_color=ocean,
            has_atmosphere=False,
            has_life=False,
        ),
    )
    pixels = color_map(body, H)
    below = rocky_surface.height_field(body, H) <= 0.5
    assert below.any()
    assert np.all(pixels[below] == ocean)


def test_frozen_pixels_have_ice_color(rocky):
    ice = (250, 251, 252)
    body = fresh_copy(
        rocky,
        variant_changes=dict(
            has_atmosphere=True, has_life=False, ice_factor=1e6, ice_color=ice
        ),
    )
    assert np.all(color_map(body, H) == ice)


def test_height_map(rocky):
    pixels = height_map(rocky, H)
    assert pixels.shape == (H, 2 * H)
    assert pixels.min() == 0 and pixels.max() == 255


def test_height_map_needs_rocky_planet(star):
    with pytest.raises(AssertionError):
        height_map(star, H)


def test_normal_map_border_is_flat(rocky):
    pixels = normal_map(rocky, H)
    assert pixels.shape == (H, 2 * H, 3)
    assert np.all(pixels[0] == (127, 127, 255))
    assert np.all(pixels[:, -1] == (127, 127, 255))


def test_normal_map_of_flooded_planet_is_flat(rocky):
    body = fresh_copy(rocky, variant_changes=dict(ocean_level=1.0))
    assert np.all(normal_map(body, H) == (127, 127, 255))
    assert np.all(normal_map(body, H, alt_mode=True) == (63, 63, 63, 127))


def test_specular_map(rocky, giant, star):
    assert specular_map(giant, H) is None
    assert specular_map(star, H) is None
    body = fresh_copy(
        rocky, variant_changes=dict(has_ocean=True, ocean_level=0.5, has_atmosphere=True)
    )
    pixels = specular_map(body, H)
    assert pixels.shape == (H, 2 * H)
    assert set(np.unique(pixels)) <= {0, 255}
    elevation = rocky_surface.height_field(body, H)
    temperature = rocky_surface.temperature_field(body, H)
    assert np.all(pixels[elevation > 0.5] == 0)
    assert np.all(pixels[temperature <= phys.FREEZING_POINT] == 0)


def test_ring_map(rocky):
    assert ring_map(fresh_copy(rocky, ring=None), 64) is None
    body = fresh_copy(rocky, ring=RING)
    opaque = ring_map(body, 64)
    assert opaque.shape == (32, 64, 3)
    # Every row samples the same band
    assert np.all(opaque == opaque[0])

    transparent = ring_map(body, 64, transparent=True)
    assert transparent.shape == (32, 64, 4)
    assert np.all(transparent[..., :3] == RING.color)


def test_write_color_map(tmp_path, star):
    path = write_color_map(star, tmp_path / "maps" / "star.png", height=8)
    with Image.open(path) as image:
        assert image.size == (16, 8)
        assert image.mode == "RGB"


def test_write_ring_map_transparency_follows_format(tmp_path, rocky):
    body = fresh_copy(rocky, ring=RING)
    with Image.open(write_ring_map(body, tmp_path / "ring.png", width=32)) as image:
        assert image.mode == "RGBA"
    with Image.open(write_ring_map(body, tmp_path / "ring.jpg", width=32)) as image:
        assert image.mode == "RGB"


def test_write_specular_map_skips_dry_bodies(tmp_path, giant):
    assert write_specular_map(giant, tmp_path / "spec.png", height=8) is None
    assert not (tmp_path / "spec.png").exists()


def test_write_image_unknown_format(tmp_path):
    with pytest.raises(ResourceUnavailable):
        write_image(tmp_path / "map.unknown", np.zeros((4, 8, 3), dtype=np.uint8))
