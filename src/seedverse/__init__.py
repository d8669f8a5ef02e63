__all__ = [
    "Body",
    "ConstraintViolation",
    "ResourceUnavailable",
    "SeedverseError",
    "System",
    "color_map",
    "create_system",
    "generate_system",
    "height_map",
    "normal_map",
    "ring_map",
    "specular_map",
    "write_color_map",
    "write_config",
    "write_height_map",
    "write_normal_map",
    "write_ring_map",
    "write_specular_map",
]

from .base import Body, System, create_system, generate_system
from .exceptions import ConstraintViolation, ResourceUnavailable, SeedverseError
from .surface.maps import (
    color_map,
    height_map,
    normal_map,
    ring_map,
    specular_map,
    write_color_map,
    write_height_map,
    write_normal_map,
    write_ring_map,
    write_specular_map,
)
from .util.io import write_config
