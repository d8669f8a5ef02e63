__all__ = [
    "KeyedRandom",
    "stable_hash",
    "NameGenerator",
    "ColorScale",
    "Palette",
    "write_image",
    "write_config",
]

from .colors import ColorScale, Palette
from .io import write_config, write_image
from .keyed_random import KeyedRandom, stable_hash
from .names import NameGenerator
