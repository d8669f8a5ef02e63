"""
Equirectangular sampling of noise fields and the per-body field cache.

Grids are indexed ``[y, x]`` with shape ``(height, 2 * height)``. Row 0 is
the south pole (latitude -90) and column 0 is longitude -180.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Union

import numpy as np

from seedverse.util.noise import evaluate_field

logger = logging.getLogger(__name__)


# ── Cache ────────────────────────────────────────────────────────────


class NotGenerated:
    """Slot state of a field that has never been sampled."""

    def __repr__(self):
        return "NotGenerated"


NOT_GENERATED = NotGenerated()


@dataclass(frozen=True)
class Generated:
    resolution: int
    grid: np.ndarray


FieldSlot = Union[NotGenerated, Generated]


class FieldCache:
    """
    Named surface fields of one body, each bound to the resolution it was
    built at
    """

    def __init__(self):
        self._slots: Dict[str, Generated] = {}

    def __repr__(self):
        slots = ", ".join(f"{k}@{v.resolution}" for k, v in self._slots.items())
        return f"FieldCache({slots})"

    def slot(self, name: str) -> FieldSlot:
        return self._slots.get(name, NOT_GENERATED)

    def ensure(self, name: str, resolution: int, build: Callable[[], np.ndarray]):
        """
        Return the field ``name`` at ``resolution``, calling ``build`` if it is
        missing or was built at another resolution
        """
        slot = self.slot(name)
        if isinstance(slot, Generated) and slot.resolution == resolution:
            return slot.grid
        logger.debug("Generating %s field at resolution %d", name, resolution)
        grid = build()
        self._slots[name] = Generated(resolution, grid)
        return grid

    def invalidate(self, name: str = None):
        if name is None:
            self._slots.clear()
        else:
            self._slots.pop(name, None)


# ── Sampling ─────────────────────────────────────────────────────────


def grid_coordinates(height: int, width: int = None):
    """
    Latitude and longitude [deg] of every cell of an equirectangular grid

    Args:
        height (int):
            Number of rows
        width (int):
            Number of columns, defaults to ``2 * height``

    Returns:
        latitude (np.ndarray):
            Column vector of shape (height, 1)
        longitude (np.ndarray):
            Row vector of shape (1, width)
    """
    if width is None:
        width = 2 * height
    latitude = -90.0 + np.arange(height) * 180.0 / height
    longitude = -180.0 + np.arange(width) * 360.0 / width
    return latitude[:, np.newaxis], longitude[np.newaxis, :]


def sample_sphere(field, height: int) -> np.ndarray:
    """Evaluate ``field`` over the whole sphere, shape (height, 2 * height)."""
    latitude, longitude = grid_coordinates(height)
    return evaluate_field(field, latitude, longitude)


def sample_meridian(field, height: int, longitude: float = 0.0) -> np.ndarray:
    """Evaluate ``field`` from pole to pole along one meridian."""
    latitude, _ = grid_coordinates(height, 1)
    return evaluate_field(field, latitude[:, 0], longitude)


def sample_equator(field, width: int) -> np.ndarray:
    """Evaluate ``field`` around the equator with ``width`` samples."""
    _, longitude = grid_coordinates(1, width)
    return evaluate_field(field, 0.0, longitude[0])


def normalize(grid: np.ndarray) -> np.ndarray:
    """
    Rescale a grid to [0, 1] using its own minimum and maximum. A constant
    grid maps to zeros.
    """
    grid = np.asarray(grid, dtype=float)
    low = grid.min()
    high = grid.max()
    if high == low:
        return np.zeros_like(grid)
    return (grid - low) / (high - low)


def latitude_weight(height: int) -> np.ndarray:
    """``sin(pi * y / height)`` per row, zero at the south pole."""
    return np.sin(np.pi * np.arange(height) / height)
