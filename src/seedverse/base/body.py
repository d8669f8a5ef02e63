"""
Celestial bodies and their type-specific traits.

A :class:`Body` holds what every body has (mass, radius, orbit, ...). What
differs between stars, rocky planets and giant planets lives in
``body.variant``, and behaviour that depends on the type dispatches on the
variant's class. Bodies refer to each other by id; the :class:`System` that
owns them resolves ids to bodies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union

import astropy.units as u
import numpy as np
import pandas as pd

from seedverse.base.orbit import Orbit
from seedverse.surface.fields import FieldCache
from seedverse.util.colors import Color, ColorScale
from seedverse.util.keyed_random import KeyedRandom
from seedverse.util.noise import NoiseField

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Ring:
    inner_radius: float
    outer_radius: float
    inclination: float
    color: Color


# ── Variants ─────────────────────────────────────────────────────────


@dataclass
class Star:
    bv_magnitude: float
    magnitude: float
    luminosity: float
    # None for the reference sun, whose surface is uniform
    temperature_noise: Optional[NoiseField] = None


@dataclass
class PlanetTraits:
    """Traits shared by rocky and giant planets."""

    albedo: float
    core_temperature: float
    geothermal_temperature: float
    greenhouse_temperature: float
    surface_temperature: float
    has_atmosphere: bool
    atmosphere_color: Color
    atmosphere_opacity: float
    atmosphere_pressure: float
    atmosphere_scale_height: float
    atmosphere_height: float
    color_scale: ColorScale
    height_noise: NoiseField
    color_noise: NoiseField


@dataclass
class GiantPlanet(PlanetTraits):
    pass


@dataclass
class RockyPlanet(PlanetTraits):
    temperature_noise: Optional[NoiseField] = None
    ice_factor: float = 1.0
    ice_color: Color = (255, 255, 255)
    has_ocean: bool = False
    ocean_level: float = 0.0
    ocean_color: Color = (0, 0, 0)
    has_life: bool = False
    life_color_scale: Optional[ColorScale] = None
    terrain_scale: float = 0.0
    # Filled in when the temperature field is generated
    min_temperature: Optional[float] = None
    max_temperature: Optional[float] = None


Variant = Union[Star, RockyPlanet, GiantPlanet]


# ── Body ─────────────────────────────────────────────────────────────


@dataclass(eq=False, repr=False)
class Body:
    """
    A star, planet or moon. Distances in [m], masses in [kg], times in [s]
    and temperatures in [K].
    """

    name: str
    system: str
    variant: Variant
    mass: float
    radius: float
    volume: float
    density: float
    rotation_period: float
    surface_gravity: float
    effective_temperature: float
    sphere_of_influence: float
    color: Color
    orbit: Optional[Orbit] = None
    ring: Optional[Ring] = None
    tidally_locked: bool = False
    id: Optional[int] = None
    parent_id: Optional[int] = None
    star_id: Optional[int] = None
    children: List[int] = field(default_factory=list)
    fields: FieldCache = field(default_factory=FieldCache)

    def __post_init__(self):
        self.random = KeyedRandom(self.name)

    def __repr__(self):
        """
        Make dataframe with body attributes
        """
        res = {}
        for key, val in self.dump_params().items():
            if isinstance(val, u.Quantity):
                res[key] = val.value
            elif isinstance(val, tuple):
                res[key] = str(val)
            else:
                res[key] = val
        b_df = pd.DataFrame(res, index=[0])
        return f"{type(self.variant).__name__} object\n{b_df}"

    # ── Capabilities ────────────────────────────────────────────────

    @property
    def kind(self):
        if isinstance(self.variant, Star):
            return "star"
        elif isinstance(self.variant, RockyPlanet):
            return "rocky"
        return "giant"

    @property
    def is_star(self):
        return isinstance(self.variant, Star)

    @property
    def has_ring(self):
        return self.ring is not None

    @property
    def has_atmosphere(self):
        return isinstance(self.variant, PlanetTraits) and self.variant.has_atmosphere

    @property
    def has_ocean(self):
        return isinstance(self.variant, RockyPlanet) and self.variant.has_ocean

    @property
    def has_life(self):
        return isinstance(self.variant, RockyPlanet) and self.variant.has_life

    # ── Serialization ───────────────────────────────────────────────

    def dump_params(self):
        """
        Parameters of the body as astropy Quantities where they have units.
        Fields that do not apply to the body are left out.
        """
        params = {
            "name": self.name,
            "system": self.system,
            "type": self.kind,
            "mass": self.mass * u.kg,
            "radius": self.radius * u.m,
            "volume": self.volume * u.m**3,
            "density": self.density * u.kg / u.m**3,
            "rotation_period": self.rotation_period * u.s,
            "surface_gravity": self.surface_gravity * u.m / u.s**2,
            "effective_temperature": self.effective_temperature * u.K,
            "sphere_of_influence": self.sphere_of_influence * u.m,
            "color": self.color,
            "tidally_locked": self.tidally_locked,
            "has_life": self.has_life,
            "has_ring": self.has_ring,
        }
        if self.orbit is not None:
            params.update(self.orbit.dump_params())
        if self.ring is not None:
            params.update(
                {
                    "ring_color": self.ring.color,
                    "inner_ring_radius": self.ring.inner_radius * u.m,
                    "outer_ring_radius": self.ring.outer_radius * u.m,
                    "ring_inclination": self.ring.inclination * u.rad,
                }
            )

        variant = self.variant
        if isinstance(variant, Star):
            params.update(
                {
                    "bv_magnitude": variant.bv_magnitude,
                    "magnitude": variant.magnitude,
                    "luminosity": variant.luminosity * u.W,
                }
            )
            return params

        params.update(
            {
                "albedo": variant.albedo,
                "core_temperature": variant.core_temperature * u.K,
                "surface_temperature": variant.surface_temperature * u.K,
                "has_atmosphere": variant.has_atmosphere,
            }
        )
        if variant.has_atmosphere:
            params.update(
                {
                    "atmosphere_color": variant.atmosphere_color,
                    "atmosphere_opacity": variant.atmosphere_opacity,
                    "atmosphere_pressure": variant.atmosphere_pressure * u.Pa,
                    "atmosphere_scale_height": variant.atmosphere_scale_height * u.m,
                    "atmosphere_height": variant.atmosphere_height * u.m,
                }
            )
        if isinstance(variant, RockyPlanet):
            params.update(
                {
                    "has_ocean": variant.has_ocean,
                    "ice_color": variant.ice_color,
                    "terrain_scale": variant.terrain_scale * u.m,
                }
            )
            if variant.has_ocean:
                params["ocean_level"] = variant.ocean_level
                params["ocean_color"] = variant.ocean_color
            if variant.min_temperature is not None:
                params["min_temperature"] = variant.min_temperature * u.K
                params["max_temperature"] = variant.max_temperature * u.K
        return params

    def to_dict(self):
        """
        :meth:`dump_params` with units stripped and numpy scalars converted,
        ready for JSON
        """
        res = {}
        for key, val in self.dump_params().items():
            if isinstance(val, u.Quantity):
                val = val.value
            if isinstance(val, np.generic):
                val = val.item()
            if isinstance(val, tuple):
                val = [int(c) for c in val]
            res[key] = val
        return res
