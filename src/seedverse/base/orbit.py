import logging
from dataclasses import dataclass

import astropy.units as u
import numpy as np

import seedverse.util.physics as phys
from seedverse.exceptions import ConstraintViolation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Orbit:
    """
    Keplerian orbit of a body around its parent. Distances in [m], angles in
    [rad], period in [s] and velocity in [m/s].
    """

    parent_id: int
    semi_major_axis: float
    eccentricity: float
    inclination: float
    ascending_node: float
    argument_of_periapsis: float
    mean_anomaly: float
    period: float
    periapsis: float
    apoapsis: float
    velocity: float

    def dump_params(self):
        return {
            "semi_major_axis": self.semi_major_axis * u.m,
            "eccentricity": self.eccentricity,
            "inclination": self.inclination * u.rad,
            "ascending_node": self.ascending_node * u.rad,
            "argument_of_periapsis": self.argument_of_periapsis * u.rad,
            "mean_anomaly": self.mean_anomaly * u.rad,
            "period": self.period * u.s,
            "periapsis": self.periapsis * u.m,
            "apoapsis": self.apoapsis * u.m,
            "velocity": self.velocity * u.m / u.s,
        }


def check_parent(parent):
    """Orbits can only be placed around a body with a finite, positive mass and radius."""
    for attr in ("mass", "radius"):
        value = getattr(parent, attr)
        if not (np.isfinite(value) and value > 0):
            raise ConstraintViolation(
                f"Cannot place an orbit around {parent.name}: {attr} is {value}"
            )


def semi_major_axis_bounds(parent, outermost, random):
    """
    Range of semi-major axes [m] available to the next satellite of ``parent``

    Args:
        parent (Body):
            Body being orbited
        outermost (float or None):
            Semi-major axis of the parent's outermost satellite, None for the
            first satellite
        random (KeyedRandom):
            Random stream of the new satellite

    Returns:
        min_a (float), max_a (float):
            max_a can be smaller than min_a once the sphere of influence is
            used up
    """
    check_parent(parent)
    if outermost is None:
        gravity = 10 ** random.uniform("first satellite gravity", -2, 0)
        min_a = np.sqrt(phys.G * parent.mass / gravity)
    else:
        min_a = 1.5 * outermost

    ring = parent.ring
    if ring is not None and ring.inner_radius < min_a < ring.outer_radius:
        min_a = ring.outer_radius
    max_a = 1.5 * min_a
    if ring is not None and ring.inner_radius < max_a < ring.outer_radius:
        max_a = ring.inner_radius
    max_a = min(max_a, parent.sphere_of_influence)

    for name, value in (("minimum", min_a), ("maximum", max_a)):
        if not (np.isfinite(value) and value > 0):
            raise ConstraintViolation(
                f"Degenerate {name} semi-major axis {value} around {parent.name}"
            )
    return min_a, max_a


def place_orbit(system, parent, random):
    """
    Draw the orbit of a new satellite of ``parent``, outside all of its
    existing satellites
    """
    outermost = None
    if parent.children:
        outermost = system.bodies[parent.children[-1]].orbit.semi_major_axis
    min_a, max_a = semi_major_axis_bounds(parent, outermost, random)

    eccentricity = random.rand("eccentricity") ** 10
    a = random.uniform("semi-major axis", min_a, max_a)
    period = phys.orbital_period(a, parent.mass)
    return Orbit(
        parent_id=parent.id,
        semi_major_axis=a,
        eccentricity=eccentricity,
        inclination=np.pi / 2 * random.rand("inclination") ** 10,
        ascending_node=random.uniform("ascending node", 0, 2 * np.pi),
        argument_of_periapsis=random.uniform(
            "argument of ascending node", 0, 2 * np.pi
        ),
        mean_anomaly=random.uniform("mean anomaly", 0, 2 * np.pi),
        period=period,
        periapsis=phys.periapsis(eccentricity, a),
        apoapsis=phys.apoapsis(eccentricity, a),
        velocity=phys.orbital_velocity(a, period),
    )
