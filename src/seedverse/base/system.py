import logging

import pandas as pd

from seedverse import config
from seedverse.base.planet import build_planet, satellite_count
from seedverse.base.star import REFERENCE_SUN, build_star
from seedverse.exceptions import ConstraintViolation
from seedverse.util.names import NameGenerator

logger = logging.getLogger(__name__)


def create_system(system_params):
    """
    Create a star system from a params dict

    Args:
        system_params (dict):
            "name" - name of the star, seeds the whole system. If missing a
            name is generated from "seed".
            "seed" - seed for the star's name when no name is given
            "max_satellites" - upper bound on the number of planets around
            the star, defaults to config.STAR_MAX_SATELLITES

    Returns:
        System
    """
    name = system_params.get("name")
    if name is None:
        seed = str(system_params.get("seed", "seedverse"))
        name = NameGenerator(seed).name("star")
    max_satellites = system_params.get("max_satellites", config.STAR_MAX_SATELLITES)
    return System(name, max_satellites=max_satellites)


def generate_system(name, max_satellites=config.STAR_MAX_SATELLITES):
    return System(name, max_satellites=max_satellites)


class System:
    """
    A star and everything orbiting it. Owns all bodies, keyed by id. Bodies
    link to their parent and star by id and list their satellites' ids in
    the order they were found.
    """

    def __init__(self, name, max_satellites=config.STAR_MAX_SATELLITES):
        self.bodies = {}
        self.max_satellites = max_satellites
        star = self.attach(build_star(name))
        self.name = star.name
        self.star_id = star.id
        self.populate(star)
        logger.info(
            "Created system %s with %d bodies (%d around the star)",
            self.name,
            len(self.bodies),
            len(star.children),
        )

    def __repr__(self):
        return (
            f"{self.name}\tbodies:{len(self.bodies)}\t"
            f"Type:{self.star.kind}\n\n"
            f"Bodies:\n{self.get_df()}"
        )

    def __len__(self):
        return len(self.bodies)

    def __iter__(self):
        return iter(self.walk())

    @property
    def star(self):
        return self.bodies[self.star_id]

    def parent(self, body):
        if body.parent_id is None:
            return None
        return self.bodies[body.parent_id]

    def children(self, body):
        return [self.bodies[i] for i in body.children]

    def walk(self, body=None):
        """Bodies in depth-first order, each before its satellites."""
        if body is None:
            body = self.star
        bodies = [body]
        for child in self.children(body):
            bodies.extend(self.walk(child))
        return bodies

    def find(self, name):
        for body in self.bodies.values():
            if body.name == name:
                return body
        raise KeyError(f"No body named {name} in {self.name}")

    def attach(self, body, parent=None):
        """Give ``body`` an id and make it a satellite of ``parent``."""
        body.id = len(self.bodies)
        self.bodies[body.id] = body
        if parent is None:
            body.star_id = body.id if body.is_star else None
        else:
            body.parent_id = parent.id
            body.star_id = parent.star_id
            parent.children.append(body.id)
        return body

    # ── Satellites ──────────────────────────────────────────────────

    def populate(self, body):
        """Generate the satellites of a newly attached body."""
        if body.is_star:
            if body.name != REFERENCE_SUN:
                self.add_satellites(body, self.max_satellites)
        elif self.parent(body).is_star:
            self.add_satellites(body, satellite_count(body))
        elif body.kind == "giant":
            self.add_satellite(body)

    def new_satellite(self, parent, discriminator):
        name = NameGenerator(parent.name).name(discriminator)
        return build_planet(self, parent, name)

    def _try_new_satellite(self, parent, discriminator):
        """
        Build a candidate satellite, or None if ``parent`` has no room left
        for one
        """
        try:
            return self.new_satellite(parent, discriminator)
        except ConstraintViolation as err:
            logger.debug("%s: no more satellites, %s", parent.name, err)
            return None

    def _sibling_names(self, parent):
        return {self.bodies[i].name for i in parent.children}

    def add_satellites(self, parent, max_count):
        """
        Add up to a random number of satellites in [0.3 max_count, max_count)
        to ``parent``. Stops once a candidate's orbit leaves the parent's
        sphere of influence or no orbit can be placed. Candidates whose name
        is already taken by a sibling are dropped. At most config.MAX_ATTEMPTS_PER_SATELLITE
        candidates per wanted satellite are drawn.
        """
        count = parent.random.randint("satellite count", int(0.3 * max_count), max_count)
        max_attempts = count * config.MAX_ATTEMPTS_PER_SATELLITE
        accepted = 0
        j = 0
        while accepted < count and j < max_attempts:
            j += 1
            satellite = self._try_new_satellite(parent, str(j))
            if satellite is None:
                break
            if satellite.orbit.semi_major_axis > parent.sphere_of_influence:
                logger.debug(
                    "%s: candidate %s leaves the sphere of influence, stopping",
                    parent.name,
                    satellite.name,
                )
                break
            if satellite.name in self._sibling_names(parent):
                logger.debug("%s: name %s already taken", parent.name, satellite.name)
                continue
            self.attach(satellite, parent)
            self.populate(satellite)
            accepted += 1
        if accepted < count:
            logger.debug(
                "%s: %d of %d satellites after %d attempts",
                parent.name,
                accepted,
                count,
                j,
            )

    def add_satellite(self, parent):
        """Try once to add a satellite to ``parent``."""
        satellite = self._try_new_satellite(parent, str(len(parent.children)))
        if satellite is None:
            return None
        if not satellite.orbit.semi_major_axis < parent.sphere_of_influence:
            logger.debug("%s: candidate %s rejected", parent.name, satellite.name)
            return None
        if satellite.name in self._sibling_names(parent):
            return None
        self.attach(satellite, parent)
        self.populate(satellite)
        return satellite

    # ── Tables ──────────────────────────────────────────────────────

    def get_df(self):
        """
        One row per body, unitless values in SI units
        """
        rows = []
        for body in self.walk():
            row = body.to_dict()
            row["id"] = body.id
            row["parent"] = body.parent_id
            rows.append(row)
        return pd.DataFrame(rows).set_index("id")
