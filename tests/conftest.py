import dataclasses

import pytest

from seedverse import generate_system
from seedverse.surface.fields import FieldCache

STAR_NAMES = ["vega", "kepler", "tau ceti", "altair"]


@pytest.fixture(scope="session")
def systems():
    return [generate_system(name, max_satellites=8) for name in STAR_NAMES]


@pytest.fixture(scope="session")
def bodies(systems):
    return [body for system in systems for body in system.walk()]


def first_body(bodies, kind):
    for body in bodies:
        if body.kind == kind:
            return body
    pytest.skip(f"No {kind} body in the test systems")


def fresh_copy(body, **changes):
    """Copy of a body with an empty field cache, optionally with new traits."""
    variant_changes = changes.pop("variant_changes", {})
    variant = dataclasses.replace(body.variant, **variant_changes)
    return dataclasses.replace(body, variant=variant, fields=FieldCache(), **changes)


@pytest.fixture
def rocky(bodies):
    return fresh_copy(first_body(bodies, "rocky"))


@pytest.fixture
def giant(bodies):
    return fresh_copy(first_body(bodies, "giant"))


@pytest.fixture
def star(systems):
    return fresh_copy(systems[0].star)
