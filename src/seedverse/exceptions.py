"""Exceptions raised by seedverse.

Name collisions between sibling bodies are not represented here, they are
resolved inside the satellite loop by retrying with a new discriminator.
"""


class SeedverseError(Exception):
    """Base class for all seedverse errors."""


class ConstraintViolation(SeedverseError, ValueError):
    """
    An orbit or ring placement produced a degenerate range, e.g. a parent
    with zero mass or a non-finite bound
    """


class ResourceUnavailable(SeedverseError, RuntimeError):
    """
    A collaborator (name generator, noise evaluation, image sink) could not
    produce its result. Fatal for the body or map being produced only.
    """
