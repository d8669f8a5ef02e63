__all__ = [
    "Body",
    "GiantPlanet",
    "Orbit",
    "Ring",
    "RockyPlanet",
    "Star",
    "System",
    "create_system",
    "generate_system",
]

from .body import Body, GiantPlanet, Ring, RockyPlanet, Star
from .orbit import Orbit
from .system import System, create_system, generate_system
