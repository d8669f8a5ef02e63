"""
Default tunables for body and surface generation.

These are read as fallbacks when a params dict passed to
``seedverse.create_system`` does not override them. Changing a value here
changes every generated universe, so treat them as part of the seed.
"""

# --- Body tree ---
# Upper bound on the target satellite count of a root star
STAR_MAX_SATELLITES = 15
# A satellite heavier than this [kg] (ten Earth masses) is rebuilt as a giant
# planet
GIANT_PROMOTION_MASS = 10 * 5.972e24
# Gravity difference across a body's diameter [m/s^2] above which it is
# tidally locked to its parent
TIDAL_LOCK_THRESHOLD = 1e-5
# Cap on candidate satellites drawn per targeted satellite. Name collisions
# and rejected candidates both consume attempts.
MAX_ATTEMPTS_PER_SATELLITE = 5

# --- Names ---
MAX_NAME_ATTEMPTS = 1000
MIN_NAME_LENGTH = (4, 7)
MAX_NAME_LENGTH = 11

# --- Surface maps ---
DEFAULT_MAP_HEIGHT = 512
RING_MAP_HEIGHT = 32
# Every n-th pixel in each direction is sampled when measuring albedo
ALBEDO_SAMPLE_STRIDE = 10
