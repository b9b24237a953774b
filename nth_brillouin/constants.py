"""
Numerical Constants Module

Centralized location for the tolerances and policy limits used by the
zone construction. Every geometric decision (intersection existence, plane
coincidence, zone membership, loop closure) is gated by ``EPSILON``.

Usage
-----
    from nth_brillouin.constants import EPSILON, MAX_ZONE_NUMBER

    if abs(x - y) < EPSILON:
        ...
"""

# =============================================================================
# Tolerance
# =============================================================================

# Scalars x, y are considered equal when |x - y| < EPSILON.
# Vectors are equal when every component is.
EPSILON: float = 1e-6


# =============================================================================
# Zone Construction Limits
# =============================================================================

# Highest zone number accepted by the builder. The lattice-point neighbourhood
# below is a heuristic cutoff and is not known to be complete beyond this.
MAX_ZONE_NUMBER: int = 3

# Cap on the index range L in i*b0 + j*b1 + k*b2, i, j, k in [-L, L].
# L = min(zone_number + 1, MAX_NEIGHBOURHOOD)
MAX_NEIGHBOURHOOD: int = 3


# =============================================================================
# Loop Extraction
# =============================================================================

# Offset of the probe point used to decide which side of a closed cycle is
# inside the zone, as a fraction of the probed segment length.
PROBE_FRACTION: float = 1e-3


__all__ = [
    'EPSILON',
    'MAX_ZONE_NUMBER',
    'MAX_NEIGHBOURHOOD',
    'PROBE_FRACTION',
]
