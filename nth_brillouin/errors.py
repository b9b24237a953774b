"""
Exception types raised by the zone construction.

Malformed vectors (``DimensionMismatch``, ``InvalidDimension``) are caller
bugs. Singular geometry (``DegenerateLattice``, ``DegeneratePoint``) and the
zone number limit (``UnsupportedZoneNumber``) are surfaced so the caller can
reject the input. All of them derive from ``ValueError``.

Parallel planes, non-crossing edges and loops that cannot be closed are
expected outcomes and are returned as ``None`` or empty results instead.
"""


class BrillouinZoneError(ValueError):
    """Base class for all errors raised by nth_brillouin."""


class DimensionMismatch(BrillouinZoneError):
    """Two vectors combined component-wise have different lengths."""


class InvalidDimension(BrillouinZoneError):
    """A vector or matrix does not have the required shape."""


class DegenerateLattice(BrillouinZoneError):
    """The primitive vectors are linearly dependent (zero triple product)."""


class DegeneratePoint(BrillouinZoneError):
    """A Bragg plane was requested for the origin."""


class UnsupportedZoneNumber(BrillouinZoneError):
    """The zone number is outside the supported range."""


__all__ = [
    'BrillouinZoneError',
    'DimensionMismatch',
    'InvalidDimension',
    'DegenerateLattice',
    'DegeneratePoint',
    'UnsupportedZoneNumber',
]
