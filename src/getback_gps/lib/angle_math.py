"""
angle_math.py
=============
Canonicalization of angles on the fixed domain [0, 360) degrees.

All functions are total over finite floats. NaN and infinities are not
guarded: callers must not pass them.
"""

from __future__ import annotations

__all__ = [
    "ANGLE_MIN",
    "ANGLE_MAX",
    "normalize_angle",
    "inverse_angle",
    "signed_delta_deg",
]

ANGLE_MIN = 0.0
ANGLE_MAX = 360.0

_HALF_TURN = (ANGLE_MAX - ANGLE_MIN) / 2.0


def normalize_angle(angle: float) -> float:
    """Map any angle in degrees into [0, 360).

    Uses floor-modulo, so negative inputs and inputs several turns away are
    folded correctly (``-725 -> 355``).
    """
    x = (float(angle) - ANGLE_MIN) % (ANGLE_MAX - ANGLE_MIN) + ANGLE_MIN
    # A tiny negative input rounds up to the upper bound.
    if x >= ANGLE_MAX:
        return ANGLE_MIN
    return x


def inverse_angle(angle: float) -> float:
    """Return the opposite direction, i.e. ``normalize(angle + 180)``."""
    a = normalize_angle(angle)
    if a < _HALF_TURN:
        return normalize_angle(a + _HALF_TURN)
    return a - _HALF_TURN


def signed_delta_deg(target: float, origin: float) -> float:
    """Shortest signed difference ``target - origin`` in (-180, 180]."""
    d = (float(target) - float(origin) + _HALF_TURN) % ANGLE_MAX - _HALF_TURN
    return _HALF_TURN if d <= -_HALF_TURN else d
