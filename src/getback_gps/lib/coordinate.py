"""
coordinate.py
=============
2D coordinate value type, for converting between polar and Cartesian form.

A ``Coordinate`` is stored in canonical polar form only:

- ``radius >= 0``;
- ``0 <= angle < 360`` (degrees);
- ``angle == 0`` whenever ``radius == 0`` (a zero-length vector has no
  direction).

A negative radius is folded into the opposite direction at construction
time: ``Coordinate(-5, 10)`` is stored as ``(5, 190)``. The Cartesian view is
derived from the polar state on every access and is never stored.

Angles follow the mathematical convention: 0 degrees on the +x axis,
increasing counter-clockwise. Use ``CompassConverter`` (see
``converters.py``) for compass bearings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple
import math

from .angle_math import inverse_angle, normalize_angle
from .errors import InvalidArgumentError

__all__ = ["Coordinate"]


@dataclass(frozen=True)
class Coordinate:
    # Polar radius, non-negative after construction.
    radius: float = 0.0
    # Polar angle in degrees, in [0, 360) after construction.
    angle: float = 0.0

    def __post_init__(self) -> None:
        radius = float(self.radius)
        if radius < 0:
            radius = abs(radius)
            angle = inverse_angle(self.angle)
        else:
            angle = normalize_angle(self.angle)
        if radius == 0.0:
            # Store +0.0 so -0.0 inputs compare and hash like 0.0.
            radius = 0.0
            angle = 0.0
        object.__setattr__(self, "radius", radius)
        object.__setattr__(self, "angle", angle)

    @classmethod
    def from_polar(cls, radius: float, angle: float) -> "Coordinate":
        """Build a coordinate from a radius and an angle in degrees."""
        return cls(radius, angle)

    @classmethod
    def from_cartesian(cls, x: float, y: float) -> "Coordinate":
        """Build a coordinate from Cartesian ``(x, y)``."""
        radius = math.hypot(x, y)
        if radius == 0.0:
            return cls(0.0, 0.0)
        return cls(radius, math.degrees(math.atan2(y, x)))

    @classmethod
    def from_coordinate(cls, other: Optional["Coordinate"]) -> "Coordinate":
        """Copy ``other``.

        Raises
        ------
        InvalidArgumentError
            If ``other`` is None.
        """
        if other is None:
            raise InvalidArgumentError("Parameter coordinate should not be None")
        return cls(other.radius, other.angle)

    def polar(self) -> Tuple[float, float]:
        """Return ``(radius, angle)`` with the angle in degrees."""
        return self.radius, self.angle

    def cartesian(self) -> Tuple[float, float]:
        """Return ``(x, y)``."""
        rad = math.radians(self.angle)
        return self.radius * math.cos(rad), self.radius * math.sin(rad)

    @property
    def x(self) -> float:
        return self.cartesian()[0]

    @property
    def y(self) -> float:
        return self.cartesian()[1]
