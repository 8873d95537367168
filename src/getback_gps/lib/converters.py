from __future__ import annotations

"""
converters.py
=============
Pluggable coordinate conversion.

A ``CoordinateSequence`` can be given any object with a
``convert(coordinate) -> Coordinate`` method; it is called on every point at
read time. The stock converters below cover the common reference-frame and
unit changes done by the tracking screens:

- ``IdentityConverter``: no-op, used to switch conversion off.
- ``RotationConverter``: rotate around the origin (e.g. heading-up display).
- ``ScaleConverter``: unit scaling (e.g. metres to pixels).
- ``TranslationConverter``: shift in Cartesian space.
- ``CompassConverter``: compass bearing (0 = north, clockwise) to the
  mathematical frame (0 = +x axis, counter-clockwise).
- ``ChainConverter``: apply several converters in order.

``converter_from_config`` builds one of them from the ``[converter]`` table
of the TOML configuration.
"""

from dataclasses import dataclass
from typing import Any, Dict, Protocol, Sequence
import math

from .coordinate import Coordinate
from .errors import InvalidArgumentError

__all__ = [
    "CoordinateConverter",
    "IdentityConverter",
    "RotationConverter",
    "ScaleConverter",
    "TranslationConverter",
    "CompassConverter",
    "ChainConverter",
    "converter_from_config",
]


class CoordinateConverter(Protocol):
    """Maps one coordinate to another. Must not mutate its input."""

    def convert(self, coordinate: Coordinate) -> Coordinate: ...


@dataclass(frozen=True)
class IdentityConverter:
    def convert(self, coordinate: Coordinate) -> Coordinate:
        return Coordinate.from_coordinate(coordinate)


@dataclass(frozen=True)
class RotationConverter:
    # Counter-clockwise rotation in degrees.
    offset_deg: float = 0.0

    def convert(self, coordinate: Coordinate) -> Coordinate:
        return Coordinate(coordinate.radius, coordinate.angle + self.offset_deg)


@dataclass(frozen=True)
class ScaleConverter:
    # Multiplier applied to the radius; a negative factor mirrors the point.
    factor: float = 1.0

    def __post_init__(self) -> None:
        if not math.isfinite(self.factor):
            raise InvalidArgumentError("parameter factor must be a finite float")

    def convert(self, coordinate: Coordinate) -> Coordinate:
        return Coordinate(coordinate.radius * self.factor, coordinate.angle)


@dataclass(frozen=True)
class TranslationConverter:
    dx: float = 0.0
    dy: float = 0.0

    def convert(self, coordinate: Coordinate) -> Coordinate:
        x, y = coordinate.cartesian()
        return Coordinate.from_cartesian(x + self.dx, y + self.dy)


@dataclass(frozen=True)
class CompassConverter:
    def convert(self, coordinate: Coordinate) -> Coordinate:
        return Coordinate(coordinate.radius, 90.0 - coordinate.angle)


@dataclass(frozen=True)
class ChainConverter:
    converters: Sequence[CoordinateConverter] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "converters", tuple(self.converters))

    def convert(self, coordinate: Coordinate) -> Coordinate:
        out = coordinate
        for conv in self.converters:
            out = conv.convert(out)
        return out


def converter_from_config(section: Dict[str, Any]) -> CoordinateConverter:
    """Build a converter from a ``[converter]`` config table.

    Parameters
    ----------
    section : dict
        ``kind`` selects the converter (``identity``, ``rotation``, ``scale``,
        ``translation`` or ``compass``). Extra keys per kind:
        ``rotation_deg``; ``scale``; ``dx`` and ``dy``.

    Raises
    ------
    ValueError
        If ``kind`` is unknown.
    """
    kind = str(section.get("kind", "identity")).strip().lower()
    if kind == "identity":
        return IdentityConverter()
    if kind == "rotation":
        return RotationConverter(float(section.get("rotation_deg", 0.0)))
    if kind == "scale":
        return ScaleConverter(float(section.get("scale", 1.0)))
    if kind == "translation":
        return TranslationConverter(
            float(section.get("dx", 0.0)), float(section.get("dy", 0.0))
        )
    if kind == "compass":
        return CompassConverter()
    raise ValueError(
        f"Unknown converter kind: {kind!r}. "
        "Expected one of identity, rotation, scale, translation, compass."
    )
