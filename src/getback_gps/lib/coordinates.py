"""
coordinates.py
==============
Ordered collection of coordinates that projects itself into line segments.

Insertion order defines connectivity: point ``i`` is joined to point
``i + 1``. With ``close_line`` enabled (the default) an extra segment joins
the last point back to the first so the path is drawn as a loop.

Segment layout
--------------
``to_line_segments()`` returns a flat ``float32`` array with
``NUM_COORD_LINE`` values per segment::

    [start_x, start_y, end_x, end_y, start_x, start_y, ...]

Segment count for ``k`` points:

- ``k < 2``: 0, whatever ``close_line`` says;
- ``close_line=False``: ``k - 1``;
- ``close_line=True``: ``k``.

Conversion
----------
An optional converter (see ``converters.py``) is applied to every point each
time ``to_points()`` or ``to_line_segments()`` is called. Nothing is cached,
so swapping the converter or toggling ``close_line`` changes the next read
without re-appending points. Stored points are never modified.

A sequence has no internal locking; it belongs to one caller.
"""

from __future__ import annotations

from typing import Iterator, List, Optional

import numpy as np

from .converters import CoordinateConverter
from .coordinate import Coordinate
from .errors import InvalidArgumentError

__all__ = [
    "NUM_COORD_LINE",
    "POS_START_X",
    "POS_START_Y",
    "POS_END_X",
    "POS_END_Y",
    "CoordinateSequence",
]

# Values per segment in the flat array, and their offsets.
NUM_COORD_LINE = 4
POS_START_X = 0
POS_START_Y = 1
POS_END_X = 2
POS_END_Y = 3


class CoordinateSequence:
    def __init__(
        self,
        converter: Optional[CoordinateConverter] = None,
        close_line: bool = True,
    ) -> None:
        self._points: List[Coordinate] = []
        self._converter: Optional[CoordinateConverter] = None
        self._close_line = bool(close_line)
        if converter is not None:
            self.set_converter(converter)

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[Coordinate]:
        return iter(self.to_points())

    def __repr__(self) -> str:
        return (
            f"CoordinateSequence(size={len(self._points)}, "
            f"close_line={self._close_line}, converter={self._converter!r})"
        )

    # ---------------------------------------------------------------- points

    def append(self, coordinate: Optional[Coordinate]) -> None:
        """Append a copy of ``coordinate`` to the end of the sequence.

        Raises
        ------
        InvalidArgumentError
            If ``coordinate`` is None.
        """
        self._points.append(Coordinate.from_coordinate(coordinate))

    def add_polar(self, radius: float, angle: float) -> None:
        self._points.append(Coordinate.from_polar(radius, angle))

    def add_cartesian(self, x: float, y: float) -> None:
        self._points.append(Coordinate.from_cartesian(x, y))

    def clear(self) -> None:
        """Drop all points; converter and ``close_line`` are kept."""
        self._points.clear()

    def size(self) -> int:
        return len(self._points)

    # -------------------------------------------------------------- settings

    @property
    def close_line(self) -> bool:
        return self._close_line

    def set_close_line(self, close_line: bool) -> None:
        self._close_line = bool(close_line)

    @property
    def converter(self) -> Optional[CoordinateConverter]:
        return self._converter

    def set_converter(self, converter: Optional[CoordinateConverter]) -> None:
        """Install the converter applied on every read.

        To switch conversion off, install an ``IdentityConverter``.

        Raises
        ------
        InvalidArgumentError
            If ``converter`` is None.
        """
        if converter is None:
            raise InvalidArgumentError("Parameter converter should not be None")
        self._converter = converter

    # ----------------------------------------------------------- projections

    def to_points(self) -> List[Coordinate]:
        """Return the (converted) points in insertion order, as a new list."""
        if self._converter is None:
            return list(self._points)
        return [self._converter.convert(p) for p in self._points]

    def to_line_segments(self) -> np.ndarray:
        """Return the flat ``float32`` segment array (see module docstring)."""
        points = self.to_points()
        n = len(points)
        if n < 2:
            return np.empty(0, dtype=np.float32)

        xy = np.array([p.cartesian() for p in points], dtype=np.float64)
        ends = np.roll(xy, -1, axis=0)
        if not self._close_line:
            xy = xy[:-1]
            ends = ends[:-1]

        lines = np.empty((xy.shape[0], NUM_COORD_LINE), dtype=np.float32)
        lines[:, POS_START_X] = xy[:, 0]
        lines[:, POS_START_Y] = xy[:, 1]
        lines[:, POS_END_X] = ends[:, 0]
        lines[:, POS_END_Y] = ends[:, 1]
        return lines.reshape(-1)
