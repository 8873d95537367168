"""
track_example.py
================

Purpose
-------
Minimal example showing how to collect points in a `CoordinateSequence`
and get the flat line-segment array a renderer draws.

What this example does
----------------------
1) Adds a few points given as compass bearing + distance.
2) Installs a `CompassConverter` so bearings are drawn with north up.
3) Prints the segments for a closed loop and for an open path.

Usage
-----
    python examples/track_example.py
"""

from getback_gps.lib.converters import CompassConverter, IdentityConverter
from getback_gps.lib.coordinates import NUM_COORD_LINE, CoordinateSequence

track = CoordinateSequence()
# (distance in metres, compass bearing in degrees)
for distance, bearing in [(0.0, 0.0), (100.0, 0.0), (141.42, 45.0), (100.0, 90.0)]:
    track.add_polar(distance, bearing)

track.set_converter(CompassConverter())


def show(title: str) -> None:
    lines = track.to_line_segments().reshape(-1, NUM_COORD_LINE)
    print(f"{title}: {len(lines)} segments")
    for sx, sy, ex, ey in lines:
        print(f"  ({sx:8.2f}, {sy:8.2f}) -> ({ex:8.2f}, {ey:8.2f})")


show("Closed loop, north up")

track.set_close_line(False)
show("Open path, north up")

# Switch conversion off again without re-adding points.
track.set_converter(IdentityConverter())
show("Open path, raw frame")
