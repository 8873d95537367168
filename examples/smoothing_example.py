"""
smoothing_example.py
====================

Purpose
-------
Minimal example showing how to filter noisy compass bearings with
`getback_gps.lib.circular_average`.

The raw samples jitter around north, so they keep crossing the 0/360
boundary. The smoothed bearing follows the shorter arc and stays near 0
instead of being dragged towards 180.

Usage
-----
    python examples/smoothing_example.py
"""

from getback_gps.lib.circular_average import smooth, smooth_series

raw = [355.0, 2.0, 358.0, 6.0, 352.0, 1.0, 359.0, 4.0]
alpha = 0.3

# 1) One sample at a time: the caller feeds the previous output back in.
value = raw[0]
for sample in raw[1:]:
    value = smooth(value, sample, alpha)
    print(f"sample {sample:7.2f} deg -> smoothed {value:7.2f} deg")

# 2) Whole batch at once.
print("Batch:", ", ".join(f"{v:.2f}" for v in smooth_series(raw, alpha)))

# For comparison, the naive arithmetic mean lands on the wrong side.
print(f"Naive mean: {sum(raw) / len(raw):.2f} deg")
