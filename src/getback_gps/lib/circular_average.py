"""
circular_average.py
===================
Exponential smoothing of a noisy bearing on the circle.

Each update moves a fraction ``alpha`` of the remaining distance towards the
new sample, along the shorter arc::

    out = normalize(previous + alpha * signed_delta(target, previous))

where ``signed_delta`` lies in (-180, 180]. Going from 340 to 30 therefore
passes through 0 instead of sweeping back through 180, which a linear
average of the raw values would do.

Repeated updates with the same target converge geometrically: after ``n``
steps the remaining error is ``(1 - alpha) ** n`` of the initial step. With
``alpha = 0.5``, 100 -> 150 gives 125, 137.5, 143.75, 146.875, 148.4375.

The filter keeps no state. Callers feed the previous output back in, or use
``smooth_series`` for a whole batch of samples.
"""

from __future__ import annotations

from typing import Iterable, Optional
import math

import numpy as np

from .angle_math import normalize_angle, signed_delta_deg
from .errors import InvalidArgumentError

__all__ = ["ALPHA_MIN", "ALPHA_MAX", "smooth", "smooth_series"]

ALPHA_MIN = 0.0
ALPHA_MAX = 1.0


def _check_alpha(alpha: float) -> float:
    a = float(alpha)
    # NaN fails both comparisons.
    if not (ALPHA_MIN <= a <= ALPHA_MAX):
        raise InvalidArgumentError("parameter alpha is not in range 0.0 .. 1.0")
    return a


def smooth(previous: float, target: float, alpha: float) -> float:
    """Return the next smoothed bearing in [0, 360).

    Parameters
    ----------
    previous : float
        Previous smoothed value in degrees.
    target : float
        New raw sample in degrees.
    alpha : float
        Smoothing factor in [0, 1]. 0 keeps ``previous``, 1 jumps to
        ``target``.

    Raises
    ------
    InvalidArgumentError
        If ``alpha`` is outside [0, 1].
    """
    a = _check_alpha(alpha)
    if previous == 0 and target == 0:
        return 0.0
    return normalize_angle(previous + a * signed_delta_deg(target, previous))


def smooth_series(
    samples: Iterable[float],
    alpha: float,
    initial: Optional[float] = None,
) -> np.ndarray:
    """Smooth a sequence of bearings, feeding each output back in.

    ``initial`` seeds the filter; by default the first finite sample is used,
    so its output equals that sample (normalized). Non-finite samples are
    skipped: the previous output is repeated for them.

    Returns
    -------
    numpy.ndarray
        float64 array of the same length as ``samples``.
    """
    a = _check_alpha(alpha)
    values = np.asarray(list(samples), dtype=float)
    out = np.empty(values.shape[0], dtype=float)
    if values.size == 0:
        return out

    if initial is None:
        finite = values[np.isfinite(values)]
        initial = finite[0] if finite.size else 0.0
    prev = normalize_angle(initial)
    for i, v in enumerate(values):
        if math.isfinite(v):
            prev = smooth(prev, v, a)
        out[i] = prev
    return out
