"""
track_io.tsv
============

Tab-separated input and output for the batch track tools.

Inputs
------
- Bearings file: a ``bearing`` column in degrees and an optional
  ``timestamp`` column. Lines starting with '#' are comments.
- Points file: either ``radius`` and ``angle`` columns (polar, degrees) or
  ``x`` and ``y`` columns (Cartesian). Rows keep file order.

Outputs
-------
Both writers emit an English commented metadata block, one fixed header
line, then one row per record. Angles and coordinates are written with
exactly four decimal places; missing values are written as "NaN".

- Smoothed bearings::

    timestamp   bearing   smoothed

- Line segments (one per row, see ``CoordinateSequence.to_line_segments``)::

    start_x   start_y   end_x   end_y

Appending to an existing bearings file validates its header and raises
``SchemaMismatchError`` on a mismatch. Overwriting is atomic on POSIX: the
file is written to ``path + ".tmp"`` and moved with ``os.replace``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List, Optional, TextIO
import math
import os

import numpy as np
import pandas as pd

from getback_gps.lib.coordinates import NUM_COORD_LINE, CoordinateSequence

__all__ = [
    "BearingRow",
    "SchemaMismatchError",
    "read_bearings_tsv",
    "read_points_tsv",
    "write_bearings_tsv",
    "write_segments_tsv",
]

SOFTWARE_VERSION = "getback_gps 0.1.0"

BEARING_COLUMNS = ["timestamp", "bearing", "smoothed"]
SEGMENT_COLUMNS = ["start_x", "start_y", "end_x", "end_y"]


# =============================================================================
# Exceptions and rows
# =============================================================================


class SchemaMismatchError(ValueError):
    """
    Raised when appending to an existing file whose column header line does not
    match the expected schema. The message includes the path, the expected
    header and the header found on disk.
    """

    pass


@dataclass(frozen=True)
class BearingRow:
    """
    One smoothed bearing.

    Attributes
    ----------
    timestamp : Optional[str]
        Free-form timestamp copied from the input; None is written as "NaN".
    bearing_deg : float
        Raw bearing sample [deg].
    smoothed_deg : float
        Smoothed bearing [deg], in [0, 360).
    """

    timestamp: Optional[str]
    bearing_deg: float
    smoothed_deg: float


# =============================================================================
# Readers
# =============================================================================


def _read_table(path: str) -> pd.DataFrame:
    df = pd.read_csv(path, sep="\t", comment="#")
    df.columns = [str(c).strip() for c in df.columns]
    return df


def read_bearings_tsv(path: str) -> pd.DataFrame:
    """
    Read raw bearing samples.

    Returns a DataFrame with a float ``bearing`` column and, if present in
    the file, a string ``timestamp`` column (None where the cell is empty). Rows
    whose bearing is missing or non-numeric are dropped.

    Raises
    ------
    ValueError
        If the ``bearing`` column is missing.
    """
    df = _read_table(path)
    if "bearing" not in df.columns:
        raise ValueError(
            f"Missing required column 'bearing' in '{path}'. "
            f"Found columns: {list(df.columns)}"
        )

    cols = ["timestamp", "bearing"] if "timestamp" in df.columns else ["bearing"]
    out = df[cols].copy()
    out["bearing"] = pd.to_numeric(out["bearing"], errors="coerce")
    out = out[np.isfinite(out["bearing"])].reset_index(drop=True)
    if "timestamp" in out.columns:
        out["timestamp"] = pd.Series(
            [None if pd.isna(t) else str(t) for t in out["timestamp"]], dtype=object
        )
    return out


def read_points_tsv(
    path: str,
    sequence: Optional[CoordinateSequence] = None,
) -> CoordinateSequence:
    """
    Read points into a ``CoordinateSequence`` (a new one unless given).

    Polar columns (``radius``, ``angle``) win when both pairs are present.

    Raises
    ------
    ValueError
        If neither column pair is present, or a value is not numeric.
    """
    df = _read_table(path)
    seq = sequence if sequence is not None else CoordinateSequence()

    if {"radius", "angle"} <= set(df.columns):
        pair, add = ("radius", "angle"), seq.add_polar
    elif {"x", "y"} <= set(df.columns):
        pair, add = ("x", "y"), seq.add_cartesian
    else:
        raise ValueError(
            f"'{path}' needs either radius/angle or x/y columns. "
            f"Found columns: {list(df.columns)}"
        )

    values = df[list(pair)].apply(pd.to_numeric, errors="coerce")
    bad = ~np.isfinite(values.to_numpy(dtype=float)).all(axis=1)
    if bad.any():
        first = int(np.flatnonzero(bad)[0])
        raise ValueError(
            f"Non-numeric {pair[0]}/{pair[1]} value in '{path}' at data row {first + 1}"
        )

    for a, b in values.itertuples(index=False, name=None):
        add(float(a), float(b))
    return seq


# =============================================================================
# Writers
# =============================================================================


def write_bearings_tsv(
    path: str,
    rows: Iterable[BearingRow],
    alpha: float,
    append: bool = True,
) -> None:
    """
    Write (or append) smoothed bearings.

    Parameters
    ----------
    path : str
        Output file path.
    rows : Iterable[BearingRow]
        Rows to write.
    alpha : float
        Smoothing factor, recorded in the metadata block.
    append : bool, default True
        If True and the file exists, validate its header and append.
        If False, create/overwrite the file atomically.

    Raises
    ------
    SchemaMismatchError
        When appending to a file with a different header.
    ValueError
        If the existing file contains no header line.
    """
    meta = [
        "# Smoothed bearings",
        f"# Smoothing factor (alpha): {alpha}",
        "# timestamp: as read from the input",
        "# bearing: raw bearing, deg",
        "# smoothed: exponentially smoothed bearing on the circle, deg",
    ]
    lines = (_bearing_row_to_tsv(r) for r in rows)
    _write_table(path, meta, BEARING_COLUMNS, lines, append=append)


def write_segments_tsv(path: str, segments: np.ndarray, close_line: bool) -> None:
    """
    Write a flat segment array, one segment per row. Always overwrites.

    Raises
    ------
    ValueError
        If the array length is not a multiple of ``NUM_COORD_LINE``.
    """
    flat = np.asarray(segments, dtype=float).reshape(-1)
    if flat.size % NUM_COORD_LINE:
        raise ValueError(
            f"segment array length {flat.size} is not a multiple of {NUM_COORD_LINE}"
        )
    meta = [
        "# Line segments",
        f"# Closed loop: {'yes' if close_line else 'no'}",
        "# start_x, start_y, end_x, end_y: segment endpoints, input units",
    ]
    lines = (
        "\t".join(_fmt_4dec_or_nan(v) for v in seg) + "\n"
        for seg in flat.reshape(-1, NUM_COORD_LINE)
    )
    _write_table(path, meta, SEGMENT_COLUMNS, lines, append=False)


# =============================================================================
# Internal helpers
# =============================================================================


def _write_table(
    path: str,
    meta: List[str],
    columns: List[str],
    lines: Iterable[str],
    append: bool,
) -> None:
    if not append:
        tmp_path = f"{path}.tmp"
        try:
            with open(tmp_path, "w", newline="", encoding="utf-8") as f:
                _write_metadata_block(f, meta)
                f.write("\t".join(columns) + "\n")
                f.writelines(lines)
        except Exception:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
        os.replace(tmp_path, path)
        return

    creating_new = not os.path.exists(path)
    if not creating_new:
        _check_header_or_raise(path, columns)
    with open(path, "w" if creating_new else "a", newline="", encoding="utf-8") as f:
        if creating_new:
            _write_metadata_block(f, meta)
            f.write("\t".join(columns) + "\n")
        f.writelines(lines)


def _write_metadata_block(f: TextIO, meta: List[str]) -> None:
    created = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    for line in meta:
        f.write(line + "\n")
    f.write(f"# Generated with software version: {SOFTWARE_VERSION}\n")
    f.write(f"# Created at: {created}\n")
    f.write("\n")


def _fmt_4dec_or_nan(x: Optional[float]) -> str:
    if x is None or not math.isfinite(x):
        return "NaN"
    return f"{x:.4f}"


def _bearing_row_to_tsv(r: BearingRow) -> str:
    fields = [
        "NaN" if r.timestamp is None else str(r.timestamp),
        _fmt_4dec_or_nan(r.bearing_deg),
        _fmt_4dec_or_nan(r.smoothed_deg),
    ]
    return "\t".join(fields) + "\n"


def _check_header_or_raise(path: str, expected_cols: List[str]) -> None:
    """
    Compare the first non-comment, non-blank line of ``path`` with
    ``expected_cols``.
    """
    header_line: Optional[str] = None
    with open(path, "r", newline="", encoding="utf-8") as f:
        for raw in f:
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            header_line = line
            break

    if header_line is None:
        raise ValueError(f"File '{path}' appears to contain no column header")

    if header_line.split("\t") != expected_cols:
        raise SchemaMismatchError(
            "Existing file schema does not match expected header.\n"
            f"Path:     {path}\n"
            f"Expected: {chr(9).join(expected_cols)}\n"
            f"Found:    {header_line}\n"
            "Hint: pass append=False to replace the file."
        )
