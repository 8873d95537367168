#!/usr/bin/env python3
"""Batch tools for bearings and tracks.

-------------------------------------------------------------------------------
Available subcommands
-------------------------------------------------------------------------------
smooth     Smooth a file of raw bearings on the circle.
segments   Turn a file of points into line segments (x, y, x, y per row).

-------------------------------------------------------------------------------
Command-line usage examples
-------------------------------------------------------------------------------
1. Smooth compass bearings with alpha = 0.3:

   python scripts/track_cli.py smooth bearings.tsv --alpha 0.3 \
       --out output/bearings_smoothed.tsv

   bearings.tsv needs a `bearing` column (degrees) and may carry a
   `timestamp` column, which is copied through.

2. Build an open polyline from polar points, rotated by 90 degrees:

   python scripts/track_cli.py segments track.tsv --open \
       --set converter.kind=rotation --set converter.rotation_deg=90

   track.tsv needs either `radius`/`angle` or `x`/`y` columns.

3. Use a TOML configuration file and only print the merged result:

   python scripts/track_cli.py smooth bearings.tsv \
       --config config/track.toml --dump-effective-config

-------------------------------------------------------------------------------
Configuration
-------------------------------------------------------------------------------
Defaults, then --config, then --set overrides, then explicit flags
(--alpha, --open). See getback_gps.track_core.config_loader for the tables.

Each run (unless --dump-effective-config is given) appends progress lines
to a log file `run_<UTC stamp>.log` under --log-dir.

Exit status: 0 on success, 2 on invalid input or configuration.
"""

from __future__ import annotations

import argparse
import os
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Tuple

from getback_gps.lib.circular_average import smooth_series
from getback_gps.lib.converters import converter_from_config
from getback_gps.lib.coordinates import NUM_COORD_LINE, CoordinateSequence
from getback_gps.track_core.config_loader import dump_effective_config, load_config
from getback_gps.track_io.tsv import (
    BearingRow,
    read_bearings_tsv,
    read_points_tsv,
    write_bearings_tsv,
    write_segments_tsv,
)


def _init_logger(log_dir: str) -> Tuple[str, Callable[[str], None]]:
    os.makedirs(log_dir, exist_ok=True)
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%SZ")
    path = os.path.join(log_dir, f"run_{stamp}.log")

    def _log(msg: str) -> None:
        with open(path, "a", encoding="utf-8") as f:
            f.write(msg.rstrip() + "\n")

    return path, _log


def _default_out(inp: str, suffix: str) -> str:
    stem, _ = os.path.splitext(inp)
    return f"{stem}_{suffix}.tsv"


def _ensure_parent(path: str) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)


def cmd_smooth(args: argparse.Namespace, cfg: Dict[str, Any], log) -> int:
    alpha = float(cfg["smoothing"]["alpha"])
    df = read_bearings_tsv(args.tsv)
    msg = f"Read {len(df)} bearings from {args.tsv}"
    print(msg); log(msg)

    smoothed = smooth_series(df["bearing"].to_numpy(), alpha)
    stamps = df["timestamp"] if "timestamp" in df.columns else [None] * len(df)
    rows = [
        BearingRow(timestamp=ts, bearing_deg=float(b), smoothed_deg=float(s))
        for ts, b, s in zip(stamps, df["bearing"], smoothed)
    ]

    out = args.out or _default_out(args.tsv, "smoothed")
    _ensure_parent(out)
    write_bearings_tsv(out, rows, alpha=alpha, append=False)
    msg = f"Wrote {len(rows)} smoothed bearings (alpha={alpha}): {out}"
    print(msg); log(msg)
    return 0


def cmd_segments(args: argparse.Namespace, cfg: Dict[str, Any], log) -> int:
    seq = CoordinateSequence(
        converter=converter_from_config(cfg["converter"]),
        close_line=bool(cfg["track"]["close_line"]),
    )
    read_points_tsv(args.tsv, seq)
    msg = f"Read {seq.size()} points from {args.tsv}"
    print(msg); log(msg)

    segments = seq.to_line_segments()
    out = args.out or _default_out(args.tsv, "segments")
    _ensure_parent(out)
    write_segments_tsv(out, segments, close_line=seq.close_line)
    msg = f"Wrote {segments.size // NUM_COORD_LINE} segments: {out}"
    print(msg); log(msg)
    return 0


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", default=None, help="TOML configuration file")
    common.add_argument(
        "--set",
        action="append",
        default=[],
        help="Override config key=value (repeatable).",
    )
    common.add_argument(
        "--dump-effective-config",
        action="store_true",
        help="Print final merged config and exit.",
    )
    common.add_argument(
        "--log-dir",
        default="logs",
        help="Directory where the run log will be created.",
    )
    common.add_argument("--out", default=None, help="Output TSV path")

    p = argparse.ArgumentParser(
        description="Bearing smoothing and track segment tools",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    sub = p.add_subparsers(dest="command", required=True)

    ps = sub.add_parser(
        "smooth",
        parents=[common],
        help="Smooth raw bearings (degrees) on the circle",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    ps.add_argument("tsv", help="Input TSV with a `bearing` column")
    ps.add_argument(
        "--alpha",
        type=float,
        default=None,
        help="Smoothing factor in [0, 1]; overrides smoothing.alpha",
    )
    ps.set_defaults(func=cmd_smooth)

    pg = sub.add_parser(
        "segments",
        parents=[common],
        help="Project points into line segments",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    pg.add_argument("tsv", help="Input TSV with radius/angle or x/y columns")
    pg.add_argument(
        "--open",
        action="store_true",
        help="Do not join the last point back to the first",
    )
    pg.set_defaults(func=cmd_segments)

    return p


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    overrides = list(args.set)
    if getattr(args, "alpha", None) is not None:
        overrides.append(f"smoothing.alpha={args.alpha!r}")
    if getattr(args, "open", False):
        overrides.append("track.close_line=false")

    try:
        cfg = load_config(args.config, overrides)
    except (OSError, ValueError) as e:
        print(f"ERROR: {e}")
        return 2

    print("----- Effective configuration -----")
    print(dump_effective_config(cfg).rstrip())
    print("-----------------------------------")
    if args.dump_effective_config:
        return 0

    log_path, log = _init_logger(args.log_dir)
    now = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    log(f"[{now}] Run started: {args.command} {args.tsv}")
    log("----- Effective configuration -----")
    log(dump_effective_config(cfg).rstrip())
    log("-----------------------------------")
    print(f"Log file: {log_path}")

    try:
        return args.func(args, cfg, log)
    except (OSError, ValueError) as e:
        msg = f"ERROR: {e}"
        print(msg); log(msg)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
