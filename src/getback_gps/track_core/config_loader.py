from __future__ import annotations

"""
config_loader.py
================
TOML configuration for the track tools.

Composition order: built-in defaults -> config file -> ``--set`` overrides.

Recognized tables
-----------------
[smoothing]
    alpha : float in [0, 1], smoothing factor for bearings.
[track]
    close_line : bool, join the last point back to the first.
[converter]
    kind : identity | rotation | scale | translation | compass
    rotation_deg, scale, dx, dy : parameters of the selected kind.
"""

import copy
import os
import tomllib
from typing import Any, Dict, Iterable, Optional

import tomli_w

from getback_gps.lib.circular_average import ALPHA_MAX, ALPHA_MIN
from getback_gps.lib.errors import InvalidArgumentError

DEFAULT_CONFIG: Dict[str, Any] = {
    "smoothing": {"alpha": 0.5},
    "track": {"close_line": True},
    "converter": {"kind": "identity"},
}


def load_toml(path: str) -> Dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def merge_dicts(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(a)
    for k, v in b.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = merge_dicts(out[k], v)
        else:
            out[k] = v
    return out


def apply_sets(cfg: Dict[str, Any], sets: Iterable[str]) -> Dict[str, Any]:
    for item in sets:
        if "=" not in item:
            raise ValueError(f"--set requires key=value, got: {item}")
        key, val = item.split("=", 1)
        path = key.strip().split(".")
        cursor = cfg
        for p in path[:-1]:
            if p not in cursor or not isinstance(cursor[p], dict):
                cursor[p] = {}
            cursor = cursor[p]
        cursor[path[-1]] = parse_scalar(val.strip())
    return cfg


def parse_scalar(s: str):
    sl = s.lower()
    if sl in ("true", "false"):
        return sl == "true"
    try:
        if "." in s or "e" in sl:
            return float(s)
        return int(s)
    except ValueError:
        return s


def load_config(
    config_path: Optional[str] = None,
    set_overrides: Iterable[str] = (),
) -> Dict[str, Any]:
    """Load the effective configuration.

    Parameters
    ----------
    config_path : str, optional
        TOML file merged over the defaults. Skipped when None.
    set_overrides : iterable of str
        ``section.key=value`` items applied last.

    Raises
    ------
    FileNotFoundError
        If ``config_path`` is given but does not exist.
    InvalidArgumentError
        If ``smoothing.alpha`` is outside [0, 1].
    ValueError
        If ``track.close_line`` is not a boolean, a top-level
        section is not a table, or an override is malformed.
    """
    cfg = copy.deepcopy(DEFAULT_CONFIG)

    if config_path:
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Config file not found: {config_path}")
        cfg = merge_dicts(cfg, load_toml(config_path))

    cfg = apply_sets(cfg, set_overrides)

    for section in DEFAULT_CONFIG:
        if not isinstance(cfg.get(section), dict):
            raise ValueError(
                f"[{section}] must be a table, got: {cfg.get(section)!r}"
            )

    alpha = cfg["smoothing"].get("alpha")
    if isinstance(alpha, bool) or not isinstance(alpha, (int, float)):
        raise InvalidArgumentError(
            f"smoothing.alpha must be a number, got: {alpha!r}"
        )
    if not (ALPHA_MIN <= alpha <= ALPHA_MAX):
        raise InvalidArgumentError("parameter alpha is not in range 0.0 .. 1.0")

    if not isinstance(cfg["track"].get("close_line"), bool):
        raise ValueError(
            "track.close_line must be true or false, "
            f"got: {cfg['track'].get('close_line')!r}"
        )

    return cfg


def dump_effective_config(cfg: Dict[str, Any]) -> str:
    return tomli_w.dumps(cfg)
