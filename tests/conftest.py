from __future__ import annotations

import pytest

from getback_gps.lib.coordinate import Coordinate

# ---------- Shared fixtures ----------


@pytest.fixture
def origin() -> Coordinate:
    return Coordinate(0.0, 0.0)


@pytest.fixture
def point_0_20() -> Coordinate:
    """Cartesian (0, 20)."""
    return Coordinate.from_cartesian(0, 20)


@pytest.fixture
def point_30_40() -> Coordinate:
    """Cartesian (30, 40)."""
    return Coordinate.from_cartesian(30, 40)


@pytest.fixture
def write_text(tmp_path):
    """Write ``text`` to ``tmp_path / name`` and return the path as str."""

    def _writer(name: str, text: str) -> str:
        p = tmp_path / name
        p.write_text(text, encoding="utf-8")
        return str(p)

    return _writer


@pytest.fixture
def parse_noncomment_header_and_rows():
    """Return first non-comment header and data rows from TSV text."""

    def _parser(text: str) -> tuple[str, list[str]]:
        lines = [ln.rstrip("\r\n") for ln in text.splitlines()]
        header = None
        rows: list[str] = []
        for ln in lines:
            stripped = ln.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if header is None:
                header = stripped
            else:
                rows.append(stripped)
        if header is None:
            raise AssertionError("no header found in provided text")
        return header, rows

    return _parser


