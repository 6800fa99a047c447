"""Pytest configuration.

Puts `src/` on `sys.path` so `import readcon` works without an editable install,
and hosts the reference-file paths and text builders shared by the test modules.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_configure() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    src_dir = repo_root / "src"
    sys.path.insert(0, str(src_dir))


RESOURCES = Path(__file__).resolve().parent / "resources"


# =============================================================================
# Shared Test Helpers for CON Tests
# =============================================================================


def resource(name: str) -> Path:
    """Path to a reference file under tests/resources/."""
    return RESOURCES / name


def make_con_text(
    atom_lines: list[str] | None = None,
    *,
    counts: str = "1 1",
    masses: str = "12.011 1.008",
    ntypes: str = "2",
    symbols: tuple[str, ...] = ("C", "H"),
    per_type: tuple[int, ...] = (1, 1),
    tail: list[str] | None = None,
) -> str:
    """Assemble a single-frame document; atom lines are split over types by *per_type*."""
    if atom_lines is None:
        atom_lines = ["1.0 1.0 1.0 0 1", "2.0 2.0 2.0 0 2"]
    lines = [
        "PREBOX LINE 1",
        "PREBOX LINE 2",
        "10.0 10.0 10.0",
        "90.0 90.0 90.0",
        "POSTBOX LINE 1",
        "POSTBOX LINE 2",
        ntypes,
        counts,
        masses,
    ]
    start = 0
    for k, (symbol, n) in enumerate(zip(symbols, per_type), start=1):
        lines.append(symbol)
        lines.append(f"Coordinates of Component {k}")
        lines.extend(atom_lines[start : start + n])
        start += n
    lines.extend(tail or [])
    return "\n".join(lines) + "\n"


@pytest.fixture
def cuh2_con_text() -> str:
    return resource("tiny_cuh2.con").read_text(encoding="utf-8")


@pytest.fixture
def cuh2_convel_text() -> str:
    return resource("tiny_cuh2.convel").read_text(encoding="utf-8")
