"""Internal writer helpers for the CON/CONVEL codec.

This module contains the export/formatting logic:
- float formatting (`format_float`)
- type-block grouping
- frame formatting (header, coordinate blocks, velocity blocks)

Frames are expected to be validated already; public API is in `con.py`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from readcon.core.model import Atom, ConFrame

logger = logging.getLogger(__name__)

DEFAULT_PRECISION = 6

# Written in the per-type mass line when no atom of the type declares a mass.
# Re-parsing yields 0.0 for those atoms, not None.
MISSING_MASS = 0.0

DEFAULT_PREBOX_HEADER: tuple[str, str] = ("Random Number Seed", "Time")
DEFAULT_POSTBOX_HEADER: tuple[str, str] = ("0 0", "0 0 1")

COORDINATE_MARKER = "Coordinates of Component {index}"
VELOCITY_MARKER = "Velocities of Component {index}"

VELOCITY_LAYOUTS = ("section", "inline")


def check_precision(precision: int) -> int:
    if isinstance(precision, bool) or not isinstance(precision, int):
        raise ValueError(f"precision: expected int, got {type(precision).__name__}")
    if precision < 0:
        raise ValueError(f"precision: must be >= 0, got {precision}")
    return precision


def format_float(value: float, precision: int = DEFAULT_PRECISION) -> str:
    """Format *value* with exactly *precision* digits after the decimal point.

    Rounding is exact on the binary value with ties to even (Python's ``format``
    semantics), so ``format_float(0.125, 2) == "0.12"``. The decimal point is
    always emitted, also for ``precision=0`` (``"2."``).
    """
    return format(float(value), f"#.{precision}f")


@dataclass
class TypeBlock:
    symbol: str
    mass: float | None
    atoms: list["Atom"] = field(default_factory=list)


def group_type_blocks(atoms: "tuple[Atom, ...] | list[Atom]") -> list[TypeBlock]:
    """Group atoms by symbol in first-seen order, keeping relative atom order.

    The mass of a block is the first non-conflicting mass seen; conflicts are
    rejected earlier by `readcon.core.validate`.
    """
    blocks: list[TypeBlock] = []
    index_of: dict[str, int] = {}
    for atom in atoms:
        pos = index_of.get(atom.symbol)
        if pos is None:
            pos = len(blocks)
            index_of[atom.symbol] = pos
            blocks.append(TypeBlock(symbol=atom.symbol, mass=atom.mass))
        blocks[pos].atoms.append(atom)
    return blocks


def _header_pair(lines: tuple[str, ...], default: tuple[str, str]) -> list[str]:
    if not lines:
        return list(default)
    out = list(lines[:2])
    while len(out) < 2:
        out.append("")
    return out


def _fmt_vec(values: "tuple[float, ...]", precision: int) -> str:
    return " ".join(format_float(v, precision) for v in values)


def _atom_line(atom: "Atom", precision: int, *, inline_velocity: bool) -> str:
    parts = [
        format_float(atom.x, precision),
        format_float(atom.y, precision),
        format_float(atom.z, precision),
        "1" if atom.is_fixed else "0",
        str(atom.atom_id),
    ]
    if inline_velocity and atom.velocity is not None:
        parts.extend(format_float(v, precision) for v in atom.velocity.as_tuple())
    return " ".join(parts)


def _velocity_line(atom: "Atom", precision: int) -> str:
    if atom.velocity is None:
        raise ValueError(f"atom {atom.symbol!r} (id {atom.atom_id}): no velocity to write")
    return " ".join(
        [
            _fmt_vec(atom.velocity.as_tuple(), precision),
            "1" if atom.is_fixed else "0",
            str(atom.atom_id),
        ]
    )


def format_frame(frame: "ConFrame", *, precision: int, velocity_layout: str = "section") -> list[str]:
    """Format one validated frame as a list of lines (no trailing newlines)."""
    lines: list[str] = []
    lines.extend(_header_pair(frame.prebox_header, DEFAULT_PREBOX_HEADER))
    lines.append(_fmt_vec(frame.cell, precision))
    lines.append(_fmt_vec(frame.angles, precision))
    lines.extend(_header_pair(frame.postbox_header, DEFAULT_POSTBOX_HEADER))

    blocks = group_type_blocks(frame.atoms)
    masses: list[float] = []
    for block in blocks:
        if block.mass is None:
            logger.debug("type %r has no mass; writing %s", block.symbol, MISSING_MASS)
            masses.append(MISSING_MASS)
        else:
            masses.append(block.mass)

    lines.append(str(len(blocks)))
    lines.append(" ".join(str(len(b.atoms)) for b in blocks))
    lines.append(_fmt_vec(tuple(masses), precision))

    has_velocities = frame.has_velocities
    inline = has_velocities and velocity_layout == "inline"
    for i, block in enumerate(blocks, start=1):
        lines.append(block.symbol)
        lines.append(COORDINATE_MARKER.format(index=i))
        lines.extend(_atom_line(a, precision, inline_velocity=inline) for a in block.atoms)

    if has_velocities and velocity_layout == "section":
        lines.append("")
        for i, block in enumerate(blocks, start=1):
            lines.append(block.symbol)
            lines.append(VELOCITY_MARKER.format(index=i))
            lines.extend(_velocity_line(a, precision) for a in block.atoms)

    return lines
