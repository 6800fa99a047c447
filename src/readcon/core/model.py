"""Core data model for CON/CONVEL frames.

- `Velocity` is a single composite value so an atom carries either a full
  velocity triple or none at all.
- `Atom` and `ConFrame` are frozen value records; the parser, the serializer and
  callers only ever build new instances.

This module must not import codecs/cli.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable

from readcon.core.validate import ValidationError, Violation

Vector3 = tuple[float, float, float]


def _as_vector3(value: Any, *, where: str) -> Vector3:
    if isinstance(value, (str, bytes)):
        raise ValidationError([Violation(None, f"{where}: expected 3 numbers, got {type(value).__name__}")])
    try:
        items = [float(v) for v in value]
    except (TypeError, ValueError) as e:
        raise ValidationError([Violation(None, f"{where}: expected 3 numbers ({e})")]) from e
    if len(items) != 3:
        raise ValidationError([Violation(None, f"{where}: expected 3 values, got {len(items)}")])
    return (items[0], items[1], items[2])


def _as_lines(value: Iterable[str] | None, *, where: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        raise ValidationError([Violation(None, f"{where}: expected a sequence of lines, got str")])
    out: list[str] = []
    for i, line in enumerate(value):
        if not isinstance(line, str):
            raise ValidationError([Violation(None, f"{where}[{i}]: expected str, got {type(line).__name__}")])
        out.append(line)
    return tuple(out)


@dataclass(frozen=True)
class Velocity:
    vx: float
    vy: float
    vz: float

    def __post_init__(self) -> None:
        for name in ("vx", "vy", "vz"):
            object.__setattr__(self, name, float(getattr(self, name)))

    def as_tuple(self) -> Vector3:
        return (self.vx, self.vy, self.vz)


@dataclass(frozen=True, init=False, repr=False)
class Atom:
    """One particle of a frame.

    Fields:
      - symbol: free-form species label (not checked against an element table)
      - x, y, z: Cartesian coordinates
      - is_fixed: immobile for downstream simulation (default False)
      - atom_id: non-negative identifier recorded in the file (default 0)
      - mass: per-type mass broadcast to the atom, or None when undeclared
      - velocity: `Velocity` or None

    The constructor also accepts ``vx``, ``vy``, ``vz`` keywords; they must be
    given together or not at all.
    """

    symbol: str
    x: float
    y: float
    z: float
    is_fixed: bool
    atom_id: int
    mass: float | None
    velocity: Velocity | None

    def __init__(
        self,
        symbol: str,
        x: float,
        y: float,
        z: float,
        is_fixed: bool = False,
        atom_id: int = 0,
        mass: float | None = None,
        vx: float | None = None,
        vy: float | None = None,
        vz: float | None = None,
        *,
        velocity: Velocity | None = None,
    ) -> None:
        if not isinstance(symbol, str):
            raise ValidationError([Violation(None, f"atom.symbol: expected str, got {type(symbol).__name__}")])
        if isinstance(atom_id, bool) or not isinstance(atom_id, int):
            raise ValidationError([Violation(None, f"atom.atom_id: expected int, got {type(atom_id).__name__}")])
        if atom_id < 0:
            raise ValidationError([Violation(None, f"atom.atom_id: must be non-negative, got {atom_id}")])

        given = [v is not None for v in (vx, vy, vz)]
        if any(given):
            if not all(given):
                raise ValidationError(
                    [Violation(None, f"atom {symbol!r} (id {atom_id}): vx, vy and vz must be given together")]
                )
            if velocity is not None:
                raise ValidationError([Violation(None, "atom: pass either velocity or vx/vy/vz, not both")])
            velocity = Velocity(vx, vy, vz)  # type: ignore[arg-type]

        object.__setattr__(self, "symbol", symbol)
        object.__setattr__(self, "x", float(x))
        object.__setattr__(self, "y", float(y))
        object.__setattr__(self, "z", float(z))
        object.__setattr__(self, "is_fixed", bool(is_fixed))
        object.__setattr__(self, "atom_id", atom_id)
        object.__setattr__(self, "mass", None if mass is None else float(mass))
        object.__setattr__(self, "velocity", velocity)

    @property
    def vx(self) -> float | None:
        return None if self.velocity is None else self.velocity.vx

    @property
    def vy(self) -> float | None:
        return None if self.velocity is None else self.velocity.vy

    @property
    def vz(self) -> float | None:
        return None if self.velocity is None else self.velocity.vz

    @property
    def has_velocity(self) -> bool:
        return self.velocity is not None

    @property
    def position(self) -> Vector3:
        return (self.x, self.y, self.z)

    def __repr__(self) -> str:
        return f"Atom(symbol={self.symbol!r}, x={self.x}, y={self.y}, z={self.z}, atom_id={self.atom_id})"


def _velocity_presence(atoms: tuple[Atom, ...]) -> tuple[int, int]:
    with_v = sum(1 for a in atoms if a.has_velocity)
    return with_v, len(atoms) - with_v


@dataclass(frozen=True, init=False, repr=False)
class ConFrame:
    """One atomic-configuration snapshot.

    Fields:
      - cell: box lengths (a, b, c)
      - angles: box angles (alpha, beta, gamma) in degrees
      - atoms: insertion-ordered atoms
      - prebox_header: free-form lines preceding the cell line (at most two)
      - postbox_header: the two reserved lines following the angles line

    A frame either has velocities on every atom or on none. Passing
    ``allow_mixed_velocities=True`` lets callers build a mixed frame anyway
    (e.g. to inspect it); the serializer still rejects it.
    """

    cell: Vector3
    angles: Vector3
    atoms: tuple[Atom, ...]
    prebox_header: tuple[str, ...]
    postbox_header: tuple[str, ...]

    def __init__(
        self,
        cell: Iterable[float],
        angles: Iterable[float],
        atoms: Iterable[Atom] | None = None,
        prebox_header: Iterable[str] | None = None,
        postbox_header: Iterable[str] | None = None,
        *,
        allow_mixed_velocities: bool = False,
    ) -> None:
        atoms_t = tuple(atoms) if atoms is not None else ()
        for i, atom in enumerate(atoms_t):
            if not isinstance(atom, Atom):
                raise ValidationError([Violation(None, f"atoms[{i}]: expected Atom, got {type(atom).__name__}")])

        if not allow_mixed_velocities:
            with_v, without_v = _velocity_presence(atoms_t)
            if with_v and without_v:
                raise ValidationError(
                    [
                        Violation(
                            None,
                            f"mixed velocity presence: {with_v} atom(s) with velocity, {without_v} without",
                        )
                    ]
                )

        object.__setattr__(self, "cell", _as_vector3(cell, where="cell"))
        object.__setattr__(self, "angles", _as_vector3(angles, where="angles"))
        object.__setattr__(self, "atoms", atoms_t)
        object.__setattr__(self, "prebox_header", _as_lines(prebox_header, where="prebox_header"))
        object.__setattr__(self, "postbox_header", _as_lines(postbox_header, where="postbox_header"))

    @property
    def has_velocities(self) -> bool:
        """True iff the frame has atoms and every one of them carries a velocity."""
        return bool(self.atoms) and all(a.has_velocity for a in self.atoms)

    @property
    def symbols(self) -> tuple[str, ...]:
        """Distinct symbols in first-seen order (the type-block order on output)."""
        seen: set[str] = set()
        out: list[str] = []
        for a in self.atoms:
            if a.symbol not in seen:
                seen.add(a.symbol)
                out.append(a.symbol)
        return tuple(out)

    def __len__(self) -> int:
        return len(self.atoms)

    def __iter__(self):
        return iter(self.atoms)

    def __repr__(self) -> str:
        return (
            f"ConFrame(cell={list(self.cell)}, angles={list(self.angles)}, "
            f"natoms={len(self.atoms)}, has_velocities={self.has_velocities})"
        )

    def isclose(self, other: "ConFrame", *, abs_tol: float) -> bool:
        """Compare numerically within ``abs_tol`` (headers, symbols, flags and ids exactly)."""

        def _close(a: float | None, b: float | None) -> bool:
            if a is None or b is None:
                return a is b
            return math.isclose(a, b, rel_tol=0.0, abs_tol=abs_tol)

        if len(self) != len(other):
            return False
        if not all(_close(a, b) for a, b in zip(self.cell + self.angles, other.cell + other.angles)):
            return False
        for a, b in zip(self.atoms, other.atoms):
            if (a.symbol, a.is_fixed, a.atom_id) != (b.symbol, b.is_fixed, b.atom_id):
                return False
            if not all(_close(p, q) for p, q in zip(a.position, b.position)):
                return False
            if not _close(a.mass, b.mass):
                return False
            if a.has_velocity != b.has_velocity:
                return False
            if a.velocity is not None and b.velocity is not None:
                if not all(_close(p, q) for p, q in zip(a.velocity.as_tuple(), b.velocity.as_tuple())):
                    return False
        return True


Frame = ConFrame
