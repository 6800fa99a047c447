"""Serialization invariants for in-memory frames.

A `ConFrame` can be built in states the CON format cannot represent (for example
two `Cu` atoms carrying different masses, since the file stores one mass per
type). The serializer calls `validate_frames()` before emitting any text so
that a write either succeeds completely or fails with every problem listed.

Checks:
- velocity presence is uniform per frame
- all atoms sharing a symbol carry the same mass (absent vs present conflicts;
  NaN matches NaN)
- symbols are non-empty and survive the line-stripping the parser applies
- prebox/postbox headers hold at most two single-line entries
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Sequence

from readcon.core.errors import ReadconError

if TYPE_CHECKING:  # pragma: no cover
    from readcon.core.model import ConFrame


HEADER_LINES = 2


@dataclass(frozen=True)
class Violation:
    frame_index: int | None
    message: str

    def __str__(self) -> str:  # pragma: no cover (covered indirectly by exception message)
        if self.frame_index is None:
            return self.message
        return f"frame {self.frame_index}: {self.message}"


class ValidationError(ReadconError):
    """Aggregates invariant violations of one or more frames.

    The message is stable and suitable for test assertions.
    """

    def __init__(self, violations: Iterable[Violation]):
        v = list(violations)
        if not v:
            super().__init__("frame validation failed (no details)")
            self.violations: list[Violation] = []
            return
        if len(v) == 1:
            super().__init__(str(v[0]))
            self.violations = v
            return
        # Deterministic ordering for stable exception messages.
        v_sorted = sorted(v, key=lambda x: (-1 if x.frame_index is None else x.frame_index, x.message))
        msg = "frame validation failed:\n" + "\n".join(f"  - {item}" for item in v_sorted)
        super().__init__(msg)
        self.violations = v_sorted


def _fmt_mass(mass: float | None) -> str:
    return "absent" if mass is None else repr(mass)


def _check_velocities(frame: "ConFrame", index: int, violations: list[Violation]) -> None:
    with_v = sum(1 for a in frame.atoms if a.has_velocity)
    without_v = len(frame.atoms) - with_v
    if with_v and without_v:
        violations.append(
            Violation(index, f"mixed velocity presence: {with_v} atom(s) with velocity, {without_v} without")
        )


def _same_mass(a: float | None, b: float | None) -> bool:
    if a is None or b is None:
        return a is b
    return a == b or (math.isnan(a) and math.isnan(b))


def _check_masses(frame: "ConFrame", index: int, violations: list[Violation]) -> None:
    first_mass: dict[str, float | None] = {}
    reported: set[str] = set()
    for atom in frame.atoms:
        if atom.symbol not in first_mass:
            first_mass[atom.symbol] = atom.mass
            continue
        expected = first_mass[atom.symbol]
        if not _same_mass(atom.mass, expected) and atom.symbol not in reported:
            reported.add(atom.symbol)
            violations.append(
                Violation(
                    index,
                    f"conflicting masses for symbol {atom.symbol!r}: "
                    f"{_fmt_mass(expected)} vs {_fmt_mass(atom.mass)} (atom id {atom.atom_id})",
                )
            )


def _check_atoms(frame: "ConFrame", index: int, violations: list[Violation]) -> None:
    bad_symbols: set[str] = set()
    for i, atom in enumerate(frame.atoms):
        if atom.symbol not in bad_symbols and (not atom.symbol.strip() or atom.symbol != atom.symbol.strip()):
            bad_symbols.add(atom.symbol)
            violations.append(Violation(index, f"atoms[{i}]: symbol {atom.symbol!r} is empty or whitespace-padded"))
        elif "\n" in atom.symbol or "\r" in atom.symbol:
            violations.append(Violation(index, f"atoms[{i}]: symbol contains a line break"))


def _check_header(lines: Sequence[str], *, name: str, index: int, violations: list[Violation]) -> None:
    if len(lines) > HEADER_LINES:
        violations.append(Violation(index, f"{name}: at most {HEADER_LINES} lines, got {len(lines)}"))
    for i, line in enumerate(lines):
        if "\n" in line or "\r" in line:
            violations.append(Violation(index, f"{name}[{i}]: contains a line break"))


def frame_violations(frame: "ConFrame", *, index: int = 0) -> list[Violation]:
    """Return every violation of one frame (empty when serializable)."""
    violations: list[Violation] = []
    _check_header(frame.prebox_header, name="prebox_header", index=index, violations=violations)
    _check_header(frame.postbox_header, name="postbox_header", index=index, violations=violations)
    _check_velocities(frame, index, violations)
    _check_masses(frame, index, violations)
    _check_atoms(frame, index, violations)
    return violations


def validate_frame(frame: "ConFrame", *, index: int = 0) -> None:
    """Raise `ValidationError` if *frame* cannot be serialized."""
    violations = frame_violations(frame, index=index)
    if violations:
        raise ValidationError(violations)


def validate_frames(frames: Iterable["ConFrame"]) -> None:
    """Validate all frames, reporting every violation of every frame at once."""
    violations: list[Violation] = []
    for i, frame in enumerate(frames):
        violations.extend(frame_violations(frame, index=i))
    if violations:
        raise ValidationError(violations)
