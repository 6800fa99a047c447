"""Internal parsing helpers for the CON/CONVEL codec.

Private module for parsing logic; public API is in `con.py`.

Frame layout (one frame, repeated until the input is exhausted):

    <prebox line 1>
    <prebox line 2>
    a b c                       cell lengths
    alpha beta gamma            cell angles (degrees)
    <postbox line 1>            reserved, kept verbatim
    <postbox line 2>            reserved, kept verbatim
    T                           number of atom types
    n_1 ... n_T                 atoms per type
    m_1 ... m_T                 mass per type
    then per type:
        <symbol>
        Coordinates of Component k
        x y z fixed atom_id [vx vy vz]      (n_k lines)

CONVEL files carry velocities either inline (8 fields per atom line) or, as eOn
writes them, in a second section after one blank line:

    <blank>
    then per type:
        <symbol>
        Velocities of Component k
        vx vy vz fixed atom_id              (n_k lines)
"""

from __future__ import annotations

import logging
import re
from typing import Callable, TypeVar

from readcon.core.errors import FormatError
from readcon.core.model import Atom, ConFrame, Velocity

logger = logging.getLogger(__name__)

T = TypeVar("T")

_INT_RE = re.compile(r"^[+-]?[0-9]+$")

VELOCITY_MARKER_TEXT = "Velocities of Component"

# x y z fixed atom_id, optionally followed by vx vy vz
_COORD_FIELDS = 5
_COORD_VEL_FIELDS = 8


class _LineCursor:
    """Forward-only cursor over the lines of a text buffer."""

    def __init__(self, text: str):
        # Only "\n" and "\r\n" end a line; form feeds, \x85 or \u2028 stay in it.
        lines = text.split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        self._lines = [line[:-1] if line.endswith("\r") else line for line in lines]
        self._pos = 0

    @property
    def lineno(self) -> int:
        """1-based number of the next line to be consumed."""
        return self._pos + 1

    def peek(self, offset: int = 0) -> str | None:
        i = self._pos + offset
        if i < len(self._lines):
            return self._lines[i]
        return None

    def only_blank_left(self) -> bool:
        return all(not line.strip() for line in self._lines[self._pos :])

    def take(self, what: str, *, frame_index: int) -> tuple[int, str]:
        """Consume the next line; raise `FormatError` naming *what* at end of input."""
        if self._pos >= len(self._lines):
            raise FormatError(f"unexpected end of input, expected {what}", lineno=None, frame_index=frame_index)
        lineno = self._pos + 1
        line = self._lines[self._pos]
        self._pos += 1
        return lineno, line


# ----------------------------
# Token-level helpers
# ----------------------------


def _parse_float(tok: str) -> float:
    # float() also accepts "1_000"; the format does not.
    if "_" in tok:
        raise ValueError(f"invalid float literal: {tok!r}")
    return float(tok)


def _parse_int(tok: str) -> int:
    if not _INT_RE.match(tok):
        raise ValueError(f"invalid integer literal: {tok!r}")
    return int(tok)


def _parse_count(tok: str) -> int:
    value = _parse_int(tok)
    if value < 0:
        raise ValueError(f"expected a non-negative integer, got {tok!r}")
    return value


def _parse_values(
    line: str,
    n: int,
    parse: Callable[[str], T],
    *,
    what: str,
    lineno: int,
    frame_index: int,
) -> list[T]:
    """Parse exactly *n* whitespace-separated values from *line*."""
    toks = line.split()
    if len(toks) != n:
        raise FormatError(f"expected {n} values for {what}, found {len(toks)}", lineno=lineno, frame_index=frame_index)
    try:
        return [parse(t) for t in toks]
    except ValueError as e:
        raise FormatError(f"{what}: {e}", lineno=lineno, frame_index=frame_index) from e


# ----------------------------
# Frame parsing
# ----------------------------


def _parse_header(cursor: _LineCursor, *, frame_index: int) -> dict:
    fi = frame_index
    _, pre1 = cursor.take("prebox header line 1", frame_index=fi)
    _, pre2 = cursor.take("prebox header line 2", frame_index=fi)
    ln, line = cursor.take("cell lengths line", frame_index=fi)
    cell = _parse_values(line, 3, _parse_float, what="cell lengths", lineno=ln, frame_index=fi)
    ln, line = cursor.take("cell angles line", frame_index=fi)
    angles = _parse_values(line, 3, _parse_float, what="cell angles", lineno=ln, frame_index=fi)
    _, post1 = cursor.take("reserved header line 1", frame_index=fi)
    _, post2 = cursor.take("reserved header line 2", frame_index=fi)
    ln, line = cursor.take("atom type count line", frame_index=fi)
    ntypes = _parse_values(line, 1, _parse_count, what="atom type count", lineno=ln, frame_index=fi)[0]
    ln, line = cursor.take("atoms-per-type line", frame_index=fi)
    counts = _parse_values(line, ntypes, _parse_count, what="atoms per type", lineno=ln, frame_index=fi)
    ln, line = cursor.take("masses-per-type line", frame_index=fi)
    masses = _parse_values(line, ntypes, _parse_float, what="masses per type", lineno=ln, frame_index=fi)
    return {
        "prebox_header": (pre1, pre2),
        "cell": cell,
        "angles": angles,
        "postbox_header": (post1, post2),
        "counts": counts,
        "masses": masses,
    }


def _parse_atom_record(
    line: str,
    *,
    expected_fields: int | None,
    allow_inline_velocity: bool,
    lineno: int,
    frame_index: int,
) -> tuple[tuple[float, float, float], bool, int, tuple[float, float, float] | None]:
    toks = line.split()
    n = len(toks)
    if expected_fields is None:
        allowed = (_COORD_FIELDS, _COORD_VEL_FIELDS) if allow_inline_velocity else (_COORD_FIELDS,)
        if n not in allowed:
            layout = "x y z fixed atom_id [vx vy vz]" if allow_inline_velocity else "x y z fixed atom_id"
            raise FormatError(
                f"atom record: expected {' or '.join(str(a) for a in allowed)} fields ({layout}), found {n}",
                lineno=lineno,
                frame_index=frame_index,
            )
    elif n != expected_fields:
        raise FormatError(
            f"atom record: inconsistent field count within frame, expected {expected_fields}, found {n}",
            lineno=lineno,
            frame_index=frame_index,
        )
    try:
        x, y, z = (_parse_float(t) for t in toks[0:3])
        fixed = _parse_float(toks[3]) != 0.0
        atom_id = _parse_count(toks[4])
        vel = None
        if n == _COORD_VEL_FIELDS:
            vx, vy, vz = (_parse_float(t) for t in toks[5:8])
            vel = (vx, vy, vz)
    except ValueError as e:
        raise FormatError(f"atom record: {e}", lineno=lineno, frame_index=frame_index) from e
    return (x, y, z), fixed, atom_id, vel


def _looks_like_velocity_section(cursor: _LineCursor) -> bool:
    """Blank separator, then a symbol line, then a `Velocities of Component` marker."""
    sep = cursor.peek(0)
    marker = cursor.peek(2)
    return sep is not None and not sep.strip() and marker is not None and VELOCITY_MARKER_TEXT in marker


def _parse_velocity_section(
    cursor: _LineCursor,
    *,
    symbols: list[str],
    counts: list[int],
    frame_index: int,
) -> list[tuple[float, float, float]]:
    fi = frame_index
    ln, sep = cursor.take("blank line before velocity section", frame_index=fi)
    if sep.strip():
        raise FormatError("expected blank line before velocity section", lineno=ln, frame_index=fi)

    out: list[tuple[float, float, float]] = []
    for k, (symbol, count) in enumerate(zip(symbols, counts), start=1):
        ln, line = cursor.take(f"symbol line of velocity block {k}", frame_index=fi)
        if line.strip() != symbol:
            raise FormatError(
                f"velocity block {k}: symbol {line.strip()!r} does not match coordinate block {symbol!r}",
                lineno=ln,
                frame_index=fi,
            )
        ln, marker = cursor.take(f"marker line of velocity block {k}", frame_index=fi)
        if VELOCITY_MARKER_TEXT not in marker:
            raise FormatError(
                f"velocity block {k}: expected '{VELOCITY_MARKER_TEXT} {k}', found {marker.strip()!r}",
                lineno=ln,
                frame_index=fi,
            )
        for _ in range(count):
            ln, line = cursor.take(f"velocity record of block {k}", frame_index=fi)
            toks = line.split()
            if len(toks) != _COORD_FIELDS:
                raise FormatError(
                    f"velocity record: expected {_COORD_FIELDS} fields (vx vy vz fixed atom_id), found {len(toks)}",
                    lineno=ln,
                    frame_index=fi,
                )
            try:
                vx, vy, vz = (_parse_float(t) for t in toks[0:3])
                # fixed flag and atom id repeat the coordinate record; check shape only
                _parse_float(toks[3])
                _parse_count(toks[4])
            except ValueError as e:
                raise FormatError(f"velocity record: {e}", lineno=ln, frame_index=fi) from e
            out.append((vx, vy, vz))
    return out


def _parse_frame(cursor: _LineCursor, *, frame_index: int, velocities: bool | None) -> ConFrame:
    """Parse one frame starting at the cursor.

    Args:
        velocities: None to detect velocity data, True to require it, False to
            reject it (a blank line after the coordinates then starts the next
            frame).
    """
    fi = frame_index
    header = _parse_header(cursor, frame_index=fi)
    counts: list[int] = header["counts"]
    masses: list[float] = header["masses"]

    symbols: list[str] = []
    records: list[tuple[str, float, tuple[float, float, float], bool, int, tuple[float, float, float] | None]] = []
    field_count: int | None = None
    for k, (count, mass) in enumerate(zip(counts, masses), start=1):
        ln, line = cursor.take(f"symbol line of type {k}", frame_index=fi)
        symbol = line.strip()
        if not symbol:
            raise FormatError(f"type {k}: empty symbol line", lineno=ln, frame_index=fi)
        symbols.append(symbol)
        cursor.take(f"coordinate block marker of type {k}", frame_index=fi)
        for _ in range(count):
            ln, line = cursor.take(f"atom record of type {k} ({symbol})", frame_index=fi)
            pos, fixed, atom_id, vel = _parse_atom_record(
                line,
                expected_fields=field_count,
                allow_inline_velocity=velocities is not False,
                lineno=ln,
                frame_index=fi,
            )
            field_count = len(line.split())
            records.append((symbol, mass, pos, fixed, atom_id, vel))

    inline = field_count == _COORD_VEL_FIELDS
    section: list[tuple[float, float, float]] | None = None
    if velocities is not False and records:
        if _looks_like_velocity_section(cursor) or (
            velocities and not inline and not cursor.only_blank_left()
        ):
            if inline:
                raise FormatError(
                    "velocities given both inline and in a velocity section", lineno=cursor.lineno, frame_index=fi
                )
            section = _parse_velocity_section(cursor, symbols=symbols, counts=counts, frame_index=fi)
            logger.debug("frame %d: velocity section", fi)
    if inline:
        logger.debug("frame %d: inline velocities", fi)

    if velocities and records and not inline and section is None:
        raise FormatError("expected velocity data for every atom", lineno=None, frame_index=fi)

    atoms: list[Atom] = []
    for i, (symbol, mass, (x, y, z), fixed, atom_id, vel) in enumerate(records):
        if section is not None:
            vel = section[i]
        atoms.append(
            Atom(
                symbol,
                x,
                y,
                z,
                is_fixed=fixed,
                atom_id=atom_id,
                mass=mass,
                velocity=None if vel is None else Velocity(*vel),
            )
        )

    return ConFrame(
        cell=header["cell"],
        angles=header["angles"],
        atoms=atoms,
        prebox_header=header["prebox_header"],
        postbox_header=header["postbox_header"],
    )


def _skip_frame(cursor: _LineCursor, *, frame_index: int, velocities: bool | None) -> None:
    """Advance past one frame reading only the counts needed to find its end."""
    fi = frame_index
    for what in ("prebox header line 1", "prebox header line 2", "cell lengths line", "cell angles line"):
        cursor.take(what, frame_index=fi)
    cursor.take("reserved header line 1", frame_index=fi)
    cursor.take("reserved header line 2", frame_index=fi)
    ln, line = cursor.take("atom type count line", frame_index=fi)
    ntypes = _parse_values(line, 1, _parse_count, what="atom type count", lineno=ln, frame_index=fi)[0]
    ln, line = cursor.take("atoms-per-type line", frame_index=fi)
    counts = _parse_values(line, ntypes, _parse_count, what="atoms per type", lineno=ln, frame_index=fi)
    cursor.take("masses-per-type line", frame_index=fi)

    block_lines = sum(counts) + 2 * ntypes
    for _ in range(block_lines):
        cursor.take("coordinate block line", frame_index=fi)
    if velocities is not False and sum(counts) and _looks_like_velocity_section(cursor):
        for _ in range(block_lines + 1):
            cursor.take("velocity section line", frame_index=fi)
