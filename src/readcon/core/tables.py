"""Tabular (pandas) view of frame atoms.

A frame's atoms map naturally onto one DataFrame row per atom. This module is
the single source of truth for:

- the atom table columns and their canonical order
- pragmatic dtype normalization (nullable extension dtypes keep absent masses
  and velocities as <NA> rather than 0.0)
- conversion in both directions (`atoms_to_dataframe` / `atoms_from_dataframe`)

Row order is the atom order of the frame; it is never re-sorted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable

from readcon.core.model import Atom, ConFrame

if TYPE_CHECKING:  # pragma: no cover
    import pandas as pd


# ----------------------------
# Canonical schema descriptors
# ----------------------------

ATOM_TABLE_SCHEMA: dict[str, str] = {
    "symbol": "string",
    "x": "float64",
    "y": "float64",
    "z": "float64",
    "is_fixed": "bool",
    "atom_id": "int64",
    "mass": "Float64",
    "vx": "Float64",
    "vy": "Float64",
    "vz": "Float64",
}

# Canonical column order for stable CSV export and equality tests.
ATOM_TABLE_COLUMNS: list[str] = list(ATOM_TABLE_SCHEMA.keys())

FRAME_COLUMN = "frame"


# ----------------------------
# Internal helpers
# ----------------------------


def _is_missing(value: Any) -> bool:
    import pandas as pd

    return value is None or bool(pd.isna(value))


def _opt_float(value: Any) -> float | None:
    return None if _is_missing(value) else float(value)


def _cast_to_schema(df: "pd.DataFrame") -> "pd.DataFrame":
    for col, dtype in ATOM_TABLE_SCHEMA.items():
        if dtype == "string":
            df[col] = df[col].astype("string").str.strip()
        else:
            df[col] = df[col].astype(dtype)
    return df


def _atom_row(atom: Atom) -> dict[str, Any]:
    return {
        "symbol": atom.symbol,
        "x": atom.x,
        "y": atom.y,
        "z": atom.z,
        "is_fixed": atom.is_fixed,
        "atom_id": atom.atom_id,
        "mass": atom.mass,
        "vx": atom.vx,
        "vy": atom.vy,
        "vz": atom.vz,
    }


# ----------------------------
# Public API
# ----------------------------


def atoms_to_dataframe(frame: ConFrame) -> "pd.DataFrame":
    """Return one row per atom of *frame*, columns in `ATOM_TABLE_COLUMNS` order."""
    import pandas as pd

    rows = [_atom_row(a) for a in frame.atoms]
    df = pd.DataFrame(rows, columns=ATOM_TABLE_COLUMNS)
    return _cast_to_schema(df)


def frames_to_dataframe(frames: Iterable[ConFrame]) -> "pd.DataFrame":
    """Concatenate the atom tables of several frames with a leading `frame` column."""
    import pandas as pd

    rows: list[dict[str, Any]] = []
    for i, frame in enumerate(frames):
        for atom in frame.atoms:
            row = {FRAME_COLUMN: i}
            row.update(_atom_row(atom))
            rows.append(row)
    df = pd.DataFrame(rows, columns=[FRAME_COLUMN, *ATOM_TABLE_COLUMNS])
    df = _cast_to_schema(df)
    df[FRAME_COLUMN] = df[FRAME_COLUMN].astype("int64")
    return df


def atoms_from_dataframe(df: "pd.DataFrame") -> tuple[Atom, ...]:
    """Build atoms from an atom table (inverse of `atoms_to_dataframe`).

    Only ``symbol``, ``x``, ``y`` and ``z`` are required; missing optional
    columns take the `Atom` defaults. Extra columns (e.g. `frame`) are ignored.

    Raises:
        ValueError: a required column is missing.
        ValidationError: a row carries a partial velocity triple.
    """
    required = ["symbol", "x", "y", "z"]
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"atom table: missing required columns: {missing}")

    atoms: list[Atom] = []
    for rec in df.to_dict(orient="records"):
        atoms.append(
            Atom(
                str(rec["symbol"]).strip(),
                float(rec["x"]),
                float(rec["y"]),
                float(rec["z"]),
                is_fixed=False if _is_missing(rec.get("is_fixed")) else bool(rec["is_fixed"]),
                atom_id=0 if _is_missing(rec.get("atom_id")) else int(rec["atom_id"]),
                mass=_opt_float(rec.get("mass")),
                vx=_opt_float(rec.get("vx")),
                vy=_opt_float(rec.get("vy")),
                vz=_opt_float(rec.get("vz")),
            )
        )
    return tuple(atoms)
