from __future__ import annotations

import pandas as pd
import pytest

from conftest import resource
from readcon.codecs.con import read_con
from readcon.core.model import Atom, ConFrame
from readcon.core.tables import (
    ATOM_TABLE_COLUMNS,
    FRAME_COLUMN,
    atoms_from_dataframe,
    atoms_to_dataframe,
    frames_to_dataframe,
)


def test_atoms_to_dataframe_schema_and_order() -> None:
    (frame,) = read_con(resource("tiny_cuh2.con"))
    df = atoms_to_dataframe(frame)

    assert list(df.columns) == ATOM_TABLE_COLUMNS
    assert len(df) == 4
    assert list(df["symbol"]) == ["Cu", "Cu", "H", "H"]
    assert list(df["atom_id"]) == [0, 1, 2, 3]
    assert str(df["is_fixed"].dtype) == "bool"
    assert str(df["vx"].dtype) == "Float64"
    assert df["vx"].isna().all()
    assert df["mass"].iloc[0] == pytest.approx(63.546)


def test_frames_to_dataframe_adds_frame_column() -> None:
    frames = read_con(resource("tiny_multi_cuh2.convel"))
    df = frames_to_dataframe(frames)

    assert list(df.columns) == [FRAME_COLUMN, *ATOM_TABLE_COLUMNS]
    assert list(df[FRAME_COLUMN]) == [0, 0, 0, 0, 1, 1, 1, 1]
    assert df["vx"].iloc[4] == pytest.approx(0.001111)
    assert not df["vz"].isna().any()


def test_atoms_from_dataframe_inverts_atoms_to_dataframe() -> None:
    atoms = [
        Atom("Cu", 0.5, 1.5, 2.5, is_fixed=True, atom_id=3, mass=63.546, vx=0.1, vy=0.2, vz=0.3),
        Atom("H", 1.0, 2.0, 3.0, atom_id=4, mass=None, vx=-0.1, vy=0.0, vz=0.5),
    ]
    frame = ConFrame(cell=[10, 10, 10], angles=[90, 90, 90], atoms=atoms)

    back = atoms_from_dataframe(atoms_to_dataframe(frame))
    assert back == tuple(atoms)


def test_atoms_from_dataframe_minimal_columns_use_defaults() -> None:
    df = pd.DataFrame({"symbol": [" Ar "], "x": [1.0], "y": [2.0], "z": [3.0]})
    (atom,) = atoms_from_dataframe(df)

    assert atom.symbol == "Ar"
    assert atom.is_fixed is False
    assert atom.atom_id == 0
    assert atom.mass is None
    assert atom.velocity is None


def test_atoms_from_dataframe_missing_required_column() -> None:
    df = pd.DataFrame({"symbol": ["Ar"], "x": [1.0], "y": [2.0]})
    with pytest.raises(ValueError, match="missing required columns"):
        atoms_from_dataframe(df)


def test_empty_frame_table() -> None:
    df = atoms_to_dataframe(ConFrame(cell=[1, 1, 1], angles=[90, 90, 90]))
    assert list(df.columns) == ATOM_TABLE_COLUMNS
    assert len(df) == 0


def test_single_frame_table_matches_atom_table() -> None:
    (frame,) = read_con(resource("tiny_cuh2.convel"))
    expected = atoms_to_dataframe(frame)
    got = frames_to_dataframe([frame]).drop(columns=[FRAME_COLUMN])

    pd.testing.assert_frame_equal(got, expected)
