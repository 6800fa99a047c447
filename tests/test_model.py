from __future__ import annotations

import dataclasses

import pytest

from readcon.core.model import Atom, ConFrame, Frame, Velocity
from readcon.core.validate import ValidationError


def test_atom_defaults() -> None:
    atom = Atom("Cu", 1.0, 2.0, 3.0)
    assert atom.is_fixed is False
    assert atom.atom_id == 0
    assert atom.mass is None
    assert atom.velocity is None
    assert atom.has_velocity is False
    assert atom.vx is None
    assert atom.position == (1.0, 2.0, 3.0)


def test_atom_velocity_keywords_and_composite() -> None:
    a = Atom("H", 0, 0, 0, vx=1, vy=2, vz=3)
    b = Atom("H", 0, 0, 0, velocity=Velocity(1.0, 2.0, 3.0))

    assert a == b
    assert a.velocity.as_tuple() == (1.0, 2.0, 3.0)
    assert (a.vx, a.vy, a.vz) == (1.0, 2.0, 3.0)


def test_atom_partial_velocity_rejected() -> None:
    with pytest.raises(ValidationError, match="must be given together"):
        Atom("H", 0, 0, 0, vx=1.0, vy=2.0)

    with pytest.raises(ValidationError):
        Atom("H", 0, 0, 0, vx=1.0, vy=2.0, vz=3.0, velocity=Velocity(1, 2, 3))


def test_atom_field_types_checked() -> None:
    with pytest.raises(ValidationError):
        Atom("H", 0, 0, 0, atom_id=1.5)  # type: ignore[arg-type]
    with pytest.raises(ValidationError):
        Atom("H", 0, 0, 0, atom_id=True)
    with pytest.raises(ValidationError):
        Atom(1, 0, 0, 0)  # type: ignore[arg-type]


def test_atom_and_frame_are_frozen() -> None:
    atom = Atom("Cu", 0, 0, 0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        atom.x = 1.0  # type: ignore[misc]

    frame = ConFrame(cell=[1, 1, 1], angles=[90, 90, 90], atoms=[atom])
    with pytest.raises(dataclasses.FrozenInstanceError):
        frame.cell = (2.0, 2.0, 2.0)  # type: ignore[misc]


def test_frame_basics_and_repr() -> None:
    atom = Atom(symbol="Cu", x=0.0, y=0.0, z=0.0, is_fixed=True, atom_id=0, mass=63.546)
    frame = ConFrame(cell=[10.0, 10.0, 10.0], angles=[90.0, 90.0, 90.0], atoms=[atom])

    assert Frame is ConFrame
    assert len(frame) == 1
    assert list(frame) == [atom]
    assert frame.cell == (10.0, 10.0, 10.0)
    assert frame.prebox_header == ()
    assert frame.has_velocities is False
    assert "natoms=1" in repr(frame)
    assert "symbol='Cu'" in repr(atom)


def test_frame_symbols_first_seen_order() -> None:
    atoms = [Atom("O", 0, 0, 0), Atom("H", 0, 0, 0), Atom("O", 0, 0, 0), Atom("C", 0, 0, 0)]
    frame = ConFrame(cell=[1, 1, 1], angles=[90, 90, 90], atoms=atoms)
    assert frame.symbols == ("O", "H", "C")


def test_empty_frame_has_no_velocities() -> None:
    frame = ConFrame(cell=[1, 1, 1], angles=[90, 90, 90])
    assert len(frame) == 0
    assert frame.has_velocities is False


def test_frame_requires_three_cell_values() -> None:
    with pytest.raises(ValidationError, match="cell"):
        ConFrame(cell=[1, 1], angles=[90, 90, 90])
    with pytest.raises(ValidationError, match="angles"):
        ConFrame(cell=[1, 1, 1], angles="90 90 90")  # type: ignore[arg-type]


def test_frame_rejects_non_atoms() -> None:
    with pytest.raises(ValidationError, match="expected Atom"):
        ConFrame(cell=[1, 1, 1], angles=[90, 90, 90], atoms=[("Cu", 0, 0, 0)])  # type: ignore[list-item]


def test_mixed_velocity_frame_rejected_unless_allowed() -> None:
    atoms = [Atom("H", 0, 0, 0, vx=1, vy=1, vz=1), Atom("H", 1, 1, 1)]
    with pytest.raises(ValidationError, match="mixed velocity presence"):
        ConFrame(cell=[1, 1, 1], angles=[90, 90, 90], atoms=atoms)

    frame = ConFrame(cell=[1, 1, 1], angles=[90, 90, 90], atoms=atoms, allow_mixed_velocities=True)
    assert frame.has_velocities is False


def test_isclose_tolerance() -> None:
    a = ConFrame(cell=[1, 1, 1], angles=[90, 90, 90], atoms=[Atom("H", 0.0, 0.0, 0.0, mass=1.0)])
    b = ConFrame(cell=[1, 1, 1], angles=[90, 90, 90], atoms=[Atom("H", 1e-9, 0.0, 0.0, mass=1.0)])

    assert a.isclose(b, abs_tol=1e-6)
    assert not a.isclose(b, abs_tol=1e-12)


def test_atom_negative_id_rejected() -> None:
    with pytest.raises(ValidationError, match="must be non-negative, got -1"):
        Atom("H", 0, 0, 0, atom_id=-1)
