from __future__ import annotations

import pytest

from readcon.core.model import Atom, ConFrame
from readcon.core.validate import ValidationError, Violation, frame_violations, validate_frame, validate_frames


def _frame(atoms, **kw) -> ConFrame:
    return ConFrame(cell=[1, 1, 1], angles=[90, 90, 90], atoms=atoms, **kw)


def test_valid_frame_has_no_violations() -> None:
    frame = _frame([Atom("Cu", 0, 0, 0, mass=63.546), Atom("Cu", 1, 1, 1, atom_id=1, mass=63.546)])
    assert frame_violations(frame) == []
    validate_frame(frame)


def test_mass_conflict_reported_once_per_symbol() -> None:
    frame = _frame(
        [
            Atom("Cu", 0, 0, 0, atom_id=0, mass=63.546),
            Atom("Cu", 0, 0, 0, atom_id=1, mass=64.0),
            Atom("Cu", 0, 0, 0, atom_id=2, mass=65.0),
        ]
    )
    violations = frame_violations(frame, index=3)
    assert violations == [Violation(3, "conflicting masses for symbol 'Cu': 63.546 vs 64.0 (atom id 1)")]


def test_symbol_checks() -> None:
    frame = _frame([Atom(" Cu", 0, 0, 0), Atom("", 0, 0, 0), Atom("H", 0, 0, 0)])
    messages = [v.message for v in frame_violations(frame)]

    assert any("' Cu' is empty or whitespace-padded" in m for m in messages)
    assert any("'' is empty or whitespace-padded" in m for m in messages)
    assert len(messages) == 2


def test_header_checks() -> None:
    frame = _frame([], prebox_header=["a", "b", "c"], postbox_header=["0 0\n1"])
    messages = [v.message for v in frame_violations(frame)]

    assert "prebox_header: at most 2 lines, got 3" in messages
    assert "postbox_header[0]: contains a line break" in messages


def test_validate_frames_aggregates_across_frames() -> None:
    ok = _frame([Atom("H", 0, 0, 0)])
    bad_header = _frame([Atom("H", 0, 0, 0)], prebox_header=["a", "b", "c"])
    bad_mass = _frame([Atom("O", 0, 0, 0, mass=16.0), Atom("O", 0, 0, 0, atom_id=1)])

    with pytest.raises(ValidationError) as ei:
        validate_frames([ok, bad_mass, bad_header])

    err = ei.value
    assert [v.frame_index for v in err.violations] == [1, 2]
    msg = str(err)
    assert msg.startswith("frame validation failed:\n")
    assert "  - frame 1: conflicting masses for symbol 'O': 16.0 vs absent (atom id 1)" in msg
    assert "  - frame 2: prebox_header: at most 2 lines, got 3" in msg


def test_single_violation_message_is_unwrapped() -> None:
    with pytest.raises(ValidationError) as ei:
        validate_frame(_frame([Atom("H", 0, 0, 0)], postbox_header=["0 0", "0 0 1", "extra"]), index=5)
    assert str(ei.value) == "frame 5: postbox_header: at most 2 lines, got 3"


def test_nan_masses_of_one_symbol_do_not_conflict() -> None:
    nan = float("nan")
    frame = _frame([Atom("C", 0, 0, 0, mass=nan), Atom("C", 1, 1, 1, atom_id=1, mass=nan)])
    assert frame_violations(frame) == []

    mixed = _frame([Atom("C", 0, 0, 0, mass=nan), Atom("C", 1, 1, 1, atom_id=1, mass=12.011)])
    assert len(frame_violations(mixed)) == 1
