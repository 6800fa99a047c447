"""CON/CONVEL codec (import + export).

Public API:
- `read_con_string(text)` / `read_con(path)`: parse every frame of a document.
- `ConFrameIterator(text)`: lazy per-frame parsing with cheap `forward()` skips.
- `write_con_string(frames)` / `write_con(path, frames)`: serialize frames.

Parsing is a pure function of the text: `read_con` only adds reading the file.
Serialization validates every frame first (`readcon.core.validate`) and produces
the complete text before anything is written, so a failed write leaves no
partial output behind.

Velocity data:
- on read, both the eOn CONVEL velocity section and inline ``vx vy vz`` columns
  are recognised (see `_con_parser`);
- on write, ``velocity_layout="section"`` (default) emits the eOn layout and
  ``velocity_layout="inline"`` appends the triple to each atom line.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from readcon.core.errors import ConIOError
from readcon.core.model import ConFrame
from readcon.core.validate import validate_frames

from readcon.codecs._con_parser import _LineCursor, _parse_frame, _skip_frame
from readcon.codecs._con_writer import (
    DEFAULT_PRECISION,
    VELOCITY_LAYOUTS,
    check_precision,
    format_frame,
)

logger = logging.getLogger(__name__)


# ----------------------------
# Public API
# ----------------------------


class ConFrameIterator:
    """Lazily parse frames from the full text of a `.con`/`.convel` document.

    Each `next()` parses one frame and raises `FormatError` if it is malformed.
    Iteration stops when only blank lines remain.
    """

    def __init__(self, text: str, *, velocities: bool | None = None):
        if not isinstance(text, str):
            raise TypeError(f"ConFrameIterator: expected str, got {type(text).__name__}")
        self._cursor = _LineCursor(text)
        self._velocities = velocities
        self._index = 0

    @property
    def frame_index(self) -> int:
        """Index of the next frame to be produced."""
        return self._index

    def __iter__(self) -> "ConFrameIterator":
        return self

    def __next__(self) -> ConFrame:
        if self._cursor.only_blank_left():
            raise StopIteration
        frame = _parse_frame(self._cursor, frame_index=self._index, velocities=self._velocities)
        self._index += 1
        return frame

    def forward(self) -> bool:
        """Skip the next frame without building it.

        Returns:
            True if a frame was skipped, False at end of input.
        """
        if self._cursor.only_blank_left():
            return False
        _skip_frame(self._cursor, frame_index=self._index, velocities=self._velocities)
        self._index += 1
        return True


def read_con_string(text: str, *, velocities: bool | None = None) -> list[ConFrame]:
    """Parse CON/CONVEL text into frames.

    Args:
        text: The whole document.
        velocities: None (default) detects velocity data per frame; True
            requires it in every frame; False rejects it.

    Returns:
        One `ConFrame` per frame, in document order.

    Raises:
        FormatError: the text does not follow the grammar.
    """
    frames = list(ConFrameIterator(text, velocities=velocities))
    logger.debug("parsed %d frame(s)", len(frames))
    return frames


def read_con(path: str | Path, *, velocities: bool | None = None) -> list[ConFrame]:
    """Read a `.con`/`.convel` file from disk and parse it.

    Raises:
        ConIOError: the file cannot be read.
        FormatError: the content does not follow the grammar.
    """
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConIOError(f"failed to read file {str(p)!r}: {e}", path=p) from e
    logger.debug("read %s (%d bytes)", p, len(text))
    return read_con_string(text, velocities=velocities)


def write_con_string(
    frames: Iterable[ConFrame],
    precision: int = DEFAULT_PRECISION,
    *,
    velocity_layout: str = "section",
) -> str:
    """Serialize frames to CON/CONVEL text.

    Args:
        frames: Frames to write, in order.
        precision: Digits after the decimal point for every float field.
        velocity_layout: ``"section"`` or ``"inline"``; only used for frames
            that carry velocities.

    Raises:
        ValidationError: a frame violates a format invariant (nothing is emitted).
        ValueError: invalid ``precision`` or ``velocity_layout``.
    """
    check_precision(precision)
    if velocity_layout not in VELOCITY_LAYOUTS:
        raise ValueError(f"velocity_layout: must be one of {list(VELOCITY_LAYOUTS)}, got {velocity_layout!r}")

    frames_t = list(frames)
    for i, frame in enumerate(frames_t):
        if not isinstance(frame, ConFrame):
            raise TypeError(f"frames[{i}]: expected ConFrame, got {type(frame).__name__}")
    validate_frames(frames_t)

    lines: list[str] = []
    for frame in frames_t:
        lines.extend(format_frame(frame, precision=precision, velocity_layout=velocity_layout))
    logger.debug("formatted %d frame(s) at precision %d", len(frames_t), precision)
    if not lines:
        return ""
    return "\n".join(lines) + "\n"


def write_con(
    path: str | Path,
    frames: Iterable[ConFrame],
    precision: int = DEFAULT_PRECISION,
    *,
    velocity_layout: str = "section",
) -> None:
    """Serialize frames and write them to *path* (parent directories are created).

    Raises:
        ValidationError: a frame violates a format invariant (file untouched).
        ConIOError: the file cannot be written.
    """
    out_text = write_con_string(frames, precision=precision, velocity_layout=velocity_layout)
    out_path = Path(path)
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        # newline="" prevents newline translation on write
        with out_path.open("w", encoding="utf-8", newline="") as f:
            f.write(out_text)
    except OSError as e:
        raise ConIOError(f"failed to write file {str(out_path)!r}: {e}", path=out_path) from e
    logger.debug("wrote %s", out_path)


# Short names for callers that think in codec terms.
parse = read_con_string
serialize = write_con_string
