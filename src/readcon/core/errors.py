"""Error taxonomy for the CON/CONVEL codec.

Every failure derives from `ReadconError`, which is an `OSError` so that callers
treating the codec as an I/O source keep a single ``except OSError`` path:

- `ConIOError`: the source/sink could not be read or written.
- `FormatError`: text does not follow the CON grammar.
- `ValidationError` (see `readcon.core.validate`): an in-memory frame cannot be
  represented in the format.
"""

from __future__ import annotations

from pathlib import Path


class ReadconError(OSError):
    """Base class for all codec failures."""

    def __init__(self, message: str):
        # OSError treats a 2-tuple of args as (errno, strerror); keep one arg.
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ConIOError(ReadconError):
    """The file could not be opened, read or written."""

    def __init__(self, message: str, *, path: str | Path | None = None):
        super().__init__(message)
        self.path = None if path is None else Path(path)


class FormatError(ReadconError):
    """Text does not conform to the CON grammar.

    Attributes:
        reason: Human readable description without location.
        lineno: 1-based line number of the offending line, or None when the
            input ended before the expected line.
        frame_index: 0-based index of the frame being parsed.
    """

    def __init__(self, reason: str, *, lineno: int | None = None, frame_index: int | None = None):
        where: list[str] = []
        if frame_index is not None:
            where.append(f"frame {frame_index}")
        if lineno is not None:
            where.append(f"line {lineno}")
        else:
            where.append("end of input")
        super().__init__(f"{', '.join(where)}: {reason}")
        self.reason = reason
        self.lineno = lineno
        self.frame_index = frame_index
