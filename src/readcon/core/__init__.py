"""readcon core: data model, error taxonomy and serialization invariants.

This package is intentionally standalone and must not import codecs/cli
to avoid circular dependencies.
"""

from __future__ import annotations

from .errors import ConIOError, FormatError, ReadconError
from .model import Atom, ConFrame, Frame, Velocity
from .validate import ValidationError, Violation, frame_violations, validate_frame, validate_frames

__all__ = [
    "Atom",
    "ConFrame",
    "Frame",
    "Velocity",
    "ReadconError",
    "ConIOError",
    "FormatError",
    "ValidationError",
    "Violation",
    "frame_violations",
    "validate_frame",
    "validate_frames",
]
