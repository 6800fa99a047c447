"""readcon: reader/writer for eOn CON and CONVEL atomic configuration files.

A document holds one or more frames; each frame is a simulation cell plus atoms
grouped into per-symbol type blocks, optionally with velocities (CONVEL).
"""

from __future__ import annotations

from readcon.codecs import (
    DEFAULT_PRECISION,
    ConFrameIterator,
    format_float,
    parse,
    read_con,
    read_con_string,
    serialize,
    write_con,
    write_con_string,
)
from readcon.core import (
    Atom,
    ConFrame,
    ConIOError,
    FormatError,
    Frame,
    ReadconError,
    ValidationError,
    Velocity,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Atom",
    "ConFrame",
    "Frame",
    "Velocity",
    "ConFrameIterator",
    "DEFAULT_PRECISION",
    "format_float",
    "parse",
    "read_con",
    "read_con_string",
    "serialize",
    "write_con",
    "write_con_string",
    "ReadconError",
    "ConIOError",
    "FormatError",
    "ValidationError",
]
