"""Codecs for reading/writing the eOn CON and CONVEL formats."""

from __future__ import annotations

from .con import (
    ConFrameIterator,
    parse,
    read_con,
    read_con_string,
    serialize,
    write_con,
    write_con_string,
)
from ._con_writer import DEFAULT_PRECISION, MISSING_MASS, format_float

__all__ = [
    "ConFrameIterator",
    "DEFAULT_PRECISION",
    "MISSING_MASS",
    "format_float",
    "parse",
    "read_con",
    "read_con_string",
    "serialize",
    "write_con",
    "write_con_string",
]
