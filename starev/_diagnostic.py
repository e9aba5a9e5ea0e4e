from __future__ import annotations

import contextlib
import os
from types import ModuleType

from . import _utils
from ._utils import Cell

TRACEBACK_SUPPRESS: Cell[set[str]] = Cell(set())


def register_exclusion(filename: str | ModuleType):
    """frames from these files are hidden in rich tracebacks unless verbose"""
    if not isinstance(filename, str):
        f = filename.__file__
        assert f is not None
        f = os.path.dirname(f)
    else:
        f = filename
    TRACEBACK_SUPPRESS.value.add(f)


register_exclusion(__file__)
register_exclusion(_utils.__file__)

register_exclusion(contextlib)


class ShapeError(ValueError):
    """
    a caller broke a size contract: rows of different widths in one matrix,
    a byte position outside [0, n), a value that does not fit a byte, ...
    """


class SuppressExit(Exception):
    """
    exception indicating that caller should exit with code without showing a backtrace
    """

    def __init__(self, code: int, message: str | None = None):
        super().__init__(code, message)
        self.code = code
        self.message = message


def check_width(rows: list, width: int | None = None) -> int:
    """returns the common width of rows, raising ShapeError if they differ"""
    for idx, row in enumerate(rows):
        if width is None:
            width = len(row)
        elif len(row) != width:
            raise ShapeError(f"row {idx} has width {len(row)}, expected {width}")
    if width is None:
        raise ShapeError("cannot determine the width of an empty matrix")
    return width


def check_position(n: int, idx: int) -> int:
    if not 0 <= idx < n:
        raise ShapeError(f"byte position {idx} out of range for length {n}")
    return idx


def check_byte(value: int) -> int:
    if not 0 <= value < 256:
        raise ShapeError(f"value {value} does not fit in a byte")
    return value
