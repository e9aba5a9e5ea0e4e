# pyright: basic, reportOperatorIssue=false, reportAttributeAccessIssue=false, reportOptionalMemberAccess=false

import logging

from z3 import BitVec
from z3 import BitVecRef
from z3 import BitVecVal
from z3 import BoolVal
from z3 import Or
from z3 import RotateLeft
from z3 import Solver
from z3 import ZeroExt
from z3 import sat
from z3 import unsat

from ._diagnostic import ShapeError
from ._diagnostic import check_byte
from ._diagnostic import check_position
from ._utils import sta_hash
from .filters import Charset

logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
# Bit-precise sta_hash expressed with Z3 bit-vectors
# ----------------------------------------------------------------------
def sta_hash_update(h, byte):
    """one byte -> new 32-bit hash (all BitVec expressions)"""
    return RotateLeft(h, 6) ^ ZeroExt(24, byte)


def sta_hash_expr(sym_bytes):
    """Build a Z3 expression for the sta_hash of `sym_bytes`"""
    h = BitVecVal(0, 32)
    for b in sym_bytes:
        h = sta_hash_update(h, b)
    return h


# ----------------------------------------------------------------------


def byte_var(name) -> BitVecRef:
    """8-bit symbolic byte"""
    return BitVec(name, 8)


def char_constraint(b, charset: Charset):
    """b is one of the charset values"""
    options = [b == v for v in sorted(charset.values)]
    if not options:
        return BoolVal(False)
    if len(options) == 1:
        return options[0]
    return Or(*options)


def sta_rev(
    length: int,
    wanted: int,
    charset: Charset | None = None,
    fixed: dict[int, int] | None = None,
) -> bytes | None:
    """
    find one string of `length` bytes with sta_hash `wanted`.
    returns None if z3 proves there is none.
    """
    if length < 0:
        raise ShapeError(f"negative string length {length}")
    if not 0 <= wanted < 2**32:
        raise ShapeError(f"hash {wanted:#x} is not a 32 bit value")

    s = Solver()
    sym = [byte_var(f"c{i}") for i in range(length)]

    if charset is not None:
        for b in sym:
            s.add(char_constraint(b, charset))

    for idx, value in (fixed or {}).items():
        s.add(sym[check_position(length, idx)] == check_byte(value))

    s.add(sta_hash_expr(sym) == wanted)

    res = s.check()
    if res == unsat:
        return None
    if res != sat:
        raise RuntimeError(f"z3 could not decide: {res}")

    m = s.model()
    ans = bytes(m.eval(b, model_completion=True).as_long() for b in sym)
    assert sta_hash(ans) == wanted
    logger.debug(f"z3 found {ans!r}")
    return ans
