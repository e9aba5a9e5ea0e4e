"""
generators for GF(2) linear equations over the bits of an unknown n-byte string.

every row has 8*n+1 bits: bit 8*i+b is bit b of byte i, the last bit is the
right hand side. a row holds when the xor of its selected unknowns equals
that last bit.
"""

from __future__ import annotations

from typing import Iterable

from ._bitvec import BitVector
from ._diagnostic import ShapeError
from ._diagnostic import check_byte
from ._diagnostic import check_position


def _new_row(n: int) -> BitVector:
    if n < 0:
        raise ShapeError(f"negative string length {n}")
    return BitVector.zeros(8 * n + 1)


def hash_equals(n: int, hash: int) -> list[BitVector]:
    """
    system of equations for the sta_hash of the string being `hash`

    h = rotl(h, 6) ^ c is linear, and after n rounds bit j of byte i
    sits at hash bit (6 * (n - i - 1) + j) % 32
    """
    if not 0 <= hash < 2**32:
        raise ShapeError(f"hash {hash:#x} is not a 32 bit value")

    mat = [_new_row(n) for _ in range(32)]
    for k, row in enumerate(mat):
        row[-1] = (hash >> k) & 1

    for i in range(n):
        for j in range(8):
            hash_pos = (6 * (n - i - 1) + j) % 32
            mat[hash_pos].flip(8 * i + j)

    return mat


def range_constraint(n: int, positions: Iterable[int]) -> list[BitVector]:
    """
    system of equations for the given characters being within 0x20..0x5f:
    bit 7 is clear and bits 5 and 6 are exclusive
    """
    positions = [check_position(n, i) for i in positions]

    top_bit_zero: list[BitVector] = []
    bits_5_and_6_exclusive: list[BitVector] = []
    for i in positions:
        row = _new_row(n)
        row.set(8 * i + 7)
        top_bit_zero.append(row)

        row = _new_row(n)
        row.store(8 * i + 5, 8 * i + 7, 0b11)
        row.set(8 * n)
        bits_5_and_6_exclusive.append(row)

    return top_bit_zero + bits_5_and_6_exclusive


def alphabetic_constraint(n: int, positions: Iterable[int]) -> list[BitVector]:
    """system of equations for the given characters being within 0x40..0x5f"""
    positions = list(positions)
    eqs = range_constraint(n, positions)

    for i in positions:
        row = _new_row(n)
        row.set(8 * i + 6)
        row.set(8 * n)
        eqs.append(row)

    return eqs


def fixed_byte(n: int, index: int, value: int) -> list[BitVector]:
    """linear equations for a specific byte being an exact value"""
    check_position(n, index)
    check_byte(value)

    eqs: list[BitVector] = []
    for b in range(8):
        row = _new_row(n)
        row.set(8 * index + b)
        row[-1] = (value >> b) & 1
        eqs.append(row)
    return eqs


def fixed_bytes(n: int, index: int, data: bytes) -> list[BitVector]:
    """fixed_byte for every byte of `data`, the first one placed at `index`"""
    if data and not 0 <= index <= n - len(data):
        raise ShapeError(f"{len(data)} bytes at position {index} do not fit in length {n}")
    eqs: list[BitVector] = []
    for offset, value in enumerate(data):
        eqs += fixed_byte(n, index + offset, value)
    return eqs


def suffix(n: int, data: bytes) -> list[BitVector]:
    """the string ends with `data`, e.g. a file extension"""
    if len(data) > n:
        raise ShapeError(f"suffix {data!r} is longer than length {n}")
    return fixed_bytes(n, n - len(data), data)


def combine(*row_sets: Iterable[BitVector]) -> list[BitVector]:
    """concatenate row sets into a fresh matrix; the rows themselves are copied"""
    return [row.copy() for rows in row_sets for row in rows]
