from __future__ import annotations

from typing import Iterable
from typing import Iterator
from typing import Self

import rich.repr

from ._diagnostic import ShapeError


class BitVector:
    """
    fixed-length bit vector backed by a python int.

    bit i of the vector is bit i of the int, so index 0 is the least
    significant bit and `to_bytes` packs little-endian.
    """

    __slots__ = ("_len", "_bits")

    _len: int
    _bits: int

    def __init__(self, length: int, value: int = 0):
        if length < 0:
            raise ShapeError(f"negative length {length}")
        if value < 0 or value >> length:
            raise ShapeError(f"value {value:#x} does not fit in {length} bits")
        self._len = length
        self._bits = value

    @classmethod
    def zeros(cls, length: int) -> Self:
        return cls(length)

    @classmethod
    def from_bits(cls, bits: Iterable[bool | int]) -> Self:
        value = 0
        length = 0
        for i, b in enumerate(bits):
            if b:
                value |= 1 << i
            length = i + 1
        return cls(length, value)

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        return cls(8 * len(data), int.from_bytes(data, "little"))

    ############################################################################

    @property
    def value(self) -> int:
        return self._bits

    def assign(self, value: int) -> None:
        """overwrite every bit at once"""
        if value < 0 or value >> self._len:
            raise ShapeError(f"value {value:#x} does not fit in {self._len} bits")
        self._bits = value

    def copy(self) -> BitVector:
        return BitVector(self._len, self._bits)

    def copy_from(self, other: BitVector) -> None:
        self._check_len(other)
        self._bits = other._bits

    def __len__(self) -> int:
        return self._len

    def _index(self, idx: int) -> int:
        if idx < 0:
            idx += self._len
        if not 0 <= idx < self._len:
            raise IndexError(f"bit index out of range: {idx} (length {self._len})")
        return idx

    def __getitem__(self, idx: int) -> bool:
        return bool((self._bits >> self._index(idx)) & 1)

    def __setitem__(self, idx: int, val: bool | int) -> None:
        mask = 1 << self._index(idx)
        if val:
            self._bits |= mask
        else:
            self._bits &= ~mask

    def set(self, idx: int, val: bool | int = True) -> None:
        self[idx] = val

    def flip(self, idx: int) -> None:
        self._bits ^= 1 << self._index(idx)

    def __iter__(self) -> Iterator[bool]:
        bits = self._bits
        for i in range(self._len):
            yield bool((bits >> i) & 1)

    ############################################################################

    def _range_mask(self, start: int, stop: int) -> int:
        if not 0 <= start <= stop <= self._len:
            raise IndexError(f"bit range {start}..{stop} out of range (length {self._len})")
        return ((1 << (stop - start)) - 1) << start

    def store(self, start: int, stop: int, value: int) -> None:
        """write the low bits of value into bits start..stop (start is the lsb)"""
        mask = self._range_mask(start, stop)
        self._bits = (self._bits & ~mask) | ((value << start) & mask)

    def load(self, start: int, stop: int) -> int:
        mask = self._range_mask(start, stop)
        return (self._bits & mask) >> start

    def count_ones(self) -> int:
        return self._bits.bit_count()

    def any(self) -> bool:
        return self._bits != 0

    def first_one(self) -> int | None:
        if not self._bits:
            return None
        return (self._bits & -self._bits).bit_length() - 1

    ############################################################################

    def _check_len(self, other: BitVector) -> None:
        if other._len != self._len:
            raise ShapeError(f"bit vector lengths differ: {self._len} vs {other._len}")

    def __ixor__(self, other: BitVector) -> Self:
        self._check_len(other)
        self._bits ^= other._bits
        return self

    def __xor__(self, other: BitVector) -> BitVector:
        self._check_len(other)
        return BitVector(self._len, self._bits ^ other._bits)

    def __iand__(self, other: BitVector) -> Self:
        self._check_len(other)
        self._bits &= other._bits
        return self

    def __and__(self, other: BitVector) -> BitVector:
        self._check_len(other)
        return BitVector(self._len, self._bits & other._bits)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BitVector):
            return NotImplemented
        return self._len == other._len and self._bits == other._bits

    __hash__ = None  # pyright: ignore[reportAssignmentType]

    ############################################################################

    def to_bytes(self) -> bytes:
        if self._len % 8 != 0:
            raise ShapeError(f"cannot pack {self._len} bits into bytes")
        return self._bits.to_bytes(self._len // 8, "little")

    def __str__(self) -> str:
        return "".join("1" if b else "0" for b in self)

    def __rich_repr__(self) -> rich.repr.Result:
        yield str(self)

    def __repr__(self) -> str:
        return f"BitVector({self._len}, {str(self)!r})"

    def __getstate__(self) -> tuple[int, int]:
        return (self._len, self._bits)

    def __setstate__(self, state: tuple[int, int]) -> None:
        self._len, self._bits = state
