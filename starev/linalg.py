from __future__ import annotations

import logging
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import Callable
from typing import Iterator

import rich.repr

from ._bitvec import BitVector
from ._diagnostic import ShapeError
from ._diagnostic import check_width

logger = logging.getLogger(__name__)


def reduce_in_place(mat: list[BitVector]) -> None:
    """
    Compute the reduced row echelon form of an augmented binary matrix in place.

    Columns are eliminated in increasing index order; the last column is the
    right hand side and is never used as a pivot.
    """
    if not mat:
        return
    n = check_width(mat)
    tmp = BitVector.zeros(n)
    i = 0
    j = 0

    while i < n - 1 and j < len(mat):
        pivot = next((k for k in range(j, len(mat)) if mat[k][i]), None)
        if pivot is None:
            i += 1
            continue
        mat[j], mat[pivot] = mat[pivot], mat[j]
        tmp.copy_from(mat[j])

        for k in range(len(mat)):
            if k != j and mat[k][i]:
                mat[k] ^= tmp

        j += 1


def rank(mat: list[BitVector]) -> int:
    """rank of the coefficient part; does not modify `mat`"""
    if not mat:
        return 0
    work = [row.copy() for row in mat]
    reduce_in_place(work)
    coeffs = (1 << (len(work[0]) - 1)) - 1
    return sum(1 for row in work if row.value & coeffs)


class Visit(Enum):
    CONTINUE = "continue"
    STOP = "stop"


def _ctz(x: int) -> int:
    return (x & -x).bit_length() - 1


@dataclass
class Basis:
    """
    Basis of a solution to a system of linear equations in Z2.

    `vectors[p]` describes unknown bit p: its first `dim` bits select the
    free variables xored into it, the last bit is its constant.
    """

    dim: int
    vectors: list[BitVector]
    free_vars: list[int]

    # solution for assignment 0
    _offset: int = field(init=False, repr=False)
    # _steps[t] flips the solution from x - 1 to x when x has t trailing zeros
    _steps: list[int] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        check_width(self.vectors, self.dim + 1)
        gens = [0] * self.dim
        offset = 0
        for p, vec in enumerate(self.vectors):
            bits = vec.value
            if (bits >> self.dim) & 1:
                offset |= 1 << p
            while bits and (low := _ctz(bits)) < self.dim:
                gens[low] |= 1 << p
                bits &= bits - 1
        self._offset = offset

        steps: list[int] = []
        acc = 0
        for g in gens:
            acc ^= g
            steps.append(acc)
        self._steps = steps

    def __rich_repr__(self) -> rich.repr.Result:
        yield "dim", self.dim
        yield "n_bits", self.n_bits
        yield "free_vars", self.free_vars

    @property
    def n_bits(self) -> int:
        return len(self.vectors)

    @property
    def n_bytes(self) -> int:
        return self.n_bits // 8

    @property
    def count(self) -> int:
        return 1 << self.dim

    ############################################################################

    @staticmethod
    def from_rref(rref: list[BitVector]) -> Basis | None:
        """
        Create a basis from a reduced-row-echelon-form matrix in Z2 representing
        a solved system of equations. Returns None if the system has no solution.
        """
        width = check_width(rref)
        n_vars = width - 1

        # Find the free variables
        free_vars: list[int] = []
        pivot_rows: list[int | None] = []
        i = 0
        for j in range(n_vars):
            if i < len(rref) and rref[i][j]:
                pivot_rows.append(i)
                i += 1
            else:
                free_vars.append(j)
                pivot_rows.append(None)

        # Check remaining rows for any unsolvable constraints
        if any(row[-1] for row in rref[i:]):
            logger.debug("contradiction after %d pivot rows", i)
            return None

        # Go through the columns again and create the basis rows
        dim = len(free_vars)
        vectors: list[BitVector] = []
        for j, row_idx in enumerate(pivot_rows):
            if row_idx is not None:
                row = rref[row_idx]
                vec = BitVector.from_bits([row[v] for v in free_vars] + [row[-1]])
            else:
                vec = BitVector.zeros(dim + 1)
                vec.set(free_vars.index(j))
            vectors.append(vec)

        return Basis(dim=dim, vectors=vectors, free_vars=free_vars)

    ############################################################################

    def _check_range(self, start: int, stop: int | None) -> int:
        if stop is None:
            stop = self.count
        if not 0 <= start <= stop <= self.count:
            raise ShapeError(f"assignment range {start}..{stop} outside 0..{self.count}")
        return stop

    def solution_value(self, x: int) -> int:
        """solution for the free variable assignment x, as an int"""
        ans = 0
        for p, vec in enumerate(self.vectors):
            mask = vec.value
            bit = ((mask & x).bit_count() ^ (mask >> self.dim)) & 1
            ans |= bit << p
        return ans

    def solution(self, x: int) -> BitVector:
        self._check_range(x, x + 1)
        return BitVector(self.n_bits, self.solution_value(x))

    def contains(self, bits: BitVector) -> bool:
        if len(bits) != self.n_bits:
            raise ShapeError(f"expected {self.n_bits} bits, got {len(bits)}")
        x = 0
        for k, v in enumerate(self.free_vars):
            if bits[v]:
                x |= 1 << k
        return self.solution_value(x) == bits.value

    def _values(self, start: int, stop: int) -> Iterator[int]:
        if start >= stop:
            return
        value = self.solution_value(start)
        yield value
        steps = self._steps
        for x in range(start + 1, stop):
            value ^= steps[_ctz(x)]
            yield value

    def enumerate(
        self,
        visit: Callable[[BitVector], Visit | None],
        start: int = 0,
        stop: int | None = None,
    ) -> int:
        """
        Enumerates all solutions in order of the free variable assignment,
        passing them to `visit`. The same BitVector is reused for every call.
        Returns the number of candidates visited.
        """
        stop = self._check_range(start, stop)
        current = BitVector.zeros(self.n_bits)
        count = 0
        for value in self._values(start, stop):
            current.assign(value)
            count += 1
            if visit(current) is Visit.STOP:
                break
        return count

    def iter_bytes(self, start: int = 0, stop: int | None = None) -> Iterator[bytes]:
        stop = self._check_range(start, stop)
        if self.n_bits % 8 != 0:
            raise ShapeError(f"cannot pack {self.n_bits} bits into bytes")
        n_bytes = self.n_bytes
        for value in self._values(start, stop):
            yield value.to_bytes(n_bytes, "little")

    def shards(self, count: int) -> list[tuple[int, int]]:
        """split the assignment range into at most `count` contiguous pieces"""
        if count < 1:
            raise ValueError(f"shard count must be positive, got {count}")
        total = self.count
        count = min(count, total)
        bounds = [total * k // count for k in range(count + 1)]
        return [(lo, hi) for lo, hi in zip(bounds, bounds[1:]) if lo < hi]


def extract(rref: list[BitVector]) -> Basis | None:
    return Basis.from_rref(rref)


def solve_rows(mat: list[BitVector]) -> Basis | None:
    """reduce `mat` in place and extract its basis"""
    reduce_in_place(mat)
    return Basis.from_rref(mat)
