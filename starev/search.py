from __future__ import annotations

import logging
import multiprocessing
import time
from concurrent.futures import ProcessPoolExecutor
from concurrent.futures import as_completed
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path
from types import TracebackType
from typing import BinaryIO
from typing import Callable
from typing import Self

import rich.repr

from . import constraints as c
from ._bitvec import BitVector
from ._diagnostic import ShapeError
from ._diagnostic import check_byte
from ._diagnostic import check_position
from .filters import CandidateFilter
from .filters import Charset
from .filters import WordMatcher
from .linalg import Basis
from .linalg import Visit
from .linalg import reduce_in_place

logger = logging.getLogger(__name__)

type Accept = Callable[[bytes], bool]
type Sink = Callable[[bytes], object]


@dataclass
class Problem:
    """
    strings of `length` bytes hashing to `target`, with optional shape rules.

    `printable` positions are limited to 0x20..0x5f, `alphabetic` ones to
    0x40..0x5f; `fixed` pins single bytes, `prefix`/`suffix` pin the ends.
    """

    length: int
    target: int
    printable: tuple[int, ...] = ()
    alphabetic: tuple[int, ...] = ()
    fixed: dict[int, int] = field(default_factory=dict)
    prefix: bytes = b""
    suffix: bytes = b""

    def __rich_repr__(self) -> rich.repr.Result:
        yield "length", self.length
        yield "target", f"{self.target:#010x}"
        yield "printable", self.printable, ()
        yield "alphabetic", self.alphabetic, ()
        yield "fixed", self.fixed, {}
        yield "prefix", self.prefix, b""
        yield "suffix", self.suffix, b""

    def validate(self) -> None:
        n = self.length
        if n < 0:
            raise ShapeError(f"negative string length {n}")
        if not 0 <= self.target < 2**32:
            raise ShapeError(f"hash {self.target:#x} is not a 32 bit value")
        for i in (*self.printable, *self.alphabetic, *self.fixed):
            check_position(n, i)
        for v in self.fixed.values():
            check_byte(v)
        if len(self.prefix) > n or len(self.suffix) > n:
            raise ShapeError(f"prefix/suffix do not fit in length {n}")

    def rows(self) -> list[BitVector]:
        n = self.length
        return c.combine(
            c.hash_equals(n, self.target),
            c.range_constraint(n, self.printable),
            c.alphabetic_constraint(n, self.alphabetic),
            *(c.fixed_byte(n, i, v) for i, v in sorted(self.fixed.items())),
            c.fixed_bytes(n, 0, self.prefix),
            c.suffix(n, self.suffix),
        )

    def make_filter(
        self,
        charset: Charset | None = None,
        first: Charset | None = None,
        words: WordMatcher | None = None,
    ) -> CandidateFilter:
        ranges = []
        if self.printable:
            ranges.append((0x20, 0x60, tuple(self.printable)))
        if self.alphabetic:
            ranges.append((0x40, 0x60, tuple(self.alphabetic)))
        return CandidateFilter(tuple(ranges), charset=charset, first=first, words=words)


def solve(problem: Problem) -> Basis | None:
    """build, reduce and extract; None when the constraints contradict"""
    problem.validate()
    mat = problem.rows()
    logger.debug(f"{len(mat)} equations over {8 * problem.length} unknown bits")
    reduce_in_place(mat)
    basis = Basis.from_rref(mat)
    if basis is None:
        logger.info("constraints are unsatisfiable")
        return None
    logger.info(
        f"rank {8 * problem.length - basis.dim}, dimension {basis.dim} ({basis.count} candidates)"
    )
    return basis


################################################################################


class LineSink:
    """writes each match as raw bytes followed by a newline"""

    def __init__(self, path: Path):
        self.path = path
        self._stream: BinaryIO | None = None

    def __enter__(self) -> Self:
        self._stream = self.path.open("wb")
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        assert self._stream is not None
        self._stream.close()
        self._stream = None

    def __call__(self, data: bytes) -> None:
        assert self._stream is not None, "LineSink used outside of its with block"
        self._stream.write(data + b"\n")


@dataclass
class SearchResult:
    problem: Problem
    satisfiable: bool
    dim: int = 0
    visited: int = 0
    matches: list[bytes] = field(default_factory=list)
    elapsed: float = 0.0

    def __rich_repr__(self) -> rich.repr.Result:
        yield "satisfiable", self.satisfiable
        yield "dim", self.dim
        yield "visited", self.visited
        yield "matches", len(self.matches)
        yield "elapsed", round(self.elapsed, 3)


def _search_range(
    basis: Basis,
    accept: Accept,
    start: int,
    stop: int,
    limit: int | None,
    sink: Sink | None = None,
) -> tuple[int, list[bytes], list[int]]:
    """
    returns the number of candidates visited, the matches, and for each
    match the number of candidates visited up to and including it
    """
    matches: list[bytes] = []
    hits: list[int] = []
    visited = 0

    def visit(bits: BitVector) -> Visit | None:
        nonlocal visited
        visited += 1
        data = bits.to_bytes()
        if not accept(data):
            return None
        matches.append(data)
        hits.append(visited)
        if sink is not None:
            sink(data)
        if limit is not None and len(matches) >= limit:
            return Visit.STOP
        return None

    basis.enumerate(visit, start, stop)
    return visited, matches, hits


def search(
    problem: Problem,
    accept: Accept | None = None,
    sink: Sink | None = None,
    jobs: int = 1,
    limit: int | None = None,
) -> SearchResult:
    """
    enumerate every solution of `problem`, keeping those `accept` allows.

    with jobs > 1 the assignment range is split into shards searched in
    worker processes; matches still reach `sink` from this process only,
    in enumeration order.
    """
    if limit is not None and limit < 1:
        raise ValueError(f"limit must be positive, got {limit}")
    t = time.perf_counter()

    basis = solve(problem)
    if basis is None:
        return SearchResult(problem, satisfiable=False, elapsed=time.perf_counter() - t)

    if accept is None:
        accept = problem.make_filter()

    if jobs <= 1 or basis.dim == 0:
        visited, matches, _ = _search_range(basis, accept, 0, basis.count, limit, sink)
    else:
        shards = basis.shards(jobs * 4)
        logger.debug(f"searching {len(shards)} shards with {jobs} workers")
        parts: dict[int, tuple[int, list[bytes], list[int]]] = {}
        # no fork: the caller may be running threads (the rich status spinner)
        ctx = multiprocessing.get_context("spawn")
        with ProcessPoolExecutor(max_workers=jobs, mp_context=ctx) as pool:
            futs = {
                pool.submit(_search_range, basis, accept, lo, hi, limit): idx
                for idx, (lo, hi) in enumerate(shards)
            }
            for fut in as_completed(futs):
                idx = futs[fut]
                parts[idx] = fut.result()
                logger.debug(f"shard {idx} done: {len(parts[idx][1])} matches")

        # only count candidates a serial run would have visited
        visited = 0
        matches = []
        for idx in range(len(shards)):
            part_visited, part_matches, part_hits = parts[idx]
            if limit is not None and len(matches) + len(part_matches) >= limit:
                take = limit - len(matches)
                visited += part_hits[take - 1]
                matches += part_matches[:take]
                break
            visited += part_visited
            matches += part_matches

        if sink is not None:
            for m in matches:
                sink(m)

    elapsed = time.perf_counter() - t
    logger.info(f"found {len(matches)} matches in {visited} candidates ({elapsed:.2f}s)")
    return SearchResult(
        problem,
        satisfiable=True,
        dim=basis.dim,
        visited=visited,
        matches=matches,
        elapsed=elapsed,
    )

