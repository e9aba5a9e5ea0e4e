"""
exact acceptance checks applied to candidates while enumerating.

the linear layer can only express xor structure, so anything finer
(character classes, dictionary words) is checked here on the packed bytes.
"""

from __future__ import annotations

import string
from dataclasses import dataclass
from dataclasses import field
from typing import Iterable

import rich.repr

from ._diagnostic import check_byte


@dataclass(frozen=True)
class Charset:
    name: str
    values: frozenset[int]

    @staticmethod
    def of(name: str, chars: Iterable[int] | str | bytes) -> Charset:
        if isinstance(chars, str):
            chars = chars.encode()
        return Charset(name, frozenset(check_byte(c) for c in chars))

    @staticmethod
    def between(name: str, lo: int, hi: int) -> Charset:
        """bytes in lo..hi-1"""
        return Charset(name, frozenset(range(max(lo, 0), min(hi, 256))))

    def __contains__(self, c: object) -> bool:
        return c in self.values

    def accepts(self, data: bytes) -> bool:
        values = self.values
        return all(c in values for c in data)

    def __or__(self, other: Charset) -> Charset:
        return Charset(f"{self.name}|{other.name}", self.values | other.values)

    def __rich_repr__(self) -> rich.repr.Result:
        yield self.name
        yield "size", len(self.values)


ANY = Charset.between("any", 0, 256)
PRINTABLE_UPPER = Charset.between("printable_upper", 0x20, 0x60)
UPPER_ALPHA = Charset.between("upper_alpha", 0x40, 0x60)
ALPHA = Charset.of("alpha", string.ascii_letters)
ALNUM = Charset.of("alnum", string.ascii_letters + string.digits)
FILENAME = Charset.of("filename", string.ascii_letters + string.digits + "_.")
UPPER_FILENAME = Charset.of("upper_filename", string.ascii_uppercase + string.digits + "_.")

CHARSETS: dict[str, Charset] = {
    cs.name: cs
    for cs in [ANY, PRINTABLE_UPPER, UPPER_ALPHA, ALPHA, ALNUM, FILENAME, UPPER_FILENAME]
}


def get_charset(name: str) -> Charset:
    try:
        return CHARSETS[name]
    except KeyError:
        raise ValueError(
            f"unknown charset {name!r}; expected one of {', '.join(CHARSETS)}"
        ) from None


def in_range(data: bytes, positions: Iterable[int], lo: int, hi: int) -> bool:
    """every byte at `positions` lies in lo..hi-1"""
    return all(lo <= data[i] < hi for i in positions)


@dataclass(frozen=True)
class WordMatcher:
    """finds dictionary words occurring anywhere inside a candidate"""

    words: frozenset[bytes]
    min_len: int = 1
    # distinct word lengths, longest first
    lengths: tuple[int, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        lengths = sorted({len(w) for w in self.words if len(w) >= self.min_len}, reverse=True)
        object.__setattr__(self, "lengths", tuple(lengths))

    @staticmethod
    def of(words: Iterable[bytes], min_len: int = 1) -> WordMatcher:
        return WordMatcher(frozenset(w for w in words if len(w) >= min_len), min_len)

    def find(self, data: bytes) -> bytes | None:
        words = self.words
        for length in self.lengths:
            for start in range(len(data) - length + 1):
                if (piece := data[start : start + length]) in words:
                    return piece
        return None

    def __call__(self, data: bytes) -> bool:
        return self.find(data) is not None

    def __rich_repr__(self) -> rich.repr.Result:
        yield "words", len(self.words)
        yield "min_len", self.min_len


@dataclass(frozen=True)
class CandidateFilter:
    """
    exact check of a packed candidate.

    `ranges` are (lo, hi, positions) triples that must hold exactly,
    `charset` applies to every byte, `first` to byte 0 only.
    """

    ranges: tuple[tuple[int, int, tuple[int, ...]], ...] = ()
    charset: Charset | None = None
    first: Charset | None = None
    words: WordMatcher | None = None

    def __call__(self, data: bytes) -> bool:
        for lo, hi, positions in self.ranges:
            if not in_range(data, positions, lo, hi):
                return False
        if self.first is not None and data and data[0] not in self.first:
            return False
        if self.charset is not None and not self.charset.accepts(data):
            return False
        if self.words is not None and not self.words(data):
            return False
        return True
