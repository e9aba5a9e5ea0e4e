from __future__ import annotations

import importlib.util
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import Iterable
from typing import Iterator
from typing import final

from ordered_set import OrderedSet

################################################################################


@final
class empty_t:
    pass


empty = empty_t()


################################################################################


@dataclass
class Cell[T]:
    _value: T | empty_t = empty

    @contextmanager
    def bind(self, val: T) -> Iterator[T]:
        old = self._value
        self._value = val
        try:
            yield val
        finally:
            self._value = old

    def get[D](self, default: D = None) -> T | D:
        if not isinstance(self._value, empty_t):
            return self._value
        return default

    def set(self, val: T | empty_t = empty):
        self._value = val

    @property
    def value(self) -> T:
        assert not isinstance(self._value, empty_t)
        return self._value

    @value.setter
    def value(self, val: T):
        self.set(val)

    def __bool__(self) -> bool:
        return bool(self.get(False))


################################################################################

MASK32 = 2**32 - 1


def rotl32(x: int, k: int) -> int:
    k %= 32
    return ((x << k) | (x >> (32 - k))) & MASK32


def sta_hash(data: bytes | str) -> int:
    """
    the rolling checksum: h = rotl32(h, 6) ^ byte, starting from 0
    """
    if isinstance(data, str):
        data = data.encode()
    h = 0
    for c in data:
        h = rotl32(h, 6) ^ c
    return h


################################################################################


def parse_int(s: str) -> int:
    """accepts decimal, 0x hex, 0b binary and 0o octal"""
    s = s.strip().replace("_", "")
    if not s:
        raise ValueError("expected an integer, got an empty string")
    try:
        return int(s, 0)
    except ValueError as exc:
        raise ValueError(f"invalid integer: {s!r}") from exc


def parse_positions(spec: str, n: int) -> list[int]:
    """
    parse "0-3,5,-1" style position lists; "all" selects every position.
    ranges are inclusive, negative numbers count from the end
    """

    def one(x: str) -> int:
        v = parse_int(x)
        if v < 0:
            v += n
        if not 0 <= v < n:
            raise ValueError(f"position {x} out of range for length {n}")
        return v

    spec = spec.strip()
    if spec == "all":
        return list(range(n))

    ans: OrderedSet[int] = OrderedSet(())
    for raw_part in spec.split(","):
        part = raw_part.strip()
        if not part:
            raise ValueError(f"empty entry in position list {spec!r}")
        lo, sep, hi = part[1:].partition("-")
        if sep:
            start, stop = one(part[0] + lo), one(hi)
            if stop < start:
                raise ValueError(f"empty range {part!r}")
            ans.update(range(start, stop + 1))
        else:
            ans.add(one(part))
    return list(ans)


def parse_fixed(entries: Iterable[str]) -> dict[int, int]:
    """parse "IDX:BYTE" entries; BYTE is an integer or a single character"""
    ans: dict[int, int] = {}
    for entry in entries:
        idx_s, sep, val_s = entry.partition(":")
        if not sep or not idx_s or not val_s:
            raise ValueError(f"invalid fixed byte {entry!r}; expected 'IDX:BYTE'")
        if len(val_s) == 1 and not val_s.isdigit():
            val = ord(val_s)
        else:
            val = parse_int(val_s)
        ans[parse_int(idx_s)] = val
    return ans


def load_words(path: Path, min_len: int = 1, upper: bool = True) -> OrderedSet[bytes]:
    """one word per line; blank lines and lines starting with '#' are skipped"""
    ans: OrderedSet[bytes] = OrderedSet(())
    with path.open("rb") as f:
        for line in f:
            word = line.strip()
            if not word or word.startswith(b"#"):
                continue
            if upper:
                word = word.upper()
            if len(word) >= min_len:
                ans.add(word)
    return ans


################################################################################


def load_module_from_file(file_path: Path, module_name: str) -> ModuleType:
    if not file_path.exists():
        raise ValueError(f"file does not exist: {file_path}")
    spec = importlib.util.spec_from_file_location(module_name, file_path)
    assert spec is not None
    module = importlib.util.module_from_spec(spec)
    assert spec.loader is not None

    # otherwise @dataclass dont work
    sys.modules[module_name] = module

    prev_path = sys.path.copy()
    try:
        sys.path.insert(0, str(file_path.parent))
        spec.loader.exec_module(module)
    finally:
        sys.path = prev_path
    return module
