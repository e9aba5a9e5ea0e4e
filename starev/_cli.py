from __future__ import annotations

from contextlib import ExitStack
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path
from typing import Annotated
from typing import Never

import cappa
from cappa import Arg
from cappa import Destructured
from rich.rule import Rule
from rich.text import Text

from ._diagnostic import ShapeError
from ._diagnostic import SuppressExit
from ._diagnostic import register_exclusion
from ._sta_rev import sta_rev
from ._utils import load_words
from ._utils import parse_fixed
from ._utils import parse_int
from ._utils import parse_positions
from ._utils import sta_hash
from .config import Config
from .config import console_setup
from .config import print as print
from .config import with_rich_spinner
from .config import with_status
from .filters import WordMatcher
from .filters import get_charset
from .search import LineSink
from .search import Problem
from .search import SearchResult
from .search import search

register_exclusion(__file__)


def _arg_error(exc: ValueError) -> SuppressExit:
    return SuppressExit(2, f"error: {exc}")


def match_text(data: bytes, words: WordMatcher | None = None) -> Text:
    text = Text(data.decode("latin-1"), "starev.match")
    if words is not None and (word := words.find(data)) is not None:
        start = data.find(word)
        text.stylize("starev.word", start, start + len(word))
    return text


@cappa.command(name="starev")
@dataclass
class Cli:
    cmd: cappa.Subcommands[Solve | Hash | Check]
    config: Annotated[Destructured[Config], Arg(hidden=True)] = field(default_factory=Config)

    def call(self) -> Never:
        self.config.set_vars()
        console_setup()

        try:
            code = self.cmd.call()
        except SuppressExit as e:
            if e.message:
                print(Text(e.message, "starev.unsat"))
            exit(e.code)

        exit(code)


@dataclass
class Solve:
    """list every string of LENGTH bytes with the given hash"""

    target: str
    """target hash, decimal or 0x-prefixed hex"""

    length: int
    """string length in bytes"""

    printable: Annotated[str | None, Arg(long=True, short="-p")] = None
    """positions limited to 0x20..0x5f, e.g. '0-3,5' or 'all'"""

    alpha: Annotated[str | None, Arg(long=True, short="-a")] = None
    """positions limited to 0x40..0x5f"""

    fixed: Annotated[list[str], Arg(long=True, short="-f")] = field(default_factory=list)
    """pin a byte, 'IDX:BYTE' (BYTE is a number or a character)"""

    prefix: Annotated[str, Arg(long=True)] = ""
    suffix: Annotated[str, Arg(long=True, short="-s")] = ""
    """literal ending, e.g. a file extension"""

    charset: Annotated[str | None, Arg(long=True, short="-c")] = None
    """every byte must be in this charset"""

    first: Annotated[str | None, Arg(long=True)] = None
    """the first byte must be in this charset"""

    words: Annotated[Path | None, Arg(long=True, short="-w")] = None
    """keep only candidates containing a word from this file"""

    min_word: Annotated[int, Arg(long=True)] = 3
    jobs: Annotated[int, Arg(long=True, short="-j")] = 1
    limit: Annotated[int | None, Arg(long=True)] = None

    out: Annotated[Path | None, Arg(long=True, short="-o")] = None
    """write matches to this file, one per line"""

    show: Annotated[int, Arg(long=True)] = 100
    """print at most this many matches"""

    def problem(self) -> Problem:
        n = self.length
        fixed = parse_fixed(self.fixed)
        return Problem(
            length=n,
            target=parse_int(self.target),
            printable=tuple(parse_positions(self.printable, n)) if self.printable else (),
            alphabetic=tuple(parse_positions(self.alpha, n)) if self.alpha else (),
            fixed=fixed,
            prefix=self.prefix.encode(),
            suffix=self.suffix.encode(),
        )

    def call(self) -> int:
        try:
            problem = self.problem()
            problem.validate()
            charset = get_charset(self.charset) if self.charset else None
            first = get_charset(self.first) if self.first else None
            if self.limit is not None and self.limit < 1:
                raise ValueError(f"--limit must be positive, got {self.limit}")
            if self.jobs < 1:
                raise ValueError(f"--jobs must be positive, got {self.jobs}")

            words = None
            if self.words is not None:
                words = WordMatcher.of(load_words(self.words, self.min_word), self.min_word)
        except (ValueError, OSError) as e:
            raise _arg_error(e) from e

        accept = problem.make_filter(charset=charset, first=first, words=words)

        with ExitStack() as stack:
            sink = None
            if self.out is not None:
                try:
                    sink = stack.enter_context(LineSink(self.out))
                except OSError as e:
                    raise _arg_error(e) from e
            with with_rich_spinner(), with_status(f"{problem.target:#010x} / {problem.length}"):
                try:
                    result = search(problem, accept, sink=sink, jobs=self.jobs, limit=self.limit)
                except ShapeError as e:
                    raise _arg_error(e) from e

        self.report(result, words)
        if not result.satisfiable or not result.matches:
            return 1
        return 0

    def report(self, result: SearchResult, words: WordMatcher | None) -> None:
        if not result.satisfiable:
            print(Text("no solution: the constraints are unsatisfiable", "starev.unsat"))
            return

        print(Rule(title=Text(f"Matches ({len(result.matches)}):", "starev.title")))
        for m in result.matches[: self.show]:
            print(match_text(m, words))
        if len(result.matches) > self.show:
            print(Text(f"... {len(result.matches) - self.show} more", "starev.comment"))
        print(Rule())
        print(
            Text.assemble(
                ("found ", ""),
                (str(len(result.matches)), "starev.count"),
                (" matches in ", ""),
                (str(result.visited), "starev.count"),
                (f" candidates (dimension {result.dim}) in {result.elapsed:.2f}s", ""),
            )
        )
        if self.out is not None:
            print(Text(f"written to {self.out}", "starev.comment"))


@dataclass
class Hash:
    """print the sta_hash of each argument"""

    texts: list[str]

    def call(self) -> int:
        for s in self.texts:
            print(Text.assemble((f"{sta_hash(s):#010x}", "starev.hash"), "  ", s))
        return 0


@dataclass
class Check:
    """find a single string with z3, as a cross-check of `solve`"""

    target: str
    length: int
    charset: Annotated[str | None, Arg(long=True, short="-c")] = None
    fixed: Annotated[list[str], Arg(long=True, short="-f")] = field(default_factory=list)

    def call(self) -> int:
        try:
            wanted = parse_int(self.target)
            charset = get_charset(self.charset) if self.charset else None
            fixed = parse_fixed(self.fixed)
        except ValueError as e:
            raise _arg_error(e) from e

        with with_rich_spinner(), with_status("z3"):
            try:
                ans = sta_rev(self.length, wanted, charset, fixed)
            except ShapeError as e:
                raise _arg_error(e) from e

        if ans is None:
            print(Text("no solution", "starev.unsat"))
            return 1
        print(match_text(ans))
        return 0


def main():
    cli = cappa.parse(Cli)
    return cli.call()
