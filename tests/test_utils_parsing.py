import pytest

from starev import load_words
from starev._utils import parse_fixed
from starev._utils import parse_int
from starev._utils import parse_positions


def test_parse_int():
    assert parse_int("0x52bc6ce4") == 0x52BC6CE4
    assert parse_int("42") == 42
    assert parse_int("0b101") == 5
    with pytest.raises(ValueError):
        parse_int("")
    with pytest.raises(ValueError):
        parse_int("zz")


def test_parse_positions():
    assert parse_positions("all", 3) == [0, 1, 2]
    assert parse_positions("0-2,5", 8) == [0, 1, 2, 5]
    assert parse_positions("-1", 8) == [7]
    assert parse_positions("-3--1", 8) == [5, 6, 7]
    assert parse_positions("10-11", 12) == [10, 11]
    assert parse_positions("1,1,0", 4) == [1, 0]
    with pytest.raises(ValueError):
        parse_positions("8", 8)
    with pytest.raises(ValueError):
        parse_positions("3-1", 8)
    with pytest.raises(ValueError):
        parse_positions("1,,2", 8)


def test_parse_fixed():
    assert parse_fixed(["0:A", "1:0x2e", "2:7"]) == {0: 0x41, 1: 0x2E, 2: 7}
    with pytest.raises(ValueError):
        parse_fixed(["0"])
    with pytest.raises(ValueError):
        parse_fixed(["0:"])


def test_load_words(tmp_path):
    path = tmp_path / "words.txt"
    path.write_text("help\n# comment\n\nmap\nHelp\nab\n")
    assert list(load_words(path, min_len=3)) == [b"HELP", b"MAP"]
    assert list(load_words(path, upper=False)) == [b"help", b"map", b"Help", b"ab"]
