import pickle

import pytest

from starev import CandidateFilter
from starev import Charset
from starev import WordMatcher
from starev import filters
from starev import get_charset


def test_presets():
    assert filters.PRINTABLE_UPPER.accepts(b" ?@_")
    assert not filters.PRINTABLE_UPPER.accepts(b"a")
    assert not filters.PRINTABLE_UPPER.accepts(b"\x7f")
    assert filters.UPPER_ALPHA.accepts(b"@AZ_")
    assert not filters.UPPER_ALPHA.accepts(b"0")
    assert filters.FILENAME.accepts(b"help_me.txt")
    assert not filters.FILENAME.accepts(b"help me")
    assert ord("Z") in filters.ALPHA
    assert 0 in filters.ANY and 255 in filters.ANY


def test_charset_union_and_lookup():
    digits = Charset.of("digits", "0123456789")
    both = digits | filters.ALPHA
    assert both.accepts(b"abc123")
    assert get_charset("filename") is filters.FILENAME
    with pytest.raises(ValueError, match="unknown charset"):
        get_charset("klingon")


def test_word_matcher():
    words = WordMatcher.of([b"HELP", b"HE", b"MAP", b"X"], min_len=2)
    assert words.find(b"XXHELPXX") == b"HELP"
    assert words.find(b"QHEQ") == b"HE"
    assert words.find(b"MA.P") is None
    # too short to count
    assert not words(b"QXQ")
    assert words(b"AMAPZ")


def test_candidate_filter():
    accept = CandidateFilter(
        ranges=((0x40, 0x60, (0, 1)),),
        charset=filters.UPPER_FILENAME,
        first=filters.ALPHA,
    )
    assert accept(b"AB1.")
    assert not accept(b"A1B.")  # position 1 outside 0x40..0x5f
    assert not accept(b"AB1?")  # not a filename character
    assert CandidateFilter()(b"\x00\xff")

    wordy = CandidateFilter(words=WordMatcher.of([b"CAT"]))
    assert wordy(b"XCATX")
    assert not wordy(b"XDOGX")


def test_candidate_filter_pickles():
    accept = CandidateFilter(
        ranges=((0x20, 0x60, (0, 1, 2)),),
        charset=filters.FILENAME,
        words=WordMatcher.of([b"AB", b"ABC"], 2),
    )
    again = pickle.loads(pickle.dumps(accept))
    assert again == accept
    assert again(b"ABC") and not again(b"abc")
