import pytest

from starev import BitVector
from starev import Problem
from starev import ShapeError
from starev import filters
from starev import solve
from starev import sta_hash
from starev import sta_rev


def test_sta_rev_finds_member_of_coset():
    for i in range(5):
        target = sta_hash(f"FILE{i}.BIN")
        ans = sta_rev(6, target, charset=filters.UPPER_ALPHA)
        assert ans is not None
        assert sta_hash(ans) == target
        assert filters.UPPER_ALPHA.accepts(ans)

        basis = solve(Problem(length=6, target=target))
        assert basis is not None
        assert basis.contains(BitVector.from_bytes(ans))


def test_sta_rev_fixed():
    target = sta_hash(b"TEST")
    ans = sta_rev(4, target, fixed={0: ord("T"), 3: ord("T")})
    assert ans is not None
    assert ans[0] == ans[3] == ord("T")
    assert sta_hash(ans) == target


def test_sta_rev_unsat():
    assert sta_rev(2, 0xFFFFFFFF) is None
    assert solve(Problem(length=2, target=0xFFFFFFFF)) is None


def test_sta_rev_contract():
    with pytest.raises(ShapeError):
        sta_rev(-1, 0)
    with pytest.raises(ShapeError):
        sta_rev(4, 2**32)
    assert sta_rev(0, 0) == b""
