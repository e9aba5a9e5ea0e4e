import pytest

from starev import BitVector
from starev import ShapeError
from starev import Visit
from starev import hash_equals
from starev import solve_rows
from starev import sta_hash


def _basis(data: bytes):
    basis = solve_rows(hash_equals(len(data), sta_hash(data)))
    assert basis is not None
    return basis


def test_completeness():
    for data in [b"AB", b"ABC", b"TEST"]:
        basis = _basis(data)
        assert basis.dim <= 10
        seen: list[int] = []
        count = basis.enumerate(lambda bits: seen.append(bits.value))
        assert count == len(seen) == 2**basis.dim
        assert len(set(seen)) == len(seen)


def test_every_candidate_hashes_to_target():
    basis = _basis(b"TEST")
    for data in basis.iter_bytes():
        assert sta_hash(data) == sta_hash(b"TEST")


def test_working_vector_is_reused():
    basis = _basis(b"ABC")
    ids: set[int] = set()
    basis.enumerate(lambda bits: ids.add(id(bits)))
    assert len(ids) == 1


def test_order_matches_direct_reconstruction():
    basis = _basis(b"TEST")
    seen: list[int] = []
    basis.enumerate(lambda bits: seen.append(bits.value))
    assert seen == [basis.solution_value(x) for x in range(basis.count)]
    assert basis.solution(5) == BitVector(32, seen[5])


def test_stop_signal():
    basis = _basis(b"TEST")
    seen: list[bytes] = []

    def visit(bits: BitVector) -> Visit | None:
        seen.append(bits.to_bytes())
        if len(seen) == 5:
            return Visit.STOP
        return Visit.CONTINUE

    assert basis.enumerate(visit) == 5
    assert seen == list(basis.iter_bytes(0, 5))


def test_ranges_and_shards():
    basis = _basis(b"TEST")
    everything = list(basis.iter_bytes())

    shards = basis.shards(5)
    assert shards[0][0] == 0
    assert shards[-1][1] == basis.count
    for (_, hi), (lo, _) in zip(shards, shards[1:]):
        assert hi == lo

    pieces: list[bytes] = []
    for lo, hi in shards:
        pieces += basis.iter_bytes(lo, hi)
    assert pieces == everything

    # more shards than candidates
    assert len(_basis(b"A").shards(8)) == 1

    with pytest.raises(ValueError):
        basis.shards(0)


def test_range_errors():
    basis = _basis(b"AB")
    with pytest.raises(ShapeError):
        basis.enumerate(lambda bits: None, 0, basis.count + 1)
    with pytest.raises(ShapeError):
        list(basis.iter_bytes(3, 2))
    assert basis.enumerate(lambda bits: None, 2, 2) == 0


def test_concrete_scenario():
    target = sta_hash(b"TEST")
    assert target == 0x01544494
    basis = solve_rows(hash_equals(4, target))
    assert basis is not None

    printable: list[bytes] = []

    def visit(bits: BitVector) -> None:
        data = bits.to_bytes()
        if all(0x20 <= c < 0x7F for c in data):
            printable.append(data)

    basis.enumerate(visit)
    assert b"TEST" in printable
