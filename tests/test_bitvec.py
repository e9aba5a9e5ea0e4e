import pickle

import pytest

from starev import BitVector
from starev import ShapeError


def test_bytes_little_endian():
    v = BitVector.from_bytes(b"TEST")
    assert len(v) == 32
    # 'T' == 0b01010100
    assert [v[i] for i in range(8)] == [False, False, True, False, True, False, True, False]
    assert v.to_bytes() == b"TEST"


def test_get_set_flip():
    v = BitVector.zeros(10)
    v[3] = True
    v.set(9)
    v.flip(0)
    assert str(v) == "1001000001"
    assert v[-1]
    v[-1] = False
    assert not v[9]
    assert v.count_ones() == 2
    assert v.first_one() == 0

    with pytest.raises(IndexError):
        v[10]
    with pytest.raises(IndexError):
        v[-11] = True


def test_store_load():
    v = BitVector.zeros(16)
    v.store(5, 7, 0b11)
    assert v.value == 0b1100000
    assert v.load(5, 7) == 0b11

    # only the low bits of the value are written
    v.store(0, 2, 0b111)
    assert v.load(0, 3) == 0b011
    assert v.load(5, 7) == 0b11


def test_xor_and():
    a = BitVector.from_bits([1, 1, 0, 0])
    b = BitVector.from_bits([1, 0, 1, 0])
    assert str(a ^ b) == "0110"
    assert str(a & b) == "1000"

    a ^= b
    assert str(a) == "0110"
    a &= b
    assert str(a) == "0010"


def test_copy_is_independent():
    a = BitVector.from_bits([1, 0, 1])
    b = a.copy()
    b.flip(1)
    assert str(a) == "101"
    assert str(b) == "111"

    a.copy_from(b)
    assert a == b


def test_shape_errors():
    with pytest.raises(ShapeError):
        BitVector.zeros(3) ^ BitVector.zeros(4)
    with pytest.raises(ShapeError):
        BitVector.zeros(9).to_bytes()
    with pytest.raises(ShapeError):
        BitVector(3, 0b1000)
    with pytest.raises(ShapeError):
        BitVector.zeros(3).assign(8)


def test_first_one_empty():
    assert BitVector.zeros(5).first_one() is None
    assert not BitVector.zeros(5).any()


def test_unhashable_and_picklable():
    v = BitVector.from_bytes(b"AB")
    with pytest.raises(TypeError):
        hash(v)
    assert pickle.loads(pickle.dumps(v)) == v
