from typing import Optional

import pytest

from finite_map.domains import BOOL, EMPTY, NONZERO_U64, U8, IterAll, iter_all, product


def test_yields_every_inhabitant_once():
    values = list(iter_all(product(U8, BOOL)))
    assert len(values) == 512
    assert len(set(values)) == 512
    assert [product(U8, BOOL).index(v) for v in values] == list(range(512))


def test_exact_size():
    iterator = iter_all(U8)
    assert len(iterator) == 256
    next(iterator)
    iterator.next_back()
    assert len(iterator) == 254


def test_double_ended():
    iterator = iter_all(U8)
    assert next(iterator) == 0
    assert iterator.next_back() == 255
    assert next(iterator) == 1
    assert iterator.next_back() == 254


def test_reversed():
    assert list(reversed(iter_all(bool))) == [True, False]
    backwards = reversed(iter_all(U8))
    assert next(backwards) == 255
    assert backwards.next_back() == 0


def test_reversed_continues_from_remaining_range():
    iterator = iter_all(U8)
    next(iterator)
    rest = list(reversed(iterator))
    assert rest[0] == 255
    assert rest[-1] == 1
    assert len(rest) == 255


def test_restartable():
    assert list(iter_all(Optional[bool])) == list(iter_all(Optional[bool]))


def test_empty_domain():
    iterator = iter_all(EMPTY)
    assert len(iterator) == 0
    with pytest.raises(StopIteration):
        next(iterator)
    with pytest.raises(StopIteration):
        iterator.next_back()


def test_exhausted_iterator_stays_exhausted():
    iterator = IterAll(BOOL)
    assert list(iterator) == [False, True]
    assert list(iterator) == []
    assert len(iterator) == 0


def test_remaining_beyond_machine_size():
    iterator = iter_all(NONZERO_U64)
    assert iterator.remaining == 2**64 - 1
    assert next(iterator) == 1
    assert iterator.next_back() == 2**64 - 1


def test_len_overflows_where_remaining_does_not():
    iterator = iter_all(NONZERO_U64)
    assert iterator.remaining == 2**64 - 1
    with pytest.raises(OverflowError):
        len(iterator)
