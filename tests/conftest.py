import pytest

from finite_map.domains import ABSENT
from finite_map.utils import Settings, configure

USIZE_MAX = 2**64 - 1


def _probe_positions(cardinality):
    positions = set(range(1000))
    for base in (USIZE_MAX, cardinality):
        for offset in range(-10, 11):
            if 0 <= base + offset:
                positions.add(base + offset)
    for bits in (8, 16, 32, 64):
        for k in (bits - 1, bits, bits + 1):
            n = 2**k
            positions.update((n - 1, n, n + 1))
    return sorted(positions)


def _check_some(domain, expected):
    assert domain.cardinality == expected

    for i in _probe_positions(domain.cardinality):
        value = domain.unindex(i)
        if value is ABSENT:
            assert i >= domain.cardinality, f"{i} -> ABSENT, but cardinality={expected}"
        else:
            assert i < domain.cardinality, f"{i} -> {value!r}, but cardinality={expected}"
            assert domain.index(value) == i, f"{i} -> {value!r} -> {domain.index(value)}"


def _check_all(domain, expected):
    _check_some(domain, expected)

    for i in range(domain.cardinality):
        value = domain.unindex(i)
        assert domain.index(value) == i, f"{i} -> {value!r} -> {domain.index(value)}"
        assert domain.unindex(domain.index(value)) == value


@pytest.fixture
def check_some():
    """Round-trip sampled positions around the edges of a domain."""
    return _check_some


@pytest.fixture
def check_all():
    """Round-trip every position of a domain plus the sampled edges."""
    return _check_all


@pytest.fixture
def index_bits():
    """Temporarily narrow the index width; restores the previous settings."""
    previous = []

    def _apply(bits):
        previous.append(configure(Settings(index_bits=bits)))

    yield _apply

    if previous:
        configure(previous[0])
