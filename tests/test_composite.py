from collections import namedtuple

import pytest

from finite_map.domains import (
    ABSENT,
    BOOL,
    I8,
    U8,
    U16,
    U32,
    UNIT,
    NONZERO_USIZE,
    ArrayDomain,
    ProductDomain,
    SumDomain,
    Variant,
    array,
    atoms,
    product,
    union,
)
from finite_map.exceptions import AmbiguousVariantError, CardinalityOverflowError


def test_product_u8_bool(check_all):
    pair = product(U8, BOOL)
    check_all(pair, 512)
    assert pair.index((0, False)) == 0
    assert pair.index((0, True)) == 1
    assert pair.index((1, False)) == 2
    assert pair.unindex(511) == (255, True)
    assert pair.unindex(512) is ABSENT


def test_product_bool_u8(check_all):
    pair = product(BOOL, U8)
    check_all(pair, 512)
    assert pair.index((True, 0)) == 256


def test_first_field_is_most_significant():
    triple = product(BOOL, U8, BOOL)
    assert triple.index((True, 0, False)) == 512
    assert triple.index((False, 1, False)) == 2
    assert triple.index((False, 0, True)) == 1


def test_empty_product(check_all):
    nothing = product()
    check_all(nothing, 1)
    assert nothing.index(()) == 0


def test_product_with_empty_field_is_empty():
    assert product(U8, SumDomain([])).cardinality == 0


def test_array_matches_tuple():
    assert array(U8, 2).index((1, 2)) == product(U8, U8).index((1, 2))
    assert array(U8, 2).index((1, 2)) == 258


@pytest.mark.parametrize("length, expected", [(0, 1), (1, 256), (2, 256 * 256)])
def test_u8_arrays(check_all, length, expected):
    check_all(array(U8, length), expected)


def test_unit_array(check_all):
    check_all(array(UNIT, 100), 1)


def test_array_values_are_tuples():
    assert array(BOOL, 3).unindex(5) == (True, False, True)
    assert [True, False, True] not in array(BOOL, 3)


def test_array_overflow_without_materialising():
    with pytest.raises(CardinalityOverflowError):
        ArrayDomain(BOOL, 2**32)
    with pytest.raises(CardinalityOverflowError):
        array(U32, 2)
    assert array(BOOL, 63).cardinality == 2**63


def test_product_overflow():
    with pytest.raises(CardinalityOverflowError):
        product(U32, U32)
    assert product(U32, U16).cardinality == 2**48


def test_simple_sum(check_all):
    colours = atoms("red", "green", "blue")
    check_all(colours, 3)
    assert [colours.index(c) for c in ("red", "green", "blue")] == [0, 1, 2]
    assert colours.unindex(3) is ABSENT


def test_atoms_reject_duplicates():
    with pytest.raises(ValueError):
        atoms("a", "b", "a")


def test_atoms_keep_types_apart():
    mixed = atoms(1, True)
    assert mixed.index(1) == 0
    assert mixed.index(True) == 1


def test_sum_offsets(check_all):
    shapes = SumDomain(
        [
            Variant("pair", product(U8, BOOL)),
            Variant("unit", UNIT),
            Variant("signed", I8),
        ]
    )
    check_all(shapes, 512 + 1 + 256)
    assert shapes.index((0, False)) == 0
    assert shapes.index(None) == 512
    assert shapes.index(0) == 513
    assert shapes.index(-1) == 513 + 255
    assert shapes.variant_of(None).name == "unit"


def test_empty_sum(check_all):
    never = SumDomain([])
    check_all(never, 0)
    assert never.unindex(0) is ABSENT


def test_sum_overflow():
    with pytest.raises(CardinalityOverflowError):
        union(NONZERO_USIZE, UNIT)


def test_product_with_custom_constructor():
    class Point:
        def __init__(self, x, y):
            self.x, self.y = x, y

        def __eq__(self, other):
            return isinstance(other, Point) and (self.x, self.y) == (other.x, other.y)

    domain = ProductDomain(
        [U8, U8],
        build=Point,
        unpack=lambda p: (p.x, p.y),
        accepts=lambda value: isinstance(value, Point),
    )
    assert domain.index(Point(1, 0)) == 256
    assert domain.unindex(257) == Point(1, 1)
    assert (1, 0) not in domain


def test_structural_equality():
    assert product(U8, BOOL) == product(U8, BOOL)
    assert product(U8, BOOL) != product(BOOL, U8)
    assert array(U8, 2) == array(U8, 2)
    assert union(U8, UNIT) == union(U8, UNIT)


def test_sum_rejects_shared_inhabitants():
    with pytest.raises(AmbiguousVariantError) as info:
        union(BOOL, atoms(True))
    assert info.value.value is True
    assert info.value.first == "bool"


def test_sum_rejects_overlap_with_large_variant():
    with pytest.raises(AmbiguousVariantError) as info:
        union(U32, I8)
    assert info.value.value == 0


def test_disjoint_large_variants_are_accepted(check_some):
    check_some(union(U32, atoms("x")), 2**32 + 1)


def test_tuple_domains_ignore_named_tuples():
    Flags = namedtuple("Flags", "a b")
    assert Flags(False, True) not in product(BOOL, BOOL)
    assert Flags(False, True) not in array(BOOL, 2)
    assert (False, True) in product(BOOL, BOOL)
