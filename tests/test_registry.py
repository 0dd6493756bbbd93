import enum
from dataclasses import dataclass, field
from typing import Annotated, Literal, NamedTuple, NoReturn, Optional, Tuple, Union

import pytest

from finite_map.domains import (
    ABSENT,
    BOOL,
    EMPTY,
    NONZERO_USIZE,
    U8,
    UNIT,
    Domain,
    InRange,
    atoms,
    domain_of,
    finite,
    iter_all,
    register,
)
from finite_map.exceptions import AmbiguousVariantError, CardinalityOverflowError, NotFiniteError


@finite
class Colour(enum.Enum):
    RED = 1
    GREEN = 2
    BLUE = 3


@finite
@dataclass(frozen=True)
class Cell:
    row: Annotated[int, U8]
    lit: bool


@finite
@dataclass(frozen=True)
class Options:
    a: bool
    b: Annotated[int, U8]
    c: Optional[bool]


class Pair(NamedTuple):
    left: bool
    right: Colour


class Flags(NamedTuple):
    a: bool
    b: bool


@dataclass(frozen=True)
class Circle:
    radius: Annotated[int, U8]


@dataclass(frozen=True)
class Square:
    side: Annotated[int, U8]
    filled: bool


@dataclass(frozen=True)
class Blank:
    pass


def test_enum_variants_in_declaration_order(check_all):
    domain = domain_of(Colour)
    check_all(domain, 3)
    assert [domain.index(c) for c in Colour] == [0, 1, 2]
    assert list(iter_all(Colour)) == [Colour.RED, Colour.GREEN, Colour.BLUE]


def test_dataclass_product(check_all):
    domain = domain_of(Cell)
    check_all(domain, 512)
    assert domain.index(Cell(0, False)) == 0
    assert domain.index(Cell(0, True)) == 1
    assert domain.index(Cell(1, False)) == 2
    assert domain.unindex(3) == Cell(1, True)


def test_dataclass_with_optional_field(check_all):
    check_all(domain_of(Options), 2 * 256 * 3)


def test_optional_follows_declaration_order():
    assert list(iter_all(Optional[bool])) == [False, True, None]


def test_named_tuple(check_all):
    domain = domain_of(Pair)
    check_all(domain, 6)
    assert domain.unindex(5) == Pair(True, Colour.BLUE)
    assert (True, Colour.BLUE) not in domain


def test_union_of_records(check_all):
    shape = Union[Circle, Square, Blank]
    domain = domain_of(shape)
    check_all(domain, 256 + 512 + 1)
    assert domain.index(Circle(3)) == 3
    assert domain.index(Square(0, True)) == 257
    assert domain.index(Blank()) == 256 + 512


def test_tuple_types():
    assert domain_of(Tuple[()]).cardinality == 1
    assert domain_of(Tuple[Annotated[int, U8], bool]).index((1, False)) == 2
    pair = domain_of(Tuple[bool, bool])
    assert pair.index((True, False)) == 2


def test_literal():
    domain = domain_of(Literal["low", "mid", "high"])
    assert domain.cardinality == 3
    assert domain.index("mid") == 1


def test_never_and_none():
    assert domain_of(NoReturn) is EMPTY
    assert domain_of(None) is UNIT
    assert domain_of(type(None)) is UNIT


def test_builtin_registrations():
    assert domain_of(bool) is BOOL
    assert domain_of(BOOL) is BOOL
    assert domain_of(InRange[0, 4]).cardinality == 4


def test_annotated_without_domain_uses_base_type():
    assert domain_of(Annotated[bool, "flag"]) is BOOL


def test_derived_domains_are_cached():
    assert domain_of(Tuple[bool, Colour]) is domain_of(Tuple[bool, Colour])
    assert domain_of(Cell) is Cell.__finite_domain__


@pytest.mark.parametrize("tp", [int, str, float, Tuple[bool, ...], list])
def test_unbounded_types_are_rejected(tp):
    with pytest.raises(NotFiniteError):
        domain_of(tp)


def test_unbounded_field_rejected_at_definition():
    with pytest.raises(NotFiniteError):

        @finite
        @dataclass
        class Loose:
            count: int


def test_overflow_rejected_at_definition():
    with pytest.raises(CardinalityOverflowError):

        @finite
        @dataclass
        class TooBig:
            value: Union[Annotated[int, NONZERO_USIZE], None]


def test_largest_domain_is_accepted(check_some):
    @finite
    @dataclass
    class Big:
        value: Annotated[int, NONZERO_USIZE]

    check_some(domain_of(Big), 2**64 - 1)


def test_fields_outside_init_are_rejected():
    with pytest.raises(NotFiniteError):

        @finite
        @dataclass
        class Partial:
            a: bool
            b: bool = field(default=False, init=False)


def test_recursive_record_is_rejected():
    @dataclass
    class Node:
        child: Optional["Node"]

    with pytest.raises(NotFiniteError):
        domain_of(Node)


def test_register_foreign_type():
    class Switch:
        def __init__(self, on):
            self.on = on

        def __eq__(self, other):
            return isinstance(other, Switch) and other.on == self.on

        __hash__ = None

    class SwitchDomain(Domain):
        name = "switch"

        @property
        def cardinality(self):
            return 2

        def __contains__(self, value):
            return isinstance(value, Switch)

        def _index(self, value):
            return int(value.on)

        def _unindex(self, i):
            return Switch(bool(i))

    register(Switch, SwitchDomain())
    assert domain_of(Switch).index(Switch(True)) == 1
    assert domain_of(Optional[Switch]).unindex(2) is None
    assert domain_of(Switch).unindex(2) is ABSENT


def test_enumerated_domain_equals_explicit_atoms():
    assert domain_of(Literal[1, 2]) == atoms(1, 2)


def test_union_merges_overlapping_literals(check_all):
    domain = domain_of(Union[Literal[1, 2], Literal[2, 3]])
    check_all(domain, 3)
    assert list(iter_all(domain)) == [1, 2, 3]


def test_optional_literal_holding_none(check_all):
    domain = domain_of(Optional[Literal[None, 1]])
    check_all(domain, 2)
    assert list(iter_all(domain)) == [None, 1]


def test_literals_keep_their_place_in_a_union(check_all):
    domain = domain_of(Union[Literal["off"], bool, None])
    check_all(domain, 4)
    assert list(iter_all(domain)) == ["off", False, True, None]


def test_tuple_and_named_tuple_in_one_union(check_all):
    domain = domain_of(Union[Tuple[bool, bool], Flags])
    check_all(domain, 8)
    assert domain.index((False, False)) == 0
    assert domain.index(Flags(False, False)) == 4


def test_union_with_shared_inhabitant_is_rejected():
    with pytest.raises(AmbiguousVariantError):
        domain_of(Union[bool, Literal[True]])


def test_register_refreshes_derived_composites():
    class Knob:
        pass

    register(Knob, atoms("low", "high"))
    assert domain_of(Tuple[Knob, bool]).cardinality == 4

    register(Knob, atoms("low", "mid", "high"))
    assert domain_of(Tuple[Knob, bool]).cardinality == 6
