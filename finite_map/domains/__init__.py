"""Finite domains: the indexing bijection and its building blocks."""

from .base import ABSENT, Domain, check_cardinality, max_cardinality  # noqa: F401
from .composite import (  # noqa: F401
    ArrayDomain,
    EnumeratedDomain,
    ProductDomain,
    SumDomain,
    Variant,
    array,
    atoms,
    product,
    union,
)
from .enumeration import IterAll, iter_all  # noqa: F401
from .primitives import (  # noqa: F401
    BOOL,
    CHAR,
    EMPTY,
    F32,
    I8,
    I16,
    I32,
    IPV4,
    NONZERO_I8,
    NONZERO_I16,
    NONZERO_I32,
    NONZERO_I64,
    NONZERO_ISIZE,
    NONZERO_U8,
    NONZERO_U16,
    NONZERO_U32,
    NONZERO_U64,
    NONZERO_USIZE,
    U8,
    U16,
    U32,
    UNIT,
    singleton,
)
from .ranges import InRange, InRangeBounds, InRangeInclusive, RangeDomain  # noqa: F401
from .registry import domain_of, finite, register  # noqa: F401
