"""
Bijections for structured types.

Products (tuples, records, fixed arrays) use mixed-radix encoding with the
first field as the most significant digit, so ``(0, False) -> 0``,
``(0, True) -> 1`` and ``(1, False) -> 2`` for a ``(u8, bool)`` pair.
Sums (unions, enums) give each variant a contiguous block of indices in
declaration order: the first variant occupies ``[0, n1)``, the second
``[n1, n1 + n2)`` and so on. Variants must not share inhabitants; a sum whose
variants overlap raises :class:`~finite_map.exceptions.AmbiguousVariantError`.

Every constructor computes the cardinality up front and raises
:class:`~finite_map.exceptions.CardinalityOverflowError` when it does not fit
the configured index width.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Any, Callable, Hashable, Iterable, Iterator, Sequence

from loguru import logger

from .base import ABSENT, Domain, check_cardinality, max_cardinality
from ..exceptions import AmbiguousVariantError, CardinalityOverflowError

# Variants up to this size are scanned in full for shared inhabitants; larger
# ones are compared through their first and last OVERLAP_SAMPLE inhabitants.
OVERLAP_SCAN_LIMIT = 1 << 16
OVERLAP_SAMPLE = 256


def _as_tuple(*parts: Any) -> tuple:
    return parts


class ProductDomain(Domain[Any]):
    """
    Mixed-radix product of field domains.

    Parameters
    ----------
    fields:
        Field domains in declaration order.
    build:
        Called with the decoded field values (positionally) to create a value.
        Defaults to building a plain tuple.
    unpack:
        Returns the field values of a value, in declaration order.
    accepts:
        Shallow type test run before the fields are inspected.
    """

    def __init__(
        self,
        fields: Sequence[Domain[Any]],
        *,
        build: Callable[..., Any] | None = None,
        unpack: Callable[[Any], Sequence[Any]] = tuple,
        accepts: Callable[[Any], bool] | None = None,
        name: str | None = None,
    ) -> None:
        self.fields: tuple[Domain[Any], ...] = tuple(fields)
        self._build = build or _as_tuple
        self._unpack = unpack
        self._accepts = accepts
        self.name = name or "(" + ", ".join(field.name for field in self.fields) + ")"

        cardinality = 1
        for field in self.fields:
            cardinality *= field.cardinality
        self._cardinality = check_cardinality(cardinality, self.name)

    @property
    def cardinality(self) -> int:
        return self._cardinality

    def __contains__(self, value: object) -> bool:
        if self._accepts is None:
            if type(value) is not tuple:
                return False
        elif not self._accepts(value):
            return False
        parts = self._unpack(value)
        return len(parts) == len(self.fields) and all(
            part in field for field, part in zip(self.fields, parts)
        )

    def _index(self, value: Any) -> int:
        accumulator = 0
        for field, part in zip(self.fields, self._unpack(value)):
            accumulator = accumulator * field.cardinality + field._index(part)
        return accumulator

    def _unindex(self, i: int) -> Any:
        parts: list[Any] = [None] * len(self.fields)
        for position in reversed(range(len(self.fields))):
            field = self.fields[position]
            i, digit = divmod(i, field.cardinality)
            parts[position] = field._unindex(digit)
        return self._build(*parts)

    def _structure(self) -> tuple[Any, ...]:
        return (self.fields, self._build, self._unpack, self._accepts)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ProductDomain):
            return NotImplemented
        return self._structure() == other._structure()

    def __hash__(self) -> int:
        return hash((ProductDomain, self.fields))


def _power(base: int, exponent: int, what: str) -> int:
    """``base ** exponent`` that gives up as soon as the limit is exceeded."""
    if exponent == 0:
        return 1
    if base <= 1:
        return base
    limit = max_cardinality()
    result = 1
    for _ in range(exponent):
        result *= base
        if result > limit:
            raise CardinalityOverflowError(what, limit)
    return result


class ArrayDomain(Domain[tuple]):
    """
    Fixed-length sequence of one element domain, valued as tuples.

    Indices agree with a :class:`ProductDomain` of ``length`` copies of the
    element domain: ``array(U8, 2)`` and ``product(U8, U8)`` give ``(1, 2)``
    the same index.
    """

    def __init__(self, element: Domain[Any], length: int, *, name: str | None = None) -> None:
        if length < 0:
            raise ValueError("Array length must be non-negative.")
        self.element = element
        self.length = length
        self.name = name or f"[{element.name}; {length}]"
        self._cardinality = _power(element.cardinality, length, self.name)

    @property
    def cardinality(self) -> int:
        return self._cardinality

    def __contains__(self, value: object) -> bool:
        if type(value) is not tuple or len(value) != self.length:
            return False
        return all(part in self.element for part in value)

    def _index(self, value: Sequence[Any]) -> int:
        radix = self.element.cardinality
        accumulator = 0
        for part in value:
            accumulator = accumulator * radix + self.element._index(part)
        return accumulator

    def _unindex(self, i: int) -> tuple:
        radix = self.element.cardinality
        parts: list[Any] = [None] * self.length
        for position in reversed(range(self.length)):
            i, digit = divmod(i, radix)
            parts[position] = self.element._unindex(digit)
        return tuple(parts)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ArrayDomain):
            return NotImplemented
        return self.element == other.element and self.length == other.length

    def __hash__(self) -> int:
        return hash((ArrayDomain, self.element, self.length))


def _sample(domain: Domain[Any]) -> Iterator[Any]:
    n = domain.cardinality
    if n <= OVERLAP_SCAN_LIMIT:
        positions: Iterable[int] = range(n)
    else:
        positions = itertools.chain(range(OVERLAP_SAMPLE), range(n - OVERLAP_SAMPLE, n))
    for i in positions:
        yield domain._unindex(i)


def _shared_inhabitant(first: Domain[Any], second: Domain[Any]) -> Any:
    """An inhabitant of both domains, or ``ABSENT`` when none was found."""
    small, large = sorted((first, second), key=lambda domain: domain.cardinality)
    pairs = [(small, large)]
    if small.cardinality > OVERLAP_SCAN_LIMIT:
        pairs.append((large, small))
    for source, target in pairs:
        for value in _sample(source):
            if value in target:
                return value
    return ABSENT


def _check_disjoint(variants: Sequence["Variant"], name: str) -> None:
    for later, variant in enumerate(variants):
        for earlier in variants[:later]:
            shared = _shared_inhabitant(earlier.domain, variant.domain)
            if shared is not ABSENT:
                logger.warning(
                    "Variants {} and {} of {} overlap", earlier.name, variant.name, name
                )
                raise AmbiguousVariantError(shared, earlier.name, variant.name, name)


@dataclass(frozen=True)
class Variant:
    """A named alternative of a sum domain."""

    name: str
    domain: Domain[Any]


class SumDomain(Domain[Any]):
    """
    Offset-partitioned sum of variants.

    Variant domains must be disjoint so that every value has exactly one
    index. Construction checks each pair of variants for a shared inhabitant
    and raises :class:`AmbiguousVariantError` when it finds one.
    """

    def __init__(self, variants: Iterable[Variant], *, name: str | None = None) -> None:
        self.variants: tuple[Variant, ...] = tuple(variants)
        self.name = name or " | ".join(variant.name for variant in self.variants) or "never"
        self._cardinality = check_cardinality(
            sum(variant.domain.cardinality for variant in self.variants), self.name
        )
        _check_disjoint(self.variants, self.name)

    @property
    def cardinality(self) -> int:
        return self._cardinality

    def variant_of(self, value: object) -> Variant | None:
        for variant in self.variants:
            if value in variant.domain:
                return variant
        return None

    def __contains__(self, value: object) -> bool:
        return self.variant_of(value) is not None

    def _index(self, value: Any) -> int:
        offset = 0
        for variant in self.variants:
            if value in variant.domain:
                return offset + variant.domain._index(value)
            offset += variant.domain.cardinality
        raise AssertionError(f"{value!r} matched no variant of {self.name}")

    def _unindex(self, i: int) -> Any:
        for variant in self.variants:
            span = variant.domain.cardinality
            if i < span:
                return variant.domain._unindex(i)
            i -= span
        raise AssertionError(f"index past the last variant of {self.name}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SumDomain):
            return NotImplemented
        return self.variants == other.variants

    def __hash__(self) -> int:
        return hash((SumDomain, self.variants))


class EnumeratedDomain(Domain[Any]):
    """
    Sum of unit variants listed explicitly.

    Equivalent to a :class:`SumDomain` of singletons, with constant-time
    lookup. Used for ``enum.Enum`` classes and ``typing.Literal``.
    """

    def __init__(self, values: Iterable[Hashable], *, name: str | None = None) -> None:
        self.values: tuple[Hashable, ...] = tuple(values)
        self.name = name or "{" + ", ".join(repr(value) for value in self.values) + "}"
        self._positions: dict[tuple[type, Hashable], int] = {}
        for position, value in enumerate(self.values):
            key = (type(value), value)
            if key in self._positions:
                raise ValueError(f"Duplicate inhabitant {value!r} in {self.name}")
            self._positions[key] = position
        self._cardinality = check_cardinality(len(self.values), self.name)
        logger.debug("Enumerated domain {} with {} inhabitants", self.name, self._cardinality)

    @property
    def cardinality(self) -> int:
        return self._cardinality

    def __contains__(self, value: object) -> bool:
        try:
            return (type(value), value) in self._positions
        except TypeError:
            return False

    def _index(self, value: Any) -> int:
        return self._positions[(type(value), value)]

    def _unindex(self, i: int) -> Any:
        return self.values[i]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EnumeratedDomain):
            return NotImplemented
        return [(type(v), v) for v in self.values] == [(type(v), v) for v in other.values]

    def __hash__(self) -> int:
        return hash((EnumeratedDomain, self.values))


def product(*fields: Domain[Any], name: str | None = None) -> ProductDomain:
    """Tuple-valued product of ``fields``."""
    return ProductDomain(fields, name=name)


def array(element: Domain[Any], length: int) -> ArrayDomain:
    """Tuples of exactly ``length`` elements drawn from ``element``."""
    return ArrayDomain(element, length)


def union(*domains: Domain[Any], name: str | None = None) -> SumDomain:
    """Sum of anonymous variants named after their domains."""
    return SumDomain((Variant(domain.name, domain) for domain in domains), name=name)


def atoms(*values: Hashable, name: str | None = None) -> EnumeratedDomain:
    """Domain of exactly ``values``, indexed in the order given."""
    return EnumeratedDomain(values, name=name)
