"""
Integers constrained to a fixed interval.

``InRange[A, B]`` holds a value in ``A..B`` (half-open) and
``InRangeInclusive[A, B]`` a value in ``A..=B``. Subscripting creates (and
caches) a class per interval; its instances are immutable, hashable and
ordered by value. The index of a value is its offset from ``MIN``.
"""

from __future__ import annotations

import operator
from functools import total_ordering
from typing import Any, ClassVar, Optional, Type, TypeVar

from loguru import logger

from ..exceptions import CardinalityOverflowError
from .base import Domain, check_cardinality, max_cardinality

R = TypeVar("R", bound="InRangeBounds")


@total_ordering
class InRangeBounds:
    """Common behaviour of the bounded integer classes."""

    MIN: ClassVar[int]
    INHABITANTS: ClassVar[int]

    __slots__ = ("_value",)

    def __init__(self, i: int) -> None:
        raise TypeError(
            f"Use {type(self).__name__}.new() or .new_unchecked() to build a value."
        )

    @classmethod
    def new_unchecked(cls: Type[R], i: int) -> R:
        """
        Build a value without checking the bounds.

        The caller must guarantee ``MIN <= i < MIN + INHABITANTS``; nothing
        here verifies it, and a value outside the interval breaks ``index``.
        """
        instance = object.__new__(cls)
        object.__setattr__(instance, "_value", i)
        return instance

    @classmethod
    def offset_from_start(cls, i: int) -> Optional[int]:
        """Offset of ``i`` from ``MIN`` when ``i`` lies in the interval."""
        offset = operator.index(i) - cls.MIN
        if 0 <= offset < cls.INHABITANTS:
            return offset
        return None

    @classmethod
    def in_bounds(cls, i: int) -> bool:
        return cls.offset_from_start(i) is not None

    @classmethod
    def new(cls: Type[R], i: int) -> Optional[R]:
        """Build a value if ``i`` is in range, otherwise return ``None``."""
        if cls.in_bounds(i):
            return cls.new_unchecked(operator.index(i))
        return None

    @classmethod
    def new_from_start_offset(cls: Type[R], offset: int) -> Optional[R]:
        """Same as ``new(MIN + offset)``."""
        return cls.new(cls.MIN + operator.index(offset))

    def get(self) -> int:
        return self._value

    def __int__(self) -> int:
        return self._value

    def __index__(self) -> int:
        return self._value

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._value == other._value  # type: ignore[attr-defined]

    def __lt__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._value < other._value  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self), self._value))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value})"

    def __reduce__(self) -> tuple[Any, ...]:
        return (_rebuild, (type(self)._family(), type(self)._bounds, self._value))

    _bounds: ClassVar[tuple[int, int]]

    @classmethod
    def _family(cls) -> type:
        raise TypeError(f"{cls.__name__} is an unbounded range class")


def _rebuild(family: Any, bounds: tuple[int, int], value: int) -> InRangeBounds:
    return family[bounds].new_unchecked(value)


def _check_bound(bound: int) -> int:
    bound = operator.index(bound)
    if bound < 0 or bound > max_cardinality():
        raise CardinalityOverflowError(f"range bound {bound}", max_cardinality())
    return bound


class _RangeFamily:
    """Shared subscription logic for the two interval flavours."""

    __slots__ = ()

    _cache: ClassVar[dict[tuple[int, int], type]]
    _inclusive: ClassVar[bool]
    _symbol: ClassVar[str]

    def __class_getitem__(cls, bounds: tuple[int, int]) -> type:
        start, end = (_check_bound(bound) for bound in bounds)
        key = (start, end)
        cached = cls._cache.get(key)
        if cached is not None:
            return cached

        inhabitants = end - start + (1 if cls._inclusive else 0)
        if inhabitants < 0:
            raise ValueError(f"Interval {start}{cls._symbol}{end} is reversed.")
        check_cardinality(inhabitants, f"{start}{cls._symbol}{end}")

        family = cls
        created = type(
            f"{cls.__name__}[{start}, {end}]",
            (cls,),
            {
                "__slots__": (),
                "MIN": start,
                "INHABITANTS": inhabitants,
                "_bounds": key,
                "_family": classmethod(lambda _cls: family),
                "__module__": cls.__module__,
            },
        )
        created.__finite_domain__ = RangeDomain(created)  # type: ignore[attr-defined]
        cls._cache[key] = created
        logger.debug("Created bounded class {} with {} inhabitants", created.__name__, inhabitants)
        return created


class InRange(InRangeBounds, _RangeFamily):
    """An integer guaranteed to lie in ``A..B``."""

    __slots__ = ()
    _cache: ClassVar[dict[tuple[int, int], type]] = {}
    _inclusive = False
    _symbol = ".."


class InRangeInclusive(InRangeBounds, _RangeFamily):
    """An integer guaranteed to lie in ``A..=B``."""

    __slots__ = ()
    _cache: ClassVar[dict[tuple[int, int], type]] = {}
    _inclusive = True
    _symbol = "..="


class RangeDomain(Domain[InRangeBounds]):
    """Bijection for a concrete ``InRange``/``InRangeInclusive`` class."""

    def __init__(self, range_cls: type) -> None:
        self.range_cls = range_cls
        self.name = range_cls.__name__

    @property
    def cardinality(self) -> int:
        return self.range_cls.INHABITANTS

    def __contains__(self, value: object) -> bool:
        return type(value) is self.range_cls

    def _index(self, value: InRangeBounds) -> int:
        return value.get() - self.range_cls.MIN

    def _unindex(self, i: int) -> InRangeBounds:
        return self.range_cls.new_unchecked(self.range_cls.MIN + i)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RangeDomain):
            return NotImplemented
        return self.range_cls is other.range_cls

    def __hash__(self) -> int:
        return hash((RangeDomain, self.range_cls))
