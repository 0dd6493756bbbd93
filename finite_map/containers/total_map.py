"""
Dense map holding exactly one value for every inhabitant of its key domain.

Values live in a list whose position ``p`` belongs to the key
``domain.unindex(p)``, so lookups cost one ``index`` call and one list
access. The map owns its list: every constructor copies the input and
:meth:`TotalMap.to_list` hands out a copy.
"""

from __future__ import annotations

from functools import total_ordering
from typing import TYPE_CHECKING, Any, Callable, Iterator, Mapping, Optional, Sequence, TypeVar

import numpy as np
import pandas as pd
from loguru import logger

from ..domains import Domain, IterAll, domain_of
from ..exceptions import (
    AbsentValueError,
    LengthMismatchError,
    MapConstructionError,
    MissingKeyError,
    NotInDomainError,
)

if TYPE_CHECKING:
    from .uninit import UninitMap

K = TypeVar("K")
V = TypeVar("V")
U = TypeVar("U")


@total_ordering
class TotalMap(Mapping[K, V]):
    """
    Map with a value for every key of a finite domain.

    Parameters
    ----------
    key:
        The key domain, or any type :func:`~finite_map.domains.domain_of`
        resolves (``bool``, a ``@finite`` dataclass, ``tuple[...]``...).
    values:
        One value per key, in index order. Its length must equal the domain's
        cardinality.

    Examples
    --------
    >>> scores = TotalMap.from_fn(bool, lambda flag: 3 if flag else 2)
    >>> scores[False], scores[True]
    (2, 3)
    >>> scores.swap(False, True)
    >>> scores[False]
    3
    """

    __slots__ = ("_domain", "_values")

    def __init__(self, key: Any, values: Sequence[V]) -> None:
        domain = domain_of(key)
        if len(values) != domain.cardinality:
            logger.warning(
                "Rejected sequence of length {} for {}", len(values), domain.name
            )
            raise LengthMismatchError(values, domain.cardinality)
        self._domain: Domain[K] = domain
        self._values: list[V] = list(values)

    @classmethod
    def _wrap(cls, domain: Domain[K], values: list[Any]) -> "TotalMap[K, Any]":
        instance = cls.__new__(cls)
        instance._domain = domain
        instance._values = values
        return instance

    # -- construction -------------------------------------------------------

    @classmethod
    def from_fn(cls, key: Any, f: Callable[[K], V]) -> "TotalMap[K, V]":
        """Store ``f(k)`` for every key ``k``, in enumeration order."""
        domain = domain_of(key)
        return cls._wrap(domain, [f(k) for k in IterAll(domain)])

    @classmethod
    def from_index_fn(cls, key: Any, f: Callable[[int], V]) -> "TotalMap[K, V]":
        """Store ``f(i)`` for ``i`` in ``range(cardinality)`` without building keys."""
        domain = domain_of(key)
        return cls._wrap(domain, [f(i) for i in range(domain.cardinality)])

    @classmethod
    def try_from_fn(cls, key: Any, f: Callable[[K], V]) -> "TotalMap[K, V]":
        """
        Like :meth:`from_fn`, but report which key the generator failed on.

        The first exception raised by ``f`` stops construction; it is re-raised
        as :class:`MapConstructionError` chained to the original. No partially
        filled map is ever returned.
        """
        domain = domain_of(key)
        values: list[V] = []
        for position, k in enumerate(IterAll(domain)):
            try:
                values.append(f(k))
            except Exception as exc:
                logger.debug(
                    "Construction over {} aborted at {!r}: {}", domain.name, k, exc
                )
                raise MapConstructionError(k, position) from exc
        return cls._wrap(domain, values)

    @classmethod
    def default(cls, key: Any, factory: Callable[[], V]) -> "TotalMap[K, V]":
        """Fill every slot with a fresh ``factory()`` value."""
        return cls.from_index_fn(key, lambda _: factory())

    @classmethod
    def new_uninit(cls, key: Any) -> "UninitMap[K, V]":
        """Start a two-phase build; see :class:`UninitMap`."""
        from .uninit import UninitMap

        return UninitMap(key)

    # -- bulk conversions ---------------------------------------------------

    @classmethod
    def from_sequence(cls, key: Any, values: Sequence[V]) -> "TotalMap[K, V]":
        """
        Adopt a backing sequence of exactly ``cardinality`` values.

        Raises :class:`LengthMismatchError` carrying the untouched sequence as
        ``rejected`` otherwise.
        """
        return cls(key, values)

    @classmethod
    def from_mapping(cls, key: Any, mapping: Mapping[K, V]) -> "TotalMap[K, V]":
        """
        Build from an associative map that covers every key.

        The first key (in enumeration order) missing from ``mapping`` is
        reported through :class:`MissingKeyError`. Extra keys are ignored.
        """
        domain = domain_of(key)
        values: list[V] = []
        for k in IterAll(domain):
            if k not in mapping:
                logger.warning("Mapping lacks key {!r} of {}", k, domain.name)
                raise MissingKeyError(k)
            values.append(mapping[k])
        return cls._wrap(domain, values)

    @classmethod
    def from_series(cls, key: Any, series: pd.Series) -> "TotalMap[K, V]":
        """Build from a pandas Series indexed by keys."""
        return cls.from_mapping(key, series.to_dict())

    @classmethod
    def from_numpy(cls, key: Any, array: np.ndarray) -> "TotalMap[K, Any]":
        """Adopt the rows of ``array``; its first axis must match the cardinality."""
        domain = domain_of(key)
        if array.ndim == 0 or array.shape[0] != domain.cardinality:
            raise LengthMismatchError(array, domain.cardinality)
        return cls._wrap(domain, list(array))

    def to_list(self) -> list[V]:
        """Copy of the backing values in index order."""
        return list(self._values)

    def to_dict(self) -> dict[K, V]:
        return dict(self.items())

    def to_sorted_dict(self) -> dict[K, V]:
        """Dictionary whose insertion order follows the keys' natural ordering."""
        return dict(sorted(self.items(), key=lambda item: item[0]))  # type: ignore[arg-type, return-value]

    def to_series(self, name: Optional[str] = None) -> pd.Series:
        """pandas Series indexed by the keys, in enumeration order."""
        index = pd.Index(list(self.keys()), tupleize_cols=False, dtype=object)
        return pd.Series(self._values, index=index, name=name)

    def to_numpy(self, dtype: Any = None) -> np.ndarray:
        return np.asarray(self._values, dtype=dtype)

    def try_unwrap_values(self) -> "TotalMap[K, Any]":
        """
        Collapse a map of optional values into a map of plain values.

        Raises :class:`AbsentValueError` (carrying this map, unchanged, as
        ``map``) if any slot holds ``None``.
        """
        for position, value in enumerate(self._values):
            if value is None:
                raise AbsentValueError(self, self._domain.unindex(position))
        return self._wrap(self._domain, list(self._values))

    # -- access -------------------------------------------------------------

    @property
    def domain(self) -> Domain[K]:
        return self._domain

    def _position(self, key: K) -> int:
        try:
            return self._domain.index(key)
        except NotInDomainError as exc:
            raise KeyError(key) from exc

    def __getitem__(self, key: K) -> V:
        return self._values[self._position(key)]

    def __setitem__(self, key: K, value: V) -> None:
        self._values[self._position(key)] = value

    def __len__(self) -> int:
        return len(self._values)

    def is_empty(self) -> bool:
        """Only maps over an uninhabited key domain are empty."""
        return not self._values

    def __iter__(self) -> Iterator[K]:
        return IterAll(self._domain)

    def keys(self) -> IterAll[K]:  # type: ignore[override]
        """Every key in index order; keys are rebuilt through ``unindex``."""
        return IterAll(self._domain)

    def values(self) -> Iterator[V]:  # type: ignore[override]
        return iter(self._values)

    def items(self) -> Iterator[tuple[K, V]]:  # type: ignore[override]
        return zip(IterAll(self._domain), self._values)

    def replace(self, key: K, value: V) -> V:
        """Store ``value`` under ``key`` and return what was there."""
        position = self._position(key)
        previous = self._values[position]
        self._values[position] = value
        return previous

    def swap(self, first: K, second: K) -> None:
        i, j = self._position(first), self._position(second)
        self._values[i], self._values[j] = self._values[j], self._values[i]

    def take(self, key: K, default_factory: Optional[Callable[[], V]] = None) -> V:
        """
        Replace the value under ``key`` with a default and return the old one.

        The default comes from ``default_factory`` or, when omitted, from
        calling the old value's type with no arguments (``0``, ``""``, ``[]``).
        """
        position = self._position(key)
        previous = self._values[position]
        factory = default_factory or type(previous)
        self._values[position] = factory()
        return previous

    def map_values(self, f: Callable[[V], U]) -> "TotalMap[K, U]":
        """New map over the same keys holding ``f(v)`` for every value."""
        return self._wrap(self._domain, [f(value) for value in self._values])

    def copy(self) -> "TotalMap[K, V]":
        return self._wrap(self._domain, list(self._values))

    # -- comparison ---------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TotalMap):
            return self._domain == other._domain and self._values == other._values
        if isinstance(other, Mapping):
            return self.to_dict() == dict(other.items())
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, TotalMap) or self._domain != other._domain:
            return NotImplemented
        return self._values < other._values

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        entries = ", ".join(f"{k!r}: {v!r}" for k, v in self.items())
        return f"TotalMap({{{entries}}})"

