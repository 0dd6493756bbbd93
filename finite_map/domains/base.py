"""
The bijection protocol shared by every finite domain.

A domain describes a type with a known number of inhabitants and maps each
inhabitant to a unique position in ``range(cardinality)``. The mapping is
reversible: ``unindex(index(v)) == v`` for every inhabitant ``v`` and
``index(unindex(i)) == i`` for every ``i`` below the cardinality.
"""

from __future__ import annotations

import operator
from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar, Union

from ..exceptions import CardinalityOverflowError, NotInDomainError
from ..utils.config import get_settings

T = TypeVar("T")


class _Absent:
    """Marker returned by ``unindex`` for positions outside the domain."""

    _instance: "_Absent | None" = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()


def max_cardinality() -> int:
    """Largest cardinality the active index width can represent."""
    return get_settings().max_cardinality


def check_cardinality(cardinality: int, what: str) -> int:
    """Reject cardinalities that do not fit the configured index width."""
    limit = max_cardinality()
    if cardinality > limit:
        raise CardinalityOverflowError(what, limit)
    return cardinality


class Domain(ABC, Generic[T]):
    """
    Abstract finite domain.

    Subclasses implement ``cardinality``, ``__contains__`` and the unchecked
    ``_index``/``_unindex`` pair. Composite domains call the unchecked pair on
    their children once the top-level value has been validated.
    """

    name: str = "domain"

    @property
    @abstractmethod
    def cardinality(self) -> int:
        """Number of inhabitants."""

    @abstractmethod
    def __contains__(self, value: object) -> bool:
        """Whether ``value`` is an inhabitant."""

    @abstractmethod
    def _index(self, value: T) -> int:
        ...

    @abstractmethod
    def _unindex(self, i: int) -> T:
        ...

    def index(self, value: T) -> int:
        """Position of ``value`` in ``range(self.cardinality)``."""
        if value not in self:
            raise NotInDomainError(value, self)
        return self._index(value)

    def unindex(self, i: int) -> Union[T, Any]:
        """Inhabitant at position ``i``, or ``ABSENT`` when ``i`` is out of range."""
        position = operator.index(i)
        if position < 0 or position >= self.cardinality:
            return ABSENT
        return self._unindex(position)

    def is_empty(self) -> bool:
        return self.cardinality == 0

    def __repr__(self) -> str:
        return f"<Domain {self.name} ({self.cardinality})>"
