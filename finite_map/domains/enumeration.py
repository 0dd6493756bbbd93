"""Lazy, exactly-sized, double-ended enumeration of a domain."""

from __future__ import annotations

from typing import Any, Iterator, TypeVar

from .base import ABSENT, Domain

T = TypeVar("T")


class IterAll(Iterator[T]):
    """
    Iterator over every inhabitant of a domain in index order.

    Only positions in ``range(domain.cardinality)`` are ever requested, so each
    produced element is present. ``next_back`` consumes from the other end and
    ``reversed()`` returns a fresh iterator over what remains, backwards. The
    iterator holds no state besides its two cursors; call :func:`iter_all`
    again to restart.
    """

    __slots__ = ("_domain", "_front", "_back", "_backwards")

    def __init__(
        self,
        domain: Domain[T],
        start: int = 0,
        stop: int | None = None,
        *,
        backwards: bool = False,
    ) -> None:
        self._domain = domain
        self._front = start
        self._back = domain.cardinality if stop is None else stop
        self._backwards = backwards

    @property
    def domain(self) -> Domain[T]:
        return self._domain

    @property
    def remaining(self) -> int:
        """Number of elements left; usable when it exceeds ``sys.maxsize``."""
        return max(self._back - self._front, 0)

    def __len__(self) -> int:
        # len() itself raises OverflowError above sys.maxsize; use remaining.
        return self.remaining

    def __length_hint__(self) -> int:
        return self.remaining

    def __iter__(self) -> "IterAll[T]":
        return self

    def _take_front(self) -> T:
        if self._front >= self._back:
            raise StopIteration
        value = self._resolve(self._front)
        self._front += 1
        return value

    def _take_back(self) -> T:
        if self._front >= self._back:
            raise StopIteration
        self._back -= 1
        return self._resolve(self._back)

    def _resolve(self, position: int) -> T:
        value = self._domain.unindex(position)
        if value is ABSENT:
            raise RuntimeError(
                f"{self._domain!r} returned no value for in-range position {position}"
            )
        return value

    def __next__(self) -> T:
        return self._take_back() if self._backwards else self._take_front()

    def next_back(self) -> T:
        """Take the element at the opposite end from ``next()``."""
        return self._take_front() if self._backwards else self._take_back()

    def __reversed__(self) -> "IterAll[T]":
        return IterAll(
            self._domain, self._front, self._back, backwards=not self._backwards
        )

    def __repr__(self) -> str:
        direction = "backwards" if self._backwards else "forwards"
        return f"<IterAll {self._domain.name} [{self._front}, {self._back}) {direction}>"


def iter_all(key: Any) -> IterAll[Any]:
    """
    Enumerate every inhabitant of ``key``.

    ``key`` may be a :class:`Domain` or anything :func:`domain_of` resolves.

    ``len()`` of the result raises ``OverflowError`` when the domain has more
    than ``sys.maxsize`` inhabitants (``NONZERO_U64``, say); read
    :attr:`IterAll.remaining` instead, which is exact for every size.
    """
    from .registry import domain_of

    return IterAll(domain_of(key))
