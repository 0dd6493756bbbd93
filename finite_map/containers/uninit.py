"""
Two-phase construction of a total map without a default value.

An :class:`UninitMap` starts with no slot written. The caller fills slots by
key or by position, then finalises with :meth:`UninitMap.assume_init`,
which consults a per-slot bitmap and refuses to produce a map with holes.
:meth:`UninitMap.assume_init_unchecked` skips that check; the caller then
vouches that every slot was written, and any slot that was not holds
``None``.
"""

from __future__ import annotations

import operator
from typing import Any, Generic, TypeVar

import numpy as np
from loguru import logger

from ..domains import Domain, domain_of
from ..exceptions import NotInDomainError, UninitializedSlotError
from .total_map import TotalMap

K = TypeVar("K")
V = TypeVar("V")


class UninitMap(Generic[K, V]):
    """Write-once-per-slot builder for :class:`TotalMap`."""

    __slots__ = ("_domain", "_slots", "_written", "_finalised")

    def __init__(self, key: Any) -> None:
        domain = domain_of(key)
        self._domain: Domain[K] = domain
        self._slots: list[Any] = [None] * domain.cardinality
        self._written = np.zeros(domain.cardinality, dtype=bool)
        self._finalised = False

    @property
    def domain(self) -> Domain[K]:
        return self._domain

    def __len__(self) -> int:
        return len(self._written)

    def _ensure_open(self) -> None:
        if self._finalised:
            raise RuntimeError("This builder has already produced its map.")

    def _position(self, key: K) -> int:
        try:
            return self._domain.index(key)
        except NotInDomainError as exc:
            raise KeyError(key) from exc

    def write_index(self, position: int, value: V) -> None:
        """Write the slot at ``position``; it must lie in ``range(len(self))``."""
        self._ensure_open()
        position = operator.index(position)
        if not 0 <= position < len(self._written):
            raise IndexError(f"Position {position} out of range for {self._domain.name}")
        self._slots[position] = value
        self._written[position] = True

    def write(self, key: K, value: V) -> None:
        self.write_index(self._position(key), value)

    __setitem__ = write

    def __getitem__(self, key: K) -> V:
        position = self._position(key)
        if not self._written[position]:
            raise UninitializedSlotError([key])
        return self._slots[position]

    def is_initialized(self, key: K) -> bool:
        return bool(self._written[self._position(key)])

    @property
    def written_count(self) -> int:
        return int(np.count_nonzero(self._written))

    def missing_keys(self) -> list[K]:
        """Keys whose slots were never written, in index order."""
        return [self._domain.unindex(int(i)) for i in np.flatnonzero(~self._written)]

    def assume_init(self) -> TotalMap[K, V]:
        """
        Finalise into a :class:`TotalMap`.

        Raises :class:`UninitializedSlotError` listing the unwritten keys when
        any slot is still empty; the builder stays usable in that case.
        """
        self._ensure_open()
        if not self._written.all():
            missing = self.missing_keys()
            logger.warning(
                "Refusing to finalise {}: {} slot(s) unwritten", self._domain.name, len(missing)
            )
            raise UninitializedSlotError(missing)
        return self._finish()

    def assume_init_unchecked(self) -> TotalMap[K, V]:
        """
        Finalise without consulting the bitmap.

        The caller guarantees every slot was written. Nothing verifies it.
        """
        self._ensure_open()
        logger.debug("Finalising {} without slot checks", self._domain.name)
        return self._finish()

    def _finish(self) -> TotalMap[K, V]:
        self._finalised = True
        slots, self._slots = self._slots, []
        return TotalMap._wrap(self._domain, slots)

    def __repr__(self) -> str:
        return (
            f"<UninitMap {self._domain.name} "
            f"{self.written_count}/{len(self._written)} written>"
        )
