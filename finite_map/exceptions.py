"""Exception types raised by domains and total maps."""

from __future__ import annotations

from typing import Any, Sequence


class FiniteMapError(Exception):
    """Base class for every error raised by the package."""


class CardinalityOverflowError(FiniteMapError, OverflowError):
    """A domain has more inhabitants than the configured index width can count."""

    def __init__(self, what: str, limit: int) -> None:
        super().__init__(f"{what} has more than {limit} inhabitants")
        self.what = what
        self.limit = limit


class NotFiniteError(FiniteMapError, TypeError):
    """The type has no finite domain (unbounded, recursive or unregistered)."""


class AmbiguousVariantError(FiniteMapError, TypeError):
    """Two variants of a sum share an inhabitant, so it would have two indices."""

    def __init__(self, value: Any, first: str, second: str, domain: str) -> None:
        super().__init__(
            f"{value!r} inhabits both {first} and {second} in {domain}"
        )
        self.value = value
        self.first = first
        self.second = second


class NotInDomainError(FiniteMapError, ValueError):
    """A value was indexed against a domain it does not inhabit."""

    def __init__(self, value: Any, domain: Any) -> None:
        super().__init__(f"{value!r} is not an inhabitant of {domain!r}")
        self.value = value
        self.domain = domain


class LengthMismatchError(FiniteMapError, ValueError):
    """A backing sequence does not have exactly one slot per key."""

    def __init__(self, rejected: Sequence[Any], expected: int) -> None:
        try:
            actual = str(len(rejected))
        except TypeError:
            actual = "an unsized value"
        super().__init__(f"Expected a sequence of length {expected}, got {actual}.")
        self.rejected = rejected
        self.expected = expected


class MissingKeyError(FiniteMapError, KeyError):
    """An associative map lacks at least one key of the domain."""

    def __init__(self, key: Any) -> None:
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Key {self.key!r} missing from mapping"


class AbsentValueError(FiniteMapError, ValueError):
    """An optional-valued map still holds `None` in some slot."""

    def __init__(self, total_map: Any, key: Any) -> None:
        super().__init__(f"Value for key {key!r} is absent")
        self.map = total_map
        self.key = key


class UninitializedSlotError(FiniteMapError, ValueError):
    """Finalising a two-phase build found slots that were never written."""

    def __init__(self, missing: Sequence[Any]) -> None:
        preview = ", ".join(repr(key) for key in missing[:5])
        more = "" if len(missing) <= 5 else f" (+{len(missing) - 5} more)"
        super().__init__(f"{len(missing)} slot(s) never written: {preview}{more}")
        self.missing = missing


class MapConstructionError(FiniteMapError):
    """The value generator failed while building a total map."""

    def __init__(self, key: Any, position: int) -> None:
        super().__init__(f"Generator failed for key {key!r} at position {position}")
        self.key = key
        self.position = position
