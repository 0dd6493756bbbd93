"""
Bijections for elementary finite types.

Integers are encoded through their unsigned bit pattern, characters close
the UTF-16 surrogate gap, and 32-bit floats are indexed by their raw bits.
Every constant here is checked against the configured index width when the
module is imported.
"""

from __future__ import annotations

import ipaddress
from typing import Any, Callable, Hashable

import numpy as np

from .base import Domain, check_cardinality

CHAR_GAP_START = 0xD800
CHAR_GAP_END = 0xDFFF
CHAR_GAP_SIZE = CHAR_GAP_END - CHAR_GAP_START + 1
CHAR_LIMIT = 0x110000


def _is_scalar(value: object, scalar: type) -> bool:
    if scalar is int:
        return isinstance(value, int) and not isinstance(value, bool)
    return type(value) is scalar


class SingletonDomain(Domain[Any]):
    """A domain with exactly one inhabitant."""

    def __init__(self, value: Hashable, name: str | None = None) -> None:
        self._value = value
        self.name = name or repr(value)

    @property
    def value(self) -> Any:
        return self._value

    @property
    def cardinality(self) -> int:
        return 1

    def __contains__(self, value: object) -> bool:
        if value is self._value:
            return True
        return type(value) is type(self._value) and value == self._value

    def _index(self, value: Any) -> int:
        return 0

    def _unindex(self, i: int) -> Any:
        return self._value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SingletonDomain):
            return NotImplemented
        return self._value in other and other._value in self

    def __hash__(self) -> int:
        return hash((SingletonDomain, self._value))


class EmptyDomain(Domain[Any]):
    """The uninhabited domain; ``unindex`` never yields a value."""

    name = "empty"

    @property
    def cardinality(self) -> int:
        return 0

    def __contains__(self, value: object) -> bool:
        return False

    def _index(self, value: Any) -> int:  # pragma: no cover - unreachable
        raise AssertionError("the empty domain has no inhabitants")

    def _unindex(self, i: int) -> Any:  # pragma: no cover - unreachable
        raise AssertionError("the empty domain has no inhabitants")


class BoolDomain(Domain[Any]):
    """``False -> 0`` and ``True -> 1``."""

    def __init__(self, scalar: Callable[[int], Any] = bool, name: str = "bool") -> None:
        self._scalar = scalar
        self.name = name

    @property
    def cardinality(self) -> int:
        return 2

    def __contains__(self, value: object) -> bool:
        return type(value) is self._scalar

    def _index(self, value: Any) -> int:
        return int(bool(value))

    def _unindex(self, i: int) -> Any:
        return self._scalar(i)


class UnsignedDomain(Domain[Any]):
    """Fixed-width unsigned integer; the index is the value itself."""

    def __init__(self, bits: int, scalar: type = int, name: str | None = None) -> None:
        self.bits = bits
        self._scalar = scalar
        self._limit = check_cardinality(1 << bits, f"u{bits}")
        self.name = name or f"u{bits}"

    @property
    def cardinality(self) -> int:
        return self._limit

    def __contains__(self, value: object) -> bool:
        return _is_scalar(value, self._scalar) and 0 <= int(value) < self._limit  # type: ignore[call-overload]

    def _index(self, value: Any) -> int:
        return int(value)

    def _unindex(self, i: int) -> Any:
        return self._scalar(i)


class SignedDomain(Domain[Any]):
    """Fixed-width signed integer, indexed by its two's-complement bit pattern."""

    def __init__(self, bits: int, scalar: type = int, name: str | None = None) -> None:
        self.bits = bits
        self._scalar = scalar
        self._limit = check_cardinality(1 << bits, f"i{bits}")
        self._half = self._limit >> 1
        self.name = name or f"i{bits}"

    @property
    def cardinality(self) -> int:
        return self._limit

    def __contains__(self, value: object) -> bool:
        return _is_scalar(value, self._scalar) and -self._half <= int(value) < self._half  # type: ignore[call-overload]

    def _index(self, value: Any) -> int:
        return int(value) % self._limit

    def _unindex(self, i: int) -> Any:
        return self._scalar(i - self._limit if i >= self._half else i)


class NonZeroDomain(Domain[int]):
    """
    Fixed-width integer excluding zero.

    The index is the unsigned bit pattern minus one, so the all-zero pattern
    never has a position and ``unindex`` cannot reconstruct a zero.
    """

    def __init__(self, bits: int, *, signed: bool, name: str | None = None) -> None:
        self.bits = bits
        self.signed = signed
        self._modulus = 1 << bits
        self._half = self._modulus >> 1
        self.name = name or f"nonzero_{'i' if signed else 'u'}{bits}"
        self._cardinality = check_cardinality(self._modulus - 1, self.name)

    @property
    def cardinality(self) -> int:
        return self._cardinality

    def __contains__(self, value: object) -> bool:
        if not _is_scalar(value, int) or value == 0:
            return False
        if self.signed:
            return -self._half <= value < self._half  # type: ignore[operator]
        return 0 < value < self._modulus  # type: ignore[operator]

    def _index(self, value: int) -> int:
        return value % self._modulus - 1

    def _unindex(self, i: int) -> int:
        pattern = i + 1
        if self.signed and pattern >= self._half:
            return pattern - self._modulus
        return pattern


class CharDomain(Domain[str]):
    """Unicode scalar values; code points above the surrogate range shift down."""

    name = "char"

    @property
    def cardinality(self) -> int:
        return CHAR_LIMIT - CHAR_GAP_SIZE

    def __contains__(self, value: object) -> bool:
        if not isinstance(value, str) or len(value) != 1:
            return False
        return not CHAR_GAP_START <= ord(value) <= CHAR_GAP_END

    def _index(self, value: str) -> int:
        code_point = ord(value)
        if code_point > CHAR_GAP_END:
            code_point -= CHAR_GAP_SIZE
        return code_point

    def _unindex(self, i: int) -> str:
        if i >= CHAR_GAP_START:
            i += CHAR_GAP_SIZE
        return chr(i)


class Float32Domain(Domain[np.float32]):
    """
    IEEE-754 single precision, indexed by raw bit pattern.

    Distinct bit patterns are distinct inhabitants: ``0.0`` and ``-0.0`` get
    different indices, and so does every NaN payload. Round trips are
    bit-exact, not numeric.
    """

    name = "f32"

    def __init__(self) -> None:
        self._cardinality = check_cardinality(1 << 32, self.name)

    @property
    def cardinality(self) -> int:
        return self._cardinality

    def __contains__(self, value: object) -> bool:
        return type(value) is np.float32

    def _index(self, value: np.float32) -> int:
        return int(np.array(value, dtype=np.float32).view(np.uint32))

    def _unindex(self, i: int) -> np.float32:
        return np.array(i, dtype=np.uint32).view(np.float32)[()]


class IPv4Domain(Domain[ipaddress.IPv4Address]):
    """IPv4 addresses, indexed like the ``u32`` they wrap."""

    name = "ipv4"

    def __init__(self) -> None:
        self._cardinality = check_cardinality(1 << 32, self.name)

    @property
    def cardinality(self) -> int:
        return self._cardinality

    def __contains__(self, value: object) -> bool:
        return isinstance(value, ipaddress.IPv4Address)

    def _index(self, value: ipaddress.IPv4Address) -> int:
        return int(value)

    def _unindex(self, i: int) -> ipaddress.IPv4Address:
        return ipaddress.IPv4Address(i)


def singleton(value: Hashable, name: str | None = None) -> SingletonDomain:
    """Domain whose only inhabitant is ``value``."""
    return SingletonDomain(value, name)


UNIT = SingletonDomain(None, name="unit")
EMPTY = EmptyDomain()
BOOL = BoolDomain()

U8 = UnsignedDomain(8)
U16 = UnsignedDomain(16)
U32 = UnsignedDomain(32)
I8 = SignedDomain(8)
I16 = SignedDomain(16)
I32 = SignedDomain(32)

NONZERO_U8 = NonZeroDomain(8, signed=False)
NONZERO_U16 = NonZeroDomain(16, signed=False)
NONZERO_U32 = NonZeroDomain(32, signed=False)
NONZERO_U64 = NonZeroDomain(64, signed=False)
NONZERO_USIZE = NonZeroDomain(64, signed=False, name="nonzero_usize")
NONZERO_I8 = NonZeroDomain(8, signed=True)
NONZERO_I16 = NonZeroDomain(16, signed=True)
NONZERO_I32 = NonZeroDomain(32, signed=True)
NONZERO_I64 = NonZeroDomain(64, signed=True)
NONZERO_ISIZE = NonZeroDomain(64, signed=True, name="nonzero_isize")

CHAR = CharDomain()
F32 = Float32Domain()
IPV4 = IPv4Domain()

NUMPY_DOMAINS: dict[type, Domain[Any]] = {
    np.bool_: BoolDomain(np.bool_, name="numpy.bool_"),
    np.uint8: UnsignedDomain(8, np.uint8, name="numpy.uint8"),
    np.uint16: UnsignedDomain(16, np.uint16, name="numpy.uint16"),
    np.uint32: UnsignedDomain(32, np.uint32, name="numpy.uint32"),
    np.int8: SignedDomain(8, np.int8, name="numpy.int8"),
    np.int16: SignedDomain(16, np.int16, name="numpy.int16"),
    np.int32: SignedDomain(32, np.int32, name="numpy.int32"),
    np.float32: F32,
}
