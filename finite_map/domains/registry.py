"""
Resolution of Python types to finite domains.

Python cannot attach the bijection to ``bool`` or ``numpy.uint8`` directly,
so a registry maps such types to their domain objects. Composite types are
derived on first use from their annotations: tuples and records become
products, unions and enums become sums. ``@finite`` performs the derivation
when a class is defined so an oversized domain fails the ``class``
statement itself.
"""

from __future__ import annotations

import dataclasses
import enum
import ipaddress
import sys
import types
import typing
from typing import Any, Dict, Set, TypeVar

from loguru import logger

from ..exceptions import FiniteMapError, NotFiniteError
from .base import Domain
from .composite import ArrayDomain, EnumeratedDomain, ProductDomain, SumDomain, Variant
from .primitives import BOOL, EMPTY, IPV4, NUMPY_DOMAINS, UNIT
from .ranges import InRangeBounds

C = TypeVar("C", bound=type)

DOMAIN_ATTRIBUTE = "__finite_domain__"

_REGISTRY: Dict[Any, Domain[Any]] = {
    bool: BOOL,
    type(None): UNIT,
    ipaddress.IPv4Address: IPV4,
    **NUMPY_DOMAINS,
}
_CACHE: Dict[Any, Domain[Any]] = {}
_IN_PROGRESS: Set[int] = set()

_NEVER_TYPES: tuple[Any, ...] = (typing.NoReturn,)
if sys.version_info >= (3, 11):
    _NEVER_TYPES += (typing.Never,)

_UNION_TYPES: tuple[Any, ...] = (typing.Union,)
if hasattr(types, "UnionType"):
    _UNION_TYPES += (types.UnionType,)


def register(tp: Any, domain: Domain[Any]) -> Domain[Any]:
    """Attach ``domain`` to a type this package cannot derive on its own."""
    _REGISTRY[tp] = domain
    # Derived composites may embed the previous domain of tp.
    _CACHE.clear()
    logger.debug("Registered {} for {}", domain, _describe(tp))
    return domain


def domain_of(tp: Any) -> Domain[Any]:
    """
    Return the domain describing ``tp``.

    Accepts a :class:`Domain` (returned unchanged), ``None``, any registered
    type, ``Annotated[T, domain]``, ``Literal[...]``, ``Optional``/``Union``,
    fixed-size ``tuple[...]``, ``enum.Enum`` subclasses, ``InRange`` classes,
    ``Never``/``NoReturn``, dataclasses and ``NamedTuple`` classes.

    Raises
    ------
    NotFiniteError
        ``tp`` is unbounded, recursive or otherwise has no finite domain.
    CardinalityOverflowError
        The derived domain does not fit the configured index width.
    """
    if isinstance(tp, Domain):
        return tp
    if tp is None:
        return UNIT

    try:
        cached = _CACHE.get(tp)
    except TypeError:
        return _derive(tp)
    if cached is not None:
        return cached

    domain = _derive(tp)
    _CACHE[tp] = domain
    return domain


def _describe(tp: Any) -> str:
    return getattr(tp, "__qualname__", None) or repr(tp)


def _derive(tp: Any) -> Domain[Any]:
    try:
        registered = _REGISTRY.get(tp)
    except TypeError:
        registered = None
    if registered is not None:
        return registered
    if isinstance(tp, type) and DOMAIN_ATTRIBUTE in vars(tp):
        return vars(tp)[DOMAIN_ATTRIBUTE]
    if any(tp is never for never in _NEVER_TYPES):
        return EMPTY

    origin = typing.get_origin(tp)
    if origin is typing.Annotated:
        for extra in tp.__metadata__:
            if isinstance(extra, Domain):
                return extra
        return domain_of(typing.get_args(tp)[0])
    if origin is typing.Literal:
        return EnumeratedDomain(typing.get_args(tp), name=repr(tp))
    if origin in _UNION_TYPES:
        return _derive_union(tp)
    if origin is tuple:
        return _derive_tuple(tp)

    if isinstance(tp, type):
        return _derive_class(tp)
    raise NotFiniteError(f"{tp!r} has no finite domain")


def _derive_union(tp: Any) -> SumDomain:
    """
    Sum of the union's arguments in declaration order.

    ``Literal`` and ``None`` arguments only contribute values no earlier
    ``Literal`` or ``None`` argument listed, so ``Optional[Literal[None, 1]]``
    has two inhabitants rather than three.
    """
    variants: list[Variant] = []
    seen: Set[tuple[type, Any]] = set()
    for arg in typing.get_args(tp):
        if arg is type(None):
            values: tuple[Any, ...] = (None,)
        elif typing.get_origin(arg) is typing.Literal:
            values = typing.get_args(arg)
        else:
            variants.append(Variant(_describe(arg), domain_of(arg)))
            continue
        fresh = []
        for value in values:
            if (type(value), value) not in seen:
                seen.add((type(value), value))
                fresh.append(value)
        if fresh == [None]:
            variants.append(Variant(_describe(arg), UNIT))
        elif fresh:
            variants.append(Variant(_describe(arg), EnumeratedDomain(fresh)))
    return SumDomain(variants, name=repr(tp))


def _derive_tuple(tp: Any) -> Domain[Any]:
    args = typing.get_args(tp)
    if args == ((),):
        args = ()
    if len(args) == 2 and args[1] is Ellipsis:
        raise NotFiniteError(f"{tp!r} has no fixed length")
    fields = [domain_of(arg) for arg in args]
    if fields and all(field == fields[0] for field in fields):
        return ArrayDomain(fields[0], len(fields), name=repr(tp))
    return ProductDomain(fields, name=repr(tp))


def _derive_class(cls: type) -> Domain[Any]:
    if issubclass(cls, enum.Enum):
        return EnumeratedDomain(list(cls), name=cls.__qualname__)
    if issubclass(cls, InRangeBounds):
        if not hasattr(cls, "MIN"):
            raise NotFiniteError(f"{cls.__qualname__} needs bounds, e.g. {cls.__qualname__}[0, 10]")
        return vars(cls)[DOMAIN_ATTRIBUTE]
    if dataclasses.is_dataclass(cls) or (issubclass(cls, tuple) and hasattr(cls, "_fields")):
        return _derive_record(cls)
    raise NotFiniteError(f"{cls.__qualname__} has no finite domain")


def _record_fields(cls: type) -> list[str]:
    if dataclasses.is_dataclass(cls):
        fields = dataclasses.fields(cls)
        skipped = [field.name for field in fields if not field.init]
        if skipped:
            raise NotFiniteError(
                f"{cls.__qualname__} has fields outside __init__: {', '.join(skipped)}"
            )
        return [field.name for field in fields]
    return list(cls._fields)  # type: ignore[attr-defined]


def _derive_record(cls: type) -> ProductDomain:
    marker = id(cls)
    if marker in _IN_PROGRESS:
        raise NotFiniteError(f"{cls.__qualname__} is recursive")
    _IN_PROGRESS.add(marker)
    try:
        try:
            hints = typing.get_type_hints(cls, include_extras=True)
        except NameError as exc:
            raise NotFiniteError(f"Cannot resolve annotations of {cls.__qualname__}: {exc}") from exc
        names = _record_fields(cls)
        fields = [domain_of(hints[name]) for name in names]
    finally:
        _IN_PROGRESS.discard(marker)

    def build(*parts: Any) -> Any:
        return cls(**dict(zip(names, parts)))

    def unpack(value: Any) -> tuple[Any, ...]:
        return tuple(getattr(value, name) for name in names)

    def accepts(value: Any) -> bool:
        return type(value) is cls

    domain = ProductDomain(
        fields, build=build, unpack=unpack, accepts=accepts, name=cls.__qualname__
    )
    logger.debug("Derived {} with {} inhabitants", cls.__qualname__, domain.cardinality)
    return domain


def finite(cls: C) -> C:
    """
    Class decorator deriving and storing the class's domain immediately.

    Works for dataclasses (apply it above ``@dataclass``), ``NamedTuple``
    classes and ``enum.Enum`` subclasses. A class whose domain does not fit
    the index width raises ``CardinalityOverflowError`` at definition time.
    """
    try:
        domain = _derive_class(cls)
    except FiniteMapError:
        logger.warning("Rejected finite class {}", cls.__qualname__)
        raise
    setattr(cls, DOMAIN_ATTRIBUTE, domain)
    _CACHE.pop(cls, None)
    return cls

