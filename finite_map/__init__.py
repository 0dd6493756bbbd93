"""
Total maps over finite domains.

A finite domain assigns every value of a type a unique index in
``range(cardinality)``; :class:`TotalMap` uses that index to hold exactly one
value per key in a dense list. Modules are grouped into ``domains`` (the
bijections), ``containers`` (the maps) and ``utils`` (configuration and
logging).
"""

from loguru import logger

from .containers import TotalMap, UninitMap  # noqa: F401
from .domains import (  # noqa: F401
    ABSENT,
    Domain,
    InRange,
    InRangeInclusive,
    IterAll,
    domain_of,
    finite,
    iter_all,
    register,
)
from .exceptions import (  # noqa: F401
    AbsentValueError,
    AmbiguousVariantError,
    CardinalityOverflowError,
    FiniteMapError,
    LengthMismatchError,
    MapConstructionError,
    MissingKeyError,
    NotFiniteError,
    NotInDomainError,
    UninitializedSlotError,
)

logger.disable(__name__)

__version__ = "0.1.0"
