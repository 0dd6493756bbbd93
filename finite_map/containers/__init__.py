"""Containers keyed by finite domains."""

from .total_map import TotalMap  # noqa: F401
from .uninit import UninitMap  # noqa: F401
