"""Configuration loading and the package-wide settings."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from loguru import logger

from .log import configure_logging

MIN_INDEX_BITS = 8
MAX_INDEX_BITS = 64

DEFAULT_CONFIG_PATH = Path("configs/default.yaml")


def load_config(config_path: Path) -> Mapping[str, Any]:
    """
    Parse a YAML configuration file into a nested mapping.

    An empty file yields an empty mapping so callers can rely on defaults.
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def get_by_dotted_path(config: Mapping[str, Any], dotted_key: str, default: Any = None) -> Any:
    """
    Fetch a value from a nested mapping using dotted-path syntax.

    Examples
    --------
    >>> get_by_dotted_path({"domains": {"index_bits": 32}}, "domains.index_bits")
    32
    """
    current: Any = config
    for key in dotted_key.split("."):
        if not isinstance(current, Mapping) or key not in current:
            return default
        current = current[key]
    return current


@dataclass(frozen=True)
class Settings:
    """
    Package-wide knobs.

    Parameters
    ----------
    index_bits:
        Width of the unsigned integer used for indices. A domain may have at
        most ``2 ** index_bits - 1`` inhabitants.
    log_level:
        Level handed to :func:`finite_map.utils.log.configure_logging` by
        :func:`configure`. ``None`` leaves logging as it is.
    """

    index_bits: int = 64
    log_level: Optional[str] = None

    def __post_init__(self) -> None:
        if not MIN_INDEX_BITS <= self.index_bits <= MAX_INDEX_BITS:
            raise ValueError(
                f"index_bits must be between {MIN_INDEX_BITS} and {MAX_INDEX_BITS}, "
                f"got {self.index_bits}."
            )

    @property
    def max_cardinality(self) -> int:
        return (1 << self.index_bits) - 1

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "Settings":
        level = get_by_dotted_path(config, "logging.level")
        return cls(
            index_bits=int(get_by_dotted_path(config, "domains.index_bits", 64)),
            log_level=None if level is None else str(level).upper(),
        )


_active_settings = Settings()


def get_settings() -> Settings:
    """Return the settings currently in effect."""
    return _active_settings


def configure(settings: Settings) -> Settings:
    """
    Install ``settings`` and return the previous ones.

    A ``log_level`` enables the package's logging at that level. Domains
    already constructed keep the bound they were checked against.
    """
    global _active_settings
    previous = _active_settings
    _active_settings = settings
    if settings.log_level is not None:
        configure_logging(settings.log_level)
    logger.debug(
        "Settings updated | index_bits={} log_level={}",
        settings.index_bits,
        settings.log_level,
    )
    return previous


def load_settings(config_path: Path = DEFAULT_CONFIG_PATH) -> Settings:
    """Read a YAML file and build :class:`Settings` from it."""
    return Settings.from_mapping(load_config(config_path))
