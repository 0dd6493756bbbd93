"""Utility helpers shared across modules."""

from .config import (  # noqa: F401
    DEFAULT_CONFIG_PATH,
    Settings,
    configure,
    get_by_dotted_path,
    get_settings,
    load_config,
    load_settings,
)
from .log import configure_logging, disable_logging  # noqa: F401
