"""Core infrastructure components for hermesprobe."""

from .config import Config, SearchOrder, get_config
from .exceptions import (
    ConfigError,
    DecompileError,
    DirectoryNotFoundError,
    EmptyOrUnreadableError,
    ExtractionError,
    HermesProbeError,
    InputNotFoundError,
    ServiceError,
    ToolNotFoundError,
)
from .logging import get_logger, setup_logging
from .types import ServiceResult

__all__ = [
    "Config",
    "SearchOrder",
    "get_config",
    "ConfigError",
    "DecompileError",
    "DirectoryNotFoundError",
    "EmptyOrUnreadableError",
    "ExtractionError",
    "HermesProbeError",
    "InputNotFoundError",
    "ServiceError",
    "ToolNotFoundError",
    "get_logger",
    "setup_logging",
    "ServiceResult",
]
