"""
Custom exception hierarchy for hermesprobe.

All exceptions inherit from HermesProbeError so the CLI can turn any of them
into a single error line. Each exception carries context for debugging and logging.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class HermesProbeError(Exception):
    """Base exception for all hermesprobe errors."""

    message: str
    context: dict[str, Any] = field(default_factory=dict)
    cause: Exception | None = None

    def __str__(self) -> str:
        ctx = f" | context: {self.context}" if self.context else ""
        cause = f" | caused by: {self.cause}" if self.cause else ""
        return f"{self.message}{ctx}{cause}"


@dataclass
class ConfigError(HermesProbeError):
    """Raised when environment configuration cannot be parsed or validated."""

    variable: str = ""


@dataclass
class DirectoryNotFoundError(HermesProbeError):
    """Raised when a decompiled-application directory does not exist."""

    path: str = ""


@dataclass
class InputNotFoundError(HermesProbeError):
    """Raised when an input file does not exist."""

    path: str = ""


@dataclass
class EmptyOrUnreadableError(HermesProbeError):
    """Raised when a bundle cannot be opened or has zero length."""

    path: str = ""


@dataclass
class ExtractionError(HermesProbeError):
    """Raised when a base APK cannot be extracted from an application package."""

    input_path: str = ""


@dataclass
class ServiceError(HermesProbeError):
    """Raised when a service operation fails."""

    service_name: str = ""
    operation: str = ""

    def __str__(self) -> str:
        base = super().__str__()
        return f"[{self.service_name}.{self.operation}]: {base}"


@dataclass
class DecompileError(ServiceError):
    """Raised when an external decompiler fails."""

    tool_name: str = ""
    returncode: int | None = None

    def __post_init__(self) -> None:
        self.service_name = "decompiler"


@dataclass
class ToolNotFoundError(HermesProbeError):
    """Raised when a required external tool is not available."""

    tool_name: str = ""
    expected_path: str = ""
    install_hint: str = ""

    def __str__(self) -> str:
        hint = f" Install hint: {self.install_hint}" if self.install_hint else ""
        return f"Tool '{self.tool_name}' not found at '{self.expected_path}'.{hint}"
