"""
Result type returned by the external decompiler wrappers.

A decompiler run can succeed, succeed partially, or fail without the
prepare pipeline aborting, so failures travel as values here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """Outcome of one external tool run.

    ``data`` holds the produced artifact on success. ``warnings`` collects
    non-fatal problems such as a non-zero exit that still left usable output.
    """

    success: bool
    data: T | None = None
    error: str | None = None
    warnings: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    duration_ms: float = 0.0

    @classmethod
    def ok(cls, data: T, **metadata: Any) -> ServiceResult[T]:
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def fail(cls, error: str, **metadata: Any) -> ServiceResult[T]:
        return cls(success=False, error=error, metadata=metadata)

    @classmethod
    def with_warnings(cls, data: T, warnings: list[str], **metadata: Any) -> ServiceResult[T]:
        return cls(success=True, data=data, warnings=list(warnings), metadata=metadata)

    def notes(self, label: str) -> list[str]:
        """Human-readable report notes: warnings, then ``"<label> failed: <error>"``."""
        notes = list(self.warnings)
        if not self.success:
            notes.append(f"{label} failed: {self.error}")
        return notes
