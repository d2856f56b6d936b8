"""
Bundle-related data models.

These models describe where a JavaScript bundle was found inside a decompiled
application, which binary signatures identify bundle formats, and the
classification produced for a single bundle.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, field_validator


class BundleFormat(str, Enum):
    """Formats a bundle can be classified as."""

    HERMES = "hermes"
    PLAIN_JS = "plain_js"
    UNKNOWN = "unknown"


class CandidateSource(str, Enum):
    """How a bundle candidate was discovered."""

    CONVENTIONAL = "conventional"
    RECURSIVE = "recursive"


class BundleCandidate(BaseModel):
    """A bundle file found under a decompiled application directory."""

    path: Path = Field(description="Location of the bundle file")
    rank: int = Field(ge=0, description="Discovery priority, 0 is most preferred")
    source: CandidateSource = Field(description="Search phase that found the file")

    model_config = {"frozen": True}


class SignatureRule(BaseModel):
    """Exact-match byte prefix identifying a bundle format."""

    name: str = Field(description="Human-readable rule name")
    magic: bytes = Field(min_length=1, description="Raw bytes expected at the offset")
    offset: int = Field(default=0, ge=0, description="Where the magic starts")
    format: BundleFormat = Field(description="Format identified by this rule")
    version_offset: int | None = Field(default=None, ge=0)
    version_length: int | None = Field(default=None, ge=1)

    model_config = {"frozen": True}

    @property
    def header_length(self) -> int:
        """Bytes needed to evaluate the rule and extract its version field."""
        end = self.offset + len(self.magic)
        if self.version_offset is not None and self.version_length is not None:
            end = max(end, self.version_offset + self.version_length)
        return end

    def matches(self, header: bytes) -> bool:
        """Check the magic against raw header bytes, never a numeric reading."""
        return header[self.offset:self.offset + len(self.magic)] == self.magic

    def version_field(self, header: bytes) -> bytes:
        """Return the opaque version descriptor bytes, or b"" when undefined."""
        if self.version_offset is None or self.version_length is None:
            return b""
        return header[self.version_offset:self.version_offset + self.version_length]


HERMES_MAGIC = bytes.fromhex("c61fbc03")

HERMES_SIGNATURE = SignatureRule(
    name="hermes-bytecode",
    magic=HERMES_MAGIC,
    offset=0,
    format=BundleFormat.HERMES,
    version_offset=4,
    version_length=4,
)

DEFAULT_SIGNATURES: tuple[SignatureRule, ...] = (HERMES_SIGNATURE,)


class _ClassifiedBundle(BaseModel):
    path: Path = Field(description="Absolute path of the classified bundle")
    size_bytes: int = Field(ge=1, description="Bundle size at read time")
    magic: bytes = Field(description="First bytes of the file, up to four")

    model_config = {"frozen": True, "ser_json_bytes": "base64"}

    @field_validator("path")
    @classmethod
    def _require_absolute(cls, value: Path) -> Path:
        if not value.is_absolute():
            raise ValueError(f"bundle path must be absolute: {value}")
        return value

    @property
    def magic_hex(self) -> str:
        return self.magic.hex()


class HermesBundle(_ClassifiedBundle):
    """Hermes bytecode bundle."""

    format: Literal[BundleFormat.HERMES] = BundleFormat.HERMES
    version_descriptor: bytes = Field(description="Raw header bytes 4..8, not decoded")

    @property
    def machine_token(self) -> str:
        return "HERMES"

    @property
    def version_hex(self) -> str:
        return self.version_descriptor.hex()


class PlainJsBundle(_ClassifiedBundle):
    """Bundle that looks like readable JavaScript source."""

    format: Literal[BundleFormat.PLAIN_JS] = BundleFormat.PLAIN_JS

    @property
    def machine_token(self) -> str:
        return "PLAINJS"


class UnknownBundle(_ClassifiedBundle):
    """Bundle matching no signature and no text heuristic.

    Reported downstream as plain JavaScript, handled best-effort.
    """

    format: Literal[BundleFormat.UNKNOWN] = BundleFormat.UNKNOWN
    raw_header: bytes = Field(description="Leading bytes kept for diagnostics")

    @property
    def machine_token(self) -> str:
        return "PLAINJS"


ClassificationResult = Annotated[
    Union[HermesBundle, PlainJsBundle, UnknownBundle],
    Field(discriminator="format"),
]


class Report(BaseModel):
    """Formatted classification: one machine token plus free-form diagnostics."""

    machine_line: str = Field(description="HERMES:<path>, PLAINJS:<path> or NONE")
    human_lines: tuple[str, ...] = Field(default_factory=tuple)

    model_config = {"frozen": True}
