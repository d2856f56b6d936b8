"""
Configuration management for hermesprobe.

Provides centralized, type-safe configuration with environment variable overrides
and sensible defaults. The bundle search order lives here as an explicit,
injectable structure so callers and tests can supply their own.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigError

# Load .env file if it exists (looks in cwd and parent directories)
load_dotenv()

DEFAULT_BUNDLE_DIRS: tuple[str, ...] = ("resources/assets", "resources", "assets")
DEFAULT_BUNDLE_NAMES: tuple[str, ...] = (
    "index.android.bundle",
    "index.bundle",
    "main.jsbundle",
    "index.js",
)


class SearchOrder(BaseModel):
    """Ordered bundle search locations, relative to the decompiled root."""

    directories: tuple[str, ...] = Field(
        default=DEFAULT_BUNDLE_DIRS, description="Directories checked first, in priority order"
    )
    names: tuple[str, ...] = Field(
        default=DEFAULT_BUNDLE_NAMES, description="Bundle file names, in priority order"
    )

    model_config = {"frozen": True}

    @field_validator("names")
    @classmethod
    def _names_not_empty(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            raise ValueError("at least one bundle name is required")
        return value


class SnifferConfig(BaseModel):
    """Bundle format sniffing configuration."""

    text_window: int = Field(
        default=100, ge=8, description="Bytes inspected by the plain-text heuristic"
    )
    describe_with_file: bool = Field(
        default=True, description="Ask file(1) to describe detected Hermes bundles"
    )


class ToolsConfig(BaseModel):
    """External decompiler configuration."""

    jadx_path: Path | None = Field(default=None, description="Custom jadx path")
    hbc_decompiler_path: Path | None = Field(default=None, description="Custom hbc-decompiler path")
    venv_dir: Path | None = Field(
        default=None, description="Virtualenv holding hermes-dec (its bin/ is searched)"
    )
    timeout_seconds: int = Field(default=1800, ge=1, description="Decompiler subprocess timeout")


class Config(BaseModel):
    """Root configuration for hermesprobe."""

    project_name: str = Field(default="hermesprobe", description="Project identifier")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING", description="Logging level"
    )
    search_order: SearchOrder = Field(default_factory=SearchOrder)
    sniffer: SnifferConfig = Field(default_factory=SnifferConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)

    model_config = {"extra": "ignore"}

    @classmethod
    def from_env(cls) -> Config:
        """Create configuration from environment variables.

        Raises:
            ConfigError: If a variable holds a value that fails validation
        """
        try:
            return cls(
                log_level=os.environ.get("HERMESPROBE_LOG_LEVEL", "WARNING").upper(),  # type: ignore
                search_order=SearchOrder(
                    directories=_split_env("HERMESPROBE_BUNDLE_DIRS") or DEFAULT_BUNDLE_DIRS,
                    names=_split_env("HERMESPROBE_BUNDLE_NAMES") or DEFAULT_BUNDLE_NAMES,
                ),
                sniffer=SnifferConfig(
                    text_window=_int_env("HERMESPROBE_TEXT_WINDOW", 100),
                    describe_with_file=os.environ.get("HERMESPROBE_DESCRIBE_WITH_FILE", "true").lower() == "true",
                ),
                tools=ToolsConfig(
                    jadx_path=_path_env("HERMESPROBE_JADX_PATH"),
                    hbc_decompiler_path=_path_env("HERMESPROBE_HBC_DECOMPILER_PATH"),
                    venv_dir=_path_env("HERMESPROBE_VENV_DIR"),
                    timeout_seconds=_int_env("HERMESPROBE_TOOL_TIMEOUT", 1800),
                ),
            )
        except ValidationError as e:
            details = "; ".join(
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise ConfigError(message=f"Invalid configuration: {details}", cause=e) from e


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(
            message=f"Invalid configuration: {name} must be an integer, got {raw!r}",
            variable=name,
            cause=e,
        ) from e


def _split_env(name: str) -> tuple[str, ...]:
    raw = os.environ.get(name, "")
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def _path_env(name: str) -> Path | None:
    raw = os.environ.get(name)
    return Path(raw).expanduser() if raw else None


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Get cached configuration instance."""
    return Config.from_env()
