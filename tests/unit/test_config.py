"""Unit tests for configuration and shared core types."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from hermesprobe.core.config import (
    DEFAULT_BUNDLE_DIRS,
    DEFAULT_BUNDLE_NAMES,
    Config,
    SnifferConfig,
    get_config,
)
from hermesprobe.core.exceptions import ConfigError, DecompileError, DirectoryNotFoundError, ToolNotFoundError
from hermesprobe.core.types import ServiceResult


class TestConfig:
    """Tests for environment-driven configuration."""

    def test_defaults(self, monkeypatch):
        for name in ("HERMESPROBE_BUNDLE_DIRS", "HERMESPROBE_BUNDLE_NAMES", "HERMESPROBE_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        config = Config.from_env()
        assert config.search_order.directories == DEFAULT_BUNDLE_DIRS
        assert config.search_order.names == DEFAULT_BUNDLE_NAMES
        assert config.log_level == "WARNING"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("HERMESPROBE_BUNDLE_DIRS", "custom/assets, other")
        monkeypatch.setenv("HERMESPROBE_BUNDLE_NAMES", "app.hbc")
        monkeypatch.setenv("HERMESPROBE_LOG_LEVEL", "debug")
        monkeypatch.setenv("HERMESPROBE_TEXT_WINDOW", "256")
        monkeypatch.setenv("HERMESPROBE_DESCRIBE_WITH_FILE", "false")
        monkeypatch.setenv("HERMESPROBE_JADX_PATH", "/opt/jadx/bin/jadx")

        config = get_config()
        assert config.search_order.directories == ("custom/assets", "other")
        assert config.search_order.names == ("app.hbc",)
        assert config.log_level == "DEBUG"
        assert config.sniffer.text_window == 256
        assert not config.sniffer.describe_with_file
        assert config.tools.jadx_path == Path("/opt/jadx/bin/jadx")

    def test_get_config_is_cached(self):
        assert get_config() is get_config()

    @pytest.mark.parametrize(
        "name, value, fragment",
        [
            ("HERMESPROBE_TEXT_WINDOW", "4", "text_window"),
            ("HERMESPROBE_TEXT_WINDOW", "wide", "HERMESPROBE_TEXT_WINDOW must be an integer"),
            ("HERMESPROBE_LOG_LEVEL", "verbose", "log_level"),
            ("HERMESPROBE_TOOL_TIMEOUT", "0", "timeout_seconds"),
        ],
    )
    def test_invalid_env_raises_config_error(self, monkeypatch, name, value, fragment):
        monkeypatch.setenv(name, value)
        with pytest.raises(ConfigError) as exc_info:
            Config.from_env()
        assert exc_info.value.message.startswith("Invalid configuration: ")
        assert fragment in exc_info.value.message

    def test_text_window_lower_bound(self):
        with pytest.raises(ValidationError):
            SnifferConfig(text_window=4)


class TestExceptions:
    """Tests for exception formatting."""

    def test_context_and_cause_in_str(self):
        error = DirectoryNotFoundError(
            message="Directory not found: /x",
            path="/x",
            context={"step": "locate"},
            cause=OSError("gone"),
        )
        assert str(error) == "Directory not found: /x | context: {'step': 'locate'} | caused by: gone"

    def test_decompile_error_service_name(self):
        error = DecompileError(message="failed", operation="decompile", tool_name="jadx")
        assert error.service_name == "decompiler"
        assert str(error).startswith("[decompiler.decompile]")

    def test_tool_not_found_hint(self):
        error = ToolNotFoundError(message="x", tool_name="jadx", expected_path="PATH", install_hint="brew install jadx")
        assert str(error) == "Tool 'jadx' not found at 'PATH'. Install hint: brew install jadx"


class TestServiceResult:
    def test_constructors(self):
        ok = ServiceResult.ok(Path("/a"), tool="jadx")
        assert ok.success and ok.data == Path("/a") and ok.metadata == {"tool": "jadx"}
        fail = ServiceResult.fail("nope")
        assert not fail.success and fail.error == "nope" and fail.data is None
        warned = ServiceResult.with_warnings(1, ["careful"])
        assert warned.success and warned.warnings == ["careful"]

    def test_notes_for_report(self):
        assert ServiceResult.with_warnings(1, ["jadx exited with code 1"]).notes("jadx") == ["jadx exited with code 1"]
        assert ServiceResult.fail("boom").notes("hbc-decompiler") == ["hbc-decompiler failed: boom"]
