"""Test configuration for hermesprobe."""

import pytest
import tempfile
from pathlib import Path

from hermesprobe.core.config import get_config
from hermesprobe.core.logging import setup_logging

HERMES_HEADER = bytes.fromhex("c61fbc0300000047") + b"\x00" * 56


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """Route structlog through the standard library for the whole session."""
    setup_logging()


@pytest.fixture(autouse=True)
def fresh_config():
    """Drop the cached configuration so environment overrides apply per test."""
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests.

    Yields:
        Path: A Path object pointing to the temporary directory.
            The directory is automatically cleaned up after the test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def hermes_bytes():
    """Minimal Hermes bytecode header followed by padding.

    Returns:
        bytes: Magic C6 1F BC 03, version descriptor 00 00 00 47, then zeros.
    """
    return HERMES_HEADER


@pytest.fixture
def make_tree(temp_dir):
    """Build a fake decompiled application tree.

    Returns:
        Callable taking a mapping of relative path to bytes and returning
        the root directory.
    """
    def _make(files):
        root = temp_dir / "app-decompiled"
        root.mkdir(exist_ok=True)
        for rel, content in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        return root

    return _make
