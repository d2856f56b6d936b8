"""
Reporter Service.

Turns a classification into one deterministic machine-readable token plus
free-form diagnostic lines for humans.
"""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

from ...core.logging import get_logger
from ...models.bundle import (
    ClassificationResult,
    HermesBundle,
    PlainJsBundle,
    Report,
    UnknownBundle,
)

logger = get_logger(__name__)

NONE_TOKEN = "NONE"


def format_report(
    result: ClassificationResult | None,
    search_root: Path | None = None,
    file_description: str | None = None,
) -> Report:
    """Format a classification for output.

    Args:
        result: Classification, or None when no bundle was located
        search_root: Directory that was searched, used in the NONE diagnostic
        file_description: Optional file(1) output shown for Hermes bundles

    Returns:
        Report with the machine line and the human-readable lines
    """
    if result is None:
        where = f" in {search_root}" if search_root is not None else ""
        return Report(
            machine_line=NONE_TOKEN,
            human_lines=(f"No JavaScript bundle found{where}",),
        )

    human = [f"Found bundle: {result.path} ({result.size_bytes} bytes)"]
    if isinstance(result, HermesBundle):
        human.append(
            f"Hermes bytecode detected (magic: {result.magic_hex}, "
            f"version bytes: {result.version_hex})"
        )
        if file_description:
            human.append(f"file(1): {file_description}")
    elif isinstance(result, PlainJsBundle):
        human.append("Plain JavaScript bundle detected")
    elif isinstance(result, UnknownBundle):
        human.append(f"Unknown bundle format (magic: {result.magic_hex})")

    return Report(
        machine_line=f"{result.machine_token}:{result.path}",
        human_lines=tuple(human),
    )


def describe_file_type(path: Path, timeout: float = 10.0) -> str | None:
    """Ask the OS file(1) utility to describe a file, if it is installed."""
    file_cmd = shutil.which("file")
    if not file_cmd:
        return None
    try:
        result = subprocess.run(
            [file_cmd, "-b", str(path)],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug("file(1) unavailable", error=str(e))
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None
