"""
Decompiler Services.

Capability interfaces over the external decompilers, so classification and the
prepare pipeline can be exercised without the real binaries. jadx turns an APK
into Java sources and resources; hermes-dec turns Hermes bytecode into
pseudo-JavaScript.
"""

from __future__ import annotations

import shutil
import subprocess
import time
from abc import ABC, abstractmethod
from pathlib import Path

from ...core.config import Config, get_config
from ...core.exceptions import DecompileError, ToolNotFoundError
from ...core.logging import get_logger
from ...core.types import ServiceResult

logger = get_logger(__name__)


class NativeDecompiler(ABC):
    """Decompiles an application package into a directory tree."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the underlying tool can be run."""

    @abstractmethod
    def decompile(self, input_path: Path, output_dir: Path) -> ServiceResult[Path]:
        """Decompile input_path into output_dir; data is the manifest path."""


class BytecodeDecompiler(ABC):
    """Decompiles a Hermes bundle into a pseudo-source text file."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the underlying tool can be run."""

    @abstractmethod
    def decompile(self, input_path: Path, output_file: Path) -> ServiceResult[Path]:
        """Decompile input_path into output_file; data is the output file."""


class _ExternalTool:
    """Shared lookup and invocation for command-line decompilers."""

    tool_name = ""
    install_hint = ""

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or get_config()

    def _configured_path(self) -> Path | None:
        return None

    def _extra_locations(self) -> list[Path]:
        return []

    def find_tool(self) -> Path:
        """Find the tool: configured path, then extra locations, then PATH."""
        configured = self._configured_path()
        if configured and configured.exists():
            return configured

        for p in self._extra_locations():
            if p.exists():
                return p

        tool_path = shutil.which(self.tool_name)
        if tool_path:
            return Path(tool_path)

        raise ToolNotFoundError(
            message=f"Tool not found: {self.tool_name}",
            tool_name=self.tool_name,
            expected_path=str(configured) if configured else "PATH or configured location",
            install_hint=self.install_hint,
        )

    def is_available(self) -> bool:
        try:
            self.find_tool()
        except ToolNotFoundError:
            return False
        return True

    def _run(self, cmd: list[str]) -> subprocess.CompletedProcess[str]:
        logger.info("Running command", command=" ".join(cmd))
        try:
            return subprocess.run(
                cmd,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                timeout=self.config.tools.timeout_seconds,
            )
        except subprocess.TimeoutExpired as e:
            raise DecompileError(
                message=f"{self.tool_name} timed out after {self.config.tools.timeout_seconds}s",
                operation="decompile",
                tool_name=self.tool_name,
                cause=e,
            ) from e
        except OSError as e:
            raise DecompileError(
                message=f"Failed to start {self.tool_name}",
                operation="decompile",
                tool_name=self.tool_name,
                cause=e,
            ) from e


class JadxDecompiler(_ExternalTool, NativeDecompiler):
    """Native decompiler backed by jadx."""

    tool_name = "jadx"
    install_hint = "Install jadx (https://github.com/skylot/jadx) and add it to PATH"

    def _configured_path(self) -> Path | None:
        return self.config.tools.jadx_path

    def decompile(self, input_path: Path, output_dir: Path) -> ServiceResult[Path]:
        """Run jadx, keeping whatever it produced even on a non-zero exit.

        Args:
            input_path: APK to decompile
            output_dir: jadx output directory

        Returns:
            ServiceResult whose data is resources/AndroidManifest.xml
        """
        start_time = time.perf_counter()
        jadx = self.find_tool()
        cmd = [str(jadx), "-d", str(output_dir), "--show-bad-code", str(input_path)]

        try:
            completed = self._run(cmd)
        except DecompileError as e:
            return ServiceResult.fail(str(e), tool=self.tool_name)

        duration_ms = (time.perf_counter() - start_time) * 1000
        manifest = output_dir / "resources" / "AndroidManifest.xml"

        if not (output_dir / "sources").is_dir():
            error = DecompileError(
                message="jadx produced no sources directory",
                operation="decompile",
                tool_name=self.tool_name,
                returncode=completed.returncode,
                context={"stderr": completed.stderr[-500:]},
            )
            logger.error("jadx failed", returncode=completed.returncode)
            return ServiceResult.fail(str(error), tool=self.tool_name)

        warnings = []
        if completed.returncode != 0:
            # non-zero exit with sources present means partial decompilation
            warnings.append(f"jadx exited with code {completed.returncode}")
        result: ServiceResult[Path] = ServiceResult.with_warnings(manifest, warnings, tool=self.tool_name)
        result.duration_ms = duration_ms
        return result


class HermesDecDecompiler(_ExternalTool, BytecodeDecompiler):
    """Bytecode decompiler backed by hermes-dec's hbc-decompiler."""

    tool_name = "hbc-decompiler"
    install_hint = "pip install git+https://github.com/P1sec/hermes-dec"

    def _configured_path(self) -> Path | None:
        return self.config.tools.hbc_decompiler_path

    def _extra_locations(self) -> list[Path]:
        venv = self.config.tools.venv_dir
        return [venv / "bin" / self.tool_name] if venv else []

    def decompile(self, input_path: Path, output_file: Path) -> ServiceResult[Path]:
        """Run hbc-decompiler on a Hermes bundle.

        Args:
            input_path: Hermes bytecode bundle
            output_file: Pseudo-source destination

        Returns:
            ServiceResult whose data is output_file
        """
        start_time = time.perf_counter()
        hbc = self.find_tool()
        output_file.parent.mkdir(parents=True, exist_ok=True)

        try:
            completed = self._run([str(hbc), str(input_path), str(output_file)])
        except DecompileError as e:
            return ServiceResult.fail(str(e), tool=self.tool_name)

        if not output_file.is_file():
            error = DecompileError(
                message="hbc-decompiler produced no output",
                operation="decompile",
                tool_name=self.tool_name,
                returncode=completed.returncode,
                context={"stderr": completed.stderr[-500:]},
            )
            logger.error("hbc-decompiler failed", returncode=completed.returncode)
            return ServiceResult.fail(str(error), tool=self.tool_name)

        warnings = []
        if completed.returncode != 0:
            warnings.append(f"hbc-decompiler exited with code {completed.returncode}")
        result: ServiceResult[Path] = ServiceResult.with_warnings(output_file, warnings, tool=self.tool_name)
        result.duration_ms = (time.perf_counter() - start_time) * 1000
        return result
