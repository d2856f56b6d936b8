"""
Prepare Pipeline Service.

One-shot run of the mechanical steps: resolve the base APK, decompile it,
detect and decompile the JS bundle, then scan the native sources. Steps whose
output already exists are skipped so an interrupted run can be resumed.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from ...core.config import Config, get_config
from ...core.exceptions import EmptyOrUnreadableError
from ...core.logging import bind_context, clear_context, get_logger
from ...models.bundle import HermesBundle
from ...models.scan import ScanSection
from ..decompilers.service import BytecodeDecompiler, NativeDecompiler
from ..extraction.service import default_extract_dir, extract_base_apk
from ..locator.service import BundleLocator
from ..reporter.service import NONE_TOKEN, format_report
from ..scanner.service import scan_sources
from ..sniffer.service import FormatSniffer

logger = get_logger(__name__)


class PrepareReport(BaseModel):
    """Everything downstream tooling needs after the mechanical steps."""

    base_apk: Path
    decompiled_dir: Path
    manifest: Path
    js_file: str = Field(default=NONE_TOKEN, description="Readable JS path, or NONE")
    bundle_token: str = Field(default=NONE_TOKEN, description="Machine line from detection")
    sources_found: bool = True
    sections: list[ScanSection] = Field(default_factory=list)
    cleanup_dirs: list[Path] = Field(default_factory=list)
    notes: list[str] = Field(default_factory=list)

    def render(self) -> list[str]:
        """Render the REPORT block."""
        rule = "=" * 40
        lines = [
            rule,
            "REPORT",
            rule,
            f"DECOMPILED_DIR={self.decompiled_dir}",
            f"MANIFEST={self.manifest}",
            f"JS_FILE={self.js_file}",
            "",
        ]
        if not self.sources_found:
            lines.append(f"WARNING: No sources directory found at {self.decompiled_dir / 'sources'}")
            lines.append("jadx may have failed. Check the decompiled directory.")
            lines.append("")
        for section in self.sections:
            lines.extend(section.render())
            lines.append("")
        lines.append("--- CLEANUP ---")
        lines.extend(str(d) for d in self.cleanup_dirs if d.is_dir())
        lines.extend(["", rule, "DONE", rule])
        return lines


class PreparePipeline:
    """Run extraction, decompilation, bundle detection and source scanning."""

    def __init__(
        self,
        native: NativeDecompiler,
        bytecode: BytecodeDecompiler,
        locator: BundleLocator | None = None,
        sniffer: FormatSniffer | None = None,
        config: Config | None = None,
    ) -> None:
        self.config = config or get_config()
        self.native = native
        self.bytecode = bytecode
        self.locator = locator or BundleLocator(self.config.search_order)
        self.sniffer = sniffer or FormatSniffer(text_window=self.config.sniffer.text_window)

    def run(self, input_path: Path, work_dir: Path) -> PrepareReport:
        """Run the pipeline for one application package.

        Args:
            input_path: .apk, .apkm or .xapk
            work_dir: Where <stem>-decompiled and <stem>-decompiled-js are created

        Returns:
            PrepareReport

        Raises:
            InputNotFoundError: If input_path does not exist
            ExtractionError: If no base APK can be resolved
            ToolNotFoundError: If a Hermes bundle needs a missing hbc-decompiler
        """
        stem = input_path.stem
        bind_context(input=str(input_path))
        try:
            cleanup: list[Path] = []
            base_apk = extract_base_apk(input_path)
            if input_path.suffix.lower() in (".apkm", ".xapk"):
                cleanup.append(default_extract_dir(input_path.resolve()))

            decompiled_dir = (work_dir / f"{stem}-decompiled").resolve()
            cleanup.append(decompiled_dir)
            manifest = decompiled_dir / "resources" / "AndroidManifest.xml"
            notes: list[str] = []

            if (decompiled_dir / "sources").is_dir():
                logger.info("Skipping native decompilation, output exists", path=str(decompiled_dir))
                notes.append(f"Skipped jadx decompilation (already exists: {decompiled_dir})")
            else:
                result = self.native.decompile(base_apk, decompiled_dir)
                if not result.success:
                    logger.warning("Native decompilation failed", error=result.error)
                notes.extend(result.notes("jadx"))

            js_file, token = self._handle_bundle(decompiled_dir, work_dir, stem, cleanup, notes)

            sources = decompiled_dir / "sources"
            sections = scan_sources(sources) if sources.is_dir() else []

            return PrepareReport(
                base_apk=base_apk,
                decompiled_dir=decompiled_dir,
                manifest=manifest,
                js_file=js_file,
                bundle_token=token,
                sources_found=sources.is_dir(),
                sections=sections,
                cleanup_dirs=cleanup,
                notes=notes,
            )
        finally:
            clear_context()

    def _handle_bundle(
        self,
        decompiled_dir: Path,
        work_dir: Path,
        stem: str,
        cleanup: list[Path],
        notes: list[str],
    ) -> tuple[str, str]:
        if not decompiled_dir.is_dir():
            return NONE_TOKEN, NONE_TOKEN

        candidate = self.locator.locate(decompiled_dir)
        if candidate is None:
            notes.append("No JavaScript bundle detected (native-only app)")
            return NONE_TOKEN, NONE_TOKEN

        try:
            classification = self.sniffer.sniff(candidate.path)
        except EmptyOrUnreadableError as e:
            logger.warning("Bundle could not be classified", path=str(candidate.path), error=e.message)
            notes.append(f"Bundle detection failed: {e.message}")
            return NONE_TOKEN, NONE_TOKEN
        token = format_report(classification).machine_line

        if not isinstance(classification, HermesBundle):
            notes.append(f"Plain JavaScript bundle found: {classification.path}")
            return str(classification.path), token

        js_dir = (work_dir / f"{stem}-decompiled-js").resolve()
        js_file = js_dir / "index.js"
        cleanup.append(js_dir)
        if js_file.is_file():
            notes.append(f"Skipped Hermes decompilation (already exists: {js_file})")
            return str(js_file), token

        result = self.bytecode.decompile(classification.path, js_file)
        notes.extend(result.notes("hbc-decompiler"))
        if not result.success:
            logger.warning("Hermes decompilation failed", error=result.error)
            return NONE_TOKEN, token
        return str(js_file), token
