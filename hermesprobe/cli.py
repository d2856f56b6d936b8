"""
hermesprobe CLI.

Command-line interface for locating and classifying React Native bundles.
Machine-readable results go to stdout; diagnostics go to stderr.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from rich.console import Console
from rich.table import Table

from .core.config import Config, get_config
from .core.exceptions import ConfigError, HermesProbeError, ToolNotFoundError
from .core.logging import get_logger, setup_logging
from .models.bundle import HermesBundle, Report
from .services.locator import BundleLocator
from .services.reporter import describe_file_type, format_report
from .services.sniffer import FormatSniffer

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

app = typer.Typer(
    name="hermesprobe",
    help="Locate and classify React Native bundles in decompiled Android apps",
    add_completion=False,
    context_settings=CONTEXT_SETTINGS,
)

detect_app = typer.Typer(
    name="detect-hermes",
    add_completion=False,
    context_settings=CONTEXT_SETTINGS,
)

console = Console(stderr=True)
logger = get_logger(__name__)


def _diag(line: str) -> None:
    console.print(line, markup=False, highlight=False, soft_wrap=True)


def _fail(error: HermesProbeError) -> NoReturn:
    typer.echo(f"Error: {error.message}", err=True)
    if isinstance(error, ToolNotFoundError) and error.install_hint:
        typer.echo(f"Install hint: {error.install_hint}", err=True)
    raise typer.Exit(1)


def _load_config() -> Config:
    try:
        return get_config()
    except ConfigError as e:
        _fail(e)


def run_detection(decompiled_dir: Path, config: Config) -> Report:
    """Locate, sniff and report a bundle under a decompiled directory."""
    locator = BundleLocator(config.search_order)
    candidate = locator.locate(decompiled_dir)
    if candidate is None:
        return format_report(None, search_root=decompiled_dir)

    result = FormatSniffer(text_window=config.sniffer.text_window).sniff(candidate.path)
    description = None
    if isinstance(result, HermesBundle) and config.sniffer.describe_with_file:
        description = describe_file_type(result.path)
    return format_report(result, search_root=decompiled_dir, file_description=description)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        from . import __version__
        typer.echo(f"hermesprobe v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """hermesprobe: find and classify JavaScript bundles in decompiled apps."""
    pass


def detect(
    decompiled_dir: Path = typer.Argument(
        ...,
        metavar="DECOMPILED_DIR",
        help="Path to jadx output directory (contains resources/ and sources/)",
        show_default=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable verbose logging",
    ),
) -> None:
    """Detect whether a decompiled app ships Hermes bytecode or plain JavaScript.

    Prints exactly one of HERMES:<path>, PLAINJS:<path> or NONE on stdout.
    Human-readable details are printed to stderr.
    """
    config = _load_config()
    if verbose:
        config = config.model_copy(update={"log_level": "DEBUG"})
    setup_logging(config)

    try:
        report = run_detection(decompiled_dir, config)
    except HermesProbeError as e:
        logger.debug("Detection failed", error=str(e))
        _fail(e)

    for line in report.human_lines:
        _diag(line)
    typer.echo(report.machine_line)


app.command("detect")(detect)
detect_app.command()(detect)


@app.command()
def extract(
    input_file: Path = typer.Argument(
        ...,
        help="Application package (.apk, .apkm or .xapk)",
        show_default=False,
    ),
) -> None:
    """Print the absolute path of the base APK inside an application package."""
    from .services.extraction import extract_base_apk

    setup_logging(_load_config())
    try:
        base_apk = extract_base_apk(input_file)
    except HermesProbeError as e:
        _fail(e)
    typer.echo(str(base_apk))


@app.command()
def scan(
    sources_dir: Path = typer.Argument(
        ...,
        help="jadx sources/ directory",
        show_default=False,
    ),
) -> None:
    """Scan decompiled native sources for HTTP clients, models, URLs and auth."""
    from .services.scanner import scan_sources

    setup_logging(_load_config())
    try:
        sections = scan_sources(sources_dir)
    except HermesProbeError as e:
        _fail(e)

    for section in sections:
        for line in section.render():
            typer.echo(line)
        typer.echo("")


@app.command("scan-js")
def scan_js_command(
    js_file: Path = typer.Argument(
        ...,
        help="Decompiled Hermes JavaScript (hermes-dec output)",
        show_default=False,
    ),
    category: Optional[List[str]] = typer.Option(
        None,
        "--category",
        "-c",
        help="Restrict to: methods, http, config, auth, endpoints (repeatable)",
    ),
) -> None:
    """Search decompiled Hermes JavaScript for API endpoint patterns."""
    from .services.scanner import JS_CATEGORIES, JS_GROUPS, scan_js, select_categories

    unknown = sorted(set(category or ()) - set(JS_GROUPS))
    if unknown:
        raise typer.BadParameter(
            f"unknown category: {', '.join(unknown)}", param_hint="--category"
        )

    setup_logging(_load_config())
    try:
        sections = scan_js(js_file, select_categories(JS_CATEGORIES, category))
    except HermesProbeError as e:
        _fail(e)

    _diag(f"Searching: {js_file.resolve()} ({js_file.stat().st_size} bytes)")
    for section in sections:
        typer.echo(f"==== {section.name} ====")
        if section.is_empty:
            typer.echo("(none found)")
        for line in section.matches:
            typer.echo(line)
        if section.truncated:
            typer.echo("(truncated)")
        typer.echo("")


@app.command()
def prepare(
    input_file: Path = typer.Argument(
        ...,
        help="Application package (.apk, .apkm or .xapk)",
        show_default=False,
    ),
    work_dir: Path = typer.Option(
        Path("."),
        "--work-dir",
        "-w",
        help="Directory for decompiled output",
    ),
) -> None:
    """Run extraction, decompilation, bundle detection and source scanning."""
    from .services.decompilers import HermesDecDecompiler, JadxDecompiler
    from .services.pipeline import PreparePipeline

    config = _load_config()
    setup_logging(config)

    pipeline = PreparePipeline(
        native=JadxDecompiler(config),
        bytecode=HermesDecDecompiler(config),
        config=config,
    )
    _diag(f">>> Preparing {input_file}")
    try:
        report = pipeline.run(input_file, work_dir)
    except HermesProbeError as e:
        _fail(e)

    for note in report.notes:
        _diag(f">>> {note}")
    for line in report.render():
        typer.echo(line)


@app.command()
def tools() -> None:
    """Show which external tools are available."""
    from .services.decompilers import HermesDecDecompiler, JadxDecompiler

    config = _load_config()
    table = Table(title="External Tools")
    table.add_column("Tool", style="cyan")
    table.add_column("Status")
    table.add_column("Location")

    missing = []
    for tool in (JadxDecompiler(config), HermesDecDecompiler(config)):
        try:
            location = str(tool.find_tool())
            table.add_row(tool.tool_name, "[green]OK[/green]", location)
        except ToolNotFoundError as e:
            missing.append(tool.tool_name)
            table.add_row(tool.tool_name, "[red]MISSING[/red]", e.install_hint)

    console.print(table)
    for name in missing:
        typer.echo(f"INSTALL_REQUIRED:{name}")
    if missing:
        raise typer.Exit(1)


@app.command()
def config() -> None:
    """Show the effective configuration."""
    cfg = _load_config()

    table = Table(title="Current Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("Log Level", cfg.log_level)
    table.add_row("Bundle Directories", ", ".join(cfg.search_order.directories))
    table.add_row("Bundle Names", ", ".join(cfg.search_order.names))
    table.add_row("Text Window", str(cfg.sniffer.text_window))
    table.add_row("Describe With file(1)", str(cfg.sniffer.describe_with_file))
    table.add_row("jadx Path", str(cfg.tools.jadx_path or "PATH"))
    table.add_row("hbc-decompiler Path", str(cfg.tools.hbc_decompiler_path or "PATH"))
    table.add_row("Tool Timeout", f"{cfg.tools.timeout_seconds}s")

    console.print(table)

    console.print("\n[dim]Configure via environment variables:[/dim]")
    console.print("  HERMESPROBE_LOG_LEVEL, HERMESPROBE_BUNDLE_DIRS, HERMESPROBE_BUNDLE_NAMES")
    console.print("  HERMESPROBE_JADX_PATH, HERMESPROBE_HBC_DECOMPILER_PATH, HERMESPROBE_VENV_DIR")


def main() -> None:
    """Entry point for the CLI."""
    app()


def detect_main() -> None:
    """Entry point for the standalone detect-hermes command."""
    detect_app()


if __name__ == "__main__":
    main()
