"""Services package for hermesprobe."""

from .locator import BundleLocator
from .sniffer import FormatSniffer
from .reporter import format_report
from .extraction import extract_base_apk
from .scanner import scan_js, scan_sources
from .decompilers import HermesDecDecompiler, JadxDecompiler
from .pipeline import PreparePipeline

__all__ = [
    "BundleLocator",
    "FormatSniffer",
    "format_report",
    "extract_base_apk",
    "scan_js",
    "scan_sources",
    "HermesDecDecompiler",
    "JadxDecompiler",
    "PreparePipeline",
]
