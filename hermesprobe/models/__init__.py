"""
hermesprobe Data Models.

Pydantic models shared by the locator, sniffer, reporter and the supporting
extraction and scanning services.
"""

from .bundle import (
    DEFAULT_SIGNATURES,
    HERMES_MAGIC,
    HERMES_SIGNATURE,
    BundleCandidate,
    BundleFormat,
    CandidateSource,
    ClassificationResult,
    HermesBundle,
    PlainJsBundle,
    Report,
    SignatureRule,
    UnknownBundle,
)
from .scan import PatternCategory, ScanMode, ScanSection

__all__ = [
    "DEFAULT_SIGNATURES",
    "HERMES_MAGIC",
    "HERMES_SIGNATURE",
    "BundleCandidate",
    "BundleFormat",
    "CandidateSource",
    "ClassificationResult",
    "HermesBundle",
    "PlainJsBundle",
    "Report",
    "SignatureRule",
    "UnknownBundle",
    "PatternCategory",
    "ScanMode",
    "ScanSection",
]
