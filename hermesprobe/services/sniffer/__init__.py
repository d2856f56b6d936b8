"""Bundle format sniffer service."""

from .service import FormatSniffer, sniff_bundle

__all__ = ["FormatSniffer", "sniff_bundle"]
