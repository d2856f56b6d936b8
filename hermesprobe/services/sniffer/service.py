"""
Format Sniffer Service.

Classifies a bundle from a bounded header read: a known binary signature wins,
then a plain-text heuristic, otherwise the bundle is unknown.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Sequence

from ...core.exceptions import EmptyOrUnreadableError
from ...core.logging import get_logger
from ...models.bundle import (
    DEFAULT_SIGNATURES,
    BundleFormat,
    ClassificationResult,
    HermesBundle,
    PlainJsBundle,
    SignatureRule,
    UnknownBundle,
)

logger = get_logger(__name__)

# ASCII letters or common JS punctuation
_TEXT_HINT = re.compile(rb"[A-Za-z({/]")

_MAGIC_LENGTH = 4
_RAW_HEADER_LENGTH = 16


class FormatSniffer:
    """Classify bundles as Hermes bytecode, plain JavaScript or unknown.

    Only a small prefix of the file is ever read; the handle is closed before
    classification starts.
    """

    def __init__(
        self,
        rules: Sequence[SignatureRule] = DEFAULT_SIGNATURES,
        text_window: int = 100,
    ) -> None:
        """Initialize the sniffer.

        Args:
            rules: Signature rules, checked in order
            text_window: Leading bytes inspected by the plain-text heuristic
        """
        self.rules = tuple(rules)
        self.text_window = text_window
        self._read_size = max(
            [text_window, _RAW_HEADER_LENGTH] + [rule.header_length for rule in self.rules]
        )

    def sniff(self, bundle_path: Path) -> ClassificationResult:
        """Classify a bundle file.

        Args:
            bundle_path: Path to the bundle

        Returns:
            HermesBundle, PlainJsBundle or UnknownBundle

        Raises:
            EmptyOrUnreadableError: If the file cannot be read or is empty
        """
        path = bundle_path.resolve()
        header, size = self._read_header(path)
        magic = header[:_MAGIC_LENGTH]

        rule = self._match_signature(header)
        if rule is not None and rule.format == BundleFormat.HERMES:
            version = rule.version_field(header)
            logger.debug("Signature matched", rule=rule.name, version=version.hex())
            return HermesBundle(
                path=path,
                size_bytes=size,
                magic=magic,
                version_descriptor=version,
            )

        window = header[: self.text_window].replace(b"\x00", b"")
        if _TEXT_HINT.search(window):
            return PlainJsBundle(path=path, size_bytes=size, magic=magic)

        logger.debug("Bundle format not recognized", path=str(path), magic=magic.hex())
        return UnknownBundle(
            path=path,
            size_bytes=size,
            magic=magic,
            raw_header=header[:_RAW_HEADER_LENGTH],
        )

    def _match_signature(self, header: bytes) -> SignatureRule | None:
        for rule in self.rules:
            if rule.matches(header):
                return rule
        return None

    def _read_header(self, path: Path) -> tuple[bytes, int]:
        try:
            with open(path, "rb") as f:
                header = f.read(self._read_size)
            size = path.stat().st_size
        except OSError as e:
            raise EmptyOrUnreadableError(
                message=f"Cannot read bundle: {path}",
                path=str(path),
                cause=e,
            ) from e

        if not header:
            raise EmptyOrUnreadableError(
                message=f"Bundle is empty: {path}",
                path=str(path),
            )
        return header, max(size, len(header))


def sniff_bundle(bundle_path: Path, text_window: int = 100) -> ClassificationResult:
    """Classify a bundle with the default signature rules."""
    return FormatSniffer(text_window=text_window).sniff(bundle_path)
