"""
Extraction Service.

Resolves the base APK for an application package. Plain APKs pass through;
APKMirror (.apkm) and split (.xapk) bundles are unzipped next to the input.
"""

from __future__ import annotations

import json
import zipfile
from pathlib import Path

from ...core.exceptions import ExtractionError, InputNotFoundError
from ...core.logging import get_logger

logger = get_logger(__name__)

SUPPORTED_EXTENSIONS = ("apk", "apkm", "xapk")


def default_extract_dir(input_path: Path) -> Path:
    """Directory a bundle is unzipped into: <stem>-extract beside the input."""
    return input_path.parent / f"{input_path.stem}-extract"


def extract_base_apk(input_path: Path, extract_dir: Path | None = None) -> Path:
    """Return the absolute path of the base APK for an application package.

    Args:
        input_path: .apk, .apkm or .xapk file
        extract_dir: Where bundles are unzipped; defaults to <stem>-extract

    Returns:
        Absolute path to the base APK

    Raises:
        InputNotFoundError: If the input file does not exist
        ExtractionError: If the package type is unsupported or has no base APK
    """
    if not input_path.is_file():
        raise InputNotFoundError(message=f"File not found: {input_path}", path=str(input_path))

    input_abs = input_path.resolve()
    ext = input_abs.suffix.lower().lstrip(".")

    if ext == "apk":
        return input_abs
    if ext not in SUPPORTED_EXTENSIONS:
        raise ExtractionError(
            message=f"Unsupported file type '.{ext}'. Expected .apk, .apkm, or .xapk",
            input_path=str(input_abs),
        )

    target = (extract_dir or default_extract_dir(input_abs)).resolve()
    _unzip(input_abs, target)

    if ext == "apkm":
        base = _find_apkm_base(target)
    else:
        base = _find_xapk_base(target)

    if base is None or not base.is_file():
        raise ExtractionError(
            message=f"No base APK found in {ext.upper()} bundle",
            input_path=str(input_abs),
            context={"extract_dir": str(target)},
        )

    logger.info("Base APK resolved", bundle=str(input_abs), base_apk=str(base))
    return base.resolve()


def _unzip(archive: Path, target: Path) -> None:
    target.mkdir(parents=True, exist_ok=True)
    logger.info("Extracting bundle", archive=str(archive), target=str(target))
    try:
        with zipfile.ZipFile(archive, "r") as zf:
            zf.extractall(target)
    except zipfile.BadZipFile as e:
        raise ExtractionError(
            message=f"Not a valid ZIP archive: {archive}",
            input_path=str(archive),
            cause=e,
        ) from e


def _largest(apks: list[Path]) -> Path | None:
    if not apks:
        return None
    return max(apks, key=lambda p: (p.stat().st_size, p.name))


def _find_apkm_base(target: Path) -> Path | None:
    base = target / "base.apk"
    if base.is_file():
        return base

    apks = sorted(target.glob("*.apk"))
    for apk in apks:
        if not apk.name.startswith(("config.", "split_")):
            return apk
    return _largest(apks)


def _find_xapk_base(target: Path) -> Path | None:
    manifest = target / "manifest.json"
    if manifest.is_file():
        name = _base_from_manifest(manifest)
        if name and (target / name).is_file():
            return target / name

    base = target / "base.apk"
    if base.is_file():
        return base
    return _largest(sorted(target.rglob("*.apk")))


def _base_from_manifest(manifest: Path) -> str | None:
    """Read split_apks[].file for the entry whose id is "base"."""
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Unreadable XAPK manifest", path=str(manifest), error=str(e))
        return None

    if not isinstance(data, dict):
        return None
    for split in data.get("split_apks", []):
        if isinstance(split, dict) and split.get("id") == "base":
            return split.get("file") or None
    return None
