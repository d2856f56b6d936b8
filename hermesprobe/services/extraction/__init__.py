"""Base APK extraction service."""

from .service import extract_base_apk

__all__ = ["extract_base_apk"]
