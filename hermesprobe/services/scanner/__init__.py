"""Decompiled output pattern scanner."""

from .service import JS_CATEGORIES, JS_GROUPS, NATIVE_CATEGORIES, scan_js, scan_sources, select_categories

__all__ = [
    "JS_CATEGORIES",
    "JS_GROUPS",
    "NATIVE_CATEGORIES",
    "scan_js",
    "scan_sources",
    "select_categories",
]
