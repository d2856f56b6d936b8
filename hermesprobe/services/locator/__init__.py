"""Bundle locator service."""

from .service import BundleLocator, locate_bundle

__all__ = ["BundleLocator", "locate_bundle"]
