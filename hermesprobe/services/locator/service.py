"""
Bundle Locator Service.

Finds the JavaScript bundle inside a decompiled application tree. Conventional
asset directories are checked first; a full tree walk is only a fallback.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator

from ...core.config import SearchOrder
from ...core.exceptions import DirectoryNotFoundError
from ...core.logging import get_logger
from ...models.bundle import BundleCandidate, CandidateSource

logger = get_logger(__name__)


class BundleLocator:
    """Locate a React Native bundle by fixed, priority-ordered file names.

    Search order:
    1. Each configured directory (relative to the root), each name in order
    2. A recursive walk of the whole tree, one name at a time
    3. Nothing found, which is a normal outcome for native-only apps
    """

    def __init__(self, search_order: SearchOrder | None = None) -> None:
        """Initialize the locator.

        Args:
            search_order: Directories and names to search; defaults to the
                React Native conventions.
        """
        self.search_order = search_order or SearchOrder()

    def locate(self, root: Path) -> BundleCandidate | None:
        """Find the preferred bundle under a decompiled application directory.

        Args:
            root: Decompiled application directory

        Returns:
            The first matching BundleCandidate, or None when no bundle exists

        Raises:
            DirectoryNotFoundError: If root is not an existing directory
        """
        if not root.is_dir():
            raise DirectoryNotFoundError(
                message=f"Directory not found: {root}",
                path=str(root),
            )

        candidate = self._search_conventional(root)
        if candidate is None:
            logger.debug("No bundle in conventional locations, walking tree", root=str(root))
            candidate = self._search_recursive(root)

        if candidate is None:
            logger.info("No JavaScript bundle found", root=str(root))
        else:
            logger.info(
                "Bundle located",
                path=str(candidate.path),
                source=candidate.source.value,
                rank=candidate.rank,
            )
        return candidate

    def _search_conventional(self, root: Path) -> BundleCandidate | None:
        names = self.search_order.names
        for dir_index, rel_dir in enumerate(self.search_order.directories):
            directory = root / rel_dir
            if not directory.is_dir():
                continue
            for name_index, name in enumerate(names):
                path = directory / name
                if path.is_file():
                    return BundleCandidate(
                        path=path,
                        rank=dir_index * len(names) + name_index,
                        source=CandidateSource.CONVENTIONAL,
                    )
        return None

    def _search_recursive(self, root: Path) -> BundleCandidate | None:
        base_rank = len(self.search_order.directories) * len(self.search_order.names)
        for name_index, name in enumerate(self.search_order.names):
            for path in _walk_files(root):
                if path.name == name:
                    return BundleCandidate(
                        path=path,
                        rank=base_rank + name_index,
                        source=CandidateSource.RECURSIVE,
                    )
        return None


def _walk_files(root: Path) -> Iterator[Path]:
    """Yield regular files top-down in sorted order so results are repeatable."""
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for filename in sorted(filenames):
            path = Path(dirpath) / filename
            if path.is_file():
                yield path


def locate_bundle(root: Path, search_order: SearchOrder | None = None) -> BundleCandidate | None:
    """Locate a bundle with a one-off locator."""
    return BundleLocator(search_order).locate(root)
