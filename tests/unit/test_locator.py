"""Unit tests for the bundle locator."""

import pytest

from hermesprobe.core.config import SearchOrder
from hermesprobe.core.exceptions import DirectoryNotFoundError
from hermesprobe.models.bundle import CandidateSource
from hermesprobe.services.locator import BundleLocator, locate_bundle


class TestBundleLocator:
    """Tests for conventional and recursive bundle discovery."""

    def test_prefers_resources_assets(self, make_tree):
        """resources/assets wins over resources/ and assets/ when all hold bundles."""
        root = make_tree({
            "resources/assets/index.bundle": b"a",
            "resources/index.android.bundle": b"b",
            "assets/index.android.bundle": b"c",
        })
        candidate = BundleLocator().locate(root)

        assert candidate is not None
        assert candidate.path == root / "resources/assets/index.bundle"
        assert candidate.source == CandidateSource.CONVENTIONAL
        assert candidate.rank == 1

    def test_name_priority_within_directory(self, make_tree):
        """Within one directory the first configured name wins."""
        root = make_tree({
            "resources/assets/index.js": b"a",
            "resources/assets/main.jsbundle": b"b",
            "resources/assets/index.android.bundle": b"c",
        })
        candidate = BundleLocator().locate(root)
        assert candidate.path.name == "index.android.bundle"
        assert candidate.rank == 0

    def test_falls_back_to_later_directories(self, make_tree):
        """resources/ and then assets/ are tried when resources/assets is empty."""
        root = make_tree({
            "resources/assets/unrelated.txt": b"x",
            "assets/main.jsbundle": b"b",
        })
        candidate = BundleLocator().locate(root)
        assert candidate.path == root / "assets/main.jsbundle"
        assert candidate.rank == 2 * 4 + 2

    def test_directory_named_like_bundle_is_ignored(self, make_tree):
        """Only regular files count as bundles."""
        root = make_tree({"resources/index.js/placeholder": b"x", "assets/index.js": b"y"})
        candidate = BundleLocator().locate(root)
        assert candidate.path == root / "assets/index.js"

    def test_recursive_fallback(self, make_tree):
        """Bundles outside the conventional locations are found by walking the tree."""
        root = make_tree({
            "sources/com/example/index.js": b"x",
            "lib/deep/nested/index.bundle": b"y",
        })
        candidate = BundleLocator().locate(root)

        assert candidate.source == CandidateSource.RECURSIVE
        # name priority beats directory order in the fallback
        assert candidate.path == root / "lib/deep/nested/index.bundle"
        assert candidate.rank == 12 + 1

    def test_recursive_fallback_is_repeatable(self, make_tree):
        """The walk order is sorted, so repeated runs agree."""
        root = make_tree({"b/index.js": b"x", "a/index.js": b"y"})
        first = BundleLocator().locate(root)
        second = BundleLocator().locate(root)
        assert first == second
        assert first.path == root / "a/index.js"

    def test_not_found_returns_none(self, make_tree):
        """A native-only app yields None, not an error."""
        root = make_tree({"resources/AndroidManifest.xml": b"<manifest/>"})
        assert BundleLocator().locate(root) is None

    def test_missing_directory_raises(self, temp_dir):
        missing = temp_dir / "nope"
        with pytest.raises(DirectoryNotFoundError) as exc_info:
            BundleLocator().locate(missing)
        assert exc_info.value.message == f"Directory not found: {missing}"

    def test_file_instead_of_directory_raises(self, temp_dir):
        path = temp_dir / "file.txt"
        path.write_text("x")
        with pytest.raises(DirectoryNotFoundError):
            locate_bundle(path)

    def test_injected_search_order(self, make_tree):
        """A custom search order replaces the React Native defaults."""
        root = make_tree({
            "resources/assets/index.android.bundle": b"default",
            "custom/app.hbc": b"custom",
        })
        order = SearchOrder(directories=("custom",), names=("app.hbc",))
        candidate = BundleLocator(order).locate(root)
        assert candidate.path == root / "custom/app.hbc"
        assert candidate.rank == 0

    def test_empty_names_rejected(self):
        with pytest.raises(ValueError):
            SearchOrder(names=())
