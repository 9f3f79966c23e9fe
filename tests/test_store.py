"""Tests for the content store."""

from pathlib import Path

import pytest
from postserve.core.store import ContentStore, validate_slug
from postserve.errors import DocumentNotFoundError, InvalidSlugError, StartupError


class TestValidateSlug:
    """Tests for validate_slug()."""

    @pytest.mark.parametrize("slug", ["hello", "markdown-guide", "2024_recap", "v1.2"])
    def test__plain_slug__is_accepted(self, slug: str) -> None:
        """Accept ordinary slugs unchanged."""
        assert validate_slug(slug) == slug

    @pytest.mark.parametrize(
        "slug",
        [
            "",
            "..",
            "../../etc/passwd",
            "a/../b",
            "nested/post",
            "..\\windows",
            ".hidden",
            "a..b",
            "nul\x00byte",
        ],
    )
    def test__unsafe_slug__raises_invalid_slug(self, slug: str) -> None:
        """Reject empty, hidden and path-escaping slugs."""
        with pytest.raises(InvalidSlugError):
            validate_slug(slug)

    def test__invalid_slug__is_a_not_found_error(self) -> None:
        """Invalid slugs are reported the same way as missing documents."""
        with pytest.raises(DocumentNotFoundError):
            validate_slug("../secret")


class TestContentStoreLookup:
    """Tests for ContentStore.lookup()."""

    def test__existing_slug__returns_bytes(self, store: ContentStore) -> None:
        """Return the raw markdown for a known slug."""
        assert store.lookup("hello") == b"# Hi\n\nSome *text*."

    def test__missing_slug__raises_not_found(self, store: ContentStore) -> None:
        """Raise DocumentNotFoundError for unknown slugs."""
        with pytest.raises(DocumentNotFoundError, match="does-not-exist"):
            store.lookup("does-not-exist")

    def test__template_path__is_not_a_document(self, store: ContentStore) -> None:
        """Templates cannot be fetched through document lookup."""
        with pytest.raises(DocumentNotFoundError):
            store.lookup("../views/base")

    def test__source_mapping_mutation__does_not_leak(self) -> None:
        """Store keeps its own copy of the files it was built from."""
        files = {"content/a.md": b"A"}
        store = ContentStore(files)
        files["content/b.md"] = b"B"

        assert store.slugs() == ["a"]


class TestContentStoreListing:
    """Tests for slugs() and templates()."""

    def test__slugs__sorted_documents_only(self, store: ContentStore) -> None:
        """List document slugs without templates."""
        assert store.slugs() == ["hello", "raw"]

    def test__templates__keyed_by_file_name(self, store: ContentStore) -> None:
        """Return templates keyed by their file name."""
        assert list(store.templates()) == ["base.html"]


class TestContentStoreFromPackage:
    """Tests for ContentStore.from_package()."""

    def test__bundled_content__is_loaded(self) -> None:
        """Bundled posts and the base template are available."""
        store = ContentStore.from_package()

        assert "hello" in store.slugs()
        assert "base.html" in store.templates()
        assert store.lookup("hello").startswith(b"# Hi")


class TestContentStoreFromDirectories:
    """Tests for ContentStore.from_directories()."""

    def test__content_dir__replaces_bundled_posts(self, site_dir: Path) -> None:
        """Load posts from disk instead of the bundle."""
        store = ContentStore.from_directories(site_dir / "content")

        assert store.slugs() == ["first", "second"]
        assert "base.html" in store.templates()

    def test__views_dir__replaces_bundled_templates(self, site_dir: Path) -> None:
        """Load templates from disk instead of the bundle."""
        store = ContentStore.from_directories(views_dir=site_dir / "views")

        assert store.templates()["base.html"].startswith(b"<h6>")
        assert "hello" in store.slugs()

    def test__files_read_once__later_changes_ignored(self, site_dir: Path) -> None:
        """Content is read at construction and not re-read."""
        store = ContentStore.from_directories(site_dir / "content")
        (site_dir / "content" / "first.md").write_text("changed")
        (site_dir / "content" / "third.md").write_text("new")

        assert store.lookup("first") == b"# First\n\nFirst post."
        assert "third" not in store.slugs()

    def test__missing_directory__raises_startup_error(self, tmp_path: Path) -> None:
        """Fail at startup when a configured directory does not exist."""
        with pytest.raises(StartupError, match="Directory not found"):
            ContentStore.from_directories(tmp_path / "nope")
