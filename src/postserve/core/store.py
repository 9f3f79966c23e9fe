"""Read-only content store.

Holds every markdown document and page template in memory, keyed by path
relative to the bundle root:

    content/
    └── <slug>.md        # Posts, addressed by slug
    views/
    └── <name>.html      # Page templates

The store is built once at startup and never mutated afterwards, so it can be
shared between concurrent requests without locking.
"""

import logging
from collections.abc import Mapping
from importlib.resources import files
from importlib.resources.abc import Traversable
from pathlib import Path
from types import MappingProxyType

from postserve.errors import DocumentNotFoundError, InvalidSlugError, StartupError

logger = logging.getLogger(__name__)

CONTENT_DIR = "content"
VIEWS_DIR = "views"
DOCUMENT_SUFFIX = ".md"
TEMPLATE_SUFFIX = ".html"

_FORBIDDEN_SLUG_CHARS = ("/", "\\", "\x00")


def validate_slug(slug: str) -> str:
    """Reject slugs that could address anything outside the content directory.

    Args:
        slug: Slug extracted from the request path

    Returns:
        The slug unchanged

    Raises:
        InvalidSlugError: If the slug is empty, hidden or path-escaping
    """
    if not slug or slug.startswith(".") or ".." in slug:
        raise InvalidSlugError(slug)
    if any(char in slug for char in _FORBIDDEN_SLUG_CHARS):
        raise InvalidSlugError(slug)
    return slug


class ContentStore:
    """In-memory collection of documents and templates."""

    def __init__(self, files: Mapping[str, bytes]) -> None:
        """Initialize store from a path-to-content mapping.

        Args:
            files: Mapping of bundle-relative path (e.g. "content/hello.md")
                   to raw file content
        """
        self._files = MappingProxyType(dict(files))

    @classmethod
    def from_package(cls) -> "ContentStore":
        """Load the content and views bundled with the postserve package."""
        root = files("postserve")
        bundle: dict[str, bytes] = {}
        bundle.update(_read_traversable(root.joinpath(CONTENT_DIR), CONTENT_DIR, DOCUMENT_SUFFIX))
        bundle.update(_read_traversable(root.joinpath(VIEWS_DIR), VIEWS_DIR, TEMPLATE_SUFFIX))
        return cls(bundle)

    @classmethod
    def from_directories(
        cls,
        content_dir: Path | None = None,
        views_dir: Path | None = None,
    ) -> "ContentStore":
        """Load content and views from the filesystem.

        Directories that are not given fall back to the bundled files.
        Everything is read once, here; nothing touches the disk afterwards.

        Args:
            content_dir: Directory containing <slug>.md documents
            views_dir: Directory containing *.html templates

        Raises:
            StartupError: If a given directory does not exist
        """
        bundled = cls.from_package()
        bundle = dict(bundled._files)

        if content_dir is not None:
            bundle = {k: v for k, v in bundle.items() if not k.startswith(f"{CONTENT_DIR}/")}
            bundle.update(_read_directory(content_dir, CONTENT_DIR, DOCUMENT_SUFFIX))

        if views_dir is not None:
            bundle = {k: v for k, v in bundle.items() if not k.startswith(f"{VIEWS_DIR}/")}
            bundle.update(_read_directory(views_dir, VIEWS_DIR, TEMPLATE_SUFFIX))

        return cls(bundle)

    def lookup(self, slug: str) -> bytes:
        """Return the markdown source for a slug.

        Args:
            slug: Document slug (file name without the .md extension)

        Returns:
            Raw markdown bytes

        Raises:
            InvalidSlugError: If the slug is rejected by validate_slug()
            DocumentNotFoundError: If no document exists for the slug
        """
        validate_slug(slug)
        try:
            return self._files[f"{CONTENT_DIR}/{slug}{DOCUMENT_SUFFIX}"]
        except KeyError:
            raise DocumentNotFoundError(slug) from None

    def slugs(self) -> list[str]:
        """Return sorted slugs of all documents."""
        prefix = f"{CONTENT_DIR}/"
        return sorted(
            path[len(prefix) : -len(DOCUMENT_SUFFIX)]
            for path in self._files
            if path.startswith(prefix) and path.endswith(DOCUMENT_SUFFIX)
        )

    def templates(self) -> dict[str, bytes]:
        """Return template sources keyed by file name (e.g. "base.html")."""
        prefix = f"{VIEWS_DIR}/"
        return {
            path[len(prefix) :]: content
            for path, content in self._files.items()
            if path.startswith(prefix) and path.endswith(TEMPLATE_SUFFIX)
        }


def _read_traversable(directory: Traversable, prefix: str, suffix: str) -> dict[str, bytes]:
    if not directory.is_dir():
        return {}
    return {
        f"{prefix}/{entry.name}": entry.read_bytes()
        for entry in directory.iterdir()
        if entry.is_file() and entry.name.endswith(suffix)
    }


def _read_directory(directory: Path, prefix: str, suffix: str) -> dict[str, bytes]:
    if not directory.is_dir():
        raise StartupError(f"Directory not found: {directory}")
    logger.debug(f"Loading {prefix} from {directory}")
    try:
        return {
            f"{prefix}/{entry.name}": entry.read_bytes()
            for entry in sorted(directory.iterdir())
            if entry.is_file() and entry.name.endswith(suffix)
        }
    except OSError as e:
        raise StartupError(f"Cannot read {directory}: {e}") from e
