"""Error types raised by Postserve.

Lookup errors become 404 responses and render errors become 500 responses.
Startup errors abort the process before it binds a socket.
"""


class PostserveError(Exception):
    """Base class for Postserve errors."""


class DocumentNotFoundError(PostserveError):
    """No document exists for the requested slug."""

    def __init__(self, slug: str) -> None:
        super().__init__(f"Document not found: {slug!r}")
        self.slug = slug


class InvalidSlugError(DocumentNotFoundError):
    """Slug was rejected before lookup (empty or path-escaping)."""

    def __init__(self, slug: str) -> None:
        super().__init__(slug)
        self.args = (f"Invalid slug: {slug!r}",)


class RenderError(PostserveError):
    """Template execution failed for a request."""

    def __init__(self, template_name: str) -> None:
        super().__init__(f"Failed to render template: {template_name}")
        self.template_name = template_name


class StartupError(PostserveError):
    """Content or templates could not be loaded at process start."""
