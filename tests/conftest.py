"""Shared test fixtures."""

from pathlib import Path

import pytest
from postserve.config import Config, ContentConfig, ServerConfig
from postserve.core.store import ContentStore

BASE_TEMPLATE = b"<html><head><title>{{ title }}</title></head><body>{{ content }}</body></html>"


@pytest.fixture
def test_config() -> Config:
    """Create a test configuration using the bundled content."""
    return Config(server=ServerConfig(host="127.0.0.1", port=8080), content=ContentConfig())


@pytest.fixture
def store() -> ContentStore:
    """Create a small in-memory store with one post and the base template."""
    return ContentStore(
        {
            "content/hello.md": b"# Hi\n\nSome *text*.",
            "content/raw.md": b"Hello <b>world</b>",
            "views/base.html": BASE_TEMPLATE,
        }
    )


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    """Create content and views directories on disk."""
    content = tmp_path / "content"
    content.mkdir()
    (content / "first.md").write_text("# First\n\nFirst post.")
    (content / "second.md").write_text("# Second\n\nSecond post.")
    (content / "notes.txt").write_text("not a post")

    views = tmp_path / "views"
    views.mkdir()
    (views / "base.html").write_bytes(b"<h6>{{ title }}</h6>\n{{ content }}")

    return tmp_path
