"""Configuration management for Postserve.

Supports TOML configuration format with auto-discovery.
"""

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

from postserve.core.templates import DEFAULT_TEMPLATE

CONFIG_FILENAME = "postserve.toml"


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "0.0.0.0"
    port: int = 8080


@dataclass
class ContentConfig:
    """Content configuration.

    Directories left as None fall back to the files bundled with the package.
    """

    content_dir: Path | None = None
    views_dir: Path | None = None
    base_template: str = DEFAULT_TEMPLATE


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig = field(default_factory=ServerConfig)
    content: ContentConfig = field(default_factory=ContentConfig)
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Config":
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for postserve.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load configuration from a specific file.

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Invalid TOML in {path}: {e}") from e

        config_dir = path.parent

        return cls(
            server=cls._parse_server(data.get("server")),
            content=cls._parse_content(data.get("content"), config_dir),
            config_path=path,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "0.0.0.0")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 8080)
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")
        _check_port(port)

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_content(cls, data: object, config_dir: Path) -> ContentConfig:
        """Parse content configuration section.

        Args:
            data: Raw content section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            ContentConfig instance
        """
        if data is None:
            return ContentConfig()

        if not isinstance(data, dict):
            raise ValueError("content section must be a dictionary")

        content_dir = data.get("content_dir")
        if content_dir is not None and not isinstance(content_dir, str):
            raise ValueError("content.content_dir must be a string")

        views_dir = data.get("views_dir")
        if views_dir is not None and not isinstance(views_dir, str):
            raise ValueError("content.views_dir must be a string")

        base_template = data.get("base_template", DEFAULT_TEMPLATE)
        if not isinstance(base_template, str):
            raise ValueError("content.base_template must be a string")

        return ContentConfig(
            content_dir=config_dir / content_dir if content_dir is not None else None,
            views_dir=config_dir / views_dir if views_dir is not None else None,
            base_template=base_template,
        )

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        content_dir: Path | None = None,
        views_dir: Path | None = None,
    ) -> "Config":
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Raises:
            ValueError: If the port is out of range
        """
        server = self.server
        if host is not None or port is not None:
            if port is not None:
                _check_port(port)
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        content = self.content
        if content_dir is not None or views_dir is not None:
            content = replace(
                self.content,
                content_dir=content_dir if content_dir is not None else self.content.content_dir,
                views_dir=views_dir if views_dir is not None else self.content.views_dir,
            )

        return replace(self, server=server, content=content)


def _check_port(port: int) -> None:
    if not 1 <= port <= 65535:
        raise ValueError(f"server.port must be between 1 and 65535, got {port}")
