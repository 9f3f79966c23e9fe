"""aiohttp server for Postserve.

Application factory and route registration.
"""

import logging

from aiohttp import web

from postserve.api.health import create_health_routes
from postserve.api.posts import create_posts_routes
from postserve.app_keys import base_template_key, converter_key, store_key, templates_key
from postserve.config import Config
from postserve.core.converter import MarkdownConverter
from postserve.core.store import ContentStore
from postserve.core.templates import load_templates

logger = logging.getLogger(__name__)


def load_store(config: Config) -> ContentStore:
    """Build the content store described by the configuration.

    Raises:
        StartupError: If a configured directory cannot be read
    """
    if config.content.content_dir is None and config.content.views_dir is None:
        return ContentStore.from_package()
    return ContentStore.from_directories(
        config.content.content_dir,
        config.content.views_dir,
    )


def create_app(config: Config, *, store: ContentStore | None = None) -> web.Application:
    """Create aiohttp application.

    Content and templates are loaded and parsed here, before any request is
    served.

    Args:
        config: Application configuration
        store: Preloaded content store (defaults to the one described by config)

    Returns:
        Configured aiohttp application

    Raises:
        StartupError: If content cannot be loaded or templates fail to parse
    """
    if store is None:
        store = load_store(config)

    base_template = config.content.base_template
    templates = load_templates(store.templates(), required=(base_template,))

    logger.info(
        f"Loaded {len(store.slugs())} posts and {len(templates.names)} templates",
    )

    app = web.Application()
    app[store_key] = store
    app[converter_key] = MarkdownConverter()
    app[templates_key] = templates
    app[base_template_key] = base_template

    app.router.add_routes(create_health_routes())
    app.router.add_routes(create_posts_routes())

    return app


def run_server(config: Config) -> None:
    """Run the server until interrupted.

    Raises:
        StartupError: If content cannot be loaded or templates fail to parse
        OSError: If the listening socket cannot be bound
    """
    app = create_app(config)
    web.run_app(
        app,
        host=config.server.host,
        port=config.server.port,
        print=None,
    )
