"""CLI interface for Postserve.

Command-line tool for serving, listing and rendering markdown posts.
"""

import logging
import sys
from pathlib import Path
from typing import NoReturn

import click

from postserve.config import Config
from postserve.core.converter import MarkdownConverter
from postserve.core.pages import render_post
from postserve.core.templates import load_templates
from postserve.errors import DocumentNotFoundError, PostserveError
from postserve.server import load_store

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover postserve.toml)",
)
content_dir_option = click.option(
    "--content-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Directory of markdown posts (overrides config, default: bundled posts)",
)
views_dir_option = click.option(
    "--views-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Directory of page templates (overrides config, default: bundled views)",
)


@click.group()
def cli() -> None:
    """Postserve - markdown posts over HTTP."""


@cli.command()
@config_option
@content_dir_option
@views_dir_option
@click.option(
    "--host",
    envvar="POSTSERVE_HOST",
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    "-p",
    envvar="POSTSERVE_PORT",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable debug logging",
)
def serve(
    config_path: Path | None,
    content_dir: Path | None,
    views_dir: Path | None,
    host: str | None,
    port: int | None,
    verbose: bool,
) -> None:
    """Start the post server."""
    from postserve.server import run_server

    _configure_logging(verbose)

    try:
        config = Config.load(config_path).with_overrides(
            host=host,
            port=port,
            content_dir=content_dir,
            views_dir=views_dir,
        )
    except ValueError as e:
        _fail(str(e))

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Content: {config.content.content_dir or 'bundled'}")
    click.echo(f"Views: {config.content.views_dir or 'bundled'}")

    try:
        run_server(config)
    except PostserveError as e:
        _fail(str(e))
    except OSError as e:
        _fail(f"Cannot start server: {e}")


@cli.command()
@config_option
@content_dir_option
def posts(config_path: Path | None, content_dir: Path | None) -> None:
    """List the slugs of all available posts."""
    try:
        config = Config.load(config_path).with_overrides(content_dir=content_dir)
        store = load_store(config)
    except (ValueError, PostserveError) as e:
        _fail(str(e))

    for slug in store.slugs():
        click.echo(slug)


@cli.command()
@click.argument("slug")
@config_option
@content_dir_option
@views_dir_option
def render(
    slug: str,
    config_path: Path | None,
    content_dir: Path | None,
    views_dir: Path | None,
) -> None:
    """Render a post page to stdout."""
    try:
        config = Config.load(config_path).with_overrides(
            content_dir=content_dir,
            views_dir=views_dir,
        )
        store = load_store(config)
        template_name = config.content.base_template
        templates = load_templates(store.templates(), required=(template_name,))
        page = render_post(
            slug,
            store=store,
            converter=MarkdownConverter(),
            templates=templates,
            template_name=template_name,
        )
    except DocumentNotFoundError:
        _fail(f"post not found: {slug}")
    except (ValueError, PostserveError) as e:
        _fail(str(e))

    click.echo(page, nl=False)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
    )


def _fail(message: str) -> NoReturn:
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(1)
