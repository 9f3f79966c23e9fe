"""Post endpoint.

Looks up a markdown post by slug, converts it to HTML and renders it into the
base page template. The page is rendered in full before the response is
created, so a template failure still yields a clean 500.
"""

import logging

from aiohttp import web

from postserve.app_keys import base_template_key, converter_key, store_key, templates_key
from postserve.core.pages import render_post
from postserve.errors import DocumentNotFoundError, RenderError

logger = logging.getLogger(__name__)

NOT_FOUND_BODY = "File not found\n"
RENDER_ERROR_BODY = "Template rendering error\n"


def create_posts_routes() -> list[web.RouteDef]:
    return [web.get("/post/{slug:.*}", get_post)]


async def get_post(request: web.Request) -> web.Response:
    slug = request.match_info["slug"].removesuffix("/")

    try:
        page = render_post(
            slug,
            store=request.app[store_key],
            converter=request.app[converter_key],
            templates=request.app[templates_key],
            template_name=request.app[base_template_key],
        )
    except DocumentNotFoundError as e:
        logger.debug(str(e))
        return _plain_error(NOT_FOUND_BODY, status=404)
    except RenderError:
        logger.exception(f"Failed to render post {slug!r}")
        return _plain_error(RENDER_ERROR_BODY, status=500)

    return web.Response(text=page, content_type="text/html", charset="utf-8")


def _plain_error(body: str, *, status: int) -> web.Response:
    return web.Response(
        text=body,
        status=status,
        content_type="text/plain",
        charset="utf-8",
        headers={"X-Content-Type-Options": "nosniff"},
    )
