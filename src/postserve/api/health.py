"""Liveness endpoint."""

from aiohttp import hdrs, web


def create_health_routes() -> list[web.RouteDef]:
    return [web.route(hdrs.METH_ANY, "/health", health_check)]


async def health_check(request: web.Request) -> web.Response:
    return web.Response(text="OK\n", content_type="text/plain", charset="utf-8")
