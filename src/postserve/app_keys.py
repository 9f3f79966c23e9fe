"""Application keys for type-safe app configuration access."""

from aiohttp import web

from postserve.core.converter import MarkdownConverter
from postserve.core.store import ContentStore
from postserve.core.templates import TemplateSet

store_key = web.AppKey("store", ContentStore)
converter_key = web.AppKey("converter", MarkdownConverter)
templates_key = web.AppKey("templates", TemplateSet)
base_template_key = web.AppKey("base_template", str)
