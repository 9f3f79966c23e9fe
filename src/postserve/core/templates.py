"""Page templates.

Templates are parsed once at startup into a TemplateSet. Rendering is
buffered: a page is produced as a complete string before anything is written
to the client, so a failing template never leaves a half-written response.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from jinja2 import (
    DictLoader,
    Environment,
    StrictUndefined,
    Template,
    TemplateError,
    select_autoescape,
)
from markupsafe import Markup

from postserve.errors import RenderError, StartupError

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = "base.html"


@dataclass(frozen=True)
class RenderContext:
    """Data passed to a page template for one request.

    The title is plain text and escaped by the template engine; the content
    is already-rendered HTML and inserted verbatim.
    """

    title: str
    content: Markup


class TemplateSet:
    """Named, pre-parsed page templates."""

    def __init__(self, templates: Mapping[str, Template]) -> None:
        self._templates = dict(templates)

    @property
    def names(self) -> list[str]:
        """Sorted template names."""
        return sorted(self._templates)

    def __contains__(self, name: object) -> bool:
        return name in self._templates

    def render(self, name: str, context: RenderContext) -> str:
        """Render a template against a context.

        Args:
            name: Template name (e.g. "base.html")
            context: Render context for the page

        Returns:
            The complete rendered page

        Raises:
            RenderError: If the template does not exist or fails to execute
        """
        template = self._templates.get(name)
        if template is None:
            raise RenderError(name)
        try:
            return template.render(title=context.title, content=context.content)
        except TemplateError as e:
            raise RenderError(name) from e


def load_templates(
    sources: Mapping[str, bytes],
    *,
    required: Iterable[str] = (DEFAULT_TEMPLATE,),
) -> TemplateSet:
    """Parse every template source.

    Args:
        sources: Template sources keyed by name
        required: Template names that must be present

    Returns:
        TemplateSet holding the parsed templates

    Raises:
        StartupError: If a template is missing, not UTF-8, or fails to parse
    """
    missing = sorted(set(required) - set(sources))
    if missing:
        raise StartupError(f"Missing required templates: {', '.join(missing)}")

    try:
        decoded = {name: source.decode("utf-8") for name, source in sources.items()}
    except UnicodeDecodeError as e:
        raise StartupError(f"Template is not valid UTF-8: {e}") from e

    env = Environment(
        loader=DictLoader(decoded),
        autoescape=select_autoescape(default=True),
        undefined=StrictUndefined,
    )

    parsed: dict[str, Template] = {}
    for name in sorted(decoded):
        try:
            parsed[name] = env.get_template(name)
        except TemplateError as e:
            raise StartupError(f"Failed to parse template {name}: {e}") from e

    logger.debug(f"Parsed templates: {', '.join(parsed)}")
    return TemplateSet(parsed)
