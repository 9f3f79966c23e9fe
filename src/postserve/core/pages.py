"""Post page rendering: lookup, conversion and templating."""

from markupsafe import Markup

from postserve.core.converter import MarkdownConverter
from postserve.core.store import ContentStore
from postserve.core.templates import RenderContext, TemplateSet


def render_post(
    slug: str,
    *,
    store: ContentStore,
    converter: MarkdownConverter,
    templates: TemplateSet,
    template_name: str,
) -> str:
    """Render the complete HTML page for a post.

    Args:
        slug: Post slug
        store: Content store holding the post
        converter: Markdown converter
        templates: Parsed page templates
        template_name: Name of the page template to render

    Returns:
        Rendered page

    Raises:
        DocumentNotFoundError: If the slug has no document or is invalid
        RenderError: If the template fails to render
    """
    source = store.lookup(slug)
    context = RenderContext(
        title=slug,
        content=Markup(converter.convert(source).decode("utf-8")),
    )
    return templates.render(template_name, context)
