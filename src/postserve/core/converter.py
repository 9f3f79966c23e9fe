"""Markdown to HTML conversion.

Wraps markdown-it-py with a fixed set of extensions and render flags:

- CommonMark plus tables, strikethrough, definition lists and footnotes
- bare URLs become links (linkify)
- typographic replacements and smart quotes
- inline and block math ($...$ and $$...$$)
- heading ids on every level, derived from the heading text unless given
  explicitly as a trailing {#id}
- raw HTML in the source is escaped rather than passed through
- links to another host open in a new browsing context (target="_blank")

Conversion is a pure function of its input: the same bytes always produce
the same HTML.
"""

import re
from collections.abc import Sequence
from urllib.parse import urlsplit

from markdown_it import MarkdownIt
from markdown_it.renderer import RendererHTML
from markdown_it.rules_core import StateCore
from markdown_it.token import Token
from markdown_it.utils import EnvType, OptionsDict
from mdit_py_plugins.anchors import anchors_plugin
from mdit_py_plugins.deflist import deflist_plugin
from mdit_py_plugins.dollarmath import dollarmath_plugin
from mdit_py_plugins.footnote import footnote_plugin

EXPLICIT_ID_PATTERN = re.compile(r"\s*\{#([A-Za-z][\w:.-]*)\}\s*$")


def is_external_link(href: str | None) -> bool:
    """Check whether a link target points at another host.

    Relative paths, fragments and scheme-only URIs (mailto:, tel:) are not
    external, so unlike a plain "not relative" check, mailto: links stay in
    the current tab.
    """
    if not href:
        return False
    return bool(urlsplit(href).netloc)


def _render_link_open(
    self: RendererHTML,
    tokens: Sequence[Token],
    idx: int,
    options: OptionsDict,
    env: EnvType,
) -> str:
    token = tokens[idx]
    href = token.attrGet("href")
    if is_external_link(str(href) if href is not None else None):
        token.attrSet("target", "_blank")
    return self.renderToken(tokens, idx, options, env)


def _extract_explicit_ids(state: StateCore) -> None:
    # Runs before the anchors rule so the {#id} suffix never reaches the slug.
    for idx, token in enumerate(state.tokens):
        if token.type != "heading_open":
            continue
        inline = state.tokens[idx + 1]
        if not inline.children or inline.children[-1].type != "text":
            continue
        last = inline.children[-1]
        match = EXPLICIT_ID_PATTERN.search(last.content)
        if match is None:
            continue
        last.content = last.content[: match.start()]
        inline.content = EXPLICIT_ID_PATTERN.sub("", inline.content)
        token.meta["explicit_id"] = match.group(1)


def _apply_explicit_ids(state: StateCore) -> None:
    for token in state.tokens:
        if token.type == "heading_open" and "explicit_id" in token.meta:
            token.attrSet("id", token.meta["explicit_id"])


class MarkdownConverter:
    """Converts markdown documents to HTML fragments."""

    def __init__(self) -> None:
        self._md = MarkdownIt(
            "commonmark",
            {"html": False, "linkify": True, "typographer": True},
        ).enable(["table", "strikethrough", "linkify", "replacements", "smartquotes"])
        self._md.core.ruler.push("explicit_heading_ids", _extract_explicit_ids)
        (
            self._md.use(anchors_plugin, min_level=1, max_level=6)
            .use(deflist_plugin)
            .use(footnote_plugin)
            .use(dollarmath_plugin, double_inline=True)
        )
        self._md.core.ruler.push("apply_heading_ids", _apply_explicit_ids)
        self._md.add_render_rule("link_open", _render_link_open)

    def convert(self, source: bytes) -> bytes:
        """Convert markdown bytes to HTML bytes.

        Never fails: invalid UTF-8 is replaced and malformed markdown is
        rendered best-effort.

        Args:
            source: Raw markdown document

        Returns:
            UTF-8 encoded HTML fragment
        """
        text = source.decode("utf-8", errors="replace")
        return self.convert_text(text).encode("utf-8")

    def convert_text(self, text: str) -> str:
        """Convert markdown text to an HTML string."""
        return self._md.render(text)
