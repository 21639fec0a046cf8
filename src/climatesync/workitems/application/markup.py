"""
Markup Renderer - issue body markdown to work item HTML.

Fenced and inline code are syntax highlighted with pygments, bare URLs are
auto-linked and raw HTML in the source is escaped. Rendering never raises.
"""

import html
from typing import Any, Optional

from markdown_it import MarkdownIt
from pygments import highlight as pygments_highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name, guess_lexer
from pygments.util import ClassNotFound

from climatesync.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

_FORMATTER = HtmlFormatter(nowrap=True)


def _highlight_block(code: str, lang: str, attrs: str) -> str:
    """markdown-it highlight hook. Empty string means "escape it yourself"."""
    if not lang:
        return ""
    try:
        lexer = get_lexer_by_name(lang)
    except ClassNotFound:
        return ""
    return pygments_highlight(code, lexer, _FORMATTER)


def _highlight_inline(code: str) -> Optional[str]:
    try:
        lexer = guess_lexer(code)
    except ClassNotFound:
        return None
    return pygments_highlight(code, lexer, _FORMATTER).rstrip("\n")


def _render_code_inline(self: Any, tokens: list, idx: int, options: Any, env: Any) -> str:
    token = tokens[idx]
    highlighted = _highlight_inline(token.content)
    if highlighted is None:
        highlighted = html.escape(token.content)
    return f"<code{self.renderAttrs(token)}>{highlighted}</code>"


class MarkupRenderer:
    """Stateless markdown to HTML renderer."""

    def __init__(self, inline_highlight: bool = True):
        self._md = MarkdownIt(
            "default",
            {
                "linkify": True,
                "typographer": True,
                "xhtmlOut": True,
                "highlight": _highlight_block,
            },
        )
        if inline_highlight:
            self._md.add_render_rule("code_inline", _render_code_inline)

    def render(self, body: Optional[str]) -> str:
        """
        Render markdown to HTML.

        Malformed input degrades to the escaped source inside <pre>.
        """
        if not body:
            return ""
        try:
            return self._md.render(body)
        except Exception as e:
            logger.warning("markup_render_failed", error=str(e), error_type=type(e).__name__)
            return f"<pre>{html.escape(str(body))}</pre>"


_default_renderer: Optional[MarkupRenderer] = None


def render_markup(body: Optional[str]) -> str:
    """Render with a shared default renderer."""
    global _default_renderer
    if _default_renderer is None:
        _default_renderer = MarkupRenderer()
    return _default_renderer.render(body)
