"""Rendering of question and answer bodies into HTML for Anki."""

from __future__ import annotations

from collections.abc import Callable

from markdown_it import MarkdownIt

Renderer = Callable[[str], str]

_MARKDOWN = MarkdownIt("commonmark", {"html": False})


def render_markdown(text: str) -> str:
    """Render a Markdown body to HTML.

    Args:
        text: Plain text accumulated by the parser, newline terminated.

    Returns:
        str: HTML markup; identical input always yields identical output. Raw
        HTML in the body is escaped rather than passed through.

    Examples:
        render_markdown("hola\\n")  # "<p>hola</p>\\n"
    """
    return _MARKDOWN.render(text)
