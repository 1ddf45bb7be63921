"""Rendering branch selection.

Decides how a verified file is delivered: raw HTML, markdown rendered to
HTML, raw markdown source, or the generic static file response.
"""

import os
from dataclasses import dataclass
from enum import StrEnum

from markdownd.core.classifier import Classification, is_html, is_plain_text
from markdownd.core.types import MarkdownRender

HTML_CONTENT_TYPE = "text/html"
RENDERED_CONTENT_TYPE = "text/html; charset=utf-8"
RAW_QUERY_MARKER = "raw"


class Branch(StrEnum):
    RAW_HTML = "raw html"
    MARKDOWN = "markdown"
    RAW_MARKDOWN = "raw markdown"
    STATIC = "static"


@dataclass(frozen=True)
class Rendition:
    """Outcome of dispatch.

    ``body`` is None for the static branch, which is served from the file
    itself. ``content_type`` is None when no explicit type is chosen.
    """

    branch: Branch
    body: bytes | None = None
    content_type: str | None = None


def markdown_sibling(path: str) -> str | None:
    """Return the ``.md`` file standing in for an ``.html`` path, if any.

    Only existence is checked; the caller re-applies every safety check to
    whichever path it ends up serving.
    """
    if not path.endswith(".html"):
        return None
    candidate = path.removesuffix(".html") + ".md"
    if os.path.isfile(candidate):
        return candidate
    return None


def render(
    path: str,
    classification: Classification,
    query_string: str,
    render_markdown: MarkdownRender,
) -> Rendition:
    """Choose and execute the rendering branch for a verified file.

    Rules are evaluated in order, first match wins:

    1. ``.html`` extension or HTML-like content: bytes as-is, ``text/html``.
    2. ``.md`` extension with plain-text content: source bytes when the query
       string contains "raw", otherwise rendered HTML.
    3. Anything else: static file serving.

    Args:
        path: Verified filesystem path (after any ``.md`` substitution)
        classification: Content bytes, sniffed category and extension
        query_string: Raw request query string
        render_markdown: Markdown to HTML collaborator

    Returns:
        Rendition describing the response to send
    """
    content = classification.content
    category = classification.category
    extension = classification.extension

    if extension == ".html" or is_html(category):
        return Rendition(Branch.RAW_HTML, content, HTML_CONTENT_TYPE)

    if extension == ".md" and is_plain_text(category):
        if RAW_QUERY_MARKER in query_string:
            return Rendition(Branch.RAW_MARKDOWN, content)
        return Rendition(Branch.MARKDOWN, render_markdown(content), RENDERED_CONTENT_TYPE)

    return Rendition(Branch.STATIC)
