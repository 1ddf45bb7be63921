"""Markdown to HTML rendering.

Wraps mistune with the plugin set used for served pages. Raw HTML inside
markdown is passed through, so authors can mix the two.
"""

import logging
from collections.abc import Sequence

import mistune

logger = logging.getLogger(__name__)

DEFAULT_PLUGINS = (
    "table",
    "strikethrough",
    "footnotes",
    "url",
    "def_list",
    "task_lists",
)


class MarkdownRenderer:
    """Renders markdown source bytes to HTML bytes.

    Instances are callables matching ``MarkdownRender``: UTF-8 markdown in,
    UTF-8 HTML out. Undecodable input bytes are replaced rather than raised.
    """

    def __init__(self, plugins: Sequence[str] | None = None) -> None:
        """Initialize renderer.

        Args:
            plugins: mistune plugin names (default: DEFAULT_PLUGINS)
        """
        self.markdown = mistune.create_markdown(
            escape=False,
            plugins=list(plugins if plugins is not None else DEFAULT_PLUGINS),
        )

    def __call__(self, source: bytes) -> bytes:
        text = source.decode("utf-8", errors="replace")
        logger.debug(f"Converting {len(text)} characters of markdown")
        html = self.markdown(text)
        return html.encode("utf-8")
