"""Tests for rendering branch selection."""

from pathlib import Path

import pytest
from markdownd.core.classifier import Classification, classify_file
from markdownd.core.dispatcher import (
    Branch,
    Rendition,
    markdown_sibling,
    render,
)


def _stub_markdown(source: bytes) -> bytes:
    return b"<rendered>" + source + b"</rendered>"


def _render(path: str, content: bytes, query_string: str = "") -> Rendition:
    return render(path, classify_file(path, content), query_string, _stub_markdown)


class TestMarkdownSibling:
    """Tests for markdown_sibling()."""

    def test__html_with_md_sibling__returns_md(self, site_dir: Path) -> None:
        """Substitute page.md for page.html when it exists."""
        (site_dir / "page.md").write_text("# Page")

        assert markdown_sibling(str(site_dir / "page.html")) == str(site_dir / "page.md")

    def test__html_without_md_sibling__returns_none(self, site_dir: Path) -> None:
        """Keep the html path when no markdown source exists."""
        (site_dir / "page.html").write_text("<p>page</p>")

        assert markdown_sibling(str(site_dir / "page.html")) is None

    def test__non_html_path__returns_none(self, site_dir: Path) -> None:
        """Only .html paths are candidates."""
        (site_dir / "page.md").write_text("# Page")

        assert markdown_sibling(str(site_dir / "page.md")) is None
        assert markdown_sibling(str(site_dir / "page.htm")) is None

    def test__md_sibling_directory__returns_none(self, site_dir: Path) -> None:
        """Ignore a directory named like the markdown sibling."""
        (site_dir / "page.md").mkdir()

        assert markdown_sibling(str(site_dir / "page.html")) is None


class TestRender:
    """Tests for render()."""

    def test__html_extension__served_raw(self) -> None:
        """Serve .html files byte for byte as text/html."""
        content = b"Hello, <em>world</em>"

        result = _render("/srv/site/page.html", content)

        assert result == Rendition(Branch.RAW_HTML, content, "text/html")

    def test__html_content__served_raw_regardless_of_extension(self) -> None:
        """Serve sniffed HTML as text/html even with another extension."""
        content = b"<!DOCTYPE html><html></html>"

        result = _render("/srv/site/page.md", content)

        assert result.branch is Branch.RAW_HTML
        assert result.body == content
        assert result.content_type == "text/html"

    def test__markdown__rendered(self) -> None:
        """Pass markdown through the renderer."""
        result = _render("/srv/site/doc.md", b"# Doc")

        assert result.branch is Branch.MARKDOWN
        assert result.body == b"<rendered># Doc</rendered>"
        assert result.content_type == "text/html; charset=utf-8"

    @pytest.mark.parametrize("query_string", ["raw", "raw=1", "view=raw", "format=rawsource"])
    def test__raw_query__returns_source(self, query_string: str) -> None:
        """Return unmodified source when the query string contains 'raw'."""
        result = _render("/srv/site/doc.md", b"# Doc", query_string)

        assert result == Rendition(Branch.RAW_MARKDOWN, b"# Doc", None)

    def test__raw_query_on_html__still_raw_html(self) -> None:
        """The raw switch only applies to markdown."""
        result = _render("/srv/site/page.html", b"<p>x</p>", "raw")

        assert result.branch is Branch.RAW_HTML

    def test__binary_markdown__falls_back_to_static(self) -> None:
        """Markdown extension with non-text content is served statically."""
        result = _render("/srv/site/doc.md", b"\x00\x01\x02binary")

        assert result == Rendition(Branch.STATIC)

    def test__other_file__falls_back_to_static(self) -> None:
        """Serve anything else statically."""
        assert _render("/srv/site/style.css", b"body { color: red; }").branch is Branch.STATIC
        assert _render("/srv/site/notes.txt", b"just text").branch is Branch.STATIC

    def test__font_signature_markdown__falls_back_to_static(self) -> None:
        """Readable text that sniffs as a font is not rendered."""
        result = _render("/srv/site/otto.md", b"OTTO von Bismarck\n\nA biography.")

        assert result == Rendition(Branch.STATIC)

    @pytest.mark.parametrize(
        ("path", "content", "branch"),
        [
            ("/srv/site/.md", b"# Doc", Branch.MARKDOWN),
            ("/srv/site/.html", b"plain words", Branch.RAW_HTML),
        ],
    )
    def test__dotfile_extension__dispatched(
        self, path: str, content: bytes, branch: Branch
    ) -> None:
        """Files named just .md or .html dispatch on that extension."""
        assert _render(path, content).branch is branch

    def test__extension_from_classification__used(self) -> None:
        """Dispatch on the classified extension, not on the path text."""
        classification = Classification(
            content=b"# Doc", category="text/plain; charset=utf-8", extension=".md"
        )

        result = render("/srv/site/doc", classification, "", _stub_markdown)

        assert result.branch is Branch.MARKDOWN

    def test__explicit_classification__respected(self) -> None:
        """Dispatch on the given category, not on re-sniffed content."""
        classification = Classification(content=b"# Doc", category="text/html", extension=".md")

        result = render("/srv/site/doc.md", classification, "", _stub_markdown)

        assert result.branch is Branch.RAW_HTML
