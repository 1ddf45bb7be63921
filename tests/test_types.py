"""Tests for per-request context."""

from markdownd.core.types import RequestContext, URLPath


class TestRequestContext:
    """Tests for RequestContext."""

    def test__new_context__has_unique_id(self) -> None:
        """Generate a fresh id for every request."""
        ids = {RequestContext(url_path=URLPath("/")).request_id for _ in range(100)}

        assert len(ids) == 100

    def test__new_context__not_yet_resolved(self) -> None:
        """Start without a resolved path."""
        context = RequestContext(url_path=URLPath("/guide.md"))

        assert context.url_path == "/guide.md"
        assert context.resolved_path is None

    def test__elapsed__non_negative(self) -> None:
        """Measure time since the request started."""
        context = RequestContext(url_path=URLPath("/"))

        assert context.elapsed() >= 0
