"""Core type definitions."""

import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import NewType

# Raw URL path as received from the client (e.g., "/guide/", "/page.html")
# Distinct from filesystem paths to catch type mismatches
URLPath = NewType("URLPath", str)

# Markdown source bytes in, HTML bytes out
MarkdownRender = Callable[[bytes], bytes]


@dataclass
class RequestContext:
    """Per-request state, created on entry and dropped on exit."""

    url_path: URLPath
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    resolved_path: str | None = None
    start_time: float = field(default_factory=time.perf_counter)

    def elapsed(self) -> float:
        """Seconds since the request started."""
        return time.perf_counter() - self.start_time
