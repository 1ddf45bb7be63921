"""URL path to filesystem path resolution.

Maps a raw request path onto the served root without touching the
filesystem. Symlinks are not followed here; see ``guard.is_safe``.
"""

import os

from markdownd.config import DEFAULT_INDEX
from markdownd.core.errors import PathRejected


def resolve(root_path: str, url_path: str, index_name: str = DEFAULT_INDEX) -> str:
    """Resolve a request path to a canonical absolute path beneath the root.

    Args:
        root_path: Absolute, slash-terminated root directory
        url_path: Raw request path, e.g. "/guide/" or "/page.html"
        index_name: File substituted for the empty path and paths ending in "/"

    Returns:
        Canonical absolute path with root_path as a literal prefix

    Raises:
        PathRejected: If the path contains a traversal sequence or a NUL byte,
            or its canonical form falls outside the root
    """
    if "../" in url_path:
        raise PathRejected("traversal sequence", url_path)
    if "\x00" in url_path:
        raise PathRejected("null byte", url_path)

    relative = url_path.removeprefix("/")
    if not relative:
        relative = index_name
    elif relative.endswith("/"):
        relative += index_name

    # Syntactic only: collapses "." and ".." segments and duplicate slashes.
    candidate = os.path.abspath(root_path + relative)

    if not candidate.startswith(root_path):
        raise PathRejected("outside root", candidate)

    return candidate
