"""Symlink escape protection.

A path is safe when following every symbolic link in it yields the path
itself, so any file reached through a link (at any component) is refused.
"""

import logging
import os

logger = logging.getLogger(__name__)


def is_safe(path: str) -> bool:
    """Return True if ``path`` exists and contains no symlink hop.

    Evaluated on every request; the filesystem can change between requests.
    """
    if not path:
        return False

    if not os.path.isabs(path):
        path = os.path.abspath(path)

    try:
        real = os.path.realpath(path, strict=True)
    except (OSError, ValueError) as e:
        logger.debug(f"Cannot resolve real path of {path!r}: {e}")
        return False

    return real == path
