"""Errors raised while resolving a request path."""


class PathRejected(Exception):
    """Raised when a request path cannot be served.

    Every rejection is reported to the client as the same 404; ``reason`` and
    ``path`` exist only for the server log.
    """

    def __init__(self, reason: str, path: str) -> None:
        super().__init__(f"{reason}: {path!r}")
        self.reason = reason
        self.path = path
