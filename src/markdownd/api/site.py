"""Catch-all site endpoint.

Every request goes through the same pipeline: resolve the URL path beneath
the root, verify the result, classify the file and pick a rendering branch.
Any failure along the way is logged and answered with one uniform 404.
"""

import logging
import os

from aiohttp import hdrs, web

from markdownd.app_keys import renderer_key, server_config_key
from markdownd.config import ServerConfig
from markdownd.core.classifier import classify_file
from markdownd.core.dispatcher import Branch, markdown_sibling, render
from markdownd.core.errors import PathRejected
from markdownd.core.guard import is_safe
from markdownd.core.resolver import resolve
from markdownd.core.types import RequestContext, URLPath

logger = logging.getLogger(__name__)


def create_site_routes() -> list[web.RouteDef]:
    return [
        web.route("*", "/{path:.*}", serve_path),
    ]


async def serve_path(request: web.Request) -> web.StreamResponse:
    context = RequestContext(url_path=URLPath(request.path))
    try:
        if request.method != hdrs.METH_GET:
            user_agent = request.headers.get(hdrs.USER_AGENT, "")
            raise PathRejected(
                f"bad method {request.method} from {request.remote} ({user_agent})",
                request.path,
            )
        return _respond(request, context)
    except PathRejected as e:
        logger.info(f"{context.request_id} {e.reason}: {e.path}")
        raise web.HTTPNotFound() from None
    finally:
        logger.info(f"{context.request_id} closed after {context.elapsed():.6f}s")


def _respond(request: web.Request, context: RequestContext) -> web.StreamResponse:
    config = request.app[server_config_key]
    render_markdown = request.app[renderer_key]
    request_id = context.request_id

    path = resolve(config.root_path, context.url_path, config.index_name)
    logger.info(f"{request_id} {request.remote} {request.method} {context.url_path} -> {path}")

    sibling = markdown_sibling(path)
    if sibling is not None:
        logger.info(f"{request_id} {path} -> {sibling}")
        path = sibling

    _verify(path, config)
    context.resolved_path = path

    classification = classify_file(path, _read(path))
    rendition = render(path, classification, request.query_string, render_markdown)
    logger.info(f"{request_id} serving {rendition.branch} ({classification.category}): {path}")

    if rendition.branch is Branch.STATIC:
        return web.FileResponse(path)

    # Raw markdown carries no explicit type; label it with the sniffed one.
    content_type = rendition.content_type or classification.category
    return web.Response(body=rendition.body, headers={hdrs.CONTENT_TYPE: content_type})


def _verify(path: str, config: ServerConfig) -> None:
    """Run the existence, symlink and root-prefix checks on the final path.

    Raises:
        PathRejected: If any check fails
    """
    try:
        os.stat(path)
    except FileNotFoundError:
        raise PathRejected("no such file", path) from None
    except (OSError, ValueError) as e:
        # Permission problems are reported exactly like missing files.
        raise PathRejected(f"error opening file ({e.__class__.__name__})", path) from None

    if not is_safe(path):
        raise PathRejected("symlink in path", path)

    if not path.startswith(config.root_path):
        raise PathRejected(f"missing root prefix {config.root_path}", path)


def _read(path: str) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise PathRejected(f"error reading file ({e.__class__.__name__})", path) from None
