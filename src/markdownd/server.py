"""aiohttp server for markdownd.

Application factory and route registration.
"""

from aiohttp import hdrs, web

from markdownd import SERVER_HEADER
from markdownd.api.site import create_site_routes
from markdownd.app_keys import renderer_key, server_config_key
from markdownd.config import Config, ServerConfig
from markdownd.core.renderer import MarkdownRenderer


def create_app(
    config: ServerConfig,
    *,
    renderer: MarkdownRenderer | None = None,
) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Immutable serving configuration
        renderer: Markdown renderer (default: MarkdownRenderer())

    Returns:
        Configured aiohttp application
    """
    app = web.Application()

    app[server_config_key] = config
    app[renderer_key] = renderer if renderer is not None else MarkdownRenderer()

    app.on_response_prepare.append(_set_common_headers)
    app.router.add_routes(create_site_routes())

    return app


async def _set_common_headers(request: web.Request, response: web.StreamResponse) -> None:
    """Stamp every response, errors included, before headers are sent."""
    response.headers[hdrs.SERVER] = SERVER_HEADER
    response.headers["X-Frame-Options"] = "DENY"
    # No keep-alive: one request per connection. The Connection header is
    # already decided when this hook runs, so it is set explicitly too.
    response.force_close()
    response.headers[hdrs.CONNECTION] = "close"


def run_server(config: Config, server_config: ServerConfig | None = None) -> None:
    """Run the server.

    Args:
        config: Application configuration
        server_config: Prebuilt serving configuration (default: built from config)

    Raises:
        FileNotFoundError: If the root directory doesn't exist
        NotADirectoryError: If the root is not a directory
    """
    if server_config is None:
        server_config = config.server_config()
    app = create_app(server_config)
    web.run_app(
        app,
        host=config.server.host,
        port=config.server.port,
        print=None,
        access_log=None,
    )
