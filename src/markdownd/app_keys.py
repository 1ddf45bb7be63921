"""Application keys for type-safe app configuration access."""

from aiohttp import web

from markdownd.config import ServerConfig
from markdownd.core.renderer import MarkdownRenderer

server_config_key = web.AppKey("server_config", ServerConfig)
renderer_key = web.AppKey("renderer", MarkdownRenderer)
