"""Shared test fixtures."""

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from aiohttp import web
from markdownd.config import ServerConfig
from markdownd.server import create_app


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    """Create the served root directory.

    Use exist_ok=True to allow other fixtures to also create the site dir.
    """
    site = tmp_path / "site"
    site.mkdir(exist_ok=True)
    return site


@pytest.fixture
def outside_dir(tmp_path: Path) -> Path:
    """Create a directory next to the root holding a file that must never be served."""
    outside = tmp_path / "outside"
    outside.mkdir(exist_ok=True)
    (outside / "secret.md").write_text("# Secret\n\ntop secret")
    return outside


@pytest.fixture
def server_config(site_dir: Path) -> ServerConfig:
    return ServerConfig.from_directory(site_dir)


@pytest.fixture
def app(server_config: ServerConfig) -> web.Application:
    return create_app(server_config)


@pytest.fixture(autouse=True)
def _restore_loggers() -> Iterator[None]:
    """Undo handler changes made by setup_logging() so caplog keeps working."""
    saved = []
    for name in ("markdownd", "aiohttp.server"):
        logger = logging.getLogger(name)
        saved.append((logger, list(logger.handlers), logger.propagate, logger.level))

    yield

    for logger, handlers, propagate, level in saved:
        for handler in logger.handlers:
            if handler not in handlers:
                handler.close()
        logger.handlers = handlers
        logger.propagate = propagate
        logger.setLevel(level)
