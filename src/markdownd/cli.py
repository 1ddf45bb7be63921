"""CLI interface for markdownd.

Serves a directory of markdown, html and static files over HTTP.
"""

from pathlib import Path

import click

from markdownd import __version__
from markdownd.config import Config, parse_address
from markdownd.logs import setup_logging

BANNER = f"[markdownd v{__version__}]"

EPILOG = """\b
Examples:
  Serve current directory on port 8080, log to stderr
    markdownd --http 127.0.0.1:8080 .

  Serve 'docs' directory on port 8081, log to 'md.log'
    markdownd --log md.log --http :8081 docs
"""


@click.command(epilog=EPILOG)
@click.argument(
    "directory",
    required=False,
    type=click.Path(path_type=Path),
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path, dir_okay=False),
    default=None,
    help="Path to configuration file (default: auto-discover markdownd.toml)",
)
@click.option(
    "--http",
    "address",
    default=None,
    help="Address to listen on, e.g. 127.0.0.1:8080 or :8080 (overrides config)",
)
@click.option(
    "--log",
    "log_file",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Append logs to this file instead of stderr (overrides config)",
)
@click.option(
    "--index",
    default=None,
    help="Page to use for paths ending in '/' (overrides config, default: index.md)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable debug logging",
)
@click.version_option(__version__, prog_name="markdownd")
def cli(
    directory: Path | None,
    config_path: Path | None,
    address: str | None,
    log_file: Path | None,
    index: str | None,
    verbose: bool,
) -> None:
    """Serve DIRECTORY as a website, rendering markdown files to HTML."""
    from markdownd.server import run_server

    click.echo(BANNER)

    host: str | None = None
    port: int | None = None
    if address is not None:
        try:
            host, port = parse_address(address)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--http") from None

    try:
        config = Config.load(config_path).with_overrides(
            host=host,
            port=port,
            root=directory,
            index=index,
            log_file=log_file,
            log_level="DEBUG" if verbose else None,
        )
        server_config = config.server_config()
    except (OSError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"serving filesystem: {server_config.root_path}")

    try:
        setup_logging(config.log.level, config.log.file)
    except OSError as e:
        raise click.ClickException(f"can't open log file: {e}") from e

    click.echo(f"log output: {config.log.file if config.log.file else '<stderr>'}")
    click.echo(f"listening: {config.server.host}:{config.server.port}")

    run_server(config, server_config)


if __name__ == "__main__":
    cli()
