"""Configuration management for markdownd.

Supports TOML configuration format with auto-discovery. The per-request core
only ever sees the frozen ServerConfig built from it at startup.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

CONFIG_FILENAME = "markdownd.toml"
DEFAULT_INDEX = "index.md"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ServerConfig:
    """Immutable serving configuration shared by all requests.

    Attributes:
        root_path: Absolute, canonical root directory ending with a slash
        index_name: File served for the empty path and paths ending in "/"
    """

    root_path: str
    index_name: str = DEFAULT_INDEX

    @classmethod
    def from_directory(cls, directory: Path | str, index_name: str = DEFAULT_INDEX) -> ServerConfig:
        """Build the serving configuration for a root directory.

        The directory is resolved to its real path so that files beneath a
        root reached through a symlinked parent still pass the per-request
        real-path comparison.

        Args:
            directory: Root directory to serve
            index_name: Index filename for directory-style requests

        Returns:
            ServerConfig with a slash-terminated root path

        Raises:
            FileNotFoundError: If the directory doesn't exist
            NotADirectoryError: If the path is not a directory
            ValueError: If index_name is empty or contains a path separator
        """
        if not index_name or "/" in index_name:
            raise ValueError(f"Invalid index filename: {index_name!r}")

        root = os.path.realpath(os.path.abspath(directory))
        if not os.path.exists(root):
            raise FileNotFoundError(f"Root directory not found: {directory}")
        if not os.path.isdir(root):
            raise NotADirectoryError(f"Root is not a directory: {directory}")

        if not root.endswith("/"):
            root += "/"
        return cls(root_path=root, index_name=index_name)


@dataclass
class ListenConfig:
    """HTTP listener configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class SiteConfig:
    """Served directory configuration."""

    root: Path = field(default_factory=lambda: Path("."))
    index: str = DEFAULT_INDEX


@dataclass
class LogConfig:
    """Log destination configuration.

    A file of None means stderr.
    """

    file: Path | None = None
    level: str = "INFO"


@dataclass
class Config:
    """Application configuration."""

    server: ListenConfig
    site: SiteConfig
    log: LogConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for markdownd.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> Config:
        return cls(server=ListenConfig(), site=SiteConfig(), log=LogConfig())

    @classmethod
    def _load_from_file(cls, path: Path) -> Config:
        """Load configuration from a specific file.

        Relative paths in the file are resolved against the file's directory.

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            try:
                data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ValueError(f"Invalid TOML in {path}: {e}") from e

        config_dir = path.parent

        return cls(
            server=cls._parse_server(data.get("server")),
            site=cls._parse_site(data.get("site"), config_dir),
            log=cls._parse_log(data.get("log"), config_dir),
            config_path=path,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ListenConfig:
        if data is None:
            return ListenConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 8080)
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")
        if not 0 <= port <= 65535:
            raise ValueError("server.port must be between 0 and 65535")

        return ListenConfig(host=host, port=port)

    @classmethod
    def _parse_site(cls, data: object, config_dir: Path) -> SiteConfig:
        if data is None:
            return SiteConfig(root=config_dir)

        if not isinstance(data, dict):
            raise ValueError("site section must be a dictionary")

        root = data.get("root", ".")
        if not isinstance(root, str):
            raise ValueError("site.root must be a string")

        index = data.get("index", DEFAULT_INDEX)
        if not isinstance(index, str):
            raise ValueError("site.index must be a string")

        return SiteConfig(root=config_dir / root, index=index)

    @classmethod
    def _parse_log(cls, data: object, config_dir: Path) -> LogConfig:
        if data is None:
            return LogConfig()

        if not isinstance(data, dict):
            raise ValueError("log section must be a dictionary")

        file = data.get("file")
        if file is not None and not isinstance(file, str):
            raise ValueError("log.file must be a string")

        level = data.get("level", "INFO")
        if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
            raise ValueError(f"log.level must be one of {', '.join(LOG_LEVELS)}")

        return LogConfig(
            file=config_dir / file if file is not None else None,
            level=level.upper(),
        )

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        root: Path | None = None,
        index: str | None = None,
        log_file: Path | None = None,
        log_level: str | None = None,
    ) -> Config:
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Returns:
            New Config instance with overrides applied
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        site = self.site
        if root is not None or index is not None:
            site = replace(
                self.site,
                root=root if root is not None else self.site.root,
                index=index if index is not None else self.site.index,
            )

        log = self.log
        if log_file is not None or log_level is not None:
            log = replace(
                self.log,
                file=log_file if log_file is not None else self.log.file,
                level=log_level if log_level is not None else self.log.level,
            )

        return replace(self, server=server, site=site, log=log)

    def server_config(self) -> ServerConfig:
        """Build the immutable per-request configuration.

        Raises:
            FileNotFoundError: If the root directory doesn't exist
            NotADirectoryError: If the root is not a directory
            ValueError: If the index filename is invalid
        """
        return ServerConfig.from_directory(self.site.root, self.site.index)


def parse_address(address: str) -> tuple[str, int]:
    """Split a listen address into host and port.

    Accepts "host:port", "[v6addr]:port" and ":port" (all interfaces).

    Raises:
        ValueError: If the address is malformed
    """
    host, sep, port_text = address.rpartition(":")
    if not sep:
        raise ValueError(f"Listen address must be host:port, got {address!r}")

    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    if not host:
        host = "0.0.0.0"

    try:
        port = int(port_text)
    except ValueError:
        raise ValueError(f"Invalid port in listen address {address!r}") from None
    if not 0 <= port <= 65535:
        raise ValueError(f"Port out of range in listen address {address!r}")

    return host, port
