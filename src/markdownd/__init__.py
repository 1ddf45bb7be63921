"""markdownd - serve a directory of markdown, html and static files."""

__version__ = "0.1.0"

SERVER_HEADER = f"markdownd/{__version__}"
