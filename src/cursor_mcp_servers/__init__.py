# Cursor MCP Servers
# File: __init__.py
# Version: v1

"""Top-level package for the Cursor MCP adapter servers."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

__all__ = ["__version__"]


def _resolve_version() -> str:
    """Resolve installed distribution version.

    Uses Python package metadata so __version__ stays aligned with pyproject.toml.
    """
    try:
        return version("cursor-mcp-servers")
    except PackageNotFoundError:
        # Running from a source checkout without installed metadata.
        return "1.0.0"


__version__ = _resolve_version()
