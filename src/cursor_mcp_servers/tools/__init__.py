# Cursor MCP Servers
# File: tools/__init__.py
# Version: v2

"""Adapter tool sets, one module per external system.

Each module exposes ``register_tools(registry, client)`` and an async
``build()`` that reads its config, creates the client and returns a ready
``ToolRegistry``.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Dict

from ..registry import ToolRegistry
from . import github, jira, kubernetes, pdf, postgres, redash

Builder = Callable[[], Awaitable[ToolRegistry]]

SERVERS: Dict[str, Builder] = {
    "jira": jira.build,
    "github": github.build,
    "postgres": postgres.build,
    "kubernetes": kubernetes.build,
    "pdf": pdf.build,
    "redash": redash.build,
}
