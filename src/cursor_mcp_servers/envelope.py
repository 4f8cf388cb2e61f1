# Cursor MCP Servers
# File: envelope.py
# Version: v1

"""Response envelope shared by every tool.

Success is always two text parts: a one-line human summary followed by the
pretty-printed JSON payload. Failure is a single ``Error: ...`` text part
with ``isError`` set.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Union

from mcp import types

_DEFAULT_SUMMARY = "Operation completed successfully."


@dataclass(frozen=True)
class Success:
    summary: str
    payload: Any = None


@dataclass(frozen=True)
class Failure:
    message: str


ToolResult = Union[Success, Failure]


def error_text(message: str) -> str:
    """Prefix a message with ``Error: `` unless it already starts with Error."""
    text = str(message).strip() or "Unknown error"
    if text.startswith("Error"):
        return text
    return f"Error: {text}"


def success_envelope(summary: str, payload: Any) -> types.CallToolResult:
    summary = summary.strip() if summary else ""
    return types.CallToolResult(
        content=[
            types.TextContent(type="text", text=summary or _DEFAULT_SUMMARY),
            types.TextContent(
                type="text", text=json.dumps(payload, indent=2, default=str)
            ),
        ],
        isError=False,
    )


def error_envelope(message: str) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=error_text(message))],
        isError=True,
    )


def to_envelope(result: ToolResult) -> types.CallToolResult:
    """Render a handler result into the wire envelope."""
    if isinstance(result, Failure):
        return error_envelope(result.message)
    if isinstance(result, Success):
        return success_envelope(result.summary, result.payload)
    raise TypeError(f"Tool handlers must return Success or Failure, got {type(result).__name__}")
