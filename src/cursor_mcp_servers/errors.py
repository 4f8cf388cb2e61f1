# Cursor MCP Servers
# File: errors.py
# Version: v1

"""Exception types shared by the adapter clients and the tool registry.

Clients raise; the registry converts whatever reaches a tool handler
boundary into an error envelope. Nothing here is ever sent to the agent
as a traceback.
"""

from __future__ import annotations

from typing import Iterable, Optional


class ConfigurationError(RuntimeError):
    """A structurally required setting is missing; the process cannot start."""

    def __init__(self, adapter: str, missing: Iterable[str]) -> None:
        self.adapter = adapter
        self.missing = list(missing)
        super().__init__(
            f"Missing required environment variables for {adapter}: "
            + ", ".join(self.missing)
        )


class ToolRegistrationError(ValueError):
    """Raised at startup when a tool cannot be registered (e.g. duplicate name)."""


class UpstreamError(RuntimeError):
    """A remote call failed: non-2xx status, non-zero exit code, SDK error."""

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        exit_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.exit_code = exit_code


class ProtocolError(UpstreamError):
    """The upstream answered, but not in a shape its own contract allows."""


class JobTimeoutError(UpstreamError):
    """Bounded job polling ran out of attempts before a terminal status."""

    def __init__(self, job_id: str, elapsed_seconds: float) -> None:
        self.job_id = job_id
        self.elapsed_seconds = elapsed_seconds
        super().__init__(
            f"Job {job_id} did not complete within {_format_seconds(elapsed_seconds)} seconds"
        )


def _format_seconds(value: float) -> str:
    # 60.0 -> "60", 0.03 -> "0.03"
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"
