# Cursor MCP Servers
# File: registry.py
# Version: v3

"""Tool registry: the one place tools are declared, validated and dispatched.

Each adapter builds its own ``ToolRegistry``, registers handlers against it
and hands it to the stdio transport. A registry knows nothing about stdio;
it turns ``(name, arguments)`` into a ``CallToolResult`` and never raises.

Handlers are async callables taking a validated pydantic model and returning
``Success`` or ``Failure``. Anything they raise is logged with its traceback
(stderr only) and reported to the agent as a one-line failure prefixed with
the tool's error context.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from mcp import types
from pydantic import BaseModel, ValidationError

from .envelope import Failure, ToolResult, error_envelope, to_envelope
from .errors import ToolRegistrationError

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Awaitable[ToolResult]]
ShutdownHook = Callable[[], Awaitable[None]]


class NoParams(BaseModel):
    """Parameter model for tools that take no arguments."""


@dataclass
class ToolSpec:
    name: str
    description: str
    params: Type[BaseModel]
    handler: Handler
    error_context: str

    def to_tool(self) -> types.Tool:
        return types.Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.params.model_json_schema(),
        )


def _format_validation_error(exc: ValidationError) -> str:
    parts: List[str] = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        msg = str(err.get("msg", "invalid value"))
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or str(exc)


class ToolRegistry:
    """Ordered collection of tools for one adapter server."""

    def __init__(self, server_name: str, version: str = "1.0.0") -> None:
        self.server_name = server_name
        self.version = version
        self._tools: Dict[str, ToolSpec] = {}
        self._shutdown_hooks: List[ShutdownHook] = []
        self._closed = False

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(
        self,
        name: str,
        params: Optional[Type[BaseModel]],
        handler: Handler,
        *,
        description: str = "",
        error_context: Optional[str] = None,
    ) -> ToolSpec:
        if not name:
            raise ToolRegistrationError("Tool name must be a non-empty string")
        if name in self._tools:
            raise ToolRegistrationError(
                f"Tool '{name}' is already registered on {self.server_name}"
            )

        spec = ToolSpec(
            name=name,
            description=description or (handler.__doc__ or "").strip(),
            params=params or NoParams,
            handler=handler,
            error_context=error_context or f"Error in {name}",
        )
        self._tools[name] = spec
        return spec

    def tool(
        self,
        name: str,
        params: Optional[Type[BaseModel]] = None,
        *,
        description: str = "",
        error_context: Optional[str] = None,
    ) -> Callable[[Handler], Handler]:
        """Decorator form of :meth:`register`."""

        def decorator(fn: Handler) -> Handler:
            self.register(
                name,
                params,
                fn,
                description=description,
                error_context=error_context,
            )
            return fn

        return decorator

    def names(self) -> List[str]:
        return list(self._tools)

    def list_tools(self) -> List[types.Tool]:
        return [spec.to_tool() for spec in self._tools.values()]

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    async def dispatch(
        self, name: str, arguments: Optional[Dict[str, Any]] = None
    ) -> types.CallToolResult:
        spec = self._tools.get(name)
        if spec is None:
            logger.warning("Call for unknown tool %r", name)
            return error_envelope(f"Unknown tool: {name}")

        try:
            params = spec.params.model_validate(arguments or {})
        except ValidationError as exc:
            return error_envelope(
                f"Invalid parameters for {name}: {_format_validation_error(exc)}"
            )

        started = time.perf_counter()
        try:
            result = await spec.handler(params)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Error in %s handler", name)
            result = Failure(f"{self._render_context(spec, params)}: {exc}")
        finally:
            logger.debug(
                "%s finished in %.1f ms", name, (time.perf_counter() - started) * 1000
            )

        return to_envelope(result)

    @staticmethod
    def _render_context(spec: ToolSpec, params: BaseModel) -> str:
        try:
            return spec.error_context.format(**params.model_dump())
        except (KeyError, IndexError, ValueError):
            return spec.error_context

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def add_shutdown_hook(self, hook: ShutdownHook) -> None:
        self._shutdown_hooks.append(hook)

    @property
    def closed(self) -> bool:
        return self._closed

    async def aclose(self) -> None:
        """Run shutdown hooks once, newest first. Safe to call repeatedly."""
        if self._closed:
            return
        self._closed = True

        for hook in reversed(self._shutdown_hooks):
            try:
                await hook()
            except Exception:  # noqa: BLE001
                logger.exception("Shutdown hook %r failed", hook)
