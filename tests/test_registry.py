# Cursor MCP Servers
# File: tests/test_registry.py
# Version: v1

from __future__ import annotations

import json
import logging

import pytest
from pydantic import BaseModel

from cursor_mcp_servers.envelope import Failure, Success, error_text, to_envelope
from cursor_mcp_servers.errors import ToolRegistrationError
from cursor_mcp_servers.registry import ToolRegistry


class EchoParams(BaseModel):
    word: str
    times: int = 1


def _registry() -> ToolRegistry:
    registry = ToolRegistry("Test Server")

    @registry.tool("echo", EchoParams, description="Repeat a word.", error_context="Error echoing {word}")
    async def echo(params: EchoParams):
        return Success(f"Echoed {params.word}.", {"words": [params.word] * params.times})

    @registry.tool("explode", EchoParams, error_context="Error exploding {word}")
    async def explode(params: EchoParams):
        raise RuntimeError("HTTP error: 500 - Internal Server Error")

    @registry.tool("refuse")
    async def refuse(_params):
        return Failure("nothing to do")

    return registry


def test_success_envelope_has_summary_then_json() -> None:
    result = to_envelope(Success("Found 2 things.", {"b": 1, "a": [1, 2]}))

    assert result.isError is False
    assert [c.type for c in result.content] == ["text", "text"]
    assert result.content[0].text == "Found 2 things."
    assert json.loads(result.content[1].text) == {"b": 1, "a": [1, 2]}
    assert result.content[1].text == json.dumps({"b": 1, "a": [1, 2]}, indent=2)


def test_empty_summary_is_replaced() -> None:
    result = to_envelope(Success("", []))
    assert result.content[0].text.strip()


def test_error_prefix_is_not_doubled() -> None:
    assert error_text("boom") == "Error: boom"
    assert error_text("Error fetching projects: boom") == "Error fetching projects: boom"

    result = to_envelope(Failure("Error: already prefixed"))
    assert result.isError is True
    assert len(result.content) == 1
    assert result.content[0].text == "Error: already prefixed"


@pytest.mark.asyncio
async def test_dispatch_validates_and_coerces() -> None:
    registry = _registry()

    result = await registry.dispatch("echo", {"word": "hi", "times": "3"})

    assert result.isError is False
    assert result.content[0].text == "Echoed hi."
    assert json.loads(result.content[1].text) == {"words": ["hi", "hi", "hi"]}


@pytest.mark.asyncio
async def test_dispatch_validation_error_names_field() -> None:
    registry = _registry()

    result = await registry.dispatch("echo", {"times": "many"})

    assert result.isError is True
    text = result.content[0].text
    assert text.startswith("Error: Invalid parameters for echo:")
    assert "word" in text
    assert "times" in text


@pytest.mark.asyncio
async def test_unknown_tool_never_reaches_a_handler() -> None:
    registry = _registry()

    result = await registry.dispatch("nope", {})

    assert result.isError is True
    assert result.content[0].text == "Error: Unknown tool: nope"


@pytest.mark.asyncio
async def test_handler_exception_becomes_contextual_failure(caplog) -> None:
    registry = _registry()

    with caplog.at_level(logging.ERROR, logger="cursor_mcp_servers.registry"):
        result = await registry.dispatch("explode", {"word": "x"})

    assert result.isError is True
    assert result.content[0].text == "Error exploding x: HTTP error: 500 - Internal Server Error"
    # traceback goes to the log, not to the agent
    assert "Traceback" not in result.content[0].text
    assert any(rec.exc_info for rec in caplog.records)


@pytest.mark.asyncio
async def test_handler_failure_result_is_prefixed() -> None:
    registry = _registry()

    result = await registry.dispatch("refuse", None)

    assert result.isError is True
    assert result.content[0].text == "Error: nothing to do"


def test_duplicate_names_are_rejected() -> None:
    registry = _registry()

    async def handler(_params):
        return Success("ok", {})

    with pytest.raises(ToolRegistrationError):
        registry.register("echo", None, handler)

    # case-sensitive: a different spelling is a different tool
    registry.register("Echo", None, handler)
    assert registry.names() == ["echo", "explode", "refuse", "Echo"]


def test_list_tools_publishes_input_schema() -> None:
    tools = {t.name: t for t in _registry().list_tools()}

    schema = tools["echo"].inputSchema
    assert schema["type"] == "object"
    assert schema["required"] == ["word"]
    assert set(schema["properties"]) == {"word", "times"}
    assert tools["echo"].description == "Repeat a word."


def test_registries_are_independent() -> None:
    first = _registry()
    second = ToolRegistry("Other")
    assert second.names() == []
    assert len(first.names()) == 3


@pytest.mark.asyncio
async def test_shutdown_hooks_run_once_in_reverse_order() -> None:
    registry = ToolRegistry("Test Server")
    calls = []

    async def first():
        calls.append("first")

    async def second():
        calls.append("second")
        raise RuntimeError("hook failure is logged, not raised")

    registry.add_shutdown_hook(first)
    registry.add_shutdown_hook(second)

    await registry.aclose()
    await registry.aclose()

    assert calls == ["second", "first"]
    assert registry.closed is True
