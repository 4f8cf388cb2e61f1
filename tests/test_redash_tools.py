# Cursor MCP Servers
# File: tests/test_redash_tools.py
# Version: v1

from __future__ import annotations

import json
from typing import Any, Dict, List

import httpx
import pytest

from cursor_mcp_servers.clients.redash import RedashClient
from cursor_mcp_servers.config import RedashConfig
from cursor_mcp_servers.layout import grid_position, infer_number_format, plan_widgets
from cursor_mcp_servers.registry import ToolRegistry
from cursor_mcp_servers.tools import redash as redash_tools

_QUERIES: Dict[int, Dict[str, Any]] = {
    10: {
        "id": 10,
        "name": "Signups",
        "visualizations": [
            {"id": 100, "name": "Table", "type": "TABLE", "options": {"columns": [{"name": "day"}, {"name": "conversion_rate"}]}},
            {"id": 101, "name": "Chart", "type": "CHART", "options": {"columnMapping": {"day": "x", "avg_duration": "y"}}},
        ],
    },
    11: {"id": 11, "name": "Revenue", "visualizations": [{"id": 110, "name": "Counter", "type": "COUNTER", "options": {}}]},
    12: {"id": 12, "name": "Draft", "visualizations": []},
}


class _Recorder:
    def __init__(self):
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/api/queries" and request.method == "GET":
            return httpx.Response(200, json={"count": 51, "page": 1, "page_size": 25, "results": []})
        if path.startswith("/api/queries/") and request.method == "GET":
            return httpx.Response(200, json=_QUERIES[int(path.rsplit("/", 1)[-1])])
        if path.startswith("/api/queries/") and request.method == "POST":
            return httpx.Response(200, json={"id": 10, "name": "Signups v2", **json.loads(request.content)})
        if path == "/api/widgets":
            return httpx.Response(200, json={"id": 7, **json.loads(request.content)})
        if path == "/api/query_results/44.csv":
            return httpx.Response(200, text="a,b\n1,2\n")
        if path.startswith("/api/dashboards/") and request.method == "DELETE":
            return httpx.Response(200, content=b"")
        return httpx.Response(404, json={"message": "Not found"})


def _setup():
    recorder = _Recorder()
    client = RedashClient(
        RedashConfig(url="https://redash.example.com", api_key="k"),
        transport=httpx.MockTransport(recorder),
    )
    registry = ToolRegistry(redash_tools.SERVER_NAME)
    redash_tools.register_tools(registry, client)
    return registry, recorder


@pytest.mark.asyncio
async def test_list_queries_summary_counts_pages() -> None:
    registry, recorder = _setup()

    result = await registry.dispatch("list_queries", {})

    assert result.content[0].text == "Found 51 queries (showing page 1 of 3)."
    assert dict(recorder.requests[0].url.params) == {"page": "1", "page_size": "25"}


@pytest.mark.asyncio
async def test_add_widget_requires_visualization_or_text() -> None:
    registry, recorder = _setup()

    result = await registry.dispatch("add_widget_to_dashboard", {"dashboard_id": 3})

    assert result.isError is True
    assert result.content[0].text == (
        "Error: Invalid parameters for add_widget_to_dashboard: "
        "Either visualization_id or text must be provided"
    )
    assert recorder.requests == []


@pytest.mark.asyncio
async def test_add_widget_sends_explicit_position() -> None:
    registry, recorder = _setup()
    position = {"col": 3, "row": 0, "sizeX": 3, "sizeY": 8}

    result = await registry.dispatch(
        "add_widget_to_dashboard",
        {"dashboard_id": 3, "visualization_id": 100, "options": {"position": position}},
    )

    assert result.content[0].text == "Successfully added visualization widget to dashboard (Widget ID: 7)"
    body = json.loads(recorder.requests[0].content)
    assert body == {
        "dashboard_id": 3,
        "text": "",
        "width": 1,
        "options": {"position": position},
        "visualization_id": 100,
    }


@pytest.mark.asyncio
async def test_text_widget_has_no_visualization_id() -> None:
    registry, recorder = _setup()

    result = await registry.dispatch("add_widget_to_dashboard", {"dashboard_id": 3, "text": "# Notes"})

    assert result.content[0].text == "Successfully added text widget to dashboard (Widget ID: 7)"
    assert "visualization_id" not in json.loads(recorder.requests[0].content)


@pytest.mark.asyncio
async def test_update_query_sends_only_given_fields() -> None:
    registry, recorder = _setup()

    await registry.dispatch("update_query", {"query_id": 10, "name": "Signups v2", "tags": ["growth"]})

    assert json.loads(recorder.requests[0].content) == {"name": "Signups v2", "tags": ["growth"]}


@pytest.mark.asyncio
async def test_csv_result_is_wrapped_in_payload() -> None:
    registry, _ = _setup()

    result = await registry.dispatch("get_query_result", {"query_result_id": 44, "format": "csv"})

    assert result.content[0].text == "Query result 44 (CSV format):"
    assert json.loads(result.content[1].text) == {"format": "csv", "query_result_id": 44, "csv": "a,b\n1,2\n"}


@pytest.mark.asyncio
async def test_archive_dashboard_tolerates_empty_body() -> None:
    registry, recorder = _setup()

    result = await registry.dispatch("archive_dashboard", {"slug": "growth"})

    assert result.isError is False
    assert recorder.requests[0].method == "DELETE"


@pytest.mark.asyncio
async def test_unknown_query_is_reported_with_context() -> None:
    registry, _ = _setup()

    result = await registry.dispatch("fork_query", {"query_id": 999})

    assert result.isError is True
    assert result.content[0].text == "Error forking query: Redash API error (404): Not found"


@pytest.mark.asyncio
async def test_plan_dashboard_lays_out_every_visualization() -> None:
    registry, _ = _setup()

    result = await registry.dispatch("plan_dashboard", {"query_ids": [10, 11, 12]})

    assert result.content[0].text == "Planned 3 widgets from 3 queries."
    plan = json.loads(result.content[1].text)
    assert plan["skipped_queries"] == [12]
    assert [w["visualization_id"] for w in plan["widgets"]] == [100, 101, 110]
    assert [w["options"]["position"] for w in plan["widgets"]] == [
        {"col": 0, "row": 0, "sizeX": 3, "sizeY": 8},
        {"col": 3, "row": 0, "sizeX": 3, "sizeY": 8},
        {"col": 0, "row": 8, "sizeX": 3, "sizeY": 8},
    ]
    assert plan["widgets"][0]["format_hints"] == {"conversion_rate": "0.00%"}
    assert plan["widgets"][1]["format_hints"] == {"avg_duration": "duration"}


def test_number_format_hints_are_name_based() -> None:
    assert infer_number_format("Conversion_Rate") == "0.00%"
    assert infer_number_format("p95_latency_ms") == "duration"
    assert infer_number_format("country") is None


def test_grid_position_single_column() -> None:
    assert grid_position(2, 1) == {"col": 0, "row": 16, "sizeX": 6, "sizeY": 8}


def test_plan_widgets_without_queries() -> None:
    assert plan_widgets([]) == {"grid_columns": 6, "widgets": [], "skipped_queries": []}
