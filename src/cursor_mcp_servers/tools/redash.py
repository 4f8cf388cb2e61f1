# Cursor MCP Servers
# File: tools/redash.py
# Version: v5
#
# NOTE: Redash ids are integers except job ids, which are opaque strings.

"""Redash tools: queries, execution, results, visualizations, dashboards, widgets."""

from __future__ import annotations

import math
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..clients.redash import RedashClient
from ..config import RedashConfig
from ..envelope import Failure, Success, ToolResult
from ..layout import plan_widgets
from ..models import JobStatus, job_status_name
from ..registry import ToolRegistry

SERVER_NAME = "Redash Server"

OutputFormat = Literal["json", "csv"]


# ---------------------------------------------------------------------------
# Parameter models
# ---------------------------------------------------------------------------


class PageParams(BaseModel):
    page: int = Field(default=1, ge=1, description="Page number for pagination")
    page_size: int = Field(default=25, ge=1, le=250, description="Number of results per page")


class QueryIdParams(BaseModel):
    query_id: int = Field(description="The ID of the query")


class ExecuteQueryParams(BaseModel):
    query_id: int = Field(description="The ID of the query to execute")
    parameters: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Query parameters as key-value pairs. Date ranges: {start: 'YYYY-MM-DD', end: 'YYYY-MM-DD'}",
    )
    max_age: Optional[int] = Field(
        default=None, ge=0, description="Maximum age of cached results in seconds; 0 forces a fresh run"
    )
    wait_for_result: bool = Field(default=True, description="Wait for the query to complete and return results")
    format: OutputFormat = Field(default="json", description="Output format for results")


class JobParams(BaseModel):
    job_id: str = Field(description="The job ID returned from execute_query")


class QueryResultParams(BaseModel):
    query_result_id: int = Field(description="The query result ID to retrieve")
    format: OutputFormat = Field(default="json", description="Output format")


class CreateQueryParams(BaseModel):
    name: str = Field(description="Name for the new query")
    query: str = Field(description="The SQL query text")
    data_source_id: int = Field(description="The ID of the data source to run the query against")
    description: Optional[str] = Field(default=None, description="Optional description for the query")
    is_draft: Optional[bool] = Field(default=None, description="Whether the query is a draft (Redash default: true)")
    tags: Optional[List[str]] = Field(default=None, description="Optional tags for the query")


class UpdateQueryParams(BaseModel):
    query_id: int = Field(description="The ID of the query to update")
    name: Optional[str] = None
    query: Optional[str] = None
    description: Optional[str] = None
    is_draft: Optional[bool] = None
    is_archived: Optional[bool] = None
    tags: Optional[List[str]] = None


class CreateVisualizationParams(BaseModel):
    query_id: int = Field(description="The ID of the query to attach the visualization to")
    name: str = Field(description="Name for the visualization")
    type: str = Field(description="Visualization type (e.g. TABLE, CHART, COUNTER, PIE)")
    description: Optional[str] = None
    options: Optional[Dict[str, Any]] = Field(default=None, description="Visualization options as a JSON object")


class SlugParams(BaseModel):
    slug: str = Field(description="The dashboard slug (URL-friendly name)")


class CreateDashboardParams(BaseModel):
    name: str = Field(description="Name for the new dashboard")
    tags: Optional[List[str]] = None


class DashboardIdParams(BaseModel):
    dashboard_id: int = Field(description="The dashboard ID (not the slug)")


class UpdateDashboardParams(DashboardIdParams):
    name: Optional[str] = None
    is_draft: Optional[bool] = None
    is_archived: Optional[bool] = None
    tags: Optional[List[str]] = None
    dashboard_filters_enabled: Optional[bool] = None


class Position(BaseModel):
    col: int = Field(ge=0, description="Column position (0-based)")
    row: int = Field(ge=0, description="Row position (0-based)")
    sizeX: int = Field(ge=1, description="Width in grid units")
    sizeY: int = Field(ge=1, description="Height in grid units")


class PartialPosition(BaseModel):
    col: Optional[int] = Field(default=None, ge=0)
    row: Optional[int] = Field(default=None, ge=0)
    sizeX: Optional[int] = Field(default=None, ge=1)
    sizeY: Optional[int] = Field(default=None, ge=1)


class WidgetOptions(BaseModel):
    model_config = ConfigDict(extra="allow")

    position: Optional[Position] = Field(default=None, description="Widget position on the dashboard grid")


class PartialWidgetOptions(BaseModel):
    model_config = ConfigDict(extra="allow")

    position: Optional[PartialPosition] = None


class AddWidgetParams(BaseModel):
    dashboard_id: int = Field(description="The ID of the dashboard to add the widget to")
    visualization_id: Optional[int] = Field(
        default=None, description="Visualization to add. Required unless adding a text widget."
    )
    text: Optional[str] = Field(default=None, description="Markdown for a text widget (instead of visualization_id)")
    width: Optional[int] = Field(default=None, ge=1, description="Widget width in grid units")
    options: Optional[WidgetOptions] = None

    @model_validator(mode="after")
    def _needs_content(self) -> "AddWidgetParams":
        if not self.visualization_id and not self.text:
            raise ValueError("Either visualization_id or text must be provided")
        return self


class UpdateWidgetParams(BaseModel):
    widget_id: int = Field(description="The ID of the widget to update")
    text: Optional[str] = None
    width: Optional[int] = Field(default=None, ge=1)
    options: Optional[PartialWidgetOptions] = None


class PlanDashboardParams(BaseModel):
    query_ids: List[int] = Field(min_length=1, description="Queries whose visualizations should be laid out")
    columns: int = Field(default=2, ge=1, le=6, description="Widgets per row on the 6-column grid")


def _provided(params: BaseModel, *exclude: str) -> Dict[str, Any]:
    """Fields the caller actually set, minus ``exclude``."""
    return params.model_dump(exclude_none=True, exclude=set(exclude))


def _pages(count: int, page_size: int) -> int:
    return math.ceil(count / page_size) if page_size else 0


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


def register_tools(registry: ToolRegistry, client: RedashClient) -> None:
    """Register Redash tools on the given registry."""

    # -- queries -----------------------------------------------------------

    @registry.tool("list_queries", PageParams, description="List queries with pagination.", error_context="Error listing queries")
    async def list_queries(params: PageParams) -> Success:
        data = await client.list_queries(params.page, params.page_size)
        count = int(data.get("count") or 0)
        return Success(
            f"Found {count} queries (showing page {params.page} of {_pages(count, params.page_size)}).",
            data,
        )

    @registry.tool("get_query", QueryIdParams, description="Get a query with its visualizations.", error_context="Error getting query")
    async def get_query(params: QueryIdParams) -> Success:
        query = await client.get_query(params.query_id)
        return Success(f"Query \"{query.get('name')}\" (ID: {query.get('id')})", query)

    @registry.tool("create_query", CreateQueryParams, description="Create a new query.", error_context="Error creating query")
    async def create_query(params: CreateQueryParams) -> Success:
        query = await client.create_query(_provided(params))
        return Success(f"Successfully created query \"{query.get('name')}\" (ID: {query.get('id')})", query)

    @registry.tool(
        "update_query",
        UpdateQueryParams,
        description="Update a query; only the fields given are changed.",
        error_context="Error updating query",
    )
    async def update_query(params: UpdateQueryParams) -> Success:
        query = await client.update_query(params.query_id, _provided(params, "query_id"))
        return Success(f"Successfully updated query \"{query.get('name')}\" (ID: {query.get('id')})", query)

    @registry.tool("publish_query", QueryIdParams, description="Publish a query (set is_draft to false).", error_context="Error publishing query")
    async def publish_query(params: QueryIdParams) -> Success:
        query = await client.publish_query(params.query_id)
        status = "draft" if query.get("is_draft") else "published"
        return Success(f"Query \"{query.get('name')}\" (ID: {query.get('id')}) is now {status}.", query)

    @registry.tool("fork_query", QueryIdParams, description="Fork (duplicate) a query.", error_context="Error forking query")
    async def fork_query(params: QueryIdParams) -> Success:
        query = await client.fork_query(params.query_id)
        return Success(f"Successfully forked query. New query: \"{query.get('name')}\" (ID: {query.get('id')})", query)

    # -- execution ---------------------------------------------------------

    @registry.tool(
        "execute_query",
        ExecuteQueryParams,
        description="Execute a query, optionally waiting for the result (JSON or CSV).",
        error_context="Error executing query",
    )
    async def execute_query(params: ExecuteQueryParams) -> ToolResult:
        if params.wait_for_result:
            outcome = await client.execute_and_wait(
                params.query_id, params.parameters, params.max_age, params.format
            )
            if outcome.from_cache:
                cache_info = "Results returned from cache."
            else:
                job_part = f" (job ID: {outcome.job.id})" if outcome.job else ""
                cache_info = f"Query executed fresh{job_part}."

            summary = f"Query {params.query_id} executed successfully. {cache_info}"
            if params.format == "csv":
                return Success(summary, {"format": "csv", "query_id": params.query_id, "csv": outcome.result})
            return Success(summary, outcome.result)

        response = await client.execute_query(params.query_id, params.parameters, params.max_age)
        if response.get("query_result"):
            return Success(f"Query {params.query_id} returned cached results.", response["query_result"])
        if response.get("job"):
            job = response["job"]
            return Success(
                f"Query {params.query_id} execution started. Job ID: {job.get('id')}. "
                "Use get_job_status to check progress.",
                job,
            )
        return Failure("Unexpected response from Redash API")

    @registry.tool("get_job_status", JobParams, description="Check the status of a query execution job.", error_context="Error getting job status")
    async def get_job_status(params: JobParams) -> Success:
        job = await client.get_job_status(params.job_id)
        message = f"Job {params.job_id} status: {job_status_name(job.status)}"
        if job.status == JobStatus.SUCCESS and job.query_result_id:
            message += f". Results available with query_result_id: {job.query_result_id}"
        elif job.status == JobStatus.FAILURE and job.error:
            message += f". Error: {job.error}"
        return Success(message, job.raw)

    @registry.tool("get_query_result", QueryResultParams, description="Fetch a stored query result.", error_context="Error getting query result")
    async def get_query_result(params: QueryResultParams) -> Success:
        result = await client.get_query_result(params.query_result_id, params.format)
        if params.format == "csv":
            return Success(
                f"Query result {params.query_result_id} (CSV format):",
                {"format": "csv", "query_result_id": params.query_result_id, "csv": result},
            )
        return Success(f"Query result {params.query_result_id}:", result)

    # -- visualizations ----------------------------------------------------

    @registry.tool(
        "create_visualization",
        CreateVisualizationParams,
        description="Create a visualization on a query.",
        error_context="Error creating visualization",
    )
    async def create_visualization(params: CreateVisualizationParams) -> Success:
        body = _provided(params)
        body.setdefault("options", {})
        vis = await client.create_visualization(body)
        return Success(
            f"Successfully created visualization \"{vis.get('name')}\" (ID: {vis.get('id')}) "
            f"on query {params.query_id}.",
            vis,
        )

    # -- dashboards --------------------------------------------------------

    @registry.tool("list_dashboards", PageParams, description="List dashboards with pagination.", error_context="Error listing dashboards")
    async def list_dashboards(params: PageParams) -> Success:
        data = await client.list_dashboards(params.page, params.page_size)
        count = int(data.get("count") or 0)
        return Success(
            f"Found {count} dashboards (showing page {params.page} of {_pages(count, params.page_size)}).",
            data,
        )

    @registry.tool("get_dashboard", SlugParams, description="Get a dashboard with its widgets.", error_context="Error getting dashboard")
    async def get_dashboard(params: SlugParams) -> Success:
        d = await client.get_dashboard(params.slug)
        return Success(f"Dashboard \"{d.get('name')}\" (ID: {d.get('id')}, slug: {d.get('slug')})", d)

    @registry.tool("create_dashboard", CreateDashboardParams, description="Create a dashboard.", error_context="Error creating dashboard")
    async def create_dashboard(params: CreateDashboardParams) -> Success:
        d = await client.create_dashboard(_provided(params))
        return Success(
            f"Successfully created dashboard \"{d.get('name')}\" (ID: {d.get('id')}, slug: {d.get('slug')})", d
        )

    @registry.tool(
        "update_dashboard",
        UpdateDashboardParams,
        description="Update a dashboard; only the fields given are changed.",
        error_context="Error updating dashboard",
    )
    async def update_dashboard(params: UpdateDashboardParams) -> Success:
        d = await client.update_dashboard(params.dashboard_id, _provided(params, "dashboard_id"))
        return Success(f"Successfully updated dashboard \"{d.get('name')}\" (ID: {d.get('id')})", d)

    @registry.tool(
        "publish_dashboard",
        DashboardIdParams,
        description="Publish a dashboard (set is_draft to false).",
        error_context="Error publishing dashboard",
    )
    async def publish_dashboard(params: DashboardIdParams) -> Success:
        d = await client.publish_dashboard(params.dashboard_id)
        status = "draft" if d.get("is_draft") else "published"
        return Success(f"Dashboard \"{d.get('name')}\" (ID: {d.get('id')}) is now {status}.", d)

    @registry.tool("archive_dashboard", SlugParams, description="Archive a dashboard.", error_context="Error archiving dashboard")
    async def archive_dashboard(params: SlugParams) -> Success:
        await client.archive_dashboard(params.slug)
        return Success(f"Dashboard {params.slug} archived.", {"slug": params.slug, "archived": True})

    # -- widgets -----------------------------------------------------------

    @registry.tool(
        "add_widget_to_dashboard",
        AddWidgetParams,
        description="Add a visualization or text widget to a dashboard at an explicit grid position.",
        error_context="Error adding widget",
    )
    async def add_widget_to_dashboard(params: AddWidgetParams) -> Success:
        body: Dict[str, Any] = {
            "dashboard_id": params.dashboard_id,
            "text": params.text or "",
            "width": params.width or 1,
            "options": params.options.model_dump(exclude_none=True) if params.options else {},
        }
        if params.visualization_id:
            body["visualization_id"] = params.visualization_id

        widget = await client.create_widget(body)
        kind = "visualization" if params.visualization_id else "text"
        return Success(f"Successfully added {kind} widget to dashboard (Widget ID: {widget.get('id')})", widget)

    @registry.tool(
        "update_widget",
        UpdateWidgetParams,
        description="Update a widget's text, width or position.",
        error_context="Error updating widget",
    )
    async def update_widget(params: UpdateWidgetParams) -> Success:
        widget = await client.update_widget(params.widget_id, _provided(params, "widget_id"))
        return Success(f"Successfully updated widget (ID: {widget.get('id')})", widget)

    # -- utilities ---------------------------------------------------------

    @registry.tool("check_connection", description="Check that the configured Redash instance is reachable.", error_context="Error checking connection")
    async def check_connection(_params) -> Success:
        status = await client.check_connection()
        state = "connected" if status["connected"] else "not connected"
        return Success(f"Redash at {status['url']} is {state}.", status)

    @registry.tool(
        "plan_dashboard",
        PlanDashboardParams,
        description=(
            "Propose widget positions for the visualizations of several queries, with "
            "best-effort number format hints guessed from column names."
        ),
        error_context="Error planning dashboard",
    )
    async def plan_dashboard(params: PlanDashboardParams) -> Success:
        queries = await client.get_queries(params.query_ids)
        plan = plan_widgets(queries, params.columns)
        return Success(
            f"Planned {len(plan['widgets'])} widgets from {len(queries)} queries.",
            plan,
        )


async def build() -> ToolRegistry:
    client = RedashClient(RedashConfig.from_env())
    registry = ToolRegistry(SERVER_NAME)
    register_tools(registry, client)
    return registry
