# Cursor MCP Servers
# File: tools/jira.py
# Version: v1

"""Jira tools: projects, JQL search, issues, boards and sprints."""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, Field

from ..clients.jira import JiraClient
from ..config import JiraConfig
from ..envelope import Success
from ..registry import ToolRegistry

SERVER_NAME = "Jira Server"


class ProjectParams(BaseModel):
    project_key: str = Field(description="The Jira project key (e.g., 'PROJ')")


class SearchIssuesParams(BaseModel):
    jql: str = Field(description="JQL query string (e.g., 'project = PROJ AND status = \"In Progress\"')")
    max_results: int = Field(default=20, ge=1, le=100, description="Maximum number of results to return")


class IssueParams(BaseModel):
    issue_key: str = Field(description="The Jira issue key (e.g., 'PROJ-123')")


class SprintsParams(BaseModel):
    board_id: int = Field(description="The board ID")


def _page_counts(data: Dict[str, Any]) -> tuple[int, int]:
    values = data.get("values") or []
    return int(data.get("total", len(values)) or 0), len(values)


def register_tools(registry: ToolRegistry, client: JiraClient) -> None:
    """Register Jira tools on the given registry."""

    @registry.tool("get_projects", description="Get the list of Jira projects.", error_context="Error fetching projects")
    async def get_projects(_params) -> Success:
        projects = await client.get_projects()
        return Success(f"Found {len(projects)} projects.", projects)

    @registry.tool(
        "get_project",
        ProjectParams,
        description="Get details for a specific Jira project.",
        error_context="Error fetching project {project_key}",
    )
    async def get_project(params: ProjectParams) -> Success:
        project = await client.get_project(params.project_key)
        return Success(f"Project details for {params.project_key}:", project)

    @registry.tool(
        "search_issues",
        SearchIssuesParams,
        description="Search for Jira issues using JQL.",
        error_context="Error searching issues",
    )
    async def search_issues(params: SearchIssuesParams) -> Success:
        result = await client.search_issues(params.jql, params.max_results)
        issues = result.get("issues") or []
        return Success(f"Found {result.get('total', len(issues))} issues, showing {len(issues)}.", result)

    @registry.tool(
        "get_issue",
        IssueParams,
        description="Get details for a specific Jira issue.",
        error_context="Error fetching issue {issue_key}",
    )
    async def get_issue(params: IssueParams) -> Success:
        issue = await client.get_issue(params.issue_key)
        return Success(f"Issue details for {params.issue_key}:", issue)

    @registry.tool("get_boards", description="Get the list of Jira agile boards.", error_context="Error fetching boards")
    async def get_boards(_params) -> Success:
        boards = await client.get_boards()
        total, shown = _page_counts(boards)
        return Success(f"Found {total} boards, showing {shown}.", boards)

    @registry.tool(
        "get_sprints",
        SprintsParams,
        description="Get sprints for a Jira agile board.",
        error_context="Error fetching sprints for board {board_id}",
    )
    async def get_sprints(params: SprintsParams) -> Success:
        sprints = await client.get_sprints(params.board_id)
        total, shown = _page_counts(sprints)
        return Success(f"Found {total} sprints, showing {shown}.", sprints)


async def build() -> ToolRegistry:
    client = JiraClient(JiraConfig.from_env())
    registry = ToolRegistry(SERVER_NAME)
    register_tools(registry, client)
    return registry
