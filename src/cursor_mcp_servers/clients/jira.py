# Cursor MCP Servers
# File: clients/jira.py
# Version: v1

"""Jira Cloud REST client (platform v3 + agile 1.0)."""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from ..auth import jira_headers
from ..config import JiraConfig
from .http import HttpApi

SEARCH_FIELDS = ["summary", "status", "assignee", "priority", "created", "updated"]


class JiraClient(HttpApi):
    service = "Jira"

    def __init__(
        self,
        config: JiraConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(
            config.api_url,
            jira_headers(config.email, config.api_token),
            transport=transport,
        )
        self.config = config

    async def get_projects(self) -> List[Dict[str, Any]]:
        data = await self.get("/rest/api/3/project")
        return data if isinstance(data, list) else []

    async def get_project(self, project_key: str) -> Dict[str, Any]:
        return await self.get(f"/rest/api/3/project/{quote(project_key, safe='')}")

    async def search_issues(self, jql: str, max_results: int = 20) -> Dict[str, Any]:
        """Run a JQL search.

        The enhanced search endpoint no longer reports ``total``; callers get
        the page length in its place so the summary line stays meaningful.
        """
        data = await self.post(
            "/rest/api/3/search/jql",
            json={"jql": jql, "maxResults": max_results, "fields": SEARCH_FIELDS},
        )
        issues = data.get("issues") or []
        data.setdefault("total", len(issues))
        return data

    async def get_issue(self, issue_key: str) -> Dict[str, Any]:
        return await self.get(f"/rest/api/3/issue/{quote(issue_key, safe='')}")

    async def get_boards(self) -> Dict[str, Any]:
        return await self.get("/rest/agile/1.0/board")

    async def get_sprints(self, board_id: int) -> Dict[str, Any]:
        return await self.get(f"/rest/agile/1.0/board/{int(board_id)}/sprint")
