# Cursor MCP Servers
# File: clients/github.py
# Version: v2

"""GitHub REST v3 client plus the pull-request summary builder."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from ..auth import github_headers
from ..config import GitHubConfig
from .http import HttpApi


class GitHubClient(HttpApi):
    service = "GitHub"

    def __init__(
        self,
        config: GitHubConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(config.api_url, github_headers(config.token), transport=transport)
        self.config = config

    # ------------------------------------------------------------------
    # Repositories
    # ------------------------------------------------------------------

    async def get_repositories(self, max_results: int = 20) -> List[Dict[str, Any]]:
        return await self.get("/user/repos", params={"per_page": max_results})

    async def get_repository(self, owner: str, repo: str) -> Dict[str, Any]:
        return await self.get(f"/repos/{owner}/{repo}")

    async def get_branches(self, owner: str, repo: str) -> List[Dict[str, Any]]:
        return await self.get(f"/repos/{owner}/{repo}/branches", params={"per_page": 100})

    async def get_commits(
        self, owner: str, repo: str, branch: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {"per_page": 50}
        if branch:
            params["sha"] = branch
        return await self.get(f"/repos/{owner}/{repo}/commits", params=params)

    # ------------------------------------------------------------------
    # Issues and pull requests
    # ------------------------------------------------------------------

    async def get_issues(
        self, owner: str, repo: str, state: str = "open", max_results: int = 20
    ) -> List[Dict[str, Any]]:
        return await self.get(
            f"/repos/{owner}/{repo}/issues",
            params={"state": state, "per_page": max_results},
        )

    async def get_issue(self, owner: str, repo: str, issue_number: int) -> Dict[str, Any]:
        return await self.get(f"/repos/{owner}/{repo}/issues/{issue_number}")

    async def get_pull_requests(
        self, owner: str, repo: str, state: str = "open", max_results: int = 10
    ) -> List[Dict[str, Any]]:
        return await self.get(
            f"/repos/{owner}/{repo}/pulls",
            params={"state": state, "per_page": max_results},
        )

    async def get_pull_request(self, owner: str, repo: str, pr_number: int) -> Dict[str, Any]:
        return await self.get(f"/repos/{owner}/{repo}/pulls/{pr_number}")

    async def get_pull_request_files(
        self, owner: str, repo: str, pr_number: int
    ) -> List[Dict[str, Any]]:
        return await self.get(
            f"/repos/{owner}/{repo}/pulls/{pr_number}/files", params={"per_page": 100}
        )

    async def create_pull_request_comment(
        self, owner: str, repo: str, pr_number: int, body: str
    ) -> Dict[str, Any]:
        # PR conversation comments live on the issues endpoint.
        return await self.post(
            f"/repos/{owner}/{repo}/issues/{pr_number}/comments", json={"body": body}
        )


def build_pr_summary(pr: Dict[str, Any], files: List[Dict[str, Any]], top_n: int = 10) -> str:
    """Render a markdown overview of a pull request's changed files.

    Files are listed by number of changed lines, largest first; only the
    first ``top_n`` are named.
    """
    additions = sum(int(f.get("additions") or 0) for f in files)
    deletions = sum(int(f.get("deletions") or 0) for f in files)

    lines = [f"# PR Summary: {pr.get('title', '')}", ""]
    if pr.get("body"):
        lines += [str(pr["body"]), ""]

    lines += [
        "## Changes Overview",
        "",
        f"This PR contains {len(files)} file(s) with:",
        f"- {additions} additions(+)",
        f"- {deletions} deletions(-)",
        "",
        "## Files Changed",
        "",
    ]

    ranked = sorted(files, key=lambda f: int(f.get("changes") or 0), reverse=True)
    for f in ranked[:top_n]:
        lines.append(
            f"- `{f.get('filename')}`: {f.get('additions', 0)} addition(s), "
            f"{f.get('deletions', 0)} deletion(s)"
        )
    if len(files) > top_n:
        lines.append(f"- ... and {len(files) - top_n} more files")

    return "\n".join(lines) + "\n"
