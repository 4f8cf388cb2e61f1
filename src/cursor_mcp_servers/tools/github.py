# Cursor MCP Servers
# File: tools/github.py
# Version: v2

"""GitHub tools: repositories, issues, pull requests, branches, commits."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

from ..clients.github import GitHubClient, build_pr_summary
from ..config import GitHubConfig
from ..envelope import Success
from ..registry import ToolRegistry

SERVER_NAME = "GitHub Server"

State = Literal["open", "closed", "all"]


class RepositoriesParams(BaseModel):
    max_results: int = Field(default=20, ge=1, le=100, description="Maximum number of repositories to return")


class RepoParams(BaseModel):
    owner: str = Field(description="Repository owner (username or organization)")
    repo: str = Field(description="Repository name")


class IssuesParams(RepoParams):
    state: State = Field(default="open", description="Issue state to filter by")
    max_results: int = Field(default=20, ge=1, le=100, description="Maximum number of issues to return")


class IssueParams(RepoParams):
    issue_number: int = Field(description="Issue number")


class PullRequestsParams(RepoParams):
    state: State = Field(default="open", description="Pull request state to filter by")
    max_results: int = Field(default=10, ge=1, le=100, description="Maximum number of pull requests to return")


class PullRequestParams(RepoParams):
    pr_number: int = Field(description="Pull request number")


class CommitsParams(RepoParams):
    branch: Optional[str] = Field(default=None, description="Branch name (default branch when omitted)")


class CommentParams(PullRequestParams):
    comment: str = Field(description="Comment content (markdown)")


class SummarizeParams(PullRequestParams):
    post_comment: bool = Field(default=True, description="Whether to post the summary as a comment")


def register_tools(registry: ToolRegistry, client: GitHubClient) -> None:
    """Register GitHub tools on the given registry."""

    @registry.tool(
        "get_repositories",
        RepositoriesParams,
        description="List repositories of the authenticated user.",
        error_context="Error fetching repositories",
    )
    async def get_repositories(params: RepositoriesParams) -> Success:
        repos = await client.get_repositories(params.max_results)
        return Success(f"Found {len(repos)} repositories (limited to {params.max_results}).", repos)

    @registry.tool(
        "get_repository",
        RepoParams,
        description="Get details for a repository.",
        error_context="Error fetching repository {owner}/{repo}",
    )
    async def get_repository(params: RepoParams) -> Success:
        repo = await client.get_repository(params.owner, params.repo)
        return Success(f"Repository details for {params.owner}/{params.repo}:", repo)

    @registry.tool(
        "get_issues",
        IssuesParams,
        description="List issues of a repository.",
        error_context="Error fetching issues for {owner}/{repo}",
    )
    async def get_issues(params: IssuesParams) -> Success:
        issues = await client.get_issues(params.owner, params.repo, params.state, params.max_results)
        return Success(
            f"Found {len(issues)} {params.state} issues for {params.owner}/{params.repo} "
            f"(limited to {params.max_results}).",
            issues,
        )

    @registry.tool(
        "get_issue",
        IssueParams,
        description="Get a single issue.",
        error_context="Error fetching issue {owner}/{repo}#{issue_number}",
    )
    async def get_issue(params: IssueParams) -> Success:
        issue = await client.get_issue(params.owner, params.repo, params.issue_number)
        return Success(f"Issue details for {params.owner}/{params.repo}#{params.issue_number}:", issue)

    @registry.tool(
        "get_pull_requests",
        PullRequestsParams,
        description="List pull requests of a repository.",
        error_context="Error fetching pull requests for {owner}/{repo}",
    )
    async def get_pull_requests(params: PullRequestsParams) -> Success:
        prs = await client.get_pull_requests(params.owner, params.repo, params.state, params.max_results)
        return Success(
            f"Found {len(prs)} {params.state} pull requests for {params.owner}/{params.repo} "
            f"(limited to {params.max_results}).",
            prs,
        )

    @registry.tool(
        "get_pull_request",
        PullRequestParams,
        description="Get a single pull request.",
        error_context="Error fetching pull request {owner}/{repo}#{pr_number}",
    )
    async def get_pull_request(params: PullRequestParams) -> Success:
        pr = await client.get_pull_request(params.owner, params.repo, params.pr_number)
        return Success(f"Pull request details for {params.owner}/{params.repo}#{params.pr_number}:", pr)

    @registry.tool(
        "get_branches",
        RepoParams,
        description="List branches of a repository.",
        error_context="Error fetching branches for {owner}/{repo}",
    )
    async def get_branches(params: RepoParams) -> Success:
        branches = await client.get_branches(params.owner, params.repo)
        return Success(f"Found {len(branches)} branches for {params.owner}/{params.repo}.", branches)

    @registry.tool(
        "get_commits",
        CommitsParams,
        description="List recent commits, optionally on a given branch.",
        error_context="Error fetching commits for {owner}/{repo}",
    )
    async def get_commits(params: CommitsParams) -> Success:
        commits = await client.get_commits(params.owner, params.repo, params.branch)
        on_branch = f" on branch {params.branch}" if params.branch else ""
        return Success(f"Found {len(commits)} commits for {params.owner}/{params.repo}{on_branch}.", commits)

    @registry.tool(
        "comment_on_pr",
        CommentParams,
        description="Add a comment to a pull request.",
        error_context="Error commenting on PR #{pr_number} for {owner}/{repo}",
    )
    async def comment_on_pr(params: CommentParams) -> Success:
        result = await client.create_pull_request_comment(
            params.owner, params.repo, params.pr_number, params.comment
        )
        return Success(f"Successfully added comment to PR #{params.pr_number}.", result)

    @registry.tool(
        "summarize_pr_diff",
        SummarizeParams,
        description="Summarize the files changed by a pull request and optionally post it as a comment.",
        error_context="Error summarizing PR #{pr_number} for {owner}/{repo}",
    )
    async def summarize_pr_diff(params: SummarizeParams) -> Success:
        pr = await client.get_pull_request(params.owner, params.repo, params.pr_number)
        files = await client.get_pull_request_files(params.owner, params.repo, params.pr_number)
        summary = build_pr_summary(pr, files)

        if params.post_comment:
            await client.create_pull_request_comment(params.owner, params.repo, params.pr_number, summary)

        action = "created and posted as a comment" if params.post_comment else "generated"
        return Success(
            f"PR #{params.pr_number} summary {action}.",
            {
                "owner": params.owner,
                "repo": params.repo,
                "pr_number": params.pr_number,
                "title": pr.get("title"),
                "files_changed": len(files),
                "additions": sum(int(f.get("additions") or 0) for f in files),
                "deletions": sum(int(f.get("deletions") or 0) for f in files),
                "comment_posted": params.post_comment,
                "summary": summary,
            },
        )


async def build() -> ToolRegistry:
    client = GitHubClient(GitHubConfig.from_env())
    registry = ToolRegistry(SERVER_NAME)
    register_tools(registry, client)
    return registry
