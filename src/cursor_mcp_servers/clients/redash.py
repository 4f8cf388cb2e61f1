# Cursor MCP Servers
# File: clients/redash.py
# Version: v4

"""Redash REST client.

Covers queries, query execution (with bounded job polling), query results,
visualizations, dashboards and widgets. All calls authenticate with a user
API key (``Authorization: Key ...``).

Execution flow for ``execute_and_wait``::

    POST /api/queries/<id>/results
      -> {"query_result": {...}}   cached, returned as-is
      -> {"job": {...}}            poll /api/jobs/<job id> until status >= 3
                                   then GET /api/query_results/<result id>
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

import httpx

from ..auth import redash_headers
from ..config import RedashConfig
from ..errors import JobTimeoutError, ProtocolError, UpstreamError
from ..models import ExecutionOutcome, JobStatus, RedashJob
from .http import HttpApi

logger = logging.getLogger(__name__)


class RedashClient(HttpApi):
    service = "Redash"

    def __init__(
        self,
        config: RedashConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(config.url, redash_headers(config.api_key), transport=transport)
        self.config = config

    def status_error(self, response: httpx.Response) -> UpstreamError:
        """Prefer Redash's JSON ``message`` field over the raw body."""
        text = response.text
        message = text
        try:
            body = json.loads(text)
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            message = str(body["message"])
        return UpstreamError(
            f"Redash API error ({response.status_code}): {message}",
            status=response.status_code,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def list_queries(self, page: int = 1, page_size: int = 25) -> Dict[str, Any]:
        return await self.get("/api/queries", params={"page": page, "page_size": page_size})

    async def get_query(self, query_id: int) -> Dict[str, Any]:
        return await self.get(f"/api/queries/{query_id}")

    async def create_query(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self.post("/api/queries", json=data)

    async def update_query(self, query_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self.post(f"/api/queries/{query_id}", json=data)

    async def publish_query(self, query_id: int) -> Dict[str, Any]:
        return await self.update_query(query_id, {"is_draft": False})

    async def fork_query(self, query_id: int) -> Dict[str, Any]:
        return await self.post(f"/api/queries/{query_id}/fork")

    # ------------------------------------------------------------------
    # Execution and jobs
    # ------------------------------------------------------------------

    async def execute_query(
        self,
        query_id: int,
        parameters: Optional[Dict[str, Any]] = None,
        max_age: Optional[int] = None,
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {}
        if parameters is not None:
            body["parameters"] = parameters
        if max_age is not None:
            body["max_age"] = max_age
        return await self.post(f"/api/queries/{query_id}/results", json=body)

    async def get_job_status(self, job_id: str) -> RedashJob:
        data = await self.get(f"/api/jobs/{job_id}")
        job = data.get("job") if isinstance(data, dict) else None
        if not isinstance(job, dict):
            raise ProtocolError(f"Unexpected response from Redash API: no job for {job_id}")
        return RedashJob.from_api(job)

    async def wait_for_job(
        self,
        job_id: str,
        poll_interval_ms: Optional[int] = None,
        max_attempts: Optional[int] = None,
    ) -> RedashJob:
        """Poll a job until it reaches a terminal status.

        Each attempt is one GET; a non-terminal answer is followed by a sleep
        of ``poll_interval_ms``. Raises JobTimeoutError once ``max_attempts``
        polls came back non-terminal.
        """
        interval_ms = self.config.poll_interval_ms if poll_interval_ms is None else poll_interval_ms
        attempts = self.config.max_poll_attempts if max_attempts is None else max_attempts

        for attempt in range(1, attempts + 1):
            job = await self.get_job_status(job_id)
            if job.is_terminal:
                logger.debug("Job %s finished with status %s after %d poll(s)", job_id, job.status, attempt)
                return job
            await asyncio.sleep(interval_ms / 1000)

        raise JobTimeoutError(job_id, attempts * interval_ms / 1000)

    async def get_query_result(self, query_result_id: int, format: str = "json") -> Any:
        """Fetch a stored result: the ``query_result`` dict, or CSV text."""
        if format == "csv":
            return await self.get(f"/api/query_results/{query_result_id}.csv", raw=True)

        data = await self.get(f"/api/query_results/{query_result_id}")
        if isinstance(data, dict) and "query_result" in data:
            return data["query_result"]
        return data

    async def execute_and_wait(
        self,
        query_id: int,
        parameters: Optional[Dict[str, Any]] = None,
        max_age: Optional[int] = None,
        format: str = "json",
    ) -> ExecutionOutcome:
        response = await self.execute_query(query_id, parameters=parameters, max_age=max_age)

        cached = response.get("query_result")
        if cached:
            if format == "csv":
                csv_text = await self.get_query_result(cached["id"], "csv")
                return ExecutionOutcome(result=csv_text, from_cache=True)
            return ExecutionOutcome(result=cached, from_cache=True)

        started = response.get("job")
        if started:
            job = RedashJob.from_api(started)
            if not job.is_terminal:
                job = await self.wait_for_job(job.id)

            if job.status == JobStatus.FAILURE:
                raise UpstreamError(f"Query execution failed: {job.error or 'Unknown error'}")
            if job.status == JobStatus.CANCELLED:
                raise UpstreamError("Query execution was cancelled")
            if not job.query_result_id:
                raise ProtocolError("Job completed but no query_result_id returned")

            result = await self.get_query_result(job.query_result_id, format)
            return ExecutionOutcome(result=result, from_cache=False, job=job)

        raise ProtocolError("Unexpected response from Redash API: no job or query_result")

    # ------------------------------------------------------------------
    # Visualizations and widgets
    # ------------------------------------------------------------------

    async def create_visualization(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self.post("/api/visualizations", json=data)

    async def create_widget(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self.post("/api/widgets", json=data)

    async def update_widget(self, widget_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self.post(f"/api/widgets/{widget_id}", json=data)

    # ------------------------------------------------------------------
    # Dashboards
    # ------------------------------------------------------------------

    async def list_dashboards(self, page: int = 1, page_size: int = 25) -> Dict[str, Any]:
        return await self.get("/api/dashboards", params={"page": page, "page_size": page_size})

    async def get_dashboard(self, slug: str) -> Dict[str, Any]:
        return await self.get(f"/api/dashboards/{slug}")

    async def create_dashboard(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self.post("/api/dashboards", json=data)

    async def update_dashboard(self, dashboard_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self.post(f"/api/dashboards/{dashboard_id}", json=data)

    async def publish_dashboard(self, dashboard_id: int) -> Dict[str, Any]:
        return await self.update_dashboard(dashboard_id, {"is_draft": False})

    async def archive_dashboard(self, slug: str) -> None:
        await self.delete(f"/api/dashboards/{slug}")

    # ------------------------------------------------------------------
    # Utilities
    # ------------------------------------------------------------------

    async def check_connection(self) -> Dict[str, Any]:
        """Report whether the configured Redash answers an authenticated call."""
        try:
            await self.list_queries(1, 1)
        except UpstreamError as exc:
            return {"connected": False, "url": self.config.url, "error": str(exc)}
        return {"connected": True, "url": self.config.url}

    async def get_queries(self, query_ids: List[int]) -> List[Dict[str, Any]]:
        """Fetch several queries concurrently, preserving input order."""
        return list(await asyncio.gather(*(self.get_query(qid) for qid in query_ids)))
