# Cursor MCP Servers
# File: tests/test_redash_polling.py
# Version: v1

"""Execution and job polling for the Redash client.

All HTTP traffic goes to an ``httpx.MockTransport``; the poll interval is
kept tiny so the suite stays fast.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List

import httpx
import pytest

from cursor_mcp_servers.clients.redash import RedashClient
from cursor_mcp_servers.config import RedashConfig
from cursor_mcp_servers.errors import JobTimeoutError, ProtocolError, UpstreamError


class _FakeRedash:
    """Scripted Redash: one execute answer, then job statuses in order."""

    def __init__(self, execute: Dict[str, Any], job_answers: Iterable[Dict[str, Any]] = ()):
        self.execute = execute
        self.job_answers = list(job_answers)
        self.requests: List[httpx.Request] = []

    @property
    def job_polls(self) -> int:
        return sum(1 for r in self.requests if r.url.path.startswith("/api/jobs/"))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path.endswith("/results") and request.method == "POST":
            return httpx.Response(200, json=self.execute)
        if path.startswith("/api/jobs/"):
            # repeat the last answer once the script runs out
            answer = self.job_answers.pop(0) if len(self.job_answers) > 1 else self.job_answers[0]
            return httpx.Response(200, json={"job": answer})
        if path.endswith(".csv"):
            return httpx.Response(200, text="day,total\n2024-01-01,5\n")
        if path.startswith("/api/query_results/"):
            result_id = int(path.rsplit("/", 1)[-1])
            return httpx.Response(200, json={"query_result": {"id": result_id, "data": {"rows": [{"total": 5}]}}})
        return httpx.Response(404, json={"message": "Not found"})


def _client(fake: _FakeRedash, interval_ms: int = 0, attempts: int = 60) -> RedashClient:
    config = RedashConfig(
        url="https://redash.example.com",
        api_key="secret-key",
        poll_interval_ms=interval_ms,
        max_poll_attempts=attempts,
    )
    return RedashClient(config, transport=httpx.MockTransport(fake))


def _job(status: int, **extra: Any) -> Dict[str, Any]:
    return {"id": "job-1", "status": status, **extra}


@pytest.mark.asyncio
async def test_pending_job_is_polled_until_success() -> None:
    fake = _FakeRedash(
        execute={"job": _job(1)},
        job_answers=[_job(1), _job(2), _job(3, query_result_id=99)],
    )

    outcome = await _client(fake).execute_and_wait(7, parameters={"country": "NL"})

    assert fake.job_polls == 3
    assert outcome.from_cache is False
    assert outcome.job.id == "job-1"
    assert outcome.result["id"] == 99
    assert json.loads(fake.requests[0].content) == {"parameters": {"country": "NL"}}


@pytest.mark.asyncio
async def test_terminal_execute_job_skips_polling() -> None:
    fake = _FakeRedash(execute={"job": _job(3, query_result_id=12)}, job_answers=[_job(1)])

    outcome = await _client(fake).execute_and_wait(7)

    assert fake.job_polls == 0
    assert outcome.result["id"] == 12


@pytest.mark.asyncio
async def test_polling_gives_up_after_max_attempts() -> None:
    fake = _FakeRedash(execute={"job": _job(1)}, job_answers=[_job(2)])

    with pytest.raises(JobTimeoutError) as excinfo:
        await _client(fake, interval_ms=10, attempts=3).execute_and_wait(7)

    assert fake.job_polls == 3
    assert str(excinfo.value) == "Job job-1 did not complete within 0.03 seconds"


@pytest.mark.asyncio
async def test_failed_job_reports_upstream_error() -> None:
    fake = _FakeRedash(execute={"job": _job(1)}, job_answers=[_job(4, error="relation does not exist")])

    with pytest.raises(UpstreamError, match="Query execution failed: relation does not exist"):
        await _client(fake).execute_and_wait(7)


@pytest.mark.asyncio
async def test_cancelled_job() -> None:
    fake = _FakeRedash(execute={"job": _job(1)}, job_answers=[_job(5)])

    with pytest.raises(UpstreamError, match="Query execution was cancelled"):
        await _client(fake).execute_and_wait(7)


@pytest.mark.asyncio
async def test_success_without_result_id_is_a_protocol_error() -> None:
    fake = _FakeRedash(execute={"job": _job(1)}, job_answers=[_job(3)])

    with pytest.raises(ProtocolError, match="no query_result_id"):
        await _client(fake).execute_and_wait(7)


@pytest.mark.asyncio
async def test_cached_result_is_returned_without_a_job() -> None:
    fake = _FakeRedash(execute={"query_result": {"id": 5, "data": {"rows": []}}})

    outcome = await _client(fake).execute_and_wait(7, max_age=3600)

    assert outcome.from_cache is True
    assert outcome.result == {"id": 5, "data": {"rows": []}}
    assert len(fake.requests) == 1
    assert json.loads(fake.requests[0].content) == {"max_age": 3600}


@pytest.mark.asyncio
async def test_cached_result_as_csv() -> None:
    fake = _FakeRedash(execute={"query_result": {"id": 5}})

    outcome = await _client(fake).execute_and_wait(7, format="csv")

    assert outcome.result.startswith("day,total")
    assert fake.requests[-1].url.path == "/api/query_results/5.csv"


@pytest.mark.asyncio
async def test_execute_answer_without_job_or_result() -> None:
    fake = _FakeRedash(execute={"unexpected": True})

    with pytest.raises(ProtocolError):
        await _client(fake).execute_and_wait(7)


@pytest.mark.asyncio
async def test_requests_carry_the_api_key() -> None:
    fake = _FakeRedash(execute={"query_result": {"id": 1}})

    await _client(fake).execute_and_wait(1)

    assert fake.requests[0].headers["Authorization"] == "Key secret-key"


@pytest.mark.asyncio
async def test_error_body_message_is_surfaced() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"message": "No access to this query"})

    config = RedashConfig(url="https://redash.example.com", api_key="k")
    client = RedashClient(config, transport=httpx.MockTransport(handler))

    with pytest.raises(UpstreamError) as excinfo:
        await client.get_query(1)

    assert str(excinfo.value) == "Redash API error (403): No access to this query"
    assert excinfo.value.status == 403


@pytest.mark.asyncio
async def test_check_connection_reports_failure_instead_of_raising() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="upstream down")

    config = RedashConfig(url="https://redash.example.com", api_key="k")
    status = await RedashClient(config, transport=httpx.MockTransport(handler)).check_connection()

    assert status == {
        "connected": False,
        "url": "https://redash.example.com",
        "error": "Redash API error (500): upstream down",
    }
