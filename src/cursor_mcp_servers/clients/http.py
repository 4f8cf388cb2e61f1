# Cursor MCP Servers
# File: clients/http.py
# Version: v2

"""Thin async REST helper shared by the Jira, GitHub and Redash clients.

One ``httpx.AsyncClient`` per call, 30 s timeout, transport-level failures
and non-2xx statuses wrapped into ``UpstreamError``. Tests pass an
``httpx.MockTransport`` through ``transport``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx
from httpx import RequestError

from ..errors import UpstreamError

logger = logging.getLogger(__name__)


class HttpApi:
    """Base class for the HTTP-backed adapter clients."""

    service = "HTTP"

    def __init__(
        self,
        base_url: str,
        headers: Dict[str, str],
        *,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.headers = dict(headers)
        self.timeout = timeout
        self._transport = transport

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        raw: bool = False,
    ) -> Any:
        """Send one request and return decoded JSON (or text when ``raw``)."""
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, url)

        async with httpx.AsyncClient(
            timeout=self.timeout, transport=self._transport
        ) as http_client:
            try:
                response = await http_client.request(
                    method, url, params=params, json=json, headers=self.headers
                )
            except RequestError as exc:
                raise UpstreamError(
                    f"Error calling {self.service} API at '{url}': {exc}"
                ) from exc

        if response.is_error:
            raise self.status_error(response)

        if raw:
            return response.text
        return self.decode(response)

    async def get(self, path: str, **kwargs: Any) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> Any:
        return await self.request("POST", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Any:
        return await self.request("DELETE", path, **kwargs)

    def status_error(self, response: httpx.Response) -> UpstreamError:
        return UpstreamError(
            f"HTTP error: {response.status_code} - {response.reason_phrase}",
            status=response.status_code,
        )

    @staticmethod
    def decode(response: httpx.Response) -> Any:
        # DELETE and some POSTs answer with an empty body.
        if not response.content or not response.text.strip():
            return {}
        return response.json()
