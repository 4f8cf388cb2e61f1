# Cursor MCP Servers
# File: auth.py
# Version: v1

"""Authorization header builders for the HTTP-backed adapters.

Each upstream wants credentials in a slightly different shape:

- Jira Cloud: HTTP Basic with ``email:api_token``
- GitHub: ``token <personal access token>``
- Redash: ``Key <user api key>``
"""

from __future__ import annotations

import base64
from typing import Dict


def basic_auth_header(username: str, secret: str) -> str:
    # base64(username:secret)
    raw_credentials = f"{username}:{secret}"
    return "Basic " + base64.b64encode(raw_credentials.encode("utf-8")).decode("ascii")


def jira_headers(email: str, api_token: str) -> Dict[str, str]:
    return {
        "Authorization": basic_auth_header(email, api_token),
        "Accept": "application/json",
        "Content-Type": "application/json",
    }


def github_headers(token: str) -> Dict[str, str]:
    return {
        "Authorization": f"token {token}",
        "Accept": "application/vnd.github.v3+json",
    }


def redash_headers(api_key: str) -> Dict[str, str]:
    return {
        "Authorization": f"Key {api_key}",
        "Content-Type": "application/json",
    }
