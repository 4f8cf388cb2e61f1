# Cursor MCP Servers
# File: config.py
# Version: v2

"""Configuration loading for the adapter servers.

Each adapter gets its own small dataclass built once at startup from the
process environment (optionally seeded from a ``.env`` file by the launcher).
Configs are never mutated afterwards.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


def _parse_bool_env(name: str, default: bool = False) -> bool:
    """Parse a boolean-like environment variable.

    Accepts 1/0, true/false, yes/no, on/off (case-insensitive).
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "on"}


def _parse_int_env(
    name: str,
    default: int,
    min_value: int | None = None,
    max_value: int | None = None,
) -> int:
    """Parse an int environment variable with clamping and safe fallback."""
    raw = os.getenv(name)
    if raw is None or not str(raw).strip():
        value = int(default)
    else:
        try:
            value = int(str(raw).strip())
        except ValueError:
            value = int(default)

    if min_value is not None and value < min_value:
        value = min_value
    if max_value is not None and value > max_value:
        value = max_value

    return value


def _get_str_env(name: str, default: Optional[str] = None) -> Optional[str]:
    """Return a stripped env value, treating blank strings as unset."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


def _missing(**values: Optional[str]) -> List[str]:
    return [key for key, value in values.items() if not value]


# ---------------------------------------------------------------------------
# Relational database
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PostgresConfig:
    """Connection settings for the PostgreSQL adapter.

    Missing credentials are not an error here: they flip ``demo_mode`` on and
    the adapter serves fixture data instead of opening a pool.
    """

    host: str = "localhost"
    port: int = 5432
    database: Optional[str] = None
    user: Optional[str] = None
    password: Optional[str] = None
    ssl_mode: Optional[str] = None
    max_connections: int = 10
    connect_timeout_seconds: int = 5
    demo_mode: bool = False
    missing: List[str] = field(default_factory=list)

    @property
    def ssl_required(self) -> bool:
        return (self.ssl_mode or "").lower() == "require"

    @classmethod
    def from_env(cls) -> "PostgresConfig":
        """Create configuration from POSTGRES_* environment variables."""
        database = _get_str_env("POSTGRES_DB")
        user = _get_str_env("POSTGRES_USER")
        password = os.getenv("POSTGRES_PASSWORD") or None

        missing = _missing(
            POSTGRES_DB=database,
            POSTGRES_USER=user,
            POSTGRES_PASSWORD=password,
        )
        if missing:
            logger.warning(
                "Missing required PostgreSQL environment variables: %s. "
                "The server will run in demo mode without connecting to a real database.",
                ", ".join(missing),
            )

        return cls(
            host=_get_str_env("POSTGRES_HOST", "localhost") or "localhost",
            port=_parse_int_env("POSTGRES_PORT", default=5432, min_value=1, max_value=65535),
            database=database,
            user=user,
            password=password,
            ssl_mode=_get_str_env("POSTGRES_SSL_MODE"),
            max_connections=_parse_int_env(
                "POSTGRES_MAX_CONNECTIONS", default=10, min_value=1, max_value=100
            ),
            connect_timeout_seconds=_parse_int_env(
                "POSTGRES_CONNECT_TIMEOUT_SECONDS", default=5, min_value=1, max_value=300
            ),
            demo_mode=bool(missing),
            missing=missing,
        )


# ---------------------------------------------------------------------------
# HTTP adapters
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class JiraConfig:
    api_url: str
    email: str
    api_token: str

    @classmethod
    def from_env(cls) -> "JiraConfig":
        api_url = _get_str_env("JIRA_API_URL")
        email = _get_str_env("JIRA_EMAIL")
        api_token = _get_str_env("JIRA_API_TOKEN")

        missing = _missing(JIRA_API_URL=api_url, JIRA_EMAIL=email, JIRA_API_TOKEN=api_token)
        if missing:
            raise ConfigurationError("Jira", missing)

        return cls(api_url=api_url.rstrip("/"), email=email, api_token=api_token)


@dataclass(frozen=True)
class GitHubConfig:
    token: str
    api_url: str = "https://api.github.com"

    @classmethod
    def from_env(cls) -> "GitHubConfig":
        token = _get_str_env("GITHUB_TOKEN")
        if not token:
            raise ConfigurationError("GitHub", ["GITHUB_TOKEN"])

        api_url = _get_str_env("GITHUB_API_URL", "https://api.github.com")
        return cls(token=token, api_url=api_url.rstrip("/"))


@dataclass(frozen=True)
class RedashConfig:
    """Redash endpoint, API key and job polling bounds."""

    url: str
    api_key: str
    poll_interval_ms: int = 1000
    max_poll_attempts: int = 60

    @classmethod
    def from_env(cls) -> "RedashConfig":
        url = _get_str_env("REDASH_URL")
        api_key = _get_str_env("REDASH_API_KEY")

        missing = _missing(REDASH_URL=url, REDASH_API_KEY=api_key)
        if missing:
            raise ConfigurationError("Redash", missing)

        return cls(
            url=url.rstrip("/"),
            api_key=api_key,
            poll_interval_ms=_parse_int_env(
                "REDASH_POLL_INTERVAL_MS", default=1000, min_value=0, max_value=60000
            ),
            max_poll_attempts=_parse_int_env(
                "REDASH_MAX_POLL_ATTEMPTS", default=60, min_value=1, max_value=3600
            ),
        )


# ---------------------------------------------------------------------------
# Cluster
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KubernetesConfig:
    """Where to find cluster credentials and which namespace to default to.

    The kubeconfig itself is loaded by the client; an unloadable config is
    reported there as a ConfigurationError.
    """

    namespace: str = "local"
    kubeconfig: Optional[str] = None
    context: Optional[str] = None
    kubectl_path: str = "kubectl"
    in_cluster: bool = False

    @classmethod
    def from_env(cls) -> "KubernetesConfig":
        return cls(
            namespace=_get_str_env("KUBERNETES_NAMESPACE", "local") or "local",
            kubeconfig=_get_str_env("KUBECONFIG"),
            context=_get_str_env("KUBERNETES_CONTEXT"),
            kubectl_path=_get_str_env("KUBECTL_PATH", "kubectl") or "kubectl",
            in_cluster=_parse_bool_env("KUBERNETES_IN_CLUSTER", default=False),
        )


def log_level_from_env(default: str = "INFO") -> str:
    """Return the MCP_LOG_LEVEL name, upper-cased."""
    return (_get_str_env("MCP_LOG_LEVEL", default) or default).upper()
