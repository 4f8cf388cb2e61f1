# Cursor MCP Servers
# File: tests/test_sanity.py
# Version: v2

"""Basic sanity tests for configuration loading and the adapter table."""

import pytest

from cursor_mcp_servers import __version__
from cursor_mcp_servers.config import (
    GitHubConfig,
    JiraConfig,
    KubernetesConfig,
    PostgresConfig,
    RedashConfig,
    log_level_from_env,
)
from cursor_mcp_servers.errors import ConfigurationError, JobTimeoutError
from cursor_mcp_servers.tools import SERVERS

_POSTGRES_KEYS = (
    "POSTGRES_HOST",
    "POSTGRES_PORT",
    "POSTGRES_DB",
    "POSTGRES_USER",
    "POSTGRES_PASSWORD",
    "POSTGRES_SSL_MODE",
    "POSTGRES_MAX_CONNECTIONS",
)


def _clear(monkeypatch, *keys: str) -> None:
    for key in keys:
        monkeypatch.delenv(key, raising=False)


def test_version_is_a_string() -> None:
    assert isinstance(__version__, str) and __version__


def test_every_adapter_has_a_builder() -> None:
    assert set(SERVERS) == {"jira", "github", "postgres", "kubernetes", "pdf", "redash"}


def test_postgres_without_credentials_is_demo_mode(monkeypatch) -> None:
    _clear(monkeypatch, *_POSTGRES_KEYS)

    config = PostgresConfig.from_env()

    assert config.demo_mode is True
    assert config.missing == ["POSTGRES_DB", "POSTGRES_USER", "POSTGRES_PASSWORD"]
    assert config.host == "localhost"
    assert config.port == 5432
    assert config.max_connections == 10


def test_postgres_full_config(monkeypatch) -> None:
    _clear(monkeypatch, *_POSTGRES_KEYS)
    monkeypatch.setenv("POSTGRES_HOST", "db.internal")
    monkeypatch.setenv("POSTGRES_PORT", "6543")
    monkeypatch.setenv("POSTGRES_DB", "app")
    monkeypatch.setenv("POSTGRES_USER", "svc")
    monkeypatch.setenv("POSTGRES_PASSWORD", "secret")
    monkeypatch.setenv("POSTGRES_SSL_MODE", "require")
    monkeypatch.setenv("POSTGRES_MAX_CONNECTIONS", "not-a-number")

    config = PostgresConfig.from_env()

    assert config.demo_mode is False
    assert config.port == 6543
    assert config.ssl_required is True
    # unparsable values fall back to the default
    assert config.max_connections == 10


def test_jira_missing_keys_are_named(monkeypatch) -> None:
    _clear(monkeypatch, "JIRA_API_URL", "JIRA_EMAIL", "JIRA_API_TOKEN")
    monkeypatch.setenv("JIRA_EMAIL", "me@example.com")

    with pytest.raises(ConfigurationError) as excinfo:
        JiraConfig.from_env()

    assert excinfo.value.missing == ["JIRA_API_URL", "JIRA_API_TOKEN"]
    assert "JIRA_API_URL, JIRA_API_TOKEN" in str(excinfo.value)


def test_github_defaults_to_public_api(monkeypatch) -> None:
    _clear(monkeypatch, "GITHUB_API_URL")
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_x")

    assert GitHubConfig.from_env().api_url == "https://api.github.com"


def test_redash_polling_bounds(monkeypatch) -> None:
    monkeypatch.setenv("REDASH_URL", "https://redash.example.com/")
    monkeypatch.setenv("REDASH_API_KEY", "k")
    monkeypatch.setenv("REDASH_POLL_INTERVAL_MS", "250")
    monkeypatch.setenv("REDASH_MAX_POLL_ATTEMPTS", "0")

    config = RedashConfig.from_env()

    assert config.url == "https://redash.example.com"
    assert config.poll_interval_ms == 250
    assert config.max_poll_attempts == 1


def test_kubernetes_defaults(monkeypatch) -> None:
    _clear(monkeypatch, "KUBERNETES_NAMESPACE", "KUBECONFIG", "KUBERNETES_CONTEXT", "KUBECTL_PATH")
    monkeypatch.setenv("KUBERNETES_IN_CLUSTER", "yes")

    config = KubernetesConfig.from_env()

    assert config.namespace == "local"
    assert config.kubectl_path == "kubectl"
    assert config.in_cluster is True


def test_log_level_is_upper_cased(monkeypatch) -> None:
    monkeypatch.setenv("MCP_LOG_LEVEL", "debug")
    assert log_level_from_env() == "DEBUG"


def test_job_timeout_message() -> None:
    assert str(JobTimeoutError("abc", 60.0)) == "Job abc did not complete within 60 seconds"
    assert str(JobTimeoutError("abc", 0.03)) == "Job abc did not complete within 0.03 seconds"
