# Cursor MCP Servers
# File: tools/kubernetes.py
# Version: v2

"""Kubernetes tools: list/find/delete pods, exec commands, read logs.

``namespace`` is optional everywhere and falls back to KUBERNETES_NAMESPACE
(``local`` when unset).
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from ..clients.kubernetes import KubernetesClient
from ..config import KubernetesConfig
from ..envelope import Success
from ..registry import ToolRegistry

SERVER_NAME = "Kubernetes Server"

_NAMESPACE_HELP = "Kubernetes namespace (defaults to the configured namespace)"


class GetPodsParams(BaseModel):
    namespace: Optional[str] = Field(default=None, description=_NAMESPACE_HELP)
    label_selector: Optional[str] = Field(default=None, description="Label selector (e.g. 'app=nginx')")
    field_selector: Optional[str] = Field(default=None, description="Field selector (e.g. 'status.phase=Running')")


class FindPodsParams(BaseModel):
    name_pattern: str = Field(description="Pod name pattern; '*' matches any sequence (e.g. 'nginx*')")
    namespace: Optional[str] = Field(default=None, description=_NAMESPACE_HELP)


class KillPodParams(BaseModel):
    pod_name: str = Field(description="Name of the pod to delete")
    namespace: Optional[str] = Field(default=None, description=_NAMESPACE_HELP)
    grace_period_seconds: Optional[int] = Field(default=None, ge=0, description="Grace period before forced termination")


class ExecParams(BaseModel):
    pod_name: str = Field(description="Name of the pod")
    command: str = Field(description="Command to execute (e.g. 'ls -la'); split on whitespace")
    container_name: Optional[str] = Field(default=None, description="Container name (defaults to the first container)")
    namespace: Optional[str] = Field(default=None, description=_NAMESPACE_HELP)


class PodLogsParams(BaseModel):
    pod_name: str = Field(description="Name of the pod")
    container_name: Optional[str] = Field(default=None, description="Container name (defaults to the first container)")
    namespace: Optional[str] = Field(default=None, description=_NAMESPACE_HELP)
    tail_lines: Optional[int] = Field(default=None, ge=1, description="Number of lines from the end of the log")
    previous: bool = Field(default=False, description="Return logs of the previous container instance")


def register_tools(registry: ToolRegistry, client: KubernetesClient) -> None:
    """Register Kubernetes tools on the given registry."""

    @registry.tool(
        "get_pods",
        GetPodsParams,
        description="List pods in a namespace, optionally filtered by label or field selectors.",
        error_context="Error fetching pods",
    )
    async def get_pods(params: GetPodsParams) -> Success:
        namespace = client.namespace(params.namespace)
        pods = await client.list_pods(namespace, params.label_selector, params.field_selector)
        return Success(f"Found {len(pods['items'])} pods in namespace '{namespace}'.", pods)

    @registry.tool(
        "find_pods",
        FindPodsParams,
        description="Find pods whose name matches a pattern ('*' is the only wildcard).",
        error_context="Error finding pods",
    )
    async def find_pods(params: FindPodsParams) -> Success:
        namespace = client.namespace(params.namespace)
        pods = await client.find_pods(params.name_pattern, namespace)
        return Success(
            f"Found {len(pods)} pods matching '{params.name_pattern}' in namespace '{namespace}'.",
            {"items": pods},
        )

    @registry.tool(
        "kill_pod",
        KillPodParams,
        description="Delete a pod.",
        error_context="Error deleting pod",
    )
    async def kill_pod(params: KillPodParams) -> Success:
        namespace = client.namespace(params.namespace)
        result = await client.delete_pod(params.pod_name, namespace, params.grace_period_seconds)
        return Success(f"Successfully deleted pod '{params.pod_name}' in namespace '{namespace}'.", result)

    @registry.tool(
        "exec_in_pod",
        ExecParams,
        description="Execute a command inside a pod container via kubectl exec.",
        error_context="Error executing command in pod",
    )
    async def exec_in_pod(params: ExecParams) -> Success:
        result = await client.exec_in_pod(
            params.pod_name, params.command, params.container_name, params.namespace
        )
        return Success(
            f"Command execution results from pod '{result.pod}' in namespace '{result.namespace}':",
            result.to_dict(),
        )

    @registry.tool(
        "get_pod_logs",
        PodLogsParams,
        description="Read the logs of a pod container.",
        error_context="Error getting pod logs",
    )
    async def get_pod_logs(params: PodLogsParams) -> Success:
        logs = await client.get_pod_logs(
            params.pod_name,
            params.container_name,
            params.namespace,
            params.tail_lines,
            params.previous,
        )
        return Success(f"Logs from pod '{logs['pod']}' in namespace '{logs['namespace']}':", logs)


async def build() -> ToolRegistry:
    client = KubernetesClient.from_config(KubernetesConfig.from_env())
    registry = ToolRegistry(SERVER_NAME)
    register_tools(registry, client)
    registry.add_shutdown_hook(client.close)
    return registry
