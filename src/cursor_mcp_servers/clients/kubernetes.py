# Cursor MCP Servers
# File: clients/kubernetes.py
# Version: v3

"""Kubernetes client: pod listing, deletion, logs and ``kubectl exec``.

The official ``kubernetes`` SDK is synchronous, so every API call is pushed
to a worker thread with ``asyncio.to_thread``. Command execution shells out
to kubectl (no timeout: the process runs to completion).
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from kubernetes import client as kube_client
from kubernetes import config as kube_config
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException

from ..config import KubernetesConfig
from ..errors import ConfigurationError, UpstreamError
from ..models import ExecResult

logger = logging.getLogger(__name__)

# argv -> (exit code, stdout, stderr)
CommandRunner = Callable[[List[str]], Awaitable[Tuple[int, str, str]]]


def compile_name_pattern(pattern: str) -> "re.Pattern[str]":
    """Turn a ``*`` glob into an anchored regex; everything else is literal."""
    return re.compile(".*".join(re.escape(part) for part in pattern.split("*")))


async def run_process(argv: List[str]) -> Tuple[int, str, str]:
    """Run a subprocess to completion and capture its output."""
    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as exc:
        raise UpstreamError(f"Command not found: {argv[0]}") from exc

    stdout, stderr = await proc.communicate()
    return (
        proc.returncode if proc.returncode is not None else -1,
        stdout.decode("utf-8", errors="replace"),
        stderr.decode("utf-8", errors="replace"),
    )


def load_core_api(config: KubernetesConfig) -> kube_client.CoreV1Api:
    """Load cluster credentials and return a CoreV1Api bound to them."""
    try:
        if config.in_cluster:
            kube_config.load_incluster_config()
        else:
            kube_config.load_kube_config(
                config_file=config.kubeconfig, context=config.context
            )
    except (ConfigException, OSError) as exc:
        logger.error("Could not load Kubernetes configuration: %s", exc)
        raise ConfigurationError(
            "Kubernetes", ["KUBECONFIG (or KUBERNETES_IN_CLUSTER=1 inside a pod)"]
        ) from exc
    return kube_client.CoreV1Api()


class KubernetesClient:
    """Pod operations against one cluster, defaulting to the configured namespace."""

    def __init__(
        self,
        config: KubernetesConfig,
        core_api: Any,
        *,
        runner: Optional[CommandRunner] = None,
    ) -> None:
        self.config = config
        self.core_api = core_api
        self._runner = runner or run_process
        self._serializer = kube_client.ApiClient()

    @classmethod
    def from_config(cls, config: KubernetesConfig) -> "KubernetesClient":
        return cls(config, load_core_api(config))

    def namespace(self, namespace: Optional[str]) -> str:
        return namespace or self.config.namespace

    async def close(self) -> None:
        self._serializer.close()
        api_client = getattr(self.core_api, "api_client", None)
        if api_client is not None and hasattr(api_client, "close"):
            api_client.close()

    # ------------------------------------------------------------------
    # SDK plumbing
    # ------------------------------------------------------------------

    async def _call(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        try:
            result = await asyncio.to_thread(fn, *args, **kwargs)
        except ApiException as exc:
            raise UpstreamError(
                f"Kubernetes API error ({exc.status}): {exc.reason}", status=exc.status
            ) from exc
        return result

    def _to_dict(self, obj: Any) -> Any:
        # camelCase keys, same shape as `kubectl get -o json`
        return self._serializer.sanitize_for_serialization(obj)

    # ------------------------------------------------------------------
    # Pods
    # ------------------------------------------------------------------

    async def list_pods(
        self,
        namespace: Optional[str] = None,
        label_selector: Optional[str] = None,
        field_selector: Optional[str] = None,
    ) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {}
        if label_selector:
            kwargs["label_selector"] = label_selector
        if field_selector:
            kwargs["field_selector"] = field_selector

        pods = await self._call(
            self.core_api.list_namespaced_pod, self.namespace(namespace), **kwargs
        )
        data = self._to_dict(pods) or {}
        data.setdefault("items", [])
        return data

    async def find_pods(self, name_pattern: str, namespace: Optional[str] = None) -> List[Dict[str, Any]]:
        pod_list = await self.list_pods(namespace)
        regex = compile_name_pattern(name_pattern)
        return [
            pod
            for pod in pod_list["items"]
            if regex.fullmatch(((pod.get("metadata") or {}).get("name")) or "")
        ]

    async def get_pod(self, pod_name: str, namespace: Optional[str] = None) -> Dict[str, Any]:
        pod = await self._call(
            self.core_api.read_namespaced_pod, pod_name, self.namespace(namespace)
        )
        return self._to_dict(pod)

    async def delete_pod(
        self,
        pod_name: str,
        namespace: Optional[str] = None,
        grace_period_seconds: Optional[int] = None,
    ) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {}
        if grace_period_seconds is not None:
            kwargs["grace_period_seconds"] = grace_period_seconds
        result = await self._call(
            self.core_api.delete_namespaced_pod,
            pod_name,
            self.namespace(namespace),
            **kwargs,
        )
        return self._to_dict(result) or {}

    async def default_container(self, pod_name: str, namespace: Optional[str] = None) -> str:
        """Name of the first container declared in the pod spec."""
        pod = await self.get_pod(pod_name, namespace)
        containers = ((pod or {}).get("spec") or {}).get("containers") or []
        if not containers or not containers[0].get("name"):
            raise UpstreamError(f"No containers found in pod {pod_name}")
        return containers[0]["name"]

    async def exec_in_pod(
        self,
        pod_name: str,
        command: str,
        container_name: Optional[str] = None,
        namespace: Optional[str] = None,
    ) -> ExecResult:
        ns = self.namespace(namespace)
        container = container_name or await self.default_container(pod_name, ns)
        cmd = command.split()

        argv = [self.config.kubectl_path]
        if self.config.kubeconfig:
            argv += ["--kubeconfig", self.config.kubeconfig]
        if self.config.context:
            argv += ["--context", self.config.context]
        argv += ["exec", "-n", ns, pod_name, "-c", container, "--", *cmd]

        logger.info("Executing in %s/%s [%s]: %s", ns, pod_name, container, cmd)
        exit_code, stdout, stderr = await self._runner(argv)
        if exit_code != 0:
            raise UpstreamError(
                f"Command exited with code {exit_code}: {stderr.strip() or stdout.strip()}",
                exit_code=exit_code,
            )

        return ExecResult(
            pod=pod_name,
            namespace=ns,
            container=container,
            command=cmd,
            exit_code=exit_code,
            stdout=stdout,
            stderr=stderr,
        )

    async def get_pod_logs(
        self,
        pod_name: str,
        container_name: Optional[str] = None,
        namespace: Optional[str] = None,
        tail_lines: Optional[int] = None,
        previous: bool = False,
    ) -> Dict[str, Any]:
        ns = self.namespace(namespace)
        container = container_name or await self.default_container(pod_name, ns)

        kwargs: Dict[str, Any] = {"container": container, "previous": bool(previous)}
        if tail_lines is not None:
            kwargs["tail_lines"] = tail_lines

        logs = await self._call(self.core_api.read_namespaced_pod_log, pod_name, ns, **kwargs)
        return {"pod": pod_name, "namespace": ns, "container": container, "logs": logs or ""}
