# Cursor MCP Servers
# File: models.py
# Version: v1

"""Domain models shared between adapter clients and their tools."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional, Union


class JobStatus(IntEnum):
    """Redash job lifecycle. Anything >= SUCCESS is terminal."""

    PENDING = 1
    STARTED = 2
    SUCCESS = 3
    FAILURE = 4
    CANCELLED = 5

    @property
    def is_terminal(self) -> bool:
        return self >= JobStatus.SUCCESS


def job_status_name(status: Any) -> str:
    """Human-readable name for a raw status code (UNKNOWN for anything else)."""
    try:
        return JobStatus(int(status)).name
    except (TypeError, ValueError):
        return "UNKNOWN"


@dataclass
class RedashJob:
    """Job descriptor returned by /api/jobs/<id> or a query execution."""

    id: str
    status: int
    query_result_id: Optional[int] = None
    error: Optional[str] = None

    # Raw JSON payload from the API, echoed back to the agent.
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "RedashJob":
        return cls(
            id=str(data.get("id", "")),
            status=int(data.get("status") or 0),
            query_result_id=data.get("query_result_id") or None,
            error=data.get("error") or None,
            raw=dict(data),
        )

    @property
    def is_terminal(self) -> bool:
        return self.status >= JobStatus.SUCCESS


@dataclass
class ExecutionOutcome:
    """Result of executing a Redash query and (maybe) waiting for it."""

    # JSON query_result dict, or CSV text when csv output was requested.
    result: Union[Dict[str, Any], str]
    from_cache: bool
    job: Optional[RedashJob] = None


@dataclass
class ExecResult:
    """Output of a command run inside a pod via kubectl exec."""

    pod: str
    namespace: str
    container: str
    command: List[str]
    exit_code: int
    stdout: str
    stderr: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class QueryResult:
    """Tabular result of a SQL statement, shaped like the node-postgres result."""

    rows: List[Dict[str, Any]]
    row_count: int
    fields: List[Dict[str, Any]]

    def to_dict(self) -> Dict[str, Any]:
        return {"rows": self.rows, "rowCount": self.row_count, "fields": self.fields}


@dataclass
class PdfContent:
    """What read_pdf extracts from a document."""

    page_count: int
    text: str
    form_fields: Dict[str, str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "pageCount": self.page_count,
            "text": self.text,
            "formFields": self.form_fields,
            "hasFormFields": bool(self.form_fields),
        }
