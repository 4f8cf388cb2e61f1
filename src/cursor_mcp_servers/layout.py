# Cursor MCP Servers
# File: layout.py
# Version: v1

"""Dashboard layout helpers for Redash widgets.

Redash dashboards use a 6-column grid. ``plan_widgets`` places one widget
per visualization left-to-right, top-to-bottom with explicit positions.

``infer_number_format`` guesses a display format from a column *name*.
It is a substring match and nothing more: ``generated_at`` looks like a
rate and ``lifetime_value`` looks like a duration. Treat the result as a
suggestion for the agent, never as a fact about the data.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

GRID_COLUMNS = 6
DEFAULT_WIDGET_HEIGHT = 8

PERCENT_HINTS = ("pct", "percent", "rate", "ratio")
DURATION_HINTS = ("duration", "seconds", "_ms", "time")


def infer_number_format(column: str) -> Optional[str]:
    name = column.lower()
    if any(hint in name for hint in PERCENT_HINTS):
        return "0.00%"
    if any(hint in name for hint in DURATION_HINTS):
        return "duration"
    return None


def visualization_columns(visualization: Dict[str, Any]) -> List[str]:
    """Column names a visualization refers to (table columns, chart mapping)."""
    options = visualization.get("options") or {}
    names: List[str] = []
    for col in options.get("columns") or []:
        if isinstance(col, dict) and col.get("name"):
            names.append(str(col["name"]))
    for name in (options.get("columnMapping") or {}):
        if name not in names:
            names.append(str(name))
    return names


def format_hints(columns: Iterable[str]) -> Dict[str, str]:
    hints: Dict[str, str] = {}
    for column in columns:
        fmt = infer_number_format(column)
        if fmt:
            hints[column] = fmt
    return hints


def grid_position(index: int, per_row: int, height: int = DEFAULT_WIDGET_HEIGHT) -> Dict[str, int]:
    per_row = max(1, min(per_row, GRID_COLUMNS))
    width = GRID_COLUMNS // per_row
    return {
        "col": (index % per_row) * width,
        "row": (index // per_row) * height,
        "sizeX": width,
        "sizeY": height,
    }


def plan_widgets(queries: List[Dict[str, Any]], per_row: int = 2) -> Dict[str, Any]:
    """Propose widgets for every visualization of the given queries."""
    widgets: List[Dict[str, Any]] = []
    skipped: List[Any] = []

    for query in queries:
        visualizations = query.get("visualizations") or []
        if not visualizations:
            skipped.append(query.get("id"))
            continue
        for vis in visualizations:
            widgets.append(
                {
                    "query_id": query.get("id"),
                    "query_name": query.get("name"),
                    "visualization_id": vis.get("id"),
                    "visualization_name": vis.get("name"),
                    "type": vis.get("type"),
                    "options": {"position": grid_position(len(widgets), per_row)},
                    "format_hints": format_hints(visualization_columns(vis)),
                }
            )

    return {"grid_columns": GRID_COLUMNS, "widgets": widgets, "skipped_queries": skipped}
