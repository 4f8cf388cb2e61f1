# Cursor MCP Servers
# File: tools/postgres.py
# Version: v2

"""PostgreSQL tools.

Tool names keep their ``mcp__`` prefix so existing agent prompts keep
working. Every handler reads from whichever backend ``connect_database``
chose at startup; demo answers are labelled as such in the summary line.
"""

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, Field

from ..clients.postgres import Database, connect_database
from ..config import PostgresConfig
from ..envelope import Success
from ..registry import ToolRegistry

SERVER_NAME = "PostgreSQL Server"


class TableStructureParams(BaseModel):
    table_name: str = Field(description="The name of the table to examine")


class ExecuteQueryParams(BaseModel):
    query: str = Field(description="The SQL query to execute")
    params: Optional[List[Union[str, int, float, bool, None]]] = Field(
        default=None, description="Optional positional parameters ($1, $2, ...) for the query"
    )


def register_tools(registry: ToolRegistry, db: Database) -> None:
    """Register the PostgreSQL tools against ``db``."""

    @registry.tool(
        "mcp__get_database_info",
        description="Get information about the connected PostgreSQL database.",
        error_context="Error getting database info",
    )
    async def get_database_info(_params) -> Success:
        info = await db.database_info()
        if db.demo_mode:
            return Success("Running in demo mode - no actual PostgreSQL connection.", info)
        return Success(
            f"Connected to database: {info.get('database_name')} as {info.get('current_user')}",
            info,
        )

    @registry.tool(
        "mcp__list_tables",
        description="List all user tables in the database (system schemas excluded).",
        error_context="Error listing tables",
    )
    async def list_tables(_params) -> Success:
        tables = await db.list_tables()
        if db.demo_mode:
            return Success("Running in demo mode - showing sample tables.", tables)
        return Success(f"Found {len(tables)} tables.", tables)

    @registry.tool(
        "mcp__get_table_structure",
        TableStructureParams,
        description="Get the column structure of a table.",
        error_context="Error getting table structure",
    )
    async def get_table_structure(params: TableStructureParams) -> Success:
        columns = await db.table_structure(params.table_name)
        prefix = "Demo structure" if db.demo_mode else "Structure"
        return Success(
            f"{prefix} for table {params.table_name}: {len(columns)} columns found.",
            columns,
        )

    @registry.tool(
        "mcp__execute_query",
        ExecuteQueryParams,
        description="Execute a SQL query with optional positional parameters.",
        error_context="Error executing query",
    )
    async def execute_query(params: ExecuteQueryParams) -> Success:
        result = await db.execute(params.query, params.params)
        prefix = "Demo query" if db.demo_mode else "Query"
        return Success(
            f"{prefix} executed successfully. Rows affected: {result.row_count}",
            result.to_dict(),
        )


async def build() -> ToolRegistry:
    config = PostgresConfig.from_env()
    db = await connect_database(config)

    registry = ToolRegistry(SERVER_NAME)
    register_tools(registry, db)
    registry.add_shutdown_hook(db.close)
    return registry
