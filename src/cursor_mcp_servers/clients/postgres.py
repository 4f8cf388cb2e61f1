# Cursor MCP Servers
# File: clients/postgres.py
# Version: v3

"""PostgreSQL backends: a live asyncpg pool and a fixed demo fixture.

``connect_database`` picks one at startup and the choice never changes
afterwards. Demo mode is entered when credentials are missing (no pool is
ever created) or when the startup connectivity check fails.
"""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

import asyncpg

from ..config import PostgresConfig
from ..models import QueryResult

logger = logging.getLogger(__name__)

DATABASE_INFO_SQL = """
    SELECT current_database() AS database_name,
           current_user AS current_user,
           version() AS postgresql_version
"""

LIST_TABLES_SQL = """
    SELECT table_name, table_schema, table_type
    FROM information_schema.tables
    WHERE table_schema NOT IN ('pg_catalog', 'information_schema')
    ORDER BY table_schema, table_name
"""

TABLE_STRUCTURE_SQL = """
    SELECT column_name, data_type, is_nullable, column_default
    FROM information_schema.columns
    WHERE table_name = $1
    ORDER BY ordinal_position
"""


class Database:
    """Interface shared by the live and demo backends."""

    demo_mode: bool = False

    async def database_info(self) -> Dict[str, Any]:
        raise NotImplementedError

    async def list_tables(self) -> List[Dict[str, Any]]:
        raise NotImplementedError

    async def table_structure(self, table_name: str) -> List[Dict[str, Any]]:
        raise NotImplementedError

    async def execute(self, query: str, params: Optional[Sequence[Any]] = None) -> QueryResult:
        raise NotImplementedError

    async def close(self) -> None:
        return None


# ---------------------------------------------------------------------------
# Demo fixture
# ---------------------------------------------------------------------------


def _column(name: str, data_type: str, default: Optional[str] = None) -> Dict[str, Any]:
    return {
        "column_name": name,
        "data_type": data_type,
        "is_nullable": "NO",
        "column_default": default,
    }


_DEMO_TABLES = [
    {"table_name": name, "table_schema": "public", "table_type": "BASE TABLE"}
    for name in ("users", "products", "orders")
]

_DEMO_STRUCTURES: Dict[str, List[Dict[str, Any]]] = {
    "users": [
        _column("id", "integer", "nextval('users_id_seq'::regclass)"),
        _column("username", "character varying"),
        _column("email", "character varying"),
        _column("created_at", "timestamp", "CURRENT_TIMESTAMP"),
    ],
    "products": [
        _column("id", "integer", "nextval('products_id_seq'::regclass)"),
        _column("name", "character varying"),
        _column("price", "numeric"),
        _column("created_at", "timestamp", "CURRENT_TIMESTAMP"),
    ],
}

_DEMO_DEFAULT_STRUCTURE = [
    _column("id", "integer", "nextval('table_id_seq'::regclass)"),
    _column("name", "character varying"),
    _column("created_at", "timestamp", "CURRENT_TIMESTAMP"),
]

_DEMO_USERS = [
    {"id": 1, "username": "john_doe", "email": "john@example.com", "created_at": "2023-01-01T00:00:00Z"},
    {"id": 2, "username": "jane_smith", "email": "jane@example.com", "created_at": "2023-01-02T00:00:00Z"},
]

_DEMO_PRODUCTS = [
    {"id": 1, "name": "Product A", "price": 19.99, "created_at": "2023-01-01T00:00:00Z"},
    {"id": 2, "name": "Product B", "price": 29.99, "created_at": "2023-01-02T00:00:00Z"},
    {"id": 3, "name": "Product C", "price": 39.99, "created_at": "2023-01-03T00:00:00Z"},
]


class FixtureDatabase(Database):
    """Small in-memory stand-in used when no real database is reachable.

    Every answer is a fresh copy of fixed data, so identical calls always
    produce identical payloads.
    """

    demo_mode = True

    async def database_info(self) -> Dict[str, Any]:
        return {
            "database_name": "demo_database",
            "current_user": "demo_user",
            "postgresql_version": "PostgreSQL 14.0 (Demo Version)",
        }

    async def list_tables(self) -> List[Dict[str, Any]]:
        return copy.deepcopy(_DEMO_TABLES)

    async def table_structure(self, table_name: str) -> List[Dict[str, Any]]:
        return copy.deepcopy(_DEMO_STRUCTURES.get(table_name, _DEMO_DEFAULT_STRUCTURE))

    async def execute(self, query: str, params: Optional[Sequence[Any]] = None) -> QueryResult:
        lowered = query.lower()
        rows: List[Dict[str, Any]] = []
        row_count = 0

        if "select" in lowered and "users" in lowered:
            rows = copy.deepcopy(_DEMO_USERS)
            row_count = len(rows)
        elif "select" in lowered and "products" in lowered:
            rows = copy.deepcopy(_DEMO_PRODUCTS)
            row_count = len(rows)
        elif any(verb in lowered for verb in ("insert", "update", "delete")):
            row_count = 1

        fields = [{"name": name, "dataTypeID": 0} for name in (rows[0] if rows else {})]
        return QueryResult(rows=rows, row_count=row_count, fields=fields)


# ---------------------------------------------------------------------------
# Live pool
# ---------------------------------------------------------------------------


def _row_count(status: Optional[str], fallback: int) -> int:
    # "SELECT 2", "INSERT 0 1", "UPDATE 3"; DDL statuses carry no count.
    if status:
        last = status.rsplit(" ", 1)[-1]
        if last.isdigit():
            return int(last)
    return fallback


class LiveDatabase(Database):
    """asyncpg-backed database; one pooled connection per call."""

    demo_mode = False

    def __init__(self, pool: Any) -> None:
        self._pool = pool
        self._closed = False

    async def database_info(self) -> Dict[str, Any]:
        async with self._pool.acquire() as conn:
            row = await conn.fetchrow(DATABASE_INFO_SQL)
        return dict(row) if row is not None else {}

    async def list_tables(self) -> List[Dict[str, Any]]:
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(LIST_TABLES_SQL)
        return [dict(r) for r in rows]

    async def table_structure(self, table_name: str) -> List[Dict[str, Any]]:
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(TABLE_STRUCTURE_SQL, table_name)
        return [dict(r) for r in rows]

    async def execute(self, query: str, params: Optional[Sequence[Any]] = None) -> QueryResult:
        async with self._pool.acquire() as conn:
            stmt = await conn.prepare(query)
            records = await stmt.fetch(*(params or []))
            status = stmt.get_statusmsg()
            fields = [
                {"name": attr.name, "dataTypeID": attr.type.oid}
                for attr in stmt.get_attributes()
            ]

        rows = [dict(r) for r in records]
        return QueryResult(rows=rows, row_count=_row_count(status, len(rows)), fields=fields)

    async def close(self) -> None:
        """Close the pool. A second call is a no-op."""
        if self._closed:
            return
        self._closed = True
        logger.info("Closing PostgreSQL connection pool")
        await self._pool.close()


PoolFactory = Callable[..., Awaitable[Any]]


async def connect_database(
    config: PostgresConfig,
    pool_factory: Optional[PoolFactory] = None,
) -> Database:
    """Return the backend for this process: live when reachable, demo otherwise."""
    if config.demo_mode:
        logger.warning("PostgreSQL server running in DEMO mode")
        return FixtureDatabase()

    factory = pool_factory or asyncpg.create_pool
    pool = None
    try:
        pool = await factory(
            host=config.host,
            port=config.port,
            database=config.database,
            user=config.user,
            password=config.password,
            ssl="require" if config.ssl_required else None,
            min_size=0,
            max_size=config.max_connections,
            timeout=config.connect_timeout_seconds,
            max_inactive_connection_lifetime=30.0,
        )
        async with pool.acquire():
            pass
    except (OSError, asyncio.TimeoutError, asyncpg.PostgresError, asyncpg.InterfaceError) as exc:
        logger.warning(
            "Failed to connect to PostgreSQL at %s:%s (%s). "
            "The server will run in demo mode without a real database connection.",
            config.host,
            config.port,
            exc,
        )
        if pool is not None:
            await pool.close()
        return FixtureDatabase()

    logger.info("Connected to PostgreSQL database %s at %s:%s", config.database, config.host, config.port)
    return LiveDatabase(pool)
