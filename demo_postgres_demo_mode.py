# demo_postgres_demo_mode.py
# Version: v1
#
# Demo: build the PostgreSQL registry and call every tool through dispatch.
# With POSTGRES_DB / POSTGRES_USER / POSTGRES_PASSWORD unset this runs
# against the demo fixtures; with them set it talks to the real database.
#
# Usage:
#
#   python demo_postgres_demo_mode.py

import asyncio

from cursor_mcp_servers.tools import postgres


async def main() -> None:
    registry = await postgres.build()
    try:
        calls = [
            ("mcp__get_database_info", {}),
            ("mcp__list_tables", {}),
            ("mcp__get_table_structure", {"table_name": "users"}),
            ("mcp__execute_query", {"query": "SELECT * FROM products"}),
        ]
        for name, args in calls:
            result = await registry.dispatch(name, args)
            print(f"== {name} (isError={result.isError})")
            for part in result.content:
                print(part.text)
    finally:
        await registry.aclose()


if __name__ == "__main__":
    asyncio.run(main())
