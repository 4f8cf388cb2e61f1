# demo_mcp_redash_queries.py
# Version: v1
#
# Demo: check the Redash connection and list the first page of queries.
#
# Usage:
#
#   export REDASH_URL=https://redash.example.com
#   export REDASH_API_KEY=...
#   python demo_mcp_redash_queries.py

import asyncio
import json

from cursor_mcp_servers.clients.redash import RedashClient
from cursor_mcp_servers.config import RedashConfig


async def main() -> None:
    client = RedashClient(RedashConfig.from_env())

    status = await client.check_connection()
    print(json.dumps(status, indent=2))
    if not status["connected"]:
        return

    page = await client.list_queries(page=1, page_size=10)
    print(f"Queries returned: {page.get('count', 0)}")
    for q in page.get("results", []):
        print(f"- {q.get('name')} (id={q.get('id')})")


if __name__ == "__main__":
    asyncio.run(main())
