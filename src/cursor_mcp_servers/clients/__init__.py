# Cursor MCP Servers
# File: clients/__init__.py
# Version: v1

"""Per-domain API clients. Each tool module calls into exactly one of these."""
