"""Server bootstrap for the disk cache MCP service.

Creates the FastMCP instance, builds the disk store from config,
registers the cache tools, fills the store from disk and starts the
MCP server (stdio transport).
"""

import asyncio
import logging
import sys

from mcp.server.fastmcp import FastMCP

from config import LOG_LEVEL, default_store_options
from store.disk_store import DiskStore

from tools.cache_tools import register as register_cache_tools

logger = logging.getLogger(__name__)

mcp = FastMCP("disk-cache-mcp")

store = DiskStore(default_store_options())


def register_all() -> None:
    register_cache_tools(mcp, store=store)


register_all()


def main() -> None:
    # stdout carries the MCP protocol; logs go to stderr
    logging.basicConfig(level=LOG_LEVEL, stream=sys.stderr)

    if store.options.preventfill:
        asyncio.run(store.notify_fill(None))
    else:
        result = asyncio.run(store.fill())
        logger.info("Disk cache ready: %d entries, %d bytes", result.loaded, store.current_size)

    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
