"""
Figma MCP server entrypoint.

Usage:
    figma-mcp --stdio                  # serve over stdio (MCP clients spawn the process)
    figma-mcp --port 3333              # serve over SSE at http://127.0.0.1:3333/sse
"""

import logging
from typing import Optional, Sequence

import figma_tools
from figma_api import FigmaService
from logging_config import setup_logger
from mcp_server import mcp
from server_config import get_server_config

logger = logging.getLogger("figma_mcp.cli")


def main(argv: Optional[Sequence[str]] = None) -> int:
    setup_logger()
    config = get_server_config(argv)

    figma_tools.set_figma_service(FigmaService(config.figma_api_key))

    if config.stdio:
        mcp.run()
    else:
        logger.info(f"Initializing Figma MCP server in HTTP mode on port {config.port}...")
        logger.info(f"SSE endpoint: http://{config.host}:{config.port}/sse")
        mcp.run(transport="sse", host=config.host, port=config.port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
