"""Server configuration: CLI arguments first, then environment / .env, then defaults."""

import argparse
import logging
import os
from dataclasses import dataclass, field
from typing import Optional, Sequence

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger("figma_mcp.config")

VERSION = "0.1.0"

DEFAULT_PORT = 3333
DEFAULT_HOST = "127.0.0.1"


def _float(key: str, default: float) -> float:
    return float(os.getenv(key, str(default)))


def _int(key: str, default: int) -> int:
    return int(os.getenv(key, str(default)))


def _bool(key: str, default: bool = False) -> bool:
    return os.getenv(key, str(default)).lower() in ("true", "1", "yes")


# Figma HTTP client
FIGMA_HTTP_TIMEOUT = _float("FIGMA_HTTP_TIMEOUT", 60.0)

# Parallel image downloads
FIGMA_DOWNLOAD_WORKERS = _int("FIGMA_DOWNLOAD_WORKERS", 4)


def write_logs_enabled() -> bool:
    """Dump raw and simplified Figma responses to LOG_DIR for debugging."""
    return _bool("FIGMA_WRITE_LOGS")


@dataclass
class ServerConfig:
    figma_api_key: str
    port: int = DEFAULT_PORT
    host: str = DEFAULT_HOST
    stdio: bool = False
    config_sources: dict = field(default_factory=dict)


def mask_api_key(key: str) -> str:
    """Hide everything but the last 4 characters of an API key."""
    if len(key) <= 4:
        return "****"
    return f"****{key[-4:]}"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="figma-mcp",
        description="MCP server that serves simplified Figma design data.",
    )
    parser.add_argument("--figma-api-key", help="Figma API key (Personal Access Token)")
    parser.add_argument("--port", type=int, help="Port for the SSE server")
    parser.add_argument("--host", help="Host for the SSE server")
    parser.add_argument("--stdio", action="store_true", help="Serve over stdio instead of SSE")
    parser.add_argument("--version", action="version", version=VERSION)
    return parser


def get_server_config(argv: Optional[Sequence[str]] = None) -> ServerConfig:
    args = _build_parser().parse_args(argv)

    config = ServerConfig(
        figma_api_key="",
        stdio=args.stdio,
        config_sources={"figma_api_key": "env", "port": "default"},
    )

    # FIGMA_API_KEY
    if args.figma_api_key:
        config.figma_api_key = args.figma_api_key
        config.config_sources["figma_api_key"] = "cli"
    elif os.getenv("FIGMA_API_KEY"):
        config.figma_api_key = os.environ["FIGMA_API_KEY"]
        config.config_sources["figma_api_key"] = "env"

    # PORT
    if args.port:
        config.port = args.port
        config.config_sources["port"] = "cli"
    elif os.getenv("PORT"):
        config.port = int(os.environ["PORT"])
        config.config_sources["port"] = "env"

    config.host = args.host or os.getenv("HOST", DEFAULT_HOST)

    if not config.figma_api_key:
        logger.error("FIGMA_API_KEY is required (via --figma-api-key or .env file)")
        raise SystemExit(1)

    if not config.stdio:
        logger.info("Configuration:")
        logger.info(
            f"- FIGMA_API_KEY: {mask_api_key(config.figma_api_key)} "
            f"(source: {config.config_sources['figma_api_key']})"
        )
        logger.info(f"- PORT: {config.port} (source: {config.config_sources['port']})")

    return config
