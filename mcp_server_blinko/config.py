"""
Configuration for the Blinko MCP server.

Values come from command-line flags first, then environment variables
(a .env file in the working directory is loaded but never overrides the
real environment):

  --blinko_domain=example.com      or  BLINKO_DOMAIN
  --blinko_api_key=your-api-key    or  BLINKO_API_KEY
"""

import argparse
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from mcp_server_blinko.errors import ConfigurationError

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
TRANSPORTS = ("stdio", "streamable-http")


@dataclass(frozen=True)
class Settings:
    domain: str = ""
    api_key: str = ""
    transport: str = "stdio"
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    debug: bool = False

    def require(self) -> None:
        """Fail fast unless both the domain and the API key are set."""
        if not self.domain:
            raise ConfigurationError("Blinko domain not set")
        if not self.api_key:
            raise ConfigurationError("Blinko API key not set")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mcp-server-blinko",
        description="MCP server exposing Blinko note operations as tools.",
    )
    parser.add_argument("--blinko_domain", default="", help="Blinko domain or base URL")
    parser.add_argument("--blinko_api_key", default="", help="Blinko API key")
    parser.add_argument(
        "--transport",
        choices=TRANSPORTS,
        default="stdio",
        help="MCP transport (default: stdio)",
    )
    parser.add_argument("--host", default=DEFAULT_HOST, help="Bind host for streamable-http")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="Bind port for streamable-http")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def load_settings(argv: list[str] | None = None, *, dotenv: bool = True) -> Settings:
    """Build Settings from flags and environment, flags taking precedence."""
    if dotenv:
        load_dotenv()

    # Unknown flags are ignored so MCP hosts can pass their own arguments.
    args, _ = build_parser().parse_known_args(argv)

    return Settings(
        domain=args.blinko_domain or os.environ.get("BLINKO_DOMAIN", ""),
        api_key=args.blinko_api_key or os.environ.get("BLINKO_API_KEY", ""),
        transport=args.transport,
        host=args.host,
        port=args.port,
        debug=args.debug,
    )
