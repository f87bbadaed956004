"""Entry point for the provider registry MCP server."""

import argparse
import logging
import sys
from typing import Any

from provider_registry import __version__
from provider_registry.config import LogLevel, RegistryConfig, TransportMode


def setup_logging(level: LogLevel) -> None:
    """Configure logging for the server."""
    logging.basicConfig(
        level=level.value,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="provider-registry",
        description="MCP server for administering a catalog of hosted models",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    # Transport options
    parser.add_argument(
        "--transport",
        choices=["stdio", "sse", "streamable-http"],
        default=None,
        help="Transport mode (default: from config or stdio)",
    )
    parser.add_argument(
        "--host",
        default=None,
        help="Host to bind HTTP server to (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind HTTP server to (default: 8000)",
    )

    # Storage
    parser.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy database URL (default: in-memory catalog)",
    )

    # Safety options
    parser.add_argument(
        "--read-only",
        action="store_true",
        help="Run in read-only mode (disable all write operations)",
    )
    parser.add_argument(
        "--enable-dangerous",
        action="store_true",
        help="Enable dangerous operations like delete",
    )

    # Logging
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO)",
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> RegistryConfig:
    """Build config from args, falling back to environment/defaults."""
    config_kwargs: dict[str, Any] = {}

    if args.transport:
        config_kwargs["transport"] = TransportMode(args.transport)

    if args.host:
        config_kwargs["host"] = args.host

    if args.port:
        config_kwargs["port"] = args.port

    if args.database_url:
        config_kwargs["database_url"] = args.database_url

    if args.read_only:
        config_kwargs["read_only_mode"] = True

    if args.enable_dangerous:
        config_kwargs["enable_dangerous_operations"] = True

    if args.log_level:
        config_kwargs["log_level"] = LogLevel(args.log_level)

    return RegistryConfig(**config_kwargs)


def main() -> int:
    """Main entry point."""
    config = build_config(parse_args())

    setup_logging(config.log_level)

    logger = logging.getLogger(__name__)
    logger.info(f"Starting provider registry v{__version__}")

    from provider_registry.server import create_server

    mcp = create_server(config)

    transport_name: str = config.transport.value
    if config.transport != TransportMode.STDIO:
        logger.info(f"Running with {transport_name} transport on {config.host}:{config.port}")
    else:
        logger.info(f"Running with {transport_name} transport")

    mcp.run(transport=transport_name)  # type: ignore[arg-type]
    return 0


if __name__ == "__main__":
    sys.exit(main())
