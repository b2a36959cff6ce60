"""Command-line entry point: ``python -m gcloud_mcp``."""

import argparse
import logging
import sys

from dotenv import load_dotenv

from .config import ConfigError, load_config
from .server import create_mcp_server
from .tools.common import setup_telemetry
from .tools.gcloud.cli import GcloudCli

logger = logging.getLogger(__name__)

TRANSPORTS = {"stdio": "stdio", "http": "streamable-http"}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="gcloud-mcp", description="Run the gcloud MCP server"
    )
    parser.add_argument(
        "-c",
        "--config",
        help="Absolute path to a JSON configuration file for allowlist/denylist.",
    )
    parser.add_argument(
        "--transport",
        choices=sorted(TRANSPORTS),
        default="stdio",
        help="Transport type (default: stdio).",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = parse_args(argv)
    setup_telemetry()

    cli = GcloudCli()
    if not cli.is_available():
        logger.error("Unable to start gcloud mcp server: gcloud executable not found.")
        return 1

    try:
        config = load_config(args.config)
        server = create_mcp_server(config, cli)
    except ConfigError as e:
        logger.error(f"❌ Unable to start gcloud mcp server: {e}")
        return 1

    logger.info(f"🚀 Starting gcloud mcp server ({args.transport})")
    server.run(transport=TRANSPORTS[args.transport])
    return 0


if __name__ == "__main__":
    sys.exit(main())
