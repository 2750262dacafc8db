"""
Entry point for running the segmentation relay.

Usage:
    # Configure through the environment, then start
    export SEGMENT_CHUNK_SIZE=120
    export SEGMENT_DESTINATION=http://localhost:8000/api/delivery/
    python -m segment_relay

    # Verbose logging with a rotating JSON log file
    python -m segment_relay --log-level DEBUG --log-dir ./logs

See segment_relay.config.RelayConfig.from_env for every variable.
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from segment_relay.common.exceptions import ConfigurationError
from segment_relay.common.log_setup import setup_logging
from segment_relay.config import RelayConfig

# Placeholder logger until setup_logging() is called in main()
logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Run the segmentation relay",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
    SEGMENT_CHUNK_SIZE        bytes per segment (required)
    SEGMENT_DESTINATION       host:port or URL receiving segments (required)
    SEGMENT_LISTEN_ADDRESS    host:port to listen on (default: 0.0.0.0:8080)
    SEGMENT_ROUTE_PATH        inbound route (default: /split)
    SEGMENT_DATA_ENCODING     utf-8 or base64 (default: utf-8)
    SEGMENT_INCLUDE_NUMBER    include segment ordinal (default: true)
    DELIVERY_TIMEOUT_SECONDS  per-segment POST timeout (default: 30)
        """,
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)",
    )

    parser.add_argument(
        "--log-dir",
        type=str,
        default=None,
        help="Directory for a rotating JSON log file (default: from LOG_DIR env var, else console only)",
    )

    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit JSON lines on the console instead of human-readable output",
    )

    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    log_dir = args.log_dir or os.getenv("LOG_DIR")
    setup_logging(
        level=getattr(logging, args.log_level),
        log_dir=Path(log_dir) if log_dir else None,
        json_format=args.json_logs,
    )

    try:
        config = RelayConfig.from_env()
    except ConfigurationError as e:
        logger.error(f"Invalid configuration, not starting: {e}")
        return 1

    from segment_relay.server import run

    run(config)
    return 0


if __name__ == "__main__":
    sys.exit(main())
