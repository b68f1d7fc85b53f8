#!/usr/bin/env python3
"""
eth-alive CLI - Command-line interface for the node watchdog.

Usage:
    python -m eth_alive.interface.watch [--config configs/watch.json] [--once] [--dry-run]

Exit codes:
    0: Healthy (or loop stopped cleanly)
    2: WARN - Node lagging or remote unreachable (--once)
    3: FAIL - Local node down (--once) or invalid configuration
"""

import argparse
import logging
import signal
import sys
import threading
from typing import List, Optional

from eth_alive.health.runner import run_watchdog


def setup_logging(verbose: bool = False) -> None:
    """
    Setup logging configuration.

    Args:
        verbose: If True, enable DEBUG level logging
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def install_signal_handlers(stop_event: threading.Event) -> None:
    """
    Set stop_event on SIGTERM/SIGINT so the loop ends after its cycle.

    Args:
        stop_event: Event passed to the watchdog loop
    """
    logger = logging.getLogger(__name__)

    def _handle(signum, _frame):
        logger.info("Received signal %d, stopping watchdog", signum)
        stop_event.set()

    signal.signal(signal.SIGTERM, _handle)
    signal.signal(signal.SIGINT, _handle)


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="eth-alive",
        description="Liveness watchdog comparing a local node against a reference node",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Configuration is read from environment variables (and a .env file):
  LOCAL_RPC_URL, REMOTE_RPC_URL, DISCORD_WEBHOOK_URL, LAG_THRESHOLD,
  POLL_INTERVAL, ALERT_COOLDOWN_MINUTES, RPC_TIMEOUT, WEBHOOK_TIMEOUT,
  CONCURRENT_POLLING, ALERT_ON_REMOTE_FAILURE

Exit codes:
  0  - Healthy / stopped
  2  - Warning (lagging or remote unreachable, with --once)
  3  - Failure (local node down with --once, or bad configuration)

Examples:
  eth-alive
  eth-alive --once --dry-run
  eth-alive --config configs/watch.json -v
        """,
    )

    parser.add_argument(
        "--config",
        default=None,
        help="Path to JSON config file (default: configs/watch.json if present)",
    )

    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single check and exit with a status code",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Don't send alerts, print them to stdout instead",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging (DEBUG level)",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Exit code (see module docstring)
    """
    args = build_parser().parse_args(argv)

    setup_logging(verbose=args.verbose)

    logger = logging.getLogger(__name__)
    logger.info("eth-alive daemon starting up...")

    if args.dry_run:
        logger.info("Dry-run mode: No alerts will be sent")

    stop_event = threading.Event()
    if not args.once:
        install_signal_handlers(stop_event)

    try:
        exit_code = run_watchdog(
            config_path=args.config,
            dry_run=args.dry_run,
            once=args.once,
            stop_event=stop_event,
        )
        logger.info("Watchdog finished with exit code: %d", exit_code)
        return exit_code
    except KeyboardInterrupt:
        logger.error("Watchdog interrupted by user")
        return 130
    except Exception as e:  # pylint: disable=broad-except
        logger.error("Watchdog failed: %s", e, exc_info=True)
        return 3


if __name__ == "__main__":
    sys.exit(main())
