"""
Health runner - Wires configuration, adapters and the watchdog loop.

This module coordinates loading configuration, building the RPC and
alert adapters, and running the watchdog either once or continuously.
"""

import logging
import threading
from typing import Optional

from eth_alive.adapters.outputs import AdapterStdoutOutput, AdapterWebhookOutput
from eth_alive.adapters.outputs.webhook import is_webhook_configured
from eth_alive.adapters.rpc import AdapterEthRpcClient
from eth_alive.application.watchdog_use_case import WatchdogUseCase
from eth_alive.core.errors import ConfigError
from eth_alive.core.ports import OutputPort
from eth_alive.health import config, notify
from eth_alive.health.config import WatchdogConfig

logger = logging.getLogger(__name__)


def run_watchdog(
    config_path: Optional[str] = None,
    dry_run: bool = False,
    once: bool = False,
    stop_event: Optional[threading.Event] = None,
) -> int:
    """
    Run the watchdog and return an exit code.

    Args:
        config_path: Path to a JSON config file (optional)
        dry_run: If True, print alerts instead of sending them
        once: If True, run a single cycle and exit
        stop_event: Event that stops the continuous loop

    Returns:
        Exit code: 0 (healthy or stopped), 2 (WARN), 3 (FAIL / bad config)
    """
    try:
        watch_config = config.load_config(config_path)
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        return 3

    _log_banner(watch_config, dry_run)

    use_case = build_use_case(watch_config, dry_run=dry_run)

    if once:
        verdict = use_case.execute()
        return notify.exit_code_for(verdict)

    use_case.run(stop_event=stop_event)
    return 0


def build_use_case(watch_config: WatchdogConfig, dry_run: bool = False) -> WatchdogUseCase:
    """
    Create the watchdog use case with concrete adapters.

    Args:
        watch_config: Validated configuration
        dry_run: If True, alerts go to stdout

    Returns:
        Configured WatchdogUseCase
    """
    fetcher = AdapterEthRpcClient(timeout=watch_config.rpc_timeout)

    output: OutputPort
    if dry_run:
        output = AdapterStdoutOutput()
    else:
        output = AdapterWebhookOutput(
            watch_config.webhook_url, timeout=watch_config.webhook_timeout
        )

    return WatchdogUseCase(fetcher=fetcher, output=output, config=watch_config)


def _log_banner(watch_config: WatchdogConfig, dry_run: bool) -> None:
    if dry_run:
        webhook = "[DRY-RUN]"
    elif is_webhook_configured(watch_config.webhook_url):
        webhook = "[REDACTED]"
    else:
        webhook = "[DISABLED]"
        logger.warning("No webhook configured: alerting is disabled")

    logger.info("Starting watchdog loop")
    logger.info("  Local Node:  %s", notify.redact_url(watch_config.local_rpc_url))
    logger.info("  Remote Node: %s", notify.redact_url(watch_config.remote_rpc_url))
    logger.info("  Threshold:   %d blocks", watch_config.lag_threshold)
    logger.info("  Interval:    %.0fs", watch_config.poll_interval)
    logger.info("  Cooldown:    %.0fs", watch_config.alert_cooldown)
    logger.info("  Webhook:     %s", webhook)
    if watch_config.alert_on_remote_failure:
        logger.info("  Remote failures are alertable")
