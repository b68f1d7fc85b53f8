"""
Health notifications - Message formatting for status lines and alerts.

Delivery itself lives in the output adapters; this module only turns a
HealthVerdict into text and maps it to a severity level.
"""

import logging
import socket
from typing import Optional
from urllib.parse import urlsplit

from eth_alive.core.entities import HealthStatus, HealthVerdict
from eth_alive.health.config import WatchdogConfig

logger = logging.getLogger(__name__)

LEVELS = {
    HealthStatus.SYNCED: "INFO",
    HealthStatus.LOCAL_AHEAD: "INFO",
    HealthStatus.LAGGING: "WARN",
    HealthStatus.REMOTE_UNREACHABLE: "WARN",
    HealthStatus.LOCAL_UNREACHABLE: "FAIL",
}

EMOJI_MAP = {"INFO": "✅", "WARN": "⚠️", "FAIL": "❌"}
EXIT_CODES = {"INFO": 0, "WARN": 2, "FAIL": 3}

TITLES = {
    HealthStatus.SYNCED: "Node synced",
    HealthStatus.LOCAL_AHEAD: "Local node ahead of remote",
    HealthStatus.LAGGING: "Node lagging",
    HealthStatus.REMOTE_UNREACHABLE: "Remote RPC unreachable",
    HealthStatus.LOCAL_UNREACHABLE: "LOCAL NODE DOWN",
}


def verdict_level(verdict: HealthVerdict) -> str:
    """
    Map a verdict to a severity level.

    Returns:
        "INFO", "WARN" or "FAIL"
    """
    return LEVELS[verdict.status]


def exit_code_for(verdict: HealthVerdict) -> int:
    """
    Map a verdict to a process exit code.

    Returns:
        Exit code: 0 (INFO), 2 (WARN), 3 (FAIL)
    """
    return EXIT_CODES[verdict_level(verdict)]


def format_status(verdict: HealthVerdict) -> str:
    """
    Format a one-line status for the console/log.

    Args:
        verdict: Verdict for the current cycle

    Returns:
        Status line
    """
    status = verdict.status
    heights = f"Local: {verdict.local_height} | Remote: {verdict.remote_height}"

    if status is HealthStatus.SYNCED:
        return f"Synced! [Lag: {verdict.lag}] | {heights}"
    if status is HealthStatus.LAGGING:
        return f"Node lagging! [Lag: {verdict.lag}] | {heights}"
    if status is HealthStatus.LOCAL_AHEAD:
        return f"Local is ahead (or remote is behind) [Lead: {verdict.lead}] | {heights}"
    if status is HealthStatus.REMOTE_UNREACHABLE:
        return f"FAILED to fetch Remote RPC: {_describe_cause(verdict)}"
    return f"LOCAL NODE DOWN: {_describe_cause(verdict)}"


def format_alert(
    verdict: HealthVerdict,
    config: WatchdogConfig,
    hostname: Optional[str] = None,
) -> str:
    """
    Format an alert message for the webhook.

    Args:
        verdict: Alertable verdict
        config: Watchdog configuration (threshold and endpoints)
        hostname: Host name to report (defaults to this machine's)

    Returns:
        Multi-line alert text
    """
    level = verdict_level(verdict)
    emoji = EMOJI_MAP.get(level, "ℹ️")
    host = hostname or socket.gethostname()

    lines = [f"{emoji} **eth-alive: {TITLES[verdict.status]}** ({level})"]

    if verdict.status is HealthStatus.LAGGING:
        lines.append(
            f"Lag: {verdict.lag} blocks (threshold {config.lag_threshold})"
        )
    if verdict.local_height is not None:
        lines.append(f"Local head: {verdict.local_height}")
    if verdict.remote_height is not None:
        lines.append(f"Remote head: {verdict.remote_height}")
    if verdict.cause is not None:
        lines.append(f"Error: {_describe_cause(verdict)}")

    if verdict.status is HealthStatus.REMOTE_UNREACHABLE:
        lines.append(f"Remote node: {redact_url(config.remote_rpc_url)}")
    else:
        lines.append(f"Local node: {redact_url(config.local_rpc_url)}")
    lines.append(f"Host: {host}")

    return "\n".join(lines)


def redact_url(url: str) -> str:
    """
    Reduce a URL to scheme://host[:port].

    Hosted RPC URLs often carry an API key in the path or query string,
    which must not end up in a chat channel.
    """
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError:
        return "[REDACTED]"
    if not parts.scheme or not parts.hostname:
        return "[REDACTED]"
    netloc = parts.hostname
    if ":" in netloc:
        netloc = f"[{netloc}]"
    if port:
        netloc = f"{netloc}:{port}"
    return f"{parts.scheme}://{netloc}"


def _describe_cause(verdict: HealthVerdict) -> str:
    cause = verdict.cause
    if cause is None:
        return "unknown error"
    return f"[{cause.kind}] {cause.detail}"
