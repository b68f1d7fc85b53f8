"""
Health checks - Pure functions for judging node health.

This module decodes JSON-RPC quantities and classifies a pair of
endpoint readings into a HealthVerdict. Nothing here performs I/O or
touches alert state.
"""

import logging
import re

from eth_alive.core.entities import (
    MAX_BLOCK_HEIGHT,
    EndpointReading,
    HealthStatus,
    HealthVerdict,
)
from eth_alive.core.errors import HexParseError

logger = logging.getLogger(__name__)

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")


def check_status(status_code: int) -> bool:
    """
    Check if HTTP status code is successful.

    Args:
        status_code: HTTP status code

    Returns:
        True if status code is 200-299
    """
    return 200 <= status_code < 300


def decode_hex_quantity(value: str) -> int:
    """
    Decode a hex quantity such as "0x10a" into an unsigned 64-bit int.

    The "0x"/"0X" prefix is optional. int(..., 16) alone is too lenient
    (it accepts whitespace, underscores, signs and a second prefix), so
    the digits are matched explicitly first.

    Args:
        value: Hex string, with or without prefix

    Returns:
        Decoded integer in [0, 2**64 - 1]

    Raises:
        HexParseError: If value is not a string, is empty after the
            prefix, contains a non-hex character or overflows 64 bits
    """
    if not isinstance(value, str):
        raise HexParseError(f"Expected hex string, got {type(value).__name__}")

    digits = value[2:] if value[:2] in ("0x", "0X") else value
    if not digits:
        raise HexParseError(f"Empty hex quantity: {value!r}")
    if not _HEX_DIGITS.fullmatch(digits):
        raise HexParseError(f"Invalid hex quantity: {value!r}")

    number = int(digits, 16)
    if number > MAX_BLOCK_HEIGHT:
        raise HexParseError(f"Hex quantity overflows 64 bits: {value!r}")
    return number


def evaluate(
    local: EndpointReading, remote: EndpointReading, threshold: int
) -> HealthVerdict:
    """
    Classify local vs. remote chain heads.

    Rules are applied in priority order:
        1. remote failed -> REMOTE_UNREACHABLE (no judgment possible)
        2. local failed -> LOCAL_UNREACHABLE
        3. local > remote -> LOCAL_AHEAD
        4. remote - local < threshold -> SYNCED
        5. otherwise -> LAGGING (lag == threshold is lagging)

    Args:
        local: Reading from the monitored node
        remote: Reading from the reference node
        threshold: Lag (in blocks) at which the node counts as lagging

    Returns:
        HealthVerdict for this cycle
    """
    if not remote.ok:
        return HealthVerdict(
            status=HealthStatus.REMOTE_UNREACHABLE, cause=remote.error
        )

    if not local.ok:
        return HealthVerdict(
            status=HealthStatus.LOCAL_UNREACHABLE,
            remote_height=remote.height,
            cause=local.error,
        )

    local_height = local.height
    remote_height = remote.height

    if local_height > remote_height:
        # Reorg in progress or remote momentarily behind
        return HealthVerdict(
            status=HealthStatus.LOCAL_AHEAD,
            local_height=local_height,
            remote_height=remote_height,
            lead=local_height - remote_height,
        )

    lag = remote_height - local_height
    status = HealthStatus.SYNCED if lag < threshold else HealthStatus.LAGGING
    return HealthVerdict(
        status=status,
        local_height=local_height,
        remote_height=remote_height,
        lag=lag,
    )
