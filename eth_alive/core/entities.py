"""
Core entities - Data types shared across the watchdog layers.

These are plain value objects: they carry no I/O and no behaviour beyond
small derived properties.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from eth_alive.core.errors import RpcError

MAX_BLOCK_HEIGHT = 2**64 - 1


class HealthStatus(Enum):
    """Classification of one polling cycle."""

    SYNCED = "synced"
    LAGGING = "lagging"
    LOCAL_AHEAD = "local_ahead"
    REMOTE_UNREACHABLE = "remote_unreachable"
    LOCAL_UNREACHABLE = "local_unreachable"


@dataclass(frozen=True)
class EndpointReading:
    """
    Outcome of polling one endpoint during one cycle.

    Exactly one of height/error is set.
    """

    label: str
    url: str
    height: Optional[int] = None
    error: Optional[RpcError] = None
    latency_ms: Optional[float] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class HealthVerdict:
    """
    Classified health of the local node for one cycle.

    Attributes:
        status: Which branch of the decision table matched
        local_height: Local head, when known
        remote_height: Remote head, when known
        lag: remote - local, for SYNCED and LAGGING
        lead: local - remote, for LOCAL_AHEAD
        cause: The RpcError behind REMOTE_UNREACHABLE / LOCAL_UNREACHABLE
    """

    status: HealthStatus
    local_height: Optional[int] = None
    remote_height: Optional[int] = None
    lag: Optional[int] = None
    lead: Optional[int] = None
    cause: Optional[RpcError] = None

    @property
    def is_healthy(self) -> bool:
        return self.status is HealthStatus.SYNCED


@dataclass
class AlertState:
    """
    Cooldown bookkeeping for dispatched alerts.

    last_alert_time is a reading of the watchdog clock (seconds) taken
    when the last alert was delivered, or None when no problem period is
    in progress.
    """

    last_alert_time: Optional[float] = None

    @property
    def is_set(self) -> bool:
        return self.last_alert_time is not None
