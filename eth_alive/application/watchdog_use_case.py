"""
Watchdog Use Case - Polls a local and a remote node and alerts on trouble.

Each cycle:
1. Fetches the chain head from the remote (reference) and local nodes
2. Classifies the pair with the health evaluator
3. Logs the status, and for alertable verdicts consults the cooldown
   gate and emits an alert through the OutputPort
4. Waits for the poll interval (or until asked to stop)

The use case owns the AlertState; nothing else mutates it.
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, Tuple

from eth_alive.application.use_cases import UseCase
from eth_alive.core.entities import (
    AlertState,
    EndpointReading,
    HealthStatus,
    HealthVerdict,
)
from eth_alive.core.errors import RpcError, SendError
from eth_alive.core.ports import BlockNumberFetcher, OutputPort
from eth_alive.health import checks, notify, store
from eth_alive.health.config import WatchdogConfig

logger = logging.getLogger(__name__)

ALERTABLE = (HealthStatus.LAGGING, HealthStatus.LOCAL_UNREACHABLE)

_LOG_LEVELS = {
    HealthStatus.SYNCED: logging.INFO,
    HealthStatus.LOCAL_AHEAD: logging.INFO,
    HealthStatus.LAGGING: logging.WARNING,
    HealthStatus.REMOTE_UNREACHABLE: logging.WARNING,
    HealthStatus.LOCAL_UNREACHABLE: logging.ERROR,
}


class WatchdogUseCase(UseCase):
    """
    Use case for comparing a monitored node against a reference node.

    The fetcher and output are injected so the use case never deals with
    HTTP directly; the clock is injected so cooldowns can be tested.
    """

    def __init__(
        self,
        fetcher: BlockNumberFetcher,
        output: OutputPort,
        config: WatchdogConfig,
        clock: Callable[[], float] = time.monotonic,
        hostname: Optional[str] = None,
    ):
        """
        Initialize the use case with its dependencies.

        Args:
            fetcher: Implementation of BlockNumberFetcher port
            output: Implementation of OutputPort used for alerts
            config: Validated watchdog configuration
            clock: Monotonic clock returning seconds
            hostname: Host name reported in alerts (default: this machine)
        """
        self.fetcher = fetcher
        self.output = output
        self.config = config
        self.clock = clock
        self.hostname = hostname
        self.alert_state = AlertState()

    def execute(self) -> HealthVerdict:
        """
        Run one polling cycle.

        Returns:
            HealthVerdict for this cycle
        """
        remote, local = self.poll()
        verdict = checks.evaluate(local, remote, self.config.lag_threshold)
        now = self.clock()

        self._report(verdict, local, remote)

        if verdict.is_healthy:
            store.clear_alert(self.alert_state)
        elif self._is_alertable(verdict):
            self._maybe_alert(verdict, now)

        return verdict

    def run(
        self,
        stop_event: Optional[threading.Event] = None,
        max_cycles: Optional[int] = None,
    ) -> int:
        """
        Run cycles until stop_event is set (or max_cycles is reached).

        No exception raised inside a cycle stops the loop.

        Args:
            stop_event: Event that ends the loop; waiting on it replaces sleep
            max_cycles: Optional cap on the number of cycles

        Returns:
            Number of cycles executed
        """
        if stop_event is None:
            stop_event = threading.Event()

        cycles = 0
        while not stop_event.is_set():
            try:
                self.execute()
            except Exception as e:  # pylint: disable=broad-except
                logger.error("Watchdog cycle failed: %s", e, exc_info=True)
            cycles += 1

            if max_cycles is not None and cycles >= max_cycles:
                break
            stop_event.wait(self.config.poll_interval)

        logger.info("Watchdog stopped after %d cycle(s)", cycles)
        return cycles

    def poll(self) -> Tuple[EndpointReading, EndpointReading]:
        """
        Fetch both chain heads, remote first.

        Returns:
            Tuple of (remote_reading, local_reading)
        """
        remote_url = self.config.remote_rpc_url
        local_url = self.config.local_rpc_url

        if not self.config.concurrent_polling:
            remote = self._read("remote", remote_url)
            local = self._read("local", local_url)
            return remote, local

        with ThreadPoolExecutor(max_workers=2) as executor:
            remote_future = executor.submit(self._read, "remote", remote_url)
            local_future = executor.submit(self._read, "local", local_url)
            return remote_future.result(), local_future.result()

    def _read(self, label: str, url: str) -> EndpointReading:
        started = time.perf_counter()
        try:
            height = self.fetcher.fetch_block_number(url)
        except RpcError as e:
            logger.debug("%s endpoint failed: %s", label, e)
            return EndpointReading(label=label, url=url, error=e)

        latency_ms = (time.perf_counter() - started) * 1000.0
        logger.debug("%s head %d (%.0f ms)", label, height, latency_ms)
        return EndpointReading(
            label=label, url=url, height=height, latency_ms=latency_ms
        )

    def _is_alertable(self, verdict: HealthVerdict) -> bool:
        if verdict.status in ALERTABLE:
            return True
        return (
            verdict.status is HealthStatus.REMOTE_UNREACHABLE
            and self.config.alert_on_remote_failure
        )

    def _report(
        self, verdict: HealthVerdict, local: EndpointReading, remote: EndpointReading
    ) -> None:
        logger.log(_LOG_LEVELS[verdict.status], "%s", notify.format_status(verdict))
        if verdict.status is HealthStatus.REMOTE_UNREACHABLE and local.ok:
            logger.debug(
                "Local head %s not judged (remote %s unavailable)",
                local.height,
                remote.url,
            )

    def _maybe_alert(self, verdict: HealthVerdict, now: float) -> bool:
        """
        Dispatch an alert if the cooldown allows it.

        Args:
            verdict: Alertable verdict
            now: Clock reading for this cycle

        Returns:
            True if an alert was delivered
        """
        cooldown = self.config.alert_cooldown
        if not store.should_alert(self.alert_state, now, cooldown):
            logger.debug(
                "Alert suppressed by cooldown (%.0fs left)",
                store.seconds_until_next_alert(self.alert_state, now, cooldown),
            )
            return False

        message = notify.format_alert(verdict, self.config, hostname=self.hostname)
        try:
            self.output.emit(message)
        except SendError as e:
            # Leave the state unstamped so the next cycle retries
            logger.error("Failed to dispatch alert: %s", e)
            return False

        store.record_alert(self.alert_state, now)
        logger.info("Alert dispatched for %s", verdict.status.value)
        return True
