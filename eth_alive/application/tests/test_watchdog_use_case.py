"""
Tests for Watchdog Use Case.

Tests the cycle orchestration: polling, evaluation, cooldown handling
and alert dispatch.
"""

import threading
from unittest.mock import Mock

import pytest  # type: ignore

from eth_alive.application.watchdog_use_case import WatchdogUseCase
from eth_alive.core.entities import HealthStatus
from eth_alive.core.errors import RpcProtocolError, SendError, TransportError
from eth_alive.core.ports import BlockNumberFetcher
from eth_alive.health.config import WatchdogConfig

LOCAL_URL = "http://local:8545"
REMOTE_URL = "http://remote:8545"


class FakeFetcher(BlockNumberFetcher):
    """Fetcher returning scripted heights (or raising scripted errors)."""

    def __init__(self, local, remote):
        self.results = {LOCAL_URL: local, REMOTE_URL: remote}
        self.calls = []
        self._lock = threading.Lock()

    def fetch_block_number(self, endpoint_url):
        with self._lock:
            self.calls.append(endpoint_url)
        result = self.results[endpoint_url]
        if isinstance(result, Exception):
            raise result
        return result


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def make_config(**overrides):
    values = {
        "local_rpc_url": LOCAL_URL,
        "remote_rpc_url": REMOTE_URL,
        "webhook_url": "https://discord.example/api/webhooks/1/abc",
        "lag_threshold": 3,
        "poll_interval": 60.0,
        "alert_cooldown": 900.0,
    }
    values.update(overrides)
    return WatchdogConfig(**values)


class TestWatchdogUseCase:
    """Test suite for WatchdogUseCase.execute."""

    @pytest.fixture
    def mock_output(self):
        """Create a mock output port."""
        return Mock()

    @pytest.fixture
    def clock(self):
        """Create a controllable clock."""
        return FakeClock()

    def _use_case(self, fetcher, output, clock, **config_overrides):
        return WatchdogUseCase(
            fetcher=fetcher,
            output=output,
            config=make_config(**config_overrides),
            clock=clock,
            hostname="test-host",
        )

    def test_synced_no_alert_and_state_cleared(self, mock_output, clock):
        """Scenario A: equal heights are synced, no alert, state cleared."""
        use_case = self._use_case(FakeFetcher(100, 100), mock_output, clock)
        use_case.alert_state.last_alert_time = 500.0

        verdict = use_case.execute()

        assert verdict.status is HealthStatus.SYNCED
        assert verdict.lag == 0
        mock_output.emit.assert_not_called()
        assert use_case.alert_state.last_alert_time is None

    def test_lagging_alerts_once_within_cooldown(self, mock_output, clock):
        """Scenario B: lagging alerts and stamps, repeat 1s later is suppressed."""
        use_case = self._use_case(FakeFetcher(96, 100), mock_output, clock)

        verdict = use_case.execute()

        assert verdict.status is HealthStatus.LAGGING
        assert verdict.lag == 4
        mock_output.emit.assert_called_once()
        assert use_case.alert_state.last_alert_time == 1000.0

        clock.advance(1)
        use_case.execute()

        mock_output.emit.assert_called_once()
        assert use_case.alert_state.last_alert_time == 1000.0

    def test_lagging_realerts_after_cooldown(self, mock_output, clock):
        """Test a persisting problem alerts again once the cooldown passed."""
        use_case = self._use_case(FakeFetcher(96, 100), mock_output, clock)

        use_case.execute()
        clock.advance(900)
        use_case.execute()
        assert mock_output.emit.call_count == 1

        clock.advance(1)
        use_case.execute()
        assert mock_output.emit.call_count == 2
        assert use_case.alert_state.last_alert_time == 1901.0

    def test_local_ahead_never_alerts(self, mock_output, clock):
        """Scenario C: local ahead is benign regardless of cooldown state."""
        use_case = self._use_case(FakeFetcher(100, 90), mock_output, clock)

        verdict = use_case.execute()
        assert verdict.status is HealthStatus.LOCAL_AHEAD
        assert verdict.lead == 10
        assert use_case.alert_state.last_alert_time is None

        use_case.alert_state.last_alert_time = 10.0
        use_case.execute()

        mock_output.emit.assert_not_called()
        assert use_case.alert_state.last_alert_time == 10.0

    def test_remote_unreachable_no_alert(self, mock_output, clock):
        """Scenario D: remote timeout is logged only and local is ignored."""
        fetcher = FakeFetcher(50, TransportError(REMOTE_URL, "timed out"))
        use_case = self._use_case(fetcher, mock_output, clock)

        verdict = use_case.execute()

        assert verdict.status is HealthStatus.REMOTE_UNREACHABLE
        assert isinstance(verdict.cause, TransportError)
        assert verdict.local_height is None
        mock_output.emit.assert_not_called()
        assert use_case.alert_state.last_alert_time is None

    def test_remote_unreachable_alerts_when_policy_enabled(self, mock_output, clock):
        """Test remote failures alert when alert_on_remote_failure is set."""
        fetcher = FakeFetcher(100, TransportError(REMOTE_URL, "refused"))
        use_case = self._use_case(
            fetcher, mock_output, clock, alert_on_remote_failure=True
        )

        use_case.execute()

        mock_output.emit.assert_called_once()
        assert use_case.alert_state.last_alert_time == 1000.0

    def test_local_unreachable_alerts(self, mock_output, clock):
        """Test local node down is alertable."""
        fetcher = FakeFetcher(RpcProtocolError(LOCAL_URL, "header not found"), 100)
        use_case = self._use_case(fetcher, mock_output, clock)

        verdict = use_case.execute()

        assert verdict.status is HealthStatus.LOCAL_UNREACHABLE
        mock_output.emit.assert_called_once()
        message = mock_output.emit.call_args[0][0]
        assert "LOCAL NODE DOWN" in message
        assert "header not found" in message

    def test_repeated_synced_is_idempotent(self, mock_output, clock):
        """Test repeated synced cycles never alert and keep the state unset."""
        use_case = self._use_case(FakeFetcher(99, 100), mock_output, clock)

        for _ in range(5):
            verdict = use_case.execute()
            clock.advance(60)
            assert verdict.status is HealthStatus.SYNCED
            assert use_case.alert_state.last_alert_time is None

        mock_output.emit.assert_not_called()

    def test_recovery_starts_new_cooldown_window(self, mock_output, clock):
        """Test a new problem after recovery alerts immediately."""
        fetcher = FakeFetcher(96, 100)
        use_case = self._use_case(fetcher, mock_output, clock)

        use_case.execute()
        clock.advance(10)
        fetcher.results[LOCAL_URL] = 100
        use_case.execute()
        clock.advance(10)
        fetcher.results[LOCAL_URL] = 90
        use_case.execute()

        assert mock_output.emit.call_count == 2

    def test_failed_dispatch_does_not_stamp(self, mock_output, clock):
        """Test a failed dispatch leaves the state unset and retries next cycle."""
        mock_output.emit.side_effect = [SendError("https://hook", "HTTP 500"), None]
        use_case = self._use_case(FakeFetcher(90, 100), mock_output, clock)

        use_case.execute()
        assert use_case.alert_state.last_alert_time is None

        clock.advance(1)
        use_case.execute()

        assert mock_output.emit.call_count == 2
        assert use_case.alert_state.last_alert_time == 1001.0

    def test_sequential_polling_queries_remote_first(self, mock_output, clock):
        """Test sequential mode polls remote before local."""
        fetcher = FakeFetcher(100, 100)
        use_case = self._use_case(
            fetcher, mock_output, clock, concurrent_polling=False
        )

        use_case.execute()

        assert fetcher.calls == [REMOTE_URL, LOCAL_URL]

    def test_concurrent_polling_queries_both(self, mock_output, clock):
        """Test concurrent mode polls both endpoints once."""
        fetcher = FakeFetcher(100, 100)
        use_case = self._use_case(fetcher, mock_output, clock)

        remote, local = use_case.poll()

        assert sorted(fetcher.calls) == sorted([REMOTE_URL, LOCAL_URL])
        assert remote.label == "remote" and remote.height == 100
        assert local.label == "local" and local.height == 100
        assert local.latency_ms is not None


class TestWatchdogRun:
    """Test suite for WatchdogUseCase.run."""

    def test_run_stops_after_max_cycles(self):
        """Test the loop runs the requested number of cycles."""
        use_case = WatchdogUseCase(
            fetcher=FakeFetcher(100, 100),
            output=Mock(),
            config=make_config(poll_interval=0.01),
            clock=FakeClock(),
        )

        assert use_case.run(max_cycles=3) == 3

    def test_run_exits_when_stop_event_set(self):
        """Test a pre-set stop event prevents any cycle."""
        stop_event = threading.Event()
        stop_event.set()
        fetcher = FakeFetcher(100, 100)
        use_case = WatchdogUseCase(
            fetcher=fetcher, output=Mock(), config=make_config(), clock=FakeClock()
        )

        assert use_case.run(stop_event=stop_event) == 0
        assert fetcher.calls == []

    def test_run_survives_unexpected_errors(self):
        """Test an unexpected exception in a cycle does not stop the loop."""
        fetcher = Mock(spec=BlockNumberFetcher)
        fetcher.fetch_block_number.side_effect = RuntimeError("boom")
        use_case = WatchdogUseCase(
            fetcher=fetcher,
            output=Mock(),
            config=make_config(poll_interval=0.01, concurrent_polling=False),
            clock=FakeClock(),
        )

        assert use_case.run(max_cycles=2) == 2
        assert fetcher.fetch_block_number.call_count == 2
