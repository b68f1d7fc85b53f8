"""
Tests for the webhook and stdout output adapters.
"""

from unittest.mock import Mock, patch

import pytest  # type: ignore
import requests  # type: ignore

from eth_alive.adapters.outputs import AdapterStdoutOutput, AdapterWebhookOutput
from eth_alive.adapters.outputs.webhook import (
    MAX_CONTENT_CHARS,
    is_webhook_configured,
    send_alert,
    truncate_content,
)
from eth_alive.core.errors import SendError

HOOK = "https://discord.example/api/webhooks/123/token"


class TestIsWebhookConfigured:
    """Tests for is_webhook_configured function."""

    @pytest.mark.parametrize(
        "value",
        [None, "", "   ", "changeme", "YOUR_DISCORD_WEBHOOK_URL", "<webhook-url>", "none"],
    )
    def test_unconfigured(self, value):
        """Test empty and placeholder values count as unconfigured."""
        assert is_webhook_configured(value) is False

    def test_configured(self):
        """Test a real URL counts as configured."""
        assert is_webhook_configured(HOOK) is True


class TestSendAlert:
    """Tests for send_alert function."""

    @patch("eth_alive.adapters.outputs.webhook.requests.post")
    def test_placeholder_is_noop(self, mock_post):
        """Test unconfigured webhooks never hit the network."""
        send_alert("", "hello")
        send_alert("changeme", "hello")

        mock_post.assert_not_called()

    @patch("eth_alive.adapters.outputs.webhook.requests.post")
    def test_posts_content(self, mock_post):
        """Test the message is posted as {"content": ...}."""
        mock_post.return_value = Mock(status_code=204, text="")

        send_alert(HOOK, "Node lagging", timeout=15)

        mock_post.assert_called_once_with(
            HOOK,
            json={"content": "Node lagging"},
            headers={"Content-Type": "application/json"},
            timeout=15,
        )

    @patch("eth_alive.adapters.outputs.webhook.requests.post")
    def test_http_error_raises(self, mock_post):
        """Test non-2xx responses raise SendError."""
        mock_post.return_value = Mock(status_code=429, text="rate limited")

        with pytest.raises(SendError, match="429"):
            send_alert(HOOK, "hello")

    @patch("eth_alive.adapters.outputs.webhook.requests.post")
    def test_transport_error_raises(self, mock_post):
        """Test transport failures raise SendError with the cause chained."""
        mock_post.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(SendError) as exc_info:
            send_alert(HOOK, "hello")

        assert isinstance(exc_info.value.__cause__, requests.exceptions.ConnectionError)

    @patch("eth_alive.adapters.outputs.webhook.requests.post")
    def test_error_message_hides_url(self, mock_post):
        """Test the webhook token is not part of the error text."""
        mock_post.return_value = Mock(status_code=500, text="")

        with pytest.raises(SendError) as exc_info:
            send_alert(HOOK, "hello")

        assert "token" not in str(exc_info.value)

    @patch("eth_alive.adapters.outputs.webhook.requests.post")
    def test_long_message_truncated(self, mock_post):
        """Test messages are cut to the content limit."""
        mock_post.return_value = Mock(status_code=204, text="")

        send_alert(HOOK, "x" * 5000)

        content = mock_post.call_args[1]["json"]["content"]
        assert len(content) == MAX_CONTENT_CHARS
        assert content.endswith("...")

    def test_truncate_short_message_unchanged(self):
        """Test short messages pass through."""
        assert truncate_content("short") == "short"


class TestAdapterWebhookOutput:
    """Tests for AdapterWebhookOutput."""

    @patch("eth_alive.adapters.outputs.webhook.requests.post")
    def test_emit_uses_configured_url_and_timeout(self, mock_post):
        """Test emit posts to the configured webhook."""
        mock_post.return_value = Mock(status_code=200, text="")
        output = AdapterWebhookOutput(HOOK, timeout=20)

        output.emit("hello")

        assert mock_post.call_args[0][0] == HOOK
        assert mock_post.call_args[1]["timeout"] == 20


class TestAdapterStdoutOutput:
    """Tests for AdapterStdoutOutput."""

    def test_emit_prints(self, capsys):
        """Test the alert is printed in a framed block."""
        AdapterStdoutOutput().emit("Node lagging")

        out = capsys.readouterr().out
        assert "Node lagging" in out
        assert "=" * 80 in out
