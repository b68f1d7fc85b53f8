"""
Webhook adapter for OutputPort - Posts alerts to a chat webhook.

The payload is {"content": message}, which Discord accepts directly.
An empty or placeholder webhook URL turns sending into a no-op so the
watchdog can run with alerting disabled.
"""

import logging
from typing import Optional

import requests  # type: ignore

from eth_alive.core.errors import SendError
from eth_alive.core.ports import OutputPort
from eth_alive.health.checks import check_status

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10

# Discord rejects "content" longer than this
MAX_CONTENT_CHARS = 2000

PLACEHOLDER_WEBHOOKS = (
    "your_discord_webhook_url",
    "your_webhook_url_here",
    "changeme",
    "none",
    "disabled",
)


def is_webhook_configured(webhook_url: Optional[str]) -> bool:
    """
    Check whether webhook_url points at a real endpoint.

    Args:
        webhook_url: Configured webhook URL (may be None)

    Returns:
        False for empty values, known placeholders and <template> values
    """
    if not webhook_url or not webhook_url.strip():
        return False
    value = webhook_url.strip()
    if value.lower() in PLACEHOLDER_WEBHOOKS:
        return False
    if "<" in value or ">" in value:
        return False
    return True


def truncate_content(message: str, limit: int = MAX_CONTENT_CHARS) -> str:
    """Trim message to the webhook content limit."""
    if len(message) <= limit:
        return message
    return message[: limit - 3] + "..."


def send_alert(
    webhook_url: Optional[str], message: str, timeout: float = DEFAULT_TIMEOUT
) -> None:
    """
    Send message to webhook_url.

    Args:
        webhook_url: Webhook endpoint; unconfigured values are a no-op
        message: Alert text
        timeout: Request timeout in seconds

    Raises:
        SendError: On transport failure or non-2xx response
    """
    if not is_webhook_configured(webhook_url):
        logger.debug("Webhook not configured, skipping alert")
        return

    payload = {"content": truncate_content(message)}

    try:
        response = requests.post(
            webhook_url,
            json=payload,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
        )
    except requests.exceptions.RequestException as e:
        raise SendError(webhook_url, str(e)) from e

    if not check_status(response.status_code):
        raise SendError(
            webhook_url,
            f"HTTP {response.status_code}: {(response.text or '').strip()[:200]}",
        )

    logger.info("Alert delivered to webhook")


class AdapterWebhookOutput(OutputPort):  # pylint: disable=too-few-public-methods
    """
    Adapter that implements OutputPort by posting to a webhook URL.
    """

    def __init__(self, webhook_url: Optional[str], timeout: float = DEFAULT_TIMEOUT):
        """
        Initialize the webhook output adapter.

        Args:
            webhook_url: Webhook endpoint (None/placeholder disables sending)
            timeout: Request timeout in seconds
        """
        self.webhook_url = webhook_url
        self.timeout = timeout

    def emit(self, message: str) -> None:
        send_alert(self.webhook_url, message, timeout=self.timeout)
