"""
Outputs module - Output port implementations.

This module contains adapters that implement the OutputPort, providing
different mechanisms for delivering alerts (webhook, stdout).
"""

from eth_alive.adapters.outputs.stdout import AdapterStdoutOutput
from eth_alive.adapters.outputs.webhook import AdapterWebhookOutput

__all__ = [
    "AdapterStdoutOutput",
    "AdapterWebhookOutput",
]
