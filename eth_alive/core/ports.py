"""
Core ports - Interfaces the application layer depends on.

Adapters implement these; the watchdog use case only sees the ports, so
the HTTP transport and alert channel can be swapped or mocked freely.
"""

from abc import ABC, abstractmethod


class BlockNumberFetcher(ABC):  # pylint: disable=too-few-public-methods
    """Port for reading the current chain head from an endpoint."""

    @abstractmethod
    def fetch_block_number(self, endpoint_url: str) -> int:
        """
        Return the latest block height reported by endpoint_url.

        Args:
            endpoint_url: JSON-RPC endpoint to query

        Returns:
            Block height as an unsigned 64-bit integer

        Raises:
            RpcError: On any transport, HTTP, body or decoding failure
        """


class OutputPort(ABC):  # pylint: disable=too-few-public-methods
    """Port for delivering alert messages."""

    @abstractmethod
    def emit(self, message: str) -> None:
        """
        Deliver an alert message.

        Args:
            message: Pre-formatted alert text

        Raises:
            SendError: If the message could not be delivered
        """
