"""
Ethereum JSON-RPC adapter - Reads the chain head via eth_blockNumber.

This adapter implements the BlockNumberFetcher port on top of requests.
Every failure is mapped to a distinct RpcError subclass; the adapter
never retries (the watchdog simply polls again next cycle).
"""

import logging
from typing import Any, Dict

import requests  # type: ignore

from eth_alive.core.errors import (
    HexDecodeError,
    HexParseError,
    HttpStatusError,
    MalformedBodyError,
    RpcProtocolError,
    TransportError,
)
from eth_alive.core.ports import BlockNumberFetcher
from eth_alive.health.checks import check_status, decode_hex_quantity

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10
UNKNOWN_RPC_ERROR = "unknown JSON-RPC error"

# Keep error messages readable when a node answers with an HTML page
_BODY_PREVIEW_CHARS = 200


def build_block_number_request() -> Dict[str, Any]:
    """Return the JSON-RPC 2.0 body for eth_blockNumber."""
    return {"jsonrpc": "2.0", "method": "eth_blockNumber", "params": [], "id": 1}


class AdapterEthRpcClient(BlockNumberFetcher):
    """
    Adapter that implements BlockNumberFetcher for Ethereum JSON-RPC nodes.

    Any node exposing eth_blockNumber over HTTP works (geth, erigon,
    nethermind, hosted providers).
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        """
        Initialize the RPC client.

        Args:
            timeout: Per-request timeout in seconds
        """
        self.timeout = timeout

    def fetch_block_number(self, endpoint_url: str) -> int:
        """
        Query endpoint_url for its latest block number.

        Args:
            endpoint_url: JSON-RPC endpoint URL

        Returns:
            Latest block height

        Raises:
            TransportError: Connection, DNS or timeout failure
            HttpStatusError: Non-2xx HTTP status
            MalformedBodyError: Body is not a usable JSON-RPC response
            RpcProtocolError: Response contains an 'error' object
            HexDecodeError: 'result' is not a valid hex quantity
        """
        try:
            response = requests.post(
                endpoint_url,
                json=build_block_number_request(),
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise TransportError(endpoint_url, str(e)) from e

        if not check_status(response.status_code):
            raise HttpStatusError(
                endpoint_url,
                response.status_code,
                _preview(response.text),
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedBodyError(
                endpoint_url, f"Invalid JSON: {_preview(response.text)}"
            ) from e

        return _parse_block_number(endpoint_url, payload)


def _parse_block_number(endpoint_url: str, payload: Any) -> int:
    """
    Extract the block height from a decoded JSON-RPC response.

    Args:
        endpoint_url: Endpoint the payload came from (for error context)
        payload: Decoded JSON body

    Returns:
        Block height

    Raises:
        MalformedBodyError, RpcProtocolError, HexDecodeError
    """
    if not isinstance(payload, dict):
        raise MalformedBodyError(
            endpoint_url, f"Expected JSON object, got {type(payload).__name__}"
        )

    error = payload.get("error")
    if error is not None:
        message, code = _extract_error(error)
        raise RpcProtocolError(endpoint_url, message, code)

    result = payload.get("result")
    if not isinstance(result, str):
        raise MalformedBodyError(endpoint_url, "Missing or non-string 'result'")

    try:
        block_number = decode_hex_quantity(result)
    except HexParseError as e:
        raise HexDecodeError(endpoint_url, str(e)) from e

    logger.debug("eth_blockNumber %s -> %d", endpoint_url, block_number)
    return block_number


def _extract_error(error: Any):
    """Return (message, code) from a JSON-RPC error member."""
    if isinstance(error, dict):
        message = error.get("message")
        code = error.get("code")
        if not isinstance(code, int) or isinstance(code, bool):
            code = None
        if isinstance(message, str) and message:
            return message, code
        return UNKNOWN_RPC_ERROR, code
    if isinstance(error, str) and error:
        return error, None
    return UNKNOWN_RPC_ERROR, None


def _preview(text: str) -> str:
    text = (text or "").strip()
    if len(text) > _BODY_PREVIEW_CHARS:
        return text[:_BODY_PREVIEW_CHARS] + "..."
    return text
