"""
Core errors - Exception taxonomy for the watchdog.

Every failure the watchdog can recover from has its own type so callers
can report precisely what went wrong:

- HexParseError: a quantity string is not valid hexadecimal
- RpcError (and subclasses): talking to a JSON-RPC endpoint failed
- SendError: delivering an alert failed
- ConfigError: startup configuration is missing or invalid
"""

from typing import Optional


class HexParseError(ValueError):
    """Raised when a hex quantity string cannot be decoded."""


class ConfigError(ValueError):
    """Raised when the watchdog configuration is missing or invalid."""


class RpcError(Exception):
    """
    Base class for failures while querying a JSON-RPC endpoint.

    Attributes:
        endpoint: URL of the endpoint that failed
        detail: Human-readable description of the failure
    """

    kind = "rpc"

    def __init__(self, endpoint: str, detail: str):
        super().__init__(f"{endpoint}: {detail}")
        self.endpoint = endpoint
        self.detail = detail


class TransportError(RpcError):
    """Connection refused, DNS failure, timeout or other transport issue."""

    kind = "transport"


class HttpStatusError(RpcError):
    """Endpoint answered with a non-2xx HTTP status."""

    kind = "http_status"

    def __init__(self, endpoint: str, status_code: int, detail: str = ""):
        message = f"HTTP {status_code}"
        if detail:
            message = f"{message} - {detail}"
        super().__init__(endpoint, message)
        self.status_code = status_code


class MalformedBodyError(RpcError):
    """Response body is not JSON or lacks both 'result' and 'error'."""

    kind = "malformed_body"


class RpcProtocolError(RpcError):
    """Response carries a JSON-RPC 'error' object."""

    kind = "rpc_protocol"

    def __init__(self, endpoint: str, message: str, code: Optional[int] = None):
        detail = message if code is None else f"{message} (code {code})"
        super().__init__(endpoint, detail)
        self.message = message
        self.code = code


class HexDecodeError(RpcError):
    """The 'result' field is a string but not a valid hex quantity."""

    kind = "hex_decode"


class SendError(Exception):
    """
    Raised when an alert could not be delivered.

    The underlying exception (if any) is chained as __cause__.
    """

    def __init__(self, url: str, detail: str):
        super().__init__(f"Failed to send alert: {detail}")
        self.url = url
        self.detail = detail
