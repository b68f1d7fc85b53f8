"""
eth-alive - Liveness watchdog for Ethereum-compatible nodes.

Compares the chain head of a local node against a remote reference node
and sends a rate-limited webhook alert when the local node lags or is down.
"""

__version__ = "0.1.0"
