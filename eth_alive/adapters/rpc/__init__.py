"""
RPC module - BlockNumberFetcher implementations.

This module contains adapters that read chain heads from node endpoints.
"""

from eth_alive.adapters.rpc.eth_rpc import AdapterEthRpcClient

__all__ = ["AdapterEthRpcClient"]
