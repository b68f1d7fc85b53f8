"""
Health module - Evaluation, cooldown and configuration for the watchdog.

This module classifies local vs. remote chain heads, decides when an
alert may fire, formats notifications and loads configuration. The
polling loop itself is started through eth_alive.health.runner.
"""

from eth_alive.health.checks import decode_hex_quantity, evaluate
from eth_alive.health.config import WatchdogConfig, load_config

__all__ = ["WatchdogConfig", "decode_hex_quantity", "evaluate", "load_config"]
