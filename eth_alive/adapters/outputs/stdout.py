"""
Stdout adapter for OutputPort - Prints alerts instead of sending them.

Used in dry-run mode.
"""

import logging

from eth_alive.core.ports import OutputPort

logger = logging.getLogger(__name__)


class AdapterStdoutOutput(OutputPort):  # pylint: disable=too-few-public-methods
    """Adapter that implements OutputPort by printing to stdout."""

    def emit(self, message: str) -> None:
        print()
        print("=" * 80)
        print(message)
        print("=" * 80)
        print()
        logger.info("Alert printed to stdout (dry-run)")
