"""
Health store - In-memory alert cooldown state.

The watchdog keeps a single AlertState per process. Nothing is written
to disk, so a restart always begins with no cooldown in effect.
"""

import logging

from eth_alive.core.entities import AlertState

logger = logging.getLogger(__name__)


def _elapsed(state: AlertState, now: float) -> float:
    # Clock readings earlier than the stamp count as no time elapsed
    return max(0.0, now - state.last_alert_time)


def should_alert(state: AlertState, now: float, cooldown: float) -> bool:
    """
    Decide whether a new alert may be dispatched.

    Args:
        state: Current alert state (not modified)
        now: Current clock reading in seconds
        cooldown: Minimum seconds between alerts

    Returns:
        True if no alert was sent in this problem period, or if strictly
        more than cooldown seconds have passed since the last one
    """
    if not state.is_set:
        return True
    return _elapsed(state, now) > cooldown


def seconds_until_next_alert(
    state: AlertState, now: float, cooldown: float
) -> float:
    """
    Seconds of suppression left before should_alert() can return True.

    Args:
        state: Current alert state
        now: Current clock reading in seconds
        cooldown: Minimum seconds between alerts

    Returns:
        Remaining seconds, or 0.0 if an alert may fire now
    """
    if should_alert(state, now, cooldown):
        return 0.0
    return max(0.0, cooldown - _elapsed(state, now))


def record_alert(state: AlertState, now: float) -> AlertState:
    """
    Stamp the state after an alert was delivered.

    Only call this once the dispatch succeeded; a failed dispatch must
    leave the state untouched so the next cycle retries.

    Args:
        state: Alert state to update in place
        now: Clock reading at dispatch time

    Returns:
        The updated state
    """
    if state.is_set and now < state.last_alert_time:
        logger.warning(
            "Clock went backwards (%.3f < %.3f); keeping previous alert stamp",
            now,
            state.last_alert_time,
        )
        return state

    state.last_alert_time = now
    logger.debug("Alert stamped at %.3f", now)
    return state


def clear_alert(state: AlertState) -> AlertState:
    """
    Reset the cooldown once the node is healthy again.

    Args:
        state: Alert state to reset in place

    Returns:
        The updated state
    """
    if state.is_set:
        logger.debug("Clearing alert cooldown")
    state.last_alert_time = None
    return state
