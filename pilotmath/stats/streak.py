from __future__ import annotations

"""Daily practice streak transition."""

import logging
from datetime import date
from typing import Optional

from ..storage.errors import StoreError
from ..storage.schema import StreakState

logger = logging.getLogger(__name__)


def advance_streak(state: StreakState, today: date) -> StreakState:
    """Record practice on `today`.

    No previous day starts at 1, the same day changes nothing, the next day
    extends the run, and any longer gap restarts at 1.
    """
    last = state.last_practice_date
    current = state.current_streak
    if last is None:
        current = 1
    else:
        gap = (today - last).days
        if gap == 1:
            current += 1
        elif gap > 1:
            current = 1
    return StreakState(
        current_streak=current,
        longest_streak=max(state.longest_streak, current),
        last_practice_date=today,
    )


def record_practice(store, today: date) -> Optional[StreakState]:
    """Advance and persist the streak held by `store` for a practice on `today`.

    Returns None and writes nothing when the stored streak cannot be read.
    Write errors propagate.
    """
    try:
        current = store.get_streak_state()
    except StoreError as e:
        logger.error("Streak not updated, stored state unreadable: %s", e)
        return None
    state = advance_streak(current, today)
    store.set_streak_state(state)
    return state
