from __future__ import annotations

"""Write-with-fallback wrapper and local -> remote transfer."""

import logging
from typing import Dict, List

from .errors import StoreError
from .remote import SupabaseAttemptStore
from .schema import ProblemResult, SessionStats, StreakState
from .store import AttemptStore, LocalAttemptStore

logger = logging.getLogger(__name__)

TRANSFER_BATCH = 100


def newer_streak(a: StreakState, b: StreakState) -> StreakState:
    """Pick the streak with the later practice date; ties go to the longer run."""
    if a.last_practice_date is None:
        return b
    if b.last_practice_date is None:
        return a
    return max(a, b, key=lambda s: (s.last_practice_date, s.current_streak))


class FallbackWriter:
    """AttemptStore that writes to `primary` and falls back to `fallback` on error.

    Log reads go to the primary; the streak read also consults the fallback.
    If the fallback write fails too the error propagates.
    """

    def __init__(self, primary: AttemptStore, fallback: AttemptStore) -> None:
        self.primary = primary
        self.fallback = fallback
        self.fallback_writes = 0

    def _write(self, op: str, *args) -> None:
        try:
            getattr(self.primary, op)(*args)
        except StoreError as e:
            logger.error("Primary store %s failed, writing locally: %s", op, e)
            getattr(self.fallback, op)(*args)
            self.fallback_writes += 1

    def append_result(self, result: ProblemResult) -> None:
        self._write("append_result", result)

    def append_session(self, session: SessionStats) -> None:
        self._write("append_session", session)

    def set_streak_state(self, state: StreakState) -> None:
        self._write("set_streak_state", state)

    def list_results(self) -> List[ProblemResult]:
        return self.primary.list_results()

    def list_sessions(self) -> List[SessionStats]:
        return self.primary.list_sessions()

    def get_streak_state(self) -> StreakState:
        """The more recent of the primary and fallback streaks.

        A streak written to the fallback while the primary was down stays
        visible. Primary read errors propagate.
        """
        return newer_streak(self.primary.get_streak_state(), self.fallback.get_streak_state())

    def clear(self) -> None:
        self.primary.clear()


def transfer_local_to_remote(
    local: LocalAttemptStore,
    remote: SupabaseAttemptStore,
    batch_size: int = TRANSFER_BATCH,
) -> Dict[str, int]:
    """One-time bulk copy of the local log into the remote store.

    Sessions go in one insert, results in batches of `batch_size`. A failed
    batch is logged and skipped. The local streak replaces the remote one
    when it is more recent. Local data is cleared only if something made it
    across; a streak that could not be moved is kept locally.
    """
    sessions = local.list_sessions()
    results = local.list_results()
    streak = local.get_streak_state()
    has_streak = streak.last_practice_date is not None
    moved = {"sessions": 0, "results": 0}
    if not sessions and not results and not has_streak:
        return moved

    if sessions:
        try:
            remote.append_sessions(sessions)
            moved["sessions"] = len(sessions)
        except StoreError as e:
            logger.error("Session transfer failed: %s", e)

    for i in range(0, len(results), batch_size):
        batch = results[i:i + batch_size]
        try:
            remote.append_results(batch)
            moved["results"] += len(batch)
        except StoreError as e:
            logger.error("Result batch %d failed: %s", i // batch_size + 1, e)

    streak_moved = has_streak and _transfer_streak(streak, remote)
    if moved["sessions"] or moved["results"] or streak_moved:
        local.clear()
        if has_streak and not streak_moved:
            local.set_streak_state(streak)
    logger.info("Transferred %d sessions, %d results", moved["sessions"], moved["results"])
    return moved


def _transfer_streak(streak: StreakState, remote: SupabaseAttemptStore) -> bool:
    try:
        if newer_streak(remote.get_streak_state(), streak) is streak:
            remote.set_streak_state(streak)
    except StoreError as e:
        logger.error("Streak transfer failed: %s", e)
        return False
    return True
