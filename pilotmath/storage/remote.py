"""
Supabase-backed attempt store.

Tables (snake_case columns, one row per record, scoped by user_id):
    results  - problem_id, category, user_answer, correct_answer, is_correct, time_spent, timestamp
    sessions - date, duration, problems_attempted, problems_correct, accuracy, average_time, category_breakdown
    streaks  - current_streak, longest_streak, last_practice_date

Log reads degrade to empty lists. A missing streak row reads as the default
streak, a failed streak read raises StoreReadError. Writes raise
StoreWriteError.
"""
import logging
import os
from datetime import date
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from pydantic import ValidationError
from supabase import Client, create_client

from .errors import StoreReadError, StoreWriteError
from .schema import ProblemResult, SessionStats, StreakState

logger = logging.getLogger(__name__)

RESULTS_LIMIT = 1000
SESSIONS_LIMIT = 100


def result_to_row(user_id: str, result: ProblemResult) -> Dict[str, Any]:
    row = result.model_dump()
    row["user_id"] = user_id
    return row


def session_to_row(user_id: str, session: SessionStats) -> Dict[str, Any]:
    row = session.model_dump()
    # the table assigns its own id
    row.pop("id", None)
    row["user_id"] = user_id
    return row


class SupabaseAttemptStore:
    """Attempt store for one signed-in user."""

    def __init__(self, client: Client, user_id: str):
        self.client = client
        self.user_id = user_id

    @classmethod
    def from_env(cls, user_id: Optional[str] = None) -> "SupabaseAttemptStore":
        """Build from SUPABASE_URL / SUPABASE_KEY (and PILOTMATH_USER_ID), .env honored."""
        load_dotenv()
        url = os.getenv("SUPABASE_URL")
        key = os.getenv("SUPABASE_KEY")
        uid = user_id or os.getenv("PILOTMATH_USER_ID")
        if not url or not key:
            raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set for the remote store")
        if not uid:
            raise ValueError("A user id is required for the remote store (PILOTMATH_USER_ID)")
        return cls(create_client(url, key), uid)

    # ============= Writes =============

    def _insert(self, table: str, rows: Any) -> None:
        try:
            self.client.table(table).insert(rows).execute()
        except Exception as e:
            logger.error(f"Error saving to {table}: {e}")
            raise StoreWriteError(f"insert into {table} failed: {e}") from e

    def append_result(self, result: ProblemResult) -> None:
        self._insert("results", result_to_row(self.user_id, result))

    def append_results(self, results: List[ProblemResult]) -> None:
        if results:
            self._insert("results", [result_to_row(self.user_id, r) for r in results])

    def append_session(self, session: SessionStats) -> None:
        self._insert("sessions", session_to_row(self.user_id, session))

    def append_sessions(self, sessions: List[SessionStats]) -> None:
        if sessions:
            self._insert("sessions", [session_to_row(self.user_id, s) for s in sessions])

    def set_streak_state(self, state: StreakState) -> None:
        row = state.model_dump(mode="json")
        row["user_id"] = self.user_id
        try:
            self.client.table("streaks").upsert(row).execute()
        except Exception as e:
            logger.error(f"Error updating streak: {e}")
            raise StoreWriteError(f"streak update failed: {e}") from e

    def clear(self) -> None:
        for table in ("results", "sessions", "streaks"):
            try:
                self.client.table(table).delete().eq("user_id", self.user_id).execute()
            except Exception as e:
                logger.error(f"Error clearing {table}: {e}")
                raise StoreWriteError(f"clear of {table} failed: {e}") from e

    # ============= Reads =============

    def _select(self, table: str, order: str, limit: int) -> List[Dict]:
        try:
            response = (
                self.client.table(table)
                .select("*")
                .eq("user_id", self.user_id)
                .order(order, desc=True)
                .limit(limit)
                .execute()
            )
            return response.data if response.data else []
        except Exception as e:
            logger.error(f"Error fetching {table}: {e}")
            return []

    def list_results(self) -> List[ProblemResult]:
        out = []
        for row in self._select("results", "timestamp", RESULTS_LIMIT):
            try:
                out.append(ProblemResult.model_validate(row))
            except ValidationError as e:
                logger.warning(f"Skipping malformed result row: {e}")
        return out

    def list_sessions(self) -> List[SessionStats]:
        out = []
        for row in self._select("sessions", "date", SESSIONS_LIMIT):
            data = dict(row)
            data["id"] = str(data.get("id", ""))
            data["category_breakdown"] = data.get("category_breakdown") or {}
            try:
                out.append(SessionStats.model_validate(data))
            except ValidationError as e:
                logger.warning(f"Skipping malformed session row: {e}")
        return out

    def get_streak_state(self) -> StreakState:
        try:
            response = (
                self.client.table("streaks")
                .select("current_streak, longest_streak, last_practice_date")
                .eq("user_id", self.user_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error fetching streak: {e}")
            raise StoreReadError(f"streak read failed: {e}") from e
        rows = response.data or []
        if not rows:
            return StreakState()
        row = rows[0]
        last = row.get("last_practice_date")
        try:
            return StreakState(
                current_streak=row.get("current_streak") or 0,
                longest_streak=row.get("longest_streak") or 0,
                last_practice_date=date.fromisoformat(str(last)[:10]) if last else None,
            )
        except (ValueError, ValidationError) as e:
            logger.warning(f"Malformed streak row: {e}")
            return StreakState()
