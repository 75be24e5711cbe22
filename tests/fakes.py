"""Test doubles shared by the test modules."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any, Dict, List, Optional, Sequence

from pilotmath.storage.schema import CategoryTally, ProblemResult, SessionStats


class ScriptedRandom:
    """Randomness that returns pre-chosen values in order."""

    def __init__(self, picks: Sequence[Any] = (), ints: Sequence[int] = (), chances: Sequence[bool] = ()) -> None:
        self.picks = list(picks)
        self.ints = list(ints)
        self.chances = list(chances)

    def pick(self, items):
        value = self.picks.pop(0)
        if value not in items:
            raise AssertionError(f"{value!r} not offered in {items!r}")
        return value

    def randint(self, low: int, high: int) -> int:
        value = self.ints.pop(0)
        if not low <= value <= high:
            raise AssertionError(f"{value} outside {low}..{high}")
        return value

    def chance(self, p: float = 0.5) -> bool:
        return self.chances.pop(0)


class FakeClock:
    def __init__(self, start: float = 0.0) -> None:
        self.t = start

    def __call__(self) -> float:
        return self.t

    def advance(self, seconds: float) -> None:
        self.t += seconds


TZ = timezone(timedelta(hours=2))


def fixed_now(year: int = 2026, month: int = 10, day: int = 18, hour: int = 9):
    moment = datetime(year, month, day, hour, 0, tzinfo=TZ)
    return lambda: moment


def make_result(category: str, correct: bool, time_spent: int = 10, timestamp: int = 0, pid: str = "p") -> ProblemResult:
    return ProblemResult(
        problem_id=pid,
        category=category,
        user_answer=1.0 if correct else 2.0,
        correct_answer=1.0,
        is_correct=correct,
        time_spent=time_spent,
        timestamp=timestamp,
    )


def make_session(
    sid: str,
    date: str,
    attempted: int,
    correct: int,
    breakdown: Optional[Dict[str, CategoryTally]] = None,
) -> SessionStats:
    return SessionStats(
        id=sid,
        date=date,
        duration=300,
        problems_attempted=attempted,
        problems_correct=correct,
        accuracy=round(correct / attempted * 100) if attempted else 0,
        average_time=12,
        category_breakdown=breakdown or {},
    )


class FakeQuery:
    """Chainable stand-in for a supabase table query."""

    def __init__(self, client: "FakeSupabaseClient", table: str) -> None:
        self.client = client
        self.table = table
        self.op = "select"
        self.payload: Any = None
        self.filters: List[tuple] = []

    def select(self, *columns):
        self.op = "select"
        return self

    def insert(self, rows):
        self.op, self.payload = "insert", rows
        return self

    def upsert(self, row):
        self.op, self.payload = "upsert", row
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        return self

    def limit(self, n):
        return self

    def execute(self):
        self.client.calls += 1
        if self.client.fail or self.client.calls in self.client.fail_calls:
            raise RuntimeError("connection refused")
        self.client.log.append((self.table, self.op, self.payload))
        if self.op == "select":
            return SimpleNamespace(data=list(self.client.tables.get(self.table, [])))
        return SimpleNamespace(data=[])


class FakeSupabaseClient:
    def __init__(self, fail: bool = False, fail_calls: Sequence[int] = (), tables: Optional[Dict[str, list]] = None) -> None:
        self.fail = fail
        self.fail_calls = set(fail_calls)
        self.tables = tables or {}
        self.calls = 0
        self.log: List[tuple] = []

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def ops(self, op: str) -> List[tuple]:
        return [entry for entry in self.log if entry[1] == op]
