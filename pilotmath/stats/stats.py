from __future__ import annotations

"""Progress statistics over attempt-log snapshots.

Every function takes a list of `ProblemResult` / `SessionStats` (or the
equivalent plain dicts), builds a DataFrame and aggregates it. Nothing here
mutates the inputs, and an empty log gives zeroed or empty output.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

import numpy as np
import pandas as pd
from pydantic import BaseModel

from ..problems.base import round_half_up

RESULT_COLUMNS = ["category", "is_correct", "time_spent", "timestamp"]
SESSION_COLUMNS = ["id", "date", "problems_attempted", "problems_correct"]


@dataclass(frozen=True)
class CalendarDay:
    date: str
    problems_attempted: int
    accuracy: int
    sessions_count: int


def _as_dict(item: Any) -> Dict[str, Any]:
    if isinstance(item, BaseModel):
        return item.model_dump()
    return dict(item)


def _frame(items: Iterable[Any], columns: List[str]) -> pd.DataFrame:
    rows = [_as_dict(i) for i in items]
    if not rows:
        return pd.DataFrame({c: pd.Series(dtype="object") for c in columns})
    df = pd.DataFrame(rows)
    for c in columns:
        if c not in df.columns:
            df[c] = np.nan
    return df


def _results_frame(results: Iterable[Any]) -> pd.DataFrame:
    df = _frame(results, RESULT_COLUMNS)
    if not df.empty:
        df["category"] = df["category"].astype(str)
        df["is_correct"] = df["is_correct"].astype(bool)
        df["time_spent"] = df["time_spent"].astype("float64")
    return df


def date_key(value: Any) -> str:
    """Date-only key of a session date: the date part of the stored ISO string."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)[:10]


def _sessions_frame(sessions: Iterable[Any]) -> pd.DataFrame:
    df = _frame(sessions, SESSION_COLUMNS)
    if not df.empty:
        df["day"] = df["date"].map(date_key)
        df["problems_attempted"] = df["problems_attempted"].astype("int64")
        df["problems_correct"] = df["problems_correct"].astype("int64")
    else:
        df["day"] = pd.Series(dtype="object")
    return df


def _pct(part: float, whole: float) -> int:
    if not whole:
        return 0
    return round_half_up(part / whole * 100)


def _mean(total: float, count: float) -> int:
    if not count:
        return 0
    return round_half_up(total / count)


# --- answer log ---

def overall_stats(results: Iterable[Any]) -> Dict[str, int]:
    df = _results_frame(results)
    total = int(len(df))
    if total == 0:
        return {"total_problems": 0, "total_correct": 0, "accuracy": 0, "avg_time": 0}
    correct = int(df["is_correct"].sum())
    return {
        "total_problems": total,
        "total_correct": correct,
        "accuracy": _pct(correct, total),
        "avg_time": _mean(float(df["time_spent"].sum()), total),
    }


def _grouped(df: pd.DataFrame) -> pd.DataFrame:
    """Per-category sums in order of first appearance."""
    return df.groupby("category", sort=False).agg(
        attempted=("is_correct", "size"),
        correct=("is_correct", "sum"),
        total_time=("time_spent", "sum"),
        fastest=("time_spent", "min"),
        slowest=("time_spent", "max"),
    )


def category_stats(results: Iterable[Any]) -> Dict[str, Dict[str, int]]:
    df = _results_frame(results)
    if df.empty:
        return {}
    g = _grouped(df)
    return {
        str(cat): {
            "attempted": int(row.attempted),
            "correct": int(row.correct),
            "avg_time": _mean(float(row.total_time), int(row.attempted)),
        }
        for cat, row in g.iterrows()
    }


def timing_stats(results: Iterable[Any]) -> Dict[str, Dict[str, int]]:
    """Average plus observed min/max answer time per category."""
    df = _results_frame(results)
    if df.empty:
        return {}
    g = _grouped(df)
    return {
        str(cat): {
            "avg_time": _mean(float(row.total_time), int(row.attempted)),
            "fastest": int(row.fastest),
            "slowest": int(row.slowest),
            "total_attempts": int(row.attempted),
        }
        for cat, row in g.iterrows()
    }


def weak_categories(results: Iterable[Any], min_attempts: int = 5, limit: int = 5) -> List[str]:
    """Lowest-accuracy categories with at least `min_attempts` answers.

    Ties keep first-appearance order.
    """
    df = _results_frame(results)
    if df.empty:
        return []
    g = _grouped(df)
    g = g[g["attempted"] >= min_attempts]
    if g.empty:
        return []
    ratio = g["correct"].astype("float64") / g["attempted"].astype("float64")
    ranked = ratio.sort_values(kind="stable")
    return [str(c) for c in ranked.index[:limit]]


def miss_rate_by_category(results: Iterable[Any]) -> Dict[str, Dict[str, int]]:
    df = _results_frame(results)
    if df.empty:
        return {}
    g = _grouped(df)
    out: Dict[str, Dict[str, int]] = {}
    for cat, row in g.iterrows():
        total = int(row.attempted)
        missed = total - int(row.correct)
        out[str(cat)] = {"missed": missed, "total": total, "rate": _pct(missed, total)}
    return out


def missed_problem_ranking(results: Iterable[Any], min_total: int = 5) -> List[Dict[str, Any]]:
    """Miss rates worth showing: enough attempts, at least one miss, worst first."""
    rates = miss_rate_by_category(results)
    rows = [
        {"category": cat, **r}
        for cat, r in rates.items()
        if r["total"] >= min_total and r["missed"] > 0
    ]
    return sorted(rows, key=lambda r: r["rate"], reverse=True)


# --- session log ---

def daily_history(sessions: Iterable[Any]) -> Dict[str, Dict[str, int]]:
    """Per-day totals; accuracy is recomputed from the summed counts."""
    df = _sessions_frame(sessions)
    if df.empty:
        return {}
    g = df.groupby("day", sort=True).agg(
        problems_attempted=("problems_attempted", "sum"),
        problems_correct=("problems_correct", "sum"),
        sessions_count=("day", "size"),
    )
    return {
        str(day): {
            "problems_attempted": int(row.problems_attempted),
            "problems_correct": int(row.problems_correct),
            "accuracy": _pct(int(row.problems_correct), int(row.problems_attempted)),
            "sessions_count": int(row.sessions_count),
        }
        for day, row in g.iterrows()
    }


def practice_calendar(sessions: Iterable[Any], days_back: int = 365, today: Optional[date] = None) -> List[CalendarDay]:
    """Exactly `days_back` days, today first, zeroed where nothing was practiced."""
    history = daily_history(sessions)
    start = today or date.today()
    out: List[CalendarDay] = []
    for offset in range(days_back):
        key = (start - timedelta(days=offset)).isoformat()
        day = history.get(key)
        if day is None:
            out.append(CalendarDay(date=key, problems_attempted=0, accuracy=0, sessions_count=0))
        else:
            out.append(
                CalendarDay(
                    date=key,
                    problems_attempted=day["problems_attempted"],
                    accuracy=day["accuracy"],
                    sessions_count=day["sessions_count"],
                )
            )
    return out


def total_days_practiced(sessions: Iterable[Any]) -> int:
    df = _sessions_frame(sessions)
    return int(df["day"].nunique()) if not df.empty else 0


def recent_sessions(sessions: Iterable[Any], count: int = 10) -> List[Dict[str, Any]]:
    """Newest `count` sessions, oldest of those first."""
    df = _sessions_frame(sessions)
    if df.empty or count <= 0:
        return []
    df = df.sort_values("date", kind="stable").tail(count)
    return [{k: v for k, v in row.items() if k != "day"} for row in df.to_dict("records")]
