from .stats import (
    CalendarDay,
    category_stats,
    daily_history,
    miss_rate_by_category,
    missed_problem_ranking,
    overall_stats,
    practice_calendar,
    recent_sessions,
    timing_stats,
    total_days_practiced,
    weak_categories,
)
from .streak import advance_streak, record_practice

__all__ = [
    "CalendarDay",
    "advance_streak",
    "category_stats",
    "daily_history",
    "miss_rate_by_category",
    "missed_problem_ranking",
    "overall_stats",
    "practice_calendar",
    "recent_sessions",
    "record_practice",
    "timing_stats",
    "total_days_practiced",
    "weak_categories",
]
