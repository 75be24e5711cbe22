from __future__ import annotations

"""Answer scoring and answer-text parsing."""

import math
from typing import Optional

from .schema import Problem


def is_correct(problem: Problem, user_answer: float) -> bool:
    """Tolerance-aware comparison.

    tolerance == 0  -> exact equality
    tolerance <  1  -> |diff| <= |correct * tolerance|
    tolerance >= 1  -> |diff| <= tolerance
    """
    correct = problem.correct_answer
    tolerance = problem.tolerance
    diff = abs(correct - user_answer)

    if tolerance == 0:
        return user_answer == correct
    if tolerance < 1:
        return diff <= abs(correct * tolerance)
    return diff <= tolerance


def parse_answer(text: Optional[str]) -> Optional[float]:
    """Turn typed input into a number, or None when nothing usable was entered.

    Whitespace and thousands separators are ignored. None is "no submission".
    """
    if text is None:
        return None
    cleaned = text.strip().replace(",", "").replace(" ", "")
    if not cleaned:
        return None
    try:
        value = float(cleaned)
    except ValueError:
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value
