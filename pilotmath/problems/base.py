from __future__ import annotations

"""Shared helpers for the problem generators.

Rounding here is half-up (`floor(x + 0.5)`), not Python's banker's rounding,
so that 12.5 knots rounds to 13 the way a pilot would do it on paper.
"""

import math
from typing import Optional
from uuid import uuid4

from .schema import Problem, ProblemCategory


def new_problem_id() -> str:
    """Opaque, never reused problem token."""
    return uuid4().hex


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round with .5 going up. Returns an int when `ndigits` is 0."""
    if ndigits == 0:
        return int(math.floor(value + 0.5))
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def num(value: float) -> str:
    """Render a number the short way: 3.0 -> '3', 2.5 -> '2.5'."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def fixed(value: float, digits: int) -> str:
    """Fixed-point rendering with `digits` decimals."""
    return f"{value:.{digits}f}"


def grouped(value: float) -> str:
    """Thousands-separated rendering: 25000 -> '25,000', 1500.5 -> '1,500.5'."""
    if isinstance(value, float) and not value.is_integer():
        text = f"{value:,.3f}".rstrip("0").rstrip(".")
        return text
    return f"{int(value):,}"


def pad3(heading: int) -> str:
    """Zero-padded heading: 70 -> '070'."""
    return str(heading).zfill(3)


def mmss(seconds: float) -> str:
    """Seconds as m:ss."""
    whole = int(seconds)
    return f"{whole // 60}:{str(whole % 60).zfill(2)}"


def wrap_heading(heading: float) -> float:
    """Wrap into 1..360; a zero result is shown as 360, never 0."""
    wrapped = heading % 360
    return 360 if wrapped == 0 else wrapped


def make_problem(
    category: ProblemCategory,
    *,
    question: str,
    answer: float,
    tolerance: float,
    unit: str,
    explanation: str,
    hint: Optional[str] = None,
) -> Problem:
    return Problem(
        id=new_problem_id(),
        category=category,
        question=question,
        correct_answer=answer,
        tolerance=tolerance,
        unit=unit,
        hint=hint,
        explanation=explanation,
    )
