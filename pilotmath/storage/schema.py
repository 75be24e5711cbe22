from __future__ import annotations

"""Schema constants and Pydantic models for the attempt log."""

from datetime import date
from typing import Dict, Optional

import pandas as pd
from pandas.api.types import CategoricalDtype
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..problems.schema import ProblemCategory

# --- Constants ---

CATEGORIES = {c.value for c in ProblemCategory}


def _cat_dtype(categories: set[str]) -> CategoricalDtype:
    return CategoricalDtype(categories=sorted(categories), ordered=False)


RESULT_DTYPES = {
    "problem_id": "string",
    "category": _cat_dtype(CATEGORIES),
    "user_answer": "Float64",
    "correct_answer": "Float64",
    "is_correct": "boolean",
    "time_spent": "UInt32",
    # epoch milliseconds
    "timestamp": "Int64",
}

# category_breakdown is kept as a JSON string column
SESSION_DTYPES = {
    "id": "string",
    "date": "string",
    "duration": "UInt32",
    "problems_attempted": "UInt32",
    "problems_correct": "UInt32",
    "accuracy": "UInt8",
    "average_time": "UInt32",
    "category_breakdown": "string",
}


# --- Pydantic models ---

class ProblemResult(BaseModel):
    """One graded answer. `user_answer` is None only for legacy rows."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    problem_id: str
    category: ProblemCategory
    user_answer: Optional[float] = None
    correct_answer: float
    is_correct: bool
    time_spent: int = Field(ge=0)
    timestamp: int = Field(ge=0)


class CategoryTally(BaseModel):
    attempted: int = Field(ge=0)
    correct: int = Field(ge=0)

    @model_validator(mode="after")
    def _correct_le_attempted(self) -> "CategoryTally":
        if self.correct > self.attempted:
            raise ValueError("correct must be <= attempted")
        return self


class SessionStats(BaseModel):
    """Summary of one finished practice session."""

    model_config = ConfigDict(frozen=True)

    id: str
    date: str
    duration: int = Field(ge=0)
    problems_attempted: int = Field(ge=0)
    problems_correct: int = Field(ge=0)
    accuracy: int = Field(ge=0, le=100)
    average_time: int = Field(ge=0)
    category_breakdown: Dict[str, CategoryTally] = Field(default_factory=dict)

    @field_validator("category_breakdown")
    @classmethod
    def _known_categories(cls, v: Dict[str, CategoryTally]) -> Dict[str, CategoryTally]:
        for key in v:
            if key not in CATEGORIES:
                raise ValueError(f"unknown category in breakdown: {key}")
        return v

    @model_validator(mode="after")
    def _correct_le_attempted(self) -> "SessionStats":
        if self.problems_correct > self.problems_attempted:
            raise ValueError("problems_correct must be <= problems_attempted")
        return self


class StreakState(BaseModel):
    current_streak: int = Field(default=0, ge=0)
    longest_streak: int = Field(default=0, ge=0)
    last_practice_date: Optional[date] = None


def empty_frame(dtypes: Dict[str, object]) -> pd.DataFrame:
    return pd.DataFrame({k: pd.Series(dtype=v) for k, v in dtypes.items()})
