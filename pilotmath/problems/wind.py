from __future__ import annotations

"""Wind component drills."""

import math

from .base import fixed, make_problem, round_half_up
from .schema import Problem, ProblemCategory
from ..util.randomness import Randomness

CROSSWIND_ANGLES = [15, 20, 30, 40, 45, 50, 60, 70, 75, 90]
HEADWIND_ANGLES = [0, 15, 20, 30, 40, 45, 50, 60]


def generate_crosswind(rng: Randomness) -> Problem:
    """Exact sine component; the 30/45/60 table in the hint is within tolerance."""
    wind_speed = rng.pick([10, 12, 15, 18, 20, 22, 25, 28, 30, 35])
    angle = rng.pick(CROSSWIND_ANGLES)
    crosswind = wind_speed * math.sin(math.radians(angle))
    rounded = round_half_up(crosswind)
    percent = round_half_up(crosswind / wind_speed * 100)
    return make_problem(
        ProblemCategory.CROSSWIND,
        question=f"Wind is {wind_speed} knots at {angle}° off the runway. What is the crosswind component?",
        answer=rounded,
        tolerance=2,
        unit="knots",
        hint="30°=50%, 45°=70%, 60°=90%, 90°=100%",
        explanation=f"At {angle}° angle: crosswind ≈ {rounded} knots ({percent}% of {wind_speed} kts)",
    )


def generate_headwind_tailwind(rng: Randomness) -> Problem:
    wind_speed = rng.pick([10, 15, 20, 25, 30, 35, 40])
    angle = rng.pick(HEADWIND_ANGLES)
    kind = "headwind" if rng.chance() else "tailwind"
    component = wind_speed * math.cos(math.radians(angle))
    rounded = round_half_up(component)
    percent = round_half_up(component / wind_speed * 100)
    return make_problem(
        ProblemCategory.HEADWIND_TAILWIND,
        question=f"Wind is {wind_speed} knots at {angle}° off the runway. What is the {kind} component?",
        answer=rounded,
        tolerance=2,
        unit="knots",
        hint="0°=100%, 30°=90%, 45°=70%, 60°=50%",
        explanation=f"At {angle}° angle: {kind} ≈ {rounded} knots ({percent}% of {wind_speed} kts)",
    )


_TAS = [90, 120, 150, 180, 240, 300, 360, 420, 480]
_CROSSWINDS = [6, 8, 10, 12, 15, 18, 20, 24, 30, 36, 40, 48]


def crosswind_pool(tas: int) -> list[int]:
    """Crosswinds that keep drift plausible at this TAS (crosswind <= TAS/4)."""
    return [c for c in _CROSSWINDS if c <= tas / 4]


def generate_drift_angle(rng: Randomness) -> Problem:
    tas = rng.pick(_TAS)
    crosswind = rng.pick(crosswind_pool(tas))
    drift = crosswind * 60 / tas
    return make_problem(
        ProblemCategory.DRIFT_ANGLE,
        question=f"At {tas} KTAS with a {crosswind}-knot crosswind, what is your drift angle?",
        answer=round_half_up(drift),
        tolerance=1,
        unit="°",
        hint="Drift = (Crosswind × 60) ÷ TAS",
        explanation=f"Drift = ({crosswind} × 60) ÷ {tas} = {crosswind * 60} ÷ {tas} = {fixed(drift, 1)}°",
    )
