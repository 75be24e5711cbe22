from __future__ import annotations

"""Aircraft performance drills: hydroplaning, turns, gliding."""

import math

from .base import fixed, grouped, make_problem, round_half_up
from .schema import Problem, ProblemCategory
from ..util.randomness import Randomness

MAX_IFR_BANK = 30


def generate_hydroplaning(rng: Randomness) -> Problem:
    pressure = rng.pick([50, 80, 100, 120, 144, 150, 169, 180, 196, 200, 225])
    root = math.sqrt(pressure)
    speed = round_half_up(9 * root)
    return make_problem(
        ProblemCategory.HYDROPLANING,
        question=f"Main tire pressure is {pressure} psi. What is the hydroplaning speed?",
        answer=speed,
        tolerance=2,
        unit="knots",
        hint="V = 9 × √(tire pressure)",
        explanation=f"V = 9 × √{pressure} = 9 × {fixed(root, 1)} = {speed} knots",
    )


def generate_standard_rate_turn(rng: Randomness) -> Problem:
    """Bank for 3°/s, capped at 30° for IFR."""
    tas = rng.pick([90, 100, 120, 150, 180, 200, 240, 280])
    raw = tas / 10 * 1.5
    bank = min(MAX_IFR_BANK, raw)
    capped = " → limited to 30° for IFR" if bank == MAX_IFR_BANK else ""
    return make_problem(
        ProblemCategory.STANDARD_RATE_TURN,
        question=f"What bank angle for a standard rate turn at {tas} KTAS?",
        answer=round_half_up(bank),
        tolerance=1,
        unit="°",
        hint="Bank = (TAS ÷ 10) × 1.5, max 30° IFR",
        explanation=f"({tas} ÷ 10) × 1.5 = {fixed(raw, 1)}°{capped}",
    )


def generate_turn_radius(rng: Randomness) -> Problem:
    tas = rng.pick([90, 100, 120, 150, 180, 200, 240])
    radius = tas / 200
    return make_problem(
        ProblemCategory.TURN_RADIUS,
        question=f"At {tas} KTAS in a standard rate turn, what is the turn radius?",
        answer=round_half_up(radius, 1),
        tolerance=0.1,
        unit="NM",
        hint="Turn Radius = TAS ÷ 200",
        explanation=f"{tas} ÷ 200 = {fixed(radius, 1)} NM",
    )


# (glide ratio, aircraft class)
_GLIDERS = [
    (9, "light single"),
    (10, "training aircraft"),
    (12, "light twin"),
    (15, "turboprop"),
    (17, "jet"),
]


def generate_glide_distance(rng: Randomness) -> Problem:
    """6000 ft is roughly 1 NM vertically, so distance = alt/6000 × ratio."""
    altitude = rng.pick([6000, 9000, 12000, 15000, 18000, 21000, 24000, 30000, 36000])
    ratio, aircraft = rng.pick(_GLIDERS)
    altitude_nm = altitude / 6000
    distance = round_half_up(altitude_nm * ratio)
    return make_problem(
        ProblemCategory.GLIDE_DISTANCE,
        question=(
            f"Engine failure at {grouped(altitude)} ft. With a {ratio}:1 glide ratio ({aircraft}), "
            "how far can you glide?"
        ),
        answer=distance,
        tolerance=2,
        unit="NM",
        hint="Glide Distance = (Altitude ÷ 6,000) × Glide Ratio",
        explanation=(
            f"{grouped(altitude)} ft ÷ 6,000 = {fixed(altitude_nm, 1)} NM altitude. "
            f"{fixed(altitude_nm, 1)} × {ratio} = {distance} NM"
        ),
    )
