from __future__ import annotations

"""Navigation drills: 60-to-1, time/speed/distance, DME slant range."""

import math

from .base import fixed, grouped, make_problem, num, round_half_up
from .schema import Problem, ProblemCategory
from ..util.randomness import Randomness

FEET_PER_NM = 6000


def generate_sixty_to_one(rng: Randomness) -> Problem:
    dme = rng.pick([10, 12, 15, 20, 30, 45, 60])
    per_mile = 60 / dme

    if rng.pick(["radials-per-mile", "arc-distance"]) == "radials-per-mile":
        return make_problem(
            ProblemCategory.SIXTY_TO_ONE,
            question=f"At {dme} DME, how many radials per nautical mile?",
            answer=per_mile,
            tolerance=0.5,
            unit="radials/NM",
            hint="Radials per mile = 60 ÷ DME",
            explanation=f"60 ÷ {dme} = {fixed(per_mile, 1)} radials per NM",
        )

    radials = rng.pick([20, 24, 30, 36, 40, 45, 50, 60])
    arc = radials / per_mile
    return make_problem(
        ProblemCategory.SIXTY_TO_ONE,
        question=f"Flying a {dme} NM arc, crossing {radials} radials. What is the arc distance?",
        answer=round_half_up(arc, 1),
        tolerance=0.5,
        unit="NM",
        hint="Arc distance = Radials ÷ (60 ÷ DME)",
        explanation=(
            f"Radials per NM = {fixed(per_mile, 1)}. "
            f"Arc = {radials} ÷ {fixed(per_mile, 1)} = {fixed(arc, 1)} NM"
        ),
    )


_GROUND_SPEEDS = [120, 150, 180, 210, 240, 300, 360, 420, 480]


def generate_time_speed_distance(rng: Randomness) -> Problem:
    mode = rng.pick(["time", "distance", "speed"])

    if mode == "distance":
        gs = rng.pick(_GROUND_SPEEDS)
        minutes = rng.pick([5, 6, 8, 10, 12, 15, 20, 25, 30])
        per_min = gs / 60
        distance = round_half_up(per_min * minutes)
        return make_problem(
            ProblemCategory.TIME_SPEED_DISTANCE,
            question=f"At {gs} knots ground speed, how far do you travel in {minutes} minutes?",
            answer=distance,
            tolerance=2,
            unit="NM",
            hint="Distance = (GS ÷ 60) × Time in minutes",
            explanation=f"{gs} kts = {num(per_min)} NM/min. {num(per_min)} × {minutes} min = {distance} NM",
        )

    if mode == "time":
        gs = rng.pick(_GROUND_SPEEDS)
        distance = rng.pick([20, 30, 40, 50, 60, 80, 100, 120])
        per_min = gs / 60
        minutes = round_half_up(distance / per_min)
        return make_problem(
            ProblemCategory.TIME_SPEED_DISTANCE,
            question=f"At {gs} knots, how long to travel {distance} NM?",
            answer=minutes,
            tolerance=1,
            unit="minutes",
            hint="Time = Distance ÷ (GS ÷ 60)",
            explanation=f"{gs} kts = {num(per_min)} NM/min. {distance} NM ÷ {num(per_min)} = {minutes} minutes",
        )

    minutes = rng.pick([10, 12, 15, 20, 24, 30, 40, 45])
    distance = rng.pick([30, 40, 50, 60, 80, 100, 120, 150])
    gs = round_half_up(distance / minutes * 60)
    return make_problem(
        ProblemCategory.TIME_SPEED_DISTANCE,
        question=f"You traveled {distance} NM in {minutes} minutes. What is your ground speed?",
        answer=gs,
        tolerance=5,
        unit="knots",
        hint="GS = (Distance ÷ Time) × 60",
        explanation=f"{distance} ÷ {minutes} = {fixed(distance / minutes, 1)} NM/min × 60 = {gs} knots",
    )


def generate_slant_range(rng: Randomness) -> Problem:
    mode = rng.pick(["over-station", "slant-vs-ground", "min-altitude"])

    if mode == "over-station":
        altitude = rng.pick([6000, 9000, 12000, 15000, 18000, 21000, 24000, 30000, 36000])
        dme = altitude / FEET_PER_NM
        return make_problem(
            ProblemCategory.SLANT_RANGE,
            question=f"Directly over a VOR at {grouped(altitude)} ft. What does the DME read?",
            answer=round_half_up(dme, 1),
            tolerance=0.2,
            unit="DME",
            hint="DME over station = Altitude ÷ 6,000 (6,000 ft ≈ 1 NM)",
            explanation=f"{grouped(altitude)} ft ÷ 6,000 = {fixed(dme, 1)} NM",
        )

    if mode == "slant-vs-ground":
        ground = rng.pick([3, 4, 5, 6, 8])
        altitude = rng.pick([12000, 18000, 24000, 30000])
        alt_nm = altitude / FEET_PER_NM
        squared = ground * ground + alt_nm * alt_nm
        slant = math.sqrt(squared)
        return make_problem(
            ProblemCategory.SLANT_RANGE,
            question=f"At {grouped(altitude)} ft, {ground} NM ground distance from VOR. What does DME show?",
            answer=round_half_up(slant, 1),
            tolerance=0.3,
            unit="DME",
            hint="Slant² = Ground² + (Altitude÷6000)². Close + high = bigger difference.",
            explanation=(
                f"Alt in NM = {fixed(alt_nm, 1)}. Slant = √({ground}² + {fixed(alt_nm, 1)}²) "
                f"= √{fixed(squared, 1)} = {fixed(slant, 1)} NM"
            ),
        )

    target = rng.pick([2, 3, 4, 5, 6])
    minimum = target * FEET_PER_NM
    return make_problem(
        ProblemCategory.SLANT_RANGE,
        question=f"What is the minimum altitude to show at least {target} DME when directly over the station?",
        answer=minimum,
        tolerance=100,
        unit="ft",
        hint="Altitude = DME × 6,000",
        explanation=f"{target} NM × 6,000 ft/NM = {grouped(minimum)} ft",
    )
