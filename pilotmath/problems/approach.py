from __future__ import annotations

"""Descent and approach drills.

The 3° glidepath is taken as 300 ft per NM throughout.
"""

from .base import fixed, grouped, make_problem, mmss, num, round_half_up
from .schema import Problem, ProblemCategory
from ..util.randomness import Randomness

FEET_PER_NM_ON_GLIDEPATH = 300

DESCENT_MODES = ["distance", "top-of-descent", "descent-rate", "pitch-angle", "altitude-at-distance"]

# (altitude to lose in ft, distance in NM)
_PITCH_SCENARIOS = [
    (5000, 10),
    (4000, 20),
    (7000, 28),
    (6000, 20),
    (8000, 40),
    (10000, 50),
    (12000, 40),
    (15000, 50),
    (19000, 35),
    (23000, 70),
]


def generate_descent_planning(rng: Randomness) -> Problem:
    mode = rng.pick(DESCENT_MODES)

    if mode == "distance":
        thousands = rng.pick([6, 8, 10, 12, 15, 18, 20, 24, 30])
        distance = thousands * 3
        return make_problem(
            ProblemCategory.DESCENT_PLANNING,
            question=f"You need to descend {thousands},000 feet. Using 3-to-1 rule, how many NM needed?",
            answer=distance,
            tolerance=0,
            unit="NM",
            hint="3-to-1: Distance = Altitude (1000s) × 3",
            explanation=f"{thousands} × 3 = {distance} NM",
        )

    if mode == "top-of-descent":
        cruise = rng.pick([25000, 28000, 31000, 35000, 37000, 39000])
        target = rng.pick([8000, 10000, 11000, 12000])
        restriction = rng.pick([15, 20, 25, 30])
        thousands = (cruise - target) // 1000
        descent_distance = thousands * 3
        tod = restriction + descent_distance
        return make_problem(
            ProblemCategory.DESCENT_PLANNING,
            question=(
                f"Cruising at FL{cruise // 100}, need to cross {restriction} DME at "
                f"{target // 1000},000 ft. At what DME start descent?"
            ),
            answer=tod,
            tolerance=2,
            unit="DME",
            hint="3-to-1: Distance = Altitude (1000s) × 3, then add restriction DME",
            explanation=(
                f"Lose {thousands}K ft × 3 = {descent_distance} NM. "
                f"Start at {restriction} + {descent_distance} = {tod} DME"
            ),
        )

    if mode == "descent-rate":
        gs = rng.pick([100, 120, 140, 150, 160, 180, 200, 220, 240, 280, 300])
        rate = gs * 5
        return make_problem(
            ProblemCategory.DESCENT_PLANNING,
            question=f"Flying a 3° descent at {gs} knots ground speed. What descent rate is required?",
            answer=rate,
            tolerance=10,
            unit="fpm",
            hint="Descent Rate = Ground Speed × 5",
            explanation=f"{gs} kts × 5 = {rate} fpm",
        )

    if mode == "pitch-angle":
        altitude, distance = rng.pick(_PITCH_SCENARIOS)
        pitch = altitude / (distance * 100)
        return make_problem(
            ProblemCategory.DESCENT_PLANNING,
            question=f"Descend {grouped(altitude)} ft over {distance} NM. What pitch angle is needed?",
            answer=round_half_up(pitch, 1),
            tolerance=0.3,
            unit="° nose down",
            hint="Pitch = Altitude ÷ (Distance × 100)",
            explanation=f"{grouped(altitude)} ÷ ({distance} × 100) = {fixed(pitch, 1)}° nose down",
        )

    distance = rng.pick([3, 4, 5, 6, 8, 10, 12])
    field = rng.pick([0, 500, 1000, 1500, 2000, 3000, 5000])
    agl = distance * FEET_PER_NM_ON_GLIDEPATH
    msl = agl + field
    return make_problem(
        ProblemCategory.DESCENT_PLANNING,
        question=(
            f"Visual approach, field elevation {grouped(field)}' MSL. "
            f"What altitude at {distance} NM for 3° glidepath?"
        ),
        answer=msl,
        tolerance=100,
        unit="ft MSL",
        hint="3° glidepath ≈ 300 ft/NM. Altitude = (Distance × 300) + Field Elevation",
        explanation=f"{distance} NM × 300 ft/NM = {agl}' AGL. {agl} + {field}' = {msl}' MSL",
    )


def generate_visual_descent_point(rng: Randomness) -> Problem:
    if rng.pick(["dme", "timing"]) == "dme":
        hat = rng.pick([300, 350, 390, 400, 450, 480, 500, 550, 600])
        threshold = rng.pick([1.0, 1.2, 1.5, 1.6, 1.8, 2.0, 2.2, 2.5])
        descent_nm = hat / FEET_PER_NM_ON_GLIDEPATH
        vdp = descent_nm + threshold
        return make_problem(
            ProblemCategory.VISUAL_DESCENT_POINT,
            question=f"MDA HAT is {hat} ft, runway threshold at {num(threshold)} DME. What is the VDP?",
            answer=round_half_up(vdp, 1),
            tolerance=0.2,
            unit="DME",
            hint="VDP = (HAT ÷ 300) + Threshold DME",
            explanation=(
                f"HAT {hat} ÷ 300 = {fixed(descent_nm, 2)} NM descent distance. "
                f"Add threshold {num(threshold)} DME = {fixed(vdp, 1)} DME"
            ),
        )

    # HAT/10 is the seconds needed at 600 fpm
    hat = rng.pick([300, 350, 400, 450, 500])
    approach_time = rng.pick([120, 135, 150, 165, 180, 195, 210])
    descent_time = hat // 10
    vdp_time = approach_time - descent_time
    return make_problem(
        ProblemCategory.VISUAL_DESCENT_POINT,
        question=(
            f"HAT is {hat} ft, approach timing is {mmss(approach_time)}. "
            "At what time from FAF is the VDP?"
        ),
        answer=vdp_time,
        tolerance=5,
        unit="seconds",
        hint="VDP Time = Approach Time - (HAT ÷ 10)",
        explanation=(
            f"HAT {hat} ÷ 10 = {descent_time} sec descent time. "
            f"{mmss(approach_time)} - {descent_time} sec = {mmss(vdp_time)} ({vdp_time} sec)"
        ),
    )
