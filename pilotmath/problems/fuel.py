from __future__ import annotations

"""Fuel planning drills: dumping and endurance/reserves."""

import math

from .base import fixed, grouped, make_problem, round_half_up
from .schema import Problem, ProblemCategory
from ..util.randomness import Randomness

VFR_DAY_RESERVE_HRS = 0.5
VFR_NIGHT_RESERVE_HRS = 0.75
IFR_RESERVE_HRS = 0.75


def generate_fuel_dumping(rng: Randomness) -> Problem:
    rate = rng.pick([1200, 1500, 2000, 2200, 2500, 3000])

    if rng.pick(["time", "fuel"]) == "time":
        minutes = rng.pick([3, 4, 5, 6, 7, 8, 9, 10, 12, 15, 18, 20])
        fuel = rate * minutes
        return make_problem(
            ProblemCategory.FUEL_DUMPING,
            question=f"Dump rate is {grouped(rate)} lbs/min. How long to dump {grouped(fuel)} lbs?",
            answer=minutes,
            tolerance=0.5,
            unit="minutes",
            hint="Time = Fuel ÷ Rate",
            explanation=f"{grouped(fuel)} lbs ÷ {grouped(rate)} lbs/min = {minutes} minutes",
        )

    minutes = rng.pick([5, 6, 7, 8, 10, 12, 15])
    fuel = rate * minutes
    return make_problem(
        ProblemCategory.FUEL_DUMPING,
        question=f"Dump rate is {grouped(rate)} lbs/min. How much fuel dumped in {minutes} minutes?",
        answer=fuel,
        tolerance=100,
        unit="lbs",
        hint="Fuel = Rate × Time",
        explanation=f"{grouped(rate)} lbs/min × {minutes} min = {grouped(fuel)} lbs",
    )


def _clock(hours: int, minutes: int) -> str:
    return f"{hours}:{str(minutes).zfill(2)}"


def generate_fuel_endurance(rng: Randomness) -> Problem:
    mode = rng.pick(["fuel-required", "endurance", "enough-fuel", "ifr-reserve"])
    if mode == "fuel-required":
        return _vfr_fuel_required(rng)
    if mode == "endurance":
        return _endurance(rng)
    if mode == "enough-fuel":
        return _extra_fuel(rng)
    return _ifr_fuel_required(rng)


def _vfr_fuel_required(rng: Randomness) -> Problem:
    hours = rng.pick([1, 2, 3, 4])
    minutes = rng.pick([0, 15, 20, 30, 40, 45])
    flow = rng.pick([8, 10, 12, 14, 15, 18, 20])
    night = rng.chance(0.3)

    flight_time = hours + minutes / 60
    reserve = VFR_NIGHT_RESERVE_HRS if night else VFR_DAY_RESERVE_HRS
    total = flight_time + reserve
    required = total * flow
    period = "night" if night else "day"

    return make_problem(
        ProblemCategory.FUEL_ENDURANCE,
        question=f"VFR {period} flight of {_clock(hours, minutes)}, fuel burn {flow} gph. How many gallons needed?",
        answer=round_half_up(required, 1),
        tolerance=1,
        unit="gallons",
        hint=f"VFR {period} reserve: {'45' if night else '30'} minutes",
        explanation=(
            f"Flight: {fixed(flight_time, 2)} hrs + {reserve} hr reserve = {fixed(total, 2)} hrs "
            f"× {flow} gph = {fixed(required, 1)} gal"
        ),
    )


def _endurance(rng: Randomness) -> Problem:
    on_board = rng.pick([30, 40, 50, 60, 75, 80, 100, 120])
    flow = rng.pick([8, 10, 12, 14, 15, 18])
    endurance = on_board / flow
    hours = math.floor(endurance)
    minutes = round_half_up((endurance - hours) * 60)
    return make_problem(
        ProblemCategory.FUEL_ENDURANCE,
        question=f"You have {on_board} gallons on board, burning {flow} gph. What is your endurance?",
        answer=round_half_up(endurance, 2),
        tolerance=0.1,
        unit="hours",
        hint="Endurance = Fuel on board ÷ Fuel flow",
        explanation=f"{on_board} gal ÷ {flow} gph = {fixed(endurance, 2)} hrs ({_clock(hours, minutes)})",
    )


def _extra_fuel(rng: Randomness) -> Problem:
    on_board = rng.pick([35, 40, 45, 50, 55, 60])
    hours = rng.pick([2, 3, 4])
    minutes = rng.pick([0, 15, 30, 45])
    flow = rng.pick([10, 12, 14])

    flight_time = hours + minutes / 60
    required = (flight_time + VFR_DAY_RESERVE_HRS) * flow
    extra = on_board - required

    # negative means short of fuel
    return make_problem(
        ProblemCategory.FUEL_ENDURANCE,
        question=(
            f"VFR day, {on_board} gal on board, {_clock(hours, minutes)} flight, {flow} gph burn. "
            "Extra fuel after reserve?"
        ),
        answer=round_half_up(extra, 1),
        tolerance=1,
        unit="gallons",
        hint="Calculate fuel required (flight + 30 min reserve), then subtract from fuel on board",
        explanation=(
            f"Need: ({fixed(flight_time, 2)} + 0.5) × {flow} = {fixed(required, 1)} gal. "
            f"Have {on_board}. Extra: {fixed(extra, 1)} gal"
        ),
    )


def _ifr_fuel_required(rng: Randomness) -> Problem:
    hours = rng.pick([2, 3, 4, 5])
    minutes = rng.pick([0, 10, 20, 30])
    alternate_minutes = rng.pick([15, 20, 25, 30, 35, 40])
    flow = rng.pick([600, 700, 800, 900, 1000, 1200])

    flight_time = hours + minutes / 60
    alternate = alternate_minutes / 60
    required = round_half_up((flight_time + alternate + IFR_RESERVE_HRS) * flow)

    return make_problem(
        ProblemCategory.FUEL_ENDURANCE,
        question=(
            f"IFR flight {_clock(hours, minutes)}, alternate {_clock(0, alternate_minutes)}, "
            f"fuel flow {flow} pph. Pounds of fuel needed?"
        ),
        answer=required,
        tolerance=50,
        unit="lbs",
        hint="IFR = Flight + Alternate + 45 min reserve",
        explanation=f"({fixed(flight_time, 2)} + {fixed(alternate, 2)} + 0.75) × {flow} = {required} lbs",
    )
