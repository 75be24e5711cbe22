from __future__ import annotations

"""Conversion drills: time, temperature, distance/speed units, visibility, fuel weight."""

from .base import fixed, grouped, make_problem, num, round_half_up
from .schema import Problem, ProblemCategory
from ..util.randomness import Randomness

_MINUTES = [0, 3, 6, 9, 12, 15, 18, 21, 24, 27, 30, 33, 36, 39, 42, 45, 48, 51, 54, 57]


def generate_hours_to_decimal(rng: Randomness) -> Problem:
    hours = rng.randint(0, 5)
    minutes = rng.pick(_MINUTES)
    decimal_hours = hours + minutes / 60
    clock = f"{hours}:{str(minutes).zfill(2)}"
    return make_problem(
        ProblemCategory.HOURS_TO_DECIMAL,
        question=f"Convert {clock} to decimal hours",
        answer=round_half_up(decimal_hours, 2),
        tolerance=0.01,
        unit="hours",
        hint="Every 6 minutes = 0.1 hour",
        explanation=f"{clock} = {hours} + ({minutes}/60) = {fixed(decimal_hours, 2)} hours",
    )


def generate_temp_conversion(rng: Randomness) -> Problem:
    """Celsius to Fahrenheit or back, graded against the exact 9/5 formula."""
    if rng.chance():
        celsius = rng.pick([-40, -30, -20, -10, 0, 5, 10, 15, 20, 25, 30, 35, 40])
        fahrenheit = round_half_up(celsius * 9 / 5 + 32)
        doubled = celsius * 2
        less_ten = round_half_up(doubled * 0.9, 1)
        return make_problem(
            ProblemCategory.TEMP_CONVERSION,
            question=f"Convert {celsius}°C to Fahrenheit",
            answer=fahrenheit,
            tolerance=2,
            unit="°F",
            hint="Double it, subtract 10%, add 32",
            explanation=f"{celsius}°C × 2 = {doubled}, -10% = {num(less_ten)}, +32 = {fahrenheit}°F",
        )

    fahrenheit = rng.pick([14, 32, 41, 50, 59, 68, 77, 86, 95, 104])
    celsius = round_half_up((fahrenheit - 32) * 5 / 9)
    return make_problem(
        ProblemCategory.TEMP_CONVERSION,
        question=f"Convert {fahrenheit}°F to Celsius",
        answer=celsius,
        tolerance=2,
        unit="°C",
        hint="Subtract 32, add 10%, divide by 2",
        explanation=f"({fahrenheit}°F - 32) × 5/9 = {celsius}°C",
    )


_DISTANCES = [50, 75, 100, 150, 200, 250, 300]
_SPEEDS = [100, 150, 200, 250, 300, 350, 400]


def generate_unit_conversion(rng: Randomness) -> Problem:
    kind = rng.pick(["nm-to-sm", "sm-to-nm", "knots-to-mph", "mph-to-knots", "knots-to-nm-min"])

    if kind == "nm-to-sm":
        nm = rng.pick(_DISTANCES)
        sm = round_half_up(nm * 1.15)
        return make_problem(
            ProblemCategory.UNIT_CONVERSION,
            question=f"Convert {nm} nautical miles to statute miles",
            answer=sm,
            tolerance=3,
            unit="SM",
            hint="1 NM = 1.15 SM",
            explanation=f"{nm} NM × 1.15 = {sm} SM",
        )
    if kind == "sm-to-nm":
        sm = rng.pick(_DISTANCES)
        nm = round_half_up(sm / 1.15)
        return make_problem(
            ProblemCategory.UNIT_CONVERSION,
            question=f"Convert {sm} statute miles to nautical miles",
            answer=nm,
            tolerance=3,
            unit="NM",
            hint="1 SM = 0.87 NM",
            explanation=f"{sm} SM ÷ 1.15 = {nm} NM",
        )
    if kind == "knots-to-mph":
        knots = rng.pick(_SPEEDS)
        mph = round_half_up(knots * 1.15)
        return make_problem(
            ProblemCategory.UNIT_CONVERSION,
            question=f"Convert {knots} knots to miles per hour",
            answer=mph,
            tolerance=5,
            unit="MPH",
            hint="1 knot = 1.15 MPH",
            explanation=f"{knots} knots × 1.15 = {mph} MPH",
        )
    if kind == "mph-to-knots":
        mph = rng.pick(_SPEEDS)
        knots = round_half_up(mph / 1.15)
        return make_problem(
            ProblemCategory.UNIT_CONVERSION,
            question=f"Convert {mph} MPH to knots",
            answer=knots,
            tolerance=5,
            unit="knots",
            hint="1 MPH = 0.87 knots",
            explanation=f"{mph} MPH ÷ 1.15 = {knots} knots",
        )

    knots = rng.pick([60, 90, 120, 180, 240, 300, 360, 420, 480])
    nm_per_min = knots / 60
    return make_problem(
        ProblemCategory.UNIT_CONVERSION,
        question=f"At {knots} knots, how many nautical miles per minute?",
        answer=nm_per_min,
        tolerance=0.1,
        unit="NM/min",
        hint="60 knots = 1 NM/min",
        explanation=f"{knots} knots ÷ 60 = {num(nm_per_min)} NM/min",
    )


# (visibility in SM, spoken form, RVR feet)
_RVR_TABLE = [
    (0.25, "1/4", 1600),
    (0.5, "1/2", 2400),
    (0.75, "3/4", 4000),
    (1.0, "1", 5000),
    (1.5, "1 1/2", 6000),
]


def generate_visibility_rvr(rng: Randomness) -> Problem:
    _vis, spoken, rvr = rng.pick(_RVR_TABLE)
    return make_problem(
        ProblemCategory.VISIBILITY_RVR,
        question=f"What is the RVR equivalent of {spoken} statute mile visibility?",
        answer=rvr,
        tolerance=0,
        unit="feet",
        hint="1/4=1600, 1/2=2400, 3/4=4000, 1=5000, 1.5=6000",
        explanation=f"{spoken} SM = {rvr} feet RVR",
    )


_FUELS = {"avgas": ("Avgas", 6.0), "jet-a": ("Jet A", 6.7)}


def generate_fuel_weight(rng: Randomness) -> Problem:
    """Gallons to pounds or pounds to gallons for avgas or Jet A."""
    name, lbs_per_gal = _FUELS[rng.pick(["avgas", "jet-a"])]
    density = f"{fixed(lbs_per_gal, 1)} lbs/gal"

    if rng.chance():
        gallons = rng.pick([50, 75, 100, 150, 200, 250, 300, 400, 500])
        pounds = round_half_up(gallons * lbs_per_gal)
        return make_problem(
            ProblemCategory.FUEL_WEIGHT,
            question=f"How many pounds is {gallons} gallons of {name}?",
            answer=pounds,
            tolerance=10,
            unit="lbs",
            hint=f"{name}: {density}",
            explanation=f"{gallons} gal × {density} = {pounds} lbs",
        )

    pounds = rng.pick([300, 500, 750, 1000, 1500, 2000, 3000, 5000])
    gallons = round_half_up(pounds / lbs_per_gal)
    return make_problem(
        ProblemCategory.FUEL_WEIGHT,
        question=f"How many gallons is {grouped(pounds)} lbs of {name}?",
        answer=gallons,
        tolerance=5,
        unit="gallons",
        hint=f"{name}: {density}",
        explanation=f"{pounds} lbs ÷ {density} = {gallons} gallons",
    )
