from __future__ import annotations

"""Atmosphere drills: ISA, pressure altitude, true airspeed, cloud base."""

from .base import fixed, grouped, make_problem, round_half_up
from .schema import Problem, ProblemCategory
from ..util.randomness import Randomness

STANDARD_SETTING = 29.92


def isa_temperature(altitude_ft: int) -> int:
    """ISA: 15°C at sea level, minus 2°C per 1000 ft."""
    return 15 - (altitude_ft // 1000) * 2


def generate_isa_deviation(rng: Randomness) -> Problem:
    altitude = rng.pick([5000, 8000, 10000, 15000, 18000, 21000, 25000, 30000, 35000])
    thousands = altitude // 1000
    isa = isa_temperature(altitude)
    actual = isa + rng.randint(-20, 20)
    deviation = actual - isa

    if rng.chance():
        return make_problem(
            ProblemCategory.ISA_DEVIATION,
            question=f"What is the ISA temperature at {grouped(altitude)} feet MSL?",
            answer=isa,
            tolerance=0,
            unit="°C",
            hint="ISA = 15°C - (altitude in 1000s × 2)",
            explanation=f"ISA = 15 - ({thousands} × 2) = 15 - {thousands * 2} = {isa}°C",
        )

    sign = "+" if deviation > 0 else ""
    return make_problem(
        ProblemCategory.ISA_DEVIATION,
        question=f"At {grouped(altitude)} feet, OAT is {actual}°C. What is the ISA deviation?",
        answer=deviation,
        tolerance=0,
        unit="°C",
        hint="First find ISA temp, then: Deviation = Actual - ISA",
        explanation=f"ISA at {thousands}K = {isa}°C. Deviation = {actual} - {isa} = {sign}{deviation}°C",
    )


_SETTINGS = [29.42, 29.52, 29.62, 29.72, 29.82, 29.92, 30.02, 30.12, 30.22, 30.32, 30.42, 30.52]
_ELEVATIONS = [0, 250, 500, 750, 1000, 1500, 2000, 3000, 4000, 5000]


def generate_pressure_altitude(rng: Randomness) -> Problem:
    """10 ft per 0.01" Hg away from 29.92; high setting lowers pressure altitude."""
    setting = rng.pick(_SETTINGS)
    elevation = rng.pick(_ELEVATIONS)
    difference = STANDARD_SETTING - setting
    correction = round_half_up(difference * 1000)
    pressure_alt = round_half_up(elevation + difference * 1000)
    return make_problem(
        ProblemCategory.PRESSURE_ALTITUDE,
        question=(
            f"Field elevation is {grouped(elevation)} ft, altimeter setting is {fixed(setting, 2)}\" Hg. "
            "What is the pressure altitude?"
        ),
        answer=pressure_alt,
        tolerance=20,
        unit="feet",
        hint="10 feet per 0.01\" from 29.92",
        explanation=(
            f"Difference from 29.92: {fixed(difference, 2)}\" = {correction} ft. "
            f"PA = {elevation} + {correction} = {pressure_alt} ft"
        ),
    )


def generate_true_airspeed(rng: Randomness) -> Problem:
    ias = rng.pick([100, 120, 140, 160, 180, 200, 250, 280])
    altitude = rng.pick([5000, 8000, 10000, 12000, 15000, 18000, 20000, 25000])
    correction = ias * (altitude / 1000) * 0.02
    tas = round_half_up(ias + correction)
    return make_problem(
        ProblemCategory.TRUE_AIRSPEED,
        question=f"At {grouped(altitude)} ft MSL, IAS is {ias} knots. What is your TAS?",
        answer=tas,
        tolerance=3,
        unit="knots",
        hint="TAS = IAS + (IAS × altitude in 1000s × 2%)",
        explanation=(
            f"Correction = {ias} × {altitude // 1000} × 0.02 = {round_half_up(correction)} kts. "
            f"TAS = {ias} + {round_half_up(correction)} = {tas} kts"
        ),
    )


def generate_cloud_base(rng: Randomness) -> Problem:
    temp = rng.pick([15, 18, 20, 22, 25, 28, 30, 32, 35])
    spread = rng.pick([2, 3, 4, 5, 6, 7, 8, 10, 12, 15])
    dewpoint = temp - spread
    cloud_base = spread * 400

    if rng.pick(["calculate", "from-metar"]) == "calculate":
        return make_problem(
            ProblemCategory.CLOUD_BASE,
            question=f"Temperature {temp}°C, dew point {dewpoint}°C. Estimate the cloud base AGL.",
            answer=cloud_base,
            tolerance=200,
            unit="feet",
            hint="Cloud Base = Dew Point Spread × 400 ft",
            explanation=(
                f"Spread = {temp} - {dewpoint} = {spread}°C. "
                f"Cloud base = {spread} × 400 = {grouped(cloud_base)} ft AGL"
            ),
        )
    return make_problem(
        ProblemCategory.CLOUD_BASE,
        question=f"METAR shows {temp}/{str(dewpoint).zfill(2)}. Estimate cumulus cloud bases.",
        answer=cloud_base,
        tolerance=200,
        unit="feet",
        hint="Cloud Base = (Temp - Dewpoint) × 400 ft",
        explanation=(
            f"Spread = {temp} - {dewpoint} = {spread}°C. "
            f"Cloud base ≈ {spread} × 400 = {grouped(cloud_base)} ft AGL"
        ),
    )
