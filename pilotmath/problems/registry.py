from __future__ import annotations

"""Generator dispatch table and the public problem API."""

from typing import Callable, Dict, List, Optional

from . import approach, atmosphere, conversions, fuel, headings, navigation, performance, wind
from .evaluator import is_correct
from .schema import Problem, ProblemCategory
from ..util.randomness import Randomness, default_source

Generator = Callable[[Randomness], Problem]

GENERATORS: Dict[ProblemCategory, Generator] = {
    ProblemCategory.HOURS_TO_DECIMAL: conversions.generate_hours_to_decimal,
    ProblemCategory.RECIPROCAL_HEADING: headings.generate_reciprocal_heading,
    ProblemCategory.HYDROPLANING: performance.generate_hydroplaning,
    ProblemCategory.TEMP_CONVERSION: conversions.generate_temp_conversion,
    ProblemCategory.ISA_DEVIATION: atmosphere.generate_isa_deviation,
    ProblemCategory.PRESSURE_ALTITUDE: atmosphere.generate_pressure_altitude,
    ProblemCategory.CROSSWIND: wind.generate_crosswind,
    ProblemCategory.HEADWIND_TAILWIND: wind.generate_headwind_tailwind,
    ProblemCategory.DRIFT_ANGLE: wind.generate_drift_angle,
    ProblemCategory.UNIT_CONVERSION: conversions.generate_unit_conversion,
    ProblemCategory.VISIBILITY_RVR: conversions.generate_visibility_rvr,
    ProblemCategory.FUEL_WEIGHT: conversions.generate_fuel_weight,
    ProblemCategory.FUEL_DUMPING: fuel.generate_fuel_dumping,
    ProblemCategory.MAGNETIC_COMPASS: headings.generate_magnetic_compass,
    ProblemCategory.SIXTY_TO_ONE: navigation.generate_sixty_to_one,
    ProblemCategory.STANDARD_RATE_TURN: performance.generate_standard_rate_turn,
    ProblemCategory.TURN_RADIUS: performance.generate_turn_radius,
    ProblemCategory.TRUE_AIRSPEED: atmosphere.generate_true_airspeed,
    ProblemCategory.TIME_SPEED_DISTANCE: navigation.generate_time_speed_distance,
    ProblemCategory.DESCENT_PLANNING: approach.generate_descent_planning,
    ProblemCategory.VISUAL_DESCENT_POINT: approach.generate_visual_descent_point,
    ProblemCategory.GLIDE_DISTANCE: performance.generate_glide_distance,
    ProblemCategory.CLOUD_BASE: atmosphere.generate_cloud_base,
    ProblemCategory.HOLDING_PATTERN: headings.generate_holding_pattern,
    ProblemCategory.FUEL_ENDURANCE: fuel.generate_fuel_endurance,
    ProblemCategory.SLANT_RANGE: navigation.generate_slant_range,
    ProblemCategory.COMPASS_MATH: headings.generate_compass_math,
}


def _check_total(table: Dict[ProblemCategory, Generator]) -> None:
    missing = [c.value for c in ProblemCategory if c not in table]
    extra = [str(k) for k in table if not isinstance(k, ProblemCategory)]
    if missing or extra:
        raise RuntimeError(f"Generator table mismatch: missing={missing} extra={extra}")


_check_total(GENERATORS)


def get_all_categories() -> List[ProblemCategory]:
    return list(ProblemCategory)


def generate_problem(
    category: ProblemCategory | str | None = None,
    rng: Optional[Randomness] = None,
) -> Problem:
    """One fresh problem; a random category when none is given.

    Unknown category ids raise ValueError.
    """
    source = rng or default_source()
    if category is None:
        cat = source.pick(get_all_categories())
    else:
        cat = ProblemCategory(category)
    return GENERATORS[cat](source)


def generate_problems(
    count: int,
    category: ProblemCategory | str | None = None,
    rng: Optional[Randomness] = None,
) -> List[Problem]:
    return [generate_problem(category, rng) for _ in range(count)]


def check_answer(problem: Problem, user_answer: float) -> bool:
    return is_correct(problem, user_answer)
