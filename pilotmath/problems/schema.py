from __future__ import annotations

"""Problem category enumeration and the generated `Problem` record."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ProblemCategory(str, Enum):
    """Closed set of drill categories. Values are the persisted ids."""

    HOURS_TO_DECIMAL = "hours-to-decimal"
    RECIPROCAL_HEADING = "reciprocal-heading"
    HYDROPLANING = "hydroplaning"
    TEMP_CONVERSION = "temp-conversion"
    ISA_DEVIATION = "isa-deviation"
    PRESSURE_ALTITUDE = "pressure-altitude"
    CROSSWIND = "crosswind"
    HEADWIND_TAILWIND = "headwind-tailwind"
    DRIFT_ANGLE = "drift-angle"
    UNIT_CONVERSION = "unit-conversion"
    VISIBILITY_RVR = "visibility-rvr"
    FUEL_WEIGHT = "fuel-weight"
    FUEL_DUMPING = "fuel-dumping"
    MAGNETIC_COMPASS = "magnetic-compass"
    SIXTY_TO_ONE = "sixty-to-one"
    STANDARD_RATE_TURN = "standard-rate-turn"
    TURN_RADIUS = "turn-radius"
    TRUE_AIRSPEED = "true-airspeed"
    TIME_SPEED_DISTANCE = "time-speed-distance"
    DESCENT_PLANNING = "descent-planning"
    VISUAL_DESCENT_POINT = "visual-descent-point"
    GLIDE_DISTANCE = "glide-distance"
    CLOUD_BASE = "cloud-base"
    HOLDING_PATTERN = "holding-pattern"
    FUEL_ENDURANCE = "fuel-endurance"
    SLANT_RANGE = "slant-range"
    COMPASS_MATH = "compass-math"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Problem:
    """One generated exercise.

    `tolerance` is read by magnitude: 0 means exact, below 1 is a fraction
    of `correct_answer`, 1 and above is an absolute margin.
    """

    id: str
    category: ProblemCategory
    question: str
    correct_answer: float
    tolerance: float
    unit: str
    explanation: str
    hint: Optional[str] = None
