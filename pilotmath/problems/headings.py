from __future__ import annotations

"""Heading arithmetic drills.

All headings live in 1..360; a computed 0 is always shown as 360.
"""

from .base import make_problem, num, pad3, round_half_up, wrap_heading
from .schema import Problem, ProblemCategory
from ..util.randomness import Randomness


def reciprocal(heading: int) -> int:
    """Opposite heading: +180 up to and including 180, -180 above it."""
    return heading + 180 if heading <= 180 else heading - 180


def generate_reciprocal_heading(rng: Randomness) -> Problem:
    heading = rng.randint(1, 360)
    answer = reciprocal(heading)
    if heading <= 180:
        explanation = f"{heading}° + 200 - 20 = {answer}°"
    else:
        explanation = f"{heading}° - 200 + 20 = {answer}°"
    return make_problem(
        ProblemCategory.RECIPROCAL_HEADING,
        question=f"What is the reciprocal of heading {pad3(heading)}°?",
        answer=answer,
        tolerance=0,
        unit="°",
        hint="Add 200, subtract 20 (or vice versa)",
        explanation=explanation,
    )


def generate_magnetic_compass(rng: Randomness) -> Problem:
    """UNOS rollout: undershoot north, overshoot south by bank/3 + latitude."""
    bank = rng.pick([15, 20, 25])
    latitude = rng.pick([30, 35, 40, 45])
    turning_to = rng.pick(["north", "south"])
    turn_direction = rng.pick(["left", "right"])

    if turning_to == "north":
        desired = rng.pick([350, 355, 360, 5, 10, 15])
    else:
        desired = rng.pick([165, 170, 175, 180, 185, 190, 195])

    normal_lead = round_half_up(bank / 3)
    total_lead = normal_lead + latitude
    if turning_to == "north":
        rollout = wrap_heading(desired - total_lead)
        action, sign = "Undershoot", "-"
    else:
        rollout = wrap_heading(desired + total_lead)
        action, sign = "Overshoot", "+"

    return make_problem(
        ProblemCategory.MAGNETIC_COMPASS,
        question=(
            f"Using magnetic compass only at {latitude}°N, turning {turn_direction} to {desired}° "
            f"with {bank}° bank. At what compass reading do you start rollout?"
        ),
        answer=rollout,
        tolerance=3,
        unit="°",
        hint="UNOS: Undershoot North, Overshoot South. Lead = (bank÷3) + latitude",
        explanation=(
            f"Lead = {normal_lead}° + {latitude}° latitude = {total_lead}°. "
            f"{action}: {desired}° {sign} {total_lead}° = {rollout}°"
        ),
    )


def generate_holding_pattern(rng: Randomness) -> Problem:
    if rng.pick(["outbound-heading", "outbound-timing"]) == "outbound-heading":
        return _holding_outbound_heading(rng)
    return _holding_outbound_timing(rng)


def _holding_outbound_heading(rng: Randomness) -> Problem:
    inbound = rng.pick([360, 30, 60, 90, 120, 150, 180, 210, 240, 270, 300, 330])
    wca = rng.pick([4, 5, 6, 7, 8, 10, 12])
    wind_from_left = rng.chance()

    outbound_course = reciprocal(inbound)
    triple = wca * 3
    # wind from the left inbound is from the right outbound: correct right
    if wind_from_left:
        heading = wrap_heading(outbound_course + triple)
    else:
        heading = wrap_heading(outbound_course - triple)

    return make_problem(
        ProblemCategory.HOLDING_PATTERN,
        question=(
            f"Holding inbound {pad3(inbound)}°, WCA is {wca}° "
            f"(wind from {'left' if wind_from_left else 'right'}). What is the outbound heading?"
        ),
        answer=heading,
        tolerance=1,
        unit="°",
        hint="Outbound heading = Reciprocal ± (3 × WCA). Triple correction compensates for turns.",
        explanation=(
            f"Outbound course = {outbound_course}°. Triple WCA = {wca} × 3 = {triple}°. "
            f"{outbound_course}° {'+' if wind_from_left else '-'} {triple}° = {heading}°"
        ),
    )


# wind type -> (description, seconds per knot, sign applied to the 60 s leg)
_HOLD_WINDS = {
    "direct-tail": ("direct tailwind", 1.0, -1),
    "quartering-tail": ("quartering tailwind (45°)", 0.5, -1),
    "direct-head": ("direct headwind", 1.0, 1),
    "quartering-head": ("quartering headwind (45°)", 0.5, 1),
}


def _holding_outbound_timing(rng: Randomness) -> Problem:
    wind_speed = rng.pick([10, 15, 20, 25, 30])
    wind_type = rng.pick(list(_HOLD_WINDS))
    description, per_knot, sign = _HOLD_WINDS[wind_type]

    correction = sign * round_half_up(wind_speed * per_knot)
    outbound = 60 + correction
    tail = sign < 0
    rule = f"{num(per_knot)} sec/kt"

    return make_problem(
        ProblemCategory.HOLDING_PATTERN,
        question=(
            f"Holding with {wind_speed} kt {description} on outbound leg. "
            "What outbound time for 1-min inbound?"
        ),
        answer=outbound,
        tolerance=2,
        unit="seconds",
        hint=f"{'Tailwind: subtract' if tail else 'Headwind: add'} {rule}",
        explanation=(
            f"{'Tailwind shortens' if tail else 'Headwind lengthens'} outbound. "
            f"{wind_speed} kt × {num(per_knot)} = {abs(correction)} sec. "
            f"60 {'-' if tail else '+'} {abs(correction)} = {outbound} sec"
        ),
    )


# quick-math mnemonics for each compass offset
_COMPASS_MOVES = {
    "right-90": (90, "What heading after a RIGHT 90° turn?", "Right 90°: Add 100, subtract 10"),
    "left-90": (-90, "What heading after a LEFT 90° turn?", "Left 90°: Subtract 100, add 10"),
    "plus-30": (30, "Add 30°. What is the new heading?",
                "Add 30° and wrap at 360° if needed. Used for teardrop hold entries."),
    "minus-30": (-30, "Subtract 30°. What is the new heading?",
                 "Subtract 30° and wrap at 360° if needed. Used for teardrop hold entries."),
    "plus-45": (45, "Add 45°. What is the new heading?",
                "Add 45° and wrap at 360° if needed. Common for intercept angles."),
    "minus-45": (-45, "Subtract 45°. What is the new heading?",
                 "Subtract 45° and wrap at 360° if needed. Common for intercept angles."),
    "plus-210": (210, "Add 210°. What is the new heading?",
                 "Add 210°: same as subtracting 150° (360 - 210 = 150). Used for parallel hold entries."),
    "minus-210": (-210, "Subtract 210°. What is the new heading?",
                  "Subtract 210°: same as adding 150° (360 - 210 = 150). Used for parallel hold entries."),
}


def generate_compass_math(rng: Randomness) -> Problem:
    heading = rng.randint(1, 36) * 10
    move = rng.pick(list(_COMPASS_MOVES))
    offset, prompt, hint = _COMPASS_MOVES[move]
    raw = heading + offset
    answer = wrap_heading(raw)

    if move == "right-90":
        explanation = f"{heading} + 100 = {heading + 100}, then - 10 = {answer}°"
    elif move == "left-90":
        explanation = f"{heading} - 100 = {heading - 100}, then + 10 = {answer}°"
    else:
        op = "+" if offset > 0 else "-"
        if raw > 360:
            wrap = f"{raw} - 360 = "
        elif raw <= 0:
            wrap = f"{raw} + 360 = "
        else:
            wrap = ""
        explanation = f"{heading} {op} {abs(offset)} = {wrap}{answer}°"

    return make_problem(
        ProblemCategory.COMPASS_MATH,
        question=f"Heading {pad3(heading)}°. {prompt}",
        answer=answer,
        tolerance=0,
        unit="°",
        hint=hint,
        explanation=explanation,
    )
