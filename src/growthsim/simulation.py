"""Growth stepping, full-timeline generation and resumption from a given day."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from math import isfinite
from random import Random
from typing import Iterable, Optional, Sequence

from .geometry import add, is_finite_vector, scale
from .growth_rate import (
    DEFAULT_RATE_CONSTANTS,
    GrowthRateConstants,
    calculate_growth_rate,
    is_growth_arrested,
)
from .lighting import (
    DEFAULT_DIRECTION,
    DEFAULT_LIGHTING_CONSTANTS,
    LightingConstants,
    active_light_sources,
    assign_influence_to_new_branch,
    calculate_single_light_direction_effect,
    combine_light_source_effects,
)
from .microgravity import (
    DEFAULT_MICROGRAVITY_CONSTANTS,
    MicrogravityConstants,
    apply_microgravity_effect,
)
from .models import BranchType, CustomLightSource, GrowthPoint, LightInfluence, PlantParams, Vector3

logger = logging.getLogger(__name__)


class StepStatus(str, Enum):
    OK = "ok"
    DEGRADED = "degraded"
    ARRESTED = "arrested"


class BranchTermination(str, Enum):
    """What happens to a branch whose growth has been arrested.

    ``CONTINUE`` keeps emitting one point per day at the last position.
    ``PER_BRANCH`` stops emitting points for that branch only.
    """

    CONTINUE = "continue"
    PER_BRANCH = "per_branch"


@dataclass(frozen=True)
class StepConstants:
    custom_light_amplification: float = 3.0
    standard_light_amplification: float = 1.2
    stem_base_growth: float = 0.8
    root_base_growth: float = 0.6
    vertical_fallback_factor: float = 0.7
    stem_blue_vertical_damping: float = 0.8
    red_vertical_cap: float = 1.3
    root_blue_horizontal_damping: float = 0.7
    horizontal_jitter: float = 0.05
    stem_vertical_jitter: float = 0.05
    root_vertical_jitter: float = 0.08
    stem_fallback_step: float = 0.5
    root_fallback_step: float = -0.5
    initial_spread: float = 0.1
    rate: GrowthRateConstants = field(default_factory=lambda: DEFAULT_RATE_CONSTANTS)
    lighting: LightingConstants = field(default_factory=lambda: DEFAULT_LIGHTING_CONSTANTS)
    microgravity: MicrogravityConstants = field(default_factory=lambda: DEFAULT_MICROGRAVITY_CONSTANTS)


DEFAULT_STEP_CONSTANTS = StepConstants()


@dataclass(frozen=True)
class StepOutcome:
    point: GrowthPoint
    status: StepStatus = StepStatus.OK
    reason: Optional[str] = None


def _fallback_step(point: GrowthPoint, constants: StepConstants) -> float:
    if point.type is BranchType.STEM:
        return constants.stem_fallback_step
    return constants.root_fallback_step


def _standard_direction(point: GrowthPoint, params: PlantParams) -> str:
    influence = point.light_influence
    if influence is not None and influence.direction is not None:
        return influence.direction
    if params.light_directions:
        return params.light_directions[point.branch_id % len(params.light_directions)]
    return DEFAULT_DIRECTION


def _apply_spectral_balance(offset: Vector3, params: PlantParams, branch_type: BranchType, constants: StepConstants) -> Vector3:
    x, y, z = offset
    ratio = params.red_blue_ratio
    if branch_type is BranchType.STEM:
        if ratio < 1:
            blue_effect = 2.0 - ratio
            return (x * blue_effect, y * blue_effect, z * constants.stem_blue_vertical_damping)
        return (x, y, z * min(constants.red_vertical_cap, ratio))
    if ratio < 1:
        blue_effect = (1.5 - ratio * 0.5) * constants.root_blue_horizontal_damping
        return (x * blue_effect, y * blue_effect, z)
    return offset


def _apply_vertical_fallback(
    offset: Vector3,
    params: PlantParams,
    branch_type: BranchType,
    growth_rate: float,
    constants: StepConstants,
) -> Vector3:
    """Keep stems rising and roots sinking when no light drives the vertical axis."""

    x, y, z = offset
    if branch_type is BranchType.STEM:
        push = constants.stem_base_growth * growth_rate * constants.vertical_fallback_factor
        if all("z" not in direction for direction in params.light_directions):
            z += push
        return (x, y, z)
    push = constants.root_base_growth * growth_rate * constants.vertical_fallback_factor
    if all(direction != "-z" for direction in params.light_directions):
        z -= push
    return (x, y, z)


def _light_offset(
    point: GrowthPoint,
    params: PlantParams,
    active_lights: Sequence[CustomLightSource],
    day: int,
    growth_rate: float,
    rng: Random,
    constants: StepConstants,
) -> Vector3:
    if active_lights:
        effect = combine_light_source_effects(point, active_lights, day, rng, constants.lighting)
        return scale(effect.vector, constants.custom_light_amplification)
    direction = _standard_direction(point, params)
    return calculate_single_light_direction_effect(
        growth_rate * constants.standard_light_amplification,
        direction,
        point.type,
        constants.lighting,
    )


def _compute_next_point(
    point: GrowthPoint,
    params: PlantParams,
    lights: Sequence[CustomLightSource],
    day: int,
    rng: Random,
    constants: StepConstants,
) -> StepOutcome:
    branch_type = point.type
    growth_rate = calculate_growth_rate(params, branch_type, constants.rate)
    logger.debug("[Day %d, %s %d] growth rate %.3f", day, branch_type.value, point.branch_id, growth_rate)

    if is_growth_arrested(params, constants.rate):
        return StepOutcome(point.moved_to(point.position, point.day + 1), StepStatus.ARRESTED, "radiation")

    active_lights = active_light_sources(lights, day)
    offset = _light_offset(point, params, active_lights, day, growth_rate, rng, constants)
    offset = _apply_spectral_balance(offset, params, branch_type, constants)

    if params.microgravity:
        offset = apply_microgravity_effect(offset, params, point, day, rng, lights, constants.microgravity)
    elif not active_lights:
        offset = _apply_vertical_fallback(offset, params, branch_type, growth_rate, constants)

    if branch_type is BranchType.STEM:
        vertical_jitter = constants.stem_vertical_jitter
    else:
        vertical_jitter = constants.root_vertical_jitter
    jitter = (
        rng.uniform(-constants.horizontal_jitter, constants.horizontal_jitter),
        rng.uniform(-constants.horizontal_jitter, constants.horizontal_jitter),
        rng.uniform(-vertical_jitter, vertical_jitter),
    )
    x, y, z = add(point.position, add(offset, jitter))

    status = StepStatus.OK
    reason = None
    if not is_finite_vector((x, y, z)):
        logger.warning("Non-finite position for %s %d on day %d", branch_type.value, point.branch_id, day)
        status = StepStatus.DEGRADED
        reason = "non-finite coordinate"
        x = x if isfinite(x) else point.x
        y = y if isfinite(y) else point.y
        z = z if isfinite(z) else point.z + _fallback_step(point, constants)

    next_point = point.moved_to((x, y, z), point.day + 1)
    logger.debug("  new point (%.3f, %.3f, %.3f) day %d", x, y, z, next_point.day)
    return StepOutcome(next_point, status, reason)


def advance_growth_point(
    point: GrowthPoint,
    params: PlantParams,
    lights: Sequence[CustomLightSource] = (),
    day: Optional[int] = None,
    rng: Optional[Random] = None,
    constants: StepConstants = DEFAULT_STEP_CONSTANTS,
) -> StepOutcome:
    """Compute the next point of a branch, reporting how the step went.

    ``day`` is the day being simulated and decides which custom lights are
    active; it defaults to ``point.day``. Never raises.
    """

    simulated_day = point.day if day is None else day
    rng = rng or Random()
    try:
        return _compute_next_point(point, params, lights, simulated_day, rng, constants)
    except Exception as error:
        logger.exception("Step failed for %s %d on day %d", point.type.value, point.branch_id, simulated_day)
        fallback = point.moved_to(
            (point.x, point.y, point.z + _fallback_step(point, constants)),
            point.day + 1,
        )
        return StepOutcome(fallback, StepStatus.DEGRADED, repr(error))


def calculate_next_growth_point(
    point: GrowthPoint,
    params: PlantParams,
    lights: Sequence[CustomLightSource] = (),
    day: Optional[int] = None,
    rng: Optional[Random] = None,
    constants: StepConstants = DEFAULT_STEP_CONSTANTS,
) -> GrowthPoint:
    return advance_growth_point(point, params, lights, day, rng, constants).point


def create_initial_points(
    params: PlantParams,
    lights: Sequence[CustomLightSource] = (),
    rng: Optional[Random] = None,
    constants: StepConstants = DEFAULT_STEP_CONSTANTS,
) -> list[GrowthPoint]:
    rng = rng or Random()
    spread = constants.initial_spread
    points: list[GrowthPoint] = []
    for branch_type in (BranchType.STEM, BranchType.ROOT):
        for branch_id in range(params.branch_count(branch_type)):
            influence = assign_influence_to_new_branch(params, branch_id, branch_type, 0, lights)
            points.append(
                GrowthPoint(
                    x=rng.uniform(-spread, spread),
                    y=rng.uniform(-spread, spread),
                    z=0.0,
                    day=0,
                    type=branch_type,
                    branch_id=branch_id,
                    light_influence=influence,
                )
            )
    return points


def fallback_growth_points(days: int) -> list[GrowthPoint]:
    """One straight stem and one straight root, used when generation fails."""

    influence = LightInfluence(direction=DEFAULT_DIRECTION)
    stem = [GrowthPoint(0.0, 0.0, day * 0.5, day, BranchType.STEM, 0, influence) for day in range(days + 1)]
    root = [GrowthPoint(0.0, 0.0, -day * 0.3, day, BranchType.ROOT, 0, influence) for day in range(days + 1)]
    return sort_by_day(stem + root)


def sort_by_day(points: Iterable[GrowthPoint]) -> list[GrowthPoint]:
    return sorted(points, key=lambda point: point.day)


def _grow_branch(
    start: GrowthPoint,
    days: int,
    params: PlantParams,
    lights: Sequence[CustomLightSource],
    rng: Random,
    termination: BranchTermination,
    constants: StepConstants,
) -> list[GrowthPoint]:
    branch = [start]
    current = start
    for _ in range(days):
        outcome = advance_growth_point(current, params, lights, current.day + 1, rng, constants)
        if outcome.status is StepStatus.ARRESTED and termination is BranchTermination.PER_BRANCH:
            logger.info("%s %d stopped growing on day %d", current.type.value, current.branch_id, current.day)
            break
        branch.append(outcome.point)
        current = outcome.point
    return branch


def generate_growth_points(
    days: int,
    params: PlantParams,
    lights: Sequence[CustomLightSource] = (),
    rng: Optional[Random] = None,
    termination: BranchTermination = BranchTermination.CONTINUE,
    constants: StepConstants = DEFAULT_STEP_CONSTANTS,
) -> list[GrowthPoint]:
    """Generate every branch from day 0 through ``days``, sorted by day."""

    days = max(0, days)
    rng = rng or Random()
    try:
        points: list[GrowthPoint] = []
        for start in create_initial_points(params, lights, rng, constants):
            points.extend(_grow_branch(start, days, params, lights, rng, termination, constants))
    except Exception:
        logger.exception("Growth generation failed, using fallback timeline")
        return fallback_growth_points(days)

    logger.info(
        "Generated %d points for %d stems and %d roots over %d days",
        len(points),
        params.stem_count,
        params.root_count,
        days,
    )
    return sort_by_day(points)


def _branch_order(point: GrowthPoint) -> tuple[int, int]:
    return (0 if point.type is BranchType.STEM else 1, point.branch_id)


def generate_new_points_from_day(
    start_day: int,
    days_to_generate: int,
    points: Iterable[GrowthPoint],
    params: PlantParams,
    lights: Sequence[CustomLightSource] = (),
    rng: Optional[Random] = None,
    termination: BranchTermination = BranchTermination.CONTINUE,
    constants: StepConstants = DEFAULT_STEP_CONSTANTS,
) -> list[GrowthPoint]:
    """Resume every branch from its point at ``start_day``.

    Returns only the new suffix, days ``start_day + 1`` onward. An empty list
    means there was nothing to resume from.
    """

    last_points = sorted((point for point in points if point.day == start_day), key=_branch_order)
    if not last_points:
        logger.warning("No growth points on day %d, nothing to resume", start_day)
        return []

    rng = rng or Random()
    generated: list[GrowthPoint] = []
    try:
        for offset in range(1, days_to_generate + 1):
            simulated_day = start_day + offset
            day_points: list[GrowthPoint] = []
            for point in last_points:
                outcome = advance_growth_point(point, params, lights, simulated_day, rng, constants)
                if outcome.status is StepStatus.ARRESTED and termination is BranchTermination.PER_BRANCH:
                    continue
                day_points.append(outcome.point)
            if not day_points:
                logger.info("No branch grew on day %d, stopping", simulated_day)
                break
            generated.extend(day_points)
            last_points = day_points
    except Exception:
        logger.exception("Resuming growth from day %d failed", start_day)
        return []

    logger.info("Generated %d points from day %d", len(generated), start_day)
    return generated
