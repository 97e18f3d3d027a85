"""Light assignment for new branches and per-step light offsets."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from random import Random
from typing import Iterable, Optional, Sequence

from .geometry import ZERO, add, length, random_vector, scale, subtract
from .models import (
    BranchType,
    CustomLightSource,
    GrowthPoint,
    LightInfluence,
    PlantParams,
    Vector3,
    parse_direction,
)

logger = logging.getLogger(__name__)

DEFAULT_DIRECTION = "+z"
AXIS_PRIORITY = ("x", "y", "z")


@dataclass(frozen=True)
class LightingConstants:
    stem_direction_coefficient: float = 0.6
    root_direction_coefficient: float = 0.3
    stem_tropism: float = 0.6
    root_tropism: float = -0.3
    stem_saturation: float = 1.2
    root_saturation: float = 0.6
    stem_intensity_divisor: float = 10.0
    root_intensity_divisor: float = 20.0
    min_effective_distance: float = 1.0
    distance_epsilon: float = 0.001
    near_light_jitter: float = 0.01


DEFAULT_LIGHTING_CONSTANTS = LightingConstants()


@dataclass(frozen=True)
class LightEffect:
    """Offset contributed by point lights plus the summed falloff intensity."""

    vector: Vector3
    intensity: float


NO_EFFECT = LightEffect(vector=ZERO, intensity=0.0)


def active_light_sources(lights: Iterable[CustomLightSource], day: int) -> list[CustomLightSource]:
    return [light for light in lights if light.is_active(day)]


def find_light_source(lights: Iterable[CustomLightSource], light_id: int) -> Optional[CustomLightSource]:
    return next((light for light in lights if light.id == light_id), None)


def assign_influence_to_new_branch(
    params: PlantParams,
    branch_index: int,
    branch_type: BranchType,
    day: int,
    lights: Sequence[CustomLightSource] = (),
) -> LightInfluence:
    """Bind a new branch to a standard direction or to one active custom light.

    With at least as many branches as influences, branches are dealt out
    round-robin so every influence gets one. With fewer branches, custom
    lights take priority over standard directions.
    """

    directions = list(params.light_directions)
    available = active_light_sources(lights, day)
    total = len(directions) + len(available)
    if total == 0:
        return LightInfluence(direction=DEFAULT_DIRECTION)

    branch_count = params.branch_count(branch_type)
    if branch_count >= total:
        index = branch_index % total
        if index < len(directions):
            return LightInfluence(direction=directions[index])
        return LightInfluence(custom_light_id=available[index - len(directions)].id)

    priority: list[LightInfluence] = [LightInfluence(custom_light_id=light.id) for light in available]
    priority.extend(LightInfluence(direction=direction) for direction in directions)
    max_index = min(branch_count - 1, len(priority) - 1)
    if branch_index <= max_index:
        return priority[branch_index]
    return priority[branch_index % len(priority)]


def calculate_single_light_direction_effect(
    growth_rate: float,
    direction: str,
    branch_type: BranchType,
    constants: LightingConstants = DEFAULT_LIGHTING_CONSTANTS,
) -> Vector3:
    """Offset for a standard direction along exactly one axis.

    Combination tokens do not produce a diagonal: the X component wins, then
    Y, then Z.
    """

    components = dict(parse_direction(direction))
    if branch_type is BranchType.STEM:
        magnitude = abs(constants.stem_direction_coefficient * growth_rate)
        orientation = 1
    else:
        magnitude = abs(constants.root_direction_coefficient * growth_rate)
        orientation = -1

    axis = next(axis for axis in AXIS_PRIORITY if axis in components)
    signed = magnitude * components[axis] * orientation
    offset = [0.0, 0.0, 0.0]
    offset[AXIS_PRIORITY.index(axis)] = signed
    return (offset[0], offset[1], offset[2])


def calculate_direction_from_light_source(
    point: GrowthPoint,
    light: CustomLightSource,
    day: int,
    rng: Optional[Random] = None,
    constants: LightingConstants = DEFAULT_LIGHTING_CONSTANTS,
) -> LightEffect:
    """Tropism offset toward (stem) or away from (root) a point light."""

    if not light.is_active(day):
        logger.debug("Light %s inactive on day %d (starts day %d)", light.id, day, light.start_day)
        return NO_EFFECT

    delta = subtract(light.position, point.position)
    distance = length(delta)
    if distance < constants.distance_epsilon:
        rng = rng or Random()
        return LightEffect(vector=random_vector(rng, constants.near_light_jitter), intensity=0.0)

    direction = scale(delta, 1.0 / distance)
    effective_distance = max(distance, constants.min_effective_distance)
    intensity = light.intensity / (effective_distance * effective_distance)

    if point.type is BranchType.STEM:
        factor = constants.stem_tropism * min(constants.stem_saturation, intensity / constants.stem_intensity_divisor)
    else:
        factor = constants.root_tropism * min(constants.root_saturation, intensity / constants.root_intensity_divisor)
    return LightEffect(vector=scale(direction, factor), intensity=intensity)


def combine_light_source_effects(
    point: GrowthPoint,
    lights: Iterable[CustomLightSource],
    day: int,
    rng: Optional[Random] = None,
    constants: LightingConstants = DEFAULT_LIGHTING_CONSTANTS,
) -> LightEffect:
    """Unweighted sum of every light's offset; intensities are summed alongside."""

    total = ZERO
    total_intensity = 0.0
    for light in lights:
        effect = calculate_direction_from_light_source(point, light, day, rng, constants)
        logger.debug(
            "Light %s effect on %s %d: (%.3f, %.3f, %.3f) intensity %.3f",
            light.id,
            point.type.value,
            point.branch_id,
            *effect.vector,
            effect.intensity,
        )
        total = add(total, effect.vector)
        total_intensity += effect.intensity
    return LightEffect(vector=total, intensity=total_intensity)


def vertical_light_bias(
    point: GrowthPoint,
    lights: Sequence[CustomLightSource] = (),
) -> int:
    """+1 when the branch's light shines from above, -1 from below, 0 otherwise."""

    influence = point.light_influence
    if influence is None:
        return 0
    if influence.custom_light_id is not None:
        light = find_light_source(lights, influence.custom_light_id)
        if light is None or light.z == point.z:
            return 0
        return 1 if light.z > point.z else -1
    return dict(parse_direction(influence.direction or DEFAULT_DIRECTION)).get("z", 0)
