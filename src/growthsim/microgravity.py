"""Extra bending applied to step offsets in microgravity."""

from __future__ import annotations

from dataclasses import dataclass
from math import cos, pi, radians, sin
from random import Random
from typing import Sequence

from .lighting import vertical_light_bias
from .models import BranchType, CustomLightSource, GrowthPoint, PlantParams, Vector3


@dataclass(frozen=True)
class MicrogravityConstants:
    root_bend_degrees: float = 45.0
    root_bend_exaggeration_degrees: float = 30.0
    root_variance: float = 0.5
    root_min_magnitude: float = 0.3
    root_magnitude_spread: float = 0.7
    root_upward_drift: float = 0.4
    root_downward_drift: float = 0.3
    root_downward_spread: float = 0.4
    root_drift_damping: float = 0.3
    stem_min_stiffness: float = 0.3
    stem_stiffness_range: float = 0.4
    stem_base_frequency: float = 2.0
    stem_frequency_exaggeration: float = 4.0
    stem_day_scale: float = 0.2
    stem_wobble_amplitude: float = 0.3
    stem_upward_boost: float = 1.5
    stem_vertical_boost: float = 1.2


DEFAULT_MICROGRAVITY_CONSTANTS = MicrogravityConstants()


def _branch_phase(branch_id: int, branch_count: int) -> float:
    return 2.0 * pi * branch_id / max(branch_count, 1)


def apply_root_microgravity_effect(
    offset: Vector3,
    params: PlantParams,
    point: GrowthPoint,
    rng: Random,
    lights: Sequence[CustomLightSource] = (),
    constants: MicrogravityConstants = DEFAULT_MICROGRAVITY_CONSTANTS,
) -> Vector3:
    """Tentacle-like drift: random spherical bend plus a weak vertical bias."""

    exaggeration = params.exaggeration_factor
    bending_angle = radians(constants.root_bend_degrees + constants.root_bend_exaggeration_degrees * exaggeration)
    phase = _branch_phase(point.branch_id, params.root_count)

    theta = bending_angle * sin(phase + rng.random() * pi)
    phi = 2.0 * pi * rng.random()
    variance = constants.root_variance + constants.root_variance * exaggeration
    magnitude = constants.root_min_magnitude + constants.root_magnitude_spread * rng.random() * exaggeration

    x = offset[0] + sin(theta) * cos(phi) * variance * magnitude
    y = offset[1] + sin(theta) * sin(phi) * variance * magnitude

    damping = 1.0 - exaggeration * constants.root_drift_damping
    if vertical_light_bias(point, lights) < 0:
        z = constants.root_upward_drift * damping
    else:
        z = -(constants.root_downward_drift + constants.root_downward_spread * rng.random()) * damping
    return (x, y, z)


def apply_stem_microgravity_effect(
    offset: Vector3,
    params: PlantParams,
    point: GrowthPoint,
    day: int,
    lights: Sequence[CustomLightSource] = (),
    constants: MicrogravityConstants = DEFAULT_MICROGRAVITY_CONSTANTS,
) -> Vector3:
    """Sinusoidal wobble that grows as stiffness drops with exaggeration."""

    exaggeration = params.exaggeration_factor
    stiffness = constants.stem_min_stiffness + constants.stem_stiffness_range * (1.0 - exaggeration)
    frequency = constants.stem_base_frequency + constants.stem_frequency_exaggeration * exaggeration
    phase = _branch_phase(point.branch_id, params.stem_count)
    angle = day * constants.stem_day_scale * frequency

    wobble_x = sin(angle + phase) * (1.0 - stiffness) * constants.stem_wobble_amplitude
    wobble_y = cos(angle + phase * 1.5) * (1.0 - stiffness) * constants.stem_wobble_amplitude

    if vertical_light_bias(point, lights) > 0:
        boost = constants.stem_upward_boost
    else:
        boost = constants.stem_vertical_boost
    return (
        offset[0] + wobble_x * (1.0 + exaggeration),
        offset[1] + wobble_y * (1.0 + exaggeration),
        offset[2] * boost,
    )


def apply_microgravity_effect(
    offset: Vector3,
    params: PlantParams,
    point: GrowthPoint,
    day: int,
    rng: Random,
    lights: Sequence[CustomLightSource] = (),
    constants: MicrogravityConstants = DEFAULT_MICROGRAVITY_CONSTANTS,
) -> Vector3:
    if not params.microgravity:
        return offset
    if point.type is BranchType.STEM:
        return apply_stem_microgravity_effect(offset, params, point, day, lights, constants)
    return apply_root_microgravity_effect(offset, params, point, rng, lights, constants)
