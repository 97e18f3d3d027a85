"""Environment-driven growth rate multipliers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from math import exp, isfinite

from .models import BranchType, PlantParams

logger = logging.getLogger(__name__)

NEUTRAL_RATE = 1.0


@dataclass(frozen=True)
class GrowthRateConstants:
    stem_base_rate: float = 1.0
    root_base_rate: float = 0.8
    radiation_threshold: float = 0.5
    radiation_penalty: float = 0.1
    radiation_stop_threshold: float = 1.5
    co2_reference: float = 800.0
    co2_min_factor: float = 0.5
    co2_max_factor: float = 1.5
    temp_optimum: float = 23.0
    temp_sensitivity: float = 0.05
    humidity_low: float = 30.0
    humidity_high: float = 80.0
    humidity_penalty: float = 0.8
    light_reference: float = 250.0
    light_min_factor: float = 0.5
    light_max_factor: float = 1.2
    root_light_passthrough: float = 0.2
    microgravity_root_factor: float = 0.6
    microgravity_root_exaggeration: float = 0.2
    microgravity_stem_factor: float = 1.2
    microgravity_stem_exaggeration: float = 0.3


DEFAULT_RATE_CONSTANTS = GrowthRateConstants()


def _clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def is_growth_arrested(params: PlantParams, constants: GrowthRateConstants = DEFAULT_RATE_CONSTANTS) -> bool:
    """Radiation above the stop threshold halts all growth."""

    return params.radiation > constants.radiation_stop_threshold


def _compute_rate(params: PlantParams, branch_type: BranchType, constants: GrowthRateConstants) -> float:
    if branch_type is BranchType.STEM:
        rate = constants.stem_base_rate
    else:
        rate = constants.root_base_rate

    if params.radiation > constants.radiation_threshold:
        excess = params.radiation - constants.radiation_threshold
        rate *= max(0.0, 1.0 - constants.radiation_penalty * excess)

    rate *= _clamp(params.co2 / constants.co2_reference, constants.co2_min_factor, constants.co2_max_factor)
    rate *= exp(-constants.temp_sensitivity * abs(params.temp - constants.temp_optimum))

    if params.humidity < constants.humidity_low or params.humidity > constants.humidity_high:
        rate *= constants.humidity_penalty

    light_factor = _clamp(
        params.light_intensity / constants.light_reference,
        constants.light_min_factor,
        constants.light_max_factor,
    )
    if branch_type is BranchType.STEM:
        rate *= light_factor
    else:
        passthrough = constants.root_light_passthrough
        rate *= (1.0 - passthrough) + light_factor * passthrough

    if params.microgravity:
        exaggeration = params.exaggeration_factor
        if branch_type is BranchType.STEM:
            rate *= constants.microgravity_stem_factor + constants.microgravity_stem_exaggeration * exaggeration
        else:
            rate *= constants.microgravity_root_factor - constants.microgravity_root_exaggeration * exaggeration

    return rate


def calculate_growth_rate(
    params: PlantParams,
    branch_type: BranchType,
    constants: GrowthRateConstants = DEFAULT_RATE_CONSTANTS,
) -> float:
    """Return the growth multiplier for ``branch_type``.

    Exactly ``0.0`` signals growth arrest from radiation. Invalid arithmetic
    never escapes: NaN, infinities and errors fall back to ``NEUTRAL_RATE``.
    """

    if is_growth_arrested(params, constants):
        logger.debug("Radiation %.2f above stop threshold, %s growth arrested", params.radiation, branch_type.value)
        return 0.0

    try:
        rate = _compute_rate(params, branch_type, constants)
    except (ArithmeticError, TypeError, ValueError):
        logger.exception("Growth rate for %s failed, using %.1f", branch_type.value, NEUTRAL_RATE)
        return NEUTRAL_RATE

    if not isfinite(rate):
        logger.warning("Growth rate for %s was %r, using %.1f", branch_type.value, rate, NEUTRAL_RATE)
        return NEUTRAL_RATE
    return max(0.0, rate)
