"""Procedural stem and root growth under configurable light and gravity."""

from .environments import PARAM_PRESETS
from .growth_rate import GrowthRateConstants, calculate_growth_rate, is_growth_arrested
from .lighting import (
    LightEffect,
    LightingConstants,
    active_light_sources,
    assign_influence_to_new_branch,
    calculate_direction_from_light_source,
    calculate_single_light_direction_effect,
    combine_light_source_effects,
)
from .microgravity import MicrogravityConstants, apply_microgravity_effect
from .models import (
    DEFAULT_PARAMS,
    LIGHT_DIRECTIONS,
    BranchType,
    CustomLightSource,
    GrowthPoint,
    LightInfluence,
    PlantParams,
    parse_direction,
)
from .serialization import (
    ROW_HEADER,
    growth_point_to_dict,
    growth_points_to_rows,
    light_source_to_dict,
    params_to_dict,
    timeline_to_dict,
)
from .simulation import (
    BranchTermination,
    StepConstants,
    StepOutcome,
    StepStatus,
    advance_growth_point,
    calculate_next_growth_point,
    create_initial_points,
    fallback_growth_points,
    generate_growth_points,
    generate_new_points_from_day,
)
from .timeline import (
    GrowthSession,
    activation_changes_next_day,
    crosses_activation_day,
    observed_growth_rate,
    splice_timeline,
    truncate_after,
)

__all__ = [
    "BranchTermination",
    "BranchType",
    "CustomLightSource",
    "DEFAULT_PARAMS",
    "GrowthPoint",
    "GrowthRateConstants",
    "GrowthSession",
    "LIGHT_DIRECTIONS",
    "LightEffect",
    "LightInfluence",
    "LightingConstants",
    "MicrogravityConstants",
    "PARAM_PRESETS",
    "PlantParams",
    "ROW_HEADER",
    "StepConstants",
    "StepOutcome",
    "StepStatus",
    "activation_changes_next_day",
    "active_light_sources",
    "advance_growth_point",
    "apply_microgravity_effect",
    "assign_influence_to_new_branch",
    "calculate_direction_from_light_source",
    "calculate_growth_rate",
    "calculate_next_growth_point",
    "calculate_single_light_direction_effect",
    "combine_light_source_effects",
    "create_initial_points",
    "crosses_activation_day",
    "fallback_growth_points",
    "generate_growth_points",
    "generate_new_points_from_day",
    "growth_point_to_dict",
    "growth_points_to_rows",
    "is_growth_arrested",
    "light_source_to_dict",
    "observed_growth_rate",
    "params_to_dict",
    "parse_direction",
    "splice_timeline",
    "timeline_to_dict",
    "truncate_after",
]
