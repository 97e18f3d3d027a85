"""Named environment presets for quick experiments."""

from __future__ import annotations

from .models import DEFAULT_PARAMS, PlantParams

PARAM_PRESETS: dict[str, PlantParams] = {
    "orbital": DEFAULT_PARAMS,
    "earth": PlantParams(
        microgravity=False,
        exaggeration_factor=0.0,
        radiation=0.0,
        red_blue_ratio=1.0,
        light_intensity=250.0,
        light_directions=("+z",),
        co2=800.0,
        temp=23.0,
        humidity=60.0,
        stem_count=3,
        root_count=5,
    ),
    "high_radiation": PlantParams(
        microgravity=True,
        exaggeration_factor=0.6,
        radiation=2.0,
        red_blue_ratio=1.2,
        light_intensity=300.0,
        light_directions=("-x",),
        co2=1000.0,
        temp=25.0,
        humidity=65.0,
        stem_count=5,
        root_count=8,
    ),
}
