"""Serialization helpers for API and export clients."""

from __future__ import annotations

from dataclasses import asdict
from typing import Iterable

from .models import CustomLightSource, GrowthPoint, PlantParams

ROW_HEADER = ("Day", "Type", "BranchId", "X", "Y", "Z")


def growth_point_to_dict(point: GrowthPoint) -> dict[str, object]:
    return {
        "x": point.x,
        "y": point.y,
        "z": point.z,
        "day": point.day,
        "type": point.type.value,
        "branch_id": point.branch_id,
        "light_influence": point.light_influence.tag if point.light_influence else None,
    }


def growth_points_to_rows(points: Iterable[GrowthPoint]) -> list[tuple[int, str, int, float, float, float]]:
    """Row shape used by the CSV exporter, one row per point."""

    return [(point.day, point.type.value, point.branch_id, point.x, point.y, point.z) for point in points]


def params_to_dict(params: PlantParams) -> dict[str, object]:
    payload = asdict(params)
    payload["light_directions"] = list(params.light_directions)
    return payload


def light_source_to_dict(light: CustomLightSource) -> dict[str, object]:
    return {
        "id": light.id,
        "x": light.x,
        "y": light.y,
        "z": light.z,
        "intensity": light.intensity,
        "start_day": light.start_day,
    }


def timeline_to_dict(
    points: Iterable[GrowthPoint],
    params: PlantParams,
    lights: Iterable[CustomLightSource],
    current_day: int,
    simulation_days: int,
) -> dict[str, object]:
    return {
        "params": params_to_dict(params),
        "light_sources": [light_source_to_dict(light) for light in lights],
        "current_day": current_day,
        "simulation_days": simulation_days,
        "points": [growth_point_to_dict(point) for point in points],
    }
