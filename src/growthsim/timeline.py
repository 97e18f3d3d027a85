"""Timeline splicing, regeneration triggers and the interactive session holder."""

from __future__ import annotations

import logging
from random import Random
from typing import Iterable, Optional, Sequence

from .geometry import length, subtract
from .models import DEFAULT_PARAMS, CustomLightSource, GrowthPoint, PlantParams
from .simulation import (
    DEFAULT_STEP_CONSTANTS,
    BranchTermination,
    StepConstants,
    generate_growth_points,
    generate_new_points_from_day,
    sort_by_day,
)

logger = logging.getLogger(__name__)


def truncate_after(points: Iterable[GrowthPoint], day: int) -> list[GrowthPoint]:
    return [point for point in points if point.day <= day]


def splice_timeline(points: Iterable[GrowthPoint], day: int, new_points: Iterable[GrowthPoint]) -> list[GrowthPoint]:
    """Keep everything up to ``day`` and append the regenerated suffix."""

    return sort_by_day(truncate_after(points, day) + list(new_points))


def crosses_activation_day(old_day: int, new_day: int, lights: Iterable[CustomLightSource]) -> bool:
    """True when moving the displayed day from ``old_day`` to ``new_day`` passes a light's start day."""

    return any(
        (old_day < light.start_day <= new_day) or (old_day > light.start_day >= new_day)
        for light in lights
    )


def activation_changes_next_day(current_day: int, lights: Iterable[CustomLightSource]) -> bool:
    return any(light.is_active(current_day) != light.is_active(current_day + 1) for light in lights)


def observed_growth_rate(points: Sequence[GrowthPoint], current_day: int) -> float:
    """Distance between the first and last visible points per elapsed day."""

    visible = truncate_after(points, current_day)
    if len(visible) <= 1:
        return 0.0
    first, last = visible[0], visible[-1]
    elapsed = last.day - first.day
    if elapsed == 0:
        return 0.0
    return length(subtract(last.position, first.position)) / elapsed


class GrowthSession:
    """Mutable holder for one interactive timeline."""

    def __init__(
        self,
        params: PlantParams = DEFAULT_PARAMS,
        light_sources: Sequence[CustomLightSource] = (),
        simulation_days: int = 30,
        rng: Optional[Random] = None,
        termination: BranchTermination = BranchTermination.CONTINUE,
        constants: StepConstants = DEFAULT_STEP_CONSTANTS,
    ):
        self.params = params
        self.light_sources: list[CustomLightSource] = list(light_sources)
        self.simulation_days = max(0, simulation_days)
        self.rng = rng or Random()
        self.termination = termination
        self.constants = constants
        self.current_day = 0
        self.points: list[GrowthPoint] = []

    def generate(self) -> list[GrowthPoint]:
        self.points = generate_growth_points(
            self.simulation_days,
            self.params,
            self.light_sources,
            self.rng,
            self.termination,
            self.constants,
        )
        self.current_day = 0
        return self.points

    def regenerate_from(self, day: int) -> list[GrowthPoint]:
        """Replace every point after ``day``; returns the new suffix."""

        remaining = self.simulation_days - day
        self.points = truncate_after(self.points, day)
        if remaining <= 0:
            return []
        new_points = generate_new_points_from_day(
            day,
            remaining,
            self.points,
            self.params,
            self.light_sources,
            self.rng,
            self.termination,
            self.constants,
        )
        self.points = splice_timeline(self.points, day, new_points)
        logger.info("Regenerated from day %d, %d points in total", day, len(self.points))
        return new_points

    def set_params(self, params: PlantParams) -> None:
        self.params = params

    def set_light_sources(self, lights: Sequence[CustomLightSource]) -> bool:
        """Swap the light configuration and regenerate the future; returns whether it regenerated."""

        self.light_sources = list(lights)
        if self.points and self.current_day < self.simulation_days:
            self.regenerate_from(self.current_day)
            return True
        return False

    def set_day(self, day: int) -> bool:
        """Move the displayed day; returns whether the future had to be regenerated."""

        new_day = min(max(0, day), self.simulation_days)
        regenerated = False
        if crosses_activation_day(self.current_day, new_day, self.light_sources):
            logger.info("Moving to day %d crosses a light activation day", new_day)
            self.regenerate_from(new_day)
            regenerated = True
        self.current_day = new_day
        return regenerated

    def advance(self) -> bool:
        """Play one day forward; returns False once the last day is reached."""

        if self.current_day >= self.simulation_days:
            return False
        if activation_changes_next_day(self.current_day, self.light_sources):
            logger.info("Light activation changes on day %d", self.current_day + 1)
            self.regenerate_from(self.current_day)
        self.current_day += 1
        return self.current_day < self.simulation_days

    def reset(self) -> None:
        self.current_day = 0

    def points_for_day(self, day: int) -> list[GrowthPoint]:
        return [point for point in self.points if point.day == day]

    def visible_points(self) -> list[GrowthPoint]:
        return truncate_after(self.points, self.current_day)

    def growth_rate(self) -> float:
        return observed_growth_rate(self.points, self.current_day)
