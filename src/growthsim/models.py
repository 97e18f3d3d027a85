"""Core data primitives for stem and root growth paths."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple

Vector3 = Tuple[float, float, float]

CUSTOM_LIGHT_PREFIX = "custom:"

AXIS_DIRECTIONS: tuple[str, ...] = ("+x", "-x", "+y", "-y", "+z", "-z")

COMBINED_DIRECTIONS: tuple[str, ...] = (
    "+x+y",
    "+x-y",
    "-x+y",
    "-x-y",
    "+x+z",
    "+x-z",
    "-x+z",
    "-x-z",
    "+y+z",
    "+y-z",
    "-y+z",
    "-y-z",
)

LIGHT_DIRECTIONS: tuple[str, ...] = AXIS_DIRECTIONS + COMBINED_DIRECTIONS


class BranchType(str, Enum):
    STEM = "stem"
    ROOT = "root"


def parse_direction(token: str) -> tuple[tuple[str, int], ...]:
    """Split a direction token such as ``"+x-z"`` into ``(("x", 1), ("z", -1))``."""

    if token not in LIGHT_DIRECTIONS:
        raise ValueError(f"Unknown light direction: {token!r}")
    return tuple(
        (token[index + 1], 1 if token[index] == "+" else -1)
        for index in range(0, len(token), 2)
    )


@dataclass(frozen=True)
class PlantParams:
    """Environment and layout parameters for one generation run."""

    microgravity: bool = True
    exaggeration_factor: float = 0.6
    radiation: float = 0.2
    red_blue_ratio: float = 1.2
    light_intensity: float = 300.0
    light_directions: tuple[str, ...] = ("-x",)
    co2: float = 1000.0
    temp: float = 25.0
    humidity: float = 65.0
    stem_count: int = 5
    root_count: int = 8

    def branch_count(self, branch_type: BranchType) -> int:
        if branch_type is BranchType.STEM:
            return self.stem_count
        return self.root_count


DEFAULT_PARAMS = PlantParams()


@dataclass(frozen=True)
class CustomLightSource:
    """Point light that starts shining on ``start_day``."""

    id: int
    x: float
    y: float
    z: float
    intensity: float = 100.0
    start_day: int = 0

    @property
    def position(self) -> Vector3:
        return (self.x, self.y, self.z)

    def is_active(self, day: int) -> bool:
        return day >= self.start_day


@dataclass(frozen=True)
class LightInfluence:
    """Light a branch was bound to at creation: a direction token or a custom light id."""

    direction: Optional[str] = None
    custom_light_id: Optional[int] = None

    def __post_init__(self) -> None:
        if (self.direction is None) == (self.custom_light_id is None):
            raise ValueError("LightInfluence needs exactly one of direction or custom_light_id")
        if self.direction is not None:
            parse_direction(self.direction)

    @property
    def is_custom(self) -> bool:
        return self.custom_light_id is not None

    @property
    def tag(self) -> str:
        if self.custom_light_id is not None:
            return f"{CUSTOM_LIGHT_PREFIX}{self.custom_light_id}"
        return self.direction or ""

    @classmethod
    def from_tag(cls, tag: str) -> "LightInfluence":
        if tag.startswith(CUSTOM_LIGHT_PREFIX):
            return cls(custom_light_id=int(tag[len(CUSTOM_LIGHT_PREFIX):]))
        return cls(direction=tag)


@dataclass(frozen=True)
class GrowthPoint:
    """One day of one branch."""

    x: float
    y: float
    z: float
    day: int
    type: BranchType
    branch_id: int
    light_influence: Optional[LightInfluence] = field(default=None)

    @property
    def position(self) -> Vector3:
        return (self.x, self.y, self.z)

    @property
    def key(self) -> tuple[BranchType, int]:
        return (self.type, self.branch_id)

    def moved_to(self, position: Vector3, day: int) -> "GrowthPoint":
        return replace(self, x=position[0], y=position[1], z=position[2], day=day)
