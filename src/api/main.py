"""FastAPI app exposing the growth engine to the viewer UI."""

from __future__ import annotations

from random import Random
from typing import Literal, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

from growthsim import (
    ROW_HEADER,
    BranchTermination,
    BranchType,
    CustomLightSource,
    GrowthPoint,
    GrowthSession,
    LightInfluence,
    PlantParams,
    advance_growth_point,
    growth_point_to_dict,
    growth_points_to_rows,
    timeline_to_dict,
)

app = FastAPI(title="Plant Growth Simulator API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

DirectionToken = Literal[
    "+x", "-x", "+y", "-y", "+z", "-z",
    "+x+y", "+x-y", "-x+y", "-x-y",
    "+x+z", "+x-z", "-x+z", "-x-z",
    "+y+z", "+y-z", "-y+z", "-y-z",
]


class PlantParamsPayload(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    microgravity: bool = True
    exaggeration_factor: float = Field(default=0.6, ge=0.0, le=1.0)
    radiation: float = Field(default=0.2, ge=0.0)
    red_blue_ratio: float = Field(default=1.2, gt=0.0)
    light_intensity: float = Field(default=300.0, ge=0.0)
    light_directions: list[DirectionToken] = Field(default_factory=lambda: ["-x"], min_length=1)
    co2: float = 1000.0
    temp: float = 25.0
    humidity: float = 65.0
    stem_count: int = Field(default=5, ge=1, le=50)
    root_count: int = Field(default=8, ge=1, le=50)


class LightSourcePayload(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    id: int
    x: float = 0.0
    y: float = 0.0
    z: float = 5.0
    intensity: float = Field(default=100.0, gt=0.0)
    start_day: int = Field(default=0, ge=0)


class GrowthPointPayload(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    day: int = Field(default=0, ge=0)
    type: BranchType = BranchType.STEM
    branch_id: int = Field(default=0, ge=0)
    light_influence: Optional[str] = None


class ResetRequest(BaseModel):
    params: PlantParamsPayload | None = None
    light_sources: list[LightSourcePayload] = Field(default_factory=list)
    simulation_days: int = Field(default=30, ge=0, le=365)
    seed: Optional[int] = None
    termination: BranchTermination = BranchTermination.CONTINUE


class GenerateRequest(BaseModel):
    days: int = Field(default=30, ge=0, le=365)
    params: PlantParamsPayload | None = None
    light_sources: list[LightSourcePayload] | None = None


class StepRequest(BaseModel):
    point: GrowthPointPayload
    params: PlantParamsPayload = Field(default_factory=PlantParamsPayload)
    light_sources: list[LightSourcePayload] = Field(default_factory=list)
    day: Optional[int] = Field(default=None, ge=0)
    seed: Optional[int] = None


class RegenerateRequest(BaseModel):
    start_day: int = Field(ge=0)


class LightsUpdateRequest(BaseModel):
    light_sources: list[LightSourcePayload]


class DayRequest(BaseModel):
    day: int = Field(ge=0)


def _to_params(payload: PlantParamsPayload) -> PlantParams:
    return PlantParams(
        microgravity=payload.microgravity,
        exaggeration_factor=payload.exaggeration_factor,
        radiation=payload.radiation,
        red_blue_ratio=payload.red_blue_ratio,
        light_intensity=payload.light_intensity,
        light_directions=tuple(payload.light_directions),
        co2=payload.co2,
        temp=payload.temp,
        humidity=payload.humidity,
        stem_count=payload.stem_count,
        root_count=payload.root_count,
    )


def _to_lights(payloads: list[LightSourcePayload]) -> list[CustomLightSource]:
    ids = [payload.id for payload in payloads]
    if len(set(ids)) != len(ids):
        raise HTTPException(status_code=422, detail="Light source ids must be unique")
    return [
        CustomLightSource(
            id=payload.id,
            x=payload.x,
            y=payload.y,
            z=payload.z,
            intensity=payload.intensity,
            start_day=payload.start_day,
        )
        for payload in payloads
    ]


def _to_point(payload: GrowthPointPayload) -> GrowthPoint:
    try:
        influence = LightInfluence.from_tag(payload.light_influence) if payload.light_influence else None
    except ValueError as error:
        raise HTTPException(status_code=422, detail=str(error)) from error
    return GrowthPoint(
        x=payload.x,
        y=payload.y,
        z=payload.z,
        day=payload.day,
        type=payload.type,
        branch_id=payload.branch_id,
        light_influence=influence,
    )


def _build_session(request: ResetRequest | None) -> GrowthSession:
    request = request or ResetRequest()
    params = _to_params(request.params or PlantParamsPayload())
    rng = Random(request.seed) if request.seed is not None else None
    session = GrowthSession(
        params=params,
        light_sources=_to_lights(request.light_sources),
        simulation_days=request.simulation_days,
        rng=rng,
        termination=request.termination,
    )
    session.generate()
    return session


def _session_state() -> dict[str, object]:
    return timeline_to_dict(
        CURRENT_SESSION.points,
        CURRENT_SESSION.params,
        CURRENT_SESSION.light_sources,
        CURRENT_SESSION.current_day,
        CURRENT_SESSION.simulation_days,
    )


CURRENT_SESSION = _build_session(None)


@app.get("/state")
def get_state() -> dict[str, object]:
    return {"timeline": _session_state(), "growth_rate": CURRENT_SESSION.growth_rate()}


@app.post("/reset")
def reset_session(request: ResetRequest | None = None) -> dict[str, object]:
    global CURRENT_SESSION
    CURRENT_SESSION = _build_session(request)
    return {"timeline": _session_state()}


@app.post("/generate")
def generate(request: GenerateRequest) -> dict[str, object]:
    if request.params is not None:
        CURRENT_SESSION.set_params(_to_params(request.params))
    if request.light_sources is not None:
        CURRENT_SESSION.light_sources = _to_lights(request.light_sources)
    CURRENT_SESSION.simulation_days = request.days
    CURRENT_SESSION.generate()
    return {"timeline": _session_state()}


@app.post("/step")
def step(request: StepRequest) -> dict[str, object]:
    rng = Random(request.seed) if request.seed is not None else None
    outcome = advance_growth_point(
        _to_point(request.point),
        _to_params(request.params),
        _to_lights(request.light_sources),
        request.day,
        rng,
    )
    return {
        "point": growth_point_to_dict(outcome.point),
        "status": outcome.status.value,
        "reason": outcome.reason,
    }


@app.post("/regenerate")
def regenerate(request: RegenerateRequest) -> dict[str, object]:
    if not CURRENT_SESSION.points_for_day(request.start_day):
        raise HTTPException(status_code=404, detail="No growth points on that day")
    new_points = CURRENT_SESSION.regenerate_from(request.start_day)
    return {
        "new_points": [growth_point_to_dict(point) for point in new_points],
        "timeline": _session_state(),
    }


@app.post("/lights")
def update_lights(request: LightsUpdateRequest) -> dict[str, object]:
    regenerated = CURRENT_SESSION.set_light_sources(_to_lights(request.light_sources))
    return {"regenerated": regenerated, "timeline": _session_state()}


@app.post("/day")
def change_day(request: DayRequest) -> dict[str, object]:
    regenerated = CURRENT_SESSION.set_day(request.day)
    return {
        "regenerated": regenerated,
        "current_day": CURRENT_SESSION.current_day,
        "visible_points": [growth_point_to_dict(point) for point in CURRENT_SESSION.visible_points()],
    }


@app.post("/advance")
def advance() -> dict[str, object]:
    playing = CURRENT_SESSION.advance()
    return {
        "playing": playing,
        "current_day": CURRENT_SESSION.current_day,
        "day_points": [growth_point_to_dict(point) for point in CURRENT_SESSION.points_for_day(CURRENT_SESSION.current_day)],
    }


@app.get("/export")
def export_rows() -> dict[str, object]:
    return {"header": list(ROW_HEADER), "rows": growth_points_to_rows(CURRENT_SESSION.points)}
