"""Route plotting request/response schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class PlotRequest(BaseModel):
    start: str = Field(..., description="Starting point address.")
    end: str = Field(..., description="Destination address.")
    avoid: List[str] = Field(
        default_factory=list,
        description="Places to steer around. Blank entries are ignored.",
    )
    clearance_meters: Optional[float] = Field(
        default=None,
        ge=0,
        description="Detour distance per avoid-point. Defaults to the configured clearance.",
    )


class PointModel(BaseModel):
    lat: float
    lon: float


class ZoneModel(BaseModel):
    index: int
    label: str
    center: PointModel
    radius_m: float
    detour: PointModel


class SummaryModel(BaseModel):
    travel_time_min: int
    travel_time_text: str
    peace_of_mind: str
    distance_km: float


class PlotResponse(BaseModel):
    start: PointModel
    end: PointModel
    waypoints: List[PointModel]
    zones: List[ZoneModel]
    geometry: dict
    duration_s: float
    distance_m: float
    dropped_avoids: List[str]
    zones_crossed: List[int]
    summary: SummaryModel
    overlays: dict
