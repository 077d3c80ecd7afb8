"""Corridor buffer request/response schemas."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.domain import Direction


class BufferRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)
    road_name: str = Field(..., alias="roadName", description="Road to follow, matched phonetically.")
    threshold_distance: float = Field(
        ..., alias="thresholdDistance", description="Length in meters of each corridor half."
    )
    query_multiplier: Optional[float] = Field(
        default=None,
        alias="queryMultiplier",
        description="Base half-width in degrees of the start search box, in (0, 1].",
    )
    build_upstream: bool = Field(
        default=False,
        alias="buildUpstream",
        description="Walk against the road's flow instead of along it.",
    )
    direction: Direction = Field(
        default=Direction.BOTH,
        description="Compass side to keep; BOTH keeps both halves.",
    )

    @field_validator("direction", mode="before")
    @classmethod
    def _parse_direction(cls, value: object) -> Direction:
        if value is not None and not isinstance(value, (str, Direction)):
            raise ValueError("direction must be a compass direction name")
        return Direction.parse(value)


class LineStringGeometry(BaseModel):
    type: Literal["LineString"] = "LineString"
    coordinates: List[List[float]]


class BufferFeatureModel(BaseModel):
    type: Literal["Feature"] = "Feature"
    geometry: LineStringGeometry
    properties: dict = Field(default_factory=dict)


class BufferResponse(BaseModel):
    type: Literal["FeatureCollection"] = "FeatureCollection"
    copyrights: List[str] = Field(default_factory=list)
    features: List[BufferFeatureModel]
    took_ms: float = 0.0
