"""Corridor buffer endpoints."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Response, status
from pydantic import ValidationError

from ...schemas.buffer import BufferRequest, BufferResponse
from ...services.buffer import service as buffer_service
from ...services.buffer.errors import (
    CorridorError,
    DeadEnd,
    DegenerateGeometry,
    InvalidParameter,
    NoMatchingRoad,
)

router = APIRouter(prefix="/buffer", tags=["buffer"])

logger = logging.getLogger(__name__)

_ERROR_STATUS = (
    (InvalidParameter, status.HTTP_400_BAD_REQUEST),
    (NoMatchingRoad, status.HTTP_404_NOT_FOUND),
    (DeadEnd, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (DegenerateGeometry, status.HTTP_422_UNPROCESSABLE_ENTITY),
)


def _parse_point(point: str) -> tuple[float, float]:
    try:
        lat_text, lon_text = point.split(",")
        return float(lat_text), float(lon_text)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Point '{point}' must be formatted as 'lat,lon'.",
        ) from exc


def _run(payload: BufferRequest, response: Response) -> BufferResponse:
    try:
        result = buffer_service.build_buffer(payload)
    except CorridorError as exc:
        for error_type, status_code in _ERROR_STATUS:
            if isinstance(exc, error_type):
                raise HTTPException(status_code=status_code, detail=str(exc)) from exc
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error building corridor buffer: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to build corridor buffer: {str(exc)}",
        ) from exc
    response.headers["X-Took"] = f"{result.took_ms:.0f}"
    return result


@router.get("", response_model=BufferResponse, status_code=status.HTTP_200_OK)
def get_buffer(
    response: Response,
    point: str = Query(..., description="Start point as 'lat,lon'"),
    road_name: str = Query(..., alias="roadName"),
    threshold_distance: float = Query(..., alias="thresholdDistance"),
    query_multiplier: Optional[float] = Query(default=None, alias="queryMultiplier"),
    build_upstream: bool = Query(default=False, alias="buildUpstream"),
    direction: str = Query(default="BOTH"),
) -> BufferResponse:
    lat, lon = _parse_point(point)
    try:
        payload = BufferRequest(
            latitude=lat,
            longitude=lon,
            road_name=road_name,
            threshold_distance=threshold_distance,
            query_multiplier=query_multiplier,
            build_upstream=build_upstream,
            direction=direction,
        )
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _run(payload, response)


@router.post("", response_model=BufferResponse, status_code=status.HTTP_200_OK)
def post_buffer(payload: BufferRequest, response: Response) -> BufferResponse:
    return _run(payload, response)
